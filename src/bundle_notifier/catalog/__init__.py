"""Catalog gateway implementations."""

from .base import (
    CatalogGateway,
    NotFound,
    TransportError,
    UpstreamDataError,
    UpstreamError,
)
from .roblox import RobloxCatalogClient

__all__ = [
    "CatalogGateway",
    "NotFound",
    "RobloxCatalogClient",
    "TransportError",
    "UpstreamDataError",
    "UpstreamError",
]
