from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from bundle_notifier.models import BundleItem


class UpstreamError(RuntimeError):
    """Raised when the catalog API cannot answer a request."""

    def summary(self) -> str:
        """Short user-facing description without URLs or library messages."""
        return "the catalog request failed"


class TransportError(UpstreamError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    def summary(self) -> str:
        if self.status_code is None:
            return "network error while contacting the catalog"
        return f"the catalog returned status {self.status_code}"


class UpstreamDataError(UpstreamError):
    """Raised when the catalog API returns a body we cannot interpret."""

    def summary(self) -> str:
        return "the catalog returned an unexpected response"


class NotFound(UpstreamError, LookupError):
    def __init__(self, bundle_id: object) -> None:
        super().__init__(f"No bundle found with id {bundle_id}")
        self.bundle_id = bundle_id


class CatalogGateway(ABC):
    @abstractmethod
    def list_recent(self) -> list[BundleItem]:
        """Return the most recently published bundles, newest first."""

    @abstractmethod
    def get_detail(self, bundle_id: int | str) -> BundleItem:
        """Return full details for one bundle or raise NotFound."""

    @abstractmethod
    def get_thumbnails(self, bundle_ids: Iterable[int]) -> dict[int, str]:
        """Resolve thumbnail URLs; ids that fail to resolve are left out."""
