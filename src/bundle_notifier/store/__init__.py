"""Seen-bundle store implementations."""

from .base import SeenStore
from .memory_store import MemorySeenStore

__all__ = ["MemorySeenStore", "SeenStore"]
