from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable


class SeenStore(ABC):
    @abstractmethod
    def is_empty(self) -> bool:
        """Return True until the first bundle id has been recorded."""

    @abstractmethod
    def has_seen(self, bundle_id: int) -> bool:
        """Return True if the bundle id was recorded before."""

    @abstractmethod
    def mark_seen(self, bundle_ids: Iterable[int]) -> None:
        """Record bundle ids; recording an id twice is a no-op."""

    @abstractmethod
    def __len__(self) -> int:
        """Number of distinct ids recorded."""
