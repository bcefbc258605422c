from __future__ import annotations

from typing import Iterable

from .base import SeenStore


class MemorySeenStore(SeenStore):
    """Keeps seen ids for the lifetime of the process only."""

    def __init__(self) -> None:
        self._ids: set[int] = set()

    def is_empty(self) -> bool:
        return not self._ids

    def has_seen(self, bundle_id: int) -> bool:
        return bundle_id in self._ids

    def mark_seen(self, bundle_ids: Iterable[int]) -> None:
        self._ids.update(bundle_ids)

    def snapshot(self) -> frozenset[int]:
        return frozenset(self._ids)

    def __len__(self) -> int:
        return len(self._ids)
