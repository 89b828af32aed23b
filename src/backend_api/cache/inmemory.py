"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/inmemory.py.
"""

from __future__ import annotations

import copy
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from .base import CacheEntry, ResponseCacheBackend
from ..types import RequestResult


@dataclass(slots=True)
class InMemoryResponseCache(ResponseCacheBackend):
    """Process-local cache backend; rows are lost on restart."""

    backend_id: str = "inmemory"
    clock: Callable[[], float] = field(default=time.time)
    _rows: dict[str, CacheEntry] = field(default_factory=dict, init=False, repr=False)

    def _fresh(self, key: str) -> CacheEntry | None:
        row = self._rows.get(key)
        if row is None:
            return None
        if row.is_expired(self.clock()):
            self._rows.pop(key, None)
            return None
        return row

    async def get(self, key: str) -> RequestResult | None:
        row = self._fresh(key)
        if row is None:
            return None
        # Callers may mutate results (failure rewrites, hooks); keep the row intact.
        return copy.deepcopy(row.value)

    async def has(self, key: str) -> bool:
        return self._fresh(key) is not None

    async def set(self, key: str, value: RequestResult, *, ttl_ms: int) -> bool:
        if ttl_ms < 0:
            raise ValueError("ttl_ms must be >= 0")
        if self._fresh(key) is not None:
            return False
        self._rows[key] = CacheEntry(
            value=copy.deepcopy(value),
            expires_at_s=self.clock() + ttl_ms / 1000.0,
        )
        return True

    async def delete(self, key: str) -> None:
        self._rows.pop(key, None)

    def __len__(self) -> int:
        return len(self._rows)
