"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/base.py.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from ..types import RequestResult


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """One cached call result with its absolute expiry (epoch seconds)."""
    value: RequestResult
    expires_at_s: float

    def is_expired(self, now_s: float) -> bool:
        return self.expires_at_s <= now_s


class ResponseCacheBackend(Protocol):
    """
    Protocol implemented by response cache backends.

    Reads past the entry TTL behave as absent and evict the stale row.
    `set` is first-writer-wins: it is a no-op while a fresh entry exists.
    """
    backend_id: str

    async def get(self, key: str) -> RequestResult | None: ...

    async def has(self, key: str) -> bool: ...

    async def set(self, key: str, value: RequestResult, *, ttl_ms: int) -> bool: ...

    async def delete(self, key: str) -> None: ...
