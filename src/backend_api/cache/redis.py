"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/redis.py.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from typing import Any

from .base import ResponseCacheBackend
from ..types import RequestResult

logger = logging.getLogger("backend_api.cache")


class RedisResponseCache(ResponseCacheBackend):
    """
    Redis-backed cache backend; rows survive process restarts.

    Rows are JSON documents holding the serialized result and its absolute
    expiry. Redis expires keys on its own (``PX``); the expiry stored in the
    row is checked again on read so a stale row is never served.

    Requires ``redis.asyncio`` (``pip install redis``).
    """

    backend_id: str = "redis"

    def __init__(
        self,
        redis_client: Any,
        *,
        prefix: str = "backend-api-cache",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._redis = redis_client
        self._prefix = prefix
        self._clock = clock

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}"

    async def get(self, key: str) -> RequestResult | None:
        blob = await self._redis.get(self._key(key))
        if blob is None:
            return None
        if isinstance(blob, bytes):
            blob = blob.decode("utf-8")
        try:
            row = json.loads(blob)
        except ValueError:
            logger.warning("Dropping unreadable cache row for key %s", key)
            await self.delete(key)
            return None

        expires_at_s = row.get("expires_at_s") if isinstance(row, dict) else None
        value = row.get("value") if isinstance(row, dict) else None
        if not isinstance(expires_at_s, (int, float)) or not isinstance(value, dict):
            await self.delete(key)
            return None
        if expires_at_s <= self._clock():
            await self.delete(key)
            return None
        return RequestResult.from_row(value)

    async def has(self, key: str) -> bool:
        return await self.get(key) is not None

    async def set(self, key: str, value: RequestResult, *, ttl_ms: int) -> bool:
        if ttl_ms < 0:
            raise ValueError("ttl_ms must be >= 0")
        if ttl_ms == 0:
            # Already expired; Redis rejects a zero PX.
            return False
        payload = {
            "value": value.to_row(),
            "expires_at_s": self._clock() + ttl_ms / 1000.0,
        }
        try:
            blob = json.dumps(payload, ensure_ascii=True)
        except (TypeError, ValueError) as error:
            logger.warning("Skipping cache write for key %s: %s", key, error)
            return False
        stored = await self._redis.set(self._key(key), blob, px=int(ttl_ms), nx=True)
        return bool(stored)

    async def delete(self, key: str) -> None:
        await self._redis.delete(self._key(key))
