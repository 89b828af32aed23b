"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Factory helpers for selecting response cache backends from settings.
"""

from __future__ import annotations

from typing import Any

from ..errors import CacheError
from ..settings import BackendApiSettings
from .base import ResponseCacheBackend
from .inmemory import InMemoryResponseCache


def create_response_cache(
    settings: BackendApiSettings | None = None,
    *,
    redis_client: Any | None = None,
) -> ResponseCacheBackend:
    """
    Create a response cache backend from settings.

    Backends:
    - `inmemory` (default)
    - `redis`

    Redis resolution uses the provided `redis_client` when supplied, otherwise
    builds a client from `settings.redis_url` (``redis://localhost:6379/0``
    when unset).
    """
    settings = settings or BackendApiSettings()
    backend = settings.cache_backend.strip().lower()

    if backend in ("mem", "memory", "inmemory", "in_memory"):
        return InMemoryResponseCache()

    if backend == "redis":
        from .redis import RedisResponseCache

        client = redis_client
        if client is None:
            try:
                import redis.asyncio as redis
            except ModuleNotFoundError as exc:  # pragma: no cover
                raise CacheError(
                    "Redis cache backend requires `redis` to be installed."
                ) from exc
            client = redis.Redis.from_url(settings.redis_url or "redis://localhost:6379/0")
        return RedisResponseCache(client, prefix=settings.cache_prefix)

    raise CacheError(f"Unknown response cache backend '{settings.cache_backend}'")
