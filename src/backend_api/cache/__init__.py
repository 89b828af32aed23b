"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/__init__.py.
"""

from .base import CacheEntry, ResponseCacheBackend
from .factory import create_response_cache
from .inmemory import InMemoryResponseCache
from .redis import RedisResponseCache

__all__ = [
    "CacheEntry",
    "ResponseCacheBackend",
    "InMemoryResponseCache",
    "RedisResponseCache",
    "create_response_cache",
]
