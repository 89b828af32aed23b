"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Backend API runtime settings and explicit config loading.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from .types import DuplicateMode

DEFAULT_HEADERS: dict[str, str] = {
    "content-type": "application/x-www-form-urlencoded",
}


def _env_first(*names: str, default: str | None = None) -> str | None:
    """Return the first non-empty environment variable in `names`."""
    for name in names:
        raw = os.getenv(name)
        if raw is None:
            continue
        value = raw.strip()
        if value:
            return value
    return default


def _env_float(name: str, default: float | None) -> float | None:
    raw = _env_first(name)
    if raw is None:
        return default
    if raw.lower() in ("none", "off"):
        return None
    return float(raw)


@dataclass(frozen=True, slots=True)
class BackendApiSettings:
    """Explicit settings used by the orchestrator, transports and caches."""

    loading_message: str = ""
    fail_message: str = "System busy"

    # Fixed application status codes, kept apart from HTTP and business codes.
    http_fail_status: int = 10000
    http_fail_message: str = "Request timed out, please retry"
    api_fail_status: int = 20000
    api_fail_message: str = "Request failed, please retry"

    duplicate_mode: DuplicateMode = "pending"
    timeout_s: float | None = 30.0
    default_headers: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_HEADERS))

    cache_backend: str = "inmemory"
    cache_prefix: str = "backend-api-cache"
    redis_url: str | None = None

    def __post_init__(self) -> None:
        if self.duplicate_mode not in ("pending", "sentinel"):
            raise ValueError(f"Unknown duplicate_mode: {self.duplicate_mode}")
        if self.http_fail_status == self.api_fail_status:
            raise ValueError("http_fail_status and api_fail_status must differ")

    @staticmethod
    def from_env() -> BackendApiSettings:
        """Load settings from `BACKEND_API_*` environment variables."""
        content_type = _env_first(
            "BACKEND_API_CONTENT_TYPE",
            default=DEFAULT_HEADERS["content-type"],
        )
        redis_url = _env_first("BACKEND_API_REDIS_URL")
        if redis_url is None:
            host = _env_first("BACKEND_API_REDIS_HOST")
            if host:
                port = _env_first("BACKEND_API_REDIS_PORT", default="6379")
                db = _env_first("BACKEND_API_REDIS_DB", default="0")
                password = _env_first("BACKEND_API_REDIS_PASSWORD", default="")
                if password:
                    redis_url = f"redis://:{password}@{host}:{port}/{db}"
                else:
                    redis_url = f"redis://{host}:{port}/{db}"

        return BackendApiSettings(
            loading_message=os.getenv("BACKEND_API_LOADING_MESSAGE", ""),
            fail_message=_env_first("BACKEND_API_FAIL_MESSAGE", default="System busy")
            or "System busy",
            http_fail_status=int(_env_first("BACKEND_API_HTTP_FAIL_STATUS", default="10000") or "10000"),
            http_fail_message=_env_first(
                "BACKEND_API_HTTP_FAIL_MESSAGE",
                default="Request timed out, please retry",
            )
            or "Request timed out, please retry",
            api_fail_status=int(_env_first("BACKEND_API_API_FAIL_STATUS", default="20000") or "20000"),
            api_fail_message=_env_first(
                "BACKEND_API_API_FAIL_MESSAGE",
                default="Request failed, please retry",
            )
            or "Request failed, please retry",
            duplicate_mode=(
                _env_first("BACKEND_API_DUPLICATE_MODE", default="pending") or "pending"
            ).lower(),  # type: ignore[arg-type]
            timeout_s=_env_float("BACKEND_API_TIMEOUT_S", 30.0),
            default_headers={"content-type": content_type or DEFAULT_HEADERS["content-type"]},
            cache_backend=(
                _env_first("BACKEND_API_CACHE_BACKEND", default="inmemory") or "inmemory"
            ).lower(),
            cache_prefix=_env_first("BACKEND_API_CACHE_PREFIX", default="backend-api-cache")
            or "backend-api-cache",
            redis_url=redis_url,
        )
