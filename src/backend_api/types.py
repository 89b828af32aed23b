"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

This module defines the request, option and result types shared by the
orchestrator, the transports and the cache backends.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any, Literal, TypeAlias

JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]
JSONObject: TypeAlias = dict[str, JSONValue]

HTTPMethod = Literal["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
HTTP_METHODS: frozenset[str] = frozenset(
    ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")
)

DuplicateMode = Literal["pending", "sentinel"]


@dataclass(frozen=True, slots=True)
class RequestOptions:
    """
    Per-call orchestration options.

    Attributes:
        show_visibility: Hold the shared loading indicator open while in flight.
        visibility_mask: Ask the indicator to block interaction while shown.
        suppress_duplicates: Drop this call if an identical one is in flight.
        cache_ttl_ms: Cache a successful result for this long; `None` disables.
        show_error_toast: Show a toast when the call fails.
        error_toast_duration_ms: Toast duration; `None` uses the notifier default.
    """

    show_visibility: bool = True
    visibility_mask: bool = False
    suppress_duplicates: bool = False
    cache_ttl_ms: int | None = None
    show_error_toast: bool = True
    error_toast_duration_ms: int | None = None

    def __post_init__(self) -> None:
        if self.cache_ttl_ms is not None:
            if isinstance(self.cache_ttl_ms, bool) or not isinstance(self.cache_ttl_ms, int):
                raise ValueError("cache_ttl_ms must be an integer")
            if self.cache_ttl_ms < 0:
                raise ValueError("cache_ttl_ms must be >= 0")
        if self.error_toast_duration_ms is not None and self.error_toast_duration_ms < 0:
            raise ValueError("error_toast_duration_ms must be >= 0")

    @classmethod
    def field_names(cls) -> frozenset[str]:
        """Return the accepted option names."""
        return frozenset(f.name for f in fields(cls))

    def merged(self, overrides: Mapping[str, Any] | None) -> RequestOptions:
        """Return a copy with `overrides` applied on top of this instance."""
        if not overrides:
            return self
        unknown = set(overrides) - self.field_names()
        if unknown:
            raise ValueError(f"Unknown request options: {', '.join(sorted(unknown))}")
        row = {f.name: getattr(self, f.name) for f in fields(self)}
        row.update(overrides)
        return RequestOptions(**row)


@dataclass(frozen=True, slots=True)
class LogicalRequest:
    """
    One resolved call attempt.

    `target` is the canonical URL captured before any transport rewriting
    (query-string expansion and the like). It is an input to the request
    fingerprint and must stay stable for the lifetime of the call.
    """

    method: str
    target: str
    payload: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)
    options: RequestOptions = field(default_factory=RequestOptions)
    name: str | None = None

    def to_transport(self, *, timeout_s: float | None = None) -> TransportRequest:
        """Build the transport-facing request parameters."""
        return TransportRequest(
            method=self.method,
            url=self.target,
            payload=self.payload,
            headers=dict(self.headers),
            timeout_s=timeout_s,
        )


@dataclass(slots=True)
class TransportRequest:
    """Assembled parameters handed to a transport; transports may rewrite `url`."""

    method: str
    url: str
    payload: Any = None
    headers: dict[str, str] = field(default_factory=dict)
    timeout_s: float | None = None


@dataclass(slots=True)
class RequestResult:
    """
    Raw outcome of one call.

    A completed transport call carries `status_code`, `headers` and `data`
    (the decoded body). A call that could not be invoked carries only
    `err_msg`. Failure classification rewrites `data` to the uniform
    ``{"status", "statusInfo": {"message", "detail"}}`` shape.
    """

    status_code: int | None = None
    headers: dict[str, str] = field(default_factory=dict)
    data: Any = None
    err_msg: str | None = None

    def to_row(self) -> dict[str, Any]:
        """Serialize into a JSON-friendly mapping."""
        return {
            "status_code": self.status_code,
            "headers": dict(self.headers),
            "data": self.data,
            "err_msg": self.err_msg,
        }

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> RequestResult:
        """Rebuild a result from `to_row` output."""
        headers = row.get("headers")
        return cls(
            status_code=row.get("status_code"),
            headers=dict(headers) if isinstance(headers, Mapping) else {},
            data=row.get("data"),
            err_msg=row.get("err_msg"),
        )


class Suppressed:
    """Sentinel returned for a dropped duplicate call in ``sentinel`` mode."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "SUPPRESSED"

    def __bool__(self) -> bool:
        return False


SUPPRESSED = Suppressed()

SendResult: TypeAlias = tuple[Any, RequestResult]
