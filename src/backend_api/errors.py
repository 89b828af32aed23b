"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Error taxonomy for backend API calls.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .types import LogicalRequest, RequestResult


class BackendApiError(RuntimeError):
    """Base error for all backend API failures."""


class EndpointConfigError(BackendApiError):
    """Raised when an endpoint registration is invalid."""


class CacheError(BackendApiError):
    """Raised when cache backend resolution fails."""


class TransportCallError(BackendApiError):
    """
    Raised by a transport when the call could not be invoked at all.

    Examples are a malformed URL or a connection that never produced a
    response. `err_msg` is the transport's diagnostic message.
    """

    def __init__(self, err_msg: str) -> None:
        super().__init__(err_msg)
        self.err_msg = err_msg


class RequestFailure(BackendApiError):
    """
    Uniform rejection raised for every non-successful call outcome.

    Attributes:
        status: Application status code (fixed code or embedded business code).
        status_info: ``{"message": ..., "detail": ...}`` mapping.
        result: Raw call result; ``result.data`` holds the uniform error shape.
        request: Logical request that produced the failure.
    """

    def __init__(
        self,
        *,
        status: Any,
        status_info: dict[str, Any],
        result: RequestResult,
        request: LogicalRequest | None = None,
    ) -> None:
        message = status_info.get("message") if isinstance(status_info, dict) else None
        super().__init__(f"{message or 'Request failed'} (status={status})")
        self.status = status
        self.status_info = status_info
        self.result = result
        self.request = request

    @property
    def message(self) -> str | None:
        """User-facing message carried in `status_info`, if any."""
        if isinstance(self.status_info, dict):
            value = self.status_info.get("message")
            return value if isinstance(value, str) else None
        return None

    @property
    def detail(self) -> Any:
        """Diagnostic detail carried in `status_info`, if any."""
        if isinstance(self.status_info, dict):
            return self.status_info.get("detail")
        return None


class CallSetupFailure(RequestFailure):
    """The transport could not be invoked (malformed request, no response)."""


class TransportFailure(RequestFailure):
    """The transport completed with a non-success HTTP status code."""


class BusinessFailure(RequestFailure):
    """HTTP succeeded but the embedded application status signals failure."""
