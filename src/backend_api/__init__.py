"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Client-side orchestration for named backend calls: duplicate suppression,
short-lived response caching, a shared loading indicator and one error
taxonomy for every failure.
"""

from __future__ import annotations

from .cache import (
    InMemoryResponseCache,
    RedisResponseCache,
    ResponseCacheBackend,
    create_response_cache,
)
from .endpoints import EndpointDescriptor, EndpointRegistry
from .errors import (
    BackendApiError,
    BusinessFailure,
    CacheError,
    CallSetupFailure,
    EndpointConfigError,
    RequestFailure,
    TransportCallError,
    TransportFailure,
)
from .factory import create_backend_api
from .fingerprint import FingerprintHasher
from .runtime import (
    InFlightRegistry,
    OrchestratorHooks,
    Outcome,
    OutcomeClassifier,
    RequestOrchestrator,
    VisibilitySignal,
)
from .settings import BackendApiSettings
from .transport import CallbackTransport, HttpxTransport, Transport
from .types import (
    SUPPRESSED,
    LogicalRequest,
    RequestOptions,
    RequestResult,
    Suppressed,
    TransportRequest,
)
from .ui import LoadingIndicator, LoggingIndicator, LoggingNotifier, Notifier

__all__ = [
    "BackendApiSettings",
    "create_backend_api",
    "RequestOrchestrator",
    "OrchestratorHooks",
    "InFlightRegistry",
    "VisibilitySignal",
    "Outcome",
    "OutcomeClassifier",
    "FingerprintHasher",
    "EndpointRegistry",
    "EndpointDescriptor",
    "ResponseCacheBackend",
    "InMemoryResponseCache",
    "RedisResponseCache",
    "create_response_cache",
    "Transport",
    "CallbackTransport",
    "HttpxTransport",
    "LoadingIndicator",
    "Notifier",
    "LoggingIndicator",
    "LoggingNotifier",
    "LogicalRequest",
    "RequestOptions",
    "RequestResult",
    "TransportRequest",
    "Suppressed",
    "SUPPRESSED",
    "BackendApiError",
    "EndpointConfigError",
    "CacheError",
    "TransportCallError",
    "RequestFailure",
    "CallSetupFailure",
    "TransportFailure",
    "BusinessFailure",
]
