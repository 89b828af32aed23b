"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: factory.py.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .cache.base import ResponseCacheBackend
from .cache.factory import create_response_cache
from .endpoints import EndpointRegistry
from .runtime.classifier import OutcomeClassifier
from .runtime.contracts import OrchestratorHooks
from .runtime.orchestrator import RequestOrchestrator
from .settings import BackendApiSettings
from .transport.contracts import Transport
from .transport.httpx_transport import HttpxTransport
from .ui.contracts import LoadingIndicator, Notifier


def create_backend_api(
    endpoints: EndpointRegistry | Mapping[str, Mapping[str, Any]] | None = None,
    *,
    settings: BackendApiSettings | None = None,
    transport: Transport | None = None,
    cache: ResponseCacheBackend | None = None,
    redis_client: Any | None = None,
    indicator: LoadingIndicator | None = None,
    notifier: Notifier | None = None,
    hooks: OrchestratorHooks | None = None,
    classifier: OutcomeClassifier | None = None,
) -> RequestOrchestrator:
    """
    Assemble a `RequestOrchestrator`.

    `endpoints` may be a ready registry or a ``{name: {"url", "method", ...}}``
    mapping. Missing collaborators fall back to `HttpxTransport`, the cache
    selected by `settings.cache_backend` and the logging UI collaborators.
    """
    settings = settings or BackendApiSettings.from_env()

    if isinstance(endpoints, EndpointRegistry):
        registry = endpoints
    else:
        registry = EndpointRegistry(default_headers=settings.default_headers)
        if endpoints:
            registry.register_many(endpoints)

    if cache is None:
        cache = create_response_cache(settings, redis_client=redis_client)

    return RequestOrchestrator(
        transport=transport or HttpxTransport(timeout_s=settings.timeout_s),
        endpoints=registry,
        settings=settings,
        cache=cache,
        indicator=indicator,
        notifier=notifier,
        hooks=hooks,
        classifier=classifier,
    )
