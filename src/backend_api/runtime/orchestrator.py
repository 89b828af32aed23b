"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/orchestrator.py.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from ..cache.base import ResponseCacheBackend
from ..cache.inmemory import InMemoryResponseCache
from ..endpoints import EndpointRegistry
from ..errors import BackendApiError, RequestFailure, TransportCallError
from ..fingerprint import FingerprintHasher
from ..settings import BackendApiSettings
from ..transport.contracts import Transport
from ..types import SUPPRESSED, LogicalRequest, RequestResult, SendResult, Suppressed
from ..ui.contracts import LoadingIndicator, Notifier
from ..ui.headless import LoggingIndicator, LoggingNotifier
from .classifier import OutcomeClassifier
from .contracts import OrchestratorHooks, maybe_await
from .inflight import InFlightRegistry
from .visibility import VisibilitySignal

logger = logging.getLogger("backend_api.runtime")


class RequestOrchestrator:
    """
    Send named backend calls with dedup, caching, loading state and uniform errors.

    Each instance owns its in-flight registry, visibility state and cache
    handle. All methods must run on one event loop; the only suspension
    points are the cache backend and the transport.
    """

    def __init__(
        self,
        *,
        transport: Transport,
        endpoints: EndpointRegistry | None = None,
        settings: BackendApiSettings | None = None,
        cache: ResponseCacheBackend | None = None,
        indicator: LoadingIndicator | None = None,
        notifier: Notifier | None = None,
        hooks: OrchestratorHooks | None = None,
        classifier: OutcomeClassifier | None = None,
        hasher: FingerprintHasher | None = None,
    ) -> None:
        self.settings = settings or BackendApiSettings()
        self._transport = transport
        self._endpoints = endpoints or EndpointRegistry(
            default_headers=self.settings.default_headers,
        )
        self._cache = cache if cache is not None else InMemoryResponseCache()
        self._notifier = notifier or LoggingNotifier()
        self._hooks = hooks or OrchestratorHooks()
        self._classifier = classifier or OutcomeClassifier(self.settings)
        self._hasher = hasher or FingerprintHasher()

        self._registry = InFlightRegistry()
        self._visibility = VisibilitySignal(
            indicator or LoggingIndicator(),
            message=self.settings.loading_message,
        )

    @property
    def endpoints(self) -> EndpointRegistry:
        return self._endpoints

    @property
    def registry(self) -> InFlightRegistry:
        return self._registry

    @property
    def visibility(self) -> VisibilitySignal:
        return self._visibility

    @property
    def cache(self) -> ResponseCacheBackend:
        return self._cache

    def fingerprint(self, request: LogicalRequest) -> str:
        return self._hasher.fingerprint(request.method, request.target, request.payload)

    async def send(
        self,
        name: str | None,
        payload: Any = None,
        *,
        method: str | None = None,
        url: str | None = None,
        headers: Mapping[str, str] | None = None,
        **options: Any,
    ) -> SendResult | Suppressed:
        """
        Resolve and send one named call.

        Returns ``(payload, result)`` on business success and raises a
        `RequestFailure` subclass otherwise. A suppressed duplicate never
        completes (``duplicate_mode="pending"``) or returns `SUPPRESSED`
        (``duplicate_mode="sentinel"``).
        """
        request = self._endpoints.resolve(
            name,
            payload,
            method=method,
            url=url,
            headers=headers,
            **options,
        )
        return await self.dispatch(request)

    def send_sync(self, name: str | None, payload: Any = None, **kwargs: Any) -> SendResult | Suppressed:
        """Synchronous wrapper around `send`."""
        return asyncio.run(self.send(name, payload, **kwargs))

    async def dispatch(self, request: LogicalRequest) -> SendResult | Suppressed:
        """Run one already-resolved request through dedup, cache and transport."""
        fingerprint = self.fingerprint(request)

        if self._hooks.before_send is not None:
            early = await maybe_await(self._hooks.before_send(request))
            if early is not None:
                return early

        if self._is_duplicate(fingerprint, request):
            return await self._suppress(fingerprint, request)

        cached = await self._cache.get(fingerprint)
        if cached is not None:
            logger.debug("Serving cached result for %s %s (%s)", request.method, request.target, fingerprint)
            return self._classifier.extract_payload(cached), cached

        # The cache read may have yielded; check again and register in the same turn.
        if self._is_duplicate(fingerprint, request):
            return await self._suppress(fingerprint, request)

        self._visibility.engage(fingerprint, request)
        self._registry.add(fingerprint, request)
        outcome: RequestResult | TransportCallError
        try:
            outcome = await self._transport.send(
                request.to_transport(timeout_s=self.settings.timeout_s)
            )
        except TransportCallError as error:
            outcome = error
        except Exception as error:
            # Anything else the transport raised still counts as a call that could not be made.
            outcome = TransportCallError(f"{type(error).__name__}: {error}")
            outcome.__cause__ = error
        finally:
            self._registry.remove(fingerprint, request)
            self._visibility.reconcile(self._registry)

        if self._hooks.after_send is not None:
            replaced = await maybe_await(self._hooks.after_send(request, outcome))
            if replaced is not None:
                outcome = replaced

        classified = self._classifier.classify(request, outcome)
        if classified.ok:
            logger.debug(
                "%s %s %r -> %s",
                request.method,
                request.target,
                request.payload,
                classified.result.status_code,
            )
            await self._store(fingerprint, request, classified.result)
            return classified.payload, classified.result

        if classified.error is None:
            raise BackendApiError(f"Unclassified outcome for {request.method} {request.target}")
        raise await self._fail_status(request, classified.error)

    def _is_duplicate(self, fingerprint: str, request: LogicalRequest) -> bool:
        return request.options.suppress_duplicates and self._registry.has(fingerprint)

    async def _suppress(self, fingerprint: str, request: LogicalRequest) -> Suppressed:
        logger.warning(
            "Suppressed duplicate request %s %s (%s); in flight: %r",
            request.method,
            request.target,
            fingerprint,
            self._registry.get(fingerprint),
        )
        if self.settings.duplicate_mode == "sentinel":
            return SUPPRESSED
        # Inert: never resolves, so the duplicate caller's handlers never fire.
        await asyncio.get_running_loop().create_future()
        return SUPPRESSED  # pragma: no cover

    async def _store(self, fingerprint: str, request: LogicalRequest, result: RequestResult) -> None:
        ttl_ms = request.options.cache_ttl_ms
        if ttl_ms is None or ttl_ms < 0:
            return
        # First writer wins within the TTL window.
        if await self._cache.has(fingerprint):
            return
        await self._cache.set(fingerprint, result, ttl_ms=ttl_ms)

    def _fail_message(self, failure: RequestFailure) -> str:
        message = failure.message or self.settings.fail_message
        if failure.status:
            message = f"{message}\n(code: {failure.status})"
        return message

    async def _fail_status(self, request: LogicalRequest, failure: RequestFailure) -> RequestFailure:
        """Common failure funnel: log with context, toast, then the status hook."""
        result = failure.result
        logger.warning(
            "Request failed (%s): %s %s payload=%r status=%s data=%r",
            result.status_code if result.status_code is not None else result.err_msg,
            request.method,
            request.target,
            request.payload,
            failure.status,
            result.data,
        )

        if request.options.show_error_toast:
            try:
                self._notifier.show_toast(
                    self._fail_message(failure),
                    duration_ms=request.options.error_toast_duration_ms,
                )
            except Exception:
                logger.exception("Failed to show error toast for %s %s", request.method, request.target)

        if self._hooks.on_fail_status is not None:
            try:
                await maybe_await(self._hooks.on_fail_status(request, failure))
            except Exception:
                logger.exception(
                    "on_fail_status hook failed for %s %s (status=%s)",
                    request.method,
                    request.target,
                    failure.status,
                )
        return failure

    async def aclose(self) -> None:
        """Close the transport when it exposes `aclose`."""
        close = getattr(self._transport, "aclose", None)
        if callable(close):
            await maybe_await(close())
