"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Adapter for callback-style transports.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from threading import Lock

from ..errors import TransportCallError
from ..types import RequestResult, TransportRequest
from .contracts import Transport

logger = logging.getLogger("backend_api.transport")

SuccessCallback = Callable[[RequestResult], None]
FailCallback = Callable[[str], None]
CallbackRequestFn = Callable[[TransportRequest, SuccessCallback, FailCallback], None]


class CallbackTransport(Transport):
    """
    Bridge a ``fn(request, success, fail)`` function into an awaitable transport.

    `fn` must eventually invoke exactly one of `success(result)` or
    `fail(err_msg)`. Callbacks may fire from any thread. Only the first
    invocation counts; later ones are logged and ignored. If `fn` raises
    before completing, the call is treated as not invoked.
    """

    transport_id = "callback"

    def __init__(self, fn: CallbackRequestFn) -> None:
        self._fn = fn

    async def send(self, request: TransportRequest) -> RequestResult:
        loop = asyncio.get_running_loop()
        future: asyncio.Future[RequestResult] = loop.create_future()
        lock = Lock()
        settled = False

        def _claim(kind: str) -> bool:
            nonlocal settled
            with lock:
                if settled:
                    logger.warning(
                        "Ignoring extra %s callback for %s %s",
                        kind,
                        request.method,
                        request.url,
                    )
                    return False
                settled = True
                return True

        def _resolve(result: RequestResult) -> None:
            if not future.done():
                future.set_result(result)

        def _reject(err_msg: str) -> None:
            if not future.done():
                future.set_exception(TransportCallError(err_msg))

        def success(result: RequestResult) -> None:
            if _claim("success"):
                loop.call_soon_threadsafe(_resolve, result)

        def fail(err_msg: str) -> None:
            if _claim("fail"):
                loop.call_soon_threadsafe(_reject, str(err_msg))

        try:
            self._fn(request, success, fail)
        except Exception as error:
            if _claim("fail"):
                raise TransportCallError(f"{type(error).__name__}: {error}") from error
            # A callback already fired; the future carries the outcome.
            logger.warning("Transport function raised after completing: %s", error)

        return await future
