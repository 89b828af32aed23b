"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Extension hooks injected into the request orchestrator.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from ..errors import RequestFailure, TransportCallError
from ..types import LogicalRequest, RequestResult, SendResult

T = TypeVar("T")

# Returning a value short-circuits dedup, cache and dispatch.
BeforeSendHook = Callable[[LogicalRequest], "SendResult | None | Awaitable[SendResult | None]"]
# Runs after teardown and before classification; a non-None return replaces the outcome.
AfterSendHook = Callable[
    [LogicalRequest, "RequestResult | TransportCallError"],
    "RequestResult | TransportCallError | None | Awaitable[RequestResult | TransportCallError | None]",
]
FailStatusHook = Callable[[LogicalRequest, RequestFailure], "None | Awaitable[None]"]


@dataclass(frozen=True, slots=True)
class OrchestratorHooks:
    """
    Optional strategy callbacks; each may be sync or async.

    Attributes:
        before_send: Pre-dispatch hook that may answer the call itself.
        after_send: Post-completion hook, e.g. to decrypt response bodies.
        on_fail_status: Status-specific failure handling, e.g. session expiry.
    """

    before_send: BeforeSendHook | None = None
    after_send: AfterSendHook | None = None
    on_fail_status: FailStatusHook | None = None


async def maybe_await(value: T | Awaitable[T]) -> T:
    """Await `value` when a hook returned an awaitable."""
    if inspect.isawaitable(value):
        return await value
    return value  # type: ignore[return-value]

