"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Transport contract consumed by the request orchestrator.
"""

from __future__ import annotations

from typing import Protocol

from ..types import RequestResult, TransportRequest


class Transport(Protocol):
    """
    Performs the actual I/O for one call.

    `send` completes exactly once: it returns a `RequestResult` carrying the
    status code, headers and decoded body whenever the remote answered (any
    status code), or raises `TransportCallError` when the call could not be
    invoked. Transports may rewrite `request.url`; the orchestrator never
    reads it back.
    """

    transport_id: str

    async def send(self, request: TransportRequest) -> RequestResult: ...
