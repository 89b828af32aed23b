"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

HTTP transport built on `httpx.AsyncClient`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from ..errors import TransportCallError
from ..types import RequestResult, TransportRequest
from .contracts import Transport

_QUERY_METHODS = frozenset(("GET", "HEAD", "DELETE", "OPTIONS"))


def _content_type(headers: Mapping[str, str]) -> str:
    for key, value in headers.items():
        if key.lower() == "content-type":
            return value.split(";", 1)[0].strip().lower()
    return ""


def _decode_body(response: httpx.Response) -> Any:
    """Decode JSON bodies; fall back to text, or `None` when empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class HttpxTransport(Transport):
    """
    Send requests through an `httpx.AsyncClient`.

    Payloads of GET-like methods are sent as query parameters. Other methods
    send JSON when the content type says so and form data otherwise. Every
    response, whatever its status code, is returned as a `RequestResult`;
    `httpx.HTTPError` and invalid URLs become `TransportCallError`.
    """

    transport_id = "httpx"

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout_s: float | None = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout_s, transport=transport)

    def _build_kwargs(self, request: TransportRequest) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"headers": dict(request.headers)}
        if request.timeout_s is not None:
            kwargs["timeout"] = request.timeout_s

        payload = request.payload
        if payload is None:
            return kwargs
        if request.method.upper() in _QUERY_METHODS:
            if isinstance(payload, Mapping):
                kwargs["params"] = {k: v for k, v in payload.items() if v is not None}
            else:
                kwargs["params"] = str(payload)
            return kwargs

        content_type = _content_type(request.headers)
        if content_type.endswith("json"):
            kwargs["json"] = payload
        elif isinstance(payload, Mapping):
            kwargs["data"] = dict(payload)
        elif isinstance(payload, (bytes, str)):
            kwargs["content"] = payload
        else:
            kwargs["json"] = payload
        return kwargs

    async def send(self, request: TransportRequest) -> RequestResult:
        try:
            kwargs = self._build_kwargs(request)
            response = await self._client.request(
                request.method.upper(),
                request.url,
                **kwargs,
            )
        except (httpx.HTTPError, httpx.InvalidURL, TypeError, ValueError) as error:
            # TypeError/ValueError: httpx could not encode the request body or params.
            raise TransportCallError(f"{type(error).__name__}: {error}") from error

        # The URL httpx actually hit (query string included).
        request.url = str(response.request.url)
        return RequestResult(
            status_code=response.status_code,
            headers=dict(response.headers),
            data=_decode_body(response),
        )

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()
