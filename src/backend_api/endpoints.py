"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Typed registration and resolution of named backend endpoints.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

from .errors import EndpointConfigError
from .settings import DEFAULT_HEADERS
from .types import HTTP_METHODS, LogicalRequest, RequestOptions

logger = logging.getLogger("backend_api.endpoints")

PATH_DELIMITER = "/"


@dataclass(frozen=True, slots=True)
class EndpointDescriptor:
    """One named endpoint: method, base URL, headers, default payload and option defaults."""

    name: str
    url: str
    method: str = "GET"
    headers: Mapping[str, str] = field(default_factory=dict)
    payload: Mapping[str, Any] = field(default_factory=dict)
    options: Mapping[str, Any] = field(default_factory=dict)


def _validate_url(name: str, url: str) -> None:
    if not isinstance(url, str) or not url.strip():
        raise EndpointConfigError(f"Endpoint '{name}' needs a non-empty url")
    parts = urlsplit(url)
    if parts.scheme and parts.scheme not in ("http", "https"):
        raise EndpointConfigError(
            f"Endpoint '{name}' url has unsupported scheme '{parts.scheme}'"
        )
    if parts.scheme and not parts.netloc:
        raise EndpointConfigError(f"Endpoint '{name}' url has no host: {url}")
    if not parts.scheme and not url.startswith("/"):
        raise EndpointConfigError(
            f"Endpoint '{name}' url must be absolute or start with '/': {url}"
        )


def _normalize_method(name: str, method: str) -> str:
    normalized = (method or "").strip().upper()
    if normalized not in HTTP_METHODS:
        raise EndpointConfigError(f"Endpoint '{name}' has unknown method '{method}'")
    return normalized


def _validate_options(name: str, options: Mapping[str, Any]) -> None:
    try:
        RequestOptions().merged(options)
    except (TypeError, ValueError) as exc:
        raise EndpointConfigError(f"Endpoint '{name}' has invalid options: {exc}") from exc


class EndpointRegistry:
    """
    Map call names to endpoint descriptors.

    Registrations are validated up front, so resolution never fails on
    configuration. Names may carry a REST-style suffix after the first
    ``/`` (``getUser/123``); the suffix is appended to the registered URL.
    """

    def __init__(
        self,
        *,
        default_method: str = "GET",
        default_headers: Mapping[str, str] | None = None,
        default_options: RequestOptions | None = None,
    ) -> None:
        self._rows: dict[str, EndpointDescriptor] = {}
        self._default_method = _normalize_method("<defaults>", default_method)
        self._default_headers = dict(
            DEFAULT_HEADERS if default_headers is None else default_headers
        )
        self._default_options = default_options or RequestOptions()

    def register(
        self,
        name: str,
        url: str,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        payload: Mapping[str, Any] | None = None,
        overwrite: bool = False,
        **options: Any,
    ) -> EndpointDescriptor:
        """
        Register one endpoint; `options` are `RequestOptions` field defaults.

        `payload` holds default request data merged under every call-time
        mapping payload.
        """
        key = (name or "").strip()
        if not key:
            raise EndpointConfigError("Endpoint name must be non-empty")
        if PATH_DELIMITER in key:
            raise EndpointConfigError(
                f"Endpoint name must not contain '{PATH_DELIMITER}': {name}"
            )
        if key in self._rows and not overwrite:
            raise EndpointConfigError(f"Endpoint already registered: {key}")

        _validate_url(key, url)
        _validate_options(key, options)
        if payload is not None and not isinstance(payload, Mapping):
            raise EndpointConfigError(f"Endpoint '{key}' payload must be a mapping")
        descriptor = EndpointDescriptor(
            name=key,
            url=url,
            method=_normalize_method(key, method),
            headers=dict(headers or {}),
            payload=dict(payload or {}),
            options=dict(options),
        )
        self._rows[key] = descriptor
        return descriptor

    def register_many(self, config: Mapping[str, Mapping[str, Any]]) -> None:
        """Register endpoints from a ``{name: {"url": ..., "method": ...}}`` mapping."""
        for name, row in config.items():
            if not isinstance(row, Mapping):
                raise EndpointConfigError(f"Endpoint '{name}' config must be a mapping")
            params = dict(row)
            url = params.pop("url", None)
            if "data" in params and "payload" not in params:
                params["payload"] = params.pop("data")
            self.register(name, url, **params)

    def get(self, name: str) -> EndpointDescriptor | None:
        return self._rows.get(name)

    def names(self) -> list[str]:
        return sorted(self._rows)

    def __contains__(self, name: object) -> bool:
        return name in self._rows

    @staticmethod
    def split_name(name: str) -> tuple[str, str]:
        """Split ``"getUser/123"`` into ``("getUser", "/123")``."""
        index = name.find(PATH_DELIMITER)
        if index == -1:
            return name, ""
        return name[:index], name[index:]

    def resolve(
        self,
        name: str | None,
        payload: Any = None,
        *,
        method: str | None = None,
        url: str | None = None,
        headers: Mapping[str, str] | None = None,
        **options: Any,
    ) -> LogicalRequest:
        """
        Merge defaults, the named endpoint and call-time values into a request.

        Call-time values win over endpoint values, which win over defaults.
        A mapping (or missing) payload is layered over the endpoint's default
        payload key by key; any other payload is sent as given.
        An unknown or missing name is logged and resolved from defaults plus
        call-time `method`/`url`.
        """
        descriptor: EndpointDescriptor | None = None
        target = url or ""
        if name:
            base_name, suffix = self.split_name(name)
            descriptor = self._rows.get(base_name)
            if descriptor is not None:
                target = url or descriptor.url + suffix
            else:
                logger.warning(
                    "No endpoint registered for '%s' (known: %s)",
                    base_name,
                    ", ".join(self.names()) or "-",
                )
        else:
            logger.warning("Request sent without an endpoint name (url=%s)", url)

        merged_headers = dict(self._default_headers)
        merged_options = self._default_options
        resolved_method = self._default_method
        if descriptor is not None:
            merged_headers.update(descriptor.headers)
            merged_options = merged_options.merged(descriptor.options)
            resolved_method = descriptor.method
        if headers:
            merged_headers.update(headers)
        merged_options = merged_options.merged(options)
        if method:
            resolved_method = method.strip().upper()
        if descriptor is not None and descriptor.payload:
            if payload is None:
                payload = dict(descriptor.payload)
            elif isinstance(payload, Mapping):
                payload = {**descriptor.payload, **payload}

        return LogicalRequest(
            method=resolved_method,
            target=target,
            payload=payload,
            headers=merged_headers,
            options=merged_options,
            name=name,
        )
