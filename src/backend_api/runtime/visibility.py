"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/visibility.py.
"""

from __future__ import annotations

from ..types import LogicalRequest
from ..ui.contracts import LoadingIndicator
from .inflight import InFlightRegistry


class VisibilitySignal:
    """
    Reference-counted loading indicator.

    Holders are the fingerprints of in-flight calls that asked for
    visibility. The indicator is shown on the empty -> non-empty transition
    and hidden on the non-empty -> empty one. The activity indicator follows
    every in-flight call, visible or not.
    """

    def __init__(self, indicator: LoadingIndicator, *, message: str = "") -> None:
        self._indicator = indicator
        self._message = message
        self._holders: set[str] = set()
        self._active = False

    @property
    def engaged(self) -> bool:
        return bool(self._holders)

    @property
    def holders(self) -> frozenset[str]:
        return frozenset(self._holders)

    def engage(self, fingerprint: str, request: LogicalRequest) -> None:
        """Register a dispatching call."""
        if request.options.show_visibility:
            if not self._holders:
                self._indicator.show_loading(
                    message=self._message,
                    mask=request.options.visibility_mask,
                )
            self._holders.add(fingerprint)
        # Activity is shown even for calls that declined the loading indicator.
        if not self._active:
            self._active = True
            self._indicator.show_activity()

    def reconcile(self, registry: InFlightRegistry) -> None:
        """Recompute state right after a call left the registry."""
        if self._holders:
            self._holders &= registry.visible_fingerprints()
            if not self._holders:
                self._indicator.hide_loading()
        if self._active and not registry.any():
            self._active = False
            self._indicator.hide_activity()
