"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Protocols for the user-facing collaborators driven by the orchestrator.
"""

from __future__ import annotations

from typing import Protocol


class LoadingIndicator(Protocol):
    """
    Shared loading indicator plus a secondary activity indicator.

    All calls must be idempotent. The activity indicator is driven on every
    dispatch, even when the call declined the loading indicator.
    """

    def show_loading(self, *, message: str, mask: bool) -> None: ...

    def hide_loading(self) -> None: ...

    def show_activity(self) -> None: ...

    def hide_activity(self) -> None: ...


class Notifier(Protocol):
    """Transient user-facing notice (toast)."""

    def show_toast(self, message: str, *, duration_ms: int | None = None) -> None: ...
