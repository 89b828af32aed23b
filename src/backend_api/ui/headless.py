"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Headless UI collaborators that report through `logging`.
"""

from __future__ import annotations

import logging

from .contracts import LoadingIndicator, Notifier

logger = logging.getLogger("backend_api.ui")


class LoggingIndicator(LoadingIndicator):
    """Indicator for headless processes; records state and logs transitions."""

    def __init__(self) -> None:
        self.loading = False
        self.active = False

    def show_loading(self, *, message: str, mask: bool) -> None:
        if not self.loading:
            logger.debug("Loading indicator on (message=%r, mask=%s)", message, mask)
        self.loading = True

    def hide_loading(self) -> None:
        if self.loading:
            logger.debug("Loading indicator off")
        self.loading = False

    def show_activity(self) -> None:
        self.active = True

    def hide_activity(self) -> None:
        self.active = False


class LoggingNotifier(Notifier):
    """Notifier that writes toasts to the log."""

    def show_toast(self, message: str, *, duration_ms: int | None = None) -> None:
        logger.info("Toast (duration_ms=%s): %s", duration_ms, message)
