"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: ui/__init__.py.
"""

from .contracts import LoadingIndicator, Notifier
from .headless import LoggingIndicator, LoggingNotifier

__all__ = [
    "LoadingIndicator",
    "Notifier",
    "LoggingIndicator",
    "LoggingNotifier",
]
