"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: transport/__init__.py.
"""

from .callback import CallbackTransport
from .contracts import Transport
from .httpx_transport import HttpxTransport

__all__ = [
    "Transport",
    "CallbackTransport",
    "HttpxTransport",
]
