"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/__init__.py.
"""

from .classifier import Outcome, OutcomeClassifier, is_http_success
from .contracts import OrchestratorHooks
from .inflight import InFlightRegistry
from .orchestrator import RequestOrchestrator
from .visibility import VisibilitySignal

__all__ = [
    "RequestOrchestrator",
    "OrchestratorHooks",
    "InFlightRegistry",
    "VisibilitySignal",
    "Outcome",
    "OutcomeClassifier",
    "is_http_success",
]
