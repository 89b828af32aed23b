"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/classifier.py.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

from ..errors import (
    BusinessFailure,
    CallSetupFailure,
    RequestFailure,
    TransportCallError,
    TransportFailure,
)
from ..settings import BackendApiSettings
from ..types import LogicalRequest, RequestResult

OutcomeKind = Literal[
    "business_success",
    "business_failure",
    "transport_failure",
    "call_setup_failure",
]


@dataclass(frozen=True, slots=True)
class Outcome:
    """Terminal classification of one call."""

    kind: OutcomeKind
    result: RequestResult
    payload: Any = None
    error: RequestFailure | None = None

    @property
    def ok(self) -> bool:
        return self.kind == "business_success"


def is_http_success(status_code: int | None) -> bool:
    """2xx, plus 304 so conditional responses count as success."""
    if status_code is None:
        return False
    return 200 <= status_code < 300 or status_code == 304


class OutcomeClassifier:
    """
    Classify a completed call into business success or one failure kind.

    Subclass and override `is_success` / `extract_payload` for backends whose
    envelope differs from ``{"status": 0, "data": ..., "statusInfo": ...}``.
    """

    def __init__(self, settings: BackendApiSettings | None = None) -> None:
        self.settings = settings or BackendApiSettings()

    def is_success(self, result: RequestResult) -> bool:
        """Business status absent or zero means success."""
        body = result.data
        if not isinstance(body, Mapping):
            return True
        return not body.get("status")

    def extract_payload(self, result: RequestResult) -> Any:
        body = result.data
        if isinstance(body, Mapping):
            return body.get("data")
        return body

    def classify(
        self,
        request: LogicalRequest,
        outcome: RequestResult | TransportCallError,
    ) -> Outcome:
        if isinstance(outcome, TransportCallError):
            return self._call_setup_failure(request, outcome)
        if not is_http_success(outcome.status_code):
            return self._transport_failure(request, outcome)
        if self.is_success(outcome):
            return Outcome(
                kind="business_success",
                result=outcome,
                payload=self.extract_payload(outcome),
            )
        return self._business_failure(request, outcome)

    def _call_setup_failure(
        self, request: LogicalRequest, error: TransportCallError
    ) -> Outcome:
        result = RequestResult(err_msg=error.err_msg)
        status_info = {
            "message": self.settings.api_fail_message,
            "detail": {"errMsg": error.err_msg},
        }
        result.data = {"status": self.settings.api_fail_status, "statusInfo": status_info}
        failure = CallSetupFailure(
            status=self.settings.api_fail_status,
            status_info=status_info,
            result=result,
            request=request,
        )
        failure.__cause__ = error
        return Outcome(kind="call_setup_failure", result=result, error=failure)

    def _transport_failure(self, request: LogicalRequest, result: RequestResult) -> Outcome:
        status_info = {
            "message": self.settings.http_fail_message,
            "detail": {"statusCode": result.status_code},
        }
        result.data = {"status": self.settings.http_fail_status, "statusInfo": status_info}
        failure = TransportFailure(
            status=self.settings.http_fail_status,
            status_info=status_info,
            result=result,
            request=request,
        )
        return Outcome(kind="transport_failure", result=result, error=failure)

    def _business_failure(self, request: LogicalRequest, result: RequestResult) -> Outcome:
        # The embedded status and message are authoritative; the body is left as is.
        body = result.data
        status_info = body.get("statusInfo") if isinstance(body, Mapping) else None
        failure = BusinessFailure(
            status=body.get("status") if isinstance(body, Mapping) else None,
            status_info=status_info if isinstance(status_info, dict) else {},
            result=result,
            request=request,
        )
        return Outcome(kind="business_failure", result=result, error=failure)
