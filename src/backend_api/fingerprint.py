"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Deterministic request fingerprints used as dedup and cache keys.
"""

from __future__ import annotations

import hashlib
import json
import logging
from typing import Any

logger = logging.getLogger("backend_api.fingerprint")


class FingerprintHasher:
    """
    Derive a stable identity for a request from method, target and payload.

    Never raises: serialization falls back to ``str(payload)`` and hashing
    falls back to the raw composed string. Both degradations are logged.
    """

    def serialize(self, payload: Any) -> str:
        """Serialize payload deterministically; empty payloads serialize to ``""``."""
        if not payload:
            return ""
        try:
            return json.dumps(
                payload,
                sort_keys=True,
                ensure_ascii=False,
                separators=(",", ":"),
            )
        except (TypeError, ValueError) as error:
            logger.warning(
                "Could not serialize request payload to JSON (%s); using str(): %r",
                error,
                payload,
            )
            return str(payload)

    def digest(self, composed: str) -> str:
        """Hash the composed request string."""
        return hashlib.md5(composed.encode("utf-8"), usedforsecurity=False).hexdigest()

    def fingerprint(self, method: str, target: str, payload: Any = None) -> str:
        """Return the fingerprint for one request."""
        composed = f"{method} {target} {self.serialize(payload)}"
        try:
            return self.digest(composed)
        except Exception as error:
            logger.warning(
                "Could not hash request info (%s); using raw string: %s",
                error,
                composed,
            )
            return composed
