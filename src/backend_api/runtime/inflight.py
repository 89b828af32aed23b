"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/inflight.py.
"""

from __future__ import annotations

import logging

from ..types import LogicalRequest

logger = logging.getLogger("backend_api.runtime")


class InFlightRegistry:
    """
    Track outstanding calls by fingerprint.

    Entries stack per fingerprint: a duplicate that was not suppressed gets
    its own slot, so the original call's completion cannot drop it. Owned
    by a single orchestrator and mutated only from its event loop.
    """

    def __init__(self) -> None:
        self._rows: dict[str, list[LogicalRequest]] = {}

    def add(self, fingerprint: str, request: LogicalRequest) -> None:
        self._rows.setdefault(fingerprint, []).append(request)

    def remove(self, fingerprint: str, request: LogicalRequest | None = None) -> bool:
        """
        Remove one entry for `fingerprint`.

        When `request` is given, that exact request is removed; otherwise the
        most recent entry is. Returns False (and logs) when nothing matched.
        """
        rows = self._rows.get(fingerprint)
        removed = False
        if rows:
            if request is None:
                rows.pop()
                removed = True
            else:
                for index in range(len(rows) - 1, -1, -1):
                    if rows[index] is request:
                        del rows[index]
                        removed = True
                        break
            if not rows:
                self._rows.pop(fingerprint, None)

        if not removed:
            logger.warning(
                "Could not remove request from in-flight registry: %s %r",
                fingerprint,
                request,
            )
        return removed

    def has(self, fingerprint: str) -> bool:
        return fingerprint in self._rows

    def get(self, fingerprint: str) -> LogicalRequest | None:
        """Return the most recent in-flight request for `fingerprint`."""
        rows = self._rows.get(fingerprint)
        return rows[-1] if rows else None

    def any(self, exclude_no_visibility: bool = False) -> bool:
        """Return True if any call is in flight, optionally only visible ones."""
        if not exclude_no_visibility:
            return bool(self._rows)
        return any(
            request.options.show_visibility
            for rows in self._rows.values()
            for request in rows
        )

    def visible_fingerprints(self) -> set[str]:
        """Fingerprints with at least one in-flight call holding visibility."""
        return {
            fingerprint
            for fingerprint, rows in self._rows.items()
            if any(request.options.show_visibility for request in rows)
        }

    def __len__(self) -> int:
        return sum(len(rows) for rows in self._rows.values())
