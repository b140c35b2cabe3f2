"""Event — one logged incident, and its flat persisted record form.

An Event is immutable once created.  Validation happens at the boundary
(``Event(...)`` raises on bad input), while ``Event.from_record`` is the
lenient path used when reading persisted data: it repairs what it can and
returns None for records that cannot be salvaged.

Record format::

    {"t": <int ms timestamp>, "s": <int severity 1-3>, "n": <str note>}
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, Field

from stoploss.domain.enums import Severity

logger = logging.getLogger(__name__)

DEFAULT_SEVERITY = Severity.LOW


def _coerce_int(value: Any) -> int | None:
    """Best-effort integer conversion for persisted scalars."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


class Event(BaseModel):
    """A single incident in the log."""

    timestamp: int = Field(..., description="Creation time, epoch milliseconds (UTC)")
    severity: Severity = Field(..., description="1 = low, 2 = medium, 3 = high")
    note: str = Field(default="", description="Free-text note; may be empty")

    model_config = {"frozen": True}

    # ── Record codec ─────────────────────────────────────────────────────

    def to_record(self) -> dict[str, Any]:
        return {"t": self.timestamp, "s": int(self.severity), "n": self.note}

    @classmethod
    def from_record(cls, raw: Any) -> Event | None:
        """Build an Event from a persisted record, or None if unusable.

        - missing / non-integer ``t`` -> None (there is no safe default for "when")
        - missing / out-of-range ``s`` -> severity 1
        - missing / non-string ``n`` -> ""
        """
        if not isinstance(raw, dict):
            return None

        timestamp = _coerce_int(raw.get("t"))
        if timestamp is None:
            return None

        severity_raw = _coerce_int(raw.get("s"))
        try:
            severity = Severity(severity_raw)
        except ValueError:
            if "s" in raw:
                logger.debug("Defaulting invalid severity %r to %d", raw.get("s"), DEFAULT_SEVERITY)
            severity = DEFAULT_SEVERITY

        note = raw.get("n", "")
        if not isinstance(note, str):
            note = ""

        return cls(timestamp=timestamp, severity=severity, note=note)
