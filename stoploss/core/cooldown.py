"""Cooldown gate: may a new incident be logged right now?

Pure function: accepts the log, the current time and the cooldown, and
returns a CooldownOutcome.  It reads no clock and mutates nothing; callers
pass ``now`` immediately before deciding whether to append.

Rule:
    last_time = timestamp of the last event in the log (0 if empty)
    elapsed   = now - last_time
    required  = cooling_minutes * 60_000
    BLOCKED if elapsed < required, otherwise ALLOWED

Negative elapsed time (clock skew) is always ALLOWED.
"""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, Field

from stoploss.domain.enums import GateStatus
from stoploss.domain.event import Event
from stoploss.domain.interval import cooling_ms
from stoploss.foundation.clock import MS_PER_MINUTE, MS_PER_SECOND


class CooldownOutcome(BaseModel):
    """Result of a cooldown check."""

    status: GateStatus
    remaining_ms: int = Field(default=0, ge=0, description="Time left before logging is allowed")

    model_config = {"frozen": True}

    @property
    def allowed(self) -> bool:
        return self.status == GateStatus.ALLOWED

    @property
    def remaining_minutes(self) -> int:
        return self.remaining_ms // MS_PER_MINUTE

    @property
    def remaining_seconds(self) -> int:
        return (self.remaining_ms % MS_PER_MINUTE) // MS_PER_SECOND


ALLOWED = CooldownOutcome(status=GateStatus.ALLOWED)


def can_log(log: Sequence[Event], now: int, cooling_minutes: int) -> CooldownOutcome:
    last_time = log[-1].timestamp if log else 0
    elapsed = now - last_time
    required = cooling_ms(cooling_minutes)

    if elapsed < 0 or elapsed >= required:
        return ALLOWED
    return CooldownOutcome(status=GateStatus.BLOCKED, remaining_ms=required - elapsed)
