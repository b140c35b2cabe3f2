"""Influence intervals and day windows.

Every logged event keeps "counting" for ``cooling_minutes`` after it was
logged.  That span is its influence interval, ``[t, t + cooling)``.  The
history views ask two questions of it: does it overlap a given day, and
which part of that day does it cover?

All intervals are half-open and expressed in epoch milliseconds.
"""

from __future__ import annotations

from datetime import date, tzinfo

from pydantic import BaseModel, Field, model_validator

from stoploss.domain.event import Event
from stoploss.foundation.clock import MS_PER_MINUTE, midnight_ms


class Interval(BaseModel):
    """Half-open span ``[start, end)`` in epoch milliseconds."""

    start: int
    end: int

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def end_not_before_start(self) -> Interval:
        if self.end < self.start:
            raise ValueError(f"interval end {self.end} precedes start {self.start}")
        return self


class DayWindow(BaseModel):
    """One calendar day, ``[start, end)``, where *start* is a local midnight."""

    start: int = Field(..., description="Local midnight, epoch milliseconds")
    end: int = Field(..., description="Next local midnight, epoch milliseconds")

    model_config = {"frozen": True}

    @classmethod
    def for_date(cls, d: date, tz: tzinfo | None = None) -> DayWindow:
        """Window bounded by the local midnights of *d* and the day after.

        Normally 86 400 000 ms long.  On DST transition days the window is
        23 or 25 hours long so consecutive days tile exactly.
        """
        start = midnight_ms(d, tz)
        end = midnight_ms(date.fromordinal(d.toordinal() + 1), tz)
        return cls(start=start, end=end)

    def contains(self, ms: int) -> bool:
        return self.start <= ms < self.end


class MinuteSpan(BaseModel):
    """A clipped interval expressed as minutes into its day."""

    start_minute: float
    end_minute: float

    model_config = {"frozen": True}


# ── Projection ───────────────────────────────────────────────────────────────

def cooling_ms(cooling_minutes: int) -> int:
    """Influence length in milliseconds; negative cooldowns count as zero."""
    return max(cooling_minutes, 0) * MS_PER_MINUTE


def project(event: Event, cooling_minutes: int) -> Interval:
    """Map *event* to its influence interval ``[t, t + cooling)``."""
    return Interval(start=event.timestamp, end=event.timestamp + cooling_ms(cooling_minutes))


def overlaps_window(interval: Interval, window: DayWindow) -> bool:
    """Half-open overlap test.

    A zero-length interval never overlaps a window that starts at the same
    instant: ``interval.end > window.start`` fails.
    """
    return interval.start < window.end and interval.end > window.start


def clip_to_window(interval: Interval, window: DayWindow) -> Interval | None:
    """The part of *interval* inside *window*, or None if nothing remains."""
    start = max(interval.start, window.start)
    end = min(interval.end, window.end)
    if end - start <= 0:
        return None
    return Interval(start=start, end=end)


def to_minutes(clipped: Interval, window: DayWindow) -> MinuteSpan:
    """Express an already clipped interval as minutes after ``window.start``."""
    return MinuteSpan(
        start_minute=(clipped.start - window.start) / MS_PER_MINUTE,
        end_minute=(clipped.end - window.start) / MS_PER_MINUTE,
    )
