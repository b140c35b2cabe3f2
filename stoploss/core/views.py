"""History view models for the month grid and the daily timeline.

Both builders are pure compositions over the DayAggregator, the interval
projector and the colorizer.  They perform no I/O, never mutate the log,
and return frozen models that a renderer can consume directly.  They know
nothing about how the views are drawn or switched between.

The log is pre-partitioned once per build (day buckets for the grid, a
``DayIndex`` for the timeline), so building a year of month cells or two
months of timeline strips never rescans the log per day.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date, timedelta, tzinfo

from pydantic import BaseModel, Field

from stoploss.core.aggregator import (
    DayEntry,
    DayIndex,
    events_overlapping_day,
    partition_by_day,
)
from stoploss.domain.color import COLOR_SAFE, day_color, severity_color
from stoploss.domain.enums import Severity
from stoploss.domain.event import Event
from stoploss.domain.interval import DayWindow, clip_to_window, project, to_minutes
from stoploss.foundation.clock import (
    days_in_month,
    local_date,
    shift_months,
    sunday_offset,
)

logger = logging.getLogger(__name__)


# ── Month grid ───────────────────────────────────────────────────────────────

class DayCell(BaseModel):
    """One square of the month grid."""

    day: date
    day_start: int
    count: int
    average_severity: float | None = Field(None, description="None when the day has no incidents")
    color: str = Field(..., description="#RRGGBB")

    model_config = {"frozen": True}


class MonthSection(BaseModel):
    """A calendar month laid out for a Sunday-first 7-column grid."""

    year: int
    month: int
    leading_blanks: int = Field(..., description="Empty cells before the 1st")
    days_in_month: int
    total: int = Field(..., description="Incidents logged in this month")
    days: list[DayCell]

    model_config = {"frozen": True}


class GridViewModel(BaseModel):
    months: list[MonthSection] = Field(..., description="Newest month first")

    model_config = {"frozen": True}


def build_month_grid(
    log: Sequence[Event],
    months_back: int,
    now: int,
    tz: tzinfo | None = None,
) -> GridViewModel:
    """Trailing *months_back* calendar months ending with the month of *now*."""
    buckets = partition_by_day(log, tz)
    anchor = local_date(now, tz)
    months: list[MonthSection] = []

    for offset in range(max(months_back, 0)):
        first = shift_months(anchor, -offset)
        n_days = days_in_month(first)
        cells: list[DayCell] = []
        for day_no in range(n_days):
            d = first + timedelta(days=day_no)
            window = DayWindow.for_date(d, tz)
            started = buckets.get(d, [])
            severities = [int(e.severity) for e in started]
            cells.append(
                DayCell(
                    day=d,
                    day_start=window.start,
                    count=len(started),
                    average_severity=(sum(severities) / len(severities)) if severities else None,
                    color=day_color(severities).to_hex(),
                )
            )
        months.append(
            MonthSection(
                year=first.year,
                month=first.month,
                leading_blanks=sunday_offset(first),
                days_in_month=n_days,
                total=sum(c.count for c in cells),
                days=cells,
            )
        )

    logger.debug("Built month grid: %d month(s) over %d incident(s)", len(months), len(log))
    return GridViewModel(months=months)


# ── Timeline ─────────────────────────────────────────────────────────────────

class TimelineSpan(BaseModel):
    """A coloured bar on one day's 24h strip."""

    start_minute: float
    end_minute: float
    severity: Severity
    color: str
    crosses_into_day: bool

    model_config = {"frozen": True}


class TimelineDay(BaseModel):
    day: date
    day_start: int
    base_color: str = Field(default=COLOR_SAFE.to_hex())
    spans: list[TimelineSpan]

    model_config = {"frozen": True}


class TimelineViewModel(BaseModel):
    cooling_minutes: int
    days: list[TimelineDay] = Field(..., description="Newest day first")

    model_config = {"frozen": True}


def _spans_for(entries: Sequence[DayEntry], window: DayWindow, cooling_minutes: int) -> list[TimelineSpan]:
    spans: list[TimelineSpan] = []
    for entry in entries:
        clipped = clip_to_window(project(entry.event, cooling_minutes), window)
        if clipped is None:
            continue
        minutes = to_minutes(clipped, window)
        spans.append(
            TimelineSpan(
                start_minute=minutes.start_minute,
                end_minute=minutes.end_minute,
                severity=entry.event.severity,
                color=severity_color(entry.event.severity).to_hex(),
                crosses_into_day=entry.crosses_into_day,
            )
        )
    return spans


def build_timeline(
    log: Sequence[Event],
    cooling_minutes: int,
    days_back: int,
    now: int,
    tz: tzinfo | None = None,
) -> TimelineViewModel:
    """Trailing *days_back* days ending with the day of *now*."""
    index = DayIndex(log)
    anchor = local_date(now, tz)
    days: list[TimelineDay] = []

    for offset in range(max(days_back, 0)):
        d = anchor - timedelta(days=offset)
        window = DayWindow.for_date(d, tz)
        entries = index.overlapping(window, cooling_minutes)
        days.append(
            TimelineDay(
                day=d,
                day_start=window.start,
                spans=_spans_for(entries, window, cooling_minutes),
            )
        )

    return TimelineViewModel(cooling_minutes=max(cooling_minutes, 0), days=days)


# ── Day detail ───────────────────────────────────────────────────────────────

class DayDetail(BaseModel):
    """Incidents influencing one day, as listed when a day is opened."""

    day_start: int
    day_end: int
    cooling_minutes: int
    entries: list[DayEntry]

    model_config = {"frozen": True}


def day_detail(
    log: Sequence[Event],
    day_start: int,
    cooling_minutes: int,
    tz: tzinfo | None = None,
) -> DayDetail:
    """Incidents influencing the day containing *day_start*, oldest first.

    The day runs between local midnights, the same window the grid and
    timeline use for that date, so a cell and its detail always cover the
    same span (23 or 25 hours across a DST change).
    """
    window = DayWindow.for_date(local_date(day_start, tz), tz)
    return DayDetail(
        day_start=window.start,
        day_end=window.end,
        cooling_minutes=max(cooling_minutes, 0),
        entries=events_overlapping_day(log, window, cooling_minutes),
    )
