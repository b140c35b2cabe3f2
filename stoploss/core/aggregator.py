"""DayAggregator — which incidents belong to a given day?

There are two different notions of "belongs":

* **starting in** the day: the incident was logged inside the window.  This
  drives the month grid (count + average severity) and is independent of
  the cooldown.
* **overlapping** the day: the incident's influence interval touches the
  window.  This drives the timeline strip and the day detail list, and
  includes late-evening incidents from earlier days that cross midnight.

The module-level functions are single-shot O(n) scans over the log.  Views
that look at many days pre-partition instead: the month grid buckets the
log once with ``partition_by_day``, and the timeline builds one
``DayIndex``, which sorts once and answers each day by bisection.
"""

from __future__ import annotations

from bisect import bisect_left
from collections import defaultdict
from collections.abc import Sequence
from datetime import date, tzinfo

from pydantic import BaseModel

from stoploss.domain.event import Event
from stoploss.domain.interval import DayWindow, cooling_ms, overlaps_window, project
from stoploss.foundation.clock import local_date


class DayEntry(BaseModel):
    """An incident as seen from one particular day."""

    event: Event
    crosses_into_day: bool

    model_config = {"frozen": True}


def _entries(events: Sequence[Event], window: DayWindow) -> list[DayEntry]:
    return [DayEntry(event=e, crosses_into_day=e.timestamp < window.start) for e in events]


# ── Single-shot scans ────────────────────────────────────────────────────────

def events_overlapping_day(
    log: Sequence[Event],
    window: DayWindow,
    cooling_minutes: int,
) -> list[DayEntry]:
    """Incidents whose influence interval overlaps *window*, oldest first."""
    hits = [e for e in log if overlaps_window(project(e, cooling_minutes), window)]
    hits.sort(key=lambda e: e.timestamp)
    return _entries(hits, window)


def events_starting_in_day(log: Sequence[Event], window: DayWindow) -> list[Event]:
    """Incidents logged inside *window*, oldest first."""
    hits = [e for e in log if window.contains(e.timestamp)]
    hits.sort(key=lambda e: e.timestamp)
    return hits


def partition_by_day(log: Sequence[Event], tz: tzinfo | None = None) -> dict[date, list[Event]]:
    """Bucket the log by local calendar day of each incident.

    Every incident lands in exactly one bucket; buckets keep log order.
    """
    buckets: dict[date, list[Event]] = defaultdict(list)
    for event in log:
        buckets[local_date(event.timestamp, tz)].append(event)
    return dict(buckets)


# ── Pre-partitioned index ────────────────────────────────────────────────────

class DayIndex:
    """Sorted view of a log for answering many per-day queries.

    Built once per render in O(n log n); each query then costs
    O(log n + k) for k matching incidents.  The index holds a snapshot and
    never mutates the log it was built from.
    """

    __slots__ = ("_events", "_timestamps")

    def __init__(self, log: Sequence[Event]) -> None:
        # sorted() is stable, so equal timestamps keep append order.
        self._events: list[Event] = sorted(log, key=lambda e: e.timestamp)
        self._timestamps: list[int] = [e.timestamp for e in self._events]

    def __len__(self) -> int:
        return len(self._events)

    def _slice(self, start: int, end: int) -> list[Event]:
        lo = bisect_left(self._timestamps, start)
        hi = bisect_left(self._timestamps, end)
        return self._events[lo:hi]

    def overlapping(self, window: DayWindow, cooling_minutes: int) -> list[DayEntry]:
        """Same result as ``events_overlapping_day`` for the indexed log."""
        # Only incidents logged within one cooldown before the window can reach it.
        candidates = self._slice(window.start - cooling_ms(cooling_minutes), window.end)
        hits = [e for e in candidates if overlaps_window(project(e, cooling_minutes), window)]
        return _entries(hits, window)
