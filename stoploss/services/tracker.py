"""IncidentTracker — the UI-facing service over the incident log.

Design notes:
    - Each user action (log an incident, reset, change settings) runs as
      one load → compute → save transaction under an asyncio.Lock, so
      concurrent requests can never lose an append.
    - The core functions stay pure; this service is the only place that
      reads the clock, and only when the caller does not pass ``now``.
    - History views are computed on demand from a fresh load; nothing is
      cached between calls.  A view that needs the cooldown reads log and
      settings under the same lock acquisition.
    - Store calls may touch the disk, so they run in a worker thread via
      ``asyncio.to_thread`` while the lock is held.  The lock, not the
      thread, is what serialises transactions.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import tzinfo

from pydantic import BaseModel, Field

from stoploss.core.cooldown import can_log
from stoploss.core.views import (
    DayDetail,
    GridViewModel,
    TimelineViewModel,
    build_month_grid,
    build_timeline,
    day_detail,
)
from stoploss.domain.enums import Severity
from stoploss.domain.event import Event
from stoploss.domain.settings import UserSettings
from stoploss.foundation import clock
from stoploss.store.event_store import EventStore

logger = logging.getLogger(__name__)


class RemainingTime(BaseModel):
    """Cooldown left, split for display."""

    minutes: int
    seconds: int

    model_config = {"frozen": True}


class AttemptResult(BaseModel):
    """Outcome of trying to log an incident."""

    accepted: bool
    remaining: RemainingTime | None = Field(None, description="Set only when blocked by the cooldown")
    event: Event | None = Field(None, description="The stored incident, when accepted")
    count: int = Field(..., description="Log size after the attempt")
    limit_reached: bool = Field(False, description="True when this incident hit the stop-loss limit")

    model_config = {"frozen": True}


class TrackerStatus(BaseModel):
    """Stop-loss progress, as shown on the main screen."""

    count: int
    stop_loss_limit: int
    progress: float = Field(..., ge=0.0, le=1.0)
    percent_text: str
    limit_reached: bool
    danger: bool
    last_event_at: int | None = None

    model_config = {"frozen": True}


class IncidentTracker:
    """Async-safe facade used by the HTTP layer.

    Args:
        store: Persistence boundary for the log and settings.
        tz: Timezone whose midnights cut calendar days (None = local).
        months_back: Default span of the month grid.
        days_back: Default span of the timeline.
        danger_threshold: Progress fraction above which status is flagged.
    """

    def __init__(
        self,
        store: EventStore,
        tz: tzinfo | None = None,
        months_back: int = 12,
        days_back: int = 60,
        danger_threshold: float = 0.8,
    ) -> None:
        self._store = store
        self._tz = tz
        self._months_back = months_back
        self._days_back = days_back
        self._danger_threshold = danger_threshold
        self._lock = asyncio.Lock()

    # ── Writes ───────────────────────────────────────────────────────────

    async def attempt_log(
        self,
        severity: Severity | int,
        note: str = "",
        now: int | None = None,
    ) -> AttemptResult:
        """Log an incident unless the cooldown since the last one is still running."""
        async with self._lock:
            now = clock.now_ms() if now is None else now
            return await asyncio.to_thread(self._attempt_log, severity, note, now)

    def _attempt_log(self, severity: Severity | int, note: str, now: int) -> AttemptResult:
        user_settings = self._store.load_settings()
        log = self._store.load()

        outcome = can_log(log, now, user_settings.cooling_minutes)
        if not outcome.allowed:
            logger.debug("Incident blocked by cooldown (%d ms remaining)", outcome.remaining_ms)
            return AttemptResult(
                accepted=False,
                remaining=RemainingTime(
                    minutes=outcome.remaining_minutes,
                    seconds=outcome.remaining_seconds,
                ),
                count=len(log),
            )

        event = Event(timestamp=now, severity=severity, note=note)
        log = self._store.append(event)
        limit_reached = len(log) >= user_settings.stop_loss_limit
        logger.info(
            "Logged incident severity=%d (count=%d/%d)",
            event.severity,
            len(log),
            user_settings.stop_loss_limit,
        )
        return AttemptResult(
            accepted=True,
            event=event,
            count=len(log),
            limit_reached=limit_reached,
        )

    async def reset_all(self) -> list[Event]:
        """Erase every incident."""
        async with self._lock:
            return await asyncio.to_thread(self._reset_all)

    def _reset_all(self) -> list[Event]:
        previous = len(self._store.load())
        log = self._store.reset()
        logger.info("Reset incident log (%d incident(s) removed)", previous)
        return log

    async def update_settings(
        self,
        stop_loss_limit: str | int | None,
        cooling_minutes: str | int | None,
    ) -> UserSettings:
        """Apply raw settings input; unparsable values keep their current setting."""
        async with self._lock:
            return await asyncio.to_thread(self._update_settings, stop_loss_limit, cooling_minutes)

    def _update_settings(
        self,
        stop_loss_limit: str | int | None,
        cooling_minutes: str | int | None,
    ) -> UserSettings:
        updated = self._store.load_settings().apply_form_input(stop_loss_limit, cooling_minutes)
        self._store.save_settings(updated)
        logger.info(
            "Settings updated: limit=%d cooling=%dmin",
            updated.stop_loss_limit,
            updated.cooling_minutes,
        )
        return updated

    # ── Reads ────────────────────────────────────────────────────────────

    async def _snapshot(self) -> tuple[list[Event], UserSettings]:
        """Log and settings, read together so they always agree."""
        async with self._lock:
            return await asyncio.to_thread(self._read_both)

    def _read_both(self) -> tuple[list[Event], UserSettings]:
        return self._store.load(), self._store.load_settings()

    async def events(self) -> list[Event]:
        async with self._lock:
            return await asyncio.to_thread(self._store.load)

    async def get_settings(self) -> UserSettings:
        async with self._lock:
            return await asyncio.to_thread(self._store.load_settings)

    async def status(self) -> TrackerStatus:
        log, user_settings = await self._snapshot()
        limit = user_settings.stop_loss_limit

        count = len(log)
        progress = 1.0 if limit == 0 else min(max(count / limit, 0.0), 1.0)
        return TrackerStatus(
            count=count,
            stop_loss_limit=limit,
            progress=progress,
            percent_text=f"{progress * 100:.2f}%",
            limit_reached=count >= limit,
            danger=progress > self._danger_threshold,
            last_event_at=log[-1].timestamp if log else None,
        )

    async def month_grid(self, months_back: int | None = None, now: int | None = None) -> GridViewModel:
        async with self._lock:
            log = await asyncio.to_thread(self._store.load)
        return build_month_grid(
            log,
            months_back=self._months_back if months_back is None else months_back,
            now=clock.now_ms() if now is None else now,
            tz=self._tz,
        )

    async def timeline(self, days_back: int | None = None, now: int | None = None) -> TimelineViewModel:
        log, user_settings = await self._snapshot()
        return build_timeline(
            log,
            cooling_minutes=user_settings.cooling_minutes,
            days_back=self._days_back if days_back is None else days_back,
            now=clock.now_ms() if now is None else now,
            tz=self._tz,
        )

    async def day_detail(self, day_start: int) -> DayDetail:
        """Detail for the local day containing *day_start*."""
        log, user_settings = await self._snapshot()
        return day_detail(log, day_start, user_settings.cooling_minutes, tz=self._tz)
