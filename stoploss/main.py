"""stoploss: incident log, cooldown gate and history views.

This is the application entry point.  It wires the EventStore,
IncidentTracker and REST endpoints together.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from stoploss.api.history import create_history_router
from stoploss.api.incidents import create_incident_router
from stoploss.config import settings
from stoploss.domain.settings import UserSettings
from stoploss.foundation.clock import resolve_tz
from stoploss.services.tracker import IncidentTracker
from stoploss.store.event_store import EventStore
from stoploss.store.slots import JsonFileKeyValueStore

# ── Logging ──────────────────────────────────────────────────────────────────

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)


def build_tracker() -> IncidentTracker:
    """Tracker backed by the configured JSON slot file."""
    store = EventStore(
        JsonFileKeyValueStore(settings.data_path),
        default_settings=UserSettings(
            stop_loss_limit=settings.default_stop_loss_limit,
            cooling_minutes=settings.default_cooling_minutes,
        ),
    )
    return IncidentTracker(
        store,
        tz=resolve_tz(settings.timezone),
        months_back=settings.grid_months_back,
        days_back=settings.timeline_days_back,
        danger_threshold=settings.danger_progress_threshold,
    )


def create_app(tracker: IncidentTracker | None = None) -> FastAPI:
    tracker = tracker or build_tracker()

    app = FastAPI(
        title=settings.app_name,
        description="Incident log with cooldown gating, month grid and timeline views",
        version="0.4.1",
    )
    app.include_router(create_incident_router(tracker))
    app.include_router(create_history_router(tracker))

    @app.get("/health")
    async def health() -> dict:
        status = await tracker.status()
        return {
            "status": "ok",
            "incidents": status.count,
            "stop_loss_limit": status.stop_loss_limit,
            "limit_reached": status.limit_reached,
        }

    return app


app = create_app()
