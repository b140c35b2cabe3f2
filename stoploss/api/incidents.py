"""REST endpoints for logging incidents, progress and settings.

Paths:
    POST   /api/incidents   log an incident (subject to the cooldown)
    GET    /api/incidents   full log, oldest first
    DELETE /api/incidents   erase the log
    GET    /api/status      stop-loss progress
    GET    /api/settings    current limit and cooldown
    PUT    /api/settings    update limit and cooldown from form input

A cooldown block is a normal outcome, reported as ``accepted: false`` with
the remaining time, not as an HTTP error.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter

from stoploss.domain.settings import UserSettings
from stoploss.models.incident import IncidentList, IncidentRequest
from stoploss.models.settings import SettingsUpdate
from stoploss.services.tracker import AttemptResult, IncidentTracker, TrackerStatus

logger = logging.getLogger(__name__)


def create_incident_router(tracker: IncidentTracker) -> APIRouter:
    """Factory that wires the incident endpoints to a concrete tracker."""

    router = APIRouter(prefix="/api", tags=["incidents"])

    @router.post("/incidents")
    async def log_incident(body: IncidentRequest) -> AttemptResult:
        return await tracker.attempt_log(body.severity, body.note)

    @router.get("/incidents")
    async def list_incidents() -> IncidentList:
        events = await tracker.events()
        return IncidentList(events=events, count=len(events))

    @router.delete("/incidents")
    async def reset_incidents() -> dict[str, Any]:
        events = await tracker.reset_all()
        return {"status": "reset", "count": len(events)}

    @router.get("/status")
    async def status() -> TrackerStatus:
        return await tracker.status()

    @router.get("/settings")
    async def get_settings() -> UserSettings:
        return await tracker.get_settings()

    @router.put("/settings")
    async def update_settings(body: SettingsUpdate) -> UserSettings:
        return await tracker.update_settings(body.stop_loss_limit, body.cooling_minutes)

    return router
