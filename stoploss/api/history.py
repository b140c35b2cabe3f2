"""REST endpoints for the two history views and the per-day detail.

Paths:
    GET /api/history/grid?months_back=12
    GET /api/history/timeline?days_back=60
    GET /api/history/day/{day_start}     any epoch ms inside the wanted local day
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query

from stoploss.core.views import DayDetail, GridViewModel, TimelineViewModel
from stoploss.services.tracker import IncidentTracker

logger = logging.getLogger(__name__)

_MAX_MONTHS = 120
_MAX_DAYS = 3_660


def create_history_router(tracker: IncidentTracker) -> APIRouter:
    """Factory that wires the history endpoints to a concrete tracker."""

    router = APIRouter(prefix="/api/history", tags=["history"])

    @router.get("/grid")
    async def month_grid(
        months_back: int | None = Query(None, ge=1, le=_MAX_MONTHS),
    ) -> GridViewModel:
        return await tracker.month_grid(months_back=months_back)

    @router.get("/timeline")
    async def timeline(
        days_back: int | None = Query(None, ge=1, le=_MAX_DAYS),
    ) -> TimelineViewModel:
        return await tracker.timeline(days_back=days_back)

    @router.get("/day/{day_start}")
    async def day(day_start: int) -> DayDetail:
        if day_start < 0:
            raise HTTPException(status_code=400, detail="day_start must be a non-negative epoch ms value")
        return await tracker.day_detail(day_start)

    return router
