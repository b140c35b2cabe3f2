"""Pydantic models for incident requests and responses on the HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from stoploss.domain.enums import Severity
from stoploss.domain.event import Event


class IncidentRequest(BaseModel):
    """Body of ``POST /api/incidents``."""

    severity: Severity = Field(..., description="1 = low, 2 = medium, 3 = high")
    note: str = Field(default="", description="Optional free-text note")


class IncidentList(BaseModel):
    events: list[Event]
    count: int
