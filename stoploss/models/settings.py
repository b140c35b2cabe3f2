"""Pydantic model for the settings form."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SettingsUpdate(BaseModel):
    """Raw settings form input.

    Values may arrive as text; anything that does not parse as an integer
    leaves the corresponding setting unchanged.
    """

    stop_loss_limit: int | str | None = Field(None, description="Stop-loss count threshold")
    cooling_minutes: int | str | None = Field(None, description="Cooldown between incidents, in minutes")
