"""The two settings the user controls: stop-loss limit and cooldown.

These are owned by the shell and threaded explicitly into every core
operation; the core never reads them from ambient state.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

DEFAULT_STOP_LOSS_LIMIT = 50
DEFAULT_COOLING_MINUTES = 60


def _parse_count(text: str | int | None, previous: int) -> int:
    """Parse a settings-form value, keeping *previous* if it is not numeric."""
    if text is None:
        return previous
    if isinstance(text, int) and not isinstance(text, bool):
        return max(text, 0)
    try:
        return max(int(str(text).strip()), 0)
    except ValueError:
        return previous


class UserSettings(BaseModel):
    """Stop-loss limit and cooldown, both clamped to be non-negative."""

    stop_loss_limit: int = Field(
        default=DEFAULT_STOP_LOSS_LIMIT,
        description="Incident count at which the stop-loss warning fires",
    )
    cooling_minutes: int = Field(
        default=DEFAULT_COOLING_MINUTES,
        description="Minutes that must pass after an incident before the next one",
    )

    model_config = {"frozen": True}

    @field_validator("stop_loss_limit", "cooling_minutes")
    @classmethod
    def clamp_non_negative(cls, v: int) -> int:
        return max(v, 0)

    def apply_form_input(
        self,
        limit_text: str | int | None,
        cooling_text: str | int | None,
    ) -> UserSettings:
        """Return new settings from raw form input.

        Non-numeric input falls back to the current value, so a typo in the
        settings form never wipes a setting.
        """
        return UserSettings(
            stop_loss_limit=_parse_count(limit_text, self.stop_loss_limit),
            cooling_minutes=_parse_count(cooling_text, self.cooling_minutes),
        )
