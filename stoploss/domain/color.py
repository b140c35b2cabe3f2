"""Severity colours for the history views.

Two palettes are in play:

* a three-stop gradient (low → mid → high) that colours a day cell by the
  *average* severity of that day's incidents, interpolated continuously;
* the same three stops used discretely for individual incidents (timeline
  bars, detail list).

Days without incidents are always drawn in the fixed SAFE colour.

Channels are integers 0–255.  Blended channels are rounded to the nearest
integer, so the gradient hits each stop exactly at 1.0, 2.0 and 3.0.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from stoploss.domain.enums import Severity


class Color(BaseModel):
    """RGBA colour with 8-bit channels."""

    red: int = Field(..., ge=0, le=255)
    green: int = Field(..., ge=0, le=255)
    blue: int = Field(..., ge=0, le=255)
    alpha: int = Field(default=255, ge=0, le=255)

    model_config = {"frozen": True}

    @classmethod
    def from_argb(cls, value: int) -> Color:
        """Build from a packed ``0xAARRGGBB`` integer."""
        return cls(
            alpha=(value >> 24) & 0xFF,
            red=(value >> 16) & 0xFF,
            green=(value >> 8) & 0xFF,
            blue=value & 0xFF,
        )

    def to_hex(self) -> str:
        """``#RRGGBB``, or ``#RRGGBBAA`` when not fully opaque."""
        rgb = f"#{self.red:02X}{self.green:02X}{self.blue:02X}"
        return rgb if self.alpha == 255 else f"{rgb}{self.alpha:02X}"


COLOR_LOW = Color.from_argb(0xFF00008B)    # cold navy
COLOR_MID = Color.from_argb(0xFF5B0E53)    # bruise purple
COLOR_HIGH = Color.from_argb(0xFFB71C1C)   # clotted red
COLOR_SAFE = Color.from_argb(0xFF4CAF50)   # no incidents

_SEVERITY_COLORS = {
    Severity.LOW: COLOR_LOW,
    Severity.MEDIUM: COLOR_MID,
    Severity.HIGH: COLOR_HIGH,
}


def lerp_color(start: Color, end: Color, fraction: float) -> Color:
    """Per-channel linear blend: ``start + (end - start) * fraction``."""

    def channel(a: int, b: int) -> int:
        return round(a + (b - a) * fraction)

    return Color(
        red=channel(start.red, end.red),
        green=channel(start.green, end.green),
        blue=channel(start.blue, end.blue),
        alpha=channel(start.alpha, end.alpha),
    )


def color_for(average_severity: float) -> Color:
    """Gradient colour for an average severity in ``[1, 3]`` (clamped)."""
    avg = min(max(average_severity, 1.0), 3.0)
    if avg <= 2.0:
        return lerp_color(COLOR_LOW, COLOR_MID, avg - 1.0)
    return lerp_color(COLOR_MID, COLOR_HIGH, avg - 2.0)


def severity_color(severity: Severity) -> Color:
    """Discrete colour for a single incident."""
    return _SEVERITY_COLORS[Severity(severity)]


def day_color(severities: list[int]) -> Color:
    """Cell colour for a day: SAFE when empty, else the averaged gradient."""
    if not severities:
        return COLOR_SAFE
    return color_for(sum(severities) / len(severities))
