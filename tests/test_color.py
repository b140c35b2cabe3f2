"""Tests for severity colours and the averaged gradient."""

import pytest

from stoploss.domain.color import (
    COLOR_HIGH,
    COLOR_LOW,
    COLOR_MID,
    COLOR_SAFE,
    Color,
    color_for,
    day_color,
    lerp_color,
    severity_color,
)
from stoploss.domain.enums import Severity


class TestColor:
    def test_from_argb(self) -> None:
        c = Color.from_argb(0x80112233)
        assert (c.alpha, c.red, c.green, c.blue) == (0x80, 0x11, 0x22, 0x33)

    def test_hex_opaque(self) -> None:
        assert COLOR_SAFE.to_hex() == "#4CAF50"

    def test_hex_translucent(self) -> None:
        assert Color(red=0, green=0, blue=0, alpha=0).to_hex() == "#00000000"

    def test_channel_range_enforced(self) -> None:
        with pytest.raises(Exception):
            Color(red=256, green=0, blue=0)


class TestLerp:
    def test_endpoints(self) -> None:
        assert lerp_color(COLOR_LOW, COLOR_HIGH, 0.0) == COLOR_LOW
        assert lerp_color(COLOR_LOW, COLOR_HIGH, 1.0) == COLOR_HIGH

    def test_midpoint(self) -> None:
        a = Color(red=0, green=100, blue=200, alpha=255)
        b = Color(red=100, green=200, blue=0, alpha=255)
        assert lerp_color(a, b, 0.5) == Color(red=50, green=150, blue=100, alpha=255)


class TestGradient:
    def test_boundaries_hit_stops_exactly(self) -> None:
        assert color_for(1.0) == COLOR_LOW
        assert color_for(2.0) == COLOR_MID
        assert color_for(3.0) == COLOR_HIGH

    def test_out_of_range_is_clamped(self) -> None:
        assert color_for(0.0) == COLOR_LOW
        assert color_for(7.5) == COLOR_HIGH

    def test_continuous_between_stops(self) -> None:
        c = color_for(1.5)
        assert c == lerp_color(COLOR_LOW, COLOR_MID, 0.5)
        assert c not in (COLOR_LOW, COLOR_MID)

    def test_upper_half_uses_mid_to_high(self) -> None:
        assert color_for(2.5) == lerp_color(COLOR_MID, COLOR_HIGH, 0.5)

    def test_red_channel_monotonic(self) -> None:
        reds = [color_for(1.0 + i / 10).red for i in range(21)]
        assert reds == sorted(reds)


class TestDayAndSeverityColors:
    def test_empty_day_is_safe(self) -> None:
        assert day_color([]) == COLOR_SAFE

    def test_average_of_one_and_three_is_mid(self) -> None:
        assert day_color([1, 3]) == COLOR_MID

    def test_severity_palette(self) -> None:
        assert severity_color(Severity.LOW) == COLOR_LOW
        assert severity_color(Severity.MEDIUM) == COLOR_MID
        assert severity_color(Severity.HIGH) == COLOR_HIGH
