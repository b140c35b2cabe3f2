"""Tests for UserSettings and the application Settings."""

import pytest

from stoploss.config import Settings
from stoploss.domain.settings import UserSettings


class TestUserSettings:
    def test_defaults(self) -> None:
        s = UserSettings()
        assert s.stop_loss_limit == 50
        assert s.cooling_minutes == 60

    def test_negative_values_clamped(self) -> None:
        s = UserSettings(stop_loss_limit=-3, cooling_minutes=-1)
        assert s.stop_loss_limit == 0
        assert s.cooling_minutes == 0

    def test_form_input_parses_text(self) -> None:
        s = UserSettings().apply_form_input("20", " 15 ")
        assert s == UserSettings(stop_loss_limit=20, cooling_minutes=15)

    @pytest.mark.parametrize("bad", ["", "abc", "1.5", None])
    def test_non_numeric_input_keeps_previous(self, bad) -> None:
        current = UserSettings(stop_loss_limit=7, cooling_minutes=9)
        assert current.apply_form_input(bad, bad) == current

    def test_negative_form_input_clamped(self) -> None:
        s = UserSettings().apply_form_input("-5", -2)
        assert s == UserSettings(stop_loss_limit=0, cooling_minutes=0)

    def test_zero_is_valid(self) -> None:
        s = UserSettings().apply_form_input("0", "0")
        assert s == UserSettings(stop_loss_limit=0, cooling_minutes=0)


class TestAppSettings:
    def test_env_prefix(self, monkeypatch) -> None:
        monkeypatch.setenv("STOPLOSS_DEFAULT_COOLING_MINUTES", "5")
        monkeypatch.setenv("STOPLOSS_TIMEZONE", "UTC")
        s = Settings()
        assert s.default_cooling_minutes == 5
        assert s.timezone == "UTC"

    def test_defaults(self) -> None:
        s = Settings()
        assert s.grid_months_back == 12
        assert s.timeline_days_back == 60
        assert s.default_stop_loss_limit == 50
