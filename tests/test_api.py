"""Tests for the HTTP layer, using FastAPI's TestClient."""

from datetime import timezone
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from stoploss.domain.settings import UserSettings
from stoploss.main import create_app
from stoploss.services.tracker import IncidentTracker
from stoploss.store.event_store import EventStore
from stoploss.store.slots import InMemoryKeyValueStore

from tests.test_event import _at


@pytest.fixture
def client() -> TestClient:
    store = EventStore(
        InMemoryKeyValueStore(),
        default_settings=UserSettings(stop_loss_limit=3, cooling_minutes=60),
    )
    tracker = IncidentTracker(store, tz=timezone.utc, months_back=1, days_back=2)
    return TestClient(create_app(tracker))


def _patched_now(ms: int):
    return patch("stoploss.foundation.clock.now_ms", return_value=ms)


class TestIncidentEndpoints:
    def test_log_and_list(self, client: TestClient) -> None:
        with _patched_now(_at(9)):
            resp = client.post("/api/incidents", json={"severity": 2, "note": "hi"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["accepted"] is True
        assert body["event"] == {"timestamp": _at(9), "severity": 2, "note": "hi"}

        listing = client.get("/api/incidents").json()
        assert listing["count"] == 1

    def test_cooldown_block_is_not_an_error(self, client: TestClient) -> None:
        with _patched_now(_at(9)):
            client.post("/api/incidents", json={"severity": 1})
        with _patched_now(_at(9, 30)):
            resp = client.post("/api/incidents", json={"severity": 1})
        assert resp.status_code == 200
        body = resp.json()
        assert body["accepted"] is False
        assert body["remaining"] == {"minutes": 30, "seconds": 0}

    def test_invalid_severity_rejected(self, client: TestClient) -> None:
        resp = client.post("/api/incidents", json={"severity": 7})
        assert resp.status_code == 422

    def test_reset(self, client: TestClient) -> None:
        with _patched_now(_at(9)):
            client.post("/api/incidents", json={"severity": 1})
        resp = client.delete("/api/incidents")
        assert resp.json() == {"status": "reset", "count": 0}
        assert client.get("/api/incidents").json()["count"] == 0


class TestSettingsAndStatus:
    def test_settings_round_trip(self, client: TestClient) -> None:
        assert client.get("/api/settings").json() == {"stop_loss_limit": 3, "cooling_minutes": 60}
        resp = client.put("/api/settings", json={"stop_loss_limit": "10", "cooling_minutes": "oops"})
        assert resp.json() == {"stop_loss_limit": 10, "cooling_minutes": 60}

    def test_status(self, client: TestClient) -> None:
        with _patched_now(_at(9)):
            client.post("/api/incidents", json={"severity": 3})
        status = client.get("/api/status").json()
        assert status["count"] == 1
        assert status["percent_text"] == "33.33%"
        assert status["limit_reached"] is False

    def test_health(self, client: TestClient) -> None:
        body = client.get("/health").json()
        assert body["status"] == "ok"
        assert body["incidents"] == 0


class TestHistoryEndpoints:
    def test_grid(self, client: TestClient) -> None:
        with _patched_now(_at(9)):
            client.post("/api/incidents", json={"severity": 3})
        with _patched_now(_at(12)):
            grid = client.get("/api/history/grid").json()
        jan = grid["months"][0]
        assert (jan["year"], jan["month"]) == (2026, 1)
        assert jan["days"][14]["count"] == 1
        assert jan["days"][14]["color"] == "#B71C1C"

    def test_timeline_days_back_param(self, client: TestClient) -> None:
        with _patched_now(_at(12)):
            tl = client.get("/api/history/timeline", params={"days_back": 5}).json()
        assert len(tl["days"]) == 5

    def test_timeline_rejects_bad_range(self, client: TestClient) -> None:
        assert client.get("/api/history/timeline", params={"days_back": 0}).status_code == 422

    def test_day_detail(self, client: TestClient) -> None:
        with _patched_now(_at(23, 30)):
            client.post("/api/incidents", json={"severity": 2, "note": "late"})
        day_start = _at(0) + 86_400_000
        detail = client.get(f"/api/history/day/{day_start}").json()
        assert detail["day_end"] == day_start + 86_400_000
        assert detail["cooling_minutes"] == 60
        assert len(detail["entries"]) == 1
        assert detail["entries"][0]["crosses_into_day"] is True

    def test_day_detail_negative_start(self, client: TestClient) -> None:
        assert client.get("/api/history/day/-1").status_code == 400
