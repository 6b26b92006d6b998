import json

import pytest

pytest.importorskip("fastapi")

from fastapi.testclient import TestClient

from dharmacal.app import create_app
from dharmacal.services.panchanga_cache import PanchangaCache

from conftest import FakeEngine


def _client(engine=None):
    engine = engine or FakeEngine()
    app = create_app(engine=engine, cache=PanchangaCache(max_size=365, ttl_seconds=3600))
    return TestClient(app), engine


def test_single_date_uses_default_place():
    client, engine = _client()
    response = client.get("/v1/daily-info?date=2025-01-14")
    assert response.status_code == 200, response.text
    payload = response.json()
    assert payload["date"] == "2025-01-14"
    assert payload["location"]["name"] == "Den Haag"
    assert payload["location"]["tz"] == "Europe/Amsterdam"
    assert engine.calls == [("2025-01-14", "Europe/Amsterdam")]


def test_explicit_place_and_timezone():
    client, engine = _client()
    response = client.get("/v1/daily-info?date=2025-01-14&lat=28.6139&lon=77.209&tz=Asia/Kolkata&name=Delhi")
    assert response.status_code == 200
    payload = response.json()
    assert payload["location"]["name"] == "Delhi"
    assert payload["location"]["tz"] == "Asia/Kolkata"


def test_missing_tz_is_inferred_from_coordinates():
    client, _ = _client()
    response = client.get("/v1/daily-info?date=2025-01-14&lat=28.6139&lon=77.209")
    assert response.status_code == 200
    assert response.json()["location"]["tz"] == "Asia/Kolkata"


def test_range_returns_list_in_order():
    client, _ = _client()
    response = client.get("/v1/daily-info?start=2025-01-30&end=2025-02-02")
    assert response.status_code == 200
    assert [day["date"] for day in response.json()] == ["2025-01-30", "2025-01-31", "2025-02-01", "2025-02-02"]


def test_repeated_requests_hit_cache():
    client, engine = _client()
    client.get("/v1/daily-info?date=2025-01-14")
    client.get("/v1/daily-info?date=2025-01-14")
    assert len(engine.calls) == 1


def test_without_date_returns_today():
    client, engine = _client()
    response = client.get("/v1/daily-info")
    assert response.status_code == 200
    assert len(engine.calls) == 1


@pytest.mark.parametrize(
    "query",
    [
        "date=2025-02-30",
        "date=tomorrow",
        "start=2025-02-01&end=2025-01-01",
        "start=2025-01-01&end=2025-06-01",
        "start=2025-01-01",
        "date=2025-01-14&tz=Nowhere/Special",
    ],
)
def test_bad_requests_return_400(query):
    client, engine = _client()
    response = client.get(f"/v1/daily-info?{query}")
    assert response.status_code == 400
    assert engine.calls == []


def test_ninety_day_range_is_allowed():
    client, _ = _client()
    response = client.get("/v1/daily-info?start=2025-01-01&end=2025-03-31")
    assert response.status_code == 200
    assert len(response.json()) == 90


def test_engine_failure_returns_502():
    client, _ = _client(FakeEngine(fail_on={"2025-01-14"}))
    response = client.get("/v1/daily-info?date=2025-01-14")
    assert response.status_code == 502


def test_health_reports_cache_size():
    client, _ = _client()
    client.get("/v1/daily-info?date=2025-01-14")
    response = client.get("/v1/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "healthy"
    assert payload["checks"]["panchanga_cache"]["size"] == 1


def test_request_log_line_when_logging_enabled(monkeypatch, capsys):
    monkeypatch.setenv("LOGGING_ENABLED", "true")
    client, _ = _client()
    client.get("/v1/daily-info?date=2025-01-14")

    lines = [line for line in capsys.readouterr().out.splitlines() if line.startswith("{")]
    record = json.loads(lines[-1])
    assert record["endpoint"] == "/v1/daily-info"
    assert record["status"] == 200
    assert record["params"] == {"date": "2025-01-14"}
    assert record["cache_size"] == 1
