from __future__ import annotations

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from conftest import ManualScheduler
from scrapedash.app.main import create_app
from scrapedash.core.config.settings import AppSettings


@pytest.fixture
def client(scheduler: ManualScheduler) -> Iterator[TestClient]:
    cfg = AppSettings(_env_file=None, tick_interval_seconds=2.0, toast_ttl_seconds=60.0)
    app = create_app(app_settings=cfg, ticker_factory=scheduler)
    with TestClient(app) as c:
        yield c


def test_health(client: TestClient) -> None:
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "environment": "local"}


def test_initial_dashboard(client: TestClient) -> None:
    body = client.get("/api/run").json()

    assert body["phase"] == "stopped"
    assert body["is_running"] is False
    assert body["is_paused"] is False
    assert body["work_count"] == 0
    assert body["status_message"] == "Ready to start"
    assert body["elapsed"] == "00:00:00"
    assert body["badge"] == {"label": "Stopped", "variant": "secondary"}
    assert body["buttons"]["primary_label"] == "Start"
    assert body["buttons"]["pause_enabled"] is False
    assert body["recent_log"][0].endswith(": Application initialized")
    assert body["toasts"] == []


def test_run_lifecycle_over_http(client: TestClient, scheduler: ManualScheduler) -> None:
    body = client.post("/api/run/start").json()
    assert body["phase"] == "running"
    assert body["buttons"]["primary_enabled"] is False
    assert [t["message"] for t in body["toasts"]] == ["Scraping started"]

    scheduler.advance(4.0)
    body = client.get("/api/run").json()
    assert body["work_count"] == 2
    assert body["status_message"] == "Processing unit 2..."
    assert body["recent_log"][0].endswith(": Unit 2 created")

    body = client.post("/api/run/pause").json()
    assert body["phase"] == "paused"
    assert body["badge"]["label"] == "Paused"
    assert body["buttons"]["primary_label"] == "Resume"

    scheduler.advance(6.0)
    assert client.get("/api/run").json()["work_count"] == 2

    body = client.post("/api/run/primary").json()
    assert body["phase"] == "running"
    scheduler.advance(2.0)
    assert client.get("/api/run").json()["work_count"] == 3

    body = client.post("/api/run/stop").json()
    assert body["phase"] == "stopped"
    assert body["elapsed"] == "00:00:00"
    assert scheduler.active_count == 0


def test_invalid_commands_are_noops(client: TestClient) -> None:
    before = client.get("/api/run").json()

    for path in ("/api/run/pause", "/api/run/resume"):
        r = client.post(path)
        assert r.status_code == 200
        assert r.json()["recent_log"] == before["recent_log"]
        assert r.json()["phase"] == "stopped"


def test_full_log_endpoint(client: TestClient, scheduler: ManualScheduler) -> None:
    client.post("/api/run/start")
    scheduler.advance(2.0)
    client.post("/api/run/stop")

    entries = client.get("/api/run/log").json()["entries"]
    assert [e["message"] for e in entries] == [
        "Application initialized",
        "Scraping started",
        "Unit 1 created",
        "Scraping stopped",
    ]
    assert entries[2]["text"].endswith(": Unit 1 created")


def test_audit_events_endpoint(client: TestClient, scheduler: ManualScheduler) -> None:
    client.post("/api/run/pause")
    client.post("/api/run/start")
    scheduler.advance(2.0)

    events = client.get("/api/run/events").json()["events"]
    assert [e["event_type"] for e in events] == [
        "run.command_ignored",
        "run.started",
        "run.work_unit_created",
    ]
    assert events[0]["data"] == {"command": "pause", "phase": "stopped"}
    assert events[2]["data"] == {"work_count": 1}


def test_dismiss_toast(client: TestClient) -> None:
    toast_id = client.post("/api/run/start").json()["toasts"][0]["id"]

    assert client.delete(f"/api/run/toasts/{toast_id}").status_code == 204
    assert client.get("/api/run").json()["toasts"] == []

    # unknown id
    assert client.delete("/api/run/toasts/12345").status_code == 204


def test_shutdown_releases_ticker(scheduler: ManualScheduler) -> None:
    cfg = AppSettings(_env_file=None)
    app = create_app(app_settings=cfg, ticker_factory=scheduler)

    with TestClient(app) as c:
        c.post("/api/run/start")
        assert scheduler.active_count == 1

    assert scheduler.active_count == 0
