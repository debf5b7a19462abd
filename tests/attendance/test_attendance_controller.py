from __future__ import annotations

from datetime import date, datetime

import pytest
from flask import Flask

from staff_attendance.attendance import service as service_module
from staff_attendance.attendance.controller import register
from staff_attendance.container import build_container
from staff_attendance.core.enums import ShiftType
from staff_attendance.core.exceptions import ConfigurationError, PersistenceError
from staff_attendance.main import create_app
from staff_attendance.notifications.dispatcher import InMemoryNotificationDispatcher
from staff_attendance.staff.model import StaffMember


@pytest.fixture
def container(policy, make_shift):
    c = build_container(policy=policy, backend="memory", dispatcher=InMemoryNotificationDispatcher())
    c.staff_repo.add(StaffMember(staff_id="s-1", name="Jane Doe", email="jane@example.com", role="RN", department="ICU"))
    c.shifts_repo.add(make_shift("sh-1", shift_date=date(2024, 3, 5)))
    c.shifts_repo.add(make_shift("rec-1", shift_date=date(2024, 3, 9), shift_type=ShiftType.RECOVERY))
    return c


@pytest.fixture
def client(container, monkeypatch):
    monkeypatch.setattr(service_module, "now_local", lambda: datetime(2024, 3, 5, 7, 40))
    app = Flask(__name__)
    app.config["TESTING"] = True
    register(app, container)
    return app.test_client()


def test_clock_in_tardy_dispatches_alert(client, container):
    resp = client.post("/api/shifts/sh-1/clock-in", json={"staff_id": "s-1"})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["record"]["status"] == "TARDY"
    assert body["record"]["tardy_minutes"] == 40
    assert body["notifications"] == {"sent": 1, "suppressed": 0, "failed": 0}
    assert len(container.dispatcher.outbox("s-1")) == 1


def test_duplicate_action_is_conflict(client):
    client.post("/api/shifts/sh-1/clock-in", json={"staff_id": "s-1"})

    resp = client.post("/api/shifts/sh-1/no-call-no-show", json={"staff_id": "s-1"})

    assert resp.status_code == 409
    assert resp.get_json()["success"] is False


def test_call_off_without_reason_is_rejected(client):
    resp = client.post("/api/shifts/sh-1/call-off", json={"staff_id": "s-1", "reason": ""})

    assert resp.status_code == 409


def test_cancel_short_notice(client, container):
    resp = client.post("/api/shifts/sh-1/cancel", json={"staff_id": "s-1", "reason": "Car trouble"})

    body = resp.get_json()
    assert resp.status_code == 200
    assert body["has_notice"] is False
    assert body["record"]["points"] == container.policy.called_off.without_approval


def test_swap_and_recovery_routes(client):
    swap = client.post("/api/shifts/sh-1/swap", json={"staff_id": "s-1", "target_staff_id": "s-2"})
    recovery = client.post("/api/shifts/rec-1/recovery", json={"staff_id": "s-1"})

    assert swap.get_json()["record"]["is_swapped"] is True
    assert recovery.get_json()["record"]["points"] < 0


def test_unknown_shift_and_missing_staff(client):
    assert client.post("/api/shifts/nope/clock-in", json={"staff_id": "s-1"}).status_code == 404
    assert client.post("/api/shifts/sh-1/clock-in", json={}).status_code == 400


def test_points_summary(client):
    client.post("/api/shifts/sh-1/no-call-no-show", json={"staff_id": "s-1"})

    resp = client.get("/api/staff/s-1/points?as_of=2024-03-06")

    body = resp.get_json()
    assert body["total"] == 4
    assert body["level"] == "WARNING"
    assert client.get("/api/staff/s-1/points?as_of=bad").status_code == 400
    assert client.get("/api/staff/ghost/points").status_code == 404


def test_persistence_failure_is_service_unavailable(client, container, monkeypatch):
    def boom(record):
        raise PersistenceError("down")

    monkeypatch.setattr(container.attendance_repo, "create", boom)

    resp = client.post("/api/shifts/sh-1/no-call-no-show", json={"staff_id": "s-1"})

    assert resp.status_code == 503
    assert container.dispatcher.outbox() == []


def test_create_app_with_testing_settings(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")

    app = create_app()

    assert app.config["TESTING"] is True
    assert app.test_client().get("/api/staff/ghost/points").status_code == 404


def test_broken_policy_file_aborts_startup(monkeypatch, tmp_path):
    import config.testing

    broken = tmp_path / "policy.json"
    broken.write_text('{"ATTENDANCE_RULES": {"ON_TIME": {}}}', encoding="utf-8")
    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setattr(config.testing, "ATTENDANCE_POLICY_FILE", str(broken))

    with pytest.raises(ConfigurationError):
        create_app()
