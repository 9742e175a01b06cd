from datetime import datetime

import pytest

from taskberry.models.report import ReportType
from taskberry.models.task import Task
from taskberry.utils.reports import report_period_start

TARGET = "2030-01-01T00:00:00"


@pytest.mark.parametrize("now, report_type, expected", [
    (datetime(2026, 10, 14, 15, 30), ReportType.daily, datetime(2026, 10, 14)),
    (datetime(2026, 10, 14, 15, 30), ReportType.weekly, datetime(2026, 10, 11)),
    (datetime(2026, 10, 18, 9, 0), ReportType.weekly, datetime(2026, 10, 18)),
    (datetime(2026, 10, 14, 15, 30), ReportType.monthly, datetime(2026, 10, 1)),
])
def test_report_period_start(now, report_type, expected):
    assert report_period_start(report_type, now) == expected


@pytest.fixture
def tasks(client, seeded_db, headers):
    """One task in each manager's part of the organisation"""
    created = {}
    for actor_id, assignee_id in (("s1", "x1"), ("s3", "x4")):
        payload = {"title": f"Task for {assignee_id}", "assignee_id": assignee_id, "target_date": TARGET}
        response = client.post("/tasks/", json=payload, headers=headers(actor_id))
        assert response.status_code == 201
        created[assignee_id] = response.json()["id"]
    return created


def generate(client, headers, actor_id, report_type="daily", title="Daily summary"):
    return client.post("/reports/", json={"title": title, "type": report_type}, headers=headers(actor_id))


@pytest.mark.parametrize("actor_id", ["x1", "s1"])
def test_reports_need_manager_role(client, seeded_db, headers, actor_id):
    assert generate(client, headers, actor_id).status_code == 403
    assert client.get("/reports/", headers=headers(actor_id)).status_code == 403


def test_report_covers_only_visible_tasks(client, headers, tasks):
    response = generate(client, headers, "m1")
    assert response.status_code == 201
    data = response.json()
    assert data["created_by"] == "m1"
    assert data["task_ids"] == [tasks["x1"]]
    assert data["summary"] == {"total": 1, "completed": 0, "in_progress": 0, "not_started": 1, "overdue": 0}

    data = generate(client, headers, "a1").json()
    assert set(data["task_ids"]) == {tasks["x1"], tasks["x4"]}


def test_report_skips_tasks_updated_before_period(client, seeded_db, headers, tasks):
    task = seeded_db.get(Task, tasks["x1"])
    task.last_updated = datetime(2000, 1, 1)
    seeded_db.commit()

    data = generate(client, headers, "a1", report_type="monthly", title="Monthly").json()
    assert data["task_ids"] == [tasks["x4"]]


def test_report_detail_lists_tasks(client, headers, tasks):
    report_id = generate(client, headers, "m2").json()["id"]

    detail = client.get(f"/reports/{report_id}", headers=headers("m2")).json()
    assert [t["id"] for t in detail["tasks"]] == [tasks["x4"]]

    client.delete(f"/tasks/{tasks['x4']}", headers=headers("a1"))
    detail = client.get(f"/reports/{report_id}", headers=headers("m2")).json()
    assert detail["task_ids"] == [tasks["x4"]]
    assert detail["tasks"] == []


def test_reports_are_private_to_their_creator(client, headers, tasks):
    report_id = generate(client, headers, "m1").json()["id"]
    generate(client, headers, "m2")

    assert [r["id"] for r in client.get("/reports/", headers=headers("m1")).json()] == [report_id]
    assert len(client.get("/reports/", headers=headers("a1")).json()) == 2
    assert client.get(f"/reports/{report_id}", headers=headers("m2")).status_code == 403
    assert client.get(f"/reports/{report_id}", headers=headers("a1")).status_code == 200
    assert client.get("/reports/missing", headers=headers("m1")).status_code == 404


def test_report_request_validation(client, seeded_db, headers):
    assert generate(client, headers, "m1", title="  ").status_code == 422
    assert generate(client, headers, "m1", report_type="yearly").status_code == 422
