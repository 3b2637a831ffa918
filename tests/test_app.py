from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from src.tutoring_attendance.tutoring_attendance.attendance.model import AttendanceReportRow, Lesson
from src.tutoring_attendance.tutoring_attendance.container import wire
from src.tutoring_attendance.tutoring_attendance.core.enums import AttendanceStatus, PolicyScope
from src.tutoring_attendance.tutoring_attendance.finance.model import Teacher
from src.tutoring_attendance.tutoring_attendance.main import create_app
from tests.fakes import (
    InMemoryAttendanceRepository,
    InMemoryFinanceRepository,
    InMemoryPolicyRepository,
    InMemorySchoolDirectory,
    make_policy,
)


def _report_row(student, status):
    return AttendanceReportRow(
        lesson_id="L1",
        lesson_date=datetime(2024, 3, 4, 15, 0),
        student_id=student,
        student_name=f"Student {student}",
        class_id="c1",
        class_name="Math",
        school_id="s1",
        school_name="North",
        teacher_name="Ana Lopez",
        status=status,
    )


@pytest.fixture
def repos():
    return {
        "policies_repo": InMemoryPolicyRepository(
            [make_policy("g1", name="Global", scope=PolicyScope.GLOBAL, late_tolerance_minutes=10)]
        ),
        "school_directory": InMemorySchoolDirectory({"c1": "s1"}, rosters={"c1": {"st1", "st2"}}),
        "attendance_repo": InMemoryAttendanceRepository(
            [_report_row("st1", AttendanceStatus.PRESENT), _report_row("st2", AttendanceStatus.ABSENT)]
        ),
        "finance_repo": InMemoryFinanceRepository(
            teachers=[Teacher("t1", "Ana Lopez", "ana@example.org", Decimal("20"))],
            lessons=[Lesson("L1", "c1", "t1", datetime(2024, 3, 4, 15, 0), Decimal("1.5"))],
        ),
    }


@pytest.fixture
def client(repos, monkeypatch, restore_logging):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=wire(**repos))
    return app.test_client()


def test_list_policies(client):
    resp = client.get("/api/attendance-policies")
    assert resp.status_code == 200
    assert [p["id"] for p in resp.get_json()["policies"]] == ["g1"]


def test_create_policy_then_resolve_it(client):
    resp = client.post(
        "/api/attendance-policies",
        json={
            "name": "North rules",
            "scope": "school",
            "schoolId": "s1",
            "concernThreshold": 75,
            "lateToleranceMinutes": 5,
            "maxAbsences": 4,
            "autoExcuseEnabled": True,
            "autoExcuseReasons": ["Sick", "Trip"],
        },
    )
    assert resp.status_code == 201
    created = resp.get_json()["policy"]
    assert created["scope"] == "SCHOOL"
    assert created["autoExcuseReasons"] == ["Sick", "Trip"]

    resp = client.get("/api/attendance-policies/effective?classId=c1")
    body = resp.get_json()
    assert body["policy"]["id"] == created["id"]
    assert body["isDefault"] is False


def test_create_policy_validation_error(client):
    resp = client.post("/api/attendance-policies", json={"name": "x", "scope": "GLOBAL", "concernThreshold": 150})
    assert resp.status_code == 400
    assert "Concern threshold" in resp.get_json()["error"]


def test_effective_policy_errors(client):
    assert client.get("/api/attendance-policies/effective").status_code == 400
    resp = client.get("/api/attendance-policies/effective?classId=zzz")
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "Class not found: zzz"}


def test_effective_policy_default(repos, monkeypatch, restore_logging):
    monkeypatch.setenv("APP_ENV", "testing")
    repos["policies_repo"] = InMemoryPolicyRepository()
    client = create_app(container=wire(**repos)).test_client()

    body = client.get("/api/attendance-policies/effective?classId=c1&at=2024-03-01T10:00:00").get_json()
    assert body["isDefault"] is True
    assert body["policy"]["id"] == "default"
    assert body["policy"]["effectiveFrom"] is None


def test_record_lesson(client, repos):
    resp = client.post(
        "/api/lessons",
        json={
            "teacherId": "t1",
            "classId": "c1",
            "lessonDate": "2024-03-11T15:00:00",
            "hoursWorked": 1.5,
            "attendance": {
                "st1": {"status": "PRESENT", "arrivalMinutes": 12},
                "st2": "ABSENT",
                "ghost": "PRESENT",
            },
        },
    )
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["lesson"]["hoursWorked"] == "1.5"
    assert body["policy"] == {"id": "g1", "name": "Global"}
    assert [(a["studentId"], a["status"]) for a in body["attendance"]] == [("st1", "LATE"), ("st2", "ABSENT")]
    assert body["droppedStudentIds"] == ["ghost"]
    assert repos["attendance_repo"].write_calls == 1


def test_record_lesson_rejects_bad_payload(client, repos):
    assert client.post("/api/lessons", json=["nope"]).status_code == 400
    resp = client.post("/api/lessons", json={"teacherId": "t1", "classId": "c1", "hoursWorked": 1})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "lessonDate is required"
    assert repos["attendance_repo"].write_calls == 0


def test_attendance_report_json(client):
    resp = client.post("/api/reports/attendance", json={"startDate": "2024-03-01", "endDate": "2024-03-31"})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["summary"]["totalRecords"] == 2
    assert body["summary"]["overallAttendanceRate"] == "50.00"
    assert [c["studentId"] for c in body["analytics"]["concernStudents"]] == ["st2"]


def test_attendance_report_csv(client):
    resp = client.post(
        "/api/reports/attendance",
        json={"startDate": "2024-03-01", "endDate": "2024-03-31", "format": "csv"},
    )
    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert 'filename="attendance-report-2024-03-01-2024-03-31.csv"' in resp.headers["Content-Disposition"]
    assert resp.get_data(as_text=True).startswith('"Date","Student Name"')


def test_report_rejects_bad_dates(client):
    resp = client.post("/api/reports/attendance", json={"startDate": "2024-03-31", "endDate": "2024-03-01"})
    assert resp.status_code == 400
    resp = client.post("/api/reports/financial", json={"startDate": "March", "endDate": "2024-03-01"})
    assert resp.status_code == 400
    resp = client.post(
        "/api/reports/financial",
        json={"startDate": "2024-03-01", "endDate": "2024-03-31", "reportType": "profit"},
    )
    assert resp.status_code == 400


def test_financial_report_summary(client):
    resp = client.post("/api/reports/financial", json={"startDate": "2024-03-01", "endDate": "2024-03-31"})
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["metadata"]["subType"] == "summary"
    assert body["summary"]["netMargin"] == "0.00"


def test_calculate_wages(client, repos):
    resp = client.post("/api/finances/wages/calculate", json={"month": 3, "year": 2024})
    assert resp.status_code == 200
    records = resp.get_json()["records"]
    assert [(r["teacherId"], r["totalAmount"]) for r in records] == [("t1", "30.0")]
    assert len(repos["finance_repo"].upserted) == 1


def test_unexpected_error_is_500(repos, monkeypatch, restore_logging):
    class Broken(InMemoryAttendanceRepository):
        def get_report_rows(self, **kwargs):
            raise RuntimeError("db down")

    monkeypatch.setenv("APP_ENV", "testing")
    repos["attendance_repo"] = Broken()
    client = create_app(container=wire(**repos)).test_client()

    resp = client.post("/api/reports/attendance", json={"startDate": "2024-03-01", "endDate": "2024-03-31"})
    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Internal server error"}


def test_unknown_route_is_json_404(client):
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert "error" in resp.get_json()


def _local(utc_naive):
    return utc_naive.replace(tzinfo=timezone.utc).astimezone().replace(tzinfo=None)


def test_effective_policy_accepts_offset_timestamp(client):
    resp = client.get(
        "/api/attendance-policies/effective",
        query_string={"classId": "c1", "at": "2024-03-15T10:00:00+00:00"},
    )
    assert resp.status_code == 200
    assert resp.get_json()["policy"]["id"] == "g1"


def test_policy_with_utc_effective_from_still_resolves(client):
    resp = client.post(
        "/api/attendance-policies",
        json={
            "name": "North rules",
            "scope": "SCHOOL",
            "schoolId": "s1",
            "concernThreshold": 75,
            "lateToleranceMinutes": 5,
            "maxAbsences": 4,
            "effectiveFrom": "2024-01-01T00:00:00Z",
        },
    )
    assert resp.status_code == 201
    created = resp.get_json()["policy"]
    assert created["effectiveFrom"] == _local(datetime(2024, 1, 1)).isoformat()

    resp = client.get("/api/attendance-policies/effective?classId=c1")
    assert resp.status_code == 200
    assert resp.get_json()["policy"]["id"] == created["id"]

    resp = client.get("/api/attendance-policies/effective", query_string={"classId": "c1", "at": "2024-06-01T00:00:00Z"})
    assert resp.status_code == 200
    assert resp.get_json()["policy"]["id"] == created["id"]
