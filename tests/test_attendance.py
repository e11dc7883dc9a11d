"""
Tests for the attendance ledger endpoints.
"""

import pytest
from fastapi.testclient import TestClient
from sqlmodel import select

from hr_service.models import Attendance
from hr_service.models.common import MAX_LIMIT, MAX_PAGE


def test_create_attendance(client, create_employee, check_in):
    employee = create_employee()

    response = check_in(employee["id"], "2025-08-01", "09:50:00")

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Attendance recorded successfully"
    assert body["data"]["id"] > 0
    assert body["data"]["employee_id"] == employee["id"]
    assert body["data"]["date"] == "2025-08-01"
    assert body["data"]["check_in_time"] == "09:50:00"


def test_check_in_time_accepts_hours_and_minutes(client, create_employee, check_in):
    employee = create_employee()

    response = check_in(employee["id"], "2025-08-01", "08:05")

    assert response.status_code == 201
    assert response.json()["data"]["check_in_time"] == "08:05:00"


def test_second_check_in_overwrites_time(client, create_employee, check_in, db_session):
    employee = create_employee()

    first = check_in(employee["id"], "2025-08-01", "09:00:00").json()["data"]
    second = check_in(employee["id"], "2025-08-01", "10:15:00").json()["data"]

    assert second["id"] == first["id"]
    assert second["check_in_time"] == "10:15:00"

    rows = db_session.exec(
        select(Attendance).where(Attendance.employee_id == employee["id"])
    ).all()
    assert len(rows) == 1
    assert rows[0].check_in_time.isoformat() == "10:15:00"


def test_check_in_for_unknown_employee(client, check_in, db_session):
    response = check_in(404, "2025-08-01", "09:00:00")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Employee not found"}
    assert db_session.exec(select(Attendance)).all() == []


def test_check_in_for_deleted_employee(client, auth_headers, create_employee, check_in, db_session):
    employee = create_employee()
    client.delete(f"/employees/{employee['id']}", headers=auth_headers)

    response = check_in(employee["id"], "2025-08-01", "09:00:00")

    assert response.status_code == 404
    assert response.json()["message"] == "Employee not found"
    assert db_session.exec(select(Attendance)).all() == []


def test_create_attendance_validation(client, auth_headers, create_employee):
    employee = create_employee()

    missing = client.post(
        "/attendance",
        json={"employee_id": employee["id"], "date": "2025-08-01"},
        headers=auth_headers,
    )
    bad_time = client.post(
        "/attendance",
        json={"employee_id": employee["id"], "date": "2025-08-01", "check_in_time": "25:99"},
        headers=auth_headers,
    )

    assert missing.status_code == 400
    assert missing.json()["message"] == "check_in_time: Field required"
    assert bad_time.status_code == 400
    assert bad_time.json()["message"].startswith("check_in_time:")


@pytest.mark.parametrize(
    "check_in_time",
    ["09:40:00+05:00", "09:40Z", "09:45:00.000001", "9:40", "09:40:0", "0940", "24:00"],
)
def test_check_in_time_must_be_wall_clock(
    client, auth_headers, create_employee, check_in, db_session, check_in_time
):
    """Test that offsets, fractions and loose formats are rejected, not coerced."""
    # Arrange
    employee = create_employee()

    # Act
    response = check_in(employee["id"], "2025-08-01", check_in_time)

    # Assert
    assert response.status_code == 400
    assert response.json()["message"] == (
        "check_in_time: Check-in time must be in HH:MM or HH:MM:SS format"
    )
    assert db_session.exec(select(Attendance)).all() == []


def test_update_rejects_check_in_time_with_offset(
    client, auth_headers, create_employee, check_in
):
    employee = create_employee()
    record = check_in(employee["id"], "2025-08-01", "09:00:00").json()["data"]

    response = client.put(
        f"/attendance/{record['id']}",
        json={"check_in_time": "09:40:00+05:00"},
        headers=auth_headers,
    )
    stored = client.get(f"/attendance/{record['id']}", headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["message"].startswith("check_in_time:")
    assert stored.json()["data"]["check_in_time"] == "09:00:00"


def test_history_survives_employee_deletion(client, auth_headers, create_employee, check_in):
    employee = create_employee()
    record = check_in(employee["id"], "2025-08-01", "09:00:00").json()["data"]
    client.delete(f"/employees/{employee['id']}", headers=auth_headers)

    response = client.get(f"/attendance/{record['id']}", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["data"] == record


def test_get_missing_attendance(client, auth_headers):
    response = client.get("/attendance/12345", headers=auth_headers)

    assert response.status_code == 404
    assert response.json() == {
        "success": False,
        "message": "Attendance record not found",
    }


def test_list_attendance_filters_and_order(client, auth_headers, create_employee, check_in):
    ada = create_employee(name="Ada")
    grace = create_employee(name="Grace")
    check_in(ada["id"], "2025-07-31", "09:00:00")
    check_in(ada["id"], "2025-08-01", "09:10:00")
    check_in(ada["id"], "2025-08-03", "09:20:00")
    check_in(grace["id"], "2025-08-01", "09:30:00")

    everything = client.get("/attendance", headers=auth_headers).json()
    by_employee = client.get(
        f"/attendance?employee_id={ada['id']}", headers=auth_headers
    ).json()
    by_date = client.get("/attendance?date=2025-08-01", headers=auth_headers).json()
    by_range = client.get(
        "/attendance?from=2025-08-01&to=2025-08-02", headers=auth_headers
    ).json()

    assert everything["message"] == "Attendance records fetched successfully"
    assert [r["date"] for r in everything["data"]] == [
        "2025-08-03",
        "2025-08-01",
        "2025-08-01",
        "2025-07-31",
    ]
    assert everything["meta"] == {"page": 1, "limit": 10, "total": 4, "totalPages": 1}
    assert by_employee["meta"]["total"] == 3
    assert {r["employee_id"] for r in by_employee["data"]} == {ada["id"]}
    assert {r["employee_id"] for r in by_date["data"]} == {ada["id"], grace["id"]}
    assert {r["date"] for r in by_range["data"]} == {"2025-08-01"}
    assert by_range["meta"]["total"] == 2


def test_list_attendance_page_beyond_last(client, auth_headers, create_employee, check_in):
    employee = create_employee()
    for day in range(1, 4):
        check_in(employee["id"], f"2025-08-0{day}", "09:00:00")

    body = client.get("/attendance?page=5&limit=2", headers=auth_headers).json()

    assert body["data"] == []
    assert body["meta"] == {"page": 5, "limit": 2, "total": 3, "totalPages": 2}


@pytest.mark.parametrize("path", ["/attendance", "/employees"])
def test_huge_page_is_a_validation_error(client, auth_headers, path):
    response = client.get(f"{path}?page=99999999999999999999", headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["message"].startswith("page:")


def test_largest_page_is_empty(client, auth_headers, create_employee, check_in):
    employee = create_employee()
    check_in(employee["id"], "2025-08-01", "09:00:00")

    body = client.get(
        f"/attendance?page={MAX_PAGE}&limit={MAX_LIMIT}", headers=auth_headers
    ).json()

    assert body["success"] is True
    assert body["data"] == []
    assert body["meta"]["total"] == 1


def test_update_attendance(client, auth_headers, create_employee, check_in):
    employee = create_employee()
    record = check_in(employee["id"], "2025-08-01", "09:00:00").json()["data"]

    response = client.put(
        f"/attendance/{record['id']}",
        json={"check_in_time": "09:46:00"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Attendance record updated successfully"
    assert body["data"]["check_in_time"] == "09:46:00"
    assert body["data"]["date"] == "2025-08-01"


def test_update_attendance_requires_a_field(client, auth_headers, create_employee, check_in):
    employee = create_employee()
    record = check_in(employee["id"], "2025-08-01", "09:00:00").json()["data"]

    response = client.put(f"/attendance/{record['id']}", json={}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "At least one field must be provided"


def test_update_missing_attendance(client, auth_headers):
    response = client.put(
        "/attendance/999", json={"check_in_time": "09:00"}, headers=auth_headers
    )

    assert response.status_code == 404


def test_update_onto_existing_day_is_an_unhandled_error(
    app, auth_headers, create_employee, check_in
):
    employee = create_employee()
    check_in(employee["id"], "2025-08-01", "09:00:00")
    second = check_in(employee["id"], "2025-08-02", "09:00:00").json()["data"]

    # Not entered as a context manager: the running client already owns the lifespan
    raw_client = TestClient(app, raise_server_exceptions=False)
    response = raw_client.put(
        f"/attendance/{second['id']}",
        json={"date": "2025-08-01"},
        headers=auth_headers,
    )

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Internal server error"}


def test_delete_attendance_is_permanent(client, auth_headers, create_employee, check_in, db_session):
    employee = create_employee()
    record = check_in(employee["id"], "2025-08-01", "09:00:00").json()["data"]

    response = client.delete(f"/attendance/{record['id']}", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Attendance record deleted successfully",
    }
    assert db_session.get(Attendance, record["id"]) is None
    assert client.delete(f"/attendance/{record['id']}", headers=auth_headers).status_code == 404
