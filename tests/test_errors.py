import pytest
from sqlalchemy import exc as sa_exc

from attendance_tracker.exceptions import (
    DuplicateRecord,
    REQUIRED_FIELDS_MESSAGE,
    PoolTimeout,
    RecordValidationError,
    StoreError,
    translate_store_errors,
)
from attendance_tracker.routers.attendance import get_attendance_service
from conftest import make_payload


class BrokenService:
    def __init__(self, error):
        self.error = error

    async def list_records(self):
        raise self.error

    async def create_record(self, payload):
        raise self.error

    async def delete_record(self, record_id):
        raise self.error


def use_service(app, service):
    app.dependency_overrides[get_attendance_service] = lambda: service


def test_translate_integrity_error():
    with pytest.raises(DuplicateRecord):
        with translate_store_errors("Failed to record attendance"):
            raise sa_exc.IntegrityError(
                "INSERT", {}, Exception("UNIQUE constraint failed: Attendance.employeeID")
            )


def test_translate_pool_timeout():
    with pytest.raises(PoolTimeout) as excinfo:
        with translate_store_errors("Failed to fetch attendance records"):
            raise sa_exc.TimeoutError("QueuePool limit of size 10 overflow 0 reached")

    assert excinfo.value.status_code == 500
    assert excinfo.value.message == "Failed to fetch attendance records"
    assert "QueuePool limit" in excinfo.value.details


def test_translate_leaves_other_errors_alone():
    with pytest.raises(KeyError):
        with translate_store_errors("Failed to delete record"):
            raise KeyError("id")


def test_store_not_connected(offline_client):
    for method, url in (
        ("get", "/api/attendance"),
        ("post", "/api/attendance"),
        ("delete", "/api/attendance/1"),
    ):
        kwargs = {"json": make_payload()} if method == "post" else {}
        response = getattr(offline_client, method)(url, **kwargs)

        assert response.status_code == 500, url
        assert response.json() == {"success": False, "error": "Database not connected"}


def test_list_store_failure(app, offline_client):
    use_service(
        app, BrokenService(sa_exc.OperationalError("SELECT", {}, Exception("disk I/O error")))
    )

    response = offline_client.get("/api/attendance")

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Failed to fetch attendance records"
    assert "disk I/O error" in body["details"]


def test_create_duplicate_is_400(app, offline_client):
    use_service(
        app, BrokenService(
            sa_exc.IntegrityError(
                "INSERT", {}, Exception("duplicate key value violates unique constraint")
            )
        )
    )

    response = offline_client.post("/api/attendance", json=make_payload())

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Duplicate entry found"}


def test_create_pool_timeout_is_500(app, offline_client):
    use_service(app, BrokenService(sa_exc.TimeoutError("pool timed out")))

    response = offline_client.post("/api/attendance", json=make_payload())

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": "Failed to record attendance",
        "details": "pool timed out",
    }


def test_delete_store_failure(app, offline_client):
    use_service(
        app, BrokenService(sa_exc.OperationalError("DELETE", {}, Exception("locked")))
    )

    response = offline_client.delete("/api/attendance/3")

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to delete record"


def test_unexpected_error_uses_global_handler(app, offline_client):
    use_service(app, BrokenService(RuntimeError("boom")))

    response = offline_client.get("/api/attendance")

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": "Internal server error",
        "message": "boom",
    }


def test_store_error_defaults():
    error = StoreError()

    assert error.status_code == 500
    assert error.details is None


class UniqueViolation(Exception):
    sqlstate = "23505"


class NotNullViolation(Exception):
    sqlstate = "23502"


def test_unique_violation_by_sqlstate():
    with pytest.raises(DuplicateRecord):
        with translate_store_errors("Failed to record attendance"):
            raise sa_exc.IntegrityError("INSERT", {}, UniqueViolation("conflict"))


def test_unique_violation_by_mysql_error_code():
    with pytest.raises(DuplicateRecord):
        with translate_store_errors("Failed to record attendance"):
            raise sa_exc.IntegrityError(
                "INSERT", {}, Exception(1062, "Duplicate entry 'E1' for key 'uq'")
            )


@pytest.mark.parametrize(
    "orig",
    [
        NotNullViolation("null value in column"),
        Exception("NOT NULL constraint failed: Attendance.employeeName"),
        Exception(1452, "Cannot add or update a child row"),
    ],
)
def test_other_integrity_errors_are_store_errors(orig):
    with pytest.raises(StoreError) as excinfo:
        with translate_store_errors("Failed to record attendance"):
            raise sa_exc.IntegrityError("INSERT", {}, orig)

    assert not isinstance(excinfo.value, DuplicateRecord)
    assert excinfo.value.status_code == 500
    assert excinfo.value.message == "Failed to record attendance"


def test_create_integrity_failure_other_than_duplicate_is_500(app, offline_client):
    use_service(
        app,
        BrokenService(
            sa_exc.IntegrityError("INSERT", {}, Exception("CHECK constraint failed: status"))
        ),
    )

    response = offline_client.post("/api/attendance", json=make_payload())

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to record attendance"


def test_validation_error_class_feeds_the_envelope(client):
    error = RecordValidationError('Status must be "Present" or "Absent"')
    response = client.post("/api/attendance", json=make_payload(status="Late"))

    assert error.status_code == response.status_code == 400
    assert response.json() == {"success": False, "error": error.message}


def test_default_validation_message():
    assert RecordValidationError().message == REQUIRED_FIELDS_MESSAGE
