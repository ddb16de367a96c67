import datetime  # Import module to avoid name collision with the field 'date'
import re
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_core import PydanticCustomError

from attendance_tracker.exceptions import REQUIRED_FIELDS_MESSAGE
from attendance_tracker.models.attendance import AttendanceStatus

REQUIRED_FIELDS = ("employeeName", "employeeID", "date", "status")
DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _reject(message: str):
    return PydanticCustomError("attendance_payload", message)


# --- Base Schema ---
class AttendancePayload(BaseModel):
    employee_name: str = Field(alias="employeeName", examples=["Alice Smith"])
    employee_id: str = Field(alias="employeeID", examples=["E1"])
    date: datetime.date = Field(examples=["2024-03-01"])
    status: AttendanceStatus

    model_config = ConfigDict(populate_by_name=True)


# --- Create Schema (Input) ---
class AttendanceCreate(AttendancePayload):
    """Incoming attendance entry.

    Values are kept as submitted so the response can echo them back;
    trimming happens when the row is written.
    """

    @model_validator(mode="before")
    @classmethod
    def check_payload(cls, data: Any) -> Any:
        # Rules run in order and the first failure is reported.
        if not isinstance(data, dict):
            raise _reject(REQUIRED_FIELDS_MESSAGE)
        if any(_is_blank(data.get(field)) for field in REQUIRED_FIELDS):
            raise _reject(REQUIRED_FIELDS_MESSAGE)

        if not isinstance(data["employeeName"], str) or not isinstance(
            data["employeeID"], str
        ):
            raise _reject("employeeName and employeeID must be strings")

        if data["status"] not in [s.value for s in AttendanceStatus]:
            raise _reject('Status must be "Present" or "Absent"')

        raw_date = data["date"]
        if not isinstance(raw_date, str) or not DATE_PATTERN.fullmatch(raw_date):
            raise _reject("Date must be in YYYY-MM-DD format")
        try:
            datetime.date.fromisoformat(raw_date)
        except ValueError:
            raise _reject("Date must be a valid calendar date")

        return data


# --- Read Schema (Output) ---
class AttendanceRead(BaseModel):
    id: int
    employee_name: str = Field(alias="employeeName")
    employee_id: str = Field(alias="employeeID")
    date: datetime.date
    status: AttendanceStatus
    created_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


# --- Envelopes ---
class AttendanceList(BaseModel):
    success: bool = True
    data: List[AttendanceRead]
    count: int


class AttendanceCreated(BaseModel):
    success: bool = True
    message: str = "Attendance recorded successfully"
    id: int
    data: AttendancePayload


class MessageResponse(BaseModel):
    success: bool = True
    message: str
