import re

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_tracker.database import get_db
from attendance_tracker.exceptions import (
    InvalidRecordId,
    RecordNotFound,
    translate_store_errors,
)
from attendance_tracker.schemas.attendance import (
    AttendanceCreate,
    AttendanceCreated,
    AttendanceList,
    AttendanceRead,
    MessageResponse,
)
from attendance_tracker.services.attendance import AttendanceService

router = APIRouter(prefix="/api/attendance", tags=["attendance"])

RECORD_ID_PATTERN = re.compile(r"-?[0-9]+")
# Attendance.id is a 32-bit INTEGER column
RECORD_ID_MIN, RECORD_ID_MAX = -(2**31), 2**31 - 1


def get_attendance_service(db: AsyncSession = Depends(get_db)) -> AttendanceService:
    return AttendanceService(db)


@router.get("", response_model=AttendanceList)
async def list_attendance(service: AttendanceService = Depends(get_attendance_service)):
    """
    All records, most recent date first.
    """
    with translate_store_errors("Failed to fetch attendance records"):
        records = await service.list_records()

    data = [AttendanceRead.model_validate(record) for record in records]
    return AttendanceList(data=data, count=len(data))


@router.post("", response_model=AttendanceCreated, status_code=status.HTTP_201_CREATED)
async def record_attendance(
    payload: AttendanceCreate,
    service: AttendanceService = Depends(get_attendance_service),
):
    """Store one entry; the response echoes the payload as submitted."""
    with translate_store_errors("Failed to record attendance"):
        record = await service.create_record(payload)

    return AttendanceCreated(id=record.id, data=payload.model_dump(by_alias=True))


@router.delete("/{record_id}", response_model=MessageResponse)
async def delete_attendance(
    record_id: str, service: AttendanceService = Depends(get_attendance_service)
):
    if not RECORD_ID_PATTERN.fullmatch(record_id.strip()):
        raise InvalidRecordId()

    target_id = int(record_id)
    if not RECORD_ID_MIN <= target_id <= RECORD_ID_MAX:
        raise RecordNotFound()

    with translate_store_errors("Failed to delete record"):
        await service.delete_record(target_id)

    return MessageResponse(message="Record deleted successfully")
