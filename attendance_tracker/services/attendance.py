from typing import List

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_tracker.exceptions import RecordNotFound
from attendance_tracker.models.attendance import Attendance
from attendance_tracker.schemas.attendance import AttendanceCreate


class AttendanceService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_records(self) -> List[Attendance]:
        """
        Newest first: by date, then by insertion time. The id keeps rows
        created within the same clock tick in insertion order.
        """
        query = select(Attendance).order_by(
            Attendance.date.desc(),
            Attendance.created_at.desc(),
            Attendance.id.desc(),
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def create_record(self, payload: AttendanceCreate) -> Attendance:
        record = Attendance(
            employee_name=payload.employee_name.strip(),
            employee_id=payload.employee_id.strip(),
            date=payload.date,
            status=payload.status,
        )
        self.db.add(record)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        await self.db.refresh(record)
        return record

    async def delete_record(self, record_id: int) -> None:
        result = await self.db.execute(
            delete(Attendance).where(Attendance.id == record_id)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise RecordNotFound()
        await self.db.commit()
