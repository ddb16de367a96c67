import enum
import datetime  # module import; the "date" column would shadow the type

from sqlalchemy import Date, Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, CreatedAtMixin


class AttendanceStatus(str, enum.Enum):
    PRESENT = "Present"
    ABSENT = "Absent"


class Attendance(Base, CreatedAtMixin):
    __tablename__ = "Attendance"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Column names follow the JSON field names used by the frontend
    employee_name: Mapped[str] = mapped_column(
        "employeeName", String(255), nullable=False
    )
    employee_id: Mapped[str] = mapped_column("employeeID", String(100), nullable=False)

    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)

    status: Mapped[AttendanceStatus] = mapped_column(
        Enum(
            AttendanceStatus,
            name="attendance_status",
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
    )

    # No unique constraint on (employeeID, date): repeated entries are kept.

    def __repr__(self):
        return (
            f"<Attendance(id={self.id}, employee_id='{self.employee_id}', "
            f"date='{self.date}', status='{self.status.value}')>"
        )
