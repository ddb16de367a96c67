import asyncio
import datetime
import os
import sys

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from attendance_tracker.config import Settings, settings
from attendance_tracker.database import AttendanceStore
from attendance_tracker.models.attendance import AttendanceStatus
from attendance_tracker.schemas.attendance import AttendanceCreate
from attendance_tracker.services.attendance import AttendanceService

DEMO_EMPLOYEES = [
    ("Alice Smith", "E1"),
    ("Bob Jones", "E2"),
    ("Carol White", "E3"),
]


def demo_payloads(today: datetime.date, days: int = 3):
    """One entry per employee per day, for the last `days` days."""
    payloads = []
    for offset in range(days):
        day = today - datetime.timedelta(days=offset)
        for index, (name, employee_id) in enumerate(DEMO_EMPLOYEES):
            status = (
                AttendanceStatus.ABSENT
                if (index + offset) % 4 == 3
                else AttendanceStatus.PRESENT
            )
            payloads.append(
                AttendanceCreate(
                    employeeName=name,
                    employeeID=employee_id,
                    date=day.isoformat(),
                    status=status.value,
                )
            )
    return payloads


async def seed(config: Settings = settings) -> int:
    store = AttendanceStore(config)
    try:
        await store.bootstrap()
        async with store.session() as session:
            service = AttendanceService(session)

            # Check if DB is already seeded
            if await service.list_records():
                print("Database already contains data. Skipping seed.")
                return 0

            print("Seeding database with demo attendance...")
            payloads = demo_payloads(datetime.date.today())
            for payload in payloads:
                record = await service.create_record(payload)
                print(
                    f"Added #{record.id}: {record.employee_name} "
                    f"{record.date} {record.status.value}"
                )
            return len(payloads)
    finally:
        await store.dispose()


if __name__ == "__main__":
    asyncio.run(seed())
