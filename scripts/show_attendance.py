import asyncio
import sys
import os
import logging
from dotenv import load_dotenv

script_dir = os.path.dirname(os.path.abspath(__file__))
if os.path.basename(script_dir) == 'scripts':
    project_root = os.path.dirname(script_dir)
else:
    project_root = script_dir

sys.path.append(project_root)
env_path = os.path.join(project_root, ".env")
if os.path.exists(env_path):
    load_dotenv(env_path)

from attendance_tracker.config import Settings
from attendance_tracker.database import AttendanceStore
from attendance_tracker.services.attendance import AttendanceService

WIDTH = 85


def render_table(records) -> str:
    lines = [
        "=" * WIDTH,
        f" {'ID':<5} | {'Date':<12} | {'Time':<10} | {'Name':<20} | {'Employee ID':<15} | {'Status':<8}",
        "=" * WIDTH,
    ]
    if not records:
        lines.append(f" {'No records found.':<80}")
    for record in records:
        time_str = record.created_at.strftime("%H:%M:%S")
        lines.append(
            f" {record.id:<5} | {str(record.date):<12} | {time_str:<10} | "
            f"{record.employee_name:<20} | {record.employee_id:<15} | {record.status.value:<8}"
        )
    lines.append("=" * WIDTH)
    return "\n".join(lines)


async def show_attendance(config: Settings) -> str:
    store = AttendanceStore(config)
    try:
        async with store.session() as session:
            records = await AttendanceService(session).list_records()
    finally:
        await store.dispose()
    return render_table(records)


if __name__ == "__main__":
    # Keep SQL echo and pool chatter out of the table
    logging.basicConfig(level=logging.CRITICAL)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)

    config = Settings(DEBUG=False)
    try:
        print("\n" + asyncio.run(show_attendance(config)) + "\n")
    except KeyboardInterrupt:
        pass
    except Exception as e:
        print(f"\n[!] Error fetching data: {e}")
        if "connect" in str(e).lower():
            print("    Hint: Check the DB_* settings in your .env file.")
        sys.exit(1)
