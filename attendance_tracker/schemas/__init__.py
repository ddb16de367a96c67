from .attendance import (
    AttendanceCreate,
    AttendanceCreated,
    AttendanceList,
    AttendancePayload,
    AttendanceRead,
    MessageResponse,
)

__all__ = [
    "AttendanceCreate",
    "AttendanceCreated",
    "AttendanceList",
    "AttendancePayload",
    "AttendanceRead",
    "MessageResponse",
]
