from .attendance import router as attendance_router
from .health import router as health_router
from .info import router as info_router

__all__ = ["attendance_router", "health_router", "info_router"]
