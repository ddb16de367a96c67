from fastapi import APIRouter, Request

router = APIRouter(prefix="/api", tags=["info"])


@router.get("")
async def api_info(request: Request):
    """Static description of what the API offers."""
    return {
        "message": request.app.title,
        "version": request.app.version,
        "endpoints": {
            "GET /api/attendance": "Get all attendance records",
            "POST /api/attendance": "Create new attendance record",
            "DELETE /api/attendance/:id": "Delete attendance record",
        },
    }
