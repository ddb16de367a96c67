from datetime import datetime, timezone

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("", status_code=status.HTTP_200_OK)
async def health_check():
    """
    Simple probe to verify the API server is up. Never touches the database.
    """
    return {
        "status": "OK",
        "message": "Server is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/db", status_code=status.HTTP_200_OK)
async def db_health_check(request: Request):
    """
    Deep probe to verify the Database connection is active.
    """
    store = getattr(request.app.state, "store", None)
    if store is None:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"success": False, "error": "Database not connected"},
        )
    try:
        await store.ping()
    except Exception as e:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "success": False,
                "error": "Database connection failed",
                "details": str(e),
            },
        )
    return {"status": "up", "database": "connected"}
