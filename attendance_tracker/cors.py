from typing import Collection, Optional

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Content-Type", "Authorization"]


def is_origin_allowed(origin: Optional[str], allowed: Collection[str]) -> bool:
    """
    Requests without an Origin header (curl, mobile apps, same-origin
    server calls) always pass; browser origins must match exactly.
    """
    if not origin:
        return True
    return origin in allowed
