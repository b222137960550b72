from fastapi import Request, Response
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from marketplace.config import RATE_LIMIT_STORAGE_URI


def get_user_or_ip(request: Request) -> str:
    """
    Get unique identifier for rate limiting.
    Uses the user id of the session restored from cookies (stable across token
    refreshes), or falls back to IP.
    """
    user_id = getattr(request.state, "user_id", None)
    if user_id:
        return f"user:{user_id}"

    # Fallback to IP for anonymous users or rejected sessions
    return f"ip:{get_remote_address(request)}"


# Universal limiter: user id for signed-in browsers, IP otherwise
limiter = Limiter(
    key_func=get_user_or_ip,
    default_limits=["1000 per day", "200 per hour"],
    storage_uri=RATE_LIMIT_STORAGE_URI,
)


DEFAULT_RETRY_SECONDS = 60


def retry_after_seconds(exc: RateLimitExceeded) -> int:
    """Window length of the exceeded limit in seconds (3600 for 5/hour)"""
    limit = getattr(exc, "limit", None)
    item = getattr(limit, "limit", None)
    if item is None:
        return DEFAULT_RETRY_SECONDS
    return int(item.get_expiry())


def custom_rate_limit_handler(request: Request, exc: RateLimitExceeded) -> Response:
    retry_seconds = retry_after_seconds(exc)
    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "error": f"Too many requests. Please try again in {retry_seconds} seconds.",
            "retry_after": retry_seconds,
        },
        headers={"Retry-After": str(retry_seconds)},
    )
