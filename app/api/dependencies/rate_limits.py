"""Per-client rate limiting.

The API usually runs behind a hosting proxy, so the client is the first
``X-Forwarded-For`` hop rather than the socket peer.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from infrastructure.logging import get_module_logger

logger = get_module_logger()

SUBMISSION_RATE = "10/minute"
READ_RATE = "50/minute"


def client_key(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for", "")
    return forwarded.split(",")[0].strip() or get_remote_address(request)


limiter = Limiter(key_func=client_key)


async def rate_limit_handler(request: Request, exc: Exception):
    """429 in the same ``{success, error}`` shape as submission failures."""
    if isinstance(exc, RateLimitExceeded):
        logger.warning(
            "rate_limit_exceeded",
            path=request.url.path,
            client=client_key(request),
            limit=str(exc.detail),
        )
        return JSONResponse(
            status_code=429,
            content={"success": False, "error": "RATE_LIMITED"},
        )


def setup_rate_limiter(app: FastAPI):
    """Attach the shared limiter and its 429 handler to the app."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)


def get_limiter():
    return limiter
