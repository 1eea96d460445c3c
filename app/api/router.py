from fastapi import APIRouter, Depends, Request

from api.routes.system import router as system_router
from infrastructure.logging import get_module_logger
from modules.listings.controllers import (
    legacy_router as listings_legacy_router,
    router as listings_router,
)
from modules.submissions.controllers import (
    legacy_router as submissions_legacy_router,
    router as submissions_router,
)

logger = get_module_logger()

# Paths the sell-your-car site used before submissions were unified
LEGACY_REPLACEMENTS = {
    "/api/send-to-email": "/api/submissions (submissionType=email)",
    "/api/send-to-whatsapp": "/api/submissions (submissionType=whatsapp)",
    "/cars": "/listings",
}


def log_legacy_calls(request: Request):
    """Record callers still on a legacy path, with the path that replaces it."""
    logger.warning(
        "legacy_api_endpoint_accessed",
        path=request.url.path,
        method=request.method,
        replacement=LEGACY_REPLACEMENTS.get(request.url.path),
        ip_address=request.client.host if request.client else "unknown",
        user_agent=request.headers.get("user-agent"),
        referer=request.headers.get("referer"),
    )


api_router = APIRouter()
api_router.include_router(system_router)
api_router.include_router(submissions_router)
api_router.include_router(listings_router)
api_router.include_router(
    submissions_legacy_router, dependencies=[Depends(log_legacy_calls)]
)
api_router.include_router(
    listings_legacy_router, dependencies=[Depends(log_legacy_calls)]
)
