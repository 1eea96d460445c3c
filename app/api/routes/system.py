"""Process-level routes polled by the host and by uptime checks."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.dependencies.rate_limits import READ_RATE, get_limiter
from infrastructure.services import SettingsDep

router = APIRouter(tags=["System"])
limiter = get_limiter()

# Built by the lifespan before traffic is accepted
READY_STATE = ("dispatcher", "listing_repository")


@router.get("/version")
@limiter.limit(READ_RATE)
def get_version(request: Request, settings: SettingsDep):  # pylint: disable=unused-argument
    """Deployed git revision."""
    return {"version": settings.GIT_SHA}


@router.get("/health")
@limiter.limit(READ_RATE)
def get_health(request: Request):  # pylint: disable=unused-argument
    """Liveness: the process answers HTTP."""
    return {"status": "ok"}


@router.get("/ready")
@limiter.limit(READ_RATE)
def get_ready(request: Request):
    """Readiness: startup finished and the listings table is reachable.

    Notification providers are not checked here; a provider outage fails
    single channels, not the whole service.
    """
    missing = [name for name in READY_STATE if not hasattr(request.app.state, name)]
    if missing:
        return JSONResponse(
            status_code=503, content={"status": "starting", "missing": missing}
        )

    listings = request.app.state.listing_repository.health_check()
    if not listings.is_success:
        return JSONResponse(
            status_code=503,
            content={
                "status": "unavailable",
                "dependency": "listings",
                "error": listings.error_category,
            },
        )
    return {"status": "ready"}
