"""HTTP endpoints for car listings."""

from typing import List

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.dependencies.rate_limits import READ_RATE, get_limiter
from infrastructure.services import ListingRepositoryDep
from modules.listings.models import CarListing
from modules.listings.repository import ListingRepository

limiter = get_limiter()

router = APIRouter(tags=["Listings"])
legacy_router = APIRouter(tags=["Listings (legacy)"])


def _listings_response(repository: ListingRepository):
    result = repository.list_all()
    if not result.is_success:
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to fetch cars", "code": result.error_category},
        )
    return result.data


@router.get("/listings", response_model=List[CarListing])
@limiter.limit(READ_RATE)
def list_listings(request: Request, repository: ListingRepositoryDep):  # pylint: disable=unused-argument
    """All car listings."""
    return _listings_response(repository)


@legacy_router.get("/cars", response_model=List[CarListing])
@limiter.limit(READ_RATE)
def list_cars(request: Request, repository: ListingRepositoryDep):  # pylint: disable=unused-argument
    """All car listings (former path)."""
    return _listings_response(repository)
