"""
Type aliases for FastAPI dependency injection.

Provides annotated type hints for common infrastructure dependencies.
"""

from typing import Annotated
from fastapi import Depends
from infrastructure.configuration import Settings
from infrastructure.services.providers import (
    get_settings,
    get_submission_dispatcher,
    get_listing_repository,
)
from modules.listings.repository import ListingRepository
from modules.submissions.dispatcher import SubmissionDispatcher

# Settings dependency
SettingsDep = Annotated[Settings, Depends(get_settings)]

# Submission fan-out, owns the shared worker pool
SubmissionDispatcherDep = Annotated[
    SubmissionDispatcher, Depends(get_submission_dispatcher)
]

# Listings read path
ListingRepositoryDep = Annotated[ListingRepository, Depends(get_listing_repository)]

__all__ = [
    "SettingsDep",
    "SubmissionDispatcherDep",
    "ListingRepositoryDep",
]
