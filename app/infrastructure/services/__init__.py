"""
Dependency injection services.

Provides type aliases and provider functions for FastAPI dependency injection.
"""

from infrastructure.services.dependencies import (
    SettingsDep,
    SubmissionDispatcherDep,
    ListingRepositoryDep,
)
from infrastructure.services.providers import (
    get_settings,
    get_submission_dispatcher,
    get_listing_repository,
)

__all__ = [
    "SettingsDep",
    "SubmissionDispatcherDep",
    "ListingRepositoryDep",
    "get_settings",
    "get_submission_dispatcher",
    "get_listing_repository",
]
