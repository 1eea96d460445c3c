from contextlib import asynccontextmanager
from typing import AsyncIterator, TYPE_CHECKING

from fastapi import FastAPI
from structlog.stdlib import BoundLogger

from infrastructure.logging.setup import configure_logging
from infrastructure.services import (
    get_listing_repository,
    get_settings,
    get_submission_dispatcher,
)

if TYPE_CHECKING:
    from infrastructure.configuration import Settings


def _get_logger(settings: "Settings") -> BoundLogger:
    return configure_logging(settings=settings)


def _log_configuration(settings: "Settings", logger: BoundLogger) -> None:
    """Log which settings are in effect; section values may be secrets, so only names."""
    dumped = settings.model_dump()
    sections = {key: sorted(value) for key, value in dumped.items() if isinstance(value, dict)}
    logger.info(
        "configuration_initialized",
        prefix=settings.PREFIX,
        log_level=settings.LOG_LEVEL,
        git_sha=settings.GIT_SHA,
        sections=sorted(sections),
    )
    for section, keys in sections.items():
        logger.info("configuration_loaded", config_setting=section, keys=keys)


def _log_unconfigured_providers(settings: "Settings", logger: BoundLogger) -> None:
    missing = {
        "smtp": not settings.smtp.is_configured,
        "twilio": not settings.twilio.is_configured,
        "s3_media_bucket": not settings.aws.MEDIA_BUCKET,
    }
    for provider, is_missing in missing.items():
        if is_missing:
            logger.warning("provider_not_configured", provider=provider)


def _activate_services(app: FastAPI, logger: BoundLogger) -> None:
    try:
        app.state.dispatcher = get_submission_dispatcher()
        app.state.listing_repository = get_listing_repository()
    except ValueError as exc:
        logger.error("submission_configuration_invalid", error=str(exc))
        raise
    logger.info("services_activated")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logger = _get_logger(settings)
    app.state.settings = settings

    logger.info("application_startup")
    _log_configuration(settings, logger)
    _log_unconfigured_providers(settings, logger)
    _activate_services(app, logger)

    yield

    logger.info("application_shutdown")
    # Sends already in flight finish on their own threads
    app.state.dispatcher.shutdown(wait=False)
