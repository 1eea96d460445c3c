"""Structlog configuration.

Usage:
    from infrastructure.logging import configure_logging, get_module_logger

    configure_logging(settings=settings)  # once, at startup

    logger = get_module_logger()
    logger.info("submission_received", file_count=2)
"""

import inspect
import logging
import sys
from typing import Any, List, Optional, TYPE_CHECKING

import structlog
from structlog.stdlib import BoundLogger

from infrastructure.logging.formatters import (
    add_deployment_info,
    mask_sensitive_data,
    strip_signed_urls,
    truncate_large_values,
)

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

APP_NAME = "car-bazar-backend"


def _is_test_environment() -> bool:
    return "pytest" in sys.modules


def build_processors(settings: "Settings", is_production: bool) -> List[Any]:
    """Processor chain for a deployment.

    Context variables come first so that correlation and submission ids
    are present before masking; redaction runs before rendering. Production
    renders JSON lines, everything else a colored console.
    """
    environment = "production" if is_production else (settings.PREFIX or "development")
    processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
                structlog.processors.CallsiteParameter.FUNC_NAME,
            ]
        ),
        add_deployment_info(APP_NAME, settings.GIT_SHA, environment),
        mask_sensitive_data(),
        strip_signed_urls(),
        truncate_large_values(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if is_production:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())
    return processors


def configure_logging(
    settings: Optional["Settings"] = None,
    log_level: Optional[str] = None,
    is_production: Optional[bool] = None,
) -> BoundLogger:
    """Configure structlog on top of the stdlib logging module.

    Under pytest nothing is emitted: the root logger is raised above
    CRITICAL and only the processors bound loggers need are installed.

    Args:
        settings: Settings instance, loaded from the environment if omitted
        log_level: Overrides ``settings.LOG_LEVEL``
        is_production: Overrides ``settings.is_production`` (JSON output)

    Returns:
        A logger from the configured factory.
    """
    if _is_test_environment():
        structlog.configure(
            processors=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(format="%(message)s", level=logging.CRITICAL + 1, force=True)
        return structlog.stdlib.get_logger()

    if settings is None:
        from infrastructure.configuration import Settings

        settings = Settings()

    production = settings.is_production if is_production is None else is_production
    structlog.configure(
        processors=build_processors(settings, production),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    level_name = (log_level or settings.LOG_LEVEL).upper()
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level_name, logging.INFO),
        force=True,
    )
    return structlog.stdlib.get_logger()


# Configured on import so module-level loggers work before startup
logger: BoundLogger = configure_logging()


def get_module_logger() -> BoundLogger:
    """Logger bound to the calling module.

    Example:
        # In modules/submissions/dispatcher.py
        logger = get_module_logger()
        # context: {"component": "dispatcher",
        #           "module_path": "modules.submissions.dispatcher"}
    """
    current_frame = inspect.currentframe()
    if current_frame is None or current_frame.f_back is None:
        return logger

    module = inspect.getmodule(current_frame.f_back)
    if module is None:
        return logger.bind(component="unknown")

    return logger.bind(
        component=module.__name__.split(".")[-1],
        module_path=module.__name__,
    )
