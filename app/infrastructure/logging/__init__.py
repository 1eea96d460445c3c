"""Structured logging for the car bazar backend.

Public API:
    - configure_logging(): Initialize logging at startup
    - get_module_logger(): Logger bound to the calling module
    - bind_request_context(): Correlation id, path and method for a request
    - bind_submission_context(): Submission id and type for one dispatch

Example:
    from infrastructure.logging import get_module_logger

    logger = get_module_logger()
    logger.info("listings_loaded", count=12)
"""

from infrastructure.logging.setup import configure_logging, get_module_logger

from infrastructure.logging.context import (
    CORRELATION_ID_HEADER,
    bind_request_context,
    bind_submission_context,
    get_correlation_id,
)

from infrastructure.logging.formatters import (
    SENSITIVE_PATTERNS,
    add_deployment_info,
    mask_sensitive_data,
    strip_signed_urls,
    truncate_large_values,
)

__all__ = [
    "configure_logging",
    "get_module_logger",
    "CORRELATION_ID_HEADER",
    "bind_request_context",
    "bind_submission_context",
    "get_correlation_id",
    "SENSITIVE_PATTERNS",
    "add_deployment_info",
    "mask_sensitive_data",
    "strip_signed_urls",
    "truncate_large_values",
]
