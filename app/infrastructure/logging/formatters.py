"""Structlog processors installed by ``configure_logging``.

Each factory returns a processor with the structlog signature
``(logger, method_name, event_dict) -> event_dict``.
"""

from typing import Any, Callable

Processor = Callable[[Any, str, dict[str, Any]], dict[str, Any]]

# Keys containing any of these fragments are masked (case-insensitive)
SENSITIVE_PATTERNS = frozenset(
    {
        "password",
        "email_pass",
        "secret",
        "token",
        "api_key",
        "authorization",
        "credential",
        "account_sid",
        "cookie",
        "signature",
    }
)

# Query parameters that mark a URL as presigned
SIGNED_URL_MARKERS = ("X-Amz-Signature=", "X-Amz-Credential=", "Signature=")


def add_deployment_info(app_name: str, version: str, environment: str) -> Processor:
    """Stamp every entry with what is running and where.

    Args:
        app_name: Service name
        version: Deployed git sha
        environment: "production" or the deployment prefix
    """

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        event_dict["app_name"] = app_name
        event_dict["app_version"] = version
        event_dict["environment"] = environment
        return event_dict

    return processor


def mask_sensitive_data(
    mask_value: str = "***REDACTED***",
    additional_patterns: frozenset[str] | None = None,
) -> Processor:
    """Mask values whose key looks like a credential.

    Example:
        logger.info("smtp_login", email_pass="hunter2")  # email_pass=***REDACTED***
    """
    patterns = SENSITIVE_PATTERNS
    if additional_patterns:
        patterns = patterns | additional_patterns

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        return {
            key: mask_value
            if value is not None and any(p in key.lower() for p in patterns)
            else value
            for key, value in event_dict.items()
        }

    return processor


def strip_signed_urls() -> Processor:
    """Drop the query string of presigned media URLs.

    The signature in a presigned S3 URL grants read access to a seller's
    photo until it expires; logs keep only the object location.
    """

    def _strip(value: Any) -> Any:
        if (
            isinstance(value, str)
            and value.startswith(("http://", "https://"))
            and "?" in value
            and any(marker in value for marker in SIGNED_URL_MARKERS)
        ):
            return value.split("?", 1)[0] + "?<signed>"
        return value

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        for key, value in event_dict.items():
            if isinstance(value, list):
                event_dict[key] = [_strip(item) for item in value]
            else:
                event_dict[key] = _strip(value)
        return event_dict

    return processor


def truncate_large_values(max_length: int = 500) -> Processor:
    """Cut string values (rendered bodies, provider responses) to ``max_length``."""

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        for key, value in event_dict.items():
            if isinstance(value, str) and len(value) > max_length:
                event_dict[key] = (
                    value[:max_length] + f"...[truncated, {len(value)} chars total]"
                )
        return event_dict

    return processor
