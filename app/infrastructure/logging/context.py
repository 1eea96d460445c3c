"""Context binding for structured logging.

Request-scoped values (correlation id, path, method) and submission-scoped
values (submission id and type) are bound to structlog's context variables
so that every entry emitted inside the block carries them, including
entries from worker threads that run with a copied context.

Usage:
    from infrastructure.logging import bind_request_context

    with bind_request_context(correlation_id="req-123", request_path="/listings"):
        logger.info("processing_request")
"""

import uuid
from contextlib import contextmanager
from typing import Any, Generator, Optional

import structlog

CORRELATION_ID_HEADER = "X-Correlation-ID"


@contextmanager
def bind_request_context(
    correlation_id: Optional[str] = None,
    request_path: Optional[str] = None,
    request_method: Optional[str] = None,
) -> Generator[str, None, None]:
    """Bind request context for the duration of the block.

    Args:
        correlation_id: Id sent by the caller. Generated if not provided.
        request_path: HTTP request path (e.g., "/api/submissions").
        request_method: HTTP method (e.g., "POST").

    Yields:
        The correlation id in effect for the block.
    """
    context: dict[str, Any] = {"correlation_id": correlation_id or str(uuid.uuid4())}
    if request_path is not None:
        context["request_path"] = request_path
    if request_method is not None:
        context["request_method"] = request_method

    with structlog.contextvars.bound_contextvars(**context):
        yield context["correlation_id"]


@contextmanager
def bind_submission_context(
    submission_id: str, submission_type: str
) -> Generator[None, None, None]:
    """Bind the submission being dispatched, nested inside the request context."""
    with structlog.contextvars.bound_contextvars(
        submission_id=submission_id, submission_type=submission_type
    ):
        yield


def get_correlation_id() -> Optional[str]:
    """Correlation id of the current context, if any."""
    return structlog.contextvars.get_contextvars().get("correlation_id")
