"""HTTP endpoints for car submissions."""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException

from api.dependencies.rate_limits import READ_RATE, SUBMISSION_RATE, get_limiter
from infrastructure.attachments import UploadPart
from infrastructure.logging import get_module_logger
from infrastructure.services import SubmissionDispatcherDep
from modules.submissions.dispatcher import SubmissionDispatcher
from modules.submissions.errors import UnknownSubmissionTypeError
from modules.submissions.models import DispatchState, SubmissionForm, SubmissionResult

logger = get_module_logger()
limiter = get_limiter()

# Starlette's multipart parser error when a form carries more file parts
# than ``max_files``
TOO_MANY_FILES_DETAIL = "Too many files"

router = APIRouter(prefix="/api", tags=["Submissions"])
legacy_router = APIRouter(prefix="/api", tags=["Submissions (legacy)"])


def submission_response(result: SubmissionResult) -> JSONResponse:
    """Map a terminal SubmissionResult to the HTTP response.

    - COMPLETED: 200, success true
    - PARTIALLY_FAILED with at least one channel delivered: 200, success false
    - every channel failed: 502
    - REJECTED_AT_STAGING: 500 with the staging error category
    """
    if result.state is DispatchState.REJECTED_AT_STAGING:
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "submissionId": result.submission_id,
                "status": result.state.value,
                "error": result.error_code,
            },
        )

    completed = result.state is DispatchState.COMPLETED
    status_code = 200 if completed or result.any_success else 502
    return JSONResponse(
        status_code=status_code,
        content={
            "success": completed,
            "submissionId": result.submission_id,
            "status": result.state.value,
            "perChannel": [outcome.to_public() for outcome in result.outcomes],
        },
    )


async def _read_parts(uploads: List[UploadFile], max_file_size: int) -> List[UploadPart]:
    """Read upload bodies, stopping one byte past the size limit.

    A truncated part is still longer than ``max_file_size``, so the stager
    rejects it as FILE_TOO_LARGE without the whole body entering memory.
    """
    parts = []
    for upload in uploads:
        parts.append(
            UploadPart(
                filename=upload.filename or "",
                content=await upload.read(max_file_size + 1),
                content_type=upload.content_type,
            )
        )
    return parts


def _rejected_at_boundary(error_code: str) -> JSONResponse:
    submission_id = uuid.uuid4().hex
    logger.warning(
        "submission_rejected_at_upload",
        submission_id=submission_id,
        error_code=error_code,
    )
    return submission_response(
        SubmissionResult(
            submission_id=submission_id,
            state=DispatchState.REJECTED_AT_STAGING,
            error_code=error_code,
        )
    )


async def handle_submission(
    request: Request,
    dispatcher: SubmissionDispatcher,
    submission_type: Optional[str] = None,
) -> JSONResponse:
    """Parse the multipart body and run the dispatcher off the event loop.

    The parser accepts one file part more than the stager allows, so an
    over-limit upload is detected without spooling every part.
    """
    limits = dispatcher.stager
    try:
        form_data = await request.form(max_files=limits.max_files + 1)
    except HTTPException as e:
        if str(e.detail).startswith(TOO_MANY_FILES_DETAIL):
            return _rejected_at_boundary("TOO_MANY_FILES")
        logger.warning("submission_form_invalid", error=e.detail)
        return JSONResponse(
            status_code=400, content={"success": False, "error": "MALFORMED_FORM"}
        )

    try:
        form = SubmissionForm.from_form(form_data)
        kind = submission_type or form_data.get("submissionType") or None
        uploads = [
            value
            for value in form_data.getlist("files")
            if isinstance(value, UploadFile) and (value.filename or value.size)
        ]
        try:
            dispatcher.channels_for(kind)
        except UnknownSubmissionTypeError as e:
            logger.warning("unknown_submission_type", submission_type=e.submission_type)
            return JSONResponse(
                status_code=400,
                content={"success": False, "error": "UNKNOWN_SUBMISSION_TYPE"},
            )
        if len(uploads) > limits.max_files:
            return _rejected_at_boundary("TOO_MANY_FILES")
        parts = await _read_parts(uploads, limits.max_file_size)
    finally:
        await form_data.close()

    result = await run_in_threadpool(dispatcher.dispatch, form, parts, kind)
    return submission_response(result)


@router.post("/submissions")
@limiter.limit(SUBMISSION_RATE)
async def create_submission(request: Request, dispatcher: SubmissionDispatcherDep):
    """Submit a car for sale.

    Multipart body with the form fields (``name``, ``phone``, ``email``,
    ``city``, ``registrationNumber``, ``rcAvailable``, ``insuranceAvailable``,
    ``carModel``, ``variant``, ``fuelType``, ``ownership``,
    ``kilometersDriven``, ``expectedPrice``, ``conditionScale``,
    ``damageRemarks``), an optional ``submissionType`` and up to 10 ``files``.
    """
    return await handle_submission(request, dispatcher)


@router.get("/submissions/channels/health")
@limiter.limit(READ_RATE)
def get_channel_health(request: Request, dispatcher: SubmissionDispatcherDep):  # pylint: disable=unused-argument
    """Provider connectivity of every configured channel."""
    return dispatcher.channel_health()


@legacy_router.post("/send-to-email")
@limiter.limit(SUBMISSION_RATE)
async def send_to_email(request: Request, dispatcher: SubmissionDispatcherDep):
    """Deliver a submission to the email channel only."""
    return await handle_submission(request, dispatcher, submission_type="email")


@legacy_router.post("/send-to-whatsapp")
@limiter.limit(SUBMISSION_RATE)
async def send_to_whatsapp(request: Request, dispatcher: SubmissionDispatcherDep):
    """Deliver a submission to the WhatsApp channel only."""
    return await handle_submission(request, dispatcher, submission_type="whatsapp")
