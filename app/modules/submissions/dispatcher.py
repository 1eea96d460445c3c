"""Submission dispatcher.

Drives one submission through its lifecycle:

    RECEIVED -> STAGED -> RENDERED -> DISPATCHING -> AGGREGATED
             -> COMPLETED | PARTIALLY_FAILED
    RECEIVED -> REJECTED_AT_STAGING

Every transition is logged as ``submission_state_changed``.

Channels that take staged files directly start sending as soon as bodies
are rendered. Channels that need durable URLs start once every attachment
has been published (or failed/timed out publishing). All provider calls
run on one shared thread pool; the dispatcher waits for every channel up
to a bounded timeout and reports exactly one outcome per channel.

Timeouts count from the moment a worker picks a task up, never from when
it was queued, so a saturated pool delays a send instead of failing it.
"""

import contextvars
import threading
import time
import uuid
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Set

from infrastructure.attachments import (
    AssetPublisher,
    Attachment,
    AttachmentStager,
    PublishError,
    StageError,
    UploadPart,
)
from infrastructure.configuration.features import DEFAULT_SUBMISSION_TYPE
from infrastructure.logging import bind_submission_context, get_module_logger
from infrastructure.notifications import (
    BodyFormat,
    ChannelOutcome,
    NotificationChannel,
)
from modules.submissions.errors import UnknownSubmissionTypeError
from modules.submissions.models import DispatchState, SubmissionForm, SubmissionResult
from modules.submissions.renderer import (
    DEFAULT_BUSINESS_NAME,
    DEFAULT_SUBJECT,
    render,
    render_subject,
)

logger = get_module_logger()

# How often queued (not yet started) tasks are checked for a worker
QUEUE_POLL_SECONDS = 0.05


class _StartClock:
    """Wraps a task and records when a worker started running it."""

    def __init__(self, fn: Callable):
        self.fn = fn
        self.started_at: Optional[float] = None

    def __call__(self, *args, **kwargs):
        self.started_at = time.monotonic()
        return self.fn(*args, **kwargs)


def wait_from_start(tasks: Mapping[Future, _StartClock], timeout: float) -> Set[Future]:
    """Wait until every task finished or ran longer than ``timeout``.

    Tasks still queued behind other work are waited for; their clock starts
    when they start.

    Returns:
        The futures that overran their timeout.
    """
    timed_out: Set[Future] = set()
    pending = set(tasks)
    while pending:
        now = time.monotonic()
        deadlines = []
        queued = False
        for future in list(pending):
            if future.done():
                pending.discard(future)
                continue
            started_at = tasks[future].started_at
            if started_at is None:
                queued = True
                continue
            remaining = started_at + timeout - now
            if remaining <= 0:
                pending.discard(future)
                timed_out.add(future)
            else:
                deadlines.append(remaining)
        if not pending:
            break
        if queued:
            deadlines.append(QUEUE_POLL_SECONDS)
        wait(pending, timeout=min(deadlines), return_when=FIRST_COMPLETED)
    return timed_out


class SubmissionDispatcher:
    """Fans a submission out to its configured channels.

    Attributes:
        stager: Writes upload parts to disk and removes them afterwards
        publisher: Turns staged files into durable URLs
        channels: Channel senders keyed by channel name
        recipients: Recipient addresses keyed by channel name
        routes: Channel names keyed by submission type
        publish_timeout: Seconds a publish may run once a worker picks it up
        channel_timeout: Seconds a channel send may run once a worker picks it up
    """

    def __init__(
        self,
        stager: AttachmentStager,
        publisher: AssetPublisher,
        channels: Sequence[NotificationChannel],
        recipients: Mapping[str, Sequence[str]],
        routes: Mapping[str, Sequence[str]],
        publish_timeout: float = 60.0,
        channel_timeout: float = 60.0,
        max_workers: int = 8,
        business_name: str = DEFAULT_BUSINESS_NAME,
        email_subject: str = DEFAULT_SUBJECT,
        logo_url: Optional[str] = None,
    ):
        """Validate routing configuration and start the worker pool.

        Raises:
            ValueError: A route names an unknown channel, or a channel has
                more recipients than it supports.
        """
        self.stager = stager
        self.publisher = publisher
        self.channels: Dict[str, NotificationChannel] = {
            channel.channel_name: channel for channel in channels
        }
        self.recipients = {name: list(addrs) for name, addrs in recipients.items()}
        self.routes = {kind: list(names) for kind, names in routes.items()}
        self.publish_timeout = publish_timeout
        self.channel_timeout = channel_timeout
        self.business_name = business_name
        self.email_subject = email_subject
        self.logo_url = logo_url

        self._validate_configuration()
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="submission"
        )
        logger.info(
            "submission_dispatcher_initialized",
            channels=sorted(self.channels),
            routes=self.routes,
            max_workers=max_workers,
        )

    def _validate_configuration(self) -> None:
        for submission_type, names in self.routes.items():
            if not names:
                raise ValueError(f"Submission type {submission_type!r} has no channels")
            for name in names:
                if name not in self.channels:
                    raise ValueError(
                        f"Submission type {submission_type!r} routes to unknown channel {name!r}"
                    )
        for name, channel in self.channels.items():
            limit = channel.capabilities().max_recipients
            count = len(self.recipients.get(name, []))
            if count > limit:
                raise ValueError(
                    f"Channel {name!r} has {count} recipients, at most {limit} allowed"
                )

    def channels_for(self, submission_type: Optional[str]) -> List[NotificationChannel]:
        """Channels configured for a submission type.

        Raises:
            UnknownSubmissionTypeError: Type has no route.
        """
        kind = submission_type or DEFAULT_SUBMISSION_TYPE
        if kind not in self.routes:
            raise UnknownSubmissionTypeError(kind)
        return [self.channels[name] for name in self.routes[kind]]

    def dispatch(
        self,
        form: SubmissionForm,
        parts: Sequence[UploadPart],
        submission_type: Optional[str] = None,
    ) -> SubmissionResult:
        """Deliver one submission to every configured channel.

        Args:
            form: Submitted form fields
            parts: Uploaded files, in request order
            submission_type: Route key, ``default`` when None

        Returns:
            SubmissionResult in a terminal state.

        Raises:
            UnknownSubmissionTypeError: Type has no route (nothing is staged).
        """
        channels = self.channels_for(submission_type)
        submission_id = uuid.uuid4().hex
        with bind_submission_context(
            submission_id=submission_id,
            submission_type=submission_type or DEFAULT_SUBMISSION_TYPE,
        ):
            return self._run(submission_id, form, parts, channels)

    def _run(
        self,
        submission_id: str,
        form: SubmissionForm,
        parts: Sequence[UploadPart],
        channels: List[NotificationChannel],
    ) -> SubmissionResult:
        self._advance(DispatchState.RECEIVED, file_count=len(parts))

        try:
            attachments = self.stager.stage(parts)
        except StageError as e:
            self._advance(
                DispatchState.REJECTED_AT_STAGING,
                error_code=e.error_code,
                error=str(e),
            )
            return SubmissionResult(
                submission_id=submission_id,
                state=DispatchState.REJECTED_AT_STAGING,
                error_code=e.error_code,
            )
        self._advance(DispatchState.STAGED, attachment_count=len(attachments))

        bodies = self._render(form, channels)
        subject = render_subject(form, self.email_subject)
        self._advance(DispatchState.RENDERED, formats=sorted(f.value for f in bodies))

        self._advance(
            DispatchState.DISPATCHING, channels=[c.channel_name for c in channels]
        )
        direct = [c for c in channels if not c.capabilities().requires_durable_url]
        needs_url = [c for c in channels if c.capabilities().requires_durable_url]

        # Direct senders go first so they never queue behind publishes
        sender_futures: Dict[Future, str] = {}
        clocks: Dict[Future, _StartClock] = {}
        for channel in direct:
            future = self._start_send(channel, bodies, attachments, subject, clocks)
            sender_futures[future] = channel.channel_name

        publish_futures: Dict[Future, int] = {}
        if needs_url:
            for index, attachment in enumerate(attachments):
                future = self._submit(clocks, self.publisher.publish, attachment)
                publish_futures[future] = index

            published = self._collect_publishes(attachments, publish_futures, clocks)
            for channel in needs_url:
                future = self._start_send(channel, bodies, published, subject, clocks)
                sender_futures[future] = channel.channel_name

        outcomes = self._collect_outcomes(channels, sender_futures, clocks)
        self._advance(
            DispatchState.AGGREGATED,
            succeeded=[o.channel for o in outcomes if o.success],
            failed={o.channel: o.error_code for o in outcomes if not o.success},
        )

        leaked = self._schedule_cleanup(
            attachments, list(publish_futures) + list(sender_futures)
        )

        state = (
            DispatchState.COMPLETED
            if all(o.success for o in outcomes)
            else DispatchState.PARTIALLY_FAILED
        )
        self._advance(state)
        return SubmissionResult(
            submission_id=submission_id,
            state=state,
            outcomes=outcomes,
            leaked_files=leaked,
        )

    def _advance(self, state: DispatchState, **fields) -> None:
        log = logger.warning if state is DispatchState.REJECTED_AT_STAGING else logger.info
        log(
            "submission_state_changed",
            state=state.value,
            terminal=state.is_terminal,
            **fields,
        )

    def _render(
        self, form: SubmissionForm, channels: List[NotificationChannel]
    ) -> Dict[BodyFormat, str]:
        # TEXT is always rendered, it doubles as the plain alternative of HTML
        formats = {c.capabilities().body_format for c in channels} | {BodyFormat.TEXT}
        return {
            body_format: render(
                form,
                body_format,
                business_name=self.business_name,
                logo_url=self.logo_url,
            )
            for body_format in formats
        }

    def _submit(
        self, clocks: Dict[Future, _StartClock], fn: Callable, *args, **kwargs
    ) -> Future:
        context = contextvars.copy_context()
        clock = _StartClock(fn)
        future = self._executor.submit(context.run, clock, *args, **kwargs)
        clocks[future] = clock
        return future

    def _start_send(
        self,
        channel: NotificationChannel,
        bodies: Dict[BodyFormat, str],
        attachments: List[Attachment],
        subject: str,
        clocks: Dict[Future, _StartClock],
    ) -> Future:
        return self._submit(
            clocks,
            channel.send,
            self.recipients.get(channel.channel_name, []),
            bodies[channel.capabilities().body_format],
            attachments,
            subject,
            text_body=bodies[BodyFormat.TEXT],
        )

    def _collect_publishes(
        self,
        attachments: List[Attachment],
        publish_futures: Dict[Future, int],
        clocks: Dict[Future, _StartClock],
    ) -> List[Attachment]:
        published = list(attachments)
        if not publish_futures:
            return published

        timed_out = wait_from_start(
            {future: clocks[future] for future in publish_futures},
            self.publish_timeout,
        )
        for future, index in publish_futures.items():
            attachment = attachments[index]
            if future in timed_out:
                logger.warning("asset_publish_timed_out", filename=attachment.filename)
                published[index] = attachment.with_publish_error("PUBLISH_TIMEOUT")
                continue
            try:
                published[index] = attachment.with_published_url(future.result())
            except PublishError as e:
                published[index] = attachment.with_publish_error(e.error_code)
            except Exception:
                logger.exception("asset_publish_crashed", filename=attachment.filename)
                published[index] = attachment.with_publish_error("PUBLISH_FAILED")

        logger.info(
            "assets_published",
            published=sum(1 for a in published if a.published_url),
            failed=sum(1 for a in published if not a.published_url),
        )
        return published

    def _collect_outcomes(
        self,
        channels: List[NotificationChannel],
        sender_futures: Dict[Future, str],
        clocks: Dict[Future, _StartClock],
    ) -> List[ChannelOutcome]:
        by_channel: Dict[str, ChannelOutcome] = {}
        timed_out = wait_from_start(
            {future: clocks[future] for future in sender_futures},
            self.channel_timeout,
        )
        for future, name in sender_futures.items():
            if future in timed_out:
                logger.warning("channel_send_timed_out", channel=name)
                by_channel[name] = ChannelOutcome.failed(name, "TIMEOUT")
                continue
            try:
                by_channel[name] = future.result()
            except Exception:
                logger.exception("channel_send_crashed", channel=name)
                by_channel[name] = ChannelOutcome.failed(name, "CHANNEL_EXCEPTION")

        for outcome in by_channel.values():
            if not outcome.success:
                logger.warning(
                    "channel_send_failed",
                    channel=outcome.channel,
                    error_code=outcome.error_code,
                    sent=outcome.sent_count,
                    failed=outcome.failed_count,
                )
        return [by_channel[c.channel_name] for c in channels]

    def _schedule_cleanup(
        self, attachments: List[Attachment], futures: List[Future]
    ) -> List[str]:
        """Remove staged files now, or once the last running task finishes.

        Returns:
            Paths leaked by an immediate cleanup (empty when deferred).
        """
        if not attachments:
            return []

        pending = [f for f in futures if not f.done()]
        if not pending:
            leaked = self.stager.cleanup(attachments)
            if leaked:
                logger.error("staged_files_leaked", paths=leaked)
            return leaked

        logger.warning("staged_cleanup_deferred", pending_tasks=len(pending))
        remaining = [len(pending)]
        lock = threading.Lock()
        context = contextvars.copy_context()

        def on_done(_future: Future) -> None:
            with lock:
                remaining[0] -= 1
                if remaining[0]:
                    return
            leaked = context.run(self.stager.cleanup, attachments)
            if leaked:
                context.run(logger.error, "staged_files_leaked", paths=leaked)

        for future in pending:
            future.add_done_callback(on_done)
        return []

    def channel_health(self) -> Dict[str, dict]:
        """Health of every configured channel."""
        report = {}
        for name, channel in self.channels.items():
            result = channel.health_check()
            report[name] = {
                "healthy": result.is_success,
                "error": result.error_category,
            }
        return report

    def shutdown(self, wait: bool = False) -> None:
        """Stop accepting work. Sends already running finish in the background."""
        self._executor.shutdown(wait=wait)
        logger.info("submission_dispatcher_shutdown", waited=wait)
