"""Fixtures for submission dispatcher, renderer and endpoint tests."""

import os
import threading
from typing import Callable, List, NamedTuple, Optional
from unittest.mock import MagicMock

import pytest

from infrastructure.attachments import AssetPublisher, AttachmentStager, UploadPart
from infrastructure.notifications import (
    BodyFormat,
    ChannelCapabilities,
    ChannelOutcome,
    Delivery,
    DeliveryKind,
    NotificationChannel,
)
from infrastructure.operations import OperationResult
from modules.submissions.dispatcher import SubmissionDispatcher
from modules.submissions.models import SubmissionForm


class SentCall(NamedTuple):
    recipients: List[str]
    body: str
    attachments: list
    subject: Optional[str]
    files_present: List[bool]
    thread_name: str
    text_body: Optional[str] = None


class FakeChannel(NotificationChannel):
    """In-memory channel recording every send.

    ``behavior`` replaces the default successful send, e.g. to block,
    raise or fail.
    """

    def __init__(
        self,
        name: str,
        requires_durable_url: bool = False,
        body_format: BodyFormat = BodyFormat.HTML,
        max_recipients: int = 5,
        behavior: Optional[Callable] = None,
    ):
        self.name = name
        self._capabilities = ChannelCapabilities(
            requires_durable_url=requires_durable_url,
            max_recipients=max_recipients,
            body_format=body_format,
        )
        self.behavior = behavior
        self.calls: List[SentCall] = []
        self._lock = threading.Lock()

    @property
    def channel_name(self) -> str:
        return self.name

    def capabilities(self) -> ChannelCapabilities:
        return self._capabilities

    def send(self, recipients, body, attachments, subject=None, text_body=None):
        with self._lock:
            self.calls.append(
                SentCall(
                    list(recipients),
                    body,
                    list(attachments),
                    subject,
                    [os.path.exists(a.path) for a in attachments],
                    threading.current_thread().name,
                    text_body,
                )
            )
        if self.behavior is not None:
            return self.behavior(recipients, body, attachments)
        return ChannelOutcome.from_deliveries(
            self.name,
            [Delivery(kind=DeliveryKind.EMAIL, target=",".join(recipients), success=True)],
        )

    def resolve_recipient(self, recipient: str) -> OperationResult:
        return OperationResult.success(data={"address": recipient})

    def health_check(self) -> OperationResult:
        return OperationResult.success()


@pytest.fixture
def fake_channel_factory():
    """Factory for FakeChannel instances.

    Example:
        email = fake_channel_factory("email")
        chat = fake_channel_factory("chat", requires_durable_url=True,
                                    body_format=BodyFormat.TEXT)
    """

    def _factory(name="email", **kwargs) -> FakeChannel:
        return FakeChannel(name, **kwargs)

    return _factory


@pytest.fixture
def staging_dir(tmp_path):
    path = tmp_path / "staging"
    path.mkdir()
    return path


@pytest.fixture
def stager(staging_dir):
    return AttachmentStager(staging_dir=str(staging_dir), max_files=10)


@pytest.fixture
def publisher():
    """Publisher mock returning a URL derived from the filename."""
    mock = MagicMock(spec=AssetPublisher)
    mock.publish.side_effect = lambda attachment: f"https://media.example.com/{attachment.filename}"
    return mock


@pytest.fixture
def dispatcher_factory(stager, publisher):
    """Factory for SubmissionDispatcher wired to test doubles.

    Every dispatcher built is shut down (waiting for its threads) at
    teardown.
    """
    created: List[SubmissionDispatcher] = []

    def _factory(channels, routes=None, recipients=None, **kwargs):
        names = [c.channel_name for c in channels]
        dispatcher = SubmissionDispatcher(
            stager=kwargs.pop("stager", stager),
            publisher=kwargs.pop("publisher", publisher),
            channels=channels,
            recipients=recipients
            if recipients is not None
            else {name: [f"{name}-recipient"] for name in names},
            routes=routes if routes is not None else {"default": names},
            **kwargs,
        )
        created.append(dispatcher)
        return dispatcher

    yield _factory

    for dispatcher in created:
        dispatcher.shutdown(wait=True)


@pytest.fixture
def form():
    return SubmissionForm(
        name="Ravi Kumar",
        phone="+919800000000",
        email="ravi@example.com",
        city="Jaipur",
        registration_number="RJ14 AB 1234",
        car_model="Swift",
        fuel_type="Petrol",
        kilometers_driven="42000",
        expected_price="450000",
        condition_scale="8",
    )


@pytest.fixture
def part_factory():
    def _factory(filename="front.jpg", content=b"\xff\xd8jpeg", content_type=None):
        return UploadPart(filename=filename, content=content, content_type=content_type)

    return _factory
