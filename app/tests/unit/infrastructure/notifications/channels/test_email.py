"""Unit tests for EmailChannel (SMTP implementation)."""

import os
import smtplib

import pytest

from infrastructure.notifications.channels.email import PLAIN_TEXT_FALLBACK, EmailChannel
from infrastructure.notifications.models import BodyFormat, DeliveryKind
from modules.submissions.models import SubmissionForm
from modules.submissions.renderer import render_subject


@pytest.mark.unit
class TestEmailChannel:
    """Tests for EmailChannel implementation."""

    @pytest.fixture
    def email_channel(self, smtp_settings):
        return EmailChannel(smtp_settings, timeout=5.0)

    def test_channel_name(self, email_channel):
        assert email_channel.channel_name == "email"

    def test_capabilities(self, email_channel):
        capabilities = email_channel.capabilities()

        assert capabilities.requires_durable_url is False
        assert capabilities.max_recipients == 50
        assert capabilities.body_format is BodyFormat.HTML

    def test_send_success(self, email_channel, mock_smtp, attachment_factory):
        attachments = [
            attachment_factory("front.jpg"),
            attachment_factory("rc.pdf", b"%PDF", "application/pdf"),
        ]

        outcome = email_channel.send(
            ["a@example.com", "b@example.com"],
            "<p>body</p>",
            attachments,
            subject="New Car Submission Received",
        )

        assert outcome.success
        assert outcome.channel == "email"
        assert len(outcome.deliveries) == 1
        delivery = outcome.deliveries[0]
        assert delivery.kind is DeliveryKind.EMAIL
        assert delivery.external_id

        mock_smtp.assert_called_once_with("smtp.example.com", 587, timeout=5.0)
        connection = mock_smtp.return_value
        connection.starttls.assert_called_once()
        connection.login.assert_called_once_with("portal@example.com", "app-password")
        message = connection.send_message.call_args.args[0]
        assert message["To"] == "a@example.com, b@example.com"
        assert message["Subject"] == "New Car Submission Received"
        assert "Car Bazar" in message["From"]
        filenames = [part.get_filename() for part in message.iter_attachments()]
        assert filenames == ["front.jpg", "rc.pdf"]
        html = message.get_body(preferencelist=("html",))
        assert "<p>body</p>" in html.get_content()

    def test_send_without_tls(self, smtp_settings, mock_smtp):
        smtp_settings.SMTP_USE_TLS = False
        channel = EmailChannel(smtp_settings)

        channel.send(["a@example.com"], "<p>x</p>", [])

        mock_smtp.return_value.starttls.assert_not_called()

    def test_send_not_configured(self, smtp_settings, mock_smtp):
        smtp_settings.EMAIL_PASS = None
        channel = EmailChannel(smtp_settings)

        outcome = channel.send(["a@example.com"], "<p>x</p>", [])

        assert not outcome.success
        assert outcome.error_code == "NOT_CONFIGURED"
        mock_smtp.assert_not_called()

    def test_invalid_recipient_fails_outcome_but_others_receive(
        self, email_channel, mock_smtp
    ):
        outcome = email_channel.send(["not-an-address", "a@example.com"], "<p>x</p>", [])

        assert not outcome.success
        assert outcome.error_code == "INVALID_RECIPIENT"
        message = mock_smtp.return_value.send_message.call_args.args[0]
        assert message["To"] == "a@example.com"
        sent, rejected = outcome.deliveries
        assert sent.success and sent.target == "a@example.com"
        assert rejected.target == "not-an-address"
        assert rejected.error_code == "INVALID_RECIPIENT"

    def test_refused_recipient_fails_outcome(self, email_channel, mock_smtp):
        mock_smtp.return_value.send_message.return_value = {
            "b@example.com": (550, b"mailbox unavailable")
        }

        outcome = email_channel.send(["a@example.com", "b@example.com"], "<p>x</p>", [])

        assert not outcome.success
        assert outcome.error_code == "INVALID_RECIPIENT"
        assert outcome.sent_count == 1
        assert outcome.failed_count == 1
        sent, refused = outcome.deliveries
        assert sent.target == "a@example.com"
        assert refused.target == "b@example.com"

    def test_no_valid_recipients(self, email_channel, mock_smtp):
        outcome = email_channel.send(["nope"], "<p>x</p>", [])

        assert not outcome.success
        assert outcome.error_code == "INVALID_RECIPIENT"
        mock_smtp.assert_not_called()

    def test_no_recipients(self, email_channel, mock_smtp):
        outcome = email_channel.send([], "<p>x</p>", [])

        assert outcome.error_code == "NO_RECIPIENTS"
        mock_smtp.assert_not_called()

    def test_transport_failure_reported_before_rejected_addresses(
        self, email_channel, mock_smtp
    ):
        mock_smtp.return_value.login.side_effect = smtplib.SMTPAuthenticationError(
            535, b"bad"
        )

        outcome = email_channel.send(["nope", "a@example.com"], "<p>x</p>", [])

        assert outcome.error_code == "UNAUTHORIZED"
        assert outcome.failed_count == 2

    def test_subject_with_line_break_is_failed_outcome(self, email_channel, mock_smtp):
        outcome = email_channel.send(
            ["a@example.com"], "<p>x</p>", [], subject="Swift\nVXI"
        )

        assert not outcome.success
        assert outcome.error_code == "MESSAGE_BUILD_FAILED"
        mock_smtp.assert_not_called()

    def test_rendered_multiline_model_is_sent(self, email_channel, mock_smtp):
        form = SubmissionForm.from_form({"carModel": "Swift\nVXI"})

        outcome = email_channel.send(
            ["a@example.com"], "<p>x</p>", [], subject=render_subject(form)
        )

        assert outcome.success
        message = mock_smtp.return_value.send_message.call_args.args[0]
        assert message["Subject"] == "🚗 New Car Submission Received: Swift VXI"

    def test_text_alternative(self, email_channel, mock_smtp):
        email_channel.send(
            ["a@example.com"], "<p>x</p>", [], text_body="👤 *Name:* Ravi Kumar"
        )

        message = mock_smtp.return_value.send_message.call_args.args[0]
        plain = message.get_body(preferencelist=("plain",))
        assert "*Name:* Ravi Kumar" in plain.get_content()

    def test_text_alternative_defaults_to_notice(self, email_channel, mock_smtp):
        email_channel.send(["a@example.com"], "<p>x</p>", [])

        message = mock_smtp.return_value.send_message.call_args.args[0]
        plain = message.get_body(preferencelist=("plain",))
        assert plain.get_content().strip() == PLAIN_TEXT_FALLBACK

    @pytest.mark.parametrize(
        "error,expected",
        [
            (smtplib.SMTPAuthenticationError(535, b"bad"), "UNAUTHORIZED"),
            (TimeoutError("timed out"), "TIMEOUT"),
            (smtplib.SMTPServerDisconnected("gone"), "CONNECTION_ERROR"),
        ],
    )
    def test_login_failure_returns_failed_outcome(
        self, email_channel, mock_smtp, error, expected
    ):
        mock_smtp.return_value.login.side_effect = error

        outcome = email_channel.send(["a@example.com"], "<p>x</p>", [])

        assert not outcome.success
        assert outcome.error_code == expected
        assert outcome.deliveries[0].success is False
        mock_smtp.return_value.close.assert_called_once()

    def test_connect_failure_returns_failed_outcome(self, email_channel, mock_smtp):
        mock_smtp.side_effect = ConnectionRefusedError("refused")

        outcome = email_channel.send(["a@example.com"], "<p>x</p>", [])

        assert outcome.error_code == "CONNECTION_ERROR"

    def test_message_rejected(self, email_channel, mock_smtp):
        mock_smtp.return_value.send_message.side_effect = smtplib.SMTPDataError(
            552, b"too large"
        )

        outcome = email_channel.send(["a@example.com"], "<p>x</p>", [])

        assert outcome.error_code == "MESSAGE_REJECTED"

    def test_unreadable_attachment(self, email_channel, mock_smtp, attachment_factory):
        attachment = attachment_factory()
        os.remove(attachment.path)

        outcome = email_channel.send(["a@example.com"], "<p>x</p>", [attachment])

        assert outcome.error_code == "ATTACHMENT_UNREADABLE"
        mock_smtp.assert_not_called()

    def test_resolve_recipient(self, email_channel):
        assert email_channel.resolve_recipient(" a@example.com ").data == {
            "address": "a@example.com"
        }
        invalid = email_channel.resolve_recipient("a@")
        assert invalid.error_code == "INVALID_RECIPIENT"

    def test_health_check(self, email_channel, mock_smtp):
        assert email_channel.health_check().is_success

        mock_smtp.return_value.login.side_effect = smtplib.SMTPAuthenticationError(
            535, b"bad"
        )
        assert email_channel.health_check().error_code == "UNAUTHORIZED"
