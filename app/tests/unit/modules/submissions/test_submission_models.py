"""Unit tests for submission models."""

import pytest
from pydantic import ValidationError

from infrastructure.notifications import ChannelOutcome
from modules.submissions.models import DispatchState, SubmissionForm, SubmissionResult


@pytest.mark.unit
class TestSubmissionForm:
    def test_from_form_reads_camel_case_fields(self):
        form = SubmissionForm.from_form(
            {
                "name": "Ravi",
                "registrationNumber": "RJ14",
                "kilometersDriven": "42000",
                "submissionType": "default",
                "unknown": "ignored",
            }
        )

        assert form.name == "Ravi"
        assert form.registration_number == "RJ14"
        assert form.kilometers_driven == "42000"

    def test_values_are_coerced_to_text(self):
        form = SubmissionForm(
            expected_price=450000, rc_available=True, condition_scale=[8], name="  "
        )

        assert form.expected_price == "450000"
        assert form.rc_available == "Yes"
        assert form.condition_scale == "8"
        assert form.name is None

    def test_frozen(self):
        form = SubmissionForm(name="Ravi")

        with pytest.raises(ValidationError):
            form.name = "Other"


@pytest.mark.unit
class TestSubmissionResult:
    def test_outcome_lookup_and_any_success(self):
        result = SubmissionResult(
            submission_id="abc",
            state=DispatchState.PARTIALLY_FAILED,
            outcomes=[
                ChannelOutcome(channel="email", success=True),
                ChannelOutcome.failed("chat", "TIMEOUT"),
            ],
        )

        assert result.any_success
        assert result.outcome_for("chat").error_code == "TIMEOUT"
        assert result.outcome_for("sms") is None

    def test_terminal_states(self):
        assert DispatchState.COMPLETED.is_terminal
        assert DispatchState.REJECTED_AT_STAGING.is_terminal
        assert not DispatchState.DISPATCHING.is_terminal
