"""Submission domain models."""

from enum import Enum
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from infrastructure.notifications.models import ChannelOutcome


class SubmissionForm(BaseModel):
    """A seller's request to sell a car, as received from the web form.

    Every field is optional: absent values render as a placeholder and
    never fail a submission. Field aliases are the camelCase names the
    web form posts.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    city: Optional[str] = None
    registration_number: Optional[str] = Field(None, alias="registrationNumber")
    rc_available: Optional[str] = Field(None, alias="rcAvailable")
    insurance_available: Optional[str] = Field(None, alias="insuranceAvailable")
    car_model: Optional[str] = Field(None, alias="carModel")
    variant: Optional[str] = None
    fuel_type: Optional[str] = Field(None, alias="fuelType")
    ownership: Optional[str] = None
    kilometers_driven: Optional[str] = Field(None, alias="kilometersDriven")
    expected_price: Optional[str] = Field(None, alias="expectedPrice")
    condition_scale: Optional[str] = Field(None, alias="conditionScale")
    damage_remarks: Optional[str] = Field(None, alias="damageRemarks")

    @field_validator("*", mode="before")
    @classmethod
    def coerce_to_text(cls, value: Any) -> Optional[str]:
        """Numbers and flags arrive as strings from forms, JSON may send others."""
        if isinstance(value, (list, tuple)):
            value = value[0] if value else None
        if value is None:
            return None
        if isinstance(value, bool):
            return "Yes" if value else "No"
        text = str(value).strip()
        return text or None

    @classmethod
    def from_form(cls, data: Mapping[str, Any]) -> "SubmissionForm":
        """Build a form from multipart fields, ignoring file parts and unknown keys."""
        known = {
            field.alias or name for name, field in cls.model_fields.items()
        }
        return cls.model_validate(
            {key: value for key, value in data.items() if key in known}
        )


class DispatchState(Enum):
    """Lifecycle of one submission through the dispatcher."""

    RECEIVED = "received"
    STAGED = "staged"
    RENDERED = "rendered"
    DISPATCHING = "dispatching"
    AGGREGATED = "aggregated"
    COMPLETED = "completed"
    PARTIALLY_FAILED = "partially_failed"
    REJECTED_AT_STAGING = "rejected_at_staging"

    @property
    def is_terminal(self) -> bool:
        return self in (
            DispatchState.COMPLETED,
            DispatchState.PARTIALLY_FAILED,
            DispatchState.REJECTED_AT_STAGING,
        )


class SubmissionResult(BaseModel):
    """Terminal result of one dispatch.

    Attributes:
        submission_id: Unique id, also bound to every log line of the dispatch
        state: COMPLETED, PARTIALLY_FAILED or REJECTED_AT_STAGING
        outcomes: Exactly one outcome per configured channel (empty when
            rejected at staging)
        error_code: Staging error category when rejected
        leaked_files: Staged paths that could not be removed
    """

    submission_id: str
    state: DispatchState
    outcomes: List[ChannelOutcome] = Field(default_factory=list)
    error_code: Optional[str] = None
    leaked_files: List[str] = Field(default_factory=list)

    @property
    def any_success(self) -> bool:
        return any(outcome.success for outcome in self.outcomes)

    def outcome_for(self, channel: str) -> Optional[ChannelOutcome]:
        for outcome in self.outcomes:
            if outcome.channel == channel:
                return outcome
        return None
