"""Validated input payloads for each message family.

Parsing a payload into one of these models is the validation step: a model
instance always satisfies its family's required-field rules, so the dispatch
façade never sees a half-formed request. JSON field names (camelCase) are
accepted as aliases next to the Python names.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from .models import AlertLevel, EvacuationStatus
from .recipients import normalize_address


INVALID_EMAIL_FORMAT = "Invalid email format"
BODY_REQUIRED = "Either text or html content is required"
RECIPIENTS_REQUIRED = "Recipients array is required and must not be empty"
INVALID_ALERT_LEVEL = (
    f"Invalid alert level. Must be one of: {', '.join(AlertLevel.values())}"
)


def is_valid_email(address: str) -> bool:
    """Syntax check through the same validator used for recipient lists."""
    try:
        normalize_address(address)
    except ValueError:
        return False
    return True


def _missing() -> PydanticCustomError:
    return PydanticCustomError("missing", "Field required")


class PayloadModel(BaseModel):
    """Base for all payloads: aliases accepted, unknown keys ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class ContactFormSubmission(PayloadModel):
    """A message left through the public contact form."""

    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    subject: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    inquiry_type: str = Field(..., min_length=1, alias="inquiryType")

    @field_validator("email")
    @classmethod
    def check_email_format(cls, v: str) -> str:
        if not is_valid_email(v):
            raise ValueError(INVALID_EMAIL_FORMAT)
        return v


class _BodyMixin(PayloadModel):
    text: Optional[str] = None
    html: Optional[str] = None

    @model_validator(mode="after")
    def require_body(self):
        if not self.text and not self.html:
            raise ValueError(BODY_REQUIRED)
        return self


class SingleEmail(_BodyMixin):
    """A caller-authored email to one or more direct recipients."""

    to: Union[str, List[str]]
    subject: str = Field(..., min_length=1)
    sender: Optional[str] = Field(None, alias="from")
    reply_to: Optional[str] = Field(None, alias="replyTo")

    @field_validator("to")
    @classmethod
    def require_recipient(cls, v: Union[str, List[str]]) -> Union[str, List[str]]:
        if isinstance(v, str):
            if not v.strip():
                raise _missing()
            return v.strip()
        cleaned = [address.strip() for address in v if address.strip()]
        if not cleaned:
            raise _missing()
        return cleaned

    def recipient_list(self) -> List[str]:
        return [self.to] if isinstance(self.to, str) else list(self.to)


class _RecipientsMixin(PayloadModel):
    recipients: List[str] = Field(default=None, validate_default=True)

    @field_validator("recipients", mode="before")
    @classmethod
    def require_recipients(cls, v):
        if not isinstance(v, list) or not v:
            raise ValueError(RECIPIENTS_REQUIRED)
        cleaned = []
        for address in v:
            if not isinstance(address, str):
                raise ValueError(f"Invalid recipient: {address!r}")
            address = address.strip()
            if not address:
                continue
            if not is_valid_email(address):
                raise ValueError(f"Invalid recipient email: {address}")
            cleaned.append(address)
        if not cleaned:
            raise ValueError(RECIPIENTS_REQUIRED)
        return cleaned


class BulkEmail(_BodyMixin, _RecipientsMixin):
    """A caller-authored email delivered to many hidden recipients."""

    subject: str = Field(..., min_length=1)


class EmergencyAlertPayload(PayloadModel):
    """Content of an emergency alert."""

    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    alert_level: AlertLevel = Field(..., alias="alertLevel")
    location: Optional[str] = None

    @field_validator("alert_level", mode="before")
    @classmethod
    def check_alert_level(cls, v):
        if isinstance(v, AlertLevel):
            return v
        if v is None or v == "":
            raise _missing()
        if v not in AlertLevel.values():
            raise ValueError(INVALID_ALERT_LEVEL)
        return v

    @field_validator("location")
    @classmethod
    def blank_location_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v


class EmergencyAlert(EmergencyAlertPayload, _RecipientsMixin):
    """An emergency alert addressed to an explicit recipient list."""


class EvacuationCenterUpdate(PayloadModel):
    """Status change of an evacuation center."""

    name: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    status: EvacuationStatus
    capacity: Optional[int] = Field(None, ge=0)
    current_occupancy: Optional[int] = Field(None, ge=0, alias="currentOccupancy")
