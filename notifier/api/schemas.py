"""Request bodies accepted by the email endpoints.

POST /api/email carries a `type` tag that selects one of four request
variants. The variants are a pydantic discriminated union over the message
family payloads, so a parsed request is already a valid payload. Parse
failures are turned into the single human-readable message the endpoint
returns with a 400.
"""

from typing import Annotated, Any, ClassVar, Dict, List, Literal, Optional, Sequence, Union

from pydantic import Field, TypeAdapter, ValidationError

from notifier.mail.schemas import (
    BulkEmail,
    ContactFormSubmission,
    EmergencyAlert,
    EmergencyAlertPayload,
    SingleEmail,
)

from .exceptions import InvalidRequestError

SUPPORTED_TYPES = ("contact-form", "single-email", "bulk-email", "emergency-alert")

INVALID_REQUEST_BODY = "Invalid request body"
EMAIL_TYPE_REQUIRED = "Email type is required"

# Error types that mean "the caller left this out"
MISSING_ERROR_TYPES = {"missing", "string_too_short"}


class ContactFormRequest(ContactFormSubmission):
    type: Literal["contact-form"]

    missing_fields_message: ClassVar[str] = "Missing required contact form fields"


class SingleEmailRequest(SingleEmail):
    type: Literal["single-email"]

    missing_fields_message: ClassVar[str] = "Missing required fields: to, subject"


class BulkEmailRequest(BulkEmail):
    type: Literal["bulk-email"]

    missing_fields_message: ClassVar[str] = "Subject is required"


class EmergencyAlertRequest(EmergencyAlert):
    type: Literal["emergency-alert"]

    missing_fields_message: ClassVar[str] = "Missing required fields: title, content, alertLevel"


class EmergencyBroadcastRequest(EmergencyAlertPayload):
    """Body of POST /api/email/emergency; recipients come from the user directory."""

    user_ids: Optional[List[str]] = Field(None, alias="userIds")

    missing_fields_message: ClassVar[str] = "Missing required fields: title, content, alertLevel"


EmailRequest = Annotated[
    Union[ContactFormRequest, SingleEmailRequest, BulkEmailRequest, EmergencyAlertRequest],
    Field(discriminator="type"),
]

REQUEST_VARIANTS = {
    "contact-form": ContactFormRequest,
    "single-email": SingleEmailRequest,
    "bulk-email": BulkEmailRequest,
    "emergency-alert": EmergencyAlertRequest,
}

_email_request_adapter = TypeAdapter(EmailRequest)


def parse_email_request(payload: Any):
    """Parse the body of POST /api/email into its request variant.

    Args:
        payload: Decoded JSON body

    Returns:
        ContactFormRequest, SingleEmailRequest, BulkEmailRequest or
        EmergencyAlertRequest

    Raises:
        InvalidRequestError: With the message to return to the caller
    """
    if not isinstance(payload, dict):
        raise InvalidRequestError(INVALID_REQUEST_BODY)

    email_type = payload.get("type")
    if not email_type:
        raise InvalidRequestError(EMAIL_TYPE_REQUIRED)

    if email_type not in SUPPORTED_TYPES:
        raise InvalidRequestError(
            f"Invalid email type: {email_type}. Supported types: {', '.join(SUPPORTED_TYPES)}"
        )

    try:
        return _email_request_adapter.validate_python(payload)
    except ValidationError as e:
        # Tagged-union errors are located under the tag, e.g. ("bulk-email", "subject")
        raise InvalidRequestError(
            describe_validation_error(e.errors(), REQUEST_VARIANTS[email_type], prefix=email_type)
        ) from e


def parse_broadcast_request(payload: Any) -> EmergencyBroadcastRequest:
    """Parse the body of POST /api/email/emergency.

    Raises:
        InvalidRequestError: With the message to return to the caller
    """
    if not isinstance(payload, dict):
        raise InvalidRequestError(INVALID_REQUEST_BODY)

    try:
        return EmergencyBroadcastRequest.model_validate(payload)
    except ValidationError as e:
        raise InvalidRequestError(
            describe_validation_error(e.errors(), EmergencyBroadcastRequest)
        ) from e


def describe_validation_error(
    errors: Sequence[Dict[str, Any]], model, prefix: Optional[str] = None
) -> str:
    """Reduce pydantic errors to the one message the caller sees.

    Precedence: recipient-list problems, then missing fields (reported with
    the model's missing_fields_message), then the first other problem.
    """
    located = []
    for error in errors:
        loc = tuple(error.get("loc", ()))
        if prefix is not None and loc and loc[0] == prefix:
            loc = loc[1:]
        located.append((loc, error))

    for loc, error in located:
        if loc and loc[0] == "recipients":
            return _error_text(loc, error)

    if any(error["type"] in MISSING_ERROR_TYPES for _, error in located):
        return getattr(model, "missing_fields_message", None) or "Missing required fields: " + ", ".join(
            _field_name(loc) for loc, error in located if error["type"] in MISSING_ERROR_TYPES
        )

    loc, error = located[0]
    return _error_text(loc, error)


def _error_text(loc, error: Dict[str, Any]) -> str:
    if error["type"] == "value_error":
        cause = error.get("ctx", {}).get("error")
        if cause is not None:
            return str(cause)
    if not loc:
        return error.get("msg", INVALID_REQUEST_BODY)
    return f"Invalid value for {_field_name(loc)}: {error.get('msg')}"


def _field_name(loc) -> str:
    return ".".join(str(part) for part in loc) if loc else "body"
