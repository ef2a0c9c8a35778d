"""Data models and exceptions for the email notification pipeline.

This module defines the message, rendering and result types passed between
the template builder, the transport adapter and the dispatch façade.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union


class NotificationError(Exception):
    """Base exception for notification-related errors."""

    pass


class NotificationTemplateError(NotificationError):
    """Raised when template rendering fails due to configuration or missing variables."""

    pass


class SMTPDeliveryError(NotificationError):
    """Raised when the SMTP server cannot be reached or rejects a message."""

    pass


class AlertLevel(str, Enum):
    """Severity of an emergency alert."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @classmethod
    def values(cls) -> List[str]:
        return [level.value for level in cls]


class EvacuationStatus(str, Enum):
    """Operational status of an evacuation center."""

    OPEN = "open"
    FULL = "full"
    CLOSED = "closed"
    MAINTENANCE = "maintenance"


@dataclass
class OutgoingEmail:
    """A single email ready for the transport adapter.

    Attributes:
        to: One address or an ordered list of addresses
        subject: Subject line
        text: Plain text body
        html: HTML body
        sender: Override for the From header
        reply_to: Reply-To address

    Raises:
        ValueError: If there is no recipient or neither body is present
    """

    to: Union[str, Sequence[str]]
    subject: str
    text: Optional[str] = None
    html: Optional[str] = None
    sender: Optional[str] = None
    reply_to: Optional[str] = None

    def __post_init__(self):
        if not self.recipients():
            raise ValueError("At least one recipient is required")
        if not self.text and not self.html:
            raise ValueError("Either text or html content is required")

    def recipients(self) -> List[str]:
        """Return recipients as a list, preserving order."""
        if isinstance(self.to, str):
            return [self.to] if self.to.strip() else []
        return [address for address in self.to if address and address.strip()]


@dataclass
class RenderedEmail:
    """Output of the template builder."""

    subject: str
    text: Optional[str] = None
    html: Optional[str] = None
    reply_to: Optional[str] = None


@dataclass
class DispatchResult:
    """Outcome of one dispatch through the transport adapter.

    Attributes:
        success: Whether the SMTP server accepted the message
        message_id: Message-ID header of the sent message
        message: Human-readable outcome
        error: Error description when success is False
        recipient_count: Number of BCC recipients for bulk sends
    """

    success: bool
    message_id: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None
    recipient_count: Optional[int] = None

    @classmethod
    def failure(cls, error: str) -> "DispatchResult":
        return cls(success=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        """JSON envelope with camelCase keys; unset fields are omitted."""
        payload: Dict[str, Any] = {"success": self.success}
        for key, value in (
            ("messageId", self.message_id),
            ("message", self.message),
            ("error", self.error),
            ("recipientCount", self.recipient_count),
        ):
            if value is not None:
                payload[key] = value
        return payload
