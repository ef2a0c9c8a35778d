"""Email notification pipeline for Amayalert.

This package provides:
- NotificationService: dispatch façade, one method per message family
- EmailTransport: single and BCC bulk sends with result envelopes
- SMTPClient: smtplib wrapper with TLS/SSL support
- TemplateRenderer: Jinja2-based email template rendering
- Payload schemas: validated inputs for each message family
"""

from .models import (
    AlertLevel,
    DispatchResult,
    EvacuationStatus,
    NotificationError,
    NotificationTemplateError,
    OutgoingEmail,
    RenderedEmail,
    SMTPDeliveryError,
)
from .recipients import parse_recipients, validate_and_format_emails
from .schemas import (
    BulkEmail,
    ContactFormSubmission,
    EmergencyAlert,
    EmergencyAlertPayload,
    EvacuationCenterUpdate,
    SingleEmail,
)
from .service import NotificationService
from .smtp_client import SMTPClient
from .templates import TemplateRenderer
from .transport import EmailTransport

__all__ = [
    # Main service
    "NotificationService",
    # Components
    "EmailTransport",
    "SMTPClient",
    "TemplateRenderer",
    # Models and results
    "AlertLevel",
    "EvacuationStatus",
    "DispatchResult",
    "OutgoingEmail",
    "RenderedEmail",
    # Payloads
    "BulkEmail",
    "ContactFormSubmission",
    "EmergencyAlert",
    "EmergencyAlertPayload",
    "EvacuationCenterUpdate",
    "SingleEmail",
    # Exceptions
    "NotificationError",
    "NotificationTemplateError",
    "SMTPDeliveryError",
    # Utilities
    "parse_recipients",
    "validate_and_format_emails",
]
