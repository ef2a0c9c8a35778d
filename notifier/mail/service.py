"""Dispatch façade for outgoing notifications.

NotificationService exposes one method per message family. Each takes an
already-validated payload, renders the family's templates, hands the result
to the transport adapter and returns its DispatchResult. Calls are stateless
and independent of each other.
"""

import logging
from typing import Optional, Sequence, Union

from notifier.config.environment import EnvironmentConfig
from notifier.config.models import EmailConfig
from notifier.logging import get_logger
from notifier.logging.context import log_context

from .models import AlertLevel, DispatchResult, NotificationTemplateError, OutgoingEmail, RenderedEmail
from .payloads import (
    build_contact_form_context,
    build_emergency_alert_context,
    build_evacuation_update_context,
    build_priority_notice_context,
    build_subscription_context,
    build_test_message_context,
)
from .schemas import (
    INVALID_EMAIL_FORMAT,
    BulkEmail,
    ContactFormSubmission,
    EmergencyAlertPayload,
    EvacuationCenterUpdate,
    SingleEmail,
    is_valid_email,
)
from .smtp_client import SMTPClient
from .templates import TemplateRenderer
from .transport import EmailTransport

logger = get_logger(__name__, component="notification")


class NotificationService:
    """Validate-render-send entry points for every message family.

    Only the transport is shared between calls, and it is read-only after
    construction.
    """

    def __init__(
        self,
        transport: EmailTransport,
        contact_inbox: str,
        template_renderer: Optional[TemplateRenderer] = None,
        environment: str = "local",
        test_recipient: Optional[str] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize notification service.

        Args:
            transport: Transport adapter used for every send
            contact_inbox: Address that receives contact-form submissions
            template_renderer: Template renderer (creates default if None)
            environment: Environment label shown in test emails
            test_recipient: Default recipient of the transport test message
            logger_instance: Logger instance (uses module logger if None)
        """
        self.transport = transport
        self.contact_inbox = contact_inbox
        self.template_renderer = template_renderer or TemplateRenderer()
        self.environment = environment
        self.test_recipient = test_recipient or contact_inbox
        self.logger = logger_instance or logger

    @classmethod
    def from_config(
        cls,
        env_config: EnvironmentConfig,
        email_config: Optional[EmailConfig] = None,
    ) -> "NotificationService":
        """Wire SMTP client, transport and renderer from configuration."""
        smtp_client = SMTPClient(env_config, email_config)
        return cls(
            transport=EmailTransport(smtp_client),
            contact_inbox=env_config.contact_inbox,
            environment=env_config.environment,
            test_recipient=env_config.smtp_from_address,
        )

    def send_contact_form(self, submission: ContactFormSubmission) -> DispatchResult:
        """Forward a contact-form submission to the contact inbox.

        Reply-To is the submitter, so the inbox can answer directly.
        """
        with log_context(email_type="contact-form"):
            self.logger.info(
                f"Sending contact form email from {submission.name}",
                extra={"event": "email.contact_form", "inquiry_type": submission.inquiry_type},
            )
            rendered = self._render("contact_form", build_contact_form_context(submission))
            if isinstance(rendered, DispatchResult):
                return rendered

            return self.transport.send_email(
                OutgoingEmail(
                    to=self.contact_inbox,
                    subject=rendered.subject,
                    text=rendered.text,
                    html=rendered.html,
                    reply_to=submission.email,
                )
            )

    def send_single_email(self, email: SingleEmail) -> DispatchResult:
        """Send a caller-authored email to its direct recipients."""
        with log_context(email_type="single-email"):
            return self.transport.send_email(
                OutgoingEmail(
                    to=email.recipient_list(),
                    subject=email.subject,
                    text=email.text,
                    html=email.html,
                    sender=email.sender,
                    reply_to=email.reply_to,
                )
            )

    def send_bulk_email(self, bulk: BulkEmail) -> DispatchResult:
        """Send a caller-authored email to many hidden recipients."""
        with log_context(email_type="bulk-email"):
            return self.transport.send_bulk(
                bulk.recipients, bulk.subject, text=bulk.text, html=bulk.html
            )

    def send_emergency_alert(
        self, recipients: Sequence[str], alert: EmergencyAlertPayload
    ) -> DispatchResult:
        """Broadcast an emergency alert to hidden recipients."""
        with log_context(email_type="emergency-alert", alert_level=alert.alert_level.value):
            self.logger.info(
                f"Sending {alert.alert_level.value} emergency alert to {len(recipients)} recipients",
                extra={"event": "email.emergency_alert", "recipient_count": len(recipients)},
            )
            rendered = self._render("emergency_alert", build_emergency_alert_context(alert))
            if isinstance(rendered, DispatchResult):
                return rendered

            return self.transport.send_bulk(
                recipients, rendered.subject, text=rendered.text, html=rendered.html
            )

    def send_evacuation_update(
        self, recipients: Sequence[str], update: EvacuationCenterUpdate
    ) -> DispatchResult:
        """Tell recipients about an evacuation center's new status."""
        with log_context(email_type="evacuation-update"):
            rendered = self._render("evacuation_update", build_evacuation_update_context(update))
            if isinstance(rendered, DispatchResult):
                return rendered

            return self.transport.send_bulk(recipients, rendered.subject, text=rendered.text)

    def send_priority_notice(
        self,
        recipients: Sequence[str],
        message: str,
        level: Union[AlertLevel, str] = AlertLevel.MEDIUM,
    ) -> DispatchResult:
        """Send a free-text notice whose subject reflects its priority."""
        with log_context(email_type="priority-notice"):
            if not message or not message.strip():
                return DispatchResult.failure("Message is required")

            rendered = self._render("priority_notice", build_priority_notice_context(message, level))
            if isinstance(rendered, DispatchResult):
                return rendered

            return self.transport.send_bulk(recipients, rendered.subject, text=rendered.text)

    def send_subscription_confirmation(
        self, email: str, user_name: Optional[str] = None
    ) -> DispatchResult:
        """Welcome a user who subscribed to email alerts."""
        with log_context(email_type="subscription-welcome"):
            if not email or not is_valid_email(email):
                return DispatchResult.failure(INVALID_EMAIL_FORMAT)

            rendered = self._render("subscription_welcome", build_subscription_context(user_name))
            if isinstance(rendered, DispatchResult):
                return rendered

            return self.transport.send_email(
                OutgoingEmail(to=email, subject=rendered.subject, text=rendered.text, html=rendered.html)
            )

    def send_test_email(self, to: Optional[str] = None) -> DispatchResult:
        """Send the transport test message, by default to our own sender address."""
        with log_context(email_type="transport-test"):
            recipient = to or self.test_recipient
            rendered = self._render("transport_test", build_test_message_context(self.environment))
            if isinstance(rendered, DispatchResult):
                return rendered

            return self.transport.send_email(
                OutgoingEmail(to=recipient, subject=rendered.subject, text=rendered.text, html=rendered.html)
            )

    def verify_connection(self) -> bool:
        """Handshake with the SMTP server; never raises."""
        return self.transport.verify_connection()

    def _render(self, family: str, context: dict) -> Union[RenderedEmail, DispatchResult]:
        """Render a family, or return a failed result if the templates break."""
        try:
            return self.template_renderer.render(family, context)
        except NotificationTemplateError as e:
            # Template errors are developer misconfiguration, never retried
            self.logger.error(
                f"Template rendering failed: {e}",
                extra={"event": "email.render.failure", "template_family": family},
            )
            return DispatchResult.failure(f"Template rendering failed: {e}")
