"""Transport adapter: turn outgoing emails into SMTP transmissions.

Every operation makes exactly one attempt and reports the outcome as a
DispatchResult instead of raising, so callers can map it straight onto a
response envelope.
"""

from email.errors import MessageError
from email.message import EmailMessage
from email.utils import formatdate, make_msgid, parseaddr
from typing import Optional, Sequence

from notifier.logging import get_logger

from .models import DispatchResult, OutgoingEmail
from .smtp_client import SMTPClient

logger = get_logger(__name__, component="transport")


def build_message(
    subject: str,
    sender: str,
    text: Optional[str] = None,
    html: Optional[str] = None,
    to: Optional[str] = None,
    bcc: Optional[Sequence[str]] = None,
    reply_to: Optional[str] = None,
) -> EmailMessage:
    """Assemble an EmailMessage with headers and body parts.

    Text and HTML together become multipart/alternative with the text part
    first; a single body is sent as that content type alone.

    Args:
        subject: Subject line
        sender: From header
        text: Plain text body
        html: HTML body
        to: Visible recipients, already joined
        bcc: Hidden recipients
        reply_to: Reply-To header

    Returns:
        EmailMessage with a fresh Message-ID
    """
    message = EmailMessage()
    message["Subject"] = subject
    message["From"] = sender
    if to:
        message["To"] = to
    if bcc:
        message["Bcc"] = ", ".join(bcc)
    if reply_to:
        message["Reply-To"] = reply_to
    message["Date"] = formatdate(localtime=True)

    domain = parseaddr(sender)[1].rpartition("@")[2] or None
    message["Message-ID"] = make_msgid(domain=domain)

    if text and html:
        message.set_content(text)
        message.add_alternative(html, subtype="html")
    elif html:
        message.set_content(html, subtype="html")
    else:
        message.set_content(text or "")

    return message


class EmailTransport:
    """Send single and bulk emails through one SMTP client."""

    def __init__(self, smtp_client: SMTPClient):
        self.smtp_client = smtp_client

    @property
    def sender_address(self) -> str:
        return self.smtp_client.sender_address

    def send_email(self, email: OutgoingEmail) -> DispatchResult:
        """Send to one or more direct recipients.

        A recipient list is joined into a single To header, order preserved.

        Args:
            email: Message to send

        Returns:
            DispatchResult with the Message-ID on success
        """
        recipients = email.recipients()
        try:
            message = build_message(
                subject=email.subject,
                sender=email.sender or self.sender_address,
                text=email.text,
                html=email.html,
                to=", ".join(recipients),
                reply_to=email.reply_to,
            )
        except (ValueError, MessageError) as e:
            return self._rejected(e)

        error = self._deliver(message)
        if error:
            return DispatchResult.failure(error)

        logger.info(
            f"Email sent to {len(recipients)} recipient(s)",
            extra={
                "event": "email.send.success",
                "message_id": message["Message-ID"],
                "recipient_count": len(recipients),
            },
        )
        return DispatchResult(
            success=True,
            message_id=message["Message-ID"],
            message="Email sent successfully",
        )

    def send_bulk(
        self,
        recipients: Sequence[str],
        subject: str,
        text: Optional[str] = None,
        html: Optional[str] = None,
    ) -> DispatchResult:
        """Send one transmission with every recipient in Bcc.

        No To or Cc header is set, so recipients cannot see each other. The
        send succeeds or fails as a unit.

        Args:
            recipients: Hidden recipients
            subject: Subject line
            text: Plain text body
            html: HTML body

        Returns:
            DispatchResult annotated with the recipient count
        """
        recipients = list(recipients)
        if not recipients:
            return DispatchResult.failure("No recipients provided")
        if not text and not html:
            return DispatchResult.failure("Either text or html content is required")

        try:
            message = build_message(
                subject=subject,
                sender=self.sender_address,
                text=text,
                html=html,
                bcc=recipients,
            )
        except (ValueError, MessageError) as e:
            return self._rejected(e)

        error = self._deliver(message)
        if error:
            return DispatchResult.failure(error)

        logger.info(
            f"Bulk email sent to {len(recipients)} recipients",
            extra={
                "event": "email.bulk.success",
                "message_id": message["Message-ID"],
                "recipient_count": len(recipients),
            },
        )
        return DispatchResult(
            success=True,
            message_id=message["Message-ID"],
            message=f"Bulk email sent to {len(recipients)} recipients",
            recipient_count=len(recipients),
        )

    def verify_connection(self) -> bool:
        """Check that the SMTP server accepts a connection and login.

        Returns:
            True if the handshake succeeded, False otherwise
        """
        try:
            self.smtp_client.verify()
        except Exception as e:
            logger.warning(
                f"SMTP connection verification failed: {e}",
                extra={"event": "email.verify.failed", "error_type": type(e).__name__},
            )
            return False

        logger.debug("SMTP connection verified", extra={"event": "email.verify.success"})
        return True

    def _deliver(self, message: EmailMessage) -> Optional[str]:
        """Send once; return an error description instead of raising."""
        try:
            self.smtp_client.send(message)
        except Exception as e:
            logger.error(
                f"Email delivery failed: {e}",
                exc_info=True,
                extra={
                    "event": "email.send.failure",
                    "message_id": message["Message-ID"],
                    "error_type": type(e).__name__,
                },
            )
            return str(e) or type(e).__name__
        return None

    def _rejected(self, error: Exception) -> DispatchResult:
        """Report a message that could not be assembled, e.g. a header with a line break."""
        logger.warning(
            f"Email rejected before delivery: {error}",
            extra={"event": "email.build.failure", "error_type": type(error).__name__},
        )
        return DispatchResult.failure(f"Invalid email headers: {error}")
