"""SMTP client wrapper for email delivery.

This module provides a thin wrapper around Python's smtplib with support
for TLS/SSL, authentication, and proper connection lifecycle management.
The connection profile is fixed at construction; every send opens and
closes its own connection.
"""

import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr
from typing import Callable, Optional

from notifier.config.environment import EnvironmentConfig
from notifier.config.models import EmailConfig
from notifier.logging import get_logger

from .models import SMTPDeliveryError

logger = get_logger(__name__, component="smtp")

IMPLICIT_TLS_PORT = 465


class SMTPClient:
    """Wrapper around smtplib for one configured SMTP server.

    Handles connection lifecycle, TLS/SSL negotiation and authentication.
    The smtplib factories can be injected so tests never open sockets.
    """

    def __init__(
        self,
        env_config: EnvironmentConfig,
        email_config: Optional[EmailConfig] = None,
        smtp_factory: Optional[Callable] = None,
        smtp_ssl_factory: Optional[Callable] = None,
    ):
        """Initialize SMTP client.

        Args:
            env_config: Environment configuration with host, port and credentials
            email_config: TLS and timeout settings (defaults if None)
            smtp_factory: Factory for SMTP instances (for mocking)
            smtp_ssl_factory: Factory for SMTP_SSL instances (for mocking)
        """
        self.env_config = env_config
        self.email_config = email_config or EmailConfig()
        self.smtp_factory = smtp_factory or smtplib.SMTP
        self.smtp_ssl_factory = smtp_ssl_factory or smtplib.SMTP_SSL

    @property
    def sender_address(self) -> str:
        """Default From header, e.g. "Amayalert Support" <alerts@example.com>."""
        sender_name = self.email_config.sender_name or self.env_config.smtp_sender_name
        return formataddr((sender_name, self.env_config.smtp_from_address))

    def send(self, message: EmailMessage) -> None:
        """Send an email message via SMTP.

        Recipients are taken from the To, Cc and Bcc headers; smtplib strips
        Bcc from the transmitted copy.

        Args:
            message: Fully constructed EmailMessage to send

        Raises:
            SMTPDeliveryError: If message delivery fails
        """
        smtp = None
        try:
            smtp = self._open()
            smtp.send_message(message)
            logger.debug(f"Message {message['Message-ID']} accepted by {self.env_config.smtp_host}")

        except smtplib.SMTPException as e:
            error_msg = f"SMTP error during message delivery: {e}"
            logger.error(error_msg)
            raise SMTPDeliveryError(error_msg) from e
        except OSError as e:
            error_msg = f"Network error during SMTP connection: {e}"
            logger.error(error_msg)
            raise SMTPDeliveryError(error_msg) from e
        finally:
            self._close(smtp)

    def verify(self) -> None:
        """Handshake with the server without sending anything.

        Connects, negotiates TLS, authenticates and issues NOOP.

        Raises:
            SMTPDeliveryError: If any step fails
        """
        smtp = None
        try:
            smtp = self._open()
            code, _ = smtp.noop()
            if code != 250:
                raise SMTPDeliveryError(f"SMTP server answered NOOP with status {code}")

        except smtplib.SMTPException as e:
            raise SMTPDeliveryError(f"SMTP handshake failed: {e}") from e
        except OSError as e:
            raise SMTPDeliveryError(f"Network error during SMTP handshake: {e}") from e
        finally:
            self._close(smtp)

    def _open(self):
        """Connect, upgrade to TLS when configured, and log in."""
        host = self.env_config.smtp_host
        port = self.env_config.smtp_port
        timeout = self.email_config.timeout_seconds

        if port == IMPLICIT_TLS_PORT:
            logger.debug(f"Connecting to {host}:{port} with implicit TLS")
            context = ssl.create_default_context()
            smtp = self.smtp_ssl_factory(host, port, timeout=timeout, context=context)
        else:
            logger.debug(f"Connecting to {host}:{port}")
            smtp = self.smtp_factory(host, port, timeout=timeout)

        try:
            if port != IMPLICIT_TLS_PORT and self.email_config.use_tls:
                logger.debug("Upgrading connection with STARTTLS")
                context = ssl.create_default_context()
                smtp.starttls(context=context)

            if self.env_config.smtp_user and self.env_config.smtp_password:
                logger.debug(f"Authenticating as {self.env_config.smtp_user}")
                smtp.login(self.env_config.smtp_user, self.env_config.smtp_password)
            else:
                logger.debug("No authentication credentials provided, proceeding without auth")
        except Exception:
            # Caller never receives this connection, so close it here
            self._close(smtp)
            raise

        return smtp

    @staticmethod
    def _close(smtp) -> None:
        if smtp is None:
            return
        try:
            smtp.quit()
        except Exception as e:
            logger.warning(f"Error closing SMTP connection: {e}")
