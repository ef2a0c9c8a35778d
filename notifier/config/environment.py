"""Environment variable loading and validation."""

import os
from typing import Optional

from .exceptions import ConfigurationError

DEFAULT_SMTP_HOST = "smtp.gmail.com"
DEFAULT_SMTP_PORT = 587
DEFAULT_SENDER_NAME = "Amayalert Support"


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        smtp_host: str,
        smtp_port: int,
        smtp_user: str,
        smtp_password: str,
        smtp_sender_name: Optional[str] = None,
        smtp_from_address: Optional[str] = None,
        contact_inbox: Optional[str] = None,
        log_level: Optional[str] = None,
        database_url: Optional[str] = None,
        environment: Optional[str] = None,
    ):
        """Initialize environment configuration."""
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_password = smtp_password
        self.smtp_sender_name = smtp_sender_name or DEFAULT_SENDER_NAME
        self.smtp_from_address = smtp_from_address or smtp_user
        self.contact_inbox = contact_inbox or self.smtp_from_address
        self.log_level = log_level
        self.database_url = database_url or "sqlite:///./data/amayalert.db"
        self.environment = environment or "local"

    def __repr__(self) -> str:
        return (
            f"EnvironmentConfig(smtp_host={self.smtp_host!r}, smtp_port={self.smtp_port}, "
            f"smtp_user={self.smtp_user!r}, smtp_password='***')"
        )


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    Required environment variables:
    - SMTP_USER: SMTP authentication username
    - SMTP_PASSWORD: SMTP authentication password

    Optional environment variables:
    - SMTP_HOST: SMTP server hostname (default: smtp.gmail.com)
    - SMTP_PORT: SMTP server port, 1-65535 (default: 587)
    - SMTP_SENDER_NAME: Display name for the From header
    - SMTP_FROM_ADDRESS: From address (default: SMTP_USER)
    - CONTACT_INBOX: Where contact-form submissions are delivered
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - DATABASE_URL: User directory database URL
    - ENVIRONMENT: Environment label used in logs and test emails

    Credentials never fall back to built-in values; a missing one fails startup.

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If required variables are missing or invalid
    """
    # Deferred: notifier.mail imports this module
    from notifier.mail.recipients import normalize_address

    errors = []

    smtp_host = os.getenv("SMTP_HOST") or DEFAULT_SMTP_HOST
    smtp_port_str = os.getenv("SMTP_PORT")
    smtp_user = os.getenv("SMTP_USER")
    smtp_password = os.getenv("SMTP_PASSWORD")

    smtp_sender_name = os.getenv("SMTP_SENDER_NAME")
    smtp_from_address = os.getenv("SMTP_FROM_ADDRESS")
    contact_inbox = os.getenv("CONTACT_INBOX")
    log_level = os.getenv("LOG_LEVEL")
    database_url = os.getenv("DATABASE_URL")
    environment = os.getenv("ENVIRONMENT")

    if not smtp_user:
        errors.append("Missing required environment variable: SMTP_USER")

    if not smtp_password:
        errors.append("Missing required environment variable: SMTP_PASSWORD")

    smtp_port = DEFAULT_SMTP_PORT
    if smtp_port_str:
        try:
            smtp_port = int(smtp_port_str)
            if smtp_port < 1 or smtp_port > 65535:
                errors.append(
                    f"Invalid SMTP_PORT: {smtp_port}. Must be between 1 and 65535."
                )
        except ValueError:
            errors.append(
                f"Invalid SMTP_PORT: '{smtp_port_str}'. Must be a valid integer."
            )

    for name, value in (
        ("SMTP_FROM_ADDRESS", smtp_from_address),
        ("CONTACT_INBOX", contact_inbox),
    ):
        if not value:
            continue
        try:
            normalize_address(value)
        except ValueError:
            errors.append(f"Invalid email address format in {name}: '{value}'")

    if log_level:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if log_level.upper() not in valid_levels:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(valid_levels)}"
            )

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and fill in your SMTP credentials",
                "Set SMTP_USER and SMTP_PASSWORD; there are no built-in credentials",
                "Verify SMTP_PORT is a number between 1 and 65535",
            ],
        )

    return EnvironmentConfig(
        smtp_host=smtp_host,
        smtp_port=smtp_port,
        smtp_user=smtp_user,
        smtp_password=smtp_password,
        smtp_sender_name=smtp_sender_name,
        smtp_from_address=smtp_from_address,
        contact_inbox=contact_inbox,
        log_level=log_level,
        database_url=database_url,
        environment=environment,
    )

