"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class EmailConfig(BaseModel):
    """SMTP delivery settings."""

    use_tls: bool = Field(True, description="Use STARTTLS (or implicit TLS on port 465)")
    timeout_seconds: int = Field(
        30, ge=1, le=300, description="Socket timeout for SMTP connections"
    )
    sender_name: Optional[str] = Field(
        None, description="Display name for the From header (overrides SMTP_SENDER_NAME)"
    )

    @field_validator("sender_name")
    @classmethod
    def strip_sender_name(cls, v: Optional[str]) -> Optional[str]:
        """Strip whitespace; blank names fall back to the environment value."""
        if v is None:
            return None
        stripped = v.strip()
        return stripped or None


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class ServerConfig(BaseModel):
    """HTTP server binding."""

    host: str = Field("127.0.0.1", min_length=1, description="Interface to bind")
    port: int = Field(8000, ge=1, le=65535, description="Port to listen on")


class AppConfig(BaseModel):
    """Root configuration object for the notifier service."""

    email: EmailConfig = Field(default_factory=EmailConfig, description="SMTP settings")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    server: ServerConfig = Field(default_factory=ServerConfig, description="HTTP server")
