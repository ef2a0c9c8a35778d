"""Shared fixtures: SMTP doubles and a fully wired notification service."""

from unittest.mock import MagicMock, Mock

import pytest

from notifier.config.environment import EnvironmentConfig
from notifier.logging.context import clear_log_context
from notifier.mail import EmailTransport, NotificationService, SMTPClient

ENV_VARS = (
    "SMTP_HOST",
    "SMTP_PORT",
    "SMTP_USER",
    "SMTP_PASSWORD",
    "SMTP_SENDER_NAME",
    "SMTP_FROM_ADDRESS",
    "CONTACT_INBOX",
    "LOG_LEVEL",
    "DATABASE_URL",
    "ENVIRONMENT",
)


@pytest.fixture(autouse=True)
def reset_log_context():
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every variable the service reads from the environment."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def mock_env_vars(clean_env):
    """Minimal valid environment."""
    clean_env.setenv("SMTP_USER", "alerts@example.com")
    clean_env.setenv("SMTP_PASSWORD", "secret123")
    return clean_env


@pytest.fixture
def env_config():
    return EnvironmentConfig(
        smtp_host="smtp.example.com",
        smtp_port=587,
        smtp_user="alerts@example.com",
        smtp_password="secret123",
        contact_inbox="inbox@example.com",
        environment="test",
    )


@pytest.fixture
def smtp_connection():
    """The object an smtplib.SMTP factory returns."""
    connection = MagicMock()
    connection.noop.return_value = (250, b"2.0.0 OK")
    return connection


@pytest.fixture
def smtp_factory(smtp_connection):
    return Mock(return_value=smtp_connection)


@pytest.fixture
def smtp_client(env_config, smtp_factory):
    return SMTPClient(env_config, smtp_factory=smtp_factory, smtp_ssl_factory=Mock())


@pytest.fixture
def transport(smtp_client):
    return EmailTransport(smtp_client)


@pytest.fixture
def notification_service(transport):
    return NotificationService(
        transport=transport,
        contact_inbox="inbox@example.com",
        environment="test",
        test_recipient="alerts@example.com",
    )


@pytest.fixture
def sent_messages(smtp_connection):
    """Callable returning the EmailMessages handed to send_message so far."""

    def _sent():
        return [c.args[0] for c in smtp_connection.send_message.call_args_list]

    return _sent
