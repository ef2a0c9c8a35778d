"""Tests for configuration loading from the environment and YAML files."""

from pathlib import Path

import pytest

from notifier.config import (
    AppConfig,
    ConfigurationError,
    EmailConfig,
    load_config,
    load_environment_config,
)
from notifier.config.environment import DEFAULT_SENDER_NAME, EnvironmentConfig
from notifier.config.loader import _find_config_file


class TestEnvironmentVariables:
    """Test environment variable loading."""

    def test_load_valid_environment_config(self, mock_env_vars):
        env_config = load_environment_config()

        assert env_config.smtp_host == "smtp.gmail.com"
        assert env_config.smtp_port == 587
        assert env_config.smtp_user == "alerts@example.com"
        assert env_config.smtp_password == "secret123"

    def test_defaults_derive_from_smtp_user(self, mock_env_vars):
        env_config = load_environment_config()

        assert env_config.smtp_sender_name == DEFAULT_SENDER_NAME
        assert env_config.smtp_from_address == "alerts@example.com"
        assert env_config.contact_inbox == "alerts@example.com"
        assert env_config.environment == "local"
        assert env_config.database_url.startswith("sqlite:///")

    def test_optional_env_vars(self, mock_env_vars):
        mock_env_vars.setenv("SMTP_HOST", "mail.example.org")
        mock_env_vars.setenv("SMTP_PORT", "465")
        mock_env_vars.setenv("SMTP_SENDER_NAME", "Amayalert Alerts")
        mock_env_vars.setenv("SMTP_FROM_ADDRESS", "noreply@example.org")
        mock_env_vars.setenv("CONTACT_INBOX", "support@example.org")
        mock_env_vars.setenv("LOG_LEVEL", "DEBUG")
        mock_env_vars.setenv("ENVIRONMENT", "staging")

        env_config = load_environment_config()

        assert env_config.smtp_host == "mail.example.org"
        assert env_config.smtp_port == 465
        assert env_config.smtp_sender_name == "Amayalert Alerts"
        assert env_config.smtp_from_address == "noreply@example.org"
        assert env_config.contact_inbox == "support@example.org"
        assert env_config.log_level == "DEBUG"
        assert env_config.environment == "staging"

    def test_missing_credentials_fail_startup(self, clean_env):
        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config()

        errors = exc_info.value.errors
        assert "Missing required environment variable: SMTP_USER" in errors
        assert "Missing required environment variable: SMTP_PASSWORD" in errors

    def test_missing_password_only(self, clean_env):
        clean_env.setenv("SMTP_USER", "alerts@example.com")

        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config()

        assert exc_info.value.errors == ["Missing required environment variable: SMTP_PASSWORD"]

    def test_invalid_smtp_port(self, mock_env_vars):
        mock_env_vars.setenv("SMTP_PORT", "not-a-number")

        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config()

        assert "Invalid SMTP_PORT" in str(exc_info.value)

    def test_smtp_port_out_of_range(self, mock_env_vars):
        mock_env_vars.setenv("SMTP_PORT", "70000")

        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config()

        assert "between 1 and 65535" in str(exc_info.value)

    def test_invalid_email_format(self, mock_env_vars):
        mock_env_vars.setenv("CONTACT_INBOX", "not-an-email")

        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config()

        assert "CONTACT_INBOX" in str(exc_info.value)

    def test_invalid_from_address(self, mock_env_vars):
        mock_env_vars.setenv("SMTP_FROM_ADDRESS", "alerts..ops@example.com")

        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config()

        assert "SMTP_FROM_ADDRESS" in str(exc_info.value)

    def test_invalid_log_level(self, mock_env_vars):
        mock_env_vars.setenv("LOG_LEVEL", "LOUD")

        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config()

        assert "Invalid LOG_LEVEL" in str(exc_info.value)

    def test_all_problems_reported_together(self, clean_env):
        clean_env.setenv("SMTP_PORT", "0")

        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config()

        assert len(exc_info.value.errors) == 3
        message = str(exc_info.value)
        assert "1. Missing required environment variable: SMTP_USER" in message
        assert "Suggestions:" in message

    def test_repr_masks_password(self):
        env_config = EnvironmentConfig(
            smtp_host="smtp.example.com",
            smtp_port=587,
            smtp_user="alerts@example.com",
            smtp_password="hunter2",
        )

        assert "hunter2" not in repr(env_config)
        assert "***" in repr(env_config)


class TestConfigurationLoading:
    """Test configuration loading from YAML files."""

    def test_no_config_file_uses_defaults(self, tmp_path, mock_env_vars):
        mock_env_vars.chdir(tmp_path)

        app_config, env_config = load_config()

        assert app_config == AppConfig()
        assert app_config.email.use_tls is True
        assert app_config.email.timeout_seconds == 30
        assert app_config.server.port == 8000
        assert env_config.smtp_user == "alerts@example.com"

    def test_load_valid_config(self, tmp_path, mock_env_vars):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "email:\n"
            "  timeout_seconds: 10\n"
            "  sender_name: '  Amayalert Alerts  '\n"
            "logging:\n"
            "  level: DEBUG\n"
            "  format: json\n"
            "server:\n"
            "  port: 9000\n"
        )

        app_config, _ = load_config(config_file)

        assert app_config.email.timeout_seconds == 10
        assert app_config.email.sender_name == "Amayalert Alerts"
        assert app_config.logging.level == "DEBUG"
        assert app_config.logging.format == "json"
        assert app_config.server.port == 9000
        assert app_config.server.host == "127.0.0.1"

    def test_default_location_is_found(self, tmp_path, mock_env_vars):
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "config.yaml").write_text("server:\n  port: 8080\n")
        mock_env_vars.chdir(tmp_path)

        assert _find_config_file() == Path("config") / "config.yaml"
        app_config, _ = load_config()
        assert app_config.server.port == 8080

    def test_empty_file_means_defaults(self, tmp_path, mock_env_vars):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")

        app_config, _ = load_config(config_file)

        assert app_config == AppConfig()

    def test_config_file_not_found(self, mock_env_vars):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(Path("nonexistent.yaml"))

        assert "not found" in str(exc_info.value)

    def test_invalid_yaml_syntax(self, tmp_path, mock_env_vars):
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("email: [unclosed\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(config_file)

        assert "Failed to parse YAML" in str(exc_info.value)

    def test_top_level_must_be_mapping(self, tmp_path, mock_env_vars):
        config_file = tmp_path / "list.yaml"
        config_file.write_text("- one\n- two\n")

        with pytest.raises(ConfigurationError):
            load_config(config_file)

    def test_invalid_values_are_reported(self, tmp_path, mock_env_vars):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("email:\n  timeout_seconds: 0\nlogging:\n  format: xml\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(config_file)

        message = str(exc_info.value)
        assert "email -> timeout_seconds" in message
        assert "logging -> format" in message

    def test_suspicious_settings_warn(self, tmp_path, mock_env_vars):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("email:\n  use_tls: false\nserver:\n  host: 0.0.0.0\n")

        with pytest.warns(UserWarning) as record:
            load_config(config_file)

        messages = [str(w.message) for w in record]
        assert any("use_tls" in m for m in messages)
        assert any("0.0.0.0" in m for m in messages)

    def test_environment_errors_propagate(self, tmp_path, clean_env):
        clean_env.chdir(tmp_path)

        with pytest.raises(ConfigurationError):
            load_config()


def test_email_config_blank_sender_name_is_none():
    assert EmailConfig(sender_name="   ").sender_name is None
