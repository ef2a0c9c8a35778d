"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for potential issues and return warnings.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    email = config_dict.get("email", {})
    if isinstance(email, dict):
        if email.get("use_tls") is False:
            warning_messages.append(
                "email.use_tls is disabled; credentials will be sent in clear text"
            )

        timeout = email.get("timeout_seconds")
        if isinstance(timeout, int) and timeout < 5:
            warning_messages.append(
                f"Short email.timeout_seconds ({timeout}) may abort slow SMTP handshakes"
            )

    server = config_dict.get("server", {})
    if isinstance(server, dict) and server.get("host") == "0.0.0.0":
        warning_messages.append(
            "server.host is 0.0.0.0; the email API will accept requests on all interfaces"
        )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
