"""Main entry point for the Amayalert notifier service."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

import uvicorn

from notifier.api import create_app
from notifier.config.environment import EnvironmentConfig
from notifier.config.exceptions import ConfigurationError
from notifier.config.loader import load_config
from notifier.config.models import AppConfig
from notifier.directory import close_database, init_database
from notifier.logging import get_logger
from notifier.logging.config import configure_logging
from notifier.mail import NotificationService, parse_recipients

logger = get_logger(__name__, component="cli")


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and settle the effective log level.

    Log level priority: CLI > environment > config file > INFO.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif env_config.log_level:
        pass
    elif app_config.logging and app_config.logging.level:
        env_config.log_level = app_config.logging.level
    else:
        env_config.log_level = "INFO"

    return app_config, env_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="amayalert-notifier",
        description="Amayalert notifier - email notifications for the emergency-management dashboard",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml or config/config.yaml if present)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    parser.add_argument("--host", default=None, help="Bind address (overrides config)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (overrides config)")

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--verify",
        action="store_true",
        help="Check the SMTP connection and exit (0 if it works, 1 otherwise)",
    )
    mode.add_argument(
        "--send-test",
        metavar="RECIPIENTS",
        default=None,
        help="Send the test message to comma-separated addresses and exit",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the Amayalert notifier.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    start_time = time.time()
    args = build_parser().parse_args(argv)

    try:
        # Load configuration before logging so the format is known
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        logger.info(
            "Amayalert notifier starting",
            extra={
                "event": "service.starting",
                "config_path": str(args.config) if args.config else None,
                "log_level": env_config.log_level,
                "smtp_host": env_config.smtp_host,
                "smtp_port": env_config.smtp_port,
            },
        )

        notification_service = NotificationService.from_config(env_config, app_config.email)

        if args.verify:
            connected = notification_service.verify_connection()
            print("SMTP connection verified" if connected else "SMTP connection failed")
            return 0 if connected else 1

        if args.send_test:
            try:
                recipients = parse_recipients(args.send_test)
            except ValueError as e:
                print(f"Error: {e}", file=sys.stderr)
                return 2

            had_failures = False
            for recipient in recipients:
                result = notification_service.send_test_email(recipient)
                if result.success:
                    print(f"Test email sent to {recipient} ({result.message_id})")
                else:
                    had_failures = True
                    print(f"Test email to {recipient} failed: {result.error}", file=sys.stderr)
            return 1 if had_failures else 0

        # The users table belongs to the platform; never create it here
        session_factory = init_database(env_config.database_url, create_tables=False)
        app = create_app(notification_service, session_factory)

        host = args.host or app_config.server.host
        port = args.port or app_config.server.port
        logger.info(
            f"Serving on http://{host}:{port}",
            extra={"event": "service.http.starting", "host": host, "port": port},
        )

        try:
            # log_config=None keeps uvicorn on the handlers configured above
            uvicorn.run(app, host=host, port=port, log_config=None)
        finally:
            close_database(session_factory)

        logger.info(
            "Amayalert notifier stopped",
            extra={
                "event": "service.stopping",
                "uptime_seconds": round(time.time() - start_time, 2),
            },
        )
        return 0

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e}",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return 1
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return 0
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error during startup",
            extra={
                "event": "service.startup.failed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
