"""FastAPI dependencies for the notification service and the user directory."""

from typing import Generator, Optional

from fastapi import Request
from sqlalchemy.orm import Session

from notifier.mail import NotificationService


def get_notification_service(request: Request) -> NotificationService:
    """The service built at startup and stored on the app."""
    return request.app.state.notification_service


def get_db(request: Request) -> Generator[Optional[Session], None, None]:
    """Yield a directory session, or None when no database is configured."""
    session_factory = request.app.state.session_factory
    if session_factory is None:
        yield None
        return

    db = session_factory()
    try:
        yield db
    finally:
        db.close()
