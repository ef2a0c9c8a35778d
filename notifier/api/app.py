"""HTTP endpoints for sending and checking email notifications.

    POST /api/email            send one of the four message families
    GET  /api/email            verify the SMTP connection
    POST /api/email/emergency  emergency alert to users from the directory
    GET  /api/email/test       verify, then send a test message to ourselves
"""

from typing import Any, Optional

from fastapi import Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session, sessionmaker

from notifier.directory import DirectoryError, UserRepository
from notifier.logging import get_logger
from notifier.logging.context import log_context, new_request_id
from notifier.mail import DispatchResult, NotificationService

from .dependencies import get_db, get_notification_service
from .exceptions import InvalidRequestError
from .schemas import (
    INVALID_REQUEST_BODY,
    BulkEmailRequest,
    ContactFormRequest,
    SingleEmailRequest,
    parse_broadcast_request,
    parse_email_request,
)

logger = get_logger(__name__, component="api")


def create_app(
    notification_service: NotificationService,
    session_factory: Optional[sessionmaker] = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        notification_service: Service used by every endpoint
        session_factory: SQLAlchemy session factory for the user directory;
            without one, the emergency broadcast endpoint fails with a 500

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Amayalert Notifier",
        description="Email notifications for the Amayalert emergency-management dashboard",
        version="0.1.0",
    )
    app.state.notification_service = notification_service
    app.state.session_factory = session_factory

    @app.middleware("http")
    async def bind_request_id(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or new_request_id()
        with log_context(request_id=request_id):
            response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(InvalidRequestError)
    async def invalid_request_handler(request: Request, exc: InvalidRequestError):
        logger.warning(
            f"Rejected request to {request.url.path}: {exc.message}",
            extra={"event": "api.request.rejected", "path": request.url.path},
        )
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def unreadable_body_handler(request: Request, exc: RequestValidationError):
        logger.warning(
            f"Unreadable request body for {request.url.path}",
            extra={"event": "api.request.rejected", "path": request.url.path},
        )
        return JSONResponse(status_code=400, content={"error": INVALID_REQUEST_BODY})

    @app.exception_handler(DirectoryError)
    async def directory_error_handler(request: Request, exc: DirectoryError):
        logger.error(
            f"User directory lookup failed: {exc}",
            extra={"event": "api.directory.failed", "path": request.url.path},
        )
        return JSONResponse(status_code=500, content={"error": "Failed to fetch user emails"})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled error in {request.url.path}: {exc}",
            exc_info=exc,
            extra={"event": "api.request.error", "path": request.url.path},
        )
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    @app.post("/api/email")
    def send_email(
        payload: Any = Body(default=None),
        service: NotificationService = Depends(get_notification_service),
    ) -> JSONResponse:
        """Send a contact-form, single, bulk or emergency-alert email."""
        request = parse_email_request(payload)

        with log_context(email_type=request.type):
            if isinstance(request, ContactFormRequest):
                result = service.send_contact_form(request)
            elif isinstance(request, SingleEmailRequest):
                result = service.send_single_email(request)
            elif isinstance(request, BulkEmailRequest):
                result = service.send_bulk_email(request)
            else:
                result = service.send_emergency_alert(request.recipients, request)

        return _result_response(result)

    @app.get("/api/email")
    def verify_connection(
        service: NotificationService = Depends(get_notification_service),
    ) -> JSONResponse:
        """Check that the SMTP server accepts our credentials."""
        if service.verify_connection():
            return JSONResponse(
                status_code=200,
                content={"success": True, "message": "SMTP connection verified successfully"},
            )
        return JSONResponse(
            status_code=500, content={"success": False, "error": "SMTP connection failed"}
        )

    @app.post("/api/email/emergency")
    def send_emergency_broadcast(
        payload: Any = Body(default=None),
        service: NotificationService = Depends(get_notification_service),
        db: Optional[Session] = Depends(get_db),
    ) -> JSONResponse:
        """Send an emergency alert to selected users, or to every user."""
        request = parse_broadcast_request(payload)
        if db is None:
            raise DirectoryError("User directory is not configured")

        with log_context(email_type="emergency-alert"):
            recipients = UserRepository(db).get_emails(request.user_ids)
            if not recipients:
                raise InvalidRequestError("No valid email recipients found")

            result = service.send_emergency_alert(recipients, request)

        if not result.success:
            return JSONResponse(status_code=500, content={"error": result.error})

        return JSONResponse(
            status_code=200,
            content={
                "success": True,
                "message": f"Emergency alert sent to {len(recipients)} recipients",
                "recipientsCount": len(recipients),
                "messageId": result.message_id,
            },
        )

    @app.get("/api/email/test")
    def test_email(
        service: NotificationService = Depends(get_notification_service),
    ) -> JSONResponse:
        """Verify the connection, then send the test message to our own address."""
        connected = service.verify_connection()
        if not connected:
            return JSONResponse(
                status_code=500, content={"success": False, "error": "SMTP connection failed"}
            )

        result = service.send_test_email()
        return JSONResponse(
            status_code=200,
            content={
                "smtpConnection": connected,
                "emailTest": result.to_dict(),
                "message": "Email test completed",
            },
        )

    return app


def _result_response(result: DispatchResult) -> JSONResponse:
    if result.success:
        return JSONResponse(status_code=200, content=result.to_dict())
    return JSONResponse(status_code=500, content={"error": result.error})
