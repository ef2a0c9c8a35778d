"""FastAPI application exposing the email endpoints."""

from .app import create_app
from .exceptions import InvalidRequestError
from .schemas import parse_broadcast_request, parse_email_request

__all__ = ["create_app", "InvalidRequestError", "parse_broadcast_request", "parse_email_request"]
