"""Context propagation for structured logging.

Fields pushed here are attached to every log record emitted inside the scope,
so one HTTP request's logs share a request_id and email_type without each call
passing them explicitly. Backed by contextvars, so it is safe under the
threadpool and event loop that serve FastAPI requests.
"""

import uuid
from contextvars import ContextVar, Token
from typing import Any, Dict, Optional


LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Get a copy of the current logging context."""
    return LogContextVar.get().copy()


def push_log_context(**kwargs) -> Token:
    """Merge fields into the logging context.

    Args:
        **kwargs: Key-value pairs to add to the logging context

    Returns:
        Token for pop_log_context()

    Example:
        >>> token = push_log_context(request_id="3f2a", email_type="bulk-email")
        >>> pop_log_context(token)
    """
    current = LogContextVar.get()
    return LogContextVar.set({**current, **kwargs})


def pop_log_context(token: Token) -> None:
    """Restore the logging context to the state before the matching push."""
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Clear all logging context fields (used by tests)."""
    LogContextVar.set({})


def new_request_id() -> str:
    """Return a short random identifier for correlating one request's logs."""
    return uuid.uuid4().hex[:12]


class log_context:
    """Context manager for scoped logging context.

    Example:
        >>> with log_context(request_id=new_request_id(), email_type="contact-form"):
        ...     logger.info("Dispatching email")
    """

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.token: Optional[Token] = None

    def __enter__(self):
        self.token = push_log_context(**self.kwargs)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token is not None:
            pop_log_context(self.token)
        return False
