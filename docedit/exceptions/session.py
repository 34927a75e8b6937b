"""Session-related exceptions."""

from typing import Any, Dict, Optional

from docedit.exceptions.base import NotFoundError, ValidationError


class SessionError(ValidationError):
    """Base exception for session-related errors."""

    default_code = "SESSION_ERROR"


class SessionNotFoundError(NotFoundError):
    """Raised when a session cannot be found."""

    default_code = "SESSION_NOT_FOUND"

    def __init__(self, session_id: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Session '{session_id}' not found",
            details=details or {},
        )
        self.session_id = session_id


class SessionLimitError(SessionError):
    """Raised when opening a document would exceed the configured session limit."""

    default_code = "SESSION_LIMIT_REACHED"

    def __init__(self, limit: int):
        super().__init__(
            message=f"Maximum session limit ({limit}) reached. Close a session and retry.",
            details={"max_sessions": limit},
        )


class ReadOnlySessionError(SessionError):
    """Raised when a write is attempted on a session opened read-only."""

    default_code = "SESSION_READ_ONLY"

    def __init__(self, session_id: str, action: str):
        super().__init__(
            message=f"Session '{session_id}' is read-only; cannot {action}",
            details={"session_id": session_id},
        )
