"""Base exception classes for docedit.

Every error raised to a tool caller derives from DocEditError and carries a
machine-readable code, a human-readable message and optional details. The
messages are written for LLM callers, so they name the offending parameter or
value and, where possible, what would have been accepted instead.
"""

from typing import Any, Dict, Optional


class DocEditError(Exception):
    """Root of all docedit errors."""

    default_code = "DOCEDIT_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


class ValidationError(DocEditError):
    """Caller-correctable input problem.

    This is the single error channel operations report through: missing or
    uncoercible parameters, failed domain preconditions, missing sub-entities
    and wrapped engine failures all end up here.
    """

    default_code = "VALIDATION_ERROR"


class NotFoundError(ValidationError):
    """A referenced entity (sheet, paragraph, slide, page, operation) does not exist."""

    default_code = "NOT_FOUND"


class EngineError(ValidationError):
    """The document engine rejected a call.

    Raised at the operation boundary in place of the engine's own exception
    type, with the operation's context prepended to the engine message.
    """

    default_code = "ENGINE_ERROR"


class RegistryError(DocEditError):
    """Registry misuse at construction time. Signals a packaging defect."""

    default_code = "REGISTRY_ERROR"


class ConfigurationError(DocEditError):
    """Invalid server configuration."""

    default_code = "CONFIGURATION_ERROR"
