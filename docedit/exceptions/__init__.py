"""Exceptions for the operation dispatch core, sessions and transport.

All exceptions include detailed error messages designed for LLM processing,
enabling intelligent error recovery and decision-making.
"""

from docedit.exceptions.base import (
    ConfigurationError,
    DocEditError,
    EngineError,
    NotFoundError,
    RegistryError,
    ValidationError,
)
from docedit.exceptions.operation import (
    DocumentTypeMismatchError,
    DuplicateOperationError,
    ParameterValidationError,
    UnsupportedOperationError,
)
from docedit.exceptions.session import (
    ReadOnlySessionError,
    SessionError,
    SessionLimitError,
    SessionNotFoundError,
)

__all__ = [
    "DocEditError",
    "ValidationError",
    "NotFoundError",
    "EngineError",
    "RegistryError",
    "ConfigurationError",
    "ParameterValidationError",
    "UnsupportedOperationError",
    "DocumentTypeMismatchError",
    "DuplicateOperationError",
    "SessionError",
    "SessionNotFoundError",
    "SessionLimitError",
    "ReadOnlySessionError",
]
