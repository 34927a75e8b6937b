"""Operation dispatch exceptions."""

from typing import Any, Dict, Iterable, Optional

from docedit.exceptions.base import NotFoundError, RegistryError, ValidationError


class ParameterValidationError(ValidationError):
    """A parameter is missing or cannot be coerced to the expected type."""

    default_code = "INVALID_PARAMETER"

    def __init__(self, parameter: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, details={"parameter": parameter, **(details or {})})
        self.parameter = parameter


class UnsupportedOperationError(NotFoundError):
    """Raised when a registry has no operation with the requested name."""

    default_code = "UNSUPPORTED_OPERATION"

    def __init__(self, operation: str, registry: str, available: Iterable[str]):
        available = sorted(available)
        super().__init__(
            message=(
                f"Unsupported operation '{operation}' for {registry}. "
                f"Supported operations: {', '.join(available)}"
            ),
            details={"operation": operation, "registry": registry, "available": available},
        )
        self.operation = operation
        self.registry = registry


class DocumentTypeMismatchError(ValidationError):
    """The context holds a document of a different domain than the registry serves."""

    default_code = "DOCUMENT_TYPE_MISMATCH"

    def __init__(self, registry: str, expected: str, actual: str):
        super().__init__(
            message=(
                f"{registry} operates on {expected} documents, "
                f"but the target document is a {actual}"
            ),
            details={"registry": registry, "expected": expected, "actual": actual},
        )


class DuplicateOperationError(RegistryError):
    """A second operation was registered under a name already taken."""

    default_code = "DUPLICATE_OPERATION"

    def __init__(self, operation: str, registry: str):
        super().__init__(
            message=f"Operation '{operation}' is already registered in {registry}",
            details={"operation": operation, "registry": registry},
        )
        self.operation = operation
        self.registry = registry
