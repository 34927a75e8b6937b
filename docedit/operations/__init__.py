"""Operation dispatch core: parameter bag, context, operation contract, registry."""

from docedit.operations.base import Operation, ParameterSpec, engine_errors, operation
from docedit.operations.context import DocumentView, MutableDocumentView, OperationContext
from docedit.operations.parameters import Coercion, OperationParameters, coerce
from docedit.operations.registry import OperationRegistry
from docedit.operations.results import OperationResult

__all__ = [
    "Operation",
    "ParameterSpec",
    "operation",
    "engine_errors",
    "OperationContext",
    "DocumentView",
    "MutableDocumentView",
    "OperationParameters",
    "Coercion",
    "coerce",
    "OperationRegistry",
    "OperationResult",
]
