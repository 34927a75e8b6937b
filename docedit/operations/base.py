"""The operation contract.

An operation is a named, stateless service: a plain function of
``(view, parameters) -> OperationResult`` wrapped in a frozen dataclass that
also carries its static metadata (description, whether it mutates, the shape
of its result, the parameters it reads). Operations are declared with the
:func:`operation` decorator and never subclass one another.
"""

from __future__ import annotations

import inspect
import re
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple, Type

from docedit.exceptions import DocEditError, EngineError, RegistryError
from docedit.operations.context import OperationContext
from docedit.operations.parameters import OperationParameters
from docedit.operations.results import OperationResult

OperationFunc = Callable[[Any, OperationParameters], OperationResult]

_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9_]*$")


@dataclass(frozen=True)
class ParameterSpec:
    """Schema for one parameter an operation reads."""

    name: str
    type: str  # string, integer, number, boolean, array, object
    description: str
    required: bool = False
    default: Any = None
    enum: Optional[Tuple[Any, ...]] = None

    def to_json_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {"type": self.type, "description": self.description}
        if self.default is not None:
            schema["default"] = self.default
        if self.enum:
            schema["enum"] = list(self.enum)
        return schema


@dataclass(frozen=True)
class Operation:
    """A registered document operation.

    Frozen: an instance is built once at import time and shared by every
    call for the life of the process.
    """

    name: str
    func: OperationFunc = field(repr=False, compare=False)
    description: str = ""
    mutates: bool = False
    result_type: Type[OperationResult] = OperationResult
    parameters: Tuple[ParameterSpec, ...] = ()

    def __post_init__(self) -> None:
        if not _NAME_PATTERN.match(self.name):
            raise RegistryError(
                f"Invalid operation name '{self.name}': use lowercase snake_case",
                details={"operation": self.name},
            )
        if not (isinstance(self.result_type, type) and issubclass(self.result_type, OperationResult)):
            raise RegistryError(
                f"Operation '{self.name}' must declare an OperationResult subclass as its result",
                details={"operation": self.name},
            )

    def execute(self, context: OperationContext, parameters: OperationParameters) -> OperationResult:
        """Run the operation against ``context``.

        Read-only operations receive a view without ``mark_modified``;
        mutating operations receive a staged view that is committed to the
        context only when the call succeeds.

        Raises:
            ValidationError: For any failure, including engine exceptions,
                which are re-raised as EngineError with the operation name prepended
        """
        view = context.mutable_view() if self.mutates else context.view()
        try:
            result = self.func(view, parameters)
        except DocEditError:
            raise
        except Exception as exc:
            raise EngineError(
                f"{self.name} failed: {exc}",
                details={"operation": self.name, "error_type": type(exc).__name__},
            ) from exc
        if not isinstance(result, self.result_type):
            raise TypeError(
                f"Operation '{self.name}' returned {type(result).__name__}, "
                f"expected {self.result_type.__name__}"
            )
        if self.mutates:
            view.commit()
        return result

    def result_schema(self) -> Dict[str, Any]:
        """JSON schema of a successful result, available without executing."""
        return self.result_type.model_json_schema()

    def parameter_names(self) -> List[str]:
        return [spec.name for spec in self.parameters]

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "mutates": self.mutates,
            "parameters": [
                {**spec.to_json_schema(), "name": spec.name, "required": spec.required}
                for spec in self.parameters
            ],
            "result_schema": self.result_schema(),
        }


def operation(
    name: str,
    *,
    result: Type[OperationResult] = OperationResult,
    mutates: bool = False,
    description: Optional[str] = None,
    parameters: Sequence[ParameterSpec] = (),
) -> Callable[[OperationFunc], Operation]:
    """Declare a function as an operation.

    The description defaults to the first line of the function docstring.

    Example:
        @operation("get_used_range", result=UsedRangeResult)
        def get_used_range(view, parameters):
            ...
    """

    def decorator(func: OperationFunc) -> Operation:
        doc = inspect.getdoc(func) or ""
        return Operation(
            name=name,
            func=func,
            description=description or doc.split("\n", 1)[0],
            mutates=mutates,
            result_type=result,
            parameters=tuple(parameters),
        )

    return decorator


@contextmanager
def engine_errors(what: str) -> Iterator[None]:
    """Re-raise engine exceptions as EngineError naming what was being done.

    Usage:
        with engine_errors(f"range '{range_ref}'"):
            worksheet.move_range(...)
    """
    try:
        yield
    except DocEditError:
        raise
    except Exception as exc:
        raise EngineError(
            f"Operation failed for {what}: {exc}",
            details={"context": what, "error_type": type(exc).__name__},
        ) from exc
