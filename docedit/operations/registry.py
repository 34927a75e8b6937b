"""Name-keyed operation registry."""

from __future__ import annotations

from typing import Any, Dict, Generic, Iterable, Iterator, List, TypeVar

from docedit.exceptions import (
    DocumentTypeMismatchError,
    DuplicateOperationError,
    RegistryError,
    UnsupportedOperationError,
)
from docedit.operations.base import Operation
from docedit.operations.context import OperationContext
from docedit.operations.parameters import OperationParameters
from docedit.operations.results import OperationResult

D = TypeVar("D")


class OperationRegistry(Generic[D]):
    """Lookup table of operations that all act on one document type.

    Populated once through :meth:`register` during startup, then frozen.
    A frozen registry is safe to share read-only across concurrent calls.
    """

    def __init__(self, name: str, document_type: type, domain: str, description: str = ""):
        """
        Args:
            name: Registry (tool) name, e.g. "excel_data_operations"
            document_type: Class every context document must be an instance of
            domain: Document family, e.g. "excel"
            description: Summary used in tool listings
        """
        self.name = name
        self.document_type = document_type
        self.domain = domain
        self.description = description
        self._operations: Dict[str, Operation] = {}
        self._frozen = False

    def register(self, op: Operation) -> Operation:
        """Add an operation under its own name.

        Raises:
            DuplicateOperationError: If the name is already registered
            RegistryError: If the registry has been frozen
        """
        if self._frozen:
            raise RegistryError(
                f"Registry {self.name} is frozen; cannot register '{op.name}'",
                details={"registry": self.name, "operation": op.name},
            )
        if op.name in self._operations:
            raise DuplicateOperationError(op.name, self.name)
        self._operations[op.name] = op
        return op

    def register_all(self, operations: Iterable[Operation]) -> "OperationRegistry[D]":
        for op in operations:
            self.register(op)
        return self

    def freeze(self) -> "OperationRegistry[D]":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def resolve(self, name: str) -> Operation:
        """Look up an operation by name (case-insensitive).

        Raises:
            UnsupportedOperationError: If no operation has that name
        """
        op = self._operations.get((name or "").strip().lower())
        if op is None:
            raise UnsupportedOperationError(name, self.name, self._operations.keys())
        return op

    def check_document(self, context: OperationContext) -> None:
        """Reject contexts holding another domain's document.

        Raises:
            DocumentTypeMismatchError: If the document is not a ``document_type``
        """
        if not isinstance(context.document, self.document_type):
            raise DocumentTypeMismatchError(
                self.name, self.document_type.__name__, type(context.document).__name__
            )

    def execute(
        self, name: str, context: OperationContext[D], parameters: OperationParameters
    ) -> OperationResult:
        """Resolve ``name`` and run it against ``context``."""
        op = self.resolve(name)
        self.check_document(context)
        return op.execute(context, parameters)

    def names(self) -> List[str]:
        return list(self._operations.keys())

    def describe(self) -> Dict[str, Any]:
        return {
            "tool": self.name,
            "domain": self.domain,
            "document_type": self.document_type.__name__,
            "description": self.description,
            "operations": [op.describe() for op in self._operations.values()],
        }

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip().lower() in self._operations

    def __iter__(self) -> Iterator[Operation]:
        return iter(self._operations.values())

    def __len__(self) -> int:
        return len(self._operations)

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "open"
        return f"OperationRegistry({self.name!r}, {len(self)} operations, {state})"
