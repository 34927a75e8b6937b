"""Document context and the per-call views operations receive."""

from __future__ import annotations

from typing import Generic, Optional, TypeVar

D = TypeVar("D")


class OperationContext(Generic[D]):
    """One open document plus its one-way ``modified`` flag.

    The context never interprets the document. The flag starts ``False`` and,
    once set, stays set for the lifetime of the context; the persistence step
    reads it to decide whether to write the document back.
    """

    __slots__ = ("_document", "_modified", "session_id", "source_path")

    def __init__(
        self,
        document: D,
        session_id: Optional[str] = None,
        source_path: Optional[str] = None,
    ) -> None:
        self._document = document
        self._modified = False
        self.session_id = session_id
        self.source_path = source_path

    @property
    def document(self) -> D:
        return self._document

    @property
    def modified(self) -> bool:
        return self._modified

    @property
    def is_session(self) -> bool:
        return self.session_id is not None

    def mark_modified(self) -> None:
        self._modified = True

    def view(self) -> "DocumentView[D]":
        """Read-only view handed to operations that must not mutate."""
        return DocumentView(self)

    def mutable_view(self) -> "MutableDocumentView[D]":
        """View handed to mutating operations for exactly one call."""
        return MutableDocumentView(self)

    def __repr__(self) -> str:
        return (
            f"OperationContext(document={type(self._document).__name__}, "
            f"session_id={self.session_id!r}, modified={self._modified})"
        )


class DocumentView(Generic[D]):
    """What a read-only operation sees. Has no way to set the modified flag."""

    __slots__ = ("_context",)

    def __init__(self, context: OperationContext[D]) -> None:
        self._context = context

    @property
    def document(self) -> D:
        return self._context.document

    @property
    def modified(self) -> bool:
        return self._context.modified

    @property
    def session_id(self) -> Optional[str]:
        return self._context.session_id

    @property
    def source_path(self) -> Optional[str]:
        return self._context.source_path


class MutableDocumentView(DocumentView[D]):
    """What a mutating operation sees.

    ``mark_modified`` is staged on the view and only reaches the context
    through :meth:`commit`, which the operation boundary calls after the
    operation returned successfully. A call that raises never sets the flag.
    """

    __slots__ = ("_marked",)

    def __init__(self, context: OperationContext[D]) -> None:
        super().__init__(context)
        self._marked = False

    @property
    def modified(self) -> bool:
        return self._marked or self._context.modified

    @property
    def marked(self) -> bool:
        return self._marked

    def mark_modified(self) -> None:
        self._marked = True

    def commit(self) -> None:
        if self._marked:
            self._context.mark_modified()
