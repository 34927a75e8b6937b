"""Session manager for open documents.

A session keeps one document loaded in memory between tool calls. Calls
against one session are serialised by a per-session lock; the session table
is guarded by a manager lock. The manager turns the context's ``modified``
flag into a write-back on save, on close and when an idle session expires.
"""

import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from pydantic import BaseModel, Field

from docedit.exceptions import (
    ParameterValidationError,
    ReadOnlySessionError,
    SessionLimitError,
    SessionNotFoundError,
    ValidationError,
)
from docedit.logger import Logger, session_logger
from docedit.operations import OperationContext, OperationParameters, OperationRegistry, OperationResult
from docedit.sessions.loaders import (
    DocumentType,
    detect_type,
    load_document,
    new_document,
    save_document,
)


class SessionMode(str, Enum):
    READONLY = "readonly"
    READWRITE = "readwrite"


class SessionInfo(BaseModel):
    """Public summary of an open session."""

    session_id: str
    path: str
    domain: DocumentType
    mode: SessionMode
    modified: bool = Field(description="True if the document has unsaved changes")
    opened_at: str
    last_accessed: str
    last_saved_at: Optional[str] = None


class SaveOutput(BaseModel):
    session_id: str
    path: str
    size_bytes: int
    message: str


class CloseOutput(BaseModel):
    session_id: str
    saved: bool
    path: Optional[str] = None
    message: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class _Session:
    session_id: str
    path: Path
    domain: DocumentType
    mode: SessionMode
    context: OperationContext
    opened_at: str
    last_accessed: str
    last_saved_at: Optional[str] = None
    lock: threading.RLock = field(default_factory=threading.RLock)

    def info(self) -> SessionInfo:
        return SessionInfo(
            session_id=self.session_id,
            path=str(self.path),
            domain=self.domain,
            mode=self.mode,
            modified=self.context.modified,
            opened_at=self.opened_at,
            last_accessed=self.last_accessed,
            last_saved_at=self.last_saved_at,
        )


class SessionManager:
    """Tracks open document sessions."""

    def __init__(
        self,
        max_sessions: int = 10,
        max_file_size_mb: float = 100,
        idle_timeout_minutes: float = 30,
        logger: Optional[Logger] = None,
    ) -> None:
        """
        Args:
            max_sessions: Maximum number of simultaneously open sessions
            max_file_size_mb: Largest file that may be opened
            idle_timeout_minutes: Unused sessions older than this are closed
                by expire_idle; 0 disables expiry
            logger: Logger instance (default: shared session logger)
        """
        self.max_sessions = max_sessions
        self.max_file_size_mb = max_file_size_mb
        self.idle_timeout_minutes = idle_timeout_minutes
        self.logger = logger or session_logger
        self._sessions: Dict[str, _Session] = {}
        self._lock = threading.Lock()

    # Lifecycle -------------------------------------------------------------

    def open(self, path: str, mode: str = SessionMode.READWRITE.value) -> SessionInfo:
        """
        Open an existing document as a session.

        Args:
            path: Path of the document
            mode: 'readonly' or 'readwrite'

        Returns:
            SessionInfo for the new session

        Raises:
            ParameterValidationError: If the mode or extension is not supported,
                or the file is larger than max_file_size_mb
            NotFoundError: If the file does not exist
            SessionLimitError: If max_sessions sessions are already open
        """
        session_mode = self._parse_mode(mode)
        file_path = Path(path).expanduser().resolve()
        doc_type = detect_type(file_path)
        self._check_capacity()
        if file_path.is_file():
            size_mb = file_path.stat().st_size / (1024 * 1024)
            if size_mb > self.max_file_size_mb:
                raise ParameterValidationError(
                    "path",
                    f"File is {size_mb:.1f} MB; the limit is {self.max_file_size_mb} MB",
                    details={"size_mb": round(size_mb, 2), "max_file_size_mb": self.max_file_size_mb},
                )
        document = load_document(file_path)
        return self._register(file_path, doc_type, session_mode, document)

    def create(self, path: str, overwrite: bool = False) -> SessionInfo:
        """
        Create a new, empty document and open it as a read-write session.

        The file is written on the first save, not on creation.

        Raises:
            ValidationError: If the file exists and overwrite is false
        """
        file_path = Path(path).expanduser().resolve()
        doc_type = detect_type(file_path)
        if file_path.exists() and not overwrite:
            raise ValidationError(
                f"File already exists: {file_path}. Pass overwrite=true to replace it",
                details={"path": str(file_path)},
            )
        self._check_capacity()
        info = self._register(file_path, doc_type, SessionMode.READWRITE, new_document(doc_type))
        # A new document always needs writing.
        self._require(info.session_id).context.mark_modified()
        return self._require(info.session_id).info()

    def get(self, session_id: str) -> SessionInfo:
        """
        Raises:
            SessionNotFoundError: If no session has this id
        """
        session = self._require(session_id)
        session.last_accessed = _now()
        return session.info()

    def list(self) -> List[SessionInfo]:
        with self._lock:
            sessions = list(self._sessions.values())
        return [session.info() for session in sessions]

    @contextmanager
    def context(self, session_id: str) -> Iterator[OperationContext]:
        """Hold the session lock and yield its OperationContext."""
        session = self._require(session_id)
        with session.lock:
            session.last_accessed = _now()
            yield session.context

    def run(
        self,
        session_id: str,
        registry: OperationRegistry,
        operation: str,
        parameters: OperationParameters,
    ) -> OperationResult:
        """
        Execute one operation against a session's document.

        Raises:
            ReadOnlySessionError: If the operation mutates and the session is read-only
        """
        session = self._require(session_id)
        op = registry.resolve(operation)
        if op.mutates and session.mode is SessionMode.READONLY:
            raise ReadOnlySessionError(session_id, f"run '{registry.name}.{op.name}'")
        with self.context(session_id) as context:
            result = registry.execute(op.name, context, parameters)
        self.logger.debug(
            "Operation executed in session",
            session_id=session_id,
            tool=registry.name,
            operation=op.name,
            modified=context.modified,
        )
        return result

    def save(self, session_id: str, output_path: Optional[str] = None) -> SaveOutput:
        """
        Write the session's document to its source path or ``output_path``.

        Saving to the source path starts a fresh context, so ``modified``
        reads false until the next change.

        Raises:
            ReadOnlySessionError: If a read-only session is saved to its source
        """
        session = self._require(session_id)
        target = Path(output_path).expanduser().resolve() if output_path else session.path
        if output_path:
            detected = detect_type(target)
            if detected is not session.domain:
                raise ParameterValidationError(
                    "output_path",
                    f"Cannot save a {session.domain.value} document as {target.suffix}",
                )
        if target == session.path and session.mode is SessionMode.READONLY:
            raise ReadOnlySessionError(session_id, "save over its source file; pass output_path")

        with session.lock:
            size = save_document(session.context.document, target)
            session.last_saved_at = _now()
            if target == session.path:
                session.context = OperationContext(
                    session.context.document, session_id=session_id, source_path=str(session.path)
                )
        self.logger.info("Session saved", session_id=session_id, path=str(target), size_bytes=size)
        return SaveOutput(
            session_id=session_id,
            path=str(target),
            size_bytes=size,
            message=f"Document saved to {target}",
        )

    def close(self, session_id: str, discard: bool = False) -> CloseOutput:
        """
        Close a session, saving unsaved changes unless ``discard`` is set.

        Read-only sessions are never written back.
        """
        session = self._require(session_id)
        saved = False
        with session.lock:
            if session.context.modified and not discard and session.mode is SessionMode.READWRITE:
                self.save(session_id)
                saved = True
            with self._lock:
                self._sessions.pop(session_id, None)
        self.logger.info("Session closed", session_id=session_id, saved=saved, discarded=discard)
        message = "Session closed and changes saved" if saved else "Session closed"
        return CloseOutput(session_id=session_id, saved=saved, path=str(session.path), message=message)

    def close_all(self, discard: bool = False) -> int:
        """Close every session; used at shutdown. Returns the number closed."""
        with self._lock:
            session_ids = list(self._sessions)
        for session_id in session_ids:
            try:
                self.close(session_id, discard=discard)
            except ValidationError as exc:
                self.logger.error("Failed to close session", session_id=session_id, error=str(exc))
        return len(session_ids)

    def expire_idle(self, now: Optional[datetime] = None) -> List[str]:
        """
        Close sessions not accessed for more than ``idle_timeout_minutes``.

        Unsaved changes in read-write sessions are saved, as on close().
        A session busy with a call is left for the next sweep, as is one
        whose save fails.

        Returns:
            Ids of the sessions that were closed
        """
        if self.idle_timeout_minutes <= 0:
            return []
        now = now or datetime.now(timezone.utc)
        cutoff = now - timedelta(minutes=self.idle_timeout_minutes)
        with self._lock:
            candidates = list(self._sessions.values())

        expired: List[str] = []
        for session in candidates:
            if datetime.fromisoformat(session.last_accessed) > cutoff:
                continue
            if not session.lock.acquire(blocking=False):
                continue
            try:
                # Re-check under the lock; a call may have just finished.
                if datetime.fromisoformat(session.last_accessed) > cutoff:
                    continue
                self.logger.info(
                    "Session idle timeout reached",
                    session_id=session.session_id,
                    last_accessed=session.last_accessed,
                    idle_timeout_minutes=self.idle_timeout_minutes,
                )
                self.close(session.session_id)
                expired.append(session.session_id)
            except ValidationError as exc:
                self.logger.error(
                    "Failed to close idle session", session_id=session.session_id, error=str(exc)
                )
            finally:
                session.lock.release()
        return expired

    # Internals -------------------------------------------------------------

    @staticmethod
    def _parse_mode(mode: str) -> SessionMode:
        try:
            return SessionMode((mode or SessionMode.READWRITE.value).strip().lower())
        except ValueError:
            raise ParameterValidationError(
                "mode", f"Invalid mode '{mode}'. Use 'readonly' or 'readwrite'"
            ) from None

    def _check_capacity(self) -> None:
        with self._lock:
            if len(self._sessions) >= self.max_sessions:
                raise SessionLimitError(self.max_sessions)

    def _register(self, path: Path, doc_type: DocumentType, mode: SessionMode, document) -> SessionInfo:
        session_id = str(uuid.uuid4())
        now = _now()
        session = _Session(
            session_id=session_id,
            path=path,
            domain=doc_type,
            mode=mode,
            context=OperationContext(document, session_id=session_id, source_path=str(path)),
            opened_at=now,
            last_accessed=now,
        )
        with self._lock:
            if len(self._sessions) >= self.max_sessions:
                raise SessionLimitError(self.max_sessions)
            self._sessions[session_id] = session
        self.logger.info(
            "Session opened", session_id=session_id, path=str(path), domain=doc_type.value, mode=mode.value
        )
        return session.info()

    def _require(self, session_id: str) -> _Session:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session
