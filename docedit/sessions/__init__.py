"""Document session management package."""
from docedit.sessions.file_mode import FileRunOutcome, run_on_file
from docedit.sessions.housekeeper import sweep_idle_sessions
from docedit.sessions.loaders import DocumentType, detect_type, load_document, new_document, save_document
from docedit.sessions.manager import CloseOutput, SaveOutput, SessionInfo, SessionManager, SessionMode

__all__ = [
    "SessionManager",
    "SessionInfo",
    "SessionMode",
    "SaveOutput",
    "CloseOutput",
    "DocumentType",
    "detect_type",
    "load_document",
    "new_document",
    "save_document",
    "run_on_file",
    "FileRunOutcome",
    "sweep_idle_sessions",
]
