"""Load, save and create documents for every supported domain.

The document type is taken from the file extension. Each type maps to one
engine object: openpyxl ``Workbook``, python-docx ``Document``, python-pptx
``Presentation``, pypdf ``PdfWriter`` or a stdlib ``EmailMessage``.
"""

import os
import tempfile
from email import policy
from email.message import EmailMessage
from email.parser import BytesParser
from enum import Enum
from pathlib import Path
from typing import Any, Union

import docx
import openpyxl
import pptx
from pypdf import PdfWriter

from docedit.exceptions import EngineError, NotFoundError, ParameterValidationError
from docedit.handlers.pdf.helpers import US_LETTER

PathLike = Union[str, Path]


class DocumentType(str, Enum):
    """Document families, named after the registry domains that serve them."""

    EXCEL = "excel"
    WORD = "word"
    POWERPOINT = "powerpoint"
    PDF = "pdf"
    EMAIL = "email"


EXTENSIONS = {
    ".xlsx": DocumentType.EXCEL,
    ".xlsm": DocumentType.EXCEL,
    ".docx": DocumentType.WORD,
    ".pptx": DocumentType.POWERPOINT,
    ".pdf": DocumentType.PDF,
    ".eml": DocumentType.EMAIL,
}


def detect_type(path: PathLike) -> DocumentType:
    """Map a file extension to its document type.

    Raises:
        ParameterValidationError: If the extension is not supported
    """
    suffix = Path(path).suffix.lower()
    try:
        return EXTENSIONS[suffix]
    except KeyError:
        raise ParameterValidationError(
            "path",
            f"Unsupported file type '{suffix or '(none)'}'. Supported: {', '.join(sorted(EXTENSIONS))}",
        ) from None


def load_document(path: PathLike) -> Any:
    """Open a document from disk.

    Raises:
        NotFoundError: If the file does not exist
        ParameterValidationError: If the extension is not supported
        EngineError: If the engine cannot parse the file
    """
    path = Path(path)
    doc_type = detect_type(path)
    if not path.is_file():
        raise NotFoundError(f"File not found: {path}", details={"path": str(path)})
    try:
        if doc_type is DocumentType.EXCEL:
            return openpyxl.load_workbook(path, keep_vba=path.suffix.lower() == ".xlsm")
        if doc_type is DocumentType.WORD:
            return docx.Document(str(path))
        if doc_type is DocumentType.POWERPOINT:
            return pptx.Presentation(str(path))
        if doc_type is DocumentType.PDF:
            return PdfWriter(clone_from=str(path))
        with open(path, "rb") as handle:
            return BytesParser(policy=policy.default).parse(handle)
    except Exception as exc:
        raise EngineError(
            f"Failed to open {doc_type.value} document {path}: {exc}",
            details={"path": str(path), "error_type": type(exc).__name__},
        ) from exc


def new_document(doc_type: DocumentType) -> Any:
    """Create an empty document of the given type."""
    if doc_type is DocumentType.EXCEL:
        return openpyxl.Workbook()
    if doc_type is DocumentType.WORD:
        return docx.Document()
    if doc_type is DocumentType.POWERPOINT:
        return pptx.Presentation()
    if doc_type is DocumentType.PDF:
        writer = PdfWriter()
        writer.add_blank_page(width=US_LETTER[0], height=US_LETTER[1])
        return writer
    message = EmailMessage()
    message.set_content("")
    return message


def _write(document: Any, handle) -> None:
    if isinstance(document, EmailMessage):
        handle.write(document.as_bytes(policy=policy.default))
    elif isinstance(document, PdfWriter):
        document.write(handle)
    else:
        document.save(handle)


def save_document(document: Any, path: PathLike) -> int:
    """Write a document to ``path`` through a temporary file in the same directory.

    Returns:
        Size of the written file in bytes

    Raises:
        EngineError: If the engine or the filesystem fails
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as handle:
                _write(document, handle)
            os.replace(temp_name, path)
        except BaseException:
            if os.path.exists(temp_name):
                os.unlink(temp_name)
            raise
    except Exception as exc:
        raise EngineError(
            f"Failed to save document to {path}: {exc}",
            details={"path": str(path), "error_type": type(exc).__name__},
        ) from exc
    return path.stat().st_size
