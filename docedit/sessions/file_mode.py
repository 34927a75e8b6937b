"""One-shot execution against a file, without a session."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from docedit.exceptions import DocumentTypeMismatchError, ParameterValidationError
from docedit.logger import Logger, session_logger
from docedit.operations import OperationContext, OperationParameters, OperationRegistry, OperationResult
from docedit.sessions.loaders import detect_type, load_document, save_document


@dataclass
class FileRunOutcome:
    result: OperationResult
    modified: bool
    saved_to: Optional[str] = None


def run_on_file(
    registry: OperationRegistry,
    operation: str,
    parameters: OperationParameters,
    path: Path,
    output_path: Optional[Path] = None,
    logger: Logger = session_logger,
) -> FileRunOutcome:
    """Load ``path``, run one operation and write the document back if it changed.

    The document is written to ``output_path`` when given, otherwise over
    ``path``. Nothing is written when the operation left it unmodified.

    Raises:
        DocumentTypeMismatchError: If the file is not of the registry's domain
    """
    op = registry.resolve(operation)
    doc_type = detect_type(path)
    if doc_type.value != registry.domain:
        raise DocumentTypeMismatchError(registry.name, registry.domain, doc_type.value)
    if output_path is not None and detect_type(output_path) is not doc_type:
        raise ParameterValidationError(
            "output_path", f"output_path must have the same document type as path ({doc_type.value})"
        )

    context = OperationContext(load_document(path), source_path=str(path))
    result = registry.execute(op.name, context, parameters)

    saved_to = None
    if context.modified:
        target = output_path or path
        size = save_document(context.document, target)
        saved_to = str(target)
        logger.info("Document written", tool=registry.name, operation=op.name, path=saved_to, size_bytes=size)
    return FileRunOutcome(result=result, modified=context.modified, saved_to=saved_to)
