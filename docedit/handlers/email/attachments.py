"""Email attachment operations: add, list, remove and extract."""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Optional

from docedit.exceptions import NotFoundError, ParameterValidationError
from docedit.handlers.email.helpers import attachments, get_attachment, payload_bytes
from docedit.handlers.email.results import AttachmentInfo, AttachmentListResult, AttachmentResult
from docedit.operations import ParameterSpec, engine_errors, operation

ATTACHMENT_INDEX = ParameterSpec("attachmentIndex", "integer", "Attachment index (0-based)", required=True)


@operation(
    "add",
    result=AttachmentResult,
    mutates=True,
    parameters=[
        ParameterSpec("attachmentPath", "string", "Path of the file to attach", required=True),
        ParameterSpec("name", "string", "Attachment file name (default: the file's own name)"),
    ],
)
def add(view, parameters) -> AttachmentResult:
    """Attach a file from disk."""
    path = Path(parameters.get_required("attachmentPath", str)).expanduser()
    if not path.is_file():
        raise NotFoundError(f"Attachment file not found: {path}", details={"attachmentPath": str(path)})
    name = parameters.get_optional("name", Optional[str]) or path.name

    content_type, _ = mimetypes.guess_type(name)
    maintype, subtype = (content_type or "application/octet-stream").split("/", 1)
    message = view.document
    with engine_errors(f"attachment '{name}'"):
        data = path.read_bytes()
        message.add_attachment(data, maintype=maintype, subtype=subtype, filename=name)
    view.mark_modified()

    index = len(attachments(message)) - 1
    return AttachmentResult(
        message=f"Attached '{name}' ({len(data)} bytes) as attachment {index}.",
        attachment_index=index,
        filename=name,
        size=len(data),
    )


@operation("get", result=AttachmentListResult)
def get(view, parameters) -> AttachmentListResult:
    """List attachments with name, content type and size."""
    items = [
        AttachmentInfo(
            index=index,
            filename=part.get_filename(),
            content_type=part.get_content_type(),
            size=len(payload_bytes(part)),
        )
        for index, part in enumerate(attachments(view.document))
    ]
    return AttachmentListResult(message=f"Message has {len(items)} attachment(s).", count=len(items), attachments=items)


@operation("remove", result=AttachmentResult, mutates=True, parameters=[ATTACHMENT_INDEX])
def remove(view, parameters) -> AttachmentResult:
    """Remove an attachment."""
    index = parameters.get_required("attachmentIndex", int)
    message = view.document
    part = get_attachment(message, index)
    filename = part.get_filename()

    with engine_errors(f"attachment {index}"):
        message.get_payload().remove(part)
    view.mark_modified()
    return AttachmentResult(
        message=f"Attachment {index} ('{filename}') removed.", attachment_index=index, filename=filename
    )


@operation(
    "extract",
    result=AttachmentResult,
    parameters=[
        ATTACHMENT_INDEX,
        ParameterSpec("outputDir", "string", "Directory to write the attachment into", required=True),
    ],
)
def extract(view, parameters) -> AttachmentResult:
    """Write an attachment to a directory. The message itself is not changed."""
    parameters.require_all("attachmentIndex", "outputDir")
    index = parameters.get_required("attachmentIndex", int)
    output_dir = Path(parameters.get_required("outputDir", str)).expanduser()
    part = get_attachment(view.document, index)
    if output_dir.exists() and not output_dir.is_dir():
        raise ParameterValidationError("outputDir", f"'{output_dir}' exists and is not a directory")

    # Never trust a path from the message itself.
    filename = Path(part.get_filename() or f"attachment_{index}").name
    target = output_dir / filename
    with engine_errors(f"attachment {index}"):
        data = payload_bytes(part)
        output_dir.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
    return AttachmentResult(
        message=f"Attachment {index} written to {target}.",
        attachment_index=index,
        filename=filename,
        size=len(data),
        output_path=str(target),
    )


OPERATIONS = [add, get, remove, extract]
