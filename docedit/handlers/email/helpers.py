"""Header, body and attachment helpers shared by the email handlers."""

from email.message import EmailMessage
from email.utils import getaddresses
from typing import List, Tuple

from docedit.exceptions import NotFoundError

RECIPIENT_HEADERS = {"to": "To", "cc": "Cc", "bcc": "Bcc"}


def addresses(message: EmailMessage, header: str) -> List[str]:
    values = message.get_all(header, [])
    return [f"{name} <{address}>" if name else address for name, address in getaddresses(values) if address]


def replace_header(message: EmailMessage, header: str, value: str) -> None:
    del message[header]
    if value:
        message[header] = value


def attachments(message: EmailMessage) -> List[EmailMessage]:
    return list(message.iter_attachments())


def get_attachment(message: EmailMessage, index: int) -> EmailMessage:
    """Return the attachment at a 0-based index.

    Raises:
        NotFoundError: If the index is out of range
    """
    parts = attachments(message)
    if index < 0 or index >= len(parts):
        raise NotFoundError(
            f"Attachment index {index} is out of range "
            f"(message has {len(parts)} attachment(s), valid: 0-{len(parts) - 1})",
            details={"attachmentIndex": index, "attachment_count": len(parts)},
        )
    return parts[index]


def payload_bytes(part: EmailMessage) -> bytes:
    return part.get_payload(decode=True) or b""


def snapshot_attachments(message: EmailMessage) -> List[Tuple[bytes, str, str, str]]:
    """Decoded copies of every attachment as (data, maintype, subtype, filename)."""
    return [
        (payload_bytes(part), part.get_content_maintype(), part.get_content_subtype(), part.get_filename() or "")
        for part in attachments(message)
    ]
