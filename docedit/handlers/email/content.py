"""Email content operations: read headers and body, set subject, body and recipients."""

from __future__ import annotations

from email.utils import getaddresses
from typing import List, Optional

from docedit.exceptions import ParameterValidationError
from docedit.handlers.email.helpers import (
    RECIPIENT_HEADERS,
    addresses,
    attachments,
    replace_header,
    snapshot_attachments,
)
from docedit.handlers.email.results import EmailContentResult, EmailUpdateResult, RecipientsResult
from docedit.operations import ParameterSpec, engine_errors, operation


def _body(message):
    part = message.get_body(preferencelist=("plain", "html"))
    if part is None or not part.get_payload():
        return None, False
    return part.get_content(), part.get_content_subtype() == "html"


@operation("get", result=EmailContentResult)
def get(view, parameters) -> EmailContentResult:
    """Read headers, recipients, body and attachment count."""
    message = view.document
    body, is_html = _body(message)
    subject = message.get("Subject")
    return EmailContentResult(
        message=f"Email '{subject or '(no subject)'}' read.",
        subject=str(subject) if subject is not None else None,
        sender=str(message["From"]) if message["From"] is not None else None,
        to=addresses(message, "To"),
        cc=addresses(message, "Cc"),
        bcc=addresses(message, "Bcc"),
        date=str(message["Date"]) if message["Date"] is not None else None,
        body=body,
        is_html=is_html,
        attachment_count=len(attachments(message)),
    )


@operation(
    "set_subject",
    result=EmailUpdateResult,
    mutates=True,
    parameters=[ParameterSpec("subject", "string", "New subject line", required=True)],
)
def set_subject(view, parameters) -> EmailUpdateResult:
    """Replace the subject line."""
    subject = parameters.get_required("subject", str)
    if "\n" in subject or "\r" in subject:
        raise ParameterValidationError("subject", "subject must be a single line")
    with engine_errors("Subject header"):
        replace_header(view.document, "Subject", subject)
    view.mark_modified()
    return EmailUpdateResult(message=f"Subject set to '{subject}'.", field="subject")


@operation(
    "set_body",
    result=EmailUpdateResult,
    mutates=True,
    parameters=[
        ParameterSpec("body", "string", "New message body", required=True),
        ParameterSpec("isHtml", "boolean", "Treat the body as HTML", default=False),
    ],
)
def set_body(view, parameters) -> EmailUpdateResult:
    """Replace the message body, keeping attachments."""
    body = parameters.get_required("body", str)
    is_html = parameters.get_optional("isHtml", bool, False)
    message = view.document

    with engine_errors("message body"):
        kept = snapshot_attachments(message)
        message.clear_content()
        message.set_content(body, subtype="html" if is_html else "plain")
        for data, maintype, subtype, filename in kept:
            message.add_attachment(data, maintype=maintype, subtype=subtype, filename=filename or None)
    view.mark_modified()
    kind = "HTML" if is_html else "plain text"
    return EmailUpdateResult(message=f"Body set ({kind}, {len(body)} characters).", field="body")


def _recipient_list(parameters, key: str) -> Optional[List[str]]:
    if not parameters.has(key):
        return None
    raw = parameters.get_required(key)
    if isinstance(raw, str):
        values = [raw]
    elif isinstance(raw, list) and all(isinstance(item, str) for item in raw):
        values = raw
    else:
        raise ParameterValidationError(key, f"{key} must be a string or an array of strings")
    parsed = [address for _, address in getaddresses(values) if address]
    for address in parsed:
        if "@" not in address:
            raise ParameterValidationError(key, f"'{address}' is not a valid email address")
    return [value for value in values if value.strip()]


@operation(
    "set_recipients",
    result=RecipientsResult,
    mutates=True,
    parameters=[
        ParameterSpec("to", "array", "To recipients (string or array of strings)"),
        ParameterSpec("cc", "array", "Cc recipients (string or array of strings)"),
        ParameterSpec("bcc", "array", "Bcc recipients (string or array of strings)"),
    ],
)
def set_recipients(view, parameters) -> RecipientsResult:
    """Replace To, Cc and/or Bcc; headers not given are left alone."""
    updates = {key: _recipient_list(parameters, key) for key in RECIPIENT_HEADERS}
    updates = {key: value for key, value in updates.items() if value is not None}
    if not updates:
        raise ParameterValidationError("to", "Provide at least one of: to, cc, bcc")

    message = view.document
    with engine_errors("recipient headers"):
        for key, values in updates.items():
            replace_header(message, RECIPIENT_HEADERS[key], ", ".join(values))
    view.mark_modified()
    return RecipientsResult(
        message=f"Updated {', '.join(updates)} recipients.",
        to=addresses(message, "To"),
        cc=addresses(message, "Cc"),
        bcc=addresses(message, "Bcc"),
    )


OPERATIONS = [get, set_subject, set_body, set_recipients]
