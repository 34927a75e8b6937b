"""Email (stdlib EmailMessage) operation registries."""

from email.message import EmailMessage

from docedit.handlers.email import attachments, content
from docedit.operations import OperationRegistry


def build_registries():
    return [
        OperationRegistry(
            "email_content", EmailMessage, "email", "Read the message; set subject, body and recipients"
        ).register_all(content.OPERATIONS),
        OperationRegistry(
            "email_attachment", EmailMessage, "email", "Add, list, remove and extract attachments"
        ).register_all(attachments.OPERATIONS),
    ]


__all__ = ["build_registries"]
