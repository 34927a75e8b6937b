"""Word (python-docx Document) operation registries."""

from docx.document import Document

from docedit.handlers.word import paragraphs, text
from docedit.operations import OperationRegistry


def build_registries():
    return [
        OperationRegistry(
            "word_text", Document, "word", "Add, replace and search text; document statistics"
        ).register_all(text.OPERATIONS),
        OperationRegistry(
            "word_paragraph", Document, "word", "Insert, delete, edit and list paragraphs"
        ).register_all(paragraphs.OPERATIONS),
    ]


__all__ = ["build_registries"]
