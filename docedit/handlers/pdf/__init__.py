"""PDF (pypdf PdfWriter) operation registries."""

from pypdf import PdfWriter

from docedit.handlers.pdf import pages, properties, text
from docedit.operations import OperationRegistry


def build_registries():
    return [
        OperationRegistry("pdf_page", PdfWriter, "pdf", "Add, delete, rotate and inspect pages").register_all(
            pages.OPERATIONS
        ),
        OperationRegistry(
            "pdf_properties", PdfWriter, "pdf", "Read and set document information"
        ).register_all(properties.OPERATIONS),
        OperationRegistry("pdf_text", PdfWriter, "pdf", "Extract page text").register_all(
            text.OPERATIONS
        ),
    ]


__all__ = ["build_registries"]
