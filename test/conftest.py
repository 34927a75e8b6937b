"""Pytest configuration and fixtures

Provides fresh documents of every supported type, operation contexts and a
helper that runs one operation against a document the way a registry would.
"""

from email.message import EmailMessage
from typing import Any, Callable, Tuple

import docx
import openpyxl
import pptx
import pytest
from pypdf import PdfWriter

from docedit.logger import StructLogger
from docedit.operations import Operation, OperationContext, OperationParameters, OperationResult


# ============================================================================
# DOCUMENTS
# ============================================================================


@pytest.fixture
def workbook():
    """Workbook with one sheet named 'Data'."""
    wb = openpyxl.Workbook()
    wb.active.title = "Data"
    return wb


@pytest.fixture
def word_document():
    """Document with three body paragraphs."""
    document = docx.Document()
    document.add_paragraph("Quarterly report")
    document.add_paragraph("Revenue grew in every region.")
    document.add_paragraph("Costs were flat.")
    return document


@pytest.fixture
def presentation():
    """Presentation with two slides: a titled slide and a blank one."""
    prs = pptx.Presentation()
    title_slide = prs.slides.add_slide(prs.slide_layouts[0])
    title_slide.shapes.title.text = "Welcome"
    prs.slides.add_slide(prs.slide_layouts[6])
    return prs


@pytest.fixture
def pdf_writer():
    """PDF with two blank US letter pages."""
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    writer.add_blank_page(width=612, height=792)
    return writer


@pytest.fixture
def email_message():
    """Plain text email with To and Cc recipients."""
    message = EmailMessage()
    message["Subject"] = "Status update"
    message["From"] = "Alice <alice@example.com>"
    message["To"] = "bob@example.com"
    message["Cc"] = "carol@example.com"
    message.set_content("Hello Bob,\nAll good.\n")
    return message


# ============================================================================
# CONTEXTS AND EXECUTION
# ============================================================================


@pytest.fixture
def make_context() -> Callable[[Any], OperationContext]:
    def factory(document: Any) -> OperationContext:
        return OperationContext(document)

    return factory


@pytest.fixture
def run_op() -> Callable[..., Tuple[OperationResult, OperationContext]]:
    """Run an operation against a fresh context for ``document``.

    Returns the result and the context so tests can check the modified flag.
    """

    def runner(op: Operation, document: Any, **parameters: Any):
        context = OperationContext(document)
        result = op.execute(context, OperationParameters(parameters))
        return result, context

    return runner


@pytest.fixture
def logger():
    return StructLogger("docedit-test")
