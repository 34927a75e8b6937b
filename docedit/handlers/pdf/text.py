"""PDF text extraction."""

from __future__ import annotations

from typing import Optional

from docedit.handlers.pdf.helpers import get_page
from docedit.handlers.pdf.results import PageText, TextExtractResult
from docedit.operations import ParameterSpec, engine_errors, operation


@operation(
    "extract",
    result=TextExtractResult,
    parameters=[ParameterSpec("pageIndex", "integer", "Page index (0-based); all pages if omitted")],
)
def extract(view, parameters) -> TextExtractResult:
    """Extract plain text from one page or every page."""
    writer = view.document
    index = parameters.get_optional("pageIndex", Optional[int])
    targets = [index] if index is not None else list(range(len(writer.pages)))
    pages = [(target, get_page(writer, target)) for target in targets]

    texts = []
    with engine_errors("text extraction"):
        for target, page in pages:
            texts.append(PageText(page_index=target, text=page.extract_text() or ""))
    total = sum(len(page.text) for page in texts)
    return TextExtractResult(
        message=f"Extracted {total} character(s) from {len(texts)} page(s).",
        page_count=len(writer.pages),
        pages=texts,
        total_characters=total,
    )


OPERATIONS = [extract]
