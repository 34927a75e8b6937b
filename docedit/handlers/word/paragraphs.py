"""Word paragraph operations: insert, delete, edit and list."""

from __future__ import annotations

from typing import Optional

from docedit.exceptions import ParameterValidationError
from docedit.handlers.word.helpers import alignment_name, check_alignment, check_style, get_paragraph
from docedit.handlers.word.results import ParagraphInfo, ParagraphListResult, ParagraphResult
from docedit.operations import ParameterSpec, engine_errors, operation

PARAGRAPH_INDEX = ParameterSpec("paragraphIndex", "integer", "Paragraph index (0-based)", required=True)
STYLE = ParameterSpec("style", "string", "Paragraph style name, e.g. 'Heading 1'")


def _style_name(paragraph) -> Optional[str]:
    return paragraph.style.name if paragraph.style is not None else None


@operation(
    "insert",
    result=ParagraphResult,
    mutates=True,
    parameters=[
        ParameterSpec("text", "string", "Paragraph text", required=True),
        ParameterSpec(
            "paragraphIndex", "integer", "Insert before this paragraph (0-based); appended if omitted"
        ),
        STYLE,
    ],
)
def insert(view, parameters) -> ParagraphResult:
    """Insert a paragraph before an existing one, or append it."""
    document = view.document
    text = parameters.get_required("text", str)
    style = check_style(document, parameters.get_optional("style", Optional[str]))
    index = parameters.get_optional("paragraphIndex", Optional[int])
    anchor = get_paragraph(document, index) if index is not None else None

    with engine_errors("inserting paragraph"):
        if anchor is None:
            paragraph = document.add_paragraph(text, style=style)
            index = len(document.paragraphs) - 1
        else:
            paragraph = anchor.insert_paragraph_before(text, style=style)
    view.mark_modified()
    return ParagraphResult(
        message=f"Paragraph inserted at index {index}.",
        paragraph_index=index,
        style=_style_name(paragraph),
        text=paragraph.text,
    )


@operation("delete", result=ParagraphResult, mutates=True, parameters=[PARAGRAPH_INDEX])
def delete(view, parameters) -> ParagraphResult:
    """Delete a paragraph."""
    index = parameters.get_required("paragraphIndex", int)
    paragraph = get_paragraph(view.document, index)
    text = paragraph.text

    with engine_errors(f"paragraph {index}"):
        element = paragraph._element
        element.getparent().remove(element)
    view.mark_modified()
    return ParagraphResult(message=f"Paragraph {index} deleted.", paragraph_index=index, text=text)


@operation(
    "edit",
    result=ParagraphResult,
    mutates=True,
    parameters=[
        PARAGRAPH_INDEX,
        ParameterSpec("text", "string", "Replacement text (replaces all runs)"),
        STYLE,
        ParameterSpec(
            "alignment",
            "string",
            "Paragraph alignment",
            enum=("left", "center", "right", "justify"),
        ),
    ],
)
def edit(view, parameters) -> ParagraphResult:
    """Change the text, style or alignment of a paragraph."""
    document = view.document
    index = parameters.get_required("paragraphIndex", int)
    paragraph = get_paragraph(document, index)
    text = parameters.get_optional("text", Optional[str])
    style = check_style(document, parameters.get_optional("style", Optional[str]))
    alignment = check_alignment(parameters.get_optional("alignment", Optional[str]))
    if text is None and style is None and alignment is None:
        raise ParameterValidationError(
            "text", "Nothing to edit: provide at least one of text, style, alignment"
        )

    with engine_errors(f"paragraph {index}"):
        if text is not None:
            paragraph.text = text
        if style is not None:
            paragraph.style = document.styles[style]
        if alignment is not None:
            paragraph.alignment = alignment
    view.mark_modified()
    return ParagraphResult(
        message=f"Paragraph {index} edited.",
        paragraph_index=index,
        style=_style_name(paragraph),
        text=paragraph.text,
    )


@operation("get", result=ParagraphListResult)
def get(view, parameters) -> ParagraphListResult:
    """List body paragraphs with index, style, alignment and text."""
    paragraphs = [
        ParagraphInfo(
            index=index,
            style=_style_name(paragraph),
            alignment=alignment_name(paragraph),
            text=paragraph.text,
        )
        for index, paragraph in enumerate(view.document.paragraphs)
    ]
    return ParagraphListResult(
        message=f"Document has {len(paragraphs)} paragraph(s).", count=len(paragraphs), paragraphs=paragraphs
    )


OPERATIONS = [insert, delete, edit, get]
