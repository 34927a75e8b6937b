"""Paragraph lookup and style helpers shared by the Word handlers."""

from typing import Iterator, Optional

from docx.document import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.text.paragraph import Paragraph

from docedit.exceptions import NotFoundError, ParameterValidationError

ALIGNMENTS = {
    "left": WD_ALIGN_PARAGRAPH.LEFT,
    "center": WD_ALIGN_PARAGRAPH.CENTER,
    "right": WD_ALIGN_PARAGRAPH.RIGHT,
    "justify": WD_ALIGN_PARAGRAPH.JUSTIFY,
}


def get_paragraph(document: Document, index: int) -> Paragraph:
    """Return the body paragraph at a 0-based index.

    Raises:
        NotFoundError: If the index is out of range
    """
    paragraphs = document.paragraphs
    if index < 0 or index >= len(paragraphs):
        raise NotFoundError(
            f"Paragraph index {index} is out of range "
            f"(document has {len(paragraphs)} paragraph(s), valid: 0-{len(paragraphs) - 1})",
            details={"paragraphIndex": index, "paragraph_count": len(paragraphs)},
        )
    return paragraphs[index]


def check_style(document: Document, style: Optional[str], parameter: str = "style") -> Optional[str]:
    """Validate a paragraph style name against the document's styles."""
    if style is None:
        return None
    names = [s.name for s in document.styles if s.name]
    for name in names:
        if name.lower() == style.lower():
            return name
    raise ParameterValidationError(
        parameter,
        f"Style '{style}' does not exist in this document",
        details={"available": sorted(names)[:50]},
    )


def check_alignment(alignment: Optional[str]):
    if alignment is None:
        return None
    value = ALIGNMENTS.get(alignment.strip().lower())
    if value is None:
        raise ParameterValidationError(
            "alignment", f"Unknown alignment '{alignment}' (use one of: {', '.join(ALIGNMENTS)})"
        )
    return value


def alignment_name(paragraph: Paragraph) -> Optional[str]:
    for name, value in ALIGNMENTS.items():
        if paragraph.alignment == value:
            return name
    return None


def iter_all_paragraphs(document: Document) -> Iterator[Paragraph]:
    """Body paragraphs, then paragraphs inside table cells."""
    yield from document.paragraphs
    for table in document.tables:
        for row in table.rows:
            for cell in row.cells:
                yield from cell.paragraphs
