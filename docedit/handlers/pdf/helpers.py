"""Page lookup helpers shared by the PDF handlers."""

from pypdf import PageObject, PdfWriter

from docedit.exceptions import NotFoundError

US_LETTER = (612.0, 792.0)


def get_page(writer: PdfWriter, index: int, parameter: str = "pageIndex") -> PageObject:
    """Return the page at a 0-based index.

    Raises:
        NotFoundError: If the index is out of range
    """
    count = len(writer.pages)
    if index < 0 or index >= count:
        raise NotFoundError(
            f"Page index {index} is out of range (document has {count} page(s), valid: 0-{count - 1})",
            details={parameter: index, "page_count": count},
        )
    return writer.pages[index]


def page_size(page: PageObject):
    box = page.mediabox
    return float(box.width), float(box.height)


def page_rotation(page: PageObject) -> int:
    return int(page.rotation or 0) % 360
