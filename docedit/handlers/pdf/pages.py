"""PDF page operations: add, delete, rotate and inspect."""

from __future__ import annotations

from typing import Optional

from docedit.exceptions import ParameterValidationError, ValidationError
from docedit.handlers.pdf.helpers import US_LETTER, get_page, page_rotation, page_size
from docedit.handlers.pdf.results import PageInfo, PageInfoResult, PageResult, RotateResult
from docedit.operations import ParameterSpec, engine_errors, operation

VALID_ROTATIONS = (90, 180, 270, -90)


@operation(
    "add",
    result=PageResult,
    mutates=True,
    parameters=[
        ParameterSpec("insertAt", "integer", "Position of the new page (0-based); appended if omitted"),
        ParameterSpec("width", "number", "Page width in points (default: size of the neighbouring page)"),
        ParameterSpec("height", "number", "Page height in points (default: size of the neighbouring page)"),
    ],
)
def add(view, parameters) -> PageResult:
    """Insert a blank page."""
    writer = view.document
    count = len(writer.pages)
    insert_at = parameters.get_optional("insertAt", Optional[int])
    if insert_at is None:
        insert_at = count
    if insert_at < 0 or insert_at > count:
        raise ParameterValidationError("insertAt", f"insertAt {insert_at} is out of range (valid: 0-{count})")

    if count:
        width, height = page_size(writer.pages[min(insert_at, count - 1)])
    else:
        width, height = US_LETTER
    width = parameters.get_optional("width", float, width)
    height = parameters.get_optional("height", float, height)
    if width <= 0 or height <= 0:
        raise ParameterValidationError("width", "width and height must be positive")

    with engine_errors(f"page {insert_at}"):
        writer.insert_blank_page(width=width, height=height, index=insert_at)
    view.mark_modified()
    return PageResult(
        message=f"Blank page inserted at index {insert_at} ({width:g}x{height:g} pt).",
        page_index=insert_at,
        page_count=len(writer.pages),
    )


@operation(
    "delete",
    result=PageResult,
    mutates=True,
    parameters=[ParameterSpec("pageIndex", "integer", "Page index (0-based)", required=True)],
)
def delete(view, parameters) -> PageResult:
    """Delete a page. The only page of a document cannot be deleted."""
    writer = view.document
    index = parameters.get_required("pageIndex", int)
    get_page(writer, index)
    if len(writer.pages) == 1:
        raise ValidationError("Cannot delete the only page of the document", details={"pageIndex": index})

    with engine_errors(f"page {index}"):
        del writer.pages[index]
    view.mark_modified()
    return PageResult(message=f"Page {index} deleted.", page_index=index, page_count=len(writer.pages))


@operation(
    "rotate",
    result=RotateResult,
    mutates=True,
    parameters=[
        ParameterSpec("pageIndex", "integer", "Page index (0-based); all pages if omitted"),
        ParameterSpec(
            "rotation", "integer", "Clockwise rotation in degrees", required=True, enum=VALID_ROTATIONS
        ),
    ],
)
def rotate(view, parameters) -> RotateResult:
    """Rotate one page or every page by a multiple of 90 degrees."""
    writer = view.document
    rotation = parameters.get_required("rotation", int)
    if rotation not in VALID_ROTATIONS:
        raise ParameterValidationError(
            "rotation", f"rotation must be one of {', '.join(map(str, VALID_ROTATIONS))}, got {rotation}"
        )
    index = parameters.get_optional("pageIndex", Optional[int])
    targets = [index] if index is not None else list(range(len(writer.pages)))
    pages = [get_page(writer, target) for target in targets]

    with engine_errors("rotating pages"):
        for page in pages:
            page.rotate(rotation)
    if pages:
        view.mark_modified()
    return RotateResult(
        message=f"Rotated {len(pages)} page(s) by {rotation} degrees.",
        rotation=rotation,
        rotated_pages=targets,
    )


@operation("get_info", result=PageInfoResult)
def get_info(view, parameters) -> PageInfoResult:
    """Report page count and each page's size and rotation."""
    pages = []
    for index, page in enumerate(view.document.pages):
        width, height = page_size(page)
        pages.append(PageInfo(index=index, width=width, height=height, rotation=page_rotation(page)))
    return PageInfoResult(message=f"Document has {len(pages)} page(s).", page_count=len(pages), pages=pages)


OPERATIONS = [add, delete, rotate, get_info]
