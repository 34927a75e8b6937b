"""Worksheet management: add, delete, rename, copy and list."""

from __future__ import annotations

import re
from typing import Optional

from docedit.exceptions import ParameterValidationError, ValidationError
from docedit.handlers.excel.helpers import get_worksheet, used_bounds
from docedit.handlers.excel.results import SheetInfo, SheetListResult, SheetResult
from docedit.operations import ParameterSpec, engine_errors, operation

MAX_SHEET_NAME_LENGTH = 31
_INVALID_NAME_CHARS = re.compile(r"[\[\]:*?/\\]")


def validate_sheet_name(workbook, name: str, parameter: str, ignore_index: Optional[int] = None) -> str:
    """Check Excel's sheet-name rules and uniqueness (case-insensitive).

    Raises:
        ParameterValidationError: If the name is empty, too long, has
            forbidden characters or is already used by another sheet
    """
    name = name.strip()
    if not name:
        raise ParameterValidationError(parameter, f"{parameter} must not be empty")
    if len(name) > MAX_SHEET_NAME_LENGTH:
        raise ParameterValidationError(
            parameter,
            f"Sheet name '{name}' is {len(name)} characters; the limit is {MAX_SHEET_NAME_LENGTH}",
        )
    if _INVALID_NAME_CHARS.search(name):
        raise ParameterValidationError(
            parameter, f"Sheet name '{name}' contains one of the forbidden characters [ ] : * ? / \\"
        )
    for index, worksheet in enumerate(workbook.worksheets):
        if index != ignore_index and worksheet.title.lower() == name.lower():
            raise ParameterValidationError(
                parameter,
                f"A sheet named '{worksheet.title}' already exists at index {index}",
                details={"existing_index": index},
            )
    return name


def _unique_copy_name(workbook, base: str) -> str:
    taken = {worksheet.title.lower() for worksheet in workbook.worksheets}
    number = 1
    while True:
        suffix = f" ({number})" if number > 1 else " (copy)"
        candidate = f"{base[:MAX_SHEET_NAME_LENGTH - len(suffix)]}{suffix}"
        if candidate.lower() not in taken:
            return candidate
        number += 1


@operation(
    "add",
    result=SheetResult,
    mutates=True,
    parameters=[
        ParameterSpec("sheetName", "string", "Name of the new sheet", required=True),
        ParameterSpec("insertAt", "integer", "Position for the new sheet (0-based); appended if omitted"),
    ],
)
def add(view, parameters) -> SheetResult:
    """Add a new empty worksheet."""
    workbook = view.document
    name = validate_sheet_name(workbook, parameters.get_required("sheetName", str), "sheetName")
    sheet_count = len(workbook.worksheets)
    insert_at = parameters.get_optional("insertAt", Optional[int])
    if insert_at is None:
        insert_at = sheet_count
    if insert_at < 0 or insert_at > sheet_count:
        raise ParameterValidationError(
            "insertAt", f"insertAt {insert_at} is out of range (valid: 0-{sheet_count})"
        )

    with engine_errors(f"sheet '{name}'"):
        workbook.create_sheet(title=name, index=insert_at)
    view.mark_modified()
    return SheetResult(
        message=f"Sheet '{name}' added at index {insert_at}.", sheet_index=insert_at, sheet_name=name
    )


@operation(
    "delete",
    result=SheetResult,
    mutates=True,
    parameters=[ParameterSpec("sheetIndex", "integer", "Index of the sheet to delete (0-based)", required=True)],
)
def delete(view, parameters) -> SheetResult:
    """Delete a worksheet. The last remaining sheet cannot be deleted."""
    workbook = view.document
    sheet_index = parameters.get_required("sheetIndex", int)
    worksheet = get_worksheet(workbook, sheet_index)
    if len(workbook.worksheets) == 1:
        raise ValidationError(
            f"Cannot delete sheet '{worksheet.title}': a workbook must keep at least one sheet",
            details={"sheetIndex": sheet_index},
        )

    name = worksheet.title
    with engine_errors(f"sheet '{name}'"):
        workbook.remove(worksheet)
    view.mark_modified()
    return SheetResult(message=f"Sheet '{name}' deleted.", sheet_index=sheet_index, sheet_name=name)


@operation(
    "rename",
    result=SheetResult,
    mutates=True,
    parameters=[
        ParameterSpec("sheetIndex", "integer", "Index of the sheet to rename (0-based)", required=True),
        ParameterSpec("newName", "string", "New sheet name", required=True),
    ],
)
def rename(view, parameters) -> SheetResult:
    """Rename a worksheet."""
    parameters.require_all("sheetIndex", "newName")
    workbook = view.document
    sheet_index = parameters.get_required("sheetIndex", int)
    worksheet = get_worksheet(workbook, sheet_index)
    new_name = validate_sheet_name(
        workbook, parameters.get_required("newName", str), "newName", ignore_index=sheet_index
    )

    old_name = worksheet.title
    if new_name != old_name:
        with engine_errors(f"sheet '{old_name}'"):
            worksheet.title = new_name
        view.mark_modified()
    return SheetResult(
        message=f"Sheet '{old_name}' renamed to '{new_name}'.", sheet_index=sheet_index, sheet_name=new_name
    )


@operation(
    "copy",
    result=SheetResult,
    mutates=True,
    parameters=[
        ParameterSpec("sheetIndex", "integer", "Index of the sheet to copy (0-based)", required=True),
        ParameterSpec("newName", "string", "Name of the copy; '<name> (copy)' if omitted"),
    ],
)
def copy(view, parameters) -> SheetResult:
    """Copy a worksheet to the end of the workbook."""
    workbook = view.document
    sheet_index = parameters.get_required("sheetIndex", int)
    source = get_worksheet(workbook, sheet_index)
    if parameters.has("newName"):
        new_name = validate_sheet_name(workbook, parameters.get_required("newName", str), "newName")
    else:
        new_name = _unique_copy_name(workbook, source.title)

    with engine_errors(f"sheet '{source.title}'"):
        target = workbook.copy_worksheet(source)
        target.title = new_name
    view.mark_modified()
    return SheetResult(
        message=f"Sheet '{source.title}' copied to '{new_name}'.",
        sheet_index=workbook.worksheets.index(target),
        sheet_name=new_name,
    )


@operation("get", result=SheetListResult)
def get(view, parameters) -> SheetListResult:
    """List worksheets with their visibility and used size."""
    sheets = []
    for index, worksheet in enumerate(view.document.worksheets):
        bounds = used_bounds(worksheet)
        sheets.append(
            SheetInfo(
                index=index,
                name=worksheet.title,
                visible=worksheet.sheet_state == "visible",
                max_row=bounds[3] if bounds else 0,
                max_column=bounds[2] if bounds else 0,
            )
        )
    return SheetListResult(message=f"Workbook has {len(sheets)} sheet(s).", count=len(sheets), sheets=sheets)


OPERATIONS = [add, delete, rename, copy, get]
