"""Row and column insertion and deletion."""

from __future__ import annotations

from docedit.exceptions import ParameterValidationError
from docedit.handlers.excel.helpers import get_worksheet
from docedit.handlers.excel.results import RowColumnResult
from docedit.operations import ParameterSpec, engine_errors, operation

SHEET_INDEX = ParameterSpec("sheetIndex", "integer", "Sheet index (0-based, default: 0)", default=0)
COUNT = ParameterSpec("count", "integer", "Number of rows or columns (default: 1)", default=1)
ROW_INDEX = ParameterSpec("rowIndex", "integer", "Row index (0-based)", required=True)
COLUMN_INDEX = ParameterSpec("columnIndex", "integer", "Column index (0-based)", required=True)


def _read_target(parameters, key: str):
    index = parameters.get_required(key, int)
    count = parameters.get_optional("count", int, 1)
    if index < 0:
        raise ParameterValidationError(key, f"{key} must be >= 0, got {index}")
    if count < 1:
        raise ParameterValidationError("count", f"count must be >= 1, got {count}")
    return index, count


def _change(view, parameters, key: str, noun: str, action: str) -> RowColumnResult:
    index, count = _read_target(parameters, key)
    sheet_index = parameters.get_optional("sheetIndex", int, 0)
    worksheet = get_worksheet(view.document, sheet_index)

    # openpyxl counts rows and columns from 1
    suffix = "rows" if noun == "row" else "cols"
    method = getattr(worksheet, f"{action}_{suffix}")
    with engine_errors(f"{noun} {index} on sheet '{worksheet.title}'"):
        method(index + 1, amount=count)
    view.mark_modified()

    past = "inserted" if action == "insert" else "deleted"
    return RowColumnResult(
        message=f"{count} {noun}(s) {past} at {noun} {index} on sheet '{worksheet.title}'.",
        sheet_index=sheet_index,
        index=index,
        count=count,
    )


@operation("insert_row", result=RowColumnResult, mutates=True, parameters=[SHEET_INDEX, ROW_INDEX, COUNT])
def insert_row(view, parameters) -> RowColumnResult:
    """Insert rows before rowIndex."""
    return _change(view, parameters, "rowIndex", "row", "insert")


@operation("delete_row", result=RowColumnResult, mutates=True, parameters=[SHEET_INDEX, ROW_INDEX, COUNT])
def delete_row(view, parameters) -> RowColumnResult:
    """Delete rows starting at rowIndex."""
    return _change(view, parameters, "rowIndex", "row", "delete")


@operation(
    "insert_column", result=RowColumnResult, mutates=True, parameters=[SHEET_INDEX, COLUMN_INDEX, COUNT]
)
def insert_column(view, parameters) -> RowColumnResult:
    """Insert columns before columnIndex."""
    return _change(view, parameters, "columnIndex", "column", "insert")


@operation(
    "delete_column", result=RowColumnResult, mutates=True, parameters=[SHEET_INDEX, COLUMN_INDEX, COUNT]
)
def delete_column(view, parameters) -> RowColumnResult:
    """Delete columns starting at columnIndex."""
    return _change(view, parameters, "columnIndex", "column", "delete")


OPERATIONS = [insert_row, delete_row, insert_column, delete_column]
