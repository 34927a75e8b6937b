"""Single-cell read, write and clear operations."""

from __future__ import annotations

import datetime

from openpyxl.utils import get_column_letter

from docedit.exceptions import ParameterValidationError
from docedit.handlers.excel.helpers import (
    check_cell_value,
    existing_cell,
    get_worksheet,
    is_merged_cell,
    parse_cell,
    parse_cell_value,
    to_json_value,
)
from docedit.handlers.excel.results import CellResult
from docedit.operations import ParameterSpec, engine_errors, operation

SHEET_INDEX = ParameterSpec("sheetIndex", "integer", "Sheet index (0-based, default: 0)", default=0)
CELL = ParameterSpec("cell", "string", "Cell reference, e.g. 'A1'", required=True)


def _value_type(value) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, (datetime.date, datetime.time, datetime.timedelta)):
        return "date"
    if isinstance(value, str) and value.startswith("="):
        return "formula"
    return "string"


def _address(row: int, column: int) -> str:
    return f"{get_column_letter(column)}{row}"


@operation(
    "write",
    result=CellResult,
    mutates=True,
    parameters=[
        SHEET_INDEX,
        CELL,
        ParameterSpec(
            "value",
            "string",
            "Value to write. Numeric strings become numbers; strings starting with '=' are formulas",
            required=True,
        ),
    ],
)
def write(view, parameters) -> CellResult:
    """Write one cell value."""
    parameters.require_all("cell", "value")
    row, column = parse_cell(parameters.get_required("cell", str))
    raw = parameters.get_required("value")
    check_cell_value(raw, "value", "value")
    sheet_index = parameters.get_optional("sheetIndex", int, 0)
    worksheet = get_worksheet(view.document, sheet_index)

    address = _address(row, column)
    if is_merged_cell(worksheet, row, column):
        raise ParameterValidationError("cell", f"Cell {address} is inside a merged range and cannot be written")
    with engine_errors(f"cell {address}"):
        cell = worksheet.cell(row=row, column=column)
        cell.value = parse_cell_value(raw)
    view.mark_modified()

    return CellResult(
        message=f"Cell {address} written on sheet '{worksheet.title}'.",
        sheet_index=sheet_index,
        cell=address,
        value=to_json_value(cell.value),
        value_type=_value_type(cell.value),
        number_format=cell.number_format,
    )


@operation(
    "get",
    result=CellResult,
    parameters=[
        SHEET_INDEX,
        CELL,
        ParameterSpec("includeFormula", "boolean", "Report the formula of formula cells", default=True),
    ],
)
def get(view, parameters) -> CellResult:
    """Read one cell value, its type and number format."""
    row, column = parse_cell(parameters.get_required("cell", str))
    sheet_index = parameters.get_optional("sheetIndex", int, 0)
    include_formula = parameters.get_optional("includeFormula", bool, True)
    worksheet = get_worksheet(view.document, sheet_index)

    address = _address(row, column)
    cell = existing_cell(worksheet, row, column)
    value = cell.value if cell is not None else None
    value_type = _value_type(value)
    return CellResult(
        message=f"Cell {address} on sheet '{worksheet.title}' holds a {value_type} value.",
        sheet_index=sheet_index,
        cell=address,
        value=to_json_value(value),
        value_type=value_type,
        formula=value if include_formula and value_type == "formula" else None,
        number_format=cell.number_format if cell is not None else None,
    )


@operation("clear", result=CellResult, mutates=True, parameters=[SHEET_INDEX, CELL])
def clear(view, parameters) -> CellResult:
    """Clear the value of one cell."""
    row, column = parse_cell(parameters.get_required("cell", str))
    sheet_index = parameters.get_optional("sheetIndex", int, 0)
    worksheet = get_worksheet(view.document, sheet_index)

    address = _address(row, column)
    cell = existing_cell(worksheet, row, column)
    if cell is not None and cell.value is not None:
        with engine_errors(f"cell {address}"):
            cell.value = None
        view.mark_modified()

    return CellResult(
        message=f"Cell {address} cleared on sheet '{worksheet.title}'.",
        sheet_index=sheet_index,
        cell=address,
        value=None,
        value_type="null",
    )


OPERATIONS = [write, get, clear]
