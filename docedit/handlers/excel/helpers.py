"""Worksheet, range and value helpers shared by the Excel handlers."""

from __future__ import annotations

import math
import re
from typing import Any, Dict, Iterator, List, Optional, Tuple

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE, Cell, MergedCell
from openpyxl.utils import get_column_letter
from openpyxl.utils.cell import coordinate_from_string, column_index_from_string, range_boundaries
from openpyxl.utils.exceptions import CellCoordinatesException
from openpyxl.worksheet.worksheet import Worksheet

from docedit.exceptions import NotFoundError, ParameterValidationError

CellBounds = Tuple[int, int, int, int]  # min_col, min_row, max_col, max_row (1-based)

_INTEGER = re.compile(r"[+-]?[0-9]+")
_DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.[0-9]*|\.[0-9]+|[0-9]+)(?:[eE][+-]?[0-9]+)?")


def get_worksheet(workbook: Workbook, sheet_index: int) -> Worksheet:
    """Return the worksheet at a 0-based index.

    Raises:
        NotFoundError: If the index is out of range
    """
    sheets = workbook.worksheets
    if sheet_index < 0 or sheet_index >= len(sheets):
        raise NotFoundError(
            f"Worksheet index {sheet_index} is out of range "
            f"(workbook has {len(sheets)} sheet(s), valid: 0-{len(sheets) - 1})",
            details={"sheetIndex": sheet_index, "sheet_count": len(sheets)},
        )
    return sheets[sheet_index]


def parse_range(range_ref: str, parameter: str = "range") -> CellBounds:
    """Parse an A1 range such as 'A1:C10' (a single cell is a 1x1 range).

    Raises:
        ParameterValidationError: If the reference is malformed or unbounded
    """
    try:
        bounds = range_boundaries(range_ref.strip().upper())
    except (CellCoordinatesException, ValueError, TypeError) as exc:
        raise ParameterValidationError(
            parameter, f"Invalid range '{range_ref}': {exc}. Use A1 notation such as 'A1:C10'"
        ) from exc
    if any(part is None for part in bounds):
        raise ParameterValidationError(
            parameter, f"Invalid range '{range_ref}': whole rows or columns are not supported"
        )
    return bounds  # type: ignore[return-value]


def parse_cell(cell_ref: str, parameter: str = "cell") -> Tuple[int, int]:
    """Parse a single cell reference such as 'B7' into (row, column), 1-based.

    Raises:
        ParameterValidationError: If the reference is not a single cell
    """
    try:
        column_letter, row = coordinate_from_string(cell_ref.strip().upper())
        column = column_index_from_string(column_letter)
    except (CellCoordinatesException, ValueError, TypeError) as exc:
        raise ParameterValidationError(
            parameter, f"Invalid cell reference '{cell_ref}'. Use A1 notation such as 'B7'"
        ) from exc
    return row, column


def format_bounds(bounds: CellBounds) -> str:
    min_col, min_row, max_col, max_row = bounds
    start = f"{get_column_letter(min_col)}{min_row}"
    end = f"{get_column_letter(max_col)}{max_row}"
    return start if start == end else f"{start}:{end}"


def stored_cells(worksheet: Worksheet) -> Dict[Tuple[int, int], Cell]:
    """Cells that exist in the worksheet, keyed by (row, column).

    Every public openpyxl accessor creates the cells it visits; read-only
    operations go through this mapping instead.
    """
    return worksheet._cells


def existing_cell(worksheet: Worksheet, row: int, column: int) -> Optional[Cell]:
    """The cell at (row, column) if it exists, without creating it."""
    return stored_cells(worksheet).get((row, column))


def merged_overlap(worksheet: Worksheet, bounds: CellBounds) -> Optional[str]:
    """The first merged range that intersects ``bounds``, or None."""
    min_col, min_row, max_col, max_row = bounds
    for merged in worksheet.merged_cells.ranges:
        if (
            merged.min_col <= max_col
            and merged.max_col >= min_col
            and merged.min_row <= max_row
            and merged.max_row >= min_row
        ):
            return merged.coord
    return None


def is_merged_cell(worksheet: Worksheet, row: int, column: int) -> bool:
    """True for the read-only cells covered by a merge (not its top-left cell)."""
    return isinstance(existing_cell(worksheet, row, column), MergedCell)


def used_bounds(worksheet: Worksheet) -> Optional[CellBounds]:
    """Bounds of the non-empty cells, or None for an empty sheet."""
    coordinates = [key for key, cell in stored_cells(worksheet).items() if cell.value is not None]
    if not coordinates:
        return None
    rows = [row for row, _ in coordinates]
    columns = [column for _, column in coordinates]
    return min(columns), min(rows), max(columns), max(rows)


def iter_rows(worksheet: Worksheet, bounds: CellBounds) -> Iterator[List[Any]]:
    min_col, min_row, max_col, max_row = bounds
    for row in worksheet.iter_rows(
        min_row=min_row, max_row=max_row, min_col=min_col, max_col=max_col, values_only=True
    ):
        yield list(row)


def parse_cell_value(value: Any) -> Any:
    """Convert an incoming cell value to what should be stored.

    Strings written as plain decimal numbers ('5', '-2.5', '1e3') become
    numbers. Everything else, formulas and 'true' included, stays text.
    """
    if not isinstance(value, str):
        return value
    text = value.strip()
    if _INTEGER.fullmatch(text):
        return int(text)
    if _DECIMAL.fullmatch(text):
        number = float(text)
        if math.isfinite(number):
            return number
    return value


def check_cell_value(value: Any, parameter: str, label: str) -> None:
    """Reject values a cell cannot hold.

    Raises:
        ParameterValidationError: For objects, arrays or strings with
            control characters
    """
    if value is None or isinstance(value, (bool, int, float)):
        return
    if isinstance(value, str):
        if ILLEGAL_CHARACTERS_RE.search(value):
            raise ParameterValidationError(
                parameter, f"{label} contains control characters that cannot be stored in a cell"
            )
        return
    raise ParameterValidationError(
        parameter,
        f"{label} must be a string, number, boolean or null, got {type(value).__name__}",
        details={"received_type": type(value).__name__},
    )


def to_json_value(value: Any) -> Any:
    """Render a stored cell value as a JSON-safe value."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)
