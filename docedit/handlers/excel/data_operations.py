"""Excel data operations: sort, find/replace, batch write and read-only inspection."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, List, Optional, Tuple

from docedit.exceptions import ParameterValidationError
from docedit.handlers.excel.helpers import (
    check_cell_value,
    format_bounds,
    get_worksheet,
    is_merged_cell,
    iter_rows,
    merged_overlap,
    parse_cell,
    parse_cell_value,
    parse_range,
    to_json_value,
    used_bounds,
)
from docedit.handlers.excel.results import (
    BatchWriteResult,
    ContentResult,
    FindReplaceResult,
    RangeStatistics,
    SortResult,
    StatisticsResult,
    UsedRangeResult,
    WorksheetStatistics,
)
from docedit.operations import ParameterSpec, engine_errors, operation

SHEET_INDEX = ParameterSpec("sheetIndex", "integer", "Sheet index (0-based, default: 0)", default=0)


def _sort_key(value: Any) -> Tuple[int, Any]:
    # None < numbers < text < anything else
    if value is None:
        return (0, 0)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (1, value)
    if isinstance(value, str):
        return (2, value.casefold())
    return (3, str(value))


@operation(
    "sort",
    result=SortResult,
    mutates=True,
    parameters=[
        SHEET_INDEX,
        ParameterSpec("range", "string", "Cell range to sort, e.g. 'A1:C10'", required=True),
        ParameterSpec("sortColumn", "integer", "Column to sort by (0-based, relative to range start)", default=0),
        ParameterSpec("ascending", "boolean", "True for ascending, false for descending", default=True),
        ParameterSpec("hasHeader", "boolean", "Whether the first row of the range is a header", default=False),
    ],
)
def sort(view, parameters) -> SortResult:
    """Sort the rows of a range by one column, keeping each row intact."""
    range_ref = parameters.get_required("range", str)
    sheet_index = parameters.get_optional("sheetIndex", int, 0)
    sort_column = parameters.get_optional("sortColumn", int, 0)
    ascending = parameters.get_optional("ascending", bool, True)
    has_header = parameters.get_optional("hasHeader", bool, False)

    bounds = parse_range(range_ref)
    min_col, min_row, max_col, max_row = bounds
    column_count = max_col - min_col + 1
    if sort_column < 0 or sort_column >= column_count:
        raise ParameterValidationError(
            "sortColumn",
            f"sortColumn {sort_column} is outside range {range_ref} "
            f"(valid: 0-{column_count - 1})",
        )
    worksheet = get_worksheet(view.document, sheet_index)
    merged = merged_overlap(worksheet, bounds)
    if merged is not None:
        raise ParameterValidationError(
            "range",
            f"Range {range_ref} overlaps merged cells {merged}; unmerge them or sort a range without merges",
            details={"merged_range": merged},
        )

    with engine_errors(f"range '{range_ref}'"):
        rows = list(iter_rows(worksheet, bounds))
        header: List[List[Any]] = rows[:1] if has_header else []
        data_rows = rows[1:] if has_header else rows
        data_rows.sort(key=lambda row: _sort_key(row[sort_column]), reverse=not ascending)

        for offset, row_values in enumerate(header + data_rows):
            for col_offset, value in enumerate(row_values):
                worksheet.cell(row=min_row + offset, column=min_col + col_offset).value = value
    view.mark_modified()

    direction = "ascending" if ascending else "descending"
    return SortResult(
        message=f"Sorted range {range_ref} by column {sort_column} ({direction}).",
        range=range_ref,
        sort_column=sort_column,
        ascending=ascending,
        rows_sorted=len(data_rows),
    )


@operation(
    "find_replace",
    result=FindReplaceResult,
    mutates=True,
    parameters=[
        ParameterSpec("sheetIndex", "integer", "Sheet index (0-based); searches all sheets if omitted"),
        ParameterSpec("findText", "string", "Text to find", required=True),
        ParameterSpec("replaceText", "string", "Replacement text", required=True),
        ParameterSpec("matchCase", "boolean", "Match case", default=False),
        ParameterSpec("matchEntireCell", "boolean", "Match the entire cell content", default=False),
    ],
)
def find_replace(view, parameters) -> FindReplaceResult:
    """Replace text in cell values across one sheet or the whole workbook."""
    find_text = parameters.get_required("findText", str)
    if find_text == "":
        raise ParameterValidationError("findText", "findText must not be empty")
    replace_text = parameters.get_required("replaceText", str)
    sheet_index = parameters.get_optional("sheetIndex", Optional[int])
    match_case = parameters.get_optional("matchCase", bool, False)
    match_entire = parameters.get_optional("matchEntireCell", bool, False)

    workbook = view.document
    sheets = workbook.worksheets if sheet_index is None else [get_worksheet(workbook, sheet_index)]
    flags = 0 if match_case else re.IGNORECASE
    pattern = re.compile(
        f"^{re.escape(find_text)}$" if match_entire else re.escape(find_text), flags
    )

    replacements = 0
    cells_changed = 0
    with engine_errors(f"find_replace of '{find_text}'"):
        for worksheet in sheets:
            for row in worksheet.iter_rows():
                for cell in row:
                    if not isinstance(cell.value, str):
                        continue
                    new_value, count = pattern.subn(lambda _match: replace_text, cell.value)
                    if count:
                        cell.value = new_value
                        replacements += count
                        cells_changed += 1
    if replacements:
        view.mark_modified()

    scope = "all sheets" if sheet_index is None else f"sheet {sheet_index}"
    return FindReplaceResult(
        message=f"Replaced {replacements} occurrence(s) of '{find_text}' in {scope}.",
        replacements=replacements,
        cells_changed=cells_changed,
    )


def _batch_items(data: Any) -> List[Tuple[str, Any]]:
    if isinstance(data, Mapping):
        return [(str(cell), value) for cell, value in data.items()]
    if isinstance(data, list):
        items = []
        for position, item in enumerate(data):
            if not isinstance(item, Mapping) or "cell" not in item:
                raise ParameterValidationError(
                    "data", f"data[{position}] must be an object like {{cell: 'A1', value: 'x'}}"
                )
            items.append((str(item["cell"]), item.get("value")))
        return items
    raise ParameterValidationError(
        "data", "data must be an array of {cell, value} objects or an object like {A1: value}"
    )


@operation(
    "batch_write",
    result=BatchWriteResult,
    mutates=True,
    parameters=[
        SHEET_INDEX,
        ParameterSpec(
            "data",
            "array",
            "Cells to write: [{cell:'A1', value:'v'}, ...] or an object {A1: 'v', B1: 'w'}",
            required=True,
        ),
    ],
)
def batch_write(view, parameters) -> BatchWriteResult:
    """Write many cells at once. Numeric strings are stored as numbers."""
    items = _batch_items(parameters.get_required("data"))
    sheet_index = parameters.get_optional("sheetIndex", int, 0)

    worksheet = get_worksheet(view.document, sheet_index)

    # Validate and convert everything before the first write.
    targets = []
    for position, (cell, value) in enumerate(items):
        row, column = parse_cell(cell, parameter="data")
        check_cell_value(value, "data", f"data[{position}].value (cell {cell})")
        if is_merged_cell(worksheet, row, column):
            raise ParameterValidationError(
                "data", f"data[{position}]: cell {cell} is inside a merged range and cannot be written"
            )
        targets.append((row, column, parse_cell_value("" if value is None else value)))

    with engine_errors(f"batch_write on sheet {sheet_index}"):
        for row, column, value in targets:
            worksheet.cell(row=row, column=column).value = value
    if targets:
        view.mark_modified()

    return BatchWriteResult(
        message=f"Batch write completed: {len(targets)} cell(s) written to sheet {sheet_index}.",
        sheet_index=sheet_index,
        cells_written=len(targets),
    )


@operation(
    "get_content",
    result=ContentResult,
    parameters=[SHEET_INDEX, ParameterSpec("range", "string", "Range to read; the used range if omitted")],
)
def get_content(view, parameters) -> ContentResult:
    """Read cell values of a range (or the used range) as rows."""
    sheet_index = parameters.get_optional("sheetIndex", int, 0)
    range_ref = parameters.get_optional("range", Optional[str])
    bounds = parse_range(range_ref) if range_ref else None
    worksheet = get_worksheet(view.document, sheet_index)

    if bounds is None:
        bounds = used_bounds(worksheet)
    if bounds is None:
        return ContentResult(
            message=f"Sheet '{worksheet.title}' is empty.",
            sheet_index=sheet_index,
            sheet_name=worksheet.title,
        )

    with engine_errors(f"range '{format_bounds(bounds)}'"):
        rows = [[to_json_value(value) for value in row] for row in iter_rows(worksheet, bounds)]
    return ContentResult(
        message=f"Read {len(rows)} row(s) from {format_bounds(bounds)} on sheet '{worksheet.title}'.",
        sheet_index=sheet_index,
        sheet_name=worksheet.title,
        range=format_bounds(bounds),
        rows=rows,
    )


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def _range_statistics(worksheet, bounds) -> RangeStatistics:
    values = [value for row in iter_rows(worksheet, bounds) for value in row]
    numbers = [number for number in map(_as_number, values) if number is not None]
    total = sum(numbers) if numbers else None
    return RangeStatistics(
        range=format_bounds(bounds),
        cell_count=len(values),
        non_empty_count=sum(1 for value in values if value is not None and value != ""),
        numeric_count=len(numbers),
        sum=total,
        average=total / len(numbers) if numbers else None,
        min=min(numbers) if numbers else None,
        max=max(numbers) if numbers else None,
    )


@operation(
    "get_statistics",
    result=StatisticsResult,
    parameters=[
        ParameterSpec("sheetIndex", "integer", "Sheet index (0-based); all sheets if omitted"),
        ParameterSpec("range", "string", "Range for numeric statistics (count, sum, average, min, max)"),
    ],
)
def get_statistics(view, parameters) -> StatisticsResult:
    """Summarise sheets and, for a range, its numeric values."""
    sheet_index = parameters.get_optional("sheetIndex", Optional[int])
    range_ref = parameters.get_optional("range", Optional[str])
    bounds = parse_range(range_ref) if range_ref else None
    workbook = view.document

    if sheet_index is None:
        indexed = list(enumerate(workbook.worksheets))
    else:
        indexed = [(sheet_index, get_worksheet(workbook, sheet_index))]

    worksheets = []
    with engine_errors("statistics"):
        for index, worksheet in indexed:
            used = used_bounds(worksheet)
            worksheets.append(
                WorksheetStatistics(
                    index=index,
                    name=worksheet.title,
                    max_data_row=used[3] if used else 0,
                    max_data_column=used[2] if used else 0,
                    merged_cells_count=len(worksheet.merged_cells.ranges),
                    range_statistics=_range_statistics(worksheet, bounds) if bounds else None,
                )
            )
    return StatisticsResult(
        message=f"Statistics for {len(worksheets)} worksheet(s).",
        total_worksheets=len(workbook.worksheets),
        worksheets=worksheets,
    )


@operation("get_used_range", result=UsedRangeResult, parameters=[SHEET_INDEX])
def get_used_range(view, parameters) -> UsedRangeResult:
    """Report the bounding range of all non-empty cells on a sheet."""
    sheet_index = parameters.get_optional("sheetIndex", int, 0)
    worksheet = get_worksheet(view.document, sheet_index)
    bounds = used_bounds(worksheet)
    if bounds is None:
        return UsedRangeResult(
            message=f"Sheet '{worksheet.title}' is empty.",
            sheet_index=sheet_index,
            sheet_name=worksheet.title,
        )
    min_col, min_row, max_col, max_row = bounds
    return UsedRangeResult(
        message=f"Used range of sheet '{worksheet.title}' is {format_bounds(bounds)}.",
        sheet_index=sheet_index,
        sheet_name=worksheet.title,
        range=format_bounds(bounds),
        first_row=min_row - 1,
        first_column=min_col - 1,
        row_count=max_row - min_row + 1,
        column_count=max_col - min_col + 1,
    )


OPERATIONS = [sort, find_replace, batch_write, get_content, get_statistics, get_used_range]
