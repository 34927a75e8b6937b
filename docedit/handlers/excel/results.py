"""Result models for Excel operations."""

from typing import Any, List, Optional

from pydantic import BaseModel, Field

from docedit.operations.results import OperationResult


class SortResult(OperationResult):
    range: str
    sort_column: int
    ascending: bool
    rows_sorted: int = Field(description="Number of data rows reordered (header excluded)")


class FindReplaceResult(OperationResult):
    replacements: int = Field(description="Number of occurrences replaced")
    cells_changed: int


class BatchWriteResult(OperationResult):
    sheet_index: int
    cells_written: int


class ContentResult(OperationResult):
    sheet_index: int
    sheet_name: str
    range: Optional[str] = Field(None, description="Range read, null for an empty sheet")
    rows: List[List[Any]] = Field(default_factory=list)


class RangeStatistics(BaseModel):
    range: str
    cell_count: int
    non_empty_count: int
    numeric_count: int
    sum: Optional[float] = None
    average: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None


class WorksheetStatistics(BaseModel):
    index: int
    name: str
    max_data_row: int
    max_data_column: int
    merged_cells_count: int
    range_statistics: Optional[RangeStatistics] = None


class StatisticsResult(OperationResult):
    total_worksheets: int
    worksheets: List[WorksheetStatistics]


class UsedRangeResult(OperationResult):
    sheet_index: int
    sheet_name: str
    range: Optional[str] = None
    first_row: int = 0
    first_column: int = 0
    row_count: int = 0
    column_count: int = 0


class CellResult(OperationResult):
    sheet_index: int
    cell: str
    value: Any = None
    value_type: str = Field(description="null, boolean, number, string, date or formula")
    formula: Optional[str] = None
    number_format: Optional[str] = None


class SheetInfo(BaseModel):
    index: int
    name: str
    visible: bool
    max_row: int
    max_column: int


class SheetListResult(OperationResult):
    count: int
    sheets: List[SheetInfo]


class SheetResult(OperationResult):
    sheet_index: int
    sheet_name: str


class RowColumnResult(OperationResult):
    sheet_index: int
    index: int = Field(description="0-based row or column index the change started at")
    count: int

