"""Excel (openpyxl Workbook) operation registries."""

from openpyxl import Workbook

from docedit.handlers.excel import cells, data_operations, row_column, sheets
from docedit.operations import OperationRegistry


def build_registries():
    return [
        OperationRegistry(
            "excel_data_operations",
            Workbook,
            "excel",
            "Sort, find/replace, batch write and inspect worksheet data",
        ).register_all(data_operations.OPERATIONS),
        OperationRegistry("excel_cell", Workbook, "excel", "Read, write and clear single cells").register_all(
            cells.OPERATIONS
        ),
        OperationRegistry(
            "excel_sheet", Workbook, "excel", "Add, delete, rename, copy and list worksheets"
        ).register_all(sheets.OPERATIONS),
        OperationRegistry(
            "excel_row_column", Workbook, "excel", "Insert and delete rows and columns"
        ).register_all(row_column.OPERATIONS),
    ]


__all__ = ["build_registries"]
