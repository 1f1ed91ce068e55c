"""Convert legacy ``.xls`` statements into ``.xlsx`` workbooks.

The converted file is written beside the source as
``<stem>_ConvertedFromXls.xlsx`` and is then picked up by the transform phase
like any other statement. Every sheet is copied with its name; cell values
keep their kind (text, number, date, boolean) so the transform phase renders
them exactly as it would for a native ``.xlsx`` export.
"""

from __future__ import annotations

from os import PathLike
from pathlib import Path
from typing import Any

import xlrd

from .errors import FileOpenError, SaveError
from .logging_setup import get_logger
from .settings import CONVERTED_SUFFIX
from .workbook import WorkbookEngine

logger = get_logger("cc_ledger.convert")

LEGACY_SUFFIX = ".xls"
CONVERTED_EXTENSION = ".xlsx"


def converted_path_for(source: str | PathLike[str], *, suffix: str = CONVERTED_SUFFIX) -> Path:
    """Return ``<stem><suffix>.xlsx`` beside ``source``."""

    p = Path(source)
    return p.with_name(f"{p.stem}{suffix}{CONVERTED_EXTENSION}")


def _cell_value(book: xlrd.book.Book, cell: xlrd.sheet.Cell) -> Any:
    ctype = cell.ctype
    if ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
        return None
    if ctype == xlrd.XL_CELL_DATE:
        return xlrd.xldate.xldate_as_datetime(cell.value, book.datemode)
    if ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(cell.value)
    if ctype == xlrd.XL_CELL_ERROR:
        return xlrd.error_text_from_code.get(cell.value, "#ERR")
    return cell.value


type _SheetCells = tuple[str, list[tuple[int, int, Any]]]


def _read_legacy_sheets(src: Path) -> list[_SheetCells]:
    """Read every sheet of ``src`` as ``(name, [(row, column, value), ...])``.

    Rows and columns are 1-based; empty cells are omitted. Raises
    :class:`~cc_ledger.errors.FileOpenError` for any read failure.
    """

    try:
        book = xlrd.open_workbook(str(src), on_demand=True)
    except Exception as e:
        raise FileOpenError(f"cannot open legacy workbook {src.name}: {e}", path=src) from e

    sheets: list[_SheetCells] = []
    try:
        for index in range(book.nsheets):
            sheet = book.sheet_by_index(index)
            cells = [
                (r + 1, c + 1, value)
                for r in range(sheet.nrows)
                for c in range(sheet.ncols)
                if (value := _cell_value(book, sheet.cell(r, c))) is not None
            ]
            sheets.append((sheet.name, cells))
            book.unload_sheet(index)
            logger.debug("Read sheet %r (%d rows)", sheet.name, sheet.nrows)
    except Exception as e:
        raise FileOpenError(f"cannot read legacy workbook {src.name}: {e}", path=src) from e
    finally:
        book.release_resources()
    return sheets


def convert_legacy_workbook(
    engine: WorkbookEngine,
    source: str | PathLike[str],
    *,
    suffix: str = CONVERTED_SUFFIX,
) -> Path:
    """Convert ``source`` (``.xls``) to ``.xlsx`` and return the new path.

    Raises :class:`~cc_ledger.errors.FileOpenError` when the legacy file cannot
    be read and :class:`~cc_ledger.errors.SaveError` when the converted
    workbook cannot be built or written (e.g. a sheet title openpyxl rejects).
    """

    src = Path(source)
    dest = converted_path_for(src, suffix=suffix)
    sheets = _read_legacy_sheets(src)

    wb = engine.new_workbook()
    try:
        # Drop the default sheet; every source sheet is recreated by name.
        wb.remove(wb.active)
        for name, cells in sheets:
            ws = wb.create_sheet(title=name)
            for row, column, value in cells:
                cell = ws.cell(row=row, column=column, value=value)
                if cell.data_type == "f":
                    cell.data_type = "s"
    except Exception as e:
        raise SaveError(f"cannot build converted workbook {dest.name}: {e}", path=dest) from e

    engine.save(wb, dest)
    logger.info("Converted %s -> %s", src.name, dest.name)
    return dest


__all__ = ["CONVERTED_EXTENSION", "LEGACY_SUFFIX", "convert_legacy_workbook", "converted_path_for"]
