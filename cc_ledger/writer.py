"""Write canonical ledger rows into a destination worksheet.

Layout: the schema header at row 1, data rows from row 2, columns in schema
order. Every value is written as a string; Date cells are additionally given
the text number format (``@``) before their value is set, so spreadsheet
applications do not reinterpret ``01-03-2024`` as a date serial.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from os import PathLike
from pathlib import Path

from openpyxl.cell.cell import Cell
from openpyxl.styles.numbers import FORMAT_TEXT
from openpyxl.worksheet.worksheet import Worksheet

from .logging_setup import get_logger
from .schema import CANONICAL_SCHEMA, FIELD_DATE, CanonicalRow
from .settings import TRANSFORMED_SUFFIX

logger = get_logger("cc_ledger.writer")

HEADER_ROW = 1
FIRST_DATA_ROW = 2


def _set_text(cell: Cell, value: object) -> None:
    cell.value = str(value)
    # openpyxl binds "=..." strings as formulas; keep them as literal text.
    if cell.data_type == "f":
        cell.data_type = "s"


def transformed_path_for(
    source: str | PathLike[str], *, suffix: str = TRANSFORMED_SUFFIX
) -> Path:
    """Return ``<stem><suffix><ext>`` beside ``source``."""

    p = Path(source)
    return p.with_name(f"{p.stem}{suffix}{p.suffix}")


def write_canonical_sheet(
    ws: Worksheet,
    rows: Iterable[CanonicalRow],
    schema: Sequence[str] = CANONICAL_SCHEMA,
) -> int:
    """Write the header and ``rows`` to ``ws``; return the number of data rows.

    Rows are consumed lazily and written in order. A row whose length differs
    from ``schema`` raises ``ValueError``.
    """

    width = len(schema)
    date_column = list(schema).index(FIELD_DATE) + 1 if FIELD_DATE in schema else None

    for col, name in enumerate(schema, start=1):
        _set_text(ws.cell(row=HEADER_ROW, column=col), name)

    written = 0
    for offset, values in enumerate(rows):
        if len(values) != width:
            raise ValueError(f"canonical row has {len(values)} values; expected {width}")
        row = FIRST_DATA_ROW + offset
        for col, value in enumerate(values, start=1):
            cell = ws.cell(row=row, column=col)
            if col == date_column:
                cell.number_format = FORMAT_TEXT
            _set_text(cell, value)
        written += 1

    logger.debug("Wrote %d ledger rows to sheet %r", written, ws.title)
    return written


__all__ = [
    "FIRST_DATA_ROW",
    "HEADER_ROW",
    "transformed_path_for",
    "write_canonical_sheet",
]
