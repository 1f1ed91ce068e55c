"""Locate statement header labels inside a bounded search window.

Statement exports put a preamble (cardholder, address, summary boxes) above
the transaction table, so the header row moves between exports. Each required
label is searched independently, row-major, inside the window; the first cell
whose text equals the label exactly (case-sensitive, untrimmed) wins.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from functools import reduce
from os import PathLike

from .errors import MissingHeaderError
from .logging_setup import get_logger
from .models import HeaderMap, HeaderPosition, SourceSheet
from .schema import REQUIRED_HEADERS
from .settings import DEFAULT_HEADER_FIRST_ROW, DEFAULT_HEADER_LAST_ROW

logger = get_logger("cc_ledger.headers")


@dataclass(frozen=True, slots=True)
class HeaderWindow:
    """Inclusive 1-based row/column bounds of the header search region."""

    first_row: int
    last_row: int
    first_column: int
    last_column: int

    @classmethod
    def for_sheet(
        cls,
        sheet: SourceSheet,
        *,
        first_row: int = DEFAULT_HEADER_FIRST_ROW,
        last_row: int = DEFAULT_HEADER_LAST_ROW,
    ) -> HeaderWindow:
        return cls(
            first_row=first_row,
            last_row=last_row,
            first_column=1,
            last_column=sheet.used_columns,
        )


def locate_label(sheet: SourceSheet, label: str, window: HeaderWindow) -> HeaderPosition | None:
    """Return the first position of ``label`` in ``window`` or ``None``."""

    last_row = min(window.last_row, sheet.used_rows)
    for row in range(window.first_row, last_row + 1):
        for column in range(window.first_column, window.last_column + 1):
            if sheet.text(row, column) == label:
                return HeaderPosition(row, column)
    return None


def build_header_map(
    sheet: SourceSheet,
    labels: Iterable[str] = REQUIRED_HEADERS,
    window: HeaderWindow | None = None,
    *,
    path: str | PathLike[str] | None = None,
) -> HeaderMap:
    """Locate every label and return a complete :class:`HeaderMap`.

    Raises :class:`MissingHeaderError` listing every label that was not found,
    in the order the labels were requested.
    """

    win = window or HeaderWindow.for_sheet(sheet)
    wanted = tuple(labels)

    def _fold(
        acc: tuple[dict[str, HeaderPosition], list[str]], label: str
    ) -> tuple[dict[str, HeaderPosition], list[str]]:
        found, missing = acc
        pos = locate_label(sheet, label, win)
        if pos is None:
            missing.append(label)
        else:
            found[label] = pos
        return found, missing

    found, missing = reduce(_fold, wanted, ({}, []))

    if missing:
        logger.warning(
            "Headers missing in rows %d-%d, columns %d-%d: %s",
            win.first_row,
            win.last_row,
            win.first_column,
            win.last_column,
            ", ".join(missing),
        )
        raise MissingHeaderError(missing, path=path)

    for label, pos in found.items():
        logger.debug("Header %r found at row %d, column %d", label, pos.row, pos.column)
    return HeaderMap(found)


__all__ = ["HeaderWindow", "build_header_map", "locate_label"]
