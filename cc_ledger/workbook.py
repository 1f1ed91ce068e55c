"""Scoped spreadsheet engine used to read statements and save ledgers.

Usage
-----
from cc_ledger.workbook import engine_session

with engine_session() as engine:
    sheet = engine.open_source(path)
    wb = engine.new_workbook()
    ...
    engine.save(wb, out_path)

Every workbook handle opened through a session is closed when the session
exits, on success and on error alike. Sessions are not thread-safe; one
session serves one batch phase and is passed explicitly to each file.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from os import PathLike
from pathlib import Path
from typing import Any

from openpyxl import Workbook, load_workbook

from .errors import FileOpenError, SaveError
from .logging_setup import get_logger
from .models import SourceSheet

logger = get_logger("cc_ledger.workbook")


class WorkbookEngine:
    """Tracks open workbook handles for a single batch phase."""

    def __init__(self) -> None:
        self._open: list[Any] = []
        self._closed = False

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("workbook engine session is closed")

    def open_source(self, path: str | PathLike[str]) -> SourceSheet:
        """Load the first worksheet of ``path`` as a :class:`SourceSheet`.

        Cell values are read as stored (``data_only=True``) and rendered to
        text. Raises :class:`FileOpenError` for any failure to read the file.
        """

        self._check_open()
        p = Path(path)
        try:
            wb = load_workbook(p, read_only=True, data_only=True)
        except Exception as e:
            raise FileOpenError(f"cannot open {p.name}: {e}", path=p) from e

        self._open.append(wb)
        try:
            ws = wb.worksheets[0]
            # Declared dimensions are unreliable in exported files; read them all.
            ws.reset_dimensions()
            sheet = SourceSheet.from_values(ws.iter_rows(values_only=True), title=ws.title)
        except Exception as e:
            raise FileOpenError(f"cannot read first sheet of {p.name}: {e}", path=p) from e
        finally:
            self._release(wb)

        logger.info(
            "Opened %s (sheet %r, %d rows x %d columns)",
            p.name,
            sheet.title,
            sheet.used_rows,
            sheet.used_columns,
        )
        return sheet

    def new_workbook(self, title: str | None = None) -> Workbook:
        """Return an empty workbook whose active sheet is optionally renamed."""

        self._check_open()
        wb = Workbook()
        if title:
            wb.active.title = title
        self._open.append(wb)
        return wb

    def save(self, wb: Workbook, path: str | PathLike[str]) -> Path:
        """Save ``wb`` to ``path`` and release it; raises :class:`SaveError`."""

        self._check_open()
        p = Path(path)
        try:
            wb.save(p)
        except Exception as e:
            logger.error("Save failed for %s: %s", p.name, e)
            raise SaveError(f"cannot save {p.name}: {e}", path=p) from e
        finally:
            self._release(wb)
        logger.info("Saved %s", p.name)
        return p

    def _release(self, wb: Any) -> None:
        if wb in self._open:
            self._open.remove(wb)
        wb.close()

    def close(self) -> None:
        """Release every workbook still held by this session."""

        while self._open:
            wb = self._open.pop()
            try:
                wb.close()
            except Exception as e:  # pragma: no cover - close failures only logged
                logger.warning("Failed to release workbook handle: %s", e)
        self._closed = True

    @property
    def open_handles(self) -> int:
        return len(self._open)


@contextmanager
def engine_session() -> Iterator[WorkbookEngine]:
    """Provide a workbook engine whose handles are released on every exit path."""

    engine = WorkbookEngine()
    try:
        yield engine
    finally:
        engine.close()


__all__ = ["WorkbookEngine", "engine_session"]
