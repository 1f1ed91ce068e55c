"""Pytest configuration and statement-workbook fixtures.

Settings are read from ``CC_LEDGER_*`` environment variables, so an autouse
fixture clears them for every test to keep runs hermetic regardless of the
developer's shell or ``.env``.

``make_statement`` writes an HDFC-style workbook: a preamble, the header row
(default row 30) and transaction rows below it.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest
from openpyxl import Workbook


HEADER_ROW = 30
HEADER_LABELS = ("DATE", "Description", "AMT", "Debit / Credit")


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "CC_LEDGER_HEADER_FIRST_ROW",
        "CC_LEDGER_HEADER_LAST_ROW",
        "CC_LEDGER_FILE_PREFIX",
        "CC_LEDGER_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


type StatementFactory = Callable[..., Path]


@pytest.fixture
def make_statement(tmp_path: Path) -> StatementFactory:
    """Return a factory writing a statement workbook and returning its path."""

    def _make(
        name: str = "HDFC_CC_AB_stmt.xlsx",
        rows: Sequence[Sequence[Any]] = (),
        *,
        header_row: int = HEADER_ROW,
        first_column: int = 2,
        labels: Sequence[str] = HEADER_LABELS,
        directory: Path | None = None,
    ) -> Path:
        wb = Workbook()
        ws = wb.active
        ws.title = "Statement"
        ws.cell(row=1, column=1, value="HDFC Bank Credit Card Statement")
        ws.cell(row=5, column=1, value="Card No: XXXX XXXX XXXX 1234")
        ws.cell(row=12, column=1, value="DATE")  # outside the header window
        for offset, label in enumerate(labels):
            ws.cell(row=header_row, column=first_column + offset, value=label)
        for r, values in enumerate(rows, start=header_row + 1):
            for offset, value in enumerate(values):
                if value is not None:
                    ws.cell(row=r, column=first_column + offset, value=value)
        path = (directory or tmp_path) / name
        wb.save(path)
        return path

    return _make
