"""Data models for ``cc_ledger``.

Sheet-side types (``SourceSheet``, ``HeaderMap``, ``TransformContext``) are
frozen dataclasses scoped to a single source workbook. Batch reporting types
are pydantic models so the CLI can render them and callers can serialize them.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import StrEnum
from types import MappingProxyType
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, field_validator

# ---------------------------------------------------------------------------
# Cell text coercion
# ---------------------------------------------------------------------------


def cell_text(value: Any) -> str:
    """Render a raw spreadsheet cell value as text.

    Every value leaving a source sheet passes through here so downstream rules
    only ever see strings. Dates render as ``dd/mm/yyyy`` (the statement's own
    convention); integral numbers drop their ``.0``.
    """

    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, datetime | date):
        return value.strftime("%d/%m/%Y")
    if isinstance(value, time):
        return value.strftime("%H:%M:%S")
    return str(value)


# ---------------------------------------------------------------------------
# Source sheet view
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SourceSheet:
    """Read-only, 1-based grid of cell text for one worksheet.

    ``used_rows`` and ``used_columns`` describe the extent of the sheet as
    loaded; lookups outside that extent return ``""``.
    """

    rows: tuple[tuple[str, ...], ...]
    title: str = ""

    @classmethod
    def from_values(cls, values: Iterable[Iterable[Any]], *, title: str = "") -> SourceSheet:
        return cls(
            rows=tuple(tuple(cell_text(v) for v in row) for row in values),
            title=title,
        )

    @property
    def used_rows(self) -> int:
        return len(self.rows)

    @property
    def used_columns(self) -> int:
        return max((len(r) for r in self.rows), default=0)

    def text(self, row: int, column: int) -> str:
        if row < 1 or column < 1 or row > len(self.rows):
            return ""
        cells = self.rows[row - 1]
        if column > len(cells):
            return ""
        return cells[column - 1]


# ---------------------------------------------------------------------------
# Header positions
# ---------------------------------------------------------------------------


class HeaderPosition(NamedTuple):
    """1-based ``(row, column)`` of a header label in a source sheet."""

    row: int
    column: int


class HeaderMap(Mapping[str, HeaderPosition]):
    """Immutable mapping from required header label to its position."""

    __slots__ = ("_positions",)

    def __init__(self, positions: Mapping[str, HeaderPosition]) -> None:
        self._positions = MappingProxyType(dict(positions))

    def __getitem__(self, label: str) -> HeaderPosition:
        return self._positions[label]

    def __iter__(self) -> Iterator[str]:
        return iter(self._positions)

    def __len__(self) -> int:
        return len(self._positions)

    def __repr__(self) -> str:
        inner = ", ".join(f"{k!r}: ({p.row}, {p.column})" for k, p in self._positions.items())
        return f"HeaderMap({{{inner}}})"

    def column(self, label: str) -> int:
        return self._positions[label].column

    def row(self, label: str) -> int:
        return self._positions[label].row


@dataclass(frozen=True, slots=True)
class TransformContext:
    """Per-file constants shared by every row rule."""

    mop: str
    headers: HeaderMap = field(repr=False)


# ---------------------------------------------------------------------------
# Batch reporting
# ---------------------------------------------------------------------------


class OutcomeStatus(StrEnum):
    TRANSFORMED = "transformed"
    CONVERTED = "converted"
    SKIPPED_OPEN = "skipped_open"
    SKIPPED_HEADERS = "skipped_headers"
    SKIPPED_NAME = "skipped_name"
    SAVE_FAILED = "save_failed"


class FileOutcome(BaseModel):
    """Result of processing a single statement file in a batch phase."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    source: str
    status: OutcomeStatus
    output: str | None = None
    rows_written: int = 0
    message: str | None = None

    @field_validator("rows_written")
    @classmethod
    def _non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("rows_written must be >= 0")
        return v

    @property
    def succeeded(self) -> bool:
        return self.status in (OutcomeStatus.TRANSFORMED, OutcomeStatus.CONVERTED)


class BatchReport(BaseModel):
    """Ordered per-file outcomes for both batch phases."""

    model_config = ConfigDict(extra="forbid")

    conversions: list[FileOutcome] = []
    transforms: list[FileOutcome] = []

    @property
    def skipped(self) -> list[FileOutcome]:
        return [o for o in (*self.conversions, *self.transforms) if not o.succeeded]

    @property
    def transformed(self) -> list[FileOutcome]:
        return [o for o in self.transforms if o.status is OutcomeStatus.TRANSFORMED]


__all__ = [
    "BatchReport",
    "FileOutcome",
    "HeaderMap",
    "HeaderPosition",
    "OutcomeStatus",
    "SourceSheet",
    "TransformContext",
    "cell_text",
]
