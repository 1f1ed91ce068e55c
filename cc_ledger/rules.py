"""Per-field rule table mapping a statement row to a canonical ledger row.

Each canonical field has exactly one rule, a pure function of
``(sheet, context, row)`` returning text. ``transform_row`` walks
:data:`FIELD_RULES` in schema order, so the table doubles as the column
layout.

Blank fields (Item, Category, Place, Freq, For, Chq./Ref.No.) are left for
manual bookkeeping and are always empty, even when the statement has data
that might fit them.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

from .dates import normalize_date_text
from .logging_setup import get_logger
from .models import SourceSheet, TransformContext
from .schema import (
    CANONICAL_SCHEMA,
    CREDIT_INDICATOR,
    FIELD_AMT_CR,
    FIELD_AMT_DR,
    FIELD_CATEGORY,
    FIELD_DATE,
    FIELD_FOR,
    FIELD_FREQ,
    FIELD_ITEM,
    FIELD_MOP,
    FIELD_NARRATION,
    FIELD_PLACE,
    FIELD_REF_NO,
    FIELD_VALUE_DT,
    HEADER_AMOUNT,
    HEADER_DATE,
    HEADER_DESCRIPTION,
    HEADER_INDICATOR,
    CanonicalRow,
)

logger = get_logger("cc_ledger.rules")

type FieldRule = Callable[[SourceSheet, TransformContext, int], str]


def _source(sheet: SourceSheet, context: TransformContext, row: int, label: str) -> str:
    return sheet.text(row, context.headers.column(label))


def _is_credit(sheet: SourceSheet, context: TransformContext, row: int) -> bool:
    return _source(sheet, context, row, HEADER_INDICATOR) == CREDIT_INDICATOR


def date_rule(sheet: SourceSheet, context: TransformContext, row: int) -> str:
    return normalize_date_text(_source(sheet, context, row, HEADER_DATE))


def narration_rule(sheet: SourceSheet, context: TransformContext, row: int) -> str:
    return _source(sheet, context, row, HEADER_DESCRIPTION)


def blank_rule(sheet: SourceSheet, context: TransformContext, row: int) -> str:
    return ""


def mop_rule(sheet: SourceSheet, context: TransformContext, row: int) -> str:
    return context.mop


def debit_amount_rule(sheet: SourceSheet, context: TransformContext, row: int) -> str:
    if _is_credit(sheet, context, row):
        return ""
    return _source(sheet, context, row, HEADER_AMOUNT)


def credit_amount_rule(sheet: SourceSheet, context: TransformContext, row: int) -> str:
    if _is_credit(sheet, context, row):
        return _source(sheet, context, row, HEADER_AMOUNT)
    return ""


def value_date_rule(sheet: SourceSheet, context: TransformContext, row: int) -> str:
    # Indicator text verbatim, not a settlement date.
    return _source(sheet, context, row, HEADER_INDICATOR)


FIELD_RULES: tuple[tuple[str, FieldRule], ...] = (
    (FIELD_DATE, date_rule),
    (FIELD_NARRATION, narration_rule),
    (FIELD_ITEM, blank_rule),
    (FIELD_CATEGORY, blank_rule),
    (FIELD_PLACE, blank_rule),
    (FIELD_FREQ, blank_rule),
    (FIELD_FOR, blank_rule),
    (FIELD_MOP, mop_rule),
    (FIELD_AMT_DR, debit_amount_rule),
    (FIELD_REF_NO, blank_rule),
    (FIELD_VALUE_DT, value_date_rule),
    (FIELD_AMT_CR, credit_amount_rule),
)

if tuple(name for name, _ in FIELD_RULES) != CANONICAL_SCHEMA:  # pragma: no cover
    raise RuntimeError("FIELD_RULES is out of sync with CANONICAL_SCHEMA")


def transform_row(sheet: SourceSheet, context: TransformContext, row: int) -> CanonicalRow:
    """Build one canonical row from source row ``row``.

    ``row`` must lie below the ``DATE`` header row; a ``ValueError`` is raised
    otherwise.
    """

    header_row = context.headers.row(HEADER_DATE)
    if row <= header_row:
        raise ValueError(f"row {row} is not below the DATE header row {header_row}")
    return tuple(str(rule(sheet, context, row)) for _, rule in FIELD_RULES)


def iter_canonical_rows(sheet: SourceSheet, context: TransformContext) -> Iterator[CanonicalRow]:
    """Yield canonical rows for every source row below the ``DATE`` header.

    Rows run from the header row + 1 through ``sheet.used_rows`` inclusive, in
    increasing order. Exceptions raised by a rule are not caught.
    """

    first = context.headers.row(HEADER_DATE) + 1
    for row in range(first, sheet.used_rows + 1):
        out = transform_row(sheet, context, row)
        logger.debug("Processed source row %d", row)
        yield out


__all__ = [
    "FIELD_RULES",
    "FieldRule",
    "blank_rule",
    "credit_amount_rule",
    "date_rule",
    "debit_amount_rule",
    "iter_canonical_rows",
    "mop_rule",
    "narration_rule",
    "transform_row",
    "value_date_rule",
]
