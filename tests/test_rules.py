from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import pytest

from cc_ledger.headers import build_header_map
from cc_ledger.models import SourceSheet, TransformContext
from cc_ledger.rules import (
    FIELD_RULES,
    blank_rule,
    credit_amount_rule,
    debit_amount_rule,
    iter_canonical_rows,
    transform_row,
)
from cc_ledger.schema import CANONICAL_SCHEMA, REQUIRED_HEADERS

HEADER_ROW = 28


def _statement(data_rows: Sequence[Sequence[Any]], *, trailing_blank_rows: int = 0) -> SourceSheet:
    grid: list[list[Any]] = [[None] * 6 for _ in range(HEADER_ROW - 1)]
    grid.append([None, *REQUIRED_HEADERS, None])
    for values in data_rows:
        grid.append([None, *values, None])
    grid.extend([[None] * 6 for _ in range(trailing_blank_rows)])
    return SourceSheet.from_values(grid)


def _context(sheet: SourceSheet, mop: str = "HDFC_CC_AB") -> TransformContext:
    return TransformContext(mop=mop, headers=build_header_map(sheet))


def _as_dict(row: Sequence[str]) -> dict[str, str]:
    return dict(zip(CANONICAL_SCHEMA, row, strict=True))


def test_rule_table_matches_schema_order():
    assert tuple(name for name, _ in FIELD_RULES) == CANONICAL_SCHEMA


def test_debit_row_scenario():
    sheet = _statement([["01-03-2024", "POS PURCHASE", "1200.50", "Dr"]])
    row = transform_row(sheet, _context(sheet), HEADER_ROW + 1)
    assert _as_dict(row) == {
        "Date": "01-03-2024",
        "Narration": "POS PURCHASE",
        "Item": "",
        "Category": "",
        "Place": "",
        "Freq": "",
        "For": "",
        "MOP": "HDFC_CC_AB",
        "Amt (Dr)": "1200.50",
        "Chq./Ref.No.": "",
        "Value Dt": "Dr",
        "Amt (Cr)": "",
    }


def test_credit_row_scenario():
    sheet = _statement([["01-03-2024", "POS PURCHASE", "1200.50", "Cr"]])
    row = _as_dict(transform_row(sheet, _context(sheet), HEADER_ROW + 1))
    assert row["Amt (Dr)"] == ""
    assert row["Amt (Cr)"] == "1200.50"
    assert row["Value Dt"] == "Cr"


def test_date_is_normalized():
    sheet = _statement([["15/06/23", "FUEL", "500", "Dr"]])
    row = _as_dict(transform_row(sheet, _context(sheet), HEADER_ROW + 1))
    assert row["Date"] == "15-06-23"


def test_indicator_match_is_exact():
    # Only the exact text "Cr" marks a credit; variants fall to the debit side.
    sheet = _statement(
        [
            ["01/03/2024", "A", "10", "CR"],
            ["01/03/2024", "B", "20", " Cr"],
            ["01/03/2024", "C", "30", ""],
        ]
    )
    ctx = _context(sheet)
    for offset, amount in enumerate(("10", "20", "30"), start=1):
        row = _as_dict(transform_row(sheet, ctx, HEADER_ROW + offset))
        assert row["Amt (Dr)"] == amount
        assert row["Amt (Cr)"] == ""


def test_numeric_and_date_cells_become_text():
    from datetime import datetime

    sheet = _statement([[datetime(2024, 3, 1), "REFUND", 1200.5, "Cr"], [None, "X", 75.0, "Dr"]])
    rows = list(iter_canonical_rows(sheet, _context(sheet)))
    assert _as_dict(rows[0])["Date"] == "01-03-2024"
    assert _as_dict(rows[0])["Amt (Cr)"] == "1200.5"
    assert _as_dict(rows[1])["Amt (Dr)"] == "75"
    assert all(isinstance(v, str) for row in rows for v in row)


def test_amount_split_is_mutually_exclusive():
    data = [
        ["01/03/2024", "A", "10", "Dr"],
        ["02/03/2024", "B", "20", "Cr"],
        ["03/03/2024", "C", "", "Cr"],
        ["04/03/2024", "D", "", "Dr"],
        ["05/03/2024", "E", "99", None],
    ]
    sheet = _statement(data)
    for values, row in zip(data, iter_canonical_rows(sheet, _context(sheet)), strict=True):
        out = _as_dict(row)
        filled = [v for v in (out["Amt (Dr)"], out["Amt (Cr)"]) if v]
        assert len(filled) <= 1
        if values[2]:
            assert filled == [values[2]]
        assert out["Value Dt"] == (values[3] or "")


def test_blank_fields_always_empty():
    sheet = _statement([["01/03/2024", "A", "10", "Dr"]])
    row = _as_dict(transform_row(sheet, _context(sheet), HEADER_ROW + 1))
    for field in ("Item", "Category", "Place", "Freq", "For", "Chq./Ref.No."):
        assert row[field] == ""


def test_individual_rules():
    sheet = _statement([["01/03/2024", "A", "10", "Cr"]])
    ctx = _context(sheet)
    r = HEADER_ROW + 1
    assert blank_rule(sheet, ctx, r) == ""
    assert debit_amount_rule(sheet, ctx, r) == ""
    assert credit_amount_rule(sheet, ctx, r) == "10"


def test_rows_at_or_above_header_are_rejected():
    sheet = _statement([["01/03/2024", "A", "10", "Dr"]])
    ctx = _context(sheet)
    with pytest.raises(ValueError, match="not below the DATE header"):
        transform_row(sheet, ctx, HEADER_ROW)


def test_iteration_covers_through_used_rows_only():
    sheet = _statement([["01/03/2024", "A", "10", "Dr"]], trailing_blank_rows=2)
    rows = list(iter_canonical_rows(sheet, _context(sheet)))
    # One data row plus the two trailing blank rows inside the used range.
    assert len(rows) == 3
    assert all(len(r) == len(CANONICAL_SCHEMA) for r in rows)
    assert rows[1][CANONICAL_SCHEMA.index("MOP")] == "HDFC_CC_AB"


def test_header_only_sheet_yields_nothing():
    sheet = _statement([])
    assert list(iter_canonical_rows(sheet, _context(sheet))) == []
