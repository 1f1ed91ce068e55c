"""Canonical ledger schema and required statement header labels.

Field order (exact):
    Date, Narration, Item, Category, Place, Freq, For, MOP, Amt (Dr),
    Chq./Ref.No., Value Dt, Amt (Cr)

Every transformed workbook uses this header row regardless of where the
source statement placed its columns.
"""

from __future__ import annotations

FIELD_DATE = "Date"
FIELD_NARRATION = "Narration"
FIELD_ITEM = "Item"
FIELD_CATEGORY = "Category"
FIELD_PLACE = "Place"
FIELD_FREQ = "Freq"
FIELD_FOR = "For"
FIELD_MOP = "MOP"
FIELD_AMT_DR = "Amt (Dr)"
FIELD_REF_NO = "Chq./Ref.No."
FIELD_VALUE_DT = "Value Dt"
FIELD_AMT_CR = "Amt (Cr)"

CANONICAL_SCHEMA: tuple[str, ...] = (
    FIELD_DATE,
    FIELD_NARRATION,
    FIELD_ITEM,
    FIELD_CATEGORY,
    FIELD_PLACE,
    FIELD_FREQ,
    FIELD_FOR,
    FIELD_MOP,
    FIELD_AMT_DR,
    FIELD_REF_NO,
    FIELD_VALUE_DT,
    FIELD_AMT_CR,
)

# Source header labels (case-sensitive, matched without trimming)
HEADER_DATE = "DATE"
HEADER_DESCRIPTION = "Description"
HEADER_AMOUNT = "AMT"
HEADER_INDICATOR = "Debit / Credit"

REQUIRED_HEADERS: tuple[str, ...] = (
    HEADER_DATE,
    HEADER_DESCRIPTION,
    HEADER_AMOUNT,
    HEADER_INDICATOR,
)

# Indicator text marking a credit row; anything else is treated as a debit.
CREDIT_INDICATOR = "Cr"

type CanonicalRow = tuple[str, ...]
"""One output row, positionally aligned to :data:`CANONICAL_SCHEMA`."""


__all__ = [
    "CANONICAL_SCHEMA",
    "CREDIT_INDICATOR",
    "CanonicalRow",
    "FIELD_AMT_CR",
    "FIELD_AMT_DR",
    "FIELD_CATEGORY",
    "FIELD_DATE",
    "FIELD_FOR",
    "FIELD_FREQ",
    "FIELD_ITEM",
    "FIELD_MOP",
    "FIELD_NARRATION",
    "FIELD_PLACE",
    "FIELD_REF_NO",
    "FIELD_VALUE_DT",
    "HEADER_AMOUNT",
    "HEADER_DATE",
    "HEADER_DESCRIPTION",
    "HEADER_INDICATOR",
    "REQUIRED_HEADERS",
]
