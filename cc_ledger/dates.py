"""Textual normalization of statement date cells.

This is a shape-only pass: the first ten characters are kept and every ``/``
or ``-`` becomes ``-``. Day/month/year order is not inspected and the result
is not validated as a calendar date, so ``"15/06/23"`` becomes ``"15-06-23"``
and ``"2024/13/45 10:00"`` becomes ``"2024-13-45"``.
"""

from __future__ import annotations

import re

DATE_TEXT_LENGTH = 10

_DELIMITERS = re.compile(r"[/-]")


def normalize_date_text(text: str) -> str:
    """Truncate ``text`` to ten characters and canonicalize delimiters to ``-``."""

    return _DELIMITERS.sub("-", text[:DATE_TEXT_LENGTH])


__all__ = ["DATE_TEXT_LENGTH", "normalize_date_text"]
