"""Method-of-payment (MOP) tag derivation from statement filenames.

Statement exports are named ``HDFC_CC_<holder>_...``; the MOP tag is the first
three underscore-delimited tokens of the file stem rejoined with ``_``
(``HDFC_CC_AB_stmt.xlsx`` -> ``HDFC_CC_AB``). The extension is removed before
splitting so ``HDFC_CC_AB.xlsx`` still yields ``HDFC_CC_AB``.

Malformed names produce a :class:`MopParseResult` carrying a
:class:`MopFailure` reason instead of a silently wrong tag.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from os import PathLike
from pathlib import Path

from .errors import MopParseError

MOP_TOKEN_COUNT = 3


class MopFailure(StrEnum):
    TOO_FEW_TOKENS = "too_few_tokens"
    EMPTY_TOKEN = "empty_token"


@dataclass(frozen=True, slots=True)
class MopParseResult:
    filename: str
    mop: str | None = None
    failure: MopFailure | None = None

    @property
    def ok(self) -> bool:
        return self.mop is not None

    def describe(self) -> str:
        if self.failure is MopFailure.TOO_FEW_TOKENS:
            return (
                f"{self.filename!r} has fewer than {MOP_TOKEN_COUNT} "
                "underscore-delimited name tokens"
            )
        if self.failure is MopFailure.EMPTY_TOKEN:
            return f"{self.filename!r} has an empty token among its first {MOP_TOKEN_COUNT}"
        return f"{self.filename!r} -> {self.mop}"

    def unwrap(self) -> str:
        """Return the MOP tag or raise :class:`MopParseError`."""

        if self.mop is None:
            raise MopParseError(f"cannot derive MOP: {self.describe()}")
        return self.mop


def parse_mop(filename: str | PathLike[str]) -> MopParseResult:
    """Derive the MOP tag from a statement filename (path components ignored)."""

    name = Path(filename).name
    tokens = Path(name).stem.split("_")
    if len(tokens) < MOP_TOKEN_COUNT:
        return MopParseResult(filename=name, failure=MopFailure.TOO_FEW_TOKENS)
    head = tokens[:MOP_TOKEN_COUNT]
    if any(t == "" for t in head):
        return MopParseResult(filename=name, failure=MopFailure.EMPTY_TOKEN)
    return MopParseResult(filename=name, mop="_".join(head))


__all__ = ["MOP_TOKEN_COUNT", "MopFailure", "MopParseResult", "parse_mop"]
