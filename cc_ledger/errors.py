"""Exception taxonomy for statement transformation.

The batch runner recovers from ``FileOpenError``, ``MissingHeaderError`` and
``SaveError`` by recording a skipped outcome and moving to the next file. Any
other exception raised while a file is being transformed is not caught.
"""

from __future__ import annotations

from collections.abc import Iterable
from os import PathLike
from pathlib import Path


class LedgerError(Exception):
    """Base class for all ``cc_ledger`` failures tied to a workbook path."""

    def __init__(self, message: str, *, path: str | PathLike[str] | None = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class FileOpenError(LedgerError):
    """The source workbook could not be opened or read."""


class MissingHeaderError(LedgerError):
    """One or more required header labels were not found in the header window."""

    def __init__(
        self,
        missing: Iterable[str],
        *,
        path: str | PathLike[str] | None = None,
    ) -> None:
        self.missing = tuple(missing)
        where = f" in {Path(path).name}" if path is not None else ""
        super().__init__(
            f"required headers not found{where}: " + ", ".join(self.missing),
            path=path,
        )


class SaveError(LedgerError):
    """The destination workbook could not be written."""


class MopParseError(LedgerError):
    """A statement filename did not yield a method-of-payment tag."""


__all__ = [
    "FileOpenError",
    "LedgerError",
    "MissingHeaderError",
    "MopParseError",
    "SaveError",
]
