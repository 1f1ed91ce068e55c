"""Find statement workbooks in a directory by filename convention."""

from __future__ import annotations

from collections.abc import Iterable
from os import PathLike
from pathlib import Path

from .settings import DEFAULT_FILE_PREFIX, TRANSFORMED_SUFFIX

_LOCK_PREFIX = "~$"


def discover_statements(
    directory: str | PathLike[str],
    *,
    prefix: str = DEFAULT_FILE_PREFIX,
    suffixes: Iterable[str] = (".xlsx",),
    transformed_suffix: str = TRANSFORMED_SUFFIX,
) -> list[Path]:
    """Return statement files in ``directory`` sorted by name.

    A file qualifies when its name starts with ``prefix`` and its extension
    (case-insensitive) is one of ``suffixes``. Previously transformed outputs
    and spreadsheet lock files are excluded. Subdirectories are not searched.
    """

    root = Path(directory)
    if not root.is_dir():
        raise NotADirectoryError(f"not a directory: {root}")

    wanted = {s.lower() for s in suffixes}
    found: list[Path] = []
    for p in root.iterdir():
        if not p.is_file():
            continue
        name = p.name
        if name.startswith(_LOCK_PREFIX) or not name.startswith(prefix):
            continue
        if p.suffix.lower() not in wanted:
            continue
        if p.stem.endswith(transformed_suffix):
            continue
        found.append(p)
    return sorted(found, key=lambda p: p.name)


__all__ = ["discover_statements"]
