"""Public operations: transform one statement, convert one legacy file, run a batch.

Batch semantics
---------------
- Phase 1 converts legacy ``.xls`` statements to ``.xlsx``; phase 2 transforms
  every ``.xlsx`` statement (including freshly converted ones). Each phase
  holds one :func:`~cc_ledger.workbook.engine_session` for its whole run.
- Files are processed one at a time in filename order.
- ``FileOpenError``, ``MissingHeaderError``, ``SaveError`` and
  ``MopParseError`` are recorded as skipped outcomes and the batch continues.
- Anything else raised while a file is being transformed propagates and ends
  the batch; the engine session is still released.
"""

from __future__ import annotations

from os import PathLike
from pathlib import Path

from .convert import LEGACY_SUFFIX, convert_legacy_workbook
from .discovery import discover_statements
from .errors import FileOpenError, LedgerError, MissingHeaderError, MopParseError, SaveError
from .headers import HeaderWindow, build_header_map
from .logging_setup import get_logger
from .models import (
    BatchReport,
    FileOutcome,
    HeaderMap,
    OutcomeStatus,
    SourceSheet,
    TransformContext,
)
from .mop import parse_mop
from .rules import iter_canonical_rows
from .settings import LedgerSettings, load_settings
from .workbook import WorkbookEngine, engine_session
from .writer import transformed_path_for, write_canonical_sheet

logger = get_logger("cc_ledger.api")

_SKIP_STATUS: dict[type[LedgerError], OutcomeStatus] = {
    FileOpenError: OutcomeStatus.SKIPPED_OPEN,
    MissingHeaderError: OutcomeStatus.SKIPPED_HEADERS,
    SaveError: OutcomeStatus.SAVE_FAILED,
    MopParseError: OutcomeStatus.SKIPPED_NAME,
}


def _skipped(path: Path, err: LedgerError) -> FileOutcome:
    status = _SKIP_STATUS.get(type(err), OutcomeStatus.SKIPPED_OPEN)
    logger.warning("Skipping %s: %s", path.name, err)
    return FileOutcome(source=str(path), status=status, message=str(err))


def _open_with_headers(
    engine: WorkbookEngine, src: Path, cfg: LedgerSettings
) -> tuple[SourceSheet, HeaderMap]:
    sheet = engine.open_source(src)
    window = HeaderWindow.for_sheet(
        sheet, first_row=cfg.header_first_row, last_row=cfg.header_last_row
    )
    return sheet, build_header_map(sheet, window=window, path=src)


def locate_headers(
    engine: WorkbookEngine,
    path: str | PathLike[str],
    settings: LedgerSettings | None = None,
) -> HeaderMap:
    """Open ``path`` and return its :class:`HeaderMap` without writing anything."""

    _sheet, headers = _open_with_headers(engine, Path(path), settings or load_settings())
    return headers


def transform_file(
    engine: WorkbookEngine,
    path: str | PathLike[str],
    settings: LedgerSettings | None = None,
) -> FileOutcome:
    """Transform one statement into ``<stem>_Transformed<ext>`` beside it.

    Raises ``MopParseError``, ``FileOpenError``, ``MissingHeaderError`` or
    ``SaveError``; nothing is written unless every required header is found.
    """

    cfg = settings or load_settings()
    src = Path(path)
    mop = parse_mop(src).unwrap()

    sheet, headers = _open_with_headers(engine, src, cfg)
    logger.info("Headers located in %s: %r", src.name, headers)

    context = TransformContext(mop=mop, headers=headers)
    dest = transformed_path_for(src, suffix=cfg.transformed_suffix)

    wb = engine.new_workbook(title=sheet.title or None)
    written = write_canonical_sheet(wb.active, iter_canonical_rows(sheet, context))
    engine.save(wb, dest)

    logger.info("Transformed %s -> %s (%d rows, MOP %s)", src.name, dest.name, written, mop)
    return FileOutcome(
        source=str(src),
        status=OutcomeStatus.TRANSFORMED,
        output=str(dest),
        rows_written=written,
    )


def convert_file(
    engine: WorkbookEngine,
    path: str | PathLike[str],
    settings: LedgerSettings | None = None,
) -> FileOutcome:
    """Convert one legacy ``.xls`` statement; raises ``FileOpenError``/``SaveError``."""

    cfg = settings or load_settings()
    src = Path(path)
    dest = convert_legacy_workbook(engine, src, suffix=cfg.converted_suffix)
    return FileOutcome(source=str(src), status=OutcomeStatus.CONVERTED, output=str(dest))


def convert_directory(
    directory: str | PathLike[str],
    settings: LedgerSettings | None = None,
) -> list[FileOutcome]:
    """Run the conversion phase over every legacy statement in ``directory``."""

    cfg = settings or load_settings()
    sources = discover_statements(
        directory,
        prefix=cfg.file_prefix,
        suffixes=(LEGACY_SUFFIX,),
        transformed_suffix=cfg.transformed_suffix,
    )
    outcomes: list[FileOutcome] = []
    if not sources:
        return outcomes

    logger.info("Converting %d legacy statement(s)", len(sources))
    with engine_session() as engine:
        for src in sources:
            try:
                outcomes.append(convert_file(engine, src, cfg))
            except (FileOpenError, SaveError) as e:
                outcomes.append(_skipped(src, e))
    return outcomes


def transform_directory(
    directory: str | PathLike[str],
    settings: LedgerSettings | None = None,
) -> list[FileOutcome]:
    """Run the transform phase over every ``.xlsx`` statement in ``directory``."""

    cfg = settings or load_settings()
    sources = discover_statements(
        directory,
        prefix=cfg.file_prefix,
        suffixes=(".xlsx",),
        transformed_suffix=cfg.transformed_suffix,
    )
    outcomes: list[FileOutcome] = []
    logger.info("Transforming %d statement(s) in %s", len(sources), directory)
    with engine_session() as engine:
        for src in sources:
            try:
                outcomes.append(transform_file(engine, src, cfg))
            except (MopParseError, FileOpenError, MissingHeaderError, SaveError) as e:
                outcomes.append(_skipped(src, e))
    return outcomes


def run_batch(
    directory: str | PathLike[str],
    settings: LedgerSettings | None = None,
    *,
    convert_legacy: bool = True,
) -> BatchReport:
    """Convert (optionally) and transform every statement in ``directory``."""

    cfg = settings or load_settings()
    conversions = convert_directory(directory, cfg) if convert_legacy else []
    transforms = transform_directory(directory, cfg)
    report = BatchReport(conversions=conversions, transforms=transforms)
    logger.info(
        "Batch complete: %d transformed, %d skipped",
        len(report.transformed),
        len(report.skipped),
    )
    return report


__all__ = [
    "convert_directory",
    "convert_file",
    "locate_headers",
    "run_batch",
    "transform_directory",
    "transform_file",
]
