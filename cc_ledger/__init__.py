"""Public interface for the ``cc_ledger`` package.

Re-exports the batch/file operations, the transformation building blocks and
the public models. There is no runtime logic here, only symbol re-exports.
"""

from .api import (
    convert_directory,
    convert_file,
    locate_headers,
    run_batch,
    transform_directory,
    transform_file,
)
from .dates import normalize_date_text
from .errors import (
    FileOpenError,
    LedgerError,
    MissingHeaderError,
    MopParseError,
    SaveError,
)
from .headers import HeaderWindow, build_header_map, locate_label
from .models import (
    BatchReport,
    FileOutcome,
    HeaderMap,
    HeaderPosition,
    OutcomeStatus,
    SourceSheet,
    TransformContext,
    cell_text,
)
from .mop import MopFailure, MopParseResult, parse_mop
from .rules import FIELD_RULES, iter_canonical_rows, transform_row
from .schema import CANONICAL_SCHEMA, REQUIRED_HEADERS, CanonicalRow
from .settings import LedgerSettings, load_settings
from .workbook import WorkbookEngine, engine_session
from .writer import transformed_path_for, write_canonical_sheet

__all__ = [
    # API
    "convert_directory",
    "convert_file",
    "locate_headers",
    "run_batch",
    "transform_directory",
    "transform_file",
    # Transformation
    "FIELD_RULES",
    "HeaderWindow",
    "build_header_map",
    "iter_canonical_rows",
    "locate_label",
    "normalize_date_text",
    "parse_mop",
    "transform_row",
    "transformed_path_for",
    "write_canonical_sheet",
    # Engine / settings
    "LedgerSettings",
    "WorkbookEngine",
    "engine_session",
    "load_settings",
    # Models / types
    "BatchReport",
    "CANONICAL_SCHEMA",
    "CanonicalRow",
    "FileOutcome",
    "HeaderMap",
    "HeaderPosition",
    "MopFailure",
    "MopParseResult",
    "OutcomeStatus",
    "REQUIRED_HEADERS",
    "SourceSheet",
    "TransformContext",
    "cell_text",
    # Errors
    "FileOpenError",
    "LedgerError",
    "MissingHeaderError",
    "MopParseError",
    "SaveError",
]
