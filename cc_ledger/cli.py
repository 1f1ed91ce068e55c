"""CLI for the ``cc_ledger`` package.

Command handlers (``cmd_*``) are plain functions returning a process exit
code; the Typer application below wraps them. A local ``.env`` is loaded with
``python-dotenv`` (without overriding already-set variables) before settings
are read, and logging is configured once in the root callback.

Exit codes: ``0`` when the batch ran to completion, even if some files were
skipped; ``1`` for an invalid directory, invalid settings, or an unexpected
failure that aborted the batch.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from typer.models import OptionInfo

from .logging_setup import configure_logging
from .models import FileOutcome


def _print_outcomes(title: str, outcomes: list[FileOutcome]) -> None:
    typer.echo(f"{title}: {len(outcomes)} file(s)")
    for o in outcomes:
        name = Path(o.source).name
        if o.succeeded:
            out = Path(o.output).name if o.output else ""
            rows = f" ({o.rows_written} rows)" if o.rows_written else ""
            typer.echo(f"  {o.status.value:<16} {name} -> {out}{rows}")
        else:
            typer.echo(f"  {o.status.value:<16} {name}: {o.message}")


def cmd_transform(directory: str, *, convert_legacy: bool = True) -> int:
    """Convert legacy files (optionally) and transform every statement in ``directory``."""

    from .api import run_batch
    from .settings import load_settings

    try:
        settings = load_settings()
    except ValidationError as e:
        print(f"Error: invalid settings: {e}", file=sys.stderr)
        return 1

    try:
        report = run_batch(directory, settings, convert_legacy=convert_legacy)
    except NotADirectoryError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: batch aborted: {e}", file=sys.stderr)
        return 1

    if convert_legacy:
        _print_outcomes("Converted", report.conversions)
    _print_outcomes("Transformed", report.transforms)
    typer.echo(f"Done: {len(report.transformed)} transformed, {len(report.skipped)} skipped")
    return 0


def cmd_convert(directory: str) -> int:
    """Convert every legacy ``.xls`` statement in ``directory`` to ``.xlsx``."""

    from .api import convert_directory
    from .settings import load_settings

    try:
        settings = load_settings()
        outcomes = convert_directory(directory, settings)
    except ValidationError as e:
        print(f"Error: invalid settings: {e}", file=sys.stderr)
        return 1
    except NotADirectoryError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    _print_outcomes("Converted", outcomes)
    return 0


def cmd_headers(file_path: str) -> int:
    """Print the located header positions for one statement workbook."""

    from .api import locate_headers
    from .errors import FileOpenError, MissingHeaderError
    from .settings import load_settings
    from .workbook import engine_session

    try:
        settings = load_settings()
        with engine_session() as engine:
            headers = locate_headers(engine, file_path, settings)
    except ValidationError as e:
        print(f"Error: invalid settings: {e}", file=sys.stderr)
        return 1
    except FileOpenError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except MissingHeaderError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for label, pos in headers.items():
        typer.echo(f"{label}\trow {pos.row}\tcolumn {pos.column}")
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Reshape HDFC credit-card statement workbooks into the canonical ledger "
        "layout. Loads settings overrides from a local .env before running."
    ),
)

# Module-level option objects (no calls in parameter defaults).
DIR_OPTION: OptionInfo = typer.Option(
    ...,
    "--dir",
    help="Directory containing HDFC_CC_* statement workbooks",
    file_okay=False,
    dir_okay=True,
    exists=False,  # the handler reports a readable error
)

FILE_OPTION: OptionInfo = typer.Option(
    ...,
    "--file",
    help="Statement workbook (.xlsx) to inspect",
    dir_okay=False,
    file_okay=True,
    exists=False,
)


@app.command("transform")
def transform_cmd(
    directory: Annotated[Path, DIR_OPTION],
    *,
    convert: bool = typer.Option(
        True, "--convert/--no-convert", help="Convert legacy .xls statements first."
    ),
) -> None:
    """Transform every statement in a directory into *_Transformed.xlsx files."""

    raise typer.Exit(cmd_transform(str(directory), convert_legacy=convert))


@app.command("convert")
def convert_cmd(directory: Annotated[Path, DIR_OPTION]) -> None:
    """Convert legacy .xls statements to *_ConvertedFromXls.xlsx only."""

    raise typer.Exit(cmd_convert(str(directory)))


@app.command("headers")
def headers_cmd(file_path: Annotated[Path, FILE_OPTION]) -> None:
    """Show where the required header labels sit in one statement."""

    raise typer.Exit(cmd_headers(str(file_path)))


@app.callback()
def _root(
    log_level: str | None = typer.Option(
        None, "--log-level", help="Logging level (falls back to CC_LEDGER_LOG_LEVEL)."
    ),
) -> None:
    """Load ``.env`` from the working directory and configure logging."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level)


if __name__ == "__main__":  # pragma: no cover
    app()
