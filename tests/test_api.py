from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path

import pytest
from openpyxl import load_workbook

import cc_ledger.api as api_mod
from cc_ledger import (
    CANONICAL_SCHEMA,
    LedgerSettings,
    MissingHeaderError,
    OutcomeStatus,
    cell_text,
    engine_session,
    locate_headers,
    run_batch,
    transform_file,
)

ROWS = [
    ["01-03-2024", "POS PURCHASE", "1200.50", "Dr"],
    ["02/03/2024", "PAYMENT RECEIVED", "5000.00", "Cr"],
    ["03/03/2024 12:10", "FUEL SURCHARGE", "25", "Dr"],
]


def _read(path: Path) -> list[list[str]]:
    ws = load_workbook(path).active
    return [[cell_text(c.value) for c in row] for row in ws.iter_rows()]


def test_transform_file_writes_canonical_workbook(make_statement):
    src = make_statement("HDFC_CC_AB_stmt.xlsx", ROWS)
    with engine_session() as engine:
        outcome = transform_file(engine, src)

    dest = src.with_name("HDFC_CC_AB_stmt_Transformed.xlsx")
    assert outcome.status is OutcomeStatus.TRANSFORMED
    assert outcome.output == str(dest)
    assert outcome.rows_written == 3

    rows = _read(dest)
    assert rows[0] == list(CANONICAL_SCHEMA)
    assert rows[1] == [
        "01-03-2024", "POS PURCHASE", "", "", "", "", "", "HDFC_CC_AB", "1200.50", "", "Dr", "",
    ]
    assert rows[2] == [
        "02-03-2024", "PAYMENT RECEIVED", "", "", "", "", "", "HDFC_CC_AB", "", "", "Cr", "5000.00",
    ]
    assert rows[3][0] == "03-03-2024"

    ws = load_workbook(dest).active
    assert all(ws.cell(row=r, column=1).number_format == "@" for r in range(2, 5))


def test_transform_file_missing_header_writes_nothing(make_statement):
    src = make_statement(
        "HDFC_CC_AB_stmt.xlsx", ROWS, labels=("DATE", "Description", "AMOUNT", "Debit / Credit")
    )
    with engine_session() as engine, pytest.raises(MissingHeaderError) as exc:
        transform_file(engine, src)
    assert exc.value.missing == ("AMT",)
    assert not src.with_name("HDFC_CC_AB_stmt_Transformed.xlsx").exists()


def test_header_row_position_follows_settings(make_statement):
    src = make_statement("HDFC_CC_AB_stmt.xlsx", ROWS, header_row=10)
    with engine_session() as engine, pytest.raises(MissingHeaderError):
        transform_file(engine, src)

    settings = LedgerSettings(header_first_row=5, header_last_row=11)
    with engine_session() as engine:
        headers = locate_headers(engine, src, settings)
        outcome = transform_file(engine, src, settings)
    assert headers.row("DATE") == 10
    assert outcome.rows_written == 3


def test_batch_skips_bad_files_and_continues(tmp_path: Path, make_statement):
    make_statement("HDFC_CC_AB_jan.xlsx", ROWS)
    make_statement(
        "HDFC_CC_CD_feb.xlsx", ROWS, labels=("DATE", "Description", "Amount", "Debit / Credit")
    )
    (tmp_path / "HDFC_CC_EF_mar.xlsx").write_text("corrupt")
    make_statement("HDFC_CC_GH_apr.xlsx", ROWS[:1])
    make_statement("other_bank.xlsx", ROWS)

    report = run_batch(tmp_path)

    statuses = {Path(o.source).name: o.status for o in report.transforms}
    assert statuses == {
        "HDFC_CC_AB_jan.xlsx": OutcomeStatus.TRANSFORMED,
        "HDFC_CC_CD_feb.xlsx": OutcomeStatus.SKIPPED_HEADERS,
        "HDFC_CC_EF_mar.xlsx": OutcomeStatus.SKIPPED_OPEN,
        "HDFC_CC_GH_apr.xlsx": OutcomeStatus.TRANSFORMED,
    }
    assert [Path(o.source).name for o in report.transforms] == sorted(statuses)
    assert (tmp_path / "HDFC_CC_AB_jan_Transformed.xlsx").exists()
    assert not (tmp_path / "HDFC_CC_CD_feb_Transformed.xlsx").exists()
    assert (tmp_path / "HDFC_CC_GH_apr_Transformed.xlsx").exists()
    assert not (tmp_path / "other_bank_Transformed.xlsx").exists()
    assert len(report.transformed) == 2
    assert len(report.skipped) == 2

    mops = {row[7] for row in _read(tmp_path / "HDFC_CC_GH_apr_Transformed.xlsx")[1:]}
    assert mops == {"HDFC_CC_GH"}


def test_batch_rerun_ignores_previous_outputs(tmp_path: Path, make_statement):
    make_statement("HDFC_CC_AB_jan.xlsx", ROWS)
    run_batch(tmp_path)
    report = run_batch(tmp_path)
    assert [Path(o.source).name for o in report.transforms] == ["HDFC_CC_AB_jan.xlsx"]


def test_batch_records_malformed_names(tmp_path: Path, make_statement):
    make_statement("HDFC_CC.xlsx", ROWS, directory=tmp_path)
    settings = LedgerSettings(file_prefix="HDFC_CC")
    report = run_batch(tmp_path, settings)
    assert [o.status for o in report.transforms] == [OutcomeStatus.SKIPPED_NAME]


def test_batch_records_save_failures(tmp_path: Path, make_statement):
    make_statement("HDFC_CC_AB_jan.xlsx", ROWS)
    (tmp_path / "HDFC_CC_AB_jan_Transformed.xlsx").mkdir()
    report = run_batch(tmp_path)
    assert [o.status for o in report.transforms] == [OutcomeStatus.SAVE_FAILED]


def test_row_failure_aborts_batch_and_releases_session(
    tmp_path: Path, make_statement, monkeypatch: pytest.MonkeyPatch
):
    make_statement("HDFC_CC_AB_jan.xlsx", ROWS)
    make_statement("HDFC_CC_CD_feb.xlsx", ROWS)
    engines = []
    real_session = api_mod.engine_session

    @contextmanager
    def _tracking_session():
        with real_session() as engine:
            engines.append(engine)
            yield engine

    def _boom(sheet, context):
        raise RuntimeError("unexpected cell")
        yield  # pragma: no cover

    monkeypatch.setattr(api_mod, "engine_session", _tracking_session)
    monkeypatch.setattr(api_mod, "iter_canonical_rows", _boom)

    with pytest.raises(RuntimeError, match="unexpected cell"):
        run_batch(tmp_path, convert_legacy=False)

    assert len(engines) == 1
    assert engines[0].open_handles == 0
    assert not (tmp_path / "HDFC_CC_CD_feb_Transformed.xlsx").exists()


def test_legacy_conversion_failure_is_reported(tmp_path: Path, make_statement):
    (tmp_path / "HDFC_CC_AB_old.xls").write_bytes(b"not an xls file")
    make_statement("HDFC_CC_CD_new.xlsx", ROWS)

    report = run_batch(tmp_path)

    assert [o.status for o in report.conversions] == [OutcomeStatus.SKIPPED_OPEN]
    assert [o.status for o in report.transforms] == [OutcomeStatus.TRANSFORMED]


def test_missing_directory_raises(tmp_path: Path):
    with pytest.raises(NotADirectoryError):
        run_batch(tmp_path / "nope")
