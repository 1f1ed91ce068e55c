"""Runtime settings for statement discovery and header search.

Defaults match the HDFC credit-card export layout. Values can be overridden
through environment variables (the CLI loads a local ``.env`` first):

- ``CC_LEDGER_HEADER_FIRST_ROW`` / ``CC_LEDGER_HEADER_LAST_ROW``: inclusive
  1-based row window searched for the statement header labels.
- ``CC_LEDGER_FILE_PREFIX``: filename prefix identifying statement exports.
"""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

DEFAULT_HEADER_FIRST_ROW = 27
DEFAULT_HEADER_LAST_ROW = 50
DEFAULT_FILE_PREFIX = "HDFC_CC_"
TRANSFORMED_SUFFIX = "_Transformed"
CONVERTED_SUFFIX = "_ConvertedFromXls"


class LedgerSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    header_first_row: int = DEFAULT_HEADER_FIRST_ROW
    header_last_row: int = DEFAULT_HEADER_LAST_ROW
    file_prefix: str = DEFAULT_FILE_PREFIX
    transformed_suffix: str = TRANSFORMED_SUFFIX
    converted_suffix: str = CONVERTED_SUFFIX

    @field_validator("header_first_row", "header_last_row")
    @classmethod
    def _positive_row(cls, v: int) -> int:
        if v < 1:
            raise ValueError("header rows are 1-based and must be >= 1")
        return v

    @field_validator("file_prefix", "transformed_suffix", "converted_suffix")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("must be non-empty")
        return v

    @model_validator(mode="after")
    def _ordered_window(self) -> LedgerSettings:
        if self.header_first_row > self.header_last_row:
            raise ValueError("header_first_row must not exceed header_last_row")
        return self


_ENV_FIELDS = {
    "header_first_row": "CC_LEDGER_HEADER_FIRST_ROW",
    "header_last_row": "CC_LEDGER_HEADER_LAST_ROW",
    "file_prefix": "CC_LEDGER_FILE_PREFIX",
}


def load_settings(**overrides: object) -> LedgerSettings:
    """Build settings from the environment, with explicit keyword overrides winning."""

    values: dict[str, object] = {}
    for field_name, env_name in _ENV_FIELDS.items():
        raw = os.getenv(env_name)
        if raw is not None and raw.strip() != "":
            values[field_name] = raw
    values.update({k: v for k, v in overrides.items() if v is not None})
    return LedgerSettings.model_validate(values)


__all__ = [
    "CONVERTED_SUFFIX",
    "DEFAULT_FILE_PREFIX",
    "DEFAULT_HEADER_FIRST_ROW",
    "DEFAULT_HEADER_LAST_ROW",
    "LedgerSettings",
    "TRANSFORMED_SUFFIX",
    "load_settings",
]
