"""Default paths, decode settings, and logging setup."""
from __future__ import annotations

import logging
from pathlib import Path

from dbase3.dbf.constants import TEXT_SIGNED


def derive_memo_path(dbf: Path) -> Path | None:
    """Return the companion .dbt memo file for a table, if it exists."""
    for suffix in (".dbt", ".DBT"):
        p = dbf.with_suffix(suffix)
        if p.exists():
            return p
    return None


# Decode defaults, overridable through the [decode] config table
DEFAULT_TEXT_DECODING = TEXT_SIGNED
DEFAULT_SKIP_DELETED = False

# Rows shown by `dbf3 records` when no --limit is given
DEFAULT_RECORD_LIMIT = 20

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Send library log messages to stderr; DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )
