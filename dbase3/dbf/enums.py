"""Lookup tables for single-character field type codes."""
from __future__ import annotations

from dbase3.dbf.constants import VERSION_DBASE3, VERSION_DBASE3_MEMO


def lookup_enum(table: dict[str, str], value: str) -> str:
    """Return human-readable name for a type code, or the code itself for unknowns."""
    return table.get(value, value)


# Field type codes found in dBASE III descriptors (and a few later dialects)
FIELD_TYPE_NAMES: dict[str, str] = {
    "C": "character",
    "N": "numeric",
    "M": "memo",
    "D": "date",
    "L": "logical",
    "F": "float",
}

# Version byte
VERSION_NAMES: dict[int, str] = {
    VERSION_DBASE3: "dBASE III",
    VERSION_DBASE3_MEMO: "dBASE III with memo",
}
