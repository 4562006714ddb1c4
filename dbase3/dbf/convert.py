"""Convert decoded field text into Python values.

The reader keeps every C/N/M value as a trimmed string. coerce_table maps
those strings (and the raw bytes of D/L fields) to native types:

  C      str, unchanged
  N, F   int when precision is 0, Decimal otherwise; blank -> None
  M      int memo block number; blank -> None
  D      datetime.date from YYYYMMDD; blank -> None
  L      True for Y/y/T/t, False for N/n/F/f, None for ? or blank
"""
from __future__ import annotations

import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable

from dbase3.dbf.errors import ValueCoercionError
from dbase3.dbf.records import FieldDescriptor, Record, Table


def _as_text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("ascii").strip()
    return value.strip()


def _numeric(value: Any, fd: FieldDescriptor) -> Any:
    text = _as_text(value)
    if not text:
        return None
    if fd.precision == 0 and "." not in text:
        return int(text)
    return Decimal(text)


def _memo(value: Any, fd: FieldDescriptor) -> Any:
    text = _as_text(value)
    return int(text) if text else None


def _date(value: Any, fd: FieldDescriptor) -> Any:
    text = _as_text(value)
    if not text or text.strip("0") == "":
        return None
    return datetime.datetime.strptime(text, "%Y%m%d").date()


def _logical(value: Any, fd: FieldDescriptor) -> Any:
    text = _as_text(value)
    if text in ("", "?"):
        return None
    if text in ("Y", "y", "T", "t"):
        return True
    if text in ("N", "n", "F", "f"):
        return False
    raise ValueError(f"Incorrect boolean: {text!r}")


_CONVERTERS: dict[str, Callable[[Any, FieldDescriptor], Any]] = {
    "N": _numeric,
    "F": _numeric,
    "M": _memo,
    "D": _date,
    "L": _logical,
}


def coerce_value(value: Any, fd: FieldDescriptor) -> Any:
    """Convert one decoded value according to its field type."""
    converter = _CONVERTERS.get(fd.field_type)
    if converter is None:
        return value
    try:
        return converter(value, fd)
    except (ValueError, InvalidOperation, UnicodeDecodeError) as e:
        raise ValueCoercionError(fd.name, fd.field_type, value) from e


def coerce_table(table: Table) -> Table:
    """Return a copy of the table with every record's values coerced."""
    records = []
    for rec in table.records:
        if isinstance(rec, dict):
            records.append({
                fd.name: coerce_value(rec[fd.name], fd) for fd in table.fields
            })
        else:
            records.append(Record(
                values=[coerce_value(v, fd) for v, fd in zip(rec.values, table.fields)],
                deleted=rec.deleted,
            ))
    return Table(header=table.header, fields=table.fields, records=records)
