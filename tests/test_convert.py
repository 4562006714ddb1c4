import datetime
from decimal import Decimal

import pytest

from dbase3.dbf.convert import coerce_table, coerce_value
from dbase3.dbf.errors import ValueCoercionError
from dbase3.dbf.reader import attach_field_names, parse_table
from dbase3.dbf.records import FieldDescriptor


def _fd(ftype: str, precision: int = 0) -> FieldDescriptor:
    return FieldDescriptor(name="X", field_type=ftype, length=8, precision=precision, offset=0)


@pytest.mark.parametrize("ftype,precision,value,expected", [
    ("N", 0, "42", 42),
    ("N", 0, "-7", -7),
    ("N", 2, "3.50", Decimal("3.50")),
    ("N", 0, "", None),
    ("F", 3, "1.250", Decimal("1.250")),
    ("M", 0, "12", 12),
    ("M", 0, "", None),
    ("D", 0, b"20200115", datetime.date(2020, 1, 15)),
    ("D", 0, b"        ", None),
    ("D", 0, b"00000000", None),
    ("L", 0, b"T", True),
    ("L", 0, b"n", False),
    ("L", 0, b"?", None),
    ("C", 0, "  as is ", "  as is "),
])
def test_coerce_value(ftype: str, precision: int, value, expected) -> None:
    assert coerce_value(value, _fd(ftype, precision)) == expected


def test_raw_unknown_type_unchanged() -> None:
    assert coerce_value(b"\x01\x02", _fd("B")) == b"\x01\x02"


@pytest.mark.parametrize("ftype,value", [
    ("N", "12a"),
    ("D", b"20201399"),
    ("L", b"X"),
])
def test_coerce_value_errors(ftype: str, value) -> None:
    with pytest.raises(ValueCoercionError) as exc:
        coerce_value(value, _fd(ftype))
    assert exc.value.field_name == "X"


def test_coerce_table(people_dbf) -> None:
    table = coerce_table(parse_table(people_dbf))
    alice, bob, carol = table.records
    assert alice.values == ["Alice", 34, datetime.date(1990, 1, 2), 1]
    assert bob.values[3] is None
    assert bob.deleted
    assert carol.values[2] is None


def test_coerce_named_table(people_dbf) -> None:
    table = coerce_table(attach_field_names(parse_table(people_dbf)))
    assert table.records[2] == {"NAME": "Carol", "AGE": 101, "BORN": None, "MEMO": 12}
