import io
import struct

import pytest

from dbase3.dbf.errors import TruncatedInputError
from dbase3.dbf.reader import calc_offsets, parse_field, parse_field_name, parse_fields
from dbase3.dbf.records import FieldDescriptor, FieldType
from dbase3.dbf.stream import ByteReader

_DESCRIPTOR = struct.Struct("<11sc4xBB2xB2xB8x")


def _descriptor(name: bytes, ftype: bytes, length: int, precision: int = 0,
                work_area: int = 0, flags: int = 0) -> bytes:
    return _DESCRIPTOR.pack(name, ftype, length, precision, work_area, flags)


def test_field_name_strips_space_padding() -> None:
    reader = ByteReader(io.BytesIO(b"NAME       "))
    assert parse_field_name(reader) == "NAME"


def test_field_name_keeps_case_and_underscores() -> None:
    reader = ByteReader(io.BytesIO(b"Cust_No\x00\x00\x00\x00"))
    assert parse_field_name(reader) == "Cust_No"


def test_parse_field_consumes_32_bytes() -> None:
    stream = io.BytesIO(_descriptor(b"PRICE", b"N", 10, 2, 7, 1) + b"\r")
    fd = parse_field(ByteReader(stream))
    assert stream.tell() == 32
    assert fd == FieldDescriptor(
        name="PRICE", field_type="N", length=10, precision=2, work_area_id=7, flags=1,
    )
    assert fd.offset is None
    assert fd.kind is FieldType.NUMERIC


def test_parse_fields_stops_at_terminator() -> None:
    data = (
        _descriptor(b"A", b"C", 5)
        + _descriptor(b"B", b"L", 1)
        + b"\r"
        + b" trailing"
    )
    stream = io.BytesIO(data)
    fields = parse_fields(ByteReader(stream))
    assert [f.name for f in fields] == ["A", "B"]
    assert fields[1].kind is FieldType.RAW
    assert stream.tell() == 65


def test_parse_fields_empty_schema() -> None:
    stream = io.BytesIO(b"\r")
    assert parse_fields(ByteReader(stream)) == []
    assert stream.tell() == 1


def test_parse_fields_without_terminator() -> None:
    data = _descriptor(b"A", b"C", 5)
    with pytest.raises(TruncatedInputError):
        parse_fields(ByteReader(io.BytesIO(data)))


def test_calc_offsets() -> None:
    lengths = [5, 1, 10, 3]
    fields = [FieldDescriptor(name=f"F{i}", field_type="C", length=n, precision=0)
              for i, n in enumerate(lengths)]
    result = calc_offsets(fields)
    assert [f.offset for f in result] == [0, 5, 6, 16]
    assert [f.name for f in result] == ["F0", "F1", "F2", "F3"]
    # Input descriptors are left untouched
    assert all(f.offset is None for f in fields)


def test_calc_offsets_empty() -> None:
    assert calc_offsets([]) == []


def test_field_type_from_code() -> None:
    assert FieldType.from_code("C") is FieldType.CHARACTER
    assert FieldType.from_code("M") is FieldType.MEMO
    assert FieldType.from_code("D") is FieldType.RAW
