import struct
from pathlib import Path

import pytest

from dbase3 import profiles

_HEADER = struct.Struct("<BBBBIHH20x")
_DESCRIPTOR = struct.Struct("<11sc4xBB2xB2xB8x")


def _cell(value, length: int) -> bytes:
    if isinstance(value, str):
        value = value.encode("latin-1")
    return value.ljust(length, b" ")[:length]


def dbf_bytes(fields, rows, *, version: int = 0x03, updated=(120, 1, 15),
              record_count=None, header_length=None, record_length=None,
              deleted=(), eof: bool = True) -> bytes:
    """Build a dBASE III image.

    fields: (name, type, length, precision) tuples; name may be bytes to
    control padding. rows: sequences of str/bytes cell values.
    """
    if record_length is None:
        record_length = 1 + sum(f[2] for f in fields)
    if header_length is None:
        header_length = 32 + 32 * len(fields) + 1
    if record_count is None:
        record_count = len(rows)

    out = bytearray(_HEADER.pack(version, *updated, record_count, header_length, record_length))
    for name, ftype, length, precision in fields:
        raw_name = name if isinstance(name, bytes) else name.encode("ascii").ljust(11, b"\x00")
        out += _DESCRIPTOR.pack(raw_name, ftype.encode("ascii"), length, precision, 0, 0)
    out += b"\r"
    out = out.ljust(header_length, b"\x00")

    for i, row in enumerate(rows):
        out += b"*" if i in deleted else b" "
        for (_, _, length, _), value in zip(fields, row):
            out += _cell(value, length)
    if eof:
        out += b"\x1a"
    return bytes(out)


PEOPLE_FIELDS = [
    ("NAME", "C", 10, 0),
    ("AGE", "N", 3, 0),
    ("BORN", "D", 8, 0),
    ("MEMO", "M", 10, 0),
]

PEOPLE_ROWS = [
    ["Alice", " 34", "19900102", "         1"],
    ["Bob", "  7", "20170630", ""],
    ["Carol", "101", "", "        12"],
]


@pytest.fixture
def make_dbf(tmp_path: Path):
    """Write a DBF image built by dbf_bytes() and return its path."""
    counter = iter(range(1000))

    def _make(fields, rows, **kwargs) -> Path:
        path = tmp_path / f"table{next(counter)}.dbf"
        path.write_bytes(dbf_bytes(fields, rows, **kwargs))
        return path

    return _make


@pytest.fixture
def people_dbf(make_dbf) -> Path:
    return make_dbf(PEOPLE_FIELDS, PEOPLE_ROWS, deleted={1})


@pytest.fixture
def build_dbf():
    return dbf_bytes


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch):
    """Point the TOML config at a temp file so the user's config is never read."""
    config_path = tmp_path / "config" / "config.toml"
    monkeypatch.setattr(profiles, "get_config_path", lambda: config_path)
    return config_path
