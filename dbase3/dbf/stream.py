"""Sequential byte reading helpers for dBASE table streams."""
from __future__ import annotations

import io
import struct
from typing import BinaryIO

from dbase3.dbf.errors import MalformedHeaderError, TruncatedInputError


# Struct formats (little-endian)
_U16 = struct.Struct("<H")
_I32 = struct.Struct("<i")
_U32 = struct.Struct("<I")


def _unpack(fmt: struct.Struct, data: bytes) -> int:
    if len(data) != fmt.size:
        raise MalformedHeaderError(
            f"Expected {fmt.size} bytes for '{fmt.format}', got {len(data)}"
        )
    return fmt.unpack(data)[0]


def le_u16(data: bytes) -> int:
    """Decode a little-endian unsigned 16-bit integer."""
    return _unpack(_U16, data)


def le_i32(data: bytes) -> int:
    """Decode a little-endian signed 32-bit integer."""
    return _unpack(_I32, data)


def le_u32(data: bytes) -> int:
    """Decode a little-endian unsigned 32-bit integer."""
    return _unpack(_U32, data)


class ByteReader:
    """Sequential reader over a seekable binary stream.

    Only forward consumption and a one-byte lookahead are offered; the
    cursor lives in the wrapped stream.
    """

    def __init__(self, stream: BinaryIO):
        self.stream = stream

    def read_bytes(self, n: int, skip: int = 0) -> bytes:
        """Read exactly n bytes, then advance past `skip` more."""
        data = self.stream.read(n)
        if len(data) < n:
            raise TruncatedInputError(n, len(data))
        if skip:
            self.stream.seek(skip, io.SEEK_CUR)
        return data

    def read_byte(self, skip: int = 0) -> int:
        """Read one unsigned byte, then advance past `skip` more."""
        return self.read_bytes(1, skip)[0]

    def peek_equals(self, expected: int) -> bool:
        """Check the next byte without consuming it. False at end of stream."""
        data = self.stream.read(1)
        if not data:
            return False
        self.stream.seek(-1, io.SEEK_CUR)
        return data[0] == expected

    def seek(self, offset: int) -> None:
        self.stream.seek(offset, io.SEEK_SET)

    def tell(self) -> int:
        return self.stream.tell()


def read_bytes(stream: BinaryIO, n: int, skip: int = 0) -> bytes:
    return ByteReader(stream).read_bytes(n, skip)


def read_byte(stream: BinaryIO, skip: int = 0) -> int:
    return ByteReader(stream).read_byte(skip)


def peek_equals(stream: BinaryIO, expected: int) -> bool:
    return ByteReader(stream).peek_equals(expected)
