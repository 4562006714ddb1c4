"""Field value decoders, one per field type.

Character, numeric and memo fields are stored as text and decode to
trimmed strings. Every other type code is returned as the raw byte slice.

Two text decodings exist:
  signed:  each byte is read as a signed value and its absolute value is
           used as the character code, so 0xCE (-50) decodes like 0x32.
           This is what the format's reference readers produce.
  latin-1: each byte is its own code point (0-255).
"""
from __future__ import annotations

from typing import Any, Callable

from dbase3.dbf.constants import TEXT_DECODINGS, TEXT_LATIN1, TEXT_SIGNED
from dbase3.dbf.records import FieldDescriptor, FieldType


def _signed_abs(b: int) -> int:
    return 256 - b if b > 127 else b


def text_signed(data: bytes) -> str:
    """Decode text taking the absolute value of each signed byte."""
    return "".join(chr(_signed_abs(b)) for b in data).strip()


def text_latin1(data: bytes) -> str:
    """Decode text as unsigned single-byte code points."""
    return data.decode("latin-1").strip()


_TEXT_DECODERS: dict[str, Callable[[bytes], str]] = {
    TEXT_SIGNED: text_signed,
    TEXT_LATIN1: text_latin1,
}


def decode_raw(data: bytes) -> bytes:
    return bytes(data)


def get_text_decoder(text_decoding: str) -> Callable[[bytes], str]:
    decoder = _TEXT_DECODERS.get(text_decoding)
    if decoder is None:
        raise ValueError(
            f"Unknown text decoding {text_decoding!r} (expected one of {', '.join(TEXT_DECODINGS)})"
        )
    return decoder


def build_decoders(text_decoding: str = TEXT_SIGNED) -> dict[FieldType, Callable[[bytes], Any]]:
    """Map each FieldType to its decode function."""
    text = get_text_decoder(text_decoding)
    return {
        FieldType.CHARACTER: text,
        FieldType.NUMERIC: text,
        FieldType.MEMO: text,
        FieldType.RAW: decode_raw,
    }


def decode_field(payload: bytes, fd: FieldDescriptor,
                 decoders: dict[FieldType, Callable[[bytes], Any]]) -> Any:
    """Slice one field out of a record payload (flag byte removed) and decode it."""
    chunk = payload[fd.offset:fd.offset + fd.length]
    return decoders[fd.kind](chunk)
