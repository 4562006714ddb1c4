"""Exceptions raised while decoding dBASE tables."""
from __future__ import annotations


class DbaseError(ValueError):
    """Base class for every decode failure."""


class TruncatedInputError(DbaseError):
    """The stream ended before a fixed-size read completed."""

    def __init__(self, expected: int, got: int, what: str = "bytes"):
        self.expected = expected
        self.got = got
        super().__init__(f"Truncated input: expected {expected} {what}, got {got}")


class MalformedHeaderError(DbaseError):
    """Header or schema bytes are inconsistent or unsupported."""


class TruncatedHeaderError(TruncatedInputError, MalformedHeaderError):
    """The 32-byte header prefix itself is incomplete."""


class SchemaRecordMismatchError(DbaseError):
    """A record's value count differs from the field count."""

    def __init__(self, field_count: int, value_count: int):
        self.field_count = field_count
        self.value_count = value_count
        super().__init__(
            f"Record has {value_count} values but the schema declares {field_count} fields"
        )


class ValueCoercionError(DbaseError):
    """A decoded field value could not be converted to a Python value."""

    def __init__(self, field_name: str, field_type: str, value):
        self.field_name = field_name
        self.field_type = field_type
        self.value = value
        super().__init__(f"Cannot coerce {field_type} field {field_name!r}: {value!r}")
