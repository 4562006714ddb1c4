"""Header, field descriptor, record and table dataclasses for dBASE parsing."""
from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Optional

from dbase3.dbf.constants import VERSION_DBASE3_MEMO
from dbase3.dbf.enums import FIELD_TYPE_NAMES, VERSION_NAMES, lookup_enum


class FieldType(Enum):
    """How a field's bytes are decoded."""
    CHARACTER = "C"
    NUMERIC = "N"
    MEMO = "M"
    RAW = None          # Any other type code, passed through as bytes

    @classmethod
    def from_code(cls, code: str) -> FieldType:
        for member in (cls.CHARACTER, cls.NUMERIC, cls.MEMO):
            if member.value == code:
                return member
        return cls.RAW


@dataclass(frozen=True, slots=True)
class Header:
    """File-level metadata from the 32-byte header prefix."""
    version: int                    # Version byte (0x03 / 0x83)
    last_update: Optional[datetime.date]    # None when the stored date is unset or impossible
    record_count: int
    header_length: int              # Offset of the first record
    record_length: int              # Includes the deletion flag byte
    last_update_raw: tuple[int, int, int] = (0, 0, 0)   # yy, mm, dd as stored

    @property
    def has_memo(self) -> bool:
        return self.version == VERSION_DBASE3_MEMO

    @property
    def version_name(self) -> str:
        return VERSION_NAMES.get(self.version, f"0x{self.version:02X}")


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """One column of the table schema."""
    name: str
    field_type: str                 # Single-character type code
    length: int
    precision: int
    work_area_id: int = 0
    flags: int = 0
    offset: Optional[int] = None    # Position in the record payload, set by calc_offsets

    @property
    def kind(self) -> FieldType:
        return FieldType.from_code(self.field_type)

    @property
    def type_name(self) -> str:
        return lookup_enum(FIELD_TYPE_NAMES, self.field_type)


@dataclass(frozen=True, slots=True)
class Record:
    """A decoded row: one value per field, in schema order."""
    values: list[Any]
    deleted: bool = False

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.values)

    def __getitem__(self, index: int) -> Any:
        return self.values[index]


@dataclass(frozen=True, slots=True)
class Schema:
    """Header and field descriptors, without record data."""
    header: Header
    fields: list[FieldDescriptor] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class Table:
    """A fully decoded table: header, schema and records."""
    header: Header
    fields: list[FieldDescriptor] = field(default_factory=list)
    records: list[Any] = field(default_factory=list)

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> Optional[FieldDescriptor]:
        """Get a field descriptor by name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None
