"""dBASE III (.dbf) table parser.

Layout of a table file:
  header (32 bytes):  version(1) + last update yy/mm/dd(3) + record count(4)
                      + header length(2) + reserved(20) + record length(2)
  descriptors:        32 bytes each, ended by a 0x0D terminator byte
  records:            start at header length, record length bytes each,
                      a deletion flag byte followed by the field values
"""
from __future__ import annotations

import datetime
import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from dbase3.dbf.constants import (
    BASE_YEAR,
    DESCRIPTOR_SIZE,
    FIELD_NAME_SIZE,
    FLAGS_RESERVED,
    HEADER_RESERVED,
    HEADER_SIZE,
    PRECISION_RESERVED,
    RECORD_DELETED,
    SUPPORTED_VERSIONS,
    TERMINATOR,
    TEXT_SIGNED,
    TYPE_RESERVED,
    WORK_AREA_RESERVED,
)
from dbase3.dbf.decoders import build_decoders, decode_field
from dbase3.dbf.errors import (
    MalformedHeaderError,
    SchemaRecordMismatchError,
    TruncatedHeaderError,
    TruncatedInputError,
)
from dbase3.dbf.records import FieldDescriptor, FieldType, Header, Record, Schema, Table
from dbase3.dbf.stream import ByteReader, le_u16, le_u32

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


# Header

def decode_last_update(raw: tuple[int, int, int]) -> Optional[datetime.date]:
    """Turn yy/mm/dd bytes into a date; None when unset or impossible."""
    year, month, day = raw
    try:
        return datetime.date(BASE_YEAR + year, month, day)
    except ValueError:
        logger.warning("Ignoring invalid last update date %d/%d/%d", year, month, day)
        return None


def parse_metadata(reader: ByteReader) -> Header:
    """Parse the 32-byte header prefix. Leaves the cursor on the first descriptor."""
    try:
        version = reader.read_byte()
        if version not in SUPPORTED_VERSIONS:
            raise MalformedHeaderError(f"Unsupported dBASE version byte 0x{version:02X}")
        raw_date = tuple(reader.read_bytes(3))
        record_count = le_u32(reader.read_bytes(4))
        header_length = le_u16(reader.read_bytes(2))
        # dBASE III writers keep the record length at offset 10 and leave
        # offset 30 zeroed; prefer offset 30 when it is set.
        record_length_10 = le_u16(reader.read_bytes(2, HEADER_RESERVED - 2))
        record_length = le_u16(reader.read_bytes(2)) or record_length_10
    except TruncatedInputError as e:
        raise TruncatedHeaderError(e.expected, e.got, "header bytes") from e

    header = Header(
        version=version,
        last_update=decode_last_update(raw_date),
        record_count=record_count,
        header_length=header_length,
        record_length=record_length,
        last_update_raw=raw_date,
    )
    logger.debug("Header: %s", header)
    return header


# Field descriptors

def parse_field_name(reader: ByteReader) -> str:
    """Read the 11-byte field name, dropping space padding and NUL fill."""
    raw = reader.read_bytes(FIELD_NAME_SIZE)
    raw = raw.split(b"\x00", 1)[0]
    return raw.replace(b" ", b"").decode("ascii", errors="replace")


def parse_field(reader: ByteReader) -> FieldDescriptor:
    """Parse one 32-byte field descriptor.

    The skipped runs hold in-memory field addresses and settings used by
    other dBASE versions.
    """
    return FieldDescriptor(
        name=parse_field_name(reader),
        field_type=chr(reader.read_byte(TYPE_RESERVED)),
        length=reader.read_byte(),
        precision=reader.read_byte(PRECISION_RESERVED),
        work_area_id=reader.read_byte(WORK_AREA_RESERVED),
        flags=reader.read_byte(FLAGS_RESERVED),
    )


def parse_fields(reader: ByteReader) -> list[FieldDescriptor]:
    """Parse descriptors up to and including the 0x0D terminator."""
    fields = []
    while not reader.peek_equals(TERMINATOR):
        fd = parse_field(reader)
        if fd.kind is FieldType.RAW:
            logger.debug("Field %s has type %r, values pass through as bytes", fd.name, fd.field_type)
        fields.append(fd)
    reader.read_byte()
    logger.debug("Parsed %d field descriptors", len(fields))
    return fields


def calc_offsets(fields: Iterable[FieldDescriptor]) -> list[FieldDescriptor]:
    """Assign each field its byte offset within the record payload."""
    result = []
    offset = 0
    for fd in fields:
        result.append(replace(fd, offset=offset))
        offset += fd.length
    return result


def _check_layout(header: Header, fields: list[FieldDescriptor]) -> None:
    min_header = HEADER_SIZE + DESCRIPTOR_SIZE * len(fields) + 1
    if header.header_length < min_header:
        raise MalformedHeaderError(
            f"Header length {header.header_length} too small for {len(fields)} fields "
            f"(need at least {min_header})"
        )
    min_record = 1 + sum(fd.length for fd in fields)
    if header.record_length < min_record:
        raise MalformedHeaderError(
            f"Record length {header.record_length} too small for field widths "
            f"(need at least {min_record})"
        )


def parse_schema(path: PathLike) -> Schema:
    """Parse the header and field descriptors of a dBASE III file."""
    with open(path, "rb") as f:
        reader = ByteReader(f)
        header = parse_metadata(reader)
        fields = parse_fields(reader)
    _check_layout(header, fields)
    return Schema(header=header, fields=calc_offsets(fields))


# Records

def parse_records(path: PathLike, fields: Sequence[FieldDescriptor], header: Header,
                  text_decoding: str = TEXT_SIGNED) -> list[Record]:
    """Decode header.record_count records using fields with offsets assigned."""
    if any(fd.offset is None for fd in fields):
        raise ValueError("Field offsets not assigned; run calc_offsets first")

    decoders = build_decoders(text_decoding)
    file_size = Path(path).stat().st_size
    if file_size < header.header_length:
        raise TruncatedInputError(header.header_length, file_size, "header bytes")

    records = []
    with open(path, "rb") as f:
        reader = ByteReader(f)
        reader.seek(header.header_length)
        for _ in range(header.record_count):
            block = reader.read_bytes(header.record_length)
            payload = block[1:]
            records.append(Record(
                values=[decode_field(payload, fd, decoders) for fd in fields],
                deleted=block[0] == RECORD_DELETED,
            ))

    logger.debug("Decoded %d records of %d bytes", len(records), header.record_length)
    return records


def parse_table(path: PathLike, *, text_decoding: str = TEXT_SIGNED,
                skip_deleted: bool = False) -> Table:
    """Parse a dBASE III file into header, fields and records.

    Every declared record is returned unless skip_deleted is set, in which
    case records flagged with '*' are dropped after decoding.
    """
    schema = parse_schema(path)
    records = parse_records(path, schema.fields, schema.header, text_decoding)
    if skip_deleted:
        records = [r for r in records if not r.deleted]
    return Table(header=schema.header, fields=schema.fields, records=records)


# Enrichment

def enrich_record(fields: Sequence[FieldDescriptor], record: Iterable[Any]) -> dict[str, Any]:
    """Key a record's values by field name.

    An already keyed record is re-keyed in schema order; a missing or
    extra name is a mismatch.
    """
    if isinstance(record, Mapping):
        if set(record) != {fd.name for fd in fields}:
            raise SchemaRecordMismatchError(len(fields), len(record))
        return {fd.name: record[fd.name] for fd in fields}
    values = list(record)
    if len(values) != len(fields):
        raise SchemaRecordMismatchError(len(fields), len(values))
    return {fd.name: value for fd, value in zip(fields, values)}


def attach_field_names(table: Table) -> Table:
    """Return a copy of the table whose records are dicts keyed by field name."""
    return Table(
        header=table.header,
        fields=table.fields,
        records=[enrich_record(table.fields, rec) for rec in table.records],
    )


def main():
    """Quick test: parse a table and print its schema and first rows."""
    import sys
    if len(sys.argv) < 2:
        print("Usage: python -m dbase3.dbf.reader <path/to/table.dbf>")
        sys.exit(1)

    table = parse_table(sys.argv[1])
    h = table.header
    print(f"{h.version_name}, updated {h.last_update}, {h.record_count:,} records\n")
    for fd in table.fields:
        print(f"  {fd.name:<11} {fd.field_type} {fd.length:>4} {fd.precision:>3}  @{fd.offset}")

    print()
    for row in attach_field_names(table).records[:10]:
        print(f"  {row}")


if __name__ == "__main__":
    main()
