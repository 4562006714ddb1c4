"""Export a decoded table as JSON."""
from __future__ import annotations

import datetime
import json
from decimal import Decimal
from typing import Any

from dbase3.dbf.reader import enrich_record
from dbase3.dbf.records import Table


def _json_value(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    if isinstance(value, (datetime.date, Decimal)):
        return str(value)
    return value


def export_json(table: Table, named: bool = True) -> str:
    """Export header, fields and records as a JSON string."""
    h = table.header
    data = {
        "header": {
            "version": h.version,
            "last_update": h.last_update.isoformat() if h.last_update else None,
            "last_update_raw": list(h.last_update_raw),
            "record_count": h.record_count,
            "header_length": h.header_length,
            "record_length": h.record_length,
        },
        "fields": [
            {
                "name": fd.name,
                "type": fd.field_type,
                "length": fd.length,
                "precision": fd.precision,
                "offset": fd.offset,
            }
            for fd in table.fields
        ],
    }

    records = []
    for rec in table.records:
        if named:
            row = rec if isinstance(rec, dict) else enrich_record(table.fields, rec)
            records.append({k: _json_value(v) for k, v in row.items()})
        else:
            values = rec.values() if isinstance(rec, dict) else rec
            records.append([_json_value(v) for v in values])
    data["records"] = records

    return json.dumps(data, indent=2)
