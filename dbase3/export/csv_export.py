"""Export a decoded table as CSV."""
from __future__ import annotations

import csv
import io

from dbase3.dbf.records import Table


def export_csv(table: Table, include_deleted_flag: bool = False) -> str:
    """Export records as CSV string, one column per field."""
    output = io.StringIO()
    writer = csv.writer(output)

    # Header
    names = table.field_names
    writer.writerow(["_deleted", *names] if include_deleted_flag else names)

    for rec in table.records:
        if isinstance(rec, dict):
            row = [rec[name] for name in names]
            deleted = False
        else:
            row = list(rec.values)
            deleted = rec.deleted
        row = [v.hex() if isinstance(v, (bytes, bytearray)) else v for v in row]
        if include_deleted_flag:
            row.insert(0, "*" if deleted else "")
        writer.writerow(row)

    return output.getvalue()
