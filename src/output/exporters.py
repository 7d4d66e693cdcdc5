"""JSON and CSV export of metadata records."""

import csv
import io
import json
from collections.abc import Mapping
from typing import Any

JSON_INDENT = 2
CSV_HEADER = ("Field", "Value")


def format_value(value: Any) -> str:
    """Stringify a field value; integral floats print without ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def to_json(record: Mapping[str, Any]) -> str:
    """Pretty-print a record with 2-space indentation, keeping field order."""
    return json.dumps(dict(record), indent=JSON_INDENT, ensure_ascii=False)


def from_json(payload: str) -> dict[str, Any]:
    return json.loads(payload)


def to_csv(record: Mapping[str, Any]) -> str:
    """Render a record as a two-column ``Field,Value`` table.

    Every data cell is double-quoted and embedded quotes are doubled.
    """
    buf = io.StringIO()
    csv.writer(buf, lineterminator="\n").writerow(CSV_HEADER)
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for field_name, value in record.items():
        writer.writerow([field_name, format_value(value)])
    return buf.getvalue()


def from_csv(payload: str) -> dict[str, str]:
    """Read a ``Field,Value`` table back into a mapping of strings."""
    rows = csv.reader(io.StringIO(payload))
    header = next(rows, None)
    if header is None:
        return {}
    return {row[0]: row[1] for row in rows if len(row) >= 2}


def export(record: Mapping[str, Any], fmt: str = "json") -> str:
    """Export a record as ``json`` or ``csv``.

    Raises:
        ValueError: If the format is not supported.
    """
    if fmt == "json":
        return to_json(record)
    if fmt == "csv":
        return to_csv(record)
    raise ValueError(f"Unsupported export format: {fmt}")
