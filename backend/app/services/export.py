"""
CSV export of driver and vehicle collections.

The header comes from the keys of the first record, minus identity and
bookkeeping fields. Nested values are written as JSON; quoting follows
the csv module's minimal dialect.
"""

import csv
import io
import json
from datetime import date, datetime
from enum import Enum
from typing import Any, Iterable, Mapping

from pydantic import BaseModel

from backend.app.core.exceptions import ValidationError

DELIMITER = ","
LINE_TERMINATOR = "\n"
EXCLUDED_FIELDS = frozenset({"_id", "id", "__v", "createdAt", "updatedAt", "created_at", "updated_at"})


def _as_mapping(record: Any) -> Mapping:
    if isinstance(record, BaseModel):
        return record.model_dump(by_alias=True, mode="json")
    if isinstance(record, Mapping):
        return record
    raise TypeError(f"Cannot export record of type {type(record).__name__}")


def render_value(value: Any) -> str:
    """Render one cell's text before quoting. None is empty; nested structures become JSON."""
    if value is None:
        return ""
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, default=str)
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def export_csv(records: Iterable[Any]) -> str:
    """
    Render records as CSV text, one line per record and no trailing newline.

    Values containing the delimiter, a quote or a line break are quoted
    with internal quotes doubled.

    Raises:
        ValidationError: If there are no records to export
    """
    rows = [_as_mapping(record) for record in records]
    if not rows:
        raise ValidationError("No data to export")

    fields = [key for key in rows[0] if key not in EXCLUDED_FIELDS]

    output = io.StringIO()
    writer = csv.writer(output, delimiter=DELIMITER, lineterminator=LINE_TERMINATOR)
    writer.writerow(fields)
    for row in rows:
        writer.writerow([render_value(row.get(field)) for field in fields])

    return output.getvalue().removesuffix(LINE_TERMINATOR)
