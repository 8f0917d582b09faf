"""
CSV template and export rendering.

Both use the import header order, so an exported file can be edited and
imported again without touching the header row.
"""

import csv
import io
from datetime import date
from enum import Enum
from typing import Iterable, Optional

from showdesk.pipeline.header_map import HEADER_FIELDS, TEMPLATE_HEADERS
from showdesk.pipeline.value_parsers import format_yes_no
from showdesk.schemas.shows import ShowRecord

TEMPLATE_FILE_NAME = "shows_import_template.csv"


def export_file_name(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"evergreen-shows-{today.isoformat()}.csv"


def format_cell(value) -> str:
    """Render one field value the way the importer reads it back."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return format_yes_no(value)
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    return str(value)


def _write(rows: Iterable[list[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL)
    writer.writerows(rows)
    return buffer.getvalue()


def render_template() -> str:
    """Header row only."""
    return _write([TEMPLATE_HEADERS])


def export_shows(records: Iterable[ShowRecord]) -> str:
    """Header row plus one row per record."""
    rows = [TEMPLATE_HEADERS]
    for record in records:
        rows.append([format_cell(getattr(record, field, None)) for _, field in HEADER_FIELDS])
    return _write(rows)
