"""
CSV reader for show import files.

First row is the header row; every following non-empty line is one show
candidate, including rows made only of delimiters. Line numbers are kept so
validation messages can point at the line a user sees in a spreadsheet.
"""

import csv
import io
from dataclasses import dataclass, field
from typing import Optional

import structlog

from showdesk.config import settings
from showdesk.pipeline.errors import CsvParseError
from showdesk.pipeline.header_map import unknown_headers

logger = structlog.get_logger(__name__)


@dataclass
class CsvRow:
    row_number: int          # 1-based among data rows
    line_number: int         # 1-based in the file, header is line 1
    cells: dict[str, str] = field(default_factory=dict)


@dataclass
class CsvTable:
    headers: list[str]
    rows: list[CsvRow]

    @property
    def ignored_headers(self) -> list[str]:
        return unknown_headers(h for h in self.headers if h)


def decode_upload(data: bytes) -> str:
    """Decode UTF-8 (with or without BOM)."""
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise CsvParseError(f"File is not valid UTF-8 text (byte {e.start}).") from e


def read_csv(data: bytes, max_rows: Optional[int] = None) -> CsvTable:
    """
    Parse raw upload bytes into a header list and header-keyed rows.
    Raises CsvParseError on structural problems.
    """
    text = decode_upload(data)
    if not text.strip():
        raise CsvParseError("File is empty.")

    if max_rows is None:
        max_rows = settings.MAX_IMPORT_ROWS
    reader = csv.reader(io.StringIO(text, newline=""), strict=True)

    try:
        headers = next(reader)
    except StopIteration:
        raise CsvParseError("File has no header row.")
    except csv.Error as e:
        raise CsvParseError(f"Error parsing CSV header: {e}") from e

    headers = [h.strip() for h in headers]
    if not any(headers):
        raise CsvParseError("File has no header row.")

    table = CsvTable(headers=headers, rows=[])
    if table.ignored_headers:
        logger.info("csv_headers_ignored", headers=table.ignored_headers)

    rows = table.rows
    try:
        while True:
            line_number = reader.line_num + 1
            cells = next(reader, None)
            if cells is None:
                break
            # Only truly empty lines are skipped; delimiter-only rows still validate
            if not cells or cells == [""]:
                continue
            if len(cells) > len(headers) and any(c.strip() for c in cells[len(headers):]):
                raise CsvParseError(
                    f"Error parsing CSV: line {line_number} has {len(cells)} fields, "
                    f"expected {len(headers)}."
                )
            row = CsvRow(row_number=len(rows) + 1, line_number=line_number)
            for header, cell in zip(headers, cells):
                if header:
                    row.cells[header] = cell
            rows.append(row)
            if len(rows) > max_rows:
                raise CsvParseError(f"File has more than {max_rows} rows.")
    except csv.Error as e:
        raise CsvParseError(f"Error parsing CSV: line {reader.line_num}: {e}") from e

    logger.info("csv_parsed", rows=len(rows), headers=len(headers))
    return table
