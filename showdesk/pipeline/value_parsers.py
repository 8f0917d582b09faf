"""
Cell-level parsers for CSV import values.

Handles the conventions people actually type into the template:
- $5,000.00 / 5000 / 75.5% for numbers
- Yes / No / true / false for flags
- 2024-01-15 / 01/15/2024 / 1-15-24 / 12,31,23 for dates (US month-first)
"""

import math
import re
from datetime import date
from typing import Optional

from dateutil import parser as dateutil_parser
from pydantic import BaseModel

from showdesk.models.enums import GENRES

TRUE_WORDS = ("yes", "true")
FALSE_WORDS = ("no", "false")

GENDER_SPLIT_PATTERN = re.compile(r"^\d{1,3}/\d{1,3}$")

_GENRE_LOOKUP = {g.lower(): g for g in GENRES}


# ─── Numbers ─────────────────────────────────────────────────

def parse_number(raw: str) -> Optional[float]:
    """
    Parse a finite number. Returns None if the text is not one.
    Tolerates a leading '$', thousands commas and a trailing '%'.
    """
    s = raw.strip()
    if s.startswith("$"):
        s = s[1:]
    if s.endswith("%"):
        s = s[:-1]
    s = s.replace(",", "").replace(" ", "")
    if not s:
        return None
    try:
        value = float(s)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_whole_number(raw: str) -> Optional[int]:
    """Parse an integer-valued number ('30', '30.0'). None otherwise."""
    value = parse_number(raw)
    if value is None or not value.is_integer():
        return None
    return int(value)


# ─── Flags ───────────────────────────────────────────────────

def parse_yes_no(raw: Optional[str], default: bool = False) -> bool:
    """
    Yes/No flag. With default=False only 'yes'/'true' give True.
    With default=True only 'no'/'false' give False.
    """
    if raw is None:
        return default
    s = raw.strip().lower()
    if default:
        return s not in FALSE_WORDS
    return s in TRUE_WORDS


def format_yes_no(value: bool) -> str:
    return "Yes" if value else "No"


# ─── Text choices ────────────────────────────────────────────

def coerce_genre(raw: str) -> Optional[str]:
    """Map any casing of a predefined genre to its canonical spelling."""
    return _GENRE_LOOKUP.get(raw.strip().lower())


def is_gender_split(raw: str) -> bool:
    """'60/40' style male/female split."""
    return bool(GENDER_SPLIT_PATTERN.match(raw.strip()))


# ─── Dates ───────────────────────────────────────────────────

class DateParseResult(BaseModel):
    parsed_date: Optional[date] = None
    raw_text: str
    format_detected: str


DATE_FORMATS = [
    (re.compile(r"^(\d{4})\s*[-/.]\s*(\d{1,2})\s*[-/.]\s*(\d{1,2})$"), "YYYY-MM-DD"),
    (re.compile(r"^(\d{1,2})\s*[-/.,]\s*(\d{1,2})\s*[-/.,]\s*(\d{4})$"), "MM/DD/YYYY"),
    (re.compile(r"^(\d{1,2})\s*[-/.,]\s*(\d{1,2})\s*[-/.,]\s*(\d{2})$"), "MM/DD/YY"),
]


def expand_two_digit_year(yy: int) -> int:
    """00-68 -> 2000-2068, 69-99 -> 1969-1999."""
    return 2000 + yy if yy <= 68 else 1900 + yy


def parse_start_date(raw: str) -> DateParseResult:
    """
    Parse a show start date. Numeric forms are read month-first.
    Anything else goes through dateutil; unparseable text yields parsed_date=None.
    """
    s = raw.strip()

    for pattern, format_name in DATE_FORMATS:
        m = pattern.match(s)
        if not m:
            continue
        a, b, c = (int(g) for g in m.groups())
        try:
            if format_name == "YYYY-MM-DD":
                parsed = date(a, b, c)
            elif format_name == "MM/DD/YYYY":
                parsed = date(c, a, b)
            else:
                parsed = date(expand_two_digit_year(c), a, b)
        except ValueError:
            return DateParseResult(raw_text=raw, format_detected=format_name)
        return DateParseResult(parsed_date=parsed, raw_text=raw, format_detected=format_name)

    # Named months and other free-form text
    if re.search(r"[a-zA-Z]{3,}", s) and re.search(r"\d{4}", s):
        try:
            parsed = dateutil_parser.parse(s, dayfirst=False).date()
            return DateParseResult(parsed_date=parsed, raw_text=raw, format_detected="FREEFORM")
        except (ValueError, OverflowError):
            pass

    return DateParseResult(raw_text=raw, format_detected="UNKNOWN")
