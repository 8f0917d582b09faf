"""
Row parser & validator: one mapped CSV row -> ShowRecord or error list.

Rules:
- 'Show Name' is required; a row without it yields exactly one error.
- Choice fields are case-insensitive and stored in canonical casing.
- Numeric fields must be finite; percentage fields must lie in [0, 100].
- Yes/No flags default to No, except 'Is Active' which defaults to Yes.
Errors name the template header, never the internal field.
"""

from typing import Optional

import structlog
from pydantic import BaseModel, ValidationError

from showdesk.models.enums import (
    AgeDemographic,
    Cadence,
    MediaType,
    Region,
    RelationshipLevel,
    ShowType,
    coerce_choice,
)
from showdesk.pipeline.csv_reader import CsvRow
from showdesk.pipeline.header_map import header_for, map_row
from showdesk.pipeline.value_parsers import (
    coerce_genre,
    is_gender_split,
    parse_number,
    parse_start_date,
    parse_whole_number,
    parse_yes_no,
)
from showdesk.schemas.shows import ShowRecord, coerce_ranking

logger = structlog.get_logger(__name__)


CHOICE_RULES: list[tuple[str, type, str]] = [
    ("media_type", MediaType, "video, audio, both"),
    ("relationship_level", RelationshipLevel, "strong, medium, weak"),
    ("show_type", ShowType, "Original, Branded, Partner"),
    ("cadence", Cadence, "Daily, Weekly, Biweekly, Monthly, Ad hoc"),
    ("region", Region, "Urban, Rural, Both"),
]

NUMERIC_FIELDS = [
    "minimum_guarantee",
    "evergreen_ownership_pct",
    "latest_cpm_usd",
    "revenue_2023",
    "revenue_2024",
    "revenue_2025",
    "shows_per_year",
    "ad_slots",
    "avg_show_length_mins",
    "side_bonus_percent",
    "youtube_ads_percent",
    "subscriptions_percent",
    "standard_ads_percent",
    "sponsorship_ad_fp_lead_percent",
    "sponsorship_ad_partner_lead_percent",
    "sponsorship_ad_partner_sold_percent",
    "programmatic_ads_span_percent",
    "merchandise_percent",
    "branded_revenue_percent",
    "marketing_services_revenue_percent",
    "direct_customer_hands_off_percent",
    "youtube_hands_off_percent",
    "subscription_hands_off_percent",
    "qbo_show_id",
]

INTEGER_FIELDS = {"shows_per_year", "ad_slots", "avg_show_length_mins", "qbo_show_id"}

BOOLEAN_FIELDS = [
    "is_original",
    "rate_card",
    "tentpole",
    "has_sponsorship_revenue",
    "has_non_evergreen_revenue",
    "requires_partner_access",
    "has_branded_revenue",
    "has_marketing_revenue",
    "has_web_mgmt_revenue",
    "is_undersized",
]

TEXT_FIELDS = [
    "subnetwork_id",
    "show_host_contact",
    "show_primary_contact",
    "evergreen_production_staff_name",
    "primary_education",
    "secondary_education",
    "qbo_show_name",
]

AGE_DEMOGRAPHICS = ", ".join(a.value for a in AgeDemographic)


def is_percent_field(field: str) -> bool:
    return "percent" in field or field == "evergreen_ownership_pct"


class RowError(BaseModel):
    """A single validation failure, tied to a source row."""
    row_number: int
    line_number: int
    header: Optional[str] = None
    message: str

    def __str__(self) -> str:
        return f"Row {self.row_number} (line {self.line_number}): {self.message}"


class RowParseResult(BaseModel):
    row_number: int
    line_number: int
    record: Optional[ShowRecord] = None
    errors: list[RowError] = []

    @property
    def ok(self) -> bool:
        return self.record is not None and not self.errors


class ParsedFile(BaseModel):
    """All rows of one file: the valid records and every error collected."""
    records: list[ShowRecord] = []
    row_numbers: list[int] = []
    errors: list[RowError] = []

    @property
    def error_messages(self) -> list[str]:
        return [str(e) for e in self.errors]


def _present(mapped: dict[str, str], field: str) -> Optional[str]:
    """Stripped cell text, or None when the cell is absent or blank."""
    raw = mapped.get(field)
    if raw is None:
        return None
    raw = raw.strip()
    return raw or None


def parse_row(mapped: dict[str, str], row_number: int, line_number: int) -> RowParseResult:
    """
    Validate and type one mapped row ({field: raw cell}).
    A row with any error produces no record.
    """
    errors: list[RowError] = []

    def fail(field: str, message: str) -> None:
        errors.append(RowError(
            row_number=row_number,
            line_number=line_number,
            header=header_for(field),
            message=message,
        ))

    title = _present(mapped, "title")
    if title is None:
        fail("title", f"Missing required field '{header_for('title')}'")
        return RowParseResult(row_number=row_number, line_number=line_number, errors=errors)

    values: dict = {"title": title}

    # ── Enumerations ──
    for field, enum_cls, allowed in CHOICE_RULES:
        raw = _present(mapped, field)
        if raw is None:
            continue
        member = coerce_choice(enum_cls, raw)
        if member is None:
            fail(field, f"Invalid value for '{header_for(field)}'. Must be one of: {allowed}.")
        else:
            values[field] = member

    raw = _present(mapped, "ranking_category")
    if raw is not None:
        ranking = coerce_ranking(raw)
        if ranking is None:
            fail("ranking_category",
                 f"Invalid value for '{header_for('ranking_category')}'. "
                 f"Must be 1, 2, 3, 4, 5 or Level 1-5.")
        else:
            values["ranking_category"] = ranking

    raw = _present(mapped, "age_demographic")
    if raw is not None:
        age = coerce_choice(AgeDemographic, raw)
        if age is None:
            fail("age_demographic",
                 f"Invalid value for '{header_for('age_demographic')}'. "
                 f"Must be one of: {AGE_DEMOGRAPHICS}.")
        else:
            values["age_demographic"] = age

    raw = _present(mapped, "genre_name")
    if raw is not None:
        genre = coerce_genre(raw)
        if genre is None:
            fail("genre_name", f"Invalid value for '{header_for('genre_name')}'. "
                               f"Must be one of the predefined genres.")
        else:
            values["genre_name"] = genre

    raw = _present(mapped, "gender")
    if raw is not None:
        if not is_gender_split(raw):
            fail("gender", f"Invalid value for '{header_for('gender')}'. "
                           f"Format must be MM/FF (e.g. 60/40).")
        else:
            values["gender"] = raw

    raw = _present(mapped, "start_date")
    if raw is not None:
        result = parse_start_date(raw)
        if result.parsed_date is None:
            fail("start_date", f"Invalid date for '{header_for('start_date')}'. "
                               f"Use YYYY-MM-DD or MM/DD/YYYY.")
        else:
            values["start_date"] = result.parsed_date

    # ── Numbers ──
    for field in NUMERIC_FIELDS:
        raw = _present(mapped, field)
        if raw is None:
            continue
        header = header_for(field)
        if field in INTEGER_FIELDS:
            number = parse_whole_number(raw)
            if number is None:
                fail(field, f"Invalid whole number for '{header}'.")
                continue
        else:
            number = parse_number(raw)
            if number is None:
                fail(field, f"Invalid number for '{header}'.")
                continue
        if is_percent_field(field) and not (0 <= number <= 100):
            fail(field, f"Value for '{header}' must be between 0 and 100.")
            continue
        values[field] = number

    # ── Flags ──
    for field in BOOLEAN_FIELDS:
        values[field] = parse_yes_no(mapped.get(field), default=False)
    values["is_active"] = parse_yes_no(mapped.get("is_active"), default=True)

    # ── Free text ──
    for field in TEXT_FIELDS:
        raw = _present(mapped, field)
        if raw is not None:
            values[field] = raw

    if errors:
        return RowParseResult(row_number=row_number, line_number=line_number, errors=errors)

    try:
        record = ShowRecord(**values)
    except ValidationError as e:
        for err in e.errors():
            field = str(err["loc"][0]) if err["loc"] else "title"
            fail(field, f"Invalid value for '{header_for(field)}': {err['msg']}.")
        return RowParseResult(row_number=row_number, line_number=line_number, errors=errors)

    return RowParseResult(row_number=row_number, line_number=line_number, record=record)


def parse_rows(rows: list[CsvRow]) -> ParsedFile:
    """
    Map and validate every row. Errors in one row never stop the next.
    The caller decides what to do with a non-empty error list.
    """
    parsed = ParsedFile()
    for row in rows:
        result = parse_row(map_row(row.cells), row.row_number, row.line_number)
        if result.ok:
            parsed.records.append(result.record)
            parsed.row_numbers.append(row.row_number)
        else:
            parsed.errors.extend(result.errors)

    if parsed.errors:
        logger.info(
            "rows_rejected",
            rows=len(rows),
            valid=len(parsed.records),
            errors=len(parsed.errors),
        )
    return parsed
