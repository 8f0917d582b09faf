"""
Show schemas.
ShowRecord is the payload sent to the backend for create/update and the
unit produced by the CSV import pipeline. Show adds backend-owned fields.
"""

import re
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from showdesk.models.enums import (
    AgeDemographic,
    Cadence,
    MediaType,
    RankingCategory,
    Region,
    RelationshipLevel,
    ShowType,
    coerce_choice,
)

Percent = Optional[float]

CHOICE_FIELDS = {
    "show_type": ShowType,
    "media_type": MediaType,
    "relationship_level": RelationshipLevel,
    "cadence": Cadence,
    "region": Region,
}

RANKING_PATTERN = re.compile(r"(?:level\s*)?(\d+)", re.IGNORECASE)


def coerce_ranking(raw) -> Optional[RankingCategory]:
    """'3', 'Level 3', 'level3' -> RankingCategory.LEVEL_3; None when unresolvable."""
    if isinstance(raw, RankingCategory):
        return raw
    m = RANKING_PATTERN.search(str(raw).strip())
    if not m:
        return None
    try:
        return RankingCategory(str(int(m.group(1))))
    except ValueError:
        return None


class ShowRecord(BaseModel):
    """A show as created or updated through the backend."""

    # Identity / classification
    title: str
    show_type: Optional[ShowType] = None
    media_type: Optional[MediaType] = None
    ranking_category: Optional[RankingCategory] = None
    subnetwork_id: Optional[str] = None
    is_original: bool = False
    rate_card: bool = False
    tentpole: bool = False

    # Business terms
    relationship_level: Optional[RelationshipLevel] = None
    start_date: Optional[date] = None
    minimum_guarantee: Optional[float] = None
    evergreen_ownership_pct: Percent = Field(default=None, ge=0, le=100)
    cadence: Optional[Cadence] = None

    # Financials
    latest_cpm_usd: Optional[float] = None
    revenue_2023: Optional[float] = None
    revenue_2024: Optional[float] = None
    revenue_2025: Optional[float] = None
    has_sponsorship_revenue: bool = False
    has_non_evergreen_revenue: bool = False
    requires_partner_access: bool = False
    has_branded_revenue: bool = False
    has_marketing_revenue: bool = False
    has_web_mgmt_revenue: bool = False

    # Contract splits
    side_bonus_percent: Percent = Field(default=None, ge=0, le=100)
    youtube_ads_percent: Percent = Field(default=None, ge=0, le=100)
    subscriptions_percent: Percent = Field(default=None, ge=0, le=100)
    standard_ads_percent: Percent = Field(default=None, ge=0, le=100)
    sponsorship_ad_fp_lead_percent: Percent = Field(default=None, ge=0, le=100)
    sponsorship_ad_partner_lead_percent: Percent = Field(default=None, ge=0, le=100)
    sponsorship_ad_partner_sold_percent: Percent = Field(default=None, ge=0, le=100)
    programmatic_ads_span_percent: Percent = Field(default=None, ge=0, le=100)
    merchandise_percent: Percent = Field(default=None, ge=0, le=100)
    branded_revenue_percent: Percent = Field(default=None, ge=0, le=100)
    marketing_services_revenue_percent: Percent = Field(default=None, ge=0, le=100)

    # Hands-off splits
    direct_customer_hands_off_percent: Percent = Field(default=None, ge=0, le=100)
    youtube_hands_off_percent: Percent = Field(default=None, ge=0, le=100)
    subscription_hands_off_percent: Percent = Field(default=None, ge=0, le=100)

    # Content
    genre_name: Optional[str] = None
    shows_per_year: Optional[int] = None
    ad_slots: Optional[int] = None
    avg_show_length_mins: Optional[int] = None
    show_host_contact: Optional[str] = None
    show_primary_contact: Optional[str] = None
    evergreen_production_staff_name: Optional[str] = None

    # Demographics
    age_demographic: Optional[AgeDemographic] = None
    gender: Optional[str] = None
    region: Optional[Region] = None
    primary_education: Optional[str] = None
    secondary_education: Optional[str] = None
    is_active: bool = True
    is_undersized: bool = False

    # QuickBooks Online
    qbo_show_name: Optional[str] = None
    qbo_show_id: Optional[int] = None

    model_config = {"extra": "ignore"}

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be empty")
        return v

    @field_validator(
        "show_type", "media_type", "relationship_level", "cadence", "region",
        mode="before",
    )
    @classmethod
    def _normalise_choice(cls, v, info):
        if v is None or v == "":
            return None
        enum_cls = CHOICE_FIELDS[info.field_name]
        member = coerce_choice(enum_cls, v)
        return member if member is not None else v

    @field_validator("ranking_category", mode="before")
    @classmethod
    def _normalise_ranking(cls, v):
        if v is None or v == "":
            return None
        member = coerce_ranking(v)
        return member if member is not None else v

    @field_validator("start_date", mode="before")
    @classmethod
    def _trim_datetime(cls, v):
        # Backend may hand back full ISO datetimes
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, str) and "T" in v:
            return v.split("T", 1)[0]
        return v


class Show(ShowRecord):
    """A show as returned by the backend."""
    id: str
    is_archived: bool = False
    archived_at: Optional[datetime] = None
    archived_by: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, v):
        return str(v)


class BulkIdsRequest(BaseModel):
    show_ids: list[str] = Field(min_length=1)


class BulkOperationResult(BaseModel):
    """Per-item counts returned by the backend for bulk archive/delete."""
    successful: int = 0
    failed: int = 0
    errors: list[str] = []
    message: str = ""
