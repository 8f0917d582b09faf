"""
CSV header mapping: human-readable template headers <-> ShowRecord fields.

The table is the single source of truth for the import template, the export
column order, and the header names used in validation messages.
Unknown headers are ignored so older and newer templates both import.
"""

from typing import Iterable, Mapping, Optional


# Ordered: this is the template / export column order.
HEADER_FIELDS: list[tuple[str, str]] = [
    # ── Core show information ──
    ("Show Name", "title"),
    ("Show Type", "show_type"),
    ("Format", "media_type"),
    ("Ranking Category", "ranking_category"),
    ("Subnetwork Name", "subnetwork_id"),
    ("Is Original Content", "is_original"),
    ("Is Rate Card Show", "rate_card"),
    ("Is Tentpole Show", "tentpole"),
    # ── Business & relationship ──
    ("Relationship", "relationship_level"),
    ("Start Date", "start_date"),
    ("Minimum Guarantee", "minimum_guarantee"),
    ("Ownership by Evergreen (%)", "evergreen_ownership_pct"),
    ("Cadence", "cadence"),
    # ── Financials ──
    ("Latest CPM", "latest_cpm_usd"),
    ("Revenue 2023", "revenue_2023"),
    ("Revenue 2024", "revenue_2024"),
    ("Revenue 2025", "revenue_2025"),
    ("Has Sponsorship Revenue", "has_sponsorship_revenue"),
    ("Has Non Evergreen Revenue", "has_non_evergreen_revenue"),
    ("Requires Partner Ledger Access", "requires_partner_access"),
    ("Branded Revenue", "has_branded_revenue"),
    ("Marketing Revenue", "has_marketing_revenue"),
    ("Web Management Revenue", "has_web_mgmt_revenue"),
    # ── Contract splits ──
    ("Side Bonus (%)", "side_bonus_percent"),
    ("YouTube Ads (%)", "youtube_ads_percent"),
    ("Subscriptions (%)", "subscriptions_percent"),
    ("Standard Ads (%)", "standard_ads_percent"),
    ("Sponsorship Ad FP - Lead (%)", "sponsorship_ad_fp_lead_percent"),
    ("Sponsorship Ad - Partner Lead (%)", "sponsorship_ad_partner_lead_percent"),
    ("Sponsorship Ad - Partner Sold (%)", "sponsorship_ad_partner_sold_percent"),
    ("Programmatic Ads/Span (%)", "programmatic_ads_span_percent"),
    ("Merchandise (%)", "merchandise_percent"),
    ("Branded Revenue (%)", "branded_revenue_percent"),
    ("Marketing Services Revenue (%)", "marketing_services_revenue_percent"),
    # ── Hands-off splits ──
    ("Direct Customer - Hands Off (%)", "direct_customer_hands_off_percent"),
    ("YouTube - Hands Off (%)", "youtube_hands_off_percent"),
    ("Subscription - Hands Off (%)", "subscription_hands_off_percent"),
    # ── Content details ──
    ("Genre", "genre_name"),
    ("Shows per Year", "shows_per_year"),
    ("Ad Slots", "ad_slots"),
    ("Average Length (Minutes)", "avg_show_length_mins"),
    ("Primary Contact (Host)", "show_host_contact"),
    ("Primary Contact (Show)", "show_primary_contact"),
    ("Evergreen Production Staff", "evergreen_production_staff_name"),
    # ── Demographics ──
    ("Age Demographic", "age_demographic"),
    ("Gender Demographic (M/F)", "gender"),
    ("Region Demographic", "region"),
    ("Primary Education Demographic", "primary_education"),
    ("Secondary Education Demographic", "secondary_education"),
    ("Is Active", "is_active"),
    ("Is Undersized", "is_undersized"),
    # ── QuickBooks Online ──
    ("QBO Show Name", "qbo_show_name"),
    ("QBO Show ID", "qbo_show_id"),
]

HEADER_TO_FIELD: dict[str, str] = dict(HEADER_FIELDS)
FIELD_TO_HEADER: dict[str, str] = {field: header for header, field in HEADER_FIELDS}
TEMPLATE_HEADERS: list[str] = [header for header, _ in HEADER_FIELDS]


def header_for(field: str) -> str:
    """User-facing header for a canonical field (falls back to the field name)."""
    return FIELD_TO_HEADER.get(field, field)


def field_for(header: str) -> Optional[str]:
    """Canonical field for an exact header string, or None when unknown."""
    return HEADER_TO_FIELD.get(header)


def unknown_headers(headers: Iterable[str]) -> list[str]:
    """Headers present in a file that the table does not know."""
    return [h for h in headers if h not in HEADER_TO_FIELD]


def map_row(raw: Mapping[str, Optional[str]]) -> dict[str, str]:
    """
    Translate {header: cell} into {field: cell}.
    Unknown headers are dropped; absent headers leave the field absent.
    """
    mapped: dict[str, str] = {}
    for header, cell in raw.items():
        field = HEADER_TO_FIELD.get(header)
        if field is None:
            continue
        mapped[field] = "" if cell is None else cell
    return mapped
