"""
Enumerations shared by the show schemas and the import pipeline.
Values MUST match what the backend stores.
"""

from enum import Enum
from typing import Optional


class ShowType(str, Enum):
    ORIGINAL = "Original"
    BRANDED = "Branded"
    PARTNER = "Partner"


class MediaType(str, Enum):
    VIDEO = "video"
    AUDIO = "audio"
    BOTH = "both"


class RelationshipLevel(str, Enum):
    STRONG = "strong"
    MEDIUM = "medium"
    WEAK = "weak"


class RankingCategory(str, Enum):
    LEVEL_1 = "1"
    LEVEL_2 = "2"
    LEVEL_3 = "3"
    LEVEL_4 = "4"
    LEVEL_5 = "5"

    @property
    def display_text(self) -> str:
        return f"Level {self.value}"


class Cadence(str, Enum):
    DAILY = "Daily"
    WEEKLY = "Weekly"
    BIWEEKLY = "Biweekly"
    MONTHLY = "Monthly"
    AD_HOC = "Ad hoc"


class Region(str, Enum):
    URBAN = "Urban"
    RURAL = "Rural"
    BOTH = "Both"


class AgeDemographic(str, Enum):
    AGE_18_24 = "18-24"
    AGE_25_34 = "25-34"
    AGE_35_44 = "35-44"
    AGE_45_54 = "45-54"
    AGE_55_PLUS = "55+"


class ImportAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    SKIP = "skip"


class NoticeLevel(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class TitleSuggestion(str, Enum):
    """What the create/edit form offers when a title is already taken."""
    EDIT_EXISTING = "edit_existing"
    UNARCHIVE_AND_EDIT = "unarchive_and_edit"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


GENRES = [
    "History",
    "Human Resources",
    "Human Interest",
    "Fun & Nostalgia",
    "True Crime",
    "Financial",
    "News & Politics",
    "Movies",
    "Music",
    "Religious",
    "Health & Wellness",
    "Parenting",
    "Lifestyle",
    "Storytelling",
    "Literature",
    "Sports",
    "Pop Culture",
    "Arts",
    "Business",
    "Philosophy",
]


_CHOICE_ALIASES = {
    Cadence: {"adhoc": Cadence.AD_HOC, "ad-hoc": Cadence.AD_HOC},
}


def coerce_choice(enum_cls: type[Enum], raw) -> Optional[Enum]:
    """
    Case-insensitive lookup of an enum member by value.
    Returns None when nothing matches.
    """
    if isinstance(raw, enum_cls):
        return raw
    key = str(raw).strip().lower()
    for member in enum_cls:
        if member.value.lower() == key:
            return member
    return _CHOICE_ALIASES.get(enum_cls, {}).get(key)
