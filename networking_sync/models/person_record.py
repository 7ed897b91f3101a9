from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from enum import Enum

"""PersonRecord domain model.

A PersonRecord is the normalized unit of identity and merge. It is built by
the record normalizer from one sheet row and never mutated afterwards; the
deduplicator and merger only select among records, they do not rewrite them.
"""

__all__ = [
    "MemberStatus",
    "PersonRecord",
]


class MemberStatus(Enum):
    """Membership classification derived from the status / graduation columns."""
    CURRENT = "current"
    ALUMNI = "alumni"


@dataclass(frozen=True)
class PersonRecord:
    """Normalized person row.

    Text attributes are trimmed strings; ``""`` means the column was absent or
    the cell empty. ``email`` is lower-cased and is the sole identity key.
    """
    email: str  # identity key (trimmed, lower-cased)
    submission_date: datetime  # timezone-aware
    source_row_number: int  # 1-based sheet row, header = 1 (traceability only)
    current_status: MemberStatus = MemberStatus.CURRENT
    name: str = ""
    company: str = ""
    position: str = ""
    location: str = ""
    linkedin: str = ""
    github: str = ""
    graduation_year: str = ""
    status: str = ""  # raw status cell text
    personal_email: str = ""
    phone: str = ""
    major: str = ""
    minor: str = ""
    college: str = ""
    school_year: str = ""
    portfolio: str = ""
    semester: str = ""
    duration: str = ""
    company_rating: str = ""
    role_rating: str = ""
    job_search_method: str = ""
    industry: str = ""
    department: str = ""
    grad_year_updated: str = ""

    def cell_value(self, attribute: str) -> str:
        """Return an attribute as sheet cell text."""
        value = getattr(self, attribute)
        if isinstance(value, MemberStatus):
            return value.value
        if isinstance(value, datetime):
            return value.isoformat()
        return str(value)

    @classmethod
    def text_attributes(cls) -> tuple[str, ...]:
        """Names of the plain string attributes (everything except derived fields)."""
        derived = {"submission_date", "source_row_number", "current_status"}
        return tuple(f.name for f in fields(cls) if f.name not in derived)
