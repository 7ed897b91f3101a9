from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from ..errors import SchemaError

"""Schema mapper: locate canonical fields among free-form header labels.

Onboarding sheets are produced by forms whose column titles drift over time
("Email", "Email Address", "Personal_Email" ...). Each canonical field owns an
ordered tuple of aliases; a header matches an alias when its lower-cased text
*contains* the alias. Aliases are tried in priority order and, for each alias,
headers are scanned left to right. The first hit wins.

The policy is greedy: two canonical fields may resolve to the same column when
their aliases overlap (e.g. ``company`` also matches "Company Rating"). That is
accepted behaviour and is not corrected here.
"""

__all__ = [
    "CanonicalField",
    "FIELD_ALIASES",
    "ColumnMap",
    "SchemaError",
    "resolve",
    "resolve_columns",
    "require_email",
]


class CanonicalField(Enum):
    """Semantic person attributes. Values are PersonRecord attribute names."""
    EMAIL = "email"
    NAME = "name"
    COMPANY = "company"
    POSITION = "position"
    LOCATION = "location"
    LINKEDIN = "linkedin"
    GITHUB = "github"
    GRADUATION_YEAR = "graduation_year"
    STATUS = "status"
    SUBMISSION_DATE = "submission_date"
    PERSONAL_EMAIL = "personal_email"
    PHONE = "phone"
    MAJOR = "major"
    MINOR = "minor"
    COLLEGE = "college"
    SCHOOL_YEAR = "school_year"
    PORTFOLIO = "portfolio"
    SEMESTER = "semester"
    DURATION = "duration"
    COMPANY_RATING = "company_rating"
    ROLE_RATING = "role_rating"
    JOB_SEARCH_METHOD = "job_search_method"
    INDUSTRY = "industry"
    DEPARTMENT = "department"
    GRAD_YEAR_UPDATED = "grad_year_updated"


# Priority-ordered, lower-case substring aliases.
FIELD_ALIASES: dict[CanonicalField, tuple[str, ...]] = {
    CanonicalField.EMAIL: ("email", "email address"),
    CanonicalField.NAME: ("name", "full name"),
    CanonicalField.COMPANY: ("company", "current company", "employer"),
    CanonicalField.POSITION: ("position", "job title", "role", "title"),
    CanonicalField.LOCATION: ("location", "city", "where are you based?"),
    CanonicalField.LINKEDIN: ("linkedin", "linkedin profile", "linkedin url"),
    CanonicalField.GITHUB: ("github", "github profile", "github url"),
    CanonicalField.GRADUATION_YEAR: ("graduation year", "graduationyear", "year", "graduation"),
    CanonicalField.STATUS: ("status", "current status", "member status"),
    CanonicalField.SUBMISSION_DATE: ("timestamp", "submission date", "date"),
    CanonicalField.PERSONAL_EMAIL: ("personal_email", "personal email"),
    CanonicalField.PHONE: ("phone_number", "phone number", "phone"),
    CanonicalField.MAJOR: ("major",),
    CanonicalField.MINOR: ("minor",),
    CanonicalField.COLLEGE: ("college",),
    CanonicalField.SCHOOL_YEAR: ("school_year", "school year"),
    CanonicalField.PORTFOLIO: ("portfolio",),
    CanonicalField.SEMESTER: ("semester_completed", "semester completed", "semester"),
    CanonicalField.DURATION: ("duration",),
    CanonicalField.COMPANY_RATING: ("company_rating", "company rating"),
    CanonicalField.ROLE_RATING: ("role_rating", "role rating"),
    CanonicalField.JOB_SEARCH_METHOD: ("job_search_method", "job search method"),
    CanonicalField.INDUSTRY: ("industry",),
    CanonicalField.DEPARTMENT: ("department",),
    CanonicalField.GRAD_YEAR_UPDATED: ("grad_year_updated", "grad year updated"),
}

ColumnMap = dict[CanonicalField, int | None]


def _lowered(headers: Sequence[object]) -> list[str]:
    # None / 空ヘッダは一致対象外
    return [str(h).lower() if h else "" for h in headers]


def resolve(headers: Sequence[object], field: CanonicalField) -> int | None:
    """Return the column position of ``field`` in ``headers`` or None if absent."""
    lowered = _lowered(headers)
    for alias in FIELD_ALIASES[field]:
        for index, header in enumerate(lowered):
            if header and alias in header:
                return index
    return None


def resolve_columns(headers: Sequence[object]) -> ColumnMap:
    """Resolve every canonical field once for a batch of rows."""
    return {field: resolve(headers, field) for field in CanonicalField}


def require_email(columns: ColumnMap, sheet: str = "", spreadsheet: str = "") -> int:
    """Return the email position or raise SchemaError (no identity key, no records)."""
    position = columns.get(CanonicalField.EMAIL)
    if position is None:
        raise SchemaError(
            f"email column not found in sheet '{sheet}'" if sheet else "email column not found",
            spreadsheet=spreadsheet,
            sheet=sheet,
        )
    return position
