from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ..errors import SchemaError
from ..models.person_record import PersonRecord

"""Output row builder: PersonRecord -> dashboard column layout.

The dashboard's header row is the schema. Each header is matched against an
ordered list of destination rules; the first rule whose required substrings
are all present (and excluded substrings all absent) picks the record
attribute for that column. Unmatched headers get "".

These rules are separate from the read-side alias table: the write side
has to tell "Email" from "Personal Email" and "Company" from
"Company Rating", which a plain substring alias cannot. When two headers
satisfy the same rule, both are filled.
"""

__all__ = [
    "ColumnRule",
    "OUTPUT_RULES",
    "attribute_for_header",
    "identity_position",
    "require_identity_column",
    "build_output_rows",
]


@dataclass(frozen=True)
class ColumnRule:
    required: tuple[str, ...]
    attribute: str | None  # None -> always blank
    excluded: tuple[str, ...] = ()

    def matches(self, header: str) -> bool:
        return all(token in header for token in self.required) and not any(
            token in header for token in self.excluded
        )


OUTPUT_RULES: tuple[ColumnRule, ...] = (
    ColumnRule(("email",), "email", excluded=("personal",)),
    ColumnRule(("name",), "name", excluded=("company",)),
    ColumnRule(("personal", "email"), "personal_email"),
    ColumnRule(("phone",), "phone"),
    ColumnRule(("major",), "major"),
    ColumnRule(("minor",), "minor"),
    ColumnRule(("college",), "college"),
    ColumnRule(("school", "year"), "school_year"),
    ColumnRule(("graduation",), "graduation_year"),
    ColumnRule(("linkedin",), "linkedin"),
    ColumnRule(("portfolio",), "portfolio"),
    # positions count is never collected by the form
    ColumnRule(("number", "position"), None),
    ColumnRule(("company",), "company", excluded=("rating",)),
    ColumnRule(("job", "title"), "position"),
    ColumnRule(("semester",), "semester"),
    ColumnRule(("duration",), "duration"),
    ColumnRule(("company", "rating"), "company_rating"),
    ColumnRule(("role", "rating"), "role_rating"),
    ColumnRule(("job", "search"), "job_search_method"),
    ColumnRule(("industry",), "industry"),
    ColumnRule(("github",), "github"),
    ColumnRule(("location",), "location"),
    ColumnRule(("department",), "department"),
    ColumnRule(("position",), "position"),
    ColumnRule(("status",), "current_status"),
)


def attribute_for_header(header: object) -> str | None:
    """Return the PersonRecord attribute that fills ``header`` (None = blank)."""
    lowered = str(header).lower() if header else ""
    if not lowered:
        return None
    for rule in OUTPUT_RULES:
        if rule.matches(lowered):
            return rule.attribute
    return None


def identity_position(headers: Sequence[object]) -> int | None:
    """Position of the column the primary email is written to, or None.

    The dashboard is read back through the same rule it is written with, so a
    "Personal Email" column placed before "Email" is never taken as identity.
    """
    email_rule = OUTPUT_RULES[0]
    for index, header in enumerate(headers):
        lowered = str(header).lower() if header else ""
        if lowered and email_rule.matches(lowered):
            return index
    return None


def require_identity_column(headers: Sequence[object], sheet: str = "", spreadsheet: str = "") -> int:
    position = identity_position(headers)
    if position is None:
        raise SchemaError(
            f"email column not found in sheet '{sheet}'" if sheet else "email column not found",
            spreadsheet=spreadsheet,
            sheet=sheet,
        )
    return position


def build_output_rows(headers: Sequence[object], records: Iterable[PersonRecord]) -> list[list[str]]:
    """Lay out ``records`` in the column order of ``headers``."""
    attributes = [attribute_for_header(h) for h in headers]
    return [[record.cell_value(a) if a else "" for a in attributes] for record in records]
