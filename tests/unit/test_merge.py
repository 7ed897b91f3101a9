from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime

from networking_sync.models.person_record import MemberStatus, PersonRecord
from networking_sync.models.sync_result import MergeResult
from networking_sync.services.merge import existing_emails, merge

NOW = datetime(2025, 1, 1, tzinfo=UTC)


def _rec(email: str, **kw) -> PersonRecord:
    return PersonRecord(email=email, submission_date=NOW, source_row_number=kw.pop("row", 2), **kw)


def test_merge_adds_only_new_people():
    bob = _rec("bob@x.com", name="Bob", company="Old Co")
    new = [_rec("alice@x.com", name="Alice"), _rec("bob@x.com", name="Bob Updated", company="New Co")]
    result = merge(new, [bob])
    assert isinstance(result, MergeResult)
    assert [r.email for r in result.added] == ["alice@x.com"]
    assert result.kept == (bob,)
    assert result.kept[0].company == "Old Co"


def test_merge_never_alters_existing_records():
    existing = [
        _rec("a@x.com", row=2, current_status=MemberStatus.ALUMNI, name="A"),
        _rec("", row=3, name="no email"),
        _rec("c@x.com", row=4, name="C"),
    ]
    snapshot = [replace(r) for r in existing]
    result = merge([_rec("a@x.com", name="changed"), _rec("d@x.com")], existing)
    assert list(result.kept) == snapshot
    assert result.kept[0].current_status is MemberStatus.ALUMNI


def test_no_added_email_collides_with_existing():
    existing = [_rec(f"e{i}@x.com") for i in range(5)]
    new = [_rec(f"e{i}@x.com") for i in range(3, 9)]
    result = merge(new, existing)
    assert {r.email for r in result.added}.isdisjoint(existing_emails(existing))
    assert [r.email for r in result.added] == ["e5@x.com", "e6@x.com", "e7@x.com", "e8@x.com"]


def test_merge_is_idempotent_when_output_fed_back():
    existing = [_rec("bob@x.com")]
    new = [_rec("alice@x.com"), _rec("bob@x.com"), _rec("carol@x.com")]
    first = merge(new, existing)
    second = merge(new, list(first.kept) + list(first.added))
    assert len(first.added) == 2
    assert second.added == ()


def test_existing_emails_ignores_blank_and_normalizes():
    records = [_rec(""), _rec("  "), _rec("Bob@X.com")]
    assert existing_emails(records) == {"bob@x.com"}


def test_merge_with_empty_existing():
    new = [_rec("a@x.com"), _rec("b@x.com")]
    result = merge(new, [])
    assert result.kept == ()
    assert tuple(new) == result.added
