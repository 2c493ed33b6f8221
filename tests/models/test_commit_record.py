"""Tests for authors and commit records."""

from datetime import date, datetime, time

import pytest

from projectlens.models.commit import Author, CommitRecord

ALICE = Author("Alice", "alice@example.com")


def test_author_parse():
    assert Author.parse("Alice alice@example.com") == ALICE
    assert Author.parse("Alice alice@example.com").email_address == "alice@example.com"
    assert Author.parse("Bob").email_address is None


def test_author_requires_name():
    with pytest.raises(ValueError):
        Author("  ")
    with pytest.raises(ValueError):
        Author.parse("")


def test_author_matches_name_or_email_ignoring_case():
    assert ALICE.matches("ali")
    assert ALICE.matches("EXAMPLE.COM")
    assert not ALICE.matches("bob")
    assert str(ALICE) == "Alice <alice@example.com>"


def test_commit_record_requires_author_timestamp_and_hash():
    with pytest.raises(ValueError):
        CommitRecord(None, datetime(2024, 1, 1), "abc1234")
    with pytest.raises(ValueError):
        CommitRecord(ALICE, None, "abc1234")
    with pytest.raises(ValueError):
        CommitRecord(ALICE, datetime(2024, 1, 1), " ")


def test_short_hash_date_and_time():
    commit_record = CommitRecord(ALICE, datetime(2024, 3, 5, 14, 30), "0123456789abcdef")

    assert commit_record.short_hash == "0123456"
    assert commit_record.date == date(2024, 3, 5)
    assert commit_record.time == time(14, 30)


def test_source_files_are_a_sorted_set():
    commit_record = CommitRecord(ALICE, datetime(2024, 1, 1), "abc1234").add("src/b.py", "src/a.py", None, "src/b.py")

    assert commit_record.source_files == ("src/a.py", "src/b.py")
    assert list(commit_record) == ["src/a.py", "src/b.py"]
    assert commit_record.contains("src/a.py")
    assert not commit_record.contains("src/c.py")
    assert not commit_record.contains(None)


def test_commit_without_files_is_still_truthy():
    assert CommitRecord(ALICE, datetime(2024, 1, 1), "abc1234")


def test_identity_is_the_hash():
    first = CommitRecord(ALICE, datetime(2024, 1, 1), "abc1234").with_message("one")
    second = CommitRecord(Author("Bob"), datetime(2025, 1, 1), "abc1234").with_message("two")

    assert first == second
    assert len({first, second}) == 1
    assert str(first) == "abc1234"


def test_natural_order_is_newest_first():
    older = CommitRecord(ALICE, datetime(2024, 1, 1), "aaaaaaa")
    newer = CommitRecord(ALICE, datetime(2024, 6, 1), "bbbbbbb")

    assert newer < older
    assert sorted([older, newer]) == [newer, older]
