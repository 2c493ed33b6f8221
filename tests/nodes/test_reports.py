"""Tests for the commit history reports."""

from datetime import date, datetime

import pytest

from projectlens.models.commit import Author, CommitRecord
from projectlens.models.history import CommitHistory, DayKey, MonthKey, YearKey
from projectlens.models.version import Version
from projectlens.nodes.reports import (
    count_commits_by_period,
    estimate_development_cost,
    release_dates,
    render_commit,
    render_history,
    render_period_counts,
    source_files_with_message,
)
from projectlens.types.base import ReleaseTag

ALICE = Author("Alice", "alice@example.com")


def make_commit(hash_id, timestamp, message="Change", *files):
    return CommitRecord(ALICE, timestamp, hash_id).with_message(message).add(*files)


@pytest.fixture
def history():
    return CommitHistory.of(
        make_commit("aaaaaaa1", datetime(2024, 1, 5, 9, 0), "JIRA-1 start", "src/a.py"),
        make_commit("aaaaaaa2", datetime(2024, 1, 5, 18, 0), "JIRA-1 more", "src/a.py", "src/b.py"),
        make_commit("aaaaaaa3", datetime(2024, 2, 10, 12, 0), "JIRA-2", "src/b.py", "test/test_b.py"),
        make_commit("aaaaaaa4", datetime(2025, 1, 1, 12, 0), "JIRA-1 done", "src/c.py"),
    )


def test_count_commits_by_day(history):
    rows = count_commits_by_period(history, "day")

    assert rows == [(DayKey(date(2024, 1, 5)), 2), (DayKey(date(2025, 1, 1)), 1), (DayKey(date(2024, 2, 10)), 1)]


def test_count_commits_by_month_and_year(history):
    assert count_commits_by_period(history, "month", limit=1) == [(MonthKey(2024, 1), 2)]
    assert count_commits_by_period(history, "year") == [(YearKey(2024), 3), (YearKey(2025), 1)]


def test_count_commits_by_unknown_period(history):
    with pytest.raises(ValueError):
        count_commits_by_period(history, "week")


def test_render_period_counts(history):
    table = render_period_counts(count_commits_by_period(history, "year"))

    assert table.splitlines()[0] == "    TIME PERIOD    |    COUNT    "
    assert "2024               | 3" in table


def test_render_commit():
    commit_record = make_commit("abcdef123", datetime(2024, 1, 5, 9, 30, 15), "Subject\n\nBody", "src/a.py")

    text = render_commit(commit_record, show_files=True)

    assert "Author: Alice <alice@example.com>" in text
    assert "Commit: abcdef123" in text
    assert "Date/Time: Fri, 2024-Jan-05 09:30:15" in text
    assert "    Subject" in text
    assert text.rstrip().endswith("src/a.py")
    assert "src/a.py" not in render_commit(commit_record)


def test_render_history_limit(history):
    text = render_history(history, limit=2)

    assert text.count("Commit: ") == 2
    assert "aaaaaaa4" in text
    assert "aaaaaaa1" not in text


def test_source_files_with_message(history):
    source_files = source_files_with_message(history, "JIRA-1")

    assert [source_file.path for source_file in source_files] == ["src/a.py", "src/b.py", "src/c.py"]


def test_source_files_with_message_filters(history):
    included = source_files_with_message(history, "JIRA", include_filter="src/")
    excluded = source_files_with_message(history, "JIRA", exclude_filter="test/")
    until = source_files_with_message(history, "JIRA", until_date="2024-01-31")

    assert [source_file.path for source_file in included] == ["src/a.py", "src/b.py", "src/c.py"]
    assert "test/test_b.py" not in excluded
    assert [source_file.path for source_file in until] == ["src/a.py", "src/b.py"]


def test_source_files_with_message_strict(history):
    relaxed = source_files_with_message(history, "JIRA-1|JIRA-2", since_date="2024-02-01")
    strict = source_files_with_message(history, "JIRA", since_date="2024-02-01", until_date="2024-12-31", strict=True)

    assert [source_file.path for source_file in relaxed] == ["src/b.py", "src/c.py", "test/test_b.py"]
    assert [source_file.path for source_file in strict] == ["src/b.py", "test/test_b.py"]


def test_release_dates():
    def tag(name, when):
        return ReleaseTag(name=name, version=Version.parse(name), hash="0" * 40, date=when)

    release_tags = [
        tag("1.0.0", datetime(2024, 1, 1, 12, 0)),
        tag("1.1.0-RC1", datetime(2024, 2, 1, 12, 0)),
        tag("1.1.0", datetime(2024, 3, 1, 12, 0)),
    ]

    assert release_dates(release_tags) == [("1.1.0", date(2024, 3, 1)), ("1.0.0", date(2024, 1, 1))]
    assert [version for version, _ in release_dates(release_tags, include_pre_releases=True)] == [
        "1.1.0",
        "1.1.0-RC1",
        "1.0.0",
    ]


def test_estimate_development_cost(history):
    estimate = estimate_development_cost(history, hourly_rate=50.0, hours_per_day=6.0)

    assert estimate.first_commit.hash == "aaaaaaa1"
    assert estimate.last_commit.hash == "aaaaaaa4"
    assert estimate.calendar_days == 363
    assert estimate.active_days == 3
    assert estimate.hours == 18.0
    assert estimate.cost == 900.0
    assert estimate.to_dict()["first_commit"] == "aaaaaaa1"


def test_estimate_development_cost_of_empty_history():
    estimate = estimate_development_cost(CommitHistory.empty(), hourly_rate=50.0)

    assert estimate.first_commit is None
    assert estimate.active_days == 0
    assert estimate.cost == 0.0


def test_estimate_development_cost_rejects_negative_rate(history):
    with pytest.raises(ValueError):
        estimate_development_cost(history, hourly_rate=-1.0)
