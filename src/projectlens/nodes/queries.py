"""Composable commit predicates used to query a CommitHistory."""

from datetime import time
from typing import Optional

from projectlens.models.commit import CommitRecord
from projectlens.models.history import CommitPredicate
from projectlens.models.periods import TimePeriods, parse_date

MESSAGE_ALTERNATIVE_SEPARATOR = "|"
WORK_DAY_START = time(9, 0)
WORK_DAY_END = time(17, 0)

# Monday is 0, Saturday 5, Sunday 6
WEEKEND_DAYS = (5, 6)


def _match_all(commit_record: CommitRecord) -> bool:
    return True


ALL_COMMITS: CommitPredicate = _match_all


def all_of(*predicates: Optional[CommitPredicate]) -> CommitPredicate:
    """Predicate matching when every given predicate matches. ``None`` entries are skipped."""
    active = [predicate for predicate in predicates if predicate is not None]
    return lambda commit_record: all(predicate(commit_record) for predicate in active)


def negate(predicate: CommitPredicate) -> CommitPredicate:
    return lambda commit_record: not predicate(commit_record)


def by_author(author: Optional[str]) -> CommitPredicate:
    """Commits whose author name or email contains ``author``, ignoring case."""
    if not author or not author.strip():
        return ALL_COMMITS
    return lambda commit_record: commit_record.author.matches(author)


def since(since_date: Optional[str]) -> CommitPredicate:
    """Commits made on or after ``since_date`` (YYYY-MM-DD)."""
    if not since_date or not since_date.strip():
        return ALL_COMMITS
    start = parse_date(since_date)
    return lambda commit_record: commit_record.date >= start


def until(until_date: Optional[str]) -> CommitPredicate:
    """Commits made on or before ``until_date`` (YYYY-MM-DD)."""
    if not until_date or not until_date.strip():
        return ALL_COMMITS
    end = parse_date(until_date)
    return lambda commit_record: commit_record.date <= end


def during(dates: Optional[str]) -> CommitPredicate:
    if not dates or not dates.strip():
        return ALL_COMMITS
    time_periods = TimePeriods.parse(dates)
    return lambda commit_record: time_periods.is_during(commit_record.date)


def excluding(dates: Optional[str]) -> CommitPredicate:
    if not dates or not dates.strip():
        return ALL_COMMITS
    return negate(during(dates))


def by_time(
    since_date: Optional[str] = None,
    until_date: Optional[str] = None,
    excluding_dates: Optional[str] = None,
    during_dates: Optional[str] = None,
) -> CommitPredicate:
    """Combine the date based filters. Unset arguments do not filter."""
    return all_of(since(since_date), until(until_date), excluding(excluding_dates), during(during_dates))


def with_message(message: Optional[str]) -> CommitPredicate:
    """Commits whose message contains any of the ``|`` separated alternatives, ignoring case."""
    alternatives = [
        alternative.strip().lower()
        for alternative in (message or "").split(MESSAGE_ALTERNATIVE_SEPARATOR)
        if alternative.strip()
    ]
    if not alternatives:
        return ALL_COMMITS
    return lambda commit_record: any(
        alternative in (commit_record.message or "").lower() for alternative in alternatives
    )


def to_source_file(path_fragment: Optional[str]) -> CommitPredicate:
    """Commits touching a file whose path contains ``path_fragment``."""
    if not path_fragment or not path_fragment.strip():
        return ALL_COMMITS
    return lambda commit_record: any(path_fragment in path for path in commit_record)


def _is_weekend(commit_record: CommitRecord) -> bool:
    return commit_record.date.weekday() in WEEKEND_DAYS


def after_hours(start: time = WORK_DAY_START, end: time = WORK_DAY_END) -> CommitPredicate:
    """Commits made on a weekend, before ``start`` or after ``end``."""

    def predicate(commit_record: CommitRecord) -> bool:
        commit_time = commit_record.time
        return _is_weekend(commit_record) or commit_time < start or commit_time > end

    return predicate


def during_work_hours(start: time = WORK_DAY_START, end: time = WORK_DAY_END) -> CommitPredicate:
    """Commits made on a weekday between ``start`` and ``end``, inclusive."""
    return negate(after_hours(start, end))
