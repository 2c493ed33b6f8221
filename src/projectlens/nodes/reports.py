"""Reports built on top of a CommitHistory."""

from dataclasses import dataclass
from datetime import date
from typing import Dict, Hashable, List, Optional, Tuple

from projectlens.models.commit import CommitRecord
from projectlens.models.history import CommitHistory, Group
from projectlens.models.periods import parse_date
from projectlens.models.source import SourceFile, SourceFileSet
from projectlens.nodes.queries import all_of, by_time, with_message
from projectlens.types.base import ReleaseTag

COMMIT_DATE_TIME_FORMAT = "%a, %Y-%b-%d %H:%M:%S"
DEFAULT_GROUP_LIMIT = 12
PERIODS = ("day", "month", "year")


def group_by_period(history: CommitHistory, period: str) -> List[Group]:
    """Group commits by ``day``, ``month`` or ``year``."""
    groupings = {
        "day": history.group_by_day,
        "month": history.group_by_month,
        "year": history.group_by_year,
    }
    if period not in groupings:
        raise ValueError(f"Period [{period}] must be one of {', '.join(PERIODS)}")
    return list(groupings[period]())


def count_commits_by_period(
    history: CommitHistory, period: str = "day", limit: int = DEFAULT_GROUP_LIMIT
) -> List[Tuple[Hashable, int]]:
    """Commit counts per period, busiest periods first (ties: most recent period first)."""
    groups = sorted(group_by_period(history, period), key=lambda group: group.key, reverse=True)
    groups.sort(key=lambda group: group.size(), reverse=True)
    return [(group.key, group.size()) for group in groups[: max(limit, 0)]]


def render_period_counts(rows: List[Tuple[Hashable, int]]) -> str:
    lines = ["    TIME PERIOD    |    COUNT    ", "--------------------------------"]
    lines.extend(f"{str(key):<19}| {count}" for key, count in rows)
    return "\n".join(lines) + "\n"


def _indent(text: Optional[str], prefix: str = "    ") -> str:
    return "\n".join(f"{prefix}{line}" for line in (text or "").splitlines())


def render_commit(commit_record: CommitRecord, show_files: bool = False) -> str:
    """Format a single commit for display."""
    lines = [
        f"Author: {commit_record.author}",
        f"Commit: {commit_record.hash}",
        f"Date/Time: {commit_record.timestamp.strftime(COMMIT_DATE_TIME_FORMAT)}",
        "Message:",
        "",
        _indent(commit_record.message),
    ]
    if show_files:
        lines.append("")
        lines.extend(commit_record.source_files)
    return "\n".join(lines) + "\n"


def render_history(history: CommitHistory, limit: Optional[int] = None, show_files: bool = False) -> str:
    """Format the first ``limit`` commits of ``history`` (all when not given)."""
    commit_records = history.to_list()
    if limit is not None:
        commit_records = commit_records[: max(limit, 0)]
    return "\n".join(render_commit(commit_record, show_files) for commit_record in commit_records)


def source_files_with_message(
    history: CommitHistory,
    message: str,
    include_filter: Optional[str] = None,
    exclude_filter: Optional[str] = None,
    since_date: Optional[str] = None,
    until_date: Optional[str] = None,
    strict: bool = False,
) -> SourceFileSet:
    """Source files touched by commits whose message matches ``message``.

    With ``strict``, a file is only reported when its whole revision span
    (within the matching commits) lies between ``since_date`` and ``until_date``.
    """
    commits = history.find_by(all_of(by_time(since_date, until_date), with_message(message)))
    start = parse_date(since_date) if since_date else None
    end = parse_date(until_date) if until_date else None

    def accept(source_file: SourceFile) -> bool:
        if exclude_filter and exclude_filter in source_file.path:
            return False
        if include_filter and include_filter not in source_file.path:
            return False
        if strict:
            first = source_file.first_revision()
            last = source_file.last_revision()
            if start and (first is None or first.date < start):
                return False
            if end and (last is None or last.date > end):
                return False
        return True

    return commits.to_source_file_set().find_by(accept)


def release_dates(release_tags: List[ReleaseTag], include_pre_releases: bool = False) -> List[Tuple[str, date]]:
    """Release version and date for each release tag, newest version first."""
    return [
        (str(release_tag.version), release_tag.date.date())
        for release_tag in sorted(release_tags, key=lambda release_tag: release_tag.version)
        if include_pre_releases or release_tag.version.is_release()
    ]


@dataclass
class DevelopmentCost:
    """Development time and cost estimated from a commit history."""

    first_commit: Optional[CommitRecord]
    last_commit: Optional[CommitRecord]
    calendar_days: int
    active_days: int
    hours: float
    cost: float

    def to_dict(self) -> Dict[str, object]:
        return {
            "first_commit": self.first_commit.hash if self.first_commit else None,
            "last_commit": self.last_commit.hash if self.last_commit else None,
            "calendar_days": self.calendar_days,
            "active_days": self.active_days,
            "hours": self.hours,
            "cost": self.cost,
        }


def estimate_development_cost(
    history: CommitHistory, hourly_rate: float = 0.0, hours_per_day: float = 8.0
) -> DevelopmentCost:
    """Estimate effort as ``hours_per_day`` for every day that has at least one commit."""
    if hourly_rate < 0 or hours_per_day < 0:
        raise ValueError(f"Hourly rate [{hourly_rate}] and hours per day [{hours_per_day}] must not be negative")

    first_commit = history.first_commit()
    last_commit = history.last_commit()

    if first_commit is None or last_commit is None:
        return DevelopmentCost(None, None, 0, 0, 0.0, 0.0)

    calendar_days = (last_commit.date - first_commit.date).days + 1
    active_days = len(history.group_by_day())
    hours = active_days * hours_per_day

    return DevelopmentCost(first_commit, last_commit, calendar_days, active_days, hours, hours * hourly_rate)
