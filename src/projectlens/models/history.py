"""Commit history: an ordered, queryable collection of commit records."""

import calendar
from dataclasses import dataclass
from datetime import date
from typing import Callable, FrozenSet, Hashable, Iterable, Iterator, List, Optional, Set

from projectlens.models.commit import Author, CommitRecord
from projectlens.models.source import Revision, SourceFileSet

CommitPredicate = Callable[[CommitRecord], bool]


@dataclass(frozen=True, order=True)
class DayKey:
    """Groups commits by calendar day."""

    day: date

    @classmethod
    def from_commit(cls, commit_record: CommitRecord) -> "DayKey":
        return cls(commit_record.date)

    def __str__(self) -> str:
        return self.day.strftime("%Y-%b-%d")


@dataclass(frozen=True, order=True)
class MonthKey:
    """Groups commits by year and month."""

    year: int
    month: int

    @classmethod
    def from_commit(cls, commit_record: CommitRecord) -> "MonthKey":
        return cls(commit_record.date.year, commit_record.date.month)

    def __str__(self) -> str:
        return f"{self.year}-{calendar.month_name[self.month]}"


@dataclass(frozen=True, order=True)
class YearKey:
    """Groups commits by year."""

    year: int

    @classmethod
    def from_commit(cls, commit_record: CommitRecord) -> "YearKey":
        return cls(commit_record.date.year)

    def __str__(self) -> str:
        return str(self.year)


@dataclass(frozen=True)
class Group:
    """Commits sharing a grouping key."""

    key: Hashable
    commit_records: FrozenSet[CommitRecord]

    def size(self) -> int:
        return len(self.commit_records)

    def is_empty(self) -> bool:
        return not self.commit_records

    def __iter__(self) -> Iterator[CommitRecord]:
        return iter(sorted(self.commit_records))

    def __len__(self) -> int:
        return len(self.commit_records)


class CommitHistory:
    """Commit records ordered by timestamp, most recent first.

    Queries return new histories and leave this one untouched; ``sort`` is the
    only operation that reorders an existing history.
    """

    def __init__(self, commit_records: Optional[Iterable[CommitRecord]] = None):
        self._commit_records: List[CommitRecord] = sorted(
            commit_record for commit_record in (commit_records or []) if commit_record is not None
        )

    @classmethod
    def empty(cls) -> "CommitHistory":
        return cls()

    @classmethod
    def of(cls, *commit_records: CommitRecord) -> "CommitHistory":
        return cls(commit_records)

    @classmethod
    def _derive(cls, commit_records: Iterable[CommitRecord]) -> "CommitHistory":
        """Build a history from records that are already in the desired order."""
        history = cls()
        history._commit_records = list(commit_records)
        return history

    def is_empty(self) -> bool:
        return not self._commit_records

    def is_not_empty(self) -> bool:
        return not self.is_empty()

    def size(self) -> int:
        return len(self._commit_records)

    def to_list(self) -> List[CommitRecord]:
        return list(self._commit_records)

    def find_by(self, predicate: Optional[CommitPredicate]) -> "CommitHistory":
        """Commits matching ``predicate``, in the current order.

        A missing predicate matches nothing, so a forgotten filter never
        returns the whole history.
        """
        if predicate is None:
            return CommitHistory.empty()
        return CommitHistory._derive(
            commit_record for commit_record in self._commit_records if predicate(commit_record)
        )

    def find_by_author(self, author: Author) -> "CommitHistory":
        return self.find_by(lambda commit_record: commit_record.author == author)

    def find_by_date(self, day: Optional[date] = None) -> "CommitHistory":
        """Commits made on ``day`` (today when not given), regardless of time of day."""
        resolved_day = day if day is not None else date.today()
        return self.find_by(lambda commit_record: commit_record.date == resolved_day)

    def find_by_hash(self, hash_id: str) -> Optional[CommitRecord]:
        wanted = (hash_id or "").strip().lower()
        if not wanted:
            return None
        return next(
            (commit_record for commit_record in self._commit_records if commit_record.hash.lower() == wanted),
            None,
        )

    def find_by_source_file(self, source_file: str) -> "CommitHistory":
        return self.find_by(lambda commit_record: commit_record.contains(source_file))

    def _index_of(self, hash_id: str) -> Optional[int]:
        wanted = (hash_id or "").strip().lower()
        if not wanted:
            return None
        for index, commit_record in enumerate(self._commit_records):
            if commit_record.hash.lower() == wanted:
                return index
        return None

    def find_all_commits_after_hash(self, hash_id: str) -> "CommitHistory":
        """Commits from the most recent down to and including ``hash_id``.

        Empty when the hash is blank or not part of this history.
        """
        index = self._index_of(hash_id)
        if index is None:
            return CommitHistory.empty()
        return CommitHistory._derive(self._commit_records[: index + 1])

    def find_all_commits_before_hash(self, hash_id: str) -> "CommitHistory":
        """Commits from ``hash_id`` (inclusive) down to the oldest.

        Empty when the hash is blank or not part of this history.
        """
        index = self._index_of(hash_id)
        if index is None:
            return CommitHistory.empty()
        return CommitHistory._derive(self._commit_records[index:])

    def first_commit(self) -> Optional[CommitRecord]:
        """The oldest commit, i.e. the last one in iteration order."""
        return self._commit_records[-1] if self._commit_records else None

    def last_commit(self) -> Optional[CommitRecord]:
        """The most recent commit, i.e. the first one in iteration order."""
        return self._commit_records[0] if self._commit_records else None

    def group_by(self, key_function: Callable[[CommitRecord], Hashable]) -> Set[Group]:
        """Partition the commits by the key ``key_function`` computes for each one."""
        if key_function is None:
            raise ValueError("Group by function is required")

        groups = {}
        for commit_record in self._commit_records:
            groups.setdefault(key_function(commit_record), set()).add(commit_record)

        return {Group(key, frozenset(commit_records)) for key, commit_records in groups.items()}

    def group_by_day(self) -> Set[Group]:
        return self.group_by(DayKey.from_commit)

    def group_by_month(self) -> Set[Group]:
        return self.group_by(MonthKey.from_commit)

    def group_by_year(self) -> Set[Group]:
        return self.group_by(YearKey.from_commit)

    def sort(self, key: Optional[Callable[[CommitRecord], object]] = None, reverse: bool = False) -> "CommitHistory":
        """Reorder this history in place. Without a key, restores most-recent-first order."""
        self._commit_records.sort(key=key, reverse=reverse)
        return self

    def to_source_file_set(self) -> SourceFileSet:
        """Index every touched file with the revisions (commits) that modified it."""
        source_file_set = SourceFileSet.empty()

        for commit_record in self._commit_records:
            revision = Revision(commit_record.author, commit_record.timestamp, commit_record.hash)
            for path in commit_record:
                source_file_set.resolve(path).with_revision(revision)

        return source_file_set

    def __iter__(self) -> Iterator[CommitRecord]:
        return iter(list(self._commit_records))

    def __len__(self) -> int:
        return len(self._commit_records)

    def __repr__(self) -> str:
        return f"CommitHistory(size={self.size()})"
