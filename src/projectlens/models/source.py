"""Per-file revision index derived from a commit history."""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from pathlib import PurePosixPath
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Set, Union

from projectlens.models.commit import Author
from projectlens.models.periods import TimePeriods

AuthorQuery = Union[Author, str]


@dataclass(frozen=True)
class Revision:
    """One change to a source file. Revisions are identified by id (the commit hash)."""

    author: Author = field(compare=False)
    timestamp: datetime = field(compare=False)
    id: str

    @property
    def date(self) -> date:
        return self.timestamp.date()

    @property
    def time(self) -> time:
        return self.timestamp.time()

    def __lt__(self, other: "Revision") -> bool:
        if not isinstance(other, Revision):
            return NotImplemented
        return (self.timestamp, self.id) < (other.timestamp, other.id)

    def __str__(self) -> str:
        return self.id


def _author_matches(revision: Revision, author: AuthorQuery) -> bool:
    if isinstance(author, Author):
        return revision.author == author

    query = (author or "").strip().lower()
    return bool(query) and (
        revision.author.name.lower() == query or (revision.author.email_address or "").lower() == query
    )


class SourceFile:
    """A file path together with the revisions that modified it, oldest first."""

    def __init__(self, path: str):
        if not path:
            raise ValueError(f"Path [{path}] is required")
        self._path = str(path)
        self._revisions: Dict[str, Revision] = {}

    @property
    def path(self) -> str:
        return self._path

    @property
    def name(self) -> str:
        """File name up to the first dot, e.g. ``Version`` for ``src/Version.java``."""
        return PurePosixPath(self._path).name.split(".", 1)[0]

    @property
    def extension(self) -> str:
        return PurePosixPath(self._path).suffix.lstrip(".")

    @property
    def revisions(self) -> List[Revision]:
        return sorted(self._revisions.values())

    def with_revision(self, revision: Revision) -> "SourceFile":
        if revision is None:
            raise ValueError("Revision is required")
        self._revisions.setdefault(revision.id, revision)
        return self

    def first_revision(self) -> Optional[Revision]:
        revisions = self.revisions
        return revisions[0] if revisions else None

    def last_revision(self) -> Optional[Revision]:
        revisions = self.revisions
        return revisions[-1] if revisions else None

    def first_revision_datetime(self) -> Optional[datetime]:
        revision = self.first_revision()
        return revision.timestamp if revision else None

    def last_revision_datetime(self) -> Optional[datetime]:
        revision = self.last_revision()
        return revision.timestamp if revision else None

    def get_revision(self, revision_id: str) -> Optional[Revision]:
        return self._revisions.get(revision_id)

    def revision_count(self) -> int:
        return len(self._revisions)

    def revision_ids(self) -> Set[str]:
        return set(self._revisions)

    def authors(self) -> Set[Author]:
        return {revision.author for revision in self._revisions.values()}

    def revisions_by(self, author: AuthorQuery) -> List[Revision]:
        """Revisions by an ``Author``, or by a name or email address (case-insensitive)."""
        return [revision for revision in self.revisions if _author_matches(revision, author)]

    def revisions_during(self, time_periods: Optional[TimePeriods]) -> List[Revision]:
        if time_periods is None:
            return []
        return [revision for revision in self.revisions if time_periods.is_during(revision.date)]

    def was_modified_by(self, author: AuthorQuery) -> bool:
        return bool(self.revisions_by(author))

    def was_modified_during(self, time_periods: Optional[TimePeriods]) -> bool:
        return bool(self.revisions_during(time_periods))

    def __iter__(self) -> Iterator[Revision]:
        return iter(self.revisions)

    def __lt__(self, other: "SourceFile") -> bool:
        if not isinstance(other, SourceFile):
            return NotImplemented
        return self.path < other.path

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SourceFile):
            return NotImplemented
        return self.path == other.path

    def __hash__(self) -> int:
        return hash(self.path)

    def __repr__(self) -> str:
        return f"SourceFile({self.path!r}, revisions={self.revision_count()})"

    def __str__(self) -> str:
        return self.path


class SourceFileSet:
    """Source files keyed by path and iterated in path order."""

    def __init__(self, source_files: Optional[Iterable[SourceFile]] = None):
        self._source_files: Dict[str, SourceFile] = {}
        for source_file in source_files or []:
            if source_file is not None:
                self._source_files.setdefault(source_file.path, source_file)

    @classmethod
    def empty(cls) -> "SourceFileSet":
        return cls()

    @classmethod
    def of(cls, *source_files: SourceFile) -> "SourceFileSet":
        return cls(source_files)

    def resolve(self, path: str) -> SourceFile:
        """Return the SourceFile registered for ``path``, registering a new one if needed."""
        source_file = self._source_files.get(path)
        if source_file is None:
            source_file = SourceFile(path)
            self._source_files[path] = source_file
        return source_file

    def contains(self, path: Optional[str]) -> bool:
        return path is not None and path in self._source_files

    def find_by(self, predicate: Optional[Callable[[SourceFile], bool]]) -> "SourceFileSet":
        """Source files matching ``predicate``. No predicate matches nothing."""
        if predicate is None:
            return SourceFileSet.empty()
        return SourceFileSet(source_file for source_file in self if predicate(source_file))

    def find_by_author(self, author: AuthorQuery) -> "SourceFileSet":
        return self.find_by(lambda source_file: source_file.was_modified_by(author))

    def find_by_file(self, path: str) -> Optional[SourceFile]:
        return self._source_files.get(path)

    def find_by_revision_id(self, revision_id: str) -> "SourceFileSet":
        return self.find_by(lambda source_file: revision_id in source_file.revision_ids())

    def find_during(self, time_periods: TimePeriods) -> "SourceFileSet":
        return self.find_by(lambda source_file: source_file.was_modified_during(time_periods))

    def size(self) -> int:
        return len(self._source_files)

    def is_empty(self) -> bool:
        return not self._source_files

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.contains(path)

    def __iter__(self) -> Iterator[SourceFile]:
        return iter(sorted(self._source_files.values()))

    def __len__(self) -> int:
        return len(self._source_files)
