"""Commit records materialized from a repository's revision log."""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Iterator, Optional, Set, Tuple

SHORT_HASH_LENGTH = 7


@dataclass(frozen=True)
class Author:
    """Commit author. Two authors are equal when their names are equal."""

    name: str
    email_address: Optional[str] = field(default=None, compare=False)

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError(f"Author name [{self.name}] is required")

    @classmethod
    def parse(cls, text: str) -> "Author":
        """Parse ``name`` or ``name email``."""
        if not text or not text.strip():
            raise ValueError(f"Author [{text}] is required")
        name, _, email = text.strip().partition(" ")
        return cls(name, email.strip() or None)

    def matches(self, text: Optional[str]) -> bool:
        """Case-insensitive substring match against the name or email address."""
        needle = (text or "").strip().lower()
        return needle in self.name.lower() or needle in (self.email_address or "").lower()

    def __str__(self) -> str:
        return f"{self.name} <{self.email_address}>" if self.email_address else self.name


@dataclass(eq=False)
class CommitRecord:
    """A single revision: author, timestamp, hash, message and touched files.

    Records are identified by hash and order newest first, which is the order
    CommitHistory materializes them in. Hashes are assumed to be full-length
    (at least ``SHORT_HASH_LENGTH`` characters).
    """

    author: Author
    timestamp: datetime
    hash: str
    message: Optional[str] = None
    _source_files: Set[str] = field(default_factory=set, init=False, repr=False)

    def __post_init__(self):
        if self.author is None:
            raise ValueError("Author is required")
        if self.timestamp is None:
            raise ValueError("Timestamp is required")
        if not self.hash or not self.hash.strip():
            raise ValueError(f"Hash [{self.hash}] is required")

    @property
    def short_hash(self) -> str:
        return self.hash[:SHORT_HASH_LENGTH]

    @property
    def date(self) -> date:
        return self.timestamp.date()

    @property
    def time(self) -> time:
        return self.timestamp.time()

    @property
    def source_files(self) -> Tuple[str, ...]:
        return tuple(sorted(self._source_files))

    def add(self, *source_files: Optional[str]) -> "CommitRecord":
        """Record touched files. Duplicates and ``None`` are ignored."""
        self._source_files.update(path for path in source_files if path)
        return self

    def contains(self, source_file: Optional[str]) -> bool:
        return source_file is not None and source_file in self._source_files

    def with_message(self, message: Optional[str]) -> "CommitRecord":
        self.message = message
        return self

    def __iter__(self) -> Iterator[str]:
        return iter(self.source_files)

    def __lt__(self, other: "CommitRecord") -> bool:
        if not isinstance(other, CommitRecord):
            return NotImplemented
        return self.timestamp > other.timestamp

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CommitRecord):
            return NotImplemented
        return self.hash == other.hash

    def __hash__(self) -> int:
        return hash(self.hash)

    def __str__(self) -> str:
        return self.hash
