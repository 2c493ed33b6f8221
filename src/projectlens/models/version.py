"""Project version model with release-qualifier aware ordering."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

QUALIFIER_SEPARATOR = "-"
NUMBER_SEPARATOR = "."

_DIGITS = re.compile(r"\d+")
_NUMBER = re.compile(r"[0-9]+")


class QualifierKind(Enum):
    """Kinds of version qualifiers. The value is the ordering rank."""

    UNRECOGNIZED = 0
    SNAPSHOT = 1
    MILESTONE = 2
    RELEASE_CANDIDATE = 3
    RELEASE = 4


@dataclass(frozen=True)
class Qualifier:
    """Classified form of a version qualifier such as ``M2``, ``RC1`` or ``SNAPSHOT``."""

    kind: QualifierKind
    number: int = 0

    @classmethod
    def from_string(cls, text: Optional[str]) -> "Qualifier":
        """Classify qualifier text, case-insensitively."""
        value = (text or "").strip()
        if not value:
            return cls(QualifierKind.RELEASE)

        match = _DIGITS.search(value)
        number = int(match.group()) if match else 0
        upper = value.upper()

        if upper.startswith("RC"):
            return cls(QualifierKind.RELEASE_CANDIDATE, number)
        if upper.startswith("M"):
            return cls(QualifierKind.MILESTONE, number)
        if upper == "SNAPSHOT":
            return cls(QualifierKind.SNAPSHOT, number)
        return cls(QualifierKind.UNRECOGNIZED, number)

    @property
    def rank(self) -> int:
        return self.kind.value


class Version:
    """A ``major.minor.maintenance[-qualifier]`` version.

    Versions order newest first: ``sorted()`` puts ``2.0.0`` before ``1.0.0``
    and, for equal numbers, a release before its release candidates,
    milestones and snapshots.
    """

    def __init__(self, major: int, minor: int, maintenance: int = 0, qualifier: Optional[str] = None):
        self._major = max(int(major), 0)
        self._minor = max(int(minor), 0)
        self._maintenance = max(int(maintenance), 0)
        self._qualifier = qualifier

    @classmethod
    def of(cls, major: int, minor: int, maintenance: int = 0) -> "Version":
        """Create a version without a qualifier. Negative numbers are floored to 0."""
        return cls(major, minor, maintenance)

    @classmethod
    def parse(cls, version: str) -> "Version":
        """Parse ``major.minor[.maintenance][-qualifier]``.

        Raises:
            ValueError: if the string is blank or not a valid version.
        """
        if version is None or not str(version).strip():
            raise ValueError(f"Version string [{version}] is required")

        numbers, separator, qualifier = str(version).strip().partition(QUALIFIER_SEPARATOR)
        parts = numbers.split(NUMBER_SEPARATOR)

        if len(parts) not in (2, 3):
            raise ValueError(
                f"Version string [{version}] must consist of major.minor[.maintenance] version numbers"
            )

        if not all(_NUMBER.fullmatch(part) for part in parts):
            raise ValueError(f"Version string [{version}] is not valid")

        values = [int(part) for part in parts]

        return cls(*values).with_qualifier(qualifier if separator else None)

    @property
    def major(self) -> int:
        return self._major

    @property
    def minor(self) -> int:
        return self._minor

    @property
    def maintenance(self) -> int:
        return self._maintenance

    @property
    def qualifier(self) -> Optional[str]:
        return self._qualifier

    @property
    def classified_qualifier(self) -> Qualifier:
        return Qualifier.from_string(self._qualifier)

    def with_qualifier(self, qualifier: Optional[str]) -> "Version":
        """Attach (or replace) the qualifier. Call before sharing the instance."""
        self._qualifier = qualifier or None
        return self

    def is_qualifier_present(self) -> bool:
        return bool((self._qualifier or "").strip())

    def is_milestone(self) -> bool:
        return self.classified_qualifier.kind is QualifierKind.MILESTONE

    def is_release_candidate(self) -> bool:
        return self.classified_qualifier.kind is QualifierKind.RELEASE_CANDIDATE

    def is_snapshot(self) -> bool:
        return self.classified_qualifier.kind is QualifierKind.SNAPSHOT

    def is_release(self) -> bool:
        return not (self.is_milestone() or self.is_release_candidate() or self.is_snapshot())

    def compare_to(self, other: "Version") -> int:
        """Return a negative number when this version sorts before ``other``.

        Numbers are compared first, then qualifier rank, then the qualifier
        number; the ascending result is inverted so newer versions come first.
        """
        this_qualifier = self.classified_qualifier
        that_qualifier = other.classified_qualifier

        this_key = (self.major, self.minor, self.maintenance, this_qualifier.rank, this_qualifier.number)
        that_key = (other.major, other.minor, other.maintenance, that_qualifier.rank, that_qualifier.number)

        ascending = (this_key > that_key) - (this_key < that_key)
        return -ascending

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare_to(other) < 0

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare_to(other) <= 0

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare_to(other) > 0

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare_to(other) >= 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return (self.major, self.minor, self.maintenance, self.qualifier) == (
            other.major,
            other.minor,
            other.maintenance,
            other.qualifier,
        )

    def __hash__(self) -> int:
        return hash((self.major, self.minor, self.maintenance, self.qualifier))

    def __repr__(self) -> str:
        return f"Version({str(self)!r})"

    def __str__(self) -> str:
        text = f"{self.major}{NUMBER_SEPARATOR}{self.minor}{NUMBER_SEPARATOR}{self.maintenance}"
        return f"{text}{QUALIFIER_SEPARATOR}{self.qualifier}" if self.is_qualifier_present() else text
