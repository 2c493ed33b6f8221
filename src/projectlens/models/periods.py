"""Date ranges and sets of date ranges used as time-window filters."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, FrozenSet, Iterable, Iterator, Optional

DATE_FORMAT = "%Y-%m-%d"
DATE_SEPARATOR = ","
RANGE_SEPARATOR = "--"


def parse_date(text: str) -> date:
    """Parse a ``YYYY-MM-DD`` date."""
    try:
        return datetime.strptime(text.strip(), DATE_FORMAT).date()
    except (AttributeError, ValueError) as cause:
        raise ValueError(f"Date [{text}] is not valid; expected YYYY-MM-DD") from cause


def _to_date(value: date) -> date:
    return value.date() if isinstance(value, datetime) else value


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of dates."""

    start: date
    end: date

    def __post_init__(self):
        if self.start is None or self.end is None:
            raise ValueError("Start and end of a DateRange are required")
        if self.start > self.end:
            raise ValueError(
                f"Start Date [{self.start.strftime(DATE_FORMAT)}] must be on or before"
                f" End Date [{self.end.strftime(DATE_FORMAT)}]"
            )

    @classmethod
    def for_single_date(cls, day: date) -> "DateRange":
        return cls(day, day)

    @classmethod
    def parse(cls, text: str) -> "DateRange":
        """Parse ``YYYY-MM-DD`` or ``YYYY-MM-DD--YYYY-MM-DD``."""
        token = (text or "").strip()
        dates = token.split(RANGE_SEPARATOR)

        if len(dates) > 2:
            raise ValueError(f"Date(s) [{text}] are not valid")

        try:
            start = parse_date(dates[0])
            end = parse_date(dates[1]) if len(dates) > 1 else start
        except ValueError as cause:
            raise ValueError(f"Date(s) [{text}] are not valid") from cause

        return cls(start, end)

    def is_during(self, day: Optional[date]) -> bool:
        if day is None:
            return False
        day = _to_date(day)
        return self.start <= day <= self.end

    def __str__(self) -> str:
        start = self.start.strftime(DATE_FORMAT)
        return start if self.start == self.end else f"{start}{RANGE_SEPARATOR}{self.end.strftime(DATE_FORMAT)}"


class TimePeriods:
    """A set of date ranges answering "is this date during any of them".

    Parsed from text such as ``2024-12-25,2024-07-01--2024-07-14``; useful for
    holidays, vacations and release freezes.
    """

    def __init__(self, date_ranges: Optional[Iterable[DateRange]] = None):
        self._date_ranges: FrozenSet[DateRange] = frozenset(
            date_range for date_range in (date_ranges or []) if date_range is not None
        )

    @classmethod
    def empty(cls) -> "TimePeriods":
        return cls()

    @classmethod
    def of(cls, *date_ranges: DateRange) -> "TimePeriods":
        return cls(date_ranges)

    @classmethod
    def of_single_dates(cls, *days: date) -> "TimePeriods":
        return cls(DateRange.for_single_date(day) for day in days if day is not None)

    @classmethod
    def parse(cls, dates: Optional[str]) -> "TimePeriods":
        """Parse comma separated dates and ``start--end`` ranges.

        Raises:
            ValueError: naming the first token that is not a valid date or range.
        """
        tokens = (dates or "").strip().split(DATE_SEPARATOR)
        return cls(DateRange.parse(token) for token in tokens if token.strip())

    def is_during(self, day: Optional[date]) -> bool:
        return day is not None and any(date_range.is_during(day) for date_range in self._date_ranges)

    def as_predicate(self) -> Callable[[date], bool]:
        return self.is_during

    def __contains__(self, day: object) -> bool:
        return isinstance(day, date) and self.is_during(day)

    def __iter__(self) -> Iterator[DateRange]:
        return iter(sorted(self._date_ranges, key=lambda date_range: (date_range.start, date_range.end)))

    def __len__(self) -> int:
        return len(self._date_ranges)

    def __str__(self) -> str:
        return DATE_SEPARATOR.join(str(date_range) for date_range in self)
