import numpy as np
import datetime as dt
from typing import Dict, Iterator, Optional
from dataclasses import dataclass, field

from .errors import InvalidRangeError, OutOfRangeError, require

_ONE_DAY = dt.timedelta(days=1)


@dataclass(frozen=True)
class DateRange:
    """
    Half-open range of dates [start, end).

    Iterating a DateRange yields each date lazily; the range is finite and can be iterated any number of times.
    An empty range (start == end) is valid. A range where end is before start raises InvalidRangeError.
    """
    start: dt.date
    end: dt.date

    def __post_init__(self) -> None:
        require(self.start, "start")
        require(self.end, "end")
        if self.end < self.start:
            raise InvalidRangeError(f"End date {self.end} must not be before start date {self.start}")

    @classmethod
    def closed(cls, start: dt.date, end_inclusive: dt.date) -> "DateRange":
        """Build the range [start, end_inclusive]."""
        require(end_inclusive, "end_inclusive")
        try:
            return cls(start, end_inclusive + _ONE_DAY)
        except OverflowError as e:
            raise OutOfRangeError(f"Cannot build a closed range ending at {end_inclusive}") from e

    @property
    def end_inclusive(self) -> dt.date:
        if self.is_empty:
            raise InvalidRangeError("An empty range has no inclusive end")
        return self.end - _ONE_DAY

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def __iter__(self) -> Iterator[dt.date]:
        cur = self.start
        while cur < self.end:
            yield cur
            cur += _ONE_DAY

    def __len__(self) -> int:
        return (self.end - self.start).days

    def __contains__(self, d: object) -> bool:
        return isinstance(d, dt.date) and self.start <= d < self.end

    def intersection(self, other: "DateRange") -> "DateRange":
        """Overlap of both ranges; an empty range when they are disjoint."""
        start = max(self.start, other.start)
        end = min(self.end, other.end)
        if end < start:
            return DateRange(start, start)
        return DateRange(start, end)

    def __str__(self) -> str:
        return f"[{self.start}, {self.end})"


@dataclass()
class DateUniverse:
    """
    Static information about the contiguous days of a calendar :
        1. Non-lazy fields (built at init):
            - Start and end date (inclusive) : datetime.date
            - Contiguous days : np.ndarray of datetime64[D]
        2. Lazy fields (built on demand and cached):
            - Weekday as int (Monday=0, Sunday=6, same as date.weekday()) : np.ndarray

    All positional lookups are O(1) date arithmetic against the start date.
    """
    start: dt.date
    end: dt.date

    days: np.ndarray = field(init=False, repr=False)
    _cache: Dict[str, np.ndarray] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise InvalidRangeError(f"End date {self.end} must not be before start date {self.start}")
        self.start64 = np.datetime64(self.start, "D")
        n_days = (self.end - self.start).days + 1
        self.days = self.start64 + np.arange(n_days, dtype="int64").astype("timedelta64[D]")

    def __len__(self) -> int:
        return int(self.days.shape[0])

    def __contains__(self, d: object) -> bool:
        return isinstance(d, dt.date) and self.start <= d <= self.end

    @property
    def date_range(self) -> DateRange:
        return DateRange.closed(self.start, self.end)

    def locate(self, d: dt.date) -> int:
        """Return index i such that day(i) == d. Raises OutOfRangeError if outside."""
        if d < self.start or d > self.end:
            raise OutOfRangeError(f"Date {d} is outside the supported range [{self.start}, {self.end}]")
        return (d - self.start).days

    def day(self, i: int) -> dt.date:
        return self.start + dt.timedelta(days=int(i))

    def positions(self, dates: np.ndarray) -> np.ndarray:
        """Convert an array of datetime64[D] to integer positions relative to the start date."""
        dates = dates.astype("datetime64[D]")
        return (dates - self.start64).astype("timedelta64[D]").astype("int64")

    @property
    def weekday(self) -> np.ndarray:
        key = "weekday"
        if key not in self._cache:
            days_int = self.days.astype("datetime64[D]").astype("int64")
            # 1970-01-01 is a Thursday
            self._cache[key] = ((days_int + 3) % 7).astype("uint8")
        return self._cache[key]


def optional_intersection(a: Optional[DateRange], b: Optional[DateRange]) -> Optional[DateRange]:
    """Intersect two ranges where None means unbounded."""
    if a is None:
        return b
    if b is None:
        return a
    return a.intersection(b)
