"""
Holiday calendars.

A HolidayCalendar classifies each date as a holiday or a business day. Weekends are a special kind of holiday.
Subclasses only provide `name` and `is_holiday`; every other operation (next, previous, shift, counting,
combination...) is derived from them here, once.

Variants :
    - BaseCalendar : explicit holidays + weekend days over a bounded range (CalendarData)
    - WeekendCalendar : weekend days only, unbounded
    - CombinedCalendar : a day is a business day only if it is one in every constituent calendar
    - NoHolidaysCalendar / AllHolidaysCalendar : identity and absorbing elements of `combine`

All calendars are immutable and can be shared between threads.
"""

import logging
import numpy as np
import datetime as dt
from abc import ABC, abstractmethod
from functools import reduce
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from .data import CalendarData
from .date_universe import DateRange, optional_intersection
from .errors import OutOfRangeError, require
from .utils import DateLike, last_day_of_month, to_date

logger = logging.getLogger(__name__)


class HolidayCalendar(ABC):
    """
    A holiday calendar, classifying dates as holidays or business days.

    Two calendars are equal if and only if their names are equal.
    """

    @classmethod
    def of(cls, name: str) -> "HolidayCalendar":
        """
        Obtain a calendar from its unique name using the process-wide registry.

        Two or more calendars can be combined with '+', e.g. 'GBLO+USNY'.
        """
        from .registry import get_registry
        return get_registry().lookup(name)

    @property
    @abstractmethod
    def name(self) -> str:
        """The name that uniquely identifies this calendar."""

    @abstractmethod
    def is_holiday(self, day: DateLike) -> bool:
        """
        Return whether the given date is a holiday. A weekend is treated as a holiday.

        Raises OutOfRangeError if the date is outside the supported range.
        """

    @property
    def supported_range(self) -> Optional[DateRange]:
        """Range over which the calendar is authoritative, None if unbounded."""
        return None

    def is_business_day(self, day: DateLike) -> bool:
        return not self.is_holiday(day)

    # -------------------------
    # Business day arithmetic
    # -------------------------

    def adjust_by(self, amount: int) -> Callable[[DateLike], dt.date]:
        """
        Return a function shifting a date by `amount` business days.

        Example:
            three_days_later = calendar.adjust_by(3)(trade_date)
        """
        require(amount, "amount")
        return lambda day: self.shift(day, amount)

    def shift(self, day: DateLike, amount: int) -> dt.date:
        """
        Shift the date by the given number of business days.

        A positive amount applies `next` that many times, a negative amount applies `previous`.
        An amount of zero returns the date unchanged, even if it is a holiday.
        """
        adjusted = to_date(day)
        require(amount, "amount")
        if amount > 0:
            for _ in range(amount):
                adjusted = self.next(adjusted)
        elif amount < 0:
            for _ in range(-amount):
                adjusted = self.previous(adjusted)
        return adjusted

    def next(self, day: DateLike) -> dt.date:
        """Return the first business day strictly after the given date."""
        d = to_date(day)
        for candidate in self._walk(d, 1):
            if not self.is_holiday(candidate):
                return candidate
        raise OutOfRangeError(f"No business day after {d} within the supported range of calendar {self.name}")

    def next_or_same(self, day: DateLike) -> dt.date:
        """Return the date itself if it is a business day, otherwise the next business day."""
        d = to_date(day)
        return self.next(d) if self.is_holiday(d) else d

    def previous(self, day: DateLike) -> dt.date:
        """Return the last business day strictly before the given date."""
        d = to_date(day)
        for candidate in self._walk(d, -1):
            if not self.is_holiday(candidate):
                return candidate
        raise OutOfRangeError(f"No business day before {d} within the supported range of calendar {self.name}")

    def previous_or_same(self, day: DateLike) -> dt.date:
        """Return the date itself if it is a business day, otherwise the previous business day."""
        d = to_date(day)
        return self.previous(d) if self.is_holiday(d) else d

    def is_last_business_day_of_month(self, day: DateLike) -> bool:
        d = to_date(day)
        return self.is_business_day(d) and self.next(d).month != d.month

    def last_business_day_of_month(self, day: DateLike) -> dt.date:
        """Return the last business day of the month containing the given date."""
        d = to_date(day)
        return self.previous_or_same(last_day_of_month(d))

    def _walk(self, d: dt.date, step: int) -> Iterator[dt.date]:
        # Stops at the edge of the supported range, or of datetime.date itself
        bounds = self.supported_range
        delta = dt.timedelta(days=step)
        cur = d
        while True:
            try:
                cur = cur + delta
            except OverflowError:
                return
            if bounds is not None and cur not in bounds:
                return
            yield cur

    # -------------------------
    # Range counting
    # -------------------------

    def days_between(self, start_inclusive: DateLike, end_exclusive: DateLike) -> int:
        """
        Count the business days in [start_inclusive, end_exclusive).

        Returns 0 if the dates are equal, raises InvalidRangeError if the end is before the start,
        and OutOfRangeError if any date of the range is outside the supported range.
        """
        return sum(1 for d in self._date_range(start_inclusive, end_exclusive) if self.is_business_day(d))

    def business_days(self, start_inclusive: DateLike, end_exclusive: DateLike) -> List[dt.date]:
        """List the business days in [start_inclusive, end_exclusive)."""
        return [d for d in self._date_range(start_inclusive, end_exclusive) if self.is_business_day(d)]

    def holidays(self, start_inclusive: DateLike, end_exclusive: DateLike) -> List[dt.date]:
        """List the holidays, weekends included, in [start_inclusive, end_exclusive)."""
        return [d for d in self._date_range(start_inclusive, end_exclusive) if self.is_holiday(d)]

    @staticmethod
    def _date_range(start_inclusive: DateLike, end_exclusive: DateLike) -> DateRange:
        return DateRange(to_date(start_inclusive, "start_inclusive"), to_date(end_exclusive, "end_exclusive"))

    # -------------------------
    # Combination
    # -------------------------

    def combine(self, other: "HolidayCalendar") -> "HolidayCalendar":
        """
        Combine this calendar with another.

        The resulting calendar declares a day as a business day only if it is a business day in both calendars.
        Combining with ALL_HOLIDAYS returns ALL_HOLIDAYS, which is unbounded: dates outside the range of this
        calendar are then classified as holidays instead of raising OutOfRangeError.
        """
        require(other, "other")
        if self == other:
            return self
        if isinstance(other, NoHolidaysCalendar):
            return self
        if isinstance(other, AllHolidaysCalendar):
            return other
        return CombinedCalendar.of(self, other)

    # -------------------------
    # Identity
    # -------------------------

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, HolidayCalendar):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


def _check_leaf_name(name: str) -> str:
    require(name, "name")
    if not name or "+" in name:
        raise ValueError(f"Invalid calendar name {name!r}: must be non-empty and must not contain '+'")
    return name


class BaseCalendar(HolidayCalendar):
    """
    Calendar backed by CalendarData: explicit holidays and weekend days over a bounded range.

    Navigation and counting use the precomputed business day positions with numpy.searchsorted,
    giving O(log n) next/previous/shift and O(log n) counting instead of a day by day scan.
    Results and failures are identical to the generic implementation.
    """

    def __init__(self, name: str, data: CalendarData):
        self._name = _check_leaf_name(name)
        self._data = require(data, "data")

    @classmethod
    def of(cls,
           name: str,
           holidays: Iterable[DateLike],
           start: DateLike = "1970-01-01",
           end: DateLike = "2100-12-31",
           weekend_days: Optional[Iterable[int]] = None) -> "BaseCalendar":
        """
        Parameters
        ----------
        name: str
            Unique name of the calendar, e.g. "GBLO".
        holidays: Iterable[DateLike]
            The explicit holiday dates.
        start: DateLike, default "1970-01-01"
            First date of the supported range.
        end: DateLike, default "2100-12-31"
            Last date (inclusive) of the supported range.
        weekend_days: Iterable[int], optional
            Weekdays (Monday=0 ... Sunday=6) treated as holidays. Saturday and Sunday if omitted.
        """
        return cls(name, CalendarData.of(holidays, start, end, weekend_days))

    @property
    def name(self) -> str:
        return self._name

    @property
    def data(self) -> CalendarData:
        return self._data

    @property
    def supported_range(self) -> DateRange:
        return self._data.supported_range

    def is_holiday(self, day: DateLike) -> bool:
        return self._data.is_holiday(to_date(day))

    def with_overrides(self,
                       name: str,
                       add_holidays: Iterable[DateLike] = (),
                       remove_holidays: Iterable[DateLike] = ()) -> "BaseCalendar":
        """
        Return a new calendar with extra holidays (strikes, mourning days...) and removed holidays
        (exceptional openings). The new calendar needs its own name as names are the identity of calendars.
        """
        return BaseCalendar(name, self._data.with_overrides(add_holidays, remove_holidays))

    # -------------------------
    # Position based overrides
    # -------------------------

    def _position_of(self, d: dt.date) -> int:
        return self._data.universe.locate(d)

    def _step(self, d: dt.date, step: int) -> dt.date:
        try:
            return d + dt.timedelta(days=step)
        except OverflowError as e:
            raise OutOfRangeError(f"Date {d} cannot be moved by {step} day(s)") from e

    def next(self, day: DateLike) -> dt.date:
        d = to_date(day)
        pos = self._data.business_position
        k = int(np.searchsorted(pos, self._position_of(self._step(d, 1)), side="left"))
        if k >= len(pos):
            raise OutOfRangeError(f"No business day after {d} within the supported range of calendar {self.name}")
        return self._data.universe.day(pos[k])

    def previous(self, day: DateLike) -> dt.date:
        d = to_date(day)
        pos = self._data.business_position
        k = int(np.searchsorted(pos, self._position_of(self._step(d, -1)), side="right")) - 1
        if k < 0:
            raise OutOfRangeError(f"No business day before {d} within the supported range of calendar {self.name}")
        return self._data.universe.day(pos[k])

    def shift(self, day: DateLike, amount: int) -> dt.date:
        d = to_date(day)
        require(amount, "amount")
        if amount == 0:
            return d

        pos = self._data.business_position
        if amount > 0:
            first = self.next(d)
            k = int(np.searchsorted(pos, self._position_of(first), side="left")) + (amount - 1)
            if k >= len(pos):
                raise OutOfRangeError(
                    f"Shift of {amount} business days from {d} goes beyond the end of calendar {self.name}"
                )
        else:
            first = self.previous(d)
            k = int(np.searchsorted(pos, self._position_of(first), side="left")) + (amount + 1)
            if k < 0:
                raise OutOfRangeError(
                    f"Shift of {amount} business days from {d} goes beyond the start of calendar {self.name}"
                )
        return self._data.universe.day(pos[k])

    def _position_slice(self, rng: DateRange) -> np.ndarray:
        if rng.is_empty:
            return self._data.business_position[:0]
        i0 = self._position_of(rng.start)
        i1 = self._position_of(rng.end_inclusive)
        pos = self._data.business_position
        left = np.searchsorted(pos, i0, side="left")
        right = np.searchsorted(pos, i1, side="right")
        return pos[left:right]

    def days_between(self, start_inclusive: DateLike, end_exclusive: DateLike) -> int:
        return int(self._position_slice(self._date_range(start_inclusive, end_exclusive)).size)

    def business_days(self, start_inclusive: DateLike, end_exclusive: DateLike) -> List[dt.date]:
        universe = self._data.universe
        return [universe.day(i) for i in self._position_slice(self._date_range(start_inclusive, end_exclusive))]

    def __repr__(self) -> str:
        return f"BaseCalendar({self._name!r}, range={self.supported_range})"


class WeekendCalendar(HolidayCalendar):
    """
    Unbounded calendar whose only holidays are the given weekend days.

    At least one day of the week must be a business day.
    """

    def __init__(self, name: str, weekend_days: Iterable[int]):
        self._name = _check_leaf_name(name)
        days = frozenset(require(weekend_days, "weekend_days"))
        if any(not (isinstance(w, int) and 0 <= w <= 6) for w in days):
            raise ValueError(f"Weekend days must be integers from 0 (Monday) to 6 (Sunday), got {sorted(days)}")
        if len(days) == 7:
            raise ValueError("A weekend calendar needs at least one business day per week, use AllHolidaysCalendar")
        self._weekend_days = days

    @property
    def name(self) -> str:
        return self._name

    @property
    def weekend_days(self) -> frozenset:
        return self._weekend_days

    def is_holiday(self, day: DateLike) -> bool:
        return to_date(day).weekday() in self._weekend_days


class NoHolidaysCalendar(HolidayCalendar):
    """Calendar where every day is a business day. Identity element of `combine`."""

    @property
    def name(self) -> str:
        return "NoHolidays"

    def is_holiday(self, day: DateLike) -> bool:
        to_date(day)
        return False

    def combine(self, other: HolidayCalendar) -> HolidayCalendar:
        return require(other, "other")


class AllHolidaysCalendar(HolidayCalendar):
    """Calendar where every day is a holiday. Absorbing element of `combine`."""

    @property
    def name(self) -> str:
        return "AllHolidays"

    def is_holiday(self, day: DateLike) -> bool:
        to_date(day)
        return True

    def next(self, day: DateLike) -> dt.date:
        raise OutOfRangeError(f"No business day after {to_date(day)} in calendar {self.name}")

    def previous(self, day: DateLike) -> dt.date:
        raise OutOfRangeError(f"No business day before {to_date(day)} in calendar {self.name}")

    def combine(self, other: HolidayCalendar) -> HolidayCalendar:
        require(other, "other")
        return self


class CombinedCalendar(HolidayCalendar):
    """
    Combination of several calendars: a day is a holiday if it is a holiday in any of them.

    Nested combinations are flattened at construction into a tuple of distinct leaf calendars sorted by name,
    so the name is canonical ('A+B+C' whatever the order and nesting of combination) and a query costs
    at most one call per leaf.
    """

    def __init__(self, calendars: Iterable[HolidayCalendar]):
        leaves = _flatten(require(calendars, "calendars"))
        if len(leaves) < 2:
            raise ValueError("CombinedCalendar requires at least two distinct calendars")
        self._calendars: Tuple[HolidayCalendar, ...] = tuple(leaves[k] for k in sorted(leaves))
        self._name = "+".join(cal.name for cal in self._calendars)
        self._range = reduce(optional_intersection, (cal.supported_range for cal in self._calendars), None)
        # Union of weekend days when every leaf is a weekend calendar, the calendar is then weekly periodic
        self._weekend_days: Optional[frozenset] = None
        if all(isinstance(cal, WeekendCalendar) for cal in self._calendars):
            self._weekend_days = frozenset().union(*(cal.weekend_days for cal in self._calendars))

    @classmethod
    def of(cls, first: HolidayCalendar, second: HolidayCalendar) -> HolidayCalendar:
        """
        Combine two calendars, returning one of them when the other adds nothing.
        """
        leaves = _flatten([first, second])
        for cal in (first, second):
            if set(_flatten([cal])) == set(leaves):
                return cal
        logger.debug("Combining calendars %s and %s", first.name, second.name)
        return cls(leaves.values())

    @property
    def name(self) -> str:
        return self._name

    @property
    def calendars(self) -> Tuple[HolidayCalendar, ...]:
        return self._calendars

    @property
    def supported_range(self) -> Optional[DateRange]:
        return self._range

    def is_holiday(self, day: DateLike) -> bool:
        d = to_date(day)
        if self._range is not None and d not in self._range:
            raise OutOfRangeError(f"Date {d} is outside the supported range {self._range} of calendar {self.name}")
        return any(cal.is_holiday(d) for cal in self._calendars)

    def next(self, day: DateLike) -> dt.date:
        if self._has_no_business_day():
            raise OutOfRangeError(f"No business day after {to_date(day)} in calendar {self.name}")
        return super().next(day)

    def previous(self, day: DateLike) -> dt.date:
        if self._has_no_business_day():
            raise OutOfRangeError(f"No business day before {to_date(day)} in calendar {self.name}")
        return super().previous(day)

    def _has_no_business_day(self) -> bool:
        return self._weekend_days is not None and len(self._weekend_days) == 7


def _flatten(calendars: Iterable[HolidayCalendar]) -> Dict[str, HolidayCalendar]:
    leaves: Dict[str, HolidayCalendar] = {}
    for cal in calendars:
        require(cal, "calendar")
        if isinstance(cal, CombinedCalendar):
            for leaf in cal.calendars:
                leaves.setdefault(leaf.name, leaf)
        elif not isinstance(cal, NoHolidaysCalendar):
            leaves.setdefault(cal.name, cal)
    return leaves


NO_HOLIDAYS = NoHolidaysCalendar()
ALL_HOLIDAYS = AllHolidaysCalendar()
SAT_SUN = WeekendCalendar("Sat/Sun", (5, 6))
FRI_SAT = WeekendCalendar("Fri/Sat", (4, 5))
THU_FRI = WeekendCalendar("Thu/Fri", (3, 4))
