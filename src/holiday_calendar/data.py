import calendar
import numpy as np
import datetime as dt
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional

from .date_universe import DateRange, DateUniverse
from .errors import OutOfRangeError, require
from .utils import DateLike, to_date

DEFAULT_WEEKEND: FrozenSet[int] = frozenset({calendar.SATURDAY, calendar.SUNDAY})


@dataclass(frozen=True)
class CalendarData:
    """
    Immutable holiday data backing a BaseCalendar.

    It is defined by :
        - A set of explicit holiday dates
        - A set of weekend days (date.weekday() numbering, Monday=0 ... Sunday=6), always treated as holidays
        - An inclusive [start, end] range over which the data is authoritative

    At construction a DateUniverse covering the range is built, together with a boolean mask of the same length
    where True indicates a business day, and the sorted positions of the business days.
    Queries outside the range raise OutOfRangeError.
    """
    holidays: FrozenSet[dt.date]
    start: dt.date
    end: dt.date
    weekend_days: FrozenSet[int] = DEFAULT_WEEKEND

    universe: DateUniverse = field(init=False, repr=False, compare=False)
    business_mask: np.ndarray = field(init=False, repr=False, compare=False)
    business_position: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        require(self.holidays, "holidays")
        require(self.start, "start")
        require(self.end, "end")
        require(self.weekend_days, "weekend_days")
        object.__setattr__(self, "holidays", frozenset(self.holidays))
        object.__setattr__(self, "weekend_days", frozenset(self.weekend_days))

        bad_days = [w for w in self.weekend_days if not (isinstance(w, int) and 0 <= w <= 6)]
        if bad_days:
            raise ValueError(f"Weekend days must be integers from 0 (Monday) to 6 (Sunday), got {bad_days}")

        universe = DateUniverse(start=self.start, end=self.end)
        outside = sorted(d for d in self.holidays if d not in universe)
        if outside:
            raise OutOfRangeError(
                f"Holiday {outside[0]} is outside the supported range [{self.start}, {self.end}]"
            )

        object.__setattr__(self, "universe", universe)
        mask = self._create_mask(universe)
        object.__setattr__(self, "business_mask", mask)
        object.__setattr__(self, "business_position", np.flatnonzero(mask).astype("int64"))

    @classmethod
    def of(cls,
           holidays: Iterable[DateLike],
           start: DateLike,
           end: DateLike,
           weekend_days: Optional[Iterable[int]] = None) -> "CalendarData":
        """
        Build calendar data from any date-like inputs.

        Parameters
        ----------
        holidays: Iterable[DateLike]
            The explicit holiday dates.
        start: DateLike
            First date (inclusive) of the supported range.
        end: DateLike
            Last date (inclusive) of the supported range.
        weekend_days: Iterable[int], optional
            Weekdays treated as holidays, Saturday and Sunday if omitted.
        """
        require(holidays, "holidays")
        weekend = DEFAULT_WEEKEND if weekend_days is None else frozenset(weekend_days)
        return cls(
            holidays=frozenset(to_date(d, "holidays") for d in holidays),
            start=to_date(start, "start"),
            end=to_date(end, "end"),
            weekend_days=weekend,
        )

    def _create_mask(self, universe: DateUniverse) -> np.ndarray:
        weekend = np.array(sorted(self.weekend_days), dtype="uint8")
        mask = ~np.isin(universe.weekday, weekend)
        if self.holidays:
            hol64 = np.array(sorted(self.holidays), dtype="datetime64[D]")
            mask[universe.positions(hol64)] = False
        return mask

    @property
    def supported_range(self) -> DateRange:
        return self.universe.date_range

    def is_holiday(self, d: dt.date) -> bool:
        return not self.business_mask[self.universe.locate(d)]

    def with_overrides(self,
                       add_holidays: Iterable[DateLike] = (),
                       remove_holidays: Iterable[DateLike] = ()) -> "CalendarData":
        """
        Return new data with extra holidays added and explicit holidays removed.

        Removing a date that falls on a weekend day leaves it a holiday.
        """
        added = {to_date(d, "add_holidays") for d in add_holidays}
        removed = {to_date(d, "remove_holidays") for d in remove_holidays}
        return CalendarData(
            holidays=(self.holidays | added) - removed,
            start=self.start,
            end=self.end,
            weekend_days=self.weekend_days,
        )
