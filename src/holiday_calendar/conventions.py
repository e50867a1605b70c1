"""
Conventions defining how a period is added to a date.

The default conventions include two end-of-month rules, only applicable to month-based periods
(periods made of years and/or months).
"""

import datetime as dt
from abc import ABC, abstractmethod
from typing import Dict, Optional

from dateutil.relativedelta import relativedelta

from .calendar import HolidayCalendar
from .errors import UnknownNameError, require
from .utils import DateLike, last_day_of_month, to_date


class PeriodAdditionConvention(ABC):
    """A convention defining how a period is added to a date."""

    @classmethod
    def of(cls, name: str) -> "PeriodAdditionConvention":
        require(name, "name")
        try:
            return _CONVENTIONS[name]
        except KeyError:
            raise UnknownNameError(f"Unknown period addition convention: {name!r}") from None

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    @abstractmethod
    def is_month_based(self) -> bool:
        """Whether the convention requires a period made of years and/or months only."""

    def adjust(self,
               base_date: DateLike,
               period: relativedelta,
               calendar: Optional[HolidayCalendar] = None) -> dt.date:
        """
        Add the period to the base date, then apply the convention rule to the end date.

        Parameters
        ----------
        base_date: DateLike
            The date to add to.
        period: relativedelta
            The period to add, e.g. relativedelta(months=3).
        calendar: HolidayCalendar, optional
            The holiday calendar, required by conventions relying on business days.
        """
        base = to_date(base_date, "base_date")
        require(period, "period")
        if self.is_month_based and _has_day_part(period):
            raise ValueError(f"Convention {self.name} requires a month-based period, got {period!r}")
        return self._adjust(base, base + period, calendar)

    @abstractmethod
    def _adjust(self, base: dt.date, end: dt.date, calendar: Optional[HolidayCalendar]) -> dt.date:
        pass

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"PeriodAdditionConvention({self.name!r})"


def _has_day_part(period: relativedelta) -> bool:
    return bool(period.days or period.hours or period.minutes or period.seconds or period.microseconds)


class _NoAdjustment(PeriodAdditionConvention):

    @property
    def name(self) -> str:
        return "None"

    @property
    def is_month_based(self) -> bool:
        return False

    def _adjust(self, base, end, calendar):
        return end


class _LastDay(PeriodAdditionConvention):
    # Base date on the last day of its month -> last day of the end month

    @property
    def name(self) -> str:
        return "LastDay"

    @property
    def is_month_based(self) -> bool:
        return True

    def _adjust(self, base, end, calendar):
        if base == last_day_of_month(base):
            return last_day_of_month(end)
        return end


class _LastBusinessDay(PeriodAdditionConvention):
    # Base date on the last business day of its month -> last business day of the end month

    @property
    def name(self) -> str:
        return "LastBusinessDay"

    @property
    def is_month_based(self) -> bool:
        return True

    def _adjust(self, base, end, calendar):
        require(calendar, "calendar")
        if calendar.is_last_business_day_of_month(base):
            return calendar.last_business_day_of_month(end)
        return end


NONE = _NoAdjustment()
LAST_DAY = _LastDay()
LAST_BUSINESS_DAY = _LastBusinessDay()

_CONVENTIONS: Dict[str, PeriodAdditionConvention] = {c.name: c for c in (NONE, LAST_DAY, LAST_BUSINESS_DAY)}
