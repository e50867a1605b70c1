"""
holiday_calendar

Holiday calendars classifying dates as holidays or business days, with business day arithmetic
(next, previous, shift, end of month), business day counting and combination of calendars.

Usage:
    from datetime import date
    from holiday_calendar import BaseCalendar, HolidayCalendar

    cal = BaseCalendar.of("XMAS", holidays=["2024-12-25"], start="2024-01-01", end="2024-12-31")
    cal.next(date(2024, 12, 24))                            # 2024-12-26
    cal.days_between(date(2024, 12, 23), date(2024, 12, 30))  # 4

    london_new_york = HolidayCalendar.of("GBLO+USNY")       # needs: pip install holiday-calendar[country]
"""

import logging

from .errors import (
    CalendarError,
    InvalidRangeError,
    DataProviderError,
    MissingDependencyError,
    NullArgumentError,
    OutOfRangeError,
    UnknownNameError,
)
from .date_universe import DateRange, DateUniverse
from .data import CalendarData
from .calendar import (
    ALL_HOLIDAYS,
    FRI_SAT,
    NO_HOLIDAYS,
    SAT_SUN,
    THU_FRI,
    AllHolidaysCalendar,
    BaseCalendar,
    CombinedCalendar,
    HolidayCalendar,
    NoHolidaysCalendar,
    WeekendCalendar,
)
from .conventions import LAST_BUSINESS_DAY, LAST_DAY, NONE, PeriodAdditionConvention
from .registry import CalendarRegistry, get_registry, reset_registry

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "CalendarError",
    "InvalidRangeError",
    "DataProviderError",
    "MissingDependencyError",
    "NullArgumentError",
    "OutOfRangeError",
    "UnknownNameError",
    "DateRange",
    "DateUniverse",
    "CalendarData",
    "HolidayCalendar",
    "BaseCalendar",
    "WeekendCalendar",
    "CombinedCalendar",
    "NoHolidaysCalendar",
    "AllHolidaysCalendar",
    "NO_HOLIDAYS",
    "ALL_HOLIDAYS",
    "SAT_SUN",
    "FRI_SAT",
    "THU_FRI",
    "PeriodAdditionConvention",
    "NONE",
    "LAST_DAY",
    "LAST_BUSINESS_DAY",
    "CalendarRegistry",
    "get_registry",
    "reset_registry",
]
