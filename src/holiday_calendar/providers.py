import logging
import datetime as dt
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import FrozenSet, Set

from .data import CalendarData
from .date_universe import DateRange
from .errors import DataProviderError, MissingDependencyError, UnknownNameError

logger = logging.getLogger(__name__)


class AbstractDataProvider(ABC):
    """
    Abstract base class for the third-party holiday sources a CalendarData can be built from.
    """
    @abstractmethod
    def build(self, start: dt.date, end: dt.date) -> CalendarData:
        """
        Build the calendar data over [start, end] (inclusive).

        Parameters
        ----------
        start: dt.date
            First date of the supported range.
        end: dt.date
            Last date of the supported range.
        """


@dataclass(frozen=True)
class CountryDataProvider(AbstractDataProvider):
    """
    Public holidays of a country from the workalendar package.

    Specific documentation : https://pypi.org/project/workalendar/

    Attributes
    ----------
    country_code: str
        ISO code of the country, e.g. "FR", "GB", "US".
    """
    country_code: str

    def build(self, start: dt.date, end: dt.date) -> CalendarData:
        try:
            from workalendar.registry import registry
        except ImportError as e:
            raise MissingDependencyError(
                "workalendar is required for country calendars. "
                "Install extra: pip install holiday-calendar[country]"
            ) from e

        cal_cls = registry.get(self.country_code)
        if cal_cls is None:
            raise UnknownNameError(f"Unknown workalendar country code {self.country_code!r}")
        cal = cal_cls()

        logger.debug("Fetching workalendar holidays for %s over %s..%s", self.country_code, start, end)
        holidays: Set[dt.date] = set()
        for year in range(start.year, end.year + 1):
            try:
                year_holidays = cal.holidays(year)
            except (NotImplementedError, KeyError, ValueError) as e:
                # e.g. astronomical holidays only pre-computed for a limited set of years
                raise DataProviderError(
                    f"workalendar cannot compute {self.country_code} holidays for year {year}: {e}"
                ) from e
            for day, _label in year_holidays:
                if start <= day <= end:
                    holidays.add(day)

        return CalendarData(
            holidays=frozenset(holidays),
            start=start,
            end=end,
            weekend_days=frozenset(cal.get_weekend_days()),
        )


@dataclass(frozen=True)
class QuantLibDataProvider(AbstractDataProvider):
    """
    Holidays of a QuantLib calendar.

    Specific documentation : https://quantlib-python-docs.readthedocs.io/en/latest/dates.html#calendar

    Attributes
    ----------
    calendar_code: str
        One of "TARGET", "US_GOVIES", "UK", "JAPAN".
    """
    calendar_code: str

    def _ql_calendar(self, ql):
        if self.calendar_code == "TARGET":
            return ql.TARGET()
        if self.calendar_code == "US_GOVIES":
            return ql.UnitedStates(ql.UnitedStates.GovernmentBond)
        if self.calendar_code == "UK":
            return ql.UnitedKingdom()
        if self.calendar_code == "JAPAN":
            return ql.Japan()
        raise UnknownNameError(f"Unknown QuantLib calendar code {self.calendar_code!r}")

    def build(self, start: dt.date, end: dt.date) -> CalendarData:
        try:
            import QuantLib as ql
        except ImportError as e:
            raise MissingDependencyError(
                "QuantLib is required for quantlib calendars. "
                "Install extra: pip install holiday-calendar[quantlib]"
            ) from e

        cal = self._ql_calendar(ql)
        # QuantLib numbers weekdays Sunday=1 ... Saturday=7
        weekend_days = frozenset(w for w in range(7) if cal.isWeekend((w + 1) % 7 + 1))

        logger.debug("Fetching QuantLib holidays for %s over %s..%s", self.calendar_code, start, end)
        holidays = frozenset(
            d for d in DateRange.closed(start, end)
            if d.weekday() not in weekend_days and not cal.isBusinessDay(ql.Date(d.day, d.month, d.year))
        )
        return CalendarData(holidays=holidays, start=start, end=end, weekend_days=weekend_days)


_WEEKMASK_DAYS = {"Mon": 0, "Tue": 1, "Wed": 2, "Thu": 3, "Fri": 4, "Sat": 5, "Sun": 6}


@dataclass(frozen=True)
class ExchangeDataProvider(AbstractDataProvider):
    """
    Trading holidays of an exchange from the pandas_market_calendars package.

    Specific documention : https://pandas-market-calendars.readthedocs.io/en/latest
    Primary data source : https://www.tradinghours.com

    Attributes
    ----------
    exchange_code: str
        Code of the exchange calendar to use, e.g. "XNYS" for NYSE, "XLON" for London.
    """
    exchange_code: str

    def build(self, start: dt.date, end: dt.date) -> CalendarData:
        try:
            import pandas_market_calendars as mcal
        except ImportError as e:
            raise MissingDependencyError(
                "pandas_market_calendars is required for exchange calendars. "
                "Install extra: pip install holiday-calendar[exchange]"
            ) from e

        try:
            cal = mcal.get_calendar(self.exchange_code)
        except (RuntimeError, KeyError) as e:
            raise UnknownNameError(f"Unknown exchange code {self.exchange_code!r}") from e

        open_days = {_WEEKMASK_DAYS[name] for name in str(cal.weekmask).split()}
        weekend_days: FrozenSet[int] = frozenset(set(range(7)) - open_days)

        logger.debug("Fetching %s sessions over %s..%s", self.exchange_code, start, end)
        sessions = cal.valid_days(start_date=start.isoformat(), end_date=end.isoformat())
        if getattr(sessions, "tz", None) is not None:
            sessions = sessions.tz_convert(None)
        session_days = {ts.date() for ts in sessions.normalize()}

        holidays = frozenset(
            d for d in DateRange.closed(start, end)
            if d.weekday() not in weekend_days and d not in session_days
        )
        return CalendarData(holidays=holidays, start=start, end=end, weekend_days=weekend_days)
