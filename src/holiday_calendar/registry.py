"""
Name -> calendar registry.

The registry resolves a calendar code, or a '+'-joined composite of codes, to a HolidayCalendar.
Provider-backed calendars (workalendar, QuantLib, pandas_market_calendars) are built lazily on first
lookup, at most once, under a lock. The process-wide registry is itself created lazily by get_registry()
and can be torn down or replaced with reset_registry().
"""

import os
import logging
import threading
import datetime as dt
from functools import reduce
from typing import Callable, Dict, Iterable, List, Optional

from .calendar import (
    ALL_HOLIDAYS,
    NO_HOLIDAYS,
    BaseCalendar,
    HolidayCalendar,
    WeekendCalendar,
)
from .errors import UnknownNameError, require
from .mapping import CALENDAR_CODES
from .providers import AbstractDataProvider, CountryDataProvider, ExchangeDataProvider, QuantLibDataProvider
from .utils import DateLike, to_date

logger = logging.getLogger(__name__)

DEFAULT_START_DATE = "1970-01-01"
DEFAULT_END_DATE = "2100-12-31"
START_DATE_ENV = "HOLCAL_START_DATE"
END_DATE_ENV = "HOLCAL_END_DATE"

CalendarFactory = Callable[[], HolidayCalendar]


class CalendarRegistry:
    """
    Thread-safe mapping from unique name to calendar.

    Usage:
        registry = CalendarRegistry.default()

        london = registry.lookup("GBLO")
        london_and_new_york = registry.lookup("GBLO+USNY")
    """

    def __init__(self,
                 calendars: Iterable[HolidayCalendar] = (),
                 factories: Optional[Dict[str, CalendarFactory]] = None):
        self._lock = threading.RLock()
        self._calendars: Dict[str, HolidayCalendar] = {}
        self._factories: Dict[str, CalendarFactory] = {}
        for cal in calendars:
            self.register(cal)
        for name, factory in (factories or {}).items():
            self.register_factory(name, factory)

    # ---------- factories
    @classmethod
    def default(cls,
                start_date: Optional[DateLike] = None,
                end_date: Optional[DateLike] = None) -> "CalendarRegistry":
        """
        Registry holding every code of CALENDAR_CODES.

        Provider-backed calendars cover [start_date, end_date]. When not given, the range is read from the
        HOLCAL_START_DATE / HOLCAL_END_DATE environment variables, falling back to 1970-01-01 .. 2100-12-31.
        """
        start = to_date(start_date if start_date is not None else os.environ.get(START_DATE_ENV, DEFAULT_START_DATE),
                        "start_date")
        end = to_date(end_date if end_date is not None else os.environ.get(END_DATE_ENV, DEFAULT_END_DATE),
                      "end_date")

        registry = cls()
        for code, (kind, provider_code) in CALENDAR_CODES.items():
            if kind == "trivial":
                registry.register(NO_HOLIDAYS if provider_code == "none" else ALL_HOLIDAYS)
            elif kind == "weekend":
                registry.register(WeekendCalendar(code, provider_code))
            else:
                registry.register_factory(code, _provider_factory(code, _provider(kind, provider_code), start, end))
        logger.debug("Default registry populated with %d codes over %s..%s", len(CALENDAR_CODES), start, end)
        return registry

    # ---------- registration
    def register(self, calendar: HolidayCalendar) -> None:
        """
        Register a leaf calendar under its name.

        Composite names (containing '+') are rejected, they are resolved by combining their parts.
        """
        require(calendar, "calendar")
        name = calendar.name
        if "+" in name:
            raise ValueError(f"Cannot register composite calendar {name!r}, register its parts instead")
        with self._lock:
            existing = self._calendars.get(name)
            if (existing is not None and existing is not calendar) or name in self._factories:
                raise ValueError(f"Calendar already registered: {name!r}")
            self._calendars[name] = calendar
        logger.debug("Registered calendar %s", name)

    def register_factory(self, name: str, factory: CalendarFactory) -> None:
        """Register a calendar built on first lookup of `name`."""
        require(name, "name")
        require(factory, "factory")
        if not name or "+" in name:
            raise ValueError(f"Invalid calendar name {name!r}")
        with self._lock:
            if name in self._calendars or name in self._factories:
                raise ValueError(f"Calendar already registered: {name!r}")
            self._factories[name] = factory

    def clear(self) -> None:
        with self._lock:
            self._calendars.clear()
            self._factories.clear()

    # ---------- lookup
    def names(self) -> List[str]:
        with self._lock:
            return sorted(set(self._calendars) | set(self._factories))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and (name in self._calendars or name in self._factories)

    def lookup(self, name: str) -> HolidayCalendar:
        """
        Resolve a unique name, e.g. "GBLO", or a composite name, e.g. "GBLO+USNY".

        Names are case sensitive. Raises UnknownNameError for unknown or malformed names.
        """
        require(name, "name")
        if not isinstance(name, str):
            raise UnknownNameError(f"Calendar name must be a string, got {type(name).__name__}")
        parts = name.split("+")
        if any(not part for part in parts):
            raise UnknownNameError(f"Malformed calendar name: {name!r}")
        calendars = [self._resolve(part) for part in parts]
        return reduce(lambda left, right: left.combine(right), calendars)

    def _resolve(self, code: str) -> HolidayCalendar:
        cal = self._calendars.get(code)
        if cal is not None:
            return cal
        with self._lock:
            cal = self._calendars.get(code)
            if cal is None:
                factory = self._factories.get(code)
                if factory is None:
                    raise UnknownNameError(f"Unknown calendar name: {code!r}")
                logger.debug("Building calendar %s", code)
                cal = factory()
                if cal.name != code:
                    raise ValueError(f"Factory for {code!r} built a calendar named {cal.name!r}")
                self._calendars[code] = cal
                del self._factories[code]
            return cal


def _provider(kind: str, provider_code: str) -> AbstractDataProvider:
    if kind == "country":
        return CountryDataProvider(country_code=provider_code)
    if kind == "quantlib":
        return QuantLibDataProvider(calendar_code=provider_code)
    if kind == "exchange":
        return ExchangeDataProvider(exchange_code=provider_code)
    raise ValueError(f"Unknown provider kind: {kind}")


def _provider_factory(code: str, provider: AbstractDataProvider, start: dt.date, end: dt.date) -> CalendarFactory:
    return lambda: BaseCalendar(code, provider.build(start, end))


# =========================
# Process-wide registry
# =========================
_registry: Optional[CalendarRegistry] = None
_registry_lock = threading.Lock()


def get_registry() -> CalendarRegistry:
    """Return the process-wide registry, creating the default one on first access."""
    global _registry
    registry = _registry
    if registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = CalendarRegistry.default()
            registry = _registry
    return registry


def reset_registry(registry: Optional[CalendarRegistry] = None) -> None:
    """Replace the process-wide registry; with no argument the default one is rebuilt on next access."""
    global _registry
    with _registry_lock:
        _registry = registry
