from __future__ import annotations

import calendar
from datetime import date, datetime

import numpy as np
import pytest

from holiday_calendar import (
    CalendarData,
    DateRange,
    DateUniverse,
    InvalidRangeError,
    NullArgumentError,
    OutOfRangeError,
)
from holiday_calendar.utils import last_day_of_month, parse_date_str, to_date


# ============================================================
# 1) CalendarData
# ============================================================
@pytest.fixture(scope="module")
def data() -> CalendarData:
    return CalendarData.of(["2024-01-01", date(2024, 12, 25)], "2024-01-01", "2024-12-31")


def test_calendar_data_classification(data: CalendarData) -> None:
    assert data.is_holiday(date(2024, 1, 1))
    assert data.is_holiday(date(2024, 12, 25))
    assert data.is_holiday(date(2024, 1, 6))
    assert not data.is_holiday(date(2024, 1, 2))
    assert data.weekend_days == {calendar.SATURDAY, calendar.SUNDAY}
    assert data.supported_range == DateRange(date(2024, 1, 1), date(2025, 1, 1))


def test_calendar_data_mask(data: CalendarData) -> None:
    assert len(data.business_mask) == 366
    # 2024 has 262 weekdays, two of them explicit holidays
    assert int(data.business_mask.sum()) == 260
    assert data.business_position.size == 260
    assert np.all(np.diff(data.business_position) > 0)


def test_calendar_data_out_of_range(data: CalendarData) -> None:
    with pytest.raises(OutOfRangeError):
        data.is_holiday(date(2023, 12, 31))
    with pytest.raises(OutOfRangeError):
        data.is_holiday(date(2025, 1, 1))


def test_calendar_data_validation() -> None:
    with pytest.raises(InvalidRangeError):
        CalendarData.of([], "2024-12-31", "2024-01-01")
    with pytest.raises(OutOfRangeError):
        CalendarData.of(["2025-01-01"], "2024-01-01", "2024-12-31")
    with pytest.raises(ValueError):
        CalendarData.of([], "2024-01-01", "2024-12-31", weekend_days=[7])
    with pytest.raises(NullArgumentError):
        CalendarData.of(None, "2024-01-01", "2024-12-31")


def test_calendar_data_custom_weekend() -> None:
    gulf = CalendarData.of([], "2024-01-01", "2024-01-31", weekend_days=[calendar.FRIDAY, calendar.SATURDAY])
    assert gulf.is_holiday(date(2024, 1, 5))
    assert not gulf.is_holiday(date(2024, 1, 7))

    no_weekend = CalendarData.of([], "2024-01-01", "2024-01-31", weekend_days=[])
    assert not any(no_weekend.is_holiday(d) for d in DateRange(date(2024, 1, 1), date(2024, 2, 1)))


def test_calendar_data_value_equality(data: CalendarData) -> None:
    same = CalendarData.of([date(2024, 12, 25), date(2024, 1, 1)], date(2024, 1, 1), date(2024, 12, 31))
    assert same == data
    assert hash(same) == hash(data)


def test_calendar_data_is_immutable(data: CalendarData) -> None:
    with pytest.raises(AttributeError):
        data.start = date(2020, 1, 1)


def test_with_overrides(data: CalendarData) -> None:
    strike = date(2024, 5, 15)
    new = data.with_overrides(add_holidays=[strike], remove_holidays=["2024-01-01", "2024-01-06"])
    assert new.is_holiday(strike)
    assert not new.is_holiday(date(2024, 1, 1))
    assert new.is_holiday(date(2024, 1, 6))  # still a Saturday
    # the original is untouched
    assert not data.is_holiday(strike)
    assert data.is_holiday(date(2024, 1, 1))


# ============================================================
# 2) DateRange / DateUniverse
# ============================================================
def test_date_range_is_restartable_and_finite() -> None:
    r = DateRange(date(2024, 2, 27), date(2024, 3, 2))
    assert list(r) == [date(2024, 2, 27), date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]
    assert list(r) == list(r)
    assert len(r) == 4
    assert date(2024, 3, 1) in r
    assert date(2024, 3, 2) not in r
    assert r.end_inclusive == date(2024, 3, 1)


def test_date_range_edges() -> None:
    empty = DateRange(date(2024, 1, 1), date(2024, 1, 1))
    assert empty.is_empty
    assert list(empty) == []
    assert len(empty) == 0
    with pytest.raises(InvalidRangeError):
        DateRange(date(2024, 1, 2), date(2024, 1, 1))
    with pytest.raises(OutOfRangeError):
        DateRange.closed(date(2024, 1, 1), date.max)
    assert DateRange.closed(date(2024, 1, 1), date(2024, 1, 1)) == DateRange(date(2024, 1, 1), date(2024, 1, 2))


def test_date_range_intersection() -> None:
    a = DateRange(date(2024, 1, 1), date(2024, 2, 1))
    b = DateRange(date(2024, 1, 15), date(2024, 3, 1))
    assert a.intersection(b) == DateRange(date(2024, 1, 15), date(2024, 2, 1))
    disjoint = a.intersection(DateRange(date(2024, 6, 1), date(2024, 7, 1)))
    assert disjoint.is_empty


def test_date_universe() -> None:
    universe = DateUniverse(start=date(2024, 1, 1), end=date(2024, 1, 7))
    assert len(universe) == 7
    assert list(universe.weekday) == [0, 1, 2, 3, 4, 5, 6]
    assert universe.locate(date(2024, 1, 3)) == 2
    assert universe.day(6) == date(2024, 1, 7)
    with pytest.raises(OutOfRangeError):
        universe.locate(date(2024, 1, 8))


# ============================================================
# 3) Date coercion
# ============================================================
@pytest.mark.parametrize(
    "text, dayfirst, expected",
    [
        ("2024-01-31", True, date(2024, 1, 31)),
        ("2024/01/31", True, date(2024, 1, 31)),
        ("31/01/2024", True, date(2024, 1, 31)),
        ("01/31/2024", False, date(2024, 1, 31)),
        (" 05.02.2024 ", True, date(2024, 2, 5)),
    ],
)
def test_parse_date_str(text: str, dayfirst: bool, expected: date) -> None:
    assert parse_date_str(text, dayfirst=dayfirst) == expected


@pytest.mark.parametrize("text", ["", "20240131", "01-02-03", "2024-02-2024", "2024-02-30", "2024-02"])
def test_parse_date_str_rejects_ambiguous(text: str) -> None:
    with pytest.raises(ValueError):
        parse_date_str(text)


def test_to_date() -> None:
    assert to_date(date(2024, 1, 5)) == date(2024, 1, 5)
    assert to_date(datetime(2024, 1, 5, 23, 59)) == date(2024, 1, 5)
    assert to_date(np.datetime64("2024-01-05T10:00")) == date(2024, 1, 5)
    with pytest.raises(NullArgumentError, match="trade_date"):
        to_date(None, "trade_date")
    with pytest.raises(ValueError):
        to_date(3.5)


def test_last_day_of_month() -> None:
    assert last_day_of_month(date(2024, 2, 10)) == date(2024, 2, 29)
    assert last_day_of_month(date(2023, 2, 10)) == date(2023, 2, 28)
    assert last_day_of_month(date(2024, 12, 1)) == date(2024, 12, 31)
