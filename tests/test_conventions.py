from __future__ import annotations

from datetime import date

import pytest
from dateutil.relativedelta import relativedelta

from holiday_calendar import (
    LAST_BUSINESS_DAY,
    LAST_DAY,
    NONE,
    NullArgumentError,
    PeriodAdditionConvention,
    UnknownNameError,
)


ONE_MONTH = relativedelta(months=1)


def test_lookup_by_name() -> None:
    assert PeriodAdditionConvention.of("None") is NONE
    assert PeriodAdditionConvention.of("LastDay") is LAST_DAY
    assert PeriodAdditionConvention.of("LastBusinessDay") is LAST_BUSINESS_DAY
    assert str(LAST_DAY) == "LastDay"
    with pytest.raises(UnknownNameError):
        PeriodAdditionConvention.of("lastday")
    with pytest.raises(NullArgumentError):
        PeriodAdditionConvention.of(None)


def test_no_adjustment() -> None:
    assert not NONE.is_month_based
    assert NONE.adjust(date(2024, 1, 31), ONE_MONTH) == date(2024, 2, 29)
    assert NONE.adjust("2024-01-15", relativedelta(days=10)) == date(2024, 1, 25)


@pytest.mark.parametrize(
    "base, expected",
    [
        (date(2024, 2, 29), date(2024, 3, 31)),
        (date(2024, 2, 28), date(2024, 3, 28)),
        (date(2024, 4, 30), date(2024, 5, 31)),
        (date(2024, 1, 31), date(2024, 2, 29)),
    ],
)
def test_last_day(base: date, expected: date) -> None:
    assert LAST_DAY.adjust(base, ONE_MONTH) == expected


@pytest.mark.parametrize(
    "base, expected",
    [
        # Friday 29 March is the last business day of March
        (date(2024, 3, 29), date(2024, 4, 30)),
        (date(2024, 6, 28), date(2024, 7, 31)),
        (date(2024, 3, 28), date(2024, 4, 28)),
    ],
)
def test_last_business_day(cal_x, base: date, expected: date) -> None:
    assert LAST_BUSINESS_DAY.adjust(base, ONE_MONTH, cal_x) == expected


def test_last_business_day_lands_before_weekend(cal_x) -> None:
    # last business day of August 2024 is Friday 30 August
    assert LAST_BUSINESS_DAY.adjust(date(2024, 7, 31), ONE_MONTH, cal_x) == date(2024, 8, 30)


def test_last_business_day_requires_calendar() -> None:
    with pytest.raises(NullArgumentError):
        LAST_BUSINESS_DAY.adjust(date(2024, 3, 29), ONE_MONTH)


@pytest.mark.parametrize("convention", [LAST_DAY, LAST_BUSINESS_DAY])
@pytest.mark.parametrize("period", [relativedelta(days=1), relativedelta(weeks=2), relativedelta(months=1, days=3)])
def test_month_based_rejects_day_periods(cal_x, convention, period) -> None:
    assert convention.is_month_based
    with pytest.raises(ValueError):
        convention.adjust(date(2024, 1, 31), period, cal_x)


def test_adjust_requires_period() -> None:
    with pytest.raises(NullArgumentError):
        NONE.adjust(date(2024, 1, 31), None)
