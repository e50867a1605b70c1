from __future__ import annotations

from datetime import date

import pytest

from holiday_calendar import BaseCalendar, reset_registry


@pytest.fixture(scope="session")
def cal_x() -> BaseCalendar:
    # Saturday/Sunday weekend + New Year's Day 2024
    return BaseCalendar.of("X", holidays=[date(2024, 1, 1)], start=date(2023, 1, 1), end=date(2024, 12, 31))


@pytest.fixture(scope="session")
def cal_y() -> BaseCalendar:
    return BaseCalendar.of("Y", holidays=[date(2024, 1, 2)], start=date(2024, 1, 1), end=date(2024, 12, 31))


@pytest.fixture(scope="session")
def cal_z() -> BaseCalendar:
    return BaseCalendar.of("Z", holidays=[date(2024, 1, 3)], start=date(2023, 1, 1), end=date(2025, 12, 31))


@pytest.fixture()
def clean_registry():
    yield
    reset_registry()
