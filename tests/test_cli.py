from __future__ import annotations

import pytest
from click.testing import CliRunner

from holiday_calendar import CalendarRegistry, DataProviderError, reset_registry
from holiday_calendar.cli import main, render_month


@pytest.fixture()
def runner(clean_registry, cal_x, cal_y) -> CliRunner:
    reset_registry(CalendarRegistry([cal_x, cal_y]))
    return CliRunner()


def test_check(runner: CliRunner) -> None:
    result = runner.invoke(main, ["check", "X", "2024-01-01"])
    assert result.exit_code == 0
    assert result.output.strip() == "2024-01-01 holiday"

    result = runner.invoke(main, ["check", "X+Y", "03/01/2024"])
    assert result.exit_code == 0
    assert result.output.strip() == "2024-01-03 business day"


def test_shift(runner: CliRunner) -> None:
    result = runner.invoke(main, ["shift", "X+Y", "2024-01-01", "1"])
    assert result.exit_code == 0
    assert result.output.strip() == "2024-01-03"

    result = runner.invoke(main, ["shift", "X", "2024-01-02", "-1"])
    assert result.exit_code == 0
    assert result.output.strip() == "2023-12-29"


def test_count(runner: CliRunner) -> None:
    result = runner.invoke(main, ["count", "X", "2024-01-01", "2024-01-08"])
    assert result.exit_code == 0
    assert result.output.strip() == "4"


def test_count_invalid_range(runner: CliRunner) -> None:
    result = runner.invoke(main, ["count", "X", "2024-01-08", "2024-01-01"])
    assert result.exit_code == 1
    assert "Error" in result.output


def test_out_of_range(runner: CliRunner) -> None:
    result = runner.invoke(main, ["check", "Y", "2023-06-01"])
    assert result.exit_code == 1


def test_show_month(runner: CliRunner) -> None:
    result = runner.invoke(main, ["show", "X", "2024", "1"])
    assert result.exit_code == 0
    assert "January 2024" in result.output
    assert "[ 1]" in result.output
    assert "  2 " in result.output


def test_show_year(runner: CliRunner) -> None:
    result = runner.invoke(main, ["show", "X", "2024"])
    assert result.exit_code == 0
    assert "2024" in result.output
    assert "January" in result.output
    assert "December" in result.output


def test_unknown_calendar(runner: CliRunner) -> None:
    result = runner.invoke(main, ["check", "GBLO", "2024-01-01"])
    assert result.exit_code == 1
    assert "GBLO" in result.output


def test_bad_date(runner: CliRunner) -> None:
    result = runner.invoke(main, ["check", "X", "20240101"])
    assert result.exit_code == 2


def test_list(runner: CliRunner) -> None:
    result = runner.invoke(main, ["list"])
    assert result.exit_code == 0
    assert result.output.split() == ["X", "Y"]


def test_render_month_layout(cal_x) -> None:
    lines = render_month(cal_x, 2024, 1).splitlines()
    assert lines[0] == f"{'January':^28}".rstrip()
    assert lines[1] == " Mo  Tu  We  Th  Fr  Sa  Su"
    # 1 January 2024 is a Monday holiday, 6 and 7 the weekend
    assert lines[2] == "[ 1]  2   3   4   5 [ 6][ 7]"


def test_provider_failure_is_reported(clean_registry) -> None:
    def broken():
        raise DataProviderError("cannot compute holidays for year 1970")

    reset_registry(CalendarRegistry(factories={"JPTO": broken}))
    result = CliRunner().invoke(main, ["check", "JPTO", "2024-01-01"])
    assert result.exit_code == 1
    assert "1970" in result.output
