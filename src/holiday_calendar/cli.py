"""
CLI to inspect holiday calendars and run business day arithmetic.

Inspired by the CLI of trading_calendars/tcal.
"""

import logging
import calendar as pycal
from datetime import date
from typing import List, Optional

import click

from .calendar import HolidayCalendar
from .errors import CalendarError
from .registry import get_registry
from .utils import to_date


MONTHS = [
    'January', 'February', 'March', 'April', 'May', 'June',
    'July', 'August', 'September', 'October', 'November', 'December'
]

WEEKDAYS = ['Mo', 'Tu', 'We', 'Th', 'Fr', 'Sa', 'Su']


def render_month(calendar: HolidayCalendar, year: int, month: int, print_year: bool = False) -> str:
    """
    Render a single month, holidays and weekends in brackets.

    Args:
        calendar: Calendar to use
        year: Year to render
        month: Month to render (1-12)
        print_year: Whether to include year in title

    Returns:
        String representation of the month
    """
    title = MONTHS[month - 1]
    if print_year:
        title += f' {year}'
    lines = [f'{title:^28}'.rstrip()]

    # each day column is 4 characters wide
    lines.append(''.join(f' {day} ' for day in WEEKDAYS).rstrip())

    first_weekday, last_day = pycal.monthrange(year, month)
    current_line = ' ' * (4 * first_weekday)

    for day in range(1, last_day + 1):
        d = date(year, month, day)
        if calendar.is_business_day(d):
            current_line += f' {day:2} '
        else:
            current_line += f'[{day:2}]'

        if d.weekday() == 6:
            lines.append(current_line)
            current_line = ''

    if current_line:
        lines.append(current_line)

    return '\n'.join(lines)


def concat_months(month_strings: List[str], width: int = 28) -> str:
    """
    Concatenate multiple month strings horizontally.

    Args:
        month_strings: List of month string representations
        width: Width of each month column

    Returns:
        Horizontally concatenated months
    """
    as_lines = [s.splitlines() for s in month_strings]
    max_lines = max(len(lines) for lines in as_lines)

    for lines in as_lines:
        lines.extend([' ' * width] * (max_lines - len(lines)))

    rows = []
    for row_parts in zip(*as_lines):
        rows.append('   '.join(part.ljust(width) for part in row_parts))

    return '\n'.join(row.rstrip() for row in rows)


def render_year(calendar: HolidayCalendar, year: int) -> str:
    """Render a full year, 3 months per row."""
    blocks = []
    for row in range(4):
        months = [render_month(calendar, year, row * 3 + col + 1) for col in range(3)]
        blocks.append(concat_months(months, 28))

    return '\n'.join([f'{year:^88}'.rstrip(), '\n\n'.join(blocks)])


def _parse_date(ctx, param, value) -> Optional[date]:
    if value is None:
        return None
    try:
        return to_date(value, param.name)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


def _lookup(name: str) -> HolidayCalendar:
    try:
        return get_registry().lookup(name)
    except CalendarError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.option('-v', '--verbose', is_flag=True, help='Log debug information to stderr')
def main(verbose: bool):
    """
    Holiday calendars and business day arithmetic.

    Calendars are given by code (e.g. GBLO, USNY, EUTA, Sat/Sun) and can be
    combined with '+' (e.g. GBLO+USNY).
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s %(name)s: %(message)s')


@main.command()
@click.argument('name')
@click.argument('year', type=int, required=False)
@click.argument('month', type=click.IntRange(1, 12), required=False)
def show(name: str, year: Optional[int], month: Optional[int]):
    """
    Display a calendar, holidays and weekends shown in brackets [like this].

    Examples:

        # Show the London calendar for 2026
        holcal show GBLO 2026

        # Show January 2026 for London and New York combined
        holcal show GBLO+USNY 2026 1
    """
    calendar = _lookup(name)
    if year is None:
        year = date.today().year

    try:
        if month is not None:
            output = render_month(calendar, year, month, print_year=True)
        else:
            output = render_year(calendar, year)
    except CalendarError as e:
        raise click.ClickException(str(e)) from e

    click.echo(output)


@main.command()
@click.argument('name')
@click.argument('day', callback=_parse_date)
def check(name: str, day: date):
    """Tell whether DAY is a business day or a holiday."""
    calendar = _lookup(name)
    try:
        label = 'business day' if calendar.is_business_day(day) else 'holiday'
    except CalendarError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f'{day.isoformat()} {label}')


# negative amounts would otherwise be parsed as options
@main.command(context_settings={'ignore_unknown_options': True})
@click.argument('name')
@click.argument('day', callback=_parse_date)
@click.argument('amount', type=int)
def shift(name: str, day: date, amount: int):
    """Shift DAY by AMOUNT business days (negative to go backwards)."""
    calendar = _lookup(name)
    try:
        click.echo(calendar.shift(day, amount).isoformat())
    except CalendarError as e:
        raise click.ClickException(str(e)) from e


@main.command()
@click.argument('name')
@click.argument('start', callback=_parse_date)
@click.argument('end', callback=_parse_date)
def count(name: str, start: date, end: date):
    """Count the business days from START (inclusive) to END (exclusive)."""
    calendar = _lookup(name)
    try:
        click.echo(str(calendar.days_between(start, end)))
    except CalendarError as e:
        raise click.ClickException(str(e)) from e


@main.command(name='list')
def list_codes():
    """List the known calendar codes."""
    for code in get_registry().names():
        click.echo(code)


if __name__ == '__main__':
    main()
