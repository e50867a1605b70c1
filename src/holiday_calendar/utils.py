import re
import numpy as np
import datetime as dt
from typing import Union, Any

from .errors import require

PandasTimestamp = Any
DateLike = Union[dt.date, dt.datetime, str, np.datetime64, PandasTimestamp]


def parse_date_str(s: str, dayfirst: bool = True) -> dt.date:
    """
    Parse a date string without ambiguity.

    Rules:
        1. ISO strings ("2024-01-31") are always accepted.
        2. Otherwise the string must hold exactly 3 numeric components, whatever the separators are.
        3. The year must be the only 4-digit component, either first (Y-M-D) or last (D-M-Y or M-D-Y).
        4. When the year is last, the dayfirst flag chooses between D-M-Y and M-D-Y.
        5. Compact strings ("20240131") and strings without a single 4-digit year are rejected.

    Parameters
    ----------
    s: str
        The date string to parse.
    dayfirst: bool, default True
        When the year comes last, interpret the string as day-first.

    Returns
    -------
    dt.date
        The parsed date.
    """
    s = s.strip()
    if not s:
        raise ValueError("Empty date string.")

    # fromisoformat accepts the compact form from Python 3.11 on
    if re.fullmatch(r"\d{8}", s):
        raise ValueError(f"Ambiguous date string without separators: {s!r}. Use e.g. '2024-01-31'.")

    try:
        return dt.date.fromisoformat(s)
    except ValueError:
        pass

    parts = re.findall(r"\d+", s)
    if len(parts) != 3:
        raise ValueError(f"Invalid date string: {s!r}. Expected 3 numeric components.")

    a, b, c = parts
    if len(a) == 4 and len(c) != 4:
        y, m, d = int(a), int(b), int(c)
    elif len(c) == 4 and len(a) != 4:
        y = int(c)
        d, m = (int(a), int(b)) if dayfirst else (int(b), int(a))
    else:
        raise ValueError(f"Ambiguous date string: {s!r}. Exactly one 4-digit year, first or last, is required.")

    try:
        return dt.date(y, m, d)
    except ValueError as e:
        raise ValueError(f"Invalid calendar date parsed from {s!r}: (y={y}, m={m}, d={d}).") from e


def to_date(x: DateLike, arg_name: str = "date", *, dayfirst: bool = True) -> dt.date:
    """
    Convert a date-like input to datetime.date.

    Supported input types :
        - datetime.date and datetime.datetime (time part ignored)
        - np.datetime64 (truncated to day precision)
        - str (see parse_date_str)
        - pandas.Timestamp or anything exposing to_pydatetime()

    None raises NullArgumentError naming arg_name.
    """
    require(x, arg_name)
    if isinstance(x, dt.datetime):
        return x.date()
    if isinstance(x, dt.date):
        return x
    if isinstance(x, np.datetime64):
        return d64_to_date(x)
    if isinstance(x, str):
        return parse_date_str(x, dayfirst=dayfirst)
    if hasattr(x, "to_pydatetime"):
        py = x.to_pydatetime()
        if isinstance(py, dt.datetime):
            return py.date()
    raise ValueError(f"Unsupported date type for '{arg_name}': {type(x)}")


def d64_to_date(d64: np.datetime64) -> dt.date:
    """Convert np.datetime64 to datetime.date (day precision)."""
    return dt.date.fromisoformat(np.datetime_as_string(d64.astype("datetime64[D]"), unit="D"))


def last_day_of_month(d: dt.date) -> dt.date:
    if d.month == 12:
        return dt.date(d.year, 12, 31)
    return dt.date(d.year, d.month + 1, 1) - dt.timedelta(days=1)
