from typing import Any, Dict, Tuple

# code -> (provider kind, provider argument)
CALENDAR_CODES: Dict[str, Tuple[str, Any]] = {
    # Trivial calendars
    "NoHolidays": ("trivial", "none"),
    "AllHolidays": ("trivial", "all"),

    # Weekend-only calendars (date.weekday() numbering, Monday=0)
    "Sat/Sun": ("weekend", (5, 6)),
    "Fri/Sat": ("weekend", (4, 5)),
    "Thu/Fri": ("weekend", (3, 4)),

    # Country public holidays (workalendar)
    "GBLO": ("country", "GB"),
    "USNY": ("country", "US"),
    "FRPA": ("country", "FR"),
    "DEFR": ("country", "DE"),
    "CHZU": ("country", "CH"),
    "CATO": ("country", "CA"),
    "ITMI": ("country", "IT"),
    "ESMA": ("country", "ES"),
    "NLAM": ("country", "NL"),
    "BEBR": ("country", "BE"),

    # QuantLib calendars
    "EUTA": ("quantlib", "TARGET"),
    "USGS": ("quantlib", "US_GOVIES"),
    "GBSE": ("quantlib", "UK"),
    "JPTO": ("quantlib", "JAPAN"),

    # Exchange trading calendars (pandas_market_calendars)
    "XNYS": ("exchange", "XNYS"),
    "XLON": ("exchange", "XLON"),
    "XPAR": ("exchange", "XPAR"),
    "XETR": ("exchange", "XETR"),
    "XTSE": ("exchange", "XTSE"),
    "XTKS": ("exchange", "XTKS"),
    "XHKG": ("exchange", "XHKG"),
}
