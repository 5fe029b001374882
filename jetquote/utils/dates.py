"""
Date and time parsing for quote requests.

Accepted date shapes (output is always ``YYYY-MM-DD``):

    2025-07-14          ISO
    2025/07/14
    14/07/2025          day first
    14-07-2025
    14.07.2025
    14 July 2025        English or Italian month name, full or 3 letters
    14 luglio
    July 14, 2025
    July 14

A date without a year takes the year of ``today``, or the next year when
that day has already passed. "29 february" rolls on to the next leap year.
"""
import re
from datetime import date, datetime, time, timedelta
from typing import Optional

from jetquote.utils.text import normalize_text

NUMERIC_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%d/%m/%Y", "%d-%m-%Y", "%d.%m.%Y")

MONTHS = {
    "january": 1, "february": 2, "march": 3, "april": 4, "may": 5, "june": 6,
    "july": 7, "august": 8, "september": 9, "october": 10, "november": 11, "december": 12,
    "gennaio": 1, "febbraio": 2, "marzo": 3, "aprile": 4, "maggio": 5, "giugno": 6,
    "luglio": 7, "agosto": 8, "settembre": 9, "ottobre": 10, "novembre": 11, "dicembre": 12,
}
MONTHS.update({name[:3]: num for name, num in list(MONTHS.items())})

DAY_MONTH = re.compile(r"^(\d{1,2})\s+([a-z]+)\.?(?:\s+(\d{4}))?$")
MONTH_DAY = re.compile(r"^([a-z]+)\.?\s+(\d{1,2})(?:,?\s+(\d{4}))?$")
TIME_PATTERN = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")

LEAP_SEARCH_YEARS = 9


class DateFormatError(ValueError):
    pass


def parse_date(value: str, today: Optional[date] = None) -> date:
    text = value.strip()
    for fmt in NUMERIC_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    folded = normalize_text(text)
    m = DAY_MONTH.match(folded)
    if m:
        day, month_name, year = m.groups()
    else:
        m = MONTH_DAY.match(folded)
        if not m:
            raise DateFormatError(f"Unrecognised date: {value!r}")
        month_name, day, year = m.groups()

    month = MONTHS.get(month_name)
    if month is None:
        raise DateFormatError(f"Unrecognised month in date: {value!r}")

    if year:
        try:
            return date(int(year), month, int(day))
        except ValueError as e:
            raise DateFormatError(f"Invalid date: {value!r}") from e

    today = today or date.today()
    # 29 February may be up to 8 years away
    for candidate_year in range(today.year, today.year + LEAP_SEARCH_YEARS):
        try:
            candidate = date(candidate_year, month, int(day))
        except ValueError:
            continue
        if candidate >= today:
            return candidate
    raise DateFormatError(f"Invalid date: {value!r}")


def normalize_date(value: str, today: Optional[date] = None) -> str:
    return parse_date(value, today).isoformat()


def parse_time(value: str) -> time:
    m = TIME_PATTERN.match(value.strip())
    if not m:
        raise DateFormatError(f"Invalid time {value!r}, expected HH:MM")
    return time(int(m.group(1)), int(m.group(2)))


def format_clock(value: time) -> str:
    return f"{value.hour:02d}:{value.minute:02d}"


def add_hours(start: time, hours: float) -> time:
    """Clock time ``hours`` after ``start``, wrapping at midnight"""
    minutes = start.hour * 60 + start.minute + int(round(hours * 60))
    minutes %= 24 * 60
    return time(minutes // 60, minutes % 60)


def combine(day: Optional[date], at: Optional[time]) -> Optional[datetime]:
    if day is None:
        return None
    return datetime.combine(day, at or time(0, 0))


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start) / timedelta(hours=1)
