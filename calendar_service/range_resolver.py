"""
Range Resolution Module

This module maps visible date windows onto the calendar quarters whose
backing files could hold events for that window, and defines the visible
windows of the month, week and search views.
"""

import calendar
import re
from datetime import date, timedelta
from typing import List, NamedTuple, Tuple

MIN_SUPPORTED_DATE = date(2021, 1, 1)
DEFAULT_PATH_TEMPLATE = "data/events-{key}.csv"
MONTH_GRID_DAYS = 42

_QUARTER_KEY_RE = re.compile(r"^(\d{4})-Q([1-4])$")


class InvalidQuarterKeyError(ValueError):
    """Raised when a quarter key is not of the form ``<year>-Q<1..4>``."""


class DateWindow(NamedTuple):
    """Inclusive range of calendar days."""
    start: date
    end: date

    def days(self) -> List[date]:
        """All days of the window in order."""
        span = (self.end - self.start).days
        return [self.start + timedelta(days=i) for i in range(span + 1)]

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


def quarter_of(day: date) -> int:
    """Quarter number (1-4) of a date."""
    return (day.month - 1) // 3 + 1


def quarter_key(day: date) -> str:
    """Quarter key ``"<year>-Q<n>"`` of a date."""
    return f"{day.year}-Q{quarter_of(day)}"


def parse_quarter_key(key: str) -> Tuple[int, int]:
    """
    Split a quarter key into year and quarter number.

    Args:
        key: Quarter key such as ``2024-Q1``

    Returns:
        Tuple of (year, quarter)

    Raises:
        InvalidQuarterKeyError: If the key is malformed
    """
    match = _QUARTER_KEY_RE.match(key or "")
    if not match:
        raise InvalidQuarterKeyError(f"Invalid quarter key: {key!r}")
    return int(match.group(1)), int(match.group(2))


def quarter_file_path(key: str, template: str = DEFAULT_PATH_TEMPLATE) -> str:
    """Relative path of the CSV file backing a quarter."""
    parse_quarter_key(key)
    return template.format(key=key)


def quarter_keys_in_range(start: date, end: date) -> List[str]:
    """
    Compute the ordered, de-duplicated quarter keys covering a date window.

    A cursor steps month by month from the start month through the end
    month inclusive, so a window crossing a quarter boundary mid-month
    still picks up both quarters.

    Args:
        start: First day of the window
        end: Last day of the window

    Returns:
        List of quarter keys in chronological order (empty if start > end)
    """
    keys: List[str] = []
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        key = f"{year}-Q{(month - 1) // 3 + 1}"
        if key not in keys:
            keys.append(key)
        month += 1
        if month > 12:
            year, month = year + 1, 1
    return keys


def add_months(day: date, months: int) -> date:
    """
    Shift a date by whole months, clamping the day to the target month.

    ``2024-03-31`` plus one month is ``2024-04-30``, never ``2024-05-01``.
    """
    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def clamp_to_min_date(day: date, min_date: date = MIN_SUPPORTED_DATE) -> date:
    """Never let a date precede the minimum supported date."""
    return min_date if day < min_date else day


def start_of_week(day: date) -> date:
    """Sunday on or before the given day."""
    # date.weekday(): Monday=0 .. Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def month_visible_range(anchor: date) -> DateWindow:
    """Six-row month grid starting on the Sunday on/before the 1st."""
    start = start_of_week(anchor.replace(day=1))
    return DateWindow(start, start + timedelta(days=MONTH_GRID_DAYS - 1))


def week_visible_range(anchor: date) -> DateWindow:
    """Seven days starting on the Sunday on/before the anchor."""
    start = start_of_week(anchor)
    return DateWindow(start, start + timedelta(days=6))


def search_visible_range(today: date, min_date: date = MIN_SUPPORTED_DATE) -> DateWindow:
    """Whole searchable history: minimum date through the end of next year."""
    return DateWindow(min_date, date(today.year + 1, 12, 31))
