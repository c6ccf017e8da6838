"""
CSV Event Parsing Module

This module turns the raw text of a quarterly events CSV file into typed
EventRecord objects. Parsing is tolerant: a row is dropped only when its
start date cannot be read, every other field falls back to a default.
"""

import csv
import io
import logging
import math
from datetime import date, datetime
from typing import Dict, List, Optional

from .models import EventRecord, UNKNOWN_GAME, UNTITLED_EVENT

_LOG = logging.getLogger(__name__)

BYTE_ORDER_MARK = "\ufeff"
LIST_DELIMITER = "|"

# Accepted spellings for each recognized column, after lower-casing.
COLUMN_ALIASES: Dict[str, tuple] = {
    "title": ("title",),
    "start_date": ("start_date",),
    "end_date": ("end_date",),
    "start_time": ("start_time",),
    "end_time": ("end_time",),
    "games": ("game", "games"),
    "tags": ("tags", "tag"),
    "summary": ("summary",),
    "number_of_chats": ("number_of_chats",),
    "revenue": ("revenue",),
}

_DATE_FORMATS = (
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%b %d %Y",
    "%B %d %Y",
    "%d %b %Y",
)


def parse_date(value: str) -> Optional[date]:
    """
    Parse a calendar date, discarding any time-of-day component.

    Args:
        value: Date text such as ``2024-02-10`` or ``2024-02-10T18:00:00``

    Returns:
        The date, or None when the text is not a recognizable date
    """
    text = (value or "").strip()
    if not text:
        return None

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text.replace(",", ""), fmt).date()
        except ValueError:
            continue
    return None


def parse_number(value: str) -> Optional[float]:
    """Parse a numeric cell; blank, non-numeric and non-finite values give None."""
    text = (value or "").strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def split_list(value: str) -> List[str]:
    """Split a list-valued cell on ``|`` (or on commas inside a quoted cell)."""
    text = (value or "").strip()
    if not text:
        return []
    delimiter = LIST_DELIMITER if LIST_DELIMITER in text else ","
    return [item.strip() for item in text.split(delimiter) if item.strip()]


def _resolve_columns(header: List[str]) -> Dict[str, int]:
    """Map recognized field names to their column index in the header."""
    normalized = [h.replace(BYTE_ORDER_MARK, "").strip().lower() for h in header]
    columns: Dict[str, int] = {}
    for field_name, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            if alias in normalized:
                columns[field_name] = normalized.index(alias)
                break
    return columns


def _cell(row: List[str], columns: Dict[str, int], field_name: str) -> str:
    index = columns.get(field_name)
    if index is None or index >= len(row):
        return ""
    return row[index].strip()


def _build_record(row: List[str], columns: Dict[str, int], sequence: int) -> Optional[EventRecord]:
    """Build one EventRecord from a data row, or None if the start date is unreadable."""
    raw_start = _cell(row, columns, "start_date")
    start_date = parse_date(raw_start)
    if start_date is None:
        return None

    end_date = parse_date(_cell(row, columns, "end_date")) or start_date
    if end_date < start_date:
        end_date = start_date

    raw_title = _cell(row, columns, "title")
    games = split_list(_cell(row, columns, "games")) or [UNKNOWN_GAME]

    return EventRecord(
        id=f"{raw_title or 'event'}-{raw_start}-{sequence}",
        title=raw_title or UNTITLED_EVENT,
        start_date=start_date,
        end_date=end_date,
        start_time=_cell(row, columns, "start_time"),
        end_time=_cell(row, columns, "end_time"),
        games=games,
        tags=split_list(_cell(row, columns, "tags")),
        summary=_cell(row, columns, "summary"),
        number_of_chats=parse_number(_cell(row, columns, "number_of_chats")),
        revenue=parse_number(_cell(row, columns, "revenue")),
        sequence=sequence,
    )


def parse_events_csv(csv_text: str) -> List[EventRecord]:
    """
    Parse quarterly events CSV text into event records.

    The first non-blank line is the header. Blank data rows are skipped and
    not counted; every other data row consumes one ``sequence`` number even
    when it is dropped as unreadable or for an unreadable start date.

    Args:
        csv_text: Raw CSV file content (LF or CRLF line endings, optional BOM)

    Returns:
        List of EventRecord in source order

    Raises:
        TypeError: If csv_text is not a string
    """
    if not isinstance(csv_text, str):
        raise TypeError(f"CSV input must be text, got {type(csv_text).__name__}")

    trimmed = csv_text.lstrip(BYTE_ORDER_MARK).strip()
    if not trimmed:
        return []

    reader = csv.reader(io.StringIO(trimmed, newline=""), skipinitialspace=True)
    try:
        header = next(reader, None)
    except csv.Error as exc:
        _LOG.debug(f"Unreadable CSV header: {exc}")
        return []
    if not header:
        return []

    columns = _resolve_columns(header)
    if "start_date" not in columns:
        _LOG.debug("CSV header has no start_date column; no events can be placed")

    events: List[EventRecord] = []
    sequence = 0
    dropped = 0
    while True:
        try:
            row = next(reader)
        except StopIteration:
            break
        except csv.Error as exc:
            # The reader resumes at the next line; the broken row keeps its position.
            _LOG.debug(f"Skipping unreadable CSV row {sequence}: {exc}")
            dropped += 1
            sequence += 1
            continue

        if not any(cell.strip() for cell in row):
            continue

        record = _build_record(row, columns, sequence)
        if record is None:
            dropped += 1
        else:
            events.append(record)
        sequence += 1

    if dropped:
        _LOG.debug(f"Dropped {dropped} unreadable CSV row(s)")
    return events
