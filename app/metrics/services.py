"""
Metrics services for building chart series over a chosen date range.
"""
from datetime import date
from typing import Iterable, Optional, Tuple

from calendar_service.models import EventRecord
from calendar_service.range_resolver import MIN_SUPPORTED_DATE, add_months, clamp_to_min_date
from .models import ChartSeries

DEFAULT_LOOKBACK_MONTHS = 6


def parse_range_inputs(start_text: str, end_text: str) -> Optional[Tuple[date, date]]:
    """Parse ISO date inputs; None when either is invalid or start is after end."""
    try:
        start = date.fromisoformat((start_text or "").strip())
        end = date.fromisoformat((end_text or "").strip())
    except ValueError:
        return None
    if start > end:
        return None
    return start, end


def default_chart_range(today: date, min_date: date = MIN_SUPPORTED_DATE) -> Tuple[date, date]:
    """The last six months up to today, never before the minimum date."""
    start = clamp_to_min_date(add_months(today, -DEFAULT_LOOKBACK_MONTHS), min_date)
    return start, today


def build_series(events: Iterable[EventRecord], start: date, end: date) -> ChartSeries:
    """Chart points for events starting inside ``[start, end]``.

    Null metrics are left out of their series rather than drawn as zero.
    """
    in_range = sorted(
        (e for e in events if start <= e.start_date <= end),
        key=lambda e: (e.start_date, e.sequence),
    )
    series = ChartSeries(start=start, end=end, event_count=len(in_range))
    for event in in_range:
        if event.number_of_chats is not None:
            series.chats.append((event.start_date, event.number_of_chats))
        if event.revenue is not None:
            series.revenue.append((event.start_date, event.revenue))
    return series
