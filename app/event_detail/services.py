"""
Event detail services for formatting an event's popup content.
"""
from typing import Optional

import markdown

from calendar_service.models import EventRecord
from .models import EventDetail

PLACEHOLDER = "-"


def render_markdown(md_text: str) -> str:
    """Convert Markdown → HTML."""
    if not md_text:
        return ""
    return markdown.markdown(
        md_text,
        extensions=[
            "fenced_code",
            "tables",
            "attr_list",
        ],
    )


def format_currency(value: Optional[float]) -> str:
    """Format a revenue figure as US dollars, ``-`` when absent."""
    if value is None:
        return PLACEHOLDER
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_count(value: Optional[float]) -> str:
    """Format a count, dropping a trailing ``.0``; ``-`` when absent."""
    if value is None:
        return PLACEHOLDER
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def event_label(event: EventRecord) -> str:
    """Label used for an event's item inside a day cell."""
    return f"{event.title} ({event.games_label})"


def build_event_detail(event: EventRecord) -> EventDetail:
    """Build the detail popup content for an event."""
    return EventDetail(
        event_id=event.id,
        title=event.title,
        games=event.games_label,
        tags=event.tags_label or PLACEHOLDER,
        date_range=f"{event.start_date.isoformat()} to {event.end_date.isoformat()}",
        time_range=f"{event.start_time or PLACEHOLDER} to {event.end_time or PLACEHOLDER}",
        chats=format_count(event.number_of_chats),
        revenue=format_currency(event.revenue),
        summary_html=render_markdown(event.summary),
    )
