"""
Event detail models for the popup content.
"""
from dataclasses import dataclass, asdict
from typing import Any, Dict


@dataclass
class EventDetail:
    """Display-ready fields of one event's detail popup."""
    event_id: str
    title: str
    games: str
    tags: str
    date_range: str
    time_range: str
    chats: str
    revenue: str
    summary_html: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)
