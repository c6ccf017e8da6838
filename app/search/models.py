"""
Search models for day cells, tag counts and paginated results.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Any
import math

from calendar_service.models import EventRecord


@dataclass
class DayCell:
    """Events shown in one calendar day, capped for display."""
    day: date
    events: List[EventRecord] = field(default_factory=list)
    hidden_count: int = 0
    in_current_month: bool = True

    @property
    def total(self) -> int:
        return len(self.events) + self.hidden_count

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "day": self.day.isoformat(),
            "event_ids": [e.id for e in self.events],
            "hidden_count": self.hidden_count,
            "in_current_month": self.in_current_month,
        }


class TagCloud:
    """Tag occurrence counts over a set of events."""

    def __init__(self):
        self.tag_counts: Dict[str, int] = {}

    def add_event(self, event: EventRecord):
        """Add an event's tags to the cloud."""
        for tag in event.tags:
            self.tag_counts[tag] = self.tag_counts.get(tag, 0) + 1

    def get_tag_cloud(self, query: str = None) -> List[Dict[str, Any]]:
        """Get sorted tag cloud."""
        tags = self.tag_counts.items()
        if query:
            tags = [(k, v) for k, v in tags if query.lower() in k.lower()]

        return sorted(
            ({"name": k, "count": v} for k, v in tags),
            key=lambda item: (-item["count"], item["name"]),
        )


class Pagination:
    """Pagination over an ordered result list."""

    def __init__(self, total_items: int, page: int = 1, per_page: int = 10):
        self.total_items = total_items
        self.per_page = max(1, per_page)
        self.total_pages = max(1, math.ceil(total_items / self.per_page))
        self.page = clamp_page(page, self.total_pages)

        self.start = (self.page - 1) * self.per_page
        self.end = self.start + self.per_page

    def get_page_items(self, items: List[Any]) -> List[Any]:
        """Get items for current page."""
        return items[self.start:self.end]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "page": self.page,
            "per_page": self.per_page,
            "total_pages": self.total_pages,
            "total_items": self.total_items
        }


def clamp_page(page: int, total_pages: int) -> int:
    """Clamp a page number into ``[1, total_pages]``."""
    return min(max(1, page), max(1, total_pages))
