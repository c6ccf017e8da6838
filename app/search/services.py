"""
Search services for filtering loaded events, laying them out per day,
and producing sorted, paginated search results.
"""
from datetime import date
from typing import Iterable, List, Optional

from calendar_service.models import EventRecord
from .models import DayCell, Pagination, TagCloud

DEFAULT_MAX_EVENTS_PER_DAY = 3
DEFAULT_PAGE_SIZE = 10


class EventFilter:
    """Pure filters over the currently loaded event set."""

    @staticmethod
    def matches_query(event: EventRecord, query: str) -> bool:
        """Case-insensitive substring match on title, games, tags and summary."""
        needle = (query or "").strip().lower()
        if not needle:
            return True
        haystacks = (
            event.title,
            event.games_label,
            event.tags_label,
            event.summary,
        )
        return any(needle in text.lower() for text in haystacks)

    @staticmethod
    def matches_tag(event: EventRecord, tag: Optional[str]) -> bool:
        """Exact membership of the selected tag; no tag matches everything."""
        if not tag:
            return True
        return tag in event.tags

    @classmethod
    def filter_events(cls, events: Iterable[EventRecord], query: str = "", tag: Optional[str] = None) -> List[EventRecord]:
        """Filter events by text query AND tag, preserving input order.

        Args:
            events: Loaded events
            query: Free-text query; blank keeps every event
            tag: Optional tag that must be present on the event

        Returns:
            Matching events in their original order
        """
        return [
            e for e in events
            if cls.matches_query(e, query) and cls.matches_tag(e, tag)
        ]


def events_for_day(events: Iterable[EventRecord], day: date) -> List[EventRecord]:
    """Events covering a day, ordered by their source row."""
    return sorted((e for e in events if e.occurs_on(day)), key=lambda e: e.sequence)


def build_day_cell(
    events: Iterable[EventRecord],
    day: date,
    max_events: int = DEFAULT_MAX_EVENTS_PER_DAY,
    in_current_month: bool = True,
) -> DayCell:
    """Lay out one day: the first ``max_events`` events plus a hidden count."""
    matches = events_for_day(events, day)
    limit = max(0, max_events)
    return DayCell(
        day=day,
        events=matches[:limit],
        hidden_count=max(0, len(matches) - limit),
        in_current_month=in_current_month,
    )


def sort_search_results(events: Iterable[EventRecord]) -> List[EventRecord]:
    """Newest start date first; source row order breaks ties."""
    return sorted(events, key=lambda e: (-e.start_date.toordinal(), e.sequence))


def collect_tags(events: Iterable[EventRecord]) -> List[dict]:
    """Tag cloud of the given events, most frequent first."""
    cloud = TagCloud()
    for event in events:
        cloud.add_event(event)
    return cloud.get_tag_cloud()


class SearchService:
    """Service for search-mode result sets."""

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE):
        self.page_size = max(1, page_size)

    def search(self, events: Iterable[EventRecord], query: str = "", tag: Optional[str] = None) -> List[EventRecord]:
        """Filter and globally sort events for the search result list."""
        return sort_search_results(EventFilter.filter_events(events, query, tag))

    def paginate(self, results: List[EventRecord], page: int) -> Pagination:
        """Pagination for a result list, with the page clamped into range."""
        return Pagination(len(results), page=page, per_page=self.page_size)

    def page_slice(self, results: List[EventRecord], page: int) -> List[EventRecord]:
        return self.paginate(results, page).get_page_items(results)
