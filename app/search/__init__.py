"""
Search Subsystem

Text/tag filtering, per-day layout and paginated search results over the
loaded calendar events.
"""

from .models import DayCell, Pagination, TagCloud, clamp_page
from .services import (
    EventFilter,
    SearchService,
    build_day_cell,
    collect_tags,
    events_for_day,
    sort_search_results,
)

__all__ = [
    'DayCell', 'Pagination', 'TagCloud', 'clamp_page',
    'EventFilter', 'SearchService', 'build_day_cell', 'collect_tags',
    'events_for_day', 'sort_search_results',
]
