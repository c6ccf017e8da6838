"""
Search subsystem factory for creating search modules.
"""
from .services import SearchService, EventFilter


def create_search_module(page_size: int = 10) -> dict:
    """Create search module with its result service and filter."""
    search_service = SearchService(page_size=page_size)

    return {
        "service": search_service,
        "filter": EventFilter,
    }
