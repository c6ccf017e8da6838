"""
Factory for creating the calendar view module.
"""
from datetime import date
from pathlib import Path
from typing import Optional

import httpx

from calendar_service.quarter_store import DirectoryQuarterSource, HttpQuarterSource, QuarterStore
from app.search.factory import create_search_module
from .controller import CalendarController
from .models import ViewMode, ViewSettings


def create_quarter_source(data_config, client: Optional[httpx.AsyncClient] = None):
    """Pick the HTTP source when a base URL is configured, else the local directory."""
    if data_config.base_url:
        return HttpQuarterSource(
            data_config.base_url,
            client=client,
            path_template=data_config.path_template,
            timeout=data_config.request_timeout,
        )
    return DirectoryQuarterSource(Path(data_config.data_dir), path_template=data_config.path_template)


def create_calendar_module(
    data_config,
    calendar_config,
    client: Optional[httpx.AsyncClient] = None,
    today: Optional[date] = None,
) -> dict:
    """Create the calendar view module with its store and controller.

    Args:
        data_config: Where quarter files live (``DataConfig``)
        calendar_config: View settings (``CalendarConfig``)
        client: Optional pre-built HTTP client (tests inject a mock transport)
        today: Reference date for the session

    Returns:
        Dictionary containing the source, store, search service and controller
    """
    settings = ViewSettings(
        min_date=date.fromisoformat(calendar_config.min_date),
        max_events_per_day=calendar_config.max_events_per_day,
        search_page_size=calendar_config.search_page_size,
    )
    source = create_quarter_source(data_config, client=client)
    store = QuarterStore(source)
    search_module = create_search_module(page_size=settings.search_page_size)
    controller = CalendarController(
        store,
        settings=settings,
        today=today,
        view_mode=ViewMode.parse(calendar_config.default_view) or ViewMode.MONTH,
        search_service=search_module["service"],
    )

    return {
        "source": source,
        "store": store,
        "search_service": search_module["service"],
        "controller": controller,
    }
