"""
Calendar Controller

Owns the session's view state and quarter store, applies commands through
the reducer, loads whatever quarters the new visible window needs, and
produces the snapshot the rendering layer draws.
"""

import asyncio
import logging
from dataclasses import replace
from datetime import date
from typing import Callable, Iterable, List, Optional

from calendar_service.models import EventRecord
from calendar_service.quarter_store import QuarterStore
from calendar_service.range_resolver import (
    DateWindow,
    clamp_to_min_date,
    month_visible_range,
    quarter_keys_in_range,
    search_visible_range,
    week_visible_range,
)
from app.event_detail.services import build_event_detail
from app.metrics.models import ChartSeries
from app.metrics.services import build_series, parse_range_inputs
from app.search.models import clamp_page
from app.search.services import EventFilter, SearchService, build_day_cell, collect_tags
from .commands import Command
from .models import CalendarSnapshot, RenderPlan, ViewMode, ViewSettings, ViewState
from .reducer import reduce

_LOG = logging.getLogger(__name__)


class CalendarController:
    """Single owner of the calendar session state."""

    def __init__(
        self,
        store: QuarterStore,
        settings: Optional[ViewSettings] = None,
        today: Optional[date] = None,
        view_mode: ViewMode = ViewMode.MONTH,
        search_service: Optional[SearchService] = None,
    ):
        """Initialize the controller.

        Args:
            store: Quarter store shared by every view of the session
            settings: Minimum date, per-day cap and page size
            today: Reference date (defaults to the current local date)
            view_mode: Initial browsing mode
            search_service: Search result service (built from settings if omitted)
        """
        self.store = store
        self.settings = settings or ViewSettings()
        self.today = today or date.today()
        self.search_service = search_service or SearchService(self.settings.search_page_size)
        self.state = ViewState(
            anchor_date=clamp_to_min_date(self.today, self.settings.min_date),
            view_mode=view_mode,
        )
        self.events: List[EventRecord] = []
        self.last_plan = RenderPlan()

    def visible_window(self) -> DateWindow:
        """Date window the current state displays."""
        if self.state.search_active:
            return search_visible_range(self.today, self.settings.min_date)
        if self.state.view_mode is ViewMode.MONTH:
            return month_visible_range(self.state.anchor_date)
        return week_visible_range(self.state.anchor_date)

    async def start(self) -> CalendarSnapshot:
        """Load the initial window and return the first snapshot."""
        await self._ensure_events()
        self.last_plan = RenderPlan(load_window=True, rerender=True)
        return self.snapshot()

    async def dispatch(self, command: Command) -> CalendarSnapshot:
        """
        Apply one user command and return the resulting snapshot.

        Args:
            command: Command produced by the UI layer

        Returns:
            Snapshot of the state after the command
        """
        transition = reduce(self.state, command, self.settings)
        self.state = transition.state
        plan = transition.plan
        _LOG.debug(f"{command.type.value}: {plan}")

        if plan.load_window:
            await self._ensure_events()
        if plan.recompute_search:
            self._recompute_search(reset_page=plan.reset_page)

        self.last_plan = plan
        return self.snapshot()

    async def dispatch_all(self, commands: Iterable[Command]) -> CalendarSnapshot:
        """Apply several commands in order, returning the final snapshot."""
        snapshot = None
        for command in commands:
            snapshot = await self.dispatch(command)
        return snapshot if snapshot is not None else self.snapshot()

    async def _ensure_events(self) -> None:
        window = self.visible_window()
        keys = quarter_keys_in_range(window.start, window.end)
        await self.store.get_many(keys)
        self.events = self.store.all_events()
        _LOG.debug(f"Window {window.start}..{window.end} needs {keys}; {len(self.events)} events loaded")

    def _recompute_search(self, reset_page: bool) -> None:
        results = tuple(self.search_service.search(self.events, self.state.query, self.state.selected_tag))
        total_pages = self.search_service.paginate(list(results), 1).total_pages
        page = 1 if reset_page else clamp_page(self.state.search_page, total_pages)
        self.state = replace(self.state, search_results=results, search_page=page)

    def filtered_events(self) -> List[EventRecord]:
        """Loaded events passing the current query and tag filter."""
        return EventFilter.filter_events(self.events, self.state.query, self.state.selected_tag)

    def find_event(self, event_id: Optional[str]) -> Optional[EventRecord]:
        if not event_id:
            return None
        for event in self.events:
            if event.id == event_id:
                return event
        return None

    def period_label(self) -> str:
        """Title of the displayed period."""
        if self.state.search_active:
            query = self.state.query.strip()
            return f'Search results for "{query}"' if query else "All events"
        if self.state.view_mode is ViewMode.MONTH:
            return self.state.anchor_date.strftime("%B %Y")
        window = self.visible_window()
        return f"{_short_label(window.start)} - {_short_label(window.end)}"

    def snapshot(self) -> CalendarSnapshot:
        """Build the render contract for the current state."""
        window = self.visible_window()
        popup_event = self.find_event(self.state.popup_event_id)
        snapshot = CalendarSnapshot(
            mode="search" if self.state.search_active else self.state.view_mode.value,
            period_label=self.period_label(),
            window=window,
            popup=build_event_detail(popup_event) if popup_event else None,
            anchored_event_id=self.state.anchored_event_id,
            tags=collect_tags(self.events),
        )

        if self.state.search_active:
            results = list(self.state.search_results)
            pagination = self.search_service.paginate(results, self.state.search_page)
            snapshot.pagination = pagination
            snapshot.search_items = pagination.get_page_items(results)
            return snapshot

        visible = self.filtered_events()
        anchor_month = (self.state.anchor_date.year, self.state.anchor_date.month)
        for day in window.days():
            in_month = (
                self.state.view_mode is ViewMode.WEEK
                or (day.year, day.month) == anchor_month
            )
            snapshot.days.append(
                build_day_cell(visible, day, self.settings.max_events_per_day, in_current_month=in_month)
            )
        return snapshot

    async def load_chart(self, start_text: str, end_text: str) -> Optional[ChartSeries]:
        """
        Load the quarters for a chart range and build its series.

        Args:
            start_text: ``YYYY-MM-DD`` range start
            end_text: ``YYYY-MM-DD`` range end

        Returns:
            ChartSeries, or None when the range is invalid (nothing to draw)
        """
        date_range = parse_range_inputs(start_text, end_text)
        if date_range is None:
            _LOG.debug(f"Ignoring invalid chart range {start_text!r}..{end_text!r}")
            return None
        start, end = date_range
        await self.store.get_many(quarter_keys_in_range(start, end))
        return build_series(self.store.all_events(), start, end)

    async def prefetch_history(self, on_loaded: Optional[Callable[[str], None]] = None) -> int:
        """Load every quarter of the searchable history; returns the event count."""
        window = search_visible_range(self.today, self.settings.min_date)

        async def _load(key: str) -> str:
            await self.store.get(key)
            return key

        keys = quarter_keys_in_range(window.start, window.end)
        for finished in asyncio.as_completed([_load(key) for key in keys]):
            key = await finished
            if on_loaded:
                on_loaded(key)
        self.events = self.store.all_events()
        return len(self.events)


def _short_label(day: date) -> str:
    return f"{day:%b} {day.day}"
