"""
View state models: the session state, the render plan a transition
produces, and the snapshot handed to the rendering layer.
"""
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from calendar_service.models import EventRecord
from calendar_service.range_resolver import MIN_SUPPORTED_DATE, DateWindow
from app.event_detail.models import EventDetail
from app.search.models import DayCell, Pagination


class ViewMode(Enum):
    """Browsing layouts of the calendar grid."""
    MONTH = "month"
    WEEK = "week"

    @classmethod
    def parse(cls, value: str) -> Optional["ViewMode"]:
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class ViewSettings:
    """Fixed knobs of the view engine."""
    min_date: date = MIN_SUPPORTED_DATE
    max_events_per_day: int = 3
    search_page_size: int = 10


@dataclass(frozen=True)
class ViewState:
    """Everything the user has chosen; derived views are never stored here."""
    anchor_date: date
    view_mode: ViewMode = ViewMode.MONTH
    query: str = ""
    selected_tag: Optional[str] = None
    anchored_event_id: Optional[str] = None
    hovered_event_id: Optional[str] = None
    search_active: bool = False
    search_results: Tuple[EventRecord, ...] = ()
    search_page: int = 1

    @property
    def popup_event_id(self) -> Optional[str]:
        """Pinned popup wins over a hover popup."""
        return self.anchored_event_id or self.hovered_event_id


@dataclass(frozen=True)
class RenderPlan:
    """What a transition requires before and during re-render."""
    load_window: bool = False
    rerender: bool = False
    recompute_search: bool = False
    reset_page: bool = False
    popup_changed: bool = False

    @property
    def is_noop(self) -> bool:
        return not (
            self.load_window or self.rerender or self.recompute_search
            or self.reset_page or self.popup_changed
        )


@dataclass(frozen=True)
class Transition:
    state: ViewState
    plan: RenderPlan = field(default_factory=RenderPlan)


@dataclass
class CalendarSnapshot:
    """Render contract for one state: grid, label, search page and popup."""
    mode: str
    period_label: str
    window: DateWindow
    days: List[DayCell] = field(default_factory=list)
    search_items: List[EventRecord] = field(default_factory=list)
    pagination: Optional[Pagination] = None
    popup: Optional[EventDetail] = None
    anchored_event_id: Optional[str] = None
    tags: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def is_search(self) -> bool:
        return self.mode == "search"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "mode": self.mode,
            "period_label": self.period_label,
            "window": [self.window.start.isoformat(), self.window.end.isoformat()],
            "days": [cell.to_dict() for cell in self.days],
            "search_items": [e.id for e in self.search_items],
            "pagination": self.pagination.to_dict() if self.pagination else None,
            "popup": self.popup.to_dict() if self.popup else None,
            "anchored_event_id": self.anchored_event_id,
            "tags": list(self.tags),
        }
