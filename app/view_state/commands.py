"""
Command Types for the Calendar View

Every user action on the calendar UI is expressed as one of these
commands and applied by the view-state reducer.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Union


class CommandType(Enum):
    """Allowed command types."""

    # Browsing
    SET_VIEW_MODE = "set_view_mode"
    NAVIGATE = "navigate"
    PICK_DATE = "pick_date"

    # Filtering
    SET_QUERY = "set_query"
    SET_TAG = "set_tag"

    # Search mode
    ENTER_SEARCH = "enter_search"
    EXIT_SEARCH = "exit_search"
    GO_TO_PAGE = "go_to_page"

    # Popup
    HOVER_EVENT = "hover_event"
    LEAVE_EVENT = "leave_event"
    TOGGLE_ANCHOR = "toggle_anchor"
    CLICK_OUTSIDE = "click_outside"

    @classmethod
    def is_valid(cls, command_type: str) -> bool:
        """Check if a command type string is valid."""
        try:
            cls(command_type)
            return True
        except ValueError:
            return False

    @classmethod
    def get_allowed_types(cls) -> set[str]:
        """Get all allowed command type strings."""
        return {c.value for c in cls}


@dataclass(frozen=True)
class SetViewMode:
    mode: str
    type: ClassVar[CommandType] = CommandType.SET_VIEW_MODE


@dataclass(frozen=True)
class Navigate:
    """Move one period back (-1) or forward (+1)."""
    direction: int
    type: ClassVar[CommandType] = CommandType.NAVIGATE


@dataclass(frozen=True)
class PickDate:
    """Date picker change; ``value`` is the raw ``YYYY-MM-DD`` text."""
    value: str
    type: ClassVar[CommandType] = CommandType.PICK_DATE


@dataclass(frozen=True)
class SetQuery:
    text: str
    type: ClassVar[CommandType] = CommandType.SET_QUERY


@dataclass(frozen=True)
class SetTag:
    tag: Optional[str] = None
    type: ClassVar[CommandType] = CommandType.SET_TAG


@dataclass(frozen=True)
class EnterSearch:
    """Submit a search; ``query`` replaces the current text when given."""
    query: Optional[str] = None
    type: ClassVar[CommandType] = CommandType.ENTER_SEARCH


@dataclass(frozen=True)
class ExitSearch:
    type: ClassVar[CommandType] = CommandType.EXIT_SEARCH


@dataclass(frozen=True)
class GoToPage:
    page: int
    type: ClassVar[CommandType] = CommandType.GO_TO_PAGE


@dataclass(frozen=True)
class HoverEvent:
    event_id: str
    type: ClassVar[CommandType] = CommandType.HOVER_EVENT


@dataclass(frozen=True)
class LeaveEvent:
    type: ClassVar[CommandType] = CommandType.LEAVE_EVENT


@dataclass(frozen=True)
class ToggleAnchor:
    """Click on an event item: pin its popup, or unpin if already pinned."""
    event_id: str
    type: ClassVar[CommandType] = CommandType.TOGGLE_ANCHOR


@dataclass(frozen=True)
class ClickOutside:
    type: ClassVar[CommandType] = CommandType.CLICK_OUTSIDE


Command = Union[
    SetViewMode, Navigate, PickDate, SetQuery, SetTag, EnterSearch,
    ExitSearch, GoToPage, HoverEvent, LeaveEvent, ToggleAnchor, ClickOutside,
]

_COMMAND_CLASSES = {
    CommandType.SET_VIEW_MODE: SetViewMode,
    CommandType.NAVIGATE: Navigate,
    CommandType.PICK_DATE: PickDate,
    CommandType.SET_QUERY: SetQuery,
    CommandType.SET_TAG: SetTag,
    CommandType.ENTER_SEARCH: EnterSearch,
    CommandType.EXIT_SEARCH: ExitSearch,
    CommandType.GO_TO_PAGE: GoToPage,
    CommandType.HOVER_EVENT: HoverEvent,
    CommandType.LEAVE_EVENT: LeaveEvent,
    CommandType.TOGGLE_ANCHOR: ToggleAnchor,
    CommandType.CLICK_OUTSIDE: ClickOutside,
}


def command_from_dict(data: Dict[str, Any]) -> Command:
    """Build a command from a UI payload such as ``{"type": "navigate", "direction": 1}``.

    Args:
        data: Payload with a ``type`` key plus the command's fields

    Returns:
        The matching command object

    Raises:
        ValueError: If the type is unknown or the fields do not fit the command
    """
    command_type = data.get("type")
    if not isinstance(command_type, str) or not CommandType.is_valid(command_type):
        raise ValueError(f"Unknown command type: {command_type!r}")

    fields = {k: v for k, v in data.items() if k != "type"}
    try:
        return _COMMAND_CLASSES[CommandType(command_type)](**fields)
    except TypeError as exc:
        raise ValueError(f"Invalid fields for {command_type}: {exc}") from exc
