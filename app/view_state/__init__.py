"""
View State Subsystem

Command-driven state machine reconciling the anchor date, view mode and
search mode into renderable calendar snapshots.
"""

from .commands import (
    ClickOutside,
    Command,
    CommandType,
    EnterSearch,
    ExitSearch,
    GoToPage,
    HoverEvent,
    LeaveEvent,
    Navigate,
    PickDate,
    SetQuery,
    SetTag,
    SetViewMode,
    ToggleAnchor,
    command_from_dict,
)
from .controller import CalendarController
from .models import CalendarSnapshot, RenderPlan, Transition, ViewMode, ViewSettings, ViewState
from .reducer import reduce

__all__ = [
    'ClickOutside', 'Command', 'CommandType', 'EnterSearch', 'ExitSearch',
    'GoToPage', 'HoverEvent', 'LeaveEvent', 'Navigate', 'PickDate',
    'SetQuery', 'SetTag', 'SetViewMode', 'ToggleAnchor', 'command_from_dict',
    'CalendarController', 'CalendarSnapshot', 'RenderPlan', 'Transition',
    'ViewMode', 'ViewSettings', 'ViewState', 'reduce',
]
