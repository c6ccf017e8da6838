"""
View state reducer.

``reduce`` applies one command to the current state and returns the new
state together with a plan of what must be loaded and re-rendered. It is
pure: loading quarters and computing search results is left to the
controller, driven by the plan.
"""
from dataclasses import replace
from datetime import date, timedelta
import math

from calendar_service.range_resolver import add_months, clamp_to_min_date
from app.search.models import clamp_page
from .commands import (
    ClickOutside,
    Command,
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
)
from .models import RenderPlan, Transition, ViewMode, ViewSettings, ViewState


def _ignored(state: ViewState) -> Transition:
    return Transition(state, RenderPlan())


def _clear_popup(state: ViewState) -> ViewState:
    return replace(state, anchored_event_id=None, hovered_event_id=None)


def _navigate(state: ViewState, command: Navigate, settings: ViewSettings) -> Transition:
    if state.search_active or not isinstance(command.direction, int) or command.direction == 0:
        return _ignored(state)
    if state.view_mode is ViewMode.MONTH:
        moved = add_months(state.anchor_date, command.direction)
    else:
        moved = state.anchor_date + timedelta(days=7 * command.direction)
    new_state = replace(state, anchor_date=clamp_to_min_date(moved, settings.min_date))
    return Transition(new_state, RenderPlan(load_window=True, rerender=True))


def _pick_date(state: ViewState, command: PickDate, settings: ViewSettings) -> Transition:
    try:
        chosen = date.fromisoformat((command.value or "").strip())
    except (AttributeError, TypeError, ValueError):
        return _ignored(state)
    new_state = _clear_popup(replace(state, anchor_date=clamp_to_min_date(chosen, settings.min_date)))
    if state.search_active:
        return Transition(new_state, RenderPlan(popup_changed=True))
    return Transition(new_state, RenderPlan(load_window=True, rerender=True, popup_changed=True))


def _set_view_mode(state: ViewState, command: SetViewMode) -> Transition:
    mode = ViewMode.parse(command.mode)
    if mode is None:
        return _ignored(state)
    new_state = _clear_popup(replace(state, view_mode=mode))
    if state.search_active:
        return Transition(new_state, RenderPlan(popup_changed=True))
    return Transition(new_state, RenderPlan(load_window=True, rerender=True, popup_changed=True))


def _set_query(state: ViewState, command: SetQuery) -> Transition:
    new_state = replace(state, query=command.text or "")
    if state.search_active:
        # Results refresh on the next explicit search submit.
        return Transition(new_state)
    return Transition(_clear_popup(new_state), RenderPlan(rerender=True, popup_changed=True))


def _set_tag(state: ViewState, command: SetTag) -> Transition:
    new_state = _clear_popup(replace(state, selected_tag=command.tag or None))
    if state.search_active:
        return Transition(new_state, RenderPlan(recompute_search=True, rerender=True, popup_changed=True))
    return Transition(new_state, RenderPlan(rerender=True, popup_changed=True))


def _enter_search(state: ViewState, command: EnterSearch) -> Transition:
    query = state.query if command.query is None else command.query
    new_state = _clear_popup(replace(state, query=query, search_active=True, search_page=1))
    return Transition(
        new_state,
        RenderPlan(load_window=True, rerender=True, recompute_search=True, reset_page=True, popup_changed=True),
    )


def _exit_search(state: ViewState) -> Transition:
    if not state.search_active:
        return _ignored(state)
    new_state = _clear_popup(replace(state, search_active=False, search_results=(), search_page=1))
    return Transition(new_state, RenderPlan(load_window=True, rerender=True, popup_changed=True))


def _go_to_page(state: ViewState, command: GoToPage, settings: ViewSettings) -> Transition:
    if not state.search_active or not isinstance(command.page, int) or isinstance(command.page, bool):
        return _ignored(state)
    total_pages = max(1, math.ceil(len(state.search_results) / max(1, settings.search_page_size)))
    page = clamp_page(command.page, total_pages)
    if page == state.search_page:
        return _ignored(state)
    return Transition(_clear_popup(replace(state, search_page=page)), RenderPlan(rerender=True, popup_changed=True))


def _toggle_anchor(state: ViewState, command: ToggleAnchor) -> Transition:
    anchored = None if state.anchored_event_id == command.event_id else command.event_id
    new_state = replace(state, anchored_event_id=anchored, hovered_event_id=None)
    return Transition(new_state, RenderPlan(popup_changed=True))


def _click_outside(state: ViewState) -> Transition:
    if state.anchored_event_id is None and state.hovered_event_id is None:
        return _ignored(state)
    return Transition(_clear_popup(state), RenderPlan(popup_changed=True))


def reduce(state: ViewState, command: Command, settings: ViewSettings = ViewSettings()) -> Transition:
    """
    Apply one command to the view state.

    Invalid input (unparsable date, unknown mode, bad page) is ignored: the
    same state comes back with an empty plan.

    Args:
        state: Current view state
        command: User action
        settings: Minimum date and page size

    Returns:
        Transition holding the new state and its render plan
    """
    if isinstance(command, Navigate):
        return _navigate(state, command, settings)
    if isinstance(command, PickDate):
        return _pick_date(state, command, settings)
    if isinstance(command, SetViewMode):
        return _set_view_mode(state, command)
    if isinstance(command, SetQuery):
        return _set_query(state, command)
    if isinstance(command, SetTag):
        return _set_tag(state, command)
    if isinstance(command, EnterSearch):
        return _enter_search(state, command)
    if isinstance(command, ExitSearch):
        return _exit_search(state)
    if isinstance(command, GoToPage):
        return _go_to_page(state, command, settings)
    if isinstance(command, HoverEvent):
        if state.anchored_event_id is not None:
            return _ignored(state)
        return Transition(replace(state, hovered_event_id=command.event_id), RenderPlan(popup_changed=True))
    if isinstance(command, LeaveEvent):
        if state.hovered_event_id is None:
            return _ignored(state)
        return Transition(replace(state, hovered_event_id=None), RenderPlan(popup_changed=True))
    if isinstance(command, ToggleAnchor):
        return _toggle_anchor(state, command)
    if isinstance(command, ClickOutside):
        return _click_outside(state)
    raise TypeError(f"Unsupported command: {command!r}")
