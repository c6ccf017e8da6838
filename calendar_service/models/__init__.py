"""
Models package for calendar event data.
"""

from .event_models import (
    EventRecord,
    UNKNOWN_GAME,
    UNTITLED_EVENT,
)

__all__ = [
    "EventRecord",
    "UNKNOWN_GAME",
    "UNTITLED_EVENT",
]
