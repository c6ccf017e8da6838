"""
Event-related data models.

This module contains the Pydantic model for a single scheduled event as
parsed from a quarterly CSV file.
"""

from datetime import date
from typing import List, Optional
from pydantic import BaseModel, Field


UNKNOWN_GAME = "Unknown"
UNTITLED_EVENT = "Untitled Event"


class EventRecord(BaseModel):
    """One scheduled occurrence placed on the calendar."""
    id: str = Field(description="Title + raw start date + row position within the source file")
    title: str = Field(default=UNTITLED_EVENT, description="Event title")
    start_date: date = Field(description="First calendar day of the event")
    end_date: date = Field(description="Last calendar day of the event (inclusive)")
    start_time: str = Field(default="", description="Free-text start clock time")
    end_time: str = Field(default="", description="Free-text end clock time")
    games: List[str] = Field(default_factory=lambda: [UNKNOWN_GAME], description="Game/category names")
    tags: List[str] = Field(default_factory=list, description="Free-form tags")
    summary: str = Field(default="", description="Markdown summary text")
    number_of_chats: Optional[float] = Field(default=None, description="Chat count, None when absent")
    revenue: Optional[float] = Field(default=None, description="Revenue, None when absent")
    sequence: int = Field(default=0, description="Row position within the source file")

    @property
    def games_label(self) -> str:
        """Game list joined for display."""
        return ", ".join(self.games)

    @property
    def tags_label(self) -> str:
        """Tag list joined for display."""
        return ", ".join(self.tags)

    def occurs_on(self, day: date) -> bool:
        """Check whether the event covers the given day."""
        return self.start_date <= day <= self.end_date
