"""
Metrics models for the chats/revenue chart series.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Tuple


@dataclass
class ChartSeries:
    """Data behind the chats/revenue line chart for a date range."""
    start: date
    end: date
    chats: List[Tuple[date, float]] = field(default_factory=list)
    revenue: List[Tuple[date, float]] = field(default_factory=list)
    event_count: int = 0

    @property
    def is_empty(self) -> bool:
        return self.event_count == 0

    @property
    def max_chats(self) -> float:
        return max([value for _, value in self.chats] + [1])

    @property
    def max_revenue(self) -> float:
        return max([value for _, value in self.revenue] + [1])

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "chats": [(d.isoformat(), v) for d, v in self.chats],
            "revenue": [(d.isoformat(), v) for d, v in self.revenue],
            "max_chats": self.max_chats,
            "max_revenue": self.max_revenue,
            "event_count": self.event_count,
        }
