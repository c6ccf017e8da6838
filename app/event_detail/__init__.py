"""
Event Detail Subsystem

Formats the content of the event detail popup.
"""

from .models import EventDetail
from .services import build_event_detail, event_label, format_count, format_currency, render_markdown

__all__ = ['EventDetail', 'build_event_detail', 'event_label', 'format_count', 'format_currency', 'render_markdown']
