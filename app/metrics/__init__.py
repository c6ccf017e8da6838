"""
Metrics Subsystem

Chats and revenue series for the metrics chart.
"""

from .models import ChartSeries
from .services import build_series, default_chart_range, parse_range_inputs

__all__ = ['ChartSeries', 'build_series', 'default_chart_range', 'parse_range_inputs']
