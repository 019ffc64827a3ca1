"""
Analytics module for WindWatch.

NumPy summaries of wind history and forecast series.
"""

from windwatch.analytics.wind_trends import (
    TrendDirection,
    WindSeriesSummary,
    summarize_series,
)

__all__ = [
    'TrendDirection',
    'WindSeriesSummary',
    'summarize_series',
]
