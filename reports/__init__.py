"""
Reports — pandas exports of month projections and year forecasts.
"""

from .frames import events_to_frame, month_to_frame, year_to_frame

__all__ = [
    "events_to_frame",
    "month_to_frame",
    "year_to_frame",
]
