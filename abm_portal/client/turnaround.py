"""Turnaround time (TAT) between request creation and a review action."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from abm_portal.core.time import as_local_naive

_MINUTE = 60
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR


@dataclass(frozen=True)
class Duration:
    """Whole days, hours, and minutes of an elapsed interval."""

    days: int
    hours: int
    minutes: int


def turnaround(start: datetime, end: datetime) -> Duration:
    """Absolute difference between two instants, truncated to whole minutes."""
    seconds = int(abs((as_local_naive(end) - as_local_naive(start)).total_seconds()))
    days, remainder = divmod(seconds, _DAY)
    hours, remainder = divmod(remainder, _HOUR)
    return Duration(days=days, hours=hours, minutes=remainder // _MINUTE)


def format_turnaround(duration: Duration) -> str:
    """Render using the coarsest applicable pair of units."""
    if duration.days >= 1:
        return f"{duration.days} day(s), {duration.hours} hour(s)"
    if duration.hours >= 1:
        return f"{duration.hours} hour(s), {duration.minutes} min(s)"
    return f"{duration.minutes} min(s)"


def turnaround_label(start: datetime, end: datetime) -> str:
    return format_turnaround(turnaround(start, end))
