"""
Time-span slicing: one segment per calendar date, then atomic intervals
split at whole hours and at the night differential window edges.

Boundaries are cut on the local wall clock; durations are elapsed time, so
aware datetimes across a DST change are paid for the hours actually worked.
"""
from datetime import date, datetime, time, timedelta, timezone
from typing import NamedTuple

from app.services.wage_rules import NIGHT_DIFF_END, NIGHT_DIFF_START, is_night_diff_hour

ONE_HOUR = timedelta(hours=1)


class DateSegment(NamedTuple):
    start: datetime
    end: datetime
    date: date


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc)


def segment_hours(start: datetime, end: datetime) -> float:
    """Elapsed hours; naive datetimes are taken as wall clock."""
    return (_as_utc(end) - _as_utc(start)).total_seconds() / 3600.0


def add_elapsed_hours(moment: datetime, hours: float) -> datetime:
    if moment.tzinfo is None:
        return moment + timedelta(hours=hours)
    return (_as_utc(moment) + timedelta(hours=hours)).astimezone(moment.tzinfo)


def split_cross_midnight_shift(start: datetime, end: datetime) -> list[DateSegment]:
    """
    Split a span at local midnight. A span ending exactly at midnight yields
    no zero-length trailing segment.
    """
    segments: list[DateSegment] = []
    current = start
    while current < end:
        next_midnight = datetime.combine(
            current.date() + timedelta(days=1), time.min, tzinfo=current.tzinfo
        )
        segments.append(DateSegment(current, min(next_midnight, end), current.date()))
        current = next_midnight
    return segments


def build_segment_boundaries(start: datetime, end: datetime) -> list[datetime]:
    """
    Sorted split points for one date segment: its own start/end, every whole
    hour inside it, and 06:00/22:00 when strictly inside. Every interval
    between two consecutive points is uniform in night differential status.
    """
    boundaries = {start, end}

    cursor = start.replace(minute=0, second=0, microsecond=0)
    if cursor < start:
        cursor += ONE_HOUR
    while cursor < end:
        boundaries.add(cursor)
        cursor += ONE_HOUR

    for hour in (NIGHT_DIFF_END, NIGHT_DIFF_START):
        mark = start.replace(hour=hour, minute=0, second=0, microsecond=0)
        if start < mark < end:
            boundaries.add(mark)

    return sorted(boundaries)


def is_night_interval(start: datetime) -> bool:
    """Night status of an atomic interval, read from its start."""
    return is_night_diff_hour(start.hour + start.minute / 60.0 + start.second / 3600.0)


def is_rest_day(d: date, rest_day: int = 0) -> bool:
    """rest_day uses 0=Sunday .. 6=Saturday."""
    return (d.weekday() + 1) % 7 == rest_day
