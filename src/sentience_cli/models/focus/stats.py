"""Aggregate statistics computed from completed focus intervals.

Every function here is pure: statistics are always recomputed from the
interval log, never from separately maintained counters.
"""

from collections.abc import Iterable
from dataclasses import asdict, dataclass
from datetime import date, datetime, time, timedelta
from typing import Any

from .intervals import FocusInterval

DEFAULT_WEEKLY_GOAL_MINUTES = 300  # 5 hours per week


@dataclass(frozen=True)
class FocusStats:
    """Aggregate statistics over a set of intervals."""

    total_sessions: int = 0
    total_minutes: int = 0
    average_session_length: float = 0.0
    weekly_progress: int = 0
    weekly_goal: int = DEFAULT_WEEKLY_GOAL_MINUTES
    break_minutes: int = 0
    total_focus_seconds: int = 0

    @property
    def weekly_progress_percent(self) -> float:
        if self.weekly_goal <= 0:
            return 0.0
        return round(min(100.0, self.weekly_progress / self.weekly_goal * 100), 1)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["weekly_progress_percent"] = self.weekly_progress_percent
        return data


def _local_now(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now().astimezone()
    if now.tzinfo is None:
        return now.astimezone()
    return now


def start_of_week(now: datetime | None = None) -> datetime:
    """Midnight of the most recent Sunday (weeks start on Sunday).

    The UTC offset is the one in force at that midnight, which differs from
    the offset of ``now`` when a DST change falls inside the week.
    """
    local = _local_now(now)
    days_since_sunday = (local.weekday() + 1) % 7
    return _midnight(local.date() - timedelta(days=days_since_sunday), now)


def _midnight(day: date, now: datetime | None) -> datetime:
    midnight = datetime.combine(day, time.min)
    if now is None or now.tzinfo is None:
        return midnight.astimezone()
    return midnight.replace(tzinfo=now.tzinfo)


def compute_stats(
    intervals: Iterable[FocusInterval],
    now: datetime | None = None,
    weekly_goal_minutes: int = DEFAULT_WEEKLY_GOAL_MINUTES,
) -> FocusStats:
    """
    Compute aggregate statistics.

    Only work intervals count as sessions; break time is reported separately.

    Args:
        intervals: Completed intervals (any order)
        now: Reference time for the weekly window (defaults to now)
        weekly_goal_minutes: Target work minutes per week

    Returns:
        FocusStats, all zeros when there are no intervals
    """
    week_start = start_of_week(now)
    week_end = _midnight(week_start.date() + timedelta(days=7), now)

    total_sessions = 0
    total_minutes = 0
    total_seconds = 0
    break_minutes = 0
    weekly_progress = 0

    for interval in intervals:
        if not interval.is_work:
            break_minutes += interval.duration_minutes
            continue
        total_sessions += 1
        total_minutes += interval.duration_minutes
        total_seconds += interval.duration_seconds
        if week_start <= interval.date < week_end:
            weekly_progress += interval.duration_minutes

    return FocusStats(
        total_sessions=total_sessions,
        total_minutes=total_minutes,
        average_session_length=round(
            total_minutes / total_sessions if total_sessions > 0 else 0, 1
        ),
        weekly_progress=weekly_progress,
        weekly_goal=weekly_goal_minutes,
        break_minutes=break_minutes,
        total_focus_seconds=total_seconds,
    )


def daily_breakdown(
    intervals: Iterable[FocusInterval], days: int = 7, now: datetime | None = None
) -> list[dict[str, Any]]:
    """Work sessions and minutes per day for the last N days (oldest first)."""
    today = _local_now(now).date()
    first_day = today - timedelta(days=days - 1)

    buckets: dict[date, dict[str, Any]] = {}
    for i in range(days):
        day = first_day + timedelta(days=i)
        buckets[day] = {"date": day.isoformat(), "sessions": 0, "minutes": 0}

    for interval in intervals:
        if not interval.is_work:
            continue
        day = interval.date.astimezone(_local_now(now).tzinfo).date()
        if day in buckets:
            buckets[day]["sessions"] += 1
            buckets[day]["minutes"] += interval.duration_minutes

    return list(buckets.values())


def current_streak_days(
    intervals: Iterable[FocusInterval], now: datetime | None = None
) -> int:
    """Number of consecutive days, ending today, with at least one work session."""
    tz = _local_now(now).tzinfo
    work_days = {i.date.astimezone(tz).date() for i in intervals if i.is_work}
    if not work_days:
        return 0

    cursor = _local_now(now).date()
    streak = 0
    while cursor in work_days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak
