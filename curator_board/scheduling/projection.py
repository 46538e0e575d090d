"""Due-date projection onto the 7-day board.

Due dates arrive as UTC instants. The board shows them in one fixed target
offset (a configuration value, never the host's locale), so a task due
Sunday 20:00 UTC lands on Monday for a UTC+5 deployment.
"""

from collections.abc import Iterable
from datetime import UTC, date, datetime, timedelta, timezone

from curator_board.scheduling.types import CuratorTask

DAYS_PER_WEEK = 7


def as_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime; naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def to_local(instant: datetime, utc_offset_minutes: int) -> datetime:
    """Convert an instant to wall-clock time at a fixed UTC offset.

    Args:
        instant: Aware or naive (UTC) datetime
        utc_offset_minutes: Target offset east of UTC, in minutes

    Returns:
        Aware datetime in the target offset
    """
    return as_utc(instant).astimezone(timezone(timedelta(minutes=utc_offset_minutes)))


def local_date(instant: datetime, utc_offset_minutes: int) -> date:
    """Civil date of an instant at a fixed UTC offset."""
    return to_local(instant, utc_offset_minutes).date()


def local_time_label(due_at: datetime | None, utc_offset_minutes: int) -> str | None:
    """Format a due instant as zero-padded "HH:MM" local time, None when undated."""
    if due_at is None:
        return None
    return to_local(due_at, utc_offset_minutes).strftime("%H:%M")


def local_day_index(due_at: datetime | None, utc_offset_minutes: int) -> int | None:
    """Board column for a due instant: Monday=0 .. Sunday=6, None when undated."""
    if due_at is None:
        return None
    return to_local(due_at, utc_offset_minutes).weekday()


def bucket_by_day(tasks: Iterable[CuratorTask], utc_offset_minutes: int) -> list[list[CuratorTask]]:
    """Split tasks into seven day buckets by their local due weekday.

    Undated tasks are placed ahead of Monday's dated tasks, in input order.

    Args:
        tasks: Tasks already limited to the displayed week
        utc_offset_minutes: Board offset east of UTC, in minutes

    Returns:
        Seven lists, Monday first
    """
    buckets: list[list[CuratorTask]] = [[] for _ in range(DAYS_PER_WEEK)]
    undated: list[CuratorTask] = []
    for task in tasks:
        index = local_day_index(task.due_date, utc_offset_minutes)
        if index is None:
            undated.append(task)
        else:
            buckets[index].append(task)
    if undated:
        buckets[0] = undated + buckets[0]
    return buckets
