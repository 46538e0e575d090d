"""Program-week mapping.

A program week is counted from a group's enrollment start date: week 1 starts
on ``start_date`` itself (whatever weekday that is), week N starts
``7 * (N - 1)`` days later. These helpers translate between that count and
ISO calendar weeks.
"""

from collections.abc import Iterable
from datetime import date, timedelta

from loguru import logger

from curator_board.scheduling.errors import InvalidArgumentError
from curator_board.scheduling.iso_week import iso_week_of, monday_of
from curator_board.scheduling.types import CalendarWeek, CuratorGroup, CuratorTask

ONBOARDING_PHASE = "Onboarding"
RENEWAL_PHASE = "Renewal"


def iso_week_for_program_week(start_date: date, program_week: int) -> CalendarWeek:
    """Return the ISO week containing the first day of a program week.

    Args:
        start_date: Group enrollment start (civil date)
        program_week: 1-based program week

    Returns:
        CalendarWeek holding ``start_date + 7 * (program_week - 1)`` days

    Raises:
        InvalidArgumentError: If program_week is below 1
    """
    if program_week < 1:
        raise InvalidArgumentError(
            "INVALID_PROGRAM_WEEK",
            [f"program_week must be >= 1, got {program_week}"],
        )
    return iso_week_of(start_date + timedelta(weeks=program_week - 1))


def program_week_for_iso_week(week: CalendarWeek, start_date: date) -> int | None:
    """Return the program week an ISO week belongs to.

    Weeks, not days, are the unit here: the start date is first normalized to
    the Monday of its own ISO week, so the calendar week holding
    ``start_date`` is program week 1 even when the group starts mid-week.
    For a Monday start this is the plain day count from ``start_date``.

    Returns:
        1-based program week, or None when the ISO week precedes the one
        holding ``start_date``
    """
    start_monday = start_date - timedelta(days=start_date.weekday())
    delta_days = (monday_of(week) - start_monday).days
    if delta_days < 0:
        return None
    return delta_days // 7 + 1


def current_program_week(start_date: date, today: date) -> int | None:
    """Program week a civil date falls in, None before the group starts."""
    delta_days = (today - start_date).days
    if delta_days < 0:
        return None
    return delta_days // 7 + 1


def phase_label(program_week: int | None, total_weeks: int | None) -> str | None:
    """Phase badge for a program week.

    Week 1 is onboarding; the last two weeks of a program of known length are
    the renewal window.
    """
    if program_week is None:
        return None
    if program_week == 1:
        return ONBOARDING_PHASE
    if total_weeks and program_week >= total_weeks - 1:
        return RENEWAL_PHASE
    return None


def check_task_program_weeks(tasks: Iterable[CuratorTask], group: CuratorGroup | None) -> list[CuratorTask]:
    """Find tasks recorded for a program week past the group's known length.

    Such tasks are still rendered; this only reports the data drift.

    Args:
        tasks: Tasks about to be rendered
        group: Selected group, or None for the all-groups view

    Returns:
        Tasks whose program_week exceeds group.total_weeks
    """
    if group is None or not group.total_weeks:
        return []
    drifted = [
        task
        for task in tasks
        if task.program_week is not None and task.program_week > group.total_weeks
    ]
    for task in drifted:
        logger.warning(
            "PROGRAM_WEEK_OUT_OF_RANGE",
            task_id=task.id,
            group_id=group.id,
            program_week=task.program_week,
            total_weeks=group.total_weeks,
        )
    return drifted
