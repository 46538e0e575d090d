"""Weekly board projection.

Pure entry point of the engine: given the loaded tasks, the navigation state,
the visible groups and the current instant it resolves the active week,
projects every task onto a day column, and groups each column into cards.
Nothing is cached; the board is rebuilt on every input change.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime

from loguru import logger

from curator_board.config.settings import settings
from curator_board.scheduling.grouping import BoardProgress, completion_progress, filter_by_status, group_tasks_for_day
from curator_board.scheduling.iso_week import week_date_range_label, week_dates
from curator_board.scheduling.navigation import NavigationState, can_go_next, can_go_prev, resolve_active_week
from curator_board.scheduling.program_week import check_task_program_weeks, phase_label, program_week_for_iso_week
from curator_board.scheduling.projection import bucket_by_day
from curator_board.scheduling.query_state import to_query_params
from curator_board.scheduling.types import CalendarWeek, CuratorGroup, CuratorTask, TaskGroup

DAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


@dataclass(frozen=True)
class DayColumn:
    """One day of the board.

    Attributes:
        index: 0 (Monday) .. 6 (Sunday)
        date: Civil date of the column
        label: Short weekday label
        groups: Cards of the day, student-scope first
    """

    index: int
    date: date
    label: str
    groups: list[TaskGroup]


@dataclass(frozen=True)
class WeekBoard:
    """Everything the renderer needs for one week.

    Attributes:
        state: Navigation state the board was built for (reset to the current
            week when program context was missing)
        week: Active ISO week
        week_label: "Week N of M" in group context, else the date range
        date_range_label: Monday..Sunday range of the active week
        program_week: Program week of the active week, None without group context
        phase_label: Onboarding/Renewal badge, if any
        days: Seven columns, Monday first
        progress: Completion counters over the displayed tasks
        can_go_prev: Previous-week affordance
        can_go_next: Next-week affordance
        query: Query parameters that persist this view
    """

    state: NavigationState
    week: CalendarWeek
    week_label: str
    date_range_label: str
    program_week: int | None
    phase_label: str | None
    days: list[DayColumn]
    progress: BoardProgress
    can_go_prev: bool
    can_go_next: bool
    query: dict[str, str]


def find_group(groups: Sequence[CuratorGroup], group_id: int | None) -> CuratorGroup | None:
    """Look up the selected group's metadata."""
    if group_id is None:
        return None
    return next((group for group in groups if group.id == group_id), None)


def viewed_program_week(week: CalendarWeek, group: CuratorGroup | None) -> int | None:
    """Program week of the active calendar week in the selected group."""
    if group is None or group.start_date is None:
        return None
    return program_week_for_iso_week(week, group.start_date)


def week_label(week: CalendarWeek, group: CuratorGroup | None) -> str:
    """Header label: "Week N of M" when the group context is known and in range."""
    program_week = viewed_program_week(week, group)
    if group is not None and group.total_weeks and program_week is not None and 1 <= program_week <= group.total_weeks:
        return f"Week {program_week} of {group.total_weeks}"
    return week_date_range_label(week)


def build_board(
    tasks: Sequence[CuratorTask],
    state: NavigationState,
    groups: Sequence[CuratorGroup],
    now: datetime,
    *,
    utc_offset_minutes: int | None = None,
    status_filter: str | None = None,
    strict: bool | None = None,
    nav_bound: int | None = None,
) -> WeekBoard:
    """Build the weekly board.

    Args:
        tasks: Tasks already limited to the queried week or program week
        state: Navigation state
        groups: Groups visible to the curator
        now: Current instant
        utc_offset_minutes: Board offset; defaults to settings.board_utc_offset_minutes
        status_filter: Optional status to keep ("all" or None keeps everything)
        strict: Raise on missing program context; defaults to settings.strict_context
        nav_bound: Calendar navigation bound; defaults to settings.calendar_nav_bound_weeks

    Returns:
        WeekBoard for the active week

    Raises:
        UnresolvableContextError: In strict mode, for program mode without group context
        InvalidArgumentError: For an unknown status filter
    """
    offset = settings.board_utc_offset_minutes if utc_offset_minutes is None else utc_offset_minutes
    strict_mode = settings.strict_context if strict is None else strict
    bound = settings.calendar_nav_bound_weeks if nav_bound is None else nav_bound

    group = find_group(groups, state.selected_group_id)
    if state.selected_group_id is not None and group is None:
        logger.warning("Selected group not among visible groups", selected_group_id=state.selected_group_id)

    state, week = resolve_active_week(state, group, now, offset, strict=strict_mode)

    visible = filter_by_status(tasks, status_filter)
    check_task_program_weeks(visible, group)

    buckets = bucket_by_day(visible, offset)
    days = [
        DayColumn(index=index, date=day, label=DAY_LABELS[index], groups=group_tasks_for_day(bucket))
        for index, (day, bucket) in enumerate(zip(week_dates(week), buckets, strict=True))
    ]

    program_week = viewed_program_week(week, group)
    board = WeekBoard(
        state=state,
        week=week,
        week_label=week_label(week, group),
        date_range_label=week_date_range_label(week),
        program_week=program_week,
        phase_label=phase_label(program_week, group.total_weeks if group else None),
        days=days,
        progress=completion_progress(visible),
        can_go_prev=can_go_prev(state, group, bound),
        can_go_next=can_go_next(state, group, bound),
        query=to_query_params(state, week),
    )
    logger.debug(
        "Board built",
        week=str(week),
        task_count=len(visible),
        group_count=sum(len(day.groups) for day in days),
        selected_group_id=state.selected_group_id,
    )
    return board
