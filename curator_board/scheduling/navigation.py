"""Week navigation state machine.

The board is either in calendar mode (an offset from the current ISO week) or
in program mode (an explicit program week of the selected group). The mode is
a tagged union, so "program mode without a program week" cannot be expressed.

Every transition is a pure function returning a new NavigationState; the
hosting controller swaps the whole value in one step and recomputes the
active week from it.
"""

from dataclasses import dataclass, replace
from datetime import datetime

from loguru import logger

from curator_board.scheduling.errors import InvalidArgumentError, UnresolvableContextError
from curator_board.scheduling.iso_week import current_week, shift_weeks
from curator_board.scheduling.logging import log_scheduling_failure
from curator_board.scheduling.program_week import iso_week_for_program_week
from curator_board.scheduling.types import CalendarWeek, CuratorGroup

DEFAULT_CALENDAR_BOUND = 52


@dataclass(frozen=True)
class CalendarMode:
    """Current-week view shifted by ``offset`` weeks."""

    offset: int = 0


@dataclass(frozen=True)
class ProgramMode:
    """Explicit program week of the selected group."""

    week: int

    def __post_init__(self) -> None:
        if self.week < 1:
            raise InvalidArgumentError("INVALID_PROGRAM_WEEK", [f"program week must be >= 1, got {self.week}"])


NavigationMode = CalendarMode | ProgramMode


@dataclass(frozen=True)
class NavigationState:
    """Navigation owned by the hosting controller.

    Attributes:
        mode: Calendar or program mode
        selected_group_id: Selected group, None for the all-groups view
    """

    mode: NavigationMode = CalendarMode()
    selected_group_id: int | None = None

    @property
    def is_calendar_mode(self) -> bool:
        return isinstance(self.mode, CalendarMode)


def _check_bound(bound: int) -> None:
    if bound < 0:
        raise InvalidArgumentError("INVALID_NAVIGATION_BOUND", [f"bound must be >= 0, got {bound}"])


def can_go_prev(
    state: NavigationState,
    group: CuratorGroup | None,
    bound: int = DEFAULT_CALENDAR_BOUND,
) -> bool:
    """Whether stepping one week back is allowed."""
    _check_bound(bound)
    mode = state.mode
    if isinstance(mode, CalendarMode):
        return mode.offset > -bound
    return group is not None and mode.week > 1


def can_go_next(
    state: NavigationState,
    group: CuratorGroup | None,
    bound: int = DEFAULT_CALENDAR_BOUND,
) -> bool:
    """Whether stepping one week forward is allowed.

    Program mode is unbounded above when the group's total_weeks is unknown.
    """
    _check_bound(bound)
    mode = state.mode
    if isinstance(mode, CalendarMode):
        return mode.offset < bound
    if group is None:
        return False
    return group.total_weeks is None or mode.week < group.total_weeks


def go_prev(
    state: NavigationState,
    group: CuratorGroup | None,
    bound: int = DEFAULT_CALENDAR_BOUND,
) -> NavigationState:
    """Step one week back; a no-op at the lower bound."""
    if not can_go_prev(state, group, bound):
        return state
    mode = state.mode
    if isinstance(mode, CalendarMode):
        return replace(state, mode=CalendarMode(mode.offset - 1))
    return replace(state, mode=ProgramMode(mode.week - 1))


def go_next(
    state: NavigationState,
    group: CuratorGroup | None,
    bound: int = DEFAULT_CALENDAR_BOUND,
) -> NavigationState:
    """Step one week forward; a no-op at the upper bound."""
    if not can_go_next(state, group, bound):
        return state
    mode = state.mode
    if isinstance(mode, CalendarMode):
        return replace(state, mode=CalendarMode(mode.offset + 1))
    return replace(state, mode=ProgramMode(mode.week + 1))


def go_to_current(state: NavigationState) -> NavigationState:
    """Return to the current calendar week, keeping the group selection."""
    return replace(state, mode=CalendarMode())


def go_to_program_week(state: NavigationState, group: CuratorGroup | None, week: int) -> NavigationState:
    """Enter program mode at an explicit program week.

    Raises:
        UnresolvableContextError: If no group is selected, it has no start date,
            or its metadata belongs to a different group than the selected one
        InvalidArgumentError: If week is below 1
    """
    anchored = _require_program_context(group)
    if anchored.id != state.selected_group_id:
        raise UnresolvableContextError(
            "GROUP_MISMATCH",
            [f"group {anchored.id} metadata passed while group {state.selected_group_id} is selected"],
        )
    return replace(state, mode=ProgramMode(week))


def select_group(state: NavigationState, group_id: int | None, *, from_query: bool = False) -> NavigationState:
    """Change the selected group.

    A user-driven switch resets navigation to the current calendar week. A
    switch restored from the query string keeps the restored mode.
    """
    if from_query:
        return replace(state, selected_group_id=group_id)
    return NavigationState(mode=CalendarMode(), selected_group_id=group_id)


def _require_program_context(group: CuratorGroup | None) -> CuratorGroup:
    if group is None:
        raise UnresolvableContextError("MISSING_GROUP_CONTEXT", ["program mode requires a selected group"])
    if group.start_date is None:
        raise UnresolvableContextError(
            "MISSING_START_DATE",
            [f"group {group.id} has no start_date, program weeks cannot be mapped"],
        )
    return group


def active_week(
    state: NavigationState,
    group: CuratorGroup | None,
    now: datetime,
    utc_offset_minutes: int,
) -> CalendarWeek:
    """Compute the ISO week the board shows.

    Args:
        state: Navigation state
        group: Metadata of state.selected_group_id, None when no group is selected
        now: Current instant
        utc_offset_minutes: Board offset east of UTC, in minutes

    Raises:
        UnresolvableContextError: In program mode without a group start date
    """
    mode = state.mode
    if isinstance(mode, CalendarMode):
        return shift_weeks(current_week(now, utc_offset_minutes), mode.offset)
    anchored = _require_program_context(group)
    return iso_week_for_program_week(anchored.start_date, mode.week)


def resolve_active_week(
    state: NavigationState,
    group: CuratorGroup | None,
    now: datetime,
    utc_offset_minutes: int,
    *,
    strict: bool,
) -> tuple[NavigationState, CalendarWeek]:
    """Boundary wrapper around active_week.

    In strict mode (development) a missing program context is raised. Otherwise
    it is logged and navigation degrades to the current calendar week.

    Returns:
        The state actually used (possibly reset) and its active week
    """
    try:
        return state, active_week(state, group, now, utc_offset_minutes)
    except UnresolvableContextError as err:
        if strict:
            raise
        log_scheduling_failure(
            err,
            {"selected_group_id": state.selected_group_id, "fallback": "calendar_mode"},
        )
        fallback = go_to_current(state)
        logger.info("Navigation reset to current calendar week")
        return fallback, active_week(fallback, group, now, utc_offset_minutes)
