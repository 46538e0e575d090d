"""Scheduling module - curator weekly board engine.

This module provides:
- ISO calendar week arithmetic
- Program week mapping relative to a group's start date
- Due-date projection onto board columns at a fixed UTC offset
- Task classification, grouping and status rollup
- Week navigation state machine and its query-string persistence
- Weekly board projection tying the above together
"""

from curator_board.scheduling.board import DayColumn, WeekBoard, build_board, week_label
from curator_board.scheduling.classification import CATEGORY_RULES, CategoryRule, classify, classify_task
from curator_board.scheduling.errors import (
    InvalidArgumentError,
    MalformedPersistedStateError,
    SchedulingError,
    UnresolvableContextError,
)
from curator_board.scheduling.grouping import (
    BoardProgress,
    completion_progress,
    filter_by_status,
    get_group_status,
    group_key,
    group_tasks_for_day,
    refresh_group,
)
from curator_board.scheduling.iso_week import (
    current_week,
    iso_week_of,
    monday_of,
    shift_weeks,
    week_date_range_label,
    week_dates,
    week_offset,
)
from curator_board.scheduling.navigation import (
    CalendarMode,
    NavigationState,
    ProgramMode,
    active_week,
    can_go_next,
    can_go_prev,
    go_next,
    go_prev,
    go_to_current,
    go_to_program_week,
    resolve_active_week,
    select_group,
)
from curator_board.scheduling.program_week import (
    current_program_week,
    iso_week_for_program_week,
    phase_label,
    program_week_for_iso_week,
)
from curator_board.scheduling.projection import bucket_by_day, local_day_index, local_time_label
from curator_board.scheduling.query_state import decode_query, encode_query, restore_navigation, to_query_params
from curator_board.scheduling.types import (
    CalendarWeek,
    CuratorGroup,
    CuratorTask,
    TaskCategory,
    TaskGroup,
    TaskScope,
    TaskStatus,
)

__all__ = [
    "CATEGORY_RULES",
    "BoardProgress",
    "CalendarMode",
    "CalendarWeek",
    "CategoryRule",
    "CuratorGroup",
    "CuratorTask",
    "DayColumn",
    "InvalidArgumentError",
    "MalformedPersistedStateError",
    "NavigationState",
    "ProgramMode",
    "SchedulingError",
    "TaskCategory",
    "TaskGroup",
    "TaskScope",
    "TaskStatus",
    "UnresolvableContextError",
    "WeekBoard",
    "active_week",
    "bucket_by_day",
    "build_board",
    "can_go_next",
    "can_go_prev",
    "classify",
    "classify_task",
    "completion_progress",
    "current_program_week",
    "current_week",
    "decode_query",
    "encode_query",
    "filter_by_status",
    "get_group_status",
    "go_next",
    "go_prev",
    "go_to_current",
    "go_to_program_week",
    "group_key",
    "group_tasks_for_day",
    "iso_week_for_program_week",
    "iso_week_of",
    "local_day_index",
    "local_time_label",
    "monday_of",
    "phase_label",
    "program_week_for_iso_week",
    "refresh_group",
    "resolve_active_week",
    "restore_navigation",
    "select_group",
    "shift_weeks",
    "to_query_params",
    "week_date_range_label",
    "week_dates",
    "week_label",
    "week_offset",
]
