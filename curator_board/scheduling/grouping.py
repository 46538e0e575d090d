"""Grouping and status aggregation for one board column.

Per-student tasks of the same template merge into one multi-assignee card
across students and groups; group-scope tasks only merge within their own
group. Student-scope cards sort above group-scope cards, otherwise encounter
order is kept.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from urllib.parse import urlencode

from loguru import logger

from curator_board.scheduling.classification import classify_task
from curator_board.scheduling.errors import InvalidArgumentError
from curator_board.scheduling.types import CuratorTask, TaskGroup, TaskScope, TaskStatus

DEFAULT_TEMPLATE_TITLE = "Task"
LEADERBOARD_FRAGMENT = "лидерборд"
LEADERBOARD_PATH = "/curator/leaderboard"

STATUS_LABELS: dict[TaskStatus, str] = {
    TaskStatus.PENDING: "Pending",
    TaskStatus.IN_PROGRESS: "In progress",
    TaskStatus.COMPLETED: "Done",
    TaskStatus.OVERDUE: "Overdue",
}


@dataclass(frozen=True)
class BoardProgress:
    """Completion counters for the stats bar."""

    done: int
    total: int

    @property
    def percent(self) -> int:
        if self.total == 0:
            return 0
        return round(self.done * 100 / self.total)


def normalize_status(raw: str, task_id: int | None = None) -> TaskStatus:
    """Map a raw status string onto TaskStatus.

    Unknown values indicate upstream contract drift: they are treated as
    pending and reported at warning level.
    """
    try:
        return TaskStatus(raw)
    except ValueError:
        logger.warning("UNKNOWN_TASK_STATUS", task_id=task_id, status=raw)
        return TaskStatus.PENDING


def get_group_status(tasks: Sequence[CuratorTask]) -> TaskStatus:
    """Roll member statuses up into one card status.

    Precedence:
    - completed: every task completed
    - overdue: any task overdue
    - in_progress: some, not all, tasks completed
    - pending: otherwise
    """
    statuses = [normalize_status(task.status, task.id) for task in tasks]
    done = statuses.count(TaskStatus.COMPLETED)
    if done == len(statuses):
        return TaskStatus.COMPLETED
    if TaskStatus.OVERDUE in statuses:
        return TaskStatus.OVERDUE
    if done > 0:
        return TaskStatus.IN_PROGRESS
    return TaskStatus.PENDING


def group_key(task: CuratorTask) -> str:
    """Partition key: template for per-student tasks, template and group otherwise."""
    if task.student_id is not None:
        return str(task.template_id)
    return f"{task.template_id}:{task.group_id or 0}"


def _build_group(key: str, tasks: list[CuratorTask]) -> TaskGroup:
    first = tasks[0]
    return TaskGroup(
        key=key,
        template_title=first.template_title or DEFAULT_TEMPLATE_TITLE,
        template_description=first.template_description or None,
        category=classify_task(first),
        tasks=tuple(tasks),
        due_date=first.due_date,
        is_grouped=len(tasks) > 1 and all(task.student_id is not None for task in tasks),
        is_main=first.scope == TaskScope.STUDENT,
        status=get_group_status(tasks),
    )


def group_tasks_for_day(day_tasks: Iterable[CuratorTask]) -> list[TaskGroup]:
    """Partition one column's tasks into display groups.

    Args:
        day_tasks: Tasks projected onto the same board column

    Returns:
        TaskGroups, student-scope groups first, each bucket in encounter order
    """
    partitions: dict[str, list[CuratorTask]] = {}
    for task in day_tasks:
        partitions.setdefault(group_key(task), []).append(task)

    groups = [_build_group(key, tasks) for key, tasks in partitions.items()]
    # sorted() is stable, so encounter order survives within each bucket
    return sorted(groups, key=lambda group: not group.is_main)


def refresh_group(group: TaskGroup, tasks: Iterable[CuratorTask]) -> TaskGroup:
    """Re-derive an open group after the task list was reloaded.

    Returns the stale group unchanged when no reloaded task shares its key.
    """
    live = [task for task in tasks if group_key(task) == group.key]
    if not live:
        return group
    return replace(
        group,
        tasks=tuple(live),
        is_grouped=len(live) > 1 and all(task.student_id is not None for task in live),
        status=get_group_status(live),
    )


def filter_by_status(tasks: Iterable[CuratorTask], status: str | None) -> list[CuratorTask]:
    """Keep tasks with the given status; None or "all" keeps everything.

    Statuses are normalized the same way as in the card rollup, so a task with
    an unknown status is kept by the "pending" filter.

    Raises:
        InvalidArgumentError: If status is not a known TaskStatus
    """
    if status is None or status == "all":
        return list(tasks)
    try:
        wanted = TaskStatus(status)
    except ValueError as e:
        raise InvalidArgumentError("INVALID_STATUS_FILTER", [f"unknown status filter {status!r}"]) from e
    return [task for task in tasks if normalize_status(task.status, task.id) == wanted]


def completion_progress(tasks: Sequence[CuratorTask]) -> BoardProgress:
    """Count completed tasks against all tasks."""
    done = sum(1 for task in tasks if task.status == TaskStatus.COMPLETED)
    return BoardProgress(done=done, total=len(tasks))


def is_leaderboard_task(task: CuratorTask) -> bool:
    """Leaderboard tasks link to the leaderboard page instead of a result form."""
    return LEADERBOARD_FRAGMENT in (task.template_title or "").lower()


def leaderboard_link(task: CuratorTask) -> str:
    """Deep link to the leaderboard for the task's group and program week."""
    params: dict[str, str] = {}
    if task.group_id:
        params["groupId"] = str(task.group_id)
    if task.program_week:
        params["week"] = str(task.program_week)
    if not params:
        return LEADERBOARD_PATH
    return f"{LEADERBOARD_PATH}?{urlencode(params)}"
