"""Scheduling data model.

Inbound records (tasks and group metadata) are pydantic models that mirror the
curator task API. Everything the engine derives from them is a frozen
dataclass: it is recomputed on every input change, never mutated.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import UTC, date, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator

from curator_board.scheduling.errors import InvalidArgumentError, MalformedPersistedStateError

WEEK_PATTERN = re.compile(r"[0-9]{4}-W[0-9]{2}")

# Years whose every ISO week, Monday through Sunday, is a representable date
MIN_WEEK_YEAR = date.min.year
MAX_WEEK_YEAR = date.max.year - 1


class TaskStatus(StrEnum):
    """Closed set of curator task statuses."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    OVERDUE = "overdue"


class TaskScope(StrEnum):
    """Who a task is about: one student or a whole group."""

    STUDENT = "student"
    GROUP = "group"


class TaskCategory(StrEnum):
    """Display category of a task, used to partition and color board cards."""

    OS_PARENT = "os_parent"
    OS_STUDENT = "os_student"
    POST = "post"
    GROUP = "group"
    LESSON = "lesson"
    PRACTICE = "practice"
    CALL = "call"
    RENEWAL = "renewal"
    ONBOARDING = "onboarding"


@dataclass(frozen=True, order=True)
class CalendarWeek:
    """ISO-8601 week identifier, rendered as ``YYYY-Www``.

    Attributes:
        iso_year: ISO week-numbering year (may differ from the calendar year
            for dates in late December or early January)
        iso_week: Week number 1..53
    """

    iso_year: int
    iso_week: int

    def __post_init__(self) -> None:
        if not 1 <= self.iso_week <= 53:
            raise InvalidArgumentError(
                "INVALID_CALENDAR_WEEK",
                [f"iso_week must be within 1..53, got {self.iso_week}"],
            )

    def __str__(self) -> str:
        return f"{self.iso_year:04d}-W{self.iso_week:02d}"

    @classmethod
    def parse(cls, value: str) -> CalendarWeek:
        """Parse a ``YYYY-Www`` string.

        Raises:
            MalformedPersistedStateError: If the value does not match the format
                or names a week outside 1..53 or a year outside the date range
        """
        if not WEEK_PATTERN.fullmatch(value):
            raise MalformedPersistedStateError("MALFORMED_WEEK", [f"expected YYYY-Www, got {value!r}"])
        year_part, week_part = value.split("-W")
        year = int(year_part)
        if not MIN_WEEK_YEAR <= year <= MAX_WEEK_YEAR:
            raise MalformedPersistedStateError("MALFORMED_WEEK", [f"year out of range in {value!r}"])
        week_number = int(week_part)
        if not 1 <= week_number <= 53:
            raise MalformedPersistedStateError("MALFORMED_WEEK", [f"week number out of range in {value!r}"])
        return cls(year, week_number)


class CuratorTask(BaseModel):
    """One curator obligation instance as returned by the task API.

    Status is kept as the raw string: values outside TaskStatus are tolerated
    here and reported when statuses are rolled up.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    template_id: int
    template_title: str | None = None
    template_description: str | None = None
    task_type: str | None = None
    scope: str | None = None
    curator_id: int
    curator_name: str | None = None
    student_id: int | None = None
    student_name: str | None = None
    group_id: int | None = None
    group_name: str | None = None
    status: str = TaskStatus.PENDING.value
    due_date: datetime | None = None
    completed_at: datetime | None = None
    result_text: str | None = None
    screenshot_url: str | None = None
    week_reference: str | None = None
    program_week: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("due_date", "completed_at", "created_at", "updated_at")
    @classmethod
    def assume_utc(cls, value: datetime | None) -> datetime | None:
        """API datetimes are UTC; a value without offset is read as UTC."""
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class CuratorGroup(BaseModel):
    """Group metadata the board needs to map program weeks.

    Attributes:
        id: Group ID
        name: Display name
        start_date: Enrollment start, a civil date (no time, no timezone)
        total_weeks: Program length in weeks, if known
        program_week: Program week the group is in today, as reported upstream
    """

    model_config = ConfigDict(frozen=True)

    id: int
    name: str = ""
    start_date: date | None = None
    total_weeks: int | None = None
    program_week: int | None = None
    lessons_count: int | None = None
    has_schedule: bool = False

    @field_validator("start_date", mode="before")
    @classmethod
    def parse_civil_date(cls, value: object) -> object:
        """Accept "YYYY-MM-DD" and drop any time part of a full timestamp."""
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str) and len(value) > 10 and value[10] == "T":
            return value[:10]
        return value


@dataclass(frozen=True)
class TaskGroup:
    """Render-time aggregation of tasks sharing a template and scope partition.

    Attributes:
        key: Partition key (see grouping.group_key)
        template_title: Title shown on the card
        template_description: Optional template description
        category: Display category of the first task
        tasks: Member tasks in encounter order
        due_date: Due date of the first task
        is_grouped: True when several per-student tasks share the card
        is_main: True for student-scope groups, which sort first
        status: Rolled-up status of all member tasks
    """

    key: str
    template_title: str
    template_description: str | None
    category: TaskCategory
    tasks: tuple[CuratorTask, ...]
    due_date: datetime | None
    is_grouped: bool
    is_main: bool
    status: TaskStatus
