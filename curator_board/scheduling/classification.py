"""Task classification.

Maps a task's template title and type to a display category. Rules overlap
("weekly practice" vs. generic "practice", the leaderboard post vs. any group
task), so they live in one ordered tuple and the first match wins.

Title fragments are matched against the seeded curator templates, which are
written in Russian.
"""

from dataclasses import dataclass

from curator_board.scheduling.types import CuratorTask, TaskCategory, TaskScope


@dataclass(frozen=True)
class CategoryRule:
    """One classification rule; every condition that is set must hold.

    Attributes:
        category: Category assigned on match
        task_type: Exact (case-insensitive) task type
        title_all: Fragments that must all occur in the title
        title_any: Fragments of which at least one must occur in the title
        scope: Exact task scope
    """

    category: TaskCategory
    task_type: str | None = None
    title_all: tuple[str, ...] = ()
    title_any: tuple[str, ...] = ()
    scope: TaskScope | None = None

    def __post_init__(self) -> None:
        if self.task_type is None and not self.title_all and not self.title_any and self.scope is None:
            raise ValueError(f"CategoryRule for {self.category} has no condition")

    def matches(self, title: str, task_type: str, scope: str | None) -> bool:
        """Check a lowercased title and task type against this rule."""
        if self.task_type is not None and task_type != self.task_type:
            return False
        if self.scope is not None and scope != self.scope:
            return False
        if not all(fragment in title for fragment in self.title_all):
            return False
        return not self.title_any or any(fragment in title for fragment in self.title_any)


CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule(TaskCategory.ONBOARDING, task_type="onboarding"),
    CategoryRule(TaskCategory.RENEWAL, task_type="renewal"),
    CategoryRule(TaskCategory.OS_PARENT, title_all=("родител",)),
    CategoryRule(TaskCategory.OS_STUDENT, title_all=("обратная связь", "лс")),
    CategoryRule(TaskCategory.OS_STUDENT, title_all=("ос ученику",)),
    CategoryRule(TaskCategory.POST, title_all=("пост в беседу",)),
    CategoryRule(TaskCategory.GROUP, title_all=("лидерборд",)),
    CategoryRule(TaskCategory.CALL, title_all=("кураторский час",)),
    CategoryRule(TaskCategory.LESSON, title_all=("напоминание",), title_any=("урок", "вебинар")),
    CategoryRule(TaskCategory.PRACTICE, title_any=("weekly practice", "practice")),
    CategoryRule(TaskCategory.GROUP, scope=TaskScope.GROUP),
)

FALLBACK_CATEGORY = TaskCategory.OS_STUDENT

CATEGORY_COLORS: dict[TaskCategory, str] = {
    TaskCategory.OS_PARENT: "#3b82f6",
    TaskCategory.OS_STUDENT: "#ef4444",
    TaskCategory.POST: "#f97316",
    TaskCategory.GROUP: "#a855f7",
    TaskCategory.LESSON: "#6366f1",
    TaskCategory.PRACTICE: "#ef4444",
    TaskCategory.CALL: "#10b981",
    TaskCategory.RENEWAL: "#dc2626",
    TaskCategory.ONBOARDING: "#22c55e",
}

CATEGORY_LABELS: dict[TaskCategory, str] = {
    TaskCategory.OS_PARENT: "Parent feedback",
    TaskCategory.OS_STUDENT: "Student feedback",
    TaskCategory.POST: "Posts",
    TaskCategory.GROUP: "Group",
    TaskCategory.LESSON: "Lesson",
    TaskCategory.PRACTICE: "Practice",
    TaskCategory.CALL: "Call",
    TaskCategory.RENEWAL: "Renewal",
    TaskCategory.ONBOARDING: "Onboarding",
}


def classify(
    template_title: str | None,
    task_type: str | None,
    scope: str | None = None,
    rules: tuple[CategoryRule, ...] = CATEGORY_RULES,
) -> TaskCategory:
    """Classify raw template fields; total, falls back to FALLBACK_CATEGORY."""
    title = (template_title or "").lower()
    kind = (task_type or "").lower()
    for rule in rules:
        if rule.matches(title, kind, scope):
            return rule.category
    return FALLBACK_CATEGORY


def classify_task(task: CuratorTask) -> TaskCategory:
    """Classify a task by its template title, task type and scope."""
    return classify(task.template_title, task.task_type, task.scope)
