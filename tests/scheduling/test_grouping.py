"""Tests for grouping and status aggregation."""

import itertools
from collections import Counter

import pytest

from curator_board.scheduling.errors import InvalidArgumentError
from curator_board.scheduling.grouping import (
    completion_progress,
    filter_by_status,
    get_group_status,
    group_key,
    group_tasks_for_day,
    is_leaderboard_task,
    leaderboard_link,
    normalize_status,
    refresh_group,
)
from curator_board.scheduling.types import TaskCategory, TaskStatus


class TestGroupTasksForDay:
    """Tests for partitioning a column into cards."""

    def test_students_of_same_template_merge(self, make_task):
        """Test the two-student scenario: one grouped card, in progress."""
        tasks = [
            make_task(id=1, template_id=7, student_id=10, status="pending"),
            make_task(id=2, template_id=7, student_id=11, status="completed"),
        ]

        groups = group_tasks_for_day(tasks)

        assert len(groups) == 1
        assert groups[0].is_grouped is True
        assert groups[0].key == group_key(tasks[0]) == group_key(tasks[1])
        assert groups[0].status == TaskStatus.IN_PROGRESS
        assert get_group_status(groups[0].tasks) == TaskStatus.IN_PROGRESS

    def test_students_merge_across_groups(self, make_task):
        tasks = [
            make_task(template_id=7, student_id=10, group_id=1),
            make_task(template_id=7, student_id=11, group_id=2),
        ]
        assert len(group_tasks_for_day(tasks)) == 1

    def test_group_scope_tasks_isolated_by_group(self, make_task):
        """Test that group-scope tasks of one template never merge across groups."""
        tasks = [
            make_task(template_id=3, scope="group", student_id=None, group_id=1),
            make_task(template_id=3, scope="group", student_id=None, group_id=2),
        ]

        groups = group_tasks_for_day(tasks)

        assert [g.key for g in groups] == ["3:1", "3:2"]
        assert all(len(g.tasks) == 1 for g in groups)

    def test_group_scope_same_group_is_not_grouped_card(self, make_task):
        """Test that group-scope tasks sharing a key are never a multi-assignee card."""
        tasks = [
            make_task(template_id=3, scope="group", student_id=None, group_id=1),
            make_task(template_id=3, scope="group", student_id=None, group_id=1),
        ]

        groups = group_tasks_for_day(tasks)

        assert len(groups) == 1
        assert len(groups[0].tasks) == 2
        assert groups[0].is_grouped is False

    def test_missing_group_id_keys_as_zero(self, make_task):
        task = make_task(template_id=3, scope="group", student_id=None, group_id=None)
        assert group_key(task) == "3:0"

    def test_single_task_is_not_grouped(self, make_task):
        groups = group_tasks_for_day([make_task(student_id=10)])
        assert groups[0].is_grouped is False

    def test_student_scope_sorts_first_and_order_is_stable(self, make_task):
        """Test main-first ordering, encounter order kept within each bucket."""
        group_a = make_task(template_id=1, scope="group", student_id=None, group_id=1)
        student_b = make_task(template_id=2, scope="student", student_id=10)
        group_c = make_task(template_id=3, scope="group", student_id=None, group_id=1)
        student_d = make_task(template_id=4, scope="student", student_id=10)

        groups = group_tasks_for_day([group_a, student_b, group_c, student_d])

        assert [g.key for g in groups] == ["2", "4", "1:1", "3:1"]
        assert [g.is_main for g in groups] == [True, True, False, False]

    def test_card_fields_come_from_first_task(self, make_task):
        first = make_task(template_title="Пост в беседу", template_description="desc", scope="group", group_id=1)
        groups = group_tasks_for_day([first])
        assert groups[0].template_title == "Пост в беседу"
        assert groups[0].template_description == "desc"
        assert groups[0].category == TaskCategory.POST
        assert groups[0].due_date == first.due_date

    def test_default_title(self, make_task):
        groups = group_tasks_for_day([make_task(template_title=None)])
        assert groups[0].template_title == "Task"

    def test_partition_is_complete(self, make_task):
        """Test that every input task lands in exactly one card."""
        tasks = [
            make_task(
                template_id=template_id,
                scope=scope,
                student_id=(10 + i if scope == "student" else None),
                group_id=group_id,
            )
            for i, (template_id, scope, group_id) in enumerate(
                itertools.product([1, 2, 3], ["student", "group"], [None, 1, 2])
            )
        ]

        groups = group_tasks_for_day(tasks)

        grouped_ids = Counter(task.id for g in groups for task in g.tasks)
        assert grouped_ids == Counter(task.id for task in tasks)
        assert all(g.tasks for g in groups)

    def test_empty_column(self):
        assert group_tasks_for_day([]) == []


class TestGroupStatus:
    """Tests for status rollup."""

    @pytest.mark.parametrize(
        ("statuses", "expected"),
        [
            (["completed", "completed"], TaskStatus.COMPLETED),
            (["completed", "overdue"], TaskStatus.OVERDUE),
            (["overdue", "pending"], TaskStatus.OVERDUE),
            (["completed", "pending"], TaskStatus.IN_PROGRESS),
            (["completed", "in_progress"], TaskStatus.IN_PROGRESS),
            (["pending", "pending"], TaskStatus.PENDING),
            (["in_progress"], TaskStatus.PENDING),
        ],
    )
    def test_precedence(self, make_task, statuses, expected):
        assert get_group_status([make_task(status=s) for s in statuses]) == expected

    def test_rollup_monotonicity(self, make_task):
        """Test completed iff all completed, overdue whenever any overdue and not all completed."""
        for size in range(1, 4):
            for combo in itertools.product([s.value for s in TaskStatus], repeat=size):
                status = get_group_status([make_task(status=s) for s in combo])
                all_done = all(s == "completed" for s in combo)
                assert (status == TaskStatus.COMPLETED) == all_done
                if "overdue" in combo and not all_done:
                    assert status == TaskStatus.OVERDUE

    def test_unknown_status_counts_as_pending(self, make_task, log_records):
        """Test that an unknown status is rolled up as pending and reported."""
        task = make_task(status="archived")

        assert get_group_status([task]) == TaskStatus.PENDING
        assert get_group_status([task, make_task(status="completed")]) == TaskStatus.IN_PROGRESS

        warnings = [r for r in log_records if r["message"] == "UNKNOWN_TASK_STATUS"]
        assert warnings
        assert warnings[0]["level"].name == "WARNING"
        assert warnings[0]["extra"]["status"] == "archived"
        assert warnings[0]["extra"]["task_id"] == task.id

    def test_normalize_known_status(self, log_records):
        assert normalize_status("overdue") == TaskStatus.OVERDUE
        assert not [r for r in log_records if r["message"] == "UNKNOWN_TASK_STATUS"]


class TestStatusFilterAndProgress:
    """Tests for the status filter and the stats bar."""

    def test_filter_all(self, make_task):
        tasks = [make_task(status="pending"), make_task(status="completed")]
        assert filter_by_status(tasks, "all") == tasks
        assert filter_by_status(tasks, None) == tasks

    def test_filter_status(self, make_task):
        done = make_task(status="completed")
        assert filter_by_status([make_task(status="pending"), done], "completed") == [done]

    def test_pending_filter_keeps_unknown_status(self, make_task):
        """Test that the filter treats unknown statuses as pending, like the rollup."""
        unknown = make_task(status="archived")
        pending = make_task(status="pending")
        tasks = [unknown, pending, make_task(status="completed")]

        assert filter_by_status(tasks, "pending") == [unknown, pending]
        assert filter_by_status(tasks, "completed") == [tasks[2]]

    def test_filter_unknown_status(self, make_task):
        with pytest.raises(InvalidArgumentError) as exc_info:
            filter_by_status([make_task()], "archived")
        assert exc_info.value.code == "INVALID_STATUS_FILTER"

    def test_progress(self, make_task):
        progress = completion_progress([make_task(status="completed"), make_task(), make_task()])
        assert (progress.done, progress.total, progress.percent) == (1, 3, 33)

    def test_progress_empty(self):
        assert completion_progress([]).percent == 0


class TestRefreshGroup:
    """Tests for re-deriving an open card after reload."""

    def test_picks_up_new_statuses(self, make_task):
        first = make_task(id=1, template_id=7, student_id=10)
        second = make_task(id=2, template_id=7, student_id=11)
        card = group_tasks_for_day([first, second])[0]

        reloaded = [
            first.model_copy(update={"status": "completed"}),
            second.model_copy(update={"status": "completed"}),
            make_task(id=3, template_id=8, student_id=10),
        ]
        refreshed = refresh_group(card, reloaded)

        assert refreshed.status == TaskStatus.COMPLETED
        assert [t.id for t in refreshed.tasks] == [1, 2]

    def test_keeps_stale_group_when_nothing_matches(self, make_task):
        card = group_tasks_for_day([make_task(template_id=7, student_id=10)])[0]
        assert refresh_group(card, [make_task(template_id=9, student_id=10)]) is card


class TestLeaderboard:
    """Tests for leaderboard deep links."""

    def test_detects_leaderboard_task(self, make_task):
        assert is_leaderboard_task(make_task(template_title="Обновить Лидерборд"))
        assert not is_leaderboard_task(make_task(template_title="Кураторский час"))

    def test_link(self, make_task):
        task = make_task(template_title="Обновить лидерборд", group_id=5, program_week=3)
        assert leaderboard_link(task) == "/curator/leaderboard?groupId=5&week=3"

    def test_link_without_context(self, make_task):
        assert leaderboard_link(make_task(group_id=None, program_week=None)) == "/curator/leaderboard"
