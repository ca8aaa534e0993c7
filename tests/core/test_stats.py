"""任务统计单元测试"""

from datetime import date, timedelta

from taskboard.core.stats import (
    open_tasks_per_day,
    percentage,
    summarize_tasks,
    tasks_due_next_7_days,
)
from taskboard.core.models import TaskStatus
from taskboard.core.view import start_of_day


class TestSummarizeTasks:
    """看板统计卡片"""

    def test_counts_and_rate(self, make_task):
        tasks = [make_task(), make_task(), make_task(status=TaskStatus.DONE)]
        summary = summarize_tasks(tasks)
        assert summary.total == 3
        assert summary.open == 2
        assert summary.done == 1
        assert summary.completion_rate == 33

    def test_empty_list_rate_is_zero(self):
        summary = summarize_tasks([])
        assert summary.total == 0
        assert summary.completion_rate == 0

    def test_half_rate_rounds_up(self, make_task):
        tasks = [make_task(status=TaskStatus.DONE)] + [make_task() for _ in range(7)]
        assert summarize_tasks(tasks).completion_rate == 13


class TestPercentage:
    def test_halves_round_up(self):
        assert percentage(1, 40) == 3
        assert percentage(1, 8) == 13
        assert percentage(5, 8) == 63

    def test_rounds_down_below_half(self):
        assert percentage(1, 3) == 33
        assert percentage(2, 3) == 67

    def test_zero_whole(self):
        assert percentage(0, 0) == 0


class TestDueNext7Days:
    def test_counts_open_tasks_per_day(self, make_task, now):
        sot = start_of_day(now)
        tasks = [
            make_task(due_at=sot + timedelta(hours=18)),
            make_task(due_at=sot + timedelta(days=6, hours=1)),
            make_task(due_at=sot + timedelta(days=7)),
            make_task(due_at=sot + timedelta(hours=2), status=TaskStatus.DONE),
        ]
        result = tasks_due_next_7_days(tasks, now)
        assert len(result) == 7
        assert result[0].date == date(2024, 6, 12)
        assert [d.count for d in result] == [1, 0, 0, 0, 0, 0, 1]


class TestOpenTasksPerDay:
    def test_cumulative_open_tasks_by_creation(self, make_task, now):
        sot = start_of_day(now)
        tasks = [
            make_task(created_at=sot - timedelta(days=2) + timedelta(hours=12)),
            make_task(created_at=sot + timedelta(hours=10)),
            make_task(created_at=sot - timedelta(days=5), status=TaskStatus.DONE),
        ]
        result = open_tasks_per_day(tasks, now, days=3)
        assert [d.date for d in result] == [date(2024, 6, 10), date(2024, 6, 11), date(2024, 6, 12)]
        assert [d.count for d in result] == [1, 1, 2]

    def test_default_window_is_30_days(self, now):
        result = open_tasks_per_day([], now)
        assert len(result) == 30
        assert result[-1].date == now.date()
