"""TaskBoard 单元测试

测试内容：
1. 过滤 / 搜索两条管道独立缓存，最终视图取交集
2. 搜索防抖：静默期结束后才生效
3. 刷新请求序号：晚返回的旧请求结果被丢弃
"""

import asyncio
from datetime import timedelta

from taskboard.core.board import TaskBoard
from taskboard.core.models import TaskFilterCriteria, TaskPriority, TaskStatus


class TestTaskBoardView:
    """视图计算"""

    def test_initial_view_is_all_tasks(self, make_task, now):
        tasks = [make_task(), make_task(status=TaskStatus.DONE)]
        board = TaskBoard(tasks, clock=lambda: now)
        assert board.final_tasks == tasks
        assert board.active_filter_count == 0

    def test_filter_and_search_intersect(self, make_task, now):
        report = make_task(name="Report", priority=TaskPriority.HIGH)
        review = make_task(name="Review", priority=TaskPriority.HIGH)
        memo = make_task(name="Report memo", priority=TaskPriority.LOW)
        board = TaskBoard([report, review, memo], clock=lambda: now)

        board.set_criteria(TaskFilterCriteria(priority="high"))
        board.apply_search_now("report")

        assert board.filtered_tasks == [report, review]
        assert board.search_results == [report, memo]
        assert board.final_tasks == [report]
        assert board.active_filter_count == 1

    def test_changing_criteria_keeps_search_results(self, make_task, now):
        a = make_task(name="alpha")
        b = make_task(name="beta", status=TaskStatus.DONE)
        board = TaskBoard([a, b], clock=lambda: now)
        board.apply_search_now("a")
        searched = board.search_results

        board.set_criteria(TaskFilterCriteria(status="done"))
        assert board.search_results == searched
        assert board.final_tasks == [b]

    def test_reset_filters(self, make_task, now):
        board = TaskBoard([make_task(due_at=now - timedelta(days=3))], clock=lambda: now)
        board.set_criteria(TaskFilterCriteria(due="today"))
        assert board.final_tasks == []
        board.reset_filters()
        assert len(board.final_tasks) == 1

    def test_tasks_by_status(self, make_task, now):
        open_task = make_task()
        done_task = make_task(status=TaskStatus.DONE)
        board = TaskBoard([open_task, done_task], clock=lambda: now)
        assert board.tasks_by_status(TaskStatus.OPEN) == [open_task]
        assert board.tasks_by_status(TaskStatus.DONE) == [done_task]


class TestTaskBoardSearchDebounce:
    """搜索防抖"""

    async def test_query_applies_after_quiet_period(self, make_task):
        board = TaskBoard([make_task(name="report"), make_task(name="other")], debounce_ms=20)
        board.set_search_query("rep")
        assert board.query == ""
        assert len(board.final_tasks) == 2

        await asyncio.sleep(0.08)
        assert board.query == "rep"
        assert [t.name for t in board.final_tasks] == ["report"]

    async def test_flush_search(self, make_task):
        board = TaskBoard([make_task(name="report")], debounce_ms=10_000)
        board.set_search_query("zzz")
        board.flush_search()
        assert board.final_tasks == []

    async def test_clear_search_cancels_pending(self, make_task):
        board = TaskBoard([make_task(name="report")], debounce_ms=20)
        board.set_search_query("zzz")
        board.clear_search()
        await asyncio.sleep(0.05)
        assert board.query == ""
        assert len(board.final_tasks) == 1


class TestTaskBoardRefresh:
    """刷新请求序号"""

    async def test_refresh_replaces_tasks(self, make_task):
        board = TaskBoard()
        fresh = [make_task(name="fresh")]

        async def fetch():
            return fresh

        assert await board.refresh(fetch) is True
        assert board.tasks == fresh

    async def test_stale_refresh_discarded(self, make_task):
        """先发出、后返回的请求结果不覆盖较新的结果"""
        board = TaskBoard()
        gate = asyncio.Event()
        old = [make_task(name="old")]
        new = [make_task(name="new")]

        async def slow_fetch():
            await gate.wait()
            return old

        async def fast_fetch():
            return new

        slow = asyncio.create_task(board.refresh(slow_fetch))
        await asyncio.sleep(0)
        assert await board.refresh(fast_fetch) is True

        gate.set()
        assert await slow is False
        assert board.tasks == new
