"""TaskBoard -- 单会话任务看板状态

持有权威任务列表、过滤条件、已生效的搜索串，按需重新计算视图。
过滤结果与搜索结果分别缓存：修改其中一项不会触发另一项重算。
刷新采用请求序号：晚发出的请求结果一旦生效，更早发出但更晚返回的结果将被丢弃。
"""

from collections.abc import Awaitable, Callable
from datetime import datetime

import structlog

from .config import SEARCH_DEBOUNCE_MS
from .models import Task, TaskFilterCriteria, TaskStatus
from .view import (
    SearchDebouncer,
    apply_filters,
    compose_view,
    count_active_filters,
    search_tasks,
    tasks_by_status,
)

log = structlog.get_logger()

TaskFetcher = Callable[[], Awaitable[list[Task]]]


class TaskBoard:
    """任务看板视图状态"""

    def __init__(
        self,
        tasks: list[Task] | None = None,
        debounce_ms: int = SEARCH_DEBOUNCE_MS,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._clock = clock
        self._tasks: list[Task] = list(tasks or [])
        self._criteria = TaskFilterCriteria()
        self._query = ""
        self._debouncer = SearchDebouncer(self._apply_search, debounce_ms)
        self._issued_seq = 0
        self._applied_seq = 0
        self._filtered: list[Task] = list(self._tasks)
        self._searched: list[Task] = list(self._tasks)

    # --- 输入 ---

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    @property
    def criteria(self) -> TaskFilterCriteria:
        return self._criteria

    @property
    def query(self) -> str:
        """当前已生效的搜索串（防抖中的输入不计入）"""
        return self._query

    def set_tasks(self, tasks: list[Task]) -> None:
        """替换权威任务列表并重算两条管道"""
        self._tasks = list(tasks)
        self._recompute_filters()
        self._searched = search_tasks(self._tasks, self._query)

    def set_criteria(self, criteria: TaskFilterCriteria) -> None:
        self._criteria = criteria
        self._recompute_filters()

    def reset_filters(self) -> None:
        self.set_criteria(TaskFilterCriteria())

    def set_search_query(self, query: str) -> None:
        """输入搜索串，静默期结束后生效"""
        self._debouncer.schedule(query)

    def apply_search_now(self, query: str) -> None:
        self._debouncer.cancel()
        self._apply_search(query)

    def clear_search(self) -> None:
        self.apply_search_now("")

    def flush_search(self) -> None:
        self._debouncer.flush()

    # --- 输出 ---

    @property
    def active_filter_count(self) -> int:
        return count_active_filters(self._criteria)

    @property
    def filtered_tasks(self) -> list[Task]:
        return list(self._filtered)

    @property
    def search_results(self) -> list[Task]:
        return list(self._searched)

    @property
    def final_tasks(self) -> list[Task]:
        return compose_view(self._filtered, self._searched)

    def tasks_by_status(self, status: TaskStatus) -> list[Task]:
        return tasks_by_status(self.final_tasks, status)

    # --- 刷新 ---

    async def refresh(self, fetcher: TaskFetcher) -> bool:
        """重新拉取权威任务列表

        Returns:
            True 表示结果已生效，False 表示结果已过期被丢弃
        """
        self._issued_seq += 1
        seq = self._issued_seq
        tasks = await fetcher()
        if seq < self._applied_seq:
            log.info(
                "stale_refresh_discarded",
                seq=seq,
                applied_seq=self._applied_seq,
            )
            return False
        self._applied_seq = seq
        self.set_tasks(tasks)
        return True

    def _recompute_filters(self) -> None:
        now = self._clock() if self._clock else None
        self._filtered = apply_filters(self._tasks, self._criteria, now)

    def _apply_search(self, query: str) -> None:
        self._query = query
        self._searched = search_tasks(self._tasks, query)
