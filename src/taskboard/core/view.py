"""任务视图组合 -- 过滤 + 搜索 + 交集

两条管道都以同一份权威任务列表为输入、彼此独立计算：
1. 过滤：优先级 / 状态 / 项目为精确匹配，截止日期桶相对本地时间当天零点计算
2. 搜索：名称或描述的大小写不敏感子串匹配
最终视图为两者按 ID 取交集（保持过滤结果的顺序），再按状态切分 open / done。
"""

import asyncio
from collections.abc import Callable, Iterable
from datetime import date, datetime, timedelta

from pydantic import BaseModel, Field

from .config import SEARCH_DEBOUNCE_MS
from .models import (
    PRIORITY_RANK,
    DueDateRange,
    SortDirection,
    SortField,
    Task,
    TaskFilterCriteria,
    TaskStatus,
)


class TaskView(BaseModel):
    """组合后的任务视图"""

    open: list[Task] = Field(default_factory=list)
    done: list[Task] = Field(default_factory=list)
    active_filter_count: int = 0


def local_now() -> datetime:
    """带本地时区信息的当前时间"""
    return datetime.now().astimezone()


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def _local_date(moment: datetime, reference: datetime) -> date:
    if moment.tzinfo is not None and reference.tzinfo is not None:
        moment = moment.astimezone(reference.tzinfo)
    return moment.date()


def _custom_range_active(criteria: TaskFilterCriteria) -> bool:
    return criteria.due_from is not None or criteria.due_to is not None


def _matches_due(task: Task, criteria: TaskFilterCriteria, now: datetime) -> bool:
    today = start_of_day(now)
    due = task.due_at

    match criteria.due:
        case DueDateRange.ANY:
            return True
        case DueDateRange.TODAY:
            return today <= due < today + timedelta(days=1)
        case DueDateRange.THIS_WEEK:
            return today <= due <= today + timedelta(days=7)
        case DueDateRange.NEXT_WEEK:
            return today + timedelta(days=7) <= due <= today + timedelta(days=14)
        case DueDateRange.OVERDUE:
            return task.status == TaskStatus.OPEN and due < today
        case DueDateRange.CUSTOM:
            # 仅设置一端时为单侧开区间；两端均未设置时不过滤
            due_day = _local_date(due, now)
            if criteria.due_from is not None and due_day < criteria.due_from:
                return False
            if criteria.due_to is not None and due_day > criteria.due_to:
                return False
            return True
    return True


def apply_filters(
    tasks: Iterable[Task],
    criteria: TaskFilterCriteria,
    now: datetime | None = None,
) -> list[Task]:
    """过滤管道：对每个非"不限"的条件依次保留匹配项

    Args:
        tasks: 权威任务列表
        criteria: 过滤条件
        now: 参考时间（默认本地当前时间）

    Returns:
        过滤后的任务列表（保持输入顺序）；条件互相矛盾时返回空列表
    """
    reference = now or local_now()
    if reference.tzinfo is None:
        reference = reference.astimezone()
    result = list(tasks)

    if criteria.priority is not None:
        result = [t for t in result if t.priority == criteria.priority]
    if criteria.status is not None:
        result = [t for t in result if t.status == criteria.status]
    if criteria.project_id is not None:
        result = [t for t in result if t.project_id == criteria.project_id]
    if criteria.due != DueDateRange.ANY:
        result = [t for t in result if _matches_due(t, criteria, reference)]

    return result


def count_active_filters(criteria: TaskFilterCriteria) -> int:
    """当前生效的过滤条件数量（自定义区间未设置任何端点时不计）"""
    count = sum(
        value is not None
        for value in (criteria.priority, criteria.status, criteria.project_id)
    )
    if criteria.due == DueDateRange.CUSTOM:
        count += int(_custom_range_active(criteria))
    elif criteria.due != DueDateRange.ANY:
        count += 1
    return count


def search_tasks(tasks: Iterable[Task], query: str) -> list[Task]:
    """搜索管道：名称或描述包含查询串（大小写不敏感），空查询返回全部"""
    normalized = query.strip().lower()
    if not normalized:
        return list(tasks)
    return [
        t
        for t in tasks
        if normalized in t.name.lower() or normalized in (t.description or "").lower()
    ]


def compose_view(filtered: Iterable[Task], searched: Iterable[Task]) -> list[Task]:
    """按 ID 取过滤结果与搜索结果的交集，保持过滤结果顺序"""
    searched_ids = {t.id for t in searched}
    return [t for t in filtered if t.id in searched_ids]


def tasks_by_status(tasks: Iterable[Task], status: TaskStatus) -> list[Task]:
    """最终状态切分，与过滤条件中的 status 无关"""
    return [t for t in tasks if t.status == status]


def _due_key(task: Task) -> datetime:
    return task.due_at


def _priority_key(task: Task) -> int:
    return PRIORITY_RANK[task.priority]


def sort_tasks(
    tasks: Iterable[Task],
    field: SortField = SortField.DUE_AT,
    direction: SortDirection = SortDirection.ASC,
) -> list[Task]:
    """按截止时间或优先级排序（稳定排序）"""
    key = _priority_key if field == SortField.PRIORITY else _due_key
    return sorted(tasks, key=key, reverse=direction == SortDirection.DESC)


def build_task_view(
    tasks: list[Task],
    criteria: TaskFilterCriteria,
    query: str = "",
    now: datetime | None = None,
    sort_field: SortField = SortField.DUE_AT,
    sort_direction: SortDirection = SortDirection.ASC,
) -> TaskView:
    """一次性计算完整视图（过滤、搜索、交集、排序、状态切分）"""
    composed = compose_view(apply_filters(tasks, criteria, now), search_tasks(tasks, query))
    ordered = sort_tasks(composed, sort_field, sort_direction)
    return TaskView(
        open=tasks_by_status(ordered, TaskStatus.OPEN),
        done=tasks_by_status(ordered, TaskStatus.DONE),
        active_filter_count=count_active_filters(criteria),
    )


class SearchDebouncer:
    """搜索防抖器

    每次 schedule() 都会取消尚未触发的调度并重新计时，
    静默期结束后以最后一次的查询串调用回调。
    """

    def __init__(
        self,
        callback: Callable[[str], None],
        delay_ms: int = SEARCH_DEBOUNCE_MS,
    ) -> None:
        self._callback = callback
        self._delay_s = delay_ms / 1000
        self._handle: asyncio.TimerHandle | None = None
        self._pending_query: str | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, query: str) -> None:
        """重新调度（需在运行中的事件循环内调用）"""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._pending_query = query
        self._handle = loop.call_later(self._delay_s, self._fire)

    def flush(self) -> None:
        """立即触发尚未执行的调度"""
        if self._handle is None:
            return
        self._handle.cancel()
        self._fire()

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._pending_query = None

    def _fire(self) -> None:
        query = self._pending_query or ""
        self._handle = None
        self._pending_query = None
        self._callback(query)
