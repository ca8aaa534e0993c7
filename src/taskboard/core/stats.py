"""任务统计 -- 看板卡片 + 统计页曲线

所有统计都在已拉取的任务列表上计算，日期按本地时区切分。
"""

from collections.abc import Iterable
from datetime import date, datetime, timedelta

from pydantic import BaseModel

from .config import STATS_HISTORY_DAYS, STATS_UPCOMING_DAYS
from .models import Task, TaskStatus
from .view import local_now, start_of_day


class TaskSummary(BaseModel):
    """看板统计卡片"""

    total: int
    open: int
    done: int
    completion_rate: int


class DailyCount(BaseModel):
    """按日计数"""

    date: date
    count: int


def percentage(part: int, whole: int) -> int:
    """整数百分比，.5 向上取整；whole 为 0 时返回 0"""
    return int(part * 100 / whole + 0.5) if whole else 0


def summarize_tasks(tasks: Iterable[Task]) -> TaskSummary:
    """总数 / 未完成 / 已完成 / 完成率（.5 向上取整，空列表为 0）"""
    items = list(tasks)
    total = len(items)
    done = sum(1 for t in items if t.status == TaskStatus.DONE)
    return TaskSummary(
        total=total,
        open=total - done,
        done=done,
        completion_rate=percentage(done, total),
    )


def _reference(now: datetime | None) -> datetime:
    reference = now or local_now()
    return reference if reference.tzinfo else reference.astimezone()


def tasks_due_next_7_days(
    tasks: Iterable[Task],
    now: datetime | None = None,
    days: int = STATS_UPCOMING_DAYS,
) -> list[DailyCount]:
    """未来 N 天（含今天）每天到期的 open 任务数"""
    today = start_of_day(_reference(now))
    open_tasks = [t for t in tasks if t.status == TaskStatus.OPEN]
    result: list[DailyCount] = []
    for offset in range(days):
        day_start = today + timedelta(days=offset)
        day_end = day_start + timedelta(days=1)
        count = sum(1 for t in open_tasks if day_start <= t.due_at < day_end)
        result.append(DailyCount(date=day_start.date(), count=count))
    return result


def open_tasks_per_day(
    tasks: Iterable[Task],
    now: datetime | None = None,
    days: int = STATS_HISTORY_DAYS,
) -> list[DailyCount]:
    """过去 N 天（含今天）每天结束时已创建的 open 任务数，按日期升序"""
    today = start_of_day(_reference(now))
    open_tasks = [t for t in tasks if t.status == TaskStatus.OPEN]
    result: list[DailyCount] = []
    for offset in range(days - 1, -1, -1):
        day_start = today - timedelta(days=offset)
        day_end = day_start + timedelta(days=1)
        count = sum(1 for t in open_tasks if t.created_at < day_end)
        result.append(DailyCount(date=day_start.date(), count=count))
    return result
