"""统计页路由

GET /api/stats: 统计卡片 + 未来 7 天到期分布 + 过去 30 天 open 任务曲线
"""

from fastapi import APIRouter, Depends

from ...core.stats import open_tasks_per_day, summarize_tasks, tasks_due_next_7_days
from ..deps import get_task_service
from ..services.task_service import TaskService

router = APIRouter()


@router.get("/api/stats")
async def get_stats(service: TaskService = Depends(get_task_service)):
    tasks = await service.list_tasks()
    return {
        "summary": summarize_tasks(tasks).model_dump(mode="json"),
        "due_next_7_days": [d.model_dump(mode="json") for d in tasks_due_next_7_days(tasks)],
        "open_tasks_per_day": [d.model_dump(mode="json") for d in open_tasks_per_day(tasks)],
    }
