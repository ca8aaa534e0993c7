"""任务路由

GET /api/tasks: 看板视图（过滤 + 搜索 + 排序，按状态切分）与统计卡片
POST /api/tasks: 创建任务
GET /api/tasks/{task_id}: 任务详情（含所属项目，项目已删除时为 null）
PATCH /api/tasks/{task_id}: 部分更新
DELETE /api/tasks/{task_id}: 删除
POST /api/tasks/{task_id}/toggle: open <-> done
"""

from datetime import date

from fastapi import APIRouter, Depends, Query
from pydantic import ValidationError
from starlette.responses import JSONResponse

from ...core.exceptions import FieldValidationError, RecordNotFoundError
from ...core.models import SortDirection, SortField, TaskCreate, TaskFilterCriteria, TaskUpdate
from ...core.stats import summarize_tasks
from ...core.view import build_task_view
from ..deps import get_project_service, get_task_service
from ..services.project_service import ProjectService
from ..services.task_service import TaskService

router = APIRouter()


def get_filter_criteria(
    priority: str | None = Query(default=None, description="low / med / high / all"),
    status: str | None = Query(default=None, description="open / done / all"),
    project_id: str | None = Query(default=None, description="项目 ID / all"),
    due: str | None = Query(
        default=None,
        description="any / today / thisWeek / nextWeek / overdue / custom",
    ),
    due_from: date | None = Query(default=None, description="自定义区间起始日"),
    due_to: date | None = Query(default=None, description="自定义区间结束日"),
) -> TaskFilterCriteria:
    try:
        return TaskFilterCriteria(
            priority=priority,
            status=status,
            project_id=project_id,
            due=due,
            due_from=due_from,
            due_to=due_to,
        )
    except ValidationError as e:
        raise FieldValidationError(
            {str(err["loc"][0]): err["msg"] for err in e.errors()}
        ) from e


@router.get("/api/tasks")
async def list_tasks(
    q: str = Query(default="", description="搜索串（名称或描述，大小写不敏感）"),
    sort: SortField = Query(default=SortField.DUE_AT),
    direction: SortDirection = Query(default=SortDirection.ASC),
    criteria: TaskFilterCriteria = Depends(get_filter_criteria),
    service: TaskService = Depends(get_task_service),
):
    """看板：组合视图 + 统计卡片（统计基于全部任务，不受过滤影响）"""
    tasks = await service.list_tasks()
    view = build_task_view(
        tasks,
        criteria,
        query=q,
        sort_field=sort,
        sort_direction=direction,
    )
    return {
        **view.model_dump(mode="json"),
        "summary": summarize_tasks(tasks).model_dump(mode="json"),
    }


@router.post("/api/tasks", status_code=201)
async def create_task(
    body: TaskCreate,
    service: TaskService = Depends(get_task_service),
):
    task = await service.create_task(body)
    return {"task": task.model_dump(mode="json")}


@router.get("/api/tasks/{task_id}")
async def get_task_detail(
    task_id: str,
    service: TaskService = Depends(get_task_service),
    projects: ProjectService = Depends(get_project_service),
):
    task = await service.get_task(task_id)
    project = None
    if task.project_id:
        try:
            project = await projects.get_project(task.project_id)
        except RecordNotFoundError:
            # 项目已删除，任务保留原引用
            project = None
    return {
        "task": task.model_dump(mode="json"),
        "project": project.model_dump(mode="json") if project else None,
    }


@router.patch("/api/tasks/{task_id}")
async def update_task(
    task_id: str,
    body: TaskUpdate,
    service: TaskService = Depends(get_task_service),
):
    task = await service.update_task(task_id, body)
    return {"task": task.model_dump(mode="json")}


@router.post("/api/tasks/{task_id}/toggle")
async def toggle_task(
    task_id: str,
    service: TaskService = Depends(get_task_service),
):
    task = await service.toggle_task_status(task_id)
    return {"task": task.model_dump(mode="json")}


@router.delete("/api/tasks/{task_id}")
async def delete_task(
    task_id: str,
    service: TaskService = Depends(get_task_service),
):
    await service.delete_task(task_id)
    return JSONResponse(status_code=200, content={"task_id": task_id, "deleted": True})
