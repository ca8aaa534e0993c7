"""项目路由

GET/POST /api/projects
GET/PATCH/DELETE /api/projects/{project_id}
"""

from fastapi import APIRouter, Depends

from ...core.models import ProjectInput
from ..deps import get_project_service, get_task_service
from ..services.project_service import ProjectService
from ..services.task_service import TaskService

router = APIRouter()


@router.get("/api/projects")
async def list_projects(service: ProjectService = Depends(get_project_service)):
    projects = await service.list_projects()
    return {"projects": [p.model_dump(mode="json") for p in projects]}


@router.post("/api/projects", status_code=201)
async def create_project(
    body: ProjectInput,
    service: ProjectService = Depends(get_project_service),
):
    project = await service.create_project(body)
    return {"project": project.model_dump(mode="json")}


@router.get("/api/projects/{project_id}")
async def get_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
    tasks: TaskService = Depends(get_task_service),
):
    """项目详情 + 项目下的任务"""
    project = await service.get_project(project_id)
    project_tasks = await tasks.list_tasks(project_id=project_id)
    return {
        "project": project.model_dump(mode="json"),
        "tasks": [t.model_dump(mode="json") for t in project_tasks],
    }


@router.patch("/api/projects/{project_id}")
async def rename_project(
    project_id: str,
    body: ProjectInput,
    service: ProjectService = Depends(get_project_service),
):
    project = await service.update_project(project_id, body)
    return {"project": project.model_dump(mode="json")}


@router.delete("/api/projects/{project_id}")
async def delete_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
):
    await service.delete_project(project_id)
    return {"project_id": project_id, "deleted": True}
