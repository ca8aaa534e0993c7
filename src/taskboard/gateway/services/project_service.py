"""ProjectService -- 项目仓储

删除项目不会处理引用它的任务：任务保留原 project_id。
"""

import structlog

from ...core.exceptions import FieldValidationError, RecordNotFoundError
from ...core.models import Project, ProjectInput, project_from_record
from ...provider import ServiceClient
from .repository import remote_call

log = structlog.get_logger()

PROJECTS_TABLE = "projects"


def _validated_name(data: ProjectInput) -> str:
    name = data.cleaned_name()
    if not name:
        raise FieldValidationError({"name": "Project name is required"})
    return name


class ProjectService:
    """项目业务服务"""

    def __init__(self, client: ServiceClient, user_id: str) -> None:
        self._client = client
        self._user_id = user_id

    async def list_projects(self) -> list[Project]:
        """当前用户的全部项目，按名称排序"""
        with remote_call("Project", "fetch"):
            rows = await self._client.select(
                PROJECTS_TABLE,
                filters={"user_id": self._user_id},
                order_by="name",
            )
        return [project_from_record(row) for row in rows]

    async def get_project(self, project_id: str, action: str = "access") -> Project:
        with remote_call("Project", "fetch", project_id=project_id):
            row = await self._client.select_one(
                PROJECTS_TABLE,
                filters={"id": project_id, "user_id": self._user_id},
            )
        if row is None:
            raise RecordNotFoundError("Project", project_id, action)
        return project_from_record(row)

    async def create_project(self, data: ProjectInput) -> Project:
        name = _validated_name(data)
        with remote_call("Project", "create"):
            row = await self._client.insert(
                PROJECTS_TABLE,
                {"name": name, "user_id": self._user_id},
            )
        project = project_from_record(row)
        log.info("project_created", project_id=project.id)
        return project

    async def update_project(self, project_id: str, data: ProjectInput) -> Project:
        """重命名项目"""
        name = _validated_name(data)
        await self.get_project(project_id, action="update")
        with remote_call("Project", "update", project_id=project_id):
            rows = await self._client.update(
                PROJECTS_TABLE,
                {"name": name},
                filters={"id": project_id, "user_id": self._user_id},
            )
        if not rows:
            raise RecordNotFoundError("Project", project_id, "update")
        return project_from_record(rows[0])

    async def delete_project(self, project_id: str) -> None:
        await self.get_project(project_id, action="delete")
        with remote_call("Project", "delete", project_id=project_id):
            await self._client.delete(
                PROJECTS_TABLE,
                filters={"id": project_id, "user_id": self._user_id},
            )
        log.info("project_deleted", project_id=project_id)
