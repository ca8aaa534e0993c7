"""TaskService -- 任务仓储

所有操作按调用者 user_id 限定范围；更新/删除前先确认归属，
不存在与越权统一返回 RecordNotFoundError。
"""

import structlog

from ...core.exceptions import RecordNotFoundError
from ...core.models import (
    Task,
    TaskCreate,
    TaskStatus,
    TaskUpdate,
    task_create_to_record,
    task_from_record,
    task_update_to_record,
)
from ...provider import ServiceClient
from .repository import remote_call

log = structlog.get_logger()

TASKS_TABLE = "tasks"


class TaskService:
    """任务业务服务"""

    def __init__(self, client: ServiceClient, user_id: str) -> None:
        self._client = client
        self._user_id = user_id

    async def list_tasks(self, project_id: str | None = None) -> list[Task]:
        """当前用户的全部任务，按 created_at 倒序"""
        filters = {"user_id": self._user_id}
        if project_id is not None:
            filters["project_id"] = project_id
        with remote_call("Task", "fetch"):
            rows = await self._client.select(
                TASKS_TABLE,
                filters=filters,
                order_by="created_at",
                descending=True,
            )
        return [task_from_record(row) for row in rows]

    async def get_task(self, task_id: str, action: str = "access") -> Task:
        """
        Raises:
            RecordNotFoundError: 任务不存在或不属于当前用户
        """
        with remote_call("Task", "fetch", task_id=task_id):
            row = await self._client.select_one(
                TASKS_TABLE,
                filters={"id": task_id, "user_id": self._user_id},
            )
        if row is None:
            raise RecordNotFoundError("Task", task_id, action)
        return task_from_record(row)

    async def create_task(self, data: TaskCreate) -> Task:
        """创建任务（状态固定为 open）"""
        with remote_call("Task", "create"):
            row = await self._client.insert(
                TASKS_TABLE,
                task_create_to_record(data, self._user_id),
            )
        task = task_from_record(row)
        log.info("task_created", task_id=task.id, priority=task.priority.value)
        return task

    async def update_task(self, task_id: str, data: TaskUpdate) -> Task:
        """部分更新（只写入显式设置的字段）"""
        current = await self.get_task(task_id, action="update")
        values = task_update_to_record(data)
        if not values:
            return current

        with remote_call("Task", "update", task_id=task_id):
            rows = await self._client.update(
                TASKS_TABLE,
                values,
                filters={"id": task_id, "user_id": self._user_id},
            )
        if not rows:
            raise RecordNotFoundError("Task", task_id, "update")
        task = task_from_record(rows[0])
        log.info("task_updated", task_id=task_id, fields=sorted(values))
        return task

    async def toggle_task_status(self, task_id: str) -> Task:
        """open <-> done"""
        current = await self.get_task(task_id, action="update")
        new_status = TaskStatus.DONE if current.status == TaskStatus.OPEN else TaskStatus.OPEN
        return await self.update_task(task_id, TaskUpdate(status=new_status))

    async def delete_task(self, task_id: str) -> None:
        await self.get_task(task_id, action="delete")
        with remote_call("Task", "delete", task_id=task_id):
            await self._client.delete(
                TASKS_TABLE,
                filters={"id": task_id, "user_id": self._user_id},
            )
        log.info("task_deleted", task_id=task_id)
