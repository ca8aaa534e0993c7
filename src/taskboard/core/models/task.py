"""Task / Project 领域模型 + 远程记录映射

远程数据服务使用 snake_case 列名（due_at / project_id / user_id），
映射函数逐字段显式转换，必填字段缺失时抛出 RecordMappingError，不做静默默认。
"""

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, Field

from ..config import TASK_DESCRIPTION_MIN_LENGTH, TASK_NAME_MIN_LENGTH
from ..exceptions import RecordMappingError
from .enums import TaskPriority, TaskStatus


def _as_local(value: datetime) -> datetime:
    return value.astimezone() if value.tzinfo is None else value


# 不带时区的输入按本地时区解释，模型内的时间一律带时区
LocalDatetime = Annotated[datetime, AfterValidator(_as_local)]


class Task(BaseModel):
    """Task 数据模型

    created_at 与 user_id 创建后不可变；删除为物理删除。
    """

    id: str = Field(description="唯一标识（不透明字符串）")
    name: str = Field(min_length=1, description="任务名称")
    description: str = Field(default="", description="任务描述，可为空")
    created_at: LocalDatetime = Field(description="创建时间")
    due_at: LocalDatetime = Field(description="截止时间")
    status: TaskStatus = Field(default=TaskStatus.OPEN, description="任务状态")
    priority: TaskPriority = Field(description="优先级")
    project_id: str | None = Field(default=None, description="所属项目，可为空")
    user_id: str = Field(description="所有者 ID，用于访问隔离")


class Project(BaseModel):
    """Project 数据模型"""

    id: str
    name: str = Field(min_length=1)
    created_at: datetime
    user_id: str


class TaskCreate(BaseModel):
    """创建任务的输入（名称/描述/截止时间/优先级必填）"""

    name: str = Field(min_length=TASK_NAME_MIN_LENGTH, description="任务名称")
    description: str = Field(
        min_length=TASK_DESCRIPTION_MIN_LENGTH,
        description="任务描述",
    )
    due_at: LocalDatetime = Field(description="截止时间")
    priority: TaskPriority = Field(description="优先级")
    project_id: str | None = Field(default=None, description="所属项目")


class TaskUpdate(BaseModel):
    """部分字段更新；未设置的字段不会写入远程记录"""

    name: str | None = Field(default=None, min_length=TASK_NAME_MIN_LENGTH)
    description: str | None = Field(default=None)
    due_at: LocalDatetime | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    project_id: str | None = None


class ProjectInput(BaseModel):
    """创建/重命名项目的输入"""

    name: str = Field(description="项目名称")

    def cleaned_name(self) -> str:
        return self.name.strip()


_TASK_REQUIRED = ("id", "name", "created_at", "due_at", "status", "priority", "user_id")
_PROJECT_REQUIRED = ("id", "name", "created_at", "user_id")


def _parse_timestamp(entity: str, field: str, value: Any) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value))
        except ValueError as e:
            raise RecordMappingError(entity, field, "not a timestamp") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _require(entity: str, record: Mapping[str, Any], fields: tuple[str, ...]) -> None:
    for field in fields:
        if record.get(field) is None:
            raise RecordMappingError(entity, field)


def task_from_record(record: Mapping[str, Any]) -> Task:
    """将远程 tasks 表记录转换为 Task

    Raises:
        RecordMappingError: 必填字段缺失或枚举值非法
    """
    _require("Task", record, _TASK_REQUIRED)
    try:
        status = TaskStatus(record["status"])
    except ValueError as e:
        raise RecordMappingError("Task", "status", "invalid") from e
    try:
        priority = TaskPriority(record["priority"])
    except ValueError as e:
        raise RecordMappingError("Task", "priority", "invalid") from e

    return Task(
        id=str(record["id"]),
        name=record["name"],
        description=record.get("description") or "",
        created_at=_parse_timestamp("Task", "created_at", record["created_at"]),
        due_at=_parse_timestamp("Task", "due_at", record["due_at"]),
        status=status,
        priority=priority,
        project_id=record.get("project_id"),
        user_id=str(record["user_id"]),
    )


def project_from_record(record: Mapping[str, Any]) -> Project:
    """将远程 projects 表记录转换为 Project"""
    _require("Project", record, _PROJECT_REQUIRED)
    return Project(
        id=str(record["id"]),
        name=record["name"],
        created_at=_parse_timestamp("Project", "created_at", record["created_at"]),
        user_id=str(record["user_id"]),
    )


def task_create_to_record(data: TaskCreate, user_id: str) -> dict[str, Any]:
    """构造插入记录：新任务状态固定为 open"""
    return {
        "name": data.name,
        "description": data.description,
        "due_at": data.due_at.isoformat(),
        "status": TaskStatus.OPEN.value,
        "priority": data.priority.value,
        "project_id": data.project_id or None,
        "user_id": user_id,
    }


def task_update_to_record(data: TaskUpdate) -> dict[str, Any]:
    """仅包含调用方显式设置的字段（project_id=None 表示解除项目关联）"""
    record: dict[str, Any] = {}
    fields = data.model_fields_set
    if "name" in fields and data.name is not None:
        record["name"] = data.name
    if "description" in fields and data.description is not None:
        record["description"] = data.description
    if "due_at" in fields and data.due_at is not None:
        record["due_at"] = data.due_at.isoformat()
    if "status" in fields and data.status is not None:
        record["status"] = data.status.value
    if "priority" in fields and data.priority is not None:
        record["priority"] = data.priority.value
    if "project_id" in fields:
        record["project_id"] = data.project_id or None
    return record
