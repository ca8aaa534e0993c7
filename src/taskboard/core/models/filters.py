"""任务过滤条件模型

每个条件独立配置，None / ANY 表示"不限"。
查询参数中的 "all" / "any" 在此统一转换为 None。
"""

from datetime import date
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .enums import DueDateRange, TaskPriority, TaskStatus

_ANY_VALUES = {"", "all", "any"}


def _normalize_any(value: Any) -> Any:
    if isinstance(value, str) and value.strip().lower() in _ANY_VALUES:
        return None
    return value


class TaskFilterCriteria(BaseModel):
    """任务过滤条件"""

    priority: TaskPriority | None = Field(default=None, description="优先级，None 为不限")
    status: TaskStatus | None = Field(default=None, description="状态，None 为不限")
    project_id: str | None = Field(default=None, description="项目 ID，None 为不限")
    due: DueDateRange = Field(default=DueDateRange.ANY, description="截止日期桶")
    due_from: date | None = Field(default=None, description="自定义区间起始日（含）")
    due_to: date | None = Field(default=None, description="自定义区间结束日（含）")

    @field_validator("priority", "status", "project_id", mode="before")
    @classmethod
    def _any_to_none(cls, value: Any) -> Any:
        return _normalize_any(value)

    @field_validator("due", mode="before")
    @classmethod
    def _any_due(cls, value: Any) -> Any:
        if _normalize_any(value) is None:
            return DueDateRange.ANY
        return value
