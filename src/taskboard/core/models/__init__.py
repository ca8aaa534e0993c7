"""Taskboard Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .checklist import (
    AutomatedCheck,
    ChecklistCategoryInfo,
    ChecklistItem,
    ChecklistState,
    CheckResult,
    CompletionStats,
)
from .enums import (
    PRIORITY_RANK,
    ChecklistCategory,
    DueDateRange,
    SessionEvent,
    SortDirection,
    SortField,
    TaskPriority,
    TaskStatus,
)
from .filters import TaskFilterCriteria
from .task import (
    Project,
    ProjectInput,
    Task,
    TaskCreate,
    TaskUpdate,
    project_from_record,
    task_create_to_record,
    task_from_record,
    task_update_to_record,
)

__all__ = [
    # 枚举
    "TaskStatus",
    "TaskPriority",
    "PRIORITY_RANK",
    "DueDateRange",
    "SortField",
    "SortDirection",
    "ChecklistCategory",
    "SessionEvent",
    # Task / Project
    "Task",
    "Project",
    "TaskCreate",
    "TaskUpdate",
    "ProjectInput",
    "task_from_record",
    "project_from_record",
    "task_create_to_record",
    "task_update_to_record",
    # 过滤
    "TaskFilterCriteria",
    # 检查清单
    "AutomatedCheck",
    "ChecklistCategoryInfo",
    "ChecklistItem",
    "ChecklistState",
    "CompletionStats",
    "CheckResult",
]
