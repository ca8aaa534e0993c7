"""部署检查清单模型

ChecklistItem 为静态目录项（运行期不可变），ChecklistState 为持久化的完成度映射。
持久化格式: {"items": {<item_id>: bool, ...}, "lastUpdated": <ISO 时间戳>}
"""

from collections.abc import Awaitable, Callable
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .enums import ChecklistCategory

AutomatedCheck = Callable[[], bool | Awaitable[bool]]


class ChecklistCategoryInfo(BaseModel):
    """分类展示信息"""

    id: ChecklistCategory
    name: str
    description: str
    icon: str


class ChecklistItem(BaseModel):
    """检查项（静态目录项）"""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="检查项 ID")
    title: str
    description: str
    category: ChecklistCategory
    critical: bool = Field(default=False, description="是否为部署必需项")
    automated_check: AutomatedCheck | None = Field(
        default=None,
        exclude=True,
        description="自动检查函数，可同步或异步返回 bool",
    )

    @property
    def automated(self) -> bool:
        return self.automated_check is not None


class ChecklistState(BaseModel):
    """检查清单完成状态"""

    model_config = ConfigDict(populate_by_name=True)

    items: dict[str, bool] = Field(default_factory=dict, description="item_id -> 是否完成")
    last_updated: datetime = Field(alias="lastUpdated", description="最后更新时间")


class CompletionStats(BaseModel):
    """完成度统计"""

    total_items: int
    completed_items: int
    completion_percentage: int
    critical_items: int
    completed_critical_items: int
    critical_completion_percentage: int
    is_ready_for_deployment: bool


class CheckResult(BaseModel):
    """单个自动检查的执行结果"""

    item_id: str
    passed: bool
    error: str | None = None
