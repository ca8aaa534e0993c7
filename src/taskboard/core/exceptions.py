"""领域异常体系

配置错误、认证错误、记录不存在（含越权）、远程调用失败、字段校验失败。
越权访问与记录不存在刻意使用同一异常，避免泄露记录是否存在。
"""


class TaskboardError(Exception):
    """Taskboard 基础异常"""


class ConfigurationError(TaskboardError):
    """必需配置缺失或为空，启动即致命，不重试"""


class NotAuthenticatedError(TaskboardError):
    """会话缺失或已失效，需要重新登录"""

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)


class RecordNotFoundError(TaskboardError):
    """记录不存在，或存在但不属于当前调用者"""

    def __init__(self, entity: str, record_id: str, action: str = "access") -> None:
        """
        Args:
            entity: 实体名（Task / Project）
            record_id: 记录 ID
            action: 尝试的操作（access / update / delete）
        """
        super().__init__(
            f"{entity} not found or you don't have permission to {action} it"
        )
        self.entity = entity
        self.record_id = record_id
        self.action = action


class RepositoryError(TaskboardError):
    """远程数据服务调用失败（已记录日志，不自动重试）"""


class RecordMappingError(TaskboardError):
    """远程记录缺少必填字段或字段值非法"""

    def __init__(self, entity: str, field: str, reason: str = "missing") -> None:
        super().__init__(f"{entity} record field '{field}' is {reason}")
        self.entity = entity
        self.field = field


class FieldValidationError(TaskboardError):
    """字段级校验失败，在发起任何远程调用之前抛出"""

    def __init__(self, errors: dict[str, str]) -> None:
        """
        Args:
            errors: 字段名 -> 错误描述
        """
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = errors


class ChecklistItemNotFoundError(TaskboardError):
    """检查项 ID 不在检查清单目录中"""

    def __init__(self, item_id: str) -> None:
        super().__init__(f"Checklist item {item_id} does not exist")
        self.item_id = item_id
