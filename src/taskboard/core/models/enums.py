"""枚举定义

包含 TaskStatus、TaskPriority、DueDateRange 过滤桶、排序字段、
检查清单分类 ChecklistCategory、会话事件 SessionEvent。
"""

from enum import StrEnum


class TaskStatus(StrEnum):
    """任务状态"""

    OPEN = "open"
    DONE = "done"


class TaskPriority(StrEnum):
    """任务优先级"""

    LOW = "low"
    MED = "med"
    HIGH = "high"


# 优先级排序权重：low < med < high
PRIORITY_RANK: dict[TaskPriority, int] = {
    TaskPriority.LOW: 1,
    TaskPriority.MED: 2,
    TaskPriority.HIGH: 3,
}


class DueDateRange(StrEnum):
    """截止日期过滤桶（相对本地时间当天零点计算）"""

    ANY = "any"
    TODAY = "today"
    THIS_WEEK = "thisWeek"
    NEXT_WEEK = "nextWeek"
    OVERDUE = "overdue"
    CUSTOM = "custom"


class SortField(StrEnum):
    """任务表排序字段"""

    DUE_AT = "dueAt"
    PRIORITY = "priority"


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"


class ChecklistCategory(StrEnum):
    """部署检查清单分类（固定 10 类）"""

    ENVIRONMENT = "environment"
    DATABASE = "database"
    AUTHENTICATION = "authentication"
    PERFORMANCE = "performance"
    TESTING = "testing"
    ACCESSIBILITY = "accessibility"
    SEO = "seo"
    MONITORING = "monitoring"
    SECURITY = "security"
    DOCUMENTATION = "documentation"


class SessionEvent(StrEnum):
    """认证服务会话变更事件"""

    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"
    PASSWORD_RECOVERY = "PASSWORD_RECOVERY"
