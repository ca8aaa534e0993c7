"""配置常量模块 -- 可通过环境变量覆盖

包含本地状态数据库路径、远程服务超时、搜索防抖、表单校验阈值等可配置常量。
"""

import os
from pathlib import Path


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("TASKBOARD_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取本地状态 SQLite 数据库路径"""
    return os.environ.get(
        "TASKBOARD_DB_PATH",
        str(_get_base_dir() / "sqlite" / "taskboard.db"),
    )


def get_site_url() -> str:
    """获取站点对外 URL（密码重置邮件回跳地址的前缀）"""
    return os.environ.get("TASKBOARD_SITE_URL", "http://localhost:8000").rstrip("/")


# 搜索防抖时长（毫秒）
SEARCH_DEBOUNCE_MS: int = int(os.environ.get("TASKBOARD_SEARCH_DEBOUNCE_MS", "300"))

# 部署检查清单在本地存储中的固定 key
CHECKLIST_STORAGE_KEY: str = "deployment-checklist-state"

# 会话 cookie 名称
ACCESS_TOKEN_COOKIE: str = "sb-access-token"
REFRESH_TOKEN_COOKIE: str = "sb-refresh-token"

# 表单校验阈值
PASSWORD_MIN_LENGTH: int = 6
TASK_NAME_MIN_LENGTH: int = 2
TASK_DESCRIPTION_MIN_LENGTH: int = 5

# 统计页窗口（天）
STATS_UPCOMING_DAYS: int = 7
STATS_HISTORY_DAYS: int = 30
