"""Taskboard -- 任务/项目管理服务"""

__version__ = "0.1.0"
