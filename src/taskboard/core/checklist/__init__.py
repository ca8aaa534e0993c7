"""Taskboard Core Checklist -- 部署检查清单"""

from .catalog import (
    CHECKLIST_CATEGORIES,
    DEPLOYMENT_CHECKLIST,
    check_required_env_vars,
    get_categories_with_items,
    get_checklist_item,
    get_items_by_category,
)
from .engine import ChecklistEngine

__all__ = [
    "CHECKLIST_CATEGORIES",
    "DEPLOYMENT_CHECKLIST",
    "ChecklistEngine",
    "check_required_env_vars",
    "get_categories_with_items",
    "get_checklist_item",
    "get_items_by_category",
]
