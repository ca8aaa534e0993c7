"""CLI 入口模块 -- python -m taskboard.core <command>

支持的命令：
  validate-env      校验必需/可选环境变量（失败时退出码 1）
  checklist-status  打印部署检查清单完成度
  checklist-reset   清空部署检查清单进度
"""

import asyncio
import sys

from .config import get_db_path
from .env import OPTIONAL_ENV_VARS, get_env_error_message, validate_env

_USAGE = """用法: python -m taskboard.core <command>
命令:
  validate-env      校验环境变量
  checklist-status  打印部署检查清单完成度
  checklist-reset   清空部署检查清单进度"""


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        print(_USAGE)
        sys.exit(1)

    command = sys.argv[1]

    if command == "validate-env":
        sys.exit(run_validate_env())
    elif command == "checklist-status":
        asyncio.run(checklist_status())
    elif command == "checklist-reset":
        asyncio.run(checklist_reset())
    else:
        print(f"未知命令: {command}")
        print(_USAGE)
        sys.exit(1)


def run_validate_env() -> int:
    """校验环境变量并打印结果，返回退出码"""
    result = validate_env()

    if not result.valid:
        print("Environment validation failed!", file=sys.stderr)
        print(get_env_error_message(result), file=sys.stderr)
        print("\nOptional variables:")
        if result.optional_missing:
            print(f"- Missing: {', '.join(result.optional_missing)}")
        if result.optional_empty:
            print(f"- Empty: {', '.join(result.optional_empty)}")
        return 1

    print("Environment validation passed!")
    unset = set(result.optional_missing) | set(result.optional_empty)
    set_optional = [key for key in OPTIONAL_ENV_VARS if key not in unset]
    if set_optional:
        print(f"Optional variables set: {', '.join(set_optional)}")
    else:
        print("No optional variables are set.")
    return 0


async def checklist_status() -> None:
    from .checklist import ChecklistEngine
    from .store import create_store_group

    store_group = await create_store_group(get_db_path())
    try:
        engine = ChecklistEngine(store_group.state_store)
        state = await engine.load()
        stats = engine.compute_stats(state)
        print(
            f"完成度: {stats.completed_items}/{stats.total_items} "
            f"({stats.completion_percentage}%)"
        )
        print(
            f"必需项: {stats.completed_critical_items}/{stats.critical_items} "
            f"({stats.critical_completion_percentage}%)"
        )
        if stats.is_ready_for_deployment:
            print("Ready for deployment")
        else:
            print("Not ready for deployment, pending critical items:")
            for item in engine.incomplete_critical_items(state):
                print(f"  - {item.id}: {item.title}")
    finally:
        await store_group.close()


async def checklist_reset() -> None:
    from .checklist import ChecklistEngine
    from .store import create_store_group

    store_group = await create_store_group(get_db_path())
    try:
        await ChecklistEngine(store_group.state_store).reset()
        print("检查清单已重置")
    finally:
        await store_group.close()


if __name__ == "__main__":
    main()
