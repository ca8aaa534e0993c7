"""Taskboard Core Store -- 本地状态持久化

提供工厂函数创建共享数据库连接的 Store 实例组。
"""

from pathlib import Path

import aiosqlite

from .protocols import StateStore
from .sqlite_init import init_db, verify_wal_mode
from .state_store import MemoryStateStore, SqliteStateStore


class StoreGroup:
    """Store 实例组 -- 共享同一个数据库连接"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self.conn = conn
        self.state_store = SqliteStateStore(conn)

    async def close(self) -> None:
        await self.conn.close()


async def create_store_group(db_path: str) -> StoreGroup:
    """创建 Store 实例组

    Args:
        db_path: SQLite 数据库文件路径（":memory:" 表示内存库）

    Returns:
        StoreGroup 实例
    """
    if db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    await init_db(conn)
    return StoreGroup(conn=conn)


__all__ = [
    "StateStore",
    "StoreGroup",
    "create_store_group",
    "SqliteStateStore",
    "MemoryStateStore",
    "init_db",
    "verify_wal_mode",
]
