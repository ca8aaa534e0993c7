"""SQLite 数据库初始化 -- 本地键值状态表

PRAGMA 配置 + local_state 表 DDL。
使用 aiosqlite 异步操作。
"""

import aiosqlite

# local_state 表 DDL（值为 JSON 文本，读写均以整串替换）
_LOCAL_STATE_DDL = """
CREATE TABLE IF NOT EXISTS local_state (
    key         TEXT PRIMARY KEY,
    value       TEXT NOT NULL,
    updated_at  TEXT NOT NULL
);
"""


async def init_db(conn: aiosqlite.Connection) -> None:
    """初始化数据库：设置 PRAGMA + 创建表

    Args:
        conn: aiosqlite 数据库连接
    """
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute("PRAGMA busy_timeout = 5000;")

    await conn.execute(_LOCAL_STATE_DDL)
    await conn.commit()


async def verify_wal_mode(conn: aiosqlite.Connection) -> bool:
    """验证 WAL 模式是否生效（内存数据库恒为 memory 模式）"""
    cursor = await conn.execute("PRAGMA journal_mode;")
    row = await cursor.fetchone()
    return row is not None and row[0].lower() == "wal"
