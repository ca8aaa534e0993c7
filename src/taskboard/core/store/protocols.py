"""Store Protocol 接口定义

本地状态存储为字符串键值对，值由调用方自行序列化。
"""

from typing import Protocol


class StateStore(Protocol):
    """本地状态存储接口"""

    async def get(self, key: str) -> str | None:
        """读取键值，不存在时返回 None"""
        ...

    async def set(self, key: str, value: str) -> None:
        """写入（覆盖）键值"""
        ...

    async def delete(self, key: str) -> None:
        """删除键值（不存在时无操作）"""
        ...
