"""字符串命令"""

from typing import Optional, Union

from .base import CommandsBase

Number = Union[int, float]


class StringCommands(CommandsBase):
    """字符串操作

    使用示例:
        client.set("user:1:name", "alice", ex=3600)
        client.get("user:1:name")   # -> "alice"
        client.incr("page:views")   # -> 1
    """

    def get(self, key: str) -> Optional[str]:
        with self._pool.connection() as conn:
            return conn.get(key)

    def set(
        self,
        key: str,
        value,
        ex: Optional[int] = None,
        px: Optional[int] = None,
        nx: bool = False,
        xx: bool = False,
    ) -> bool:
        """设置字符串值

        Args:
            key: 键
            value: 值
            ex: 过期时间（秒）
            px: 过期时间（毫秒）
            nx: 仅在键不存在时设置
            xx: 仅在键存在时设置

        Returns:
            是否写入；nx/xx 条件不满足时为 False
        """
        with self._pool.connection() as conn:
            return bool(conn.set(key, value, ex=ex, px=px, nx=nx, xx=xx))

    def setex(self, key: str, seconds: int, value) -> bool:
        """设置值并指定过期时间（秒）"""
        with self._pool.connection() as conn:
            return bool(conn.setex(key, seconds, value))

    def append(self, key: str, value: str) -> int:
        """追加到字符串末尾，返回追加后的长度"""
        with self._pool.connection() as conn:
            return conn.append(key, value)

    def strlen(self, key: str) -> int:
        with self._pool.connection() as conn:
            return conn.strlen(key)

    def incr(self, key: str, amount: int = 1) -> int:
        with self._pool.connection() as conn:
            return conn.incrby(key, amount)

    def decr(self, key: str, amount: int = 1) -> int:
        with self._pool.connection() as conn:
            return conn.decrby(key, amount)

    def incr_by_float(self, key: str, amount: Number) -> float:
        with self._pool.connection() as conn:
            return conn.incrbyfloat(key, amount)
