"""集合命令"""

from typing import Optional, Set

from .base import CommandsBase


class SetCommands(CommandsBase):
    """集合操作"""

    def sadd(self, key: str, *members) -> int:
        """添加成员，返回新增的数量"""
        with self._pool.connection() as conn:
            return conn.sadd(key, *members)

    def smembers(self, key: str) -> Set[str]:
        with self._pool.connection() as conn:
            return conn.smembers(key)

    def sismember(self, key: str, member) -> bool:
        with self._pool.connection() as conn:
            return bool(conn.sismember(key, member))

    def scard(self, key: str) -> int:
        with self._pool.connection() as conn:
            return conn.scard(key)

    def srem(self, key: str, *members) -> int:
        with self._pool.connection() as conn:
            return conn.srem(key, *members)

    def smove(self, source: str, destination: str, member) -> bool:
        """把成员从 source 移动到 destination"""
        with self._pool.connection() as conn:
            return bool(conn.smove(source, destination, member))

    def srandmember(self, key: str, count: Optional[int] = None):
        """随机取成员但不移除

        count 为空时返回单个成员（集合为空时为 None），否则返回列表。
        """
        with self._pool.connection() as conn:
            return conn.srandmember(key, count)

    def spop(self, key: str, count: Optional[int] = None):
        """随机弹出成员，返回值规则同 srandmember"""
        with self._pool.connection() as conn:
            return conn.spop(key, count)

    def sinter(self, *keys: str) -> Set[str]:
        with self._pool.connection() as conn:
            return conn.sinter(list(keys))

    def sunion(self, *keys: str) -> Set[str]:
        with self._pool.connection() as conn:
            return conn.sunion(list(keys))

    def sdiff(self, *keys: str) -> Set[str]:
        """第一个集合减去其余集合"""
        with self._pool.connection() as conn:
            return conn.sdiff(list(keys))
