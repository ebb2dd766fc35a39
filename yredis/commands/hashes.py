"""哈希命令"""

from typing import Dict, List, Mapping, Optional, Union

from .base import CommandsBase

Number = Union[int, float]


class HashCommands(CommandsBase):
    """哈希操作

    使用示例:
        client.hmset("user:1", {"name": "alice", "age": "30"})
        client.hget("user:1", "name")        # -> "alice"
        client.hincrby("user:1", "age")      # -> 31
    """

    def hset(self, key: str, field: str, value) -> int:
        """设置字段值，返回新增字段的数量（覆盖已有字段时为 0）"""
        with self._pool.connection() as conn:
            return conn.hset(key, field, value)

    def hget(self, key: str, field: str) -> Optional[str]:
        with self._pool.connection() as conn:
            return conn.hget(key, field)

    def hmset(self, key: str, mapping: Mapping[str, object]) -> bool:
        """一次设置多个字段"""
        if not mapping:
            return False
        with self._pool.connection() as conn:
            conn.hset(key, mapping=dict(mapping))
        return True

    def hmget(self, key: str, *fields: str) -> List[Optional[str]]:
        """获取多个字段，不存在的字段对应 None"""
        with self._pool.connection() as conn:
            return conn.hmget(key, list(fields))

    def hgetall(self, key: str) -> Dict[str, str]:
        with self._pool.connection() as conn:
            return conn.hgetall(key)

    def hexists(self, key: str, field: str) -> bool:
        with self._pool.connection() as conn:
            return bool(conn.hexists(key, field))

    def hkeys(self, key: str) -> List[str]:
        with self._pool.connection() as conn:
            return conn.hkeys(key)

    def hvals(self, key: str) -> List[str]:
        with self._pool.connection() as conn:
            return conn.hvals(key)

    def hlen(self, key: str) -> int:
        with self._pool.connection() as conn:
            return conn.hlen(key)

    def hdel(self, key: str, *fields: str) -> int:
        """删除字段，返回实际删除的数量"""
        with self._pool.connection() as conn:
            return conn.hdel(key, *fields)

    def hincrby(self, key: str, field: str, amount: int = 1) -> int:
        with self._pool.connection() as conn:
            return conn.hincrby(key, field, amount)

    def hdecrby(self, key: str, field: str, amount: int = 1) -> int:
        """字段值减少 amount（HINCRBY 负数实现）"""
        return self.hincrby(key, field, -amount)

    def hincrbyfloat(self, key: str, field: str, amount: Number) -> float:
        with self._pool.connection() as conn:
            return conn.hincrbyfloat(key, field, amount)
