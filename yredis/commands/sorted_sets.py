"""有序集合命令"""

from typing import List, Mapping, Optional, Union

from .base import CommandsBase

Number = Union[int, float]
Bound = Union[Number, str]


class SortedSetCommands(CommandsBase):
    """有序集合操作

    分数区间参数可以是数字，也可以是 "-inf" / "+inf" / "(5" 这样的字符串。

    使用示例:
        client.zadd("rank", {"alice": 90, "bob": 85})
        client.zadd_one("rank", 70, "carol")
        client.zrevrange("rank", 0, 2, withscores=True)
        # -> [("alice", 90.0), ("bob", 85.0), ("carol", 70.0)]
    """

    def zadd(self, key: str, mapping: Mapping[str, Number]) -> int:
        """添加成员，mapping 为 {成员: 分数}，返回新增的数量"""
        if not mapping:
            return 0
        with self._pool.connection() as conn:
            return conn.zadd(key, dict(mapping))

    def zadd_one(self, key: str, score: Number, member: str) -> int:
        return self.zadd(key, {member: score})

    def zrange(self, key: str, start: int, end: int, withscores: bool = False) -> List:
        """按排名升序取区间"""
        with self._pool.connection() as conn:
            return conn.zrange(key, start, end, withscores=withscores)

    def zrevrange(self, key: str, start: int, end: int, withscores: bool = False) -> List:
        """按排名降序取区间"""
        with self._pool.connection() as conn:
            return conn.zrevrange(key, start, end, withscores=withscores)

    def zcard(self, key: str) -> int:
        with self._pool.connection() as conn:
            return conn.zcard(key)

    def zcount(self, key: str, min: Bound, max: Bound) -> int:
        with self._pool.connection() as conn:
            return conn.zcount(key, min, max)

    def zrank(self, key: str, member: str) -> Optional[int]:
        with self._pool.connection() as conn:
            return conn.zrank(key, member)

    def zrevrank(self, key: str, member: str) -> Optional[int]:
        with self._pool.connection() as conn:
            return conn.zrevrank(key, member)

    def zrangebyscore(
        self,
        key: str,
        min: Bound,
        max: Bound,
        offset: Optional[int] = None,
        count: Optional[int] = None,
        withscores: bool = False,
    ) -> List:
        """按分数升序取区间

        offset 与 count 必须同时提供才会分页。
        """
        with self._pool.connection() as conn:
            return conn.zrangebyscore(
                key, min, max, start=offset, num=count, withscores=withscores
            )

    def zrevrangebyscore(
        self,
        key: str,
        max: Bound,
        min: Bound,
        offset: Optional[int] = None,
        count: Optional[int] = None,
        withscores: bool = False,
    ) -> List:
        """按分数降序取区间，注意参数顺序为 max 在前"""
        with self._pool.connection() as conn:
            return conn.zrevrangebyscore(
                key, max, min, start=offset, num=count, withscores=withscores
            )

    def zrem(self, key: str, *members: str) -> int:
        with self._pool.connection() as conn:
            return conn.zrem(key, *members)

    def zremrangebyrank(self, key: str, start: int, end: int) -> int:
        with self._pool.connection() as conn:
            return conn.zremrangebyrank(key, start, end)

    def zremrangebyscore(self, key: str, min: Bound, max: Bound) -> int:
        with self._pool.connection() as conn:
            return conn.zremrangebyscore(key, min, max)

    def zscore(self, key: str, member: str) -> Optional[float]:
        with self._pool.connection() as conn:
            return conn.zscore(key, member)

    def zincrby(self, key: str, amount: Number, member: str) -> float:
        """成员分数增加 amount，返回新分数"""
        with self._pool.connection() as conn:
            return conn.zincrby(key, amount, member)
