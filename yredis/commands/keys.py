"""键命令"""

from typing import Iterable, List

from .base import CommandsBase

# 单条 DEL 最多携带的键数
DELETE_CHUNK_SIZE = 500


class KeyCommands(CommandsBase):
    """通用键操作"""

    def delete(self, *keys: str) -> int:
        """删除一个或多个键，返回实际删除的数量"""
        if not keys:
            return 0
        with self._pool.connection() as conn:
            return conn.delete(*keys)

    def delete_many(self, keys: Iterable[str]) -> int:
        """批量删除键

        键按 DELETE_CHUNK_SIZE 分批发送，整个过程只占用一个连接。

        Args:
            keys: 要删除的键，可以是任意可迭代对象

        Returns:
            实际删除的数量
        """
        keys = list(keys)
        if not keys:
            return 0

        deleted = 0
        with self._pool.connection() as conn:
            for start in range(0, len(keys), DELETE_CHUNK_SIZE):
                deleted += conn.delete(*keys[start:start + DELETE_CHUNK_SIZE])
        return deleted

    def exists(self, key: str) -> bool:
        with self._pool.connection() as conn:
            return conn.exists(key) > 0

    def expire(self, key: str, seconds: int) -> bool:
        """设置过期时间（秒），键不存在时返回 False"""
        with self._pool.connection() as conn:
            return bool(conn.expire(key, seconds))

    def expire_at(self, key: str, timestamp: int) -> bool:
        """设置过期时刻（Unix 时间戳，秒）"""
        with self._pool.connection() as conn:
            return bool(conn.expireat(key, timestamp))

    def ttl(self, key: str) -> int:
        """剩余生存时间（秒）

        Returns:
            剩余秒数；-1 表示没有过期时间，-2 表示键不存在
        """
        with self._pool.connection() as conn:
            return conn.ttl(key)

    def type(self, key: str) -> str:
        """键的类型，如 string / list / hash / set / zset，不存在时为 none"""
        with self._pool.connection() as conn:
            return conn.type(key)

    def keys_matching(self, pattern: str, count: int = 1000) -> List[str]:
        """按模式列出键（SCAN 实现，不阻塞服务器）"""
        with self._pool.connection() as conn:
            return list(conn.scan_iter(match=pattern, count=count))
