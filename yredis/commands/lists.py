"""列表命令"""

from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple

import redis

from .base import CommandsBase


@contextmanager
def _socket_timeout(conn: redis.Redis, seconds: Optional[float]) -> Iterator[None]:
    """在一次调用期间替换物理连接的读超时，退出时恢复"""
    physical = getattr(conn, "connection", None)
    if physical is None or not hasattr(physical, "socket_timeout"):
        yield
        return

    previous = physical.socket_timeout
    physical.socket_timeout = seconds
    sock = getattr(physical, "_sock", None)
    if sock is not None:
        sock.settimeout(seconds)
    try:
        yield
    finally:
        physical.socket_timeout = previous
        # 断线重连后 _sock 可能已经换成新的套接字
        sock = getattr(physical, "_sock", None)
        if sock is not None:
            sock.settimeout(previous)


class ListCommands(CommandsBase):
    """列表操作

    blpop / brpop 会在借出的连接上阻塞最多 timeout 秒（0 表示一直阻塞）。
    调用期间连接的读超时放宽为 timeout + RedisSettings.timeout，timeout 为 0 时不限，
    调用结束后恢复。
    """

    def lpush(self, key: str, *values) -> int:
        """从左侧插入，返回插入后的列表长度"""
        with self._pool.connection() as conn:
            return conn.lpush(key, *values)

    def rpush(self, key: str, *values) -> int:
        """从右侧插入，返回插入后的列表长度"""
        with self._pool.connection() as conn:
            return conn.rpush(key, *values)

    def lpop(self, key: str) -> Optional[str]:
        with self._pool.connection() as conn:
            return conn.lpop(key)

    def rpop(self, key: str) -> Optional[str]:
        with self._pool.connection() as conn:
            return conn.rpop(key)

    def lrange(self, key: str, start: int, end: int) -> List[str]:
        """获取区间内的元素，end 为 -1 表示到末尾"""
        with self._pool.connection() as conn:
            return conn.lrange(key, start, end)

    def lindex(self, key: str, index: int) -> Optional[str]:
        with self._pool.connection() as conn:
            return conn.lindex(key, index)

    def llen(self, key: str) -> int:
        with self._pool.connection() as conn:
            return conn.llen(key)

    def lset(self, key: str, index: int, value) -> bool:
        with self._pool.connection() as conn:
            return bool(conn.lset(key, index, value))

    def ltrim(self, key: str, start: int, end: int) -> bool:
        """只保留区间内的元素"""
        with self._pool.connection() as conn:
            return bool(conn.ltrim(key, start, end))

    def blpop(self, key: str, timeout: int = 0) -> Optional[Tuple[str, str]]:
        """阻塞式左侧弹出

        Returns:
            (键, 值)，超时返回 None
        """
        with self._pool.connection() as conn:
            with _socket_timeout(conn, self._blocking_read_timeout(timeout)):
                return conn.blpop([key], timeout=timeout)

    def brpop(self, key: str, timeout: int = 0) -> Optional[Tuple[str, str]]:
        """阻塞式右侧弹出"""
        with self._pool.connection() as conn:
            with _socket_timeout(conn, self._blocking_read_timeout(timeout)):
                return conn.brpop([key], timeout=timeout)

    def _blocking_read_timeout(self, timeout: int) -> Optional[float]:
        """阻塞命令期间使用的读超时，None 表示不限"""
        if not timeout:
            return None
        return timeout + self._pool.settings.timeout
