"""Redis 分布式锁

基于两段 Lua 脚本实现具名、带过期时间、校验持有者的互斥锁：

- 获取：键不存在时写入 token 并设置过期时间，两步在服务端原子完成
- 释放：键的当前值等于 token 时才删除，比较与删除在服务端原子完成

锁状态完全保存在 Redis 中，客户端不缓存任何锁记录，
因此同一进程的多个线程、多个进程、多台机器之间都能互斥。

对调用方暴露两层接口：
- acquire / release：返回 bool，所有传输层错误都折叠为 False
- acquire_or_raise / release_or_raise：保留连接池错误和脚本错误，便于排查原因

使用示例:
    manager = RedisLockManager(pool)

    token = manager.generate_token()
    if manager.acquire("order:1001", token, ttl=30):
        try:
            handle_order()
        finally:
            manager.release("order:1001", token)

    # 上下文管理器方式
    with manager.locked("order:1001", ttl=30) as acquired:
        if acquired:
            handle_order()
"""

import os
import socket
import threading
import uuid
from contextlib import contextmanager
from enum import IntEnum
from typing import Iterator, Optional

import redis

from .exceptions import InvalidLockTTL, PoolError, ScriptExecutionError
from .log import get_logger
from .pool import RedisPool

logger = get_logger()


# 键不存在时写入 token 并设置过期时间；返回 expire 的结果，键已存在返回 0
ACQUIRE_SCRIPT = (
    "if redis.call('setnx', KEYS[1], ARGV[1]) == 1 then "
    "return redis.call('expire', KEYS[1], ARGV[2]) "
    "else return 0 end"
)

# 值等于 token 时删除；键不存在或被他人持有返回 -1
RELEASE_SCRIPT = (
    "if redis.call('get', KEYS[1]) == ARGV[1] then "
    "return redis.call('del', KEYS[1]) "
    "else return -1 end"
)


class ReleaseOutcome(IntEnum):
    """释放脚本的返回值"""
    RELEASED = 1
    NOT_DELETED = 0
    NOT_HELD = -1


def validate_ttl(ttl) -> int:
    """校验锁过期时间，必须是正整数（秒）"""
    if isinstance(ttl, bool) or not isinstance(ttl, int) or ttl <= 0:
        raise InvalidLockTTL(ttl)
    return ttl


class RedisLockManager:
    """Redis 分布式锁管理器

    自身不持有任何锁状态，只借用连接池的连接执行脚本。
    可以被任意多个线程同时使用。

    Attributes:
        pool: 连接池
        prefix: 锁键名前缀
    """

    def __init__(self, pool: RedisPool, prefix: str = ""):
        """
        Args:
            pool: 连接池
            prefix: 锁键名前缀，如 "lock:"
        """
        self.pool = pool
        self.prefix = prefix

    def _make_key(self, name: str) -> str:
        return f"{self.prefix}{name}"

    @staticmethod
    def generate_token() -> str:
        """生成锁 token

        格式为 主机名:进程号:线程号:随机串，每次调用都不相同。
        """
        return f"{socket.gethostname()}:{os.getpid()}:{threading.get_ident()}:{uuid.uuid4().hex}"

    # ==================== 获取 ====================

    def acquire_or_raise(self, name: str, token: str, ttl: int) -> bool:
        """获取锁，保留错误原因

        Args:
            name: 锁名
            token: 本次获取使用的 token，释放时凭它证明持有权
            ttl: 过期时间（秒）

        Returns:
            是否获取成功；name 或 token 为空时直接返回 False，不访问 Redis

        Raises:
            InvalidLockTTL: ttl 不是正整数
            PoolError: 借不到连接
            ScriptExecutionError: 脚本执行失败（包括连接中断、超时）
        """
        validate_ttl(ttl)
        if not name or not token:
            return False

        try:
            with self.pool.connection() as conn:
                result = conn.eval(ACQUIRE_SCRIPT, 1, self._make_key(name), token, ttl)
        except redis.RedisError as e:
            raise ScriptExecutionError("acquire", e) from e

        # expire 返回 0 时同样视为未获取
        return result == 1

    def acquire(self, name: str, token: str, ttl: int) -> bool:
        """获取锁

        只有键原本不存在、且写入与设置过期都已执行时才返回 True。
        锁被他人持有、借不到连接、网络异常等情况都返回 False，不会抛出异常；
        本方法不做重试，重试与退避由调用方决定。

        Raises:
            InvalidLockTTL: ttl 不是正整数
        """
        try:
            acquired = self.acquire_or_raise(name, token, ttl)
        except (PoolError, ScriptExecutionError) as e:
            logger.error(f"Error acquiring lock {name}: {e}")
            return False

        if acquired:
            logger.debug(f"Acquired lock: {name} (ttl={ttl}s)")
        else:
            logger.debug(f"Lock not acquired: {name}")
        return acquired

    # ==================== 释放 ====================

    def release_or_raise(self, name: str, token: str) -> ReleaseOutcome:
        """释放锁，返回脚本的具体结果

        Raises:
            PoolError: 借不到连接
            ScriptExecutionError: 脚本执行失败
        """
        if not name or not token:
            return ReleaseOutcome.NOT_HELD

        try:
            with self.pool.connection() as conn:
                result = conn.eval(RELEASE_SCRIPT, 1, self._make_key(name), token)
        except redis.RedisError as e:
            raise ScriptExecutionError("release", e) from e

        try:
            return ReleaseOutcome(int(result))
        except (TypeError, ValueError):
            raise ScriptExecutionError(
                "release", ValueError(f"unexpected script result: {result!r}")
            )

    def release(self, name: str, token: str) -> bool:
        """释放锁

        只有锁当前的 token 等于传入的 token、且确实删除了锁记录时返回 True。
        锁已过期、被他人持有、从未获取、网络异常时都返回 False，
        调用方无法从返回值区分这几种情况。
        """
        try:
            outcome = self.release_or_raise(name, token)
        except (PoolError, ScriptExecutionError) as e:
            logger.error(f"Error releasing lock {name}: {e}")
            return False

        if outcome is ReleaseOutcome.RELEASED:
            logger.debug(f"Released lock: {name}")
            return True
        logger.debug(f"Failed to release lock: {name} (not held or expired)")
        return False

    # ==================== 辅助 ====================

    def is_locked(self, name: str) -> bool:
        """锁记录当前是否存在

        只读检查，结果随时可能过时，不能用来判断自己是否持有锁。
        """
        with self.pool.connection() as conn:
            return bool(conn.exists(self._make_key(name)))

    @contextmanager
    def locked(self, name: str, ttl: int, token: Optional[str] = None) -> Iterator[bool]:
        """上下文管理器方式使用锁

        Args:
            name: 锁名
            ttl: 过期时间（秒）
            token: 为空时自动生成

        Yields:
            是否成功获取锁；获取成功时退出块后自动释放

        Examples:
            with manager.locked("report:daily", ttl=60) as acquired:
                if acquired:
                    build_report()
        """
        token = token or self.generate_token()
        acquired = self.acquire(name, token, ttl)
        try:
            yield acquired
        finally:
            if acquired:
                self.release(name, token)
