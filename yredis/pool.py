"""Redis 连接池

管理到同一台 Redis 服务器的一组有界连接：

- 借出（borrow）：优先复用空闲连接，没有空闲连接且未达上限时新建，
  否则最多阻塞 max_wait 秒，超时抛出 PoolExhausted
- 归还（release）：健康的连接回到空闲集合（超过 max_idle 则关闭），
  被标记为损坏的连接直接关闭，不再复用
- 选库：借出时可指定 1-16 号库，归还时自动切回默认库，
  保证下一个借用者看到的一定是默认库

每个连接是一个 single_connection_client 模式的 redis.Redis，
借出期间独占一条物理连接，调用方可以直接使用 redis-py 的全部命令。

使用示例:
    from yredis.pool import RedisPool
    from yredis.config import RedisSettings

    pool = RedisPool(RedisSettings(host="127.0.0.1", max_total=20, max_wait=2.0))

    # 推荐：作用域方式，任何退出路径都会归还连接
    with pool.connection() as conn:
        conn.set("greeting", "hello")

    # 使用 3 号库
    with pool.connection(db=3) as conn:
        conn.get("greeting")

    pool.close()
"""

import threading
import time
from collections import deque
from contextlib import contextmanager
from typing import Any, Callable, Deque, Dict, Iterator, Optional

import redis

from .config import RedisSettings
from .exceptions import ConnectFailed, ConnectionNotLeased, PoolClosed, PoolExhausted
from .log import get_logger

logger = get_logger()

# 可通过 borrow(db=...) 选择的库号范围，0 号为默认库，无需选库
MIN_DATABASE_INDEX = 1
MAX_DATABASE_INDEX = 16

ConnectionFactory = Callable[[], redis.Redis]


class _Lease:
    """一次借出的登记信息"""
    __slots__ = ("conn", "db", "broken")

    def __init__(self, conn: redis.Redis, db: int):
        self.conn = conn
        self.db = db
        self.broken = False


def _bind_database(conn: redis.Redis, db: int) -> None:
    """切换连接所在的库

    同时更新底层物理连接的 db 属性，redis-py 断线重连后会按它重新 SELECT。
    """
    conn.execute_command("SELECT", db)
    physical = getattr(conn, "connection", None)
    if physical is not None:
        physical.db = db


class RedisPool:
    """Redis 连接池

    线程安全：借出/归还的登记只在一把条件锁下完成，网络操作都在锁外进行。

    Attributes:
        settings: 连接池配置（构造后不再变化）
        max_total: 最大连接数（借出 + 空闲）
        max_idle: 最多保留的空闲连接数
        max_wait: 借出时最长等待秒数，None 表示一直等待
        default_db: 连接默认所在的库号
    """

    def __init__(
        self,
        settings: Optional[RedisSettings] = None,
        connection_factory: Optional[ConnectionFactory] = None,
        **overrides: Any
    ):
        """
        Args:
            settings: 连接池配置，为空时使用默认配置
            connection_factory: 新建物理连接的工厂函数，默认按 settings 创建 redis.Redis
            **overrides: 覆盖 settings 中的字段，如 max_total=1
        """
        if settings is None:
            settings = RedisSettings(**overrides)
        elif overrides:
            settings = RedisSettings(**{**settings.model_dump(), **overrides})

        self.settings = settings
        self.max_total = settings.max_total
        self.max_idle = settings.max_idle
        self.max_wait = settings.max_wait
        self.default_db = settings.default_database
        self._factory = connection_factory or self._create_client

        self._idle: Deque[redis.Redis] = deque()
        self._leases: Dict[int, _Lease] = {}
        self._total = 0
        self._closed = False
        self._cond = threading.Condition()

        logger.info(
            f"RedisPool initialized: address={settings.address}, "
            f"max_total={self.max_total}, max_idle={self.max_idle}, max_wait={self.max_wait}"
        )

    # ==================== 借出 / 归还 ====================

    def borrow(self, db: Optional[int] = None) -> redis.Redis:
        """借出一个连接

        Args:
            db: 要使用的库号，1-16 之间才会选库；为空、0 或越界时停留在默认库

        Returns:
            独占的 redis.Redis 连接，用完必须调用 release() 归还

        Raises:
            PoolExhausted: max_wait 内没有可用连接
            ConnectFailed: 新建连接失败（网络拒绝、认证失败等）
            PoolClosed: 连接池已关闭
        """
        deadline = None if self.max_wait is None else time.monotonic() + self.max_wait
        while True:
            conn, created = self._checkout(deadline)
            if created or not self.settings.test_on_borrow or self._is_alive(conn):
                break
            logger.debug("Discarding idle Redis connection that failed PING")
            self._drop(conn)

        if db is not None and MIN_DATABASE_INDEX <= db <= MAX_DATABASE_INDEX and db != self.default_db:
            try:
                _bind_database(conn, db)
            except (redis.ConnectionError, redis.TimeoutError):
                self.invalidate(conn)
                self.release(conn)
                raise
            except BaseException:
                self.release(conn)
                raise
            with self._cond:
                self._leases[id(conn)].db = db

        return conn

    def release(self, conn: redis.Redis) -> None:
        """归还连接

        每个借出的连接只能归还一次。健康的连接回到空闲集合，
        损坏的连接或超出 max_idle 的连接会被关闭。

        Raises:
            ConnectionNotLeased: 连接不是从本连接池借出的，或已经归还过
        """
        with self._cond:
            lease = self._leases.pop(id(conn), None)
        if lease is None:
            raise ConnectionNotLeased()

        healthy = not lease.broken
        if healthy and lease.db != self.default_db:
            try:
                _bind_database(conn, self.default_db)
            except redis.RedisError as e:
                logger.debug(f"Failed to reset Redis connection to db {self.default_db}: {e}")
                healthy = False

        with self._cond:
            keep = healthy and not self._closed and len(self._idle) < self.max_idle
            if keep:
                self._idle.append(conn)
            else:
                self._total -= 1
            self._cond.notify()

        if not keep:
            self._discard(conn)

    def invalidate(self, conn: redis.Redis) -> None:
        """把借出中的连接标记为损坏，归还时不再复用"""
        with self._cond:
            lease = self._leases.get(id(conn))
            if lease is None:
                raise ConnectionNotLeased()
            lease.broken = True

    @contextmanager
    def connection(self, db: Optional[int] = None) -> Iterator[redis.Redis]:
        """作用域方式借用连接

        无论正常退出还是抛出异常都会归还连接；
        块内出现连接错误或超时时，连接被标记为损坏后再归还。

        使用示例:
            with pool.connection() as conn:
                conn.incr("counter")
        """
        conn = self.borrow(db)
        try:
            yield conn
        except (redis.ConnectionError, redis.TimeoutError):
            self.invalidate(conn)
            raise
        finally:
            self.release(conn)

    # ==================== 生命周期 ====================

    def close(self) -> None:
        """关闭连接池

        立即关闭所有空闲连接；借出中的连接在归还时关闭。
        等待中的 borrow() 会收到 PoolClosed。
        """
        with self._cond:
            if self._closed:
                return
            self._closed = True
            idle = list(self._idle)
            self._idle.clear()
            self._total -= len(idle)
            self._cond.notify_all()

        for conn in idle:
            self._discard(conn)
        logger.info(f"RedisPool closed: address={self.settings.address}")

    @property
    def closed(self) -> bool:
        return self._closed

    def get_stats(self) -> Dict[str, Any]:
        """获取连接池状态"""
        with self._cond:
            return {
                "address": self.settings.address,
                "max_total": self.max_total,
                "max_idle": self.max_idle,
                "max_wait": self.max_wait,
                "total": self._total,
                "idle": len(self._idle),
                "in_use": len(self._leases),
                "closed": self._closed,
            }

    def __enter__(self) -> "RedisPool":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"RedisPool(address={self.settings.address!r}, "
            f"max_total={self.max_total}, max_idle={self.max_idle})"
        )

    # ==================== 内部实现 ====================

    def _checkout(self, deadline: Optional[float]):
        """取出一个空闲连接或新建连接，返回 (连接, 是否新建)

        Args:
            deadline: 等待截止的 monotonic 时刻，None 表示一直等待
        """

        with self._cond:
            while True:
                if self._closed:
                    raise PoolClosed()
                if self._idle:
                    conn = self._idle.pop()
                    self._leases[id(conn)] = _Lease(conn, self.default_db)
                    return conn, False
                if self._total < self.max_total:
                    # 先占住名额，建连在锁外进行
                    self._total += 1
                    break
                if deadline is None:
                    self._cond.wait()
                    continue
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    logger.warning(
                        f"RedisPool exhausted: {self.max_total} connections in use, "
                        f"waited {self.max_wait}s"
                    )
                    raise PoolExhausted(self.max_total, self.max_wait)
                self._cond.wait(remaining)

        try:
            conn = self._connect()
        except BaseException:
            with self._cond:
                self._total -= 1
                self._cond.notify()
            raise

        with self._cond:
            if not self._closed:
                self._leases[id(conn)] = _Lease(conn, self.default_db)
                return conn, True
            self._total -= 1
        self._discard(conn)
        raise PoolClosed()

    def _connect(self) -> redis.Redis:
        """新建物理连接并用 PING 确认可用（包括认证）"""
        conn = None
        try:
            conn = self._factory()
            conn.ping()
        except redis.RedisError as e:
            logger.warning(f"Redis connect failed: address={self.settings.address}, error={e}")
            if conn is not None:
                self._discard(conn)
            raise ConnectFailed(self.settings.address, str(e)) from e
        logger.debug(f"Opened Redis connection to {self.settings.address}")
        return conn

    def _create_client(self) -> redis.Redis:
        kwargs = self.settings.connection_kwargs()
        if self.settings.url:
            return redis.Redis.from_url(self.settings.url, single_connection_client=True, **kwargs)
        return redis.Redis(single_connection_client=True, **kwargs)

    @staticmethod
    def _is_alive(conn: redis.Redis) -> bool:
        try:
            return bool(conn.ping())
        except redis.RedisError:
            return False

    def _drop(self, conn: redis.Redis) -> None:
        """注销一个借出中的连接并关闭"""
        with self._cond:
            self._leases.pop(id(conn), None)
            self._total -= 1
            self._cond.notify()
        self._discard(conn)

    @staticmethod
    def _discard(conn: redis.Redis) -> None:
        try:
            conn.close()
        except (redis.RedisError, OSError) as e:
            logger.debug(f"Error closing Redis connection: {e}")
