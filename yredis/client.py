"""Redis 客户端

RedisClient 是对外的统一入口：持有一个连接池和一个锁管理器，
并组合各数据类型的命令转发方法。

客户端没有全局单例，由应用在启动时创建、在关闭时 close()，
需要使用 Redis 的组件通过参数拿到同一个实例。

使用示例:
    from yredis import RedisClient

    client = RedisClient(host="127.0.0.1", port=6379, max_total=50)

    client.set("greeting", "hello", ex=60)
    client.hmset("user:1", {"name": "alice"})

    # 分布式锁
    token = client.generate_token()
    if client.lock("job:sync", token, ttl=30):
        try:
            run_sync()
        finally:
            client.unlock("job:sync", token)

    # 直接使用 redis-py 连接（可指定库号）
    with client.connection(db=2) as conn:
        conn.lpush("queue", "task-1")

    client.close()
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

import redis

from .commands import (
    HashCommands,
    KeyCommands,
    ListCommands,
    SetCommands,
    SortedSetCommands,
    StringCommands,
)
from .config import RedisSettings, load_yaml_config
from .exceptions import PoolError
from .lock import RedisLockManager
from .log import get_logger
from .pool import ConnectionFactory, RedisPool

logger = get_logger()


class RedisClient(
    KeyCommands,
    StringCommands,
    ListCommands,
    HashCommands,
    SetCommands,
    SortedSetCommands,
):
    """Redis 客户端

    Attributes:
        settings: 连接配置
        pool: 连接池
        locks: 锁管理器
    """

    def __init__(
        self,
        settings: Optional[RedisSettings] = None,
        *,
        pool: Optional[RedisPool] = None,
        connection_factory: Optional[ConnectionFactory] = None,
        **overrides: Any
    ):
        """
        Args:
            settings: 连接配置，为空时使用默认配置（可被环境变量覆盖）
            pool: 已有的连接池，提供时忽略 settings 与 overrides
            connection_factory: 新建物理连接的工厂函数，测试时可注入替身
            **overrides: 覆盖 settings 中的字段
        """
        if pool is None:
            pool = RedisPool(settings, connection_factory=connection_factory, **overrides)
        self._pool = pool
        self.settings = pool.settings
        self.locks = RedisLockManager(pool, prefix=self.settings.lock_prefix)

    @classmethod
    def from_yaml(
        cls,
        config_path: str,
        section: Optional[str] = "redis",
        base_dir: Optional[str] = None,
        **overrides: Any
    ) -> "RedisClient":
        """从 YAML 配置文件创建客户端

        Args:
            config_path: 配置文件路径
            section: 配置段名，为 None 时使用整个文件
            base_dir: 解析相对路径的基础目录
            **overrides: 覆盖配置文件中的字段

        使用示例:
            client = RedisClient.from_yaml("config/settings.yaml")
        """
        settings = load_yaml_config(
            config_path, RedisSettings, base_dir=base_dir, section=section, **overrides
        )
        return cls(settings)

    @property
    def pool(self) -> RedisPool:
        return self._pool

    @contextmanager
    def connection(self, db: Optional[int] = None) -> Iterator[redis.Redis]:
        """作用域方式借用一个 redis-py 连接，退出时自动归还

        Args:
            db: 库号，1-16 之间才会选库
        """
        with self._pool.connection(db) as conn:
            yield conn

    # ==================== 分布式锁 ====================

    def lock(self, name: str, token: str, ttl: int) -> bool:
        """获取锁，成功返回 True；被他人持有或出错返回 False"""
        return self.locks.acquire(name, token, ttl)

    def unlock(self, name: str, token: str) -> bool:
        """释放锁，只有 token 匹配且确实删除时返回 True"""
        return self.locks.release(name, token)

    def acquire(self, name: str, token: str, ttl: int) -> bool:
        return self.locks.acquire(name, token, ttl)

    def release(self, name: str, token: str) -> bool:
        return self.locks.release(name, token)

    def locked(self, name: str, ttl: int, token: Optional[str] = None):
        """上下文管理器方式使用锁，见 RedisLockManager.locked"""
        return self.locks.locked(name, ttl, token)

    def is_locked(self, name: str) -> bool:
        return self.locks.is_locked(name)

    @staticmethod
    def generate_token() -> str:
        return RedisLockManager.generate_token()

    # ==================== 生命周期 ====================

    def ping(self) -> bool:
        """检查服务器是否可达"""
        try:
            with self._pool.connection() as conn:
                return bool(conn.ping())
        except (PoolError, redis.RedisError) as e:
            logger.warning(f"Redis ping failed: address={self.settings.address}, error={e}")
            return False

    def stats(self) -> Dict[str, Any]:
        """连接池状态"""
        return self._pool.get_stats()

    def close(self) -> None:
        self._pool.close()

    @property
    def closed(self) -> bool:
        return self._pool.closed

    def __enter__(self) -> "RedisClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"RedisClient(address={self.settings.address!r})"
