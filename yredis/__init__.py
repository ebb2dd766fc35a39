"""
YRedis - Redis 客户端基础类库

提供连接池、常用数据类型命令封装、基于 Lua 脚本的分布式锁
"""

from .version import __version__, __author__, __description__

# 导出客户端
from .client import RedisClient

# 导出连接池与锁
from .pool import RedisPool
from .lock import (
    RedisLockManager,
    ReleaseOutcome,
    ACQUIRE_SCRIPT,
    RELEASE_SCRIPT,
)

# 导出配置
from .config import (
    AppSettings,
    LoggingSettings,
    RedisSettings,
    load_yaml_config,
)

# 导出异常
from .exceptions import (
    RedisClientError,
    PoolError,
    PoolExhausted,
    ConnectFailed,
    PoolClosed,
    ConnectionNotLeased,
    ScriptExecutionError,
    InvalidLockTTL,
)

# 导出日志工具
from .log import get_logger, setup_logger, setup_root_logger

__all__ = [
    "__version__",
    "__author__",
    "__description__",

    "RedisClient",
    "RedisPool",
    "RedisLockManager",
    "ReleaseOutcome",
    "ACQUIRE_SCRIPT",
    "RELEASE_SCRIPT",

    "AppSettings",
    "LoggingSettings",
    "RedisSettings",
    "load_yaml_config",

    "RedisClientError",
    "PoolError",
    "PoolExhausted",
    "ConnectFailed",
    "PoolClosed",
    "ConnectionNotLeased",
    "ScriptExecutionError",
    "InvalidLockTTL",

    "get_logger",
    "setup_logger",
    "setup_root_logger",
]
