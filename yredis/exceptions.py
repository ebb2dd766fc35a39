# -*- coding: utf-8 -*-
"""
Redis 客户端异常定义

异常层级:
    RedisClientError (基类)
    ├── PoolError                 - 连接池错误
    │   ├── PoolExhausted         - 等待超时，连接池无可用连接
    │   ├── ConnectFailed         - 建立/认证新连接失败
    │   ├── PoolClosed            - 连接池已关闭
    │   └── ConnectionNotLeased   - 归还了未借出（或已归还）的连接
    ├── ScriptExecutionError      - 锁脚本执行失败
    └── InvalidLockTTL            - 锁过期时间不是正整数

连接池层的错误会原样抛给调用方，便于区分"根本没机会尝试"与"尝试了但没抢到"。
锁层的 acquire/release 会把传输错误折叠为 False，见 yredis.lock。
"""

from typing import Optional


class RedisClientError(Exception):
    """Redis 客户端错误基类

    Attributes:
        message: 错误消息
        code: 错误码，默认为类名
        details: 详细信息
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """转换为字典"""
        return {
            "error": self.code,
            "message": self.message,
            "details": dict(self.details),
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, code={self.code!r})"


# ==================== 连接池 ====================

class PoolError(RedisClientError):
    """连接池错误基类"""
    pass


class PoolExhausted(PoolError):
    """连接池耗尽

    在 max_wait 时间内没有连接被归还，调用方可以重试或向上游施加背压。
    """

    def __init__(self, max_total: int, max_wait: Optional[float]):
        self.max_total = max_total
        self.max_wait = max_wait
        super().__init__(
            f"连接池已耗尽: {max_total} 个连接全部被占用，等待 {max_wait}s 后仍无可用连接",
            details={"max_total": max_total, "max_wait": max_wait},
        )


class ConnectFailed(PoolError):
    """无法建立到 Redis 服务器的连接（网络拒绝、认证失败等）"""

    def __init__(self, address: str, reason: str):
        self.address = address
        self.reason = reason
        super().__init__(
            f"连接 Redis 失败 ({address}): {reason}",
            details={"address": address, "reason": reason},
        )


class PoolClosed(PoolError):
    """连接池已关闭"""

    def __init__(self, message: str = "连接池已关闭，无法借出连接"):
        super().__init__(message)


class ConnectionNotLeased(PoolError):
    """归还的连接不属于当前借出集合

    通常是同一个连接被归还了两次。
    """

    def __init__(self, message: str = "连接未被借出或已经归还"):
        super().__init__(message)


# ==================== 锁 ====================

class ScriptExecutionError(RedisClientError):
    """Redis 拒绝或未能执行锁脚本"""

    def __init__(self, script_name: str, original_error: Exception):
        self.script_name = script_name
        self.original_error = original_error
        super().__init__(
            f"脚本 '{script_name}' 执行失败: {original_error}",
            details={"script": script_name},
        )


class InvalidLockTTL(RedisClientError, ValueError):
    """锁过期时间必须是正整数（秒）"""

    def __init__(self, ttl):
        self.ttl = ttl
        super().__init__(
            f"锁过期时间必须是正整数（秒），收到: {ttl!r}",
            details={"ttl": repr(ttl)},
        )


__all__ = [
    "RedisClientError",
    "PoolError",
    "PoolExhausted",
    "ConnectFailed",
    "PoolClosed",
    "ConnectionNotLeased",
    "ScriptExecutionError",
    "InvalidLockTTL",
]
