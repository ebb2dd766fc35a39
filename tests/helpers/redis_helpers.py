"""Redis 测试替身

提供线程安全的进程内 Redis 替身，无需真实服务器即可测试连接池和分布式锁：

- FakeRedisServer: 保存多个库的数据与过期时间，原子地执行两段锁脚本
- FakeRedisConnection: 模拟 single_connection_client 模式的 redis.Redis

时间通过 server.advance() 推进，测试过期逻辑时无需 sleep。

使用示例:
    server = FakeRedisServer()
    pool = RedisPool(max_total=2, connection_factory=server.connect)
"""

import threading
import time
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import redis

from yredis.lock import ACQUIRE_SCRIPT, RELEASE_SCRIPT


class FakeRedisServer:
    """进程内 Redis 服务器替身

    Attributes:
        databases: 库的数量，超出范围的 SELECT 返回错误
        down: 为 True 时所有命令都抛出 ConnectionError（模拟服务器宕机）
        eval_error: 不为空时 eval 抛出该异常（模拟脚本执行失败）
        connections: 创建过的所有连接
        scripts: 执行过的脚本调用记录 (脚本, 键, 参数)
    """

    def __init__(self, databases: int = 16):
        self.databases = databases
        self.down = False
        self.eval_error: Optional[Exception] = None
        self.connections: List["FakeRedisConnection"] = []
        self.scripts: List[tuple] = []
        self._data: Dict[int, Dict[str, str]] = {}
        self._expires: Dict[int, Dict[str, float]] = {}
        self._offset = 0.0
        self._lock = threading.RLock()

    # ==================== 时间 ====================

    def now(self) -> float:
        return time.monotonic() + self._offset

    def advance(self, seconds: float) -> None:
        """推进服务器时钟"""
        with self._lock:
            self._offset += seconds

    # ==================== 连接 ====================

    def connect(self) -> "FakeRedisConnection":
        """连接工厂，传给 RedisPool(connection_factory=...)"""
        conn = FakeRedisConnection(self)
        with self._lock:
            self.connections.append(conn)
        return conn

    @property
    def open_connections(self) -> int:
        with self._lock:
            return sum(1 for c in self.connections if not c.closed)

    # ==================== 数据 ====================

    def _db(self, db: int) -> Dict[str, str]:
        return self._data.setdefault(db, {})

    def _purge(self, db: int, key: str) -> None:
        deadline = self._expires.get(db, {}).get(key)
        if deadline is not None and deadline <= self.now():
            self._db(db).pop(key, None)
            self._expires[db].pop(key, None)

    def read(self, db: int, key: str) -> Optional[str]:
        with self._lock:
            self._purge(db, key)
            return self._db(db).get(key)

    def write(self, db: int, key: str, value: Any, ttl: Optional[float] = None) -> None:
        with self._lock:
            self._db(db)[key] = str(value)
            expires = self._expires.setdefault(db, {})
            if ttl is None:
                expires.pop(key, None)
            else:
                expires[key] = self.now() + ttl

    def remove(self, db: int, key: str) -> bool:
        with self._lock:
            self._purge(db, key)
            self._expires.get(db, {}).pop(key, None)
            return self._db(db).pop(key, None) is not None

    def set_ttl(self, db: int, key: str, ttl: float) -> bool:
        with self._lock:
            self._purge(db, key)
            if key not in self._db(db):
                return False
            self._expires.setdefault(db, {})[key] = self.now() + ttl
            return True

    def remaining(self, db: int, key: str) -> int:
        with self._lock:
            self._purge(db, key)
            if key not in self._db(db):
                return -2
            deadline = self._expires.get(db, {}).get(key)
            if deadline is None:
                return -1
            return int(round(deadline - self.now()))

    def run_script(self, db: int, script: str, keys: list, args: list) -> int:
        """原子地执行锁脚本"""
        with self._lock:
            self.scripts.append((script, list(keys), list(args)))
            key = keys[0]
            self._purge(db, key)
            if script == ACQUIRE_SCRIPT:
                if key in self._db(db):
                    return 0
                self._db(db)[key] = str(args[0])
                self._expires.setdefault(db, {})[key] = self.now() + int(args[1])
                return 1
            if script == RELEASE_SCRIPT:
                if self._db(db).get(key) == str(args[0]):
                    self._db(db).pop(key)
                    self._expires.get(db, {}).pop(key, None)
                    return 1
                return -1
        raise redis.ResponseError("NOSCRIPT unknown script")


class FakeRedisConnection:
    """单连接 redis.Redis 替身

    只实现连接池与锁会用到的命令。
    设置 broken = True 可以让这一个连接的后续命令都失败。
    """

    def __init__(self, server: FakeRedisServer):
        self.server = server
        self.connection = SimpleNamespace(db=0)
        self.closed = False
        self.broken = False
        self.selects: List[int] = []
        self.pings = 0

    @property
    def db(self) -> int:
        return self.connection.db

    def _check(self) -> None:
        if self.closed:
            raise redis.ConnectionError("Connection closed by client")
        if self.broken or self.server.down:
            raise redis.ConnectionError("Error 111 connecting to 127.0.0.1:6379. Connection refused.")

    def ping(self) -> bool:
        self._check()
        self.pings += 1
        return True

    def execute_command(self, *args):
        self._check()
        command = str(args[0]).upper()
        if command == "SELECT":
            db = int(args[1])
            if db < 0 or db >= self.server.databases:
                raise redis.ResponseError("ERR DB index is out of range")
            self.selects.append(db)
            self.connection.db = db
            return True
        raise redis.ResponseError(f"ERR unknown command '{args[0]}'")

    def get(self, key: str) -> Optional[str]:
        self._check()
        return self.server.read(self.db, key)

    def set(self, key: str, value, ex=None, px=None, nx=False, xx=False):
        self._check()
        with self.server._lock:
            present = self.server.read(self.db, key) is not None
            if (nx and present) or (xx and not present):
                return None
            ttl = ex if ex is not None else (px / 1000.0 if px is not None else None)
            self.server.write(self.db, key, value, ttl)
            return True

    def exists(self, *keys: str) -> int:
        self._check()
        return sum(1 for key in keys if self.server.read(self.db, key) is not None)

    def delete(self, *keys: str) -> int:
        self._check()
        return sum(1 for key in keys if self.server.remove(self.db, key))

    def expire(self, key: str, seconds: int) -> bool:
        self._check()
        return self.server.set_ttl(self.db, key, seconds)

    def ttl(self, key: str) -> int:
        self._check()
        return self.server.remaining(self.db, key)

    def eval(self, script: str, numkeys: int, *keys_and_args):
        self._check()
        if self.server.eval_error is not None:
            raise self.server.eval_error
        keys = list(keys_and_args[:numkeys])
        args = list(keys_and_args[numkeys:])
        return self.server.run_script(self.db, script, keys, args)

    def close(self) -> None:
        self.closed = True
