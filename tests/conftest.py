"""
Pytest 公共配置和 Fixtures

提供测试所需的公共资源：
- Redis 服务器替身
- 基于替身的连接池与客户端
- 本地 RESP 服务器替身（真实套接字）
"""

import os

import pytest

from yredis import RedisClient, RedisPool
from yredis.config import ConfigLoader

from tests.helpers import FakeRedisServer, RespStubServer


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """清除可能影响默认配置的环境变量"""
    for key in list(os.environ):
        if key.startswith("YREDIS_"):
            monkeypatch.delenv(key, raising=False)
    yield
    ConfigLoader.clear_cache()


@pytest.fixture
def redis_server():
    """进程内 Redis 替身"""
    return FakeRedisServer()


@pytest.fixture
def pool(redis_server):
    """最多 4 个连接的连接池"""
    p = RedisPool(max_total=4, max_idle=4, max_wait=1.0, connection_factory=redis_server.connect)
    yield p
    p.close()


@pytest.fixture
def client(redis_server):
    """基于替身的 RedisClient"""
    c = RedisClient(max_total=8, max_idle=8, max_wait=1.0, connection_factory=redis_server.connect)
    yield c
    c.close()


@pytest.fixture
def resp_server():
    """监听本地随机端口的 RESP 服务器替身"""
    server = RespStubServer().start()
    yield server
    server.stop()
