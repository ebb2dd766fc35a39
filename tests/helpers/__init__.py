"""测试辅助工具"""

from .redis_helpers import FakeRedisConnection, FakeRedisServer
from .resp_server import RespStubServer

__all__ = [
    "FakeRedisConnection",
    "FakeRedisServer",
    "RespStubServer",
]
