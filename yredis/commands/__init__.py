"""命令转发模块

按数据类型拆分的混入类，由 yredis.client.RedisClient 组合使用。
"""

from .base import CommandsBase
from .keys import KeyCommands, DELETE_CHUNK_SIZE
from .strings import StringCommands
from .lists import ListCommands
from .hashes import HashCommands
from .sets import SetCommands
from .sorted_sets import SortedSetCommands

__all__ = [
    "CommandsBase",
    "KeyCommands",
    "DELETE_CHUNK_SIZE",
    "StringCommands",
    "ListCommands",
    "HashCommands",
    "SetCommands",
    "SortedSetCommands",
]
