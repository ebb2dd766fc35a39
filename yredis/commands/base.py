"""命令转发基类"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..pool import RedisPool


class CommandsBase:
    """命令转发混入类的公共基类

    子类的每个方法都按同一个模式工作：从 self._pool 借出连接，
    执行一条命令，退出 with 块时归还连接。
    连接池错误和 redis-py 错误原样向上抛出。
    """
    _pool: "RedisPool"
