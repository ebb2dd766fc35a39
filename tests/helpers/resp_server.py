"""本地 RESP 服务器替身

监听 127.0.0.1 的随机端口，按 RESP2 协议应答，供需要真实 redis-py 连接
（真实套接字、真实读超时）的测试使用：

- PING 返回 PONG
- BLPOP / BRPOP 先阻塞 timeout 秒再返回空；timeout 为 0 时阻塞 block_delay 秒后返回一个元素
- 其它命令一律返回 OK

使用示例:
    server = RespStubServer()
    server.start()
    client = RedisClient(host="127.0.0.1", port=server.port)
    ...
    server.stop()
"""

import socketserver
import threading
import time
from typing import List, Optional, Tuple


class _RespHandler(socketserver.StreamRequestHandler):

    def handle(self) -> None:
        while True:
            command = self._read_command()
            if command is None:
                return
            self.server.record(command)
            self.wfile.write(self.server.reply(command))
            self.wfile.flush()

    def _read_command(self) -> Optional[Tuple[str, ...]]:
        header = self.rfile.readline()
        if not header:
            return None
        if not header.startswith(b"*"):
            # 内联命令
            return tuple(header.decode().split())
        parts = []
        for _ in range(int(header[1:])):
            length = int(self.rfile.readline()[1:])
            parts.append(self.rfile.read(length + 2)[:-2].decode())
        return tuple(parts)


class RespStubServer(socketserver.ThreadingTCPServer):
    """在后台线程运行的 RESP 服务器

    Attributes:
        commands: 收到的全部命令，命令名统一为大写
        block_delay: BLPOP/BRPOP timeout 为 0 时的阻塞秒数
    """

    daemon_threads = True
    allow_reuse_address = True

    def __init__(self, block_delay: float = 1.0):
        super().__init__(("127.0.0.1", 0), _RespHandler)
        self.block_delay = block_delay
        self.commands: List[Tuple[str, ...]] = []
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None

    @property
    def port(self) -> int:
        return self.server_address[1]

    def start(self) -> "RespStubServer":
        self._thread = threading.Thread(target=self.serve_forever, daemon=True)
        self._thread.start()
        return self

    def stop(self) -> None:
        self.shutdown()
        self.server_close()

    def record(self, command: Tuple[str, ...]) -> None:
        with self._lock:
            self.commands.append((command[0].upper(),) + command[1:])

    def received(self, name: str) -> List[Tuple[str, ...]]:
        """某个命令的全部调用记录"""
        with self._lock:
            return [c for c in self.commands if c[0] == name.upper()]

    def reply(self, command: Tuple[str, ...]) -> bytes:
        name = command[0].upper()
        if name == "PING":
            return b"+PONG\r\n"
        if name in ("BLPOP", "BRPOP"):
            timeout = float(command[-1])
            if timeout:
                time.sleep(timeout)
                return b"*-1\r\n"
            time.sleep(self.block_delay)
            key = command[1].encode()
            return b"*2\r\n$%d\r\n%s\r\n$5\r\njob-1\r\n" % (len(key), key)
        return b"+OK\r\n"
