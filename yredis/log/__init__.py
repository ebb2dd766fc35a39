"""日志模块

使用示例:
    from yredis.log import setup_logger, get_logger

    # 打开 yredis 的调试日志
    setup_logger("yredis", level="DEBUG", log_file="logs/redis.log")

    logger = get_logger()
"""

from .logger import (
    setup_logger,
    setup_root_logger,
    create_formatter,
    mask_password,
    MicrosecondFormatter,
    DEFAULT_LOG_FORMAT,
    logger,
    get_logger,
)

__all__ = [
    "setup_logger",
    "setup_root_logger",
    "create_formatter",
    "mask_password",
    "MicrosecondFormatter",
    "DEFAULT_LOG_FORMAT",
    "logger",
    "get_logger",
]
