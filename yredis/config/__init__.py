"""配置模块

提供配置管理功能：
- RedisSettings: Redis 连接与连接池配置，支持 YAML + 环境变量
- LoggingSettings: 日志配置
- AppSettings: 聚合配置
- ConfigLoader / ConfigManager: YAML 配置加载

快速开始:
    from yredis.config import RedisSettings, load_yaml_config

    settings = load_yaml_config("config/settings.yaml", RedisSettings, section="redis")

配置优先级: 构造参数（含 YAML）> 环境变量 > 默认值
"""

from .settings import (
    AppSettings,
    LoggingSettings,
    RedisSettings,
)

from .loader import (
    ConfigLoader,
    ConfigManager,
    load_yaml_config,
    load_env_file,
    set_env_from_file,
)

__all__ = [
    "AppSettings",
    "LoggingSettings",
    "RedisSettings",

    "ConfigLoader",
    "ConfigManager",
    "load_yaml_config",
    "load_env_file",
    "set_env_from_file",
]
