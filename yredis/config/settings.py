"""
配置模块
提供 Redis 客户端的默认配置，业务项目可以继承并覆盖
"""

from typing import Any, Dict, Optional

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings
from redis.connection import parse_url

from ..utils import parse_file_size


class RedisSettings(BaseSettings):
    """Redis 连接与连接池配置

    使用示例:
        from yredis.config import RedisSettings

        redis_config = RedisSettings(
            host="10.0.0.5",
            port=6379,
            password="secret",
            max_total=200,
            max_idle=20,
            max_wait=2.0,
        )

        # 或者直接使用 URL（host/port/password/database 从 URL 中解析）
        redis_config = RedisSettings(url="redis://:secret@10.0.0.5:6379/0")

    环境变量:
        YREDIS_REDIS_HOST=10.0.0.5
        YREDIS_REDIS_PASSWORD=secret
        YREDIS_REDIS_MAX_TOTAL=200

    配置说明:
        - max_total: 连接池最大连接数（借出 + 空闲）
        - max_idle: 最多保留的空闲连接数，超出的连接归还时直接关闭
        - max_wait: 借出连接时最长等待秒数，None 表示一直等待，0 表示不等待
    """
    url: str = Field(default="", description="Redis连接URL，设置后覆盖 host/port/password/database")
    host: str = Field(default="127.0.0.1", description="Redis主机")
    port: int = Field(default=6379, ge=1, le=65535, description="Redis端口")
    database: int = Field(default=0, ge=0, le=15, description="默认库号（0-15）")
    username: Optional[str] = Field(default=None, description="ACL 用户名")
    password: Optional[str] = Field(default=None, description="密码，空字符串视为无密码")
    timeout: float = Field(default=3.0, gt=0, description="连接/读写超时（秒）")
    max_total: int = Field(default=10000, ge=1, description="最大连接数")
    max_idle: int = Field(default=50, ge=0, description="最多空闲连接数")
    max_wait: Optional[float] = Field(default=5.0, ge=0, description="借出连接最长等待时间（秒），None 表示不限")
    health_check_interval: int = Field(default=0, ge=0, description="连接空闲多久后使用前先 PING（秒），0 表示关闭")
    test_on_borrow: bool = Field(default=False, description="借出空闲连接前先 PING，失败则丢弃换新连接")
    lock_prefix: str = Field(default="", description="锁键名前缀")

    @field_validator("password", "username", mode="before")
    @classmethod
    def empty_to_none(cls, v: Any) -> Any:
        """空字符串等同于未设置"""
        if isinstance(v, str) and not v:
            return None
        return v

    @property
    def default_database(self) -> int:
        """连接默认所在的库号（URL 中的库号优先）"""
        if self.url:
            return int(parse_url(self.url).get("db", 0))
        return self.database

    @property
    def address(self) -> str:
        """用于日志的服务器地址（不含密码）"""
        if self.url:
            from ..log import mask_password
            return mask_password(self.url)
        return f"{self.host}:{self.port}/{self.database}"

    def connection_kwargs(self) -> Dict[str, Any]:
        """构造物理连接使用的 redis-py 参数"""
        kwargs: Dict[str, Any] = {
            "socket_timeout": self.timeout,
            "socket_connect_timeout": self.timeout,
            "health_check_interval": self.health_check_interval,
            "decode_responses": True,
        }
        if not self.url:
            kwargs.update(
                host=self.host,
                port=self.port,
                db=self.database,
                username=self.username,
                password=self.password,
            )
        return kwargs

    class Config:
        env_prefix = "YREDIS_REDIS_"


class LoggingSettings(BaseSettings):
    """日志配置

    使用示例:
        from yredis.config import LoggingSettings

        log_config = LoggingSettings(
            level="DEBUG",
            file_path="logs/redis.log",
            file_max_bytes="20MB",
        )

        max_bytes = log_config.parsed_file_max_bytes
    """
    level: str = Field(default="INFO", description="日志级别")
    file_path: Optional[str] = Field(default=None, description="日志文件路径，为空则不写文件")
    file_max_bytes: str = Field(default="10MB", description="单个日志文件最大大小")
    file_backup_count: int = Field(default=5, description="保留的备份文件数量")
    file_encoding: str = Field(default="utf-8", description="文件编码")
    enable_console: bool = Field(default=True, description="是否启用控制台输出")

    @computed_field
    @property
    def parsed_file_max_bytes(self) -> int:
        """解析文件最大字节数字符串为整数"""
        return parse_file_size(self.file_max_bytes)

    class Config:
        env_prefix = "YREDIS_LOG_"


class AppSettings(BaseSettings):
    """应用配置

    把 redis 与 logging 两段配置聚合在一起，便于从同一个 YAML 文件加载。

    配置优先级（从高到低）:
        构造参数（含 YAML 中的值）> 环境变量 > 代码中的默认值

    使用示例:
        from yredis.config import AppSettings, load_yaml_config

        settings = load_yaml_config("config/settings.yaml", AppSettings)
        client = RedisClient(settings.redis)

    YAML 配置示例 (config/settings.yaml):
        redis:
          host: 127.0.0.1
          port: 6379
          max_total: 200
          max_wait: 2.0
        logging:
          level: INFO
    """
    redis: RedisSettings = Field(default_factory=RedisSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
