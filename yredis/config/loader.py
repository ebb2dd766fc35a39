"""配置加载器模块

从 YAML 文件加载配置，并转换为 Pydantic Settings 实例。

使用示例:
    from yredis.config import ConfigLoader, load_yaml_config, RedisSettings

    # 原始字典
    config = ConfigLoader.load("config/settings.yaml")

    # 只取 redis 段
    redis_settings = load_yaml_config(
        "config/settings.yaml", RedisSettings, section="redis"
    )
"""

import os
from typing import Any, Dict, Optional, Type, TypeVar

import yaml


T = TypeVar("T")


def _resolve_path(config_path: str, base_dir: Optional[str] = None) -> str:
    """把相对路径解析为绝对路径"""
    if os.path.isabs(config_path):
        return config_path
    if base_dir:
        return os.path.join(base_dir, config_path)
    return os.path.abspath(config_path)


class ConfigLoader:
    """YAML 配置加载器

    按绝对路径缓存解析结果，同一文件多次加载返回同一个字典。

    使用示例:
        config = ConfigLoader.load("config/settings.yaml")
        host = config.get("redis", {}).get("host")

        # 文件改动后重新加载
        config = ConfigLoader.reload("config/settings.yaml")
    """

    _cache: Dict[str, Dict[str, Any]] = {}

    @classmethod
    def load(
        cls,
        config_path: str,
        base_dir: Optional[str] = None,
        use_cache: bool = True
    ) -> Dict[str, Any]:
        """加载配置文件

        Args:
            config_path: 配置文件路径（相对或绝对路径）
            base_dir: 基础目录，用于解析相对路径
            use_cache: 是否使用缓存

        Returns:
            配置字典

        Raises:
            FileNotFoundError: 配置文件不存在
            yaml.YAMLError: YAML 解析错误
        """
        abs_path = _resolve_path(config_path, base_dir)

        if use_cache and abs_path in cls._cache:
            return cls._cache[abs_path]

        if not os.path.exists(abs_path):
            raise FileNotFoundError(f"配置文件不存在: {abs_path}")

        with open(abs_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}

        if use_cache:
            cls._cache[abs_path] = config
        return config

    @classmethod
    def reload(cls, config_path: str, base_dir: Optional[str] = None) -> Dict[str, Any]:
        """忽略缓存重新加载配置文件"""
        cls._cache.pop(_resolve_path(config_path, base_dir), None)
        return cls.load(config_path, base_dir, use_cache=True)

    @classmethod
    def clear_cache(cls):
        """清除所有配置缓存"""
        cls._cache.clear()

    @classmethod
    def get_cached_paths(cls) -> list:
        """获取所有已缓存的配置文件路径"""
        return list(cls._cache.keys())


def load_yaml_config(
    config_path: str,
    settings_class: Type[T],
    base_dir: Optional[str] = None,
    section: Optional[str] = None,
    **overrides
) -> T:
    """加载 YAML 配置并创建 Pydantic Settings 实例

    Args:
        config_path: 配置文件路径
        settings_class: Pydantic Settings 类
        base_dir: 基础目录
        section: 只使用配置中的某一段，如 "redis"
        **overrides: 覆盖配置的参数

    Returns:
        Settings 实例

    使用示例:
        settings = load_yaml_config(
            "config/settings.yaml",
            RedisSettings,
            section="redis",
            max_total=20,
        )
    """
    config = ConfigLoader.load(config_path, base_dir)
    if section is not None:
        config = config.get(section) or {}

    # 复制一份再合并，避免污染缓存中的字典
    data = dict(config)
    data.update(overrides)
    return settings_class(**data)


def load_env_file(env_path: str = ".env") -> Dict[str, str]:
    """加载 .env 文件

    支持 KEY=VALUE 格式，忽略空行和 # 注释，去掉成对的引号。

    Returns:
        环境变量字典，文件不存在时返回空字典
    """
    env_vars = {}
    if not os.path.exists(env_path):
        return env_vars

    with open(env_path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key, value = key.strip(), value.strip()
            if len(value) >= 2 and value[0] in ('"', "'") and value[-1] == value[0]:
                value = value[1:-1]
            env_vars[key] = value

    return env_vars


def set_env_from_file(env_path: str = ".env", override: bool = False):
    """从 .env 文件设置环境变量

    Args:
        env_path: .env 文件路径
        override: 是否覆盖已存在的环境变量
    """
    for key, value in load_env_file(env_path).items():
        if override or key not in os.environ:
            os.environ[key] = value


class ConfigManager:
    """配置管理器

    合并多个配置文件（如按环境覆盖），支持点号路径读写。

    使用示例:
        manager = ConfigManager(base_dir="config")
        manager.load("settings.yaml")
        manager.load("settings.prod.yaml", merge=True)

        host = manager.get("redis.host", "127.0.0.1")
    """

    def __init__(self, base_dir: str = None):
        self.base_dir = base_dir or os.getcwd()
        self._config: Dict[str, Any] = {}

    def load(self, config_path: str, merge: bool = False) -> Dict[str, Any]:
        """加载配置文件

        Args:
            config_path: 配置文件路径
            merge: 是否深度合并到现有配置
        """
        config = ConfigLoader.load(config_path, self.base_dir, use_cache=False)
        if merge:
            self._deep_merge(self._config, config)
        else:
            self._config = config
        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """获取配置值，key 支持 "redis.host" 格式"""
        value = self._config
        for k in key.split("."):
            if not isinstance(value, dict) or value.get(k) is None:
                return default
            value = value[k]
        return value

    def set(self, key: str, value: Any):
        """设置配置值，key 支持 "redis.host" 格式"""
        keys = key.split(".")
        config = self._config
        for k in keys[:-1]:
            config = config.setdefault(k, {})
        config[keys[-1]] = value

    def to_dict(self) -> Dict[str, Any]:
        """返回完整配置字典"""
        return self._config.copy()

    def _deep_merge(self, base: dict, update: dict):
        for key, value in update.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value
