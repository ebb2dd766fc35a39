"""版本信息"""

__version__ = "0.1.0"
__author__ = "yafo-ai"
__description__ = "Redis 连接池、命令封装与分布式锁"
