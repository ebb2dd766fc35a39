"""文件大小解析工具

日志配置中的文件大小使用字符串表示，如 "10MB"、"512KB"。

使用示例:
    from yredis.utils import parse_file_size

    size = parse_file_size("10MB")   # 返回 10485760
    size = parse_file_size(1024)     # 返回 1024
"""

from typing import Union


# 单位转换表（按长度降序排列，先匹配 KB 再匹配 B）
SIZE_UNITS = [
    ('TB', 1024 ** 4),
    ('GB', 1024 ** 3),
    ('MB', 1024 ** 2),
    ('KB', 1024),
    ('B', 1),
]

SIZE_UNIT_ALIASES = {
    'T': 'TB',
    'G': 'GB',
    'M': 'MB',
    'K': 'KB',
}


def parse_file_size(size_str: Union[str, int, float]) -> int:
    """解析文件大小字符串为字节数

    Args:
        size_str: 文件大小字符串，如 "10MB", "1.5GB"；也可以直接传入字节数

    Returns:
        字节数

    Raises:
        ValueError: 格式无效
    """
    if isinstance(size_str, (int, float)):
        return int(size_str)

    text = str(size_str).strip().upper()
    if not text:
        raise ValueError("文件大小字符串不能为空")

    if text[-1] in SIZE_UNIT_ALIASES:
        text = text[:-1] + SIZE_UNIT_ALIASES[text[-1]]

    for unit, multiplier in SIZE_UNITS:
        if text.endswith(unit):
            number_str = text[:-len(unit)].strip()
            try:
                return int(float(number_str) * multiplier)
            except ValueError:
                raise ValueError(f"无法解析文件大小: {size_str}")

    try:
        return int(float(text))
    except ValueError:
        raise ValueError(f"无法解析文件大小: {size_str}")
