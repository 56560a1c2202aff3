"""
目标目录模块 - 根据文件时间计算并创建 年/月-日 目录
"""
from datetime import datetime
from pathlib import Path


def date_key(timestamp: datetime) -> Path:
    """时间对应的相对目录，如 2024/03-07"""
    return Path(f"{timestamp.year:04d}") / f"{timestamp.month:02d}-{timestamp.day:02d}"


def resolve_dir(dest_root: Path, timestamp: datetime) -> Path:
    """返回 dest_root/年/月-日，不存在则创建

    多个线程同时创建同一目录时，"已存在" 视为成功。

    Raises:
        OSError: 目录创建失败
    """
    dest_dir = Path(dest_root) / date_key(timestamp)
    if not dest_dir.is_dir():
        dest_dir.mkdir(parents=True, exist_ok=True)
    return dest_dir
