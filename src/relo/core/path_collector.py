"""
路径收集模块 - 递归收集源目录下的所有文件

单个子目录或条目读取失败只计数并记录日志，不会中断整个遍历。
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from loguru import logger

from .errors import ScanError, SourceDirectoryError


@dataclass
class ScanResult:
    """遍历结果"""
    files: List[Path] = field(default_factory=list)
    errors: int = 0  # 读取失败的目录或条目数


def validate_source(source_root: Path) -> Path:
    """检查源目录存在且是文件夹

    Raises:
        SourceDirectoryError: 源目录不存在或不是文件夹
    """
    source_root = Path(source_root)
    if not source_root.exists():
        raise SourceDirectoryError(f"文件夹不存在: {source_root}")
    if not source_root.is_dir():
        raise SourceDirectoryError(f"路径不是一个文件夹: {source_root}")
    return source_root


def enumerate_files(source_root: Path) -> ScanResult:
    """收集 source_root 下所有普通文件（包括指向文件的符号链接）

    不跟随指向目录的符号链接，其他类型的条目忽略。

    Args:
        source_root: 源目录

    Returns:
        ScanResult: 完整的文件列表和遍历错误数

    Raises:
        SourceDirectoryError: 源目录不存在或不是文件夹
        ScanError: 无法读取源目录本身
    """
    source_root = validate_source(source_root)

    try:
        with os.scandir(source_root) as it:
            root_entries = list(it)
    except OSError as e:
        raise ScanError(f"无法读取文件夹 '{source_root}': {e}") from e

    result = ScanResult()
    stack = [root_entries]

    while stack:
        entries = stack.pop()
        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=False):
                    with os.scandir(entry.path) as it:
                        stack.append(list(it))
                elif entry.is_file():
                    result.files.append(Path(entry.path))
            except OSError as e:
                logger.error(f"读取 '{entry.path}' 时出错: {e}")
                result.errors += 1

    logger.info(f"从文件夹 '{source_root}' 收集了 {len(result.files)} 个文件")
    if result.errors:
        logger.warning(f"遍历时有 {result.errors} 个条目读取失败")
    return result
