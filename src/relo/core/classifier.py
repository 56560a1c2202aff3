"""
文件分类模块 - 判断文件是否需要转移

纯函数，无 I/O，可在多个线程中并发调用
"""
from pathlib import Path
from typing import AbstractSet, Optional

from ..config import IGNORED_NAMES, MEDIA_EXTENSIONS
from .models import Decision


def classify(
    file_name: str,
    extension: Optional[str],
    ignored_names: AbstractSet[str] = IGNORED_NAMES,
    allowed_extensions: AbstractSet[str] = MEDIA_EXTENSIONS,
) -> Decision:
    """根据文件名和扩展名判断是否接受该文件

    Args:
        file_name: 文件名（含扩展名）
        extension: 扩展名，可带或不带前导点，None 表示没有扩展名
        ignored_names: 忽略的文件名（小写）
        allowed_extensions: 允许的扩展名（小写，不带点）

    Returns:
        Decision: ACCEPT 或 REJECT
    """
    if file_name.lower() in ignored_names:
        return Decision.REJECT

    ext = (extension or '').lstrip('.').lower()
    if not ext:
        return Decision.REJECT

    return Decision.ACCEPT if ext in allowed_extensions else Decision.REJECT


def classify_path(path: Path) -> Decision:
    """对路径调用 classify"""
    return classify(path.name, path.suffix or None)
