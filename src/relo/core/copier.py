"""
文件复制模块 - 把单个文件放入按日期划分的目标目录

先尝试同卷硬链接（只写目录项，不复制数据），失败后再逐字节复制。
两种方式都以独占方式创建目标文件，目标已存在时不会覆盖。
"""
import errno
import os
import shutil
import uuid
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Sequence

from loguru import logger

from .destination import resolve_dir
from .models import CopyMethod, CopyOutcome

# 逐字节复制时的缓冲区大小
COPY_BUFSIZE = 1024 * 1024

# 复制过程中的临时文件后缀
PART_SUFFIX = ".relo-part"


@dataclass(frozen=True)
class Attempt:
    """一种落地方式：method 记录方式，run(source, target) 失败时抛出 OSError"""
    method: CopyMethod
    run: Callable[[Path, Path], None]


def _link(source: Path, target: Path) -> None:
    os.link(source, target)


def _publish(tmp: Path, target: Path) -> None:
    """把临时文件以独占方式放到目标位置"""
    try:
        os.link(tmp, target)
        return
    except FileExistsError:
        raise
    except OSError as e:
        logger.debug(f"无法通过硬链接发布 '{target}': {e}，改用重命名")
    if os.path.lexists(target):
        raise FileExistsError(errno.EEXIST, "目标文件已存在", str(target))
    os.replace(tmp, target)


def _copy_bytes(source: Path, target: Path) -> None:
    """复制到同目录下的临时文件后再发布，中途失败不会在目标位置留下半个文件"""
    # 临时文件名与目标文件名无关，长文件名不会超出长度限制
    tmp = target.with_name(f".relo-{uuid.uuid4().hex}{PART_SUFFIX}")
    try:
        with open(source, 'rb') as src, open(tmp, 'xb') as dst:
            shutil.copyfileobj(src, dst, COPY_BUFSIZE)
        shutil.copystat(source, tmp)
        _publish(tmp, target)
    finally:
        if os.path.lexists(tmp):
            try:
                tmp.unlink()
            except OSError as e:
                logger.warning(f"无法删除临时文件 '{tmp}': {e}")


LINK_THEN_COPY = (
    Attempt(CopyMethod.LINKED, _link),
    Attempt(CopyMethod.COPIED, _copy_bytes),
)
COPY_ONLY = (Attempt(CopyMethod.COPIED, _copy_bytes),)


def first_success(attempts: Sequence[Attempt], source: Path, target: Path) -> CopyOutcome:
    """按顺序尝试 attempts，第一个成功的方式生效

    某个方式失败只记 DEBUG 日志并继续下一个；目标已存在时立即跳过；
    全部失败时返回 FAILED，不抛出异常。
    """
    last_error = None
    for attempt in attempts:
        try:
            attempt.run(source, target)
        except FileExistsError:
            return CopyOutcome.skipped_existing(source, target)
        except OSError as e:
            logger.debug(f"{attempt.method.value} 方式失败 '{source}' -> '{target}': {e}")
            last_error = e
            continue
        return CopyOutcome.copied(source, target, attempt.method)

    return CopyOutcome.failed(
        source,
        f"复制 '{source}' 到 '{target}' 失败: {last_error}",
        target=target,
    )


def file_timestamp(source: Path) -> datetime:
    """文件最后修改时间（本地时区）

    不使用创建时间，部分文件系统没有可靠的创建时间。
    """
    return datetime.fromtimestamp(source.stat().st_mtime)


def copy_one(source: Path, dest_root: Path, *, use_links: bool = True) -> CopyOutcome:
    """把单个文件复制到 dest_root/年/月-日/文件名

    Args:
        source: 源文件路径
        dest_root: 目标根目录
        use_links: 是否先尝试硬链接

    Returns:
        CopyOutcome: COPIED / SKIPPED_EXISTING / FAILED，不会抛出 I/O 异常
    """
    source = Path(source)

    try:
        timestamp = file_timestamp(source)
    except OSError as e:
        return CopyOutcome.failed(source, f"无法读取文件信息 '{source}': {e}")

    try:
        dest_dir = resolve_dir(dest_root, timestamp)
    except OSError as e:
        return CopyOutcome.failed(source, f"无法创建目标目录 (源文件 '{source}'): {e}")

    target = dest_dir / source.name
    if os.path.lexists(target):
        return CopyOutcome.skipped_existing(source, target)

    attempts = LINK_THEN_COPY if use_links else COPY_ONLY
    return first_success(attempts, source, target)


copy_single = copy_one
