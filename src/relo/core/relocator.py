"""
文件转移核心模块 - 并行分类、复制并汇总统计
"""
import concurrent.futures
import os
from functools import reduce
from operator import add
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from loguru import logger

from .classifier import classify_path
from .copier import copy_one
from .models import CopyOutcome, Decision, OutcomeKind, Statistics
from .path_collector import enumerate_files

OutcomeCallback = Callable[[CopyOutcome], None]


def worker_count(jobs: Optional[int], total: int) -> int:
    """线程数：jobs 为正数时使用 jobs，否则使用 CPU 核心数，不超过文件数"""
    workers = jobs if jobs and jobs > 0 else (os.cpu_count() or 1)
    return max(1, min(workers, total))


def partition(files: Sequence[Path], parts: int) -> List[Sequence[Path]]:
    """把文件列表轮流分配到 parts 个分区"""
    return [files[i::parts] for i in range(parts)]


def log_outcome(outcome: CopyOutcome) -> None:
    """每个文件的处理结果各记一条日志"""
    if outcome.kind == OutcomeKind.COPIED:
        logger.info(f"复制 ({outcome.method.value}): '{outcome.source}' -> '{outcome.target}'")
    elif outcome.kind == OutcomeKind.SKIPPED_EXISTING:
        logger.info(f"跳过: 目标 '{outcome.target}' 已存在")
    elif outcome.kind == OutcomeKind.SKIPPED_UNSUPPORTED:
        logger.debug(f"跳过不支持的文件: '{outcome.source}'")
    else:
        logger.error(f"错误: {outcome.reason}")


def process_file(source: Path, dest_root: Path, use_links: bool = True) -> CopyOutcome:
    """处理单个文件：先分类，接受的文件再复制"""
    try:
        if classify_path(source) == Decision.REJECT:
            return CopyOutcome.skipped_unsupported(source)
        return copy_one(source, dest_root, use_links=use_links)
    except Exception as e:
        # 捕获单个文件的意外错误，不影响其他文件
        return CopyOutcome.failed(source, f"处理文件 '{source}' 时发生意外错误: {e}")


def _run_partition(
    files: Sequence[Path],
    dest_root: Path,
    use_links: bool,
    on_outcome: Optional[OutcomeCallback],
) -> Statistics:
    """在一个线程中顺序处理一个分区，返回该分区的统计"""
    stats = Statistics()
    for source in files:
        outcome = process_file(source, dest_root, use_links)
        log_outcome(outcome)
        stats = stats.record(outcome)
        if on_outcome is not None:
            try:
                on_outcome(outcome)
            except Exception as e:
                # 回调出错只记录日志，不影响统计和其他文件
                logger.warning(f"处理结果回调出错 '{outcome.source}': {e}")
    return stats


def relocate(
    source_root: Path,
    dest_root: Path,
    jobs: Optional[int] = None,
    *,
    use_links: bool = True,
    on_outcome: Optional[OutcomeCallback] = None,
    on_scanned: Optional[Callable[[int], None]] = None,
) -> Statistics:
    """把 source_root 下的媒体文件复制到 dest_root/年/月-日/

    Args:
        source_root: 源目录
        dest_root: 目标根目录，不存在时按需创建
        jobs: 线程数，None 或非正数表示使用 CPU 核心数
        use_links: 是否先尝试硬链接
        on_outcome: 每处理完一个文件调用一次（在工作线程中调用）
        on_scanned: 遍历完成后以文件总数调用一次

    Returns:
        Statistics: 汇总统计，单个文件的错误只计数，不会抛出

    Raises:
        SourceDirectoryError: 源目录不存在或不是文件夹
        ScanError: 无法读取源目录
    """
    scan = enumerate_files(source_root)
    dest_root = Path(dest_root)
    files = scan.files

    if on_scanned is not None:
        on_scanned(len(files))

    if not files:
        logger.warning("没有需要转移的文件")
        partials = []
    else:
        workers = worker_count(jobs, len(files))
        logger.info(f"目标根目录: {dest_root}")
        logger.info(f"使用线程数: {workers}")

        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(_run_partition, part, dest_root, use_links, on_outcome)
                for part in partition(files, workers)
            ]
            partials = [f.result() for f in concurrent.futures.as_completed(futures)]

    stats = reduce(add, partials, Statistics()).with_scan_errors(scan.errors)

    logger.info(f"转移总结: {stats.summary()}")
    return stats
