"""
日志配置模块
"""
import os
from datetime import datetime
from pathlib import Path
from typing import Optional

from loguru import logger
from rich.console import Console
from rich.text import Text

from .config import DEFAULT_LOG_DIR


def setup_logger(
    app_name: str = "relo",
    log_dir: Optional[Path] = None,
    console_level: str = "INFO",
    console_output: bool = True,
    console: Optional[Console] = None,
) -> str:
    """配置 Loguru 日志系统

    Args:
        app_name: 应用名称，用于日志目录
        log_dir: 日志根目录，默认为 ~/.relo/logs
        console_level: 控制台日志级别
        console_output: 是否输出到控制台，默认为True
        console: 控制台日志经由该 rich Console 输出，进度条显示时日志打印在进度条上方

    Returns:
        str: 本次运行的日志文件路径
    """
    if log_dir is None:
        log_dir = DEFAULT_LOG_DIR

    # 清除默认处理器
    logger.remove()

    if console_output:
        if console is None:
            console = Console(stderr=True)

        def console_sink(message):
            console.print(Text.from_ansi(str(message).rstrip("\n")))

        logger.add(
            console_sink,
            level=console_level,
            colorize=True,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>"
        )

    current_time = datetime.now()
    date_str = current_time.strftime("%Y-%m-%d")
    hour_str = current_time.strftime("%H")
    minute_str = current_time.strftime("%M%S")

    dir_path = os.path.join(log_dir, app_name, date_str, hour_str)
    os.makedirs(dir_path, exist_ok=True)
    log_file = os.path.join(dir_path, f"{minute_str}.log")

    # 工作线程也会写日志，文件处理器使用 enqueue
    logger.add(
        log_file,
        level="DEBUG",
        rotation="10 MB",
        retention="30 days",
        compression="zip",
        encoding="utf-8",
        format="{time:YYYY-MM-DD HH:mm:ss} | {elapsed} | {level: <8} | {name}:{function}:{line} - {message}",
        enqueue=True,
    )

    logger.debug(f"日志系统已初始化，日志文件: {log_file}")
    return log_file
