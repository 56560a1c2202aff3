"""
relo 的命令行入口点，使用 Typer 实现命令行界面

`relo -s /path/to/source -d /path/to/dest`
"""
import sys
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.prompt import Prompt
from rich.table import Table

from . import __version__
from .config import load_config
from .core.errors import RelocationError
from .core.models import CopyOutcome, OutcomeKind, Statistics
from .core.relocator import relocate
from .log import setup_logger

app = typer.Typer(help="媒体文件转移工具 - 按修改日期复制到 年/月-日 目录")

console = Console()

# 进度条中各结果的显示样式
_OUTCOME_LABELS = {
    OutcomeKind.COPIED: "[green]复制:[/green]",
    OutcomeKind.SKIPPED_EXISTING: "[yellow]跳过(已存在):[/yellow]",
    OutcomeKind.SKIPPED_UNSUPPORTED: "[yellow]跳过:[/yellow]",
    OutcomeKind.FAILED: "[red]错误:[/red]",
}


def _version_callback(value: bool):
    if value:
        console.print(f"relo {__version__}")
        raise typer.Exit()


def _ask_path(prompt: str) -> Path:
    path_str = ""
    while not path_str:
        path_str = Prompt.ask(prompt, console=console).strip().strip('"\'')
        if not path_str:
            logger.warning("路径不能为空，请重新输入")
    return Path(path_str)


def print_summary(stats: Statistics):
    """用表格输出统计结果"""
    table = Table(title="转移总结")
    table.add_column("处理", justify="right")
    table.add_column("复制", justify="right", style="green")
    table.add_column("跳过", justify="right", style="yellow")
    table.add_column("错误", justify="right", style="red" if stats.errors else "green")
    table.add_row(str(stats.processed), str(stats.copied), str(stats.skipped), str(stats.errors))
    console.print(table)


def run_with_progress(source: Path, dest: Path, jobs: Optional[int], use_links: bool) -> Statistics:
    """带进度条执行转移"""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        TextColumn("•"),
        TextColumn("[{task.completed}/{task.total}]"),
        TextColumn("•"),
        TimeElapsedColumn(),
        console=console,
        transient=False
    ) as progress:
        task_id = progress.add_task("[cyan]正在扫描文件...", total=None)

        def on_scanned(total: int):
            progress.update(task_id, total=total, description="[cyan]正在转移文件...")

        def on_outcome(outcome: CopyOutcome):
            label = _OUTCOME_LABELS[outcome.kind]
            progress.update(task_id, advance=1, description=f"{label} [dim]{outcome.source.name}[/dim]")

        stats = relocate(
            source,
            dest,
            jobs,
            use_links=use_links,
            on_outcome=on_outcome,
            on_scanned=on_scanned,
        )
        progress.update(task_id, description="[bold green]转移完成[/bold green]")

    return stats


@app.command()
def relo(
    source: Optional[Path] = typer.Option(None, "--source", "-s", help="设置转移原目录"),
    dest: Optional[Path] = typer.Option(None, "--dest", "-d", help="设置转移目标目录"),
    jobs: Optional[int] = typer.Option(None, "--jobs", "-j", min=1, help="使用的线程数量，默认为 CPU 核心数"),
    no_link: bool = typer.Option(False, "--no-link", help="不尝试硬链接，总是复制文件内容"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="TOML 配置文件路径"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="在控制台输出调试日志"),
    version: bool = typer.Option(False, "--version", callback=_version_callback, is_eager=True, help="打印版本号"),
):
    """递归复制源目录中的媒体文件到 目标目录/年/月-日/"""
    try:
        config = load_config(config_path)
    except RelocationError as e:
        logger.error(f"错误: {e}")
        raise typer.Exit(code=1)

    config = config.merged(
        jobs=jobs,
        use_links=False if no_link else None,
        console_level="DEBUG" if verbose else None,
    )
    setup_logger(app_name="relo", log_dir=config.log_dir, console_level=config.console_level, console=console)

    if source is None:
        source = _ask_path("[bold cyan]请输入源目录路径[/bold cyan]")
    if dest is None:
        dest = _ask_path("[bold cyan]请输入目标根目录路径[/bold cyan]")

    try:
        stats = run_with_progress(source, dest, config.jobs, config.use_links)
    except RelocationError as e:
        logger.error(f"错误: {e}")
        raise typer.Exit(code=1)

    print_summary(stats)


def main():
    """主入口函数"""
    try:
        app()
    except KeyboardInterrupt:
        logger.error("操作已中断")
        sys.exit(130)


if __name__ == "__main__":
    main()
