"""
程序全局配置模块

固定的过滤表（忽略文件名、支持的媒体扩展名）以及可选的 TOML 配置文件加载
"""
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import tomli
from loguru import logger

from .core.errors import ConfigError

# 系统/缩略图等垃圾文件，按文件名（不区分大小写）匹配
IGNORED_NAMES = frozenset({
    'thumbs.db',
    'ehthumbs.db',
    'ehthumbs_vista.db',
    'desktop.ini',
    '.ds_store',
    '.localized',
    '.picasa.ini',
    'picasa.ini',
    '.nomedia',
    'zbthumbnail.info',
    '.bridgesort',
    '.bridgelabelsandratings',
})

# 支持的图片格式
IMAGE_EXTENSIONS = frozenset({
    'jpg', 'jpeg', 'png', 'gif', 'bmp', 'tif', 'tiff', 'webp', 'heic', 'heif',
    'avif', 'raw', 'dng', 'cr2', 'cr3', 'nef', 'arw', 'orf', 'rw2', 'raf', 'srw',
})

# 支持的视频格式
VIDEO_EXTENSIONS = frozenset({
    'mp4', 'mov', 'avi', 'mkv', 'wmv', 'flv', 'webm', 'm4v', 'mpg', 'mpeg',
    '3gp', 'mts', 'm2ts', 'rmvb', 'vob',
})

# 支持的音频格式
AUDIO_EXTENSIONS = frozenset({
    'mp3', 'wav', 'flac', 'aac', 'm4a', 'ogg', 'wma', 'opus', 'aiff', 'ape',
})

MEDIA_EXTENSIONS = IMAGE_EXTENSIONS | VIDEO_EXTENSIONS | AUDIO_EXTENSIONS

# 默认日志目录
DEFAULT_LOG_DIR = Path.home() / ".relo" / "logs"

# 配置文件中的表名
CONFIG_SECTION = "relo"


@dataclass
class RelocConfig:
    """运行配置"""
    jobs: Optional[int] = None  # 线程数，None 表示使用 CPU 核心数
    use_links: bool = True  # 同一卷内优先使用硬链接
    log_dir: Optional[Path] = None
    console_level: str = "INFO"

    def merged(self, **overrides: Any) -> "RelocConfig":
        """返回用命令行参数覆盖后的新配置，值为 None 的参数不覆盖"""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        for key, value in overrides.items():
            if value is not None:
                values[key] = value
        return RelocConfig(**values)


def _coerce(data: Dict[str, Any], config_path: Path) -> RelocConfig:
    known = {f.name for f in fields(RelocConfig)}
    for key in data:
        if key not in known:
            logger.warning(f"忽略未知配置项 '{key}' ({config_path})")

    config = RelocConfig()

    jobs = data.get('jobs')
    if jobs is not None:
        if isinstance(jobs, bool) or not isinstance(jobs, int) or jobs < 1:
            raise ConfigError(f"配置项 jobs 必须是正整数: {jobs!r} ({config_path})")
        config.jobs = jobs

    use_links = data.get('use_links')
    if use_links is not None:
        if not isinstance(use_links, bool):
            raise ConfigError(f"配置项 use_links 必须是布尔值: {use_links!r} ({config_path})")
        config.use_links = use_links

    log_dir = data.get('log_dir')
    if log_dir is not None:
        if not isinstance(log_dir, str):
            raise ConfigError(f"配置项 log_dir 必须是字符串路径: {log_dir!r} ({config_path})")
        config.log_dir = Path(log_dir).expanduser()

    console_level = data.get('console_level')
    if console_level is not None:
        if not isinstance(console_level, str):
            raise ConfigError(f"配置项 console_level 必须是字符串: {console_level!r} ({config_path})")
        config.console_level = console_level.upper()

    return config


def load_config(config_path: Optional[Path] = None) -> RelocConfig:
    """加载 TOML 配置文件

    Args:
        config_path: 配置文件路径，为 None 时返回默认配置

    Returns:
        RelocConfig: 解析后的配置

    Raises:
        ConfigError: 文件无法读取、格式错误或配置值无效
    """
    if config_path is None:
        return RelocConfig()

    config_path = Path(config_path)
    try:
        with open(config_path, 'rb') as f:
            data = tomli.load(f)
    except OSError as e:
        raise ConfigError(f"无法读取配置文件 '{config_path}': {e}") from e
    except tomli.TOMLDecodeError as e:
        raise ConfigError(f"配置文件格式错误 '{config_path}': {e}") from e

    section = data.get(CONFIG_SECTION, {})
    if not isinstance(section, dict):
        raise ConfigError(f"配置文件中的 [{CONFIG_SECTION}] 必须是表 ({config_path})")

    config = _coerce(section, config_path)
    logger.debug(f"已加载配置文件: {config_path}")
    return config
