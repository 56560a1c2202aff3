"""
relo - 媒体文件按日期转移工具

递归扫描源目录，把图片、视频、音频文件复制到 目标目录/年/月-日/ 下
"""

__version__ = "0.1.0"

from .core.classifier import classify, classify_path
from .core.copier import copy_one, copy_single
from .core.destination import resolve_dir
from .core.errors import ConfigError, RelocationError, ScanError, SourceDirectoryError
from .core.models import CopyMethod, CopyOutcome, Decision, OutcomeKind, Statistics
from .core.path_collector import ScanResult, enumerate_files
from .core.relocator import relocate

__all__ = [
    # 核心功能
    'relocate',
    'copy_one',
    'copy_single',
    'classify',
    'classify_path',
    'resolve_dir',
    'enumerate_files',
    # 数据模型
    'CopyMethod',
    'CopyOutcome',
    'Decision',
    'OutcomeKind',
    'ScanResult',
    'Statistics',
    # 异常
    'RelocationError',
    'SourceDirectoryError',
    'ScanError',
    'ConfigError',
]
