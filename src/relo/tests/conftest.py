"""测试公共夹具"""
import os
import sys
from datetime import datetime
from pathlib import Path

import pytest
from loguru import logger


def _make_file(path: Path, content: bytes = b"data", mtime: datetime = None) -> Path:
    """创建文件并可选地设置修改时间"""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    if mtime is not None:
        ts = mtime.timestamp()
        os.utime(path, (ts, ts))
    return path


@pytest.fixture
def make_file():
    return _make_file


@pytest.fixture
def log_records():
    """捕获 loguru 日志记录"""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


@pytest.fixture(autouse=True)
def reset_logger():
    """CLI 测试会替换处理器，每个测试后恢复默认的控制台输出"""
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def source_dir(tmp_path):
    path = tmp_path / "source"
    path.mkdir()
    return path


@pytest.fixture
def dest_dir(tmp_path):
    return tmp_path / "dest"
