"""relo 数据模型"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class Decision(str, Enum):
    """分类结果"""
    ACCEPT = "accept"
    REJECT = "reject"


class CopyMethod(str, Enum):
    """文件落地方式"""
    LINKED = "linked"  # 同卷硬链接，不复制数据
    COPIED = "copied"  # 逐字节复制


class OutcomeKind(str, Enum):
    """单个文件的处理结果类型"""
    COPIED = "copied"
    SKIPPED_EXISTING = "skipped_existing"
    SKIPPED_UNSUPPORTED = "skipped_unsupported"
    FAILED = "failed"


@dataclass(frozen=True)
class CopyOutcome:
    """单个文件的处理结果，每个文件只产生一次"""
    kind: OutcomeKind
    source: Path
    target: Optional[Path] = None
    method: Optional[CopyMethod] = None
    reason: Optional[str] = None

    @classmethod
    def copied(cls, source: Path, target: Path, method: CopyMethod) -> "CopyOutcome":
        return cls(OutcomeKind.COPIED, source, target, method=method)

    @classmethod
    def skipped_existing(cls, source: Path, target: Path) -> "CopyOutcome":
        return cls(OutcomeKind.SKIPPED_EXISTING, source, target)

    @classmethod
    def skipped_unsupported(cls, source: Path) -> "CopyOutcome":
        return cls(OutcomeKind.SKIPPED_UNSUPPORTED, source)

    @classmethod
    def failed(cls, source: Path, reason: str, target: Optional[Path] = None) -> "CopyOutcome":
        return cls(OutcomeKind.FAILED, source, target, reason=reason)

    @property
    def is_skipped(self) -> bool:
        return self.kind in (OutcomeKind.SKIPPED_EXISTING, OutcomeKind.SKIPPED_UNSUPPORTED)


@dataclass(frozen=True)
class Statistics:
    """转移统计

    全零值是合并的单位元，``+`` 按字段相加，满足交换律和结合律，
    因此任意分区方式、任意完成顺序合并出的结果都相同。

    scan_errors 记录遍历阶段的错误，它们计入 errors 但不计入 processed。
    """
    processed: int = 0
    copied: int = 0
    skipped: int = 0
    errors: int = 0
    scan_errors: int = 0

    def __add__(self, other: "Statistics") -> "Statistics":
        if not isinstance(other, Statistics):
            return NotImplemented
        return Statistics(
            processed=self.processed + other.processed,
            copied=self.copied + other.copied,
            skipped=self.skipped + other.skipped,
            errors=self.errors + other.errors,
            scan_errors=self.scan_errors + other.scan_errors,
        )

    def record(self, outcome: CopyOutcome) -> "Statistics":
        """计入一个文件的处理结果"""
        if outcome.kind == OutcomeKind.COPIED:
            delta = Statistics(processed=1, copied=1)
        elif outcome.is_skipped:
            delta = Statistics(processed=1, skipped=1)
        else:
            delta = Statistics(processed=1, errors=1)
        return self + delta

    def with_scan_errors(self, count: int) -> "Statistics":
        """把遍历阶段的错误数加到 errors 上"""
        return self + Statistics(errors=count, scan_errors=count)

    @property
    def is_consistent(self) -> bool:
        return self.processed == self.copied + self.skipped + (self.errors - self.scan_errors)

    def summary(self) -> str:
        return (
            f"处理 {self.processed} 个文件: 复制 {self.copied}, "
            f"跳过 {self.skipped}, 错误 {self.errors}"
        )
