"""致命错误类型：出现时整个转移任务在开始处理文件之前中止"""


class RelocationError(Exception):
    """转移任务无法继续时抛出的基础异常"""
    pass


class SourceDirectoryError(RelocationError):
    """源目录不存在或不是文件夹"""
    pass


class ScanError(RelocationError):
    """无法读取源目录本身，拿不到文件列表"""
    pass


class ConfigError(RelocationError):
    """配置文件无法读取或配置值无效"""
    pass
