"""分层设置解析：键规范化、文件编解码、优先级解析、类型转换与派生视图。"""
# 导入设置门面，调用方通常只需要它。
from .core import Settings
# 导入宿主路径，便于在测试或嵌入场景中注入。
from .host import HostPaths
# 导入键工具与内置默认值，供诊断命令复用。
from .keys import PREFIX, key_for, logical_key_for, normalize_uri
from .resolver import DEFAULT_CONFIG
# 导入错误类型，让调用方无需关心其定义位置。
from bundlecfg.utils.errors import (
    BundleConfigError,
    ConfigRootNotFound,
    FileSystemAccessError,
    InvalidArgument,
    InvalidOption,
)

__all__ = [
    "DEFAULT_CONFIG",
    "PREFIX",
    "BundleConfigError",
    "ConfigRootNotFound",
    "FileSystemAccessError",
    "HostPaths",
    "InvalidArgument",
    "InvalidOption",
    "Settings",
    "key_for",
    "logical_key_for",
    "normalize_uri",
]
