"""宿主环境提供的路径事实：用户目录、全局配置位置、解释器作用域与默认安装目录。"""  # 模块说明。
from __future__ import annotations  # 启用前向注解以提升类型兼容性。

import os  # 导入 os 以访问环境变量。
import sys  # 导入 sys 以读取解释器版本。
import sysconfig  # 导入 sysconfig 以获得默认安装目录。
from dataclasses import dataclass, field  # 导入 dataclass 以封装宿主参数。
from pathlib import Path  # 导入 Path 统一路径处理。
from typing import Mapping, Optional  # 导入类型注解辅助代码可读性。

CONFIG_ENV = "BUNDLE_CONFIG"  # 覆盖全局配置文件位置的环境变量。
USER_HOME_ENV = "BUNDLE_USER_HOME"  # 覆盖用户级目录的环境变量。


def _default_scope() -> str:
    """返回形如 cpython/3.11.0 的解释器作用域目录名。"""
    return f"{sys.implementation.name}/{sys.version_info.major}.{sys.version_info.minor}.0"


def _default_gem_dir() -> str:
    """返回当前解释器的默认安装目录。"""
    return sysconfig.get_paths()["purelib"]


@dataclass
class HostPaths:
    """宿主应用相关的路径；测试中可以整体注入。"""  # 数据类说明。

    home: Path = field(default_factory=Path.home)  # 用户主目录。
    scope: str = field(default_factory=_default_scope)  # 本地 path 设置追加的作用域子目录。
    gem_dir: str = field(default_factory=_default_gem_dir)  # 未配置 path 时的默认安装目录。

    def user_bundle_path(self, environ: Mapping[str, str]) -> Path:
        """用户级目录：BUNDLE_USER_HOME 优先，否则为 ~/.bundle。"""
        override = environ.get(USER_HOME_ENV)
        if override:
            return Path(override)
        return self.home / ".bundle"

    def global_config_file(self, environ: Mapping[str, str]) -> Path:
        """全局配置文件：BUNDLE_CONFIG 非空时使用它，否则为用户级目录下的 config。"""
        override = environ.get(CONFIG_ENV)
        if override:
            return Path(override)
        return self.user_bundle_path(environ) / "config"

    @staticmethod
    def local_config_file(root: str | os.PathLike[str] | None) -> Optional[Path]:
        """本地配置文件：项目根目录下的 config；没有根目录时为 None。"""
        if root is None:
            return None
        return Path(root) / "config"
