"""设置门面：组合本地层、环境变量、全局层与默认值，并提供派生视图。"""  # 模块说明。
from __future__ import annotations  # 启用前向注解以提升类型兼容性。

import os  # 导入 os 以默认读取进程环境。
from pathlib import Path, PurePosixPath, PureWindowsPath  # 导入路径类型以判断绝对路径。
from typing import Any, Dict, Iterable, List, Mapping, Optional  # 导入类型注解辅助代码可读性。
from urllib.parse import urlsplit  # 导入 urlsplit 以提取凭据查找用的主机名。

from bundlecfg.settings import coercion  # 导入类型转换函数。
from bundlecfg.settings.codec import config_ignored, quote_value  # 导入开关判断与值引用格式。
from bundlecfg.settings.host import HostPaths  # 导入宿主路径事实。
from bundlecfg.settings.keys import PREFIX, key_for, logical_key_for  # 导入键规范化工具。
from bundlecfg.settings.layers import ConfigLayer  # 导入配置层。
from bundlecfg.settings.mirrors import MIRROR_PREFIX, MirrorTable  # 导入镜像表。
from bundlecfg.settings.resolver import PrecedenceResolver  # 导入优先级解析器。
from bundlecfg.utils.errors import ConfigRootNotFound, InvalidOption  # 导入错误类型。
from bundlecfg.utils.logging import StructuredLogger, default_logger  # 导入结构化日志器。

DEFAULT_CACHE_PATH = "vendor/cache"  # 未配置 cache_path 时使用的相对路径。
LOCAL_OVERRIDE_PREFIX = "local."  # 本地仓库覆盖设置的逻辑键前缀。


class Settings:
    """面向调用方的设置对象，所有读写都以逻辑键为参数。

    读取顺序为 本地文件 → 环境变量 → 全局文件 → 内置默认值。写入总是落在
    明确指定的那一层，并立即把整层内容回写到对应文件。
    """

    def __init__(
        self,
        root: str | os.PathLike[str] | None = None,
        environ: Mapping[str, str] | None = None,
        host: HostPaths | None = None,
        logger: StructuredLogger | None = None,
    ) -> None:
        """加载本地与全局两个配置层；environ 默认为 os.environ。"""  # 方法说明。
        self.root = Path(root) if root is not None else None
        self.environ: Mapping[str, str] = os.environ if environ is None else environ
        self.host = host or HostPaths()
        self._logger = logger or default_logger()
        self.local = ConfigLayer("local", self.local_config_file, self.environ, self._logger)
        self.global_ = ConfigLayer("global", self.global_config_file, self.environ, self._logger)
        self.resolver = PrecedenceResolver(self.local, self.environ, self.global_)

    # ------------------------------------------------------------------
    # 文件位置
    # ------------------------------------------------------------------
    @property
    def local_config_file(self) -> Optional[Path]:
        return self.host.local_config_file(self.root)

    @property
    def global_config_file(self) -> Path:
        return self.host.global_config_file(self.environ)

    @property
    def ignore_config(self) -> bool:
        """是否通过环境变量关闭了配置文件加载。"""
        return config_ignored(self.environ)

    # ------------------------------------------------------------------
    # 基本读写
    # ------------------------------------------------------------------
    def get(self, name: Any) -> Any:
        """解析并按键分类转换值；未配置时返回 None。"""  # 方法说明。
        return coercion.coerce(name, self.resolver.resolve(name))

    def __getitem__(self, name: Any) -> Any:
        return self.get(name)

    def set_local(self, name: Any, value: Any) -> Any:
        """写入项目本地配置；没有项目根目录时抛出 ConfigRootNotFound。"""  # 方法说明。
        if self.local_config_file is None:
            raise ConfigRootNotFound("Could not locate Gemfile")
        return self.local.set(key_for(name), value)

    def __setitem__(self, name: Any, value: Any) -> None:
        self.set_local(name, value)

    def set_global(self, name: Any, value: Any) -> Any:
        """写入用户全局配置；值为 None 时删除该键。"""  # 方法说明。
        return self.global_.set(key_for(name), value)

    def delete(self, name: Any) -> None:
        """仅从本地层删除键。"""  # 方法说明。
        self.local.delete(key_for(name))

    def all_keys(self) -> List[str]:
        """返回全局层、本地层与 BUNDLE_ 环境变量中出现过的全部逻辑键。"""  # 方法说明。
        env_keys = [key for key in self.environ if key.startswith(PREFIX)]
        seen: Dict[str, None] = {}
        for internal in [*self.global_.keys(), *self.local.keys(), *env_keys]:
            seen.setdefault(logical_key_for(internal), None)
        return list(seen)

    def locations(self, name: Any) -> Dict[str, Any]:
        """返回各来源中该键的原始值。"""
        return self.resolver.locations(name)

    def pretty_values(self, name: Any) -> List[str]:
        """返回人类可读的来源说明，未配置时给出提示语。"""  # 方法说明。
        key = key_for(name)
        lines: List[str] = []
        if key in self.local:
            lines.append(f"Set for your local app ({self.local_config_file}): {quote_value(self.local.get(key))}")
        env_value = self.environ.get(key)
        if env_value is not None:
            lines.append(f"Set via {key}: {quote_value(env_value)}")
        if key in self.global_:
            lines.append(f"Set for the current user ({self.global_config_file}): {quote_value(self.global_.get(key))}")
        if not lines:
            return [f"You have not configured a value for `{name}`"]
        return lines

    # ------------------------------------------------------------------
    # 数组设置
    # ------------------------------------------------------------------
    def get_array(self, name: str) -> List[str]:
        """读取以冒号连接的多值设置，未配置时返回空列表。"""  # 方法说明。
        value = self.get(name)
        if not value or not isinstance(value, str):
            return []
        return [segment for segment in value.split(":") if segment]

    def set_array(self, name: str, values: Optional[Iterable[Any]]) -> None:
        """写入多值设置；空集合删除该键，None 不做任何事。"""  # 方法说明。
        if values is None:
            return
        items = [str(item) for item in values]
        self.set_local(name, ":".join(items) if items else None)

    @property
    def with_groups(self) -> List[str]:
        return self.get_array("with")

    @with_groups.setter
    def with_groups(self, values: Iterable[Any]) -> None:
        self.set_array("with", values)

    @property
    def without_groups(self) -> List[str]:
        return self.get_array("without")

    @without_groups.setter
    def without_groups(self, values: Iterable[Any]) -> None:
        self.set_array("without", values)

    # ------------------------------------------------------------------
    # 镜像、凭据与本地覆盖
    # ------------------------------------------------------------------
    def gem_mirrors(self) -> MirrorTable:
        """扫描全部 mirror.<源> 键并构建镜像表，结果不缓存。"""  # 方法说明。
        mirrors = MirrorTable()
        for name in self.all_keys():
            if name.startswith(MIRROR_PREFIX):
                mirrors.parse(name, self.get(name))
        return mirrors

    def mirror_for(self, uri: Any) -> str:
        """返回 uri 对应的镜像地址，未登记时返回规范化后的 uri。"""
        return self.gem_mirrors().mirror_for(uri)

    def credentials_for(self, uri: Any) -> Any:
        """先按完整 URI 查找凭据，再退回到主机名。"""  # 方法说明。
        text = str(uri)
        credentials = self.get(text)
        if credentials not in (None, False):
            return credentials
        host = urlsplit(text).hostname
        return self.get(host) if host else None

    def local_overrides(self) -> Dict[str, Any]:
        """返回 local.<名称> 设置组成的 名称 → 本地路径 映射。"""  # 方法说明。
        repos: Dict[str, Any] = {}
        for name in self.all_keys():
            if name.startswith(LOCAL_OVERRIDE_PREFIX):
                repos[name[len(LOCAL_OVERRIDE_PREFIX):]] = self.get(name)
        return repos

    # ------------------------------------------------------------------
    # 路径
    # ------------------------------------------------------------------
    @property
    def path(self) -> str:
        """安装路径：本地层优先并追加作用域子目录；环境或全局值原样返回。"""  # 方法说明。
        key = key_for("path")
        unscoped = self.environ.get(key)
        if unscoped is None:
            unscoped = self.global_.get(key)
        if unscoped is not None and key not in self.local:
            return unscoped
        configured = self.get("path")
        if configured not in (None, False):
            return f"{configured}/{self.host.scope}"
        return self.host.gem_dir

    @property
    def allow_sudo(self) -> bool:
        """本地层没有 path 覆盖时才允许提权安装。"""
        return key_for("path") not in self.local

    @property
    def app_cache_path(self) -> str:
        """缓存目录，必须是相对路径。"""  # 方法说明。
        path = self.get("cache_path") or DEFAULT_CACHE_PATH
        path = str(path)
        if path.startswith("/") or PurePosixPath(path).is_absolute() or PureWindowsPath(path).is_absolute():
            raise InvalidOption("Cache path must be relative to the bundle path")
        return path
