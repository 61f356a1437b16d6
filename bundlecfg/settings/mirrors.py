"""源地址到镜像地址的映射表，每次请求时从当前设置重新构建。"""  # 模块说明。
from __future__ import annotations  # 启用前向注解以提升类型兼容性。

from typing import Any, Dict, Optional  # 导入类型注解辅助代码可读性。
from urllib.parse import urlsplit  # 导入 urlsplit 以提取主机名。

from bundlecfg.settings.keys import normalize_uri  # 复用 URI 规范化逻辑。

MIRROR_PREFIX = "mirror."  # 镜像设置的逻辑键前缀。


def _host_of(uri: str) -> Optional[str]:
    """返回 URI 的小写主机名，无法解析时返回 None。"""
    try:
        return urlsplit(uri).hostname
    except ValueError:
        return None


class MirrorTable:
    """记录 源 → 镜像 的映射；源可以是完整 URI，也可以是裸主机名。"""  # 类说明。

    def __init__(self) -> None:
        self._by_uri: Dict[str, str] = {}  # 规范化 URI → 镜像。
        self._by_host: Dict[str, str] = {}  # 裸主机名 → 镜像。

    def __len__(self) -> int:
        return len(self._by_uri) + len(self._by_host)

    def parse(self, logical_key: str, value: Any) -> None:
        """登记一个 mirror.<源> 设置；非镜像键或空值被忽略。"""  # 方法说明。
        if not logical_key.startswith(MIRROR_PREFIX) or value in (None, "", False):
            return
        source = logical_key[len(MIRROR_PREFIX):]
        if "://" in source:
            self._by_uri[normalize_uri(source)] = str(value)
        else:
            self._by_host[source.strip("/").lower()] = str(value)

    def mirror_for(self, uri: Any) -> str:
        """返回登记的镜像地址；未登记时返回规范化后的原地址。"""  # 方法说明。
        normalized = normalize_uri(uri)
        replacement = self._by_uri.get(normalized)
        if replacement is None:
            host = _host_of(normalized)
            replacement = self._by_host.get(host or "")
            if replacement is None and host:
                # 路径无关的主机匹配：任何同主机的完整 URI 登记都可以命中。
                for source, candidate in self._by_uri.items():
                    if _host_of(source) == host:
                        replacement = candidate
                        break
        if replacement is None:
            return normalized
        return normalize_uri(replacement)
