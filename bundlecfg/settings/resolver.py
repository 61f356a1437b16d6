"""按 本地文件 → 环境变量 → 全局文件 → 内置默认值 的顺序解析原始值。"""  # 模块说明。
from __future__ import annotations  # 启用前向注解以提升类型兼容性。

from typing import Any, Dict, Mapping, Optional  # 导入类型注解辅助代码可读性。

from bundlecfg.settings.keys import key_for  # 导入逻辑键到内部键的转换。
from bundlecfg.settings.layers import ConfigLayer  # 导入配置层类型。

DEFAULT_CONFIG: Mapping[str, int] = {"retry": 3, "timeout": 10, "redirect": 5}  # 以逻辑键索引的内置默认值。


def default_for(name: Any) -> Optional[int]:
    """按未规范化的逻辑键查找内置默认值。"""
    return DEFAULT_CONFIG.get(str(name))


class PrecedenceResolver:
    """在四个来源之间按固定优先级查找原始值。"""  # 类说明。

    def __init__(self, local: ConfigLayer, environ: Mapping[str, str], global_: ConfigLayer) -> None:
        """保存本地层、环境映射与全局层的引用。"""  # 方法说明。
        self.local = local
        self.environ = environ  # 只读使用，不会被写入。
        self.global_ = global_

    def resolve(self, name: Any) -> Any:
        """返回第一个存在的值；空字符串同样视为存在。"""  # 方法说明。
        key = key_for(name)
        for source in (self.local.get(key), self.environ.get(key), self.global_.get(key)):
            if source is not None:
                return source
        return default_for(name)

    def locations(self, name: Any) -> Dict[str, Any]:
        """返回每个包含该键的来源及其原始值，用于诊断。"""  # 方法说明。
        key = key_for(name)
        found: Dict[str, Any] = {}
        if key in self.local:
            found["local"] = self.local.get(key)
        if self.environ.get(key) is not None:
            found["env"] = self.environ[key]
        if key in self.global_:
            found["global"] = self.global_.get(key)
        default = default_for(name)
        if default is not None:
            found["default"] = default
        return found
