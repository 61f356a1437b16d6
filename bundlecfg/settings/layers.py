"""单个文件支撑的配置层：构造时加载一次，之后每次写入都整体回写文件。"""  # 模块说明。
from __future__ import annotations  # 启用前向注解以提升类型兼容性。

from pathlib import Path  # 导入 Path 统一路径处理。
from typing import Dict, Iterator, Mapping, Optional  # 导入类型注解辅助代码可读性。

from bundlecfg.settings.codec import load_config_file, serialize_config  # 导入文件编解码。
from bundlecfg.utils.io import filesystem_access, safe_mkdirs  # 导入受控访问与目录创建工具。
from bundlecfg.utils.logging import StructuredLogger, default_logger  # 导入结构化日志器。


def stringify(value: object) -> Optional[str]:
    """把写入值转换为原始字符串；布尔值按小写书写，None 保持 None。"""  # 函数说明。

    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class ConfigLayer:
    """内部键到原始字符串值的扁平映射，并关联一个可选的落盘路径。"""  # 类说明。

    def __init__(
        self,
        name: str,
        path: Path | None,
        environ: Mapping[str, str],
        logger: StructuredLogger | None = None,
    ) -> None:
        """记录层名称与路径，并立即从文件加载初始内容。"""  # 方法说明。
        self.name = name  # 层名称，例如 local / global。
        self.path = path  # 对应的配置文件路径，本地层在没有项目根目录时为 None。
        self._logger = (logger or default_logger()).bind(layer=name)
        self.values: Dict[str, str] = load_config_file(path, environ)
        self._logger.debug("config layer loaded", path=str(path) if path else None, keys=len(self.values))

    def get(self, key: str) -> Optional[str]:
        """读取内部键对应的原始值，不存在时返回 None。"""
        return self.values.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self.values

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def keys(self) -> list[str]:
        """按插入顺序返回全部内部键。"""
        return list(self.values)

    def set(self, key: str, value: object) -> object:
        """写入（或在值为 None 时删除）一个键；值未变化时不触碰文件。"""  # 方法说明。
        raw = stringify(value)
        if self.values.get(key) == raw:
            return value  # 与缓存一致，跳过整次写盘。
        if raw is None:
            self.values.pop(key, None)
        else:
            self.values[key] = raw
        self.write()
        return value

    def delete(self, key: str) -> None:
        """删除键并回写文件；键不存在时什么也不做。"""  # 方法说明。
        if key not in self.values:
            return
        del self.values[key]
        self.write()

    def write(self) -> None:
        """序列化整个映射并覆盖写入文件，必要时创建父目录。"""  # 方法说明。
        text = serialize_config(self.values)
        with filesystem_access(self.path, "write") as target:
            if target is None:  # 没有落盘路径的层只保留内存状态。
                return
            safe_mkdirs(target.parent)
            with target.open("w", encoding="utf-8") as handle:
                handle.write(text)
        self._logger.info("config written", path=str(self.path), keys=len(self.values))
