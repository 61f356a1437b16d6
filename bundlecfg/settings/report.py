"""生效设置快照：把全部已知键的最终取值渲染为带来源注释的 YAML 文本。"""  # 模块说明。
from __future__ import annotations  # 启用前向注解以提升类型兼容性。

import os  # 导入 os 以接受 PathLike 参数。
from typing import Any, Dict  # 导入类型注解辅助代码可读性。

import yaml  # 导入 PyYAML 以渲染标量与列表。

from bundlecfg.settings.core import Settings  # 导入设置门面。
from bundlecfg.utils.io import atomic_write_text  # 复用原子写入工具以保存快照。

_SOURCE_ORDER = ("local", "env", "global", "default")  # 与解析优先级一致的来源顺序。


def effective_settings(settings: Settings) -> Dict[str, Any]:
    """返回 逻辑键 → 转换后取值 的字典，包含默认值覆盖的键。"""  # 函数说明。

    names = [*settings.all_keys(), "retry", "timeout", "redirect"]  # 默认值键即使未配置也列出。
    return {name: settings.get(name) for name in dict.fromkeys(names)}


def winning_source(settings: Settings, name: str) -> str:
    """返回最终取值来自哪一层。"""  # 函数说明。

    found = settings.locations(name)
    for source in _SOURCE_ORDER:
        if source in found:
            return source
    return "unset"


def render_effective_settings(settings: Settings, include_sources: bool = True) -> str:
    """按键排序渲染为 YAML 行，可在行尾附加来源注释。"""  # 函数说明。

    values = effective_settings(settings)
    lines: list[str] = []
    for name in sorted(values):
        line = yaml.safe_dump(
            {name: values[name]},
            default_flow_style=False,
            allow_unicode=True,
            width=10_000,
        ).rstrip("\n")  # 单键映射交给 PyYAML 处理引号与标量格式。
        if include_sources:
            line += f"  # {winning_source(settings, name)}"
        lines.append(line)
    return "\n".join(lines) + "\n"


def save_effective_settings(settings: Settings, path: str | os.PathLike[str], include_sources: bool = True) -> None:
    """将快照写入目标路径，使用原子写入避免半成品。"""  # 函数说明。

    atomic_write_text(path, render_effective_settings(settings, include_sources=include_sources))
