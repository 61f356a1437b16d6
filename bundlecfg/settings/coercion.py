"""按键分类把原始字符串转换为布尔、整数或保持字符串。"""  # 模块说明。
from __future__ import annotations  # 启用前向注解以提升类型兼容性。

import re  # 导入 re 以识别假值文本与整数前缀。
from typing import Any  # 导入 Any 描述任意原始值。

BOOL_KEYS = frozenset(
    {
        "frozen",
        "cache_all",
        "no_prune",
        "disable_local_branch_check",
        "disable_shared_gems",
        "ignore_messages",
        "gem.mit",
        "gem.coc",
        "silence_root_warning",
        "no_install",
    }
)  # 声明为布尔类型的逻辑键。
NUMBER_KEYS = frozenset({"retry", "timeout", "redirect", "ssl_verify_mode"})  # 声明为整数类型的逻辑键。

_FALSY = re.compile(r"(false|f|no|n|0)", re.IGNORECASE)  # 整串匹配这些文本时视为假。
_LEADING_INT = re.compile(r"\s*([+-]?\d+(?:_\d+)*)")  # 宽松整数解析：只取开头的整数部分。


def parent_setting_for(name: Any) -> str:
    """返回作用域键的父级名称，例如 gem.mit -> gem。"""  # 函数说明。
    return str(name).split(".")[0]


def is_bool(name: Any) -> bool:
    """键本身或其父级在布尔键集合中时返回 True。"""
    text = str(name)
    return text in BOOL_KEYS or parent_setting_for(text) in BOOL_KEYS


def is_num(name: Any) -> bool:
    """键在整数键集合中时返回 True（不继承父级）。"""
    return str(name) in NUMBER_KEYS


def to_bool(value: Any) -> bool:
    """None、空串、假值文本与 False 为假，其余一律为真。"""  # 函数说明。
    if value is None or value is False or value == "":
        return False
    if isinstance(value, str) and _FALSY.fullmatch(value):
        return False
    return True


def to_int(value: Any) -> int:
    """取字符串开头的整数，没有整数前缀时返回 0。"""  # 函数说明。
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(str(value))
    if match is None:
        return 0  # 非数字文本静默解析为 0，保持与既有配置文件的兼容。
    return int(match.group(1).replace("_", ""))


def coerce(name: Any, value: Any) -> Any:
    """根据键分类转换原始值；字面量 "false" 对任何键都转换为 False。"""  # 函数说明。
    if value is None:
        return None
    if is_bool(name) or value == "false":
        return to_bool(value)
    if is_num(name):
        return to_int(value)
    return value
