"""设置文件的读写格式：一个只接受自身写出格式的扁平 `KEY: "value"` 文本。

文件示例::

    ---
    BUNDLE_RETRY: "3"
    BUNDLE_GEM__MIT: "true"

解析采用逐行扫描：键行以前缀开头，值可以跨越多行直到下一个键行或空行。
不符合语法的行会被直接跳过而不是报错，这样一个手工改坏的行不会让整个文件失效。
"""
from __future__ import annotations  # 启用前向注解以提升类型兼容性。

import os  # 导入 os 以接受 PathLike 参数。
import re  # 导入 re 以匹配键行与空白序列。
from typing import Dict, Iterable, Mapping, Tuple  # 导入类型注解辅助代码可读性。

from bundlecfg.settings.keys import PREFIX, backward_compatible_key  # 复用键前缀与兼容性修正。
from bundlecfg.utils.io import filesystem_access  # 所有文件读取都经过受控访问上下文。

DOCUMENT_MARKER = "---"  # 写出文件的首行标记。
IGNORE_CONFIG_ENV = f"{PREFIX}IGNORE_CONFIG"  # 只要设置了该环境变量就不加载任何配置文件。

_KEY_LINE = re.compile(rf"^({PREFIX}.+?):(?:[ \t](.*))?$")  # 键行：前缀键止于第一个冒号加空白，键内可含空格。
_WHITESPACE = re.compile(r"[ \t\r\n\f\v]+")  # 值内部的空白序列统一折叠为单个空格。
_LEGACY_MARKER = "! "  # 早期写出的文件在值前带有该标记。


def config_ignored(environ: Mapping[str, str]) -> bool:
    """判断环境中是否打开了忽略配置文件的开关。"""  # 函数说明。

    return environ.get(IGNORE_CONFIG_ENV) is not None  # 只看是否存在，空字符串同样生效。


def _decode_double_quoted(inner: str) -> str:
    """解码双引号值中的 \\" 与 \\\\ 转义，其余裸双引号替换为单引号。"""  # 工具函数说明。

    chars: list[str] = []
    index = 0
    while index < len(inner):
        char = inner[index]
        if char == "\\" and index + 1 < len(inner) and inner[index + 1] in {'"', "\\"}:
            chars.append(inner[index + 1])  # 转义字符按字面保留。
            index += 2
            continue
        chars.append("'" if char == '"' else char)
        index += 1
    return "".join(chars)


def _decode_value(raw: str) -> str:
    """把键行之后（含续行）的原始文本还原为设置值。"""  # 工具函数说明。

    if raw.startswith(_LEGACY_MARKER):
        raw = raw[len(_LEGACY_MARKER):]
    raw = _WHITESPACE.sub(" ", raw)
    quote = raw[:1] if raw[:1] in {"'", '"'} else ""
    if quote and len(raw) >= 2 and raw.endswith(quote):  # 仅当首尾引号成对时才去掉引号。
        inner = raw[1:-1]
        if quote == '"':
            return _decode_double_quoted(inner)
        return inner.replace('"', "'")
    return raw.replace('"', "'")  # 无引号或引号不成对时保留原文，仅替换双引号。


def _scan_records(lines: Iterable[str]) -> Iterable[Tuple[str, str]]:
    """逐行扫描并产出 (键, 原始值文本) 元组。"""  # 工具函数说明。

    key: str | None = None  # 当前正在收集的键。
    parts: list[str] = []  # 当前键的值片段（首行 + 续行）。
    for line in lines:
        match = _KEY_LINE.match(line)
        if match:  # 新的键行结束上一条记录。
            if key is not None:
                yield key, "\n".join(parts)
            key = match.group(1)
            parts = [match.group(2) or ""]
            continue
        if key is not None and line and not line.startswith("BUNDLE"):  # 非空且不像键的行视为续行。
            parts.append(line)
            continue
        if key is not None:  # 空行或畸形键行结束当前记录，该行本身被跳过。
            yield key, "\n".join(parts)
            key, parts = None, []
    if key is not None:
        yield key, "\n".join(parts)


def parse_config(text: str) -> Dict[str, str]:
    """把文件内容解析为扁平字典；重复键以最后一次出现为准。"""  # 函数说明。

    result: Dict[str, str] = {}
    lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]  # 只在 \n 处断行。
    for key, raw_value in _scan_records(lines):
        result[backward_compatible_key(key)] = _decode_value(raw_value)
    return result


def quote_value(value: object) -> str:
    """折叠空白并以双引号包裹，转义反斜杠与双引号。"""  # 函数说明。

    collapsed = _WHITESPACE.sub(" ", str(value))
    escaped = collapsed.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def serialize_config(mapping: Mapping[str, object]) -> str:
    """按映射的迭代顺序写出文档标记与每一行 `KEY: "value"`。"""  # 函数说明。

    lines = [DOCUMENT_MARKER]
    for key, value in mapping.items():
        lines.append(f"{key}: {quote_value(value)}")
    return "\n".join(lines) + "\n"


def load_config_file(path: str | os.PathLike[str] | None, environ: Mapping[str, str]) -> Dict[str, str]:
    """读取并解析配置文件；文件缺失、为空或开关打开时返回空字典。"""  # 函数说明。

    with filesystem_access(path, "read") as target:
        if config_ignored(environ) or target is None:
            return {}
        if not target.exists() or target.stat().st_size == 0:  # 未配置状态，不是错误。
            return {}
        return parse_config(target.read_text(encoding="utf-8"))
