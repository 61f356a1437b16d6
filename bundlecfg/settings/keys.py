"""逻辑键与内部键之间的规范化工具。"""  # 模块说明。
from __future__ import annotations  # 启用前向注解以提升类型兼容性。

import re  # 导入 re 以识别 URI 形式的键。
from typing import Any  # 导入 Any 以接受非字符串的逻辑键。
from urllib.parse import urlsplit  # 导入 urlsplit 以解析并校验 URI。

from bundlecfg.utils.errors import InvalidArgument  # 导入参数错误类型。

PREFIX = "BUNDLE_"  # 所有内部键与相关环境变量都以此前缀开头。
SEPARATOR = "__"  # 逻辑键中的点号在内部键中替换为双下划线。

_URI_HINT = re.compile(r"https?:")  # 逻辑键中出现该片段即按 URI 处理。
_LEGACY_URI_HINT = re.compile(r"https?:", re.IGNORECASE)  # 旧文件中的键可能已被大写。


def normalize_uri(uri: Any) -> str:
    """补齐末尾斜杠并要求结果为绝对 URI，失败时抛出 InvalidArgument。"""  # 函数说明。

    text = str(uri)  # 允许传入任意可字符串化的对象。
    if not text.endswith("/"):  # 统一以斜杠结尾，保证 http://a 与 http://a/ 指向同一键。
        text = f"{text}/"
    try:
        parsed = urlsplit(text)  # 解析失败（例如非法 IPv6 字面量）时抛出 ValueError。
    except ValueError as exc:
        raise InvalidArgument(f"Gem sources must be absolute. You provided '{text}'.") from exc
    if not parsed.scheme or any(char.isspace() for char in text):  # 没有 scheme 即不是绝对 URI。
        raise InvalidArgument(f"Gem sources must be absolute. You provided '{text}'.")
    return text


def key_for(name: Any) -> str:
    """把逻辑键转换为内部键：URI 规范化、点号替换、大写并加前缀。"""  # 函数说明。

    if isinstance(name, str) and _URI_HINT.search(name):  # 仅对字符串形式的 URI 键做规范化。
        name = normalize_uri(name)
    key = str(name).replace(".", SEPARATOR).upper()
    return f"{PREFIX}{key}"


def logical_key_for(internal_key: str) -> str:
    """内部键的逆变换：去掉前缀、双下划线还原为点号并转小写。"""  # 函数说明。

    key = internal_key[len(PREFIX):] if internal_key.startswith(PREFIX) else internal_key
    return key.replace(SEPARATOR, ".").lower()


def backward_compatible_key(key: str) -> str:
    """修正旧版本写出的键：URI 键补斜杠，字面点号替换为双下划线。"""  # 函数说明。

    if _LEGACY_URI_HINT.search(key) and not key.endswith("/"):
        key = f"{key}/"
    if "." in key:
        key = key.replace(".", SEPARATOR)
    return key
