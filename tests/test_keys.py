"""验证逻辑键到内部键的规范化规则。"""  # 模块说明。
from __future__ import annotations  # 启用前向注解支持类型提示。

import sys  # 导入 sys 以动态调整模块搜索路径。
from pathlib import Path  # 导入 Path 以定位仓库根目录。

ROOT = Path(__file__).resolve().parents[1]  # 计算仓库根目录路径。
if str(ROOT) not in sys.path:  # 若根目录未在 sys.path 中。
    sys.path.insert(0, str(ROOT))  # 将其加入模块搜索路径以支持 from bundlecfg 导入。

import pytest  # noqa: E402  # 导入 pytest 以使用断言辅助。

from bundlecfg.settings.keys import (  # noqa: E402  # 导入键工具。
    backward_compatible_key,
    key_for,
    logical_key_for,
    normalize_uri,
)
from bundlecfg.utils.errors import InvalidArgument  # noqa: E402  # 导入参数错误类型。


def test_plain_and_scoped_keys() -> None:
    """普通键加前缀并大写，作用域键的点号变为双下划线。"""  # 测试说明。
    assert key_for("retry") == "BUNDLE_RETRY"  # 普通键。
    assert key_for("gem.mit") == "BUNDLE_GEM__MIT"  # 作用域键。
    assert key_for("local.some-gem") == "BUNDLE_LOCAL__SOME-GEM"  # 连字符保持不变。


def test_uri_keys_share_trailing_slash_form() -> None:
    """带与不带末尾斜杠的 URI 键映射到同一个内部键。"""  # 测试说明。
    assert key_for("http://example.com") == "BUNDLE_HTTP://EXAMPLE__COM/"
    assert key_for("http://example.com") == key_for("http://example.com/")


def test_mirror_uri_key_normalizes_whole_name() -> None:
    """mirror.<URI> 形式的键整体按 URI 规范化。"""  # 测试说明。
    assert key_for("mirror.https://rubygems.org") == "BUNDLE_MIRROR__HTTPS://RUBYGEMS__ORG/"


@pytest.mark.parametrize(
    "name",
    ["http://[::1", "/path/with/https:/inside", "see https: docs"],
)
def test_non_absolute_uri_keys_are_rejected(name: str) -> None:
    """无法解析或不是绝对地址的 URI 键抛出 InvalidArgument。"""  # 测试说明。
    with pytest.raises(InvalidArgument):  # 期待参数错误。
        key_for(name)


def test_normalize_uri_message_mentions_input() -> None:
    """错误消息包含规范化后的输入，便于定位。"""  # 测试说明。
    with pytest.raises(InvalidArgument) as exc:
        normalize_uri("rubygems.org")  # 没有 scheme 的主机名不是绝对地址。
    assert "rubygems.org/" in str(exc.value)
    assert isinstance(exc.value, ValueError)  # 同时兼容 ValueError 捕获。


def test_logical_key_round_trip() -> None:
    """内部键可以还原为点分小写的逻辑键。"""  # 测试说明。
    assert logical_key_for("BUNDLE_GEM__MIT") == "gem.mit"
    assert logical_key_for(key_for("local.rack")) == "local.rack"
    assert logical_key_for("BUNDLE_MIRROR__HTTPS://RUBYGEMS__ORG/") == "mirror.https://rubygems.org/"


def test_backward_compatible_key_fixes_legacy_forms() -> None:
    """旧文件中的 URI 键补斜杠，字面点号改为双下划线。"""  # 测试说明。
    assert backward_compatible_key("BUNDLE_HTTPS://EXAMPLE.COM") == "BUNDLE_HTTPS://EXAMPLE__COM/"
    assert backward_compatible_key("BUNDLE_GEM.MIT") == "BUNDLE_GEM__MIT"
    assert backward_compatible_key("BUNDLE_RETRY") == "BUNDLE_RETRY"  # 已是规范形式时保持不变。
