"""键分类与取值类型转换测试。"""  # 模块说明。
import sys  # 导入 sys 以动态调整模块搜索路径。
from pathlib import Path  # 导入 Path 以定位仓库根目录。

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest  # noqa: E402

from bundlecfg.settings.coercion import coerce, is_bool, is_num, to_int  # noqa: E402


@pytest.mark.parametrize("raw", ["no", "", "false", "FALSE", "f", "N", "0"])
def test_declared_boolean_falsy_values(raw: str) -> None:
    """布尔键的假值文本大小写不敏感。"""  # 测试说明。
    assert coerce("frozen", raw) is False


@pytest.mark.parametrize("raw", ["yes", "true", "1", "anything-else", "nope"])
def test_declared_boolean_truthy_values(raw: str) -> None:
    """布尔键的其他任意文本都为真。"""  # 测试说明。
    assert coerce("frozen", raw) is True


def test_scoped_key_inherits_parent_boolean_class() -> None:
    """frozen.x 继承 frozen 的布尔分类；gem.mit 本身即在集合中。"""  # 测试说明。
    assert is_bool("frozen.some_gem")
    assert is_bool("gem.mit")
    assert not is_bool("gem.other")  # gem 本身不是布尔键。
    assert coerce("no_install.rack", "yes") is True


def test_literal_false_is_boolean_for_any_key() -> None:
    """任何键的字面量 "false" 都转换为 False，但 "true" 不会变成 True。"""  # 测试说明。
    assert coerce("path", "false") is False
    assert coerce("path", "true") == "true"  # 非布尔键保持字符串。
    assert coerce("retry", "false") is False  # 优先于整数转换。


def test_numeric_keys() -> None:
    """整数键取开头的整数部分。"""  # 测试说明。
    assert is_num("retry") and is_num("ssl_verify_mode")
    assert not is_num("retry.scoped")  # 整数分类不继承父级。
    assert coerce("retry", "7") == 7
    assert coerce("timeout", " -3") == -3
    assert coerce("redirect", "1_000") == 1000
    assert coerce("retry", 3) == 3  # 内置默认值本身已是整数。


def test_numeric_parse_of_garbage_is_zero() -> None:
    """已知怪癖：非数字文本静默解析为 0，带数字前缀的文本只取前缀。"""  # 测试说明。
    assert to_int("abc") == 0
    assert to_int("12abc") == 12
    assert coerce("retry", "lots") == 0


def test_opaque_values_and_absent() -> None:
    """其他键原样返回，缺失值保持 None。"""  # 测试说明。
    assert coerce("path", "vendor/bundle") == "vendor/bundle"
    assert coerce("frozen", None) is None
    assert coerce("retry", None) is None
