"""派生视图测试：数组设置、镜像、凭据、本地覆盖与路径。"""  # 模块说明。
from __future__ import annotations  # 启用前向注解支持类型提示。

import sys  # 导入 sys 以动态调整模块搜索路径。
from pathlib import Path  # 导入 Path 以构造临时目录。

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest  # noqa: E402

from bundlecfg.settings import HostPaths, InvalidOption, Settings  # noqa: E402
from bundlecfg.settings.mirrors import MirrorTable  # noqa: E402
from bundlecfg.utils.logging import get_logger  # noqa: E402


def _make_settings(tmp_path: Path, environ: dict[str, str] | None = None) -> Settings:
    """辅助函数：构造使用临时目录与显式环境映射的 Settings。"""  # 函数说明。
    host = HostPaths(home=tmp_path / "home", scope="cpython/3.11.0", gem_dir=str(tmp_path / "gems"))
    return Settings(
        root=tmp_path / "project",
        environ=environ if environ is not None else {},
        host=host,
        logger=get_logger(quiet=True),
    )


def test_array_settings_round_trip(tmp_path: Path) -> None:
    """with/without 以冒号连接存储，空集合删除底层键。"""  # 测试说明。
    settings = _make_settings(tmp_path)
    assert settings.with_groups == []  # 未配置时为空列表。
    settings.with_groups = ["a", "b"]
    assert settings.with_groups == ["a", "b"]
    assert 'BUNDLE_WITH: "a:b"' in (tmp_path / "project" / "config").read_text(encoding="utf-8")
    settings.with_groups = []
    assert settings.with_groups == []
    assert "BUNDLE_WITH" not in settings.local
    settings.without_groups = ["test", "development"]
    assert settings.get_array("without") == ["test", "development"]
    settings.set_array("without", None)  # None 不做任何修改。
    assert settings.without_groups == ["test", "development"]


def test_array_reads_environment(tmp_path: Path) -> None:
    """环境变量中的多值设置同样按冒号拆分，空段被丢弃。"""  # 测试说明。
    settings = _make_settings(tmp_path, {"BUNDLE_WITHOUT": "development::test:"})
    assert settings.without_groups == ["development", "test"]


def test_mirror_by_bare_host(tmp_path: Path) -> None:
    """mirror.<主机> 设置按主机名匹配，与路径无关。"""  # 测试说明。
    settings = _make_settings(tmp_path)
    settings.set_local("mirror.rubygems.org", "http://localhrorr")
    assert settings.mirror_for("https://rubygems.org/") == "http://localhrorr/"
    assert settings.mirror_for("https://rubygems.org/gems/rack") == "http://localhrorr/"


def test_mirror_by_full_uri(tmp_path: Path) -> None:
    """mirror.<URI> 设置精确匹配，也能按主机匹配其他路径。"""  # 测试说明。
    settings = _make_settings(tmp_path)
    settings.set_global("mirror.https://rubygems.org", "http://localhost:9292")
    assert settings.mirror_for("https://rubygems.org") == "http://localhost:9292/"
    assert settings.mirror_for("https://rubygems.org/quick/") == "http://localhost:9292/"
    assert settings.mirror_for("https://example.org") == "https://example.org/"  # 未登记时返回自身。


def test_mirror_from_environment_and_recomputed(tmp_path: Path) -> None:
    """环境变量中的镜像参与扫描，镜像表每次都重新构建。"""  # 测试说明。
    environ = {"BUNDLE_MIRROR__HTTPS://GEMS__EXAMPLE__COM/": "http://env-mirror"}
    settings = _make_settings(tmp_path, environ)
    assert settings.mirror_for("https://gems.example.com/") == "http://env-mirror/"
    assert settings.mirror_for("https://other.example.com/") == "https://other.example.com/"
    settings.set_local("mirror.https://other.example.com/", "http://late-mirror")
    assert settings.mirror_for("https://other.example.com/") == "http://late-mirror/"
    assert isinstance(settings.gem_mirrors(), MirrorTable)
    assert len(settings.gem_mirrors()) == 2


def test_credentials_exact_then_host(tmp_path: Path) -> None:
    """凭据先按完整 URI 查找，再退回到主机名。"""  # 测试说明。
    settings = _make_settings(tmp_path)
    settings.set_local("https://gems.example.com/private/", "exact:secret")
    settings.set_global("gems.example.com", "host:secret")
    assert settings.credentials_for("https://gems.example.com/private/") == "exact:secret"
    assert settings.credentials_for("https://gems.example.com/public/") == "host:secret"
    assert settings.credentials_for("https://unknown.example.com/") is None


def test_local_overrides(tmp_path: Path) -> None:
    """local.<名称> 设置汇总为本地仓库覆盖表。"""  # 测试说明。
    settings = _make_settings(tmp_path, {"BUNDLE_LOCAL__RAILS": "/src/rails"})
    settings.set_local("local.rack", "/src/rack")
    assert settings.local_overrides() == {"rack": "/src/rack", "rails": "/src/rails"}


def test_path_defaults_to_host_gem_dir(tmp_path: Path) -> None:
    """没有任何 path 配置时使用宿主默认安装目录，并允许提权安装。"""  # 测试说明。
    settings = _make_settings(tmp_path)
    assert settings.path == str(tmp_path / "gems")
    assert settings.allow_sudo is True


def test_path_from_environment_or_global_is_unscoped(tmp_path: Path) -> None:
    """环境或全局层的 path 原样返回，不追加作用域目录。"""  # 测试说明。
    settings = _make_settings(tmp_path, {"BUNDLE_PATH": "/env/path"})
    assert settings.path == "/env/path"
    global_only = _make_settings(tmp_path / "other")
    global_only.set_global("path", "vendor/global")
    assert global_only.path == "vendor/global"
    assert global_only.allow_sudo is True


def test_local_path_is_scoped_and_disables_sudo(tmp_path: Path) -> None:
    """本地层的 path 优先于环境变量，并追加解释器作用域子目录。"""  # 测试说明。
    settings = _make_settings(tmp_path, {"BUNDLE_PATH": "/env/path"})
    settings.set_local("path", "vendor/bundle")
    assert settings.path == "vendor/bundle/cpython/3.11.0"
    assert settings.allow_sudo is False


def test_app_cache_path(tmp_path: Path) -> None:
    """缓存目录默认为 vendor/cache，绝对路径在下一次访问时被拒绝。"""  # 测试说明。
    settings = _make_settings(tmp_path)
    assert settings.app_cache_path == "vendor/cache"
    settings.set_local("cache_path", "tmp/cache")
    assert settings.app_cache_path == "tmp/cache"
    settings.set_local("cache_path", "/absolute/path")
    with pytest.raises(InvalidOption, match="Cache path must be relative"):
        settings.app_cache_path
