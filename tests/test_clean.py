from aurkit.dep.base import AurPkg, Base
from aurkit.menus.clean import any_exist_in_cache, clean


def make_bases(*names):
    return [Base([AurPkg(name=n, package_base=n, version="1-1")]) for n in names]


def test_any_exist_in_cache(tmp_path):
    bases = make_bases("foo", "bar")
    assert any_exist_in_cache(tmp_path, bases) is False
    (tmp_path / "bar").mkdir()
    assert any_exist_in_cache(tmp_path, bases) is True


def test_clean_disabled_keeps_dirs(tmp_path):
    (tmp_path / "foo").mkdir()
    clean(False, tmp_path, make_bases("foo"), set(), True, "all")
    assert (tmp_path / "foo").is_dir()


def test_clean_all_removes_existing(tmp_path):
    (tmp_path / "foo").mkdir()
    (tmp_path / "foo" / "PKGBUILD").write_text("x")
    clean(True, tmp_path, make_bases("foo", "bar"), set(), True, "all")
    assert not (tmp_path / "foo").exists()
    assert not (tmp_path / "bar").exists()


def test_clean_none_keeps_dirs(tmp_path):
    (tmp_path / "foo").mkdir()
    clean(True, tmp_path, make_bases("foo"), set(), True, "none")
    assert (tmp_path / "foo").is_dir()


def test_clean_only_installed(tmp_path):
    (tmp_path / "foo").mkdir()
    (tmp_path / "bar").mkdir()
    clean(True, tmp_path, make_bases("foo", "bar"), {"bar"}, True, "installed")
    assert (tmp_path / "foo").is_dir()
    assert not (tmp_path / "bar").exists()