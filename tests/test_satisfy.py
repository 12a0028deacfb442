from types import SimpleNamespace

import pytest

from aurkit.dep.base import AurPkg
from aurkit.dep.satisfy import (
    pkg_satisfies,
    provide_satisfies,
    satisfies_aur,
    satisfies_repo,
    split_dep,
    ver_satisfies,
)


@pytest.mark.parametrize(
    "name,mod,version",
    [("foo", ">=", "1.0"), ("foo", "<", "2"), ("foo", "=", "1:3.0-1"), ("foo", "", "")],
)
def test_split_dep_round_trip(name, mod, version):
    assert split_dep(name + mod + version) == (name, mod, version)


def test_split_dep_empty():
    assert split_dep("") == ("", "", "")


def test_split_dep_with_extra_dependency_after_space():
    name, mod, version = split_dep("openimagedenoise-git > ispc-git")
    assert name == "openimagedenoise-git "
    assert mod == ">"
    assert version == " ispc-git"


@pytest.mark.parametrize("mod", ["=", "<=", ">="])
def test_ver_satisfies_equal_versions(mod):
    assert ver_satisfies("1.0", mod, "1.0")


@pytest.mark.parametrize("mod", ["<", ">"])
def test_ver_satisfies_strict_rejects_equal(mod):
    assert not ver_satisfies("1.0", mod, "1.0")


def test_ver_satisfies_ordering():
    assert ver_satisfies("1.0", "<", "2.0")
    assert ver_satisfies("2.0", ">", "1.0")
    assert not ver_satisfies("2.0", "<=", "1.0")
    assert ver_satisfies("whatever", "", "1.0")


def test_pkg_satisfies():
    assert pkg_satisfies("foo", "1.0", "foo")
    assert pkg_satisfies("foo", "1.0", "foo>=0.9")
    assert not pkg_satisfies("foo", "1.0", "foo>1.0")
    assert not pkg_satisfies("foo", "1.0", "bar")


def test_provide_satisfies_unversioned_provide_uses_package_version():
    assert provide_satisfies("bar", "bar>=1.0", "1.5")
    assert not provide_satisfies("bar", "bar>=2.0", "1.5")
    assert provide_satisfies("bar", "bar", "1.5")


def test_provide_satisfies_versioned_provide():
    assert provide_satisfies("bar=3.0", "bar>=2.0", "1.0")
    assert not provide_satisfies("baz=3.0", "bar", "1.0")


def test_satisfies_aur_by_name_and_provides():
    pkg = AurPkg(name="yay-git", package_base="yay-git", version="11.0", provides=["yay"])
    assert satisfies_aur("yay-git", pkg)
    assert satisfies_aur("yay>=10", pkg)
    assert not satisfies_aur("paru", pkg)


class _FakeExecutor:
    def __init__(self, provides):
        self._provides = provides

    def package_provides(self, pkg):
        return self._provides.get(pkg.name, [])


def test_satisfies_repo_by_name_and_provides():
    pkg = SimpleNamespace(name="foo", version="1.0")
    executor = _FakeExecutor({"foo": ["bar=2.0", "libfoo"]})
    assert satisfies_repo("foo=1.0", pkg, executor)
    assert satisfies_repo("bar>=1.5", pkg, executor)
    assert satisfies_repo("libfoo>=1.0", pkg, executor)
    assert not satisfies_repo("bar<2.0", pkg, executor)
    assert not satisfies_repo("qux", pkg, executor)