from dataclasses import dataclass, field

import pytest

from aurkit.dep.base import AurPkg
from aurkit.dep.checks import (
    ConflictError,
    MissingDependenciesError,
    check_conflicts,
    check_missing,
)
from aurkit.dep.pool import Pool, to_target


@dataclass
class RepoPkg:
    name: str
    version: str = "1.0-1"
    base: str = ""
    db: str = "core"
    depends: list = field(default_factory=list)
    provides: list = field(default_factory=list)
    conflicts: list = field(default_factory=list)


class FakeExecutor:
    def __init__(self, local=(), installed=()):
        self.local = list(local)
        self.installed = set(installed)

    def local_packages(self):
        return self.local

    def local_satisfier_exists(self, dep):
        return dep in self.installed

    def package_depends(self, pkg):
        return pkg.depends

    def package_provides(self, pkg):
        return pkg.provides

    def package_conflicts(self, pkg):
        return pkg.conflicts


def make_pool(executor, aur=(), repo=(), targets=()):
    pool = Pool(alpm_executor=executor)
    pool.aur = {p.name: p for p in aur}
    pool.repo = {p.name: p for p in repo}
    pool.targets = [to_target(t) for t in targets]
    return pool


def test_no_deps_skips_checks():
    pool = make_pool(FakeExecutor(local=[RepoPkg("c")]), aur=[AurPkg(name="a", version="1", conflicts=["c"])])
    assert check_conflicts(pool, False, True, True) == {}


def test_forward_conflict_with_installed_package():
    pool = make_pool(FakeExecutor(local=[RepoPkg("c")]), aur=[AurPkg(name="a", version="1", conflicts=["c"])])
    assert check_conflicts(pool, True, False, False) == {"a": {"c"}}


def test_forward_conflict_through_provide_is_annotated():
    local = RepoPkg("bar", provides=["foo"])
    pool = make_pool(FakeExecutor(local=[local]), aur=[AurPkg(name="a", version="1", conflicts=["foo"])])
    assert check_conflicts(pool, True, False, False) == {"a": {"bar (foo)"}}


def test_reverse_conflict_from_installed_package():
    local = RepoPkg("c", conflicts=["a"])
    pool = make_pool(FakeExecutor(local=[local]), aur=[AurPkg(name="a", version="1")])
    assert check_conflicts(pool, True, False, False) == {"a": {"c"}}


def test_inner_conflicts_become_empty_entries():
    pool = make_pool(
        FakeExecutor(),
        aur=[AurPkg(name="a", version="1", conflicts=["b"]), AurPkg(name="b", version="1")],
    )
    assert check_conflicts(pool, True, False, False) == {"a": set(), "b": set()}


def test_inner_conflict_with_repo_package():
    pool = make_pool(
        FakeExecutor(),
        aur=[AurPkg(name="a", version="1", conflicts=["r"])],
        repo=[RepoPkg("r")],
    )
    assert check_conflicts(pool, True, False, False) == {"a": set(), "r": set()}


def test_conflicts_with_noconfirm_raise():
    pool = make_pool(FakeExecutor(local=[RepoPkg("c")]), aur=[AurPkg(name="a", version="1", conflicts=["c"])])
    with pytest.raises(ConflictError, match="noconfirm"):
        check_conflicts(pool, False, True, False)


def test_no_conflicts_with_noconfirm_pass():
    pool = make_pool(FakeExecutor(local=[RepoPkg("c")]), aur=[AurPkg(name="a", version="1")])
    assert check_conflicts(pool, False, True, False) == {}


def test_missing_target():
    pool = make_pool(FakeExecutor(), targets=["ghost"])
    with pytest.raises(MissingDependenciesError) as info:
        check_missing(pool, False, False)
    assert info.value.missing == {"ghost": [[]]}
    assert info.value.lines() == ["\tghost (Target)"]


def test_missing_dependency_of_aur_package():
    pool = make_pool(
        FakeExecutor(),
        aur=[AurPkg(name="a", version="1", depends=["zzz"])],
        targets=["a"],
    )
    with pytest.raises(MissingDependenciesError) as info:
        check_missing(pool, False, False)
    assert info.value.missing == {"zzz": [["a"]]}


def test_no_deps_ignores_runtime_dependencies():
    pool = make_pool(
        FakeExecutor(),
        aur=[AurPkg(name="a", version="1", depends=["zzz"])],
        targets=["a"],
    )
    check_missing(pool, True, False)
    assert list(pool.aur) == ["a"]


def test_all_dependencies_found():
    pool = make_pool(
        FakeExecutor(installed={"lib"}),
        aur=[AurPkg(name="a", version="1", depends=["lib", "r"], check_depends=["gone"])],
        repo=[RepoPkg("r", depends=["lib"])],
        targets=["a"],
    )
    check_missing(pool, False, True)
    with pytest.raises(MissingDependenciesError) as info:
        check_missing(pool, False, False)
    assert info.value.missing == {"gone": [["a"]]}


def test_missing_dependency_of_repo_package():
    pool = make_pool(FakeExecutor(), repo=[RepoPkg("r", depends=["nope"])], targets=["r"])
    with pytest.raises(MissingDependenciesError) as info:
        check_missing(pool, False, False)
    assert info.value.missing == {"nope": [["r"]]}