from dataclasses import dataclass, field

from aurkit.dep.base import AurPkg
from aurkit.dep.order import Order, get_order
from aurkit.dep.pool import Pool, to_target


@dataclass
class RepoPkg:
    name: str
    version: str = "1.0-1"
    base: str = ""
    db: str = "core"
    depends: list = field(default_factory=list)
    provides: list = field(default_factory=list)


class FakeExecutor:
    def package_depends(self, pkg):
        return pkg.depends

    def package_provides(self, pkg):
        return pkg.provides


def make_pool(aur=(), repo=(), targets=()):
    pool = Pool(alpm_executor=FakeExecutor())
    pool.aur = {p.name: p for p in aur}
    pool.repo = {p.name: p for p in repo}
    pool.targets = [to_target(t) for t in targets]
    return pool


def sample_pool():
    return make_pool(
        aur=[
            AurPkg(name="a", package_base="a", version="1", depends=["b"], make_depends=["c"]),
            AurPkg(name="b", package_base="b", version="2"),
        ],
        repo=[RepoPkg("c")],
        targets=["a"],
    )


def test_dependencies_come_first():
    pool = sample_pool()
    order = get_order(pool, False, False)
    assert [base.pkgbase() for base in order.aur] == ["b", "a"]
    assert [pkg.name for pkg in order.repo] == ["c"]
    assert order.runtime == {"a", "b"}
    assert pool.aur == {} and pool.repo == {}


def test_make_dependencies():
    order = get_order(sample_pool(), False, False)
    assert order.has_make()
    assert order.get_make() == ["c"]


def test_no_make_dependencies():
    pool = make_pool(aur=[AurPkg(name="a", package_base="a", version="1")], targets=["a"])
    order = get_order(pool, False, False)
    assert not order.has_make()
    assert order.get_make() == []


def test_split_packages_share_a_base():
    pool = make_pool(
        aur=[
            AurPkg(name="x-one", package_base="x", version="3"),
            AurPkg(name="x-two", package_base="x", version="3"),
        ],
        targets=["x-one", "x-two"],
    )
    order = get_order(pool, False, False)
    assert len(order.aur) == 1
    assert [p.name for p in order.aur[0]] == ["x-one", "x-two"]


def test_repo_dependency_chain():
    pool = make_pool(repo=[RepoPkg("r", depends=["s"]), RepoPkg("s")], targets=["r"])
    order = get_order(pool, False, False)
    assert [p.name for p in order.repo] == ["s", "r"]
    assert order.runtime == {"r", "s"}


def test_summary_lines():
    order = get_order(sample_pool(), False, False)
    assert order.summary_lines() == [
        "[Repo Make:1]  c-1.0-1",
        "[Aur:2]  b-2  a-1",
    ]


def test_summary_of_split_base():
    order = Order(
        aur=[],
        runtime={"x-one"},
    )
    pool = make_pool(
        aur=[
            AurPkg(name="x-one", package_base="x", version="3"),
            AurPkg(name="x-two", package_base="x", version="3"),
        ],
        targets=["x-one", "x-two"],
    )
    order = get_order(pool, False, False)
    order.runtime.discard("x-two")
    assert order.summary_lines() == ["[Aur:1]  x-3 (x-one)", "[Aur Make:1]  x-3 (x-two)"]


def test_print_summary_matches_lines(capsys):
    order = get_order(sample_pool(), False, False)
    order.print_summary()
    assert capsys.readouterr().out.splitlines() == order.summary_lines()


def test_empty_order_prints_nothing():
    order = get_order(make_pool(targets=["missing"]), False, False)
    assert order.summary_lines() == []
    assert not order.has_make()