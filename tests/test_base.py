from aurkit.dep.base import AurPkg, Base, get_bases


def test_str_of_split_base():
    base = Base([AurPkg(name="foo", package_base="base"), AurPkg(name="bar", package_base="base")])
    assert str(base) == "base (foo bar)"


def test_str_of_plain_base_is_its_name():
    base = Base([AurPkg(name="yay", package_base="yay")])
    assert str(base) == "yay"


def test_str_when_name_differs_from_base():
    base = Base([AurPkg(name="foo", package_base="base")])
    assert str(base) == "base (foo)"


def test_accessors_use_first_package():
    first = AurPkg(name="a", package_base="ab", version="1.2-1", url_path="/cgit/ab.tar.gz")
    second = AurPkg(name="b", package_base="ab", version="9", url_path="/other")
    base = Base([first, second])
    assert base.pkgbase() == first.package_base
    assert base.version() == first.version
    assert base.url_path() == first.url_path


def test_any_is_in_set():
    base = Base([AurPkg(name="foo", package_base="x"), AurPkg(name="bar", package_base="x")])
    assert base.any_is_in_set({"bar", "zzz"})
    assert not base.any_is_in_set({"x"})
    assert not base.any_is_in_set(set())


def test_get_bases_groups_by_package_base():
    pkgs = [
        AurPkg(name="a1", package_base="a"),
        AurPkg(name="b1", package_base="b"),
        AurPkg(name="a2", package_base="a"),
    ]
    bases = get_bases(pkgs)
    assert [b.pkgbase() for b in bases] == ["a", "b"]
    assert [[p.name for p in b] for b in bases] == [["a1", "a2"], ["b1"]]
    assert sum(len(b) for b in bases) == len(pkgs)


def test_get_bases_empty():
    assert get_bases([]) == []