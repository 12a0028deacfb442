"""Checks of whether packages satisfy dependency strings."""

from __future__ import annotations

import re
from typing import Any

from aurkit.version import vercmp

_MODIFIER_CHARS = "<>="
_MODIFIER_SPLIT = re.compile(r"[<>=]")


def split_dep(dep: str) -> tuple[str, str, str]:
    """Split ``name>=version`` into name, modifier and version."""
    modifier = "".join(c for c in dep if c in _MODIFIER_CHARS)
    fields = [f for f in _MODIFIER_SPLIT.split(dep) if f]

    if not fields:
        return "", "", ""
    if len(fields) == 1:
        return fields[0], "", ""
    return fields[0], modifier, fields[1]


def ver_satisfies(ver1: str, mod: str, ver2: str) -> bool:
    """Return whether ``ver1 mod ver2`` holds; no modifier always holds."""
    if mod == "=":
        return vercmp(ver1, ver2) == 0
    if mod == "<":
        return vercmp(ver1, ver2) < 0
    if mod == "<=":
        return vercmp(ver1, ver2) <= 0
    if mod == ">":
        return vercmp(ver1, ver2) > 0
    if mod == ">=":
        return vercmp(ver1, ver2) >= 0
    return True


def pkg_satisfies(name: str, version: str, dep: str) -> bool:
    """Return whether a package of this name and version satisfies ``dep``."""
    dep_name, dep_mod, dep_version = split_dep(dep)
    if dep_name != name:
        return False
    return ver_satisfies(version, dep_mod, dep_version)


def provide_satisfies(provide: str, dep: str, pkg_version: str) -> bool:
    """Return whether a provide entry satisfies ``dep``.

    An unversioned provide takes the version of the providing package.
    """
    dep_name, dep_mod, dep_version = split_dep(dep)
    provide_name, provide_mod, provide_version = split_dep(provide)

    if provide_name != dep_name:
        return False

    if not provide_mod and dep_mod:
        provide_version = pkg_version

    return ver_satisfies(provide_version, dep_mod, dep_version)


def satisfies_aur(dep: str, pkg: Any) -> bool:
    """Return whether an AUR package satisfies ``dep`` by name or provide."""
    if pkg_satisfies(pkg.name, pkg.version, dep):
        return True
    return any(provide_satisfies(p, dep, pkg.version) for p in pkg.provides)


def satisfies_repo(dep: str, pkg: Any, db_executor: Any) -> bool:
    """Return whether a repository package satisfies ``dep`` by name or provide."""
    if pkg_satisfies(pkg.name, pkg.version, dep):
        return True
    return any(
        provide_satisfies(str(p), dep, pkg.version) for p in db_executor.package_provides(pkg)
    )