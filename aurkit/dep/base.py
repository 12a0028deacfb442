"""AUR packages grouped by their package base."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable


@dataclass
class AurPkg:
    """Metadata of a package as published by the AUR."""

    name: str = ""
    package_base: str = ""
    version: str = ""
    url_path: str = ""
    description: str = ""
    depends: list[str] = field(default_factory=list)
    make_depends: list[str] = field(default_factory=list)
    check_depends: list[str] = field(default_factory=list)
    opt_depends: list[str] = field(default_factory=list)
    provides: list[str] = field(default_factory=list)
    conflicts: list[str] = field(default_factory=list)
    replaces: list[str] = field(default_factory=list)


class Base(list):
    """The AUR packages built from one package base."""

    def pkgbase(self) -> str:
        """The package base name of the first package."""
        return self[0].package_base

    def version(self) -> str:
        """The version of the first package."""
        return self[0].version

    def url_path(self) -> str:
        """The URL path of the first package."""
        return self[0].url_path

    def any_is_in_set(self, names: Iterable[str] | set[str]) -> bool:
        """Return whether any package of the base is named in ``names``."""
        return any(pkg.name in names for pkg in self)

    def __str__(self) -> str:
        first = self[0]
        text = first.package_base
        if len(self) > 1 or first.package_base != first.name:
            text += " (" + " ".join(pkg.name for pkg in self) + ")"
        return text


def get_bases(pkgs: Iterable[AurPkg]) -> list[Base]:
    """Group packages by package base, in order of first appearance."""
    bases: dict[str, Base] = {}
    for pkg in pkgs:
        bases.setdefault(pkg.package_base, Base()).append(pkg)
    return list(bases.values())