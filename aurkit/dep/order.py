"""Ordering of pooled packages for building and installing."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from aurkit.dep.base import AurPkg, Base
from aurkit.dep.pool import Pool, compute_combined_dep_list
from aurkit.dep.satisfy import pkg_satisfies


@dataclass
class Order:
    """AUR bases and repository packages in dependency order.

    ``runtime`` names the packages needed at run time rather than only to
    build.
    """

    aur: list[Base] = field(default_factory=list)
    repo: list[Any] = field(default_factory=list)
    runtime: set[str] = field(default_factory=set)

    def _order_pkg_aur(
        self, pkg: AurPkg, pool: Pool, runtime: bool, no_deps: bool, no_check_deps: bool
    ) -> None:
        if runtime:
            self.runtime.add(pkg.name)

        pool.aur.pop(pkg.name, None)

        for i, deps in enumerate(compute_combined_dep_list(pkg, no_deps, no_check_deps)):
            for dep in deps:
                aur_pkg = pool.find_satisfier_aur(dep)
                if aur_pkg is not None:
                    self._order_pkg_aur(aur_pkg, pool, runtime and i == 0, no_deps, no_check_deps)

                repo_pkg = pool.find_satisfier_repo(dep)
                if repo_pkg is not None:
                    self._order_pkg_repo(repo_pkg, pool, runtime and i == 0)

        for base in self.aur:
            if base.pkgbase() == pkg.package_base:
                base.append(pkg)
                return

        self.aur.append(Base([pkg]))

    def _order_pkg_repo(self, pkg: Any, pool: Pool, runtime: bool) -> None:
        if runtime:
            self.runtime.add(pkg.name)

        pool.repo.pop(pkg.name, None)

        for dep in pool.alpm_executor.package_depends(pkg):
            repo_pkg = pool.find_satisfier_repo(str(dep))
            if repo_pkg is not None:
                self._order_pkg_repo(repo_pkg, pool, runtime)

        self.repo.append(pkg)

    def has_make(self) -> bool:
        """Return whether any ordered package is needed only to build."""
        total = sum(len(base) for base in self.aur) + len(self.repo)
        return len(self.runtime) != total

    def get_make(self) -> list[str]:
        """Names of the packages needed only to build, AUR first."""
        names = [pkg.name for base in self.aur for pkg in base if pkg.name not in self.runtime]
        names.extend(pkg.name for pkg in self.repo if pkg.name not in self.runtime)
        return names

    def summary_lines(self) -> list[str]:
        """Lines listing the packages to download, grouped by kind."""
        repo, repo_make = [], []
        for pkg in self.repo:
            entry = f"  {pkg.name}-{pkg.version}"
            (repo if pkg.name in self.runtime else repo_make).append(entry)

        aur_entries, aur_make_entries = [], []
        aur_len = aur_make_len = 0
        for base in self.aur:
            head = f"  {base.pkgbase()}-{base[0].version}"
            if len(base) > 1 or base.pkgbase() != base[0].name:
                run = [p.name for p in base if p.name in self.runtime]
                make = [p.name for p in base if p.name not in self.runtime]
                aur_len += len(run)
                aur_make_len += len(make)
                if run:
                    aur_entries.append(f"{head} ({' '.join(run)})")
                if make:
                    aur_make_entries.append(f"{head} ({' '.join(make)})")
            elif base[0].name in self.runtime:
                aur_len += 1
                aur_entries.append(head)
            else:
                aur_make_len += 1
                aur_make_entries.append(head)

        groups = [
            ("Repo", len(repo), repo),
            ("Repo Make", len(repo_make), repo_make),
            ("Aur", aur_len, aur_entries),
            ("Aur Make", aur_make_len, aur_make_entries),
        ]
        return [f"[{name}:{count}]" + "".join(entries) for name, count, entries in groups if count >= 1]

    def print_summary(self) -> None:
        """Print the packages to download."""
        for line in self.summary_lines():
            print(line)


def get_order(pool: Pool, no_deps: bool, no_check_deps: bool) -> Order:
    """Order the pool's targets and their dependencies.

    Ordered packages are taken out of the pool.
    """
    order = Order()

    for target in pool.targets:
        dep = target.dep_string()

        aur_pkg = pool.aur.get(dep)
        if aur_pkg is not None and pkg_satisfies(aur_pkg.name, aur_pkg.version, dep):
            order._order_pkg_aur(aur_pkg, pool, True, no_deps, no_check_deps)
            continue

        aur_pkg = pool.find_satisfier_aur(dep)
        if aur_pkg is not None:
            order._order_pkg_aur(aur_pkg, pool, True, no_deps, no_check_deps)
            continue

        repo_pkg = pool.find_satisfier_repo(dep)
        if repo_pkg is not None:
            order._order_pkg_repo(repo_pkg, pool, True)

    return order