"""Conflict and missing-dependency checks over a resolved package pool."""

from __future__ import annotations

import sys
from typing import Any

from aurkit.dep.pool import Pool, compute_combined_dep_list
from aurkit.dep.satisfy import satisfies_aur, satisfies_repo


class ConflictError(Exception):
    """Package conflicts were found that cannot be resolved."""


class MissingDependenciesError(Exception):
    """Some required packages could not be found.

    ``missing`` maps each unsatisfied dependency to the chains of packages
    that wanted it; an empty chain means the dependency was a target.
    """

    def __init__(self, missing: dict[str, list[list[str]]]) -> None:
        super().__init__("could not find all required packages")
        self.missing = missing

    def lines(self) -> list[str]:
        """One line per dependency chain, as shown to the user."""
        result = []
        for dep, trees in self.missing.items():
            for tree in trees:
                if tree:
                    result.append(f"\t{dep} (Wanted by: {' -> '.join(tree)})")
                else:
                    result.append(f"\t{dep} (Target)")
        return result


def _add(conflicts: dict[str, set[str]], key: str, value: str) -> None:
    conflicts.setdefault(key, set()).add(value)


def _check_inner_conflict(pool: Pool, name: str, conflict: str, conflicts: dict[str, set[str]]) -> None:
    for pkg in pool.aur.values():
        if pkg.name == name:
            continue
        if satisfies_aur(conflict, pkg):
            _add(conflicts, name, pkg.name)

    for pkg in pool.repo.values():
        if pkg.name == name:
            continue
        if satisfies_repo(conflict, pkg, pool.alpm_executor):
            _add(conflicts, name, pkg.name)


def _check_forward_conflict(pool: Pool, name: str, conflict: str, conflicts: dict[str, set[str]]) -> None:
    for pkg in pool.alpm_executor.local_packages():
        if pkg.name == name or pool.has_package(pkg.name):
            continue
        if satisfies_repo(conflict, pkg, pool.alpm_executor):
            entry = pkg.name
            if entry != conflict:
                entry += f" ({conflict})"
            _add(conflicts, name, entry)


def _check_reverse_conflict(pool: Pool, name: str, conflict: str, conflicts: dict[str, set[str]]) -> None:
    # the annotated name carries over to later matches, as the label grows
    for pkg in pool.aur.values():
        if pkg.name == name:
            continue
        if satisfies_aur(conflict, pkg):
            if name != conflict:
                name += f" ({conflict})"
            _add(conflicts, pkg.name, name)

    for pkg in pool.repo.values():
        if pkg.name == name:
            continue
        if satisfies_repo(conflict, pkg, pool.alpm_executor):
            if name != conflict:
                name += f" ({conflict})"
            _add(conflicts, pkg.name, name)


def _own_conflicts(pool: Pool) -> list[tuple[str, str]]:
    pairs = [(pkg.name, conflict) for pkg in pool.aur.values() for conflict in pkg.conflicts]
    pairs.extend(
        (pkg.name, str(conflict))
        for pkg in pool.repo.values()
        for conflict in pool.alpm_executor.package_conflicts(pkg)
    )
    return pairs


def _print_conflicts(header: str, conflicts: dict[str, set[str]], label: Any) -> None:
    print(f"error: {header}", file=sys.stderr)
    for name, pkgs in conflicts.items():
        print(f"error: {label(name)} " + ", ".join(sorted(pkgs)))


def check_conflicts(pool: Pool, use_ask: bool, no_confirm: bool, no_deps: bool) -> dict[str, set[str]]:
    """Find packages that installing the pool would remove or that clash.

    Returns a map of package name to the names it conflicts with. Inner
    conflicts between pooled packages appear as keys with empty sets.
    Raises :class:`ConflictError` if conflicts exist, ``use_ask`` is off and
    ``no_confirm`` is on.
    """
    conflicts: dict[str, set[str]] = {}
    if no_deps:
        return conflicts

    inner: dict[str, set[str]] = {}
    print(":: Checking for conflicts...")
    print(":: Checking for inner conflicts...")

    own = _own_conflicts(pool)
    for name, conflict in own:
        _check_forward_conflict(pool, name, conflict, conflicts)

    for pkg in pool.alpm_executor.local_packages():
        if pool.has_package(pkg.name):
            continue
        for conflict in pool.alpm_executor.package_conflicts(pkg):
            _check_reverse_conflict(pool, pkg.name, str(conflict), conflicts)

    for name, conflict in own:
        _check_inner_conflict(pool, name, conflict, inner)

    if inner:
        _print_conflicts("\nInner conflicts found:", inner, lambda n: f"{n}:")
    if conflicts:
        _print_conflicts("\nPackage conflicts found:", conflicts, lambda n: f"Installing {n} will remove:")

    # every inner conflict is tracked, as the install order is not known yet
    for name, pkgs in inner.items():
        conflicts[name] = set()
        for pkg in pkgs:
            conflicts[pkg] = set()

    if conflicts and not use_ask:
        if no_confirm:
            raise ConflictError("package conflicts can not be resolved with noconfirm, aborting")
        print("error: Conflicting packages will have to be confirmed manually", file=sys.stderr)

    return conflicts


def _check_missing(
    pool: Pool,
    dep: str,
    stack: list[str],
    good: set[str],
    missing: dict[str, list[list[str]]],
    no_deps: bool,
    no_check_deps: bool,
) -> None:
    if dep in good:
        return

    if dep in missing:
        if stack not in missing[dep]:
            missing[dep].append(stack)
        return

    executor = pool.alpm_executor

    aur_pkg = pool.find_satisfier_aur(dep)
    if aur_pkg is not None:
        good.add(dep)
        for deps in compute_combined_dep_list(aur_pkg, no_deps, no_check_deps):
            for aur_dep in deps:
                if executor.local_satisfier_exists(aur_dep):
                    good.add(aur_dep)
                    continue
                _check_missing(pool, aur_dep, stack + [aur_pkg.name], good, missing, no_deps, no_check_deps)
        return

    repo_pkg = pool.find_satisfier_repo(dep)
    if repo_pkg is not None:
        good.add(dep)
        if no_deps:
            return
        for repo_dep in executor.package_depends(repo_pkg):
            repo_dep = str(repo_dep)
            if executor.local_satisfier_exists(repo_dep):
                good.add(repo_dep)
                continue
            _check_missing(pool, repo_dep, stack + [repo_pkg.name], good, missing, no_deps, no_check_deps)
        return

    missing[dep] = [stack]


def check_missing(pool: Pool, no_deps: bool, no_check_deps: bool) -> None:
    """Raise :class:`MissingDependenciesError` if any needed package is unavailable."""
    good: set[str] = set()
    missing: dict[str, list[list[str]]] = {}

    for target in pool.targets:
        _check_missing(pool, target.dep_string(), [], good, missing, no_deps, no_check_deps)

    if not missing:
        return

    error = MissingDependenciesError(missing)
    print("error: Could not find all required packages:", file=sys.stderr)
    for line in error.lines():
        print(line, file=sys.stderr)
    raise error