"""Resolution of install targets into repository and AUR package pools."""

from __future__ import annotations

import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Iterable, Protocol, Sequence

from aurkit.dep.base import AurPkg
from aurkit.dep.satisfy import (
    pkg_satisfies,
    provide_satisfies,
    satisfies_aur,
    satisfies_repo,
    split_dep,
)
from aurkit.download.unified import TargetMode, split_db_from_name


class AurClient(Protocol):
    """Access to the AUR RPC interface."""

    def search(self, query: str) -> list[AurPkg]: ...

    def info(self, names: Sequence[str]) -> list[AurPkg]: ...


@dataclass(frozen=True)
class Target:
    """An install target, optionally prefixed by a database."""

    db: str = ""
    name: str = ""
    mod: str = ""
    version: str = ""

    def dep_string(self) -> str:
        """The target as a dependency string, without the database."""
        return self.name + self.mod + self.version

    def __str__(self) -> str:
        if self.db:
            return self.db + "/" + self.dep_string()
        return self.dep_string()


def to_target(pkg: str) -> Target:
    """Parse ``[db/]name[mod version]`` into a :class:`Target`."""
    db_name, dep_string = split_db_from_name(pkg)
    name, mod, version = split_dep(dep_string)
    return Target(db=db_name, name=name, mod=mod, version=version)


def compute_combined_dep_list(pkg: AurPkg, no_deps: bool, no_check_deps: bool) -> list[list[str]]:
    """Return the dependency lists to follow: depends, make and check depends."""
    combined: list[list[str]] = []
    if not no_deps:
        combined.append(pkg.depends)
    combined.append(pkg.make_depends)
    if not no_check_deps:
        combined.append(pkg.check_depends)
    return combined


def is_in_assume_installed(name: str, assume_installed: Iterable[str]) -> bool:
    """Return whether the package named by ``name`` is assumed installed."""
    dep_name = split_dep(name)[0]
    return any(split_dep(entry)[0] == dep_name for entry in assume_installed)


def _name_key(name: str) -> list[tuple[str, str]]:
    return [(c.lower(), c) for c in name]


def sort_providers(lookfor: str, pkgs: Iterable[AurPkg]) -> list[AurPkg]:
    """Order providers: an exact name match first, then by name ignoring case."""
    return sorted(pkgs, key=lambda pkg: (pkg.name != lookfor, _name_key(pkg.name)))


def provider_menu(dep: str, providers: Sequence[AurPkg], no_confirm: bool) -> AurPkg | None:
    """Ask which of several providers of ``dep`` to use.

    The first provider is the default. Returns ``None`` if input ends.
    """
    header = f"There are {len(providers)} providers available for {dep}:\n"
    choices = " ".join(f"{n}) {pkg.name}" for n, pkg in enumerate(providers, start=1))
    print(f":: {header}:: Repository AUR\n    {choices} ")

    while True:
        print("\nEnter a number (default=1): ", end="")
        if no_confirm:
            print("1")
            return providers[0]

        try:
            answer = input().strip()
        except EOFError as err:
            print(err, file=sys.stderr)
            return None

        if not answer:
            return providers[0]

        try:
            num = int(answer)
        except ValueError:
            print(f"error: invalid number: {answer}", file=sys.stderr)
            continue

        if not 1 <= num <= len(providers):
            print(
                f"error: invalid value: {num} is not between 1 and {len(providers)}",
                file=sys.stderr,
            )
            continue

        return providers[num - 1]


def _remove_invalid_targets(pkgs: Iterable[str], mode: TargetMode) -> list[str]:
    valid = []
    for pkg in pkgs:
        db_name, _ = split_db_from_name(pkg)
        if mode is TargetMode.AUR and db_name not in ("", "aur"):
            continue
        if mode is TargetMode.REPO and db_name == "aur":
            continue
        valid.append(pkg)
    return valid


def _chunks(items: Sequence[str], size: int) -> Iterable[Sequence[str]]:
    size = max(size, 1)
    for start in range(0, len(items), size):
        yield items[start : start + size]


@dataclass
class Pool:
    """The packages that an install needs, from the repositories and the AUR."""

    alpm_executor: Any
    aur_client: Any = None
    targets: list[Target] = field(default_factory=list)
    explicit: set[str] = field(default_factory=set)
    repo: dict[str, Any] = field(default_factory=dict)
    aur: dict[str, AurPkg] = field(default_factory=dict)
    aur_cache: dict[str, AurPkg] = field(default_factory=dict)
    groups: list[str] = field(default_factory=list)

    def resolve_targets(
        self,
        pkgs: Iterable[str],
        mode: TargetMode,
        ignore_providers: bool,
        no_confirm: bool,
        provides: bool,
        rebuild: str,
        split_n: int,
        no_deps: bool,
        no_check_deps: bool,
        assume_installed: Iterable[str],
    ) -> None:
        """Resolve targets, honouring ``db/`` prefixes and group names."""
        assume_installed = list(assume_installed)
        aur_targets: set[str] = set()
        executor = self.alpm_executor

        for pkg in _remove_invalid_targets(pkgs, mode):
            target = to_target(pkg)
            dep = target.dep_string()

            # already satisfied targets are skipped, whatever their prefix
            if self.has_package(dep) or is_in_assume_installed(dep, assume_installed):
                continue

            if target.db == "aur" or mode is TargetMode.AUR:
                self.targets.append(target)
                aur_targets.add(dep)
                continue

            if target.db:
                found = executor.satisfier_from_db(dep, target.db)
            else:
                found = executor.sync_satisfier(dep)

            if found is not None:
                self.targets.append(target)
                self.explicit.add(found.name)
                self.resolve_repo_dependency(found, no_deps)
                continue

            group_packages = executor.packages_from_group(target.name)
            if group_packages:
                self.groups.append(str(target))
                self.explicit.update(p.name for p in group_packages)
                continue

            if not target.db:
                aur_targets.add(dep)
            self.targets.append(target)

        if aur_targets and mode.at_least_aur():
            self._resolve_aur_packages(
                aur_targets, True, ignore_providers, no_confirm, provides,
                rebuild, split_n, no_deps, no_check_deps,
            )

    def _find_provides(self, pkgs: set[str]) -> None:
        """Widen ``pkgs`` with AUR search results that might provide them."""
        lock = threading.Lock()

        def search(pkg: str) -> None:
            name = split_dep(pkg)[0]
            words = name.split("-")
            results = None
            for i in range(len(words)):
                try:
                    results = self.aur_client.search("-".join(words[: i + 1]))
                except Exception:  # noqa: BLE001 - a failed search is simply retried wider
                    continue
                break
            if results is None:
                return
            with lock:
                for result in results:
                    if result.name not in self.aur_cache:
                        pkgs.add(result.name)

        to_search = [p for p in pkgs if self.alpm_executor.local_package(p) is None]
        with ThreadPoolExecutor() as workers:
            for future in [workers.submit(search, p) for p in to_search]:
                future.result()

    def _cache_aur_packages(self, requested: set[str], provides: bool, split_n: int) -> None:
        pkgs = {p for p in requested if p not in self.aur_cache}
        if not pkgs:
            return

        if provides:
            self._find_provides(pkgs)

        to_query: list[str] = []
        for pkg in pkgs:
            if pkg in self.aur_cache:
                continue
            name, _, ver = split_dep(pkg)
            if ver:
                to_query.extend((name, name + "-" + ver))
            else:
                to_query.append(name)

        for chunk in _chunks(to_query, split_n):
            for pkg in self.aur_client.info(list(chunk)):
                self.aur_cache[pkg.name] = pkg

    def _resolve_aur_packages(
        self,
        pkgs: set[str],
        explicit: bool,
        ignore_providers: bool,
        no_confirm: bool,
        provides: bool,
        rebuild: str,
        split_n: int,
        no_deps: bool,
        no_check_deps: bool,
    ) -> None:
        self._cache_aur_packages(pkgs, provides, split_n)
        if not pkgs:
            return

        new_packages: list[str] = []
        for name in pkgs:
            if name in self.aur:
                continue
            pkg = self.find_satisfier_aur_cache(name, ignore_providers, no_confirm, provides)
            if pkg is None:
                continue
            if explicit:
                self.explicit.add(pkg.name)
            self.aur[pkg.name] = pkg
            for deps in compute_combined_dep_list(pkg, no_deps, no_check_deps):
                for dep in deps:
                    if dep not in new_packages:
                        new_packages.append(dep)

        new_aur_packages: set[str] = set()
        for dep in new_packages:
            if self.has_satisfier(dep):
                continue

            is_installed = self.alpm_executor.local_satisfier_exists(dep)
            repo_pkg = self.alpm_executor.sync_satisfier(dep)

            if is_installed and (rebuild != "tree" or repo_pkg is not None):
                continue

            if repo_pkg is not None:
                self.resolve_repo_dependency(repo_pkg, False)
                continue

            new_aur_packages.add(dep)

        self._resolve_aur_packages(
            new_aur_packages, False, ignore_providers, no_confirm, provides,
            rebuild, split_n, no_deps, no_check_deps,
        )

    def resolve_repo_dependency(self, pkg: Any, no_deps: bool) -> None:
        """Add a repository package and, unless ``no_deps``, its missing dependencies."""
        self.repo[pkg.name] = pkg
        if no_deps:
            return

        for dep in self.alpm_executor.package_depends(pkg):
            dep = str(dep)
            if self.has_satisfier(dep):
                continue
            if self.alpm_executor.local_satisfier_exists(dep):
                continue
            repo_pkg = self.alpm_executor.sync_satisfier(dep)
            if repo_pkg is not None:
                self.resolve_repo_dependency(repo_pkg, no_deps)

    def find_satisfier_aur(self, dep: str) -> AurPkg | None:
        """Return a pooled AUR package satisfying ``dep``."""
        return next((pkg for pkg in self.aur.values() if satisfies_aur(dep, pkg)), None)

    def find_satisfier_aur_cache(
        self, dep: str, ignore_providers: bool, no_confirm: bool, provides: bool
    ) -> AurPkg | None:
        """Pick the cached AUR package that should satisfy ``dep``.

        With several candidates and ``provides`` set, the user is asked.
        """
        dep_name = split_dep(dep)[0]

        if self.alpm_executor.local_package(dep_name) is not None:
            pkg = self.aur_cache.get(dep)
            if pkg is not None and pkg_satisfies(pkg.name, pkg.version, dep):
                return pkg

        if ignore_providers:
            target_names = {t.name for t in self.targets}
            for pkg in self.aur_cache.values():
                if pkg_satisfies(pkg.name, pkg.version, dep) and pkg.name in target_names:
                    return pkg

        candidates: list[AurPkg] = []
        seen: set[str] = set()
        for pkg in self.aur_cache.values():
            if pkg.name in seen:
                continue
            if pkg_satisfies(pkg.name, pkg.version, dep) or any(
                provide_satisfies(p, dep, pkg.version) for p in pkg.provides
            ):
                candidates.append(pkg)
                seen.add(pkg.name)

        if not candidates:
            return None
        if not provides or len(candidates) == 1:
            return candidates[0]
        return provider_menu(dep, sort_providers(dep_name, candidates), no_confirm)

    def find_satisfier_repo(self, dep: str) -> Any:
        """Return a pooled repository package satisfying ``dep``."""
        return next(
            (pkg for pkg in self.repo.values() if satisfies_repo(dep, pkg, self.alpm_executor)),
            None,
        )

    def has_satisfier(self, dep: str) -> bool:
        """Return whether any pooled package satisfies ``dep``."""
        return self.find_satisfier_repo(dep) is not None or self.find_satisfier_aur(dep) is not None

    def has_package(self, name: str) -> bool:
        """Return whether a package or group of this name is in the pool."""
        return (
            any(pkg.name == name for pkg in self.repo.values())
            or any(pkg.name == name for pkg in self.aur.values())
            or name in self.groups
        )


def get_pool(
    pkgs: Iterable[str],
    db_executor: Any,
    aur_client: Any,
    mode: TargetMode,
    ignore_providers: bool,
    no_confirm: bool,
    provides: bool,
    rebuild: str,
    split_n: int,
    no_deps: bool,
    no_check_deps: bool,
    assume_installed: Iterable[str],
) -> Pool:
    """Create a pool and resolve ``pkgs`` into it."""
    pool = Pool(alpm_executor=db_executor, aur_client=aur_client)
    pool.resolve_targets(
        pkgs, mode, ignore_providers, no_confirm, provides, rebuild,
        split_n, no_deps, no_check_deps, assume_installed,
    )
    return pool