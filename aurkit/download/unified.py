"""Fetching PKGBUILDs from the AUR or the official repositories alike."""

from __future__ import annotations

import enum
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, NamedTuple, Protocol, Sequence

import requests

from aurkit.download.abs import (
    MAX_CONCURRENT_FETCH,
    ABSPackageNotFoundError,
    InvalidRepositoryError,
    abs_pkgbuild,
    abs_pkgbuild_repo,
)
from aurkit.download.aur import aur_pkgbuild, aur_pkgbuild_repo
from aurkit.download.errors import AURPackageNotFoundError, GetPKGBUILDRepoError
from aurkit.multierror import MultiError

_FETCH_ERRORS = (
    AURPackageNotFoundError,
    ABSPackageNotFoundError,
    InvalidRepositoryError,
    requests.RequestException,
    OSError,
)
_REPO_ERRORS = (GetPKGBUILDRepoError, InvalidRepositoryError)


class TargetMode(enum.Enum):
    """Which package sources targets may come from."""

    ANY = "any"
    AUR = "aur"
    REPO = "repo"

    def at_least_aur(self) -> bool:
        """Return whether AUR packages are allowed."""
        return self is not TargetMode.REPO

    def at_least_repo(self) -> bool:
        """Return whether repository packages are allowed."""
        return self is not TargetMode.AUR


class DBSearcher(Protocol):
    """Lookup of sync database packages.

    Packages expose ``name``, ``base`` and ``db`` (the repository name).
    """

    def sync_package(self, name: str) -> Any: ...

    def satisfier_from_db(self, name: str, db_name: str) -> Any: ...


class _UsableName(NamedTuple):
    db_name: str
    name: str
    aur: bool
    to_skip: bool


def split_db_from_name(target: str) -> tuple[str, str]:
    """Split ``db/name`` into its parts; the database is empty when absent."""
    db_name, sep, name = target.partition("/")
    if not sep:
        return "", target
    return db_name, name


def get_package_usable_name(db_executor: Any, target: str, mode: TargetMode) -> _UsableName:
    """Work out where to fetch ``target`` from.

    Returns the database, the name to fetch by, whether it comes from the
    AUR and whether it must be skipped.
    """
    aur = True
    db_name, name = split_db_from_name(target)

    if db_name != "aur" and mode.at_least_repo():
        if db_name:
            pkg = db_executor.satisfier_from_db(name, db_name)
            if pkg is None:
                return _UsableName(db_name, name, aur, True)
        else:
            pkg = db_executor.sync_package(name)

        if pkg is not None:
            aur = False
            name = pkg.base or pkg.name
            db_name = pkg.db

    if aur and mode is TargetMode.REPO:
        return _UsableName(db_name, name, aur, True)
    return _UsableName(db_name, name, aur, False)


def pkgbuilds(
    db_executor: Any,
    http_client: Any,
    targets: Sequence[str],
    aur_url: str,
    mode: TargetMode,
) -> dict[str, bytes]:
    """Fetch the PKGBUILD of every target concurrently.

    Returns a map of target to PKGBUILD contents. If any fetch failed a
    :class:`MultiError` is raised; its ``partial`` attribute holds the
    PKGBUILDs that were fetched.
    """
    fetched: dict[str, bytes] = {}
    errors = MultiError()
    lock = threading.Lock()

    def fetch(target: str, usable: _UsableName) -> None:
        try:
            if usable.aur:
                content = aur_pkgbuild(http_client, usable.name, aur_url)
            else:
                content = abs_pkgbuild(http_client, usable.db_name, usable.name)
        except _FETCH_ERRORS as err:
            errors.add(err)
            return
        with lock:
            fetched[target] = content

    with ThreadPoolExecutor(max_workers=MAX_CONCURRENT_FETCH) as pool:
        futures = []
        for target in targets:
            usable = get_package_usable_name(db_executor, target, mode)
            if usable.to_skip:
                continue
            futures.append(pool.submit(fetch, target, usable))
    for future in futures:
        future.result()

    if errors.errors:
        errors.partial = fetched
        raise errors
    return fetched


def pkgbuild_repos(
    db_executor: Any,
    cmd_builder: Any,
    targets: Sequence[str],
    mode: TargetMode,
    aur_url: str,
    dest: str | os.PathLike[str],
    force: bool,
) -> dict[str, bool]:
    """Clone or update the PKGBUILD repository of every target concurrently.

    Returns a map of target to whether it was freshly cloned. If any target
    failed a :class:`MultiError` is raised; its ``partial`` attribute holds
    the map of the targets that succeeded.
    """
    cloned: dict[str, bool] = {}
    errors = MultiError()
    lock = threading.Lock()

    def fetch(target: str, usable: _UsableName) -> None:
        progress = 0
        try:
            if usable.aur:
                new_clone = aur_pkgbuild_repo(cmd_builder, aur_url, usable.name, dest, force)
            else:
                new_clone = abs_pkgbuild_repo(cmd_builder, usable.db_name, usable.name, dest, force)
        except _REPO_ERRORS as err:
            errors.add(err)
        else:
            with lock:
                cloned[target] = new_clone
                progress = len(cloned)

        source = "PKGBUILD" if usable.aur else "PKGBUILD from ABS"
        print(f"({progress}/{len(targets)}) Downloaded {source}: {usable.name}")

    with ThreadPoolExecutor(max_workers=MAX_CONCURRENT_FETCH) as pool:
        futures = []
        for target in targets:
            usable = get_package_usable_name(db_executor, target, mode)
            if usable.to_skip:
                continue
            futures.append(pool.submit(fetch, target, usable))
    for future in futures:
        future.result()

    if errors.errors:
        errors.partial = cloned
        raise errors
    return cloned