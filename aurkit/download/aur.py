"""PKGBUILDs of AUR packages."""

from __future__ import annotations

import os
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Sequence
from urllib.parse import urlencode

from aurkit.download.abs import MAX_CONCURRENT_FETCH
from aurkit.download.errors import AURPackageNotFoundError, GetPKGBUILDRepoError
from aurkit.download.git import download_git_repo
from aurkit.multierror import MultiError


def aur_pkgbuild(http_client: Any, pkg_name: str, aur_url: str) -> bytes:
    """Fetch the PKGBUILD of an AUR package."""
    url = aur_url + "/cgit/aur.git/plain/PKGBUILD?" + urlencode({"h": pkg_name})
    response = http_client.get(url)
    if response.status_code != 200:
        raise AURPackageNotFoundError(pkg_name)
    return response.content


def aur_pkgbuild_repo(
    cmd_builder: Any,
    aur_url: str,
    pkg_name: str,
    dest: str | os.PathLike[str],
    force: bool,
) -> bool:
    """Clone or update the AUR git repository of ``pkg_name``."""
    return download_git_repo(cmd_builder, f"{aur_url}/{pkg_name}.git", pkg_name, dest, force)


def aur_pkgbuild_repos(
    cmd_builder: Any,
    targets: Sequence[str],
    aur_url: str,
    dest: str | os.PathLike[str],
    force: bool,
) -> dict[str, bool]:
    """Clone or update several AUR repositories concurrently.

    Returns a map of target to whether it was freshly cloned. If any target
    failed a :class:`MultiError` is raised; its ``partial`` attribute holds
    the map of the targets that succeeded.
    """
    cloned: dict[str, bool] = {}
    errors = MultiError()
    lock = threading.Lock()

    def fetch(target: str) -> None:
        progress = 0
        try:
            new_clone = aur_pkgbuild_repo(cmd_builder, aur_url, target, dest, force)
        except GetPKGBUILDRepoError as err:
            errors.add(err)
        else:
            with lock:
                cloned[target] = new_clone
                progress = len(cloned)
        print(f"({progress}/{len(targets)}) Downloaded PKGBUILD: {target}")

    with ThreadPoolExecutor(max_workers=MAX_CONCURRENT_FETCH) as pool:
        futures = [pool.submit(fetch, target) for target in targets]
    for future in futures:
        future.result()

    if errors.errors:
        errors.partial = cloned
        raise errors
    return cloned