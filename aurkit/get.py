"""Printing and fetching PKGBUILDs of requested packages."""

from __future__ import annotations

import os
import sys
from typing import Any, Sequence

from aurkit.download.unified import TargetMode, pkgbuild_repos, pkgbuilds
from aurkit.multierror import MultiError


class MissingPackagesError(LookupError):
    """Some requested packages could not be found."""

    def __init__(self, missing: Sequence[str]) -> None:
        self.missing = list(missing)
        super().__init__("Unable to find the following packages: " + ", ".join(self.missing))


def _missing(targets: Sequence[str], found: dict) -> list[str]:
    return [target for target in targets if target not in found]


def _report_missing(targets: Sequence[str], found: dict) -> None:
    if len(found) == len(targets):
        return
    missing = _missing(targets, found)
    print("-> Unable to find the following packages: " + ", ".join(missing), file=sys.stderr)
    raise MissingPackagesError(missing)


def print_pkgbuilds(
    db_executor: Any,
    http_client: Any,
    targets: Sequence[str],
    mode: TargetMode,
    aur_url: str,
) -> dict[str, bytes]:
    """Print the PKGBUILD of every target and return them.

    Raises :class:`MissingPackagesError` after printing if some targets
    could not be fetched.
    """
    try:
        fetched = pkgbuilds(db_executor, http_client, targets, aur_url, mode)
    except MultiError as err:
        print(f"error: {err}", file=sys.stderr)
        fetched = getattr(err, "partial", {})

    for target, content in fetched.items():
        print(f"\n\n# {target}\n\n", end="")
        print(content.decode("utf-8", errors="replace"), end="")

    _report_missing(targets, fetched)
    return fetched


def get_pkgbuilds(
    db_executor: Any,
    cmd_builder: Any,
    mode: TargetMode,
    aur_url: str,
    targets: Sequence[str],
    force: bool,
) -> dict[str, bool]:
    """Clone or update the PKGBUILD repositories of ``targets`` into the working directory.

    Returns a map of target to whether it was freshly cloned. Raises
    :class:`MissingPackagesError` if some targets could not be fetched.
    """
    cwd = os.getcwd()
    try:
        cloned = pkgbuild_repos(db_executor, cmd_builder, targets, mode, aur_url, cwd, force)
    except MultiError as err:
        print(f"error: {err}", file=sys.stderr)
        cloned = getattr(err, "partial", {})

    _report_missing(targets, cloned)
    return cloned