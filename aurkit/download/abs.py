"""PKGBUILDs of official repository packages."""

from __future__ import annotations

import os
from typing import Any

from aurkit.download.git import download_git_repo

MAX_CONCURRENT_FETCH = 20
ABS_PACKAGE_URL = "https://github.com/archlinux/svntogit-packages"
ABS_COMMUNITY_URL = "https://github.com/archlinux/svntogit-community"

_PACKAGE_REPOS = frozenset({"core", "extra", "testing"})
_COMMUNITY_REPOS = frozenset({"community", "multilib", "community-testing", "multilib-testing"})


class InvalidRepositoryError(ValueError):
    """The repository has no known PKGBUILD source."""

    def __init__(self, message: str = "invalid repository") -> None:
        super().__init__(message)


class ABSPackageNotFoundError(LookupError):
    """The repository PKGBUILD could not be found."""

    def __init__(self, message: str = "package not found in repos") -> None:
        super().__init__(message)


def get_repo_url(db: str) -> str:
    """Return the PKGBUILD repository that serves the database ``db``."""
    if db in _PACKAGE_REPOS:
        return ABS_PACKAGE_URL
    if db in _COMMUNITY_REPOS:
        return ABS_COMMUNITY_URL
    raise InvalidRepositoryError()


def get_package_url(db: str, pkg_name: str) -> str:
    """Return the URL of the raw PKGBUILD of ``pkg_name``."""
    return f"{get_repo_url(db)}/raw/packages/{pkg_name}/trunk/PKGBUILD"


def get_package_repo_url(db: str) -> str:
    """Return the git URL of the PKGBUILD repository for ``db``."""
    return get_repo_url(db) + ".git"


def abs_pkgbuild(http_client: Any, db_name: str, pkg_name: str) -> bytes:
    """Fetch the PKGBUILD of a repository package."""
    response = http_client.get(get_package_url(db_name, pkg_name))
    if response.status_code != 200:
        raise ABSPackageNotFoundError()
    return response.content


def abs_pkgbuild_repo(
    cmd_builder: Any,
    db_name: str,
    pkg_name: str,
    dest: str | os.PathLike[str],
    force: bool,
) -> bool:
    """Clone or update the PKGBUILD branch of a repository package."""
    return download_git_repo(
        cmd_builder,
        get_package_repo_url(db_name),
        pkg_name,
        dest,
        force,
        "--single-branch",
        "-b",
        "packages/" + pkg_name,
    )