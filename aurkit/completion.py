"""Shell-completion cache of AUR and repository package names."""

from __future__ import annotations

import posixpath
import shutil
import sys
import time
from pathlib import Path
from typing import Any, TextIO
from urllib.parse import urlsplit, urlunsplit

import requests


def show(
    session: requests.Session,
    db_executor: Any,
    aur_url: str,
    completion_path: str | Path,
    interval: int,
    force: bool,
) -> None:
    """Refresh the completion cache if needed and print it to stdout."""
    update(session, db_executor, aur_url, completion_path, interval, force)

    with open(completion_path, "a+", encoding="utf-8") as cache:
        cache.seek(0)
        shutil.copyfileobj(cache, sys.stdout)


def update(
    session: requests.Session,
    db_executor: Any,
    aur_url: str,
    completion_path: str | Path,
    interval: int,
    force: bool,
) -> None:
    """Rebuild the completion cache when missing, stale or forced.

    ``interval`` is in days; ``-1`` never treats an existing cache as stale.
    If the AUR list cannot be fetched the cache file is removed again.
    """
    path = Path(completion_path)
    try:
        modified = path.stat().st_mtime
    except FileNotFoundError:
        missing = True
        stale = False
    else:
        missing = False
        age_hours = (time.time() - modified) / 3600
        stale = interval != -1 and age_hours >= interval * 24

    if not (missing or stale or force):
        return

    path.parent.mkdir(parents=True, exist_ok=True)

    aur_failed = False
    try:
        with path.open("w", encoding="utf-8") as out:
            try:
                create_aur_list(session, aur_url, out)
            except (requests.RequestException, OSError, ValueError):
                aur_failed = True
            create_repo_list(db_executor, out)
    finally:
        if aur_failed:
            path.unlink(missing_ok=True)


def _packages_url(aur_url: str) -> str:
    parts = urlsplit(aur_url)
    joined = posixpath.normpath(posixpath.join(parts.path, "packages.gz"))
    if parts.netloc and not joined.startswith("/"):
        joined = "/" + joined
    return urlunsplit((parts.scheme, parts.netloc, joined, parts.query, parts.fragment))


def create_aur_list(session: requests.Session, aur_url: str, out: TextIO) -> None:
    """Write every AUR package name followed by a tab and ``AUR``.

    The first line of the package list and comment lines are skipped.
    """
    with session.get(_packages_url(aur_url)) as response:
        if response.status_code != 200:
            raise requests.HTTPError(
                f"invalid status code: {response.status_code}", response=response
            )
        body = response.content.decode("utf-8", errors="replace")

    lines = body.split("\n")
    if lines and lines[-1] == "":
        lines.pop()

    for line in lines[1:]:
        line = line.removesuffix("\r")
        if line.startswith("#"):
            continue
        out.write(line + "\tAUR\n")


def create_repo_list(db_executor: Any, out: TextIO) -> None:
    """Write every sync package name followed by a tab and its repository."""
    for pkg in db_executor.sync_packages():
        out.write(f"{pkg.name}\t{pkg.db}\n")