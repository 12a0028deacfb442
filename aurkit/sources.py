"""Downloading and verifying the sources of PKGBUILDs with makepkg."""

from __future__ import annotations

import os
import subprocess
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable, Sequence

from aurkit.dep.base import Base
from aurkit.multierror import MultiError

_COMMAND_ERRORS = (subprocess.SubprocessError, OSError)


def _cyan(value: str) -> str:
    return f"\x1b[36m{value}\x1b[0m"


class DownloadSourceError(Exception):
    """makepkg failed to download or verify the sources of a package base."""

    def __init__(self, inner: BaseException, pkg_name: str, err_out: str = "") -> None:
        super().__init__(inner, pkg_name, err_out)
        self.inner = inner
        self.pkg_name = pkg_name
        self.err_out = err_out
        self.__cause__ = inner

    def __str__(self) -> str:
        return (
            f"error downloading sources: {_cyan(self.pkg_name)} "
            f"\n\t context: {self.inner} \n\t {self.err_out}\n"
        )


def download_pkgbuild_source(
    cmd_builder: Any,
    dest: str | os.PathLike[str],
    base: str,
    incompatible: Iterable[str],
) -> None:
    """Run ``makepkg --verifysource`` for the package base ``base`` in ``dest``.

    ``cmd_builder`` provides ``build_makepkg_cmd(directory, *args)`` and
    ``show(cmd)``. Bases listed in ``incompatible`` are built with
    ``--ignorearch``. Raises :class:`DownloadSourceError` on failure.
    """
    directory = os.path.join(os.fspath(dest), base)
    args = ["--verifysource", "-Ccf"]
    if base in set(incompatible):
        args.append("--ignorearch")

    try:
        cmd_builder.show(cmd_builder.build_makepkg_cmd(directory, *args))
    except _COMMAND_ERRORS as err:
        raise DownloadSourceError(err, base, "") from err


def download_pkgbuild_source_fanout(
    cmd_builder: Any,
    dest: str | os.PathLike[str],
    bases: Sequence[Base],
    incompatible: Iterable[str],
) -> None:
    """Download the sources of every base, one worker per CPU.

    A single base is handled directly and its error raised as is. With
    several bases every failure is collected into a :class:`MultiError`.
    """
    incompatible = set(incompatible)

    if len(bases) == 1:
        download_pkgbuild_source(cmd_builder, dest, bases[0].pkgbase(), incompatible)
        return

    errors = MultiError()

    def work(name: str) -> None:
        try:
            download_pkgbuild_source(cmd_builder, dest, name, incompatible)
        except DownloadSourceError as err:
            errors.add(err)

    with ThreadPoolExecutor(max_workers=os.cpu_count() or 1) as pool:
        futures = [pool.submit(work, base.pkgbase()) for base in bases]
    for future in futures:
        future.result()

    errors.raise_if_errors()