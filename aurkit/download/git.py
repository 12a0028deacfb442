"""Cloning and updating of PKGBUILD git repositories."""

from __future__ import annotations

import os
import shutil
import subprocess
from dataclasses import dataclass, field
from typing import Any, Sequence

from aurkit.download.errors import GetPKGBUILDRepoError

_COMMAND_ERRORS = (subprocess.SubprocessError, OSError)


class _SubprocessRunner:
    def show(self, cmd: Sequence[str]) -> None:
        subprocess.run(list(cmd), check=True)

    def capture(self, cmd: Sequence[str]) -> tuple[str, str]:
        result = subprocess.run(list(cmd), capture_output=True, text=True, check=True)
        return result.stdout, result.stderr


@dataclass
class GitCmdBuilder:
    """Builds git command lines and runs them through ``runner``.

    A runner has ``show(cmd)``, which runs a command attached to the
    terminal, and ``capture(cmd)``, which returns ``(stdout, stderr)``.
    Both raise when the command fails.
    """

    git_bin: str = "git"
    git_flags: list[str] = field(default_factory=list)
    runner: Any = field(default_factory=_SubprocessRunner)

    def build_git_cmd(self, directory: str | os.PathLike[str], *args: str) -> list[str]:
        """Return the command line running git in ``directory``."""
        return [self.git_bin, *self.git_flags, "-C", os.fspath(directory), *args]

    def show(self, cmd: Sequence[str]) -> None:
        self.runner.show(cmd)

    def capture(self, cmd: Sequence[str]) -> tuple[str, str]:
        return self.runner.capture(cmd)


def _remove(path: str) -> None:
    if os.path.isdir(path) and not os.path.islink(path):
        shutil.rmtree(path)
    else:
        os.remove(path)


def _run(cmd_builder: Any, cmd: list[str], pkg_name: str) -> None:
    try:
        cmd_builder.capture(cmd)
    except _COMMAND_ERRORS as err:
        stderr = getattr(err, "stderr", None) or ""
        if isinstance(stderr, bytes):
            stderr = stderr.decode("utf-8", errors="replace")
        raise GetPKGBUILDRepoError(err, pkg_name, stderr) from err


def download_git_repo(
    cmd_builder: Any,
    pkg_url: str,
    pkg_name: str,
    dest: str | os.PathLike[str],
    force: bool,
    *args: str,
) -> bool:
    """Clone ``pkg_url`` into ``dest/pkg_name``, or pull if it is already there.

    Extra ``args`` are passed to ``git clone``. With ``force`` an existing
    checkout is removed and cloned again. Returns whether a fresh clone was made.
    """
    dest = os.fspath(dest)
    final_dir = os.path.join(dest, pkg_name)
    git_dir = os.path.join(final_dir, ".git")

    try:
        os.stat(git_dir)
    except FileNotFoundError:
        has_repo = False
    except OSError as err:
        raise GetPKGBUILDRepoError(err, pkg_name, f"error reading {git_dir}") from err
    else:
        has_repo = True

    if has_repo and not force:
        _run(cmd_builder, cmd_builder.build_git_cmd(final_dir, "pull", "--rebase", "--autostash"), pkg_name)
        return False

    if force and os.path.exists(final_dir):
        try:
            _remove(final_dir)
        except OSError as err:
            raise GetPKGBUILDRepoError(err, pkg_name, "") from err

    cmd = cmd_builder.build_git_cmd(dest, "clone", "--no-progress", *args, pkg_url, pkg_name)
    _run(cmd_builder, cmd, pkg_name)
    return True