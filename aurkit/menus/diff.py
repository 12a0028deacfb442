"""The diff menu: review of PKGBUILD changes since they were last seen."""

from __future__ import annotations

import os
import subprocess
import sys
from typing import Any, Iterable, Mapping, Sequence

from aurkit.dep.base import Base
from aurkit.menus.menu import UserAbortError, continue_task, selection_menu
from aurkit.multierror import MultiError

GIT_EMPTY_TREE = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"
GIT_DIFF_REF_NAME = "AUR_SEEN"

_COMMAND_ERRORS = (subprocess.SubprocessError, OSError)


def _stderr_of(err: BaseException) -> str:
    stderr = getattr(err, "stderr", None) or ""
    if isinstance(stderr, bytes):
        stderr = stderr.decode("utf-8", errors="replace")
    return stderr


def _capture(cmd_builder: Any, cmd: list[str], separator: str) -> str:
    try:
        stdout, _ = cmd_builder.capture(cmd)
    except _COMMAND_ERRORS as err:
        raise RuntimeError(f"{_stderr_of(err)}{separator}{err}") from err
    return stdout


def git_has_last_seen_ref(cmd_builder: Any, path: str | os.PathLike[str], name: str) -> bool:
    """Return whether a diff of this package has been reviewed before."""
    cmd = cmd_builder.build_git_cmd(
        os.path.join(os.fspath(path), name), "rev-parse", "--quiet", "--verify", GIT_DIFF_REF_NAME
    )
    try:
        cmd_builder.capture(cmd)
    except _COMMAND_ERRORS:
        return False
    return True


def git_has_diff(cmd_builder: Any, path: str | os.PathLike[str], name: str) -> bool:
    """Return whether upstream moved on since the last reviewed commit."""
    if not git_has_last_seen_ref(cmd_builder, path, name):
        return True

    cmd = cmd_builder.build_git_cmd(
        os.path.join(os.fspath(path), name), "rev-parse", GIT_DIFF_REF_NAME, "HEAD@{upstream}"
    )
    lines = _capture(cmd_builder, cmd, "").split("\n")
    return lines[0] != lines[1]


def get_last_seen_hash(cmd_builder: Any, path: str | os.PathLike[str], name: str) -> str:
    """Return the last reviewed commit, or the empty tree if none was reviewed."""
    if not git_has_last_seen_ref(cmd_builder, path, name):
        return GIT_EMPTY_TREE

    cmd = cmd_builder.build_git_cmd(os.path.join(os.fspath(path), name), "rev-parse", GIT_DIFF_REF_NAME)
    return _capture(cmd_builder, cmd, " ").split("\n")[0]


def git_update_seen_ref(cmd_builder: Any, path: str | os.PathLike[str], name: str) -> None:
    """Mark HEAD as the last reviewed commit."""
    cmd = cmd_builder.build_git_cmd(
        os.path.join(os.fspath(path), name), "update-ref", GIT_DIFF_REF_NAME, "HEAD"
    )
    _capture(cmd_builder, cmd, " ")


def update_pkgbuild_seen_ref(cmd_builder: Any, build_dir: str | os.PathLike[str], bases: Sequence[Base]) -> None:
    """Mark every base as reviewed; raises :class:`MultiError` on failures."""
    errors = MultiError()
    for base in bases:
        try:
            git_update_seen_ref(cmd_builder, build_dir, base.pkgbase())
        except RuntimeError as err:
            errors.add(err)
    errors.raise_if_errors()


def show_pkgbuild_diffs(
    cmd_builder: Any,
    build_dir: str | os.PathLike[str],
    bases: Sequence[Base],
    cloned: Mapping[str, bool],
) -> None:
    """Show the diff of each base since it was last reviewed.

    Fresh clones are diffed against the empty tree. Raises
    :class:`MultiError` if some diffs could not be prepared.
    """
    errors = MultiError()
    root = os.fspath(build_dir)
    color = "--color=always" if sys.stdout.isatty() else "--color=never"

    for base in bases:
        pkg = base.pkgbase()
        directory = os.path.join(root, pkg)

        try:
            start = get_last_seen_hash(cmd_builder, root, pkg)
        except RuntimeError as err:
            errors.add(err)
            continue

        if cloned.get(pkg, False):
            start = GIT_EMPTY_TREE
        else:
            try:
                has_diff = git_has_diff(cmd_builder, root, pkg)
            except RuntimeError as err:
                errors.add(err)
                continue
            if not has_diff:
                print(f"-> {base}: No changes -- skipping", file=sys.stderr)
                continue

        args = [
            "diff",
            start + "..HEAD@{upstream}",
            "--src-prefix",
            directory + "/",
            "--dst-prefix",
            directory + "/",
            "--",
            ".",
            ":(exclude).SRCINFO",
            color,
        ]
        try:
            cmd_builder.show(cmd_builder.build_git_cmd(directory, *args))
        except _COMMAND_ERRORS:
            pass

    errors.raise_if_errors()


def diff(
    cmd_builder: Any,
    build_dir: str | os.PathLike[str],
    diff_menu_option: bool,
    bases: Sequence[Base],
    installed: Iterable[str],
    cloned: Mapping[str, bool],
    no_confirm: bool,
    diff_default_answer: str,
) -> None:
    """Let the user pick diffs to review, show them and record them as seen.

    Raises :class:`UserAbortError` if the user declines to proceed.
    """
    if not diff_menu_option:
        return

    to_diff = selection_menu(
        build_dir, bases, installed, "Diffs to show?", no_confirm, diff_default_answer, None
    )
    if not to_diff:
        return

    show_pkgbuild_diffs(cmd_builder, build_dir, to_diff, cloned)
    print()

    if not continue_task("Proceed with install?", True, False):
        raise UserAbortError()

    update_pkgbuild_seen_ref(cmd_builder, build_dir, to_diff)