"""The edit menu: opening PKGBUILDs in the user's editor."""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
from typing import Any, Iterable, Mapping, Sequence

from aurkit.dep.base import Base
from aurkit.menus.menu import UserAbortError, continue_task, get_input, selection_menu


def _look_path(command: str) -> str | None:
    found = shutil.which(command)
    if found is None:
        print(f'exec: "{command}": executable file not found in $PATH', file=sys.stderr)
    return found


def editor(editor_config: str, editor_flags: str, no_confirm: bool) -> tuple[str, list[str]]:
    """Return the editor to use and its arguments.

    Tries the configured editor, then ``$VISUAL``, then ``$EDITOR``, and
    finally asks the user.
    """
    if editor_config:
        found = _look_path(editor_config)
        if found is not None:
            return found, editor_flags.split()

    for variable in ("VISUAL", "EDITOR"):
        words = os.environ.get(variable, "").split()
        if words:
            found = _look_path(words[0])
            if found is not None:
                return found, words[1:]

    print(file=sys.stderr)
    print("error: $EDITOR is not set", file=sys.stderr)
    print("-> Add $EDITOR or $VISUAL to your environment variables", file=sys.stderr)

    while True:
        print("==> Edit PKGBUILD with?")
        words = get_input("", no_confirm).split()
        if not words:
            continue
        found = _look_path(words[0])
        if found is None:
            continue
        return found, words[1:]


def edit_pkgbuilds(
    build_dir: str | os.PathLike[str],
    bases: Sequence[Base],
    editor_config: str,
    editor_flags: str,
    srcinfos: Mapping[str, Any],
    no_confirm: bool,
) -> None:
    """Open the PKGBUILDs and install scripts of ``bases`` in one editor run.

    ``srcinfos`` maps a package base to its parsed .SRCINFO, whose
    ``split_packages()`` yields packages with an ``install`` attribute.
    """
    root = os.fspath(build_dir)
    files: list[str] = []
    for base in bases:
        pkg = base.pkgbase()
        directory = os.path.join(root, pkg)
        files.append(os.path.join(directory, "PKGBUILD"))
        for split in srcinfos[pkg].split_packages():
            if split.install:
                files.append(os.path.join(directory, split.install))

    if not files:
        return

    program, args = editor(editor_config, editor_flags, no_confirm)
    try:
        subprocess.run([program, *args, *files], check=True)
    except (subprocess.SubprocessError, OSError) as err:
        raise RuntimeError(f"editor did not exit successfully, aborting: {err}") from err


def edit(
    edit_menu_option: bool,
    build_dir: str | os.PathLike[str],
    bases: Sequence[Base],
    editor_config: str,
    editor_flags: str,
    installed: Iterable[str],
    srcinfos: Mapping[str, Any],
    no_confirm: bool,
    edit_default_answer: str,
) -> None:
    """Let the user pick PKGBUILDs to edit and open them.

    Raises :class:`UserAbortError` if the user declines to proceed.
    """
    if not edit_menu_option:
        return

    to_edit = selection_menu(
        build_dir, bases, installed, "PKGBUILDs to edit?", no_confirm, edit_default_answer, None
    )
    if not to_edit:
        return

    edit_pkgbuilds(build_dir, to_edit, editor_config, editor_flags, srcinfos, no_confirm)
    print()

    if not continue_task("Proceed with install?", True, False):
        raise UserAbortError()