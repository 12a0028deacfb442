"""Interactive prompts and the numbered selection menu for package bases."""

from __future__ import annotations

import os
from typing import Callable, Iterable, Sequence

from aurkit.dep.base import Base
from aurkit.intrange import parse_number_menu


class UserAbortError(Exception):
    """The user chose to abort the operation."""

    def __init__(self, message: str = "aborting due to user") -> None:
        super().__init__(message)


def get_input(default_answer: str, no_confirm: bool) -> str:
    """Read one line of input.

    A non-empty ``default_answer``, or ``no_confirm``, answers without
    reading and is echoed instead.
    """
    print("==> ", end="")
    if default_answer or no_confirm:
        print(default_answer)
        return default_answer
    return input()


def continue_task(question: str, default: bool, no_confirm: bool) -> bool:
    """Ask a yes/no question; an empty or unreadable answer gives ``default``."""
    if no_confirm:
        return default

    postfix = " [Y/n] " if default else " [y/N] "
    print(f"==> {question}{postfix}", end="")

    try:
        response = input()
    except EOFError:
        return default

    words = response.split()
    if len(words) != 1:
        return default
    return words[0].lower() in ("yes", "y")


def _exists(path: str) -> bool:
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    except OSError:
        return True
    return True


def pkgbuild_number_menu(build_dir: str | os.PathLike[str], bases: Sequence[Base], installed: Iterable[str]) -> str:
    """Print the bases numbered from the bottom up and return the printed text."""
    installed = set(installed)
    lines = []
    for n, base in enumerate(bases):
        line = f"{len(bases) - n:3d} {str(base):<40}"
        if base.any_is_in_set(installed):
            line += " (Installed)"
        if _exists(os.path.join(os.fspath(build_dir), base.pkgbase())):
            line += " (Build Files Exist)"
        lines.append(line + "\n")

    text = "".join(lines)
    print(text, end="")
    return text


def selection_menu(
    build_dir: str | os.PathLike[str],
    bases: Sequence[Base],
    installed: Iterable[str],
    message: str,
    no_confirm: bool,
    default_answer: str,
    skip_func: Callable[[str], bool] | None,
) -> list[Base]:
    """Show the numbered menu and return the bases the user selected.

    Answers may be numbers, ranges, ``^`` exclusions, package base names or
    the words all, none, installed, notinstalled and abort (or their
    abbreviations). Raises :class:`UserAbortError` on abort.
    """
    installed = set(installed)
    pkgbuild_number_menu(build_dir, bases, installed)

    print(f"==> {message}")
    print("==> [N]one [A]ll [Ab]ort [I]nstalled [No]tInstalled or (1 2 3, 1-3, ^4)")

    selection = parse_number_menu(get_input(default_answer, no_confirm))
    words = selection.other_include
    is_include = not selection.exclude and not selection.other_exclude

    if "abort" in words or "ab" in words:
        raise UserAbortError()

    if "n" in words or "none" in words:
        return []

    selected: list[Base] = []
    total = len(bases)
    for i, base in enumerate(bases):
        pkg = base.pkgbase()
        number = total - i

        if skip_func is not None and skip_func(pkg):
            continue

        any_installed = base.any_is_in_set(installed)

        if not is_include and selection.exclude.contains(number):
            continue

        if any_installed and ("i" in words or "installed" in words):
            selected.append(base)
            continue

        if not any_installed and ("no" in words or "notinstalled" in words):
            selected.append(base)
            continue

        if "a" in words or "all" in words:
            selected.append(base)
            continue

        if is_include and (selection.include.contains(number) or pkg in words):
            selected.append(base)

        if not is_include and not selection.exclude.contains(number) and pkg not in selection.other_exclude:
            selected.append(base)

    return selected