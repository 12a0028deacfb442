"""The clean-build menu: removal of cached build directories."""

from __future__ import annotations

import os
import shutil
import sys
from typing import Iterable, Sequence

from aurkit.dep.base import Base
from aurkit.menus.menu import selection_menu


def _exists(path: str) -> bool:
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    except OSError:
        return True
    return True


def any_exist_in_cache(build_dir: str | os.PathLike[str], bases: Sequence[Base]) -> bool:
    """Return whether any base has a build directory in ``build_dir``."""
    root = os.fspath(build_dir)
    return any(_exists(os.path.join(root, base.pkgbase())) for base in bases)


def clean(
    clean_menu_option: bool,
    build_dir: str | os.PathLike[str],
    bases: Sequence[Base],
    installed: Iterable[str],
    no_confirm: bool,
    answer_clean: str,
) -> None:
    """Offer to delete the build directories of ``bases`` and delete those chosen."""
    if not (clean_menu_option and any_exist_in_cache(build_dir, bases)):
        return

    root = os.fspath(build_dir)

    def skip(pkg: str) -> bool:
        return not _exists(os.path.join(root, pkg))

    to_clean = selection_menu(
        build_dir, bases, installed, "Packages to cleanBuild?", no_confirm, answer_clean, skip
    )

    for i, base in enumerate(to_clean, start=1):
        directory = os.path.join(root, base.pkgbase())
        print(f":: Deleting ({i}/{len(to_clean)}): {directory}")
        try:
            shutil.rmtree(directory)
        except FileNotFoundError:
            pass
        except OSError as err:
            print(err, file=sys.stderr)