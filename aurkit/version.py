"""Package version comparison and the package database interface."""

from __future__ import annotations

import enum
import string
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol, Sequence

_DIGITS = frozenset(string.digits)
_ALPHA = frozenset(string.ascii_letters)
_ALNUM = _DIGITS | _ALPHA


class PackageReason(enum.IntEnum):
    """Why a package was installed."""

    EXPLICIT = 0
    DEPEND = 1


@dataclass
class Upgrade:
    """An available upgrade of an installed package."""

    name: str
    repository: str
    local_version: str
    remote_version: str
    reason: PackageReason = PackageReason.EXPLICIT


class Executor(Protocol):
    """Access to the local and sync package databases.

    Packages handed out expose ``name``, ``version``, ``base`` and ``db``
    (the name of the repository they come from). Dependency, provide and
    conflict lists are sequences of dependency strings.
    """

    def alpm_architectures(self) -> list[str]: ...

    def biggest_packages(self) -> list[Any]: ...

    def cleanup(self) -> None: ...

    def is_correct_version_installed(self, name: str, version: str) -> bool: ...

    def last_build_time(self) -> datetime: ...

    def local_package(self, name: str) -> Any: ...

    def local_packages(self) -> list[Any]: ...

    def local_satisfier_exists(self, dep: str) -> bool: ...

    def package_conflicts(self, pkg: Any) -> Sequence[str]: ...

    def package_depends(self, pkg: Any) -> Sequence[str]: ...

    def package_groups(self, pkg: Any) -> Sequence[str]: ...

    def package_optional_depends(self, pkg: Any) -> Sequence[str]: ...

    def package_provides(self, pkg: Any) -> Sequence[str]: ...

    def packages_from_group(self, group: str) -> list[Any]: ...

    def refresh_handle(self) -> None: ...

    def repo_upgrades(self, enable_downgrade: bool) -> list[Upgrade]: ...

    def repos(self) -> list[str]: ...

    def satisfier_from_db(self, dep: str, db_name: str) -> Any: ...

    def sync_package(self, name: str) -> Any: ...

    def sync_packages(self, *names: str) -> list[Any]: ...

    def sync_satisfier(self, dep: str) -> Any: ...

    def sync_satisfier_exists(self, dep: str) -> bool: ...


def _segment_compare(a: str, b: str) -> int:
    if a == b:
        return 0

    la, lb = len(a), len(b)
    one = two = 0
    start1 = start2 = 0

    while one < la and two < lb:
        while one < la and a[one] not in _ALNUM:
            one += 1
        while two < lb and b[two] not in _ALNUM:
            two += 1
        if one >= la or two >= lb:
            break

        # a differing number of separators decides the comparison
        if one - start1 != two - start2:
            return -1 if one - start1 < two - start2 else 1

        start1, start2 = one, two
        kind = _DIGITS if a[start1] in _DIGITS else _ALPHA
        is_num = kind is _DIGITS
        while start1 < la and a[start1] in kind:
            start1 += 1
        while start2 < lb and b[start2] in kind:
            start2 += 1

        seg1, seg2 = a[one:start1], b[two:start2]
        if not seg2:
            return 1 if is_num else -1

        if is_num:
            seg1, seg2 = seg1.lstrip("0"), seg2.lstrip("0")
            if len(seg1) != len(seg2):
                return 1 if len(seg1) > len(seg2) else -1

        if seg1 != seg2:
            return -1 if seg1 < seg2 else 1

        one, two = start1, start2

    if one >= la and two >= lb:
        return 0

    rest1 = a[one] if one < la else ""
    rest2 = b[two] if two < lb else ""
    if (not rest1 and rest2 not in _ALPHA) or (rest1 and rest1 in _ALPHA):
        return -1
    return 1


def _parse_evr(evr: str) -> tuple[str, str, str | None]:
    i = 0
    while i < len(evr) and evr[i] in _DIGITS:
        i += 1

    dash = evr.rfind("-", i)
    if dash != -1:
        release: str | None = evr[dash + 1 :]
        body = evr[:dash]
    else:
        release = None
        body = evr

    if i < len(body) and body[i] == ":":
        return evr[:i] or "0", body[i + 1 :], release
    return "0", body, release


def vercmp(a: str, b: str) -> int:
    """Compare two ``[epoch:]version[-release]`` strings like pacman does.

    Returns a negative number, zero or a positive number.
    """
    if a == b:
        return 0

    epoch1, ver1, rel1 = _parse_evr(a)
    epoch2, ver2, rel2 = _parse_evr(b)

    result = _segment_compare(epoch1, epoch2)
    if result == 0:
        result = _segment_compare(ver1, ver2)
        if result == 0 and rel1 is not None and rel2 is not None:
            result = _segment_compare(rel1, rel2)
    return result