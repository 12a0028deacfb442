"""Errors raised while fetching PKGBUILDs and their repositories."""

from __future__ import annotations


class AURPackageNotFoundError(LookupError):
    """The AUR has no package of the requested name."""

    def __init__(self, pkg_name: str) -> None:
        super().__init__(pkg_name)
        self.pkg_name = pkg_name

    def __str__(self) -> str:
        return f"package not found in AUR : {self.pkg_name}\n"


class GetPKGBUILDRepoError(Exception):
    """Cloning or updating the PKGBUILD repository of a package failed."""

    def __init__(self, inner: BaseException, pkg_name: str, err_out: str = "") -> None:
        super().__init__(inner, pkg_name, err_out)
        self.inner = inner
        self.pkg_name = pkg_name
        self.err_out = err_out
        self.__cause__ = inner

    def __str__(self) -> str:
        return f"error fetching {self.pkg_name}: {self.err_out} \n\t context: {self.inner}\n"