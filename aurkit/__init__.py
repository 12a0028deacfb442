"""Dependency resolution, PKGBUILD retrieval and build menus for AUR helpers."""

__version__ = "11.0.1"