[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "aurkit"
version = "11.0.1"
description = "Dependency resolution, PKGBUILD retrieval and build menus for AUR helpers"
requires-python = ">=3.10"
keywords = ["aur", "pacman", "pkgbuild", "makepkg", "packaging", "dependencies"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Software Distribution",
]
dependencies = [
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["aurkit"]

[tool.hatch.build.targets.sdist]
include = ["aurkit", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
