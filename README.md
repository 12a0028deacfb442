# aurkit

Building blocks for an AUR helper: the steps between the user's request and
the `pacman` / `makepkg` / `git` calls that carry it out.

## What is in it

**Versions and constraints**

* `aurkit.version.vercmp(a, b)` compares `[epoch:]version[-release]` strings
  the way pacman does and returns a negative number, zero or a positive number.
* `aurkit.dep.satisfy` has `split_dep`, `ver_satisfies`, `pkg_satisfies`,
  `provide_satisfies`, `satisfies_aur` and `satisfies_repo`. Unversioned
  provides take the version of the package that provides them.

**Package bases**

* `aurkit.dep.base.AurPkg` holds AUR package metadata.
* `aurkit.dep.base.Base` is a list of split packages sharing one pkgbase.
  `str(base)` gives `base (foo bar)`.
* `aurkit.dep.base.get_bases` groups packages by pkgbase, in order of first
  appearance.

**Dependency resolution**

* `aurkit.dep.pool.get_pool` resolves targets into a `Pool`. It honours `db/`
  and `aur/` prefixes, group names, `--assume-installed` style entries and a
  `TargetMode` (`ANY`, `AUR`, `REPO`). It follows repository and AUR
  dependencies. When several AUR packages provide a dependency and provider
  search is on, it asks the user through `provider_menu`.
* `aurkit.dep.checks.check_missing` raises `MissingDependenciesError` when a
  needed package cannot be found. Its `missing` attribute and `lines()` method
  show which chain of packages wanted the missing one.
* `aurkit.dep.checks.check_conflicts` returns a map of each package to the
  packages it conflicts with. It raises `ConflictError` when conflicts exist,
  asking is off and no-confirm is on.
* `aurkit.dep.order.get_order` takes packages out of the pool into an `Order`,
  with dependencies first.
  * `has_make()` and `get_make()` report which packages are needed only to
    build.
  * `summary_lines()` and `print_summary()` give the `[Repo:N]`,
    `[Repo Make:N]`, `[Aur:N]` and `[Aur Make:N]` lines.

**PKGBUILD retrieval**

* `aurkit.download.aur`:
  * `aur_pkgbuild` fetches a single PKGBUILD. It raises
    `AURPackageNotFoundError` on a non-200 reply.
  * `aur_pkgbuild_repo` and `aur_pkgbuild_repos` clone or pull AUR git
    repositories.
* `aurkit.download.abs`:
  * `get_package_url` and `get_package_repo_url` map `core`, `extra`,
    `testing`, `community`, `multilib` and the testing repositories to their
    PKGBUILD locations. Any other repository raises `InvalidRepositoryError`.
  * `abs_pkgbuild` and `abs_pkgbuild_repo` fetch a PKGBUILD or its repository
    branch. `abs_pkgbuild` raises `ABSPackageNotFoundError` on a non-200 reply.
* `aurkit.download.unified`:
  * `pkgbuilds` and `pkgbuild_repos` pick the AUR or the repositories for each
    target and fetch up to 20 targets at once.
  * Failures are gathered into a `MultiError` whose `partial` attribute holds
    what did succeed.
* `aurkit.download.git.download_git_repo` clones, re-clones with `force`, or
  pulls with `--rebase --autostash`. It returns whether a fresh clone was made.
  Failures raise `GetPKGBUILDRepoError`.

**Menus** (read from standard input)

* `aurkit.menus.menu.selection_menu` is the number menu. It accepts `1 2 3`,
  `1-3`, `^4`, package base names and the words
  `all`/`a`, `none`/`n`, `installed`/`i`, `notinstalled`/`no` and
  `abort`/`ab`. Choosing abort raises `UserAbortError`.
* `aurkit.menus.menu.get_input` and `continue_task` are the underlying prompts.
* Three menus build on it:
  * `aurkit.menus.clean.clean` deletes chosen build directories.
  * `aurkit.menus.diff.diff` shows `git diff` since the last reviewed commit,
    recorded in the `AUR_SEEN` ref, and marks the diffs as seen.
  * `aurkit.menus.edit.edit` opens PKGBUILDs and install scripts in the
    configured editor, then `$VISUAL`, then `$EDITOR`, or one the user names.

**Sources and fetching for a list of targets**

* `aurkit.sources.download_pkgbuild_source` runs `makepkg --verifysource -Ccf`
  for one package base, adding `--ignorearch` for incompatible bases. It raises
  `DownloadSourceError` on failure.
* `aurkit.sources.download_pkgbuild_source_fanout` does the same for many bases
  with one worker per CPU and collects failures into a `MultiError`.
* `aurkit.get.print_pkgbuilds` prints the PKGBUILD of each target.
* `aurkit.get.get_pkgbuilds` clones or updates the PKGBUILD repositories of the
  targets into the current directory.
* Both raise `MissingPackagesError` for targets that could not be found.

**Shell completion**

* `aurkit.completion.update` rebuilds a cache file of `name<TAB>AUR` and
  `name<TAB>repository` lines. It does so when the file is missing, older than
  `interval` days (`-1` never expires) or `force` is set. If the AUR list
  cannot be fetched the file is removed.
* `aurkit.completion.show` updates the cache and copies it to standard output.

## Examples

```python
from aurkit.version import vercmp
from aurkit.dep.satisfy import split_dep, pkg_satisfies
from aurkit.intrange import parse_number_menu

vercmp("1.0", "1.1")                     # negative: 1.0 is older
split_dep("foo>=1.2")                    # ("foo", ">=", "1.2")
pkg_satisfies("foo", "1.3", "foo>=1.2")  # True

selection = parse_number_menu("1 2,3 ^5-7 all")
selection.include.contains(2)            # True
selection.exclude.contains(6)            # True
selection.other_include                  # {"all"}
```

## Installing

Python 3.10 or later is required, and `requests` is the only dependency.
Install from a checkout with any PEP 517 installer. The `test` extra adds
`pytest` and `responses` for the test suite.

## What you supply

aurkit talks to the system through objects you pass in:

* **Package databases.** aurkit does not read the pacman databases itself.
  Dependency resolution and checks take an object with the methods of the
  `aurkit.version.Executor` protocol. PKGBUILD retrieval takes the smaller
  `aurkit.download.unified.DBSearcher`. Packages are expected to expose
  `name`, `version`, `base` and `db`.
* **The AUR RPC interface.** There is no RPC client. `get_pool` takes an
  object with `search(query)` and `info(names)` returning `AurPkg` values, as
  described by `aurkit.dep.pool.AurClient`.
* **Commands.**
  * Git calls go through a command builder such as
    `aurkit.download.git.GitCmdBuilder`, whose `runner` can be replaced.
  * `aurkit.sources` needs a builder that also provides
    `build_makepkg_cmd(directory, *args)`; none is included.
* **HTTP.** The download and completion functions take a `requests.Session` or
  any object with a compatible `get`.
* **Parsed .SRCINFO files.** `aurkit.menus.edit` takes them ready-made; no
  .SRCINFO parser is included.

## What it does not do

There is no command-line program. aurkit does not parse command-line options
or a configuration file. It does not run the install, build or upgrade steps
of an AUR helper as a whole: invoking `pacman`, building with `makepkg`,
checking PGP keys, tracking VCS packages and cleaning caches are left to the
program that uses these pieces.