import sys
from dataclasses import dataclass

import pytest

from aurkit.dep.base import AurPkg, Base
from aurkit.menus.edit import edit, edit_pkgbuilds, editor
from aurkit.menus.menu import UserAbortError

MARK_FIRST = "-c __import__('pathlib').Path(__import__('sys').argv[1]+'.seen').touch()"
MARK_SECOND = "-c __import__('pathlib').Path(__import__('sys').argv[2]+'.seen').touch()"


@dataclass
class Split:
    install: str = ""


class Srcinfo:
    def __init__(self, *installs):
        self._splits = [Split(i) for i in installs]

    def split_packages(self):
        return self._splits


def make_bases(*names):
    return [Base([AurPkg(name=n, package_base=n, version="1-1")]) for n in names]


def prepare(tmp_path, name):
    (tmp_path / name).mkdir()
    (tmp_path / name / "PKGBUILD").write_text("pkgname=x\n")


def test_editor_from_config():
    program, args = editor(sys.executable, "-a  -b", True)
    assert program == sys.executable
    assert args == ["-a", "-b"]


def test_editor_from_visual(monkeypatch):
    monkeypatch.setenv("VISUAL", f"{sys.executable} --flag")
    program, args = editor("", "", True)
    assert program == sys.executable
    assert args == ["--flag"]


def test_editor_falls_back_to_editor_env(monkeypatch):
    monkeypatch.delenv("VISUAL", raising=False)
    monkeypatch.setenv("EDITOR", sys.executable)
    program, args = editor("no-such-editor-anywhere", "", True)
    assert program == sys.executable
    assert args == []


def test_edit_pkgbuilds_passes_files(tmp_path):
    prepare(tmp_path, "foo")
    edit_pkgbuilds(tmp_path, make_bases("foo"), sys.executable, MARK_FIRST, {"foo": Srcinfo("")}, True)
    assert (tmp_path / "foo" / "PKGBUILD.seen").exists()


def test_edit_pkgbuilds_includes_install_file(tmp_path):
    prepare(tmp_path, "foo")
    edit_pkgbuilds(tmp_path, make_bases("foo"), sys.executable, MARK_SECOND, {"foo": Srcinfo("foo.install")}, True)
    assert (tmp_path / "foo" / "foo.install.seen").exists()


def test_edit_pkgbuilds_editor_failure(tmp_path):
    prepare(tmp_path, "foo")
    with pytest.raises(RuntimeError, match="editor did not exit successfully"):
        edit_pkgbuilds(tmp_path, make_bases("foo"), sys.executable, "-c raise", {"foo": Srcinfo()}, True)


def test_edit_disabled(tmp_path):
    prepare(tmp_path, "foo")
    edit(False, tmp_path, make_bases("foo"), sys.executable, MARK_FIRST, set(), {"foo": Srcinfo()}, True, "all")
    assert not (tmp_path / "foo" / "PKGBUILD.seen").exists()


def test_edit_none_selected(tmp_path):
    prepare(tmp_path, "foo")
    edit(True, tmp_path, make_bases("foo"), sys.executable, MARK_FIRST, set(), {"foo": Srcinfo()}, True, "none")
    assert not (tmp_path / "foo" / "PKGBUILD.seen").exists()


def test_edit_then_decline(tmp_path, monkeypatch):
    prepare(tmp_path, "foo")
    monkeypatch.setattr("builtins.input", lambda: "n")
    with pytest.raises(UserAbortError):
        edit(True, tmp_path, make_bases("foo"), sys.executable, MARK_FIRST, set(), {"foo": Srcinfo()}, False, "all")
    assert (tmp_path / "foo" / "PKGBUILD.seen").exists()