from __future__ import annotations

import os
import shutil
import subprocess

import pytest

from depget.errors import VcsCommandError
from depget.modules.vcs import DRIVERS
from depget.modules.vcs import BzrDriver
from depget.modules.vcs import GitDriver
from depget.modules.vcs import HgDriver
from depget.modules.vcs import SvnDriver
from depget.modules.vcs import VcsDriver
from depget.modules.vcs import driver_by_cmd


class CommandRecorder:
    def __init__(self, outputs: dict[str, str] | None = None, returncode: int = 0):
        self.outputs = outputs or {}
        self.returncode = returncode
        self.commands: list[tuple[list[str], str]] = []

    def __call__(self, command: list[str], cwd: str | None = None, env=None):
        self.commands.append((command, cwd))
        args = " ".join(command[1:])
        return (self.returncode, self.outputs.get(args, ""), "")


@pytest.fixture
def recorder(monkeypatch) -> CommandRecorder:
    recorder = CommandRecorder()
    monkeypatch.setattr("depget.modules.vcs.base.shutil.which", lambda cmd: f"/usr/bin/{cmd}")
    monkeypatch.setattr(VcsDriver, "run_commands_with_returncode", staticmethod(recorder))
    return recorder


def test_driver_order_and_lookup():
    assert [d.CMD for d in DRIVERS] == ["hg", "git", "svn", "bzr"]
    assert driver_by_cmd("bzr") is BzrDriver
    assert driver_by_cmd("cvs") is None
    assert GitDriver().metadata_dir == ".git"


def test_create_runs_in_parent_directory(recorder):
    GitDriver().create("/work/src/github.com/a/b c", "https://github.com/a/b")

    command, cwd = recorder.commands[0]
    assert command == ["/usr/bin/git", "clone", "https://github.com/a/b", "/work/src/github.com/a/b c"]
    assert cwd == "/work/src/github.com/a"


def test_update_commands(recorder):
    GitDriver().update("/d")
    HgDriver().update("/d")
    SvnDriver().update("/d")
    BzrDriver().update("/d")

    assert [c[1:] for c, _ in recorder.commands] == [["fetch", "--tags", "origin"], ["pull"], ["update"], ["pull", "--overwrite"]]


def test_git_tags_from_show_ref(recorder):
    recorder.outputs["show-ref"] = (
        "1111 refs/heads/main\n"
        "2222 refs/remotes/origin/HEAD\n"
        "3333 refs/remotes/origin/main\n"
        "4444 refs/tags/1.0\n"
        "5555 refs/tags/1.1\n"
    )

    assert GitDriver().tags("/d") == ["HEAD", "main", "1.0", "1.1"]


def test_hg_tags_include_branches(recorder):
    recorder.outputs["tags"] = "tip                               12:1e2f\n1.0                               10:aa11\n"
    recorder.outputs["branches"] = "default                           12:1e2f\n"

    assert HgDriver().tags("/d") == ["tip", "1.0", "default"]


def test_svn_has_no_tags(recorder):
    driver = SvnDriver()
    assert driver.tags("/d") == []
    driver.tag_sync("/d", "1.0")
    assert recorder.commands == []


def test_tag_sync(recorder):
    GitDriver().tag_sync("/d", "1.0")
    GitDriver().tag_sync("/d", "")
    BzrDriver().tag_sync("/d", "")

    assert [c[1:] for c, _ in recorder.commands] == [
        ["checkout", "-q", "1.0"],
        ["checkout", "-q", "--detach", "origin/HEAD"],
        ["update", "-r", "revno:-1"],
    ]


def test_failing_command_keeps_output(monkeypatch):
    monkeypatch.setattr("depget.modules.vcs.base.shutil.which", lambda cmd: f"/usr/bin/{cmd}")
    monkeypatch.setattr(
        VcsDriver, "run_commands_with_returncode", staticmethod(lambda *a, **kw: (128, "", "fatal: not found\n"))
    )

    with pytest.raises(VcsCommandError) as exc_info:
        GitDriver().update("/d")

    assert exc_info.value.output == "fatal: not found"
    assert exc_info.value.cmd == ["git", "fetch", "--tags", "origin"]
    assert exc_info.value.dir == "/d"
    assert "exit status 128" in str(exc_info.value)


def test_missing_executable(monkeypatch):
    monkeypatch.setattr("depget.modules.vcs.base.shutil.which", lambda cmd: None)

    with pytest.raises(VcsCommandError, match="missing hg command"):
        HgDriver().update("/d")


def test_dry_run_does_not_execute(recorder, capsys):
    driver = GitDriver(dry_run=True)

    driver.create("/work/src/a", "https://example.org/a.git")

    assert driver.tags("/work/src/a") == []
    assert recorder.commands == []
    assert "git clone https://example.org/a.git /work/src/a" in capsys.readouterr().out


def _git(cwd: str, *args: str) -> str:
    result = subprocess.run(["git", *args], cwd=cwd, capture_output=True, text=True, check=True)
    return result.stdout.strip()


def _create_repo(path: str, tags: list[str]):
    os.makedirs(path)
    _git(path, "init", "-q")
    _git(path, "config", "user.email", "test@example.org")
    _git(path, "config", "user.name", "test")
    for tag in tags:
        with open(os.path.join(path, "version.txt"), "w") as f:
            f.write(tag)
        _git(path, "add", "version.txt")
        _git(path, "commit", "-q", "-m", f"release {tag}")
        _git(path, "tag", tag)


@pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")
def test_git_checkout_end_to_end(tmp_path):
    upstream = str(tmp_path / "upstream")
    _create_repo(upstream, ["1.0", "2.0"])
    destination = str(tmp_path / "src" / "example.org" / "lib")
    os.makedirs(os.path.dirname(destination))
    driver = GitDriver()

    driver.create(destination, upstream)
    tags = driver.tags(destination)
    driver.tag_sync(destination, "1.0")

    assert "1.0" in tags and "2.0" in tags
    assert os.path.isdir(os.path.join(destination, driver.metadata_dir))
    with open(os.path.join(destination, "version.txt")) as f:
        assert f.read() == "1.0"

    driver.update(destination)
    driver.tag_sync(destination, "")
    with open(os.path.join(destination, "version.txt")) as f:
        assert f.read() == "2.0"
