from __future__ import annotations

import os

import pytest

import depget.modules.resolver.repo_root as repo_root_module
from depget.errors import VcsCommandError
from depget.modules.downloader.downloader import Downloader
from depget.modules.downloader.session import FetchSession
from depget.modules.vcs.vcs_git import GitDriver
from depget.package.loader import PackageLoader


def write_package(directory: str, dependencies: list[str] | tuple[str, ...] = (), title: str = ""):
    os.makedirs(directory, exist_ok=True)
    lines = ["[info]", f"title = {title}", "", "[dependencies]", *dependencies]
    with open(os.path.join(directory, "depget.cfg"), "w") as f:
        f.write("\n".join(lines) + "\n")


class FakeRemote:
    """Repositories served to RecordingGitDriver, keyed by their remote address."""

    def __init__(self):
        self.repos: dict[str, dict[str, list[str]]] = {}
        """Remote address -> {sub path of the package inside the repository: dependencies}"""
        self.tags: dict[str, list[str]] = {}
        self.failing: set[str] = set()

    def add(self, root: str, packages: dict[str, list[str]] | None = None, tags: list[str] | None = None):
        repo = "https://" + root
        self.repos[repo] = packages if packages is not None else {"": []}
        self.tags[repo] = list(tags or [])
        return repo


class RecordingGitDriver(GitDriver):
    """Git driver that records commands and fakes their effect on disk."""

    remote = FakeRemote()
    calls: list[tuple[str, str]] = []
    checkouts: dict[str, str] = {}

    def _run(self, cwd: str, cmd: str, **keyval: str) -> str:
        args = self.expand_cmd(cmd, **keyval)
        RecordingGitDriver.calls.append((cwd, " ".join(args)))
        if self.dry_run:
            return ""

        if args[0] == "clone":
            repo, target = args[1], args[2]
            if repo in self.remote.failing or repo not in self.remote.repos:
                raise VcsCommandError(f"fatal: repository '{repo}' not found", cmd=args, dir=cwd)
            os.makedirs(os.path.join(target, ".git"))
            for sub, deps in self.remote.repos[repo].items():
                write_package(os.path.join(target, sub), deps)
            RecordingGitDriver.checkouts[target] = repo
        elif args[0] == "show-ref":
            repo = RecordingGitDriver.checkouts.get(cwd, "")
            return "".join(f"0123abcd refs/tags/{t}\n" for t in self.remote.tags.get(repo, []))
        return ""

    @classmethod
    def commands(cls, prefix: str = "") -> list[str]:
        return [c for _, c in cls.calls if c.startswith(prefix)]


@pytest.fixture
def fake_git(monkeypatch) -> type[RecordingGitDriver]:
    RecordingGitDriver.remote = FakeRemote()
    RecordingGitDriver.calls = []
    RecordingGitDriver.checkouts = {}
    monkeypatch.setattr(repo_root_module, "driver_by_cmd", lambda cmd: RecordingGitDriver)
    monkeypatch.setattr(repo_root_module, "DRIVERS", [RecordingGitDriver])
    return RecordingGitDriver


class Workspace:
    def __init__(self, base: str):
        self.root = os.path.join(base, "ws")
        self.builtin = os.path.join(base, "builtin")
        os.makedirs(self.root)
        os.makedirs(self.builtin)

    @property
    def src(self) -> str:
        return os.path.join(self.root, "src")

    @property
    def builtin_src(self) -> str:
        return os.path.join(self.builtin, "src", "pkg")

    def path(self, import_path: str) -> str:
        return os.path.join(self.src, *import_path.split("/"))

    def loader(self) -> PackageLoader:
        return PackageLoader([self.root], self.builtin)

    def downloader(self, loader: PackageLoader | None = None, version: str = "1.0", **flags: bool) -> Downloader:
        return Downloader(loader or self.loader(), FetchSession(), version, **flags)


@pytest.fixture
def workspace(tmp_path) -> Workspace:
    return Workspace(str(tmp_path))


@pytest.fixture
def config_env(tmp_path, monkeypatch):
    """Point configuration, lock file and package trees into tmp_path."""
    from depget.args.base_args import BaseArgs
    from depget.config.main_cfg import MainConfig

    monkeypatch.setenv("DEPGET_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("DEPGET_PATH", str(tmp_path / "ws"))
    monkeypatch.setenv("DEPGET_ROOT", str(tmp_path / "builtin"))
    MainConfig.reset()
    BaseArgs.reset()
    yield tmp_path
    MainConfig.reset()
    BaseArgs.reset()
