from __future__ import annotations

import logging
import os
import re

from depget.errors import LocalStateConflict
from depget.errors import RepoRootError
from depget.helper.patterns import WILDCARD
from depget.modules.vcs import DRIVERS
from depget.modules.vcs import VcsDriver
from depget.modules.vcs import driver_by_cmd
from depget.package.core import PackageDescriptor

logger = logging.getLogger(__name__)

LOCAL_REPO = "<local>"
"""Remote address of roots found on disk. Never passed to a create command."""


class RepoRoot:
    """A repository checkout: its driver, remote address, root import path and local directory."""

    def __init__(self, vcs: VcsDriver, repo: str, root: str, dir: str = ""):
        self.vcs = vcs
        self.repo = repo
        self.root = root
        """The import path of the repository root, e.g. github.com/user/project"""
        self.dir = dir
        """The local directory of the checkout."""

    @property
    def metadata_path(self) -> str:
        return os.path.join(self.dir, self.vcs.metadata_dir)

    def __repr__(self):
        return f"RepoRoot({self.vcs.CMD}, {self.repo!r}, {self.root!r}, dir={self.dir!r})"


class HostingRule:
    """
    Maps import paths of a code hosting site to repositories.

    The regex must define a named group 'root'. If the regex also defines a group 'vcs',
    the version control system is taken from the import path instead of the rule.
    """

    def __init__(self, prefix: str, regex: str, vcs: str, repo: str):
        self.prefix = prefix
        self.regex = re.compile(regex)
        self.vcs = vcs
        self.repo = repo
        """Template of the remote address, formatted with the named groups of the regex."""

    def match(self, import_path: str) -> dict[str, str] | None:
        if not import_path.startswith(self.prefix):
            return None
        m = self.regex.match(import_path)
        if m is None:
            return None
        return {k: v for k, v in m.groupdict().items() if v is not None}


HOSTING_RULES: list[HostingRule] = [
    HostingRule(
        "github.com/",
        r"^(?P<root>github\.com/[A-Za-z0-9_.\-]+/[A-Za-z0-9_.\-]+)(/[A-Za-z0-9_.\-]+)*$",
        "git",
        "https://{root}",
    ),
    HostingRule(
        "gitlab.com/",
        r"^(?P<root>gitlab\.com/[A-Za-z0-9_.\-]+/[A-Za-z0-9_.\-]+)(/[A-Za-z0-9_.\-]+)*$",
        "git",
        "https://{root}",
    ),
    HostingRule(
        "bitbucket.org/",
        r"^(?P<root>bitbucket\.org/[A-Za-z0-9_.\-]+/[A-Za-z0-9_.\-]+)(/[A-Za-z0-9_.\-]+)*$",
        "git",
        "https://{root}",
    ),
    HostingRule(
        "launchpad.net/",
        r"^(?P<root>launchpad\.net/((?P<project>[A-Za-z0-9_.\-]+)(?P<series>/[A-Za-z0-9_.\-]+)?"
        r"|~[A-Za-z0-9_.\-]+/(\+junk|[A-Za-z0-9_.\-]+)/[A-Za-z0-9_.\-]+))(/[A-Za-z0-9_.\-]+)*$",
        "bzr",
        "https://{root}",
    ),
    HostingRule(
        "",
        r"^(?P<root>(?P<repo>([a-z0-9.\-]+\.)+[a-z0-9.\-]+(:[0-9]+)?/[A-Za-z0-9_.\-/~]*?)"
        r"\.(?P<vcs>bzr|git|hg|svn))(/[A-Za-z0-9_.\-]+)*$",
        "",
        "https://{repo}.{vcs}",
    ),
]
"""Hosting rules in the order they are tried. The generic rule comes last."""


def repo_root_for_import_path(import_path: str, dry_run: bool = False, verbose: bool = False) -> RepoRoot:
    """
    Derive the repository of an import path from its text.
    Raises RepoRootError for import paths no hosting rule recognizes.
    """
    if "://" in import_path:
        raise RepoRootError(f"invalid import path {import_path!r}: no scheme allowed")

    # Wildcards may follow the root, e.g. github.com/user/project/..., but not be part of it
    lookup = import_path
    i = lookup.find(WILDCARD)
    if i >= 0:
        lookup = lookup[:i].rstrip("/")

    for rule in HOSTING_RULES:
        groups = rule.match(lookup)
        if groups is None:
            continue

        vcs_cmd = groups.get("vcs", rule.vcs)
        driver = driver_by_cmd(vcs_cmd)
        if driver is None:
            raise RepoRootError(f"unknown version control system {vcs_cmd!r}")

        return RepoRoot(driver(dry_run=dry_run, verbose=verbose), rule.repo.format(**groups), groups["root"])

    raise RepoRootError(f"unrecognized import path {import_path!r}")


def vcs_for_dir(
    directory: str, src_root: str, dry_run: bool = False, verbose: bool = False
) -> tuple[VcsDriver, str]:
    """
    Find the checkout containing directory by walking up to src_root.

    Returns
    -------
    tuple(VcsDriver, str): The driver of the checkout and the import path of its root.
    """
    directory = os.path.abspath(directory)
    src_root = os.path.abspath(src_root)
    if not directory.startswith(src_root + os.sep):
        raise RepoRootError(f"directory {directory!r} is outside source root {src_root!r}")

    start = directory
    while len(directory) > len(src_root):
        for driver in DRIVERS:
            if os.path.isdir(os.path.join(directory, "." + driver.CMD)):
                root = directory[len(src_root) + 1 :].replace(os.sep, "/")
                return driver(dry_run=dry_run, verbose=verbose), root
        directory = os.path.dirname(directory)

    raise RepoRootError(f"directory {start!r} is not using a known version control system")


class RepoRootResolver:
    """
    Resolves packages to repository checkouts.
    Each checkout directory is handed out once, later requests for the same root yield None.
    """

    def __init__(
        self,
        workspace_paths: list[str],
        builtin_root: str,
        root_cache: set[str],
        dry_run: bool = False,
        verbose: bool = False,
    ):
        self.workspace_paths = [os.path.abspath(p) for p in workspace_paths]
        self.builtin_root = os.path.abspath(builtin_root)
        self.root_cache = root_cache
        self.dry_run = dry_run
        self.verbose = verbose

    def destination_src_root(self) -> str:
        """Source tree receiving packages that are not on disk yet."""
        for path in self.workspace_paths:
            if path != self.builtin_root:
                return os.path.join(path, "src")
        return os.path.join(self.builtin_root, "src", "pkg")

    def resolve_root(self, descriptor: PackageDescriptor) -> RepoRoot | None:
        """
        Resolve the repository root of a package.

        Returns
        -------
        RepoRoot | None: The root to fetch, or None if the root was already handled in this session.
        """
        if descriptor.src_root != "":
            vcs, root = vcs_for_dir(descriptor.dir, descriptor.src_root, self.dry_run, self.verbose)
            repo_root = RepoRoot(vcs, LOCAL_REPO, root)
        else:
            repo_root = repo_root_for_import_path(descriptor.import_path, self.dry_run, self.verbose)
            descriptor.src_root = self.destination_src_root()

        repo_root.dir = os.path.join(descriptor.src_root, *repo_root.root.split("/"))
        if repo_root.dir in self.root_cache:
            logger.debug(f"{repo_root.root} already handled")
            return None
        self.root_cache.add(repo_root.dir)
        return repo_root

    def inspect_destination(self, repo_root: RepoRoot) -> bool:
        """
        Check that the destination either holds a checkout of the right system or does not exist.

        Returns
        -------
        bool: True if a checkout exists, False if the destination is free.
        """
        meta = repo_root.metadata_path
        if os.path.exists(meta):
            if not os.path.isdir(meta):
                raise LocalStateConflict(f"{meta} exists but is not a directory")
            return True

        if os.path.exists(repo_root.dir):
            raise LocalStateConflict(f"{repo_root.dir} exists but {meta} does not - stale checkout?")
        return False
