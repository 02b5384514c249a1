from __future__ import annotations

import logging
import os

from depget.errors import DownloadError
from depget.errors import PackageError
from depget.helper.patterns import has_wildcard
from depget.logger import Logger
from depget.modules.downloader.session import FetchSession
from depget.modules.module import Module
from depget.modules.resolver.repo_root import RepoRootResolver
from depget.modules.resolver.tag_selector import select_tag
from depget.package.core import PackageDescriptor
from depget.package.loader import PackageLoader
from depget.package.stack import ImportStack

logger = logging.getLogger(__name__)


class Downloader(Module):
    """
    Fetches packages and, recursively, their dependencies.

    Every identifier is handled once per session and every checkout is synced once per session,
    before the walk descends into the packages it contains.
    """

    def __init__(
        self,
        loader: PackageLoader,
        session: FetchSession,
        toolchain_version: str,
        update: bool = False,
        dry_run: bool = False,
        verbose: bool = False,
    ):
        self.loader = loader
        self.session = session
        self.toolchain_version = toolchain_version

        self.update = update
        """Update packages that are already present."""
        self.dry_run = dry_run
        self.verbose = verbose

        self.resolver = RepoRootResolver(
            loader.workspace_paths,
            loader.builtin_root,
            session.root_cache,
            dry_run=dry_run,
            verbose=verbose,
        )

    def download(self, arg: str, stack: ImportStack):
        """Download the package identified by arg, if needed, and then its dependencies."""
        descriptor = self.loader.load(arg, stack)

        if descriptor.standard:
            return

        if arg in self.session.download_cache:
            return
        self.session.download_cache.add(arg)

        descriptors = [descriptor]
        if descriptor.dir == "" or self.update:
            stack.push(arg)
            try:
                self.download_package(descriptor)
            except (DownloadError, OSError) as e:
                self.session.report(PackageError(stack.copy(), str(e)))
                return
            finally:
                stack.pop()

            args = [arg]
            # Only top level patterns are expanded again, the fetch may have added matching packages
            if len(stack) == 0 and has_wildcard(arg):
                args = self.loader.expand(arg)

            for a in args:
                self.loader.evict(a)

            descriptors = []
            for a in args:
                reloaded = self.loader.load(a, stack)
                if reloaded.error is not None:
                    # Nothing was checked out in a dry run
                    if self.dry_run and not reloaded.found:
                        logger.debug(f"{a}: not on disk after dry run")
                        continue
                    self.session.report(reloaded.error)
                    continue
                descriptors.append(reloaded)

        for d in descriptors:
            self.session.graph.add_package(d)
            stack.push(d.import_path)
            try:
                for dep in d.imports:
                    cycle = stack.cycle(dep)
                    if cycle is not None:
                        logger.debug(f"import cycle: {' -> '.join(cycle)}")
                    self.session.graph.add_dependency(d.import_path, dep)
                    self.download(dep, stack)
            finally:
                stack.pop()

    def download_package(self, descriptor: PackageDescriptor):
        """
        Fetch or update the checkout containing the package and sync it to the best tag.
        Raises DownloadError or OSError, the caller reports them.
        """
        repo_root = self.resolver.resolve_root(descriptor)
        if repo_root is None:
            return

        if self.verbose:
            logger.info(f"{repo_root.root} (download)")

        vcs = repo_root.vcs
        if self.resolver.inspect_destination(repo_root):
            vcs.update(repo_root.dir)
        else:
            # Some systems need the parent of the checkout to exist, none accept an existing target
            if not self.dry_run:
                os.makedirs(os.path.dirname(repo_root.dir), exist_ok=True)
            vcs.create(repo_root.dir, repo_root.repo)

        if self.dry_run:
            Logger.get_console().print(f"# cd {repo_root.dir}; {vcs.CMD} sync/update", markup=False, highlight=False)
            return

        tags = vcs.tags(repo_root.dir)
        tag = select_tag(self.toolchain_version, tags)
        logger.debug(f"{repo_root.root}: syncing to {tag or 'most recent version'}")
        vcs.tag_sync(repo_root.dir, tag)
