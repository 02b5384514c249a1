from __future__ import annotations

import logging

from depget.args.get_args import GetArgs
from depget.config.main_cfg import MainConfig
from depget.errors import GetFailedException
from depget.helper.lockfile import DepgetLock
from depget.logger import Logger
from depget.modules.dependency_tree.tree_printer import TreePrinter
from depget.modules.downloader.downloader import Downloader
from depget.modules.downloader.session import FetchSession
from depget.modules.module import Module
from depget.modules.resolver.tag_selector import toolchain_version
from depget.package.core import PackageDescriptor
from depget.package.loader import PackageLoader
from depget.package.stack import ImportStack

logger = logging.getLogger(__name__)


def fetch(package_names: list[str], loader: PackageLoader, downloader: Downloader) -> list[PackageDescriptor]:
    """
    Download the packages and their dependencies, then load the requested packages again.

    Raises
    ------
    GetFailedException: If any package could not be fetched or loaded afterwards.
    """
    session = downloader.session

    ### Phase 1: download everything that is missing (or everything with --update)
    stack = ImportStack()
    for arg in loader.download_paths(package_names):
        downloader.download(arg, stack)

    if session.failed:
        raise GetFailedException(session.errors)

    ### Phase 2: the checkouts changed, forget what was loaded before
    loader.clear()
    descriptors: list[PackageDescriptor] = []
    errors = []
    for arg in loader.import_paths(package_names):
        descriptor = loader.load(arg, ImportStack())
        if descriptor.error is not None:
            if downloader.dry_run:
                logger.debug(f"{arg} not loadable in dry run: {descriptor.error.err}")
            else:
                session.report(descriptor.error)
                errors.append(descriptor.error)
            continue
        descriptors.append(descriptor)

    if len(errors) > 0:
        raise GetFailedException(errors)

    return descriptors


def get(package_names: list[str] | str, **kwargs: str | bool) -> list[PackageDescriptor]:
    get_args = GetArgs.get()

    if isinstance(package_names, str):
        package_names = [package_names]

    config = MainConfig.get_config()
    loader = PackageLoader(config.get_workspace_paths(), config.get_builtin_root())
    version = toolchain_version(config.get_toolchain_version())
    logger.debug(f"Toolchain version: {version}, workspaces: {loader.workspace_paths}")

    session = FetchSession()
    downloader = Downloader(
        loader,
        session,
        version,
        update=get_args.update,
        dry_run=get_args.dry_run,
        verbose=get_args.verbose,
    )

    # One lock per destination source tree
    with DepgetLock("get", workspace=downloader.resolver.destination_src_root()) as lock:
        if not lock.access:
            logger.error("Wait for the other depget process to finish to continue.")
            return []

        Module.print_rule(f"Fetching: {', '.join(package_names) or '.'}")
        descriptors = fetch(package_names, loader, downloader)

    if get_args.tree:
        printer = TreePrinter(session.graph)
        tree = printer.get_tree(
            name="Fetched packages",
            root_nodes=[d.import_path for d in descriptors if d.import_path in session.graph],
        )
        Logger.get_console().print(tree)

    logger.info(f"Fetched {len(session.download_cache)} package(s) from {len(session.root_cache)} repositories.")
    return descriptors
