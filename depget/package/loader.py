from __future__ import annotations

import configparser
import logging
import os

from depget.errors import PackageError
from depget.helper.patterns import WILDCARD
from depget.helper.patterns import clean_import_path
from depget.helper.patterns import has_wildcard
from depget.helper.patterns import is_local_import
from depget.helper.patterns import match_pattern
from depget.helper.patterns import skip_dir
from depget.helper.patterns import tree_can_match
from depget.package.core import PackageDescriptor
from depget.package.core import PackageManifest
from depget.package.stack import ImportStack

logger = logging.getLogger(__name__)


class SourceTree:
    """A directory tree holding packages by their import path."""

    def __init__(self, root: str, src_root: str, builtin: bool = False):
        self.root = root
        """The workspace or builtin root."""
        self.src_root = src_root
        """The directory the import paths are relative to."""
        self.builtin = builtin

    def import_path_of(self, directory: str) -> str | None:
        """Return the import path of directory if it is inside this tree."""
        directory = os.path.abspath(directory)
        src_root = os.path.abspath(self.src_root)
        if not directory.startswith(src_root + os.sep):
            return None
        return directory[len(src_root) + 1 :].replace(os.sep, "/")

    def __repr__(self):
        return f"SourceTree({self.src_root!r}, builtin={self.builtin})"


class PackageLoader:
    """
    Loads package descriptors from the builtin tree and the workspaces.

    Layout:
        <workspace>/src/<import path>/depget.cfg
        <builtin_root>/src/pkg/<import path>/depget.cfg

    Loaded descriptors are cached by import path and by directory until evicted.
    """

    WORKSPACE_SRC_DIR = "src"
    BUILTIN_SRC_DIR = os.path.join("src", "pkg")

    def __init__(self, workspace_paths: list[str], builtin_root: str):
        self.workspace_paths: list[str] = [os.path.abspath(p) for p in workspace_paths]
        self.builtin_root: str = os.path.abspath(builtin_root)

        self.cache: dict[str, PackageDescriptor] = dict()
        """Descriptor cache, keyed by import path and by directory."""

    @property
    def builtin_src(self) -> str:
        return os.path.join(self.builtin_root, self.BUILTIN_SRC_DIR)

    @property
    def source_trees(self) -> list[SourceTree]:
        """All source trees in lookup order, the builtin tree first."""
        trees = [SourceTree(self.builtin_root, self.builtin_src, builtin=True)]
        for path in self.workspace_paths:
            if path == self.builtin_root:
                continue
            trees.append(SourceTree(path, os.path.join(path, self.WORKSPACE_SRC_DIR)))
        return trees

    ####################################################################################################################
    ### Descriptor cache
    ####################################################################################################################

    def evict(self, path: str):
        """Drop a package from the cache, both by its directory and its import path."""
        descriptor = self.cache.pop(path, None)
        if descriptor is not None:
            self.cache.pop(descriptor.dir, None)
            self.cache.pop(descriptor.import_path, None)

    def clear(self):
        self.cache.clear()

    ####################################################################################################################
    ### Loading
    ####################################################################################################################

    def load(self, path: str, stack: ImportStack) -> PackageDescriptor:
        """
        Load the descriptor of the package with the given import path (or local directory).
        Load problems are stored in descriptor.error, never raised.
        """
        if path in self.cache:
            return self.cache[path]

        stack.push(path)
        try:
            if is_local_import(path):
                descriptor = self._load_local(path, stack)
            else:
                descriptor = self._load_import(path, stack)
        finally:
            stack.pop()

        self.cache[path] = descriptor
        self.cache[descriptor.import_path] = descriptor
        if descriptor.dir != "":
            self.cache[descriptor.dir] = descriptor
        return descriptor

    def _load_import(self, import_path: str, stack: ImportStack) -> PackageDescriptor:
        import_path = clean_import_path(import_path)
        for tree in self.source_trees:
            directory = os.path.join(tree.src_root, *import_path.split("/"))
            if not os.path.isdir(directory):
                continue

            standard = tree.builtin and "." not in import_path.split("/")[0]
            descriptor = PackageDescriptor(
                import_path, dir=directory, src_root=tree.src_root, root=tree.root, standard=standard
            )
            self._read_manifest(descriptor, stack)
            return descriptor

        searched = "\n".join(f"\t{os.path.join(t.src_root, import_path)}" for t in self.source_trees)
        err = f'cannot find package "{import_path}" in any of:\n{searched}'
        return PackageDescriptor(import_path, error=PackageError(stack.copy(), err))

    def _load_local(self, path: str, stack: ImportStack) -> PackageDescriptor:
        directory = os.path.abspath(path)
        for tree in self.source_trees:
            import_path = tree.import_path_of(directory)
            if import_path is None:
                continue

            if not os.path.isdir(directory):
                break

            descriptor = PackageDescriptor(
                import_path,
                dir=directory,
                src_root=tree.src_root,
                root=tree.root,
                standard=tree.builtin and "." not in import_path.split("/")[0],
            )
            self._read_manifest(descriptor, stack)
            return descriptor

        err = f"local import {path} is not inside a known source tree"
        if not os.path.isdir(directory):
            err = f"cannot find package in {directory}"
        return PackageDescriptor(path, error=PackageError(stack.copy(), err))

    def _read_manifest(self, descriptor: PackageDescriptor, stack: ImportStack):
        manifest_path = PackageManifest.path_in(descriptor.dir)
        if not os.path.isfile(manifest_path):
            descriptor.error = PackageError(stack.copy(), f"no {PackageManifest.FILE_NAME} in {descriptor.dir}")
            return

        try:
            manifest = PackageManifest.from_cfg_file(manifest_path)
        except (configparser.Error, OSError, UnicodeDecodeError) as e:
            descriptor.error = PackageError(stack.copy(), f"invalid {PackageManifest.FILE_NAME}: {e}")
            return

        descriptor.manifest = manifest
        descriptor.imports = [clean_import_path(d) for d in manifest.dependencies]

    ####################################################################################################################
    ### Pattern expansion
    ####################################################################################################################

    def match_packages(self, pattern: str) -> list[str]:
        """Return the import paths of all packages in the source trees matching pattern."""
        match = match_pattern(pattern)
        tree_match = tree_can_match(pattern)
        found: list[str] = []

        for tree in self.source_trees:
            if not os.path.isdir(tree.src_root):
                continue
            for directory, dirs, files in os.walk(tree.src_root):
                dirs[:] = sorted(d for d in dirs if not skip_dir(d))
                if directory == tree.src_root:
                    continue

                name = tree.import_path_of(directory)
                if name is None or not tree_match(name):
                    dirs[:] = []
                    continue

                if name in found or not match(name):
                    continue
                if PackageManifest.FILE_NAME in files:
                    found.append(name)

        return found

    def match_packages_in_fs(self, pattern: str) -> list[str]:
        """Like match_packages, for local patterns such as ./vendor/... ."""
        i = pattern.find(WILDCARD)
        base = os.path.dirname(pattern[:i] if i >= 0 else pattern) or "."
        match = match_pattern(pattern)
        found: list[str] = []

        for current, dirs, files in os.walk(base):
            dirs[:] = sorted(d for d in dirs if not skip_dir(d))
            name = current.replace(os.sep, "/")
            if match(name) and PackageManifest.FILE_NAME in files:
                found.append(name)

        return found

    def expand(self, pattern: str) -> list[str]:
        """Expand a wildcard pattern, local patterns are matched against the file system."""
        if is_local_import(pattern):
            return self.match_packages_in_fs(pattern)
        return self.match_packages(pattern)

    def download_paths(self, args: list[str]) -> list[str]:
        """
        Prepare the list of paths to download.
        Patterns that already match local packages are expanded, patterns without any match
        are kept, so the repository can still be derived from their wildcard free prefix.
        """
        out: list[str] = []
        for arg in [clean_import_path(a) for a in args]:
            if has_wildcard(arg):
                expanded = self.expand(arg)
                if len(expanded) > 0:
                    out.extend(expanded)
                    continue
            out.append(arg)
        return out

    def import_paths(self, args: list[str]) -> list[str]:
        """Expand the argument list to concrete import paths, warning about patterns without matches."""
        if len(args) == 0:
            return ["."]

        out: list[str] = []
        for arg in [clean_import_path(a) for a in args]:
            if has_wildcard(arg):
                expanded = self.expand(arg)
                if len(expanded) == 0:
                    logger.warning(f'warning: "{arg}" matched no packages')
                out.extend(expanded)
                continue
            out.append(arg)
        return out
