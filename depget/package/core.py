from __future__ import annotations

import configparser
import io
import logging
import os

from depget.errors import PackageError

logger = logging.getLogger(__name__)


class PackageManifest:
    """
    The manifest of a package, defined in the depget.cfg inside the package directory.

    Example:
        [info]
        title = Motor drivers

        [dependencies]
        github.com/user/logging
        gitlab.com/group/units/si
    """

    FILE_NAME = "depget.cfg"

    def __init__(self):
        self._cfg = configparser.ConfigParser(interpolation=None, allow_no_value=True, delimiters=("=",))
        self._cfg.optionxform = str  # type: ignore
        """The configparser object, which is used to store the depget.cfg data."""

        self.name: str = ""
        """The name of the package. E.g. Motor drivers"""
        self.description: str = ""

        self.dependencies: list[str] = list()
        """The import paths of the dependencies in declared order."""

    @property
    def cfg(self):
        return self._cfg

    @staticmethod
    def from_string(cfg_string: str) -> PackageManifest:
        return PackageManifest.from_cfg_file(io.StringIO(cfg_string))

    @staticmethod
    def from_cfg_file(cfg_path: str | io.StringIO) -> PackageManifest:
        """
        Create a PackageManifest object from a cfg file.
        Raises configparser.Error if the file cannot be parsed.
        """

        manifest = PackageManifest()
        if isinstance(cfg_path, io.StringIO):
            manifest.cfg.read_file(cfg_path)
        else:
            with open(cfg_path, "r", encoding="utf-8") as f:
                manifest.cfg.read_file(f, source=cfg_path)

        cfg = manifest.cfg
        manifest.name = cfg.get("info", "title", fallback="")
        manifest.description = cfg.get("info", "description", fallback="")

        if cfg.has_section("dependencies"):
            manifest.dependencies = [d_id.strip() for d_id, _ in cfg.items("dependencies") if d_id.strip() != ""]

        return manifest

    @staticmethod
    def path_in(directory: str) -> str:
        return os.path.join(directory, PackageManifest.FILE_NAME)


class PackageDescriptor:
    """
    A package as seen by the downloader: where it lives, whether it belongs to the
    builtin distribution and which import paths it depends on.
    """

    def __init__(
        self,
        import_path: str,
        dir: str = "",
        src_root: str = "",
        root: str = "",
        standard: bool = False,
        imports: list[str] | None = None,
        error: PackageError | None = None,
    ):
        self.import_path: str = import_path
        """The import path of the package. E.g. github.com/user/project/sub"""

        self.dir: str = dir
        """The local directory of the package, empty if the package was not found."""

        self.src_root: str = src_root
        """The source tree containing the package, e.g. <workspace>/src. Empty if unknown."""

        self.root: str = root
        """The workspace or builtin root owning src_root."""

        self.standard: bool = standard
        """True if the package is part of the builtin distribution."""

        self.imports: list[str] = list(imports or [])
        """Import paths of the declared dependencies."""

        self.error: PackageError | None = error
        """Error that occurred while loading the package."""

        self.manifest: PackageManifest | None = None

    @property
    def found(self) -> bool:
        return self.dir != ""

    def __str__(self):
        return f"{self.import_path} ({len(self.imports)} deps)"

    def __repr__(self):
        return f"PackageDescriptor({self.import_path!r}, dir={self.dir!r})"
