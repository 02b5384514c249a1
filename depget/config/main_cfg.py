from __future__ import annotations

import logging
import os

from extended_configparser.configuration import ConfigEntryCollection
from extended_configparser.configuration import ConfigSection
from extended_configparser.parser import ExtendedConfigParser

from depget import ENVS
from depget.config.base import DepgetConfigBase

logger = logging.getLogger(__name__)


class MainConfigPaths(ConfigEntryCollection):
    """
    Helper class to bundle the workspace paths for depget.
    """

    def __init__(self):
        section = ConfigSection("Depget.Dirs")
        self.dirs_section = section

        self.workspace_paths = section.Option(
            "workspace_paths",
            [r"${HOME}/depget"],
            "Workspace directories, each holding a 'src' tree of fetched packages",
            long_instruction="New checkouts are placed into the first workspace that is not the builtin root.",
            value_getter=lambda x: ExtendedConfigParser.split_to_list(x),
            value_setter=lambda x: ExtendedConfigParser.list_to_str(x),
        )
        """Ordered list of workspace directories."""

        self.builtin_root = section.Option(
            "builtin_root",
            r"/usr/local/depget",
            "Root of the builtin distribution, its packages live in 'src/pkg'",
        )
        """Root of the builtin distribution."""


class ToolchainConfig(ConfigEntryCollection):
    """
    Helper class to bundle the toolchain settings used for tag selection.
    """

    def __init__(self):
        section = ConfigSection("Depget.Toolchain")
        self.version = section.Option(
            "version",
            "1.0",
            "Toolchain version, repositories are synced to the closest tag not after it",
            inquire=False,
        )


class MainConfig(DepgetConfigBase):
    NAME = "main.cfg"

    def __init__(self, name: str):
        super().__init__(name)

        self.paths = MainConfigPaths()
        """All paths of the main configuration."""

        self.toolchain = ToolchainConfig()
        """Toolchain configuration."""

    def get_workspace_paths(self) -> list[str]:
        """Workspace list, the DEPGET_PATH env var takes precedence over the config file."""
        env_value = os.environ.get(ENVS.PATH)
        if env_value is not None:
            return [p for p in env_value.split(os.pathsep) if p != ""]
        return [p for p in self.paths.workspace_paths.value if p != ""]

    def get_builtin_root(self) -> str:
        return os.environ.get(ENVS.ROOT) or self.paths.builtin_root.value

    def get_toolchain_version(self) -> str:
        return os.environ.get(ENVS.VERSION) or str(self.toolchain.version.value)
