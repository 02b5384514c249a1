from __future__ import annotations

import logging
import os
from typing import Type
from typing import TypeVar

from extended_configparser.configuration import Configuration

from depget import DEFAULT_CFG_DIR
from depget import ENVS

logger = logging.getLogger(__name__)

C = TypeVar("C", bound="DepgetConfigBase")


class DepgetConfigBase(Configuration):
    """
    Base class for depget configuration files.
    Provides singleton access to the config via the get_config() method
    """

    NAME: None | str = None
    """Name of the configuration file. Base for the path to the configuration file."""

    _instance: None | DepgetConfigBase = None

    def __init__(self, name: str):
        path = os.path.abspath(os.path.join(self.get_configs_dir(), name))
        super().__init__(path, auto_save=True)

    @classmethod
    def get_path(cls):
        """Return the path to the configuration file."""
        if cls.NAME is None:
            raise ValueError(
                f"NAME of the Configuration must be set. Override the static variable NAME in your {cls.__name__} subclass."
            )
        return os.path.join(cls.get_configs_dir(), cls.NAME)

    @staticmethod
    def get_configs_dir() -> str:
        """Return the root directory of all config files"""
        return os.environ.get(ENVS.CONFIG_DIR, DEFAULT_CFG_DIR)

    @classmethod
    def exists(cls) -> bool:
        """Check if the configuration file exists."""
        return os.path.exists(cls.get_path())

    @classmethod
    def get_config(cls: Type[C]) -> C:
        """
        Get the instance of this configuration.
        The file is created with the default values if it does not exist yet.
        """
        if cls._instance is None:
            if cls.NAME is None:
                raise ValueError(
                    f"NAME of the Configuration must be set. Override the static variable NAME in your {cls.__name__} subclass."
                )

            instance = cls(cls.NAME)
            created = not cls.exists()
            instance.load(quiet=True)
            if created:
                logger.info(f"Creating configuration file {cls.get_path()}")
                os.makedirs(cls.get_configs_dir(), exist_ok=True)
                instance.write()
            cls._instance = instance

        return cls._instance  # type: ignore

    @classmethod
    def reset(cls):
        """Forget the loaded instance, the next get_config() reads the file again."""
        cls._instance = None
