from __future__ import annotations

import os

HOME_DIR = os.path.expanduser("~")
DEFAULT_CFG_DIR = os.path.join(HOME_DIR, ".config", "depget")


class ENVS:
    CONFIG_DIR = "DEPGET_CONFIG_DIR"
    PATH = "DEPGET_PATH"
    ROOT = "DEPGET_ROOT"
    VERSION = "DEPGET_VERSION"
