from __future__ import annotations

from depget.modules.vcs.base import TagCommand
from depget.modules.vcs.base import VcsDriver


class BzrDriver(VcsDriver):
    NAME = "Bazaar"
    CMD = "bzr"

    CREATE_CMD = "branch {repo} {dir}"
    DOWNLOAD_CMD = "pull --overwrite"

    TAG_CMDS = [TagCommand("tags", r"^(\S+)")]
    TAG_SYNC_CMD = "update -r {tag}"
    TAG_SYNC_DEFAULT = "update -r revno:-1"
