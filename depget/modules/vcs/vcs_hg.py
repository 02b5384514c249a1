from __future__ import annotations

from depget.modules.vcs.base import TagCommand
from depget.modules.vcs.base import VcsDriver


class HgDriver(VcsDriver):
    NAME = "Mercurial"
    CMD = "hg"

    CREATE_CMD = "clone -U {repo} {dir}"
    DOWNLOAD_CMD = "pull"

    TAG_CMDS = [
        TagCommand("tags", r"^(\S+)"),
        TagCommand("branches", r"^(\S+)"),
    ]
    TAG_SYNC_CMD = "update -r {tag}"
    TAG_SYNC_DEFAULT = "update default"
