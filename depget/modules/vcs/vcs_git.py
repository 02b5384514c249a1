from __future__ import annotations

from depget.modules.vcs.base import TagCommand
from depget.modules.vcs.base import VcsDriver


class GitDriver(VcsDriver):
    NAME = "Git"
    CMD = "git"

    CREATE_CMD = "clone {repo} {dir}"
    DOWNLOAD_CMD = "fetch --tags origin"

    # show-ref lists both tags and remote branches, one "<sha> refs/..." per line
    TAG_CMDS = [TagCommand("show-ref", r"(?:tags|origin)/(\S+)$")]
    TAG_SYNC_CMD = "checkout -q {tag}"
    TAG_SYNC_DEFAULT = "checkout -q --detach origin/HEAD"
