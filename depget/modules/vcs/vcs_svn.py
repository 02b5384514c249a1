from __future__ import annotations

from depget.modules.vcs.base import VcsDriver


class SvnDriver(VcsDriver):
    """Subversion has no tags to sync to, the checkout always follows the trunk."""

    NAME = "Subversion"
    CMD = "svn"

    CREATE_CMD = "checkout {repo} {dir}"
    DOWNLOAD_CMD = "update"
