from __future__ import annotations

from depget.modules.vcs.base import VcsDriver
from depget.modules.vcs.vcs_bzr import BzrDriver
from depget.modules.vcs.vcs_git import GitDriver
from depget.modules.vcs.vcs_hg import HgDriver
from depget.modules.vcs.vcs_svn import SvnDriver

DRIVERS: list[type[VcsDriver]] = [HgDriver, GitDriver, SvnDriver, BzrDriver]
"""All known drivers, in the order checkouts are searched for metadata directories."""


def driver_by_cmd(cmd: str) -> type[VcsDriver] | None:
    for driver in DRIVERS:
        if driver.CMD == cmd:
            return driver
    return None
