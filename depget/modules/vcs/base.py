from __future__ import annotations

import logging
import os
import re
import shlex
import shutil

from depget.errors import VcsCommandError
from depget.logger import Logger
from depget.modules.module import Module

logger = logging.getLogger(__name__)


class TagCommand:
    """A command listing tags or branches, and the pattern extracting one name per match."""

    def __init__(self, cmd: str, pattern: str):
        self.cmd = cmd
        self.pattern = re.compile(pattern, re.MULTILINE)


class VcsDriver(Module):
    """
    A version control system able to create, update, list tags of and sync a checkout.
    Commands are templates, {dir}, {repo} and {tag} are replaced per argument.
    """

    NAME: str = ""
    """Human readable name, e.g. Mercurial."""

    CMD: str = ""
    """Name of the executable, also the name of the metadata directory without the dot."""

    CREATE_CMD: str = ""
    """Command to create a fresh checkout of {repo} in {dir}."""

    DOWNLOAD_CMD: str = ""
    """Command to download updates into an existing checkout."""

    TAG_CMDS: list[TagCommand] = []
    """Commands listing the tags and branches of a checkout."""

    TAG_SYNC_CMD: str = ""
    """Command to sync the checkout to {tag}. Empty if the system has no tags."""

    TAG_SYNC_DEFAULT: str = ""
    """Command to sync the checkout to the most recent version."""

    def __init__(self, dry_run: bool = False, verbose: bool = False):
        self.dry_run = dry_run
        self.verbose = verbose

    @property
    def metadata_dir(self) -> str:
        return "." + self.CMD

    def create(self, dir: str, repo: str):
        """Create a new checkout of repo in dir. The parent of dir must exist."""
        self._run(os.path.dirname(dir) or ".", self.CREATE_CMD, dir=dir, repo=repo)

    def update(self, dir: str):
        """Download incremental updates into the checkout at dir."""
        self._run(dir, self.DOWNLOAD_CMD)

    def tags(self, dir: str) -> list[str]:
        """Return all tags and branches known to the checkout at dir."""
        tags: list[str] = []
        for tag_cmd in self.TAG_CMDS:
            out = self._run(dir, tag_cmd.cmd)
            tags.extend(m.group(1) for m in tag_cmd.pattern.finditer(out))
        return tags

    def tag_sync(self, dir: str, tag: str):
        """Sync the checkout at dir to tag, an empty tag means the most recent version."""
        if self.TAG_SYNC_CMD == "":
            return
        if tag == "" and self.TAG_SYNC_DEFAULT != "":
            self._run(dir, self.TAG_SYNC_DEFAULT)
            return
        self._run(dir, self.TAG_SYNC_CMD, tag=tag)

    def expand_cmd(self, cmd: str, **keyval: str) -> list[str]:
        """Split the command template and substitute the placeholders."""
        return [arg.format(**keyval) for arg in shlex.split(cmd)]

    def _run(self, cwd: str, cmd: str, **keyval: str) -> str:
        args = self.expand_cmd(cmd, **keyval)
        cmd_line = " ".join([self.CMD, *args])

        if self.dry_run:
            Logger.get_console().print(f"cd {cwd}\n{cmd_line}", markup=False, highlight=False)
            return ""
        if self.verbose:
            logger.debug(f"cd {cwd}; {cmd_line}")

        executable = shutil.which(self.CMD)
        if executable is None:
            raise VcsCommandError(f"missing {self.CMD} command", cmd=[self.CMD, *args], dir=cwd)

        returncode, stdout, stderr = self.run_commands_with_returncode([executable, *args], cwd=cwd)
        if returncode != 0:
            output = (stdout + stderr).strip()
            raise VcsCommandError(
                f"# cd {cwd}; {cmd_line}\n{output}\nexit status {returncode}",
                cmd=[self.CMD, *args],
                dir=cwd,
                output=output,
            )
        return stdout

    def __repr__(self):
        return f"{self.__class__.__name__}(dry_run={self.dry_run})"
