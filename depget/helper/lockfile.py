from __future__ import annotations

import atexit
import hashlib
import logging
import os

import psutil

from depget import DEFAULT_CFG_DIR
from depget import ENVS

logger = logging.getLogger(__name__)


class DepgetLock:
    """
    Lockfile guarding the checkouts of one workspace against concurrent depget runs.

    The lockfile lives in the config dir and holds the PID of the owner, the operation
    and the workspace. A lockfile whose process is gone is stale and gets replaced.

    Usage:
        with DepgetLock("get", workspace) as lock:
            if lock.access:
                ...
    """

    def __init__(self, operation: str, workspace: str | None = None, create_lock=True):
        self.access = False
        self.operation = operation
        self.workspace = os.path.abspath(workspace) if workspace is not None else None
        self.lockfile_path = self.path_for(self.workspace)
        atexit.register(self.unlock)

        owner_pid, owner_operation = self.read_owner()
        if owner_pid is not None and not self._is_process_running(owner_pid):
            os.remove(self.lockfile_path)
            logger.warning(f"Stale lockfile of '{owner_operation}' ({owner_pid}) removed: {self.lockfile_path}")
            owner_pid = None

        if owner_pid is None:
            if create_lock:
                os.makedirs(os.path.dirname(self.lockfile_path), exist_ok=True)
                with open(self.lockfile_path, "w") as f:
                    f.write(f"{os.getpid()}\n{self.operation}\n{self.workspace or ''}")
            self.access = True
        else:
            target = self.workspace or "all workspaces"
            logger.error(f"Another depget instance runs '{owner_operation}' ({owner_pid}) on {target}.")

    @staticmethod
    def path_for(workspace: str | None) -> str:
        """Each workspace gets its own lockfile, named after a hash of its path."""
        config_dir = os.environ.get(ENVS.CONFIG_DIR, DEFAULT_CFG_DIR)
        if workspace is None:
            return os.path.join(config_dir, "depget.lock")
        digest = hashlib.sha1(workspace.encode("utf-8")).hexdigest()[:12]
        return os.path.join(config_dir, f"depget-{digest}.lock")

    def read_owner(self) -> tuple[str | None, str]:
        """PID and operation of the current owner, (None, "") if nobody holds the lock."""
        if not os.path.exists(self.lockfile_path):
            return None, ""
        with open(self.lockfile_path, "r") as f:
            pid = f.readline().strip()
            operation = f.readline().strip()
        return pid, operation

    def unlock(self):
        if self.access and os.path.exists(self.lockfile_path):
            os.remove(self.lockfile_path)
        self.access = False

    def __enter__(self) -> DepgetLock:
        return self

    def __exit__(self, exc_type, exc, tb):
        self.unlock()

    @staticmethod
    def _is_process_running(pid: str) -> bool:
        """Check if a process is running. Unreadable PIDs count as not running."""
        try:
            return psutil.pid_exists(int(pid))
        except ValueError:
            return False
