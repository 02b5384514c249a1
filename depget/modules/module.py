from __future__ import annotations

import logging
import os
import subprocess

from depget.logger import Logger

logger = logging.getLogger(__name__)


class Module:
    @classmethod
    def print_rule(cls, message: str):
        Logger.get_console().rule(f"[bold blue]{message}")

    @staticmethod
    def run_commands_with_returncode(
        command: list[str],
        cwd: str | None = None,
        env: dict[str, str] | None = None,
    ) -> tuple[int, str, str]:
        """
        Run a command without a shell and wait for it to finish.

        Parameters
        ----------
        command: list[str]
            The executable followed by its arguments.
        cwd: str
            The working directory. If None, the current working directory is used.
        env: dict[str, str]
            Additional environment variables for the command.

        Returns
        -------
        tuple(int, str, str): The returncode, stdout and stderr of the command.

        """

        if cwd is None:
            cwd = os.getcwd()

        run_env = None
        if env is not None:
            run_env = {**os.environ, **env}

        # VCS tools print in arbitrary encodings
        result = subprocess.run(command, capture_output=True, text=True, errors="replace", cwd=cwd, env=run_env)
        return (result.returncode, result.stdout, result.stderr)
