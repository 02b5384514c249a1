from __future__ import annotations

from typing import Iterable


class DownloadError(Exception):
    """Base class for failures that abort the download of a single repository root."""


class RepoRootError(DownloadError):
    """The import path cannot be mapped to any repository."""


class LocalStateConflict(DownloadError):
    """The on-disk state at the destination is ambiguous and must not be touched."""


class VcsCommandError(DownloadError):
    """A version control command failed. The output of the command is kept verbatim."""

    def __init__(self, message: str, cmd: list[str] | None = None, dir: str | None = None, output: str = ""):
        self.cmd = cmd or []
        self.dir = dir
        self.output = output
        super().__init__(message)


class PackageError(Exception):
    """
    An error attributed to a package, together with the import chain that led to it.
    The import stack is a snapshot, later changes of the live stack do not affect it.
    """

    def __init__(self, import_stack: Iterable[str], err: str):
        self.import_stack: tuple[str, ...] = tuple(import_stack)
        self.err = err
        super().__init__(str(self))

    def __str__(self):
        if len(self.import_stack) == 0:
            return self.err
        return "package " + "\n\timports ".join(self.import_stack) + ": " + self.err


class GetFailedException(Exception):
    def __init__(self, errors: list[PackageError]):
        self.errors = errors
        s = f"{len(errors)} package(s) could not be fetched"
        super().__init__(s)
