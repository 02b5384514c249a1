from __future__ import annotations

import os
import posixpath
import re
from typing import Callable

WILDCARD = "..."


def has_wildcard(pattern: str) -> bool:
    return WILDCARD in pattern


def is_local_import(path: str) -> bool:
    """Local imports are file system paths like '.', './x', '../x' or '/abs/x'."""
    return (
        path in (".", "..")
        or path.startswith("./")
        or path.startswith("../")
        or os.path.isabs(path)
    )


def match_pattern(pattern: str) -> Callable[[str], bool]:
    """
    Return a predicate matching import paths against pattern.
    '...' matches any string, a trailing '/...' also matches the bare prefix,
    so 'net/...' matches 'net' and all packages below it.
    """
    regex = re.escape(pattern).replace(re.escape(WILDCARD), ".*")
    if regex.endswith("/.*"):
        regex = regex[: -len("/.*")] + "(/.*)?"
    compiled = re.compile(f"^{regex}$")
    return lambda name: compiled.match(name) is not None


def tree_can_match(pattern: str) -> Callable[[str], bool]:
    """Return a predicate telling whether a directory named name could contain matches of pattern."""
    i = pattern.find(WILDCARD)
    if i < 0:
        return lambda name: name == pattern or pattern.startswith(name + "/")
    prefix = pattern[:i]
    return lambda name: len(name) <= len(prefix) and prefix.startswith(name) or name.startswith(prefix)


def skip_dir(name: str) -> bool:
    """Directories that never contain packages."""
    return name.startswith(".") or name.startswith("_") or name == "testdata"


def clean_import_path(path: str) -> str:
    """Clean an import path, keeping the leading './' of local imports."""
    if path == "":
        return path
    if is_local_import(path):
        cleaned = os.path.normpath(path)
        if path.startswith("./") and not cleaned.startswith("."):
            cleaned = "./" + cleaned
        return cleaned
    return posixpath.normpath(path.replace("\\", "/"))
