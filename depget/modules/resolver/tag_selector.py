from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

RELEASE_TAG = re.compile(r"(0|[1-9][0-9]*)(\.(0|[1-9][0-9]*))*")
"""Dotted numeric release tags like 1, 1.4 or 1.4.0. Leading zeros are not allowed."""

WEEKLY_MARK = ".weekly."


def is_release_tag(tag: str) -> bool:
    return RELEASE_TAG.fullmatch(tag) is not None


def toolchain_version(raw: str) -> str:
    """Strip everything after the first space, e.g. '1.2 linux/amd64' becomes '1.2'."""
    return raw.strip().split(" ", 1)[0]


def compare_versions(x: str, y: str) -> int:
    """
    Compare two dotted numeric versions.

    Returns
    -------
    int: -1, 0 or 1 if x is smaller, equal or greater than y.
        Malformed versions are smaller than well formed ones. If one version is a prefix of the other,
        the shorter one is smaller, so 1.2 < 1.2.0.
    """
    if not is_release_tag(x):
        return -1
    if not is_release_tag(y):
        return 1

    xx = [int(i) for i in x.split(".")]
    yy = [int(i) for i in y.split(".")]
    for xi, yi in zip(xx, yy):
        if xi < yi:
            return -1
        if xi > yi:
            return 1

    if len(xx) < len(yy):
        return -1
    if len(xx) > len(yy):
        return 1
    return 0


def select_tag(version: str, tags: list[str]) -> str:
    """
    Select the tag best matching the toolchain version.

    Two forms are supported:
      - dotted numeric versions (1.4): the greatest release tag not newer than the version.
      - weekly versions (1.4.weekly.2015-10-31): the greatest tag with the same prefix whose
        suffix is not after the requested one.

    Returns
    -------
    str: The selected tag, or an empty string if no tag fits. The caller syncs to the most recent
        version in that case.
    """
    match = ""

    if WEEKLY_MARK in version:
        base, suffix = version.split(WEEKLY_MARK, 1)
        if is_release_tag(base):
            prefix = base + WEEKLY_MARK
            for t in tags:
                if prefix not in t:
                    continue
                if match < t and t[len(prefix) :] <= suffix:
                    match = t

    if is_release_tag(version):
        for t in tags:
            if not is_release_tag(t):
                continue
            if compare_versions(match, t) < 0 and compare_versions(t, version) <= 0:
                match = t

    logger.debug(f"selected tag '{match}' for version {version} out of {len(tags)} tags")
    return match
