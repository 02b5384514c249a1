from __future__ import annotations

import logging

from rich.markup import escape

from depget.errors import PackageError
from depget.modules.dependency_tree.tree import DependencyGraph

logger = logging.getLogger(__name__)


class FetchSession:
    """
    State of one `depget get` invocation.
    The caches are never persisted and never cleared while the session lives.
    """

    def __init__(self):
        self.download_cache: set[str] = set()
        """Identifiers whose download was already started."""

        self.root_cache: set[str] = set()
        """Local checkout directories that were already fetched or updated."""

        self.errors: list[PackageError] = list()
        """All errors reported during the session, in order."""

        self.graph = DependencyGraph()
        """Dependency edges seen during the walk."""

    def report(self, error: PackageError):
        logger.error(escape(str(error)))
        self.errors.append(error)

    @property
    def failed(self) -> bool:
        return len(self.errors) > 0
