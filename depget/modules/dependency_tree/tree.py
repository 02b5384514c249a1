from __future__ import annotations

import logging

import networkx as nx

from depget.package.core import PackageDescriptor

logger = logging.getLogger(__name__)


class DependencyGraph:
    """Directed graph of import paths, an edge points from a package to one of its dependencies."""

    def __init__(self):
        self.tree: nx.DiGraph = nx.DiGraph()

    def add_package(self, descriptor: PackageDescriptor):
        self.tree.add_node(descriptor.import_path, descriptor=descriptor)

    def add_dependency(self, import_path: str, dependency: str):
        if self.tree.has_edge(import_path, dependency):
            return
        logger.debug(f"[{import_path}]: Adding dependency {dependency}")
        self.tree.add_edge(import_path, dependency)

    def get_dependencies(self, import_path: str) -> list[str]:
        if import_path not in self.tree:
            return []
        return list(self.tree.successors(import_path))

    def get_descriptor(self, import_path: str) -> PackageDescriptor | None:
        if import_path not in self.tree:
            return None
        return self.tree.nodes[import_path].get("descriptor")

    def get_root_nodes(self) -> list[str]:
        """Packages nothing else depends on."""
        return [n for n in self.tree.nodes if self.tree.in_degree(n) == 0]

    def get_cycles(self) -> list[list[str]]:
        return [list(c) for c in nx.simple_cycles(self.tree)]

    def __contains__(self, import_path: object) -> bool:
        return import_path in self.tree

    def __len__(self):
        return self.tree.number_of_nodes()
