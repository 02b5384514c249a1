from __future__ import annotations

import logging

from rich.markup import escape
from rich.tree import Tree

from depget.modules.dependency_tree.tree import DependencyGraph

logger = logging.getLogger(__name__)


class TreePrinter:
    """Renders the dependency graph as a rich tree. Packages that were already printed are not expanded again."""

    def __init__(self, graph: DependencyGraph):
        self.graph = graph

    def get_tree(self, name: str = "Dependency tree", root_nodes: str | list[str] | None = None) -> Tree:
        if root_nodes is None:
            root_nodes = self.graph.get_root_nodes()
        elif isinstance(root_nodes, str):
            root_nodes = [root_nodes]

        rich_tree = Tree(name)
        printed: set[str] = set()
        for root_node in root_nodes:
            node = rich_tree.add(self._get_label(root_node))
            self._add_children(node, root_node, printed, [root_node])
        return rich_tree

    def _get_label(self, import_path: str, repeated: bool = False) -> str:
        label = escape(import_path)
        descriptor = self.graph.get_descriptor(import_path)

        if repeated:
            return f"[grey50]{label} (*)"
        if descriptor is None:
            return f"[yellow]{label}"
        if descriptor.standard:
            return f"[blue]{label}"
        return f"[bold green]{label}"

    def _add_children(self, node: Tree, import_path: str, printed: set[str], path: list[str]):
        printed.add(import_path)
        for child in self.graph.get_dependencies(import_path):
            if child in printed or child in path:
                node.add(self._get_label(child, repeated=True))
                continue
            child_node = node.add(self._get_label(child))
            self._add_children(child_node, child, printed, path + [child])
