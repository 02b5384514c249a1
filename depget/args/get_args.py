from __future__ import annotations

from depget.args.base_args import BaseArgs


class GetArgs(BaseArgs):
    def __init__(self, **kwargs: str | list[str] | bool):
        super().__init__(**kwargs)

        self.update: bool = bool(kwargs.get("update", False))
        """Use the network to update already present packages and their dependencies."""
        self.dry_run: bool = bool(kwargs.get("dry_run", False))
        """Print the version control commands instead of running them."""
        self.tree: bool = bool(kwargs.get("tree", False))
        """Print the dependency tree after fetching."""
