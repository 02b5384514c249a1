from __future__ import annotations


class ImportStack:
    """
    The chain of import paths from the requested package down to the one currently being processed.
    Only used for diagnostics, cycles are broken by the download cache.
    """

    def __init__(self, paths: list[str] | None = None):
        self._paths: list[str] = list(paths or [])

    def push(self, path: str):
        self._paths.append(path)

    def pop(self) -> str:
        return self._paths.pop()

    def copy(self) -> tuple[str, ...]:
        """Snapshot of the current chain, safe to keep after the stack changes."""
        return tuple(self._paths)

    def cycle(self, path: str) -> list[str] | None:
        """Return the import cycle closed by path, or None if path is not on the stack."""
        if path not in self._paths:
            return None
        start = self._paths.index(path)
        return self._paths[start:] + [path]

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def __len__(self):
        return len(self._paths)

    def __iter__(self):
        return iter(list(self._paths))

    def __str__(self):
        return " -> ".join(self._paths)
