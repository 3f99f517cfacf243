"""
Position path utilities for pipeline trees.

Every node reached during traversal is identified by a dotted path built
from the keys and indexes leading to it from the root pipeline. Paths are
stable for a given pipeline snapshot and serve as lookup keys for scope
snapshots and annotations.
"""

from dataclasses import dataclass

ROOT_PATH = ""


def join_path_parts(*parts: str | int | None) -> str:
    """
    Join path parts with dots, skipping empty and missing parts.

    Params:
        *parts: Keys, indexes or already joined sub-paths

    Returns:
        Dotted path string

    Examples:
        join_path_parts("", 0) -> "0"
        join_path_parts("0", "config", "body", "__value__") -> "0.config.body.__value__"
    """
    return ".".join(str(part) for part in parts if part is not None and part != "")


@dataclass(frozen=True)
class Position:
    """Location of a node in the pipeline tree."""

    path: str = ROOT_PATH

    def __str__(self) -> str:
        return self.path

    @property
    def is_root(self) -> bool:
        return self.path == ROOT_PATH

    def child(self, *parts: str | int | None) -> "Position":
        """Return the position reached by descending through ``parts``."""
        return Position(join_path_parts(self.path, *parts))


ROOT_POSITION = Position(ROOT_PATH)
