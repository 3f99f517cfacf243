"""
Variable scopes for pipeline analysis.

A scope maps variable names to how confident the analysis is that the
variable is bound at a point of the pipeline. Names may be dotted paths
(``@input.a.b``) or wildcard entries (``@result.*``) meaning that some
nested property of ``@result`` may exist while its shape is unknown.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from enum import Enum

logger = logging.getLogger(__name__)

WILDCARD_SUFFIX = ".*"


class VarExistence(Enum):
    """Confidence that a variable is bound."""

    MAYBE = "MAYBE"
    DEFINITELY = "DEFINITELY"

    @property
    def strength(self) -> int:
        return 1 if self is VarExistence.DEFINITELY else 0

    def strongest(self, other: "VarExistence") -> "VarExistence":
        return self if self.strength >= other.strength else other


class Scope(Mapping[str, VarExistence]):
    """
    Immutable mapping of variable name to existence.

    Insertion order is preserved so that known variable names are reported
    in the order they became visible.
    """

    def __init__(
        self,
        entries: Mapping[str, VarExistence]
        | Iterable[tuple[str, VarExistence]]
        | None = None,
    ):
        self._vars: dict[str, VarExistence] = dict(entries or {})

    @classmethod
    def definitely(cls, names: Iterable[str]) -> "Scope":
        return cls((name, VarExistence.DEFINITELY) for name in names)

    def __getitem__(self, name: str) -> VarExistence:
        return self._vars[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._vars)

    def __len__(self) -> int:
        return len(self._vars)

    def __repr__(self) -> str:
        entries = ", ".join(f"{name}={existence.value}" for name, existence in self._vars.items())
        return f"Scope({entries})"

    def names(self) -> list[str]:
        return list(self._vars)

    def union(self, other: "Scope | None") -> "Scope":
        """
        Combine two scopes into a new one.

        A name present in both with different confidence keeps the stronger
        confidence rather than the entry from ``other``: re-binding an output
        key from a guarded step does not make an already bound variable
        optional. Plain last-entry-wins merging would report MAYBE there.

        Params:
            other: Scope to merge in; None is treated as empty

        Returns:
            New scope containing the names of both
        """
        if not other:
            return Scope(self._vars)

        merged = dict(self._vars)
        for name, existence in other.items():
            current = merged.get(name)
            if current is not None and current is not existence:
                logger.debug(
                    "Variable %s bound as both %s and %s, keeping the stronger",
                    name,
                    current.value,
                    existence.value,
                )
                existence = current.strongest(existence)
            merged[name] = existence
        return Scope(merged)

    def wildcard_prefixes(self) -> list[str]:
        """Prefixes matched by wildcard entries, including the trailing dot."""
        return [
            name[: -len(WILDCARD_SUFFIX) + 1]
            for name in self._vars
            if name.endswith(WILDCARD_SUFFIX)
        ]

    def is_known(self, name: str) -> bool:
        """
        Check whether a variable reference resolves against this scope.

        A reference resolves when the name is bound verbatim, or when a
        wildcard entry ``x.*`` exists and the name starts with ``x.``.
        """
        if name in self._vars:
            return True
        return any(name.startswith(prefix) for prefix in self.wildcard_prefixes())


EMPTY_SCOPE = Scope()
