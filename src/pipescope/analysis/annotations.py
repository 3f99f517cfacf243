"""
Annotation records produced by analysis passes.

Annotations are non-fatal findings attached to a pipeline position. They
carry enough detail for an editor to render them without re-running the
analysis.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pipescope.core.expressions import VarExpression
from pipescope.core.path_utils import Position


class AnnotationType(Enum):
    """Severity of an annotation."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class VarAnnotationDetail:
    """
    Detail payload of an unknown-variable annotation.

    Params:
        expression: The offending variable reference
        known_vars: Names known at the enclosing step, in visibility order
    """

    expression: VarExpression
    known_vars: tuple[str, ...]


@dataclass(frozen=True)
class Annotation:
    """A finding reported by an analysis pass."""

    position: Position
    message: str
    analysis_id: str
    type: AnnotationType
    detail: Any = None
