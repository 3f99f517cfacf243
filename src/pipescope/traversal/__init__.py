"""
Pipeline traversal framework.

This package provides the generic visitor that analysis passes build on.
"""

from pipescope.traversal.visitor import (
    PipelineVisitor,
    VisitExpressionExtra,
    VisitPipelineExtra,
    VisitStepExtra,
)

__all__ = [
    "PipelineVisitor",
    "VisitExpressionExtra",
    "VisitPipelineExtra",
    "VisitStepExtra",
]
