"""
pipescope - static variable-scope analysis for tree-shaped automation pipelines.

pipescope walks a pipeline of configured steps, works out which variables
are bound at every step and warns about references that might not be.
"""

from importlib.metadata import version

from pipescope.analysis import (
    Annotation,
    AnnotationType,
    Scope,
    VarAnalysis,
    VarExistence,
    analyze_pipeline,
)
from pipescope.core import AnalysisSource, StepConfig

__version__ = version("pipescope")

__all__ = [
    "__version__",
    "AnalysisSource",
    "Annotation",
    "AnnotationType",
    "Scope",
    "StepConfig",
    "VarAnalysis",
    "VarExistence",
    "analyze_pipeline",
]
