"""
Analysis passes over pipelines.

This package provides the variable-scope analysis, the scope model it
computes, seed scope construction and the annotation records passes emit.
"""

from pipescope.analysis.annotations import (
    Annotation,
    AnnotationType,
    VarAnnotationDetail,
)
from pipescope.analysis.base import Analysis
from pipescope.analysis.runner import run_analyses
from pipescope.analysis.scope import EMPTY_SCOPE, Scope, VarExistence
from pipescope.analysis.seed import (
    IntegrationContextFactory,
    ReaderSchemaLookup,
    build_seed_scope,
    default_integration_context,
    get_vars_from_object,
    schema_to_placeholder,
)
from pipescope.analysis.settings import VarAnalysisSettings
from pipescope.analysis.slots import (
    DEFAULT_SLOT_INPUT_RULES,
    SlotInputResolver,
    SlotInputRule,
)
from pipescope.analysis.var_analysis import (
    VarAnalysis,
    VarAnalysisResult,
    analyze_pipeline,
)

__all__ = [
    "Analysis",
    "Annotation",
    "AnnotationType",
    "DEFAULT_SLOT_INPUT_RULES",
    "EMPTY_SCOPE",
    "IntegrationContextFactory",
    "ReaderSchemaLookup",
    "Scope",
    "SlotInputResolver",
    "SlotInputRule",
    "VarAnalysis",
    "VarAnalysisResult",
    "VarAnalysisSettings",
    "VarAnnotationDetail",
    "VarExistence",
    "analyze_pipeline",
    "build_seed_scope",
    "default_integration_context",
    "get_vars_from_object",
    "run_analyses",
    "schema_to_placeholder",
]
