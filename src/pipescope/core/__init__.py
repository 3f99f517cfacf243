"""
Core pipescope components.

This package provides the pipeline data model, expression variants,
position paths and shared type definitions.
"""

from pipescope.core.expressions import (
    DeferExpression,
    Expression,
    PipelineExpression,
    TemplateExpression,
    VarExpression,
    is_expression,
    make_pipeline_expression,
    make_variable_expression,
    parse_expression,
)
from pipescope.core.path_utils import (
    ROOT_POSITION,
    Position,
    join_path_parts,
)
from pipescope.core.pipeline import (
    AnalysisSource,
    IntegrationDependency,
    Pipeline,
    StepConfig,
    parse_pipeline,
)
from pipescope.core.types import ContextObject, OptionsArgs, Schema, StepInputs

__all__ = [
    "AnalysisSource",
    "ContextObject",
    "DeferExpression",
    "Expression",
    "IntegrationDependency",
    "OptionsArgs",
    "Pipeline",
    "PipelineExpression",
    "Position",
    "ROOT_POSITION",
    "Schema",
    "StepConfig",
    "StepInputs",
    "TemplateExpression",
    "VarExpression",
    "is_expression",
    "join_path_parts",
    "make_pipeline_expression",
    "make_variable_expression",
    "parse_expression",
    "parse_pipeline",
]
