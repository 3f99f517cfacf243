"""
pipescope exception classes.

This package provides all exception types used throughout pipescope for
consistent error handling and reporting.
"""

from pipescope.exceptions.core import (
    ErrorContext,
    MalformedSubPipelineError,
    MissingStepIdentityError,
    PipelineStructureError,
    PipeScopeError,
)

__all__ = [
    "ErrorContext",
    "PipeScopeError",
    "PipelineStructureError",
    "MalformedSubPipelineError",
    "MissingStepIdentityError",
]
