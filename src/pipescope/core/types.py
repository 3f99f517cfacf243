"""
Core type definitions for pipescope.

This module contains type aliases shared by the data model, the traversal
framework and the analysis passes.
"""

from collections.abc import Mapping
from typing import Any

StepInputs = dict[str, Any]

ContextObject = Mapping[str, Any]

Schema = Mapping[str, Any]

OptionsArgs = dict[str, Any]
