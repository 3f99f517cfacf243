"""
Shared test fixtures for the pipescope test suite.
"""

import pytest

from pipescope.core import AnalysisSource


@pytest.fixture
def reader_schema():
    """Output schema of the input reader used by the ``trigger`` starter."""
    return {
        "type": "object",
        "properties": {
            "a": {
                "type": "object",
                "properties": {"b": {"type": "string"}},
            },
        },
    }


@pytest.fixture
def reader_schema_lookup(reader_schema):
    """Read-only schema lookup returning ``reader_schema`` for the ``trigger`` starter.

    Usage:
        def test_something(reader_schema_lookup):
            analysis = VarAnalysis(reader_schema_lookup=reader_schema_lookup)
    """

    async def lookup(trigger_type):
        return reader_schema if trigger_type == "trigger" else None

    return lookup


@pytest.fixture
def make_source():
    """Factory building an AnalysisSource from raw serialized fields."""

    def factory(pipeline, **fields):
        return AnalysisSource.model_validate({"blockPipeline": pipeline, **fields})

    return factory
