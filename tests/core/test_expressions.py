"""
Tests for expression variants.
"""

import pytest
from pydantic import ValidationError

from pipescope.core import (
    DeferExpression,
    PipelineExpression,
    TemplateExpression,
    VarExpression,
    is_expression,
    make_pipeline_expression,
    make_variable_expression,
    parse_expression,
)


class TestParseExpression:
    """Test dispatch of raw configuration values onto variants."""

    def test_var(self):
        """Test a var marker becomes a VarExpression."""
        expression = parse_expression({"__type__": "var", "__value__": "@result.nested"})
        assert isinstance(expression, VarExpression)
        assert expression.value == "@result.nested"

    @pytest.mark.parametrize("engine", ["nunjucks", "mustache", "handlebars"])
    def test_templates(self, engine):
        """Test every template engine maps onto TemplateExpression."""
        expression = parse_expression({"__type__": engine, "__value__": "{{ @x }}"})
        assert isinstance(expression, TemplateExpression)
        assert expression.type == engine

    def test_pipeline_keeps_raw_value(self):
        """Test pipeline expressions keep their steps unvalidated."""
        expression = parse_expression({"__type__": "pipeline", "__value__": [{"id": "acme/a"}]})
        assert isinstance(expression, PipelineExpression)
        assert expression.value == [{"id": "acme/a"}]

    def test_defer(self):
        """Test a defer marker becomes a DeferExpression."""
        expression = parse_expression({"__type__": "defer", "__value__": {"a": 1}})
        assert isinstance(expression, DeferExpression)

    @pytest.mark.parametrize(
        "value",
        [
            "@result",
            42,
            None,
            ["@a"],
            {"__type__": "var"},
            {"__type__": "unknown", "__value__": "x"},
            {"type": "var", "value": "@a"},
            {"__type__": ["x"], "__value__": 1},
            {"__type__": {"kind": "var"}, "__value__": "@a"},
            {"__type__": None, "__value__": "@a"},
        ],
    )
    def test_literals(self, value):
        """Values without the full marker shape are not expressions."""
        assert not is_expression(value)
        assert parse_expression(value) is None

    def test_invalid_payload(self):
        """Test a var marker with a non-string name fails validation."""
        with pytest.raises(ValidationError):
            parse_expression({"__type__": "var", "__value__": 3})

    def test_existing_variant_passes_through(self):
        """Test already built variants are returned unchanged."""
        expression = make_variable_expression("@a")
        assert is_expression(expression)
        assert parse_expression(expression) is expression


class TestBuilders:
    """Test helpers building expressions in code."""

    def test_make_variable_expression(self):
        """Test the built variable serializes to the marker shape."""
        assert make_variable_expression("@a").model_dump(by_alias=True) == {
            "__type__": "var",
            "__value__": "@a",
        }

    def test_make_pipeline_expression(self):
        """Test the built pipeline expression holds the given steps."""
        expression = make_pipeline_expression([])
        assert expression.type == "pipeline"
        assert expression.value == []
