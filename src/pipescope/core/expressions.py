"""
Expression variants embedded in step configuration.

An expression is a mapping of the form ``{"__type__": kind, "__value__": value}``
placed anywhere inside a step's inputs. The set of kinds is closed; anything
else in the configuration is a plain literal.
"""

from collections.abc import Mapping
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

TYPE_KEY = "__type__"
VALUE_KEY = "__value__"

TEMPLATE_ENGINES = ("nunjucks", "mustache", "handlebars")
EXPRESSION_TYPES = frozenset(("var", "pipeline", "defer", *TEMPLATE_ENGINES))


class _ExpressionBase(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class VarExpression(_ExpressionBase):
    """Reference to a variable resolved at runtime, e.g. ``@result.nested``."""

    type: Literal["var"] = Field(default="var", alias=TYPE_KEY)
    value: str = Field(alias=VALUE_KEY)


class TemplateExpression(_ExpressionBase):
    """Template string rendered by one of the supported engines; opaque here."""

    type: Literal["nunjucks", "mustache", "handlebars"] = Field(alias=TYPE_KEY)
    value: str = Field(alias=VALUE_KEY)


class PipelineExpression(_ExpressionBase):
    """Slot value holding a sub-pipeline.

    The value is kept raw and validated into steps by the traversal
    framework so that errors carry the sub-pipeline's position.
    """

    type: Literal["pipeline"] = Field(default="pipeline", alias=TYPE_KEY)
    value: Any = Field(default=None, alias=VALUE_KEY)


class DeferExpression(_ExpressionBase):
    """Structured value evaluated lazily at runtime."""

    type: Literal["defer"] = Field(default="defer", alias=TYPE_KEY)
    value: Any = Field(default=None, alias=VALUE_KEY)


Expression = Annotated[
    Union[VarExpression, TemplateExpression, PipelineExpression, DeferExpression],
    Field(discriminator="type"),
]

_expression_adapter = TypeAdapter(Expression)


def is_expression(value: Any) -> bool:
    """Check whether a configuration value has the expression marker shape."""
    if isinstance(value, _ExpressionBase):
        return True
    return (
        isinstance(value, Mapping)
        and isinstance(value.get(TYPE_KEY), str)
        and value[TYPE_KEY] in EXPRESSION_TYPES
        and VALUE_KEY in value
    )


def parse_expression(value: Any) -> Expression | None:
    """
    Convert a configuration value into its expression variant.

    Params:
        value: Any value found in a step's configuration

    Returns:
        The matching expression variant, or None for plain literals

    Raises:
        pydantic.ValidationError: If the marker is present but the payload
            does not fit the variant (e.g. a non-string variable name)
    """
    if isinstance(value, _ExpressionBase):
        return value
    if not is_expression(value):
        return None
    return _expression_adapter.validate_python(value)


def make_variable_expression(name: str) -> VarExpression:
    return VarExpression(value=name)


def make_pipeline_expression(steps: list[Any]) -> PipelineExpression:
    return PipelineExpression(value=steps)
