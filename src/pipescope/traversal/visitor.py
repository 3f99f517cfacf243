"""
Generic pre-order traversal over pipeline trees.

``PipelineVisitor`` walks a root pipeline depth-first in document order.
For every step it visits the guard, then the step's inputs in declared
key order. Expressions found in the inputs are dispatched by kind; slots
holding sub-pipelines are entered in place, so a step's nested pipelines
are fully visited before its next sibling.

Analysis passes subclass the visitor and override the hooks they need.
Every hook defaults to a no-op, so the base class is a pure traversal.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from pipescope.core.expressions import (
    VALUE_KEY,
    DeferExpression,
    Expression,
    PipelineExpression,
    TemplateExpression,
    VarExpression,
    parse_expression,
)
from pipescope.core.path_utils import ROOT_PATH, ROOT_POSITION, Position, join_path_parts
from pipescope.core.pipeline import Pipeline, StepConfig, parse_pipeline
from pipescope.exceptions import (
    MalformedSubPipelineError,
    MissingStepIdentityError,
    PipelineStructureError,
)

CONFIG_KEY = "config"
GUARD_KEY = "if"


@dataclass(frozen=True)
class VisitPipelineExtra:
    """
    Ancestry of a pipeline being visited.

    Params:
        parent_step: Step owning the slot, None for the root pipeline
        parent_position: Position of the owning step
        slot_name: Input name of the slot relative to the step's config
    """

    parent_step: StepConfig | None = None
    parent_position: Position | None = None
    slot_name: str | None = None

    @property
    def is_root(self) -> bool:
        return self.parent_step is None


@dataclass(frozen=True)
class VisitStepExtra:
    index: int
    pipeline_position: Position
    pipeline_extra: VisitPipelineExtra


@dataclass(frozen=True)
class VisitExpressionExtra:
    step: StepConfig
    step_position: Position


class PipelineVisitor:
    """Base visitor for pipeline trees."""

    def visit_root_pipeline(self, pipeline: Sequence[Any]) -> None:
        """
        Visit a root pipeline.

        Params:
            pipeline: Steps as StepConfig instances or raw mappings

        Raises:
            PipelineStructureError: If the tree is malformed; traversal stops
                at the first malformed node
        """
        steps = parse_pipeline(pipeline, ROOT_PATH)
        self.visit_pipeline(ROOT_POSITION, steps, VisitPipelineExtra())

    def visit_pipeline(
        self, position: Position, pipeline: Pipeline, extra: VisitPipelineExtra
    ) -> None:
        self.enter_pipeline(position, pipeline, extra)
        for index, step in enumerate(pipeline):
            self.visit_step(
                position.child(index),
                step,
                VisitStepExtra(
                    index=index, pipeline_position=position, pipeline_extra=extra
                ),
            )
        self.exit_pipeline(position, pipeline, extra)

    def enter_pipeline(
        self, position: Position, pipeline: Pipeline, extra: VisitPipelineExtra
    ) -> None:
        """Called before the first step of any pipeline, including the root."""

    def exit_pipeline(
        self, position: Position, pipeline: Pipeline, extra: VisitPipelineExtra
    ) -> None:
        """Called after the last step of any pipeline, including the root."""

    def visit_step(
        self, position: Position, step: StepConfig, extra: VisitStepExtra
    ) -> None:
        """
        Visit a step's guard and inputs.

        Overrides should call ``super().visit_step`` after their own work
        to keep descending into the step's expressions and slots.
        """
        context = VisitExpressionExtra(step=step, step_position=position)
        if step.guard is not None:
            self._visit_value(position.child(GUARD_KEY), step.guard, context, None)
        for key, value in step.config.items():
            self._visit_value(position.child(CONFIG_KEY, key), value, context, key)

    def visit_expression(
        self, position: Position, expression: Expression, extra: VisitExpressionExtra
    ) -> None:
        """Dispatch a non-pipeline expression to the hook for its kind."""
        if isinstance(expression, VarExpression):
            self.visit_var_expression(position, expression, extra)
        elif isinstance(expression, TemplateExpression):
            self.visit_template_expression(position, expression, extra)
        elif isinstance(expression, DeferExpression):
            self._visit_value(
                position.child(VALUE_KEY), expression.value, extra, None
            )

    def visit_var_expression(
        self, position: Position, expression: VarExpression, extra: VisitExpressionExtra
    ) -> None:
        pass

    def visit_template_expression(
        self,
        position: Position,
        expression: TemplateExpression,
        extra: VisitExpressionExtra,
    ) -> None:
        pass

    def visit_sub_pipeline(
        self,
        position: Position,
        expression: PipelineExpression,
        extra: VisitExpressionExtra,
        slot_name: str | None,
    ) -> None:
        """Validate a slot's value and visit it as a nested pipeline."""
        pipeline_position = position.child(VALUE_KEY)
        try:
            steps = parse_pipeline(expression.value, pipeline_position.path)
        except MissingStepIdentityError:
            raise
        except PipelineStructureError as e:
            raise MalformedSubPipelineError(
                pipeline_position.path, extra.step.id, slot_name or "", e.reason
            ) from e

        self.visit_pipeline(
            pipeline_position,
            steps,
            VisitPipelineExtra(
                parent_step=extra.step,
                parent_position=extra.step_position,
                slot_name=slot_name,
            ),
        )

    def _visit_value(
        self,
        position: Position,
        value: Any,
        context: VisitExpressionExtra,
        slot_name: str | None,
    ) -> None:
        try:
            expression = parse_expression(value)
        except ValidationError as e:
            raise PipelineStructureError(
                position.path, f"invalid expression: {e}"
            ) from e

        if isinstance(expression, PipelineExpression):
            self.visit_sub_pipeline(position, expression, context, slot_name)
        elif expression is not None:
            self.visit_expression(position, expression, context)
        elif isinstance(value, Mapping):
            for key, nested in value.items():
                self._visit_value(
                    position.child(key),
                    nested,
                    context,
                    join_path_parts(slot_name, key) if slot_name else None,
                )
        elif isinstance(value, (list, tuple)):
            for index, nested in enumerate(value):
                self._visit_value(
                    position.child(index),
                    nested,
                    context,
                    join_path_parts(slot_name, index) if slot_name else None,
                )
