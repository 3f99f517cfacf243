"""
Variable-scope analysis.

``VarAnalysis`` walks a pipeline and records, for every step, which
variables are known to exist when the step starts. Variable references
that resolve against nothing in that scope are reported as warnings.

Scope propagation:
    - a step sees the scope of its previous sibling plus that sibling's output
    - a step with an output key binds ``@<key>`` (DEFINITELY, or MAYBE when
      guarded) and ``@<key>.*`` (MAYBE)
    - a sub-pipeline sees the scope its owning step sees, plus the variable
      injected by the slot, if any
    - nothing bound inside a sub-pipeline is visible after it closes
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from pipescope.analysis.annotations import Annotation, AnnotationType, VarAnnotationDetail
from pipescope.analysis.base import Analysis
from pipescope.analysis.scope import EMPTY_SCOPE, Scope, VarExistence
from pipescope.analysis.seed import (
    IntegrationContextFactory,
    ReaderSchemaLookup,
    build_seed_scope,
    default_integration_context,
)
from pipescope.analysis.settings import DEFAULT_SETTINGS, VarAnalysisSettings
from pipescope.analysis.slots import SlotInputLookup, SlotInputResolver
from pipescope.core.expressions import VarExpression
from pipescope.core.path_utils import Position
from pipescope.core.pipeline import AnalysisSource, Pipeline, StepConfig
from pipescope.exceptions import PipelineStructureError
from pipescope.traversal import (
    PipelineVisitor,
    VisitExpressionExtra,
    VisitPipelineExtra,
    VisitStepExtra,
)

logger = logging.getLogger(__name__)

VAR_ANALYSIS_ID = "var"


@dataclass(frozen=True)
class ScopeFrame:
    """Scope state at the current traversal position.

    Params:
        incoming: Scope visible at the previous step, or to the owning step
            right after entering a sub-pipeline
        output: Variables bound by the previous sibling, or injected by the slot
    """

    incoming: Scope
    output: Scope | None = None


@dataclass(frozen=True)
class VarAnalysisResult:
    known_vars: dict[str, Scope] = field(default_factory=dict)
    annotations: list[Annotation] = field(default_factory=list)


def output_scope(step: StepConfig) -> Scope | None:
    """Variables a step binds for the steps after it, or None if it binds nothing."""
    if not step.output_key:
        return None

    name = f"@{step.output_key}"
    return Scope(
        {
            name: VarExistence.MAYBE if step.is_guarded else VarExistence.DEFINITELY,
            # The output's shape is unknown, so any nested property may exist
            f"{name}.*": VarExistence.MAYBE,
        }
    )


class VarAnalysis(PipelineVisitor, Analysis):
    """
    Analysis pass reporting variable references that might not be bound.

    Instances hold the results of their last run. Each run starts from
    fresh state; concurrent runs should use separate instances.
    """

    def __init__(
        self,
        reader_schema_lookup: ReaderSchemaLookup | None = None,
        integration_context_factory: IntegrationContextFactory | None = default_integration_context,
        slot_input_resolver: SlotInputLookup | None = None,
        settings: VarAnalysisSettings = DEFAULT_SETTINGS,
    ):
        """
        Initialize the analysis with its read-only collaborators.

        Params:
            reader_schema_lookup: Resolves the input reader schema for a trigger type
            integration_context_factory: Resolves context keys for integrations
            slot_input_resolver: Names the variable a step injects into a slot;
                defaults to a resolver built from ``settings.slot_input_rules``
            settings: Namespaces and seed options
        """
        self.settings = settings
        self._reader_schema_lookup = reader_schema_lookup
        self._integration_context_factory = integration_context_factory
        self._slot_input_resolver = slot_input_resolver or SlotInputResolver(
            settings.slot_input_rules
        )
        self._reset(EMPTY_SCOPE)

    @property
    def id(self) -> str:
        return VAR_ANALYSIS_ID

    def _reset(self, seed: Scope) -> None:
        self._known_vars: dict[str, Scope] = {}
        self._annotations: list[Annotation] = []
        self._context_stack: list[ScopeFrame] = []
        self._frame = ScopeFrame(incoming=seed)

    async def run(self, source: AnalysisSource) -> None:
        """
        Build the seed scope from collaborators, then analyse the pipeline.

        Params:
            source: Source to analyse

        Raises:
            PipelineStructureError: If the pipeline is malformed
        """
        seed = await build_seed_scope(
            source,
            reader_schema_lookup=self._reader_schema_lookup,
            integration_context_factory=self._integration_context_factory,
            settings=self.settings,
        )
        self.analyze(source.pipeline, seed)

    def analyze(self, pipeline: Sequence[Any], seed: Scope = EMPTY_SCOPE) -> None:
        """
        Analyse a pipeline against an already built seed scope.

        On a structural error all results are cleared before the error
        propagates, so callers never observe a partial analysis.
        """
        logger.debug("Starting variable analysis with %d seed variables", len(seed))
        self._reset(seed)
        try:
            self.visit_root_pipeline(pipeline)
        except PipelineStructureError:
            self._reset(EMPTY_SCOPE)
            raise
        logger.debug(
            "Variable analysis finished: %d steps, %d annotations",
            len(self._known_vars),
            len(self._annotations),
        )

    def get_annotations(self) -> list[Annotation]:
        return list(self._annotations)

    def get_known_vars(self) -> dict[str, Scope]:
        """Scope snapshot per step path, as recorded by the last run."""
        return dict(self._known_vars)

    def known_vars_at(self, path: str) -> Scope:
        """Scope at the entry of the step at ``path``; empty if the path is unknown."""
        return self._known_vars.get(path, EMPTY_SCOPE)

    def result(self) -> VarAnalysisResult:
        return VarAnalysisResult(
            known_vars=self.get_known_vars(), annotations=self.get_annotations()
        )

    def visit_step(
        self, position: Position, step: StepConfig, extra: VisitStepExtra
    ) -> None:
        step_scope = self._frame.incoming.union(self._frame.output)
        self._known_vars[position.path] = step_scope
        self._frame = ScopeFrame(incoming=step_scope, output=output_scope(step))

        super().visit_step(position, step, extra)

    def visit_var_expression(
        self, position: Position, expression: VarExpression, extra: VisitExpressionExtra
    ) -> None:
        name = expression.value
        known = self._known_vars.get(extra.step_position.path, EMPTY_SCOPE)
        if known.is_known(name):
            return

        self._annotations.append(
            Annotation(
                position=position,
                message=f"Variable {name} might not be defined",
                analysis_id=self.id,
                type=AnnotationType.WARNING,
                detail=VarAnnotationDetail(
                    expression=expression, known_vars=tuple(known.names())
                ),
            )
        )

    def enter_pipeline(
        self, position: Position, pipeline: Pipeline, extra: VisitPipelineExtra
    ) -> None:
        injected = None
        if extra.parent_step is not None and extra.slot_name:
            input_key = self._slot_input_resolver(extra.parent_step, extra.slot_name)
            if input_key:
                injected = Scope({f"@{input_key}": VarExistence.DEFINITELY})

        self._context_stack.append(self._frame)
        self._frame = ScopeFrame(incoming=self._frame.incoming, output=injected)

    def exit_pipeline(
        self, position: Position, pipeline: Pipeline, extra: VisitPipelineExtra
    ) -> None:
        self._frame = self._context_stack.pop()


async def analyze_pipeline(
    source: AnalysisSource,
    reader_schema_lookup: ReaderSchemaLookup | None = None,
    integration_context_factory: IntegrationContextFactory | None = default_integration_context,
    slot_input_resolver: SlotInputLookup | None = None,
    settings: VarAnalysisSettings = DEFAULT_SETTINGS,
) -> VarAnalysisResult:
    """Run a fresh VarAnalysis over ``source`` and return its results."""
    analysis = VarAnalysis(
        reader_schema_lookup=reader_schema_lookup,
        integration_context_factory=integration_context_factory,
        slot_input_resolver=slot_input_resolver,
        settings=settings,
    )
    await analysis.run(source)
    return analysis.result()
