"""
Pipeline data model for pipescope.

Steps ("bricks") are immutable snapshots for the duration of an analysis run.
A pipeline is an ordered list of steps; sub-pipelines live in a step's
configuration as pipeline expressions.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pipescope.core.path_utils import ROOT_PATH, join_path_parts
from pipescope.core.types import OptionsArgs, StepInputs
from pipescope.exceptions import MissingStepIdentityError, PipelineStructureError


class StepConfig(BaseModel):
    """
    One configured unit of work in a pipeline.

    Params:
        id: Registry id of the brick this step runs
        config: Inputs of the step; may contain expressions at any depth
        output_key: Name the step's result is bound under, without the ``@``
        guard: Condition attached to the step (``if`` in serialized form)
        label: Display label
        instance_id: Stable identifier assigned by the editor
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(min_length=1)
    config: StepInputs = Field(default_factory=dict)
    output_key: str | None = Field(default=None, alias="outputKey")
    guard: Any = Field(default=None, alias="if")
    label: str | None = None
    instance_id: str | None = Field(default=None, alias="instanceId")

    @property
    def is_guarded(self) -> bool:
        return self.guard is not None


Pipeline = list[StepConfig]


def parse_pipeline(data: Any, path: str = ROOT_PATH) -> Pipeline:
    """
    Validate raw pipeline data into a list of steps.

    Params:
        data: Sequence of step mappings or StepConfig instances
        path: Position path of the pipeline, used in error reports

    Returns:
        Validated pipeline

    Raises:
        PipelineStructureError: If data is not a sequence of steps
        MissingStepIdentityError: If a step has no brick id
    """
    if isinstance(data, (str, bytes)) or not isinstance(data, Sequence):
        raise PipelineStructureError(
            path, f"expected a list of steps, got {type(data).__name__}"
        )

    steps: Pipeline = []
    for index, item in enumerate(data):
        step_path = join_path_parts(path, index)
        if isinstance(item, StepConfig):
            steps.append(item)
            continue
        if not isinstance(item, Mapping):
            raise PipelineStructureError(
                step_path, f"expected a step mapping, got {type(item).__name__}"
            )
        try:
            steps.append(StepConfig.model_validate(item))
        except ValidationError as e:
            if any(error["loc"][:1] == ("id",) for error in e.errors()):
                raise MissingStepIdentityError(step_path) from e
            raise PipelineStructureError(step_path, str(e)) from e
    return steps


class IntegrationDependency(BaseModel):
    """An integration configured for the pipeline, exposed as ``@<output_key>``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    integration_id: str = Field(alias="integrationId")
    output_key: str = Field(alias="outputKey")
    config_id: str | None = Field(default=None, alias="configId")


class AnalysisSource(BaseModel):
    """
    Snapshot of everything an analysis run reads.

    Params:
        pipeline: Root pipeline
        trigger_type: Starter kind used to look up the input reader schema
        integrations: Configured integrations seeding context variables
        options_args: Option arguments seeding ``@options``
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    pipeline: Pipeline = Field(default_factory=list, alias="blockPipeline")
    trigger_type: str | None = Field(default=None, alias="triggerType")
    integrations: list[IntegrationDependency] = Field(default_factory=list)
    options_args: OptionsArgs = Field(default_factory=dict, alias="optionsArgs")

    @field_validator("pipeline", mode="before")
    @classmethod
    def _validate_pipeline(cls, value: Any) -> Pipeline:
        # Structural errors are not ValueErrors, so they escape pydantic as is
        return parse_pipeline(value)
