"""
Tests for the pipeline traversal framework.

Focus Areas:
1. Pre-order, document-order visiting of steps, expressions and slots
2. Sub-pipeline ancestry passed to the enter/exit hooks
3. Structural errors aborting traversal
"""

import pytest

from pipescope.core import StepConfig, make_variable_expression
from pipescope.exceptions import (
    MalformedSubPipelineError,
    MissingStepIdentityError,
    PipelineStructureError,
)
from pipescope.traversal import PipelineVisitor


def var(name):
    return {"__type__": "var", "__value__": name}


def pipe(steps):
    return {"__type__": "pipeline", "__value__": steps}


class RecordingVisitor(PipelineVisitor):
    """Visitor recording every hook invocation."""

    def __init__(self):
        self.events = []

    def enter_pipeline(self, position, pipeline, extra):
        parent = extra.parent_step.id if extra.parent_step else None
        self.events.append(("enter", position.path, parent, extra.slot_name))

    def exit_pipeline(self, position, pipeline, extra):
        self.events.append(("exit", position.path))

    def visit_step(self, position, step, extra):
        self.events.append(("step", position.path, step.id))
        super().visit_step(position, step, extra)

    def visit_var_expression(self, position, expression, extra):
        self.events.append(("var", position.path, expression.value, extra.step_position.path))

    def visit_template_expression(self, position, expression, extra):
        self.events.append(("template", position.path))


class TestTraversalOrder:
    """Test that nodes are visited once, in document order."""

    def test_full_walk(self):
        """Test steps, guards, inputs and slots are visited in document order."""
        pipeline = [
            {
                "id": "acme/a",
                "if": var("@flag"),
                "config": {
                    "x": var("@one"),
                    "body": pipe([{"id": "acme/b", "config": {"y": var("@two")}}]),
                    "z": [{"k": var("@three")}],
                },
            },
            {
                "id": "acme/c",
                "config": {"t": {"__type__": "nunjucks", "__value__": "{{ @four }}"}},
            },
        ]

        visitor = RecordingVisitor()
        visitor.visit_root_pipeline(pipeline)

        assert visitor.events == [
            ("enter", "", None, None),
            ("step", "0", "acme/a"),
            ("var", "0.if", "@flag", "0"),
            ("var", "0.config.x", "@one", "0"),
            ("enter", "0.config.body.__value__", "acme/a", "body"),
            ("step", "0.config.body.__value__.0", "acme/b"),
            ("var", "0.config.body.__value__.0.config.y", "@two", "0.config.body.__value__.0"),
            ("exit", "0.config.body.__value__"),
            ("var", "0.config.z.0.k", "@three", "0"),
            ("step", "1", "acme/c"),
            ("template", "1.config.t"),
            ("exit", ""),
        ]

    def test_slots_in_declared_order(self):
        """Test slots are entered in the order they appear in the inputs."""
        pipeline = [
            {
                "id": "builtin/if-else",
                "config": {
                    "if": pipe([{"id": "acme/then"}]),
                    "else": pipe([{"id": "acme/else"}]),
                },
            }
        ]

        visitor = RecordingVisitor()
        visitor.visit_root_pipeline(pipeline)

        steps = [event[2] for event in visitor.events if event[0] == "step"]
        slots = [event[3] for event in visitor.events if event[0] == "enter"]
        assert steps == ["builtin/if-else", "acme/then", "acme/else"]
        assert slots == [None, "if", "else"]

    def test_nested_slot_name(self):
        """Sub-pipelines below the top level of the inputs are named by their relative path."""
        pipeline = [
            {
                "id": "acme/switch",
                "config": {"branches": [{"body": pipe([{"id": "acme/inner"}])}]},
            }
        ]

        visitor = RecordingVisitor()
        visitor.visit_root_pipeline(pipeline)

        assert ("enter", "0.config.branches.0.body.__value__", "acme/switch", "branches.0.body") in visitor.events

    def test_defer_values_are_walked(self):
        """Test references inside deferred values are dispatched."""
        pipeline = [
            {
                "id": "acme/form",
                "config": {"d": {"__type__": "defer", "__value__": {"m": var("@five")}}},
            }
        ]

        visitor = RecordingVisitor()
        visitor.visit_root_pipeline(pipeline)

        assert ("var", "0.config.d.__value__.m", "@five", "0") in visitor.events

    def test_literals_are_not_dispatched(self):
        """Test plain literals produce no expression events."""
        pipeline = [{"id": "acme/a", "config": {"s": "@not-a-ref", "n": 1, "l": ["x"]}}]

        visitor = RecordingVisitor()
        visitor.visit_root_pipeline(pipeline)

        assert [event[0] for event in visitor.events] == ["enter", "step", "exit"]

    def test_unhashable_type_marker_is_walked(self):
        """Test a literal with an unhashable __type__ is descended into."""
        pipeline = [{"id": "acme/post", "config": {"body": {"__type__": ["x"], "v": var("@a")}}}]

        visitor = RecordingVisitor()
        visitor.visit_root_pipeline(pipeline)

        assert ("var", "0.config.body.v", "@a", "0") in visitor.events

    def test_programmatic_steps(self):
        """Steps and expressions may be built as models instead of raw mappings."""
        pipeline = [StepConfig(id="acme/a", config={"x": make_variable_expression("@one")})]

        visitor = RecordingVisitor()
        visitor.visit_root_pipeline(pipeline)

        assert ("var", "0.config.x", "@one", "0") in visitor.events

    def test_empty_pipeline(self):
        """Test an empty pipeline is entered and exited."""
        visitor = RecordingVisitor()
        visitor.visit_root_pipeline([])

        assert visitor.events == [("enter", "", None, None), ("exit", "")]

    def test_base_visitor_is_pure_traversal(self):
        """The default hooks do nothing and traversal completes."""
        PipelineVisitor().visit_root_pipeline(
            [{"id": "acme/a", "config": {"body": pipe([{"id": "acme/b", "config": {"x": var("@y")}}])}}]
        )


class TestStructuralErrors:
    """Test that malformed trees abort traversal."""

    def test_slot_value_not_a_list(self):
        """Test a non-list slot value aborts before the root exit hook."""
        pipeline = [{"id": "builtin/for-each", "config": {"body": pipe("oops")}}]

        visitor = RecordingVisitor()
        with pytest.raises(MalformedSubPipelineError) as exc_info:
            visitor.visit_root_pipeline(pipeline)

        error = exc_info.value
        assert error.path == "0.config.body.__value__"
        assert error.brick_id == "builtin/for-each"
        assert error.slot_name == "body"
        assert ("exit", "") not in visitor.events

    def test_slot_step_not_a_mapping(self):
        """Test a non-mapping step in a slot is a malformed sub-pipeline."""
        pipeline = [{"id": "builtin/for-each", "config": {"body": pipe([1])}}]

        with pytest.raises(MalformedSubPipelineError):
            RecordingVisitor().visit_root_pipeline(pipeline)

    def test_step_without_identity_in_slot(self):
        """Test a slot step without a brick id is reported at its path."""
        pipeline = [{"id": "builtin/for-each", "config": {"body": pipe([{"config": {}}])}}]

        with pytest.raises(MissingStepIdentityError) as exc_info:
            RecordingVisitor().visit_root_pipeline(pipeline)

        assert exc_info.value.path == "0.config.body.__value__.0"

    def test_step_without_identity_at_root(self):
        """Test a root step without a brick id aborts traversal."""
        with pytest.raises(MissingStepIdentityError):
            RecordingVisitor().visit_root_pipeline([{"id": "acme/a"}, {"outputKey": "x"}])

    def test_invalid_expression_payload(self):
        """Test an invalid expression payload is reported at its path."""
        pipeline = [{"id": "acme/a", "config": {"x": {"__type__": "var", "__value__": 3}}}]

        with pytest.raises(PipelineStructureError) as exc_info:
            RecordingVisitor().visit_root_pipeline(pipeline)

        assert exc_info.value.path == "0.config.x"

    def test_root_not_a_list(self):
        """Test a root pipeline that is not a list is rejected."""
        with pytest.raises(PipelineStructureError):
            RecordingVisitor().visit_root_pipeline({"id": "acme/a"})
