"""
Exception classes for pipeline scope analysis.

This module defines specific exception types for the structural problems
that abort an analysis run. Unknown-variable findings are never raised;
they are reported as annotations instead.
"""

from dataclasses import dataclass


@dataclass
class ErrorContext:
    """
    Location information for structural error messages.

    Params:
        path: Position path of the offending node within the pipeline tree
        brick_id: Registry id of the step that owns the offending node
        slot_name: Name of the slot being entered when the error occurred
    """

    path: str | None = None
    brick_id: str | None = None
    slot_name: str | None = None

    def format_location(self) -> str:
        """
        Format location information as indented lines.

        Returns:
            Formatted location string, empty when nothing is known
        """
        lines = []

        if self.path is not None:
            lines.append(f"  at {self.path or '<root>'}")

        if self.brick_id:
            if self.slot_name:
                lines.append(f"  in {self.brick_id}.{self.slot_name}")
            else:
                lines.append(f"  in {self.brick_id}")

        return "\n".join(lines)


class PipeScopeError(Exception):
    """Base exception for all pipescope errors."""

    pass


class PipelineStructureError(PipeScopeError):
    """Raised when the pipeline tree is malformed and cannot be traversed."""

    def __init__(
        self,
        path: str,
        reason: str,
        context: ErrorContext | None = None,
    ):
        """
        Initialize the exception.

        Params:
            path: Position path of the malformed node
            reason: Why the node is malformed
            context: Optional ErrorContext with owning step details
        """
        self.path = path
        self.reason = reason
        self.context = context

        primary_error = f"Malformed pipeline at '{path or '<root>'}': {reason}"
        location_info = context.format_location() if context else ""
        if location_info:
            super().__init__(f"{primary_error}\n{location_info}")
        else:
            super().__init__(primary_error)


class MalformedSubPipelineError(PipelineStructureError):
    """Raised when a slot value is not a valid sub-pipeline."""

    def __init__(self, path: str, brick_id: str, slot_name: str, reason: str):
        """
        Initialize the exception.

        Params:
            path: Position path of the sub-pipeline
            brick_id: Registry id of the step owning the slot
            slot_name: Name of the slot holding the malformed value
            reason: Why the value is not a sub-pipeline
        """
        self.brick_id = brick_id
        self.slot_name = slot_name
        super().__init__(
            path,
            reason,
            ErrorContext(path=path, brick_id=brick_id, slot_name=slot_name),
        )


class MissingStepIdentityError(PipelineStructureError):
    """Raised when a step lacks the identity data needed to locate it."""

    def __init__(self, path: str, reason: str = "step has no brick id"):
        """
        Initialize the exception.

        Params:
            path: Position path of the step
            reason: Specific error message
        """
        super().__init__(path, reason)
