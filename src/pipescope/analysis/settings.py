"""
Settings for the variable-scope analysis.
"""

from attrs import field, frozen

from pipescope.analysis.slots import DEFAULT_SLOT_INPUT_RULES, SlotInputRule

INPUT_NAMESPACE = "@input"
OPTIONS_NAMESPACE = "@options"


@frozen
class VarAnalysisSettings:
    """
    Immutable configuration of a VarAnalysis.

    Params:
        input_namespace: Variable under which input reader properties are bound
        options_namespace: Variable under which option arguments are bound
        flatten_reader_properties: Bind nested object properties of the reader
            schema (``@input.a.b``), not only top-level ones
        slot_input_rules: Slot bindings used when no resolver is injected
    """

    input_namespace: str = INPUT_NAMESPACE
    options_namespace: str = OPTIONS_NAMESPACE
    flatten_reader_properties: bool = True
    slot_input_rules: tuple[SlotInputRule, ...] = field(
        default=DEFAULT_SLOT_INPUT_RULES, converter=tuple
    )


DEFAULT_SETTINGS = VarAnalysisSettings()
