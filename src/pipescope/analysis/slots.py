"""
Variables injected into sub-pipelines by their owning step.

Some bricks bind a variable for the body they run, e.g. a loop binds the
current item. Which slot binds what is registry knowledge; it is supplied
to the analysis as a read-only resolver built from ``SlotInputRule`` values.
"""

from collections.abc import Callable, Iterable

from attrs import frozen

from pipescope.core.pipeline import StepConfig

FOR_EACH_BRICK_ID = "builtin/for-each"
FOR_EACH_ELEMENT_BRICK_ID = "builtin/for-each-element"
DEFAULT_ELEMENT_KEY = "element"


@frozen
class SlotInputRule:
    """
    Declares that a brick's slot binds a variable for its sub-pipeline.

    Params:
        brick_id: Registry id of the owning brick
        slot_name: Input name of the slot holding the sub-pipeline
        key_prop: Input of the owning step naming the variable, if configurable
        default_key: Variable name used when ``key_prop`` is unset
    """

    brick_id: str
    slot_name: str
    key_prop: str | None = None
    default_key: str = DEFAULT_ELEMENT_KEY


DEFAULT_SLOT_INPUT_RULES: tuple[SlotInputRule, ...] = (
    SlotInputRule(FOR_EACH_BRICK_ID, "body", key_prop="elementKey"),
    SlotInputRule(FOR_EACH_ELEMENT_BRICK_ID, "body", key_prop="elementKey"),
)

SlotInputLookup = Callable[[StepConfig, str], str | None]


class SlotInputResolver:
    """Resolves the variable a step injects into one of its slots."""

    def __init__(self, rules: Iterable[SlotInputRule] = DEFAULT_SLOT_INPUT_RULES):
        self._rules = {(rule.brick_id, rule.slot_name): rule for rule in rules}

    def __call__(self, step: StepConfig, slot_name: str) -> str | None:
        """
        Get the injected variable name for a slot.

        Params:
            step: Step owning the slot
            slot_name: Input name of the slot

        Returns:
            Variable name without the ``@`` prefix, or None if the slot
            injects nothing
        """
        rule = self._rules.get((step.id, slot_name))
        if rule is None:
            return None

        if rule.key_prop:
            configured = step.config.get(rule.key_prop)
            if isinstance(configured, str) and configured:
                return configured.removeprefix("@")
        return rule.default_key
