"""
Form instances bound to a schema.

A Form owns the repeat state of its array fields, knows how to render its
current set of controls and parses the values the host reports back.
"""

import logging
from collections import deque
from typing import Any, Callable, Dict, List, MutableMapping, Optional

from .array_field import ArrayField, RepeatState, expand_controls
from .controls import (
    ArrayControl,
    ButtonAction,
    ButtonControl,
    ControlDescriptor,
    GroupControl,
    input_identifiers,
)
from .exceptions import FormGeneratorError, UnimplementedError, log_form_error
from .form_generator import FormGenerator
from .form_parser import FormParser
from .schema_loader import ensure_schema
from .value_source import ControlValueSource

logger = logging.getLogger(__name__)

SUBMIT_LABEL = "Submit"


class Form:
    """
    A rendered form for one schema.

    Attributes:
        schema: Built schema; raw schemas are built and checked on construction
        identifier: Identifier of the form itself
        on_submit: Callback invoked with the form by submit()
        value_source: Lookup for the live control values
        repeat_states: Row counts of the array fields, keyed by identifier
    """

    def __init__(
        self,
        schema: Dict[str, Any],
        identifier: str,
        on_submit: Callable[["Form"], Any],
        value_source: Optional[ControlValueSource] = None,
        repeat_states: Optional[MutableMapping[str, RepeatState]] = None,
        labels: Optional[Dict[str, str]] = None,
    ):
        self.schema = ensure_schema(schema)
        self.identifier = identifier
        self.on_submit = on_submit
        self.value_source = value_source
        self.repeat_states = repeat_states if repeat_states is not None else {}
        self.labels = labels or {}
        self._controls = FormGenerator.generate(self.schema)
        logger.info(f"Created form '{identifier}' with {len(schema)} fields")

    @property
    def controls(self) -> List[ControlDescriptor]:
        """Unexpanded descriptors; arrays appear as ArrayControl."""
        return list(self._controls)

    def render(self) -> List[ControlDescriptor]:
        """Current descriptors with every array expanded, followed by the submit button."""
        rendered = expand_controls(self.controls, self.repeat_states, self.labels)
        rendered.append(ButtonControl(
            identifier=f"{self.identifier}:{ButtonAction.SUBMIT}",
            label=self.labels.get('submit', SUBMIT_LABEL),
            action=ButtonAction.SUBMIT,
        ))
        return rendered

    def rendered_identifiers(self) -> List[str]:
        """Identifiers of the value-carrying controls currently rendered."""
        return input_identifiers(self.render())

    def _array_field(self, identifier: str) -> ArrayField:
        control = _find_array_control(self.controls, self.repeat_states, identifier)
        if control is None:
            raise KeyError(f"No array field '{identifier}' is rendered in form '{self.identifier}'")
        state = self.repeat_states.setdefault(identifier, RepeatState())
        return ArrayField(control, state)

    def add_row(self, identifier: str) -> int:
        """Add a row to the array field with the given identifier."""
        return self._array_field(identifier).add_field()

    def remove_row(self, identifier: str) -> int:
        """Remove a row from the array field, keeping at least one."""
        return self._array_field(identifier).remove_field()

    def dispatch(self, control: ButtonControl) -> Any:
        """Route a clicked button to its transition."""
        if control.action == ButtonAction.ADD:
            return self.add_row(control.target)
        if control.action == ButtonAction.REMOVE:
            return self.remove_row(control.target)
        if control.action == ButtonAction.SUBMIT:
            return self.submit()
        raise ValueError(f"Unknown button action: {control.action}")

    def parse(self, value_source: Optional[ControlValueSource] = None) -> Dict[str, Any]:
        """
        Rebuild the submitted data in the shape of the schema.

        Args:
            value_source: Overrides the form's own value source

        Returns:
            Nested dictionary of field values
        """
        source = value_source or self.value_source
        if source is None:
            raise ValueError(f"Form '{self.identifier}' has no value source to parse from")
        return FormParser(self.schema, source).parse()

    def validate(self) -> bool:
        raise UnimplementedError("Form validation")

    def submit(self) -> Any:
        """Invoke the submit callback; errors propagate to the caller."""
        logger.info(f"Submitting form '{self.identifier}'")
        try:
            return self.on_submit(self)
        except FormGeneratorError as e:
            log_form_error(e, f"submit of form '{self.identifier}'")
            raise


def _find_array_control(
    controls: List[ControlDescriptor],
    repeat_states: MutableMapping[str, RepeatState],
    identifier: str,
) -> Optional[ArrayControl]:
    """Find a rendered array control, including arrays nested inside array rows."""
    pending = deque(controls)
    while pending:
        control = pending.popleft()
        if isinstance(control, ArrayControl):
            if control.identifier == identifier:
                return control
            state = repeat_states.get(control.identifier, RepeatState())
            pending.extend(ArrayField(control, state).render().children)
        elif isinstance(control, GroupControl):
            pending.extend(control.children)
    return None
