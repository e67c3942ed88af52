"""
Repeated rows for array fields.

An array field keeps one piece of state, the number of rows currently shown.
Add and Remove change that count and the host re-renders the expansion.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, MutableMapping, Optional

from .controls import (
    ArrayControl,
    ButtonAction,
    ButtonControl,
    ControlDescriptor,
    GroupControl,
)
from .exceptions import UnimplementedError
from .field_spec import FlatFieldSpec, Schema
from .identifier_codec import join_path, with_index

logger = logging.getLogger(__name__)

ADD_LABEL = "Add"
REMOVE_LABEL = "Remove"


@dataclass
class RepeatState:
    """Number of rendered repetitions of one array field."""
    count: int = 1

    def __post_init__(self):
        if self.count < 1:
            self.count = 1


class ArrayField:
    """Render-time expansion of a single array control."""

    def __init__(self, control: ArrayControl, state: RepeatState,
                 add_label: str = ADD_LABEL, remove_label: str = REMOVE_LABEL):
        self.control = control
        self.state = state
        self.add_label = add_label
        self.remove_label = remove_label

    @property
    def name(self) -> str:
        return self.control.identifier

    @property
    def count(self) -> int:
        return self.state.count

    def add_field(self) -> int:
        """Show one more row."""
        self.state.count += 1
        logger.debug(f"Array {self.name}: added row, count={self.state.count}")
        return self.state.count

    def remove_field(self) -> int:
        """Show one row fewer; never drops below a single row."""
        self.state.count = max(self.state.count - 1, 1)
        logger.debug(f"Array {self.name}: removed row, count={self.state.count}")
        return self.state.count

    def render(self) -> GroupControl:
        """
        Expand the array into its rows followed by Add and Remove buttons.

        Object rows name each nested field '<name>.<field>-<index>'; primitive
        rows are named '<name>-<index>'.
        """
        from .form_generator import FormGenerator

        element = self.control.element
        elements: List[ControlDescriptor] = []

        for index in range(self.state.count):
            if isinstance(element, (list, tuple)):
                raise UnimplementedError("Arrays of arrays")

            if isinstance(element, dict):
                object_schema: Schema = {
                    with_index(join_path(self.name, field_name), index): field_spec
                    for field_name, field_spec in element.items()
                }
                elements.append(GroupControl(
                    identifier=with_index(self.name, index),
                    label=self.control.label,
                    children=tuple(FormGenerator._generate_fields(object_schema)),
                ))
            else:
                elements.append(FormGenerator.generate_flat_field(
                    with_index(self.name, index),
                    FlatFieldSpec(type=element, label=self.control.label),
                ))

        elements.append(ButtonControl(
            identifier=f"{self.name}:{ButtonAction.ADD}",
            label=self.add_label,
            action=ButtonAction.ADD,
            target=self.name,
        ))
        elements.append(ButtonControl(
            identifier=f"{self.name}:{ButtonAction.REMOVE}",
            label=self.remove_label,
            action=ButtonAction.REMOVE,
            target=self.name,
        ))

        return GroupControl(identifier=self.name, label=self.control.label, children=tuple(elements))


def expand_controls(
    controls: List[ControlDescriptor],
    repeat_states: MutableMapping[str, RepeatState],
    labels: Optional[Dict[str, str]] = None,
) -> List[ControlDescriptor]:
    """
    Replace every array control with its rendered rows.

    Arrays nested in groups or inside the rows of other arrays are expanded
    too. Arrays seen for the first time get a fresh RepeatState with one row.

    Args:
        controls: Descriptors from FormGenerator.generate()
        repeat_states: Repeat counts keyed by array identifier, updated in place
        labels: Optional 'add' and 'remove' button captions

    Returns:
        Descriptors with no ArrayControl left
    """
    labels = labels or {}
    expanded: List[ControlDescriptor] = []

    for control in controls:
        if isinstance(control, ArrayControl):
            state = repeat_states.get(control.identifier)
            if state is None:
                state = RepeatState()
                repeat_states[control.identifier] = state
            group = ArrayField(
                control,
                state,
                add_label=labels.get('add', ADD_LABEL),
                remove_label=labels.get('remove', REMOVE_LABEL),
            ).render()
            expanded.append(GroupControl(
                identifier=group.identifier,
                label=group.label,
                children=tuple(expand_controls(list(group.children), repeat_states, labels)),
            ))
        elif isinstance(control, GroupControl):
            expanded.append(GroupControl(
                identifier=control.identifier,
                label=control.label,
                children=tuple(expand_controls(list(control.children), repeat_states, labels)),
            ))
        else:
            expanded.append(control)

    return expanded
