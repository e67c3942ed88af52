"""
Control descriptors exchanged with the host UI toolkit.

The form generator never paints anything itself. It produces descriptors that
name the control kind, its identifier, label and options, and the host turns
them into live widgets.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from .field_spec import FieldSpec, PrimitiveType


class ControlKind:
    """Control kind constants."""
    TEXT = "text"
    SELECT = "select"
    GROUP = "group"
    BUTTON = "button"
    ARRAY = "array"


class ButtonAction:
    """Actions a button descriptor can trigger."""
    ADD = "add"
    REMOVE = "remove"
    SUBMIT = "submit"


@dataclass(frozen=True)
class TextControl:
    """Free text input for text and number fields."""
    identifier: str
    label: Optional[str] = None
    placeholder: str = ""
    kind: str = ControlKind.TEXT


@dataclass(frozen=True)
class SelectControl:
    """Dropdown restricted to the enum values of a field, in schema order."""
    identifier: str
    options: Tuple[Any, ...] = ()
    label: str = ""
    placeholder: Any = ""
    kind: str = ControlKind.SELECT


@dataclass(frozen=True)
class GroupControl:
    """Labeled container for the controls of an object field or array row."""
    identifier: str
    label: Optional[str] = None
    children: Tuple["ControlDescriptor", ...] = ()
    kind: str = ControlKind.GROUP


@dataclass(frozen=True)
class ButtonControl:
    """
    Action button bound to a form transition.

    Attributes:
        identifier: Identifier of the button itself
        label: Button caption
        action: One of the ButtonAction constants
        target: Identifier of the array field the action applies to
    """
    identifier: str
    label: str
    action: str
    target: Optional[str] = None
    kind: str = ControlKind.BUTTON


@dataclass(frozen=True)
class ArrayControl:
    """
    Unexpanded array field.

    Rows are produced at render time from the live repeat count, so the
    descriptor only carries the element shape and label.
    """
    identifier: str
    element: Union[PrimitiveType, Dict[str, FieldSpec]]
    label: str = ""
    kind: str = ControlKind.ARRAY

    @property
    def is_object_array(self) -> bool:
        return isinstance(self.element, dict)


ControlDescriptor = Union[TextControl, SelectControl, GroupControl, ButtonControl, ArrayControl]


def iter_controls(controls: List[ControlDescriptor]) -> Iterator[ControlDescriptor]:
    """Walk descriptors depth-first, yielding groups before their children."""
    for control in controls:
        yield control
        if isinstance(control, GroupControl):
            yield from iter_controls(list(control.children))


def input_identifiers(controls: List[ControlDescriptor]) -> List[str]:
    """Identifiers of every value-carrying control, in render order."""
    return [
        control.identifier
        for control in iter_controls(controls)
        if isinstance(control, (TextControl, SelectControl))
    ]


def find_control(controls: List[ControlDescriptor], identifier: str) -> Optional[ControlDescriptor]:
    """Find a descriptor by identifier, searching nested groups."""
    for control in iter_controls(controls):
        if control.identifier == identifier:
            return control
    return None
