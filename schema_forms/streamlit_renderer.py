"""
Streamlit host for schema forms.
Paints control descriptors with Streamlit widgets, keeps repeat counts in
session state and reads submitted values back from the widget keys.
"""

import streamlit as st
import logging
from typing import Any, Dict, List, MutableMapping

from .array_field import RepeatState
from .controls import (
    ButtonAction,
    ButtonControl,
    ControlDescriptor,
    GroupControl,
    SelectControl,
    TextControl,
)
from .error_handler import ErrorHandler, ErrorType
from .exceptions import ControlNotFoundError
from .form import Form

logger = logging.getLogger(__name__)


def widget_key(form_identifier: str, identifier: str) -> str:
    """Session state key of the widget rendered for a control."""
    return f"{form_identifier}:{identifier}"


def get_repeat_states(form_identifier: str) -> MutableMapping[str, RepeatState]:
    """Repeat counts of a form, kept across reruns in session state."""
    state_key = f"{form_identifier}:repeat_states"
    if state_key not in st.session_state:
        st.session_state[state_key] = {}
    return st.session_state[state_key]


class SessionStateValueSource:
    """
    Control values read from Streamlit widget state.

    Only identifiers the form currently renders are visible, so values left
    behind by removed rows never reach the parser.
    """

    def __init__(self, form: Form):
        self.form_identifier = form.identifier
        self.live_identifiers = set(form.rendered_identifiers())

    def current_value(self, identifier: str) -> Any:
        if identifier not in self.live_identifiers:
            raise ControlNotFoundError(identifier)

        key = widget_key(self.form_identifier, identifier)
        if key not in st.session_state:
            raise ControlNotFoundError(identifier)
        return st.session_state[key]


class StreamlitFormRenderer:
    """Renders a Form with Streamlit widgets."""

    def __init__(self, form: Form):
        self.form = form
        if self.form.value_source is None:
            self.form.value_source = SessionStateValueSource(form)

    def render(self) -> List[ControlDescriptor]:
        """
        Paint every control of the form.

        Returns:
            The descriptors that were painted
        """
        controls = self.form.render()
        logger.debug(f"Rendering form '{self.form.identifier}' with {len(controls)} top-level controls")
        for control in controls:
            self._render_control(control)
        return controls

    def _render_control(self, control: ControlDescriptor) -> None:
        key = widget_key(self.form.identifier, control.identifier)

        if isinstance(control, TextControl):
            st.text_input(
                control.label or control.identifier,
                key=key,
                placeholder=control.placeholder,
            )
        elif isinstance(control, SelectControl):
            st.selectbox(
                control.label or control.identifier,
                options=list(control.options),
                index=0 if control.options else None,
                key=key,
            )
        elif isinstance(control, GroupControl):
            self._render_group(control)
        elif isinstance(control, ButtonControl):
            st.button(
                control.label,
                key=key,
                type="primary" if control.action == ButtonAction.SUBMIT else "secondary",
                on_click=self._on_click,
                args=(control,),
            )
        else:
            raise TypeError(f"Cannot render control of kind {control.kind!r}")

    def _render_group(self, control: GroupControl) -> None:
        with st.container():
            if control.label:
                st.markdown(f"**{control.label}**")
            for child in control.children:
                self._render_control(child)

    def _on_click(self, control: ButtonControl) -> None:
        """Button callback; runs before the next rerun paints the form."""
        if control.action == ButtonAction.SUBMIT:
            # Values must be read from the widgets as they are now
            self.form.value_source = SessionStateValueSource(self.form)
            ErrorHandler.with_error_handling(
                self.form.submit,
                f"submitting form '{self.form.identifier}'",
                ErrorType.SUBMIT,
            )
        else:
            self.form.dispatch(control)


def render_form(form: Form) -> Dict[str, Any]:
    """
    Render a form and report render errors in place.

    Returns:
        Dictionary with the painted 'controls' (empty on error)
    """
    renderer = StreamlitFormRenderer(form)
    controls = ErrorHandler.with_error_handling(
        renderer.render,
        f"rendering form '{form.identifier}'",
        ErrorType.RENDER,
        default_return=[],
    )
    return {'controls': controls}
