"""
Main Streamlit application for schema forms.
Renders the configured schema as a form and shows the parsed submission.
"""

import streamlit as st
import logging

from schema_forms.config_loader import (
    configure_logging,
    get_config_value,
    get_form_labels,
    load_config,
    validate_config,
)
from schema_forms.error_handler import ErrorHandler, ErrorType
from schema_forms.exceptions import FormGeneratorError
from schema_forms.form import Form
from schema_forms.schema_loader import describe_schema, get_configured_schema
from schema_forms.streamlit_renderer import get_repeat_states, render_form

# Load configuration early
config = load_config()
try:
    configure_logging(config)
except Exception as e:
    # Fallback to INFO if config reading fails
    logging.basicConfig(level=logging.INFO)
    logging.getLogger(__name__).error(f"Failed to configure logging from config: {e}, using INFO level")
logger = logging.getLogger(__name__)

if not validate_config(config):
    logger.warning("Configuration failed validation, some settings may fall back to defaults")

SUBMISSION_KEY = "last_submission"

st.set_page_config(
    page_title=get_config_value(config, 'app', 'name', 'Schema Forms'),
    page_icon="📋",
    layout="centered"
)


def store_submission(form: Form) -> None:
    """Submit handler: parse the form and keep the result for display."""
    st.session_state[SUBMISSION_KEY] = form.parse()
    logger.info(f"Stored submission of form '{form.identifier}'")


def render_sidebar(schema) -> None:
    """Show the schema outline in the sidebar."""
    with st.sidebar:
        st.title("Schema")
        st.caption(get_config_value(config, 'form', 'schema_path', ''))
        st.json(describe_schema(schema))


def main():
    """Main application entry point."""
    st.title(get_config_value(config, 'app', 'name', 'Schema Forms'))

    try:
        schema = get_configured_schema(config)
    except FormGeneratorError as e:
        ErrorHandler.handle_error(e, "loading schema", ErrorType.SCHEMA)
        st.stop()

    identifier = get_config_value(config, 'form', 'identifier', 'schema_form')

    try:
        form = Form(
            schema,
            identifier,
            store_submission,
            repeat_states=get_repeat_states(identifier),
            labels=get_form_labels(config),
        )
    except FormGeneratorError as e:
        ErrorHandler.handle_error(e, "creating form", ErrorType.RENDER)
        st.stop()

    render_sidebar(schema)
    render_form(form)

    if SUBMISSION_KEY in st.session_state:
        st.subheader("Submitted Data")
        st.json(st.session_state[SUBMISSION_KEY])


if __name__ == "__main__":
    main()
