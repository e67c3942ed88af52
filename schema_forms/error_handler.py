"""
Error handling utilities for schema forms hosted in Streamlit.
Provides user-friendly messages and technical details for errors raised
while rendering or submitting a form.
"""

import streamlit as st
import logging
from typing import Any, Callable, Optional

from .exceptions import (
    ControlNotFoundError,
    FormGeneratorError,
    SchemaError,
    UnimplementedError,
)

logger = logging.getLogger(__name__)


class ErrorType:
    """Error type constants."""
    SCHEMA = "schema"
    RENDER = "render"
    SUBMIT = "submit"
    CONFIGURATION = "configuration"
    SYSTEM = "system"


class ErrorHandler:
    """Reports form errors to the user without tearing down the page."""

    @staticmethod
    def handle_error(
        error: Exception,
        context: str,
        error_type: str = ErrorType.SYSTEM,
        user_message: Optional[str] = None,
        show_details: bool = False
    ) -> None:
        """
        Handle errors with user-friendly messages.

        Args:
            error: The exception that occurred
            context: Context where the error occurred
            error_type: Type of error (from ErrorType constants)
            user_message: Custom user-friendly message
            show_details: Whether to expand technical details
        """
        logger.error(f"Error in {context}: {str(error)}", exc_info=True)

        if not user_message:
            user_message = ErrorHandler._get_user_friendly_message(error, error_type)

        ErrorHandler._display_error(user_message, error, context, show_details)

    @staticmethod
    def _get_user_friendly_message(error: Exception, error_type: str) -> str:
        """Generate user-friendly error messages based on error type."""
        error_messages = {
            ErrorType.SCHEMA: {
                SchemaError: "📋 The form schema is invalid. Please check the schema definition.",
                "default": "📋 Schema error occurred. Please check your schema files."
            },

            ErrorType.RENDER: {
                UnimplementedError: "🚧 This form uses a field type that is not supported yet.",
                SchemaError: "📋 The form schema is invalid. Please check the schema definition.",
                "default": "🖥️ The form could not be rendered."
            },

            ErrorType.SUBMIT: {
                UnimplementedError: "🚧 This form contains fields whose values cannot be collected yet.",
                ControlNotFoundError: "🔍 A form input could not be found. Please reload the form and try again.",
                "default": "📨 The form could not be submitted. Your input is unchanged."
            },

            ErrorType.CONFIGURATION: {
                "default": "⚙️ Configuration error. Default settings are in use."
            },

            ErrorType.SYSTEM: {
                ImportError: "💻 Required system component is missing. Please contact support.",
                "default": "💻 System error occurred. Please try again or contact support."
            }
        }

        error_type_messages = error_messages.get(error_type, error_messages[ErrorType.SYSTEM])

        for exception_type, message in error_type_messages.items():
            if exception_type != "default" and isinstance(error, exception_type):
                return message

        return error_type_messages.get("default", "An unexpected error occurred.")

    @staticmethod
    def _display_error(
        user_message: str,
        error: Exception,
        context: str,
        show_details: bool = False
    ) -> None:
        """Display error message with technical details."""
        st.error(user_message)

        with st.expander("🔍 Technical Details", expanded=show_details):
            st.write(f"**Error Type:** {type(error).__name__}")
            st.write(f"**Context:** {context}")
            st.write(f"**Error Message:** {str(error)}")

            if isinstance(error, FormGeneratorError) and error.recovery_suggestions:
                st.write("**Suggested Actions:**")
                for suggestion in error.recovery_suggestions:
                    st.write(f"  • {suggestion}")

    @staticmethod
    def with_error_handling(
        func: Callable,
        context: str,
        error_type: str = ErrorType.SYSTEM,
        user_message: Optional[str] = None,
        default_return: Any = None
    ) -> Any:
        """
        Run an operation and report form errors instead of raising them.

        Only FormGeneratorError is reported; anything else propagates.

        Returns:
            Function result or default_return on error
        """
        try:
            return func()
        except FormGeneratorError as e:
            ErrorHandler.handle_error(e, context, error_type, user_message)
            return default_return
