"""
Custom exception classes for schema form generation and parsing.

This module provides the error taxonomy shared by the schema loader,
the form generator and the form parser. Every error carries a message,
context information and recovery suggestions for the host UI.
"""

import logging
from typing import Optional, Dict, Any, List
from pathlib import Path

logger = logging.getLogger(__name__)


class FormGeneratorError(Exception):
    """
    Base exception for schema form errors.

    Attributes:
        message: Error message
        context: Additional context information
        recovery_suggestions: List of suggested recovery actions
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None,
                 recovery_suggestions: Optional[List[str]] = None):
        self.message = message
        self.context = context or {}
        self.recovery_suggestions = recovery_suggestions or []
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def get_full_details(self) -> Dict[str, Any]:
        """Get complete error details including context and suggestions."""
        return {
            'error_type': self.__class__.__name__,
            'message': self.message,
            'context': self.context,
            'recovery_suggestions': self.recovery_suggestions
        }


class SchemaError(FormGeneratorError, ValueError):
    """
    Exception raised when a schema node has an invalid shape.

    This includes array fields without exactly one element type, arrays of
    arrays, unknown primitive tags and field names that would produce
    ambiguous identifiers.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        self.field_name = field_name

        context = dict(context or {})
        if field_name is not None:
            context.setdefault('field_name', field_name)

        recovery_suggestions = [
            "Check that every field has a 'type' entry",
            "Array types must list exactly one element type, e.g. [text]",
            "Field names may not contain '.' or a '-' followed by digits",
        ]

        super().__init__(message, context, recovery_suggestions)


class UnimplementedError(FormGeneratorError, NotImplementedError):
    """
    Exception raised for schema features the form generator does not support.

    Raised for date fields, arrays of arrays, object array parsing and
    form validation.
    """

    def __init__(self, feature: str, message: Optional[str] = None):
        self.feature = feature

        if message is None:
            message = f"{feature} is unimplemented"

        super().__init__(message, {'feature': feature}, [
            "Remove the unsupported field from the schema",
        ])


class ControlNotFoundError(FormGeneratorError, LookupError):
    """
    Exception raised when no live control is registered under an identifier.

    The array probing loop of the parser treats this as the end of a
    repeated sequence; anywhere else it aborts the parse.
    """

    def __init__(self, identifier: str, message: Optional[str] = None):
        self.identifier = identifier

        if message is None:
            message = f"No control registered under identifier '{identifier}'"

        super().__init__(message, {'identifier': identifier}, [
            "Render the form before parsing it",
            "Check that the identifier was produced by the same schema",
        ])


class ConfigurationLoadError(FormGeneratorError):
    """
    Exception raised when configuration file loading fails.

    This includes YAML parsing errors, permission issues and files that do
    not contain a mapping.
    """

    def __init__(self, config_path: Path, original_error: Exception,
                 message: Optional[str] = None):
        self.config_path = config_path
        self.original_error = original_error

        if message is None:
            message = f"Failed to load configuration from {config_path}: {str(original_error)}"

        context = {
            'config_path': str(config_path),
            'original_error_type': type(original_error).__name__,
            'original_error_message': str(original_error)
        }

        recovery_suggestions = [
            "Check if config.yaml exists and is readable",
            "Verify YAML syntax is correct",
            "Application will use default configuration as fallback"
        ]

        super().__init__(message, context, recovery_suggestions)


def log_form_error(error: FormGeneratorError, operation: str) -> None:
    """
    Log a form error with its context at the appropriate level.

    Args:
        error: The error to log
        operation: Operation that was being performed
    """
    details = error.get_full_details()

    if isinstance(error, ControlNotFoundError):
        logger.debug(f"{operation}: {details['message']}")
    elif isinstance(error, UnimplementedError):
        logger.warning(f"{operation}: {details['message']}")
    else:
        logger.error(f"{operation}: {details['message']} (context: {details['context']})")
