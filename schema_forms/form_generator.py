"""
Dynamic form generator for schema forms.
Creates control descriptors from schema definitions.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from .controls import (
    ArrayControl,
    ControlDescriptor,
    GroupControl,
    SelectControl,
    TextControl,
)
from .exceptions import UnimplementedError
from .field_spec import (
    ArrayFieldSpec,
    FlatFieldSpec,
    ObjectFieldSpec,
    PrimitiveType,
    Schema,
)
from .identifier_codec import join_path
from .schema_loader import ensure_schema

logger = logging.getLogger(__name__)


class FormGenerator:
    """Generates control descriptors for schemas and creates bound forms."""

    @staticmethod
    def create(
        schema: Dict[str, Any],
        identifier: str,
        on_submit: Callable[[Any], Any],
        value_source: Optional[Any] = None,
    ):
        """
        Create a form bound to a schema and a submit callback.

        Args:
            schema: Raw or built schema
            identifier: Identifier of the resulting form
            on_submit: Called with the form when it is submitted
            value_source: Control value lookup used by Form.parse()

        Returns:
            Form instance
        """
        from .form import Form

        return Form(ensure_schema(schema), identifier, on_submit, value_source=value_source)

    @staticmethod
    def generate(schema: Dict[str, Any]) -> List[ControlDescriptor]:
        """
        Generate a set of control descriptors based on a form schema.

        Args:
            schema: Raw or built schema

        Returns:
            One descriptor per top-level field, in schema order
        """
        return FormGenerator._generate_fields(ensure_schema(schema))

    @staticmethod
    def _generate_fields(schema: Schema) -> List[ControlDescriptor]:
        # Keys may be composed identifiers like 'address.street' or
        # 'things.size-0', so they are not checked as field names here
        fields: List[ControlDescriptor] = []
        for field_name, field in schema.items():
            if isinstance(field, ArrayFieldSpec):
                fields.append(FormGenerator.generate_array_field(field_name, field))
            elif isinstance(field, ObjectFieldSpec):
                fields.append(FormGenerator.generate_object_field(field_name, field))
            else:
                fields.append(FormGenerator.generate_flat_field(field_name, field))
        return fields

    @staticmethod
    def generate_flat_field(name: str, field: FlatFieldSpec) -> ControlDescriptor:
        """Generate a text or select control for a primitive field."""
        if field.type in (PrimitiveType.TEXT, PrimitiveType.NUMBER):
            if field.enum is not None:
                return SelectControl(
                    identifier=name,
                    options=tuple(field.enum),
                    label=field.label or '',
                    # A falsy first choice leaves the placeholder empty
                    placeholder=(field.enum[0] if field.enum else None) or '',
                )
            return TextControl(
                identifier=name,
                label=field.label,
                placeholder=field.label or '',
            )

        raise UnimplementedError("Date types", f"Date types unimplemented (field '{name}')")

    @staticmethod
    def generate_array_field(name: str, field: ArrayFieldSpec) -> ArrayControl:
        """Generate an unexpanded array control; rows are added at render time."""
        logger.debug(f"Generating array field {name} (object elements: {field.is_object_array})")
        return ArrayControl(identifier=name, element=field.element, label=field.label or '')

    @staticmethod
    def generate_object_field(name: str, field: ObjectFieldSpec) -> GroupControl:
        """
        Generate a group of controls for an embedded object.

        Nested field names use dot notation on the parent name so that the
        embedded-ness survives into the identifiers.
        """
        embedded_schema: Schema = {
            join_path(name, nested_name): nested_field
            for nested_name, nested_field in field.fields.items()
        }
        embedded_fields = FormGenerator._generate_fields(embedded_schema)
        return GroupControl(identifier=name, label=field.label, children=tuple(embedded_fields))
