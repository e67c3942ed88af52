"""
Form parser for schema forms.
Rebuilds a nested data object shaped like the schema from the flat
identifiers and values of a rendered form.
"""

import logging
from typing import Any, Dict, List, Union

from .exceptions import ControlNotFoundError, SchemaError, UnimplementedError
from .field_spec import ArrayFieldSpec, FieldSpec, FlatFieldSpec, ObjectFieldSpec, Schema
from .identifier_codec import Token, get_field_path, join_path, tokenize, with_index
from .value_source import ControlValueSource

logger = logging.getLogger(__name__)


class FormParser:
    """
    Extracts form data in the same shape as the form schema.

    Each parse() call builds a fresh result; all parse helpers populate that
    object and it is handed to the caller when the walk completes.
    """

    def __init__(self, schema: Schema, value_source: ControlValueSource):
        self.schema = schema
        self.value_source = value_source
        self._parsed: Dict[str, Any] = {}

    def parse(self) -> Dict[str, Any]:
        """
        Extract from the form data an object that is formatted in the same
        way as the original form schema.

        Returns:
            Nested dictionary of field values
        """
        self._parsed = {}
        try:
            for field_name in self.schema:
                self.parse_field(field_name)
            parsed = self._parsed
        finally:
            # A failed parse abandons the partial result
            self._parsed = {}

        logger.info(f"Parsed form data with {len(parsed)} top-level fields")
        return parsed

    def resolve_field(self, accumulator_path: str) -> FieldSpec:
        """
        Dot into the schema to find the FieldSpec of a possibly nested field.

        Args:
            accumulator_path: Identifier of the field, array suffixes allowed

        Returns:
            The FieldSpec the identifier addresses
        """
        field_path = get_field_path(accumulator_path)
        schema = self.schema
        field = None

        for depth, segment in enumerate(field_path):
            if schema is None or segment not in schema:
                raise SchemaError(
                    f"Field '{accumulator_path}' does not exist in the schema",
                    field_name=accumulator_path
                )
            field = schema[segment]

            if depth == len(field_path) - 1:
                break
            if isinstance(field, ObjectFieldSpec):
                schema = field.fields
            elif isinstance(field, ArrayFieldSpec) and field.is_object_array:
                schema = field.element
            else:
                schema = None

        return field

    def parse_field(self, accumulator_path: str) -> None:
        """
        Parse one field of the schema into the result.

        The accumulator path is the field's identifier in the rendered form,
        e.g. an object field 'address' has members like 'address.street'.
        """
        field = self.resolve_field(accumulator_path)

        if isinstance(field, FlatFieldSpec):
            self.parse_flat_field(accumulator_path)
        elif isinstance(field, ArrayFieldSpec):
            if field.is_object_array:
                self.parse_object_array_field(accumulator_path)
            else:
                self.parse_flat_array_field(accumulator_path)
        elif isinstance(field, ObjectFieldSpec):
            for sub_field in field.fields:
                self.parse_field(join_path(accumulator_path, sub_field))
        else:
            raise SchemaError(f"Parse Error: Unsupported schema at '{accumulator_path}'",
                              field_name=accumulator_path)

    def parse_flat_field(self, identifier: str) -> Any:
        """
        Read one control's value and store it at the position its identifier
        names, creating dictionaries and lists along the way.

        Returns:
            The stored value
        """
        value = self.value_source.current_value(identifier)
        tokens = tokenize(identifier)
        logger.debug(f"Parsing flat field {identifier} with tokens {[token.value for token in tokens]}")

        target: Union[Dict[str, Any], List[Any]] = self._parsed
        for position, token in enumerate(tokens):
            if position == len(tokens) - 1:
                _assign(target, token, value)
                return value

            next_token = tokens[position + 1]
            target = _child_container(target, token, list if next_token.is_index else dict)

        return value

    def parse_flat_array_field(self, accumulator_path: str) -> List[Any]:
        """
        Turn the 'field-0', 'field-1', ... identifiers of a primitive array into
        a list, probing indices until the first one without a control.

        Returns:
            Values in index order
        """
        logger.debug(f"Parsing flat array field {accumulator_path}")
        values: List[Any] = []
        index = 0

        while True:
            identifier = with_index(accumulator_path, index)
            try:
                values.append(self.parse_flat_field(identifier))
            except ControlNotFoundError:
                break
            index += 1

        logger.debug(f"Array {accumulator_path} has {len(values)} rendered values")
        return values

    def parse_object_field(self, accumulator_path: str) -> None:
        raise UnimplementedError("Object field parsing", f"Object field parsing unimplemented ('{accumulator_path}')")

    def parse_object_array_field(self, accumulator_path: str) -> None:
        raise UnimplementedError(
            "Object array parsing",
            f"Object array parsing unimplemented ('{accumulator_path}')"
        )


def _child_container(target: Union[Dict[str, Any], List[Any]], token: Token, factory) -> Any:
    """Get or create the container a token steps into."""
    if token.is_index:
        if not isinstance(target, list):
            raise SchemaError(f"Index {token.value} applied to a non-array value")
        # Gaps left by out-of-order indices get empty placeholders
        while len(target) <= token.value:
            target.append(factory())
        if not isinstance(target[token.value], factory):
            target[token.value] = factory()
        return target[token.value]

    if not isinstance(target, dict):
        raise SchemaError(f"Field '{token.value}' applied to an array value")
    existing = target.get(token.value)
    if not isinstance(existing, factory):
        existing = factory()
        target[token.value] = existing
    return existing


def _assign(target: Union[Dict[str, Any], List[Any]], token: Token, value: Any) -> None:
    if token.is_index:
        if not isinstance(target, list):
            raise SchemaError(f"Index {token.value} applied to a non-array value")
        while len(target) <= token.value:
            target.append(None)
        target[token.value] = value
    else:
        if not isinstance(target, dict):
            raise SchemaError(f"Field '{token.value}' applied to an array value")
        target[token.value] = value
