"""
Schema loader for schema forms.
Builds validated field specifications from mongoose-esque schema mappings
and loads schema definitions from YAML/JSON files.
"""

import json
import yaml
from datetime import date, datetime
from pathlib import Path
from typing import Dict, Any, Optional, Union
import logging

from .exceptions import SchemaError
from .field_spec import (
    ArrayFieldSpec,
    FieldSpec,
    FlatFieldSpec,
    ObjectFieldSpec,
    PrimitiveType,
    Schema,
    is_built_schema,
)
from .identifier_codec import is_valid_field_name

logger = logging.getLogger(__name__)

# Python types accepted as primitive tags
_TYPE_TAGS = {
    str: PrimitiveType.TEXT,
    int: PrimitiveType.NUMBER,
    float: PrimitiveType.NUMBER,
    date: PrimitiveType.DATE,
    datetime: PrimitiveType.DATE,
}

# Names accepted as primitive tags (case-insensitive)
_NAME_TAGS = {
    'text': PrimitiveType.TEXT,
    'string': PrimitiveType.TEXT,
    'number': PrimitiveType.NUMBER,
    'integer': PrimitiveType.NUMBER,
    'float': PrimitiveType.NUMBER,
    'date': PrimitiveType.DATE,
    'datetime': PrimitiveType.DATE,
}


def _primitive_tag(raw_type: Any) -> Optional[PrimitiveType]:
    if isinstance(raw_type, PrimitiveType):
        return raw_type
    if isinstance(raw_type, type):
        return _TYPE_TAGS.get(raw_type)
    if isinstance(raw_type, str):
        return _NAME_TAGS.get(raw_type.strip().lower())
    return None


def _check_field_name(field_name: Any) -> None:
    if not isinstance(field_name, str) or not is_valid_field_name(field_name):
        raise SchemaError(
            f"Invalid field name {field_name!r}: names may not be empty, "
            f"contain '.' or contain '-' followed by digits",
            field_name=str(field_name)
        )


def build_schema(raw_schema: Dict[str, Any], path: str = "") -> Schema:
    """
    Build a schema of field specifications from a raw mapping.

    Args:
        raw_schema: Mapping of field name to {type, label?, enum?}
        path: Dotted path of the enclosing object, used in error messages

    Returns:
        Ordered dictionary of field name to FieldSpec

    Raises:
        SchemaError: If any node of the schema has an invalid shape
    """
    if not isinstance(raw_schema, dict):
        raise SchemaError(
            f"Schema at '{path or '<root>'}' must be a mapping, got {type(raw_schema).__name__}",
            field_name=path or None
        )

    schema: Schema = {}
    for field_name, field_config in raw_schema.items():
        _check_field_name(field_name)
        qualified_name = f"{path}.{field_name}" if path else field_name
        schema[field_name] = build_field_spec(qualified_name, field_config)

    return schema


def build_field_spec(field_name: str, field_config: Any) -> FieldSpec:
    """
    Decide the variant of a single field configuration.

    Args:
        field_name: Qualified name of the field
        field_config: Raw configuration with a 'type' key

    Returns:
        FlatFieldSpec, ArrayFieldSpec or ObjectFieldSpec
    """
    if isinstance(field_config, (FlatFieldSpec, ArrayFieldSpec, ObjectFieldSpec)):
        _validate_nested_names(field_name, field_config)
        return field_config

    if not isinstance(field_config, dict):
        raise SchemaError(f"Field '{field_name}' config must be a mapping", field_name=field_name)

    if 'type' not in field_config:
        raise SchemaError(f"Field '{field_name}' must have a 'type'", field_name=field_name)

    raw_type = field_config['type']
    label = field_config.get('label')

    if isinstance(raw_type, (list, tuple)):
        if len(raw_type) != 1:
            raise SchemaError(
                f"Array field '{field_name}' must declare exactly one element type, "
                f"got {len(raw_type)}",
                field_name=field_name
            )
        return ArrayFieldSpec(element=_build_array_element(field_name, raw_type[0]), label=label)

    if isinstance(raw_type, dict):
        if not raw_type:
            raise SchemaError(f"Object field '{field_name}' has no fields", field_name=field_name)
        return ObjectFieldSpec(fields=build_schema(raw_type, field_name), label=label)

    tag = _primitive_tag(raw_type)
    if tag is None:
        raise SchemaError(f"Field '{field_name}' has unsupported type {raw_type!r}", field_name=field_name)

    enum = field_config.get('enum')
    if enum is not None and not isinstance(enum, (list, tuple)):
        raise SchemaError(f"Field '{field_name}' enum must be a list", field_name=field_name)

    return FlatFieldSpec(type=tag, label=label, enum=enum)


def _build_array_element(field_name: str, raw_element: Any):
    if isinstance(raw_element, (list, tuple)):
        raise SchemaError(f"Array field '{field_name}' is an array of arrays", field_name=field_name)

    if isinstance(raw_element, dict):
        if not raw_element:
            raise SchemaError(f"Array field '{field_name}' has an empty element schema", field_name=field_name)
        return build_schema(raw_element, field_name)

    tag = _primitive_tag(raw_element)
    if tag is None:
        raise SchemaError(
            f"Array field '{field_name}' has unsupported element type {raw_element!r}",
            field_name=field_name
        )
    return tag


def validate_field_names(schema: Schema, path: str = "") -> None:
    """
    Check the field names of a built schema, including nested object and
    object-array element names.

    Raises:
        SchemaError: If a name would produce an ambiguous identifier
    """
    for field_name, field in schema.items():
        _check_field_name(field_name)
        qualified_name = f"{path}.{field_name}" if path else field_name
        _validate_nested_names(qualified_name, field)


def _validate_nested_names(field_name: str, field: FieldSpec) -> None:
    if isinstance(field, ObjectFieldSpec):
        validate_field_names(field.fields, field_name)
    elif isinstance(field, ArrayFieldSpec) and field.is_object_array:
        validate_field_names(field.element, field_name)


def ensure_schema(schema: Dict[str, Any]) -> Schema:
    """Return the schema unchanged if it is already built and well named, otherwise build it."""
    if is_built_schema(schema):
        validate_field_names(schema)
        return schema
    return build_schema(schema)


def load_schema(schema_path: Union[str, Path]) -> Schema:
    """
    Load a schema from YAML or JSON file.

    The file holds an optional 'title' and a 'fields' mapping in the same
    shape build_schema() accepts.

    Args:
        schema_path: Path to schema file

    Returns:
        Built schema

    Raises:
        SchemaError: If the file is missing, unreadable or malformed
    """
    full_path = Path(schema_path)

    if not full_path.exists():
        raise SchemaError(f"Schema file not found: {full_path}", context={'schema_path': str(full_path)})

    suffix = full_path.suffix.lower()
    try:
        with open(full_path, 'r', encoding='utf-8') as f:
            if suffix in ['.yaml', '.yml']:
                document = yaml.safe_load(f)
            elif suffix == '.json':
                document = json.load(f)
            else:
                raise SchemaError(
                    f"Unsupported schema file format: {full_path.suffix}",
                    context={'schema_path': str(full_path)}
                )
    except yaml.YAMLError as e:
        raise SchemaError(f"YAML parsing error in {full_path}: {e}", context={'schema_path': str(full_path)}) from e
    except json.JSONDecodeError as e:
        raise SchemaError(f"JSON parsing error in {full_path}: {e}", context={'schema_path': str(full_path)}) from e

    if not isinstance(document, dict) or 'fields' not in document:
        raise SchemaError(
            f"Schema file {full_path} must contain a 'fields' mapping",
            context={'schema_path': str(full_path)}
        )

    schema = build_schema(document['fields'])
    logger.info(f"Successfully loaded schema '{document.get('title', full_path.stem)}' "
                f"with {len(schema)} fields from {full_path}")
    return schema


def get_configured_schema(config: Dict[str, Any]) -> Schema:
    """
    Load the schema named in the 'form' section of the configuration.

    Args:
        config: Complete configuration dictionary

    Returns:
        Built schema
    """
    schema_path = config.get('form', {}).get('schema_path')
    if not schema_path:
        raise SchemaError("Configuration does not name a schema file (form.schema_path)")
    return load_schema(schema_path)


def describe_schema(schema: Schema) -> Dict[str, Any]:
    """
    Summarize a built schema for display.

    Returns:
        Dictionary mapping each field name to its kind, nested for objects
        and object arrays
    """
    summary: Dict[str, Any] = {}
    for field_name, field in schema.items():
        if isinstance(field, ObjectFieldSpec):
            summary[field_name] = describe_schema(field.fields)
        elif isinstance(field, ArrayFieldSpec):
            if field.is_object_array:
                summary[field_name] = [describe_schema(field.element)]
            else:
                summary[field_name] = [field.element.value]
        else:
            summary[field_name] = field.type.value
    return summary
