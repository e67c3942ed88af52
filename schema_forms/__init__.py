"""
Schema forms: render data-entry forms from declarative schemas and rebuild
nested data from the submitted values.
"""

from .array_field import ArrayField, RepeatState, expand_controls
from .controls import (
    ArrayControl,
    ButtonAction,
    ButtonControl,
    ControlKind,
    GroupControl,
    SelectControl,
    TextControl,
    input_identifiers,
)
from .exceptions import (
    ControlNotFoundError,
    FormGeneratorError,
    SchemaError,
    UnimplementedError,
)
from .field_spec import ArrayFieldSpec, FlatFieldSpec, ObjectFieldSpec, PrimitiveType
from .form import Form
from .form_generator import FormGenerator
from .form_parser import FormParser
from .identifier_codec import get_field_path, tokenize
from .schema_loader import build_schema, load_schema
from .value_source import ControlValueSource, MappingValueSource

__version__ = "1.0.0"

__all__ = [
    "ArrayControl",
    "ArrayField",
    "ArrayFieldSpec",
    "ButtonAction",
    "ButtonControl",
    "ControlKind",
    "ControlNotFoundError",
    "ControlValueSource",
    "FlatFieldSpec",
    "Form",
    "FormGenerator",
    "FormGeneratorError",
    "FormParser",
    "GroupControl",
    "MappingValueSource",
    "ObjectFieldSpec",
    "PrimitiveType",
    "RepeatState",
    "SchemaError",
    "SelectControl",
    "TextControl",
    "UnimplementedError",
    "build_schema",
    "expand_controls",
    "get_field_path",
    "input_identifiers",
    "load_schema",
    "tokenize",
]
