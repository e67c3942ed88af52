"""
Unit tests for schema_loader module.
"""

import json
from datetime import date
from pathlib import Path

import pytest
import yaml

from schema_forms.exceptions import SchemaError
from schema_forms.field_spec import (
    ArrayFieldSpec,
    FlatFieldSpec,
    ObjectFieldSpec,
    PrimitiveType,
)
from schema_forms.schema_loader import (
    build_schema,
    describe_schema,
    ensure_schema,
    get_configured_schema,
    load_schema,
)


class TestBuildSchema:
    """Test class for building field specifications."""

    def test_flat_fields_with_python_types(self):
        schema = build_schema({
            "name": {"type": str, "label": "Name"},
            "age": {"type": int},
            "price": {"type": float},
        })

        assert schema["name"] == FlatFieldSpec(type=PrimitiveType.TEXT, label="Name")
        assert schema["age"].type == PrimitiveType.NUMBER
        assert schema["price"].type == PrimitiveType.NUMBER

    def test_flat_fields_with_tag_names(self):
        schema = build_schema({
            "name": {"type": "String"},
            "count": {"type": "integer"},
            "when": {"type": "date"},
        })

        assert schema["name"].type == PrimitiveType.TEXT
        assert schema["count"].type == PrimitiveType.NUMBER
        assert schema["when"].type == PrimitiveType.DATE

    def test_date_type_is_accepted_when_building(self):
        """Date fields only fail once they are generated."""
        schema = build_schema({"born": {"type": date}})

        assert schema["born"].type == PrimitiveType.DATE

    def test_enum_keeps_order(self):
        schema = build_schema({"age": {"type": int, "enum": [18, 21, 65]}})

        assert schema["age"].enum == (18, 21, 65)

    def test_field_order_is_preserved(self):
        schema = build_schema({
            "zeta": {"type": str},
            "alpha": {"type": str},
            "mid": {"type": str},
        })

        assert list(schema) == ["zeta", "alpha", "mid"]

    def test_primitive_array(self):
        schema = build_schema({"items": {"type": [str], "label": "Item"}})

        field = schema["items"]
        assert isinstance(field, ArrayFieldSpec)
        assert field.element == PrimitiveType.TEXT
        assert field.label == "Item"
        assert not field.is_object_array

    def test_object_array(self):
        schema = build_schema({
            "things": {"type": [{"thing_attribute": {"type": str}}]}
        })

        field = schema["things"]
        assert field.is_object_array
        assert isinstance(field.element["thing_attribute"], FlatFieldSpec)

    def test_nested_object(self):
        schema = build_schema({
            "address": {
                "label": "Address",
                "type": {
                    "street": {"type": str},
                    "geo": {"type": {"lat": {"type": float}}},
                },
            }
        })

        field = schema["address"]
        assert isinstance(field, ObjectFieldSpec)
        assert field.label == "Address"
        assert isinstance(field.fields["geo"], ObjectFieldSpec)
        assert field.fields["geo"].fields["lat"].type == PrimitiveType.NUMBER

    def test_array_of_arrays_rejected(self):
        with pytest.raises(SchemaError) as exc_info:
            build_schema({"grid": {"type": [[str]]}})

        assert exc_info.value.field_name == "grid"

    @pytest.mark.parametrize("raw_type", [[], [str, int]])
    def test_array_element_count_rejected(self, raw_type):
        with pytest.raises(SchemaError):
            build_schema({"items": {"type": raw_type}})

    def test_missing_type_rejected(self):
        with pytest.raises(SchemaError, match="must have a 'type'"):
            build_schema({"name": {"label": "Name"}})

    def test_unknown_type_rejected(self):
        with pytest.raises(SchemaError, match="unsupported type"):
            build_schema({"flag": {"type": bool}})

    def test_non_mapping_field_rejected(self):
        with pytest.raises(SchemaError):
            build_schema({"name": "string"})

    def test_empty_object_rejected(self):
        with pytest.raises(SchemaError):
            build_schema({"meta": {"type": {}}})

    def test_enum_must_be_list(self):
        with pytest.raises(SchemaError):
            build_schema({"age": {"type": int, "enum": 18}})

    @pytest.mark.parametrize("name", ["a.b", "item-0", ""])
    def test_ambiguous_field_names_rejected(self, name):
        with pytest.raises(SchemaError):
            build_schema({name: {"type": str}})

    def test_nested_error_reports_qualified_name(self):
        with pytest.raises(SchemaError) as exc_info:
            build_schema({"address": {"type": {"lines": {"type": [[str]]}}}})

        assert exc_info.value.field_name == "address.lines"

    def test_schema_error_is_value_error(self):
        with pytest.raises(ValueError):
            build_schema({"grid": {"type": [[str]]}})

    def test_ensure_schema_passes_built_schema_through(self):
        schema = build_schema({"name": {"type": str}})

        assert ensure_schema(schema) is schema

    def test_ensure_schema_builds_raw_schema(self):
        schema = ensure_schema({"name": {"type": str}})

        assert isinstance(schema["name"], FlatFieldSpec)

    @pytest.mark.parametrize("name", ["a-1", "a.b", ""])
    def test_ensure_schema_checks_built_names(self, name):
        with pytest.raises(SchemaError):
            ensure_schema({name: FlatFieldSpec(type=PrimitiveType.TEXT)})

    def test_ensure_schema_checks_nested_object_names(self):
        schema = {
            "address": ObjectFieldSpec(fields={"line-2": FlatFieldSpec(type=PrimitiveType.TEXT)}),
        }

        with pytest.raises(SchemaError) as exc_info:
            ensure_schema(schema)

        assert exc_info.value.field_name == "line-2"

    def test_ensure_schema_checks_object_array_element_names(self):
        schema = {
            "things": ArrayFieldSpec(element={"x.y": FlatFieldSpec(type=PrimitiveType.TEXT)}),
        }

        with pytest.raises(SchemaError):
            ensure_schema(schema)

    def test_built_spec_inside_raw_schema_is_checked(self):
        nested = ObjectFieldSpec(fields={"v-2": FlatFieldSpec(type=PrimitiveType.NUMBER)})

        with pytest.raises(SchemaError):
            build_schema({"meta": nested, "name": {"type": str}})

    def test_ensure_schema_accepts_well_named_built_schema(self):
        schema = {
            "address": ObjectFieldSpec(fields={"first-name": FlatFieldSpec(type=PrimitiveType.TEXT)}),
        }

        assert ensure_schema(schema) is schema


class TestLoadSchema:
    """Test class for loading schema files."""

    def test_load_schema_yaml_success(self, tmp_path):
        schema_data = {
            "title": "Test Schema",
            "fields": {
                "name": {"type": "text", "label": "Name"},
                "tags": {"type": ["text"]},
            }
        }
        schema_file = tmp_path / "test.yaml"
        schema_file.write_text(yaml.dump(schema_data))

        schema = load_schema(schema_file)

        assert list(schema) == ["name", "tags"]
        assert isinstance(schema["tags"], ArrayFieldSpec)

    def test_load_schema_json_success(self, tmp_path):
        schema_file = tmp_path / "test.json"
        schema_file.write_text(json.dumps({"fields": {"age": {"type": "number", "enum": [18, 21]}}}))

        schema = load_schema(str(schema_file))

        assert schema["age"].enum == (18, 21)

    def test_load_schema_missing_file(self, tmp_path):
        with pytest.raises(SchemaError, match="not found"):
            load_schema(tmp_path / "missing.yaml")

    def test_load_schema_unsupported_format(self, tmp_path):
        schema_file = tmp_path / "schema.txt"
        schema_file.write_text("fields: {}")

        with pytest.raises(SchemaError, match="Unsupported schema file format"):
            load_schema(schema_file)

    def test_load_schema_invalid_yaml(self, tmp_path):
        schema_file = tmp_path / "broken.yaml"
        schema_file.write_text("fields: [unclosed")

        with pytest.raises(SchemaError, match="YAML parsing error"):
            load_schema(schema_file)

    def test_load_schema_invalid_json(self, tmp_path):
        schema_file = tmp_path / "broken.json"
        schema_file.write_text("{not json")

        with pytest.raises(SchemaError, match="JSON parsing error"):
            load_schema(schema_file)

    def test_load_schema_without_fields(self, tmp_path):
        schema_file = tmp_path / "nofields.yaml"
        schema_file.write_text(yaml.dump({"title": "Empty"}))

        with pytest.raises(SchemaError, match="'fields'"):
            load_schema(schema_file)

    def test_get_configured_schema(self, tmp_path):
        schema_file = tmp_path / "configured.yaml"
        schema_file.write_text(yaml.dump({"fields": {"name": {"type": "text"}}}))

        schema = get_configured_schema({"form": {"schema_path": str(schema_file)}})

        assert "name" in schema

    def test_get_configured_schema_without_path(self):
        with pytest.raises(SchemaError):
            get_configured_schema({"form": {}})

    def test_example_schema_loads(self):
        schema = load_schema(Path(__file__).parent / "schemas" / "example_schema.yaml")

        assert isinstance(schema["shipping_address"], ObjectFieldSpec)
        assert schema["age"].enum == (18, 21, 65)


def test_describe_schema():
    schema = build_schema({
        "name": {"type": str},
        "tags": {"type": [str]},
        "things": {"type": [{"size": {"type": int}}]},
        "address": {"type": {"city": {"type": str}}},
    })

    assert describe_schema(schema) == {
        "name": "text",
        "tags": ["text"],
        "things": [{"size": "number"}],
        "address": {"city": "text"},
    }
