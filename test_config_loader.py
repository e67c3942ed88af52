"""
Unit tests for configuration loader module.
"""

import logging
from unittest.mock import patch

import pytest
import yaml

from schema_forms.config_loader import (
    LOGGING_LEVELS,
    configure_logging,
    deep_merge,
    get_config_value,
    get_default_config,
    get_form_labels,
    get_logging_level,
    load_config,
    validate_config,
)


class TestDeepMerge:
    """Test cases for deep_merge function."""

    def test_deep_merge_simple_dicts(self):
        """Test deep merging of simple dictionaries."""
        base = {'a': 1, 'b': 2}
        update = {'b': 3, 'c': 4}

        result = deep_merge(base, update)

        assert result == {'a': 1, 'b': 3, 'c': 4}
        # Originals are untouched
        assert base == {'a': 1, 'b': 2}
        assert update == {'b': 3, 'c': 4}

    def test_deep_merge_nested_dicts(self):
        base = {'app': {'name': 'Base', 'version': '1.0'}, 'form': {'identifier': 'a'}}
        update = {'app': {'name': 'Updated'}, 'form': {'schema_path': 'x.yaml'}}

        result = deep_merge(base, update)

        assert result == {
            'app': {'name': 'Updated', 'version': '1.0'},
            'form': {'identifier': 'a', 'schema_path': 'x.yaml'},
        }

    def test_deep_merge_replaces_non_dict_with_dict(self):
        result = deep_merge({'a': 1}, {'a': {'b': 2}})

        assert result == {'a': {'b': 2}}

    def test_deep_merge_result_is_independent(self):
        update = {'form': {'labels': ['x']}}

        result = deep_merge({}, update)
        result['form']['labels'].append('y')

        assert update == {'form': {'labels': ['x']}}


class TestLoadConfig:
    """Test cases for load_config function."""

    def test_load_config_missing_file(self, tmp_path):
        config = load_config(tmp_path / "missing.yaml")

        assert config == get_default_config()

    def test_load_config_merges_over_defaults(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump({
            'form': {'identifier': 'order_form', 'submit_label': 'Send'},
            'logging': {'level': 'DEBUG'},
        }))

        config = load_config(config_file)

        assert config['form']['identifier'] == 'order_form'
        assert config['form']['submit_label'] == 'Send'
        assert config['form']['add_label'] == 'Add'
        assert config['logging']['level'] == 'DEBUG'
        assert config['app']['name'] == 'Schema Forms'

    def test_load_config_accepts_string_path(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump({'app': {'debug': True}}))

        assert load_config(str(config_file))['app']['debug'] is True

    def test_load_config_empty_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")

        assert load_config(config_file) == get_default_config()

    def test_load_config_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("form: [unclosed")

        assert load_config(config_file) == get_default_config()

    def test_load_config_non_mapping(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump(['not', 'a', 'mapping']))

        assert load_config(config_file) == get_default_config()

    def test_load_config_read_error(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("app: {}")

        with patch('builtins.open', side_effect=PermissionError("denied")):
            config = load_config(config_file)

        assert config == get_default_config()

    def test_default_config_is_fresh(self):
        first = get_default_config()
        first['form']['identifier'] = 'changed'

        assert get_default_config()['form']['identifier'] == 'schema_form'


class TestValidateConfig:
    """Test cases for validate_config function."""

    def test_default_config_is_valid(self):
        assert validate_config(get_default_config()) is True

    @pytest.mark.parametrize("section", ['app', 'form', 'logging'])
    def test_missing_section(self, section):
        config = get_default_config()
        del config[section]

        assert validate_config(config) is False

    def test_missing_app_version(self):
        config = get_default_config()
        del config['app']['version']

        assert validate_config(config) is False

    @pytest.mark.parametrize("key", ['identifier', 'schema_path', 'submit_label', 'add_label', 'remove_label'])
    def test_empty_form_setting(self, key):
        config = get_default_config()
        config['form'][key] = ''

        assert validate_config(config) is False

    def test_unknown_logging_level(self):
        config = get_default_config()
        config['logging']['level'] = 'LOUD'

        assert validate_config(config) is False

    def test_lowercase_logging_level(self):
        config = get_default_config()
        config['logging']['level'] = 'debug'

        assert validate_config(config) is True


class TestConfigValues:
    """Test cases for config accessors."""

    def test_get_config_value(self):
        config = get_default_config()

        assert get_config_value(config, 'form', 'identifier') == 'schema_form'
        assert get_config_value(config, 'form', 'missing', 'fallback') == 'fallback'
        assert get_config_value(config, 'nosuch', 'key', 42) == 42

    def test_get_config_value_non_dict_section(self):
        assert get_config_value({'form': 'oops'}, 'form', 'identifier', 'x') == 'x'

    def test_get_form_labels(self):
        config = get_default_config()
        config['form']['submit_label'] = 'Send'

        assert get_form_labels(config) == {'submit': 'Send', 'add': 'Add', 'remove': 'Remove'}

    def test_get_form_labels_without_form_section(self):
        assert get_form_labels({}) == {'submit': 'Submit', 'add': 'Add', 'remove': 'Remove'}


class TestLogging:
    """Test cases for logging configuration."""

    @pytest.mark.parametrize("level_str,expected", [
        ('DEBUG', logging.DEBUG),
        ('info', logging.INFO),
        ('Warning', logging.WARNING),
        ('ERROR', logging.ERROR),
        ('CRITICAL', logging.CRITICAL),
        ('nonsense', logging.INFO),
    ])
    def test_get_logging_level(self, level_str, expected):
        assert get_logging_level(level_str) == expected

    def test_logging_levels_cover_standard_names(self):
        assert set(LOGGING_LEVELS) == {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}

    @patch('schema_forms.config_loader.logging.basicConfig')
    def test_configure_logging(self, mock_basic_config):
        config = get_default_config()
        config['logging']['level'] = 'WARNING'

        level = configure_logging(config)

        assert level == logging.WARNING
        mock_basic_config.assert_called_once_with(
            level=logging.WARNING,
            format=config['logging']['format'],
        )

    @patch('schema_forms.config_loader.logging.basicConfig')
    def test_configure_logging_defaults(self, mock_basic_config):
        level = configure_logging({})

        assert level == logging.INFO
        assert mock_basic_config.call_args.kwargs['level'] == logging.INFO
