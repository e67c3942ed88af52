"""
Configuration loading utilities for schema forms.

This module provides functionality to load and validate application
configuration, including the schema file, form captions and logging
settings, with fallback to defaults.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging
from copy import deepcopy

from .exceptions import ConfigurationLoadError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config.yaml")


def deep_merge(base_dict: Dict[str, Any], update_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge two dictionaries, with update_dict taking precedence.

    Args:
        base_dict: Base dictionary (defaults)
        update_dict: Dictionary to merge in (user config)

    Returns:
        Merged dictionary
    """
    result = deepcopy(base_dict)

    for key, value in update_dict.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = deepcopy(value)

    return result


def get_default_config() -> Dict[str, Any]:
    """
    Get default configuration.

    Returns:
        Dictionary with default configuration
    """
    return {
        'app': {
            'name': 'Schema Forms',
            'version': '1.0.0',
            'debug': False
        },
        'form': {
            'identifier': 'schema_form',
            'schema_path': 'schemas/example_schema.yaml',
            'submit_label': 'Submit',
            'add_label': 'Add',
            'remove_label': 'Remove'
        },
        'logging': {
            'level': 'INFO',
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        }
    }


def _read_config_file(config_path: Path) -> Optional[Dict[str, Any]]:
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            user_config = yaml.safe_load(f)
    except (yaml.YAMLError, IOError, OSError) as e:
        raise ConfigurationLoadError(config_path, e) from e

    if user_config is not None and not isinstance(user_config, dict):
        raise ConfigurationLoadError(
            config_path,
            TypeError(f"expected a mapping, got {type(user_config).__name__}")
        )
    return user_config


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load application configuration merged over the defaults.

    Args:
        config_path: Optional path to config file (defaults to config.yaml)

    Returns:
        Complete configuration dictionary
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
    config_path = Path(config_path)

    default_config = get_default_config()

    if not config_path.exists():
        logger.warning(f"Configuration file not found: {config_path}")
        logger.info("Using default configuration")
        return default_config

    try:
        user_config = _read_config_file(config_path)
    except ConfigurationLoadError as e:
        logger.error(str(e))
        logger.info("Using default configuration")
        return default_config

    if user_config is None:
        logger.warning(f"Configuration file is empty: {config_path}")
        return default_config

    config = deep_merge(default_config, user_config)
    logger.info(f"Successfully loaded configuration from {config_path}")
    return config


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate configuration structure and required fields.

    Args:
        config: Configuration dictionary to validate

    Returns:
        True if configuration is valid, False otherwise
    """
    required_sections = ['app', 'form', 'logging']

    for section in required_sections:
        if not isinstance(config.get(section), dict):
            logger.warning(f"Missing required configuration section: {section}")
            return False

    app = config['app']
    if 'name' not in app or 'version' not in app:
        logger.warning("Missing required app configuration (name or version)")
        return False

    form = config['form']
    for key in ['identifier', 'schema_path', 'submit_label', 'add_label', 'remove_label']:
        if not isinstance(form.get(key), str) or not form.get(key):
            logger.warning(f"Form setting must be a non-empty string: {key}")
            return False

    level = config['logging'].get('level', 'INFO')
    if not isinstance(level, str) or level.upper() not in LOGGING_LEVELS:
        logger.warning(f"Unknown logging level: {level}")
        return False

    return True


def get_config_value(config: Dict[str, Any], section: str, key: str, default: Any = None) -> Any:
    """
    Get a specific configuration value.

    Args:
        config: Configuration dictionary
        section: Configuration section (e.g., 'form', 'logging')
        key: Configuration key within section
        default: Default value if not found

    Returns:
        Configuration value or default
    """
    values = config.get(section)
    if not isinstance(values, dict):
        return default
    return values.get(key, default)


def get_form_labels(config: Dict[str, Any]) -> Dict[str, str]:
    """Button captions for Form(labels=...) from the 'form' section."""
    return {
        'submit': get_config_value(config, 'form', 'submit_label', 'Submit'),
        'add': get_config_value(config, 'form', 'add_label', 'Add'),
        'remove': get_config_value(config, 'form', 'remove_label', 'Remove'),
    }


LOGGING_LEVELS = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL
}


def get_logging_level(level_str: str) -> int:
    """Map string logging level to logging constant."""
    return LOGGING_LEVELS.get(str(level_str).upper(), logging.INFO)


def configure_logging(config: Dict[str, Any]) -> int:
    """
    Configure root logging from the 'logging' section.

    Returns:
        The logging level that was applied
    """
    level_str = get_config_value(config, 'logging', 'level', 'INFO')
    log_format = get_config_value(config, 'logging', 'format', get_default_config()['logging']['format'])
    level = get_logging_level(level_str)
    logging.basicConfig(level=level, format=log_format)
    logger.info(f"Logging configured to level: {level_str}")
    return level
