"""Conversion option loading from YAML files and the environment.

Options are layered, later sources winning:
    1. ConversionOptions defaults
    2. YAML configuration file (optional)
    3. Environment variables, including a .env file loaded with python-dotenv
    4. Explicit command-line overrides
"""

import os
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from xaml_markdown.models.conversion_options import ConversionOptions
from .errors import ConfigError, FilesystemError

TRUE_VALUES = {'1', 'true', 'yes', 'on'}
FALSE_VALUES = {'0', 'false', 'no', 'off'}


class ConfigLoader:
    """Builds ConversionOptions from configuration sources.

    Configuration file structure:
        monospace_font_name: "Consolas"
        html_sub_superscript: false
        convert_indents_to_quotes: true
        download_images: true
        max_image_size_mb: 8
        download_timeout: 30
        download_retries: 3

    Environment variables:
        XAML_MD_MAX_IMAGE_SIZE_MB, XAML_MD_DOWNLOAD_TIMEOUT,
        XAML_MD_DOWNLOAD_RETRIES, XAML_MD_DOWNLOAD_IMAGES
    """

    # Options settable from a file, with their expected types
    FIELD_TYPES = {
        'monospace_font_name': str,
        'disable_heading_sizes': bool,
        'html_sub_superscript': bool,
        'convert_indents_to_quotes': bool,
        'download_images': bool,
        'max_image_size_mb': float,
        'download_timeout': float,
        'download_retries': int,
    }

    ENV_OVERRIDES = {
        'XAML_MD_MAX_IMAGE_SIZE_MB': 'max_image_size_mb',
        'XAML_MD_DOWNLOAD_TIMEOUT': 'download_timeout',
        'XAML_MD_DOWNLOAD_RETRIES': 'download_retries',
        'XAML_MD_DOWNLOAD_IMAGES': 'download_images',
    }

    @classmethod
    def load(
        cls,
        config_path: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None
    ) -> ConversionOptions:
        """Load options from an optional YAML file, the environment and overrides.

        Args:
            config_path: Path to a YAML configuration file, or None
            overrides: Option values that take precedence over everything else

        Returns:
            ConversionOptions with all sources applied

        Raises:
            FilesystemError: If the config file cannot be read
            ConfigError: If any source holds an unknown option or invalid value
        """
        values: Dict[str, Any] = {}
        if config_path:
            values.update(cls.load_file(config_path))
        values.update(cls.load_environment())
        if overrides:
            values.update(cls._validate(overrides))

        try:
            return ConversionOptions(**values)
        except ValueError as e:
            raise ConfigError(str(e))

    @classmethod
    def load_file(cls, config_path: str) -> Dict[str, Any]:
        """Read and validate option values from a YAML file.

        Raises:
            FilesystemError: If file cannot be read
            ConfigError: If configuration is invalid or malformed
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise FilesystemError(
                config_path,
                'read',
                'Configuration file not found'
            )
        except PermissionError:
            raise FilesystemError(
                config_path,
                'read',
                'Permission denied'
            )
        except OSError as e:
            raise FilesystemError(
                config_path,
                'read',
                str(e)
            )

        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(
                f"Invalid YAML syntax: {str(e)}"
            )

        if config_dict is None:
            return {}

        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Configuration must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        return cls._validate(config_dict)

    @classmethod
    def load_environment(cls) -> Dict[str, Any]:
        """Read option overrides from environment variables and .env."""
        load_dotenv()

        values = {}
        for env_name, field_name in cls.ENV_OVERRIDES.items():
            raw = os.getenv(env_name)
            if raw is None or raw.strip() == '':
                continue
            values[field_name] = cls._coerce(field_name, raw.strip(), env_name)
        return values

    @classmethod
    def _coerce(cls, field_name: str, raw: str, source: str) -> Any:
        expected = cls.FIELD_TYPES[field_name]
        if expected is bool:
            lowered = raw.lower()
            if lowered in TRUE_VALUES:
                return True
            if lowered in FALSE_VALUES:
                return False
            raise ConfigError(f"{source}={raw!r} is not a boolean", field_name)

        try:
            return expected(raw)
        except ValueError:
            raise ConfigError(
                f"{source}={raw!r} is not a valid {expected.__name__}", field_name
            )

    @classmethod
    def _validate(cls, config_dict: Dict[str, Any]) -> Dict[str, Any]:
        values = {}
        for key, value in config_dict.items():
            expected = cls.FIELD_TYPES.get(key)
            if expected is None:
                raise ConfigError(f"Unknown option '{key}'", key)

            # bool is an int subclass and is never accepted as a number
            if expected is float:
                valid = isinstance(value, (int, float)) and not isinstance(value, bool)
            elif expected is int:
                valid = isinstance(value, int) and not isinstance(value, bool)
            else:
                valid = isinstance(value, expected)

            if not valid:
                raise ConfigError(
                    f"Expected {expected.__name__}, got {type(value).__name__}", key
                )
            values[key] = float(value) if expected is float else value
        return values
