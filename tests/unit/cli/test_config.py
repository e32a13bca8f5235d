"""Unit tests for cli.config module."""

from unittest.mock import patch

import pytest

from xaml_markdown.cli.config import ConfigLoader
from xaml_markdown.cli.errors import ConfigError, FilesystemError


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Remove option overrides from the environment and skip .env files."""
    for name in ConfigLoader.ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)
    with patch('xaml_markdown.cli.config.load_dotenv') as mock_load_dotenv:
        yield mock_load_dotenv


def write_config(tmp_path, content):
    path = tmp_path / "config.yaml"
    path.write_text(content, encoding="utf-8")
    return str(path)


class TestLoadFile:
    """Test cases for ConfigLoader.load_file."""

    def test_valid_file(self, tmp_path):
        """Known options are returned with their values."""
        path = write_config(tmp_path, (
            "monospace_font_name: Consolas\n"
            "html_sub_superscript: true\n"
            "max_image_size_mb: 4\n"
            "download_retries: 5\n"
        ))

        values = ConfigLoader.load_file(path)

        assert values == {
            'monospace_font_name': 'Consolas',
            'html_sub_superscript': True,
            'max_image_size_mb': 4.0,
            'download_retries': 5,
        }
        assert isinstance(values['max_image_size_mb'], float)

    def test_empty_file(self, tmp_path):
        """An empty file sets nothing."""
        assert ConfigLoader.load_file(write_config(tmp_path, "")) == {}

    def test_missing_file(self, tmp_path):
        """A missing file raises FilesystemError."""
        with pytest.raises(FilesystemError) as exc_info:
            ConfigLoader.load_file(str(tmp_path / "missing.yaml"))

        assert "Configuration file not found" in str(exc_info.value)

    def test_invalid_yaml(self, tmp_path):
        """Broken YAML raises ConfigError."""
        with pytest.raises(ConfigError, match="Invalid YAML syntax"):
            ConfigLoader.load_file(write_config(tmp_path, "download_images: [unclosed\n"))

    def test_not_a_dictionary(self, tmp_path):
        """A YAML list is rejected."""
        with pytest.raises(ConfigError, match="must be a YAML dictionary, got list"):
            ConfigLoader.load_file(write_config(tmp_path, "- a\n- b\n"))

    def test_unknown_option(self, tmp_path):
        """Unknown keys name the offending field."""
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader.load_file(write_config(tmp_path, "colour: blue\n"))

        assert exc_info.value.config_field == 'colour'

    @pytest.mark.parametrize("content,field", [
        ("download_images: 'yes'\n", 'download_images'),
        ("download_retries: 2.5\n", 'download_retries'),
        ("download_retries: true\n", 'download_retries'),
        ("max_image_size_mb: true\n", 'max_image_size_mb'),
        ("monospace_font_name: 12\n", 'monospace_font_name'),
    ])
    def test_wrong_types(self, tmp_path, content, field):
        """Values of the wrong type are rejected."""
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader.load_file(write_config(tmp_path, content))

        assert exc_info.value.config_field == field


class TestLoadEnvironment:
    """Test cases for ConfigLoader.load_environment."""

    def test_no_variables(self, clean_environment):
        """Nothing is overridden without variables; .env is consulted."""
        assert ConfigLoader.load_environment() == {}
        clean_environment.assert_called_once()

    def test_numeric_variables(self, monkeypatch):
        """Numeric variables are converted to their field types."""
        monkeypatch.setenv('XAML_MD_MAX_IMAGE_SIZE_MB', '2.5')
        monkeypatch.setenv('XAML_MD_DOWNLOAD_RETRIES', '5')
        monkeypatch.setenv('XAML_MD_DOWNLOAD_TIMEOUT', '10')

        assert ConfigLoader.load_environment() == {
            'max_image_size_mb': 2.5,
            'download_retries': 5,
            'download_timeout': 10.0,
        }

    @pytest.mark.parametrize("raw,expected", [
        ('false', False), ('0', False), ('No', False), ('off', False),
        ('true', True), ('1', True), ('YES', True), ('on', True),
    ])
    def test_boolean_variable(self, monkeypatch, raw, expected):
        """Common boolean spellings are accepted."""
        monkeypatch.setenv('XAML_MD_DOWNLOAD_IMAGES', raw)

        assert ConfigLoader.load_environment() == {'download_images': expected}

    def test_blank_variable_ignored(self, monkeypatch):
        """Blank values are treated as unset."""
        monkeypatch.setenv('XAML_MD_DOWNLOAD_RETRIES', '  ')

        assert ConfigLoader.load_environment() == {}

    def test_invalid_boolean(self, monkeypatch):
        """Unrecognized boolean values are rejected."""
        monkeypatch.setenv('XAML_MD_DOWNLOAD_IMAGES', 'maybe')

        with pytest.raises(ConfigError, match="XAML_MD_DOWNLOAD_IMAGES='maybe' is not a boolean"):
            ConfigLoader.load_environment()

    def test_invalid_number(self, monkeypatch):
        """Non-numeric values are rejected."""
        monkeypatch.setenv('XAML_MD_DOWNLOAD_RETRIES', 'three')

        with pytest.raises(ConfigError, match="is not a valid int"):
            ConfigLoader.load_environment()


class TestLoad:
    """Test cases for ConfigLoader.load layering."""

    def test_defaults(self):
        """Without sources the defaults apply."""
        options = ConfigLoader.load()

        assert options.download_retries == 3
        assert options.download_images is True

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        """Environment variables win over the config file."""
        path = write_config(tmp_path, "download_retries: 5\nmax_image_size_mb: 4\n")
        monkeypatch.setenv('XAML_MD_DOWNLOAD_RETRIES', '2')

        options = ConfigLoader.load(path)

        assert options.download_retries == 2
        assert options.max_image_size_mb == 4.0

    def test_overrides_win(self, tmp_path, monkeypatch):
        """Explicit overrides win over every other source."""
        path = write_config(tmp_path, "download_images: true\n")
        monkeypatch.setenv('XAML_MD_DOWNLOAD_IMAGES', 'true')

        options = ConfigLoader.load(path, overrides={'download_images': False})

        assert options.download_images is False

    def test_invalid_value_raises_config_error(self, tmp_path):
        """Out-of-range values surface as ConfigError."""
        path = write_config(tmp_path, "max_image_size_mb: 0\n")

        with pytest.raises(ConfigError, match="max_image_size_mb must be positive"):
            ConfigLoader.load(path)
