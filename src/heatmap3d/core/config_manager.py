"""
ConfigManager - Configuration file management

Loads and provides access to 2 YAML configuration files:
1. settings.yaml - Global settings (statistics epsilon, import defaults)
2. sample_data.yaml - Demo files and their role/color-table mapping
"""

import yaml
from pathlib import Path
from typing import Dict, Any, List
import logging

logger = logging.getLogger(__name__)

DEFAULT_MIN_RANGE = 0.001


def _check_flag(key: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be true or false, got {value!r}")
    return value


class ConfigManager:
    """Manager for all configuration files.

    Loads configuration from YAML files and provides access to
    configuration values with safe defaults.

    Args:
        config_path: Path to configuration directory (default: 'config')

    Attributes:
        _settings_config: Configuration from settings.yaml
        _sample_data_config: Configuration from sample_data.yaml
    """

    def __init__(self, config_path: str = 'config'):
        """Initialize ConfigManager and load all config files.

        Args:
            config_path: Path to configuration directory
        """
        self._config_path = Path(config_path)

        # Missing files fall back to empty dicts
        self._settings_config = self._load_yaml('settings.yaml')
        self._sample_data_config = self._load_yaml('sample_data.yaml')

    def _load_yaml(self, filename: str) -> Dict[str, Any]:
        """Load a YAML file, returning empty dict if not found.

        Args:
            filename: Name of YAML file to load

        Returns:
            Dictionary of configuration values, or empty dict if file not found
        """
        file_path = self._config_path / filename
        if not file_path.exists():
            logger.warning(f"Config file not found: {file_path}. Using empty config.")
            return {}

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error loading {file_path}: {e}. Using empty config.")
            return {}

        if config is None:
            return {}
        if not isinstance(config, dict):
            logger.error(f"Top level of {file_path} must be a mapping. Using empty config.")
            return {}
        return config

    @property
    def config_path(self) -> Path:
        """Return the configuration directory."""
        return self._config_path

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a global setting from settings.yaml.

        Args:
            key: Setting key (supports nested keys with dot notation)
            default: Default value if setting not found

        Returns:
            Setting value, or default if not found

        Examples:
            >>> cm.get_setting('statistics.min_range', 0.001)
            0.001
        """
        keys = key.split('.')
        value = self._settings_config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_flag(self, key: str, default: bool = True) -> bool:
        """Get a true/false setting from settings.yaml.

        Only YAML booleans are accepted, so a quoted "false" is an error
        rather than a truthy string.

        Raises:
            ValueError: If the configured value is not a boolean
        """
        return _check_flag(key, self.get_setting(key, default))

    def get_min_range(self) -> float:
        """Return the epsilon that statistics ranges are floored at.

        Raises:
            ValueError: If the configured value is not a positive number
        """
        value = self.get_setting('statistics.min_range', DEFAULT_MIN_RANGE)
        try:
            value = float(value)
        except (TypeError, ValueError) as e:
            raise ValueError(
                f"statistics.min_range must be a number, got {value!r}"
            ) from e
        if value <= 0:
            raise ValueError(f"statistics.min_range must be positive, got {value}")
        return value

    def get_sample_data_config(self) -> Dict[str, Any]:
        """Get the demo data definition from sample_data.yaml.

        Returns:
            Dictionary with:
                - directory: Folder holding the sample files (resolved
                  relative to the config directory when not absolute)
                - files: List of {'file', 'role', 'color_table'} entries
                - has_row_headers / has_column_headers: Import flags

        Raises:
            ValueError: If a header flag is not a boolean
        """
        directory = Path(self._sample_data_config.get('directory', 'sample_data'))
        if not directory.is_absolute():
            directory = self._config_path / directory

        files: List[Dict[str, Any]] = self._sample_data_config.get('files') or []

        return {
            'directory': directory,
            'files': files,
            'has_row_headers': _check_flag(
                'has_row_headers', self._sample_data_config.get('has_row_headers', True)
            ),
            'has_column_headers': _check_flag(
                'has_column_headers', self._sample_data_config.get('has_column_headers', True)
            ),
        }

    def __repr__(self) -> str:
        """Return string representation."""
        num_samples = len(self._sample_data_config.get('files') or [])
        return (
            f"ConfigManager("
            f"path={self._config_path}, "
            f"sample_files={num_samples})"
        )
