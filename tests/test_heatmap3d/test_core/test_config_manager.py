"""Tests for ConfigManager"""

import logging

import pytest
import yaml
from pathlib import Path
from heatmap3d.core.config_manager import ConfigManager, DEFAULT_MIN_RANGE


class TestConfigManager:
    """Test ConfigManager configuration loading and access."""

    @pytest.fixture
    def temp_config_dir(self, tmp_path):
        """Create temporary config directory with test YAML files."""
        settings_config = {
            'statistics': {'min_range': 0.01},
            'import': {'has_row_headers': False, 'max_workers': 2},
            'global_setting': 'test_value'
        }
        with open(tmp_path / 'settings.yaml', 'w') as f:
            yaml.dump(settings_config, f)

        sample_config = {
            'directory': 'demo',
            'has_column_headers': False,
            'files': [
                {'file': 'a.csv', 'role': 'height'},
                {'file': 'b.csv', 'role': 'top_color', 'color_table': 1},
            ]
        }
        with open(tmp_path / 'sample_data.yaml', 'w') as f:
            yaml.dump(sample_config, f)

        return str(tmp_path)

    def test_initialization(self, temp_config_dir):
        cm = ConfigManager(temp_config_dir)
        assert cm._settings_config != {}
        assert cm._sample_data_config != {}
        assert cm.config_path == Path(temp_config_dir)

    def test_get_setting_simple(self, temp_config_dir):
        cm = ConfigManager(temp_config_dir)
        assert cm.get_setting('global_setting') == 'test_value'

    def test_get_setting_nested(self, temp_config_dir):
        cm = ConfigManager(temp_config_dir)
        assert cm.get_setting('import.max_workers') == 2
        assert cm.get_setting('import.has_row_headers') is False

    def test_get_setting_with_default(self, temp_config_dir):
        cm = ConfigManager(temp_config_dir)
        assert cm.get_setting('nonexistent.setting', default=999) == 999
        assert cm.get_setting('nonexistent.setting') is None

    def test_get_min_range(self, temp_config_dir):
        cm = ConfigManager(temp_config_dir)
        assert cm.get_min_range() == 0.01

    def test_get_min_range_default(self, tmp_path):
        cm = ConfigManager(str(tmp_path))
        assert cm.get_min_range() == DEFAULT_MIN_RANGE == 0.001

    def test_get_min_range_rejects_non_positive(self, tmp_path):
        (tmp_path / 'settings.yaml').write_text("statistics:\n  min_range: 0\n")
        cm = ConfigManager(str(tmp_path))
        with pytest.raises(ValueError, match="must be positive"):
            cm.get_min_range()

    def test_get_min_range_rejects_non_number(self, tmp_path):
        (tmp_path / 'settings.yaml').write_text("statistics:\n  min_range: tiny\n")
        cm = ConfigManager(str(tmp_path))
        with pytest.raises(ValueError, match="must be a number"):
            cm.get_min_range()

    def test_get_flag(self, temp_config_dir):
        cm = ConfigManager(temp_config_dir)
        assert cm.get_flag('import.has_row_headers') is False
        assert cm.get_flag('import.has_column_headers') is True
        assert cm.get_flag('import.has_column_headers', default=False) is False

    @pytest.mark.parametrize('raw', ['"false"', '0', 'no_thanks'])
    def test_get_flag_rejects_non_boolean(self, tmp_path, raw):
        (tmp_path / 'settings.yaml').write_text(f"import:\n  has_row_headers: {raw}\n")
        cm = ConfigManager(str(tmp_path))
        with pytest.raises(ValueError, match="import.has_row_headers must be true or false"):
            cm.get_flag('import.has_row_headers')

    def test_sample_data_rejects_non_boolean_flag(self, tmp_path):
        (tmp_path / 'sample_data.yaml').write_text("has_column_headers: 'false'\nfiles: []\n")
        cm = ConfigManager(str(tmp_path))
        with pytest.raises(ValueError, match="has_column_headers must be true or false"):
            cm.get_sample_data_config()

    def test_get_sample_data_config(self, temp_config_dir):
        cm = ConfigManager(temp_config_dir)
        config = cm.get_sample_data_config()

        assert config['directory'] == Path(temp_config_dir) / 'demo'
        assert [entry['file'] for entry in config['files']] == ['a.csv', 'b.csv']
        assert config['files'][1]['color_table'] == 1
        assert config['has_row_headers'] is True
        assert config['has_column_headers'] is False

    def test_sample_data_absolute_directory(self, tmp_path):
        demo_dir = tmp_path / 'elsewhere'
        (tmp_path / 'sample_data.yaml').write_text(f"directory: {demo_dir}\nfiles: []\n")
        cm = ConfigManager(str(tmp_path))
        assert cm.get_sample_data_config()['directory'] == demo_dir

    def test_missing_files_warn_and_use_empty(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING, logger='heatmap3d.core.config_manager'):
            cm = ConfigManager(str(tmp_path / 'nope'))

        assert cm.get_setting('statistics.min_range') is None
        assert cm.get_sample_data_config()['files'] == []
        assert 'Config file not found' in caplog.text

    def test_empty_yaml_file(self, tmp_path):
        (tmp_path / 'settings.yaml').write_text('')
        cm = ConfigManager(str(tmp_path))
        assert cm._settings_config == {}

    def test_invalid_yaml_logs_error(self, tmp_path, caplog):
        (tmp_path / 'settings.yaml').write_text("statistics: [unclosed\n")
        with caplog.at_level(logging.ERROR, logger='heatmap3d.core.config_manager'):
            cm = ConfigManager(str(tmp_path))
        assert cm._settings_config == {}
        assert 'Error loading' in caplog.text

    def test_non_mapping_yaml(self, tmp_path):
        (tmp_path / 'settings.yaml').write_text("- a\n- b\n")
        cm = ConfigManager(str(tmp_path))
        assert cm._settings_config == {}

    def test_repr(self, temp_config_dir):
        assert 'sample_files=2' in repr(ConfigManager(temp_config_dir))

    def test_shipped_config_loads(self):
        """The repository's own config directory is well-formed."""
        config_dir = Path(__file__).resolve().parents[3] / 'config'
        cm = ConfigManager(str(config_dir))
        assert cm.get_min_range() == 0.001
        roles = [entry['role'] for entry in cm.get_sample_data_config()['files']]
        assert sorted(roles) == ['height', 'side_color', 'top_color']
