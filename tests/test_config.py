"""Tests for layout configuration."""

import logging

import pytest

from planboard.config import LayoutConfig, config_from_dict, load_config
from planboard.exceptions import ConfigError
from planboard.schedule.models import ZoomLevel


class TestLayoutConfig:
    def test_defaults(self):
        config = LayoutConfig()
        assert config.buffer_days == 0
        assert config.minimum_bar_width_px == 20
        assert config.cell_width_for(ZoomLevel.WEEK) == 40
        assert config.cell_width_for(ZoomLevel.MONTH) == 12
        assert config.chars_per_day_for(ZoomLevel.WEEK) == 3
        assert config.chars_per_day_for(ZoomLevel.MONTH) == 1


class TestConfigFromDict:
    def test_overrides(self):
        config = config_from_dict({"buffer_days": 2, "week_cell_width_px": "30"})
        assert config.buffer_days == 2
        assert config.week_cell_width_px == 30

    def test_unknown_keys_warned(self, caplog):
        with caplog.at_level(logging.WARNING):
            config = config_from_dict({"colour": "red"})
        assert config == LayoutConfig()
        assert "colour" in caplog.text

    @pytest.mark.parametrize("data", [
        {"buffer_days": -1},
        {"week_cell_width_px": 0},
        {"label_width": "wide"},
        {"buffer_days": True},
    ])
    def test_invalid_values(self, data):
        with pytest.raises(ConfigError):
            config_from_dict(data)


class TestLoadConfig:
    def test_missing_path_gives_defaults(self, tmp_path):
        assert load_config(None) == LayoutConfig()
        assert load_config(tmp_path / "nope.yaml") == LayoutConfig()

    def test_layout_section(self, tmp_path):
        path = tmp_path / "layout.yaml"
        path.write_text("layout:\n  buffer_days: 1\n  minimum_bar_width_px: 8\n")
        config = load_config(path)
        assert config.buffer_days == 1
        assert config.minimum_bar_width_px == 8

    def test_top_level_keys(self, tmp_path):
        path = tmp_path / "layout.yaml"
        path.write_text("month_cell_width_px: 16\n")
        assert load_config(path).month_cell_width_px == 16

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "layout.yaml"
        path.write_text("layout: [oops\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "layout.yaml"
        path.write_text("- 1\n")
        with pytest.raises(ConfigError):
            load_config(path)
