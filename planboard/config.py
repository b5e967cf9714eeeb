"""Layout configuration."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path

import yaml

from .exceptions import ConfigError
from .schedule.models import ZoomLevel

logger = logging.getLogger(__name__)

# Keys whose value must be at least 1; everything else only needs to be >= 0
_POSITIVE_KEYS = {
    "week_cell_width_px",
    "month_cell_width_px",
    "week_chars_per_day",
    "month_chars_per_day",
}


@dataclass
class LayoutConfig:
    """Configuration for timeline layout and text rendering."""

    buffer_days: int = 0
    minimum_bar_width_px: int = 20
    week_cell_width_px: int = 40
    month_cell_width_px: int = 12
    week_chars_per_day: int = 3
    month_chars_per_day: int = 1
    label_width: int = 24

    def cell_width_for(self, zoom: ZoomLevel) -> int:
        if zoom is ZoomLevel.MONTH:
            return self.month_cell_width_px
        return self.week_cell_width_px

    def chars_per_day_for(self, zoom: ZoomLevel) -> int:
        if zoom is ZoomLevel.MONTH:
            return self.month_chars_per_day
        return self.week_chars_per_day


def config_from_dict(data: dict) -> LayoutConfig:
    known = {f.name for f in fields(LayoutConfig)}
    values = {}
    for key, raw in data.items():
        if key not in known:
            logger.warning("Ignoring unknown layout config key: %s", key)
            continue
        if isinstance(raw, bool):
            raise ConfigError(key, raw, "expected an integer")
        try:
            value = int(raw)
        except (TypeError, ValueError):
            raise ConfigError(key, raw, "expected an integer") from None
        minimum = 1 if key in _POSITIVE_KEYS else 0
        if value < minimum:
            raise ConfigError(key, raw, f"must be >= {minimum}")
        values[key] = value
    return LayoutConfig(**values)


def load_config(path: Path | str | None) -> LayoutConfig:
    """Load a LayoutConfig from a YAML file, falling back to defaults.

    The file may hold the keys at top level or under a ``layout:`` section.
    """
    if path is None:
        return LayoutConfig()
    path = Path(path)
    if not path.exists():
        logger.debug("No layout config at %s, using defaults", path)
        return LayoutConfig()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(str(path), None, f"invalid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(str(path), data, "expected a mapping")
    section = data.get("layout", data)
    if not isinstance(section, dict):
        raise ConfigError("layout", section, "expected a mapping")
    return config_from_dict(section)
