"""
Configuration for the command-line tools.

Settings come from an optional rmstrokes.toml:

    [render]
    page_width = 1404
    page_height = 1872
    bottom_margin = 40
    background = "#ffffff"
    x_offset = -702.0

    [logging]
    level = "WARNING"
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional

import tomli

from .constants import RM_PAGE_HEIGHT, RM_WIDTH

_logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "rmstrokes.toml"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class ConfigError(ValueError):
    """Invalid configuration value."""


@dataclass
class RenderConfig:
    """Page geometry and colors for SVG output."""
    page_width: float = RM_WIDTH
    page_height: float = RM_PAGE_HEIGHT
    bottom_margin: float = 40
    background: str = "#ffffff"
    x_offset: Optional[float] = None


@dataclass
class Config:
    render: RenderConfig = field(default_factory=RenderConfig)
    log_level: str = "WARNING"


def _parse_render(data: dict) -> RenderConfig:
    known = {f.name for f in fields(RenderConfig)}
    values = {}
    for key, value in data.items():
        if key not in known:
            _logger.warning("Ignoring unknown [render] setting: %s", key)
            continue
        if key == "background":
            if not isinstance(value, str):
                raise ConfigError(f"render.background must be a string, got {value!r}")
        elif isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"render.{key} must be a number, got {value!r}")
        values[key] = value
    return RenderConfig(**values)


def _parse_log_level(data: dict) -> str:
    level = data.get("level", "WARNING")
    if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
        raise ConfigError(f"logging.level must be one of {', '.join(LOG_LEVELS)}, got {level!r}")
    for key in data:
        if key != "level":
            _logger.warning("Ignoring unknown [logging] setting: %s", key)
    return level.upper()


def load_config(config_path: Optional[Path]) -> Config:
    """Load settings from a TOML file, falling back to defaults."""
    if config_path is None or not Path(config_path).exists():
        return Config()

    with open(config_path, "rb") as f:
        try:
            data = tomli.load(f)
        except tomli.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    return Config(
        render=_parse_render(data.get("render", {})),
        log_level=_parse_log_level(data.get("logging", {})),
    )
