# src/photos2map/config.py
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .constants import (
    DEFAULT_FORMATS,
    DEFAULT_INPUT_DIR,
    DEFAULT_OUTPUT_DIR,
    MAP_CENTER,
    MAP_COLOR,
    MAP_TILES,
    MAP_TITLE,
    MAP_ZOOM,
    OUTPUT_HTML,
    RIPPLE_BRUSH,
    RIPPLE_PERIOD,
    RIPPLE_SCALE,
)
from .exceptions import ConfigError
from .models import MapSettings

# Configure logger
logger = logging.getLogger(__name__)

# Config paths
CONFIG_DIR = Path.home() / ".photos2map"
CONFIG_FILE = CONFIG_DIR / "settings.json"

DEFAULT_CONFIG = {
    "input_dir": DEFAULT_INPUT_DIR,
    "output_dir": DEFAULT_OUTPUT_DIR,
    "output_format": OUTPUT_HTML,
    "debug": False,
    "enabled_formats": list(DEFAULT_FORMATS),
    "max_workers": 1,
    # Map presentation
    "map_title": MAP_TITLE,
    "map_center": list(MAP_CENTER),
    "map_zoom": MAP_ZOOM,
    "map_tiles": MAP_TILES,
    "map_color": MAP_COLOR,
    "ripple_period": RIPPLE_PERIOD,
    "ripple_scale": RIPPLE_SCALE,
    "ripple_brush": RIPPLE_BRUSH,
}


def _default_config() -> Dict[str, Any]:
    config = DEFAULT_CONFIG.copy()
    # Lists are shared otherwise
    config["enabled_formats"] = list(DEFAULT_CONFIG["enabled_formats"])
    config["map_center"] = list(DEFAULT_CONFIG["map_center"])
    return config


class ConfigManager:
    @staticmethod
    def load_config() -> Dict[str, Any]:
        """Loads the JSON settings file, or returns the defaults."""
        if not CONFIG_FILE.exists():
            return _default_config()

        try:
            with open(CONFIG_FILE, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("settings file must contain a JSON object")
            # Merge with defaults to handle new keys
            config = _default_config()
            config.update(data)
            return config
        except Exception as e:
            logger.warning(f"Could not load configuration from {CONFIG_FILE}: {e}")
            return _default_config()

    @staticmethod
    def save_config(input_dir: str = "", output_dir: str = "", output_format: str = "", **kwargs) -> None:
        """Saves the complete configuration to the JSON file."""
        # Load existing config first
        current = ConfigManager.load_config()

        if input_dir:
            current["input_dir"] = str(input_dir)
        if output_dir:
            current["output_dir"] = str(output_dir)
        if output_format:
            current["output_format"] = str(output_format)

        # Update any additional settings
        current.update(kwargs)

        try:
            CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
            with open(CONFIG_FILE, "w", encoding="utf-8") as f:
                json.dump(current, f, indent=4)
        except Exception as e:
            logger.warning(f"Error saving configuration: {e}")

    @staticmethod
    def load_map_settings(config: Optional[Dict[str, Any]] = None) -> MapSettings:
        """Builds MapSettings from a config dict (the saved one by default)."""
        if config is None:
            config = ConfigManager.load_config()
        defaults = _default_config()

        def _get(key):
            value = config.get(key)
            return defaults[key] if value is None else value

        try:
            lat, lon = (float(v) for v in _get("map_center"))
        except (TypeError, ValueError):
            logger.warning(f"Invalid map_center {config.get('map_center')!r}, using default")
            lat, lon = MAP_CENTER

        def _number(key, kind):
            value = _get(key)
            try:
                return kind(value)
            except (TypeError, ValueError) as e:
                raise ConfigError(key, value, str(e)) from e

        return MapSettings(
            title=str(_get("map_title")),
            center=(lat, lon),
            zoom=_number("map_zoom", int),
            tiles=str(_get("map_tiles")),
            color=str(_get("map_color")),
            ripple_period=_number("ripple_period", float),
            ripple_scale=_number("ripple_scale", float),
            ripple_brush=str(_get("ripple_brush")),
        )
