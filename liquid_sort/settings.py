"""
Settings Module for the Liquid Sort Solver

Provides persistent storage for user preferences using JSON.
Settings are stored in config.json in the working directory.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any

logger = logging.getLogger(__name__)

# Settings file location (project root)
SETTINGS_FILE = Path("config.json")

# Default settings
DEFAULT_SETTINGS: Dict[str, Any] = {
    "bottle_count": 7,
    "color_count": 5,
    "bottle_height": 4,
    "strategy_name": "bfs",
    "fallback_strategy": "best_first",
    "max_states": 200_000,
    "timeout_sec": 30.0,
    "debug_enabled": False,
}

# Ranges offered by the settings screen
BOTTLE_COUNT_RANGE = (3, 12)
BOTTLE_HEIGHT_RANGE = (4, 12)
MIN_COLOR_COUNT = 1


def load_settings(path: Path = SETTINGS_FILE) -> Dict[str, Any]:
    """
    Load settings from a JSON file.

    Args:
        path: Settings file (default config.json)

    Returns:
        Settings dictionary. Returns defaults if file missing or invalid.
    """
    path = Path(path)
    if not path.exists():
        logger.debug("Settings file not found, using defaults")
        return DEFAULT_SETTINGS.copy()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            settings = json.load(f)

        if not isinstance(settings, dict):
            raise ValueError(f"expected a JSON object, got {type(settings).__name__}")

        # Merge with defaults to handle missing keys
        result = DEFAULT_SETTINGS.copy()
        result.update(settings)
        logger.debug(f"Settings loaded: {result}")
        return result

    except (json.JSONDecodeError, ValueError, IOError) as e:
        logger.warning(f"Failed to load settings: {e}, using defaults")
        return DEFAULT_SETTINGS.copy()


def save_settings(settings: Dict[str, Any], path: Path = SETTINGS_FILE) -> None:
    """
    Save settings to a JSON file.

    Args:
        settings: Settings dictionary to save
        path: Settings file (default config.json)
    """
    try:
        with open(Path(path), 'w', encoding='utf-8') as f:
            json.dump(settings, f, indent=2)
        logger.debug(f"Settings saved: {settings}")
    except IOError as e:
        logger.error(f"Failed to save settings: {e}")


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def clamp_generation_settings(settings: Dict[str, Any]) -> Dict[str, Any]:
    """
    Clamp puzzle generation values to the ranges the settings screen offers.

    bottle_count is kept in 3-12, bottle_height in 4-12, and color_count
    in 1 to bottle_count - 2 so two bottles start empty.

    Args:
        settings: Settings dictionary (not modified)

    Returns:
        Copy of settings with clamped generation values
    """
    result = dict(settings)

    bottle_count = _clamp(int(result["bottle_count"]), *BOTTLE_COUNT_RANGE)
    bottle_height = _clamp(int(result["bottle_height"]), *BOTTLE_HEIGHT_RANGE)
    color_count = _clamp(int(result["color_count"]), MIN_COLOR_COUNT, bottle_count - 2)

    for key, value in (("bottle_count", bottle_count),
                       ("bottle_height", bottle_height),
                       ("color_count", color_count)):
        if result[key] != value:
            logger.warning(f"Setting {key}={result[key]} out of range, using {value}")
        result[key] = value

    return result
