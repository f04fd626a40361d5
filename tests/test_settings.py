"""
Settings persistence tests

Usage:
    pytest tests/test_settings.py
"""

import json
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from liquid_sort.settings import (
    DEFAULT_SETTINGS,
    clamp_generation_settings,
    load_settings,
    save_settings,
)


def test_missing_file_gives_defaults(tmp_path):
    assert load_settings(tmp_path / "config.json") == DEFAULT_SETTINGS


def test_save_and_load(tmp_path):
    path = tmp_path / "config.json"
    settings = dict(DEFAULT_SETTINGS, bottle_count=9, strategy_name="beam")

    save_settings(settings, path)
    loaded = load_settings(path)

    assert loaded["bottle_count"] == 9
    assert loaded["strategy_name"] == "beam"


def test_partial_file_merged_with_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"bottle_height": 6}), encoding="utf-8")

    loaded = load_settings(path)
    assert loaded["bottle_height"] == 6
    assert loaded["max_states"] == DEFAULT_SETTINGS["max_states"]


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]"])
def test_invalid_file_gives_defaults(tmp_path, content):
    path = tmp_path / "config.json"
    path.write_text(content, encoding="utf-8")
    assert load_settings(path) == DEFAULT_SETTINGS


def test_defaults_not_shared():
    settings = load_settings(Path("does-not-exist.json"))
    settings["bottle_count"] = 99
    assert DEFAULT_SETTINGS["bottle_count"] == 7


def test_clamp_generation_settings():
    settings = dict(DEFAULT_SETTINGS, bottle_count=20, bottle_height=2, color_count=15)
    clamped = clamp_generation_settings(settings)

    assert clamped["bottle_count"] == 12
    assert clamped["bottle_height"] == 4
    assert clamped["color_count"] == 10
    # Input untouched
    assert settings["bottle_count"] == 20


def test_clamp_keeps_valid_values():
    clamped = clamp_generation_settings(DEFAULT_SETTINGS)
    assert clamped == DEFAULT_SETTINGS


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
