#!/usr/bin/env python3
"""
Creature preset JSON loading utilities.

This module defines a simple JSON schema and loader for creature presets
(presets/*.json), each one a CreatureConfiguration.

Schema
======
Preset JSON (presets/*.json):
{
  "name": "Human-friendly preset name",
  "description": "Optional description",
  "creature": {
    "angle_constraint": 2.827,
    "radius": 30.0,
    "joints": 20,
    "joint_distance": 20.0,
    "color": [97, 165, 184],
    "shapes": [{"amplitude": 10.0, "constant_offset": 0.0, "frequency_multiplier": 6.283}],
    "legs": [
      {
        "angle": 2.356, "joints": 3, "joint_distance": 30.0, "body_ratio": 0.25,
        "target_ratio": 0.65, "target_max_distance": 100.0, "thickness": 12.0
      }
    ]
  }
}

Missing creature fields keep their defaults. Users can add their own JSON files into
the folder and they'll be picked up by the loader; files that cannot be read or parsed
are logged and skipped.
"""
import json
import logging
import os
from typing import List, Optional, Tuple

from .configuration import CreatureConfiguration

logger = logging.getLogger(__name__)

PRESETS_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "presets")


def _read_json(path: str) -> Optional[dict]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Could not read preset {path}: {e}")
        return None
    if not isinstance(data, dict):
        logger.warning(f"Preset {path} is not a JSON object, skipping")
        return None
    return data


def list_presets(directory: str = PRESETS_DIR) -> List[Tuple[str, str]]:
    """Return list of (file_name, display_name) for available presets."""
    items: List[Tuple[str, str]] = []
    if not os.path.isdir(directory):
        return items
    for fn in sorted(os.listdir(directory)):
        if not fn.lower().endswith(".json"):
            continue
        data = _read_json(os.path.join(directory, fn))
        if data is None:
            continue
        display = data.get("name") or os.path.splitext(fn)[0]
        items.append((fn, display))
    return items


def load_preset(file_name: str,
                directory: str = PRESETS_DIR) -> Optional[Tuple[CreatureConfiguration, str]]:
    """
    Load a preset JSON by file name.
    Returns (configuration, display_name), or None if the file is missing or malformed.
    """
    path = os.path.join(directory, file_name)
    data = _read_json(path)
    if data is None:
        return None
    display_name = data.get("name") or os.path.splitext(file_name)[0]
    try:
        config = CreatureConfiguration.from_dict(data.get("creature", {}))
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        logger.warning(f"Preset {path} has an invalid creature section: {e}")
        return None
    logger.info(f"Loaded preset '{display_name}' from {path}")
    return config, display_name


def save_preset(config: CreatureConfiguration, file_name: str, name: str,
                description: str = "", directory: str = PRESETS_DIR) -> str:
    """
    Write a configuration as a preset JSON file, creating the folder if needed.

    Returns:
        The path written.

    Raises:
        OSError: The file could not be written.
    """
    if not file_name.lower().endswith(".json"):
        file_name += ".json"
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, file_name)
    data = {"name": name, "description": description, "creature": config.to_dict()}
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    logger.info(f"Saved preset '{name}' to {path}")
    return path
