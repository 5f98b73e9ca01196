"""
JSON persistence for FeedbackConfiguration.

Unreadable or corrupted files fall back to defaults with a warning.
Values that are present but invalid are rejected, since playing with a
silently altered configuration would be worse than failing.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any, Dict, Union

from .config import FeedbackConfiguration

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


def config_from_dict(data: Dict[str, Any]) -> FeedbackConfiguration:
    """
    Build a configuration from a mapping of field names to values.

    Unknown keys are ignored with a warning; ``schema_version`` is skipped.

    Raises:
        InvalidConfigurationError: If a known field has an invalid value.
    """
    known = {f.name for f in fields(FeedbackConfiguration)}
    values: Dict[str, Any] = {}
    for key, value in data.items():
        if key == "schema_version":
            continue
        if key not in known:
            logger.warning(f"Ignoring unknown feedback setting: {key}")
            continue
        values[key] = value
    return FeedbackConfiguration(**values)


def config_to_dict(config: FeedbackConfiguration) -> Dict[str, Any]:
    data = asdict(config)
    data["pulse_intensity"] = config.pulse_intensity.value
    data["schema_version"] = SCHEMA_VERSION
    return data


def load_feedback_config(path: Union[str, Path]) -> FeedbackConfiguration:
    """
    Load feedback settings from a JSON file.

    Args:
        path: Settings file.

    Returns:
        Loaded configuration, or defaults if the file is missing or
        cannot be parsed.

    Raises:
        InvalidConfigurationError: If the file parses but holds bad values.
    """
    path = Path(path)
    if not path.exists():
        logger.warning(f"Feedback settings not found at {path}, using defaults")
        return FeedbackConfiguration()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        logger.warning(f"Feedback settings file is corrupted ({e}), using defaults")
        return FeedbackConfiguration()
    except OSError as e:
        logger.warning(f"Failed to read feedback settings ({e}), using defaults")
        return FeedbackConfiguration()

    if not isinstance(data, dict):
        logger.warning(f"Feedback settings in {path} are not a JSON object, using defaults")
        return FeedbackConfiguration()

    return config_from_dict(data)


def save_feedback_config(config: FeedbackConfiguration, path: Union[str, Path]) -> None:
    """Write feedback settings as JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config_to_dict(config), f, indent=2)
    logger.debug(f"Saved feedback settings to {path}")
