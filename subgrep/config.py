"""Configuration loading and validation."""

import logging
import sys
from pathlib import Path
from typing import Any, Dict

import yaml

# Valid configuration keys and their expected Python types.
_VALID_KEYS: Dict[str, type] = {
    "recursive": bool,
    "ignore_case": bool,
    "color": str,
    "encoding": str,
    "fps": float,
    "extensions": list,
    "report_format": str,
}

# Keys that accept both int and float values (e.g. `fps: 25` in YAML).
_NUMERIC_KEYS: frozenset = frozenset({"fps"})

_COLOR_VALUES = {"auto", "always", "never"}
_REPORT_FORMAT_VALUES = {"json", "csv"}


def validate_config(config: Dict[str, Any]) -> None:
    """Validate *config* dict against known keys and types.

    Calls ``sys.exit(1)`` with a human-readable message on the first set of
    errors found so that the user sees all problems at once.
    """
    errors = []

    for key, value in config.items():
        if key not in _VALID_KEYS:
            errors.append(
                f"Unknown key '{key}'. Valid keys: {', '.join(sorted(_VALID_KEYS))}"
            )
            continue

        expected = _VALID_KEYS[key]
        if key in _NUMERIC_KEYS:
            # bool is an int subclass; `fps: true` is still a mistake.
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                errors.append(
                    f"'{key}' must be a number, got {type(value).__name__}"
                )
        elif not isinstance(value, expected):
            errors.append(
                f"'{key}' must be {expected.__name__}, got {type(value).__name__}"
            )

    # Value-level checks (only when the type already passed).
    fps = config.get("fps")
    if isinstance(fps, (int, float)) and not isinstance(fps, bool) and fps <= 0:
        errors.append(f"'fps' must be > 0, got {fps}")

    color = config.get("color")
    if isinstance(color, str) and color not in _COLOR_VALUES:
        errors.append(
            f"'color' must be one of {sorted(_COLOR_VALUES)}, got '{color}'"
        )

    report_format = config.get("report_format")
    if isinstance(report_format, str) and report_format not in _REPORT_FORMAT_VALUES:
        errors.append(
            f"'report_format' must be one of {sorted(_REPORT_FORMAT_VALUES)}, "
            f"got '{report_format}'"
        )

    encoding = config.get("encoding")
    if isinstance(encoding, str):
        try:
            "".encode(encoding)
        except LookupError:
            errors.append(f"'encoding' is not a known codec: '{encoding}'")

    extensions = config.get("extensions")
    if isinstance(extensions, list):
        bad = [ext for ext in extensions if not isinstance(ext, str)]
        if bad:
            errors.append(f"'extensions' must contain only strings, got {bad}")

    if errors:
        print("Configuration error(s):", file=sys.stderr)
        for err in errors:
            print(f"  - {err}", file=sys.stderr)
        sys.exit(1)


def load_config() -> Dict[str, Any]:
    """Load and validate configuration from the first existing config file.

    Searches:
      1. ``~/.subgrep.yaml``
      2. ``.subgrep.yaml`` (current working directory)

    Returns an empty dict when no config file is found.
    """
    config_locations = [
        Path.home() / ".subgrep.yaml",
        Path(".subgrep.yaml"),
    ]

    for config_file in config_locations:
        if not config_file.exists():
            continue

        try:
            with open(config_file) as fh:
                config = yaml.safe_load(fh) or {}
        except (OSError, yaml.YAMLError) as exc:
            logging.warning(f"Could not load config from {config_file}: {exc}")
            break

        if not isinstance(config, dict):
            logging.warning(f"Ignoring {config_file}: top level must be a mapping")
            break

        validate_config(config)  # exits on error
        logging.debug(f"Loaded configuration from: {config_file}")
        return config

    return {}
