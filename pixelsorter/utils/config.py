"""
Settings loading and validation for Pixelsorter.

This module provides:
- CONFIG_SCHEMA: Schema definition for all settings
- validate_config(): Validate a settings dictionary
- load_config_with_validation(): Load and validate a YAML or text settings file
- write_default_settings(): Create a settings file with documented defaults
- load_settings(): Load a settings file into an immutable Settings value
- print_config_summary(): Print a formatted settings summary
- get_default_config(): Get default settings values

Two file formats are understood. Files ending in .yaml/.yml are YAML
mappings keyed by the schema names. Any other file uses the classic
seven-line text format, one value per line in this order::

    input        // input directory
    left         // sort direction
    red          // sort by
    0.5          // contrast lower bound
    1.0          // contrast upper bound
    red          // contrast type
    false        // debug

Everything after ``//`` on a line is a comment.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from pixelsorter.sorting.base import SortDirection
from pixelsorter.sorting.color import COLOR_KEY_NAMES

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_FILE = "settings.txt"
OUTPUT_DIR_NAME = "out"

DIRECTION_NAMES = tuple(d.value for d in SortDirection)

# Required fields for a settings file
REQUIRED_FIELDS = ["input_path"]

# Field type definitions with validation rules
CONFIG_SCHEMA: dict[str, dict[str, Any]] = {
    # ==========================================================================
    # Input
    # ==========================================================================
    "input_path": {"type": "path", "required": True, "default": "input"},
    # ==========================================================================
    # Sorting
    # ==========================================================================
    "sort_direction": {"type": "str", "choices": DIRECTION_NAMES, "default": "left"},
    "sort_by": {"type": "str", "choices": COLOR_KEY_NAMES, "default": "red"},
    # ==========================================================================
    # Contrast mask
    # ==========================================================================
    "contrast_lower": {"type": "float", "min": 0.0, "max": 1.0, "default": 0.5},
    "contrast_upper": {"type": "float", "min": 0.0, "max": 1.0, "default": 1.0},
    "contrast_type": {"type": "str", "choices": COLOR_KEY_NAMES, "default": "red"},
    # ==========================================================================
    # Run
    # ==========================================================================
    "debug": {"type": "bool", "default": False},
    "jobs": {"type": "int", "min": 1, "max": 64, "default": 1},
    "continue_on_error": {"type": "bool", "default": True},
}

# Order of values in the seven-line text format
TEXT_FIELDS = [
    "input_path",
    "sort_direction",
    "sort_by",
    "contrast_lower",
    "contrast_upper",
    "contrast_type",
    "debug",
]

DEFAULT_TEXT_SETTINGS = """\
input //The path where the image(s) are, as well as where the program will output the result (in an "out" folder)
left //The sort direction (Possible values: left, right, down, up)
red //What value to sort by (Possible values: red, green, blue, hue, saturation, value)
0.5 //The lower bound of values (Range: 0.0-1.0) (Anything more than this will get sorted)
1.0 //The upper bound of values (Range: 0.0-1.0) (Anything less than this will get sorted)
red //What value should be used to create the contrast map (Possible values: red, green, blue, hue, saturation, value)
false //Should the program print debug messages and create debug images? (Either true or false)
"""

DEFAULT_YAML_SETTINGS = """\
# Directory with the images to sort. Results are written to <input_path>/out
input_path: input

# left, right, up or down. left/up sort descending, right/down ascending
sort_direction: left

# red, green, blue, hue, saturation or value
sort_by: red

# Pixels whose contrast_type value (scaled to 0.0-1.0) lies inside
# [contrast_lower, contrast_upper] get sorted
contrast_lower: 0.5
contrast_upper: 1.0
contrast_type: red

# Log every step and write <name>_mask.png next to each output
debug: false

# Number of images processed at once
jobs: 1

# Keep going when an image fails to load or save
continue_on_error: true
"""


class ConfigError(ValueError):
    """Raised when a settings file is missing, malformed or invalid."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("\n".join(self.errors))


def validate_config(config: dict[str, Any]) -> list[str]:
    """
    Validate settings dictionary against schema.

    Args:
        config: Settings dictionary to validate.

    Returns:
        List of error messages (empty if valid).

    Example:
        >>> errors = validate_config({"input_path": "in", "contrast_lower": 2.0})
        >>> print(errors)
        ['contrast_lower: value 2.0 above maximum 1.0']
    """
    errors: list[str] = []

    # Check required fields
    for field in REQUIRED_FIELDS:
        if field not in config:
            errors.append(f"Missing required field: {field}")

    # Validate each field
    for key, value in config.items():
        if key not in CONFIG_SCHEMA:
            logger.warning(f"Ignoring unknown setting: {key}")
            continue

        schema = CONFIG_SCHEMA[key]

        if value is None:
            errors.append(f"{key}: value is missing")
            continue

        # Type validation
        if schema["type"] == "int":
            if not isinstance(value, int) or isinstance(value, bool):
                errors.append(f"{key}: expected int, got {type(value).__name__}")
                continue
            if "min" in schema and value < schema["min"]:
                errors.append(f"{key}: value {value} below minimum {schema['min']}")
            if "max" in schema and value > schema["max"]:
                errors.append(f"{key}: value {value} above maximum {schema['max']}")

        elif schema["type"] == "float":
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                errors.append(f"{key}: expected float, got {type(value).__name__}")
                continue
            if math.isnan(value):
                errors.append(f"{key}: value is not a number")
                continue
            if "min" in schema and value < schema["min"]:
                errors.append(f"{key}: value {value} below minimum {schema['min']}")
            if "max" in schema and value > schema["max"]:
                errors.append(f"{key}: value {value} above maximum {schema['max']}")

        elif schema["type"] == "str":
            if not isinstance(value, str):
                errors.append(f"{key}: expected str, got {type(value).__name__}")
                continue
            if "choices" in schema and value not in schema["choices"]:
                errors.append(
                    f"{key}: value '{value}' not in {', '.join(schema['choices'])}"
                )

        elif schema["type"] == "bool":
            if not isinstance(value, bool):
                errors.append(f"{key}: expected bool, got {type(value).__name__}")

        elif schema["type"] == "path":
            if not isinstance(value, (str, Path)):
                errors.append(f"{key}: expected path, got {type(value).__name__}")
            elif not str(value).strip():
                errors.append(f"{key}: path is empty")

    return errors


def normalize_config(config: dict[str, Any]) -> dict[str, Any]:
    """Lower-case and trim the enumerated string settings."""
    normalized = dict(config)
    for key, schema in CONFIG_SCHEMA.items():
        value = normalized.get(key)
        if "choices" in schema and isinstance(value, str):
            normalized[key] = value.strip().lower()
    return normalized


def parse_settings_text(text: str) -> tuple[dict[str, Any], list[str]]:
    """
    Parse the seven-line text settings format.

    Args:
        text: File contents.

    Returns:
        Tuple of (config_dict, error_list).
    """
    lines = [line.split("//", 1)[0].strip() for line in text.splitlines()]

    if len(lines) != len(TEXT_FIELDS):
        return {}, [
            f"The settings file has {len(lines)} lines but exactly "
            f"{len(TEXT_FIELDS)} are expected (no empty lines at the end). "
            "Delete it and run the program again to create a new one."
        ]

    config: dict[str, Any] = {}
    errors: list[str] = []

    for key, raw in zip(TEXT_FIELDS, lines, strict=True):
        schema = CONFIG_SCHEMA[key]

        if schema["type"] == "float":
            try:
                config[key] = float(raw)
            except ValueError:
                errors.append(
                    f"{key}: '{raw}' is not a number between "
                    f"{schema['min']} and {schema['max']}"
                )
        elif schema["type"] == "bool":
            lowered = raw.lower()
            if lowered in ("true", "false"):
                config[key] = lowered == "true"
            else:
                errors.append(f"{key}: '{raw}' must be either true or false")
        else:
            config[key] = raw

    return config, errors


def load_config_with_validation(config_path: Path | str) -> tuple[dict, list[str]]:
    """
    Load and validate a settings file.

    Args:
        config_path: Path to a YAML (.yaml/.yml) or text settings file.

    Returns:
        Tuple of (config_dict, error_list).
        If errors is non-empty, the config may be invalid.

    Example:
        >>> config, errors = load_config_with_validation("settings.yaml")
        >>> if errors:
        ...     print("Errors:", errors)
    """
    config_path = Path(config_path)

    if not config_path.exists():
        return {}, [f"Settings file not found: {config_path}"]

    try:
        text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return {}, [f"Error reading settings file {config_path}: {e}"]

    if config_path.suffix.lower() in (".yaml", ".yml"):
        try:
            config = yaml.safe_load(text)
        except yaml.YAMLError as e:
            return {}, [f"Error parsing YAML: {e}"]

        if config is None:
            config = {}
        if not isinstance(config, dict):
            return {}, [f"Settings file must contain a mapping: {config_path}"]
        parse_errors: list[str] = []
    else:
        config, parse_errors = parse_settings_text(text)

    config = normalize_config(config)
    errors = parse_errors + validate_config(config)
    return config, errors


def write_default_settings(config_path: Path | str) -> Path:
    """
    Create a settings file with documented default values.

    YAML is written for .yaml/.yml paths, the text format otherwise.
    """
    config_path = Path(config_path)
    if config_path.suffix.lower() in (".yaml", ".yml"):
        content = DEFAULT_YAML_SETTINGS
    else:
        content = DEFAULT_TEXT_SETTINGS

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(content, encoding="utf-8")
    return config_path


def get_default_config() -> dict[str, Any]:
    """
    Get default settings values.

    Returns:
        Dictionary with all default values from CONFIG_SCHEMA.

    Example:
        >>> defaults = get_default_config()
        >>> print(defaults["sort_direction"])
        left
    """
    return {
        key: schema.get("default")
        for key, schema in CONFIG_SCHEMA.items()
        if "default" in schema
    }


@dataclass(frozen=True)
class Settings:
    """
    Immutable settings for one run.

    Attributes:
        input_path: Directory with the images to sort.
        sort_direction: Direction, which fixes scan axis and order.
        sort_by: Attribute used as the sort key.
        contrast_lower: Inclusive lower bound of the contrast band.
        contrast_upper: Inclusive upper bound of the contrast band.
        contrast_type: Attribute used to build the contrast mask.
        debug: Verbose logging and debug mask images.
        jobs: Number of images processed at once.
        continue_on_error: Keep going after a per-file failure.
    """

    input_path: Path
    sort_direction: SortDirection = SortDirection.LEFT
    sort_by: str = "red"
    contrast_lower: float = 0.5
    contrast_upper: float = 1.0
    contrast_type: str = "red"
    debug: bool = False
    jobs: int = 1
    continue_on_error: bool = True

    @property
    def output_dir(self) -> Path:
        return self.input_path / OUTPUT_DIR_NAME

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> Settings:
        """Build settings from a validated config dict, filling in defaults."""
        values = get_default_config()
        values.update({k: v for k, v in config.items() if k in CONFIG_SCHEMA})
        return cls(
            input_path=Path(values["input_path"]),
            sort_direction=SortDirection.parse(values["sort_direction"]),
            sort_by=values["sort_by"],
            contrast_lower=float(values["contrast_lower"]),
            contrast_upper=float(values["contrast_upper"]),
            contrast_type=values["contrast_type"],
            debug=values["debug"],
            jobs=values["jobs"],
            continue_on_error=values["continue_on_error"],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "input_path": str(self.input_path),
            "sort_direction": self.sort_direction.value,
            "sort_by": self.sort_by,
            "contrast_lower": self.contrast_lower,
            "contrast_upper": self.contrast_upper,
            "contrast_type": self.contrast_type,
            "debug": self.debug,
            "jobs": self.jobs,
            "continue_on_error": self.continue_on_error,
        }


def load_settings(
    config_path: Path | str = DEFAULT_SETTINGS_FILE,
    create_missing: bool = True,
) -> Settings:
    """
    Load, validate and resolve a settings file.

    Args:
        config_path: Settings file path.
        create_missing: Write a default settings file first if none exists.

    Returns:
        Settings value.

    Raises:
        ConfigError: With every problem found, if the settings are unusable.
    """
    config_path = Path(config_path)

    if create_missing and not config_path.exists():
        write_default_settings(config_path)
        logger.warning(f"Created default settings file: {config_path}")

    config, errors = load_config_with_validation(config_path)

    input_path = config.get("input_path")
    if not errors and input_path is not None:
        input_dir = Path(input_path)
        if not input_dir.is_dir():
            errors.append(
                f"input_path: '{input_dir}' is not a directory or does not exist"
            )

    if errors:
        raise ConfigError(errors)

    settings = Settings.from_dict(config)
    return replace(settings, input_path=settings.input_path.resolve())


def print_config_summary(config: dict[str, Any]) -> None:
    """
    Print settings summary to console.

    Args:
        config: Settings dictionary to print.
    """
    print("\n" + "=" * 60)
    print(" Settings Summary")
    print("=" * 60)

    categories = {
        "Input": ["input_path"],
        "Sorting": ["sort_direction", "sort_by"],
        "Contrast Mask": ["contrast_type", "contrast_lower", "contrast_upper"],
        "Run": ["debug", "jobs", "continue_on_error"],
    }

    for category, fields in categories.items():
        values = [(f, config.get(f)) for f in fields if f in config]
        if values:
            print(f"\n{category}:")
            for field, value in values:
                print(f"  {field}: {value}")

    lower = config.get("contrast_lower")
    upper = config.get("contrast_upper")
    numeric = (int, float)
    if isinstance(lower, numeric) and isinstance(upper, numeric) and lower > upper:
        print("\n  Note: contrast_lower > contrast_upper, no pixels will be sorted")

    print("\n" + "=" * 60 + "\n")
