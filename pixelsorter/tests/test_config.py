"""
Tests for settings loading and validation.

Tests cover:
- Schema defaults and validation messages
- Seven-line text format
- YAML format
- Default settings file creation
- Settings resolution
"""

import dataclasses
from pathlib import Path

import pytest

from pixelsorter.sorting.base import SortDirection
from pixelsorter.utils.config import (
    ConfigError,
    Settings,
    get_default_config,
    load_config_with_validation,
    load_settings,
    parse_settings_text,
    print_config_summary,
    validate_config,
    write_default_settings,
)


def _text_settings(
    input_path="input",
    direction="left",
    sort_by="red",
    lower="0.5",
    upper="1.0",
    contrast_type="red",
    debug="false",
):
    return (
        f"{input_path} //input\n"
        f"{direction} //direction\n"
        f"{sort_by} //sort by\n"
        f"{lower} //lower\n"
        f"{upper} //upper\n"
        f"{contrast_type} //contrast type\n"
        f"{debug} //debug\n"
    )


# =============================================================================
# Schema Tests
# =============================================================================


class TestValidateConfig:
    """Tests for validate_config."""

    def test_defaults_are_valid(self):
        assert validate_config(get_default_config()) == []

    def test_default_values(self):
        defaults = get_default_config()

        assert defaults["sort_direction"] == "left"
        assert defaults["sort_by"] == "red"
        assert defaults["contrast_lower"] == 0.5
        assert defaults["contrast_upper"] == 1.0
        assert defaults["contrast_type"] == "red"
        assert defaults["debug"] is False
        assert defaults["jobs"] == 1
        assert defaults["continue_on_error"] is True

    def test_missing_input_path(self):
        errors = validate_config({"sort_by": "red"})

        assert "Missing required field: input_path" in errors

    def test_out_of_range_bounds(self):
        errors = validate_config(
            {"input_path": "in", "contrast_lower": -0.1, "contrast_upper": 1.5}
        )

        assert "contrast_lower: value -0.1 below minimum 0.0" in errors
        assert "contrast_upper: value 1.5 above maximum 1.0" in errors

    def test_nan_bound(self):
        errors = validate_config({"input_path": "in", "contrast_lower": float("nan")})

        assert errors == ["contrast_lower: value is not a number"]

    def test_invalid_choices(self):
        errors = validate_config(
            {
                "input_path": "in",
                "sort_direction": "diagonal",
                "sort_by": "luma",
                "contrast_type": "alpha",
            }
        )

        assert len(errors) == 3
        assert errors[0].startswith("sort_direction: value 'diagonal' not in")

    def test_wrong_types(self):
        errors = validate_config(
            {"input_path": 3, "debug": "yes", "jobs": 1.5, "contrast_upper": True}
        )

        assert "input_path: expected path, got int" in errors
        assert "debug: expected bool, got str" in errors
        assert "jobs: expected int, got float" in errors
        assert "contrast_upper: expected float, got bool" in errors

    def test_empty_path(self):
        assert validate_config({"input_path": " "}) == ["input_path: path is empty"]

    def test_inverted_band_is_allowed(self):
        config = {"input_path": "in", "contrast_lower": 1.0, "contrast_upper": 0.0}

        assert validate_config(config) == []

    def test_integer_bounds_accepted(self):
        assert validate_config({"input_path": "in", "contrast_upper": 1}) == []


# =============================================================================
# Text Format Tests
# =============================================================================


class TestTextFormat:
    """Tests for the seven-line text format."""

    def test_parse_valid(self):
        config, errors = parse_settings_text(
            _text_settings(direction="up", lower="0.1", upper="0.3", debug="true")
        )

        assert errors == []
        assert config == {
            "input_path": "input",
            "sort_direction": "up",
            "sort_by": "red",
            "contrast_lower": 0.1,
            "contrast_upper": 0.3,
            "contrast_type": "red",
            "debug": True,
        }

    def test_wrong_line_count(self):
        config, errors = parse_settings_text("input\nleft\n")

        assert config == {}
        assert len(errors) == 1
        assert "exactly 7" in errors[0]

    def test_non_numeric_bound(self):
        _, errors = parse_settings_text(_text_settings(lower="half"))

        assert len(errors) == 1
        assert errors[0].startswith("contrast_lower: 'half' is not a number")

    def test_invalid_debug(self):
        _, errors = parse_settings_text(_text_settings(debug="maybe"))

        assert errors == ["debug: 'maybe' must be either true or false"]

    def test_values_are_case_insensitive(self, tmp_path):
        path = tmp_path / "settings.txt"
        path.write_text(
            _text_settings(direction="RIGHT", sort_by="Hue", contrast_type="VALUE")
        )

        config, errors = load_config_with_validation(path)

        assert errors == []
        assert config["sort_direction"] == "right"
        assert config["sort_by"] == "hue"
        assert config["contrast_type"] == "value"

    def test_path_case_is_kept(self, tmp_path):
        path = tmp_path / "settings.txt"
        path.write_text(_text_settings(input_path="Photos/Raw"))

        config, _ = load_config_with_validation(path)

        assert config["input_path"] == "Photos/Raw"

    def test_reports_every_problem(self, tmp_path):
        path = tmp_path / "settings.txt"
        path.write_text(
            _text_settings(direction="sideways", upper="2", debug="nope")
        )

        _, errors = load_config_with_validation(path)

        assert len(errors) == 3


# =============================================================================
# YAML Format Tests
# =============================================================================


class TestYamlFormat:
    """Tests for YAML settings files."""

    def test_load_valid(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text(
            "input_path: photos\n"
            "sort_direction: Down\n"
            "sort_by: saturation\n"
            "contrast_lower: 0.25\n"
            "contrast_upper: 0.75\n"
            "jobs: 4\n"
        )

        config, errors = load_config_with_validation(path)

        assert errors == []
        assert config["sort_direction"] == "down"
        assert config["jobs"] == 4

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "settings.yml"
        path.write_text("input_path: [unclosed\n")

        config, errors = load_config_with_validation(path)

        assert config == {}
        assert errors[0].startswith("Error parsing YAML")

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("- a\n- b\n")

        _, errors = load_config_with_validation(path)

        assert "must contain a mapping" in errors[0]

    def test_empty_file(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("")

        _, errors = load_config_with_validation(path)

        assert errors == ["Missing required field: input_path"]

    def test_missing_file(self, tmp_path):
        _, errors = load_config_with_validation(tmp_path / "nope.yaml")

        assert errors[0].startswith("Settings file not found")


# =============================================================================
# Settings Tests
# =============================================================================


class TestDefaultSettingsFile:
    """Tests for write_default_settings."""

    def test_text_defaults_round_trip(self, tmp_path):
        path = write_default_settings(tmp_path / "settings.txt")

        config, errors = load_config_with_validation(path)

        assert errors == []
        assert config["input_path"] == "input"
        assert config["contrast_lower"] == 0.5

    def test_yaml_defaults_round_trip(self, tmp_path):
        path = write_default_settings(tmp_path / "settings.yaml")

        config, errors = load_config_with_validation(path)

        assert errors == []
        assert {k: config[k] for k in get_default_config()} == get_default_config()


class TestLoadSettings:
    """Tests for load_settings and Settings."""

    def test_creates_missing_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "input").mkdir()

        settings = load_settings("settings.txt")

        assert (tmp_path / "settings.txt").exists()
        assert settings.input_path == (tmp_path / "input").resolve()
        assert settings.sort_direction is SortDirection.LEFT
        assert settings.output_dir == settings.input_path / "out"

    def test_missing_input_directory(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        with pytest.raises(ConfigError) as exc_info:
            load_settings(tmp_path / "settings.yaml")

        assert (tmp_path / "settings.yaml").exists()
        assert any("input_path" in e for e in exc_info.value.errors)

    def test_input_path_is_a_file(self, tmp_path):
        (tmp_path / "image.png").write_bytes(b"")
        path = tmp_path / "settings.txt"
        path.write_text(_text_settings(input_path=str(tmp_path / "image.png")))

        with pytest.raises(ConfigError, match="not a directory"):
            load_settings(path)

    def test_no_create(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_settings(tmp_path / "settings.txt", create_missing=False)

        assert not (tmp_path / "settings.txt").exists()

    def test_parsed_bounds_are_used(self, tmp_path):
        path = tmp_path / "settings.txt"
        path.write_text(
            _text_settings(input_path=str(tmp_path), lower="0.1", upper="0.3")
        )

        settings = load_settings(path)

        assert settings.contrast_lower == 0.1
        assert settings.contrast_upper == 0.3

    def test_settings_are_frozen(self, tmp_path):
        settings = Settings(input_path=tmp_path)

        with pytest.raises(dataclasses.FrozenInstanceError):
            settings.debug = True

    def test_from_dict_fills_defaults(self):
        settings = Settings.from_dict({"input_path": "in", "sort_direction": "up"})

        assert settings.input_path == Path("in")
        assert settings.sort_direction is SortDirection.UP
        assert settings.sort_by == "red"
        assert settings.jobs == 1

    def test_to_dict(self, tmp_path):
        settings = Settings(input_path=tmp_path, sort_direction=SortDirection.DOWN)

        data = settings.to_dict()

        assert data["sort_direction"] == "down"
        assert data["input_path"] == str(tmp_path)
        assert validate_config(data) == []


def test_print_config_summary(capsys):
    config = get_default_config()
    config["contrast_lower"] = 0.9
    config["contrast_upper"] = 0.1

    print_config_summary(config)

    out = capsys.readouterr().out
    assert "Settings Summary" in out
    assert "sort_direction: left" in out
    assert "no pixels will be sorted" in out
