"""Tests for application configuration loading."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError
import pytest

from inbetween.core.config import (
    AppConfig,
    InterpolationConfig,
    LoggingConfig,
    detect_format,
    load_app_config,
    load_config,
)


class TestConfigDefaults:
    """Test default values."""

    def test_interpolation_defaults(self) -> None:
        config = InterpolationConfig()
        assert config.max_blend_gap == 1
        assert config.wrap_padding == 2
        assert config.run_padding == 2
        assert config.decross is True
        assert config.resample is True
        assert config.equality_tolerance == 0.0

    def test_logging_defaults(self) -> None:
        config = LoggingConfig()
        assert config.level == "INFO"
        assert config.structured is False
        assert config.filename is None

    def test_invalid_values_rejected(self) -> None:
        with pytest.raises(ValidationError):
            InterpolationConfig(max_blend_gap=0)
        with pytest.raises(ValidationError):
            InterpolationConfig(wrap_padding=9)
        with pytest.raises(ValidationError):
            LoggingConfig(level="LOUD")

    def test_unknown_keys_ignored(self) -> None:
        config = AppConfig.model_validate({"interpolation": {"max_blend_gap": 3}, "future": 1})
        assert config.interpolation.max_blend_gap == 3


class TestLoadConfig:
    """Tests for raw config loading."""

    @pytest.mark.parametrize(
        ("name", "expected"), [("a.json", "json"), ("a.yaml", "yaml"), ("a.YML", "yaml")]
    )
    def test_detect_format(self, name: str, expected: str) -> None:
        assert detect_format(name) == expected

    def test_unsupported_format(self) -> None:
        with pytest.raises(ValueError, match="Unsupported config format"):
            detect_format("config.toml")

    def test_load_json(self, tmp_path: Path) -> None:
        path = tmp_path / "app.json"
        path.write_text(json.dumps({"logging": {"level": "DEBUG"}}))
        assert load_config(path) == {"logging": {"level": "DEBUG"}}

    def test_empty_yaml_is_empty_dict(self, tmp_path: Path) -> None:
        path = tmp_path / "app.yaml"
        path.write_text("")
        assert load_config(path) == {}

    def test_non_mapping_root(self, tmp_path: Path) -> None:
        path = tmp_path / "app.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError, match="must be a mapping"):
            load_config(path)

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "app.json"
        path.write_text("{not json")
        with pytest.raises(ValueError, match="Invalid JSON"):
            load_config(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")


class TestLoadAppConfig:
    """Tests for load_app_config."""

    def test_explicit_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "app.yaml"
        path.write_text("interpolation:\n  run_padding: 1\nlogging:\n  structured: true\n")
        config = load_app_config(path)
        assert config.interpolation.run_padding == 1
        assert config.logging.structured is True

    def test_explicit_missing_path_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_app_config(tmp_path / "missing.yaml")

    def test_missing_default_gives_defaults(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        assert load_app_config() == AppConfig()

    def test_default_path_is_cached(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / "inbetween.yaml").write_text("interpolation:\n  max_blend_gap: 2\n")
        first = load_app_config()
        (tmp_path / "inbetween.yaml").write_text("interpolation:\n  max_blend_gap: 3\n")
        assert load_app_config() is first
        assert first.interpolation.max_blend_gap == 2

    def test_env_overrides_log_level(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("INBETWEEN_LOG_LEVEL", "debug")
        assert load_app_config().logging.level == "DEBUG"

    def test_load_or_default_delegates(self, tmp_path: Path) -> None:
        path = tmp_path / "app.json"
        path.write_text(json.dumps({"interpolation": {"decross": False}}))
        assert AppConfig.load_or_default(path).interpolation.decross is False
