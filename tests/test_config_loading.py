"""Tests for configuration loading system."""

import json
import shutil
from pathlib import Path
from typing import Any

import jsonschema
import pytest
import yaml
from pydantic import ValidationError

from achievement_ranking.config import settings as settings_module
from achievement_ranking.config.settings import (
    Settings,
    deep_merge,
    load_all_configs,
    load_schema,
    validate_config_section,
)
from achievement_ranking.domain.exceptions import ConfigurationError
from achievement_ranking.domain.scoring_constants import (
    DEFAULT_ISSUER_WEIGHT,
    DEFAULT_OWNER_WEIGHT,
)

REPO_SCHEMA = Path(__file__).parent.parent / "config" / "schemas" / "main.schema.json"


class StubLogger:
    """Capture structured logging calls."""

    def __init__(self) -> None:
        self.debug_calls: list[tuple[str, dict[str, Any]]] = []
        self.info_calls: list[tuple[str, dict[str, Any]]] = []
        self.warning_calls: list[tuple[str, dict[str, Any]]] = []
        self.error_calls: list[tuple[str, dict[str, Any]]] = []

    def debug(self, event: str, **kwargs: Any) -> None:
        self.debug_calls.append((event, kwargs))

    def info(self, event: str, **kwargs: Any) -> None:
        self.info_calls.append((event, kwargs))

    def warning(self, event: str, **kwargs: Any) -> None:
        self.warning_calls.append((event, kwargs))

    def error(self, event: str, **kwargs: Any) -> None:
        self.error_calls.append((event, kwargs))


def _write_main_config(root: Path, config: dict[str, Any]) -> None:
    """Create config/main.yaml and the real schema under root."""
    schema_dir = root / "config" / "schemas"
    schema_dir.mkdir(parents=True)
    shutil.copy(REPO_SCHEMA, schema_dir / "main.schema.json")
    with open(root / "config" / "main.yaml", "w", encoding="utf-8") as f:
        yaml.dump(config, f)


def test_deep_merge_nested() -> None:
    """Test deep merge with nested dictionaries."""
    base = {"search": {"page_limit": 30, "weights": {"issuer_weight": 18}}}
    override = {"search": {"weights": {"owner_name_weight": 30}}}

    result = deep_merge(base, override)

    assert result == {
        "search": {
            "page_limit": 30,
            "weights": {"issuer_weight": 18, "owner_name_weight": 30},
        }
    }


def test_deep_merge_lists_replaced() -> None:
    """Test that lists are replaced, not merged."""
    assert deep_merge({"items": [1, 2, 3]}, {"items": [4, 5]}) == {"items": [4, 5]}


def test_load_schema_missing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test loading non-existent schema returns empty dict."""
    monkeypatch.chdir(tmp_path)

    assert load_schema("nonexistent_schema_xyz") == {}


def test_validate_config_section_invalid(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test validation fails for values outside the schema."""
    _write_main_config(tmp_path, {})
    monkeypatch.chdir(tmp_path)

    with pytest.raises(ConfigurationError, match="Config validation failed"):
        validate_config_section({"hall_of_fame": {"owner_weight": -1}}, "main")


def test_repository_config_matches_schema() -> None:
    """Test the shipped config/main.yaml validates against its schema."""
    config_path = REPO_SCHEMA.parent.parent / "main.yaml"
    with open(config_path, encoding="utf-8") as f:
        config = yaml.safe_load(f)
    with open(REPO_SCHEMA, encoding="utf-8") as f:
        schema = json.load(f)

    jsonschema.validate(instance=config, schema=schema)


def test_load_all_configs_empty_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test loading configs when no config files exist."""
    monkeypatch.chdir(tmp_path)

    assert load_all_configs() == {}


def test_load_all_configs_merge(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test later files override main.yaml."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    with open(config_dir / "main.yaml", "w") as f:
        yaml.dump({"search": {"page_limit": 30}, "tags": {"max_count": 12}}, f)
    with open(config_dir / "local.yaml", "w") as f:
        yaml.dump({"tags": {"max_count": 5}}, f)
    monkeypatch.chdir(tmp_path)

    config = load_all_configs()

    assert config["search"]["page_limit"] == 30
    assert config["tags"]["max_count"] == 5


def test_load_all_configs_logs_structured_warning(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Config loader should emit structured warnings when files fail to load."""

    logger_stub = StubLogger()
    monkeypatch.setattr(settings_module, "logger", logger_stub)

    config_dir = tmp_path / "config"
    config_dir.mkdir()
    (config_dir / "main.yaml").write_text("invalid: [yaml", encoding="utf-8")

    monkeypatch.chdir(tmp_path)
    load_all_configs()

    assert logger_stub.warning_calls
    event, payload = logger_stub.warning_calls[0]
    assert event == "config_file_load_failed"
    assert payload["path"].endswith("main.yaml")
    assert "error" in payload


def test_settings_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test defaults apply without any config files."""
    monkeypatch.chdir(tmp_path)

    settings = Settings()

    assert settings.log_level == "INFO"
    assert settings.tz_default == "Asia/Bangkok"
    assert settings.hall_of_fame_owner_weight == DEFAULT_OWNER_WEIGHT
    assert settings.search_weights.issuer_weight == DEFAULT_ISSUER_WEIGHT
    assert settings.search_page_limit == 30
    assert settings.tag_max_count == 12


def test_settings_from_yaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test YAML values override defaults."""
    _write_main_config(
        tmp_path,
        {
            "logging": {"level": "debug", "json": True},
            "processing": {"tz_default": "UTC"},
            "search": {"page_limit": 10, "weights": {"owner_name_weight": 30}},
            "hall_of_fame": {"owner_weight": 0.5},
            "tags": {"max_count": 4},
        },
    )
    monkeypatch.chdir(tmp_path)

    settings = Settings()

    assert settings.log_level == "DEBUG"
    assert settings.json_logs is True
    assert settings.tz_default == "UTC"
    assert settings.search_page_limit == 10
    assert settings.search_weights.owner_name_weight == 30
    assert settings.search_weights.issuer_weight == DEFAULT_ISSUER_WEIGHT
    assert settings.hall_of_fame_owner_weight == 0.5
    assert settings.tag_max_count == 4


def test_environment_overrides_yaml(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test environment variables take precedence over YAML."""
    _write_main_config(tmp_path, {"hall_of_fame": {"owner_weight": 0.5}})
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HALL_OF_FAME_OWNER_WEIGHT", "0.25")

    settings = Settings()

    assert settings.hall_of_fame_owner_weight == 0.25


def test_yaml_schema_violation_raises(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test unknown keys are rejected by the schema."""
    _write_main_config(tmp_path, {"hall_of_fame": {"owner_bonus": 3}})
    monkeypatch.chdir(tmp_path)

    with pytest.raises(ConfigurationError):
        Settings()


def test_yaml_unknown_timezone_raises(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test timezones from YAML are checked."""
    _write_main_config(tmp_path, {"processing": {"tz_default": "Mars/Olympus"}})
    monkeypatch.chdir(tmp_path)

    with pytest.raises(ConfigurationError):
        Settings()


def test_environment_unknown_timezone_raises(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test timezones from the environment are validated."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("TZ_DEFAULT", "Mars/Olympus")

    with pytest.raises(ValidationError):
        Settings()


def test_negative_owner_weight_from_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test negative multipliers are rejected."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HALL_OF_FAME_OWNER_WEIGHT", "-1")

    with pytest.raises(ValidationError):
        Settings()


def test_owner_weight_above_one_warns(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test a multiplier above 1 loads with a structured warning."""
    logger_stub = StubLogger()
    monkeypatch.setattr(settings_module, "logger", logger_stub)
    _write_main_config(tmp_path, {"hall_of_fame": {"owner_weight": 1.5}})
    monkeypatch.chdir(tmp_path)

    settings = Settings()

    assert settings.hall_of_fame_owner_weight == 1.5
    events = [event for event, _ in logger_stub.warning_calls]
    assert "owner_weight_exceeds_design_band" in events


def test_get_settings_is_cached(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test get_settings returns one shared instance."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(settings_module, "_settings", None)

    assert settings_module.get_settings() is settings_module.get_settings()
