"""Application settings with Pydantic Settings validation.

Configuration is loaded from config/main.yaml and config/*.yaml files,
merged and validated against JSON schemas. Environment variables (and .env)
take precedence over YAML values.
"""

import json
from pathlib import Path
from typing import Any, Final, Literal, cast

import pytz
import yaml
from jsonschema import ValidationError as JSONSchemaValidationError
from jsonschema import validate
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from achievement_ranking.config.logging_config import get_logger
from achievement_ranking.domain.exceptions import ConfigurationError
from achievement_ranking.domain.models import SearchWeights
from achievement_ranking.domain.scoring_constants import (
    DEFAULT_MAX_TAGS,
    DEFAULT_OWNER_WEIGHT,
)

CONFIG_DIR: Final[Path] = Path("config")
SCHEMA_DIR: Final[Path] = CONFIG_DIR / "schemas"
SEARCH_PAGE_LIMIT_DEFAULT: Final[int] = 30

logger = cast(Any, get_logger(__name__))


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Dictionary to merge into base (takes precedence)

    Returns:
        Merged dictionary
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_schema(schema_name: str) -> dict[str, Any]:
    """Load JSON Schema from config/schemas/.

    Args:
        schema_name: Schema name without extension (e.g., "main")

    Returns:
        JSON Schema dictionary or empty dict if not found
    """
    schema_path = SCHEMA_DIR / f"{schema_name}.schema.json"
    if not schema_path.exists():
        return {}

    try:
        with open(schema_path, encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(
            "config_schema_load_failed",
            schema=schema_name,
            error=str(e),
        )
        return {}


def validate_config_section(
    config: dict[str, Any], schema_name: str, file_path: str = ""
) -> None:
    """Validate config section against JSON Schema.

    Args:
        config: Configuration dictionary to validate
        schema_name: Name of schema to validate against
        file_path: Optional file path for error messages

    Raises:
        ConfigurationError: If validation fails
    """
    schema = load_schema(schema_name)
    if not schema:
        return

    try:
        validate(instance=config, schema=schema)
        logger.debug("config_validation_succeeded", schema=schema_name)
    except JSONSchemaValidationError as e:
        error_msg = f"Config validation failed for {schema_name}"
        if file_path:
            error_msg += f" (file: {file_path})"
        error_msg += f": {e.message}"
        raise ConfigurationError(error_msg) from e


def _load_yaml_file(path: Path, schema_name: str) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            file_config = yaml.safe_load(f) or {}
    except (yaml.YAMLError, OSError) as e:
        logger.warning("config_file_load_failed", path=str(path), error=str(e))
        return {}

    try:
        validate_config_section(file_config, schema_name, str(path))
    except ConfigurationError as e:
        logger.error(
            "config_validation_failed",
            path=str(path),
            schema=schema_name,
            error=str(e),
        )
        raise

    logger.debug("config_file_loaded", path=str(path), schema=schema_name)
    return file_config


def load_all_configs() -> dict[str, Any]:
    """Load and merge all YAML configs from the config/ directory.

    Loading order (later overrides earlier):
    1. config/main.yaml
    2. All other config/*.yaml files (sorted alphabetically)

    Each file is validated against config/schemas/<stem>.schema.json if present.

    Returns:
        Merged configuration dictionary

    Raises:
        ConfigurationError: If a file fails schema validation
    """
    merged_config: dict[str, Any] = {}
    file_count = 0

    main_path = CONFIG_DIR / "main.yaml"
    if main_path.exists():
        merged_config = _load_yaml_file(main_path, "main")
        file_count += 1

    if CONFIG_DIR.is_dir():
        for yaml_file in sorted(
            f for f in CONFIG_DIR.glob("*.yaml") if f.name != "main.yaml"
        ):
            merged_config = deep_merge(
                merged_config, _load_yaml_file(yaml_file, yaml_file.stem)
            )
            file_count += 1

    logger.debug("config_load_complete", file_count=file_count)
    return merged_config


class Settings(BaseSettings):
    """Application settings.

    Values come from defaults, then YAML files, then environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env" if Path(".env").exists() else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    json_logs: bool = Field(default=False, description="Emit JSON log lines")

    # Processing
    tz_default: str = Field(
        default="Asia/Bangkok", description="Timezone for achievement dates"
    )

    # Search
    search_weights: SearchWeights = Field(
        default_factory=SearchWeights, description="Search relevance weights"
    )
    search_page_limit: int = Field(
        default=SEARCH_PAGE_LIMIT_DEFAULT, ge=1, description="Default page size"
    )

    # Hall of Fame
    hall_of_fame_owner_weight: float = Field(
        default=DEFAULT_OWNER_WEIGHT,
        ge=0.0,
        description="Owner bonus multiplier (values above 1 can hit the 100 ceiling)",
    )

    # Tags
    tag_max_count: int = Field(
        default=DEFAULT_MAX_TAGS, ge=1, description="Maximum derived tags per record"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    @field_validator("tz_default")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        if value not in pytz.all_timezones_set:
            raise ValueError(f"Unknown timezone: {value}")
        return value

    def __init__(self, **data: Any):
        """Initialize settings with auto-loaded configs from all YAML files."""
        config = load_all_configs()

        super().__init__(**data)
        self._apply_yaml_defaults(config)

    def _apply_yaml_defaults(self, config: dict[str, Any]) -> None:
        """Apply YAML-sourced defaults without overriding env-provided values."""

        fields_from_env = set(self.model_fields_set)

        def _assign(field_name: str, value: Any) -> None:
            if value is None:
                return
            if field_name in fields_from_env:
                return

            object.__setattr__(self, field_name, value)
            self.model_fields_set.add(field_name)

        logging_config = config.get("logging") or {}
        level = logging_config.get("level")
        _assign("log_level", level.upper() if isinstance(level, str) else None)
        _assign("json_logs", logging_config.get("json"))

        processing_config = config.get("processing") or {}
        tz_default = processing_config.get("tz_default")
        if tz_default is not None and tz_default not in pytz.all_timezones_set:
            raise ConfigurationError(f"Unknown timezone in config: {tz_default}")
        _assign("tz_default", tz_default)

        search_config = config.get("search") or {}
        weight_overrides = search_config.get("weights")
        if weight_overrides:
            _assign("search_weights", SearchWeights().with_overrides(weight_overrides))
        _assign("search_page_limit", search_config.get("page_limit"))

        hall_of_fame_config = config.get("hall_of_fame") or {}
        _assign("hall_of_fame_owner_weight", hall_of_fame_config.get("owner_weight"))

        tags_config = config.get("tags") or {}
        _assign("tag_max_count", tags_config.get("max_count"))

        if self.hall_of_fame_owner_weight > 1:
            logger.warning(
                "owner_weight_exceeds_design_band",
                owner_weight=self.hall_of_fame_owner_weight,
                source="settings",
            )


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance.

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
