"""Configuration loading and validation for tracked models."""

from __future__ import annotations

from copy import deepcopy
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from .events.bus import DEFAULT_MAX_TRIGGER_DEPTH, EventBus
from .exceptions import ConfigValidationError
from .logging_utils import configure_logging

import tomllib  # stdlib since Python 3.11 (project requires >=3.11)

LOGGER = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "tracked-models"
CONFIG_PATH = CONFIG_DIR / "config.toml"

VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class EventsConfig(BaseModel):
    """Event delivery limits."""

    max_trigger_depth: int = Field(default=DEFAULT_MAX_TRIGGER_DEPTH, ge=1, le=10_000)


class LoggingConfig(BaseModel):
    """Logging behavior and output destinations."""

    level: str = "INFO"
    structured: bool = True
    log_to_file: bool = False
    log_file_path: str = "~/.local/state/tracked-models/tracked_models.log"

    @field_validator("level", mode="before")
    @classmethod
    def _validate_level(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("Logging level must be a string.")
        normalized = value.strip().upper()
        if normalized not in VALID_LOG_LEVELS:
            raise ValueError(f"Unsupported log level {normalized!r}.")
        return normalized

    @field_validator("log_file_path", mode="before")
    @classmethod
    def _validate_log_file_path(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("log_file_path must be a string.")
        normalized = value.strip()
        if not normalized:
            raise ValueError("log_file_path must not be empty.")
        return normalized


class Config(BaseModel):
    """Root configuration model for all sections."""

    events: EventsConfig = EventsConfig()
    logging: LoggingConfig = LoggingConfig()


DEFAULT_CONFIG: dict[str, dict[str, Any]] = Config().model_dump()


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override values onto base values."""
    merged: dict[str, Any] = deepcopy(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _safe_default_config() -> dict[str, dict[str, Any]]:
    """Return a deep copy of validated default config data."""
    return deepcopy(DEFAULT_CONFIG)


def _validate_config(raw: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Validate merged config, falling back to safe defaults."""
    try:
        return Config.model_validate(raw).model_dump()
    except ValidationError as exc:
        LOGGER.warning("Configuration validation failed, using safe defaults: %s", exc)
        return _safe_default_config()


def load_config(config_path: Path | None = None) -> dict[str, dict[str, Any]]:
    """
    Load configuration from TOML, merge with defaults, and validate.

    A missing file yields the defaults; it is never created.
    """
    target_path = config_path or CONFIG_PATH

    raw_data: dict[str, Any] = {}
    if target_path.exists():
        try:
            raw_data = tomllib.loads(target_path.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError) as exc:
            LOGGER.warning("Failed to parse config at %s: %s", target_path, exc)
            raw_data = {}

    return _validate_config(_deep_merge(DEFAULT_CONFIG, raw_data))


def apply_config(config: dict[str, dict[str, Any]]) -> None:
    """Configure logging and the trigger depth used by new entities.

    Unlike ``load_config``, an invalid mapping is rejected rather than
    replaced with defaults, and nothing is applied.
    """
    try:
        validated = Config.model_validate(_deep_merge(DEFAULT_CONFIG, config))
    except ValidationError as exc:
        raise ConfigValidationError(f"Invalid configuration: {exc}") from exc

    configure_logging(validated.logging.model_dump())
    EventBus.set_default_max_depth(validated.events.max_trigger_depth)
    LOGGER.debug(
        "config.applied",
        extra={"max_trigger_depth": EventBus.default_max_depth},
    )
