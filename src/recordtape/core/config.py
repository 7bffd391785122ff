# src/recordtape/core/config.py
"""
Configuration schema and loading for recordtape.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.

Example YAML:
    tape:
      path: ./fixtures/checkout
      mode: replay
    logging:
      level: DEBUG
      json_output: true
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from recordtape.contracts.enums import Mode


class TapeSettings(BaseModel):
    """Where a tape persists and which mode it starts in.

    The tape file is `path` with `extension` appended, so a path of
    `fixtures/checkout` stores its records in `fixtures/checkout.log`.
    """

    model_config = {"frozen": True}

    path: Path | None = Field(
        default=None,
        description="Base path of the tape file; memory-only tape when unset",
    )
    mode: Mode = Field(
        default=Mode.RECORD,
        description="Initial mode: record (append runs) or replay (read-only)",
    )
    extension: str = Field(
        default=".log",
        description="Suffix appended to path to form the tape file name",
    )
    encoding: str = Field(default="utf-8", description="Text encoding of the tape file")

    @field_validator("extension")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        if not v.startswith(".") or len(v) < 2:
            raise ValueError(f"extension must start with '.' and name a suffix, got {v!r}")
        if "/" in v or "\\" in v:
            raise ValueError(f"extension must not contain path separators, got {v!r}")
        return v


class LoggingSettings(BaseModel):
    """Logging output options.

    Example:
        configure_logging(**settings.logging.model_dump())
    """

    model_config = {"frozen": True}

    level: str = Field(default="INFO", description="Minimum level of recordtape events")
    json_output: bool = Field(default=False, description="Emit JSON lines instead of console text")
    replace_root: bool = Field(
        default=False,
        description="Take over the root logger so host stdlib loggers share the format",
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        normalized = v.upper()
        if not isinstance(logging.getLevelName(normalized), int):
            raise ValueError(f"Unknown log level: {v!r}")
        return normalized


class RecordTapeSettings(BaseModel):
    """Top-level recordtape configuration."""

    model_config = {"frozen": True}

    tape: TapeSettings = Field(default_factory=TapeSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# Regex pattern for ${VAR} or ${VAR:-default} syntax
_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")


def _expand_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Recursively expand ${VAR} and ${VAR:-default} patterns in config values."""

    def replacer(match: re.Match[str]) -> str:
        env_value = os.environ.get(match.group(1))
        if env_value is not None:
            return env_value
        default = match.group(2)
        if default is not None:
            return default
        # Unresolved: keep as-is so validation reports the literal
        return match.group(0)

    def _expand_value(value: Any) -> Any:
        if isinstance(value, str):
            return _ENV_VAR_PATTERN.sub(replacer, value)
        elif isinstance(value, dict):
            return {k: _expand_value(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [_expand_value(item) for item in value]
        else:
            return value

    return {k: _expand_value(v) for k, v in config.items()}


def load_settings(config_path: Path) -> RecordTapeSettings:
    """Load settings from a YAML file with environment variable overrides.

    Precedence:
    1. Environment variables (RECORDTAPE_*) - highest priority
    2. Config file
    3. Defaults from the Pydantic schema - lowest priority

    Environment variable format: RECORDTAPE_TAPE__MODE=replay for nested keys.
    A relative tape path is resolved against the config file's directory.

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="RECORDTAPE",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}
    raw_config = _expand_env_vars(raw_config)

    settings = RecordTapeSettings(**raw_config)
    tape_path = settings.tape.path
    if tape_path is not None and not tape_path.is_absolute():
        tape = settings.tape.model_copy(update={"path": config_path.parent / tape_path})
        settings = settings.model_copy(update={"tape": tape})
    return settings
