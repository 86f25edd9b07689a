"""Settings for the goconv CLI.

Settings come from three sources, highest priority first:
    - Environment variables (GOCONV_* prefix)
    - An optional TOML/JSON settings file
    - Default values

Only the CLI reads settings. The analysis engine receives the resulting
RuleTables and disabled rule set as plain values.

Key components:
    - LintSettings: Main settings model
    - load_settings(): Safe settings loading with fallback
    - SettingsLoadResult: Metadata about the settings source
"""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Mapping
from contextlib import nullcontext
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from unittest.mock import patch

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from goconv.core.errors import ConfigurationError
from goconv.engine.tables import DEFAULT_RULE_TABLES, RuleTables
from goconv.engine.types import RuleId

CONFIG_ENV_VAR = "GOCONV_CONFIG"
DEFAULT_CONFIG_NAME = "goconv.toml"


class LintSettings(BaseSettings):
    """User-tunable settings for a goconv run."""

    model_config = SettingsConfigDict(
        env_prefix="GOCONV_",
        extra="ignore",
    )

    log_level: str = Field(default="WARNING", description="Log level for goconv output.")
    include_tests: bool = Field(default=False, description="Also analyse *_test.go files.")
    jobs: int = Field(default=1, ge=1, description="Packages analysed in parallel.")
    exclude_dirs: list[str] = Field(
        default_factory=lambda: ["vendor", "testdata", "node_modules"],
        description="Directory names skipped during package discovery.",
    )
    disabled_rules: list[str] = Field(
        default_factory=list, description="Rule identifiers whose diagnostics are dropped."
    )
    banned_package_names: dict[str, str] = Field(
        default_factory=dict, description="Extra package names to deny, with a reason."
    )
    banned_import_paths: dict[str, str] = Field(
        default_factory=dict, description="Extra import paths to deny, with a suggestion."
    )

    @field_validator("disabled_rules", mode="after")
    @classmethod
    def validate_rule_names(cls, v: list[str]) -> list[str]:
        normalized = [name.strip().upper() for name in v]
        unknown = [name for name in normalized if name not in RuleId.__members__]
        if unknown:
            raise ValueError(f"Unknown rule identifiers: {', '.join(unknown)}")
        return normalized

    def disabled_rule_ids(self) -> frozenset[RuleId]:
        return frozenset(RuleId[name] for name in self.disabled_rules)

    def rule_tables(self) -> RuleTables:
        if not self.banned_package_names and not self.banned_import_paths:
            return DEFAULT_RULE_TABLES
        return DEFAULT_RULE_TABLES.with_overrides(
            banned_package_names=self.banned_package_names,
            banned_import_paths=self.banned_import_paths,
        )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
    ]:
        # Environment variables override settings file entries.
        return (env_settings, init_settings, dotenv_settings, file_secret_settings)


@dataclass
class SettingsLoadResult:
    path: Path
    file_loaded: bool
    env_overrides: set[str]
    error: str | None = None


def _resolve_config_path(config_path: Path | None, env_vars: Mapping[str, str]) -> Path:
    candidate = config_path or env_vars.get(CONFIG_ENV_VAR) or (Path.cwd() / DEFAULT_CONFIG_NAME)
    return Path(candidate).expanduser()


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read {path}: {exc}") from exc

    parser = json.loads if path.suffix.lower() == ".json" else tomllib.loads
    try:
        data = parser(raw)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
        raise ConfigurationError(f"Syntax error in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings root in {path} must be a mapping.")

    # Allow the settings to live under [tool.goconv] as in pyproject.toml.
    tool_section = data.get("tool", {})
    if isinstance(tool_section, dict) and isinstance(tool_section.get("goconv"), dict):
        return tool_section["goconv"]
    return data


def _detect_env_overrides(env_vars: Mapping[str, str]) -> set[str]:
    prefix = LintSettings.model_config.get("env_prefix", "")
    return {
        name for name in LintSettings.model_fields if f"{prefix}{name}".upper() in env_vars
    }


def load_settings(
    config_path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> tuple[LintSettings, SettingsLoadResult]:
    """
    Load settings with Safe Mode fallback.
    If the file is invalid, returns default settings + error message.
    """
    env_vars: Mapping[str, str] = os.environ if env is None else {**os.environ, **env}
    resolved_path = _resolve_config_path(config_path, env_vars)
    env_overrides = _detect_env_overrides(env_vars)

    error: str | None = None
    file_loaded = False
    file_data: dict[str, Any] = {}

    try:
        file_data = _read_config_file(resolved_path)
        file_loaded = resolved_path.exists()
    except ConfigurationError as exc:
        error = str(exc)

    context_manager = (
        patch.dict(os.environ, env_vars, clear=False) if env is not None else nullcontext()
    )

    try:
        with context_manager:
            settings = LintSettings(**file_data)
    except ValidationError as exc:
        error = str(exc)
        settings = LintSettings.model_construct()

    load_result = SettingsLoadResult(
        path=resolved_path,
        file_loaded=file_loaded,
        env_overrides=env_overrides,
        error=error,
    )
    return settings, load_result


__all__ = [
    "CONFIG_ENV_VAR",
    "LintSettings",
    "SettingsLoadResult",
    "load_settings",
]
