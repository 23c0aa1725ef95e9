"""
authkeep configuration — loads and merges config from multiple sources.

Precedence (highest to lowest):
1. Explicit overrides (passed in code)
2. Environment variables (AUTHKEEP_*)
3. Project config (./authkeep.toml)
4. User config (~/.authkeep/config.toml)
5. Defaults (hardcoded)

Environment variable mapping:
    AUTHKEEP_STORE_BACKEND → store.backend
    AUTHKEEP_STORE_PATH → store.path
    AUTHKEEP_KEYS_MAX_CONCURRENCY → keys.max_concurrency
    AUTHKEEP_LOG_LEVEL → logging.level
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from authkeep.core.errors import ConfigError

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Config Sub-Models
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class StoreConfig(BaseModel):
    """Document store configuration."""

    backend: str = "sqlite"
    path: str = "~/.authkeep/auth.db"
    table: str = "auth_documents"

    def resolved_path(self) -> Path:
        return Path(self.path).expanduser()


class KeysConfig(BaseModel):
    """Keyed-record access configuration."""

    max_concurrency: int = Field(default=0, ge=0)  # 0 = unbounded


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "WARNING"
    log_dir: str = "~/.authkeep/logs"
    diagnostics: bool = False

    @property
    def level_number(self) -> int:
        level = logging.getLevelName(self.level.upper())
        return level if isinstance(level, int) else logging.WARNING


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Main Config
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class AuthKeepConfig(BaseModel):
    """Root configuration for authkeep."""

    store: StoreConfig = Field(default_factory=StoreConfig)
    keys: KeysConfig = Field(default_factory=KeysConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @staticmethod
    def load(
        overrides: dict[str, Any] | None = None,
        project_path: Path | None = None,
        user_path: Path | None = None,
    ) -> AuthKeepConfig:
        """
        Load configuration from all sources and merge.

        Precedence: overrides > env vars > project toml > user toml > defaults
        """
        merged: dict[str, Any] = {}

        # Layer 1: User config (~/.authkeep/config.toml)
        user_config_path = user_path or Path.home() / ".authkeep" / "config.toml"
        if user_config_path.exists():
            _deep_merge(merged, _load_toml(user_config_path))

        # Layer 2: Project config (./authkeep.toml)
        project_config_path = project_path or Path.cwd() / "authkeep.toml"
        if project_config_path.exists():
            _deep_merge(merged, _load_toml(project_config_path))

        # Layer 3: Environment variables
        _deep_merge(merged, _load_from_env())

        # Layer 4: Explicit overrides
        if overrides:
            _deep_merge(merged, overrides)

        _substitute_env_vars(merged)

        try:
            return AuthKeepConfig(**merged)
        except Exception as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    def get_home(self) -> Path:
        """Directory holding the default database (~/.authkeep)."""
        return self.store.resolved_path().parent


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Internal Helpers
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def _load_toml(path: Path) -> dict[str, Any]:
    """Load a TOML file."""
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except Exception as e:
        raise ConfigError(f"Failed to load config from {path}: {e}") from e


def _load_from_env() -> dict[str, Any]:
    """Load configuration from AUTHKEEP_* environment variables."""
    result: dict[str, Any] = {}

    env_mapping = {
        "AUTHKEEP_STORE_BACKEND": ("store", "backend"),
        "AUTHKEEP_STORE_PATH": ("store", "path"),
        "AUTHKEEP_STORE_TABLE": ("store", "table"),
        "AUTHKEEP_KEYS_MAX_CONCURRENCY": ("keys", "max_concurrency"),
        "AUTHKEEP_LOG_LEVEL": ("logging", "level"),
        "AUTHKEEP_LOG_DIR": ("logging", "log_dir"),
        "AUTHKEEP_LOG_DIAGNOSTICS": ("logging", "diagnostics"),
    }

    for env_var, (section, key) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            result.setdefault(section, {})[key] = _convert_value(value)

    return result


def _convert_value(value: str) -> Any:
    """Convert string value to appropriate type."""
    if value.lower() in ("true", "yes"):
        return True
    if value.lower() in ("false", "no"):
        return False
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    return value


def _deep_merge(base: dict, override: dict) -> None:
    """Deep merge override into base (mutates base)."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value


def _substitute_env_vars(data: dict) -> None:
    """Recursively substitute ${ENV_VAR} patterns in string values."""
    pattern = re.compile(r"\$\{([^}]+)\}")

    def substitute(value: str) -> str:
        for var_name in pattern.findall(value):
            value = value.replace(f"${{{var_name}}}", os.environ.get(var_name, ""))
        return value

    for key, value in data.items():
        if isinstance(value, dict):
            _substitute_env_vars(value)
        elif isinstance(value, str):
            data[key] = substitute(value)
        elif isinstance(value, list):
            data[key] = [substitute(v) if isinstance(v, str) else v for v in value]
