"""Configuration loading helpers for warpkeys."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .models import GlobalConfig

CONFIG_EXTENSIONS = (".yaml", ".yml", ".json")
HOME_ENV_VAR = "WARPKEYS_HOME"


class ConfigError(Exception):
    """Raised when configuration cannot be loaded or fails validation."""


def _read_file(path: Path) -> dict:
    text = path.read_text(encoding="utf-8")
    if path.suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file must contain a mapping: {path}")
    return data


def _describe(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ())) or "config"
        parts.append(f"{location}: {error.get('msg')}")
    return "; ".join(parts)


@dataclass(slots=True)
class ConfigLocator:
    """Resolve the project home and its log directory."""

    project_root: Path | None = None
    logs_dir: Path | None = None

    def __post_init__(self) -> None:
        env_root = os.environ.get(HOME_ENV_VAR)
        if env_root:
            root = Path(env_root).expanduser().resolve()
        else:
            root = (self.project_root or Path.cwd()).resolve()
        self.project_root = root
        self.logs_dir = (root / "logs").resolve()

    def resolve(self, path: Path) -> Path:
        """Anchor relative paths at the project root."""

        if path.is_absolute():
            return path
        return self.project_root / path


class ConfigRepository:
    """Repository encapsulating config IO and schema validation."""

    def __init__(self, locator: ConfigLocator | None = None) -> None:
        self.locator = locator or ConfigLocator()

    def load_global_config(self, path: Path | None = None, **overrides: Any) -> GlobalConfig:
        """Build the run configuration from an optional file plus CLI overrides.

        Overrides whose value is ``None`` are ignored so unset CLI options keep
        the file (or default) value. Any parse or validation failure surfaces
        as :class:`ConfigError`.
        """

        payload: dict[str, Any] = {}
        if path is not None:
            if path.suffix not in CONFIG_EXTENSIONS:
                raise ConfigError(f"Unsupported configuration format: {path.suffix or path.name}")
            if not path.exists():
                raise ConfigError(f"Configuration file not found: {path}")
            try:
                payload = _read_file(path)
            except (yaml.YAMLError, json.JSONDecodeError, UnicodeDecodeError) as exc:
                raise ConfigError(f"Cannot parse configuration file {path}: {exc}") from exc
        payload.update({key: value for key, value in overrides.items() if value is not None})
        try:
            config = GlobalConfig.model_validate(payload)
        except ValidationError as exc:
            raise ConfigError(_describe(exc)) from exc
        output_dir = self.locator.resolve(config.output_dir)
        if output_dir != config.output_dir:
            config = config.model_copy(update={"output_dir": output_dir})
        return config


__all__ = ["CONFIG_EXTENSIONS", "ConfigError", "ConfigLocator", "ConfigRepository", "HOME_ENV_VAR"]
