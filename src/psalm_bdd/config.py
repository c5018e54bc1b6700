from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Final

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ConfigDict, Field, ValidationError

DEFAULT_PSALM_PATH: Final[str] = "vendor/bin/psalm"
DEFAULT_RUN_DIR: Final[str] = "tests/_run/"
DEFAULT_INSTALLED_PATH: Final[str] = "vendor/composer/installed.json"
DEFAULT_COMPOSER_LOCK: Final[str] = "composer.lock"


class ConfigError(ValueError):
    pass


class SuiteConfig(BaseModel):
    """Settings shared by every scenario of a test session."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    psalm_path: str = Field(default=DEFAULT_PSALM_PATH, min_length=1)
    default_dir: str = Field(default=DEFAULT_RUN_DIR, min_length=1)
    interpreter: str | None = None
    composer_installed_path: str = DEFAULT_INSTALLED_PATH
    upstream_composer_lock: str | None = DEFAULT_COMPOSER_LOCK

    def resolved(self, root: Path) -> SuiteConfig:
        """Return a copy with relative filesystem paths anchored at ``root``."""

        def _anchor(value: str) -> str:
            path = Path(value).expanduser()
            return str(path if path.is_absolute() else (root / path).resolve())

        return self.model_copy(
            update={
                "psalm_path": _anchor(self.psalm_path),
                "default_dir": _anchor(self.default_dir),
                "composer_installed_path": _anchor(self.composer_installed_path),
                "upstream_composer_lock": (
                    None
                    if self.upstream_composer_lock is None
                    else _anchor(self.upstream_composer_lock)
                ),
            }
        )


def load_config_file(path: Path) -> dict[str, object]:
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigError(f"config file is missing: {path.as_posix()}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML config: {path.as_posix()}: {exc}") from exc

    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigError(f"config must be a mapping: {path.as_posix()}")
    return payload


def build_suite_config(
    *,
    file_values: Mapping[str, object] | None = None,
    overrides: Mapping[str, object | None] | None = None,
) -> SuiteConfig:
    """Merge defaults, config file values and explicit overrides, in that order."""
    values: dict[str, object] = dict(file_values or {})
    for key, value in (overrides or {}).items():
        if value is not None and value != "":
            values[key] = value
    try:
        return SuiteConfig.model_validate(values)
    except ValidationError as exc:
        raise ConfigError(f"invalid psalm-bdd configuration: {exc}") from exc
