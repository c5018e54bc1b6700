from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from .constraints import normalize_version, satisfies
from .errors import VersionErrorCode, build_not_installed_error, build_version_error

logger = logging.getLogger(__name__)

_PACKAGE_LIST_KEYS: tuple[str, ...] = ("packages", "packages-dev")


@dataclass(frozen=True, slots=True)
class InstalledPackages:
    """Pretty versions of the PHP packages composer installed, keyed by package name."""

    versions: Mapping[str, str] = field(default_factory=dict)
    source: str | None = None

    def __post_init__(self) -> None:
        canonical = {name.lower(): self.versions[name] for name in sorted(self.versions)}
        object.__setattr__(self, "versions", MappingProxyType(canonical))

    @classmethod
    def from_path(cls, path: Path) -> InstalledPackages:
        """Read ``vendor/composer/installed.json`` (composer 1 or 2) or a ``composer.lock``."""
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            logger.debug("no installed package metadata at %s", path)
            return cls(source=path.as_posix())
        except json.JSONDecodeError as exc:
            raise build_version_error(
                VersionErrorCode.E_INSTALLED_METADATA_INVALID,
                f"invalid JSON: {exc}",
                path.as_posix(),
            ) from exc
        return cls.from_payload(payload, source=path.as_posix())

    @classmethod
    def from_payload(cls, payload: object, *, source: str | None = None) -> InstalledPackages:
        entries: list[object] = []
        if isinstance(payload, list):
            entries.extend(payload)
        elif isinstance(payload, Mapping):
            for key in _PACKAGE_LIST_KEYS:
                listed = payload.get(key)
                if isinstance(listed, list):
                    entries.extend(listed)
        else:
            raise build_version_error(
                VersionErrorCode.E_INSTALLED_METADATA_INVALID,
                "package metadata must be a list or an object",
                source or "<payload>",
            )

        versions: dict[str, str] = {}
        for entry in entries:
            if not isinstance(entry, Mapping):
                continue
            name = entry.get("name")
            version = entry.get("pretty_version", entry.get("version"))
            if isinstance(name, str) and isinstance(version, str):
                versions[name] = version
        return cls(versions=versions, source=source)

    def pretty_version(self, package: str) -> str:
        version = self.versions.get(package.lower())
        if version is None:
            raise build_not_installed_error(package)
        return version

    def is_installed(self, package: str) -> bool:
        return package.lower() in self.versions


def package_satisfies(installed: InstalledPackages, package: str, constraint: str) -> bool:
    try:
        current = installed.pretty_version(package)
    except LookupError:
        logger.debug("Package %s is not installed", package)
        return False

    logger.debug("Current version of %s : %s", package, current)
    result = satisfies(current, constraint)
    logger.debug(
        "Comparing %s against %s => %s",
        normalize_version(current),
        constraint,
        "ok" if result else "ko",
    )
    return result
