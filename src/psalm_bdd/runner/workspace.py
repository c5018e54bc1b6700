from __future__ import annotations

import hashlib
import logging
import os
import shutil
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final

logger = logging.getLogger(__name__)

ANALYZER_CONFIG_NAME: Final[str] = "psalm.xml"
AUTOLOAD_FILE_NAME: Final[str] = "autoload.php"
AUTOLOADER_PLACEHOLDER: Final[str] = "%s"
AUTOLOADER_ATTRIBUTE: Final[str] = f'autoloader="{AUTOLOAD_FILE_NAME}"'

DEFAULT_ANALYZER_CONFIG: Final[str] = (
    '<?xml version="1.0"?>\n'
    '<psalm totallyTyped="true" %s>\n'
    "  <projectFiles>\n"
    '    <directory name="."/>\n'
    "  </projectFiles>\n"
    "</psalm>\n"
)

_AUTOLOAD_TEMPLATE: Final[str] = """<?php
spl_autoload_register(function(string $class) {{
    /** @var ?array<string,string> $classes */
    static $classes = null;
    if (null === $classes) {{
        $classes = [{entries}];
    }}
    if (array_key_exists($class, $classes)) {{
        /** @psalm-suppress UnresolvableInclude */
        include $classes[$class];
    }}
}});
"""


class WorkspaceError(RuntimeError):
    pass


def _php_single_quoted(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def render_autoload_map(rows: Sequence[Sequence[object]]) -> str:
    """Render ``class | file`` rows (header row first) as a PHP class-map autoloader."""
    entries: list[str] = []
    for row in list(rows)[1:]:
        if len(row) < 2:  # noqa: PLR2004
            raise ValueError(f"autoload row needs a class and a file, got {list(row)!r}")
        class_name, file_name = _php_single_quoted(str(row[0])), _php_single_quoted(str(row[1]))
        entries.append(f"\n{class_name} => {file_name}")
    return _AUTOLOAD_TEMPLATE.format(entries=",".join(entries))


def render_analyzer_config(template: str | None, *, has_autoload: bool) -> str:
    source = template or DEFAULT_ANALYZER_CONFIG
    return source.replace(AUTOLOADER_PLACEHOLDER, AUTOLOADER_ATTRIBUTE if has_autoload else "")


@dataclass(frozen=True, slots=True)
class Workspace:
    """Directory the fixtures of one scenario are written to and analyzed in."""

    root: Path
    upstream_composer_lock: Path | None = None

    def prepare_suite_dir(self) -> None:
        if self.root.exists():
            if self.root.is_dir():
                return
            self.root.unlink()
        try:
            self.root.mkdir(mode=0o755, parents=True, exist_ok=True)
        except OSError as exc:
            raise WorkspaceError(f"Failed to create dir: {self.root}") from exc

    def reset(self) -> None:
        self.prepare_suite_dir()
        for entry in self.root.iterdir():
            if entry.is_dir() and not entry.is_symlink():
                shutil.rmtree(entry)
            else:
                entry.unlink()

        lock = self.upstream_composer_lock
        if lock is not None and lock.is_file():
            logger.debug("Linking composer.lock to working directory.")
            target = self.root / "composer.lock"
            try:
                os.link(lock, target)
            except OSError as exc:
                logger.debug("cannot link %s (%s), copying it instead", lock, exc)
                shutil.copy2(lock, target)

    def path_for(self, filename: str) -> Path:
        target = (self.root / filename).resolve()
        if not target.is_relative_to(self.root.resolve()):
            raise WorkspaceError(f"refusing to write outside the run directory: {filename}")
        return target

    def write_file(self, filename: str, contents: str) -> Path:
        target = self.path_for(filename)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(contents, encoding="utf-8")
        return target

    def write_code(self, code: str, preamble: str = "") -> Path:
        source = preamble + code
        digest = hashlib.sha1(source.encode("utf-8"), usedforsecurity=False).hexdigest()
        return self.write_file(f"{digest}.php", source)

    def write_code_in(self, filename: str, code: str) -> Path:
        return self.write_file(filename, code)

    def write_analyzer_config(self, template: str | None, *, has_autoload: bool) -> Path:
        return self.write_file(
            ANALYZER_CONFIG_NAME,
            render_analyzer_config(template, has_autoload=has_autoload),
        )

    def write_autoload_map(self, rows: Sequence[Sequence[object]]) -> Path:
        return self.write_file(AUTOLOAD_FILE_NAME, render_autoload_map(rows))
