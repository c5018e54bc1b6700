from __future__ import annotations

import errno
import hashlib
import os
from pathlib import Path

import pytest

from psalm_bdd.runner import (
    DEFAULT_ANALYZER_CONFIG,
    Workspace,
    WorkspaceError,
    render_analyzer_config,
    render_autoload_map,
)

pytestmark = pytest.mark.unit


def test_prepare_suite_dir_creates_nested_directory(tmp_path: Path) -> None:
    workspace = Workspace(root=tmp_path / "tests" / "_run")

    workspace.prepare_suite_dir()
    workspace.prepare_suite_dir()

    assert workspace.root.is_dir()


def test_prepare_suite_dir_replaces_plain_file(tmp_path: Path) -> None:
    root = tmp_path / "_run"
    root.write_text("stale", encoding="utf-8")

    Workspace(root=root).prepare_suite_dir()

    assert root.is_dir()


def test_reset_empties_directory_and_links_lock(tmp_path: Path) -> None:
    lock = tmp_path / "composer.lock"
    lock.write_text('{"packages": []}', encoding="utf-8")
    workspace = Workspace(root=tmp_path / "_run", upstream_composer_lock=lock)
    workspace.prepare_suite_dir()
    (workspace.root / "old.php").write_text("<?php", encoding="utf-8")
    (workspace.root / "src").mkdir()
    (workspace.root / "src" / "Foo.php").write_text("<?php", encoding="utf-8")

    workspace.reset()

    assert sorted(entry.name for entry in workspace.root.iterdir()) == ["composer.lock"]
    assert (workspace.root / "composer.lock").read_text(encoding="utf-8") == '{"packages": []}'


def test_reset_copies_lock_across_filesystems(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def _cross_device_link(src: object, dst: object) -> None:
        raise OSError(errno.EXDEV, "Invalid cross-device link")

    monkeypatch.setattr(os, "link", _cross_device_link)
    lock = tmp_path / "composer.lock"
    lock.write_text('{"packages": []}', encoding="utf-8")
    workspace = Workspace(root=tmp_path / "_run", upstream_composer_lock=lock)

    workspace.reset()

    assert (workspace.root / "composer.lock").read_text(encoding="utf-8") == '{"packages": []}'


def test_reset_without_upstream_lock(tmp_path: Path) -> None:
    workspace = Workspace(root=tmp_path / "_run", upstream_composer_lock=tmp_path / "absent.lock")

    workspace.reset()

    assert list(workspace.root.iterdir()) == []


def test_write_code_names_file_after_content_hash(tmp_path: Path) -> None:
    workspace = Workspace(root=tmp_path)
    preamble = "<?php\nnamespace App;\n"
    code = "function f(): string { return 1; }"

    path = workspace.write_code(code, preamble)

    digest = hashlib.sha1((preamble + code).encode("utf-8")).hexdigest()  # noqa: S324
    assert path == (tmp_path / f"{digest}.php").resolve()
    assert path.read_text(encoding="utf-8") == preamble + code


def test_write_code_in_creates_subdirectories(tmp_path: Path) -> None:
    path = Workspace(root=tmp_path).write_code_in("src/Foo.php", "<?php class Foo {}")

    assert path.read_text(encoding="utf-8") == "<?php class Foo {}"
    assert path.parent.name == "src"


def test_write_outside_run_directory_is_refused(tmp_path: Path) -> None:
    workspace = Workspace(root=tmp_path / "_run")
    workspace.prepare_suite_dir()

    with pytest.raises(WorkspaceError):
        workspace.write_code_in("../escape.php", "<?php")


def test_analyzer_config_placeholder() -> None:
    plain = render_analyzer_config(None, has_autoload=False)
    with_autoload = render_analyzer_config(None, has_autoload=True)

    assert plain == DEFAULT_ANALYZER_CONFIG.replace("%s", "")
    assert '<psalm totallyTyped="true" autoloader="autoload.php">' in with_autoload
    assert render_analyzer_config("<psalm %s/>", has_autoload=True) == (
        '<psalm autoloader="autoload.php"/>'
    )
    assert render_analyzer_config("<psalm/>", has_autoload=True) == "<psalm/>"


def test_autoload_map_skips_header_and_quotes_entries(tmp_path: Path) -> None:
    workspace = Workspace(root=tmp_path)
    rows = [
        ["Class", "File"],
        ["App\\Foo", "src/Foo.php"],
        ["O'Brien", "src/OBrien.php"],
    ]

    path = workspace.write_autoload_map(rows)

    php = path.read_text(encoding="utf-8")
    assert path.name == "autoload.php"
    assert php == render_autoload_map(rows)
    assert "spl_autoload_register(function(string $class) {" in php
    assert "\n'App\\\\Foo' => 'src/Foo.php'," in php
    assert "\n'O\\'Brien' => 'src/OBrien.php']" in php
    assert "'Class'" not in php
