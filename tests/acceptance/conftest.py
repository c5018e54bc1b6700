from __future__ import annotations

import shlex
import sys
from pathlib import Path

import pytest

from psalm_bdd import SuiteConfig

_HERE = Path(__file__).resolve().parent


@pytest.fixture(scope="session")
def psalm_suite_config(tmp_path_factory: pytest.TempPathFactory) -> SuiteConfig:
    return SuiteConfig(
        psalm_path=str(_HERE / "fake_psalm.py"),
        default_dir=str(tmp_path_factory.mktemp("psalm-run")),
        interpreter=shlex.quote(sys.executable),
        composer_installed_path=str(_HERE / "fixtures" / "installed.json"),
        upstream_composer_lock=None,
    )
