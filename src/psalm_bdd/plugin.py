from __future__ import annotations

from pathlib import Path
from typing import Final

import pytest

from psalm_bdd.config import SuiteConfig, build_suite_config, load_config_file
from psalm_bdd.runner import Workspace
from psalm_bdd.session import ScenarioContext

_CONFIG_OPTION: Final[str] = "psalm_bdd_config"
_INI_FIELDS: Final[dict[str, tuple[str, str]]] = {
    "psalm_path": ("psalm_path", "Path to the Psalm executable"),
    "psalm_default_dir": ("default_dir", "Directory scenarios write fixtures to and analyze"),
    "psalm_interpreter": ("interpreter", "Command prefix used to launch Psalm, e.g. 'php'"),
    "psalm_composer_installed": (
        "composer_installed_path",
        "composer installed.json or composer.lock listing installed package versions",
    ),
    "psalm_upstream_composer_lock": (
        "upstream_composer_lock",
        "composer.lock linked into the run directory before every scenario",
    ),
}


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("psalm-bdd", "Psalm scenarios")
    group.addoption(
        "--psalm-bdd-config",
        dest=_CONFIG_OPTION,
        default=None,
        help="YAML file with psalm-bdd suite settings",
    )
    parser.addini(_CONFIG_OPTION, "YAML file with psalm-bdd suite settings", default=None)
    for ini_name, (_, help_text) in _INI_FIELDS.items():
        parser.addini(ini_name, help_text, default=None)


def suite_config_from_pytest(config: pytest.Config) -> SuiteConfig:
    root = Path(config.rootpath)
    config_file = config.getoption(_CONFIG_OPTION) or config.getini(_CONFIG_OPTION)
    file_values = load_config_file(root / str(config_file)) if config_file else None
    overrides = {field: config.getini(ini_name) for ini_name, (field, _) in _INI_FIELDS.items()}
    return build_suite_config(file_values=file_values, overrides=overrides).resolved(root)


@pytest.fixture(scope="session")
def psalm_suite_config(pytestconfig: pytest.Config) -> SuiteConfig:
    return suite_config_from_pytest(pytestconfig)


@pytest.fixture(scope="session")
def psalm_run_dir(psalm_suite_config: SuiteConfig) -> Path:
    workspace = Workspace(root=Path(psalm_suite_config.default_dir))
    workspace.prepare_suite_dir()
    return workspace.root


@pytest.fixture
def psalm_scenario(psalm_suite_config: SuiteConfig, psalm_run_dir: Path) -> ScenarioContext:
    """Fresh scenario state over an emptied run directory."""
    del psalm_run_dir
    context = ScenarioContext.from_config(psalm_suite_config)
    context.reset()
    return context
