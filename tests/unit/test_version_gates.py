from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from psalm_bdd.versions import (
    PROCEED,
    InstalledPackages,
    PackageNotInstalledError,
    Skip,
    UnknownOperatorError,
    VersionError,
    VersionErrorCode,
    future_feature,
    has_taint_analysis,
    package_satisfies,
    require_dependency,
    require_taint_analysis,
    require_version,
    supports_no_progress,
)

pytestmark = pytest.mark.unit


def _installed(**versions: str) -> InstalledPackages:
    return InstalledPackages(versions={name.replace("__", "/"): v for name, v in versions.items()})


def test_reads_composer2_installed_json(tmp_path: Path) -> None:
    path = tmp_path / "installed.json"
    path.write_text(
        json.dumps(
            {
                "packages": [
                    {"name": "vimeo/psalm", "version": "5.26.1", "version_normalized": "5.26.1.0"},
                    {"name": "Composer/Semver", "version": "3.4.0"},
                ],
                "dev": True,
            }
        ),
        encoding="utf-8",
    )

    installed = InstalledPackages.from_path(path)

    assert installed.pretty_version("vimeo/psalm") == "5.26.1"
    assert installed.pretty_version("composer/semver") == "3.4.0"
    assert installed.source == path.as_posix()


def test_reads_composer1_list_and_composer_lock() -> None:
    from_list = InstalledPackages.from_payload([{"name": "vimeo/psalm", "version": "3.18.2"}])
    from_lock = InstalledPackages.from_payload(
        {
            "packages": [{"name": "amphp/amp", "version": "v2.6.2"}],
            "packages-dev": [{"name": "vimeo/psalm", "version": "dev-master"}],
        }
    )

    assert from_list.pretty_version("vimeo/psalm") == "3.18.2"
    assert from_lock.pretty_version("amphp/amp") == "v2.6.2"
    assert from_lock.pretty_version("vimeo/psalm") == "dev-master"


def test_missing_metadata_file_means_nothing_installed(tmp_path: Path) -> None:
    installed = InstalledPackages.from_path(tmp_path / "missing.json")

    assert not installed.is_installed("vimeo/psalm")
    with pytest.raises(PackageNotInstalledError):
        installed.pretty_version("vimeo/psalm")


def test_invalid_metadata_raises(tmp_path: Path) -> None:
    path = tmp_path / "installed.json"
    path.write_text("{broken", encoding="utf-8")

    with pytest.raises(VersionError) as exc_info:
        InstalledPackages.from_path(path)

    assert exc_info.value.detail.code == VersionErrorCode.E_INSTALLED_METADATA_INVALID.value


def test_package_satisfies_logs_and_handles_missing_packages(
    caplog: pytest.LogCaptureFixture,
) -> None:
    installed = _installed(vimeo__psalm="5.26.1")

    with caplog.at_level(logging.DEBUG, logger="psalm_bdd.versions.installed"):
        assert package_satisfies(installed, "vimeo/psalm", ">=5.0")
        assert not package_satisfies(installed, "psalm/plugin-phpunit", ">=0.1")

    assert "Current version of vimeo/psalm : 5.26.1" in caplog.text
    assert "=> ok" in caplog.text
    assert "Package psalm/plugin-phpunit is not installed" in caplog.text


def test_capabilities_follow_psalm_version() -> None:
    old = _installed(vimeo__psalm="3.3.0")
    new = _installed(vimeo__psalm="3.10.0")

    assert not supports_no_progress(old)
    assert not has_taint_analysis(old)
    assert supports_no_progress(new)
    assert has_taint_analysis(new)
    assert not has_taint_analysis(_installed())


def test_pre_releases_pass_minimum_version_checks() -> None:
    candidate = _installed(vimeo__psalm="3.4.0-RC1")

    assert supports_no_progress(candidate)
    assert has_taint_analysis(_installed(vimeo__psalm="3.10.0-beta1"))


@pytest.mark.parametrize(
    ("phrase", "version", "current", "proceeds"),
    [
        ("newer than", "4.0", "5.26.1", True),
        ("newer than", "5.26.1", "5.26.1", False),
        ("older than", "5.0", "4.30.0", True),
        ("older than", "5.0", "5.0.0", False),
        ("older than", "5.0", "5.0.0-beta1", False),
    ],
)
def test_require_version(phrase: str, version: str, current: str, proceeds: bool) -> None:
    outcome = require_version(_installed(vimeo__psalm=current), phrase, version, "issue #42")

    if proceeds:
        assert outcome == PROCEED
    else:
        op = ">" if phrase == "newer than" else "<"
        assert outcome == Skip(f"This scenario requires Psalm {op} {version} because of issue #42")


def test_require_version_rejects_unknown_phrase() -> None:
    with pytest.raises(UnknownOperatorError):
        require_version(_installed(vimeo__psalm="5.0.0"), "same as", "5.0", "reason")


def test_require_dependency() -> None:
    installed = _installed(vimeo__psalm="5.26.1")

    assert require_dependency(installed, "vimeo/psalm", "^5.0") == PROCEED
    assert require_dependency(installed, "vimeo/psalm", "^4.0") == Skip(
        "This scenario requires vimeo/psalm to match ^4.0"
    )
    assert require_dependency(installed, "phpunit/phpunit", "*") == Skip(
        "This scenario requires phpunit/phpunit to match *"
    )


def test_require_taint_analysis_and_future_feature() -> None:
    assert require_taint_analysis(_installed(vimeo__psalm="4.0.0")) == PROCEED
    assert require_taint_analysis(_installed(vimeo__psalm="3.9.0")) == Skip(
        "This scenario requires Psalm with taint analysis (3.10+)"
    )
    assert future_feature("vimeo/psalm#1234") == Skip(
        "Future functionality that Psalm has yet to support: vimeo/psalm#1234"
    )
