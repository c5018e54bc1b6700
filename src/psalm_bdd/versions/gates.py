"""Preconditions that decide whether a scenario runs at all.

A gate never raises for an unmet precondition; it returns :class:`Skip` with
the reason to report, and the step layer turns that into a skipped test.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, TypeAlias

from .constraints import VERSION_OPERATORS
from .errors import VersionErrorCode, build_version_error
from .installed import InstalledPackages, package_satisfies

PSALM_PACKAGE: Final[str] = "vimeo/psalm"
TAINT_ANALYSIS_CONSTRAINT: Final[str] = ">=3.10.0"
NO_PROGRESS_CONSTRAINT: Final[str] = ">=3.4.0"


@dataclass(frozen=True, slots=True)
class Proceed:
    pass


@dataclass(frozen=True, slots=True)
class Skip:
    reason: str


GateOutcome: TypeAlias = Proceed | Skip

PROCEED: Final[Proceed] = Proceed()


def has_taint_analysis(installed: InstalledPackages) -> bool:
    return package_satisfies(installed, PSALM_PACKAGE, TAINT_ANALYSIS_CONSTRAINT)


def supports_no_progress(installed: InstalledPackages) -> bool:
    return package_satisfies(installed, PSALM_PACKAGE, NO_PROGRESS_CONSTRAINT)


def require_version(
    installed: InstalledPackages,
    phrase: str,
    version: str,
    reason: str,
) -> GateOutcome:
    op = VERSION_OPERATORS.get(phrase)
    if op is None:
        raise build_version_error(VersionErrorCode.E_OPERATOR_UNKNOWN, "Unknown operator", phrase)
    if package_satisfies(installed, PSALM_PACKAGE, op + version):
        return PROCEED
    return Skip(f"This scenario requires Psalm {op} {version} because of {reason}")


def require_dependency(installed: InstalledPackages, package: str, constraint: str) -> GateOutcome:
    if package_satisfies(installed, package, constraint):
        return PROCEED
    return Skip(f"This scenario requires {package} to match {constraint}")


def require_taint_analysis(installed: InstalledPackages) -> GateOutcome:
    if has_taint_analysis(installed):
        return PROCEED
    return Skip("This scenario requires Psalm with taint analysis (3.10+)")


def future_feature(ref: str) -> GateOutcome:
    return Skip(f"Future functionality that Psalm has yet to support: {ref}")
