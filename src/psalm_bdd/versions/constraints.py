"""Composer-flavoured version normalization and constraint matching.

Versions of PHP packages follow composer's rules rather than PEP 440, so they
are normalized here: four numeric parts, an optional stability suffix, and
development branches sorting above every release.
"""

from __future__ import annotations

import operator
import re
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Final

from .errors import VersionErrorCode, build_version_error


class Stability(IntEnum):
    DEV = 0
    ALPHA = 1
    BETA = 2
    RC = 3
    STABLE = 4
    PATCH = 5


VERSION_OPERATORS: Final[dict[str, str]] = {
    "newer than": ">",
    "older than": "<",
}

DEV_BRANCH_PART: Final[int] = 9999999

_RELEASE_PARTS: Final[int] = 4
_STABILITY_ALIASES: Final[dict[str, Stability]] = {
    "dev": Stability.DEV,
    "a": Stability.ALPHA,
    "alpha": Stability.ALPHA,
    "b": Stability.BETA,
    "beta": Stability.BETA,
    "rc": Stability.RC,
    "stable": Stability.STABLE,
    "p": Stability.PATCH,
    "pl": Stability.PATCH,
    "patch": Stability.PATCH,
}
_VERSION_PATTERN = re.compile(
    r"""
    ^v?(?P<release>\d+(?:\.\d+){0,3})
    (?:[._-]?(?P<stability>stable|beta|b|rc|alpha|a|patch|pl|p)(?:[.-]?(?P<number>\d+))?)?
    (?P<dev>[._-]?dev)?$
    """,
    flags=re.IGNORECASE | re.VERBOSE,
)
_BRANCH_ALIAS_PATTERN = re.compile(r"^v?(?P<release>\d+(?:\.\d+){0,2})\.[x*]-dev$", re.IGNORECASE)
_COMPARATORS: Final[dict[str, Callable[[object, object], bool]]] = {
    ">": operator.gt,
    "<": operator.lt,
    ">=": operator.ge,
    "<=": operator.le,
    "==": operator.eq,
    "=": operator.eq,
    "!=": operator.ne,
    "<>": operator.ne,
}
_OR_SPLIT = re.compile(r"\s*\|\|?\s*")
_AND_SPLIT = re.compile(r"\s*,\s*|\s+")
_OPERATOR_SPACING = re.compile(r"(>=|<=|<>|!=|==|>|<|=|\^|~)\s+")
_HYPHEN_RANGE = re.compile(r"^(?P<low>\S+)\s+-\s+(?P<high>\S+)$")
_ATOM_PATTERN = re.compile(r"^(?P<op>>=|<=|<>|!=|==|>|<|=|\^|~)?(?P<version>\S+)$")
_WILDCARD_PATTERN = re.compile(r"^v?(?P<release>\d+(?:\.\d+){0,2})\.[x*]$", re.IGNORECASE)
_GIVEN_RELEASE = re.compile(r"^v?(\d+(?:\.\d+){0,3})")
# bounds of these operators sit below the pre-releases of an unsuffixed version
_DEV_FLOORED_OPERATORS: Final[frozenset[str]] = frozenset({"<", ">="})
_FULL_RELEASE_PARTS: Final[int] = 3


@dataclass(frozen=True, slots=True, order=True)
class NormalizedVersion:
    release: tuple[int, int, int, int]
    stability: Stability = Stability.STABLE
    stability_number: int = 0

    def __str__(self) -> str:
        text = ".".join(str(part) for part in self.release)
        if self.stability is Stability.STABLE:
            return text
        suffix = self.stability.name.lower() if self.stability is not Stability.RC else "RC"
        if self.stability is Stability.DEV:
            return f"{text}-dev"
        return f"{text}-{suffix}{self.stability_number or ''}"


def _pad_release(parts: list[int], filler: int = 0) -> tuple[int, int, int, int]:
    padded = parts + [filler] * (_RELEASE_PARTS - len(parts))
    return (padded[0], padded[1], padded[2], padded[3])


def _dev_branch() -> NormalizedVersion:
    return NormalizedVersion(release=_pad_release([], DEV_BRANCH_PART), stability=Stability.DEV)


def normalize_version(text: str) -> NormalizedVersion:
    stripped = text.strip()
    if "@" in stripped:
        stripped = stripped.split("@", 1)[0]
    if "+" in stripped:
        stripped = stripped.split("+", 1)[0]

    if stripped.lower().startswith("dev-") or stripped == str(DEV_BRANCH_PART) + "-dev":
        return _dev_branch()

    branch = _BRANCH_ALIAS_PATTERN.fullmatch(stripped)
    if branch is not None:
        parts = [int(part) for part in branch.group("release").split(".")]
        return NormalizedVersion(
            release=_pad_release(parts, DEV_BRANCH_PART),
            stability=Stability.DEV,
        )

    match = _VERSION_PATTERN.fullmatch(stripped)
    if match is None:
        raise build_version_error(
            VersionErrorCode.E_VERSION_INVALID, "invalid version string", text
        )

    release = _pad_release([int(part) for part in match.group("release").split(".")])
    if match.group("dev") is not None:
        return NormalizedVersion(release=release, stability=Stability.DEV)
    stability_text = match.group("stability")
    if stability_text is None:
        return NormalizedVersion(release=release)
    number = match.group("number")
    return NormalizedVersion(
        release=release,
        stability=_STABILITY_ALIASES[stability_text.lower()],
        stability_number=int(number) if number is not None else 0,
    )


def compare_versions(left: str, op: str, right: str) -> bool:
    comparator = _COMPARATORS.get(op)
    if comparator is None:
        raise build_version_error(VersionErrorCode.E_OPERATOR_UNKNOWN, "unknown operator", op)
    return comparator(normalize_version(left), normalize_version(right))


@dataclass(frozen=True, slots=True)
class _Bound:
    op: str
    version: NormalizedVersion

    def admits(self, candidate: NormalizedVersion) -> bool:
        return _COMPARATORS[self.op](candidate, self.version)


def _lowest_of(parts: list[int]) -> NormalizedVersion:
    return NormalizedVersion(release=_pad_release(parts), stability=Stability.DEV)


def _bump(parts: list[int], index: int) -> list[int]:
    return [*parts[:index], parts[index] + 1]


def _caret_bounds(parts: list[int]) -> tuple[_Bound, ...]:
    index = next((position for position, part in enumerate(parts) if part != 0), len(parts) - 1)
    return (
        _Bound(">=", _lowest_of(parts)),
        _Bound("<", _lowest_of(_bump(parts, index))),
    )


def _tilde_bounds(parts: list[int]) -> tuple[_Bound, ...]:
    index = max(len(parts) - 2, 0)
    return (
        _Bound(">=", _lowest_of(parts)),
        _Bound("<", _lowest_of(_bump(parts, index))),
    )


def _release_parts(text: str, constraint: str) -> list[int]:
    release = normalize_version(text)
    if release.stability is Stability.DEV and release.release[0] == DEV_BRANCH_PART:
        raise build_version_error(
            VersionErrorCode.E_CONSTRAINT_INVALID,
            "range operators need a numeric version",
            constraint,
        )
    return list(release.release[: _given_part_count(text)])


def _given_part_count(text: str) -> int:
    given = _GIVEN_RELEASE.match(text.strip())
    return len(given.group(1).split(".")) if given is not None else _RELEASE_PARTS


def _has_modifier(text: str, version: NormalizedVersion) -> bool:
    return version.stability is not Stability.STABLE or "stable" in text.split("@", 1)[0].lower()


def _dev_floor(text: str) -> NormalizedVersion:
    version = normalize_version(text)
    if _has_modifier(text, version):
        return version
    return replace(version, stability=Stability.DEV)


def _range_upper_bound(text: str) -> _Bound:
    """Upper end of ``low - high``; a partial ``high`` covers every release it prefixes."""
    version = normalize_version(text)
    count = _given_part_count(text)
    if count >= _FULL_RELEASE_PARTS or _has_modifier(text, version):
        return _Bound("<=", version)
    return _Bound("<", _lowest_of(_bump(list(version.release[:count]), count - 1)))


def _atom_bounds(atom: str, constraint: str) -> tuple[_Bound, ...]:
    if atom in {"*", "x", "X"}:
        return ()

    wildcard = _WILDCARD_PATTERN.fullmatch(atom)
    if wildcard is not None:
        parts = [int(part) for part in wildcard.group("release").split(".")]
        return (
            _Bound(">=", _lowest_of(parts)),
            _Bound("<", _lowest_of(_bump(parts, len(parts) - 1))),
        )

    match = _ATOM_PATTERN.fullmatch(atom)
    if match is None:
        raise build_version_error(
            VersionErrorCode.E_CONSTRAINT_INVALID,
            "invalid constraint atom",
            constraint,
        )
    op = match.group("op") or "=="
    version_text = match.group("version")
    if op == "^":
        return _caret_bounds(_release_parts(version_text, constraint))
    if op == "~":
        return _tilde_bounds(_release_parts(version_text, constraint))
    if op in _DEV_FLOORED_OPERATORS:
        return (_Bound(op, _dev_floor(version_text)),)
    return (_Bound(op, normalize_version(version_text)),)


def _group_bounds(group: str, constraint: str) -> tuple[_Bound, ...]:
    hyphen = _HYPHEN_RANGE.fullmatch(group)
    if hyphen is not None:
        return (
            _Bound(">=", _dev_floor(hyphen.group("low"))),
            _range_upper_bound(hyphen.group("high")),
        )
    compact = _OPERATOR_SPACING.sub(r"\1", group)
    bounds: list[_Bound] = []
    for atom in _AND_SPLIT.split(compact):
        if atom:
            bounds.extend(_atom_bounds(atom, constraint))
    return tuple(bounds)


def satisfies(version: str, constraint: str) -> bool:
    """Check ``version`` against a composer constraint such as ``^4.0 || >=5.1 <6``."""
    candidate = normalize_version(version)
    text = constraint.strip()
    if not text:
        return True
    for group in _OR_SPLIT.split(text):
        bounds = _group_bounds(group.strip(), constraint)
        if all(bound.admits(candidate) for bound in bounds):
            return True
    return False
