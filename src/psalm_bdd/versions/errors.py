from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class VersionErrorCode(StrEnum):
    E_VERSION_INVALID = "E_VERSION_INVALID"
    E_CONSTRAINT_INVALID = "E_CONSTRAINT_INVALID"
    E_OPERATOR_UNKNOWN = "E_OPERATOR_UNKNOWN"
    E_PACKAGE_NOT_INSTALLED = "E_PACKAGE_NOT_INSTALLED"
    E_INSTALLED_METADATA_INVALID = "E_INSTALLED_METADATA_INVALID"


@dataclass(frozen=True, slots=True)
class VersionErrorDetail:
    code: str
    message: str
    input_text: str


class VersionError(ValueError):
    def __init__(self, detail: VersionErrorDetail) -> None:
        super().__init__(f"{detail.code}: {detail.message}: {detail.input_text!r}")
        self.detail = detail


class UnknownOperatorError(VersionError):
    pass


class PackageNotInstalledError(LookupError):
    def __init__(self, detail: VersionErrorDetail) -> None:
        super().__init__(f"{detail.code}: {detail.message}: {detail.input_text!r}")
        self.detail = detail


def build_version_error(code: VersionErrorCode, message: str, input_text: str) -> VersionError:
    detail = VersionErrorDetail(code=code.value, message=message, input_text=input_text)
    if code is VersionErrorCode.E_OPERATOR_UNKNOWN:
        return UnknownOperatorError(detail)
    return VersionError(detail)


def build_not_installed_error(package: str) -> PackageNotInstalledError:
    return PackageNotInstalledError(
        VersionErrorDetail(
            code=VersionErrorCode.E_PACKAGE_NOT_INSTALLED.value,
            message="package is not installed",
            input_text=package,
        )
    )
