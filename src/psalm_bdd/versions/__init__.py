from .constraints import (
    VERSION_OPERATORS,
    NormalizedVersion,
    Stability,
    compare_versions,
    normalize_version,
    satisfies,
)
from .errors import (
    PackageNotInstalledError,
    UnknownOperatorError,
    VersionError,
    VersionErrorCode,
    VersionErrorDetail,
)
from .gates import (
    PROCEED,
    PSALM_PACKAGE,
    GateOutcome,
    Proceed,
    Skip,
    future_feature,
    has_taint_analysis,
    require_dependency,
    require_taint_analysis,
    require_version,
    supports_no_progress,
)
from .installed import InstalledPackages, package_satisfies

__all__ = [
    "PROCEED",
    "PSALM_PACKAGE",
    "VERSION_OPERATORS",
    "GateOutcome",
    "InstalledPackages",
    "NormalizedVersion",
    "PackageNotInstalledError",
    "Proceed",
    "Skip",
    "Stability",
    "UnknownOperatorError",
    "VersionError",
    "VersionErrorCode",
    "VersionErrorDetail",
    "compare_versions",
    "future_feature",
    "has_taint_analysis",
    "normalize_version",
    "package_satisfies",
    "require_dependency",
    "require_taint_analysis",
    "require_version",
    "satisfies",
    "supports_no_progress",
]
