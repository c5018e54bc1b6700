from .config import ConfigError, SuiteConfig
from .diagnostics import (
    DiagnosticRecord,
    DiagnosticSet,
    ExpectationPattern,
    InvalidPatternError,
    MalformedOutputError,
    NoMatchError,
    ReconciliationError,
    SetEmptyError,
    UnexpectedRemainingError,
    assert_empty,
    compile_pattern,
    consume_many,
    consume_one,
    parse_diagnostics,
)
from .session import CapabilityError, ExitCodeMismatchError, ScenarioContext
from .versions import GateOutcome, Proceed, Skip, satisfies

__all__ = [
    "CapabilityError",
    "ConfigError",
    "DiagnosticRecord",
    "DiagnosticSet",
    "ExitCodeMismatchError",
    "ExpectationPattern",
    "GateOutcome",
    "InvalidPatternError",
    "MalformedOutputError",
    "NoMatchError",
    "Proceed",
    "ReconciliationError",
    "ScenarioContext",
    "SetEmptyError",
    "Skip",
    "SuiteConfig",
    "UnexpectedRemainingError",
    "assert_empty",
    "compile_pattern",
    "consume_many",
    "consume_one",
    "parse_diagnostics",
    "satisfies",
]
