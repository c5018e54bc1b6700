from .collector import parse_diagnostics
from .errors import (
    InvalidPatternError,
    MalformedOutputError,
    NoMatchError,
    PatternErrorCode,
    PatternErrorDetail,
    ReconciliationError,
    ReconciliationErrorCode,
    ReconciliationErrorDetail,
    SetEmptyError,
    UnexpectedRemainingError,
)
from .models import DiagnosticRecord, DiagnosticSet, ExpectationPattern
from .patterns import Matcher, compile_pattern, starts_and_ends_with_delimiter, wildcard_to_regex
from .reconcile import assert_empty, consume_many, consume_one, expectations_from_table
from .table import render_diagnostics, render_rows

__all__ = [
    "DiagnosticRecord",
    "DiagnosticSet",
    "ExpectationPattern",
    "InvalidPatternError",
    "MalformedOutputError",
    "Matcher",
    "NoMatchError",
    "PatternErrorCode",
    "PatternErrorDetail",
    "ReconciliationError",
    "ReconciliationErrorCode",
    "ReconciliationErrorDetail",
    "SetEmptyError",
    "UnexpectedRemainingError",
    "assert_empty",
    "compile_pattern",
    "consume_many",
    "consume_one",
    "expectations_from_table",
    "parse_diagnostics",
    "render_diagnostics",
    "render_rows",
    "starts_and_ends_with_delimiter",
    "wildcard_to_regex",
]
