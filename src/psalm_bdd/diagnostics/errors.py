from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from .models import DiagnosticRecord, ExpectationPattern


class ReconciliationErrorCode(StrEnum):
    E_OUTPUT_MALFORMED = "E_OUTPUT_MALFORMED"
    E_MATCH_SET_EMPTY = "E_MATCH_SET_EMPTY"
    E_MATCH_NO_MATCH = "E_MATCH_NO_MATCH"
    E_MATCH_UNEXPECTED_REMAINING = "E_MATCH_UNEXPECTED_REMAINING"


class PatternErrorCode(StrEnum):
    E_PATTERN_INVALID = "E_PATTERN_INVALID"


@dataclass(frozen=True, slots=True)
class ReconciliationErrorDetail:
    code: str
    message: str
    expected: ExpectationPattern | None = None
    remaining: tuple[DiagnosticRecord, ...] = ()
    raw_output: str | None = None
    decoder_message: str | None = None


class ReconciliationError(AssertionError):
    def __init__(self, detail: ReconciliationErrorDetail) -> None:
        super().__init__(detail.message)
        self.detail = detail


class MalformedOutputError(ReconciliationError):
    pass


class SetEmptyError(ReconciliationError):
    pass


class NoMatchError(ReconciliationError):
    pass


class UnexpectedRemainingError(ReconciliationError):
    pass


_ERROR_TYPES: dict[ReconciliationErrorCode, type[ReconciliationError]] = {
    ReconciliationErrorCode.E_OUTPUT_MALFORMED: MalformedOutputError,
    ReconciliationErrorCode.E_MATCH_SET_EMPTY: SetEmptyError,
    ReconciliationErrorCode.E_MATCH_NO_MATCH: NoMatchError,
    ReconciliationErrorCode.E_MATCH_UNEXPECTED_REMAINING: UnexpectedRemainingError,
}


@dataclass(frozen=True, slots=True)
class PatternErrorDetail:
    code: str
    message: str
    pattern: str


class InvalidPatternError(ValueError):
    def __init__(self, detail: PatternErrorDetail) -> None:
        super().__init__(f"{detail.code}: {detail.message}")
        self.detail = detail


def build_reconciliation_error(  # noqa: PLR0913
    code: ReconciliationErrorCode,
    message: str,
    *,
    expected: ExpectationPattern | None = None,
    remaining: tuple[DiagnosticRecord, ...] = (),
    raw_output: str | None = None,
    decoder_message: str | None = None,
) -> ReconciliationError:
    return _ERROR_TYPES[code](
        ReconciliationErrorDetail(
            code=code.value,
            message=message,
            expected=expected,
            remaining=remaining,
            raw_output=raw_output,
            decoder_message=decoder_message,
        )
    )


def build_pattern_error(pattern: str, message: str) -> InvalidPatternError:
    return InvalidPatternError(
        PatternErrorDetail(
            code=PatternErrorCode.E_PATTERN_INVALID.value,
            message=message,
            pattern=pattern,
        )
    )
