from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from .errors import ReconciliationErrorCode, build_reconciliation_error
from .models import DiagnosticSet, ExpectationPattern
from .patterns import compile_pattern
from .table import render_diagnostics

logger = logging.getLogger(__name__)

_EXPECTATION_COLUMNS = 2


def consume_one(diagnostics: DiagnosticSet, expected: ExpectationPattern) -> None:
    """Remove the first outstanding diagnostic satisfying ``expected``.

    The kind is compared literally; the message goes through the pattern matcher.
    Raises :class:`SetEmptyError` when nothing is outstanding at all and
    :class:`NoMatchError` when nothing outstanding satisfies the expectation.
    """
    if not diagnostics:
        raise build_reconciliation_error(
            ReconciliationErrorCode.E_MATCH_SET_EMPTY,
            f"No errors, expected {expected.render()}",
            expected=expected,
        )

    matcher = compile_pattern(expected.message_pattern)
    for index, record in enumerate(diagnostics):
        if record.kind == expected.kind_literal and matcher.test(record.message):
            diagnostics.remove_at(index)
            logger.debug("matched %s against %s", expected.render(), record.message)
            return

    remaining = diagnostics.snapshot()
    raise build_reconciliation_error(
        ReconciliationErrorCode.E_MATCH_NO_MATCH,
        f"Didn't see {expected.render()} in: \n{render_diagnostics(remaining)}",
        expected=expected,
        remaining=remaining,
    )


def assert_empty(diagnostics: DiagnosticSet) -> None:
    if not diagnostics:
        return
    remaining = diagnostics.snapshot()
    raise build_reconciliation_error(
        ReconciliationErrorCode.E_MATCH_UNEXPECTED_REMAINING,
        f"There were errors: \n{render_diagnostics(remaining)}",
        remaining=remaining,
    )


def consume_many(diagnostics: DiagnosticSet, expectations: Iterable[ExpectationPattern]) -> None:
    for expected in expectations:
        consume_one(diagnostics, expected)


def expectations_from_table(rows: Sequence[Sequence[object]]) -> list[ExpectationPattern]:
    """Build expectations from a ``type | message`` table; the first row is its header."""
    expectations: list[ExpectationPattern] = []
    for row in list(rows)[1:]:
        if len(row) < _EXPECTATION_COLUMNS:
            raise ValueError(f"expectation row needs a type and a message, got {list(row)!r}")
        expectations.append(
            ExpectationPattern(kind_literal=str(row[0]), message_pattern=str(row[1]))
        )
    return expectations
