from __future__ import annotations

import json
import logging
from collections.abc import Mapping

from pydantic import ValidationError

from .errors import ReconciliationError, ReconciliationErrorCode, build_reconciliation_error
from .models import DiagnosticRecord, DiagnosticSet
from .table import render_diagnostics

logger = logging.getLogger(__name__)


def parse_diagnostics(raw_output: str | None, exit_code: int) -> DiagnosticSet:
    """Decode the analyzer's JSON report into an ordered :class:`DiagnosticSet`.

    Empty output means no diagnostics whatever the exit code. Output that is not
    JSON is only an error when the analyzer also failed; a successful run that
    printed something else (banners, notices from older releases) counts as clean.
    JSON of the wrong shape is always an error.
    """
    if raw_output is None or not raw_output.strip():
        return DiagnosticSet(exit_code=exit_code)

    try:
        payload = json.loads(raw_output)
    except json.JSONDecodeError as exc:
        if exit_code != 0:
            raise build_reconciliation_error(
                ReconciliationErrorCode.E_OUTPUT_MALFORMED,
                f"Failed to parse output: {raw_output}\nError: {exc}",
                raw_output=raw_output,
                decoder_message=str(exc),
            ) from exc
        logger.debug("ignoring non-JSON output of a successful run: %s", exc)
        return DiagnosticSet(exit_code=exit_code)

    records = DiagnosticSet(_decode_records(payload, raw_output), exit_code=exit_code)
    logger.debug("decoded %d diagnostics:\n%s", len(records), render_diagnostics(records))
    return records


def _decode_records(payload: object, raw_output: str) -> list[DiagnosticRecord]:
    if payload is None:
        return []
    if isinstance(payload, Mapping):
        rows = list(payload.values())
    elif isinstance(payload, list):
        rows = payload
    else:
        raise _shape_error(raw_output, "top-level value must be a list of records")

    records: list[DiagnosticRecord] = []
    for index, row in enumerate(rows):
        if not isinstance(row, Mapping):
            raise _shape_error(raw_output, f"record {index} is not an object")
        try:
            records.append(DiagnosticRecord.model_validate(row))
        except ValidationError as exc:
            raise _shape_error(raw_output, f"record {index} is invalid: {exc}") from exc
    return records


def _shape_error(raw_output: str, reason: str) -> ReconciliationError:
    return build_reconciliation_error(
        ReconciliationErrorCode.E_OUTPUT_MALFORMED,
        f"Unexpected output shape: {reason}\nOutput: {raw_output}",
        raw_output=raw_output,
        decoder_message=reason,
    )
