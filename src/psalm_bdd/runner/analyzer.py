from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final

logger = logging.getLogger(__name__)

JSON_OUTPUT_FLAG: Final[str] = "--output-format=json"
NO_PROGRESS_FLAG: Final[str] = "--no-progress"
DEAD_CODE_FLAG: Final[str] = "--find-dead-code"
TAINT_ANALYSIS_FLAG: Final[str] = "--track-tainted-input"


class AnalyzerNotFoundError(RuntimeError):
    pass


@dataclass(frozen=True, slots=True)
class AnalyzerRun:
    command: tuple[str, ...]
    raw_output: str
    exit_code: int


def build_command(
    psalm_path: str,
    *,
    interpreter: str | None = None,
    options: Sequence[str] = (),
    target: str | None = None,
    suppress_progress: bool = False,
) -> tuple[str, ...]:
    command: list[str] = []
    if interpreter:
        command.extend(shlex.split(interpreter))
    command.extend([psalm_path, JSON_OUTPUT_FLAG])
    if suppress_progress:
        command.append(NO_PROGRESS_FLAG)
    command.extend(options)
    if target:
        command.append(target)
    return tuple(command)


def run_analyzer(command: Sequence[str], *, cwd: Path) -> AnalyzerRun:
    """Run the analyzer in ``cwd`` with stderr folded into the captured output."""
    logger.debug("Running: %s", shlex.join(command))
    try:
        completed = subprocess.run(
            list(command),
            cwd=cwd,
            check=False,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
    except FileNotFoundError as exc:
        raise AnalyzerNotFoundError(f"analyzer executable not found: {command[0]}") from exc

    logger.debug("Psalm exit code: %d", completed.returncode)
    return AnalyzerRun(
        command=tuple(command),
        raw_output=completed.stdout or "",
        exit_code=completed.returncode,
    )
