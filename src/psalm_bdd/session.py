"""Per-scenario state and the operations step definitions call.

One :class:`ScenarioContext` exists per scenario. It owns the fixture
workspace, the last analyzer run and the diagnostics still waiting for an
expectation. Nothing here outlives the scenario.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from psalm_bdd.config import SuiteConfig
from psalm_bdd.diagnostics import (
    DiagnosticSet,
    ExpectationPattern,
    assert_empty,
    consume_many,
    consume_one,
    expectations_from_table,
    parse_diagnostics,
)
from psalm_bdd.runner import (
    DEAD_CODE_FLAG,
    TAINT_ANALYSIS_FLAG,
    AnalyzerRun,
    Workspace,
    build_command,
    run_analyzer,
)
from psalm_bdd.versions import (
    GateOutcome,
    InstalledPackages,
    future_feature,
    has_taint_analysis,
    require_dependency,
    require_taint_analysis,
    require_version,
    supports_no_progress,
)


class CapabilityError(AssertionError):
    pass


class ExitCodeMismatchError(AssertionError):
    pass


@dataclass(slots=True)
class ScenarioContext:
    config: SuiteConfig
    workspace: Workspace
    installed: InstalledPackages
    preamble: str = ""
    analyzer_config: str | None = None
    has_autoload: bool = False
    last_run: AnalyzerRun | None = None
    _diagnostics: DiagnosticSet | None = field(default=None, repr=False)

    @classmethod
    def from_config(cls, config: SuiteConfig) -> ScenarioContext:
        lock = config.upstream_composer_lock
        return cls(
            config=config,
            workspace=Workspace(
                root=Path(config.default_dir),
                upstream_composer_lock=Path(lock) if lock else None,
            ),
            installed=InstalledPackages.from_path(Path(config.composer_installed_path)),
        )

    def reset(self) -> None:
        self.preamble = ""
        self.analyzer_config = None
        self.has_autoload = False
        self.last_run = None
        self._diagnostics = None
        self.workspace.reset()

    # fixtures

    def have_preamble(self, code: str) -> None:
        self.preamble = code

    def have_code(self, code: str) -> Path:
        return self.workspace.write_code(code, self.preamble)

    def have_code_in(self, filename: str, code: str) -> Path:
        return self.workspace.write_code_in(filename, code)

    def have_config(self, config: str) -> None:
        self.analyzer_config = config

    def have_autoload_map(self, rows: Sequence[Sequence[object]]) -> Path:
        path = self.workspace.write_autoload_map(rows)
        self.has_autoload = True
        return path

    # analyzer runs

    def run_psalm(self, options: Sequence[str] = ()) -> AnalyzerRun:
        return self._run(options=options, target=None)

    def run_psalm_on(self, filename: str) -> AnalyzerRun:
        return self._run(options=(), target=filename)

    def run_psalm_with_dead_code_detection(self) -> AnalyzerRun:
        return self.run_psalm([DEAD_CODE_FLAG])

    def run_psalm_with_taint_analysis(self) -> AnalyzerRun:
        if not has_taint_analysis(self.installed):
            raise CapabilityError("Taint analysis is available since 3.10.0")
        return self.run_psalm([TAINT_ANALYSIS_FLAG])

    def _run(self, *, options: Sequence[str], target: str | None) -> AnalyzerRun:
        self.workspace.write_analyzer_config(self.analyzer_config, has_autoload=self.has_autoload)
        command = build_command(
            self.config.psalm_path,
            interpreter=self.config.interpreter,
            options=options,
            target=target,
            suppress_progress=supports_no_progress(self.installed),
        )
        run = run_analyzer(command, cwd=self.workspace.root)
        self.last_run = run
        self._diagnostics = None
        return run

    # diagnostics

    def load_diagnostics(self, raw_output: str | None, exit_code: int) -> DiagnosticSet:
        diagnostics = parse_diagnostics(raw_output, exit_code)
        self._diagnostics = diagnostics
        return diagnostics

    @property
    def diagnostics(self) -> DiagnosticSet:
        """Diagnostics of the last run not yet claimed, parsed on first access."""
        if self._diagnostics is not None:
            return self._diagnostics
        run = self.last_run
        if run is None:
            return self.load_diagnostics(None, 0)
        return self.load_diagnostics(run.raw_output, run.exit_code)

    def see_exit_code(self, exit_code: int) -> None:
        actual = None if self.last_run is None else self.last_run.exit_code
        if actual != exit_code:
            raise ExitCodeMismatchError(f"Expected exit code {exit_code}, got {actual}")

    def expect_one(self, kind: str, message_pattern: str) -> None:
        consume_one(
            self.diagnostics,
            ExpectationPattern(kind_literal=kind, message_pattern=message_pattern),
        )

    def expect_none(self) -> None:
        assert_empty(self.diagnostics)

    def expect_all(self, rows: Sequence[Sequence[object]]) -> None:
        consume_many(self.diagnostics, expectations_from_table(rows))

    # gates

    def require_version(self, phrase: str, version: str, reason: str) -> GateOutcome:
        return require_version(self.installed, phrase, version, reason)

    def require_dependency(self, package: str, constraint: str) -> GateOutcome:
        return require_dependency(self.installed, package, constraint)

    def require_taint_analysis(self) -> GateOutcome:
        return require_taint_analysis(self.installed)

    def future_feature(self, ref: str) -> GateOutcome:
        return future_feature(ref)
