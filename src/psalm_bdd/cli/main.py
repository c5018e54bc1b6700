from __future__ import annotations

import json
from pathlib import Path
from typing import Final, Literal

import typer

from psalm_bdd.config import DEFAULT_INSTALLED_PATH
from psalm_bdd.diagnostics import (
    DiagnosticSet,
    ExpectationPattern,
    InvalidPatternError,
    MalformedOutputError,
    ReconciliationError,
    assert_empty,
    consume_many,
    parse_diagnostics,
    render_diagnostics,
)
from psalm_bdd.versions import InstalledPackages, VersionError, package_satisfies

app = typer.Typer(help="Reconcile Psalm diagnostics against expectations")

EXIT_MISMATCH: Final[int] = 1
EXIT_INVALID_INPUT: Final[int] = 2
_EXPECTATION_SEPARATOR: Final[str] = "="
_EXPECT_OPTION = typer.Option(
    None,
    "--expect",
    help="Repeatable expectation KIND=PATTERN; PATTERN uses % wildcards or /regex/",
)


def _read_output(output: Path) -> str:
    try:
        return output.read_text(encoding="utf-8")
    except OSError as exc:
        typer.echo(f"cannot read analyzer output: {exc}", err=True)
        raise typer.Exit(code=EXIT_INVALID_INPUT) from exc


def _load(output: Path, exit_code: int) -> DiagnosticSet:
    try:
        return parse_diagnostics(_read_output(output), exit_code)
    except MalformedOutputError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=EXIT_INVALID_INPUT) from exc


def _parse_expectation(raw: str) -> ExpectationPattern:
    kind, separator, pattern = raw.partition(_EXPECTATION_SEPARATOR)
    if not separator or not kind:
        raise typer.BadParameter(f"expectation must look like KIND=PATTERN, got '{raw}'")
    return ExpectationPattern(kind_literal=kind, message_pattern=pattern)


@app.command()
def inspect(
    output: Path,
    exit_code: int = typer.Option(0, "--exit-code", help="Exit status of the analyzer run"),
    format: Literal["text", "json"] = typer.Option(
        "text",
        "--format",
        help="Output format: text|json",
        show_default=True,
    ),
) -> None:
    """Show the diagnostics in a saved Psalm JSON report."""
    diagnostics = _load(output, exit_code)
    if format == "json":
        payload = [record.model_dump(mode="json", by_alias=True) for record in diagnostics]
        typer.echo(json.dumps(payload, ensure_ascii=True, separators=(",", ":")))
        return
    typer.echo(render_diagnostics(diagnostics))


@app.command()
def reconcile(
    output: Path,
    expect: list[str] | None = _EXPECT_OPTION,
    exit_code: int = typer.Option(0, "--exit-code", help="Exit status of the analyzer run"),
    allow_remaining: bool = typer.Option(
        False,
        "--allow-remaining",
        help="Do not fail when diagnostics remain after every expectation matched",
    ),
) -> None:
    """Match expectations against a saved Psalm JSON report."""
    expectations = [_parse_expectation(raw) for raw in expect or ()]
    diagnostics = _load(output, exit_code)
    try:
        consume_many(diagnostics, expectations)
        if not allow_remaining:
            assert_empty(diagnostics)
    except InvalidPatternError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=EXIT_INVALID_INPUT) from exc
    except ReconciliationError as exc:
        typer.echo(str(exc))
        raise typer.Exit(code=EXIT_MISMATCH) from exc
    typer.echo(f"matched {len(expectations)} expectation(s), {len(diagnostics)} remaining")


@app.command()
def satisfies(
    package: str,
    constraint: str,
    installed: Path = typer.Option(
        Path(DEFAULT_INSTALLED_PATH),
        "--installed",
        help="composer installed.json or composer.lock",
        show_default=True,
    ),
) -> None:
    """Check an installed composer package against a version constraint."""
    try:
        packages = InstalledPackages.from_path(installed)
        result = package_satisfies(packages, package, constraint)
    except VersionError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=EXIT_INVALID_INPUT) from exc
    current = packages.versions.get(package.lower(), "not installed")
    typer.echo(f"{package} {current}: {'ok' if result else 'ko'} for {constraint}")
    raise typer.Exit(code=0 if result else EXIT_MISMATCH)


def main() -> None:
    app()
