"""Gherkin steps for scenarios that run Psalm.

Registered as a pytest plugin, so feature files can use these steps from any
test module that loads them with ``pytest_bdd.scenarios``.
"""

from __future__ import annotations

import pytest
from pytest_bdd import given, parsers, then, when

from psalm_bdd.session import ScenarioContext
from psalm_bdd.versions import GateOutcome, Skip


def _apply_gate(outcome: GateOutcome) -> None:
    if isinstance(outcome, Skip):
        pytest.skip(outcome.reason)


@given("I have the following code preamble")
def have_the_following_code_preamble(psalm_scenario: ScenarioContext, docstring: str) -> None:
    psalm_scenario.have_preamble(docstring)


@given("I have the following code")
def have_the_following_code(psalm_scenario: ScenarioContext, docstring: str) -> None:
    psalm_scenario.have_code(docstring)


@given(parsers.parse('I have the following code in "{filename}"'))
def have_the_following_code_in(
    psalm_scenario: ScenarioContext,
    filename: str,
    docstring: str,
) -> None:
    psalm_scenario.have_code_in(filename, docstring)


@given("I have the following config")
def have_the_following_config(psalm_scenario: ScenarioContext, docstring: str) -> None:
    psalm_scenario.have_config(docstring)


@given("I have the following autoload map")
@given("I have the following classmap")
@given("I have the following class map")
def have_the_following_autoload_map(
    psalm_scenario: ScenarioContext,
    datatable: list[list[str]],
) -> None:
    psalm_scenario.have_autoload_map(datatable)


@given(
    parsers.re(
        r'I have Psalm (?P<phrase>newer than|older than) "(?P<version>[0-9.]+)" '
        r'\(because of "(?P<reason>[^"]+)"\)$'
    )
)
def have_psalm_of_a_certain_version_range_because_of(
    psalm_scenario: ScenarioContext,
    phrase: str,
    version: str,
    reason: str,
) -> None:
    _apply_gate(psalm_scenario.require_version(phrase, version, reason))


@given(parsers.parse('I have the "{package}" package satisfying the "{constraint}"'))
def have_a_dependency_satisfied(
    psalm_scenario: ScenarioContext,
    package: str,
    constraint: str,
) -> None:
    _apply_gate(psalm_scenario.require_dependency(package, constraint))


@given("I have Psalm with taint analysis")
@given("I have psalm with taint analysis")
def have_psalm_with_taint_analysis(psalm_scenario: ScenarioContext) -> None:
    _apply_gate(psalm_scenario.require_taint_analysis())


@given(parsers.parse('I have some future Psalm that supports this feature "{ref}"'))
def have_some_future_psalm_that_supports_this_feature(
    psalm_scenario: ScenarioContext,
    ref: str,
) -> None:
    _apply_gate(psalm_scenario.future_feature(ref))


@when("I run Psalm")
@when("I run psalm")
def run_psalm(psalm_scenario: ScenarioContext) -> None:
    psalm_scenario.run_psalm()


@when("I run Psalm with dead code detection")
@when("I run psalm with dead code detection")
def run_psalm_with_dead_code_detection(psalm_scenario: ScenarioContext) -> None:
    psalm_scenario.run_psalm_with_dead_code_detection()


@when("I run Psalm with taint analysis")
@when("I run psalm with taint analysis")
def run_psalm_with_taint_analysis(psalm_scenario: ScenarioContext) -> None:
    psalm_scenario.run_psalm_with_taint_analysis()


@when(parsers.parse('I run Psalm on "{filename}"'))
@when(parsers.parse('I run psalm on "{filename}"'))
def run_psalm_on_a_single_file(psalm_scenario: ScenarioContext, filename: str) -> None:
    psalm_scenario.run_psalm_on(filename)


@then(parsers.parse("I see exit code {exit_code:d}"))
def see_exit_code(psalm_scenario: ScenarioContext, exit_code: int) -> None:
    psalm_scenario.see_exit_code(exit_code)


@then("I see these errors")
def see_these_errors(psalm_scenario: ScenarioContext, datatable: list[list[str]]) -> None:
    psalm_scenario.expect_all(datatable)


@then("I see no errors")
@then("I see no other errors")
def see_no_errors(psalm_scenario: ScenarioContext) -> None:
    psalm_scenario.expect_none()
