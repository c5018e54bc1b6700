from __future__ import annotations

import pytest

from psalm_bdd.diagnostics import (
    InvalidPatternError,
    PatternErrorCode,
    compile_pattern,
    starts_and_ends_with_delimiter,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("pattern", "expected"),
    [
        ("/abc/", True),
        ("//", True),
        ("/", False),
        ("", False),
        ("/abc", False),
        ("abc/", False),
        ("a/b/c", False),
    ],
)
def test_delimiter_detection(pattern: str, expected: bool) -> None:
    assert starts_and_ends_with_delimiter(pattern) is expected


@pytest.mark.parametrize(
    ("pattern", "text", "expected"),
    [
        ("expected string", "The declared return type expected string", True),
        ("expected %", "expected string, got int", True),
        ("% got int", "expected string, got int", True),
        ("expected % got %", "expected string, got int", True),
        ("expected%int", "expected string, got int", True),
        ("expected % got float", "expected string, got int", False),
        ("Foo::bar()", "Method Foo::bar() does not exist", True),
        ("a.c", "abc", False),
        ("[x]", "value [x] here", True),
        ("%", "", True),
        ("", "anything", True),
    ],
)
def test_wildcard_templates_search_literally(pattern: str, text: str, expected: bool) -> None:
    assert compile_pattern(pattern).test(text) is expected


def test_wildcard_spans_newlines() -> None:
    assert compile_pattern("first%second").test("first\nline\nsecond")


def test_explicit_regex_used_verbatim_and_unanchored() -> None:
    matcher = compile_pattern(r"/expected \w+, got (int|float)/")

    assert matcher.explicit
    assert matcher.test("The declared return type expected string, got int here")
    assert not matcher.test("expected string, got bool")


def test_explicit_regex_can_anchor() -> None:
    matcher = compile_pattern("/^Method .* does not exist$/")

    assert matcher.test("Method Foo::bar does not exist")
    assert not matcher.test("Static Method Foo::bar does not exist")


def test_percent_inside_explicit_regex_is_literal() -> None:
    assert compile_pattern("/100%/").test("coverage 100%")
    assert not compile_pattern("/100%/").test("coverage 1000")


def test_invalid_explicit_regex_raises() -> None:
    with pytest.raises(InvalidPatternError) as exc_info:
        compile_pattern("/unbalanced (/")

    assert exc_info.value.detail.code == PatternErrorCode.E_PATTERN_INVALID.value
    assert exc_info.value.detail.pattern == "/unbalanced (/"


def test_lone_delimiter_is_a_literal_template() -> None:
    matcher = compile_pattern("/")

    assert not matcher.explicit
    assert matcher.test("a/b")
    assert not matcher.test("ab")
