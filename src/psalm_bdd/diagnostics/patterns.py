"""Message patterns used by expectations.

Two spellings are accepted. A pattern wrapped in ``/`` on both ends is an
explicit regular expression and is used verbatim (without the delimiters).
Anything else is a wildcard template: ``%`` stands for any run of characters,
possibly empty, and every other character matches itself.

Both forms search for a match anywhere in the message; neither is anchored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

from .errors import build_pattern_error

REGEX_DELIMITER: Final[str] = "/"
WILDCARD: Final[str] = "%"


def starts_and_ends_with_delimiter(pattern: str, delimiter: str = REGEX_DELIMITER) -> bool:
    if len(pattern) < 2:  # noqa: PLR2004
        return False
    return pattern[0] == delimiter and pattern[-1] == delimiter


def wildcard_to_regex(pattern: str) -> str:
    return ".*".join(re.escape(part) for part in pattern.split(WILDCARD))


@dataclass(frozen=True, slots=True)
class Matcher:
    pattern: str
    regex: re.Pattern[str]
    explicit: bool

    def test(self, text: str) -> bool:
        return self.regex.search(text) is not None


def compile_pattern(pattern: str) -> Matcher:
    if starts_and_ends_with_delimiter(pattern):
        source = pattern[1:-1]
        try:
            regex = re.compile(source)
        except re.error as exc:
            raise build_pattern_error(pattern, f"invalid regular expression: {exc}") from exc
        return Matcher(pattern=pattern, regex=regex, explicit=True)
    # % may stand in for text spanning several lines
    regex = re.compile(wildcard_to_regex(pattern), re.DOTALL)
    return Matcher(pattern=pattern, regex=regex, explicit=False)
