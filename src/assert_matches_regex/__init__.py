"""Assert that a string matches a regular expression."""

from assert_matches_regex.errors import InvalidPatternError, MatchFailure, MessageTemplateError
from assert_matches_regex.matching import assert_matches, check_matches, escape
from assert_matches_regex.result import MatchResult

__all__ = [
    "InvalidPatternError",
    "MatchFailure",
    "MessageTemplateError",
    "MatchResult",
    "assert_matches",
    "check_matches",
    "escape",
]
