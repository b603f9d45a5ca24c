"""Result record for non-raising match checks."""

from dataclasses import dataclass


@dataclass
class MatchResult:
    """Result of checking a single haystack against a pattern.

    Attributes:
        name: Identifier for the check (e.g. "matches:\\d" or a case name).
        passed: Whether the check met its expectation.
        message: Human-readable detail. On a mismatch this is the same
            diagnostic ``assert_matches`` would raise.
        error: True when the check could not be evaluated: the pattern did
            not compile, or the message template did not fit its args.
            Errors are reported separately from mismatches and are never
            inverted by ``expect: no_match``.
        error_type: Exception class name behind an error result.
        haystack: Haystack text as it was searched.
        pattern: Pattern source text.
    """

    name: str
    passed: bool
    message: str
    error: bool = False
    error_type: str | None = None
    haystack: str = ""
    pattern: str = ""
