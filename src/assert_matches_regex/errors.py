"""Exceptions raised by the match assertion."""

from __future__ import annotations


class InvalidPatternError(ValueError):
    """The pattern could not be compiled.

    This is a defect in the test itself, so it is deliberately not an
    ``AssertionError``: test frameworks report it as an error rather than a
    failed assertion. The underlying ``re.error`` is chained as ``__cause__``.
    """

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"regex parse error: {reason}")


class MatchFailure(AssertionError):
    """The haystack did not contain a match for the pattern."""

    def __init__(self, message: str, haystack: str, pattern: str):
        self.haystack = haystack
        self.pattern = pattern
        super().__init__(message)


class MessageTemplateError(ValueError):
    """The failure message template could not be rendered with its args."""

    def __init__(self, template: str, reason: str):
        self.template = template
        self.reason = reason
        super().__init__(f"invalid failure message {template!r}: {reason}")
