"""Regex match assertion and its non-raising counterpart."""

from __future__ import annotations

import logging
import re
from re import escape
from typing import Any

from assert_matches_regex.errors import InvalidPatternError, MatchFailure, MessageTemplateError
from assert_matches_regex.result import MatchResult

__all__ = [
    "assert_matches",
    "check_matches",
    "debug_quote",
    "escape",
    "render_message",
    "to_text",
]

logger = logging.getLogger(__name__)

_BYTES_LIKE = (bytes, bytearray, memoryview)

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\0": "\\0",
}


def to_text(value: Any) -> str:
    """Convert *value* to ``str`` for matching.

    Byte strings are decoded as UTF-8 with replacement characters, so invalid
    input still produces text instead of raising.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, _BYTES_LIKE):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def debug_quote(text: str) -> str:
    """Render *text* double-quoted with quotes and control characters escaped."""
    parts = ['"']
    for ch in text:
        escaped = _ESCAPES.get(ch)
        if escaped is not None:
            parts.append(escaped)
        elif ch.isprintable():
            parts.append(ch)
        elif ord(ch) < 0x100:
            parts.append(f"\\x{ord(ch):02x}")
        elif ord(ch) < 0x10000:
            parts.append(f"\\u{ord(ch):04x}")
        else:
            parts.append(f"\\U{ord(ch):08x}")
    parts.append('"')
    return "".join(parts)


def _compile(pattern: Any) -> re.Pattern[str]:
    if isinstance(pattern, re.Pattern):
        # LOCALE is only valid for bytes patterns; the source is matched as str.
        source = to_text(pattern.pattern)
        flags = pattern.flags & ~re.LOCALE
    else:
        source = to_text(pattern)
        flags = 0

    try:
        return re.compile(source, flags)
    except re.error as e:
        logger.debug(f"Pattern {source!r} failed to compile: {e}")
        raise InvalidPatternError(source, str(e)) from e


def render_message(message: str, args: tuple) -> str:
    """Render a failure message template; verbatim when there are no args."""
    if not args:
        return message
    try:
        return message.format(*args)
    except (AttributeError, IndexError, KeyError, TypeError, ValueError) as e:
        raise MessageTemplateError(message, f"{type(e).__name__}: {e}") from e


def _render_failure(text: str, source: str, message: str | None, args: tuple) -> str:
    diagnostic = f"assertion failed: {debug_quote(text)} does not match {source}"
    if message is None:
        return diagnostic
    return f"{diagnostic}: {render_message(message, args)}"


def assert_matches(haystack: Any, pattern: Any, message: str | None = None, /, *args: Any) -> None:
    """Assert that *haystack* contains a match for the regex *pattern*.

    Uses search semantics: any substring may satisfy the pattern, so anchor
    it with ``^``/``$`` (or ``\\A``/``\\Z``) to require a full match.

    Args:
        haystack: Text to search. Anything convertible to ``str`` is
            accepted; bytes are decoded as UTF-8.
        pattern: Regex source text, or an already compiled ``re.Pattern``
            whose source and flags are reused.
        message: Optional template appended to the diagnostic on failure,
            rendered with ``str.format(*args)``.
        *args: Positional arguments for *message*.

    Raises:
        InvalidPatternError: The pattern is not a valid regex.
        MatchFailure: No part of the haystack matches. The message is
            ``assertion failed: "<haystack>" does not match <pattern>``,
            followed by ``: <message>`` when one was given.
        MessageTemplateError: No match, and *message* could not be
            formatted with *args*.

    Example:
        >>> assert_matches("Hello!", r"(?i)hello")
    """
    __tracebackhide__ = True
    matcher = _compile(pattern)
    text = to_text(haystack)
    if matcher.search(text) is not None:
        return

    failure = _render_failure(text, matcher.pattern, message, args)
    logger.debug(failure)
    raise MatchFailure(failure, haystack=text, pattern=matcher.pattern)


def check_matches(
    haystack: Any,
    pattern: Any,
    message: str | None = None,
    /,
    *args: Any,
    name: str | None = None,
) -> MatchResult:
    """Like ``assert_matches`` but return a ``MatchResult`` instead of raising.

    An invalid pattern or a message template that does not fit *args* gives
    a result with ``error=True``.
    """
    source = to_text(pattern.pattern if isinstance(pattern, re.Pattern) else pattern)
    name = name or f"matches:{source}"
    text = to_text(haystack)

    try:
        matcher = _compile(pattern)
    except InvalidPatternError as e:
        return MatchResult(
            name=name,
            passed=False,
            message=str(e),
            error=True,
            error_type=type(e).__name__,
            haystack=text,
            pattern=source,
        )

    if matcher.search(text) is not None:
        return MatchResult(
            name=name,
            passed=True,
            message=f"{debug_quote(text)} matches {source}",
            haystack=text,
            pattern=source,
        )

    try:
        failure = _render_failure(text, source, message, args)
    except MessageTemplateError as e:
        logger.debug(f"Check {name!r}: {e}")
        return MatchResult(
            name=name,
            passed=False,
            message=str(e),
            error=True,
            error_type=type(e).__name__,
            haystack=text,
            pattern=source,
        )

    logger.debug(failure)
    return MatchResult(
        name=name,
        passed=False,
        message=failure,
        haystack=text,
        pattern=source,
    )
