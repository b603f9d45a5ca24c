"""Tests for the match assertion."""

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from assert_matches_regex import (
    InvalidPatternError,
    MatchFailure,
    MatchResult,
    MessageTemplateError,
    assert_matches,
    check_matches,
    escape,
)
from assert_matches_regex.matching import debug_quote, to_text


# --- assert_matches: success ---


def test_case_insensitive_match():
    assert_matches("Hello!", r"(?i)hello")


def test_trailing_comma():
    assert_matches("abc", r"\w")
    assert_matches("abc", r"\w",)


def test_search_semantics_match_anywhere():
    assert_matches("the year 2024 ended", r"\d{4}")


def test_anchored_pattern_requires_full_string():
    assert_matches("5000", r"^50{3}$")
    with pytest.raises(MatchFailure):
        assert_matches("15000", r"^50{3}$")


def test_empty_pattern_matches_empty_haystack():
    assert_matches("", "")
    assert_matches("anything", "")


def test_unicode_haystack_and_pattern():
    assert_matches("naïve café", r"caf\w")
    assert_matches("日本語テキスト", "本語")


@pytest.mark.parametrize(
    "haystack",
    [
        "abc",
        b"abc",
        bytearray(b"abc"),
        memoryview(b"abc"),
        Path("abc"),
    ],
)
def test_text_like_haystacks(haystack):
    assert_matches(haystack, r"^abc$")


def test_non_text_haystack_is_converted():
    assert_matches(str([1, 2, 3]), r"\[1.*3\]")
    assert_matches([1, 2, 3], r"\[1.*3\]")
    assert_matches(5000, r"^50{3}$")


def test_compiled_pattern_keeps_flags():
    assert_matches("HELLO", re.compile("hello", re.IGNORECASE))


def test_escape_is_re_escape():
    assert escape is re.escape
    assert_matches("price: $5 (approx.)", escape("$5 (approx.)"))


# --- assert_matches: mismatch ---


def test_mismatch_no_message():
    with pytest.raises(MatchFailure) as exc_info:
        assert_matches("abc", r"\d")
    assert str(exc_info.value) == r'assertion failed: "abc" does not match \d'


def test_mismatch_message_no_format():
    with pytest.raises(MatchFailure) as exc_info:
        assert_matches("abc", r"\d", "XXX")
    assert str(exc_info.value) == r'assertion failed: "abc" does not match \d: XXX'


def test_mismatch_message_format():
    with pytest.raises(MatchFailure) as exc_info:
        assert_matches("abc", r"\d", "value={}", "XXX")
    assert str(exc_info.value) == r'assertion failed: "abc" does not match \d: value=XXX'


def test_mismatch_message_several_args():
    with pytest.raises(MatchFailure) as exc_info:
        assert_matches("foo bar", r"^[a-f0-9]+$", "{} is {!r}", "data", "foo bar")
    assert str(exc_info.value) == (
        "assertion failed: \"foo bar\" does not match ^[a-f0-9]+$: data is 'foo bar'"
    )


def test_message_without_args_is_used_verbatim():
    with pytest.raises(MatchFailure) as exc_info:
        assert_matches("abc", r"\d", "expected {data} to be hex")
    assert str(exc_info.value).endswith(": expected {data} to be hex")


def test_mismatch_is_an_assertion_error():
    with pytest.raises(AssertionError):
        assert_matches("abc", r"\d")


def test_mismatch_carries_inputs():
    with pytest.raises(MatchFailure) as exc_info:
        assert_matches(b"abc", r"\d")
    assert exc_info.value.haystack == "abc"
    assert exc_info.value.pattern == r"\d"


def test_mismatch_quotes_control_characters():
    with pytest.raises(MatchFailure) as exc_info:
        assert_matches('say "hi"\n\tbye', r"\d")
    assert str(exc_info.value) == (
        r'assertion failed: "say \"hi\"\n\tbye" does not match \d'
    )


def test_mismatch_with_compiled_pattern_shows_source():
    with pytest.raises(MatchFailure) as exc_info:
        assert_matches("abc", re.compile(r"\d+"))
    assert str(exc_info.value) == r'assertion failed: "abc" does not match \d+'


# --- assert_matches: invalid pattern ---


def test_bad_regex():
    with pytest.raises(InvalidPatternError, match="regex parse error"):
        assert_matches("abc", r"[a-z")


def test_bad_regex_is_not_an_assertion_failure():
    with pytest.raises(Exception) as exc_info:
        assert_matches("abc", r"[a-z")
    assert not isinstance(exc_info.value, AssertionError)
    assert isinstance(exc_info.value, ValueError)
    assert isinstance(exc_info.value.__cause__, re.error)
    assert exc_info.value.pattern == "[a-z"


def test_bad_regex_fails_regardless_of_haystack():
    for haystack in ("", "[a-z", "anything"):
        with pytest.raises(InvalidPatternError):
            assert_matches(haystack, r"(unclosed")


# --- laziness, state and logging ---


class _ExplodingFormat:
    def __format__(self, spec):
        raise RuntimeError("message was rendered")


def test_message_not_rendered_on_success():
    assert_matches("abc", r"\w", "{}", _ExplodingFormat())


def test_success_produces_no_output(caplog, capsys):
    caplog.set_level(logging.DEBUG, logger="assert_matches_regex")
    assert_matches("abc", r"\w")
    assert caplog.records == []
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""


def test_failure_is_logged_at_debug(caplog):
    caplog.set_level(logging.DEBUG, logger="assert_matches_regex")
    with pytest.raises(MatchFailure):
        assert_matches("abc", r"\d")
    assert any("does not match" in r.getMessage() for r in caplog.records)


def test_repeated_calls_are_identical():
    messages = []
    for _ in range(2):
        assert_matches("Hello!", r"(?i)hello")
        with pytest.raises(MatchFailure) as exc_info:
            assert_matches("abc", r"\d", "n={}", 1)
        messages.append(str(exc_info.value))
    assert messages[0] == messages[1]


def test_concurrent_calls_are_independent():
    def _check(i: int) -> str:
        try:
            assert_matches(f"item-{i}", rf"^item-{i}$")
            assert_matches(f"item-{i}", r"\s")
        except MatchFailure as e:
            return str(e)
        return ""

    with ThreadPoolExecutor(max_workers=8) as executor:
        results = list(executor.map(_check, range(32)))

    for i, message in enumerate(results):
        assert message == rf'assertion failed: "item-{i}" does not match \s'


# --- helpers ---


def test_to_text_decodes_invalid_utf8_with_replacement():
    assert to_text(b"\xffabc") == "\ufffdabc"


def test_debug_quote():
    assert debug_quote("abc") == '"abc"'
    assert debug_quote('a"b\\c') == '"a\\"b\\\\c"'
    assert debug_quote("\x1b[0m") == '"\\x1b[0m"'
    assert debug_quote("\u2028") == '"\\u2028"'
    assert debug_quote("café") == '"café"'


# --- check_matches ---


def test_check_matches_pass():
    result = check_matches("abc", r"\w")
    assert isinstance(result, MatchResult)
    assert result.passed is True
    assert result.error is False
    assert result.name == r"matches:\w"


def test_check_matches_fail_uses_assertion_message():
    result = check_matches("abc", r"\d", "value={}", "XXX", name="digits")
    assert result.passed is False
    assert result.error is False
    assert result.name == "digits"
    assert result.message == r'assertion failed: "abc" does not match \d: value=XXX'


def test_check_matches_bad_pattern_is_error():
    result = check_matches("abc", r"[a-z")
    assert result.passed is False
    assert result.error is True
    assert result.message.startswith("regex parse error:")
    assert result.error_type == "InvalidPatternError"
    assert result.pattern == "[a-z"


# --- message templates that do not fit their args ---


@pytest.mark.parametrize(
    "template, args",
    [
        ("{} {}", ("x",)),
        ("{name}", ("x",)),
        ("{:d}", ("x",)),
        ("{0.missing}", ("x",)),
    ],
)
def test_bad_template_raises_template_error(template, args):
    with pytest.raises(MessageTemplateError) as exc_info:
        assert_matches("abc", r"\d", template, *args)
    assert not isinstance(exc_info.value, AssertionError)
    assert isinstance(exc_info.value, ValueError)
    assert exc_info.value.template == template
    assert str(exc_info.value).startswith(f"invalid failure message {template!r}")


def test_bad_template_ignored_on_match():
    assert_matches("abc", r"\w", "{} {}", "x")


def test_check_matches_bad_template_is_error():
    result = check_matches("abc", r"\d", "{} {}", "x", name="two-slots")
    assert result.passed is False
    assert result.error is True
    assert result.error_type == "MessageTemplateError"
    assert result.name == "two-slots"
    assert "IndexError" in result.message
    assert result.pattern == r"\d"
