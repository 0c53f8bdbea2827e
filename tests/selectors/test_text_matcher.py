"""Tests for text specifier parsing."""

import re

import pytest

from scenariogen.scenario.models import ExactText, PlainText, RegexText
from scenariogen.selectors.text_matcher import compile_regex, escape_regex, parse_text_matcher


class TestParseTextSpec:
    """Tests for parse_text_matcher."""

    def test_regex_literal(self):
        assert parse_text_matcher(r"/Sign\s+in/i") == RegexText(pattern=r"Sign\s+in", flags="i")

    def test_regex_flags_are_normalized(self):
        assert parse_text_matcher("/a/ig") == RegexText(pattern="a", flags="gi")

    def test_invalid_regex_falls_through_to_plain(self):
        assert parse_text_matcher("/[/") == PlainText("/[/")

    def test_exact_case_sensitive(self):
        assert parse_text_matcher('"Sign in"s') == ExactText(value="Sign in", case_sensitive=True)

    def test_case_insensitive_is_escaped_regex(self):
        matcher = parse_text_matcher('"a.b (c)"i')

        assert matcher == RegexText(pattern=r"a\.b \(c\)", flags="i")
        assert compile_regex(matcher.pattern, matcher.flags).search("A.B (C)")

    def test_json_quoted_plain(self):
        assert parse_text_matcher('"say \\"hi\\""') == PlainText('say "hi"')

    def test_raw_plain(self):
        assert parse_text_matcher("Sign in") == PlainText("Sign in")

    def test_empty(self):
        assert parse_text_matcher("") is None
        assert parse_text_matcher(None) is None

    def test_trailing_newline_is_not_a_regex(self):
        assert parse_text_matcher("/a/\n") == PlainText("/a/\n")


class TestRegexHelpers:
    """Tests for escape_regex and compile_regex."""

    def test_escape_regex(self):
        assert escape_regex("1+1=2?") == r"1\+1=2\?"
        assert re.fullmatch(escape_regex("$[x]"), "$[x]")

    def test_compile_regex_flags(self):
        assert compile_regex("abc", "i").match("ABC")

    def test_duplicate_flags_rejected(self):
        with pytest.raises(re.error):
            compile_regex("a", "ii")

    def test_unicode_flags_exclusive(self):
        with pytest.raises(re.error):
            compile_regex("a", "uv")
