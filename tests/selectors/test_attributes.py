"""Tests for the attribute selector body parser."""

import pytest

from scenariogen.selectors.attributes import TRUTHY_OP, RegexValue, parse_attribute_selector
from scenariogen.selectors.errors import InvalidSelectorError


class TestParseAttributeSelector:
    """Tests for parse_attribute_selector."""

    def test_role_with_name_and_flag(self):
        result = parse_attribute_selector('button[name="Submit"i][include-hidden]', True)

        assert result.name == "button"
        assert len(result.attributes) == 2
        name, hidden = result.attributes
        assert name.name == "name"
        assert name.op == "="
        assert name.value == "Submit"
        assert name.case_sensitive is False
        assert hidden.name == "include-hidden"
        assert hidden.op == TRUTHY_OP

    def test_quoted_value_defaults_case_sensitive(self):
        result = parse_attribute_selector('[data-testid="login"]', True)

        assert result.name == ""
        assert result.attributes[0].value == "login"
        assert result.attributes[0].case_sensitive is True

    def test_escaped_quote_in_value(self):
        result = parse_attribute_selector('[title="say \\"hi\\""]', True)

        assert result.attributes[0].value == 'say "hi"'

    def test_regex_value(self):
        result = parse_attribute_selector("textbox[name=/E-?mail/i]", True)

        assert result.attributes[0].value == RegexValue(source="E-?mail", flags="i")

    def test_regex_requires_equals(self):
        with pytest.raises(InvalidSelectorError):
            parse_attribute_selector("textbox[name*=/mail/]", True)

    def test_invalid_regex_rejected(self):
        with pytest.raises(InvalidSelectorError):
            parse_attribute_selector("textbox[name=/(/]", True)

    def test_unicode_sets_flag(self):
        assert parse_attribute_selector("x[name=/a/v]", True).attributes[0].value == RegexValue(
            source="a", flags="v"
        )

    @pytest.mark.parametrize("body", ["x[name=/a/ii]", "x[name=/a/uv]"])
    def test_invalid_regex_flags_rejected(self, body):
        with pytest.raises(InvalidSelectorError):
            parse_attribute_selector(body, True)

    def test_unquoted_booleans(self):
        result = parse_attribute_selector("checkbox[checked=false][disabled=true]", True)

        assert result.attributes[0].value is False
        assert result.attributes[1].value is True

    def test_unquoted_strings_or_numbers(self):
        assert parse_attribute_selector("heading[level=2]", True).attributes[0].value == "2"
        assert parse_attribute_selector("heading[level=2]", False).attributes[0].value == 2.0

    def test_json_path(self):
        result = parse_attribute_selector("[a.b.c=\"x\"]", True)

        assert result.attributes[0].json_path == ("a", "b", "c")
        assert result.attributes[0].name == "a.b.c"

    def test_unterminated_attribute(self):
        with pytest.raises(InvalidSelectorError):
            parse_attribute_selector('button[name="Submit"', True)

    def test_empty_selector(self):
        with pytest.raises(InvalidSelectorError):
            parse_attribute_selector("", True)

    def test_to_dict(self):
        part = parse_attribute_selector("x[name=/a/i]", True).attributes[0]

        assert part.to_dict() == {
            "name": "name",
            "jsonPath": ["name"],
            "op": "=",
            "value": {"pattern": "a", "flags": "i"},
            "caseSensitive": True,
        }
