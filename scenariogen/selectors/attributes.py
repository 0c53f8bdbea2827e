"""Attribute selector body parser.

Parses bodies such as ``button[name="Submit"i][include-hidden]`` or
``[data-testid="login"s]`` into a named selector plus an ordered list of
attribute constraints.
"""

import re
from dataclasses import dataclass, field
from typing import Any

from .errors import InvalidSelectorError
from .text_matcher import compile_regex

TRUTHY_OP = "<truthy>"

_OPERATORS = ("=", "*=", "^=", "$=", "|=", "~=")
_REGEX_FLAG_CHARS = "dgimsuvy"


@dataclass(frozen=True)
class RegexValue:
    """A regular expression attribute value (``/source/flags``)."""

    source: str
    flags: str = ""

    def to_dict(self) -> dict:
        return {"pattern": self.source, "flags": self.flags}


@dataclass(frozen=True)
class AttributeSelectorPart:
    """A single ``[name op value]`` constraint."""

    name: str
    json_path: tuple[str, ...]
    op: str
    value: Any
    case_sensitive: bool

    def to_dict(self) -> dict:
        value = self.value.to_dict() if isinstance(self.value, RegexValue) else self.value
        return {
            "name": self.name,
            "jsonPath": list(self.json_path),
            "op": self.op,
            "value": value,
            "caseSensitive": self.case_sensitive,
        }


@dataclass(frozen=True)
class AttributeSelector:
    """Result of parsing an attribute selector body."""

    name: str
    attributes: list[AttributeSelectorPart] = field(default_factory=list)


def _is_name_char(char: str) -> bool:
    return (
        char >= "\u0080"
        or "0" <= char <= "9"
        or "A" <= char <= "Z"
        or "a" <= char <= "z"
        or char in "_-"
    )


class _AttributeReader:
    """Cursor over an attribute selector string."""

    def __init__(self, selector: str):
        self.selector = selector
        self.pos = 0

    @property
    def eol(self) -> bool:
        return self.pos >= len(self.selector)

    def next(self) -> str:
        return self.selector[self.pos] if not self.eol else ""

    def eat(self) -> str:
        char = self.next()
        self.pos += 1
        return char

    def syntax_error(self, stage: str | None = None):
        if self.eol:
            raise InvalidSelectorError(
                f"Unexpected end of selector while parsing selector `{self.selector}`"
            )
        message = (
            f"Error while parsing selector `{self.selector}` - unexpected symbol "
            f'"{self.next()}" at position {self.pos}'
        )
        if stage:
            message += f" during {stage}"
        raise InvalidSelectorError(message)

    def skip_spaces(self) -> None:
        while not self.eol and self.next().isspace():
            self.eat()

    def read_identifier(self) -> str:
        result = ""
        self.skip_spaces()
        while not self.eol and _is_name_char(self.next()):
            result += self.eat()
        return result

    def read_quoted_string(self, quote: str) -> str:
        result = self.eat()
        if result != quote:
            self.syntax_error("parsing quoted string")
        while not self.eol and self.next() != quote:
            if self.next() == "\\":
                self.eat()
            result += self.eat()
        if self.next() != quote:
            self.syntax_error("parsing quoted string")
        result += self.eat()
        return result

    def read_regular_expression(self) -> RegexValue:
        if self.eat() != "/":
            self.syntax_error("parsing regular expression")
        source = ""
        in_class = False
        while not self.eol:
            char = self.next()
            if char == "\\":
                source += self.eat()
                if self.eol:
                    self.syntax_error("parsing regular expression")
            elif in_class and char == "]":
                in_class = False
            elif not in_class and char == "[":
                in_class = True
            elif not in_class and char == "/":
                break
            source += self.eat()
        if self.eat() != "/":
            self.syntax_error("parsing regular expression")
        flags = ""
        while not self.eol and self.next() in _REGEX_FLAG_CHARS:
            flags += self.eat()
        try:
            compile_regex(source, flags)
        except re.error as e:
            raise InvalidSelectorError(
                f"Error while parsing selector `{self.selector}`: {e}"
            ) from e
        return RegexValue(source=source, flags=flags)

    def read_attribute_token(self) -> str:
        self.skip_spaces()
        if self.next() in ("'", '"'):
            token = self.read_quoted_string(self.next())[1:-1]
        else:
            token = self.read_identifier()
        if not token:
            self.syntax_error("parsing property path")
        return token

    def read_operator(self) -> str:
        self.skip_spaces()
        op = ""
        if not self.eol:
            op += self.eat()
        if not self.eol and op != "=":
            op += self.eat()
        if op not in _OPERATORS:
            self.syntax_error("parsing operator")
        return op

    def read_attribute(self, allow_unquoted: bool) -> AttributeSelectorPart:
        self.eat()  # opening bracket
        json_path = [self.read_attribute_token()]
        self.skip_spaces()
        while self.next() == ".":
            self.eat()
            json_path.append(self.read_attribute_token())
            self.skip_spaces()

        if self.next() == "]":
            self.eat()
            return AttributeSelectorPart(
                name=".".join(json_path),
                json_path=tuple(json_path),
                op=TRUTHY_OP,
                value=None,
                case_sensitive=False,
            )

        operator = self.read_operator()
        value: Any = None
        case_sensitive = True
        self.skip_spaces()
        if self.next() == "/":
            if operator != "=":
                raise InvalidSelectorError(
                    f'Error while parsing selector `{self.selector}` - cannot use '
                    f"{operator} in attribute with regular expression"
                )
            value = self.read_regular_expression()
        elif self.next() in ("'", '"'):
            value = self.read_quoted_string(self.next())[1:-1]
            self.skip_spaces()
            if self.next() in ("i", "I"):
                case_sensitive = False
                self.eat()
            elif self.next() in ("s", "S"):
                case_sensitive = True
                self.eat()
        else:
            value = ""
            while not self.eol and (_is_name_char(self.next()) or self.next() in "+."):
                value += self.eat()
            if value == "true":
                value = True
            elif value == "false":
                value = False
            elif not allow_unquoted:
                try:
                    value = float(value)
                except ValueError:
                    self.syntax_error("parsing attribute value")
        self.skip_spaces()
        if self.next() != "]":
            self.syntax_error("parsing attribute value")
        self.eat()
        if operator != "=" and not isinstance(value, str):
            raise InvalidSelectorError(
                f"Error while parsing selector `{self.selector}` - cannot use "
                f"{operator} in attribute with non-string matching value - {value}"
            )
        return AttributeSelectorPart(
            name=".".join(json_path),
            json_path=tuple(json_path),
            op=operator,
            value=value,
            case_sensitive=case_sensitive,
        )


def parse_attribute_selector(selector: str, allow_unquoted_strings: bool) -> AttributeSelector:
    """Parse an attribute selector body.

    Args:
        selector: Body such as ``textbox[name=/Email/i][level=3]``
        allow_unquoted_strings: Keep unquoted values as strings instead of numbers

    Returns:
        AttributeSelector with the leading name and ordered attributes

    Raises:
        InvalidSelectorError: If the body is malformed
    """
    reader = _AttributeReader(selector)
    name = reader.read_identifier()
    reader.skip_spaces()
    attributes = []
    while reader.next() == "[":
        attributes.append(reader.read_attribute(allow_unquoted_strings))
        reader.skip_spaces()
    if not reader.eol:
        reader.syntax_error()
    if not name and not attributes:
        raise InvalidSelectorError(
            f"Error while parsing selector `{selector}` - selector cannot be empty"
        )
    return AttributeSelector(name=name, attributes=attributes)
