"""Selector chain parser.

A selector is a chain of ``engine=body`` parts joined by ``>>``:

    internal:role=button[name="Submit"i] >> nth=0
    css=.card >> internal:has="internal:text=\\"Buy\\"i"

Parts whose engine is prefixed with ``*`` are "captured": the chain as a
whole resolves to that part instead of the last one.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Optional, Union

from .errors import InvalidSelectorError

NESTED_SELECTOR_NAMES = frozenset({
    "internal:has",
    "internal:has-not",
    "internal:and",
    "internal:or",
    "internal:chain",
    "left-of",
    "right-of",
    "above",
    "below",
    "near",
})
NESTED_SELECTOR_NAMES_WITH_DISTANCE = frozenset({"left-of", "right-of", "above", "below", "near"})

_ENGINE_NAME_RE = re.compile(r"^[a-zA-Z_0-9\-+:*]+$")
_XPATH_RE = re.compile(r"^\(*//")
_TEXT_PREFIX_RE = re.compile(r"^\s*text\s*=(.*)$", re.DOTALL)


@dataclass(frozen=True)
class NestedSelectorBody:
    """Body of a nested engine such as ``internal:has``."""

    parsed: "ParsedSelector"
    distance: Optional[float] = None

    def to_dict(self) -> dict:
        result = {"parsed": self.parsed.to_dict()}
        if self.distance is not None:
            result["distance"] = self.distance
        return result


@dataclass(frozen=True)
class SelectorPart:
    """One ``engine=body`` segment of a selector chain."""

    name: str
    body: Union[str, NestedSelectorBody]
    source: str

    def to_dict(self) -> dict:
        body = self.body.to_dict() if isinstance(self.body, NestedSelectorBody) else self.body
        return {"name": self.name, "body": body, "source": self.source}


@dataclass(frozen=True)
class ParsedSelector:
    """An ordered chain of selector parts with an optional capture index."""

    parts: list[SelectorPart] = field(default_factory=list)
    capture: Optional[int] = None

    def to_dict(self) -> dict:
        result: dict = {"parts": [p.to_dict() for p in self.parts]}
        if self.capture is not None:
            result["capture"] = self.capture
        return result


def _split_chain(selector: str) -> tuple[list[tuple[str, str]], Optional[int]]:
    """Split a raw selector into (name, body) pairs and the capture index."""
    parts: list[tuple[str, str]] = []
    capture: Optional[int] = None
    index = 0
    start = 0
    quote: Optional[str] = None

    def append():
        nonlocal capture
        part = selector[start:index].strip()
        eq_index = part.find("=")
        if eq_index != -1 and _ENGINE_NAME_RE.match(part[:eq_index].strip()):
            name = part[:eq_index].strip()
            body = part[eq_index + 1:]
        elif len(part) > 1 and part[0] == '"' and part[-1] == '"':
            name, body = "text", part
        elif len(part) > 1 and part[0] == "'" and part[-1] == "'":
            name, body = "text", part
        elif _XPATH_RE.match(part) or part.startswith(".."):
            name, body = "xpath", part
        else:
            name, body = "css", part

        captured = False
        if name.startswith("*"):
            captured = True
            name = name[1:]
        parts.append((name, body))
        if captured:
            if capture is not None:
                raise InvalidSelectorError(
                    "Only one of the selectors can capture using * modifier"
                )
            capture = len(parts) - 1

    if ">>" not in selector:
        index = len(selector)
        append()
        return parts, capture

    def should_ignore_text_quote() -> bool:
        match = _TEXT_PREFIX_RE.match(selector[start:index])
        return bool(match and match.group(1))

    while index < len(selector):
        char = selector[index]
        if char == "\\" and index + 1 < len(selector):
            index += 2
        elif char == quote:
            quote = None
            index += 1
        elif not quote and char in ('"', "'", "`") and not should_ignore_text_quote():
            quote = char
            index += 1
        elif not quote and char == ">" and selector[index + 1:index + 2] == ">":
            append()
            index += 2
            start = index
        else:
            index += 1
    append()
    return parts, capture


def _parse_nested(name: str, body: str) -> NestedSelectorBody:
    try:
        unescaped = json.loads("[" + body + "]")
    except ValueError as e:
        raise InvalidSelectorError(f"Malformed selector: {name}={body}") from e
    if (
        not isinstance(unescaped, list)
        or not 1 <= len(unescaped) <= 2
        or not isinstance(unescaped[0], str)
    ):
        raise InvalidSelectorError(f"Malformed selector: {name}={body}")
    distance = None
    if len(unescaped) == 2:
        if (
            isinstance(unescaped[1], bool)
            or not isinstance(unescaped[1], (int, float))
            or name not in NESTED_SELECTOR_NAMES_WITH_DISTANCE
        ):
            raise InvalidSelectorError(f"Malformed selector: {name}={body}")
        distance = unescaped[1]
    return NestedSelectorBody(parsed=parse_selector(unescaped[0]), distance=distance)


def _strip_shared_frame_prefix(
    nested: NestedSelectorBody, outer: list[SelectorPart]
) -> NestedSelectorBody:
    """Drop a frame-entering prefix that the nested chain repeats from the outer chain."""
    inner = nested.parsed.parts
    last_frame = -1
    for i in range(len(inner) - 1, -1, -1):
        if inner[i].name == "internal:control" and inner[i].body == "enter-frame":
            last_frame = i
            break
    if last_frame == -1:
        return nested
    prefix = inner[:last_frame + 1]
    if _parts_equal(prefix, outer[:last_frame + 1]):
        capture = nested.parsed.capture
        if capture is not None:
            capture -= last_frame + 1
        return NestedSelectorBody(
            parsed=ParsedSelector(parts=inner[last_frame + 1:], capture=capture),
            distance=nested.distance,
        )
    return nested


def _parts_equal(a: list[SelectorPart], b: list[SelectorPart]) -> bool:
    if len(a) != len(b):
        return False
    return all(
        x.name == y.name and stringify_selector(ParsedSelector(parts=[x])) == stringify_selector(ParsedSelector(parts=[y]))
        for x, y in zip(a, b)
    )


def parse_selector(selector: str) -> ParsedSelector:
    """Parse a raw selector chain.

    Args:
        selector: Raw selector text

    Returns:
        ParsedSelector with one entry per chain part

    Raises:
        InvalidSelectorError: If the selector is malformed
    """
    raw_parts, capture = _split_chain(selector)
    parts: list[SelectorPart] = []
    for name, body in raw_parts:
        if not body.strip():
            raise InvalidSelectorError(f"Empty selector part in `{selector}`")
        if name in NESTED_SELECTOR_NAMES:
            nested = _strip_shared_frame_prefix(_parse_nested(name, body), parts)
            parts.append(SelectorPart(name=name, body=nested, source=body))
            continue
        parts.append(SelectorPart(name=name, body=body, source=body))

    if parts[0].name in NESTED_SELECTOR_NAMES:
        raise InvalidSelectorError(f'"{parts[0].name}" selector cannot be first')
    return ParsedSelector(parts=parts, capture=capture)


def stringify_selector(selector: Union[str, ParsedSelector], force_engine_name: bool = False) -> str:
    """Render a parsed chain back to canonical selector text."""
    if isinstance(selector, str):
        return selector

    rendered = []
    for i, part in enumerate(selector.parts):
        include_engine = True
        if not force_engine_name and i != selector.capture:
            if part.name == "css":
                include_engine = False
            elif part.name == "xpath" and (
                part.source.startswith("//") or part.source.startswith("..")
            ):
                include_engine = False
        prefix = f"{part.name}=" if include_engine else ""
        marker = "*" if i == selector.capture else ""
        rendered.append(f"{marker}{prefix}{part.source}")
    return " >> ".join(rendered)
