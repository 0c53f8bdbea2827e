"""Selector mapping - turn selector chains into structured Selectors.

A chain such as ``css=.btn >> internal:has-text="Go" >> nth=2`` targets a
single *base* part (``css=.btn``) narrowed by trailing filter parts. The
mapper finds the base part, converts it to an Element and folds the
remaining parts into SelectorFilters and an ordinal.

Mapping is total: unknown engines and attributes degrade to a css element
holding the re-stringified chain and leave a warning in the debug sink.
"""

import math
import re
from dataclasses import dataclass, field
from typing import Optional

import structlog

from ..scenario.models import (
    AltElement,
    CssElement,
    Element,
    ExactText,
    FallbackElement,
    FrameKind,
    FrameRef,
    LabelElement,
    PlaceholderElement,
    PlainText,
    RegexText,
    RoleElement,
    Selector,
    SelectorFilters,
    TestIdElement,
    TextElement,
    TextMatcher,
    TitleElement,
    XPathElement,
)
from .attributes import (
    TRUTHY_OP,
    AttributeSelectorPart,
    RegexValue,
    parse_attribute_selector,
)
from .errors import InvalidSelectorError
from .parser import (
    NestedSelectorBody,
    ParsedSelector,
    SelectorPart,
    parse_selector,
    stringify_selector,
)
from .text_matcher import parse_text_matcher

logger = structlog.get_logger()

FILTER_ENGINES = frozenset({
    "internal:has-text",
    "internal:has-not-text",
    "internal:has",
    "internal:has-not",
    "visible",
    "nth",
})
IGNORE_ENGINES = frozenset({"internal:describe"})

ROLE_STATE_ATTRIBUTES = ("checked", "pressed", "selected", "expanded", "disabled")
ATTR_ELEMENTS = {
    "alt": AltElement,
    "title": TitleElement,
    "placeholder": PlaceholderElement,
}

UNKNOWN_SELECTOR = "UNKNOWN"

_ATTR_VALUE_RE = re.compile(r"=\s*(.+)\s*\]$")
_NTH_RE = re.compile(r"^\s*([+-]?\d+)")
_FRAME_NAME_RE = re.compile(r'^(i?frame)\[name="(.+)"\]$')
_FRAME_SRC_RE = re.compile(r'^(i?frame)\[src="(.+)"\]$')


@dataclass
class SelectorDebugInfo:
    """Mutable sink for selector mapping diagnostics."""

    parsed: Optional[ParsedSelector] = None
    base_index: Optional[int] = None
    base_part: Optional[SelectorPart] = None
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "parsed": self.parsed.to_dict() if self.parsed else None,
            "baseIndex": self.base_index,
            "basePart": self.base_part.to_dict() if self.base_part else None,
            "warnings": list(self.warnings) or None,
        }


def _warn(debug: Optional[SelectorDebugInfo], message: str) -> None:
    logger.debug("Selector mapping warning", warning=message)
    if debug is not None:
        debug.warnings.append(message)


# =============================================================================
# Base part resolution
# =============================================================================


def resolve_base_index(parsed: ParsedSelector) -> int:
    """Index of the part the chain targets, or -1 if none is usable."""
    parts = parsed.parts
    if parsed.capture is not None and parsed.capture >= 0:
        index = parsed.capture
    else:
        index = -1
        for i in range(len(parts) - 1, -1, -1):
            name = parts[i].name
            if name in IGNORE_ENGINES:
                continue
            if name not in FILTER_ENGINES:
                index = i
                break
        # Only filters: point at the last part and let element mapping degrade
        if index == -1:
            index = len(parts) - 1

    while index >= 0 and parts[index].name in IGNORE_ENGINES:
        index -= 1
    return index


# =============================================================================
# Element construction
# =============================================================================


def _attribute_bool(attr: AttributeSelectorPart) -> Optional[bool]:
    if attr.op == TRUTHY_OP:
        return True
    value = attr.value
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    return None


def _attribute_level(value) -> Optional[int]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or not number.is_integer():
        return None
    return int(number)


def _name_matcher(attr: AttributeSelectorPart) -> Optional[TextMatcher]:
    value = attr.value
    if isinstance(value, RegexValue):
        return RegexText(pattern=value.source, flags=value.flags)
    if value is None:
        return None
    text = str(value).lower() if isinstance(value, bool) else str(value)
    if attr.case_sensitive:
        return ExactText(value=text, case_sensitive=True)
    return PlainText(text)


def _role_element(body: str, debug: Optional[SelectorDebugInfo]) -> RoleElement:
    attr_selector = parse_attribute_selector(body, True)
    fields: dict = {"role": attr_selector.name}

    for attr in attr_selector.attributes:
        name = attr.name
        if name == "name":
            matcher = _name_matcher(attr)
            if matcher is not None:
                fields["name"] = matcher
        elif name == "include-hidden":
            flag = _attribute_bool(attr)
            if flag is not None:
                fields["include_hidden"] = flag
        elif name == "level":
            level = _attribute_level(attr.value)
            if level is not None:
                fields["level"] = level
        elif name in ROLE_STATE_ATTRIBUTES:
            flag = _attribute_bool(attr)
            if flag is not None:
                fields[name] = flag
            elif isinstance(attr.value, str):
                # e.g. checked=mixed
                fields[name] = attr.value
        else:
            _warn(debug, f"unhandled internal:role attribute [{name}]")

    return RoleElement(**fields)


def _attr_element(
    body: str, parsed: ParsedSelector, debug: Optional[SelectorDebugInfo]
) -> Element:
    attr_selector = parse_attribute_selector(body, True)
    if not attr_selector.attributes:
        _warn(debug, "internal:attr without attributes")
        return FallbackElement(css=stringify_selector(parsed))

    first = attr_selector.attributes[0]
    attr_name = first.name.lower()
    element_class = ATTR_ELEMENTS.get(attr_name)
    if element_class is None:
        _warn(debug, f"unhandled internal:attr attribute [{attr_name}]")
        return FallbackElement(css=stringify_selector(parsed))

    # Prefer the raw value text so "..."s and /re/ forms survive
    matcher = None
    match = _ATTR_VALUE_RE.search(body)
    if match:
        matcher = parse_text_matcher(match.group(1))
    if matcher is None:
        matcher = _name_matcher(first)
    if matcher is None:
        _warn(debug, f"internal:attr attribute [{attr_name}] without value")
        return FallbackElement(css=stringify_selector(parsed))
    return element_class(matcher)


def element_from_part(
    part: SelectorPart,
    parsed: ParsedSelector,
    debug: Optional[SelectorDebugInfo] = None,
) -> Element:
    """Build the Element for a chain's base part."""
    name = part.name
    body = part.body if isinstance(part.body, str) else part.source

    try:
        if name == "internal:testid":
            attr_selector = parse_attribute_selector(body, True)
            if attr_selector.attributes:
                value = attr_selector.attributes[0].value
                if isinstance(value, RegexValue):
                    _warn(debug, "internal:testid with a regular expression value")
                    return FallbackElement(css=stringify_selector(parsed))
                return TestIdElement(test_id=str(value))
            _warn(debug, "internal:testid without attributes")
            return FallbackElement(css=stringify_selector(parsed))

        if name == "internal:role":
            return _role_element(body, debug)

        if name == "internal:attr":
            return _attr_element(body, parsed, debug)
    except InvalidSelectorError as e:
        _warn(debug, f"malformed {name} body: {e}")
        return FallbackElement(css=stringify_selector(parsed))

    if name == "internal:text":
        return TextElement(parse_text_matcher(body) or PlainText(""))
    if name == "internal:label":
        return LabelElement(parse_text_matcher(body) or PlainText(""))
    if name == "internal:placeholder":
        return PlaceholderElement(parse_text_matcher(body) or PlainText(""))
    if name in ("css", "css:light"):
        return CssElement(css=part.source)
    if name == "xpath":
        return XPathElement(xpath=part.source)

    _warn(debug, f"unhandled engine {name}")
    return FallbackElement(css=stringify_selector(parsed))


# =============================================================================
# Filters
# =============================================================================


def _nested_selector(body) -> Optional[Selector]:
    if not isinstance(body, NestedSelectorBody):
        return None
    nested_raw = stringify_selector(body.parsed)
    return map_parsed_selector(body.parsed, nested_raw)


def filters_from_parts(
    parts: list[SelectorPart],
    debug: Optional[SelectorDebugInfo] = None,
) -> tuple[Optional[SelectorFilters], Optional[int]]:
    """Fold the parts following the base part into filters and an ordinal."""
    fields: dict = {}
    nth: Optional[int] = None

    for part in parts:
        name = part.name
        if name in IGNORE_ENGINES:
            continue

        if name == "internal:has-text":
            fields["has_text"] = parse_text_matcher(part.source)
        elif name == "internal:has-not-text":
            fields["has_not_text"] = parse_text_matcher(part.source)
        elif name == "visible":
            raw = part.source or "true"
            fields["visible"] = raw.strip().lower() != "false"
        elif name == "internal:has":
            nested = _nested_selector(part.body)
            if nested is not None:
                fields["has"] = nested
        elif name == "internal:has-not":
            nested = _nested_selector(part.body)
            if nested is not None:
                fields["has_not"] = nested
        elif name == "nth":
            match = _NTH_RE.match(part.source or "")
            if match:
                nth = int(match.group(1))
        else:
            _warn(debug, f"unhandled parsed attribute part {name}")

    fields = {k: v for k, v in fields.items() if v is not None}
    return (SelectorFilters(**fields) if fields else None), nth


# =============================================================================
# Entry points
# =============================================================================


def map_parsed_selector(
    parsed: ParsedSelector,
    raw: str,
    debug: Optional[SelectorDebugInfo] = None,
) -> Selector:
    """Map an already-parsed chain to a Selector (element, filters, nth).

    Args:
        parsed: Parsed selector chain
        raw: Selector text the chain was parsed from, used for fallbacks
        debug: Optional sink for base index and warnings
    """
    if debug is not None and debug.parsed is None:
        debug.parsed = parsed

    base_index = resolve_base_index(parsed)
    if base_index < 0 or not parsed.parts:
        return Selector(element=FallbackElement(css=raw))

    base_part = parsed.parts[base_index]
    if debug is not None:
        debug.base_index = base_index
        debug.base_part = base_part

    element = element_from_part(base_part, parsed, debug)
    filters, nth = filters_from_parts(parsed.parts[base_index + 1:], debug)
    return Selector(element=element, filters=filters, nth=nth)


def map_selector(
    raw: Optional[str],
    debug: Optional[SelectorDebugInfo] = None,
) -> Optional[Selector]:
    """Parse and map a raw selector string.

    Returns:
        Selector with element/filters/nth, or None when raw is empty or
        cannot be parsed. Callers substitute a raw css fallback.
    """
    if not raw:
        return None
    try:
        parsed = parse_selector(raw)
    except InvalidSelectorError as e:
        logger.debug("Unparseable selector", selector=raw, error=str(e))
        return None
    return map_parsed_selector(parsed, raw, debug)


def fallback_element(raw: Optional[str]) -> FallbackElement:
    """Css fallback for selectors the mapper could not parse."""
    return FallbackElement(css=raw if raw is not None else UNKNOWN_SELECTOR)


# =============================================================================
# Frames
# =============================================================================


def frame_ref_from_string(selector: str) -> FrameRef:
    """Map a recorded frame selector to a FrameRef."""
    match = _FRAME_NAME_RE.match(selector)
    if match:
        return FrameRef(name=match.group(2), kind=FrameKind(match.group(1)))
    match = _FRAME_SRC_RE.match(selector)
    if match:
        return FrameRef(url_exact=match.group(2), kind=FrameKind(match.group(1)))
    return FrameRef(url_contains=selector)


def frame_path_to_refs(path: Optional[list[str]]) -> tuple[FrameRef, ...]:
    if not path:
        return ()
    return tuple(frame_ref_from_string(s) for s in path)
