"""Selector parsing and mapping.

Parses recorded selector chains (``css=.btn >> internal:has-text="Go"``)
and maps them to structured Selector descriptions.
"""

from .attributes import AttributeSelector, AttributeSelectorPart, RegexValue, parse_attribute_selector
from .errors import InvalidSelectorError
from .mapper import (
    SelectorDebugInfo,
    fallback_element,
    frame_path_to_refs,
    frame_ref_from_string,
    map_parsed_selector,
    map_selector,
    resolve_base_index,
)
from .parser import NestedSelectorBody, ParsedSelector, SelectorPart, parse_selector, stringify_selector
from .text_matcher import compile_regex, escape_regex, parse_text_matcher

__all__ = [
    # Grammar
    "ParsedSelector",
    "SelectorPart",
    "NestedSelectorBody",
    "parse_selector",
    "stringify_selector",
    "AttributeSelector",
    "AttributeSelectorPart",
    "RegexValue",
    "parse_attribute_selector",
    "InvalidSelectorError",
    # Text
    "parse_text_matcher",
    "escape_regex",
    "compile_regex",
    # Mapping
    "SelectorDebugInfo",
    "resolve_base_index",
    "map_parsed_selector",
    "map_selector",
    "fallback_element",
    "frame_ref_from_string",
    "frame_path_to_refs",
]
