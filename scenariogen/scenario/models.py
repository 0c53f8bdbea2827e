"""Data models for the scenario document.

Every model renders itself with ``to_dict()`` using the document's field
names (camelCase, plus the ``url_exact``/``url_contains`` frame and
expectation hints). ``to_dict()`` keeps ``None`` entries so that the
formatters decide what gets stripped.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Optional, Union


# =============================================================================
# Enums
# =============================================================================


class Button(str, Enum):
    """Mouse buttons."""

    LEFT = "left"
    RIGHT = "right"
    MIDDLE = "middle"


class Modifier(str, Enum):
    """Keyboard modifiers, in bitmask order."""

    ALT = "Alt"
    CONTROL = "Control"
    META = "Meta"
    SHIFT = "Shift"


class FrameKind(str, Enum):
    """Kind of frame element a FrameRef points at."""

    AUTO = "auto"
    IFRAME = "iframe"
    FRAME = "frame"
    OBJECT = "object"


class StepAction(str, Enum):
    """Canonical step action tags."""

    NAVIGATE = "navigate"
    CLICK = "click"
    DBLCLICK = "dblclick"
    FILL = "fill"
    PRESS = "press"
    CHECK = "check"
    UNCHECK = "uncheck"
    SELECT = "select"
    HOVER = "hover"
    CLOSE_PAGE = "closePage"
    ASSERT_TEXT = "assert.text"
    ASSERT_VALUE = "assert.value"
    ASSERT_CHECKED = "assert.checked"
    ASSERT_VISIBLE = "assert.visible"


class DialogType(str, Enum):
    """Browser dialog types."""

    ALERT = "alert"
    BEFOREUNLOAD = "beforeunload"
    CONFIRM = "confirm"
    PROMPT = "prompt"


UNSUPPORTED_SUFFIX = " (NOT SUPPORTED)"


def _value(v: Any) -> Any:
    """Render enums and nested models."""
    if isinstance(v, Enum):
        return v.value
    if hasattr(v, "to_dict"):
        return v.to_dict()
    if isinstance(v, (list, tuple)):
        return [_value(x) for x in v]
    return v


# =============================================================================
# Text matchers
# =============================================================================


@dataclass(frozen=True)
class PlainText:
    """Case-insensitive substring match."""

    value: str

    def to_dict(self) -> str:
        return self.value


@dataclass(frozen=True)
class ExactText:
    """Exact, whole-string match."""

    value: str
    case_sensitive: bool = True

    def to_dict(self) -> dict:
        result = {"value": self.value, "exact": True}
        if not self.case_sensitive:
            result["caseSensitive"] = False
        return result


@dataclass(frozen=True)
class RegexText:
    """Regular expression match."""

    pattern: str
    flags: str = ""

    def to_dict(self) -> dict:
        return {"pattern": self.pattern, "flags": self.flags or None}


TextMatcher = Union[PlainText, ExactText, RegexText]


def text_matcher_strings(matcher: TextMatcher) -> list[str]:
    """Strings a matcher discriminates on (for heuristics such as masking)."""
    if isinstance(matcher, RegexText):
        return [matcher.pattern]
    return [matcher.value]


# =============================================================================
# Elements
# =============================================================================


@dataclass(frozen=True)
class TestIdElement:
    __test__ = False

    kind: ClassVar[str] = "testId"
    test_id: str

    def to_dict(self) -> dict:
        return {"testId": self.test_id}


@dataclass(frozen=True)
class CssElement:
    kind: ClassVar[str] = "css"
    css: str

    def to_dict(self) -> dict:
        return {"css": self.css}


@dataclass(frozen=True)
class FallbackElement(CssElement):
    """Raw selector text kept as css when no structured element applies."""

    kind: ClassVar[str] = "fallback"


@dataclass(frozen=True)
class XPathElement:
    kind: ClassVar[str] = "xpath"
    xpath: str

    def to_dict(self) -> dict:
        return {"xpath": self.xpath}


@dataclass(frozen=True)
class RoleElement:
    """ARIA role with optional accessible name and state filters."""

    kind: ClassVar[str] = "role"
    role: str
    name: Optional[TextMatcher] = None
    checked: Optional[Union[bool, str]] = None
    pressed: Optional[Union[bool, str]] = None
    selected: Optional[Union[bool, str]] = None
    expanded: Optional[Union[bool, str]] = None
    disabled: Optional[Union[bool, str]] = None
    include_hidden: Optional[bool] = None
    level: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "role": self.role,
            "name": _value(self.name),
            "checked": self.checked,
            "pressed": self.pressed,
            "selected": self.selected,
            "expanded": self.expanded,
            "disabled": self.disabled,
            "includeHidden": self.include_hidden,
            "level": self.level,
        }


@dataclass(frozen=True)
class _TextElement:
    kind: ClassVar[str] = ""
    matcher: TextMatcher

    def to_dict(self) -> dict:
        return {self.kind: _value(self.matcher)}


@dataclass(frozen=True)
class TextElement(_TextElement):
    kind: ClassVar[str] = "text"


@dataclass(frozen=True)
class LabelElement(_TextElement):
    kind: ClassVar[str] = "label"


@dataclass(frozen=True)
class PlaceholderElement(_TextElement):
    kind: ClassVar[str] = "placeholder"


@dataclass(frozen=True)
class AltElement(_TextElement):
    kind: ClassVar[str] = "alt"


@dataclass(frozen=True)
class TitleElement(_TextElement):
    kind: ClassVar[str] = "title"


Element = Union[
    TestIdElement,
    CssElement,
    FallbackElement,
    XPathElement,
    RoleElement,
    TextElement,
    LabelElement,
    PlaceholderElement,
    AltElement,
    TitleElement,
]


# =============================================================================
# Frames and selectors
# =============================================================================


@dataclass(frozen=True)
class FrameRef:
    """Reference to a frame on the path to the target element.

    Exactly one of ``name``, ``url_exact``, ``url_contains`` or ``index`` is set.
    """

    name: Optional[str] = None
    url_exact: Optional[str] = None
    url_contains: Optional[str] = None
    index: Optional[int] = None
    kind: Optional[FrameKind] = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "url_exact": self.url_exact,
            "url_contains": self.url_contains,
            "index": self.index,
            "kind": _value(self.kind),
        }


@dataclass(frozen=True)
class SelectorFilters:
    has_text: Optional[TextMatcher] = None
    has_not_text: Optional[TextMatcher] = None
    visible: Optional[bool] = None
    has: Optional["Selector"] = None
    has_not: Optional["Selector"] = None

    def to_dict(self) -> dict:
        return {
            "hasText": _value(self.has_text),
            "hasNotText": _value(self.has_not_text),
            "visible": self.visible,
            "has": _value(self.has),
            "hasNot": _value(self.has_not),
        }


@dataclass(frozen=True)
class Selector:
    """Structured description of which element an action targets."""

    page: Optional[str] = None
    frame_path: tuple[FrameRef, ...] = ()
    element: Optional[Element] = None
    filters: Optional[SelectorFilters] = None
    nth: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "page": self.page,
            "framePath": [f.to_dict() for f in self.frame_path],
            "element": _value(self.element),
            "filters": _value(self.filters),
            "nth": self.nth,
        }


# =============================================================================
# Expectations
# =============================================================================


@dataclass(frozen=True)
class NavigationExpectation:
    expect: ClassVar[str] = "navigation"
    url_exact: Optional[str] = None
    url_contains: Optional[str] = None

    def to_dict(self) -> dict:
        return {"expect": self.expect, "url_exact": self.url_exact, "url_contains": self.url_contains}


@dataclass(frozen=True)
class PopupExpectation:
    expect: ClassVar[str] = "popup"
    page_alias: Optional[str] = None
    url_exact: Optional[str] = None
    url_contains: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "expect": self.expect,
            "pageAlias": self.page_alias,
            "url_exact": self.url_exact,
            "url_contains": self.url_contains,
        }


@dataclass(frozen=True)
class DownloadExpectation:
    expect: ClassVar[str] = "download"

    def to_dict(self) -> dict:
        return {"expect": self.expect}


@dataclass(frozen=True)
class DialogExpectation:
    expect: ClassVar[str] = "dialog"
    type: Optional[DialogType] = None
    message: Optional[TextMatcher] = None
    accepted: Optional[bool] = None

    def to_dict(self) -> dict:
        return {
            "expect": self.expect,
            "type": _value(self.type),
            "message": _value(self.message),
            "accepted": self.accepted,
        }


Expectation = Union[NavigationExpectation, PopupExpectation, DownloadExpectation, DialogExpectation]


# =============================================================================
# Steps
# =============================================================================


@dataclass(frozen=True)
class ValueOption:
    value: str

    def to_dict(self) -> dict:
        return {"value": self.value}


@dataclass(frozen=True)
class LabelOption:
    label: str

    def to_dict(self) -> dict:
        return {"label": self.label}


@dataclass(frozen=True)
class IndexOption:
    index: int

    def to_dict(self) -> dict:
        return {"index": self.index}


SelectOption = Union[ValueOption, LabelOption, IndexOption]


@dataclass(frozen=True)
class Step:
    """One recorded interaction or assertion.

    ``action`` is a StepAction value, or the recorded action name with
    UNSUPPORTED_SUFFIX for actions that have no structured mapping.
    """

    action: str
    url: Optional[str] = None
    text: Optional[Union[str, TextMatcher]] = None
    key: Optional[str] = None
    value: Optional[str] = None
    checked: Optional[bool] = None
    visible: Optional[bool] = None
    options: Optional[tuple[SelectOption, ...]] = None
    button: Optional[Button] = None
    modifiers: Optional[tuple[Modifier, ...]] = None
    click_count: Optional[int] = None
    expectations: Optional[tuple[Expectation, ...]] = None
    selector: Optional[Selector] = None
    description: Optional[str] = None
    timeout: Optional[int] = None
    retry: Optional[int] = None
    debug: Optional[dict[str, Any]] = None

    @property
    def is_supported(self) -> bool:
        return not self.action.endswith(UNSUPPORTED_SUFFIX)

    def to_dict(self) -> dict:
        return {
            "action": _value(self.action),
            "description": self.description,
            "url": self.url,
            "text": _value(self.text),
            "key": self.key,
            "value": self.value,
            "checked": self.checked,
            "visible": self.visible,
            "options": _value(self.options),
            "button": _value(self.button),
            "modifiers": _value(self.modifiers),
            "clickCount": self.click_count,
            "expectations": _value(self.expectations),
            "timeout": self.timeout,
            "retry": self.retry,
            "selector": _value(self.selector),
            "debug": self.debug,
        }


# =============================================================================
# Scenario
# =============================================================================


@dataclass(frozen=True)
class ScenarioHooks:
    before: list[str] = field(default_factory=list)
    after: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"before": list(self.before), "after": list(self.after)}


@dataclass(frozen=True)
class Scenario:
    """A complete scenario document."""

    version: str
    name: str
    base_url: Optional[str] = None
    description: Optional[str] = None
    tags: list[str] = field(default_factory=list)
    vars: dict[str, str] = field(default_factory=dict)
    hooks: Optional[ScenarioHooks] = None
    steps: list[Step] = field(default_factory=list)

    def header_dict(self) -> dict:
        """Metadata fields, in document order, without the steps."""
        return {
            "version": self.version,
            "name": self.name,
            "description": self.description,
            "tags": list(self.tags),
            "baseURL": self.base_url,
            "vars": dict(self.vars),
            "hooks": _value(self.hooks),
        }

    def to_dict(self) -> dict:
        result = self.header_dict()
        result["steps"] = [s.to_dict() for s in self.steps]
        return result
