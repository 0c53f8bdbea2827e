"""Action mapping - recorded actions to scenario Steps."""

import re
from typing import Optional
from urllib.parse import urlsplit

import structlog

from ..recording.models import (
    Action,
    ActionInContext,
    AssertCheckedAction,
    AssertTextAction,
    AssertValueAction,
    AssertVisibleAction,
    CheckAction,
    ClickAction,
    ClosePageAction,
    DialogSignal,
    DownloadSignal,
    FillAction,
    NavigateAction,
    NavigationSignal,
    OpenPageAction,
    PopupSignal,
    PressAction,
    SelectAction,
    SelectorAction,
    Signal,
    UncheckAction,
    UnsupportedAction,
)
from ..selectors.mapper import (
    SelectorDebugInfo,
    fallback_element,
    frame_path_to_refs,
    map_selector,
)
from .models import (
    UNSUPPORTED_SUFFIX,
    Button,
    CssElement,
    DialogExpectation,
    DialogType,
    DownloadExpectation,
    Element,
    Expectation,
    LabelElement,
    Modifier,
    NavigationExpectation,
    PlaceholderElement,
    PlainText,
    PopupExpectation,
    RoleElement,
    Selector,
    Step,
    StepAction,
    TestIdElement,
    TextElement,
    ValueOption,
    XPathElement,
    text_matcher_strings,
)

logger = structlog.get_logger()

DEFAULT_MASK_TOKEN = "${env:SCENARIO_PASSWORD}"

SECRET_RE = re.compile(r"password|pwd|secret", re.IGNORECASE)

# URLs that carry no scenario information (blank tabs, error pages, inline content)
TRIVIAL_URL_PREFIXES = (
    "about:blank",
    "chrome-error://",
    "devtools://",
    "edge://",
    "data:",
    "blob:",
    "chrome-extension://",
)

# Bit -> modifier, in output order
MODIFIER_BITS = (
    (1, Modifier.ALT),
    (2, Modifier.CONTROL),
    (4, Modifier.META),
    (8, Modifier.SHIFT),
)

_DEFAULT_PORTS = {"http": 80, "https": 443, "ws": 80, "wss": 443, "ftp": 21}


# =============================================================================
# Normalizers
# =============================================================================


def decode_modifiers(mask: Optional[int]) -> Optional[tuple[Modifier, ...]]:
    """Decode a modifier bitmask (1=Alt, 2=Control, 4=Meta, 8=Shift)."""
    if not mask:
        return None
    result = tuple(modifier for bit, modifier in MODIFIER_BITS if mask & bit)
    return result or None


def is_trivial_url(url: Optional[str]) -> bool:
    if not url:
        return True
    return url.startswith(TRIVIAL_URL_PREFIXES)


def url_origin(url: str) -> Optional[str]:
    """scheme://host[:port] for hierarchical URLs, None if there is no origin."""
    try:
        parts = urlsplit(url)
        hostname = parts.hostname
        port = parts.port
    except ValueError:
        return None
    if not parts.scheme or not hostname:
        return None
    scheme = parts.scheme.lower()
    if ":" in hostname:
        hostname = f"[{hostname}]"
    if port is not None and port != _DEFAULT_PORTS.get(scheme):
        return f"{scheme}://{hostname}:{port}"
    return f"{scheme}://{hostname}"


def relative_to_base(url: str, base_url: Optional[str]) -> str:
    """Path, query and fragment of url when it shares base_url's origin."""
    if not base_url:
        return url
    base_origin = url_origin(base_url)
    target_origin = url_origin(url)
    if base_origin is None or target_origin is None or base_origin != target_origin:
        return url
    parts = urlsplit(url)
    path = parts.path or "/"
    query = f"?{parts.query}" if parts.query else ""
    fragment = f"#{parts.fragment}" if parts.fragment else ""
    return f"{path}{query}{fragment}"


def _url_hint(url: Optional[str]) -> dict:
    if not url:
        return {}
    try:
        parts = urlsplit(url)
    except ValueError:
        return {"url_contains": url}
    if parts.scheme.lower() in ("http", "https") and parts.netloc:
        return {"url_exact": url}
    return {"url_contains": url}


def _button(value: str) -> Optional[Button]:
    try:
        return Button(value)
    except ValueError:
        return None


# =============================================================================
# Secret masking
# =============================================================================


def _element_strings(element: Element) -> list[str]:
    if isinstance(element, TestIdElement):
        return [element.test_id]
    if isinstance(element, (LabelElement, PlaceholderElement, TextElement)):
        return text_matcher_strings(element.matcher)
    if isinstance(element, RoleElement):
        return text_matcher_strings(element.name) if element.name is not None else []
    if isinstance(element, CssElement):
        return [element.css]
    if isinstance(element, XPathElement):
        return [element.xpath]
    return []


def looks_secret(element: Optional[Element]) -> bool:
    """Whether the element's identifying text suggests a secret input."""
    if element is None:
        return False
    return any(SECRET_RE.search(s) for s in _element_strings(element))


def mask_value(
    element: Optional[Element],
    text: Optional[str],
    mask_token: str = DEFAULT_MASK_TOKEN,
) -> Optional[str]:
    """Replace text with mask_token when the target element looks like a secret field."""
    if text is None:
        return None
    return mask_token if looks_secret(element) else text


# =============================================================================
# Expectations
# =============================================================================


def expectation_from_signal(signal: Signal) -> Optional[Expectation]:
    if isinstance(signal, NavigationSignal):
        return NavigationExpectation(**_url_hint(signal.url))
    if isinstance(signal, PopupSignal):
        return PopupExpectation(page_alias=signal.popup_alias)
    if isinstance(signal, DownloadSignal):
        return DownloadExpectation()
    if isinstance(signal, DialogSignal):
        try:
            dialog_type = DialogType(signal.type) if signal.type else None
        except ValueError:
            dialog_type = None
        return DialogExpectation(
            type=dialog_type,
            message=PlainText(signal.message) if signal.message else None,
            accepted=signal.accepted,
        )
    return None


def expectations_from_signals(signals) -> Optional[tuple[Expectation, ...]]:
    """Expectations for an action's signals; None rather than an empty tuple."""
    expectations = []
    for signal in signals or ():
        expectation = expectation_from_signal(signal)
        if expectation is not None:
            expectations.append(expectation)
    return tuple(expectations) or None


# =============================================================================
# Selector
# =============================================================================


def build_structured_selector(
    action_in_context: ActionInContext,
    debug: Optional[SelectorDebugInfo] = None,
) -> Selector:
    """Selector for an action: page, frame path and (for element actions) the element."""
    frame = action_in_context.frame
    page = frame.page_alias or None
    frame_path = frame_path_to_refs(list(frame.frame_path))

    action = action_in_context.action
    if not isinstance(action, SelectorAction):
        return Selector(page=page, frame_path=frame_path)
    if isinstance(action, UnsupportedAction) and "selector" not in action.payload:
        return Selector(page=page, frame_path=frame_path)

    raw = action.selector
    mapped = map_selector(raw, debug)
    if mapped is None:
        return Selector(page=page, frame_path=frame_path, element=fallback_element(raw))
    return Selector(
        page=page,
        frame_path=frame_path,
        element=mapped.element,
        filters=mapped.filters,
        nth=mapped.nth,
    )


# =============================================================================
# Steps
# =============================================================================


def map_action(
    action: Action,
    selector: Selector,
    base_url: Optional[str] = None,
    mask_token: str = DEFAULT_MASK_TOKEN,
) -> Step:
    """Build the Step for a recorded action.

    Navigation URLs sharing base_url's origin are rewritten to their path.
    Trivial navigations are filtered out by the emitter before this point.
    """
    expectations = expectations_from_signals(getattr(action, "signals", ()))

    if isinstance(action, (NavigateAction, OpenPageAction)):
        return Step(
            action=StepAction.NAVIGATE.value,
            url=relative_to_base(action.url, base_url),
            selector=selector,
        )

    if isinstance(action, ClickAction):
        if action.click_count == 2:
            action_tag, click_count = StepAction.DBLCLICK, None
        else:
            action_tag = StepAction.CLICK
            click_count = action.click_count if action.click_count != 1 else None
        return Step(
            action=action_tag.value,
            button=_button(action.button),
            modifiers=decode_modifiers(action.modifiers),
            click_count=click_count,
            expectations=expectations,
            selector=selector,
        )

    if isinstance(action, FillAction):
        return Step(
            action=StepAction.FILL.value,
            text=mask_value(selector.element, action.text, mask_token),
            expectations=expectations,
            selector=selector,
        )

    if isinstance(action, PressAction):
        return Step(
            action=StepAction.PRESS.value,
            key=action.key,
            modifiers=decode_modifiers(action.modifiers),
            expectations=expectations,
            selector=selector,
        )

    if isinstance(action, CheckAction):
        return Step(action=StepAction.CHECK.value, expectations=expectations, selector=selector)

    if isinstance(action, UncheckAction):
        return Step(action=StepAction.UNCHECK.value, expectations=expectations, selector=selector)

    if isinstance(action, SelectAction):
        return Step(
            action=StepAction.SELECT.value,
            options=tuple(ValueOption(value=o) for o in action.options),
            expectations=expectations,
            selector=selector,
        )

    if isinstance(action, AssertTextAction):
        return Step(action=StepAction.ASSERT_TEXT.value, text=action.text, selector=selector)

    if isinstance(action, AssertValueAction):
        return Step(action=StepAction.ASSERT_VALUE.value, value=action.value, selector=selector)

    if isinstance(action, AssertCheckedAction):
        return Step(action=StepAction.ASSERT_CHECKED.value, checked=action.checked, selector=selector)

    if isinstance(action, AssertVisibleAction):
        return Step(
            action=StepAction.ASSERT_VISIBLE.value,
            visible=False if action.is_not else None,
            selector=selector,
        )

    if isinstance(action, ClosePageAction):
        return Step(action=StepAction.CLOSE_PAGE.value, selector=selector)

    if isinstance(action, UnsupportedAction):
        logger.warning("Unsupported recorded action", action=action.name)
        return Step(action=f"{action.name}{UNSUPPORTED_SUFFIX}", selector=selector)

    raise TypeError(f"Unknown action type: {type(action).__name__}")
