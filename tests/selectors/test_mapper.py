"""Tests for selector mapping."""

import pytest

from scenariogen.scenario.models import (
    AltElement,
    CssElement,
    ExactText,
    FallbackElement,
    FrameKind,
    FrameRef,
    LabelElement,
    PlaceholderElement,
    PlainText,
    RegexText,
    RoleElement,
    TestIdElement,
    TextElement,
    TitleElement,
    XPathElement,
)
from scenariogen.selectors.mapper import (
    SelectorDebugInfo,
    fallback_element,
    frame_path_to_refs,
    frame_ref_from_string,
    map_selector,
    resolve_base_index,
)
from scenariogen.selectors.parser import parse_selector


# =============================================================================
# Base part resolution
# =============================================================================


class TestResolveBaseIndex:
    """Tests for resolve_base_index."""

    def test_last_non_filter_part(self):
        parsed = parse_selector('css=.btn >> internal:has-text="Go" >> nth=2')

        assert resolve_base_index(parsed) == 0

    def test_capture_wins(self):
        parsed = parse_selector("*css=.list >> css=.item")

        assert resolve_base_index(parsed) == 0

    def test_describe_is_skipped(self):
        parsed = parse_selector('css=.a >> css=.b >> internal:describe="Submit"')

        assert resolve_base_index(parsed) == 1

    def test_only_filters_points_at_last_part(self):
        parsed = parse_selector("nth=0")

        assert resolve_base_index(parsed) == 0


# =============================================================================
# Elements
# =============================================================================


class TestElementMapping:
    """Tests for base element construction."""

    def test_testid(self):
        selector = map_selector('internal:testid=[data-testid="login-password"s]')

        assert selector.element == TestIdElement(test_id="login-password")

    def test_role_case_insensitive_name(self):
        selector = map_selector('internal:role=button[name="Submit"i]')

        assert selector.element == RoleElement(role="button", name=PlainText("Submit"))
        assert selector.element.to_dict()["name"] == "Submit"

    def test_role_exact_name(self):
        selector = map_selector('internal:role=button[name="Submit"s]')

        assert selector.element.name == ExactText(value="Submit", case_sensitive=True)

    def test_role_regex_name(self):
        selector = map_selector("internal:role=textbox[name=/e-?mail/i]")

        assert selector.element.name == RegexText(pattern="e-?mail", flags="i")

    def test_role_states(self):
        selector = map_selector(
            "internal:role=checkbox[checked][disabled=false][pressed=\"mixed\"][include-hidden]"
        )

        element = selector.element
        assert element.checked is True
        assert element.disabled is False
        assert element.pressed == "mixed"
        assert element.include_hidden is True

    def test_role_level(self):
        selector = map_selector("internal:role=heading[level=2]")

        assert selector.element.level == 2

    def test_role_unknown_attribute_warns(self):
        debug = SelectorDebugInfo()

        selector = map_selector('internal:role=button[foo="bar"]', debug)

        assert selector.element == RoleElement(role="button")
        assert debug.warnings == ["unhandled internal:role attribute [foo]"]

    def test_text_label_placeholder(self):
        assert map_selector('internal:text="Sign in"s').element == TextElement(
            ExactText(value="Sign in")
        )
        assert map_selector('internal:label="Email"i').element == LabelElement(
            RegexText(pattern="Email", flags="i")
        )
        assert map_selector('internal:placeholder="Search"').element == PlaceholderElement(
            PlainText("Search")
        )

    def test_attr_keeps_original_value_form(self):
        assert map_selector('internal:attr=[alt="Logo"s]').element == AltElement(
            ExactText(value="Logo")
        )
        assert map_selector('internal:attr=[title="Close"i]').element == TitleElement(
            RegexText(pattern="Close", flags="i")
        )
        assert map_selector('internal:attr=[placeholder=/sea.ch/]').element == PlaceholderElement(
            RegexText(pattern="sea.ch")
        )

    def test_attr_unknown_name_falls_back(self):
        debug = SelectorDebugInfo()

        selector = map_selector('internal:attr=[data-foo="x"]', debug)

        assert selector.element == FallbackElement(css='internal:attr=[data-foo="x"]')
        assert "unhandled internal:attr attribute [data-foo]" in debug.warnings

    def test_css_and_xpath(self):
        assert map_selector("css=div.card > a").element == CssElement(css="div.card > a")
        assert map_selector("//div[@id='x']").element == XPathElement(xpath="//div[@id='x']")

    def test_unknown_engine_falls_back(self):
        debug = SelectorDebugInfo()

        selector = map_selector("custom=foo", debug)

        assert selector.element == FallbackElement(css="custom=foo")
        assert debug.warnings == ["unhandled engine custom"]

    def test_malformed_role_body_falls_back(self):
        debug = SelectorDebugInfo()

        selector = map_selector('internal:role=button[name="Submit"', debug)

        assert isinstance(selector.element, FallbackElement)
        assert debug.warnings[0].startswith("malformed internal:role body")

    def test_regex_testid_falls_back(self):
        debug = SelectorDebugInfo()

        selector = map_selector("internal:testid=[data-testid=/login/]", debug)

        assert selector.element == FallbackElement(css="internal:testid=[data-testid=/login/]")
        assert debug.warnings == ["internal:testid with a regular expression value"]

    def test_fallback_is_css(self):
        assert fallback_element("css=.x").to_dict() == {"css": "css=.x"}
        assert fallback_element(None).css == "UNKNOWN"


# =============================================================================
# Filters
# =============================================================================


class TestFilterMapping:
    """Tests for trailing filter parts."""

    def test_has_text_and_nth(self):
        selector = map_selector('css=.btn >> internal:has-text="Go" >> nth=2')

        assert selector.element == CssElement(css=".btn")
        assert selector.filters.has_text == PlainText("Go")
        assert selector.nth == 2

    def test_has_not_text(self):
        selector = map_selector('css=li >> internal:has-not-text=/sold out/i')

        assert selector.filters.has_not_text == RegexText(pattern="sold out", flags="i")

    @pytest.mark.parametrize("body,expected", [
        ("true", True),
        ("false", False),
        ("maybe", True),
    ])
    def test_visible(self, body, expected):
        selector = map_selector(f"css=button >> visible={body}")

        assert selector.filters.visible is expected

    def test_nested_has(self):
        selector = map_selector('css=.card >> internal:has="internal:text=\\"Buy\\"i"')

        nested = selector.filters.has
        assert nested.element == TextElement(RegexText(pattern="Buy", flags="i"))
        assert selector.to_dict()["filters"]["has"]["element"] == {
            "text": {"pattern": "Buy", "flags": "i"}
        }

    def test_nested_has_not_with_filters(self):
        selector = map_selector('css=tr >> internal:has-not="css=td >> nth=1"')

        assert selector.filters.has_not.element == CssElement(css="td")
        assert selector.filters.has_not.nth == 1

    def test_negative_nth(self):
        assert map_selector("css=li >> nth=-1").nth == -1

    def test_non_filter_after_capture_warns(self):
        debug = SelectorDebugInfo()

        selector = map_selector("*css=.list >> css=.item", debug)

        assert selector.element == CssElement(css=".list")
        assert selector.filters is None
        assert debug.warnings == ["unhandled parsed attribute part css"]

    def test_describe_ignored(self):
        selector = map_selector('css=.a >> internal:describe="Primary action"')

        assert selector.element == CssElement(css=".a")
        assert selector.filters is None


# =============================================================================
# Entry points
# =============================================================================


class TestMapSelector:
    """Tests for map_selector."""

    def test_empty_returns_none(self):
        assert map_selector("") is None
        assert map_selector(None) is None

    def test_unparseable_returns_none(self):
        assert map_selector('css=div >> internal:has="unterminated') is None

    def test_debug_sink_populated(self):
        debug = SelectorDebugInfo()

        map_selector('css=.btn >> internal:has-text="Go"', debug)

        data = debug.to_dict()
        assert data["baseIndex"] == 0
        assert data["basePart"]["name"] == "css"
        assert len(data["parsed"]["parts"]) == 2
        assert data["warnings"] is None


# =============================================================================
# Frames
# =============================================================================


class TestFrameRefs:
    """Tests for frame path mapping."""

    def test_named_iframe(self):
        assert frame_ref_from_string('iframe[name="checkout"]') == FrameRef(
            name="checkout", kind=FrameKind.IFRAME
        )

    def test_frame_src(self):
        assert frame_ref_from_string('frame[src="https://pay.example.com/x"]') == FrameRef(
            url_exact="https://pay.example.com/x", kind=FrameKind.FRAME
        )

    def test_other_selector_is_url_contains(self):
        assert frame_ref_from_string("#payment") == FrameRef(url_contains="#payment")

    def test_path(self):
        refs = frame_path_to_refs(['iframe[name="outer"]', "#inner"])

        assert [r.to_dict()["name"] for r in refs] == ["outer", None]
        assert frame_path_to_refs([]) == ()
        assert frame_path_to_refs(None) == ()
