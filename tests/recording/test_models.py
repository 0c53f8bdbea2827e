"""Tests for recorded action models."""

import pytest

from scenariogen.recording.models import (
    ActionInContext,
    AssertVisibleAction,
    ClickAction,
    DialogSignal,
    FillAction,
    FrameDescription,
    NavigateAction,
    NavigationSignal,
    PopupSignal,
    RecordingFormatError,
    SelectAction,
    UnknownSignal,
    UnsupportedAction,
    action_from_dict,
    action_in_context_from_dict,
    signal_from_dict,
)


class TestSignalFromDict:
    """Tests for signal parsing."""

    def test_known_signals(self):
        assert signal_from_dict({"name": "navigation", "url": "https://a.com"}) == NavigationSignal(
            url="https://a.com"
        )
        assert signal_from_dict({"name": "popup", "popupAlias": "page1"}) == PopupSignal(
            popup_alias="page1"
        )

    def test_dialog_signal(self):
        signal = signal_from_dict(
            {"name": "dialog", "dialogAlias": "dialog", "type": "confirm", "accepted": "yes"}
        )

        assert isinstance(signal, DialogSignal)
        assert signal.type == "confirm"
        assert signal.accepted is None

    def test_unknown_signal(self):
        signal = signal_from_dict({"name": "websocket", "url": "wss://x"})

        assert isinstance(signal, UnknownSignal)
        assert signal.payload["url"] == "wss://x"


class TestActionFromDict:
    """Tests for action parsing."""

    def test_click(self):
        action = action_from_dict(
            {"name": "click", "selector": "css=a", "button": "right", "modifiers": 9, "clickCount": 1}
        )

        assert action == ClickAction(selector="css=a", button="right", modifiers=9, click_count=1)

    def test_click_defaults(self):
        action = action_from_dict({"name": "click", "selector": "css=a"})

        assert action.button == "left"
        assert action.modifiers == 0
        assert action.click_count == 1

    def test_navigate(self):
        action = action_from_dict(
            {"name": "navigate", "url": "https://a.com", "signals": [{"name": "download"}]}
        )

        assert isinstance(action, NavigateAction)
        assert action.url == "https://a.com"
        assert len(action.signals) == 1

    def test_fill_and_select(self):
        assert action_from_dict({"name": "fill", "selector": "css=input", "text": "x"}) == FillAction(
            selector="css=input", text="x"
        )
        assert action_from_dict(
            {"name": "select", "selector": "css=select", "options": ["a", "b"]}
        ) == SelectAction(selector="css=select", options=("a", "b"))

    def test_assert_visible_negated(self):
        action = action_from_dict({"name": "assertVisible", "selector": "css=a", "isNot": True})

        assert action == AssertVisibleAction(selector="css=a", is_not=True)

    def test_non_string_selector_is_dropped(self):
        assert action_from_dict({"name": "check", "selector": 42}).selector is None

    def test_unknown_name_is_unsupported(self):
        payload = {"name": "setInputFiles", "selector": "css=input", "files": ["a.png"]}

        action = action_from_dict(payload)

        assert isinstance(action, UnsupportedAction)
        assert action.name == "setInputFiles"
        assert action.payload == payload

    @pytest.mark.parametrize("payload", [{}, {"name": ""}, {"name": 3}, "click"])
    def test_malformed(self, payload):
        with pytest.raises(RecordingFormatError):
            action_from_dict(payload)


class TestActionInContext:
    """Tests for action-in-context parsing."""

    def test_full_payload(self):
        data = {
            "frame": {"pageAlias": "page1", "framePath": ['iframe[name="x"]']},
            "action": {"name": "closePage", "signals": []},
            "startTime": 12.5,
        }

        result = action_in_context_from_dict(data)

        assert isinstance(result, ActionInContext)
        assert result.frame == FrameDescription(page_alias="page1", frame_path=('iframe[name="x"]',))
        assert result.start_time == 12.5
        assert result.to_dict() == data

    def test_missing_frame_defaults_to_main_page(self):
        result = action_in_context_from_dict({"action": {"name": "closePage"}})

        assert result.frame.page_alias == "page"
        assert result.frame.frame_path == ()

    def test_missing_action(self):
        with pytest.raises(RecordingFormatError):
            action_in_context_from_dict({"frame": {}})

    def test_not_an_object(self):
        with pytest.raises(RecordingFormatError):
            action_in_context_from_dict(["click"])
