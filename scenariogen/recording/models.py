"""Data models for recorded browser actions.

The recorder emits one JSON object per action-in-context:

    {
        "frame": {"pageAlias": "page", "framePath": []},
        "action": {"name": "click", "selector": "...", "signals": [], ...},
        "startTime": 1700000000000
    }

``action_in_context_from_dict`` turns that payload into the typed variants
below. Action names without a dedicated variant become UnsupportedAction so
a single odd action never breaks a recording.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union


class RecordingFormatError(ValueError):
    """Raised when an action payload does not follow the recorder format."""


class ActionName(str, Enum):
    """Recorder action names with a structured mapping."""

    NAVIGATE = "navigate"
    OPEN_PAGE = "openPage"
    CLOSE_PAGE = "closePage"
    CLICK = "click"
    FILL = "fill"
    PRESS = "press"
    CHECK = "check"
    UNCHECK = "uncheck"
    SELECT = "select"
    ASSERT_TEXT = "assertText"
    ASSERT_VALUE = "assertValue"
    ASSERT_CHECKED = "assertChecked"
    ASSERT_VISIBLE = "assertVisible"


class SignalName(str, Enum):
    """Side effects observed around an action."""

    NAVIGATION = "navigation"
    POPUP = "popup"
    DOWNLOAD = "download"
    DIALOG = "dialog"


# =============================================================================
# Signals
# =============================================================================


@dataclass(frozen=True)
class NavigationSignal:
    url: Optional[str] = None


@dataclass(frozen=True)
class PopupSignal:
    popup_alias: Optional[str] = None


@dataclass(frozen=True)
class DownloadSignal:
    download_alias: Optional[str] = None


@dataclass(frozen=True)
class DialogSignal:
    dialog_alias: Optional[str] = None
    type: Optional[str] = None
    message: Optional[str] = None
    accepted: Optional[bool] = None


@dataclass(frozen=True)
class UnknownSignal:
    name: str
    payload: dict = field(default_factory=dict)


Signal = Union[NavigationSignal, PopupSignal, DownloadSignal, DialogSignal, UnknownSignal]


def signal_from_dict(data: dict) -> Signal:
    """Create a Signal from its recorder payload."""
    name = data.get("name", "")
    if name == SignalName.NAVIGATION.value:
        return NavigationSignal(url=data.get("url"))
    if name == SignalName.POPUP.value:
        return PopupSignal(popup_alias=data.get("popupAlias"))
    if name == SignalName.DOWNLOAD.value:
        return DownloadSignal(download_alias=data.get("downloadAlias"))
    if name == SignalName.DIALOG.value:
        accepted = data.get("accepted")
        return DialogSignal(
            dialog_alias=data.get("dialogAlias"),
            type=data.get("type") or data.get("dialogType"),
            message=data.get("message"),
            accepted=accepted if isinstance(accepted, bool) else None,
        )
    return UnknownSignal(name=str(name), payload=dict(data))


# =============================================================================
# Actions
# =============================================================================


@dataclass(frozen=True)
class BaseAction:
    signals: tuple[Signal, ...] = ()


@dataclass(frozen=True)
class SelectorAction(BaseAction):
    """An action addressed at an element."""

    selector: Optional[str] = None


@dataclass(frozen=True)
class NavigateAction(BaseAction):
    name = ActionName.NAVIGATE
    url: str = ""


@dataclass(frozen=True)
class OpenPageAction(BaseAction):
    name = ActionName.OPEN_PAGE
    url: str = ""


@dataclass(frozen=True)
class ClosePageAction(BaseAction):
    name = ActionName.CLOSE_PAGE


@dataclass(frozen=True)
class ClickAction(SelectorAction):
    name = ActionName.CLICK
    button: str = "left"
    modifiers: int = 0
    click_count: int = 1


@dataclass(frozen=True)
class FillAction(SelectorAction):
    name = ActionName.FILL
    text: str = ""


@dataclass(frozen=True)
class PressAction(SelectorAction):
    name = ActionName.PRESS
    key: str = ""
    modifiers: int = 0


@dataclass(frozen=True)
class CheckAction(SelectorAction):
    name = ActionName.CHECK


@dataclass(frozen=True)
class UncheckAction(SelectorAction):
    name = ActionName.UNCHECK


@dataclass(frozen=True)
class SelectAction(SelectorAction):
    name = ActionName.SELECT
    options: tuple[str, ...] = ()


@dataclass(frozen=True)
class AssertTextAction(SelectorAction):
    name = ActionName.ASSERT_TEXT
    text: str = ""
    substring: bool = False


@dataclass(frozen=True)
class AssertValueAction(SelectorAction):
    name = ActionName.ASSERT_VALUE
    value: str = ""


@dataclass(frozen=True)
class AssertCheckedAction(SelectorAction):
    name = ActionName.ASSERT_CHECKED
    checked: bool = True


@dataclass(frozen=True)
class AssertVisibleAction(SelectorAction):
    name = ActionName.ASSERT_VISIBLE
    is_not: bool = False


@dataclass(frozen=True)
class UnsupportedAction(SelectorAction):
    """Any recorder action without a structured mapping."""

    name: str = ""
    payload: dict = field(default_factory=dict)


Action = Union[
    NavigateAction,
    OpenPageAction,
    ClosePageAction,
    ClickAction,
    FillAction,
    PressAction,
    CheckAction,
    UncheckAction,
    SelectAction,
    AssertTextAction,
    AssertValueAction,
    AssertCheckedAction,
    AssertVisibleAction,
    UnsupportedAction,
]


def _int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return int(value)
    return default


def _str(value: Any, default: str = "") -> str:
    return value if isinstance(value, str) else default


def action_from_dict(data: dict) -> Action:
    """Create a typed Action from its recorder payload.

    Raises:
        RecordingFormatError: If the payload is not an object with a name
    """
    if not isinstance(data, dict):
        raise RecordingFormatError(f"Action must be an object, got {type(data).__name__}")
    name = data.get("name")
    if not isinstance(name, str) or not name:
        raise RecordingFormatError("Action is missing a 'name'")

    signals = tuple(
        signal_from_dict(s) for s in data.get("signals") or [] if isinstance(s, dict)
    )
    selector = data.get("selector")
    selector = selector if isinstance(selector, str) else None

    if name in (ActionName.NAVIGATE.value, ActionName.OPEN_PAGE.value):
        action_class = NavigateAction if name == ActionName.NAVIGATE.value else OpenPageAction
        return action_class(signals=signals, url=_str(data.get("url")))
    if name == ActionName.CLOSE_PAGE.value:
        return ClosePageAction(signals=signals)
    if name == ActionName.CLICK.value:
        return ClickAction(
            signals=signals,
            selector=selector,
            button=_str(data.get("button"), "left"),
            modifiers=_int(data.get("modifiers"), 0),
            click_count=_int(data.get("clickCount"), 1),
        )
    if name == ActionName.FILL.value:
        return FillAction(signals=signals, selector=selector, text=_str(data.get("text")))
    if name == ActionName.PRESS.value:
        return PressAction(
            signals=signals,
            selector=selector,
            key=_str(data.get("key")),
            modifiers=_int(data.get("modifiers"), 0),
        )
    if name == ActionName.CHECK.value:
        return CheckAction(signals=signals, selector=selector)
    if name == ActionName.UNCHECK.value:
        return UncheckAction(signals=signals, selector=selector)
    if name == ActionName.SELECT.value:
        options = data.get("options") or []
        return SelectAction(
            signals=signals,
            selector=selector,
            options=tuple(str(o) for o in options),
        )
    if name == ActionName.ASSERT_TEXT.value:
        return AssertTextAction(
            signals=signals,
            selector=selector,
            text=_str(data.get("text")),
            substring=bool(data.get("substring", False)),
        )
    if name == ActionName.ASSERT_VALUE.value:
        return AssertValueAction(signals=signals, selector=selector, value=_str(data.get("value")))
    if name == ActionName.ASSERT_CHECKED.value:
        return AssertCheckedAction(
            signals=signals, selector=selector, checked=bool(data.get("checked", True))
        )
    if name == ActionName.ASSERT_VISIBLE.value:
        return AssertVisibleAction(
            signals=signals, selector=selector, is_not=bool(data.get("isNot", False))
        )

    return UnsupportedAction(
        signals=signals,
        selector=selector,
        name=name,
        payload=dict(data),
    )


# =============================================================================
# Action in context
# =============================================================================


@dataclass(frozen=True)
class FrameDescription:
    """Where an action happened: page alias plus frame selectors."""

    page_alias: str = "page"
    frame_path: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "FrameDescription":
        data = data or {}
        return cls(
            page_alias=_str(data.get("pageAlias"), "page"),
            frame_path=tuple(s for s in data.get("framePath") or [] if isinstance(s, str)),
        )


@dataclass(frozen=True)
class ActionInContext:
    """A recorded action with its frame context."""

    action: Action
    frame: FrameDescription = field(default_factory=FrameDescription)
    start_time: Optional[float] = None
    raw: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """The recorder payload this was built from."""
        return dict(self.raw)


def action_in_context_from_dict(data: dict) -> ActionInContext:
    """Create an ActionInContext from the recorder's JSON payload.

    Raises:
        RecordingFormatError: If the payload is malformed
    """
    if not isinstance(data, dict):
        raise RecordingFormatError(
            f"Action in context must be an object, got {type(data).__name__}"
        )
    if "action" not in data:
        raise RecordingFormatError("Action in context is missing 'action'")
    start_time = data.get("startTime")
    return ActionInContext(
        action=action_from_dict(data["action"]),
        frame=FrameDescription.from_dict(data.get("frame")),
        start_time=start_time if isinstance(start_time, (int, float)) else None,
        raw=data,
    )
