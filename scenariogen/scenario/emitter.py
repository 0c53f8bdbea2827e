"""Scenario Emitter - streams a scenario document one action at a time.

The emitter is driven by a single sequential caller:

    emitter = ScenarioEmitter()
    parts = [emitter.generate_header(base_url="https://example.com")]
    for action_in_context in recording:
        parts.append(emitter.generate_action(action_in_context))
    parts.append(emitter.generate_footer())

The header (version, name, baseURL) is written lazily together with the
first retained step, so a base URL inferred from the first real navigation
is part of it. Once written it never changes.
"""

from dataclasses import replace
from enum import Enum
from typing import Iterable, Optional, Union
from urllib.parse import urlsplit

import structlog

from ..config import Settings, get_settings
from ..recording.models import (
    ActionInContext,
    NavigateAction,
    OpenPageAction,
    UnsupportedAction,
    action_in_context_from_dict,
)
from ..selectors.mapper import SelectorDebugInfo
from .actions import (
    DEFAULT_MASK_TOKEN,
    build_structured_selector,
    is_trivial_url,
    map_action,
    url_origin,
)
from .formatters import DumpOptions, render_header, render_step

logger = structlog.get_logger()

DEFAULT_VERSION = "0.2"
DEFAULT_SCENARIO_NAME = "Recorded Scenario"
HEADER_COMMENT = "# Generated by scenariogen"


class EmitterState(str, Enum):
    """Lifecycle of a ScenarioEmitter."""

    UNINITIALIZED = "uninitialized"
    CONFIGURED = "configured"
    STREAMING = "streaming"
    DONE = "done"


def _host_name(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    try:
        return urlsplit(url).hostname or None
    except ValueError:
        return None


class ScenarioEmitter:
    """Incremental YAML scenario generator.

    Args:
        debug: Embed the raw action and selector diagnostics in every step
        version: Scenario format version written to the header
        default_name: Scenario name when no host is known
        mask_token: Replacement for values typed into secret-looking fields
        dump_options: YAML output options
    """

    id = "yaml"
    name = "YAML"

    def __init__(
        self,
        debug: bool = False,
        version: str = DEFAULT_VERSION,
        default_name: str = DEFAULT_SCENARIO_NAME,
        mask_token: str = DEFAULT_MASK_TOKEN,
        dump_options: Optional[DumpOptions] = None,
    ):
        self.debug = debug
        self.version = version
        self.default_name = default_name
        self.mask_token = mask_token
        self.dump_options = dump_options or DumpOptions()
        self.log = logger.bind(component="scenario_emitter")

        self._state = EmitterState.UNINITIALIZED
        self._header_emitted = False
        self._base_url: Optional[str] = None
        self._scenario_name = default_name
        self._name_fixed = False
        self._description: Optional[str] = None
        self._tags: list[str] = []
        self.steps_emitted = 0
        self.actions_skipped = 0

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ScenarioEmitter":
        """Create an emitter configured from Settings."""
        settings = settings or get_settings()
        return cls(
            debug=settings.debug,
            version=settings.scenario_version,
            default_name=settings.default_scenario_name,
            mask_token=settings.mask_token,
            dump_options=DumpOptions(line_width=settings.yaml_line_width),
        )

    @property
    def state(self) -> EmitterState:
        return self._state

    @property
    def header_emitted(self) -> bool:
        return self._header_emitted

    @property
    def base_url(self) -> Optional[str]:
        return self._base_url

    @property
    def scenario_name(self) -> str:
        return self._scenario_name

    def header_dict(self) -> dict:
        return {
            "version": self.version,
            "name": self._scenario_name,
            "description": self._description,
            "tags": list(self._tags),
            "baseURL": self._base_url,
        }

    # -------------------------------------------------------------------------
    # Generator interface
    # -------------------------------------------------------------------------

    def generate_header(
        self,
        base_url: Optional[str] = None,
        name: Optional[str] = None,
        description: Optional[str] = None,
        tags: Optional[list[str]] = None,
    ) -> str:
        """Configure the scenario and reset per-run state.

        Args:
            base_url: Seed base URL; its host becomes the scenario name
            name: Explicit scenario name (overrides the derived one)
            description: Optional scenario description
            tags: Optional scenario tags

        Returns:
            A comment line; header fields are written with the first step
        """
        seed = base_url or None
        host = _host_name(seed)
        self._base_url = seed
        self._scenario_name = name or host or self.default_name
        self._name_fixed = bool(name or host)
        self._description = description
        self._tags = list(tags or [])
        self._header_emitted = False
        self.steps_emitted = 0
        self.actions_skipped = 0
        self._state = EmitterState.CONFIGURED
        return HEADER_COMMENT

    def generate_action(self, action_in_context: Union[ActionInContext, dict]) -> str:
        """Render one recorded action as a YAML fragment.

        Returns an empty string for actions that produce no step (trivial
        navigations such as about:blank); those do not trigger the header.
        """
        if isinstance(action_in_context, dict):
            action_in_context = action_in_context_from_dict(action_in_context)
        action = action_in_context.action

        if isinstance(action, (NavigateAction, OpenPageAction)):
            if is_trivial_url(action.url):
                self.log.debug("Skipping trivial navigation", url=action.url)
                self.actions_skipped += 1
                return ""
            if not self._base_url:
                self._infer_base_url(action.url)

        selector_debug = SelectorDebugInfo() if self.debug else None
        selector = build_structured_selector(action_in_context, selector_debug)
        step = map_action(action, selector, base_url=self._base_url, mask_token=self.mask_token)

        if self.debug:
            payload = {"action_in_context": action_in_context.to_dict()}
            if selector_debug is not None and selector_debug.parsed is not None:
                payload["parsed_selector"] = selector_debug.to_dict()
            step = replace(step, debug=payload)
        elif isinstance(action, UnsupportedAction):
            step = replace(step, debug={"action_in_context": action_in_context.to_dict()})

        out = self._emit_header_once()
        out.append(render_step(step, self.dump_options))
        self.steps_emitted += 1
        self._state = EmitterState.STREAMING
        return "\n".join(out)

    def generate_footer(self, save_storage: Optional[str] = None) -> str:
        """Nothing is buffered, so there is nothing to flush."""
        self._state = EmitterState.DONE
        return ""

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _infer_base_url(self, url: str) -> None:
        if self._header_emitted:
            return
        self._base_url = url_origin(url) or url
        if not self._name_fixed:
            self._scenario_name = _host_name(url) or self.default_name
            self._name_fixed = True
        self.log.debug("Inferred base URL", base_url=self._base_url)

    def _emit_header_once(self) -> list[str]:
        if self._header_emitted:
            return []
        self._header_emitted = True
        self.log.debug("Emitting scenario header", name=self._scenario_name, base_url=self._base_url)
        return [render_header(self.header_dict(), self.dump_options)]


def emit_scenario(
    actions: Iterable[Union[ActionInContext, dict]],
    emitter: Optional[ScenarioEmitter] = None,
    base_url: Optional[str] = None,
    name: Optional[str] = None,
) -> str:
    """Stream a whole recording through an emitter and join the fragments.

    Args:
        actions: Actions in recording order
        emitter: Emitter to use (a default one if not provided)
        base_url: Seed base URL passed to generate_header
        name: Explicit scenario name

    Returns:
        The complete YAML document
    """
    emitter = emitter or ScenarioEmitter()
    parts = [emitter.generate_header(base_url=base_url, name=name)]
    for action_in_context in actions:
        parts.append(emitter.generate_action(action_in_context))
    parts.append(emitter.generate_footer())
    return "\n".join(p for p in parts if p) + "\n"
