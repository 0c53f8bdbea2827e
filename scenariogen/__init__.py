"""Recorded browser actions to YAML test scenarios.

Selector chains recorded by the browser are mapped to structured element
descriptions, and each recorded action is streamed out as one step of a
YAML scenario document.

Example:
    from scenariogen import ScenarioEmitter

    emitter = ScenarioEmitter()
    print(emitter.generate_header(base_url="https://example.com"))
    for action_in_context in recording:
        print(emitter.generate_action(action_in_context))
    emitter.generate_footer()
"""

__version__ = "0.2.0"

from .recording.models import RecordingFormatError, action_in_context_from_dict
from .scenario.emitter import ScenarioEmitter, emit_scenario
from .selectors.errors import InvalidSelectorError
from .selectors.mapper import SelectorDebugInfo, map_selector

__all__ = [
    "__version__",
    "ScenarioEmitter",
    "emit_scenario",
    "map_selector",
    "SelectorDebugInfo",
    "action_in_context_from_dict",
    "InvalidSelectorError",
    "RecordingFormatError",
]
