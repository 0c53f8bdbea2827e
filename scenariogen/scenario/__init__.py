"""Scenario documents - models, step mapping and YAML output."""

from .actions import build_structured_selector, map_action
from .emitter import EmitterState, ScenarioEmitter, emit_scenario
from .formatters import DumpOptions, render_scenario, strip_defaults
from .models import Scenario, Selector, Step, StepAction

__all__ = [
    "Scenario",
    "Step",
    "StepAction",
    "Selector",
    "DumpOptions",
    "strip_defaults",
    "render_scenario",
    "build_structured_selector",
    "map_action",
    "EmitterState",
    "ScenarioEmitter",
    "emit_scenario",
]
