"""YAML formatting for scenario documents.

String values are always double-quoted and keys stay plain, which keeps
the emitted documents stable for diffing:

    version: "0.2"
    name: "example.com"
    steps:

      - action: "click"
        selector:
          element:
            testId: "submit"
"""

from dataclasses import dataclass
from typing import Any

import yaml

from .models import Scenario, Step

DEFAULT_LINE_WIDTH = 120


@dataclass(frozen=True)
class DumpOptions:
    """Options for YAML output."""

    line_width: int = DEFAULT_LINE_WIDTH
    allow_unicode: bool = True


class ScenarioDumper(yaml.SafeDumper):
    """SafeDumper with quoted values, plain keys, no aliases and indented lists."""

    def ignore_aliases(self, data: Any) -> bool:
        return True

    def increase_indent(self, flow: bool = False, indentless: bool = False):
        return super().increase_indent(flow, False)


def _represent_str(dumper: ScenarioDumper, data: str):
    return dumper.represent_scalar("tag:yaml.org,2002:str", data, style='"')


def _represent_dict(dumper: ScenarioDumper, data: dict):
    items = []
    node = yaml.MappingNode("tag:yaml.org,2002:map", items, flow_style=False)
    for key, value in data.items():
        key_node = yaml.ScalarNode("tag:yaml.org,2002:str", str(key))
        items.append((key_node, dumper.represent_data(value)))
    return node


ScenarioDumper.add_representer(str, _represent_str)
ScenarioDumper.add_representer(dict, _represent_dict)


def dump_yaml(data: Any, options: DumpOptions | None = None) -> str:
    """Dump data as YAML with "\\n" line endings."""
    options = options or DumpOptions()
    dumped = yaml.dump(
        data,
        Dumper=ScenarioDumper,
        default_flow_style=False,
        width=options.line_width,
        allow_unicode=options.allow_unicode,
        sort_keys=False,
    )
    return dumped.replace("\r\n", "\n").replace("\r", "\n")


# =============================================================================
# Stripping
# =============================================================================


def strip_defaults(obj: dict) -> dict:
    """Drop None values, a zero modifier mask and an empty frame path.

    Nested mappings (including mappings inside lists) are stripped too, and
    mappings that end up empty are dropped. Applying it twice gives the same
    result as applying it once.
    """
    out = {}
    for key, value in obj.items():
        if value is None:
            continue
        if key == "modifiers" and value == 0 and not isinstance(value, bool):
            continue
        if key == "framePath" and isinstance(value, list) and not value:
            continue
        if isinstance(value, dict):
            nested = strip_defaults(value)
            if nested:
                out[key] = nested
        elif isinstance(value, list):
            out[key] = [strip_defaults(v) if isinstance(v, dict) else v for v in value]
        else:
            out[key] = value
    return out


def strip_empty(obj: dict) -> dict:
    """Drop None values, empty lists and empty mappings, recursively."""
    out = {}
    for key, value in obj.items():
        if value is None:
            continue
        if isinstance(value, list):
            if value:
                out[key] = [strip_empty(v) if isinstance(v, dict) else v for v in value]
            continue
        if isinstance(value, dict):
            nested = strip_empty(value)
            if nested:
                out[key] = nested
            continue
        out[key] = value
    return out


# =============================================================================
# Rendering
# =============================================================================


def format_as_list_item(entry: Any, options: DumpOptions | None = None) -> str:
    """Render entry as one item of a top-level ``steps:`` list."""
    dumped = dump_yaml(entry, options)
    if dumped.endswith("\n"):
        dumped = dumped[:-1]
    lines = dumped.split("\n")
    rendered = [f"  - {line}" if i == 0 else f"    {line}" for i, line in enumerate(lines)]
    return "\n".join(rendered) + "\n"


def render_step(step: Step, options: DumpOptions | None = None) -> str:
    return format_as_list_item(strip_defaults(step.to_dict()), options)


def render_header(header: dict, options: DumpOptions | None = None) -> str:
    """Render header metadata followed by the ``steps:`` key and a blank line."""
    dumped = dump_yaml(strip_empty(header), options)
    if dumped.endswith("\n"):
        dumped = dumped[:-1]
    return "\n".join([dumped, "steps:", ""])


def render_scenario(scenario: Scenario, options: DumpOptions | None = None) -> str:
    """Render a complete scenario in the same layout the emitter streams."""
    parts = [render_header(scenario.header_dict(), options)]
    parts.extend(render_step(step, options) for step in scenario.steps)
    return "\n".join(parts)
