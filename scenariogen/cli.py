"""Command-line interface for converting recordings to scenarios."""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

import structlog

from .config import get_settings
from .logging_config import configure_logging
from .recording.models import ActionInContext, RecordingFormatError, action_in_context_from_dict
from .scenario.emitter import ScenarioEmitter, emit_scenario

logger = structlog.get_logger()


def load_recording(path: Path) -> list[ActionInContext]:
    """Read a recording file: a JSON array or one JSON object per line.

    Raises:
        RecordingFormatError: If the file cannot be read or parsed
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise RecordingFormatError(f"Cannot read {path}: {e}") from e

    stripped = content.strip()
    if not stripped:
        return []

    try:
        if stripped.startswith("["):
            payloads = json.loads(stripped)
        else:
            payloads = [json.loads(line) for line in stripped.splitlines() if line.strip()]
    except json.JSONDecodeError as e:
        raise RecordingFormatError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(payloads, list):
        raise RecordingFormatError("Recording must be a JSON array of actions")
    return [action_in_context_from_dict(p) for p in payloads]


def convert(
    recording: Path,
    output: Optional[Path] = None,
    base_url: Optional[str] = None,
    name: Optional[str] = None,
    debug: Optional[bool] = None,
) -> str:
    """Convert a recording file and write the scenario to output (or stdout)."""
    emitter = ScenarioEmitter.from_settings(get_settings())
    if debug is not None:
        emitter.debug = debug

    actions = load_recording(recording)
    document = emit_scenario(actions, emitter=emitter, base_url=base_url, name=name)

    if output:
        output.write_text(document, encoding="utf-8")
    else:
        sys.stdout.write(document)

    logger.info(
        "Scenario generated",
        recording=str(recording),
        output=str(output) if output else "-",
        steps=emitter.steps_emitted,
        skipped=emitter.actions_skipped,
    )
    return document


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scenariogen",
        description="Convert recorded browser actions into YAML test scenarios"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    convert_parser = subparsers.add_parser(
        "convert",
        help="Convert a recording (JSON array or JSON lines) to a scenario"
    )
    convert_parser.add_argument(
        "recording",
        type=Path,
        help="Path to the recording file"
    )
    convert_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Write the scenario here instead of stdout"
    )
    convert_parser.add_argument(
        "--base-url", "-u",
        help="Seed base URL (inferred from the first navigation otherwise)"
    )
    convert_parser.add_argument(
        "--name",
        help="Scenario name (defaults to the base URL host)"
    )
    convert_parser.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help="Embed raw actions and selector diagnostics in each step"
    )
    return parser


def cli(argv: Optional[list[str]] = None) -> int:
    """Command-line interface."""
    args = build_parser().parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level, settings.log_json)

    try:
        convert(
            recording=args.recording,
            output=args.output,
            base_url=args.base_url,
            name=args.name,
            debug=args.debug,
        )
    except RecordingFormatError as e:
        logger.error("Conversion failed", recording=str(args.recording), error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(cli())
