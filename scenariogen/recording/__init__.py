"""Recorded browser actions - typed input for the scenario emitter."""

from .models import (
    Action,
    ActionInContext,
    ActionName,
    FrameDescription,
    RecordingFormatError,
    Signal,
    SignalName,
    action_from_dict,
    action_in_context_from_dict,
    signal_from_dict,
)

__all__ = [
    "Action",
    "ActionName",
    "ActionInContext",
    "FrameDescription",
    "Signal",
    "SignalName",
    "RecordingFormatError",
    "action_from_dict",
    "action_in_context_from_dict",
    "signal_from_dict",
]
