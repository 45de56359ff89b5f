"""Editor integration: typed events, retouch shapes and the actions that run jobs."""

from retouch.editor.actions import ActionCallbacks, DraftFactory, DraftOptions, RetouchActions
from retouch.editor.events import (
    EditorEvent,
    EventChannel,
    PromptCancelled,
    PromptConfirmed,
    RegenerateRequested,
    SelectionAction,
    SelectionCommitted,
    SelectionStarted,
)
from retouch.editor.shapes import FEATHER_OPTIONS, InpaintState, RetouchShape, ShapeStatus

__all__ = [
    "ActionCallbacks",
    "DraftFactory",
    "DraftOptions",
    "RetouchActions",
    "EditorEvent",
    "EventChannel",
    "PromptCancelled",
    "PromptConfirmed",
    "RegenerateRequested",
    "SelectionAction",
    "SelectionCommitted",
    "SelectionStarted",
    "FEATHER_OPTIONS",
    "InpaintState",
    "RetouchShape",
    "ShapeStatus",
]
