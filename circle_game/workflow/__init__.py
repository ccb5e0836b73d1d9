"""
Workflow - The worksheet screen flow as an explicit state machine.

Screens:
    Landing -> JsonUpload  -> Grid
            -> PhotoUpload -> ReviewEdit -> Grid

Every user action is an Action applied by the Reducer to an immutable
WorksheetState. The transition table decides which actions are legal
on which screen, so no flag combination needs to be reasoned about.
"""

from .state import Screen, UploadMode, WorksheetDraft, WorksheetState
from .action import Action, ActionType, ActionPayload, ActionResult, WorkflowErrorKind
from .reducer import Reducer, TRANSITIONS, apply_action
from .json_import import JsonImportError, parse_word_list, draft_from_json, export_word_list
from .photo import PhotoUpload, PhotoRejected

__all__ = [
    "Screen",
    "UploadMode",
    "WorksheetDraft",
    "WorksheetState",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "WorkflowErrorKind",
    "Reducer",
    "TRANSITIONS",
    "apply_action",
    "JsonImportError",
    "parse_word_list",
    "draft_from_json",
    "export_word_list",
    "PhotoUpload",
    "PhotoRejected",
]
