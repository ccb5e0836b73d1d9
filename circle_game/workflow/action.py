"""
Action System - Worksheet actions, payloads, and results.

Actions represent:
1. Navigation (choose mode, back, cancel, reset)
2. Draft input (JSON import, photo analysis results)
3. Inline editing (title, words)

All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ActionType(Enum):
    """Types of actions in the worksheet flow."""
    # Navigation
    CHOOSE_MODE = "choose_mode"
    BACK = "back"
    CANCEL_EDIT = "cancel_edit"
    EDIT_WORDS = "edit_words"
    GENERATE_GRID = "generate_grid"
    RESET = "reset"

    # Input
    IMPORT_JSON = "import_json"
    BEGIN_ANALYSIS = "begin_analysis"
    PHOTO_ANALYZED = "photo_analyzed"
    PHOTO_FAILED = "photo_failed"

    # Editing
    EDIT_TITLE = "edit_title"
    EDIT_WORD = "edit_word"
    ADD_WORD = "add_word"
    REMOVE_WORD = "remove_word"


class WorkflowErrorKind(Enum):
    """Recoverable, user-visible failures."""
    FILE_TYPE_REJECTED = "FILE_TYPE_REJECTED"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    JSON_PARSE_FAILED = "JSON_PARSE_FAILED"
    JSON_SHAPE_INVALID = "JSON_SHAPE_INVALID"
    GATEWAY_CALL_FAILED = "GATEWAY_CALL_FAILED"
    EMPTY_WORD_LIST_ON_GENERATE = "EMPTY_WORD_LIST_ON_GENERATE"
    WORD_INDEX_OUT_OF_RANGE = "WORD_INDEX_OUT_OF_RANGE"
    INVALID_TRANSITION = "INVALID_TRANSITION"


@dataclass
class ActionPayload:
    """
    Payload for an action.

    Different action types use different fields; the reducer validates.
    """
    mode: Any | None = None  # UploadMode
    text: str | None = None  # title, word value, or raw JSON
    index: int | None = None
    title: str | None = None
    words: list[str] | None = None
    photo_preview: str | None = None
    error_message: str | None = None


@dataclass
class Action:
    """A complete action to be applied to a worksheet state."""
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)

    @classmethod
    def choose_mode(cls, mode: Any) -> Action:
        return cls(ActionType.CHOOSE_MODE, ActionPayload(mode=mode))

    @classmethod
    def back(cls) -> Action:
        return cls(ActionType.BACK)

    @classmethod
    def import_json(cls, text: str) -> Action:
        return cls(ActionType.IMPORT_JSON, ActionPayload(text=text))

    @classmethod
    def begin_analysis(cls, photo_preview: str) -> Action:
        return cls(ActionType.BEGIN_ANALYSIS, ActionPayload(photo_preview=photo_preview))

    @classmethod
    def photo_analyzed(cls, title: str, words: list[str]) -> Action:
        """Factory for a successful gateway result."""
        return cls(ActionType.PHOTO_ANALYZED, ActionPayload(title=title, words=list(words)))

    @classmethod
    def photo_failed(cls, message: str) -> Action:
        return cls(ActionType.PHOTO_FAILED, ActionPayload(error_message=message))

    @classmethod
    def edit_title(cls, title: str) -> Action:
        return cls(ActionType.EDIT_TITLE, ActionPayload(text=title))

    @classmethod
    def edit_word(cls, index: int, value: str) -> Action:
        return cls(ActionType.EDIT_WORD, ActionPayload(index=index, text=value))

    @classmethod
    def add_word(cls) -> Action:
        return cls(ActionType.ADD_WORD)

    @classmethod
    def remove_word(cls, index: int) -> Action:
        return cls(ActionType.REMOVE_WORD, ActionPayload(index=index))

    @classmethod
    def cancel_edit(cls) -> Action:
        return cls(ActionType.CANCEL_EDIT)

    @classmethod
    def edit_words(cls) -> Action:
        return cls(ActionType.EDIT_WORDS)

    @classmethod
    def generate_grid(cls) -> Action:
        return cls(ActionType.GENERATE_GRID)

    @classmethod
    def reset(cls) -> Action:
        return cls(ActionType.RESET)


@dataclass
class ActionResult:
    """
    Result of applying an action.

    On failure the caller keeps its previous state; new_state is None.
    """
    success: bool
    new_state: Any | None = None  # WorksheetState
    error: str | None = None
    error_code: WorkflowErrorKind | None = None

    # Human-readable changes for the UI
    state_changes: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: WorkflowErrorKind | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(success=True, new_state=state, state_changes=changes or [])
