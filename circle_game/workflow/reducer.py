"""
Reducer - Applies actions to worksheet state.

The reducer is the single point of state mutation.
All state changes must go through apply_action().

Design principles:
- Pure function: (state, action) -> new_state
- Transitions checked against an explicit table before dispatch
- Failures return ActionResult.failure and never touch the input state
"""

from __future__ import annotations
from dataclasses import dataclass

from .action import Action, ActionType, ActionResult, WorkflowErrorKind
from .json_import import JsonImportError, parse_word_list
from .state import Screen, UploadMode, WorksheetDraft, WorksheetState

ALL_SCREENS = frozenset(Screen)

# Screens from which each action may be applied.
TRANSITIONS: dict[ActionType, frozenset[Screen]] = {
    ActionType.CHOOSE_MODE: frozenset({Screen.LANDING}),
    ActionType.BACK: frozenset({Screen.JSON_UPLOAD, Screen.PHOTO_UPLOAD}),
    ActionType.IMPORT_JSON: frozenset({Screen.JSON_UPLOAD}),
    ActionType.BEGIN_ANALYSIS: frozenset({Screen.PHOTO_UPLOAD, Screen.REVIEW_EDIT}),
    ActionType.PHOTO_ANALYZED: frozenset({Screen.PHOTO_UPLOAD, Screen.REVIEW_EDIT}),
    ActionType.PHOTO_FAILED: frozenset({Screen.PHOTO_UPLOAD, Screen.REVIEW_EDIT}),
    ActionType.EDIT_TITLE: frozenset({Screen.REVIEW_EDIT}),
    ActionType.EDIT_WORD: frozenset({Screen.REVIEW_EDIT}),
    ActionType.ADD_WORD: frozenset({Screen.REVIEW_EDIT}),
    ActionType.REMOVE_WORD: frozenset({Screen.REVIEW_EDIT}),
    ActionType.CANCEL_EDIT: frozenset({Screen.REVIEW_EDIT}),
    ActionType.GENERATE_GRID: frozenset({Screen.REVIEW_EDIT}),
    ActionType.EDIT_WORDS: frozenset({Screen.GRID}),
    ActionType.RESET: ALL_SCREENS,
}


@dataclass
class Reducer:
    """
    Reducer applies actions to worksheet state.

    Stateless - all state is in WorksheetState.
    """

    def apply(self, state: WorksheetState, action: Action) -> ActionResult:
        """
        Apply an action to the worksheet state.

        Returns ActionResult with new state or error.
        """
        validation_error = self._validate_transition(state, action)
        if validation_error:
            return ActionResult.failure(
                validation_error,
                error_code=WorkflowErrorKind.INVALID_TRANSITION,
            )

        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code=WorkflowErrorKind.INVALID_TRANSITION,
            )
        return handler(state, action)

    def allowed_actions(self, state: WorksheetState) -> list[ActionType]:
        """Actions the transition table permits from the current screen."""
        return [
            action_type for action_type, screens in TRANSITIONS.items()
            if state.screen in screens
        ]

    def _validate_transition(self, state: WorksheetState, action: Action) -> str | None:
        screens = TRANSITIONS.get(action.action_type)
        if screens is None or state.screen not in screens:
            return (
                f"Action {action.action_type.value} is not available "
                f"on the {state.screen.value} screen"
            )
        return None

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.CHOOSE_MODE: self._handle_choose_mode,
            ActionType.BACK: self._handle_back,
            ActionType.IMPORT_JSON: self._handle_import_json,
            ActionType.BEGIN_ANALYSIS: self._handle_begin_analysis,
            ActionType.PHOTO_ANALYZED: self._handle_photo_analyzed,
            ActionType.PHOTO_FAILED: self._handle_photo_failed,
            ActionType.EDIT_TITLE: self._handle_edit_title,
            ActionType.EDIT_WORD: self._handle_edit_word,
            ActionType.ADD_WORD: self._handle_add_word,
            ActionType.REMOVE_WORD: self._handle_remove_word,
            ActionType.CANCEL_EDIT: self._handle_cancel_edit,
            ActionType.GENERATE_GRID: self._handle_generate_grid,
            ActionType.EDIT_WORDS: self._handle_edit_words,
            ActionType.RESET: self._handle_reset,
        }
        return handlers.get(action_type)

    # =========================================================================
    # Navigation
    # =========================================================================

    def _handle_choose_mode(self, state: WorksheetState, action: Action) -> ActionResult:
        try:
            mode = UploadMode(action.payload.mode)
        except ValueError:
            return ActionResult.failure(
                f"Unknown upload mode: {action.payload.mode}",
                error_code=WorkflowErrorKind.INVALID_TRANSITION,
            )

        screen = Screen.JSON_UPLOAD if mode == UploadMode.JSON else Screen.PHOTO_UPLOAD
        return ActionResult.success_with_state(
            state._copy_with(screen=screen, mode=mode),
            changes=[f"Chose {mode.value} upload"],
        )

    def _handle_back(self, state: WorksheetState, action: Action) -> ActionResult:
        return ActionResult.success_with_state(
            WorksheetState.initial(),
            changes=["Returned to start"],
        )

    def _handle_cancel_edit(self, state: WorksheetState, action: Action) -> ActionResult:
        # Draft is kept; the next photo replaces it.
        return ActionResult.success_with_state(
            state._copy_with(screen=Screen.PHOTO_UPLOAD, photo_preview=None),
            changes=["Cancelled review"],
        )

    def _handle_generate_grid(self, state: WorksheetState, action: Action) -> ActionResult:
        if not state.words:
            return ActionResult.failure(
                "Please add at least one word",
                error_code=WorkflowErrorKind.EMPTY_WORD_LIST_ON_GENERATE,
            )
        return ActionResult.success_with_state(
            state._copy_with(screen=Screen.GRID, photo_preview=None),
            changes=[f"Generated grid with {len(state.words)} words"],
        )

    def _handle_edit_words(self, state: WorksheetState, action: Action) -> ActionResult:
        return ActionResult.success_with_state(
            state._copy_with(screen=Screen.REVIEW_EDIT),
            changes=["Reopened word list for editing"],
        )

    def _handle_reset(self, state: WorksheetState, action: Action) -> ActionResult:
        return ActionResult.success_with_state(
            WorksheetState.initial(),
            changes=["Reset session"],
        )

    # =========================================================================
    # Input
    # =========================================================================

    def _handle_import_json(self, state: WorksheetState, action: Action) -> ActionResult:
        try:
            draft = parse_word_list(action.payload.text or "")
        except JsonImportError as e:
            kind = (
                WorkflowErrorKind.JSON_PARSE_FAILED if e.parse_failed
                else WorkflowErrorKind.JSON_SHAPE_INVALID
            )
            return ActionResult.failure(str(e), error_code=kind)

        return ActionResult.success_with_state(
            state._copy_with(screen=Screen.GRID, draft=draft),
            changes=[f"Imported {len(draft.words)} words"],
        )

    def _handle_begin_analysis(self, state: WorksheetState, action: Action) -> ActionResult:
        return ActionResult.success_with_state(
            state._copy_with(
                is_analyzing=True,
                photo_preview=action.payload.photo_preview,
            ),
            changes=["Analyzing photo"],
        )

    def _handle_photo_analyzed(self, state: WorksheetState, action: Action) -> ActionResult:
        """
        Fold a gateway result into the draft.

        From the upload screen the result replaces the draft. From the
        review screen it is union-merged and the title is left alone.
        """
        words = action.payload.words or []

        if state.screen == Screen.REVIEW_EDIT:
            merged = state.draft.merged_with(words)
            return ActionResult.success_with_state(
                state._copy_with(
                    draft=merged,
                    is_analyzing=False,
                    photo_preview=None,
                ),
                changes=[f"Merged photo, {len(merged.words)} words"],
            )

        draft = WorksheetDraft.create(title=action.payload.title or "", words=words)
        return ActionResult.success_with_state(
            state._copy_with(
                screen=Screen.REVIEW_EDIT,
                draft=draft,
                is_analyzing=False,
            ),
            changes=[f"Extracted {len(draft.words)} words"],
        )

    def _handle_photo_failed(self, state: WorksheetState, action: Action) -> ActionResult:
        # Reported as a failure, but the cleared preview must still be kept.
        result = ActionResult.failure(
            action.payload.error_message or "Failed to analyze photo. Please try again.",
            error_code=WorkflowErrorKind.GATEWAY_CALL_FAILED,
        )
        result.new_state = state._copy_with(is_analyzing=False, photo_preview=None)
        return result

    # =========================================================================
    # Editing
    # =========================================================================

    def _handle_edit_title(self, state: WorksheetState, action: Action) -> ActionResult:
        return ActionResult.success_with_state(
            state._copy_with(draft=state.draft.with_title(action.payload.text or "")),
        )

    def _handle_edit_word(self, state: WorksheetState, action: Action) -> ActionResult:
        index = action.payload.index
        if index is None or not state.draft.has_index(index):
            return self._index_error(state, index)
        return ActionResult.success_with_state(
            state._copy_with(
                draft=state.draft.with_word(index, action.payload.text or ""),
            ),
        )

    def _handle_add_word(self, state: WorksheetState, action: Action) -> ActionResult:
        return ActionResult.success_with_state(
            state._copy_with(draft=state.draft.with_blank_word()),
            changes=["Added blank word"],
        )

    def _handle_remove_word(self, state: WorksheetState, action: Action) -> ActionResult:
        index = action.payload.index
        if index is None or not state.draft.has_index(index):
            return self._index_error(state, index)
        removed = state.words[index]
        return ActionResult.success_with_state(
            state._copy_with(draft=state.draft.without_word(index)),
            changes=[f"Removed {removed!r}"],
        )

    def _index_error(self, state: WorksheetState, index: int | None) -> ActionResult:
        return ActionResult.failure(
            f"No word at position {index} (list has {len(state.words)} words)",
            error_code=WorkflowErrorKind.WORD_INDEX_OUT_OF_RANGE,
        )


def apply_action(state: WorksheetState, action: Action) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    return Reducer().apply(state, action)
