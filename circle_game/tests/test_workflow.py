"""
Tests for the worksheet workflow (screen transitions and draft edits).

Tests:
- Transition table
- JSON import shapes
- Photo results: replace, merge, failure
- Editing and grid generation
"""

import pytest

from ..workflow import (
    Action,
    ActionType,
    Reducer,
    Screen,
    UploadMode,
    WorkflowErrorKind,
    WorksheetDraft,
    WorksheetState,
    apply_action,
    export_word_list,
    parse_word_list,
    JsonImportError,
)


def run(state, *actions):
    """Apply actions in order, asserting each one succeeds."""
    for action in actions:
        result = apply_action(state, action)
        assert result.success, result.error
        state = result.new_state
    return state


class TestNavigation:
    """Tests for moving between screens."""

    def test_initial_state(self):
        state = WorksheetState.initial()

        assert state.screen == Screen.LANDING
        assert state.mode is None
        assert state.title == ""
        assert state.words == ()
        assert not state.is_analyzing
        assert state.photo_preview is None

    @pytest.mark.parametrize("mode,screen", [
        ("json", Screen.JSON_UPLOAD),
        ("photo", Screen.PHOTO_UPLOAD),
    ])
    def test_choose_mode(self, mode, screen):
        state = run(WorksheetState.initial(), Action.choose_mode(mode))

        assert state.screen == screen
        assert state.mode == UploadMode(mode)

    def test_unknown_mode_rejected(self):
        result = apply_action(WorksheetState.initial(), Action.choose_mode("camera"))

        assert not result.success
        assert result.error_code == WorkflowErrorKind.INVALID_TRANSITION

    def test_back_clears_mode_and_draft(self):
        """Back from an upload screen returns to a clean landing screen."""
        state = WorksheetState(
            screen=Screen.PHOTO_UPLOAD,
            mode=UploadMode.PHOTO,
            draft=WorksheetDraft.create("T", ["a"]),
        )

        state = run(state, Action.back())

        assert state == WorksheetState.initial()

    def test_back_not_available_on_landing(self):
        result = apply_action(WorksheetState.initial(), Action.back())

        assert not result.success
        assert result.error_code == WorkflowErrorKind.INVALID_TRANSITION
        assert result.new_state is None

    @pytest.mark.parametrize("screen", list(Screen))
    def test_reset_from_any_screen(self, screen):
        state = WorksheetState(
            screen=screen,
            mode=UploadMode.PHOTO,
            draft=WorksheetDraft.create("T", ["a", "b"]),
            photo_preview="data:image/png;base64,AAAA",
        )

        assert run(state, Action.reset()) == WorksheetState.initial()

    def test_editing_not_available_on_grid(self):
        state = WorksheetState(screen=Screen.GRID, draft=WorksheetDraft.create("", ["a"]))

        for action in (Action.edit_title("x"), Action.add_word(), Action.remove_word(0)):
            result = apply_action(state, action)
            assert not result.success
            assert result.error_code == WorkflowErrorKind.INVALID_TRANSITION

    def test_allowed_actions(self, review_state):
        allowed = Reducer().allowed_actions(review_state)

        assert ActionType.GENERATE_GRID in allowed
        assert ActionType.CANCEL_EDIT in allowed
        assert ActionType.RESET in allowed
        assert ActionType.CHOOSE_MODE not in allowed
        assert ActionType.IMPORT_JSON not in allowed

    def test_failed_action_leaves_state_untouched(self, review_state):
        result = apply_action(review_state, Action.choose_mode("json"))

        assert not result.success
        assert review_state.screen == Screen.REVIEW_EDIT
        assert review_state.words == ("狗", "貓", "鳥")


class TestJsonImport:
    """Tests for importing a JSON word list."""

    def test_bare_array(self, json_upload_state):
        state = run(json_upload_state, Action.import_json('["狗", "貓"]'))

        assert state.screen == Screen.GRID
        assert state.title == ""
        assert state.words == ("狗", "貓")

    def test_object_with_title(self, json_upload_state):
        state = run(
            json_upload_state,
            Action.import_json('{"title": "動物篇", "words": ["狗", "貓"]}'),
        )

        assert state.title == "動物篇"
        assert state.words == ("狗", "貓")

    @pytest.mark.parametrize("text", [
        '{"words": ["狗"]}',
        '{"title": null, "words": ["狗"]}',
    ])
    def test_object_without_title(self, json_upload_state, text):
        state = run(json_upload_state, Action.import_json(text))

        assert state.title == ""

    def test_no_dedup_on_import(self, json_upload_state):
        """Imported lists are used as-is."""
        state = run(json_upload_state, Action.import_json('{"words": ["狗", "貓", "狗"]}'))

        assert state.words == ("狗", "貓", "狗")

    def test_not_json(self, json_upload_state):
        result = apply_action(json_upload_state, Action.import_json("狗, 貓"))

        assert not result.success
        assert result.error_code == WorkflowErrorKind.JSON_PARSE_FAILED
        assert result.error == "Error parsing JSON file. Please check the file format."

    @pytest.mark.parametrize("text", [
        '"狗"',
        "42",
        '{"title": "T"}',
        '{"title": "T", "words": "狗"}',
        '{"title": 7, "words": ["狗"]}',
        '["狗", 1]',
        '{"words": [["狗"]]}',
    ])
    def test_wrong_shape(self, json_upload_state, text):
        result = apply_action(json_upload_state, Action.import_json(text))

        assert not result.success
        assert result.error_code == WorkflowErrorKind.JSON_SHAPE_INVALID
        assert json_upload_state.screen == Screen.JSON_UPLOAD

    def test_utf8_bom_accepted(self):
        draft = parse_word_list('\ufeff["狗"]'.encode("utf-8"))

        assert draft.words == ("狗",)

    def test_invalid_bytes(self):
        with pytest.raises(JsonImportError) as exc_info:
            parse_word_list(b"\xff\xfe\x00")
        assert exc_info.value.parse_failed

    def test_export_round_trip(self):
        """Exported drafts re-import to the same title and words."""
        draft = WorksheetDraft.create("形容詞篇", ["長", "短", "", "長"])

        assert parse_word_list(export_word_list(draft)) == draft

    def test_export_keeps_characters(self):
        assert "動物篇" in export_word_list(WorksheetDraft.create("動物篇", []))


class TestPhotoResults:
    """Tests for folding gateway results into the draft."""

    def test_first_photo_replaces_draft(self):
        state = WorksheetState(
            screen=Screen.PHOTO_UPLOAD,
            mode=UploadMode.PHOTO,
            draft=WorksheetDraft.create("old", ["x", "y"]),
        )

        state = run(
            state,
            Action.begin_analysis("data:image/png;base64,AAAA"),
            Action.photo_analyzed("動物篇", ["狗", "貓"]),
        )

        assert state.screen == Screen.REVIEW_EDIT
        assert state.title == "動物篇"
        assert state.words == ("狗", "貓")
        assert not state.is_analyzing

    def test_begin_analysis_sets_preview(self):
        state = WorksheetState(screen=Screen.PHOTO_UPLOAD, mode=UploadMode.PHOTO)

        state = run(state, Action.begin_analysis("data:image/png;base64,AAAA"))

        assert state.is_analyzing
        assert state.photo_preview == "data:image/png;base64,AAAA"

    def test_later_photo_merges(self, review_state):
        """New words are appended; the title is left alone."""
        state = run(
            review_state,
            Action.begin_analysis("data:image/png;base64,BBBB"),
            Action.photo_analyzed("另一頁", ["貓", "魚", "狗", "馬"]),
        )

        assert state.screen == Screen.REVIEW_EDIT
        assert state.title == "動物篇"
        assert state.words == ("狗", "貓", "鳥", "魚", "馬")
        assert state.photo_preview is None
        assert not state.is_analyzing

    def test_merge_of_subset_is_unchanged(self, review_state):
        state = run(review_state, Action.photo_analyzed("", ["鳥", "狗"]))

        assert state.words == review_state.words

    def test_merge_is_case_sensitive(self):
        state = WorksheetState(
            screen=Screen.REVIEW_EDIT,
            draft=WorksheetDraft.create("", ["cat"]),
        )

        state = run(state, Action.photo_analyzed("", ["Cat", "cat"]))

        assert state.words == ("cat", "Cat")

    def test_merge_keeps_hand_typed_repeats(self, review_state):
        """Only incoming words are checked; the existing list is left alone."""
        state = run(
            review_state,
            Action.add_word(),
            Action.edit_word(3, "狗"),
            Action.photo_analyzed("", ["魚", "魚"]),
        )

        assert state.words == ("狗", "貓", "鳥", "狗", "魚")

    @pytest.mark.parametrize("words,incoming", [
        (["狗", "", "貓", ""], ["狗"]),
        (["狗", "貓", "狗"], ["貓"]),
        (["狗", "", "貓"], ["", "貓", "狗"]),
    ])
    def test_subset_merge_keeps_blanks_and_repeats(self, words, incoming):
        state = WorksheetState(
            screen=Screen.REVIEW_EDIT,
            draft=WorksheetDraft.create("T", words),
        )

        state = run(state, Action.photo_analyzed("", incoming))

        assert state.words == tuple(words)
        assert state.title == "T"

    def test_failure_keeps_draft_and_clears_preview(self, review_state):
        state = run(review_state, Action.begin_analysis("data:image/png;base64,BBBB"))

        result = apply_action(state, Action.photo_failed("Failed to analyze photo"))

        assert not result.success
        assert result.error_code == WorkflowErrorKind.GATEWAY_CALL_FAILED
        assert result.error == "Failed to analyze photo"
        assert result.new_state.words == review_state.words
        assert result.new_state.title == review_state.title
        assert result.new_state.photo_preview is None
        assert not result.new_state.is_analyzing

    def test_photo_not_accepted_on_json_path(self, json_upload_state):
        result = apply_action(json_upload_state, Action.photo_analyzed("T", ["a"]))

        assert not result.success
        assert result.error_code == WorkflowErrorKind.INVALID_TRANSITION


class TestEditing:
    """Tests for review-screen edits."""

    def test_edit_title(self, review_state):
        state = run(review_state, Action.edit_title(""))

        assert state.title == ""
        assert state.words == review_state.words

    def test_edit_word(self, review_state):
        state = run(review_state, Action.edit_word(1, "兔"))

        assert state.words == ("狗", "兔", "鳥")

    def test_add_blank_word(self, review_state):
        state = run(review_state, Action.add_word())

        assert state.words == ("狗", "貓", "鳥", "")

    @pytest.mark.parametrize("index", [0, 1, 2])
    def test_remove_shifts_later_words(self, review_state, index):
        """Words after the removed one move down; none change value."""
        before = list(review_state.words)

        state = run(review_state, Action.remove_word(index))

        assert list(state.words) == before[:index] + before[index + 1:]

    @pytest.mark.parametrize("action", [
        Action.edit_word(3, "x"),
        Action.edit_word(-1, "x"),
        Action.remove_word(5),
        Action.remove_word(-1),
    ])
    def test_index_out_of_range(self, review_state, action):
        result = apply_action(review_state, action)

        assert not result.success
        assert result.error_code == WorkflowErrorKind.WORD_INDEX_OUT_OF_RANGE

    def test_generate_grid(self, review_state):
        state = run(review_state, Action.generate_grid())

        assert state.screen == Screen.GRID
        assert state.show_grid
        assert not state.show_edit_words

    def test_generate_requires_a_word(self, review_state):
        state = run(
            review_state,
            Action.remove_word(0),
            Action.remove_word(0),
            Action.remove_word(0),
        )

        result = apply_action(state, Action.generate_grid())

        assert not result.success
        assert result.error_code == WorkflowErrorKind.EMPTY_WORD_LIST_ON_GENERATE
        assert result.error == "Please add at least one word"

    def test_blank_words_still_count(self, review_state):
        """A blank word is still a word for generation."""
        state = WorksheetState(screen=Screen.REVIEW_EDIT, draft=WorksheetDraft.create("", [""]))

        assert run(state, Action.generate_grid()).screen == Screen.GRID

    def test_cancel_keeps_words(self, review_state):
        state = run(review_state, Action.cancel_edit())

        assert state.screen == Screen.PHOTO_UPLOAD
        assert state.words == review_state.words
        assert state.photo_preview is None

    def test_photo_after_cancel_replaces(self, review_state):
        state = run(
            review_state,
            Action.cancel_edit(),
            Action.photo_analyzed("新", ["魚"]),
        )

        assert state.title == "新"
        assert state.words == ("魚",)

    def test_edit_words_from_grid(self, review_state):
        state = run(review_state, Action.generate_grid(), Action.edit_words())

        assert state.screen == Screen.REVIEW_EDIT
        assert state.words == review_state.words


class TestEndToEnd:

    def test_import_remove_generate(self):
        """Import with a duplicate, remove it by hand, generate the grid."""
        state = run(
            WorksheetState.initial(),
            Action.choose_mode("json"),
            Action.import_json('{"words":["狗","貓","狗"]}'),
        )
        assert state.title == ""
        assert state.words == ("狗", "貓", "狗")

        state = run(
            state,
            Action.edit_words(),
            Action.remove_word(2),
            Action.generate_grid(),
        )

        assert state.screen == Screen.GRID
        assert state.words == ("狗", "貓")
        assert state.title == ""
