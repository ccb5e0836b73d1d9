"""
Worksheet State - The single owned value behind a worksheet session.

State is an immutable snapshot. The reducer produces a new snapshot
for every accepted action and leaves the old one untouched, so a
failed action can never leave a half-written draft behind.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable


class Screen(Enum):
    """The five mutually exclusive screens of the worksheet flow."""
    LANDING = "landing"
    JSON_UPLOAD = "json_upload"
    PHOTO_UPLOAD = "photo_upload"
    REVIEW_EDIT = "review_edit"
    GRID = "grid"


class UploadMode(Enum):
    """How the word list is being supplied."""
    JSON = "json"
    PHOTO = "photo"


@dataclass(frozen=True)
class WorksheetDraft:
    """
    The working title and word list.

    Words keep display order. Duplicates and blanks are allowed while
    editing; merges are where uniqueness is enforced.
    """
    title: str = ""
    words: tuple[str, ...] = ()

    @classmethod
    def create(cls, title: str = "", words: Iterable[str] = ()) -> WorksheetDraft:
        return cls(title=title, words=tuple(words))

    def with_title(self, title: str) -> WorksheetDraft:
        return replace(self, title=title)

    def with_word(self, index: int, value: str) -> WorksheetDraft:
        """Return new draft with the word at index replaced."""
        words = list(self.words)
        words[index] = value
        return replace(self, words=tuple(words))

    def with_blank_word(self) -> WorksheetDraft:
        return replace(self, words=self.words + ("",))

    def without_word(self, index: int) -> WorksheetDraft:
        """Return new draft with the word at index removed; later words shift down."""
        return replace(self, words=self.words[:index] + self.words[index + 1:])

    def merged_with(self, new_words: Iterable[str]) -> WorksheetDraft:
        """
        Union-merge words into the draft.

        Exact, case-sensitive comparison against the current words.
        Existing words, blanks and hand-typed repeats included, are left
        as they are; unseen words are appended once, in order.
        """
        seen = set(self.words)
        additions = []
        for word in new_words:
            if word not in seen:
                seen.add(word)
                additions.append(word)
        return replace(self, words=self.words + tuple(additions))

    def has_index(self, index: int) -> bool:
        return 0 <= index < len(self.words)

    def to_dict(self) -> dict:
        return {"title": self.title, "words": list(self.words)}


@dataclass(frozen=True)
class WorksheetState:
    """
    Complete session state at a point in time.

    All changes go through the reducer.
    """
    screen: Screen = Screen.LANDING
    mode: UploadMode | None = None
    draft: WorksheetDraft = field(default_factory=WorksheetDraft)

    # Advisory only: overlapping photo uploads are not blocked.
    is_analyzing: bool = False
    photo_preview: str | None = None  # data URI of the photo being analyzed

    @classmethod
    def initial(cls) -> WorksheetState:
        return cls()

    @property
    def title(self) -> str:
        return self.draft.title

    @property
    def words(self) -> tuple[str, ...]:
        return self.draft.words

    @property
    def show_edit_words(self) -> bool:
        return self.screen == Screen.REVIEW_EDIT

    @property
    def show_grid(self) -> bool:
        return self.screen == Screen.GRID

    def _copy_with(self, **kwargs) -> WorksheetState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)
