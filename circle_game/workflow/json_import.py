"""
JSON word list import.

Accepted shapes:
    ["詞語1", "詞語2"]
    {"title": "動物篇", "words": ["詞語1", "詞語2"]}

Imported lists are taken as-is: no deduplication, no trimming.
"""

from __future__ import annotations
from typing import Any
import json

from .state import WorksheetDraft


class JsonImportError(ValueError):
    """Raised when a JSON word list cannot be used."""

    def __init__(self, message: str, parse_failed: bool = False):
        super().__init__(message)
        self.parse_failed = parse_failed


def parse_word_list(content: str | bytes) -> WorksheetDraft:
    """
    Parse a JSON word list file into a draft.

    Raises:
        JsonImportError: parse_failed=True when the text is not JSON,
            False when the JSON has an unsupported shape.
    """
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise JsonImportError(
                "Error parsing JSON file. Please check the file format.",
                parse_failed=True,
            ) from e

    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as e:
        raise JsonImportError(
            "Error parsing JSON file. Please check the file format.",
            parse_failed=True,
        ) from e

    return draft_from_json(parsed)


def draft_from_json(parsed: Any) -> WorksheetDraft:
    """Build a draft from already-decoded JSON."""
    if isinstance(parsed, list):
        title, words = "", parsed
    elif isinstance(parsed, dict) and isinstance(parsed.get("words"), list):
        title, words = parsed.get("title") or "", parsed["words"]
        if not isinstance(title, str):
            raise JsonImportError("Invalid JSON format. 'title' must be a string.")
    else:
        raise JsonImportError(
            "Invalid JSON format. Please provide an array of words "
            "or an object with a 'words' array."
        )

    if not all(isinstance(word, str) for word in words):
        raise JsonImportError("Invalid JSON format. Every word must be a string.")

    return WorksheetDraft.create(title=title, words=words)


def export_word_list(draft: WorksheetDraft) -> str:
    """Serialize a draft in the object shape accepted by parse_word_list."""
    return json.dumps(draft.to_dict(), ensure_ascii=False, indent=2)
