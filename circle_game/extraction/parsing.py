"""
Reply parsing - Pull the word list out of free-text model output.

The model is asked for bare JSON but may wrap it in prose. Parsing is
best-effort: find the first brace-delimited span, decode it, check its
shape, and deduplicate the words.
"""

from __future__ import annotations
from typing import Any, Iterable
import json
import re

from .errors import ErrorKind, ExtractionError

# Non-greedy: stops at the first closing brace.
JSON_OBJECT_PATTERN = re.compile(r"\{.*?\}", re.DOTALL)


def find_json_object(text: str) -> str:
    """Return the first brace-delimited substring of a reply."""
    match = JSON_OBJECT_PATTERN.search(text)
    if not match:
        raise ExtractionError(
            ErrorKind.EXTRACTION_FAILED,
            "Failed to extract data from image",
        )
    return match.group(0)


def decode_json_object(fragment: str) -> Any:
    try:
        return json.loads(fragment)
    except json.JSONDecodeError as e:
        raise ExtractionError(
            ErrorKind.EXTRACTION_FAILED,
            f"Failed to extract data from image: {e.msg}",
        ) from e


def validate_shape(data: Any) -> tuple[str, list[str]]:
    """
    Check the decoded reply is ``{"title": str, "words": [str, ...]}``.

    Returns:
        The title and the raw word list.
    """
    if not isinstance(data, dict):
        raise ExtractionError(
            ErrorKind.INVALID_MODEL_RESPONSE,
            "Invalid response format from AI",
        )

    title = data.get("title")
    words = data.get("words")
    if not isinstance(title, str) or not isinstance(words, list):
        raise ExtractionError(
            ErrorKind.INVALID_MODEL_RESPONSE,
            "Invalid response format from AI",
        )
    if not all(isinstance(word, str) for word in words):
        raise ExtractionError(
            ErrorKind.INVALID_MODEL_RESPONSE,
            "Invalid response format from AI: words must be strings",
        )
    return title, words


def dedupe_words(words: Iterable[str]) -> list[str]:
    """Drop repeated words, keeping the first occurrence of each."""
    return list(dict.fromkeys(words))


def parse_reply(text: str) -> tuple[str, list[str]]:
    """Full reply pipeline: locate, decode, validate, deduplicate."""
    data = decode_json_object(find_json_object(text))
    title, words = validate_shape(data)
    return title, dedupe_words(words)
