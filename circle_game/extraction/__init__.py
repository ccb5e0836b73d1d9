"""
Extraction - Worksheet photo to word list.

The extraction gateway is the only component that talks to the
external vision model:

    data URI -> parse_data_uri -> model call -> parse_reply -> ExtractionResult

The model is a black box. Its reply is treated as untrusted free text
and every parsing step can fail with a typed ExtractionError.
"""

from .errors import ErrorKind, ExtractionError
from .image import ImagePayload, MEDIA_TYPES, parse_data_uri, resolve_media_type, to_data_uri
from .parsing import dedupe_words, find_json_object, parse_reply, validate_shape
from .prompts import ExtractionPrompts, PROMPT_VERSION
from .gateway import ExtractionGateway, ExtractionResult

__all__ = [
    "ErrorKind",
    "ExtractionError",
    "ImagePayload",
    "MEDIA_TYPES",
    "parse_data_uri",
    "resolve_media_type",
    "to_data_uri",
    "dedupe_words",
    "find_json_object",
    "parse_reply",
    "validate_shape",
    "ExtractionPrompts",
    "PROMPT_VERSION",
    "ExtractionGateway",
    "ExtractionResult",
]
