"""
Image payloads - Data URI parsing and media type resolution.

Accepted input is a data URI of the form
``data:image/{jpeg|jpg|png|webp};base64,<payload>``.
"""

from __future__ import annotations
from dataclasses import dataclass
import base64
import re

from .errors import ErrorKind, ExtractionError

MEDIA_TYPES = {
    "jpeg": "image/jpeg",
    "jpg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
}

DATA_URI_PATTERN = re.compile(
    r"^data:image/(jpeg|jpg|png|webp);base64,([A-Za-z0-9+/]+={0,2})$"
)


@dataclass(frozen=True)
class ImagePayload:
    """A validated image ready to send to the model."""
    media_type: str
    data: str  # base64 body, without the data URI prefix

    @property
    def size_bytes(self) -> int:
        """Approximate decoded size."""
        padding = len(self.data) - len(self.data.rstrip("="))
        return len(self.data) * 3 // 4 - padding


def resolve_media_type(encoding: str) -> str:
    """Map an accepted encoding label to its canonical media type."""
    try:
        return MEDIA_TYPES[encoding]
    except KeyError:
        raise ExtractionError(
            ErrorKind.INVALID_FORMAT,
            f"Unsupported image encoding: {encoding}",
        ) from None


def parse_data_uri(image: str | None) -> ImagePayload:
    """
    Validate a data URI and split it into media type and base64 body.

    Raises:
        ExtractionError: MISSING_INPUT when nothing was sent,
            INVALID_FORMAT when the URI is not an accepted base64 image.
    """
    if not image:
        raise ExtractionError(ErrorKind.MISSING_INPUT, "No image provided")

    if not isinstance(image, str):
        raise ExtractionError(
            ErrorKind.INVALID_FORMAT,
            "Invalid image format. Must be base64 encoded image.",
        )

    match = DATA_URI_PATTERN.match(image)
    if not match:
        raise ExtractionError(
            ErrorKind.INVALID_FORMAT,
            "Invalid image format. Must be base64 encoded image.",
        )

    encoding, body = match.groups()
    return ImagePayload(media_type=resolve_media_type(encoding), data=body)


def to_data_uri(image_data: bytes, content_type: str) -> str:
    """Encode raw image bytes as a base64 data URI."""
    encoded = base64.b64encode(image_data).decode("ascii")
    return f"data:{content_type};base64,{encoded}"
