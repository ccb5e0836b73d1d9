"""
Photo uploads - Checks applied before any gateway call.
"""

from __future__ import annotations
from dataclasses import dataclass

from ..config import DEFAULT_MAX_PHOTO_BYTES
from ..extraction.image import to_data_uri
from .action import WorkflowErrorKind


class PhotoRejected(ValueError):
    """Raised when an upload cannot be sent for analysis."""

    def __init__(self, message: str, kind: WorkflowErrorKind):
        super().__init__(message)
        self.kind = kind


@dataclass(frozen=True)
class PhotoUpload:
    """An uploaded file as received from the client."""
    data: bytes
    content_type: str | None

    def validate(self, max_bytes: int = DEFAULT_MAX_PHOTO_BYTES) -> None:
        if not self.content_type or not self.content_type.startswith("image/"):
            raise PhotoRejected(
                "Please select an image file",
                WorkflowErrorKind.FILE_TYPE_REJECTED,
            )
        if len(self.data) > max_bytes:
            raise PhotoRejected(
                f"Image size must be less than {max_bytes // (1024 * 1024)}MB",
                WorkflowErrorKind.FILE_TOO_LARGE,
            )

    def to_data_uri(self) -> str:
        return to_data_uri(self.data, self.content_type)
