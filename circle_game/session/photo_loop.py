"""
Photo Loop - One photo through validation, extraction, and merge.

The loop:
1. Check the upload (type, size) before any network call
2. Mark the session as analyzing with the photo as preview
3. Call the extraction gateway once
4. Fold the result into the draft, or record the failure

Overlapping photos on the same session are not serialized. Whichever
result is dispatched last wins.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from ..config import DEFAULT_MAX_PHOTO_BYTES
from ..extraction import ExtractionError, ExtractionGateway
from ..workflow import (
    Action,
    ActionResult,
    PhotoRejected,
    PhotoUpload,
)
from .manager import Session

logger = logging.getLogger(__name__)


@dataclass
class PhotoLoop:
    """
    Drives a photo upload for a session.

    Usage:
        loop = PhotoLoop(gateway)
        result = loop.process_photo(session, PhotoUpload(data, "image/png"))
        if not result.success:
            show_alert(result.error)
    """
    gateway: ExtractionGateway
    max_photo_bytes: int = DEFAULT_MAX_PHOTO_BYTES

    def process_photo(self, session: Session, upload: PhotoUpload) -> ActionResult:
        """Validate, analyze, and fold a photo into the session draft."""
        try:
            upload.validate(self.max_photo_bytes)
        except PhotoRejected as e:
            session.last_error = str(e)
            return ActionResult.failure(str(e), error_code=e.kind)

        data_uri = upload.to_data_uri()
        started = session.dispatch(Action.begin_analysis(data_uri))
        if not started.success:
            return started

        try:
            extraction = self.gateway.extract(data_uri)
        except ExtractionError as e:
            logger.warning(
                "Photo analysis failed for session %s: %s",
                session.session_id, e.kind.code,
            )
            return session.dispatch(Action.photo_failed(e.message))

        return session.dispatch(
            Action.photo_analyzed(extraction.title, extraction.words)
        )

