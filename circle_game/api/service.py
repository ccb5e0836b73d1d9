"""
API Service - Business logic layer between API and workflow.

The service:
1. Runs the extraction gateway for direct photo analysis
2. Manages worksheet sessions
3. Translates user actions into workflow actions
4. Formats responses for the browser

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from ..config import Settings
from ..extraction import ExtractionError, ExtractionGateway
from ..render import render_grid_html
from ..session import PhotoLoop, Session, SessionManager
from ..workflow import (
    Action,
    ActionResult,
    PhotoUpload,
    Screen,
    WorkflowErrorKind,
)
from .schemas import (
    AnalyzePhotoResponse,
    ErrorCode,
    ErrorResponse,
    ScreenName,
    SessionResponse,
    UploadModeName,
    WordListExport,
)

logger = logging.getLogger(__name__)

# HTTP status for workflow failures; anything unlisted is a 400.
WORKFLOW_STATUS = {
    WorkflowErrorKind.INVALID_TRANSITION: 409,
    WorkflowErrorKind.GATEWAY_CALL_FAILED: 502,
    WorkflowErrorKind.FILE_TOO_LARGE: 413,
}


@dataclass
class APIService:
    """
    Main API service for the worksheet page.

    Usage:
        service = APIService(settings=Settings.from_env())

        # One-shot extraction
        response = service.analyze_photo(data_uri)

        # Session flow
        session = service.create_session()
        service.choose_mode(session.session_id, "photo")
        service.upload_photo(session.session_id, image_bytes, "image/png")
    """
    settings: Settings = field(default_factory=Settings.from_env)
    session_manager: SessionManager | None = None
    gateway: ExtractionGateway | None = None

    def __post_init__(self):
        if self.session_manager is None:
            self.session_manager = SessionManager(
                max_age_seconds=self.settings.session_max_age,
            )
        if self.gateway is None:
            self.gateway = ExtractionGateway(self.settings)
        self.photo_loop = PhotoLoop(
            gateway=self.gateway,
            max_photo_bytes=self.settings.max_photo_bytes,
        )

    # =========================================================================
    # Extraction
    # =========================================================================

    def analyze_photo(self, image: str | None) -> AnalyzePhotoResponse | ErrorResponse:
        """
        Extract title and words from a data URI image.

        Exactly one model call per request; failures are not retried.
        """
        try:
            result = self.gateway.extract(image)
        except ExtractionError as e:
            return ErrorResponse(
                error=e.message,
                error_code=ErrorCode(e.kind.code),
                status_code=e.status_code,
            )
        return AnalyzePhotoResponse(
            title=result.title,
            words=result.words,
            usage=result.usage,
        )

    # =========================================================================
    # Sessions
    # =========================================================================

    def create_session(self) -> SessionResponse:
        session = self.session_manager.create_session()
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        return self._session_to_response(session)

    def end_session(self, session_id: str) -> bool:
        return self.session_manager.end_session(session_id)

    # =========================================================================
    # Workflow actions
    # =========================================================================

    def choose_mode(self, session_id: str, mode: str) -> SessionResponse | ErrorResponse:
        return self._dispatch(session_id, Action.choose_mode(mode))

    def back(self, session_id: str) -> SessionResponse | ErrorResponse:
        return self._dispatch(session_id, Action.back())

    def import_json(self, session_id: str, content: bytes | str) -> SessionResponse | ErrorResponse:
        if isinstance(content, bytes):
            try:
                content = content.decode("utf-8-sig")
            except UnicodeDecodeError:
                return ErrorResponse(
                    error="Error parsing JSON file. Please check the file format.",
                    error_code=ErrorCode.JSON_PARSE_FAILED,
                )
        return self._dispatch(session_id, Action.import_json(content))

    def upload_photo(
        self,
        session_id: str,
        image_data: bytes,
        content_type: str | None,
    ) -> SessionResponse | ErrorResponse:
        """
        Analyze a photo and fold it into the session draft.

        The first photo replaces the draft, photos added from the review
        screen are merged into it.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)

        upload = PhotoUpload(data=image_data, content_type=content_type)
        result = self.photo_loop.process_photo(session, upload)
        return self._result_to_response(session, result)

    def edit_title(self, session_id: str, title: str) -> SessionResponse | ErrorResponse:
        return self._dispatch(session_id, Action.edit_title(title))

    def edit_word(self, session_id: str, index: int, value: str) -> SessionResponse | ErrorResponse:
        return self._dispatch(session_id, Action.edit_word(index, value))

    def add_word(self, session_id: str) -> SessionResponse | ErrorResponse:
        return self._dispatch(session_id, Action.add_word())

    def remove_word(self, session_id: str, index: int) -> SessionResponse | ErrorResponse:
        return self._dispatch(session_id, Action.remove_word(index))

    def cancel_edit(self, session_id: str) -> SessionResponse | ErrorResponse:
        return self._dispatch(session_id, Action.cancel_edit())

    def edit_words(self, session_id: str) -> SessionResponse | ErrorResponse:
        return self._dispatch(session_id, Action.edit_words())

    def generate_grid(self, session_id: str) -> SessionResponse | ErrorResponse:
        return self._dispatch(session_id, Action.generate_grid())

    def reset(self, session_id: str) -> SessionResponse | ErrorResponse:
        return self._dispatch(session_id, Action.reset())

    # =========================================================================
    # Output
    # =========================================================================

    def export_words(self, session_id: str) -> WordListExport | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        return WordListExport(**session.state.draft.to_dict())

    def render_grid(
        self,
        session_id: str,
        reset_url: str | None = None,
    ) -> str | ErrorResponse:
        """Printable grid page; only available on the grid screen."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        if session.state.screen != Screen.GRID:
            return ErrorResponse(
                error="Generate the grid before printing",
                error_code=ErrorCode.INVALID_TRANSITION,
                details={"screen": session.state.screen.value},
                status_code=409,
            )
        return render_grid_html(
            session.state.title,
            session.state.words,
            reset_url=reset_url,
        )

    # =========================================================================
    # Helper methods
    # =========================================================================

    def _dispatch(self, session_id: str, action: Action) -> SessionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        result = session.dispatch(action)
        return self._result_to_response(session, result)

    def _result_to_response(
        self,
        session: Session,
        result: ActionResult,
    ) -> SessionResponse | ErrorResponse:
        if result.success:
            return self._session_to_response(session, result.state_changes)

        kind = result.error_code or WorkflowErrorKind.INVALID_TRANSITION
        return ErrorResponse(
            error=result.error or "Action failed",
            error_code=ErrorCode(kind.value),
            details={"screen": session.state.screen.value},
            status_code=WORKFLOW_STATUS.get(kind, 400),
        )

    def _session_to_response(
        self,
        session: Session,
        changes: list[str] | None = None,
    ) -> SessionResponse:
        """Convert Session to SessionResponse."""
        state = session.state
        return SessionResponse(
            session_id=session.session_id,
            screen=ScreenName(state.screen.value),
            mode=UploadModeName(state.mode.value) if state.mode else None,
            title=state.title,
            words=list(state.words),
            word_count=len(state.words),
            is_analyzing=state.is_analyzing,
            photo_preview=state.photo_preview,
            show_edit_words=state.show_edit_words,
            show_grid=state.show_grid,
            allowed_actions=[
                a.value for a in session.reducer.allowed_actions(state)
            ],
            changes=changes or [],
            created_at=session.created_at,
        )

    def _session_not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
            status_code=404,
        )
