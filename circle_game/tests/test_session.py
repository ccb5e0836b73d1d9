"""
Tests for worksheet sessions and the photo loop.
"""

import pytest
import time

from ..config import DEFAULT_MAX_PHOTO_BYTES
from ..session import PhotoLoop, SessionManager
from ..workflow import Action, PhotoUpload, Screen, WorkflowErrorKind
from .conftest import PNG_BYTES


class TestSessionManager:
    """Tests for session lifecycle."""

    def test_create_session(self):
        manager = SessionManager()

        session = manager.create_session()

        assert session.session_id
        assert session.state.screen == Screen.LANDING
        assert manager.get_session(session.session_id) is session

    def test_sessions_are_independent(self):
        manager = SessionManager()
        first = manager.create_session()
        second = manager.create_session()

        first.dispatch(Action.choose_mode("json"))

        assert first.state.screen == Screen.JSON_UPLOAD
        assert second.state.screen == Screen.LANDING

    def test_end_session(self):
        manager = SessionManager()
        session = manager.create_session()

        assert manager.end_session(session.session_id)
        assert manager.get_session(session.session_id) is None
        assert not manager.end_session(session.session_id)

    def test_cleanup_stale_sessions(self):
        manager = SessionManager()
        stale = manager.create_session()
        fresh = manager.create_session()
        stale.updated_at = time.time() - 7200

        assert manager.cleanup_stale_sessions(max_age_seconds=3600) == 1
        assert manager.get_session(stale.session_id) is None
        assert manager.get_session(fresh.session_id) is fresh

    def test_create_session_drops_stale(self):
        """Idle sessions are evicted when the next session is created."""
        manager = SessionManager(max_age_seconds=60)
        stale = manager.create_session()
        active = manager.create_session()
        stale.updated_at = time.time() - 120

        new = manager.create_session()

        assert manager.get_session(stale.session_id) is None
        assert manager.get_session(active.session_id) is active
        assert manager.get_session(new.session_id) is new

    def test_dispatch_keeps_session_alive(self):
        manager = SessionManager(max_age_seconds=60)
        session = manager.create_session()
        session.updated_at = time.time() - 120

        session.dispatch(Action.choose_mode("json"))
        manager.create_session()

        assert manager.get_session(session.session_id) is session

    def test_dispatch_records_error(self):
        session = SessionManager().create_session()

        result = session.dispatch(Action.generate_grid())

        assert not result.success
        assert session.last_error == result.error
        assert session.state.screen == Screen.LANDING

    def test_dispatch_clears_error_on_success(self):
        session = SessionManager().create_session()
        session.dispatch(Action.back())

        session.dispatch(Action.choose_mode("photo"))

        assert session.last_error is None


class TestPhotoLoop:
    """Tests for a photo going through validation, extraction, and merge."""

    @pytest.fixture
    def session(self):
        session = SessionManager().create_session()
        session.dispatch(Action.choose_mode("photo"))
        return session

    @pytest.fixture
    def loop(self, gateway):
        return PhotoLoop(gateway=gateway)

    def test_first_photo_goes_to_review(self, loop, session):
        result = loop.process_photo(session, PhotoUpload(PNG_BYTES, "image/png"))

        assert result.success
        assert session.state.screen == Screen.REVIEW_EDIT
        assert session.state.title == "動物篇"
        assert session.state.words == ("狗", "貓", "鳥")
        assert not session.state.is_analyzing

    def test_second_photo_merges(self, loop, session, fake_client):
        loop.process_photo(session, PhotoUpload(PNG_BYTES, "image/png"))
        fake_client.reply = '{"title": "第二頁", "words": ["魚", "貓"]}'

        result = loop.process_photo(session, PhotoUpload(PNG_BYTES, "image/jpeg"))

        assert result.success
        assert session.state.title == "動物篇"
        assert session.state.words == ("狗", "貓", "鳥", "魚")
        assert session.state.photo_preview is None
        assert len(fake_client.calls) == 2

    def test_photo_sent_as_data_uri(self, loop, session, fake_client):
        loop.process_photo(session, PhotoUpload(PNG_BYTES, "image/webp"))

        source = fake_client.calls[0]["messages"][0]["content"][0]["source"]
        assert source["media_type"] == "image/webp"

    def test_rejects_non_image(self, loop, session, fake_client):
        result = loop.process_photo(session, PhotoUpload(b"%PDF-1.7", "application/pdf"))

        assert not result.success
        assert result.error_code == WorkflowErrorKind.FILE_TYPE_REJECTED
        assert result.error == "Please select an image file"
        assert session.last_error == result.error
        assert session.state.screen == Screen.PHOTO_UPLOAD
        assert fake_client.calls == []

    def test_rejects_missing_content_type(self, loop, session):
        result = loop.process_photo(session, PhotoUpload(PNG_BYTES, None))

        assert result.error_code == WorkflowErrorKind.FILE_TYPE_REJECTED

    def test_rejects_large_photo(self, loop, session, fake_client):
        data = b"\x00" * (DEFAULT_MAX_PHOTO_BYTES + 1)

        result = loop.process_photo(session, PhotoUpload(data, "image/png"))

        assert not result.success
        assert result.error_code == WorkflowErrorKind.FILE_TOO_LARGE
        assert result.error == "Image size must be less than 5MB"
        assert fake_client.calls == []

    def test_limit_is_inclusive(self, gateway, session):
        loop = PhotoLoop(gateway=gateway, max_photo_bytes=len(PNG_BYTES))

        assert loop.process_photo(session, PhotoUpload(PNG_BYTES, "image/png")).success

    def test_gateway_failure_keeps_draft(self, loop, session, fake_client):
        loop.process_photo(session, PhotoUpload(PNG_BYTES, "image/png"))
        words_before = session.state.words
        fake_client.reply = "no json here"

        result = loop.process_photo(session, PhotoUpload(PNG_BYTES, "image/png"))

        assert not result.success
        assert result.error_code == WorkflowErrorKind.GATEWAY_CALL_FAILED
        assert result.error == "Failed to extract data from image"
        assert session.state.words == words_before
        assert session.state.screen == Screen.REVIEW_EDIT
        assert session.state.photo_preview is None
        assert not session.state.is_analyzing

    def test_unsupported_image_encoding_fails_in_gateway(self, loop, session, fake_client):
        """image/gif passes the upload check but not the gateway's."""
        result = loop.process_photo(session, PhotoUpload(PNG_BYTES, "image/gif"))

        assert result.error_code == WorkflowErrorKind.GATEWAY_CALL_FAILED
        assert session.state.screen == Screen.PHOTO_UPLOAD
        assert fake_client.calls == []

    def test_photo_outside_photo_flow(self, loop):
        session = SessionManager().create_session()

        result = loop.process_photo(session, PhotoUpload(PNG_BYTES, "image/png"))

        assert result.error_code == WorkflowErrorKind.INVALID_TRANSITION
        assert session.state.screen == Screen.LANDING
