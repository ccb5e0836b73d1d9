"""
Pytest fixtures for Circle Game tests.
"""

import pytest
from types import SimpleNamespace

from fastapi.testclient import TestClient

from ..config import Settings
from ..extraction import ExtractionGateway
from ..workflow import Action, WorksheetState, apply_action
from ..api.service import APIService
from ..api.app import create_app


# 1x1 PNG header bytes; the gateway never decodes the image itself.
PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"

DEFAULT_REPLY = 'Here you go: {"title": "動物篇", "words": ["狗", "貓", "狗", "鳥"]}'


class FakeAnthropicClient:
    """Stands in for anthropic.Anthropic; records every messages.create call."""

    def __init__(self, reply=DEFAULT_REPLY):
        self.reply = reply
        self.content = None
        self.error = None
        self.usage = {"input_tokens": 1500, "output_tokens": 42}
        self.calls = []
        self.messages = SimpleNamespace(create=self._create)

    def _create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        content = self.content
        if content is None:
            content = [SimpleNamespace(type="text", text=self.reply)]
        return SimpleNamespace(content=content, usage=SimpleNamespace(**self.usage))


@pytest.fixture
def settings() -> Settings:
    """Settings with dummy provider credentials."""
    return Settings(
        api_key="test-key",
        account_id="test-account",
        gateway_name="test-gateway",
        log_level="WARNING",
    )


@pytest.fixture
def unconfigured_settings() -> Settings:
    """Settings with no provider credentials."""
    return Settings(log_level="WARNING")


@pytest.fixture
def fake_client() -> FakeAnthropicClient:
    return FakeAnthropicClient()


@pytest.fixture
def gateway(settings, fake_client) -> ExtractionGateway:
    """Gateway wired to the fake model client."""
    return ExtractionGateway(settings, client_factory=lambda s: fake_client)


@pytest.fixture
def png_data_uri() -> str:
    return "data:image/png;base64,iVBORw0KGgoAAAANSUhEUg=="


@pytest.fixture
def service(settings, gateway) -> APIService:
    """Create a fresh API service."""
    return APIService(settings=settings, gateway=gateway)


@pytest.fixture
def client(service) -> TestClient:
    """HTTP client against the app."""
    return TestClient(create_app(service=service))


@pytest.fixture
def review_state() -> WorksheetState:
    """State on the review screen with an extracted draft."""
    state = WorksheetState.initial()
    state = apply_action(state, Action.choose_mode("photo")).new_state
    state = apply_action(state, Action.begin_analysis("data:image/png;base64,AAAA")).new_state
    state = apply_action(
        state,
        Action.photo_analyzed("動物篇", ["狗", "貓", "鳥"]),
    ).new_state
    return state


@pytest.fixture
def json_upload_state() -> WorksheetState:
    """State on the JSON upload screen."""
    return apply_action(WorksheetState.initial(), Action.choose_mode("json")).new_state
