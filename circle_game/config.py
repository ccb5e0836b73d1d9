"""
Configuration - Deployment settings read from the environment.

Environment variables (a local .env file is honoured):
    ANTHROPIC_API_KEY            Credential for the vision model provider
    CLOUDFLARE_ACCOUNT_ID        Account that owns the AI gateway
    CLOUDFLARE_AI_GATEWAY        Name of the AI gateway route
    CIRCLE_GAME_MODEL            Model name (default claude-haiku-4-5)
    CIRCLE_GAME_MAX_TOKENS       Reply token ceiling (default 2048)
    CIRCLE_GAME_REQUEST_TIMEOUT  Seconds before the model call is abandoned
    CIRCLE_GAME_MAX_PHOTO_BYTES  Upload ceiling for photos (default 5 MiB)
    CIRCLE_GAME_SESSION_MAX_AGE  Idle seconds before a session is dropped (default 3600)
    CIRCLE_GAME_LOG_LEVEL        Logging level (default INFO)
    ALLOWED_ORIGINS              Comma separated CORS origins (default *)

Missing credentials never stop the app from starting. The extraction
gateway checks them per request and refuses to call out without them.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import os

from dotenv import load_dotenv

DEFAULT_MODEL = "claude-haiku-4-5"
DEFAULT_MAX_TOKENS = 2048
DEFAULT_MAX_PHOTO_BYTES = 5 * 1024 * 1024
DEFAULT_SESSION_MAX_AGE = 3600
GATEWAY_URL_TEMPLATE = "https://gateway.ai.cloudflare.com/v1/{account_id}/{gateway}/anthropic"

LOG_FORMAT = "%(asctime)s %(levelname)s:%(name)s:%(message)s"


@dataclass
class Settings:
    """
    Deployment configuration for the service.

    The three provider values are required for photo extraction;
    everything else has a usable default.
    """
    api_key: str | None = None
    account_id: str | None = None
    gateway_name: str | None = None

    model: str = DEFAULT_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS
    request_timeout: float | None = None
    max_photo_bytes: int = DEFAULT_MAX_PHOTO_BYTES
    session_max_age: int = DEFAULT_SESSION_MAX_AGE

    log_level: str = "INFO"
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls, load_dotenv_file: bool = True) -> Settings:
        """Build settings from environment variables."""
        if load_dotenv_file:
            load_dotenv()

        timeout = os.getenv("CIRCLE_GAME_REQUEST_TIMEOUT")
        return cls(
            api_key=os.getenv("ANTHROPIC_API_KEY") or None,
            account_id=os.getenv("CLOUDFLARE_ACCOUNT_ID") or None,
            gateway_name=os.getenv("CLOUDFLARE_AI_GATEWAY") or None,
            model=os.getenv("CIRCLE_GAME_MODEL", DEFAULT_MODEL),
            max_tokens=int(os.getenv("CIRCLE_GAME_MAX_TOKENS", DEFAULT_MAX_TOKENS)),
            request_timeout=float(timeout) if timeout else None,
            max_photo_bytes=int(
                os.getenv("CIRCLE_GAME_MAX_PHOTO_BYTES", DEFAULT_MAX_PHOTO_BYTES)
            ),
            session_max_age=int(
                os.getenv("CIRCLE_GAME_SESSION_MAX_AGE", DEFAULT_SESSION_MAX_AGE)
            ),
            log_level=os.getenv("CIRCLE_GAME_LOG_LEVEL", "INFO"),
            allowed_origins=os.getenv("ALLOWED_ORIGINS", "*").split(","),
        )

    def provider_presence(self) -> dict[str, bool]:
        """Presence flags for the provider values. Never exposes the values."""
        return {
            "has_api_key": bool(self.api_key),
            "has_account_id": bool(self.account_id),
            "has_gateway": bool(self.gateway_name),
        }

    @property
    def provider_configured(self) -> bool:
        return all(self.provider_presence().values())

    @property
    def gateway_url(self) -> str:
        return GATEWAY_URL_TEMPLATE.format(
            account_id=self.account_id,
            gateway=self.gateway_name,
        )


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
