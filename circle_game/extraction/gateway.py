"""
Extraction Gateway - Worksheet photo to word list via a vision model.

The gateway:
1. Validates the image data URI
2. Checks provider configuration
3. Makes exactly one model call with the worksheet prompt
4. Parses the JSON object out of the reply
5. Returns the deduplicated word list with token usage

It is stateless. No retries, no caching of model replies: a provider
failure is surfaced to the caller, not masked.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable
import logging

import anthropic

from ..config import Settings
from .errors import ErrorKind, ExtractionError
from .image import ImagePayload, parse_data_uri
from .parsing import parse_reply
from .prompts import ExtractionPrompts

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    """
    Result of one gateway call.

    Folded into the session draft by the caller, then discarded.
    """
    title: str
    words: list[str]
    usage: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "words": list(self.words), "usage": self.usage}


def default_client_factory(settings: Settings) -> Any:
    """Anthropic client routed through the Cloudflare AI gateway."""
    kwargs: dict[str, Any] = {
        "api_key": settings.api_key,
        "base_url": settings.gateway_url,
    }
    if settings.request_timeout is not None:
        kwargs["timeout"] = settings.request_timeout
    return anthropic.Anthropic(**kwargs)


class ExtractionGateway:
    """
    Extracts a worksheet title and word list from a photo.

    Usage:
        gateway = ExtractionGateway(Settings.from_env())
        try:
            result = gateway.extract(data_uri)
        except ExtractionError as e:
            respond(e.status_code, e.message)
    """

    def __init__(
        self,
        settings: Settings,
        client_factory: Callable[[Settings], Any] | None = None,
        prompts: ExtractionPrompts | None = None,
    ):
        self.settings = settings
        self.client_factory = client_factory or default_client_factory
        self.prompts = prompts or ExtractionPrompts()

    def extract(self, image: str | None) -> ExtractionResult:
        """
        Run the full extraction for one image data URI.

        Raises:
            ExtractionError: with the kind describing the failure.
        """
        payload = parse_data_uri(image)
        self._check_configuration()

        try:
            message = self._call_model(payload)
            text = self._first_text(message)
            title, words = parse_reply(text)
        except ExtractionError as e:
            logger.warning("Extraction failed (%s): %s", e.kind.code, e.message)
            raise
        except Exception as e:
            logger.error("Error analyzing photo: %s", e, exc_info=True)
            raise ExtractionError(
                ErrorKind.INTERNAL_FAILURE,
                "Failed to analyze photo",
            ) from e

        usage = self._usage_dict(getattr(message, "usage", None))
        logger.info(
            "Extracted %d words (prompt %s, usage %s)",
            len(words), self.prompts.version, usage,
        )
        return ExtractionResult(title=title, words=words, usage=usage)

    def _check_configuration(self) -> None:
        if self.settings.provider_configured:
            return
        logger.error(
            "Missing environment variables: %s",
            self.settings.provider_presence(),
        )
        raise ExtractionError(
            ErrorKind.MISCONFIGURED,
            "Server configuration error - missing environment variables",
        )

    def _call_model(self, payload: ImagePayload) -> Any:
        client = self.client_factory(self.settings)
        logger.debug(
            "Calling %s with %s image (~%d bytes)",
            self.settings.model, payload.media_type, payload.size_bytes,
        )
        return client.messages.create(
            model=self.settings.model,
            max_tokens=self.settings.max_tokens,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image",
                            "source": {
                                "type": "base64",
                                "media_type": payload.media_type,
                                "data": payload.data,
                            },
                        },
                        {
                            "type": "text",
                            "text": self.prompts.worksheet_grid(),
                        },
                    ],
                }
            ],
        )

    def _first_text(self, message: Any) -> str:
        content = getattr(message, "content", None) or []
        first = content[0] if content else None
        if first is None or getattr(first, "type", None) != "text":
            raise ExtractionError(
                ErrorKind.UNEXPECTED_MODEL_OUTPUT,
                "Unexpected response type from AI",
            )
        return first.text

    def _usage_dict(self, usage: Any) -> dict[str, Any]:
        if usage is None:
            return {}
        if isinstance(usage, dict):
            return dict(usage)
        if hasattr(usage, "model_dump"):
            return usage.model_dump()
        return dict(vars(usage))
