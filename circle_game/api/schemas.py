"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between the browser page and the
service. Error bodies always carry a human-readable `error` and a
machine-readable `error_code`.

Error Codes (extraction gateway):
- MISSING_INPUT: No image in the request
- INVALID_FORMAT: Image is not a base64 jpeg/png/webp data URI
- MISCONFIGURED: Provider credentials are missing on the server
- UNEXPECTED_MODEL_OUTPUT: Model reply did not start with text
- EXTRACTION_FAILED: No JSON object could be read from the reply
- INVALID_MODEL_RESPONSE: JSON object had the wrong shape
- INTERNAL_FAILURE: Anything else that went wrong during the call

Error Codes (worksheet sessions):
- FILE_TYPE_REJECTED, FILE_TOO_LARGE: Photo refused before upload
- JSON_PARSE_FAILED, JSON_SHAPE_INVALID: Word list file refused
- GATEWAY_CALL_FAILED: Photo analysis failed; draft unchanged
- EMPTY_WORD_LIST_ON_GENERATE: Grid requested with no words
- WORD_INDEX_OUT_OF_RANGE: Edit/remove of a missing position
- INVALID_TRANSITION: Action not available on the current screen
- SESSION_NOT_FOUND: Session does not exist or has expired
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    MISSING_INPUT = "MISSING_INPUT"
    INVALID_FORMAT = "INVALID_FORMAT"
    MISCONFIGURED = "MISCONFIGURED"
    UNEXPECTED_MODEL_OUTPUT = "UNEXPECTED_MODEL_OUTPUT"
    EXTRACTION_FAILED = "EXTRACTION_FAILED"
    INVALID_MODEL_RESPONSE = "INVALID_MODEL_RESPONSE"
    INTERNAL_FAILURE = "INTERNAL_FAILURE"

    FILE_TYPE_REJECTED = "FILE_TYPE_REJECTED"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    JSON_PARSE_FAILED = "JSON_PARSE_FAILED"
    JSON_SHAPE_INVALID = "JSON_SHAPE_INVALID"
    GATEWAY_CALL_FAILED = "GATEWAY_CALL_FAILED"
    EMPTY_WORD_LIST_ON_GENERATE = "EMPTY_WORD_LIST_ON_GENERATE"
    WORD_INDEX_OUT_OF_RANGE = "WORD_INDEX_OUT_OF_RANGE"
    INVALID_TRANSITION = "INVALID_TRANSITION"

    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"


class ScreenName(str, Enum):
    """Screens of the worksheet flow."""
    LANDING = "landing"
    JSON_UPLOAD = "json_upload"
    PHOTO_UPLOAD = "photo_upload"
    REVIEW_EDIT = "review_edit"
    GRID = "grid"


class UploadModeName(str, Enum):
    """Ways of supplying a word list."""
    JSON = "json"
    PHOTO = "photo"


# =============================================================================
# Request Models
# =============================================================================

class AnalyzePhotoRequest(BaseModel):
    """Request to extract words from a worksheet photo."""
    image: Optional[str] = Field(
        None,
        description="Data URI: data:image/{jpeg|jpg|png|webp};base64,<payload>",
    )


class ChooseModeRequest(BaseModel):
    """Pick the input path from the landing screen."""
    mode: UploadModeName


class TitleRequest(BaseModel):
    title: str = Field("", description="Worksheet title; empty hides the heading")


class WordRequest(BaseModel):
    value: str = Field("", description="New text for the word")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    status_code: int = Field(400, exclude=True)


class AnalyzePhotoResponse(BaseModel):
    """Words extracted from a worksheet photo."""
    title: str
    words: list[str] = Field(default_factory=list, description="Deduplicated, in reading order")
    usage: dict[str, Any] = Field(default_factory=dict, description="Model token accounting")


class SessionResponse(BaseModel):
    """Current state of a worksheet session."""
    session_id: str
    screen: ScreenName
    mode: Optional[UploadModeName] = None
    title: str = ""
    words: list[str] = Field(default_factory=list)
    word_count: int = 0
    is_analyzing: bool = False
    photo_preview: Optional[str] = Field(None, description="Data URI of the photo being analyzed")
    show_edit_words: bool = False
    show_grid: bool = False
    allowed_actions: list[str] = Field(default_factory=list)
    changes: list[str] = Field(default_factory=list, description="What the last action changed")
    created_at: float = 0.0


class WordListExport(BaseModel):
    """Draft in the JSON import format."""
    title: str = ""
    words: list[str] = Field(default_factory=list)


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
    provider_configured: bool
