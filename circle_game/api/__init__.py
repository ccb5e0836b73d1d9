"""
API Module - Browser interface.

Exposes the worksheet flow via REST API for the single-page client.
The page:
1. Creates a session on load
2. Chooses JSON or photo input
3. Uploads a word list file or worksheet photos
4. Edits the title and words during review
5. Generates and prints the grid

All state is session-scoped. No persistent user accounts required.
"""

from .schemas import (
    # Requests
    AnalyzePhotoRequest,
    ChooseModeRequest,
    TitleRequest,
    WordRequest,
    # Responses
    AnalyzePhotoResponse,
    SessionResponse,
    EndSessionResponse,
    WordListExport,
    HealthResponse,
    ErrorResponse,
    # Shared
    ErrorCode,
    ScreenName,
    UploadModeName,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "AnalyzePhotoRequest",
    "ChooseModeRequest",
    "TitleRequest",
    "WordRequest",
    # Responses
    "AnalyzePhotoResponse",
    "SessionResponse",
    "EndSessionResponse",
    "WordListExport",
    "HealthResponse",
    "ErrorResponse",
    # Shared
    "ErrorCode",
    "ScreenName",
    "UploadModeName",
    # Service
    "APIService",
    "create_app",
]
