"""
FastAPI Application - REST API for the worksheet page.

Endpoints:
    POST   /api/analyze-photo                   Extract words from a data URI image
    POST   /api/sessions                        Create worksheet session
    GET    /api/sessions/{id}                   Get session state
    DELETE /api/sessions/{id}                   End session
    POST   /api/sessions/{id}/mode              Choose json or photo input
    POST   /api/sessions/{id}/back              Back to landing (clears draft)
    POST   /api/sessions/{id}/json              Upload JSON word list
    POST   /api/sessions/{id}/photo             Upload worksheet photo
    PUT    /api/sessions/{id}/title             Edit title
    POST   /api/sessions/{id}/words             Append blank word
    PUT    /api/sessions/{id}/words/{index}     Edit word
    DELETE /api/sessions/{id}/words/{index}     Remove word
    POST   /api/sessions/{id}/cancel            Leave review, back to photo upload
    POST   /api/sessions/{id}/edit              Reopen the grid's words for editing
    POST   /api/sessions/{id}/grid              Generate grid
    GET    /api/sessions/{id}/grid              Printable grid page
    GET    /api/sessions/{id}/export            Draft as importable JSON
    POST   /api/sessions/{id}/reset             Back to start (hard reset)

All JSON responses have explicit Pydantic schemas.
Uploads are multipart/form-data.
"""

from typing import Annotated, Union
import logging

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from starlette.concurrency import run_in_threadpool

from .. import __version__
from ..config import Settings, configure_logging
from .service import APIService
from .schemas import (
    AnalyzePhotoRequest,
    AnalyzePhotoResponse,
    ChooseModeRequest,
    EndSessionResponse,
    ErrorCode,
    ErrorResponse,
    HealthResponse,
    SessionResponse,
    TitleRequest,
    WordListExport,
    WordRequest,
)

logger = logging.getLogger(__name__)

ANALYZE_PHOTO_PATH = "/api/analyze-photo"


def create_app(service: APIService | None = None, settings: Settings | None = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)
        settings: Optional settings (read from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    if service is not None:
        settings = service.settings
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)
    api_service = service or APIService(settings=settings)

    app = FastAPI(
        title="Circle Game API",
        description="""
Printable word grids for the circle game, from worksheet photos or JSON word lists.

## Photo Flow

1. `POST /api/sessions/{id}/mode` with `{"mode": "photo"}`
2. `POST /api/sessions/{id}/photo` - the first photo **replaces** the draft
3. Review: edit title/words, or add more photos (these are **merged**)
4. `POST /api/sessions/{id}/grid` then print `GET /api/sessions/{id}/grid`

## JSON Flow

`POST /api/sessions/{id}/json` with `["詞語1", "詞語2"]` or
`{"title": "動物篇", "words": ["詞語1", "詞語2"]}` goes straight to the grid.
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: dict | None = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def respond(response):
        """Pass successful models through; turn ErrorResponse into JSON errors."""
        if isinstance(response, ErrorResponse):
            return make_error_response(
                response.error_code,
                response.error,
                status_code=response.status_code,
                details=response.details,
            )
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        if request.url.path == ANALYZE_PHOTO_PATH:
            # A present but non-string image is malformed, not missing.
            if any(tuple(e.get("loc", ())) == ("body", "image") for e in exc.errors()):
                return make_error_response(
                    ErrorCode.INVALID_FORMAT,
                    "Invalid image format. Must be base64 encoded image.",
                )
            return make_error_response(ErrorCode.MISSING_INPUT, "No image provided")
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Invalid request",
            details={"errors": [str(e.get("msg")) for e in exc.errors()]},
        )

    # =========================================================================
    # Extraction Endpoint
    # =========================================================================

    @app.post(
        ANALYZE_PHOTO_PATH,
        response_model=AnalyzePhotoResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Missing or malformed image"},
            500: {"model": ErrorResponse, "description": "Configuration or model problem"},
        },
        tags=["Extraction"],
        summary="Extract title and words from a worksheet photo",
    )
    def analyze_photo(body: AnalyzePhotoRequest) -> Union[AnalyzePhotoResponse, JSONResponse]:
        """
        Send one base64 image to the vision model and return its word list.

        Words are deduplicated, keeping first-occurrence order.
        """
        return respond(api_service.analyze_photo(body.image))

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/sessions",
        response_model=SessionResponse,
        tags=["Sessions"],
        summary="Create a new worksheet session",
    )
    async def create_session() -> SessionResponse:
        return api_service.create_session()

    @app.get(
        "/api/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session state",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        return respond(api_service.get_session(session_id))

    @app.delete(
        "/api/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a worksheet session",
    )
    async def end_session(session_id: str) -> EndSessionResponse:
        success = api_service.end_session(session_id)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Navigation
    # =========================================================================

    @app.post(
        "/api/sessions/{session_id}/mode",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Workflow"],
        summary="Choose JSON or photo input",
    )
    async def choose_mode(
        session_id: str,
        body: ChooseModeRequest,
    ) -> Union[SessionResponse, JSONResponse]:
        return respond(api_service.choose_mode(session_id, body.mode.value))

    @app.post(
        "/api/sessions/{session_id}/back",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Workflow"],
        summary="Return to the landing screen",
    )
    async def back(session_id: str) -> Union[SessionResponse, JSONResponse]:
        return respond(api_service.back(session_id))

    @app.post(
        "/api/sessions/{session_id}/cancel",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Workflow"],
        summary="Leave review and go back to photo upload",
    )
    async def cancel_edit(session_id: str) -> Union[SessionResponse, JSONResponse]:
        return respond(api_service.cancel_edit(session_id))

    @app.post(
        "/api/sessions/{session_id}/edit",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Workflow"],
        summary="Reopen the grid's word list for editing",
    )
    async def edit_words(session_id: str) -> Union[SessionResponse, JSONResponse]:
        return respond(api_service.edit_words(session_id))

    @app.post(
        "/api/sessions/{session_id}/reset",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Workflow"],
        summary="Back to start; clears all session state",
    )
    async def reset(session_id: str) -> Union[SessionResponse, JSONResponse]:
        return respond(api_service.reset(session_id))

    # =========================================================================
    # Input
    # =========================================================================

    @app.post(
        "/api/sessions/{session_id}/json",
        response_model=SessionResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Not JSON, or wrong shape"},
            404: {"model": ErrorResponse},
            409: {"model": ErrorResponse},
        },
        tags=["Workflow"],
        summary="Import a JSON word list",
    )
    async def import_json(
        session_id: str,
        file: Annotated[UploadFile, File(description="JSON word list")],
    ) -> Union[SessionResponse, JSONResponse]:
        """
        **Accepted formats:**
        ```json
        ["詞語1", "詞語2"]
        ```
        ```json
        {"title": "動物篇", "words": ["詞語1", "詞語2"]}
        ```
        """
        content = await file.read()
        return respond(api_service.import_json(session_id, content))

    @app.post(
        "/api/sessions/{session_id}/photo",
        response_model=SessionResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Not an image"},
            404: {"model": ErrorResponse},
            409: {"model": ErrorResponse},
            413: {"model": ErrorResponse, "description": "Image over the size limit"},
            502: {"model": ErrorResponse, "description": "Photo analysis failed"},
        },
        tags=["Workflow"],
        summary="Upload a worksheet photo",
    )
    async def upload_photo(
        session_id: str,
        photo: Annotated[UploadFile, File(description="Photo of the worksheet")],
    ) -> Union[SessionResponse, JSONResponse]:
        """
        Analyze a worksheet photo.

        From the photo upload screen the result replaces the draft and the
        session moves to review. From the review screen the new words are
        merged into the existing list.
        """
        image_data = await photo.read()
        response = await run_in_threadpool(
            api_service.upload_photo,
            session_id,
            image_data,
            photo.content_type,
        )
        return respond(response)

    # =========================================================================
    # Editing
    # =========================================================================

    @app.put(
        "/api/sessions/{session_id}/title",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Editing"],
        summary="Edit the worksheet title",
    )
    async def edit_title(session_id: str, body: TitleRequest) -> Union[SessionResponse, JSONResponse]:
        return respond(api_service.edit_title(session_id, body.title))

    @app.post(
        "/api/sessions/{session_id}/words",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Editing"],
        summary="Append a blank word",
    )
    async def add_word(session_id: str) -> Union[SessionResponse, JSONResponse]:
        return respond(api_service.add_word(session_id))

    @app.put(
        "/api/sessions/{session_id}/words/{index}",
        response_model=SessionResponse,
        responses={
            400: {"model": ErrorResponse, "description": "No word at index"},
            404: {"model": ErrorResponse},
            409: {"model": ErrorResponse},
        },
        tags=["Editing"],
        summary="Edit a word",
    )
    async def edit_word(
        session_id: str,
        index: int,
        body: WordRequest,
    ) -> Union[SessionResponse, JSONResponse]:
        return respond(api_service.edit_word(session_id, index, body.value))

    @app.delete(
        "/api/sessions/{session_id}/words/{index}",
        response_model=SessionResponse,
        responses={
            400: {"model": ErrorResponse, "description": "No word at index"},
            404: {"model": ErrorResponse},
            409: {"model": ErrorResponse},
        },
        tags=["Editing"],
        summary="Remove a word; later words shift down",
    )
    async def remove_word(session_id: str, index: int) -> Union[SessionResponse, JSONResponse]:
        return respond(api_service.remove_word(session_id, index))

    # =========================================================================
    # Output
    # =========================================================================

    @app.post(
        "/api/sessions/{session_id}/grid",
        response_model=SessionResponse,
        responses={
            400: {"model": ErrorResponse, "description": "No words to print"},
            404: {"model": ErrorResponse},
            409: {"model": ErrorResponse},
        },
        tags=["Output"],
        summary="Generate the grid",
    )
    async def generate_grid(session_id: str) -> Union[SessionResponse, JSONResponse]:
        return respond(api_service.generate_grid(session_id))

    @app.get(
        "/api/sessions/{session_id}/grid",
        response_class=HTMLResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Output"],
        summary="Printable grid page",
    )
    async def grid_page(session_id: str):
        page = api_service.render_grid(
            session_id,
            reset_url=f"/api/sessions/{session_id}/reset",
        )
        if isinstance(page, ErrorResponse):
            return respond(page)
        return HTMLResponse(page)

    @app.get(
        "/api/sessions/{session_id}/export",
        response_model=WordListExport,
        responses={404: {"model": ErrorResponse}},
        tags=["Output"],
        summary="Export the draft as an importable JSON word list",
    )
    async def export_words(session_id: str) -> Union[WordListExport, JSONResponse]:
        return respond(api_service.export_words(session_id))

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="circle-game",
            version=__version__,
            provider_configured=api_service.settings.provider_configured,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Circle Game API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app
