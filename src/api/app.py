"""FastAPI application for the DeckInsight pitch-deck analysis API.

Provides endpoints to upload, list, and delete pitch decks, trigger their
analysis, read the resulting reports, and manage the caller's profile.
"""

from functools import lru_cache
from typing import Annotated, Any

from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from src.extraction.normalizer import normalize
from src.ocr.text_extractor import ExtractionStrategy
from src.pipeline.components import Components, build_components
from src.pipeline.errors import (
    InvalidRequest,
    NotFound,
    PersistenceError,
    PipelineError,
    Unauthorized,
)
from src.storage.object_store import StorageError, build_object_path
from src.utils.config import load_config
from src.utils.logger import get_logger

from .schemas import (
    AnalyzeRequest,
    AnalyzeResponse,
    DeckListResponse,
    DeckResponse,
    DeleteResponse,
    ErrorResponse,
    HealthResponse,
    ProfileResponse,
    ProfileUpdate,
    ReportResponse,
)
from .security import decode_token

logger = get_logger(__name__)

VERSION = "1.0.0"

app = FastAPI(
    title="DeckInsight API",
    description="Upload pitch decks and receive structured investment analysis",
    version=VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_ALLOWED_CONTENT_TYPES = {"application/pdf", "application/octet-stream"}

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    code: {"model": ErrorResponse} for code in (400, 401, 404, 500, 504)
}

_bearer = HTTPBearer(auto_error=False)


@lru_cache(maxsize=1)
def _get_components() -> Components:
    """Build the shared repositories, storage, and pipeline once per process."""
    return build_components(load_config())


def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer)],
) -> str:
    """Resolve the caller from the bearer token.

    Raises:
        Unauthorized: If no valid token was sent.
    """
    if credentials is None:
        raise Unauthorized()
    return decode_token(credentials.credentials, _get_components().config.auth.secret)


CurrentUser = Annotated[str, Depends(get_current_user_id)]


@app.exception_handler(PipelineError)
async def pipeline_error_handler(request: Request, exc: PipelineError) -> JSONResponse:
    """Render pipeline errors as ``{"error": message}`` with their status."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return service health and configured capabilities."""
    return HealthResponse(
        status="healthy",
        version=VERSION,
        extraction_strategies=[s.value for s in ExtractionStrategy],
        storage=_get_components().config.storage.type,
    )


def _form_flag(value: Any) -> bool | None:
    """Read a multipart boolean; an absent field means "use the default"."""
    if value is None:
        return None
    return value == "true"


async def _parse_analyze_request(request: Request) -> AnalyzeRequest:
    """Read the deck id and strategy flag from a JSON or multipart body.

    Raises:
        InvalidRequest: On an unsupported content type or a missing deck id.
    """
    content_type = request.headers.get("content-type", "")
    if "multipart/form-data" in content_type:
        form = await request.form()
        data: Any = {
            "deckId": form.get("deckId"),
            "useTextract": _form_flag(form.get("useTextract")),
        }
    elif "application/json" in content_type:
        try:
            data = await request.json()
        except ValueError as exc:
            raise InvalidRequest("Request body is not valid JSON") from exc
    else:
        raise InvalidRequest(
            "Content-Type must be either multipart/form-data or application/json"
        )

    try:
        parsed = AnalyzeRequest.model_validate(data)
    except ValidationError as exc:
        raise InvalidRequest(f"Invalid analysis request: {exc}") from exc
    if not parsed.deck_id:
        raise InvalidRequest("Deck ID is required")
    return parsed


@app.post("/analyze", response_model=AnalyzeResponse, responses=_ERROR_RESPONSES)
async def analyze_deck(request: Request, user_id: CurrentUser) -> AnalyzeResponse:
    """Run the analysis pipeline for one of the caller's pitch decks.

    Accepts ``deckId`` and ``useTextract`` as JSON or multipart form
    fields. Returns once the report is stored or the run has failed.
    """
    analyze_request = await _parse_analyze_request(request)
    components = _get_components()
    await run_in_threadpool(
        components.orchestrator.run,
        analyze_request.deck_id,
        user_id,
        analyze_request.use_textract,
    )
    return AnalyzeResponse(success=True)


@app.post(
    "/decks",
    response_model=DeckResponse,
    status_code=201,
    responses=_ERROR_RESPONSES,
)
async def upload_deck(
    file: Annotated[UploadFile, File(...)],
    user_id: CurrentUser,
) -> DeckResponse:
    """Store an uploaded PDF and create a ``pending`` pitch deck for it."""
    components = _get_components()
    filename = file.filename or "deck.pdf"

    if (file.content_type and file.content_type not in _ALLOWED_CONTENT_TYPES) or (
        not filename.lower().endswith(".pdf")
    ):
        raise InvalidRequest(f"Unsupported file type: {file.content_type}")

    content = await file.read()
    max_mb = components.config.pipeline.max_upload_mb
    if len(content) > max_mb * 1024 * 1024:
        raise InvalidRequest(f"File size must be less than {max_mb}MB")
    if not content:
        raise InvalidRequest("Uploaded file is empty")

    path = build_object_path(user_id, filename)
    try:
        await run_in_threadpool(
            components.object_store.upload, path, content, "application/pdf"
        )
    except StorageError as exc:
        logger.error("Upload of %s failed: %s", filename, exc)
        raise PipelineError("Failed to upload file") from exc

    try:
        deck = components.decks.create_deck(user_id, filename, path)
    except SQLAlchemyError as exc:
        logger.error("Could not record pitch deck %s: %s", filename, exc)
        _remove_quietly(components, path)
        raise PersistenceError("Failed to create pitch deck record") from exc

    return DeckResponse.model_validate(deck)


@app.get("/decks", response_model=DeckListResponse, responses=_ERROR_RESPONSES)
async def list_decks(user_id: CurrentUser) -> DeckListResponse:
    """List the caller's pitch decks, newest first."""
    decks = _get_components().decks.list_decks(user_id)
    return DeckListResponse(decks=[DeckResponse.model_validate(d) for d in decks])


@app.get("/decks/{deck_id}", response_model=DeckResponse, responses=_ERROR_RESPONSES)
async def get_deck(deck_id: str, user_id: CurrentUser) -> DeckResponse:
    deck = _get_components().decks.get_deck(deck_id, user_id)
    if deck is None:
        raise NotFound()
    return DeckResponse.model_validate(deck)


@app.delete(
    "/decks/{deck_id}", response_model=DeleteResponse, responses=_ERROR_RESPONSES
)
async def delete_deck(deck_id: str, user_id: CurrentUser) -> DeleteResponse:
    """Delete a pitch deck together with its stored file and report."""
    components = _get_components()
    deck = components.decks.get_deck(deck_id, user_id)
    if deck is None:
        raise NotFound()

    try:
        components.decks.delete_deck(deck_id, user_id)
    except SQLAlchemyError as exc:
        logger.error("Could not delete pitch deck %s: %s", deck_id, exc)
        raise PersistenceError("Failed to delete pitch deck") from exc

    _remove_quietly(components, deck.file_url)
    return DeleteResponse(success=True, id=deck_id)


def _remove_quietly(components: Components, path: str) -> None:
    try:
        components.object_store.remove(path)
    except StorageError as exc:
        logger.warning("Could not remove stored file %s: %s", path, exc)


@app.get(
    "/reports/{deck_id}", response_model=ReportResponse, responses=_ERROR_RESPONSES
)
async def get_report(deck_id: str, user_id: CurrentUser) -> ReportResponse:
    """Return the clamped, default-filled report of a pitch deck."""
    report = _get_components().decks.get_report(deck_id, user_id)
    if report is None:
        raise NotFound("Analysis report not found")
    return ReportResponse(
        pitch_deck_id=report.pitch_deck_id,
        content=normalize(report.content).to_content(),
        created_at=report.created_at,
    )


@app.get("/profile", response_model=ProfileResponse, responses=_ERROR_RESPONSES)
async def get_profile(user_id: CurrentUser) -> ProfileResponse:
    profile = _get_components().profiles.get_or_create(user_id)
    return ProfileResponse.model_validate(profile)


@app.put("/profile", response_model=ProfileResponse, responses=_ERROR_RESPONSES)
async def update_profile(update: ProfileUpdate, user_id: CurrentUser) -> ProfileResponse:
    """Change the caller's name, company, or role."""
    fields = update.model_dump(exclude_none=True)
    profile = _get_components().profiles.update(user_id, **fields)
    return ProfileResponse.model_validate(profile)
