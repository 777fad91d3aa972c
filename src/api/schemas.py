"""Pydantic request/response schemas for the FastAPI endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AnalyzeRequest(BaseModel):
    """Body of an analysis trigger, as JSON or multipart form fields."""

    model_config = ConfigDict(populate_by_name=True)

    deck_id: str | None = Field(default=None, alias="deckId")
    use_textract: bool | None = Field(default=None, alias="useTextract")


class AnalyzeResponse(BaseModel):
    success: bool


class ErrorResponse(BaseModel):
    """Body returned for every pipeline or request error."""

    error: str


class DeckResponse(BaseModel):
    """Response schema for a single pitch deck."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    file_url: str
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DeckListResponse(BaseModel):
    decks: list[DeckResponse]


class DeleteResponse(BaseModel):
    success: bool
    id: str


class ReportResponse(BaseModel):
    """Normalized analysis report of a completed pitch deck."""

    pitch_deck_id: str
    content: dict[str, Any]
    created_at: datetime | None = None


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str | None = None
    full_name: str
    company: str
    role: str


class ProfileUpdate(BaseModel):
    """Fields a user may change on their profile. Omitted fields are kept."""

    full_name: str | None = None
    company: str | None = None
    role: str | None = None


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    extraction_strategies: list[str]
    storage: str
