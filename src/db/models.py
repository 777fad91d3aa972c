"""ORM tables for pitch decks, their analysis reports, and user profiles."""

import uuid
from datetime import datetime, timezone
from enum import StrEnum

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from .base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class DeckStatus(StrEnum):
    """Lifecycle of a pitch-deck analysis job."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class PitchDeck(Base):
    """One uploaded document and its processing status."""

    __tablename__ = "pitch_decks"

    id = Column(String, primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    file_url = Column(String, nullable=False)
    status = Column(String, nullable=False, default=DeckStatus.PENDING.value)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    report = relationship(
        "AnalysisReport",
        back_populates="pitch_deck",
        uselist=False,
        cascade="all, delete-orphan",
    )


class AnalysisReport(Base):
    """Structured analysis stored for a completed pitch deck."""

    __tablename__ = "analysis_reports"

    id = Column(String, primary_key=True, default=_new_id)
    pitch_deck_id = Column(
        String,
        ForeignKey("pitch_decks.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    content = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    pitch_deck = relationship("PitchDeck", back_populates="report")


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String, primary_key=True)
    email = Column(String, nullable=True)
    full_name = Column(String, nullable=False, default="")
    company = Column(String, nullable=False, default="")
    role = Column(String, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
