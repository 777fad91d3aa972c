"""Data access for pitch decks, analysis reports, and profiles.

Every query on a deck is scoped to its owner except the status writes
made by the pipeline after it has already checked ownership.
"""

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from src.pipeline.errors import PersistenceError
from src.utils.logger import get_logger

from .models import AnalysisReport, DeckStatus, PitchDeck, Profile

logger = get_logger(__name__)


class DeckRepository:
    """Reads and writes pitch-deck jobs and their reports.

    Args:
        session_factory: Factory producing SQLAlchemy sessions.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def create_deck(self, user_id: str, title: str, file_url: str) -> PitchDeck:
        """Insert a new ``pending`` deck."""
        deck = PitchDeck(
            user_id=user_id,
            title=title,
            file_url=file_url,
            status=DeckStatus.PENDING.value,
        )
        with self.session_factory() as session:
            session.add(deck)
            session.commit()
        logger.info("Created pitch deck %s for user %s", deck.id, user_id)
        return deck

    def get_deck(self, deck_id: str, user_id: str) -> PitchDeck | None:
        """Return the deck if it exists and belongs to ``user_id``."""
        with self.session_factory() as session:
            return session.scalar(
                select(PitchDeck).where(
                    PitchDeck.id == deck_id, PitchDeck.user_id == user_id
                )
            )

    def list_decks(self, user_id: str) -> list[PitchDeck]:
        """Return the user's decks, newest first."""
        with self.session_factory() as session:
            return list(
                session.scalars(
                    select(PitchDeck)
                    .where(PitchDeck.user_id == user_id)
                    .order_by(PitchDeck.created_at.desc())
                )
            )

    def set_status(self, deck_id: str, status: DeckStatus) -> None:
        """Overwrite a deck's status.

        Raises:
            PersistenceError: If the write fails.
        """
        try:
            with self.session_factory() as session:
                deck = session.get(PitchDeck, deck_id)
                if deck is None:
                    raise PersistenceError(f"Pitch deck {deck_id} disappeared")
                deck.status = status.value
                session.commit()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to update status: {exc}") from exc
        logger.info("Pitch deck %s is now %s", deck_id, status.value)

    def complete_deck(self, deck_id: str, content: dict[str, Any]) -> None:
        """Store the report and mark the deck completed in one transaction.

        A report left by an earlier attempt is replaced, so a deck never
        has more than one.

        Args:
            deck_id: Deck being completed.
            content: Normalized analysis payload.

        Raises:
            PersistenceError: If either write fails; neither is applied.
        """
        try:
            with self.session_factory() as session, session.begin():
                deck = session.get(PitchDeck, deck_id)
                if deck is None:
                    raise PersistenceError(f"Pitch deck {deck_id} disappeared")
                report = session.scalar(
                    select(AnalysisReport).where(
                        AnalysisReport.pitch_deck_id == deck_id
                    )
                )
                if report is None:
                    session.add(AnalysisReport(pitch_deck_id=deck_id, content=content))
                else:
                    report.content = content
                deck.status = DeckStatus.COMPLETED.value
        except SQLAlchemyError as exc:
            raise PersistenceError() from exc
        logger.info("Stored analysis report for pitch deck %s", deck_id)

    def get_report(self, deck_id: str, user_id: str) -> AnalysisReport | None:
        """Return the report of an owned deck, if one exists."""
        with self.session_factory() as session:
            return session.scalar(
                select(AnalysisReport)
                .join(PitchDeck, AnalysisReport.pitch_deck_id == PitchDeck.id)
                .where(PitchDeck.id == deck_id, PitchDeck.user_id == user_id)
            )

    def delete_deck(self, deck_id: str, user_id: str) -> PitchDeck | None:
        """Delete an owned deck and its report.

        Returns:
            The deleted deck, or ``None`` if it was not found.
        """
        with self.session_factory() as session, session.begin():
            deck = session.scalar(
                select(PitchDeck).where(
                    PitchDeck.id == deck_id, PitchDeck.user_id == user_id
                )
            )
            if deck is None:
                return None
            session.execute(
                delete(AnalysisReport).where(AnalysisReport.pitch_deck_id == deck_id)
            )
            session.execute(delete(PitchDeck).where(PitchDeck.id == deck_id))
        logger.info("Deleted pitch deck %s", deck_id)
        return deck


class ProfileRepository:
    """Reads and updates user profiles."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def get_or_create(self, user_id: str, email: str | None = None) -> Profile:
        """Return the user's profile, creating an empty one on first access."""
        with self.session_factory() as session:
            profile = session.get(Profile, user_id)
            if profile is None:
                profile = Profile(
                    id=user_id, email=email, full_name="", company="", role=""
                )
                session.add(profile)
                session.commit()
                logger.info("Created profile for user %s", user_id)
            return profile

    def update(self, user_id: str, **fields: str) -> Profile:
        """Apply ``fields`` to the user's profile and return it."""
        self.get_or_create(user_id)
        with self.session_factory() as session:
            profile = session.get(Profile, user_id)
            for name, value in fields.items():
                setattr(profile, name, value)
            session.commit()
            return profile
