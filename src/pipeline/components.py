"""Builds the process-wide service objects from configuration."""

from dataclasses import dataclass

from src.db.base import build_engine, build_session_factory, init_db
from src.db.repository import DeckRepository, ProfileRepository
from src.extraction.analyzer import StructuredAnalyzer
from src.ocr.text_extractor import TextExtractor
from src.storage.object_store import ObjectStore, build_object_store
from src.utils.config import AppConfig

from .orchestrator import JobOrchestrator


@dataclass
class Components:
    """Shared collaborators used by the API and the CLI."""

    config: AppConfig
    decks: DeckRepository
    profiles: ProfileRepository
    object_store: ObjectStore
    orchestrator: JobOrchestrator


def build_components(config: AppConfig) -> Components:
    """Wire repositories, storage, and the pipeline from ``config``.

    Tables are created if missing. Remote clients are created lazily on
    first use, so building components never contacts OpenAI or AWS.
    """
    engine = build_engine(config.database)
    init_db(engine)
    session_factory = build_session_factory(engine)

    decks = DeckRepository(session_factory)
    object_store = build_object_store(config.storage)
    orchestrator = JobOrchestrator(
        repository=decks,
        object_store=object_store,
        extractor=TextExtractor(config.extraction),
        analyzer=StructuredAnalyzer(config.analyzer),
        deadline_seconds=config.pipeline.deadline_seconds,
        default_strategy=config.extraction.default_strategy,
    )
    return Components(
        config=config,
        decks=decks,
        profiles=ProfileRepository(session_factory),
        object_store=object_store,
        orchestrator=orchestrator,
    )
