"""Pitch-deck analysis pipeline.

Drives one job through download, text extraction, analysis, normalization,
and persistence, keeping the job's status consistent with the outcome:

    pending -> processing -> completed
                          -> failed

Every failure after the job enters ``processing`` is followed by a
best-effort ``failed`` write before the error reaches the caller.
"""

import time
from collections.abc import Callable

from src.db.models import DeckStatus
from src.db.repository import DeckRepository
from src.extraction.analyzer import StructuredAnalyzer
from src.extraction.normalizer import normalize
from src.ocr.text_extractor import ExtractionStrategy, TextExtractor
from src.storage.object_store import ObjectStore, StorageError
from src.utils.logger import get_logger

from .deadline import Deadline
from .errors import (
    DownloadError,
    InvalidRequest,
    NotFound,
    PersistenceError,
    PipelineError,
    Timeout,
)

logger = get_logger(__name__)

RETRIGGERABLE_STATUSES = frozenset(
    {DeckStatus.PENDING, DeckStatus.PROCESSING, DeckStatus.FAILED}
)


class JobOrchestrator:
    """Runs the analysis pipeline for one pitch deck at a time.

    Args:
        repository: Deck and report persistence.
        object_store: Source of the uploaded documents.
        extractor: Text extraction with local and remote strategies.
        analyzer: Structured analysis through the completion service.
        deadline_seconds: Wall-clock budget for one run.
        default_strategy: Extraction used when a run gives no OCR flag.
        clock: Monotonic clock, injectable for tests.
    """

    def __init__(
        self,
        repository: DeckRepository,
        object_store: ObjectStore,
        extractor: TextExtractor,
        analyzer: StructuredAnalyzer,
        deadline_seconds: float = 58.0,
        default_strategy: str = ExtractionStrategy.LOCAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.repository = repository
        self.object_store = object_store
        self.extractor = extractor
        self.analyzer = analyzer
        self.deadline_seconds = deadline_seconds
        self.default_strategy = ExtractionStrategy(default_strategy)
        self.clock = clock

    def run(
        self, deck_id: str, user_id: str, use_remote_ocr: bool | None = None
    ) -> None:
        """Analyze a deck and store its report.

        Args:
            deck_id: Job to process.
            user_id: Caller; must own the deck.
            use_remote_ocr: Use remote OCR instead of the local text layer.
                ``None`` falls back to the configured default strategy.

        Raises:
            NotFound: If the deck is missing or owned by someone else.
            InvalidRequest: If the deck is already completed.
            PipelineError: Any stage failure, after the deck is marked failed.
        """
        deadline = Deadline(self.deadline_seconds, self.clock)
        strategy = ExtractionStrategy.resolve(use_remote_ocr, self.default_strategy)

        deck = self.repository.get_deck(deck_id, user_id)
        if deck is None:
            raise NotFound()
        if DeckStatus(deck.status) not in RETRIGGERABLE_STATUSES:
            raise InvalidRequest(f"Pitch deck {deck_id} is already {deck.status}")

        self.repository.set_status(deck_id, DeckStatus.PROCESSING)
        logger.info(
            "Analyzing pitch deck %s with %s extraction", deck_id, strategy.value
        )

        try:
            self._process(deck_id, deck.file_url, strategy, deadline)
        except PipelineError as exc:
            failure = self._deadline_failure(exc, deadline)
            self._mark_failed(deck_id, failure)
            if failure is exc:
                raise
            raise failure from exc
        except Exception as exc:
            logger.exception("Unexpected failure for pitch deck %s", deck_id)
            failure = self._deadline_failure(PipelineError(str(exc)), deadline)
            self._mark_failed(deck_id, failure)
            raise failure from exc

        logger.info("Pitch deck %s completed", deck_id)

    def _process(
        self,
        deck_id: str,
        file_url: str,
        strategy: ExtractionStrategy,
        deadline: Deadline,
    ) -> None:
        deadline.check("download")
        try:
            document = self.object_store.download(file_url)
        except StorageError as exc:
            raise DownloadError() from exc

        deadline.check("text extraction")
        text = self.extractor.extract(document, strategy)

        deadline.check("analysis")
        raw = self.analyzer.analyze(text, timeout=deadline.remaining())
        payload = normalize(raw)

        deadline.check("saving the report")
        self.repository.complete_deck(deck_id, payload.to_content())

    def _deadline_failure(self, exc: PipelineError, deadline: Deadline) -> PipelineError:
        """Report any failure after the deadline as a timeout."""
        if isinstance(exc, Timeout) or not deadline.expired:
            return exc
        return Timeout()

    def _mark_failed(self, deck_id: str, error: PipelineError) -> None:
        logger.error("Pitch deck %s failed: %s", deck_id, error.message)
        try:
            self.repository.set_status(deck_id, DeckStatus.FAILED)
        except PersistenceError as exc:
            logger.error(
                "Could not mark pitch deck %s failed, it may stay processing: %s",
                deck_id,
                exc,
            )
