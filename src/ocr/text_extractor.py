"""Strategy-selecting text extraction for uploaded decks.

Routes a document either to the local text-layer reader or to remote
OCR, and rejects results that carry no text.
"""

from enum import StrEnum

from src.pipeline.errors import NoTextFound
from src.utils.config import ExtractionConfig
from src.utils.logger import get_logger

from .pdf_text import PDFTextReader
from .textract_engine import TextractEngine

logger = get_logger(__name__)


class ExtractionStrategy(StrEnum):
    """Available text-extraction methods."""

    LOCAL = "local"
    REMOTE = "remote"

    @classmethod
    def from_flag(cls, use_remote_ocr: bool) -> "ExtractionStrategy":
        return cls.REMOTE if use_remote_ocr else cls.LOCAL

    @classmethod
    def resolve(
        cls, use_remote_ocr: bool | None, default: str = "local"
    ) -> "ExtractionStrategy":
        """Pick the strategy from an explicit flag, else from ``default``.

        Raises:
            ValueError: If ``default`` is not a known strategy.
        """
        if use_remote_ocr is None:
            return cls(default)
        return cls.from_flag(use_remote_ocr)


class TextExtractor:
    """Turns document bytes into plain text.

    Args:
        config: Extraction configuration.
        pdf_reader: Local text-layer reader. Built from config if ``None``.
        ocr_engine: Remote OCR engine. Built from config if ``None``.
    """

    def __init__(
        self,
        config: ExtractionConfig | None = None,
        pdf_reader: PDFTextReader | None = None,
        ocr_engine: TextractEngine | None = None,
    ) -> None:
        self.config = config or ExtractionConfig()
        self.pdf_reader = pdf_reader or PDFTextReader(self.config.page_separator)
        self.ocr_engine = ocr_engine or TextractEngine(
            region=self.config.textract_region,
            feature_types=self.config.textract_feature_types,
        )

    def extract(
        self,
        document_bytes: bytes,
        strategy: ExtractionStrategy = ExtractionStrategy.LOCAL,
    ) -> str:
        """Extract text with the chosen strategy.

        Args:
            document_bytes: Raw document content.
            strategy: Local text layer or remote OCR.

        Returns:
            Extracted text, guaranteed non-blank.

        Raises:
            NoTextFound: If the trimmed text is empty.
            ExtractionError: If the document cannot be read locally.
            ExtractionServiceError: If remote OCR fails.
        """
        logger.info(
            "Extracting text from %d bytes using %s strategy",
            len(document_bytes),
            strategy,
        )
        if strategy == ExtractionStrategy.REMOTE:
            text = self.ocr_engine.extract_text(document_bytes)
        else:
            text = self.pdf_reader.extract_text(document_bytes)

        if not text.strip():
            raise NoTextFound()

        logger.info("Extracted %d characters", len(text))
        return text
