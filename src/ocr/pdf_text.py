"""Local text-layer extraction for PDF documents.

Reads the embedded text runs of a PDF page by page. Fast, but only
useful for decks exported with a text layer; scanned decks need the
remote OCR strategy.
"""

import io
from dataclasses import dataclass

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from src.pipeline.errors import ExtractionError
from src.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class PageText:
    """Text recovered from a single PDF page."""

    page_number: int
    text: str


class PDFTextReader:
    """Extracts embedded text from PDF bytes.

    Args:
        page_separator: String placed between consecutive pages.
    """

    def __init__(self, page_separator: str = "\n\n") -> None:
        self.page_separator = page_separator

    def read_pages(self, pdf_bytes: bytes) -> list[PageText]:
        """Read every page's text in document order.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            One entry per page. Pages without a text layer yield ``""``.

        Raises:
            ExtractionError: If the bytes are not a readable PDF.
        """
        try:
            reader = PdfReader(io.BytesIO(pdf_bytes))
            pages = [
                PageText(page_number=i + 1, text=page.extract_text() or "")
                for i, page in enumerate(reader.pages)
            ]
        except (PyPdfError, ValueError, OSError) as exc:
            raise ExtractionError(f"Failed to read PDF: {exc}") from exc

        logger.info("Read text layer from %d PDF pages", len(pages))
        return pages

    def extract_text(self, pdf_bytes: bytes) -> str:
        """Concatenate the text of all pages with the page separator.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            Combined document text, possibly empty.
        """
        pages = self.read_pages(pdf_bytes)
        return self.page_separator.join(p.text for p in pages)
