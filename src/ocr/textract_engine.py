"""AWS Textract wrapper for OCR of scanned or image-only decks.

Sends the raw document to Textract's layout analysis and keeps the
line-level text blocks in the order the service returns them.
"""

from dataclasses import dataclass
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from src.pipeline.errors import ExtractionServiceError
from src.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_FEATURE_TYPES: tuple[str, ...] = ("FORMS", "TABLES", "LAYOUT")


@dataclass
class TextBlock:
    """A typed text block returned by the document-analysis service."""

    block_type: str
    text: str
    page: int = 1


class TextractEngine:
    """Remote OCR through AWS Textract ``AnalyzeDocument``.

    The boto3 client is created on first use so deployments that only
    read local text layers never need AWS credentials.

    Args:
        region: AWS region hosting Textract.
        feature_types: Analysis features requested from the service.
        client: Pre-built Textract client. Built lazily if ``None``.
    """

    def __init__(
        self,
        region: str = "us-east-1",
        feature_types: list[str] | tuple[str, ...] = DEFAULT_FEATURE_TYPES,
        client: Any | None = None,
    ) -> None:
        self.region = region
        self.feature_types = list(feature_types)
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            logger.info("Creating Textract client in %s", self.region)
            self._client = boto3.client("textract", region_name=self.region)
        return self._client

    def analyze(self, document_bytes: bytes) -> list[TextBlock]:
        """Run layout analysis and return every typed block.

        Args:
            document_bytes: Raw document content.

        Returns:
            Blocks in service order.

        Raises:
            ExtractionServiceError: On transport or service failure.
        """
        try:
            response = self.client.analyze_document(
                Document={"Bytes": document_bytes},
                FeatureTypes=self.feature_types,
            )
        except (BotoCoreError, ClientError) as exc:
            raise ExtractionServiceError(f"Textract request failed: {exc}") from exc

        blocks = [
            TextBlock(
                block_type=block.get("BlockType", ""),
                text=block.get("Text", ""),
                page=block.get("Page", 1),
            )
            for block in response.get("Blocks", [])
        ]
        logger.info(
            "Textract returned %d blocks across %d pages",
            len(blocks),
            len({b.page for b in blocks}),
        )
        return blocks

    def extract_text(self, document_bytes: bytes) -> str:
        """Join the text of ``LINE`` blocks with newlines.

        Args:
            document_bytes: Raw document content.

        Returns:
            Line text in service order, possibly empty.
        """
        lines = [
            b.text
            for b in self.analyze(document_bytes)
            if b.block_type == "LINE" and b.text
        ]
        return "\n".join(lines)
