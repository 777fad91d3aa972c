"""Structured pitch-deck analysis through an OpenAI chat completion.

The model is forced to call a single function whose parameters are the
analysis schema, so its arguments arrive as one JSON object.
"""

import json
from typing import Any

from openai import OpenAI, OpenAIError

from src.pipeline.errors import AnalysisServiceError, MalformedModelOutput
from src.utils.config import AnalyzerConfig
from src.utils.logger import get_logger

from .prompts import ANALYSIS_TOOL, FUNCTION_NAME, REQUIRED_FIELDS, SYSTEM_PROMPT

logger = get_logger(__name__)


class StructuredAnalyzer:
    """Sends extracted deck text to the completion service.

    Args:
        config: Model and sampling settings.
        client: Pre-built OpenAI client. Created on first use if ``None``,
            reading credentials from the standard environment variables.
    """

    def __init__(
        self, config: AnalyzerConfig | None = None, client: OpenAI | None = None
    ) -> None:
        self.config = config or AnalyzerConfig()
        self._client = client

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI()
        return self._client

    def analyze(self, text: str, timeout: float | None = None) -> dict[str, Any]:
        """Request a structured analysis of ``text``.

        Args:
            text: Extracted pitch-deck text.
            timeout: Seconds allowed for the request. Client default if ``None``.

        Returns:
            The raw analysis mapping with camelCase keys. Optional fields
            may be missing; see :func:`src.extraction.normalizer.normalize`.

        Raises:
            AnalysisServiceError: If the request fails.
            MalformedModelOutput: If the response does not fit the schema.
        """
        request: dict[str, Any] = {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": text},
            ],
            "tools": [ANALYSIS_TOOL],
            "tool_choice": {"type": "function", "function": {"name": FUNCTION_NAME}},
            "temperature": self.config.temperature,
        }
        if self.config.max_tokens:
            request["max_tokens"] = self.config.max_tokens
        if timeout is not None:
            request["timeout"] = timeout

        logger.info(
            "Requesting analysis from %s for %d characters",
            self.config.model,
            len(text),
        )
        try:
            completion = self.client.chat.completions.create(**request)
        except OpenAIError as exc:
            raise AnalysisServiceError(f"Completion request failed: {exc}") from exc

        return self._parse_arguments(completion)

    def _parse_arguments(self, completion: Any) -> dict[str, Any]:
        """Decode the forced function call into a mapping.

        Args:
            completion: Chat completion response.

        Returns:
            Parsed function arguments.

        Raises:
            MalformedModelOutput: On a missing call, bad JSON, or missing
                required top-level fields.
        """
        if not completion.choices:
            raise MalformedModelOutput("Completion returned no choices")

        tool_calls = completion.choices[0].message.tool_calls or []
        call = next(
            (c for c in tool_calls if c.function.name == FUNCTION_NAME),
            None,
        )
        if call is None:
            raise MalformedModelOutput("Model did not return an analysis")

        try:
            data = json.loads(call.function.arguments or "")
        except json.JSONDecodeError as exc:
            raise MalformedModelOutput(f"Analysis is not valid JSON: {exc}") from exc

        if not isinstance(data, dict):
            raise MalformedModelOutput("Analysis is not a JSON object")

        missing = [name for name in REQUIRED_FIELDS if name not in data]
        if missing:
            raise MalformedModelOutput(
                f"Analysis is missing required fields: {', '.join(missing)}"
            )

        logger.debug("Parsed analysis with %d top-level fields", len(data))
        return data
