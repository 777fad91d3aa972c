"""Default-filling and rating clamps for raw analysis output.

Turns whatever mapping the completion service produced into a complete
:class:`AnalysisPayload` whose ratings all sit inside the display range.
"""

from typing import Any

from pydantic import ValidationError

from src.pipeline.errors import MalformedModelOutput

from .schema import AnalysisPayload, ExpertConclusion, ReputationSource

RATING_MIN = 0.0
RATING_MAX = 10.0

EXPERT_RATING_FIELDS: tuple[str, ...] = tuple(ExpertConclusion.model_fields)


def clamp_rating(value: float) -> float:
    """Restrict ``value`` to the inclusive rating range [0, 10]."""
    return max(RATING_MIN, min(RATING_MAX, value))


def _drop_nulls(value: Any) -> Any:
    """Recursively remove ``None`` entries so they fall back to defaults."""
    if isinstance(value, dict):
        return {k: _drop_nulls(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_drop_nulls(v) for v in value if v is not None]
    return value


def _reputation_sources(payload: AnalysisPayload) -> list[ReputationSource]:
    sources = payload.reputation_analysis.sources
    return [
        sources.news_media,
        sources.social_media,
        sources.investor_reviews,
        sources.customer_feedback,
        payload.reputation_analysis.overall,
    ]


def normalize(raw: dict[str, Any] | AnalysisPayload) -> AnalysisPayload:
    """Fill missing fields with defaults and clamp every rating.

    Args:
        raw: Raw analysis mapping (camelCase keys) or an existing payload.

    Returns:
        A fresh payload with every documented field present.

    Raises:
        MalformedModelOutput: If a present value cannot be coerced to its
            field type.
    """
    if isinstance(raw, AnalysisPayload):
        raw = raw.to_content()

    try:
        payload = AnalysisPayload.model_validate(_drop_nulls(raw or {}))
    except ValidationError as exc:
        raise MalformedModelOutput(f"Analysis does not match schema: {exc}") from exc

    conclusion = payload.expert_conclusion
    for name in EXPERT_RATING_FIELDS:
        setattr(conclusion, name, clamp_rating(getattr(conclusion, name)))

    payload.exit_potential.likelihood = clamp_rating(
        payload.exit_potential.likelihood
    )
    for source in _reputation_sources(payload):
        source.score = clamp_rating(source.score)

    return payload
