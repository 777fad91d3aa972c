"""Tests for default-filling and rating clamps of analysis output."""

import json
from typing import Any

import pytest

from src.extraction.normalizer import (
    EXPERT_RATING_FIELDS,
    RATING_MAX,
    RATING_MIN,
    clamp_rating,
    normalize,
)
from src.extraction.schema import NOT_AVAILABLE, AnalysisPayload
from src.pipeline.errors import MalformedModelOutput


class TestClampRating:
    """Tests for the clamp_rating helper."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(-5, 0.0), (15, 10.0), (7, 7.0), (0, 0.0), (10, 10.0), (3.5, 3.5)],
    )
    def test_clamps_into_range(self, value: float, expected: float) -> None:
        assert clamp_rating(value) == expected

    def test_range_bounds(self) -> None:
        assert RATING_MIN == 0.0
        assert RATING_MAX == 10.0


class TestNormalizeDefaults:
    """Tests for default values on missing fields."""

    def test_empty_mapping_yields_complete_payload(self) -> None:
        payload = normalize({})
        assert payload.profile.company_name == ""
        assert payload.competitors == []
        assert payload.funding_history == []
        assert payload.key_insights == []
        assert payload.confidence == 0.0
        assert payload.final_verdict.summary == "No verdict available"
        assert payload.final_verdict.timeline == NOT_AVAILABLE

    def test_reputation_defaults(self) -> None:
        payload = normalize({})
        overall = payload.reputation_analysis.overall
        assert overall.sentiment == NOT_AVAILABLE
        assert overall.score == 0.0
        assert payload.reputation_analysis.sources.news_media.sentiment == "N/A"

    def test_market_comparison_defaults(self) -> None:
        metrics = normalize({}).market_comparison.metrics
        assert metrics.growth_rate.startup == NOT_AVAILABLE
        assert metrics.differentiator.competitor3 == NOT_AVAILABLE

    def test_deal_structure_defaults(self) -> None:
        deal = normalize({}).deal_structure
        assert deal.valuation_cap == NOT_AVAILABLE
        assert deal.anti_dilution is False
        assert deal.board_seat is False
        assert deal.other_terms == []

    def test_exit_potential_defaults(self) -> None:
        exit_potential = normalize({}).exit_potential
        assert exit_potential.likelihood == 0.0
        assert exit_potential.potential_value == NOT_AVAILABLE

    def test_nulls_fall_back_to_defaults(self) -> None:
        payload = normalize(
            {
                "profile": None,
                "exitPotential": {"likelihood": None, "potentialValue": None},
                "competitors": [None, {"name": "RoboCo"}],
            }
        )
        assert payload.profile.industry == ""
        assert payload.exit_potential.likelihood == 0.0
        assert payload.exit_potential.potential_value == NOT_AVAILABLE
        assert [c.name for c in payload.competitors] == ["RoboCo"]

    def test_none_input_treated_as_empty(self) -> None:
        assert normalize(None) == normalize({})  # type: ignore[arg-type]

    def test_unknown_fields_ignored(self) -> None:
        payload = normalize({"somethingElse": 1})
        assert "somethingElse" not in payload.to_content()


class TestNormalizeClamps:
    """Tests for rating clamps."""

    def test_expert_conclusion_clamped(self, raw_analysis: dict[str, Any]) -> None:
        conclusion = normalize(raw_analysis).expert_conclusion
        assert conclusion.market_potential == 10.0
        assert conclusion.risk_factors == 0.0
        assert conclusion.product_viability == 8.0
        for name in EXPERT_RATING_FIELDS:
            assert 0.0 <= getattr(conclusion, name) <= 10.0

    def test_exit_likelihood_clamped(self, raw_analysis: dict[str, Any]) -> None:
        assert normalize(raw_analysis).exit_potential.likelihood == 10.0

    def test_reputation_scores_clamped(self, raw_analysis: dict[str, Any]) -> None:
        reputation = normalize(raw_analysis).reputation_analysis
        assert reputation.sources.news_media.score == 8.0
        assert reputation.sources.social_media.score == 0.0
        assert reputation.overall.score == 10.0

    def test_numeric_strings_coerced(self) -> None:
        payload = normalize({"expertConclusion": {"innovation": "7", "sustainability": "12"}})
        assert payload.expert_conclusion.innovation == 7.0
        assert payload.expert_conclusion.sustainability == 10.0

    def test_non_numeric_rating_becomes_zero(self) -> None:
        payload = normalize({"expertConclusion": {"innovation": "excellent"}})
        assert payload.expert_conclusion.innovation == 0.0

    def test_non_finite_ratings_become_zero(self) -> None:
        raw = json.loads(
            '{"expertConclusion": {"innovation": NaN, "sustainability": Infinity},'
            ' "exitPotential": {"likelihood": -Infinity},'
            ' "confidence": NaN,'
            ' "reputationAnalysis": {"overall": {"score": "nan", "rating": "inf"}}}'
        )
        payload = normalize(raw)

        assert payload.expert_conclusion.innovation == 0.0
        assert payload.expert_conclusion.sustainability == 0.0
        assert payload.exit_potential.likelihood == 0.0
        assert payload.confidence == 0.0
        assert payload.reputation_analysis.overall.score == 0.0
        assert payload.reputation_analysis.overall.rating == 0.0

        content = payload.to_content()
        assert content["confidence"] == 0.0
        json.dumps(content, allow_nan=False)

    def test_in_range_values_kept(self, raw_analysis: dict[str, Any]) -> None:
        payload = normalize(raw_analysis)
        assert payload.confidence == 7.5
        assert payload.profile.company_name == "Acme Robotics"
        assert payload.deal_structure.anti_dilution is True


class TestNormalizeBehaviour:
    """Tests for idempotence, input types, and failures."""

    def test_idempotent(self, raw_analysis: dict[str, Any]) -> None:
        once = normalize(raw_analysis)
        twice = normalize(once.to_content())
        assert once == twice

    def test_accepts_payload_instance(self, raw_analysis: dict[str, Any]) -> None:
        payload = normalize(raw_analysis)
        again = normalize(payload)
        assert isinstance(again, AnalysisPayload)
        assert again is not payload
        assert again == payload

    def test_does_not_mutate_input(self, raw_analysis: dict[str, Any]) -> None:
        normalize(raw_analysis)
        assert raw_analysis["expertConclusion"]["marketPotential"] == 11

    def test_priority_normalized(self) -> None:
        payload = normalize(
            {
                "keyInsights": [
                    {"area": "a", "priority": "High"},
                    {"area": "b", "priority": "urgent"},
                ]
            }
        )
        assert [i.priority for i in payload.key_insights] == ["high", "medium"]

    def test_irreconcilable_type_raises(self) -> None:
        with pytest.raises(MalformedModelOutput):
            normalize({"competitors": "RoboCo and friends"})

    def test_content_uses_camel_case(self, raw_analysis: dict[str, Any]) -> None:
        content = normalize(raw_analysis).to_content()
        assert "expertConclusion" in content
        assert "productViability" in content["expertConclusion"]
        assert "companyName" in content["profile"]
        assert "expert_conclusion" not in content
