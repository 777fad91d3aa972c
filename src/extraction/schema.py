"""Typed analysis payload produced for every analyzed pitch deck.

Field names are snake_case in Python and camelCase on the wire, which is
the shape the completion service fills and the shape stored in reports.
Every field has a default so a partially filled payload still validates
into a complete record.
"""

import math
from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

NOT_AVAILABLE = "N/A"


def _coerce_number(value: Any) -> Any:
    """Map unusable rating values, NaN and infinities included, to zero."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return 0.0
    if isinstance(value, float) and not math.isfinite(value):
        return 0.0
    return value


def _coerce_priority(value: Any) -> str:
    text = str(value).strip().lower() if value is not None else ""
    return text if text in ("high", "medium", "low") else "medium"


Score = Annotated[float, BeforeValidator(_coerce_number)]
Priority = Annotated[
    Literal["high", "medium", "low"], BeforeValidator(_coerce_priority)
]


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )


class Financials(_WireModel):
    revenue: str = ""
    funding: str = ""
    projections: str = ""


class CompanyProfile(_WireModel):
    """Who the company is and how it makes money."""

    company_name: str = ""
    industry: str = ""
    problem_statement: str = ""
    solution: str = ""
    market_size: str = ""
    business_model: str = ""
    competitive_advantage: str = ""
    team_highlights: str = ""
    key_offerings: list[str] = Field(default_factory=list)
    market_position: str = ""
    financials: Financials = Field(default_factory=Financials)


class StrengthsWeaknesses(_WireModel):
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)


class Competitor(_WireModel):
    name: str = ""
    key_investors: list[str] = Field(default_factory=list)
    amount_raised: str = ""
    market_position: str = ""
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)


class FundingRound(_WireModel):
    round: str = ""
    amount: str = ""
    investors: list[str] = Field(default_factory=list)
    status: str = ""


class MarketMetric(_WireModel):
    """One comparison row: the startup against three competitors."""

    startup: str = NOT_AVAILABLE
    competitor1: str = NOT_AVAILABLE
    competitor2: str = NOT_AVAILABLE
    competitor3: str = NOT_AVAILABLE


class MarketMetrics(_WireModel):
    market_share: MarketMetric = Field(default_factory=MarketMetric)
    revenue_model: MarketMetric = Field(default_factory=MarketMetric)
    growth_rate: MarketMetric = Field(default_factory=MarketMetric)
    differentiator: MarketMetric = Field(default_factory=MarketMetric)


class MarketComparison(_WireModel):
    metrics: MarketMetrics = Field(default_factory=MarketMetrics)


class ExitPotential(_WireModel):
    likelihood: Score = 0.0
    potential_value: str = NOT_AVAILABLE


class ExpertOpinion(_WireModel):
    name: str = ""
    affiliation: str = ""
    summary: str = ""
    reference: str = ""
    date: str = ""


class ReputationSource(_WireModel):
    sentiment: str = NOT_AVAILABLE
    score: Score = 0.0
    rating: Score = 0.0


class ReputationSources(_WireModel):
    news_media: ReputationSource = Field(default_factory=ReputationSource)
    social_media: ReputationSource = Field(default_factory=ReputationSource)
    investor_reviews: ReputationSource = Field(default_factory=ReputationSource)
    customer_feedback: ReputationSource = Field(default_factory=ReputationSource)


class ReputationAnalysis(_WireModel):
    sources: ReputationSources = Field(default_factory=ReputationSources)
    overall: ReputationSource = Field(default_factory=ReputationSource)


class ExpertConclusion(_WireModel):
    """Headline ratings on a 0-10 scale."""

    product_viability: Score = 0.0
    market_potential: Score = 0.0
    sustainability: Score = 0.0
    innovation: Score = 0.0
    exit_potential: Score = 0.0
    risk_factors: Score = 0.0
    competitive_advantage: Score = 0.0


class DealStructure(_WireModel):
    investment_amount: str = NOT_AVAILABLE
    equity_stake: str = NOT_AVAILABLE
    valuation_cap: str = NOT_AVAILABLE
    liquidation_preference: str = NOT_AVAILABLE
    anti_dilution: bool = False
    board_seat: bool = False
    vesting_schedule: str = NOT_AVAILABLE
    other_terms: list[str] = Field(default_factory=list)


class KeyQuestion(_WireModel):
    category: str = ""
    question: str = ""


class FinalVerdict(_WireModel):
    summary: str = "No verdict available"
    timeline: str = NOT_AVAILABLE
    potential_outcome: str = NOT_AVAILABLE


class KeyInsight(_WireModel):
    area: str = ""
    observation: str = ""
    recommendation: str = ""
    priority: Priority = "medium"


class AnalysisPayload(_WireModel):
    """Complete structured analysis of one pitch deck."""

    profile: CompanyProfile = Field(default_factory=CompanyProfile)
    strengths_weaknesses: StrengthsWeaknesses = Field(
        default_factory=StrengthsWeaknesses
    )
    competitors: list[Competitor] = Field(default_factory=list)
    funding_history: list[FundingRound] = Field(default_factory=list)
    market_comparison: MarketComparison = Field(default_factory=MarketComparison)
    exit_potential: ExitPotential = Field(default_factory=ExitPotential)
    expert_opinions: list[ExpertOpinion] = Field(default_factory=list)
    reputation_analysis: ReputationAnalysis = Field(
        default_factory=ReputationAnalysis
    )
    expert_conclusion: ExpertConclusion = Field(default_factory=ExpertConclusion)
    deal_structure: DealStructure = Field(default_factory=DealStructure)
    key_questions: list[KeyQuestion] = Field(default_factory=list)
    final_verdict: FinalVerdict = Field(default_factory=FinalVerdict)
    confidence: Score = 0.0
    suggested_improvements: list[str] = Field(default_factory=list)
    key_insights: list[KeyInsight] = Field(default_factory=list)

    def to_content(self) -> dict[str, Any]:
        """Dump the camelCase JSON form stored in analysis reports."""
        return self.model_dump(mode="json", by_alias=True)
