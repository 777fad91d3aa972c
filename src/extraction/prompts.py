"""System instruction and function schema sent to the completion service."""

from typing import Any

FUNCTION_NAME = "analyze_pitch_deck"

SYSTEM_PROMPT = """You are an expert AI system for analyzing pitch decks and providing investment analysis.
Analyze the following pitch deck content and provide a detailed, structured analysis.
Be specific, detailed, and realistic in your analysis.
If certain information is not available in the pitch deck, make reasonable assumptions based on industry standards and market conditions.
Format all numerical ratings on a scale of 1-10.
Ensure all dates are in YYYY-MM-DD format.
For market positions, use terms like "Leader", "Challenger", "Niche Player", or "Emerging".
For sentiment analysis, use "Positive", "Negative", or "Neutral"."""

REQUIRED_FIELDS: tuple[str, ...] = (
    "profile",
    "strengthsWeaknesses",
    "competitors",
    "marketComparison",
    "exitPotential",
    "expertConclusion",
    "dealStructure",
    "keyQuestions",
    "finalVerdict",
)


def _string() -> dict[str, Any]:
    return {"type": "string"}


def _number() -> dict[str, Any]:
    return {"type": "number"}


def _boolean() -> dict[str, Any]:
    return {"type": "boolean"}


def _array(items: dict[str, Any]) -> dict[str, Any]:
    return {"type": "array", "items": items}


def _object(
    properties: dict[str, Any], required: list[str] | None = None
) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def _strings(*names: str) -> dict[str, Any]:
    return {name: _string() for name in names}


def _market_metric() -> dict[str, Any]:
    return _object(_strings("startup", "competitor1", "competitor2", "competitor3"))


def _reputation_source() -> dict[str, Any]:
    return _object({"sentiment": _string(), "score": _number(), "rating": _number()})


ANALYSIS_PARAMETERS: dict[str, Any] = _object(
    {
        "profile": _object(
            {
                **_strings(
                    "companyName",
                    "industry",
                    "problemStatement",
                    "solution",
                    "marketSize",
                    "businessModel",
                    "competitiveAdvantage",
                    "teamHighlights",
                ),
                "keyOfferings": _array(_string()),
                "marketPosition": _string(),
                "financials": _object(_strings("revenue", "funding", "projections")),
            },
            required=["companyName", "industry", "businessModel", "marketPosition"],
        ),
        "strengthsWeaknesses": _object(
            {"strengths": _array(_string()), "weaknesses": _array(_string())},
            required=["strengths", "weaknesses"],
        ),
        "competitors": _array(
            _object(
                {
                    "name": _string(),
                    "keyInvestors": _array(_string()),
                    "amountRaised": _string(),
                    "marketPosition": _string(),
                }
            )
        ),
        "fundingHistory": _array(
            _object(
                {
                    "round": _string(),
                    "amount": _string(),
                    "investors": _array(_string()),
                    "status": _string(),
                }
            )
        ),
        "marketComparison": _object(
            {
                "metrics": _object(
                    {
                        "marketShare": _market_metric(),
                        "revenueModel": _market_metric(),
                        "growthRate": _market_metric(),
                        "differentiator": _market_metric(),
                    }
                )
            }
        ),
        "exitPotential": _object(
            {"likelihood": _number(), "potentialValue": _string()}
        ),
        "expertOpinions": _array(
            _object(_strings("name", "affiliation", "summary", "reference", "date"))
        ),
        "reputationAnalysis": _object(
            {
                "sources": _object(
                    {
                        "newsMedia": _reputation_source(),
                        "socialMedia": _reputation_source(),
                        "investorReviews": _reputation_source(),
                        "customerFeedback": _reputation_source(),
                    }
                ),
                "overall": _reputation_source(),
            }
        ),
        "expertConclusion": _object(
            {
                name: _number()
                for name in (
                    "productViability",
                    "marketPotential",
                    "sustainability",
                    "innovation",
                    "exitPotential",
                    "riskFactors",
                    "competitiveAdvantage",
                )
            }
        ),
        "dealStructure": _object(
            {
                **_strings(
                    "investmentAmount",
                    "equityStake",
                    "valuationCap",
                    "liquidationPreference",
                ),
                "antiDilution": _boolean(),
                "boardSeat": _boolean(),
                "vestingSchedule": _string(),
                "otherTerms": _array(_string()),
            }
        ),
        "keyQuestions": _array(_object(_strings("category", "question"))),
        "finalVerdict": _object(_strings("summary", "timeline", "potentialOutcome")),
        "confidence": _number(),
        "suggestedImprovements": _array(_string()),
        "keyInsights": _array(
            _object(
                {
                    **_strings("area", "observation", "recommendation"),
                    "priority": {"type": "string", "enum": ["high", "medium", "low"]},
                }
            )
        ),
    },
    required=list(REQUIRED_FIELDS),
)

ANALYSIS_TOOL: dict[str, Any] = {
    "type": "function",
    "function": {
        "name": FUNCTION_NAME,
        "description": "Record a structured investment analysis of a pitch deck.",
        "parameters": ANALYSIS_PARAMETERS,
    },
}
