"""Shared test fixtures for the DeckInsight test suite."""

import io
from pathlib import Path
from typing import Any

import pytest
from pypdf import PdfWriter
from sqlalchemy.orm import Session, sessionmaker

from src.db.base import build_engine, build_session_factory, init_db
from src.db.repository import DeckRepository, ProfileRepository
from src.ocr.text_extractor import ExtractionStrategy
from src.storage.object_store import LocalObjectStore
from src.utils.config import DatabaseConfig


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class FakeExtractor:
    """Text extractor returning canned text or raising a canned error."""

    def __init__(self, text: str = "Acme pitch deck", error: Exception | None = None):
        self.text = text
        self.error = error
        self.calls: list[tuple[bytes, ExtractionStrategy]] = []

    def extract(self, document_bytes: bytes, strategy: ExtractionStrategy) -> str:
        self.calls.append((document_bytes, strategy))
        if self.error is not None:
            raise self.error
        return self.text


class FakeAnalyzer:
    """Analyzer returning a canned mapping, optionally advancing a clock."""

    def __init__(
        self,
        result: dict[str, Any] | None = None,
        error: Exception | None = None,
        clock: FakeClock | None = None,
        elapsed: float = 0.0,
    ) -> None:
        self.result = result
        self.error = error
        self.clock = clock
        self.elapsed = elapsed
        self.calls: list[tuple[str, float | None]] = []

    def analyze(self, text: str, timeout: float | None = None) -> dict[str, Any]:
        self.calls.append((text, timeout))
        if self.clock is not None:
            self.clock.now += self.elapsed
        if self.error is not None:
            raise self.error
        return self.result or {}


def make_raw_analysis() -> dict[str, Any]:
    """A complete analysis as the completion service would return it."""
    return {
        "profile": {
            "companyName": "Acme Robotics",
            "industry": "Logistics",
            "businessModel": "SaaS",
            "marketPosition": "Challenger",
            "keyOfferings": ["Warehouse robots"],
            "financials": {"revenue": "$2M ARR", "funding": "$5M", "projections": ""},
        },
        "strengthsWeaknesses": {
            "strengths": ["Strong team"],
            "weaknesses": ["Hardware costs"],
        },
        "competitors": [
            {
                "name": "RoboCo",
                "keyInvestors": ["Big VC"],
                "amountRaised": "$40M",
                "marketPosition": "Leader",
            }
        ],
        "fundingHistory": [
            {"round": "Seed", "amount": "$5M", "investors": ["Angel"], "status": "Closed"}
        ],
        "marketComparison": {
            "metrics": {
                "marketShare": {
                    "startup": "2%",
                    "competitor1": "30%",
                    "competitor2": "10%",
                    "competitor3": "5%",
                }
            }
        },
        "exitPotential": {"likelihood": 14, "potentialValue": "$500M"},
        "reputationAnalysis": {
            "sources": {
                "newsMedia": {"sentiment": "Positive", "score": 8, "rating": 4},
                "socialMedia": {"sentiment": "Neutral", "score": -3, "rating": 3},
            },
            "overall": {"sentiment": "Positive", "score": 12, "rating": 4},
        },
        "expertConclusion": {
            "productViability": 8,
            "marketPotential": 11,
            "sustainability": 6,
            "innovation": 9,
            "exitPotential": 7,
            "riskFactors": -2,
            "competitiveAdvantage": 5,
        },
        "dealStructure": {
            "investmentAmount": "$2M",
            "equityStake": "10%",
            "antiDilution": True,
            "boardSeat": False,
        },
        "keyQuestions": [{"category": "Market", "question": "Who buys first?"}],
        "finalVerdict": {
            "summary": "Promising",
            "timeline": "18 months",
            "potentialOutcome": "Acquisition",
        },
        "confidence": 7.5,
        "suggestedImprovements": ["Clarify unit economics"],
        "keyInsights": [
            {
                "area": "Sales",
                "observation": "Long cycles",
                "recommendation": "Pilot programs",
                "priority": "High",
            }
        ],
    }


@pytest.fixture
def raw_analysis() -> dict[str, Any]:
    """Return a fresh raw analysis mapping."""
    return make_raw_analysis()


@pytest.fixture
def blank_pdf_bytes() -> bytes:
    """A valid one-page PDF without any text layer."""
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()


@pytest.fixture
def session_factory() -> sessionmaker[Session]:
    """Session factory over a fresh in-memory SQLite database."""
    engine = build_engine(DatabaseConfig(url="sqlite://"))
    init_db(engine)
    return build_session_factory(engine)


@pytest.fixture
def deck_repository(session_factory: sessionmaker[Session]) -> DeckRepository:
    return DeckRepository(session_factory)


@pytest.fixture
def profile_repository(session_factory: sessionmaker[Session]) -> ProfileRepository:
    return ProfileRepository(session_factory)


@pytest.fixture
def object_store(tmp_path: Path) -> LocalObjectStore:
    """Local object store rooted in a temporary directory."""
    return LocalObjectStore(tmp_path / "uploads")


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent
