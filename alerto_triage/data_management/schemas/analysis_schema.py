"""Credibility analysis schema.

One current analysis exists per report, keyed by report id. Each analysis run
replaces the previous record in full; nothing is appended or merged.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Recommendation(str, Enum):
    """Scorer's suggested disposition, distinct from the report status."""

    APPROVE = "approve"
    REJECT = "reject"
    PENDING = "pending"


class CredibilityFlag(str, Enum):
    """Named quality concerns the scorer can detect."""

    INCOMPLETE_INFORMATION = "incomplete_information"
    NO_VISUAL_EVIDENCE = "no_visual_evidence"
    INSUFFICIENT_DETAILS = "insufficient_details"
    POTENTIAL_SPAM = "potential_spam"
    VAGUE_LOCATION = "vague_location"


class RuleOutcome(BaseModel):
    """How a single scoring rule evaluated, kept for audit."""

    rule: str = Field(..., description="Rule name")
    passed: bool = Field(..., description="Whether the rule's condition held")
    delta: float = Field(..., description="Score delta applied")
    flag: Optional[str] = Field(default=None, description="Flag emitted, if any")


class CredibilityAnalysis(BaseModel):
    """Scorer output for one report."""

    report_id: str = Field(..., description="Analysed report")
    score: float = Field(..., ge=0.0, le=1.0, description="Clamped, 2 dp")
    summary: str = Field(..., description="Deterministic one-paragraph summary")
    flags: list[str] = Field(
        default_factory=list,
        description="Flags in detection order",
    )
    recommendation: Recommendation = Field(...)
    rule_trace: list[RuleOutcome] = Field(default_factory=list)
    analyzed_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
    triggered_by: Optional[str] = Field(
        default=None,
        description="Operator id, set only for manual re-analysis",
    )

    def same_verdict(self, other: "CredibilityAnalysis") -> bool:
        """Compare everything except when and by whom the analysis ran."""
        ignored = {"analyzed_at", "triggered_by"}
        return self.model_dump(exclude=ignored) == other.model_dump(exclude=ignored)


class AnalysisLookup(BaseModel):
    """Result of reading a report's analysis; not-found is a value, not an error."""

    report_id: str
    found: bool
    analysis: Optional[CredibilityAnalysis] = None
    message: Optional[str] = None
