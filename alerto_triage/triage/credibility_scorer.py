"""Rule-based credibility scoring for community reports.

Scoring is an explicit, ordered table of predicates with pass/fail deltas
(see ``alerto_triage.config.scoring_rules``). No model calls, no randomness:
the same report snapshot always yields the same score, flags, summary and
recommendation.

Recommendation:
    approve  score >= 0.75 and no flags
    reject   score < 0.3 or potential_spam flagged
    pending  otherwise
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, List, Optional, Sequence, Union

import pydantic
from loguru import logger

from alerto_triage.config.scoring_rules import (
    APPROVE_MIN_SCORE,
    BASELINE_SCORE,
    ELABORATION_WORDS,
    MIN_DETAIL_WORDS,
    REJECT_BELOW_SCORE,
    RULE_WEIGHTS,
    SPAM_PHRASES,
    SUMMARY_DESCRIPTION_CHARS,
)
from alerto_triage.data_management.schemas import (
    CredibilityAnalysis,
    CredibilityFlag,
    Recommendation,
    Report,
    RuleOutcome,
)
from alerto_triage.errors import ValidationError

ReportInput = Union[Report, Mapping]

# Identity of an analysed snapshot that carries no report_id of its own
UNIDENTIFIED_REPORT_ID = "unidentified"


@dataclass(frozen=True)
class ScoringRule:
    """One weighted predicate of the credibility table.

    Attributes:
        name: Rule name, also the key into RULE_WEIGHTS
        check: Predicate over the report; True means the rule passed
        pass_delta: Score delta applied when the check holds
        fail_delta: Score delta applied when it does not
        flag: Flag emitted on failure (None for bonus-only rules)
    """

    name: str
    check: Callable[[Report], bool]
    pass_delta: float
    fail_delta: float
    flag: Optional[CredibilityFlag] = None

    def evaluate(self, report: Report) -> RuleOutcome:
        passed = bool(self.check(report))
        return RuleOutcome(
            rule=self.name,
            passed=passed,
            delta=self.pass_delta if passed else self.fail_delta,
            flag=None if passed or self.flag is None else self.flag.value,
        )


def word_count(text: Optional[str]) -> int:
    """Whitespace-delimited word count; empty or missing text counts 0."""
    return len(text.split()) if text else 0


def _is_complete(report: Report) -> bool:
    location_present = report.location is not None and report.location.has_any_field()
    return bool(_stripped(report.title) and _stripped(report.description) and location_present)


def _has_images(report: Report) -> bool:
    return len(report.images) > 0


def _has_enough_detail(report: Report) -> bool:
    return word_count(report.description) >= MIN_DETAIL_WORDS


def _is_elaborate(report: Report) -> bool:
    return word_count(report.description) > ELABORATION_WORDS


def _is_free_of_spam(report: Report) -> bool:
    text = f"{report.title or ''}\n{report.description or ''}".lower()
    return not any(phrase in text for phrase in SPAM_PHRASES)


def _is_location_specific(report: Report) -> bool:
    return report.location is not None and report.location.is_specific()


def _rule(name: str, check: Callable[[Report], bool], flag: Optional[CredibilityFlag]) -> ScoringRule:
    pass_delta, fail_delta = RULE_WEIGHTS[name]
    return ScoringRule(name, check, pass_delta, fail_delta, flag)


# Evaluation order is flag detection order
DEFAULT_RULES: tuple[ScoringRule, ...] = (
    _rule("completeness", _is_complete, CredibilityFlag.INCOMPLETE_INFORMATION),
    _rule("visual_evidence", _has_images, CredibilityFlag.NO_VISUAL_EVIDENCE),
    _rule("detail", _has_enough_detail, CredibilityFlag.INSUFFICIENT_DETAILS),
    _rule("elaboration", _is_elaborate, None),
    _rule("spam", _is_free_of_spam, CredibilityFlag.POTENTIAL_SPAM),
    _rule("location_specificity", _is_location_specific, CredibilityFlag.VAGUE_LOCATION),
)


class CredibilityScorer:
    """
    Scores report credibility with an additive rule table.

    Usage:
        scorer = CredibilityScorer()
        analysis = scorer.analyze(report)

    Attributes:
        rules: Ordered scoring rules
        baseline: Starting score before any rule applies
    """

    def __init__(
        self,
        rules: Optional[Sequence[ScoringRule]] = None,
        baseline: float = BASELINE_SCORE,
    ):
        self.rules = tuple(rules) if rules is not None else DEFAULT_RULES
        self.baseline = baseline
        self.logger = logger.bind(component="CredibilityScorer")

    def analyze(
        self,
        report: ReportInput,
        report_id: Optional[str] = None,
        analyzed_at: Optional[datetime] = None,
        triggered_by: Optional[str] = None,
    ) -> CredibilityAnalysis:
        """
        Score a report snapshot.

        Missing fields fail their respective checks instead of raising.

        Args:
            report: Report model or raw snapshot mapping
            report_id: Overrides the snapshot's report_id (event key)
            analyzed_at: Analysis timestamp (defaults to now)
            triggered_by: Operator id for manual re-analysis

        Returns:
            CredibilityAnalysis with score, flags, summary and recommendation

        Raises:
            ValidationError: If the snapshot cannot be read as a report at all
        """
        parsed = coerce_report(report)

        outcomes = [rule.evaluate(parsed) for rule in self.rules]
        raw_score = self.baseline + sum(o.delta for o in outcomes)
        score = round(max(0.0, min(1.0, raw_score)), 2)
        flags = [o.flag for o in outcomes if o.flag is not None]
        recommendation = recommend(score, flags)

        extra: dict[str, Any] = {}
        if analyzed_at is not None:
            extra["analyzed_at"] = analyzed_at

        analysis = CredibilityAnalysis(
            report_id=report_id or parsed.report_id,
            score=score,
            summary=generate_summary(parsed),
            flags=flags,
            recommendation=recommendation,
            rule_trace=outcomes,
            triggered_by=triggered_by,
            **extra,
        )

        self.logger.debug(
            f"Credibility computed: {score:.2f}",
            report_id=analysis.report_id,
            flags=flags,
            recommendation=recommendation.value,
        )
        return analysis


def recommend(score: float, flags: List[str]) -> Recommendation:
    if score >= APPROVE_MIN_SCORE and not flags:
        return Recommendation.APPROVE
    if score < REJECT_BELOW_SCORE or CredibilityFlag.POTENTIAL_SPAM.value in flags:
        return Recommendation.REJECT
    return Recommendation.PENDING


def generate_summary(report: Report) -> str:
    """Deterministic summary: severity, location, title and description prefix."""
    severity = report.severity.value.upper() if report.severity else "UNKNOWN"

    place = "Unknown location"
    if report.location is not None:
        parts = [p.strip() for p in (report.location.barangay, report.location.city) if _stripped(p)]
        if parts:
            place = ", ".join(parts)

    title = _stripped(report.title) or "No title"
    description = (report.description or "")[:SUMMARY_DESCRIPTION_CHARS] or "No description"

    return (
        f"{severity} severity weather event reported in {place}. "
        f"{title}. "
        f"{description}..."
    )


def coerce_report(report: ReportInput) -> Report:
    """Read a Report from a model or a raw snapshot mapping.

    A mapping without a report_id is read as UNIDENTIFIED_REPORT_ID rather than
    given a fresh uuid, so scoring it twice yields the same analysis.

    Raises:
        ValidationError: For input that is not report-shaped.
    """
    if isinstance(report, Report):
        return report
    if isinstance(report, Mapping):
        try:
            data = dict(report)
            if not data.get("report_id"):
                data["report_id"] = UNIDENTIFIED_REPORT_ID
            return Report.model_validate(data)
        except pydantic.ValidationError as e:
            raise ValidationError(f"Unreadable report snapshot: {e}") from e
    raise ValidationError(
        f"Report snapshot must be a mapping or Report, got {type(report).__name__}"
    )


def _stripped(value: Optional[str]) -> str:
    return value.strip() if value else ""


_default_scorer = CredibilityScorer()


def analyze_report(report: ReportInput, **kwargs: Any) -> CredibilityAnalysis:
    """Score a report with the default rule table."""
    return _default_scorer.analyze(report, **kwargs)
