"""Triage components: credibility scoring, status state machine and admin fan-out.

- CredibilityScorer: deterministic rule table -> CredibilityAnalysis
- TriageStateMachine: status transitions with verifier/resolver bookkeeping
- NotificationFanout: one independent notification per administrator
"""

from alerto_triage.triage.credibility_scorer import (
    CredibilityScorer,
    ScoringRule,
    analyze_report,
)
from alerto_triage.triage.notification_fanout import FanoutResult, NotificationFanout
from alerto_triage.triage.state_machine import (
    SYSTEM_OPERATOR,
    TriageStateMachine,
    is_transition_allowed,
    status_for_recommendation,
)

__all__ = [
    "CredibilityScorer",
    "ScoringRule",
    "analyze_report",
    "FanoutResult",
    "NotificationFanout",
    "SYSTEM_OPERATOR",
    "TriageStateMachine",
    "is_transition_allowed",
    "status_for_recommendation",
]
