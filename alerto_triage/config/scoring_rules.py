"""Credibility rule weights and thresholds for community report triage.

Scoring starts from a neutral baseline and each rule adds its pass or fail
delta. The accumulated value is clamped to [0, 1] and rounded to 2 places.

| Rule                 | Pass  | Fail  | Flag on fail            |
|----------------------|-------|-------|-------------------------|
| completeness         | +0.10 | -0.10 | incomplete_information  |
| visual_evidence      | +0.15 |  0.00 | no_visual_evidence      |
| detail               |  0.00 | -0.20 | insufficient_details    |
| elaboration          | +0.10 |  0.00 | (none)                  |
| spam                 |  0.00 | -0.40 | potential_spam          |
| location_specificity | +0.15 | -0.15 | vague_location          |

Completeness and location specificity cost as much on failure as they earn on
success. A report with a title, an image, 10-20 words and a city but no
locality scores 0.60, below the 0.70 admin-notification threshold.
"""

from typing import Dict, Tuple

BASELINE_SCORE: float = 0.5

# Rule name -> (pass delta, fail delta)
RULE_WEIGHTS: Dict[str, Tuple[float, float]] = {
    "completeness": (0.10, -0.10),
    "visual_evidence": (0.15, 0.0),
    "detail": (0.0, -0.20),
    "elaboration": (0.10, 0.0),
    "spam": (0.0, -0.40),
    "location_specificity": (0.15, -0.15),
}

# Descriptions shorter than this are penalised
MIN_DETAIL_WORDS: int = 10
# Descriptions longer than this earn a bonus
ELABORATION_WORDS: int = 20

# Matched case-insensitively against title and description
SPAM_PHRASES: Tuple[str, ...] = (
    "click here",
    "buy now",
    "limited time",
    "act now",
)

APPROVE_MIN_SCORE: float = 0.75
REJECT_BELOW_SCORE: float = 0.3

SUMMARY_DESCRIPTION_CHARS: int = 100
