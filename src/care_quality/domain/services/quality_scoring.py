"""Quality score function and performance tier classification.

score = 0.20 * acceptance + 0.25 * completion + 0.30 * (rating / 5 * 100)
        + 0.10 * retention - min(30, 5 * incidents + 15 * critical incidents)

The result is clamped to [0, 100].
"""

from __future__ import annotations

from dataclasses import dataclass

from care_quality.domain.enums import PerformanceTier

ACCEPTANCE_WEIGHT = 0.20
COMPLETION_WEIGHT = 0.25
RATING_WEIGHT = 0.30
RETENTION_WEIGHT = 0.10

PENALTY_PER_INCIDENT = 5.0
PENALTY_PER_CRITICAL_INCIDENT = 15.0
MAX_INCIDENT_PENALTY = 30.0

MAX_RATING = 5.0
MIN_SCORE = 0.0
MAX_SCORE = 100.0

HIGH_PERFORMER_THRESHOLD = 85.0
ATTENTION_SCORE_THRESHOLD = 70.0
ATTENTION_RATING_THRESHOLD = 3.5

# Checked from the top; each lower bound is inclusive.
TIER_THRESHOLDS: tuple[tuple[float, PerformanceTier], ...] = (
    (90.0, PerformanceTier.EXCELLENT),
    (80.0, PerformanceTier.VERY_GOOD),
    (70.0, PerformanceTier.GOOD),
    (60.0, PerformanceTier.SATISFACTORY),
)


@dataclass(frozen=True)
class ScoreInputs:
    """Counters the quality score is computed from."""

    acceptance_rate: float = 0.0
    completion_rate: float = 0.0
    average_rating: float = 0.0
    client_retention_rate: float = 0.0
    total_incidents: int = 0
    critical_incidents: int = 0


def incident_penalty(total_incidents: int, critical_incidents: int) -> float:
    """Penalty for incidents, bounded to [0, 30]."""
    raw = PENALTY_PER_INCIDENT * total_incidents + PENALTY_PER_CRITICAL_INCIDENT * critical_incidents
    return max(0.0, min(MAX_INCIDENT_PENALTY, raw))


def calculate_quality_score(inputs: ScoreInputs) -> float:
    """Compute the bounded 0-100 quality score."""
    acceptance_score = inputs.acceptance_rate * ACCEPTANCE_WEIGHT
    completion_score = inputs.completion_rate * COMPLETION_WEIGHT
    rating_score = (inputs.average_rating / MAX_RATING) * 100 * RATING_WEIGHT
    retention_score = inputs.client_retention_rate * RETENTION_WEIGHT

    score = (
        acceptance_score
        + completion_score
        + rating_score
        + retention_score
        - incident_penalty(inputs.total_incidents, inputs.critical_incidents)
    )
    return max(MIN_SCORE, min(MAX_SCORE, score))


def classify_performance_tier(score: float) -> PerformanceTier:
    """Map a quality score to its performance tier."""
    for lower_bound, tier in TIER_THRESHOLDS:
        if score >= lower_bound:
            return tier
    return PerformanceTier.NEEDS_IMPROVEMENT


def needs_attention(score: float, average_rating: float, critical_incidents: int) -> bool:
    """Flag caregivers that admins should look at."""
    return (
        score < ATTENTION_SCORE_THRESHOLD
        or average_rating < ATTENTION_RATING_THRESHOLD
        or critical_incidents > 0
    )
