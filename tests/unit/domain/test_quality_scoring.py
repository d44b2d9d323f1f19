"""Tests for the quality score function and tier classifier."""

import pytest

from care_quality.domain.enums import PerformanceTier
from care_quality.domain.services import (
    ScoreInputs,
    calculate_quality_score,
    classify_performance_tier,
    incident_penalty,
    needs_attention,
)

PERFECT = ScoreInputs(acceptance_rate=100.0, completion_rate=100.0, average_rating=5.0, client_retention_rate=100.0)


class TestIncidentPenalty:
    """Test incident penalty bounds."""

    @pytest.mark.parametrize(
        ("total", "critical", "expected"),
        [(0, 0, 0.0), (1, 0, 5.0), (1, 1, 20.0), (2, 1, 25.0), (6, 0, 30.0), (10, 10, 30.0), (1000, 1000, 30.0)],
    )
    def test_penalty_is_capped_at_thirty(self, total: int, critical: int, expected: float) -> None:
        assert incident_penalty(total, critical) == expected


class TestQualityScore:
    """Test calculate_quality_score."""

    def test_perfect_caregiver_scores_85(self) -> None:
        """Weights sum to 0.85, so a flawless record tops out at 85."""
        assert calculate_quality_score(PERFECT) == pytest.approx(85.0)

    def test_weighted_components(self) -> None:
        inputs = ScoreInputs(acceptance_rate=50.0, completion_rate=80.0, average_rating=4.0, client_retention_rate=20.0)

        # 10 + 20 + 24 + 2
        assert calculate_quality_score(inputs) == pytest.approx(56.0)

    def test_incidents_reduce_score(self) -> None:
        inputs = ScoreInputs(
            acceptance_rate=100.0,
            completion_rate=100.0,
            average_rating=5.0,
            client_retention_rate=100.0,
            total_incidents=1,
            critical_incidents=1,
        )

        assert calculate_quality_score(inputs) == pytest.approx(65.0)

    def test_score_never_negative(self) -> None:
        inputs = ScoreInputs(total_incidents=1000, critical_incidents=1000)

        assert calculate_quality_score(inputs) == 0.0

    def test_penalty_cap_holds_for_many_critical_incidents(self) -> None:
        inputs = ScoreInputs(
            acceptance_rate=100.0,
            completion_rate=100.0,
            average_rating=5.0,
            client_retention_rate=100.0,
            total_incidents=1000,
            critical_incidents=1000,
        )

        assert calculate_quality_score(inputs) == pytest.approx(55.0)

    def test_score_never_exceeds_100(self) -> None:
        inputs = ScoreInputs(acceptance_rate=500.0, completion_rate=500.0, average_rating=5.0, client_retention_rate=500.0)

        assert calculate_quality_score(inputs) == 100.0


class TestPerformanceTier:
    """Test tier boundaries; lower bounds are inclusive."""

    @pytest.mark.parametrize(
        ("score", "tier"),
        [
            (100.0, PerformanceTier.EXCELLENT),
            (90.0, PerformanceTier.EXCELLENT),
            (89.999, PerformanceTier.VERY_GOOD),
            (80.0, PerformanceTier.VERY_GOOD),
            (79.999, PerformanceTier.GOOD),
            (70.0, PerformanceTier.GOOD),
            (69.999, PerformanceTier.SATISFACTORY),
            (60.0, PerformanceTier.SATISFACTORY),
            (59.999, PerformanceTier.NEEDS_IMPROVEMENT),
            (0.0, PerformanceTier.NEEDS_IMPROVEMENT),
        ],
    )
    def test_boundaries(self, score: float, tier: PerformanceTier) -> None:
        assert classify_performance_tier(score) == tier


class TestNeedsAttention:
    """Test the attention flag."""

    def test_healthy_caregiver(self) -> None:
        assert needs_attention(score=75.0, average_rating=4.5, critical_incidents=0) is False

    def test_low_score(self) -> None:
        assert needs_attention(score=69.9, average_rating=4.5, critical_incidents=0) is True

    def test_low_rating(self) -> None:
        assert needs_attention(score=80.0, average_rating=3.4, critical_incidents=0) is True

    def test_critical_incident(self) -> None:
        assert needs_attention(score=80.0, average_rating=5.0, critical_incidents=1) is True
