"""Unit tests for urgency scoring."""

import pytest

from incident_intake.core import urgency
from incident_intake.models.incidents import Severity


class TestBaseUrgency:
    @pytest.mark.parametrize(
        "severity, expected",
        [(Severity.HIGH, 8), (Severity.MEDIUM, 5), (Severity.LOW, 2)],
    )
    def test_base_by_severity(self, severity, expected):
        assert urgency.base_urgency(severity) == expected

    def test_accepts_canonical_strings(self):
        assert urgency.base_urgency("High") == 8

    def test_unknown_severity_falls_back_to_one(self):
        assert urgency.base_urgency("Critical") == 1


class TestAgeMultiplier:
    @pytest.mark.parametrize(
        "severity, hours, expected",
        [
            ("High", 0, 1.0),
            ("High", 1, 1.0),
            ("High", 1.01, 1.2),
            ("High", 4, 1.2),
            ("High", 24, 1.4),
            ("High", 48, 1.6),
            ("High", 48.5, 2.0),
            ("Medium", 24, 1.0),
            ("Medium", 72, 1.2),
            ("Medium", 168, 1.4),
            ("Medium", 169, 1.6),
            ("Low", 168, 1.0),
            ("Low", 720, 1.2),
            ("Low", 721, 1.4),
        ],
    )
    def test_upper_bounds_are_inclusive(self, severity, hours, expected):
        assert urgency.age_multiplier(severity, hours) == expected

    def test_unknown_severity_has_no_multiplier(self):
        assert urgency.age_multiplier("Critical", 10_000) == 1.0


class TestCalculateUrgency:
    def test_recent_high_is_clamped_to_ten(self):
        # ceil(8 * 1.2) = 10
        assert urgency.calculate_urgency(Severity.HIGH, 2) == 10

    def test_week_old_medium(self):
        assert urgency.calculate_urgency(Severity.MEDIUM, 168) == 7

    def test_month_old_low(self):
        assert urgency.calculate_urgency(Severity.LOW, 720) == 3

    def test_fresh_low(self):
        assert urgency.calculate_urgency(Severity.LOW, 0) == 2

    def test_very_old_high_is_clamped(self):
        assert urgency.calculate_urgency(Severity.HIGH, 1000) == 10

    def test_unknown_severity_scores_minimum(self):
        assert urgency.calculate_urgency("Critical", 5000) == 1

    @pytest.mark.parametrize("severity", list(Severity))
    def test_score_stays_in_range_and_never_decreases_with_age(self, severity):
        hours = [0, 0.5, 1, 2, 4, 5, 24, 25, 48, 49, 72, 73, 168, 169, 720, 721, 5000, 87600]
        scores = [urgency.calculate_urgency(severity, h) for h in hours]

        assert all(1 <= score <= 10 for score in scores)
        assert scores == sorted(scores)


class TestDescribeUrgency:
    @pytest.mark.parametrize(
        "score, label",
        [
            (10, "Critical - Immediate Action Required"),
            (9, "Critical - Immediate Action Required"),
            (8, "High - Action Required Today"),
            (7, "High - Action Required Today"),
            (6, "Medium - Action Required This Week"),
            (5, "Medium - Action Required This Week"),
            (4, "Low - Action Required Soon"),
            (3, "Low - Action Required Soon"),
            (2, "Minimal - Action When Convenient"),
            (1, "Minimal - Action When Convenient"),
        ],
    )
    def test_labels(self, score, label):
        assert urgency.describe_urgency(score) == label


class TestIsUrgent:
    @pytest.mark.parametrize("score", range(1, 11))
    def test_urgent_iff_at_least_seven(self, score):
        assert urgency.is_urgent(score) is (score >= 7)
