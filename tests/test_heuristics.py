"""
Tests for score-derived heuristic insights and KPI figures.
"""

from datetime import date

import pytest

from celf_insights.insights.heuristics import (
    domain_averages,
    format_score,
    heuristic_insights,
    kpi_metrics,
)
from celf_insights.models.report import InsightType

from conftest import make_record


def by_type(insights):
    return {insight.type: insight for insight in insights}


class TestFormatScore:
    def test_whole_numbers(self):
        assert format_score(80.0) == "80"
        assert format_score(7) == "7"

    def test_fractions(self):
        assert format_score(7.5) == "7.5"


class TestBandInsights:
    """Test below/above average listings."""

    def test_below_and_above(self):
        record = make_record(scores={"RLI": 80, "ELI": 70, "CLS": 120, "SC": 130, "WS": 100})
        insights = by_type(heuristic_insights([record]))

        below = insights[InsightType.BELOW_AVERAGE]
        assert below.title == "Areas Needing Support"
        assert below.items == [
            "Expressive Language Index: 70 (Significantly Below Average)",
            "Receptive Language Index: 80 (Below Average)",
        ]

        above = insights[InsightType.ABOVE_AVERAGE]
        assert above.title == "Relative Strengths"
        assert above.items == [
            "Sentence Comprehension: 130 (Above Average)",
            "Core Language Score: 120 (Above Average)",
        ]

    def test_boundaries_are_not_listed(self):
        record = make_record(scores={"CLS": 85, "PA": 115})
        assert heuristic_insights([record]) == []

    def test_categories_omitted_when_empty(self):
        record = make_record(scores={"RLI": 70})
        types = [insight.type for insight in heuristic_insights([record])]
        assert types == [InsightType.BELOW_AVERAGE]


class TestComparisonInsight:
    """Test the receptive vs expressive average gap."""

    def test_gap_of_fifteen(self):
        record = make_record(scores={"RLI": 110, "ELI": 95})
        comparison = by_type(heuristic_insights([record]))[InsightType.RECEPTIVE_EXPRESSIVE]

        assert comparison.items == [
            "Average Receptive: 110.0",
            "Average Expressive: 95.0",
            "Receptive language skills are 15.0 points higher",
        ]

    def test_small_gap_not_reported(self):
        record = make_record(scores={"RLI": 105, "ELI": 98})
        assert InsightType.RECEPTIVE_EXPRESSIVE not in by_type(heuristic_insights([record]))

    def test_exact_gap_is_reported(self):
        record = make_record(scores={"RLI": 90, "ELI": 100})
        comparison = by_type(heuristic_insights([record]))[InsightType.RECEPTIVE_EXPRESSIVE]
        assert comparison.items[-1] == "Expressive language skills are 10.0 points higher"

    def test_averages_over_domain_tests(self):
        record = make_record(scores={"RLI": 100, "SC": 90, "BC": 80, "ELI": 100, "EV": 80, "CLS": 50})
        assert domain_averages(record) == (90.0, 90.0)

    def test_needs_both_domains(self):
        record = make_record(scores={"SC": 100, "BC": 80})
        assert domain_averages(record) == (90.0, None)
        assert InsightType.RECEPTIVE_EXPRESSIVE not in by_type(heuristic_insights([record]))

    def test_custom_gap(self):
        record = make_record(scores={"RLI": 105, "ELI": 98})
        insights = by_type(heuristic_insights([record], comparison_gap=5))
        assert insights[InsightType.RECEPTIVE_EXPRESSIVE].items[-1] == "Receptive language skills are 7.0 points higher"


class TestProgressInsight:
    """Test change between the earliest and latest assessments."""

    def test_improvement(self):
        records = [
            make_record(on=date(2024, 1, 10), scores={"RLI": 90, "ELI": 97}),
            make_record(on=date(2023, 6, 1), scores={"ELI": 99}),
            make_record(on=date(2023, 1, 10), scores={"RLI": 80, "ELI": 100}),
        ]

        progress = by_type(heuristic_insights(records))[InsightType.PROGRESS]
        assert progress.title == "Progress Over Time"
        assert progress.items == ["Receptive Language Index: improved by 10 points (80 → 90)"]

    def test_decline(self):
        records = [
            make_record(on=date(2023, 1, 1), scores={"ELI": 100}),
            make_record(on=date(2024, 1, 1), scores={"ELI": 92.5}),
        ]
        progress = by_type(heuristic_insights(records))[InsightType.PROGRESS]
        assert progress.items == ["Expressive Language Index: declined by 7.5 points (100 → 92.5)"]

    def test_small_change_not_reported(self):
        records = [
            make_record(on=date(2023, 1, 1), scores={"RLI": 100}),
            make_record(on=date(2024, 1, 1), scores={"RLI": 103}),
        ]
        assert heuristic_insights(records) == []

    def test_single_assessment(self):
        assert InsightType.PROGRESS not in by_type(heuristic_insights([make_record(scores={"RLI": 70})]))

    def test_same_date_records_are_not_progress(self):
        # earliest and latest both resolve to the first record on the shared date
        records = [
            make_record(on=date(2024, 1, 1), scores={"RLI": 80}),
            make_record(on=date(2024, 1, 1), scores={"RLI": 95}),
        ]
        insights = by_type(heuristic_insights(records))

        assert InsightType.PROGRESS not in insights
        assert insights[InsightType.BELOW_AVERAGE].items == ["Receptive Language Index: 80 (Below Average)"]

    def test_sample(self, sample_assessments):
        insights = heuristic_insights(sample_assessments)
        assert [i.type for i in insights] == [InsightType.RECEPTIVE_EXPRESSIVE, InsightType.PROGRESS]
        assert insights[1].items == [
            "Receptive Language Index: improved by 30 points (80 → 110)",
            "Expressive Language Index: improved by 6 points (82 → 88)",
            "Core Language Score: improved by 11 points (84 → 95)",
        ]

    def test_no_assessments(self):
        assert heuristic_insights([]) == []


class TestKpiMetrics:
    """Test headline KPI figures."""

    def test_sample(self, sample_assessments):
        kpis = kpi_metrics(sample_assessments)

        assert kpis.core_language_score == 95
        assert kpis.core_language_change == pytest.approx((95 - 84) / 84 * 100)
        assert kpis.receptive_language_index == 110
        assert kpis.receptive_change == pytest.approx(37.5)
        assert kpis.expressive_language_index == 88
        assert kpis.total_tests == 4
        assert (kpis.below_average_count, kpis.average_count, kpis.above_average_count) == (0, 4, 0)

    def test_single_assessment_has_no_change(self):
        kpis = kpi_metrics([make_record(scores={"CLS": 70, "RLI": 120})])
        assert kpis.core_language_change is None
        assert kpis.expressive_language_index is None
        assert (kpis.below_average_count, kpis.average_count, kpis.above_average_count) == (1, 0, 1)

    def test_empty(self):
        assert kpi_metrics([]) is None
