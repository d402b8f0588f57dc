"""
Insight Heuristics

Plain-language bullet insights computed directly from a student's scores,
independent of the interpretation rule table:
- tests below / above one SD of the mean
- receptive vs. expressive average gap
- change between the earliest and latest assessment

Each category is emitted only when it has at least one item.
"""

from typing import List, Optional, Sequence
import logging

from ..models.assessment import AssessmentRecord
from ..models.report import HeuristicInsight, InsightType, KPIMetrics
from ..models.utils import earliest_assessment, latest_assessment, previous_assessment
from ..scoring.statistics import normative_params, score_interpretation

logger = logging.getLogger(__name__)

RECEPTIVE_TESTS = ("RLI", "SC", "BC", "WC", "DPP", "PRS")
EXPRESSIVE_TESTS = ("ELI", "WS", "EV", "FD", "RS")

COMPARISON_GAP = 10.0
PROGRESS_THRESHOLD = 5.0


def format_score(value: float) -> str:
    """Render a score without a trailing '.0' for whole numbers."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def _average(values: List[float]) -> Optional[float]:
    return sum(values) / len(values) if values else None


def _band_insights(latest: AssessmentRecord) -> List[HeuristicInsight]:
    mean, sd = normative_params("standard")
    scored = [
        (result.test_name or code, result.standard_score)
        for code, result in latest.tests.items()
        if result.standard_score is not None
    ]

    below = sorted((item for item in scored if item[1] < mean - sd), key=lambda item: item[1])
    above = sorted((item for item in scored if item[1] > mean + sd), key=lambda item: item[1], reverse=True)

    insights = []
    if below:
        insights.append(HeuristicInsight(
            type=InsightType.BELOW_AVERAGE,
            title="Areas Needing Support",
            items=[f"{name}: {format_score(score)} ({score_interpretation(score).value})" for name, score in below],
        ))
    if above:
        insights.append(HeuristicInsight(
            type=InsightType.ABOVE_AVERAGE,
            title="Relative Strengths",
            items=[f"{name}: {format_score(score)} ({score_interpretation(score).value})" for name, score in above],
        ))
    return insights


def domain_averages(latest: AssessmentRecord):
    """Average receptive and expressive standard scores (None when no scores)."""
    receptive = [latest.tests[c].standard_score for c in RECEPTIVE_TESTS
                 if c in latest.tests and latest.tests[c].standard_score is not None]
    expressive = [latest.tests[c].standard_score for c in EXPRESSIVE_TESTS
                  if c in latest.tests and latest.tests[c].standard_score is not None]
    return _average(receptive), _average(expressive)


def _comparison_insight(latest: AssessmentRecord, gap: float) -> Optional[HeuristicInsight]:
    avg_receptive, avg_expressive = domain_averages(latest)
    if avg_receptive is None or avg_expressive is None:
        return None

    difference = abs(avg_receptive - avg_expressive)
    if difference < gap:
        return None

    stronger = "Receptive" if avg_receptive > avg_expressive else "Expressive"
    return HeuristicInsight(
        type=InsightType.RECEPTIVE_EXPRESSIVE,
        title="Receptive vs Expressive Comparison",
        items=[
            f"Average Receptive: {avg_receptive:.1f}",
            f"Average Expressive: {avg_expressive:.1f}",
            f"{stronger} language skills are {difference:.1f} points higher",
        ],
    )


def _progress_insight(assessments: Sequence[AssessmentRecord], threshold: float) -> Optional[HeuristicInsight]:
    if len(assessments) < 2:
        return None

    first = earliest_assessment(assessments)
    last = latest_assessment(assessments)
    if first is last:
        return None

    codes = list(first.tests)
    codes.extend(code for code in last.tests if code not in first.tests)

    items = []
    for code in codes:
        first_score = first.standard_score(code)
        last_score = last.standard_score(code)
        if first_score is None or last_score is None:
            continue

        change = last_score - first_score
        if abs(change) < threshold:
            continue

        name = first.tests[code].test_name or code
        direction = "improved" if change > 0 else "declined"
        items.append(
            f"{name}: {direction} by {format_score(abs(change))} points "
            f"({format_score(first_score)} → {format_score(last_score)})"
        )

    if not items:
        return None
    return HeuristicInsight(type=InsightType.PROGRESS, title="Progress Over Time", items=items)


def heuristic_insights(
    assessments: Sequence[AssessmentRecord],
    comparison_gap: float = COMPARISON_GAP,
    progress_threshold: float = PROGRESS_THRESHOLD,
) -> List[HeuristicInsight]:
    """
    Compute heuristic insights for one student's assessments.

    Args:
        assessments: All of the student's assessment records
        comparison_gap: Minimum receptive/expressive average difference
        progress_threshold: Minimum earliest-to-latest change in points

    Returns:
        Insights in category order; categories with no items are omitted
    """
    latest = latest_assessment(assessments)
    if latest is None:
        return []

    insights = _band_insights(latest)

    comparison = _comparison_insight(latest, comparison_gap)
    if comparison is not None:
        insights.append(comparison)

    progress = _progress_insight(assessments, progress_threshold)
    if progress is not None:
        insights.append(progress)

    logger.debug(f"Computed {len(insights)} heuristic insight categories")
    return insights


def _percent_change(current: Optional[float], previous: Optional[float]) -> Optional[float]:
    if current is None or not previous:
        return None
    return (current - previous) / previous * 100


def kpi_metrics(assessments: Sequence[AssessmentRecord]) -> Optional[KPIMetrics]:
    """Headline KPI figures for the latest assessment, with change vs the previous one."""
    latest = latest_assessment(assessments)
    if latest is None:
        return None

    previous = previous_assessment(assessments)
    mean, sd = normative_params("standard")

    def _prev(code: str) -> Optional[float]:
        return previous.standard_score(code) if previous else None

    scores = [r.standard_score for r in latest.tests.values() if r.standard_score is not None]

    return KPIMetrics(
        core_language_score=latest.standard_score("CLS"),
        core_language_change=_percent_change(latest.standard_score("CLS"), _prev("CLS")),
        receptive_language_index=latest.standard_score("RLI"),
        receptive_change=_percent_change(latest.standard_score("RLI"), _prev("RLI")),
        expressive_language_index=latest.standard_score("ELI"),
        expressive_change=_percent_change(latest.standard_score("ELI"), _prev("ELI")),
        total_tests=len(latest.tests),
        below_average_count=sum(1 for s in scores if s < mean - sd),
        average_count=sum(1 for s in scores if mean - sd <= s <= mean + sd),
        above_average_count=sum(1 for s in scores if s > mean + sd),
    )
