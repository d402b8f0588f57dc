"""
Report Assembler

Combines matched interpretation rules into one structured report per student:
matched rules are grouped per test code with the computed score statistics
attached once, and the receptive/expressive comparison is kept separately.
The content comes entirely from the rule table.
"""

from typing import List, Optional, Sequence, Union
import logging

from ..models.assessment import AssessmentRecord, Student
from ..models.report import (
    Audience,
    ComparisonInsight,
    InsightEntry,
    Report,
    ReportFocus,
    TestInsight,
)
from ..models.utils import latest_assessment
from ..retrieval.matcher import EXPRESSIVE_INDEX, RECEPTIVE_INDEX, InterpretationMatcher
from ..scoring.rules import COMPOSITE_COMPARISON, InterpretationRule
from ..scoring.statistics import normative_band, z_score

logger = logging.getLogger(__name__)


def _round(value: Optional[float]) -> Optional[float]:
    return None if value is None else round(value, 2)


def to_insight_entry(rule: InterpretationRule) -> InsightEntry:
    """Reader-facing view of a rule; details fall back to the summary."""
    return InsightEntry(
        title=rule.title,
        summary=rule.summary,
        details=rule.details or rule.summary,
        source=rule.source,
        recommendations=list(rule.recommendations),
    )


def assemble_test_insight(
    test_name: str,
    test_abbreviation: str,
    standard_score: float,
    rules: Sequence[InterpretationRule],
) -> Optional[TestInsight]:
    """Group the rules matched for one test; None when nothing matched."""
    if not rules:
        return None

    z = z_score(standard_score)
    return TestInsight(
        test=test_name,
        test_abbreviation=test_abbreviation,
        score=standard_score,
        z_score=_round(z),
        normative_band=normative_band(z),
        insights=[to_insight_entry(rule) for rule in rules],
        retrieved_count=len(rules),
    )


def assemble_comparison(
    receptive_score: float,
    expressive_score: float,
    rules: Sequence[InterpretationRule],
) -> Optional[ComparisonInsight]:
    """Receptive vs. expressive comparison entry; None when nothing matched."""
    if not rules:
        return None

    z_diff = z_score(receptive_score) - z_score(expressive_score)
    return ComparisonInsight(
        receptive_score=receptive_score,
        expressive_score=expressive_score,
        z_difference=_round(z_diff),
        insights=[to_insight_entry(rule) for rule in rules],
        retrieved_count=len(rules),
    )


def assemble_report(
    student: Optional[Student],
    assessments: Sequence[AssessmentRecord],
    audience: Union[Audience, str],
    matcher: InterpretationMatcher,
) -> Report:
    """
    Assemble the interpretation report for a student.

    Args:
        student: Selected student (None renders as 'Unknown')
        assessments: All of the student's assessment records
        audience: 'clinician' or 'family'
        matcher: Matcher bound to the rule table

    Returns:
        Report built from the latest assessment. Identical inputs give
        identical test_insights and comparisons; only timestamp varies.
    """
    audience = Audience(audience)
    student_name = student.name if student else "Unknown"
    student_id = student.id if student else None

    latest = latest_assessment(assessments)
    if latest is None:
        return Report(student=student_name, student_id=student_id, audience=audience)

    test_insights: List[TestInsight] = []
    comparisons: List[ComparisonInsight] = []

    for code, rules in matcher.match_all([latest], audience).items():
        if code == COMPOSITE_COMPARISON:
            comparison = assemble_comparison(
                latest.standard_score(RECEPTIVE_INDEX),
                latest.standard_score(EXPRESSIVE_INDEX),
                rules,
            )
            comparisons.append(comparison)
            continue

        result = latest.tests[code]
        test_insights.append(
            assemble_test_insight(result.test_name or code, code, result.standard_score, rules)
        )

    total_retrieved = sum(t.retrieved_count for t in test_insights)
    total_retrieved += sum(c.retrieved_count for c in comparisons)

    logger.info(
        f"Assembled {audience.value} report for {student_name}: "
        f"{len(test_insights)} tests, {len(comparisons)} comparisons, {total_retrieved} rules"
    )

    return Report(
        student=student_name,
        student_id=student_id,
        audience=audience,
        assessment_date=latest.date,
        test_insights=test_insights,
        comparisons=comparisons,
        total_retrieved=total_retrieved,
    )


def focus_report(report: Report, focus: Union[ReportFocus, str]) -> Report:
    """Narrow a report to one of the preset views."""
    focus = ReportFocus(focus)

    if focus == ReportFocus.RECEPTIVE:
        return report.model_copy(update={
            "test_insights": [
                t for t in report.test_insights
                if t.test_abbreviation == RECEPTIVE_INDEX or "Receptive" in t.test
            ],
            "comparisons": [],
        })

    if focus == ReportFocus.EXPRESSIVE:
        return report.model_copy(update={
            "test_insights": [
                t for t in report.test_insights
                if t.test_abbreviation == EXPRESSIVE_INDEX or "Expressive" in t.test
            ],
            "comparisons": [],
        })

    if focus == ReportFocus.COMPARISON:
        return report.model_copy(update={"test_insights": []})

    return report
