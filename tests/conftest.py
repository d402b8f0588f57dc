"""Shared fixtures for the assessment insights tests."""

from datetime import date
from typing import Dict, Optional

import pytest

from celf_insights.models.assessment import TEST_NAMES, AssessmentRecord, Student, TestResult
from celf_insights.retrieval.matcher import InterpretationMatcher
from celf_insights.scoring.rules import InterpretationRule, RuleTable, ScoreRange


def make_record(
    student_id: str = "1001",
    on: date = date(2024, 3, 15),
    scores: Optional[Dict[str, float]] = None,
    name: str = "A.B.",
    age_months: Optional[float] = 48,
) -> AssessmentRecord:
    """Build an assessment record from code -> standard score."""
    scores = scores or {}
    return AssessmentRecord(
        student_id=student_id,
        student_name=name,
        date=on,
        age_months=age_months,
        tests={
            code: TestResult(test_name=TEST_NAMES.get(code, code), standard_score=score)
            for code, score in scores.items()
        },
    )


def make_rule(rule_id: str, test_type: str, abbreviation=None, audience="clinician", **score_range) -> InterpretationRule:
    return InterpretationRule(
        id=rule_id,
        test_type=test_type,
        test_abbreviation=abbreviation,
        score_range=ScoreRange(**score_range) if score_range else None,
        audience=audience,
        title=f"Title {rule_id}",
        summary=f"Summary {rule_id}",
        source="Test manual",
        recommendations=(f"Recommendation {rule_id}",),
    )


@pytest.fixture
def rule_table():
    """Small rule table covering single-score and comparison rules."""
    return RuleTable([
        make_rule("rli-below", "Receptive Language Index", "RLI", max_z=-1.0),
        make_rule("rli-average", "Receptive Language Index", "RLI", min_z=-1.0, max_z=1.0),
        make_rule("rli-below-family", "Receptive Language Index", "RLI", audience="family", max_z=-1.0),
        make_rule("eli-below", "Expressive Language Index", "ELI", max_z=-1.0),
        make_rule("eli-average", "Expressive Language Index", "ELI", min_z=-1.0, max_z=1.0),
        make_rule("cls-any", "Core Language Score", "CLS", min_z=-10.0),
        make_rule("by-name-only", "Core Language Score", None, max_z=0.0),
        make_rule("no-range", "Receptive Language Index", "RLI"),
        make_rule("cmp-receptive", "Composite Comparison", min_z_diff=1.0),
        make_rule("cmp-balanced", "Composite Comparison", min_z_diff=-1.0, max_z_diff=1.0),
        make_rule("cmp-receptive-family", "Composite Comparison", audience="family", min_z_diff=1.0),
        # A comparison rule whose ranges would also accept any single z-score
        make_rule("cmp-wide", "Composite Comparison", "RLI", min_z=-10.0, max_z=10.0, min_z_diff=5.0),
    ])


@pytest.fixture
def matcher(rule_table):
    return InterpretationMatcher(rule_table)


@pytest.fixture
def student():
    return Student(id="1001", name="A.B.")


@pytest.fixture
def sample_assessments():
    """Two assessments of one student, older one first."""
    return [
        make_record(on=date(2023, 9, 1), scores={"RLI": 80, "ELI": 82, "CLS": 84, "SC": 90}),
        make_record(on=date(2024, 3, 15), scores={"RLI": 110, "ELI": 88, "CLS": 95, "SC": 92}),
    ]


@pytest.fixture
def csv_header():
    columns = ["LT_Id", "Child_Initials", "AssessmentDate", "Age"]
    for code in TEST_NAMES:
        for suffix in ("StandardScore", "ScaledScore", "PctRank", "RawScore"):
            columns.append(f"{code}_{suffix}")
    return columns
