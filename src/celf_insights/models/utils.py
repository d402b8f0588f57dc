"""
Utility functions for working with assessment records.

Provides helpers for:
- Ordering a student's assessments by date
- Selecting the latest, earliest and previous assessment
- Finding the latest assessment that includes a given test

Ties on equal dates are resolved by ingestion order: among records sharing a
date, the one that appeared first in the input is treated as the most recent
(and as the earliest).
"""

from typing import List, Optional, Sequence

from .assessment import AssessmentRecord


def by_recency(assessments: Sequence[AssessmentRecord]) -> List[AssessmentRecord]:
    """Assessments newest first; equal dates keep ingestion order."""
    indexed = list(enumerate(assessments))
    indexed.sort(key=lambda pair: (-pair[1].date.toordinal(), pair[0]))
    return [record for _, record in indexed]


def latest_assessment(assessments: Sequence[AssessmentRecord]) -> Optional[AssessmentRecord]:
    """Most recent assessment, or None for an empty sequence."""
    if not assessments:
        return None
    return max(enumerate(assessments), key=lambda pair: (pair[1].date, -pair[0]))[1]


def earliest_assessment(assessments: Sequence[AssessmentRecord]) -> Optional[AssessmentRecord]:
    """Oldest assessment, or None for an empty sequence."""
    if not assessments:
        return None
    return min(enumerate(assessments), key=lambda pair: (pair[1].date, pair[0]))[1]


def latest_with_test(assessments: Sequence[AssessmentRecord], code: str) -> Optional[AssessmentRecord]:
    """Most recent assessment that has a result for the test code."""
    return latest_assessment([record for record in assessments if code in record.tests])


def previous_assessment(assessments: Sequence[AssessmentRecord]) -> Optional[AssessmentRecord]:
    """The assessment before the latest one, or None with fewer than two."""
    ordered = by_recency(assessments)
    return ordered[1] if len(ordered) > 1 else None


def filter_student(assessments: Sequence[AssessmentRecord], student_id: str) -> List[AssessmentRecord]:
    """All assessments of one student, in ingestion order."""
    return [record for record in assessments if record.student_id == student_id]
