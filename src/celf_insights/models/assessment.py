"""
Assessment data models for CELF-P3 results.

These Pydantic models hold one normalized row of the assessment export:
- TestResult: the four score fields of one test code
- AssessmentRecord: one administration to one student
- Student: deduplicated student view used for selection

Records are frozen; every derivation builds new objects.
"""

from datetime import date
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator

# Test code -> display name, in export column order
TEST_NAMES: Dict[str, str] = {
    "SC": "Sentence Comprehension",
    "WS": "Word Structure",
    "EV": "Expressive Vocabulary",
    "FD": "Formulated Sentences",
    "RS": "Recalling Sentences",
    "BC": "Basic Concepts",
    "WC": "Word Classes",
    "PA": "Phonological Awareness",
    "DPP": "Following Directions",
    "PRS": "Understanding Spoken Paragraphs",
    "CLS": "Core Language Score",
    "RLI": "Receptive Language Index",
    "ELI": "Expressive Language Index",
    "LCI": "Language Content Index",
    "LSI": "Language Structure Index",
    "ALRI": "Academic Language Readiness Index",
    "ErLi": "Early Literacy Index",
}


def test_display_name(code: str) -> str:
    """Resolve a test code to its display name, falling back to the code."""
    return TEST_NAMES.get(code, code)


class TestResult(BaseModel):
    """Scores for a single test code within one assessment."""

    model_config = ConfigDict(frozen=True)

    __test__ = False  # not a pytest test class

    test_name: str
    standard_score: Optional[float] = None
    scaled_score: Optional[float] = None
    percentile: Optional[float] = None
    raw_score: Optional[float] = None

    @property
    def has_score(self) -> bool:
        """A result is only meaningful with a standard or scaled score."""
        return self.standard_score is not None or self.scaled_score is not None


class AssessmentRecord(BaseModel):
    """One administration of the instrument to one student."""

    model_config = ConfigDict(frozen=True)

    student_id: str
    student_name: str
    date: date
    age_months: Optional[float] = None
    tests: Dict[str, TestResult] = {}

    @field_validator("student_id")
    @classmethod
    def validate_student_id(cls, v):
        """Student id is the grouping key and must not be blank."""
        if not v or not v.strip():
            raise ValueError("student_id must be a non-empty string")
        return v.strip()

    def standard_score(self, code: str) -> Optional[float]:
        """Standard score for a test code, or None when not administered."""
        result = self.tests.get(code)
        return result.standard_score if result else None


class Student(BaseModel):
    """Deduplicated student entry."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str

    @property
    def initials(self) -> str:
        """Up to two initials from the display name."""
        parts = self.name.split()
        if not parts:
            return "LT"
        return "".join(part[0] for part in parts[:2]).upper()
