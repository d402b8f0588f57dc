"""
Report output schemas.

These schemas define the structured outputs of the interpretation pipeline
and of the heuristic insight layer, as consumed by the presentation layer and
the text export.
"""

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class Audience(str, Enum):
    """Output style selector for interpretation rules."""
    CLINICIAN = "clinician"
    FAMILY = "family"


class NormativeBand(str, Enum):
    """Five ordinal categories derived from a z-score."""
    SIGNIFICANTLY_BELOW = "Significantly Below Average"
    BELOW = "Below Average"
    AVERAGE = "Average"
    ABOVE = "Above Average"
    SIGNIFICANTLY_ABOVE = "Significantly Above Average"
    NO_DATA = "No Data"


class InsightType(str, Enum):
    """Heuristic insight categories."""
    BELOW_AVERAGE = "below-average"
    ABOVE_AVERAGE = "above-average"
    RECEPTIVE_EXPRESSIVE = "receptive-expressive"
    PROGRESS = "progress"


class ReportFocus(str, Enum):
    """Preset views over an assembled report."""
    OVERVIEW = "overview"
    RECEPTIVE = "receptive"
    EXPRESSIVE = "expressive"
    COMPARISON = "comparison"


class InsightEntry(BaseModel):
    """One matched interpretation rule, as shown to the reader."""
    title: str
    summary: str
    details: str
    source: str
    recommendations: List[str] = []


class TestInsight(BaseModel):
    """All matched interpretations for one test code."""
    __test__ = False  # not a pytest test class

    test: str
    test_abbreviation: str
    score: float
    z_score: Optional[float] = None  # rounded to 2 decimals
    normative_band: NormativeBand
    insights: List[InsightEntry] = []
    retrieved_count: int = 0


class ComparisonInsight(BaseModel):
    """Receptive vs. expressive composite comparison."""
    type: str = "composite_comparison"
    receptive_score: float
    expressive_score: float
    z_difference: Optional[float] = None  # rounded to 2 decimals
    insights: List[InsightEntry] = []
    retrieved_count: int = 0


class Report(BaseModel):
    """Consolidated interpretation report for one student."""
    student: str
    student_id: Optional[str] = None
    audience: Audience
    assessment_date: Optional[date] = None
    test_insights: List[TestInsight] = []
    comparisons: List[ComparisonInsight] = []
    total_retrieved: int = 0

    # Diagnostic only
    timestamp: datetime = Field(default_factory=datetime.now)


class HeuristicInsight(BaseModel):
    """Plain-language bullet insight derived directly from scores."""
    type: InsightType
    title: str
    items: List[str]


class KPIMetrics(BaseModel):
    """Headline figures for the most recent assessment."""
    core_language_score: Optional[float] = None
    core_language_change: Optional[float] = None  # percent vs previous assessment
    receptive_language_index: Optional[float] = None
    receptive_change: Optional[float] = None
    expressive_language_index: Optional[float] = None
    expressive_change: Optional[float] = None
    total_tests: int = 0
    below_average_count: int = 0
    average_count: int = 0
    above_average_count: int = 0


class LatestTestResult(BaseModel):
    """A test's scores from the newest assessment that includes it."""
    code: str
    test_name: str
    standard_score: Optional[float] = None
    scaled_score: Optional[float] = None
    percentile: Optional[float] = None
    date: date
    age_months: Optional[float] = None
