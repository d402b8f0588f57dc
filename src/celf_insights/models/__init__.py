"""
Core data models for the assessment insights system.

This package contains:
- Normalized assessment records and students
- Report and heuristic insight output schemas
"""

from .assessment import TEST_NAMES, AssessmentRecord, Student, TestResult, test_display_name
from . import utils
from .report import (
    Audience,
    ComparisonInsight,
    HeuristicInsight,
    InsightEntry,
    InsightType,
    KPIMetrics,
    LatestTestResult,
    NormativeBand,
    Report,
    ReportFocus,
    TestInsight,
)

__all__ = [
    # Assessment models
    "TEST_NAMES",
    "AssessmentRecord",
    "Student",
    "TestResult",
    "test_display_name",

    # Output schemas
    "Audience",
    "ComparisonInsight",
    "HeuristicInsight",
    "InsightEntry",
    "InsightType",
    "KPIMetrics",
    "LatestTestResult",
    "NormativeBand",
    "Report",
    "ReportFocus",
    "TestInsight",

    # Utilities
    "utils",
]
