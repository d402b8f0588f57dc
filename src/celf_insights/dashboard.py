"""
Assessment Dashboard Session

High-level interface over a loaded assessment dataset: student listing and
search, selection with a recent-students list, and per-student views that
bundle the interpretation report, heuristic insights and KPI figures.

Views are pure derivations of (records, student, audience) and are memoized
by (student_id, audience); loading new data starts a new session.
"""

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union
import logging

from .config import Settings, settings as default_settings
from .errors import StudentNotFoundError
from .ingest.loaders import load_assessments
from .ingest.normalizer import unique_students
from .insights.assembler import assemble_report
from .insights.heuristics import heuristic_insights, kpi_metrics
from .models.assessment import AssessmentRecord, Student
from .models.report import Audience, HeuristicInsight, KPIMetrics, LatestTestResult, Report
from .models.utils import filter_student, latest_with_test
from .retrieval.matcher import InterpretationMatcher
from .scoring.rules import load_rule_table
from .store.recent import (
    InMemoryRecentStore,
    RecentStudentsStore,
    recent_students,
    remember_student,
)

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 25


@dataclass(frozen=True)
class StudentView:
    """Everything the presentation layer shows for one student and audience."""
    student: Student
    audience: Audience
    assessments: List[AssessmentRecord]
    test_codes: List[str]
    report: Report
    insights: List[HeuristicInsight]
    kpis: Optional[KPIMetrics] = None

    @property
    def has_data(self) -> bool:
        return bool(self.test_codes)

    def latest_result(self, code: str) -> Optional[LatestTestResult]:
        """
        Scores for a test from the newest assessment that includes it.

        A test missing from the latest assessment is taken from an older one,
        along with that assessment's date and age.
        """
        record = latest_with_test(self.assessments, code)
        if record is None:
            return None

        result = record.tests[code]
        return LatestTestResult(
            code=code,
            test_name=result.test_name,
            standard_score=result.standard_score,
            scaled_score=result.scaled_score,
            percentile=result.percentile,
            date=record.date,
            age_months=record.age_months,
        )

    @property
    def latest_results(self) -> List[LatestTestResult]:
        """latest_result for every test the student has taken."""
        return [self.latest_result(code) for code in self.test_codes]


@dataclass
class AssessmentDashboard:
    """Single-user session over one loaded dataset."""

    records: List[AssessmentRecord]
    matcher: InterpretationMatcher
    recent_store: RecentStudentsStore = field(default_factory=InMemoryRecentStore)
    settings: Settings = field(default_factory=lambda: default_settings)

    _students: Optional[List[Student]] = field(default=None, init=False, repr=False)
    _views: Dict[Tuple[str, Audience], StudentView] = field(default_factory=dict, init=False, repr=False)

    @classmethod
    def load(
        cls,
        data_path: Union[str, Path],
        rules_path: Union[str, Path],
        recent_store: Optional[RecentStudentsStore] = None,
        settings: Optional[Settings] = None,
        load_date: Optional[date] = None,
    ) -> "AssessmentDashboard":
        """
        Load the assessment file and rule table into a new session.

        Raises:
            IngestionError: the assessment file cannot be read
            RuleTableError: the rule table cannot be read
        """
        records = load_assessments(data_path, load_date=load_date)
        matcher = InterpretationMatcher(load_rule_table(rules_path))

        return cls(
            records=records,
            matcher=matcher,
            recent_store=recent_store or InMemoryRecentStore(),
            settings=settings or default_settings,
        )

    @property
    def students(self) -> List[Student]:
        """Distinct students sorted by name."""
        if self._students is None:
            self._students = unique_students(self.records)
        return self._students

    def get_student(self, student_id: str) -> Student:
        for student in self.students:
            if student.id == student_id:
                return student
        raise StudentNotFoundError(f"Student not found: {student_id}")

    def assessments_for(self, student_id: str) -> List[AssessmentRecord]:
        """All records of a student, in ingestion order."""
        return filter_student(self.records, student_id)

    def search_students(self, query: str = "", limit: int = SEARCH_LIMIT) -> List[Student]:
        """Case-insensitive substring match on student name or id."""
        q = (query or "").strip().lower()
        matches = [
            s for s in self.students
            if not q or q in s.name.lower() or q in s.id.lower()
        ]
        return matches[:limit]

    def select(self, student_id: str) -> Student:
        """Select a student and record it in the recent list."""
        student = self.get_student(student_id)
        remember_student(self.recent_store, student.id, self.settings.data.recent_limit)
        return student

    def recent(self) -> List[Student]:
        """Recently selected students that are present in this dataset."""
        limit = self.settings.data.recent_limit
        return recent_students(self.students, self.recent_store.get(), limit)

    def view(self, student_id: str, audience: Union[Audience, str, None] = None) -> StudentView:
        """Derived view for a student, memoized by (student_id, audience)."""
        audience = Audience(audience or self.settings.insights.default_audience)
        key = (student_id, audience)
        if key in self._views:
            return self._views[key]

        student = self.get_student(student_id)
        assessments = self.assessments_for(student_id)

        test_codes: List[str] = []
        for record in assessments:
            test_codes.extend(code for code in record.tests if code not in test_codes)

        view = StudentView(
            student=student,
            audience=audience,
            assessments=assessments,
            test_codes=test_codes,
            report=assemble_report(student, assessments, audience, self.matcher),
            insights=heuristic_insights(
                assessments,
                comparison_gap=self.settings.insights.comparison_gap,
                progress_threshold=self.settings.insights.progress_threshold,
            ),
            kpis=kpi_metrics(assessments),
        )
        self._views[key] = view
        logger.debug(f"Computed view for {student_id} ({audience.value})")
        return view
