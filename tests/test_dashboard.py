"""
Tests for the assessment dashboard session.
"""

from datetime import date

import pytest

from celf_insights.config import Settings
from celf_insights.dashboard import AssessmentDashboard
from celf_insights.errors import IngestionError, RuleTableError, StudentNotFoundError
from celf_insights.models.report import Audience
from celf_insights.store.recent import InMemoryRecentStore

from conftest import make_record


@pytest.fixture
def records(sample_assessments):
    return sample_assessments + [
        make_record("2002", date(2024, 1, 5), {"RLI": 70, "ELI": 72}, name="zoe"),
        make_record("3003", date(2024, 2, 1), {"CLS": 120}, name="Ben"),
    ]


@pytest.fixture
def dashboard(records, matcher):
    return AssessmentDashboard(records=records, matcher=matcher, settings=Settings())


class TestStudents:
    """Test listing, lookup and search."""

    def test_sorted_by_name(self, dashboard):
        assert [s.name for s in dashboard.students] == ["A.B.", "Ben", "zoe"]

    def test_get_student(self, dashboard):
        assert dashboard.get_student("2002").name == "zoe"
        with pytest.raises(StudentNotFoundError):
            dashboard.get_student("9999")

    def test_search(self, dashboard):
        assert [s.id for s in dashboard.search_students("ZO")] == ["2002"]
        assert [s.id for s in dashboard.search_students("300")] == ["3003"]
        assert len(dashboard.search_students("")) == 3
        assert dashboard.search_students("nobody") == []

    def test_search_limit(self, dashboard):
        assert len(dashboard.search_students("", limit=2)) == 2

    def test_assessments_for(self, dashboard):
        assert len(dashboard.assessments_for("1001")) == 2
        assert dashboard.assessments_for("missing") == []


class TestRecent:
    """Test selection history."""

    def test_select_records_recent(self, dashboard):
        dashboard.select("3003")
        dashboard.select("1001")
        dashboard.select("3003")
        assert [s.id for s in dashboard.recent()] == ["3003", "1001"]

    def test_unknown_selection_not_recorded(self, dashboard):
        with pytest.raises(StudentNotFoundError):
            dashboard.select("nope")
        assert dashboard.recent() == []

    def test_ids_missing_from_dataset_are_skipped(self, records, matcher):
        store = InMemoryRecentStore(["gone", "2002"])
        dashboard = AssessmentDashboard(records=records, matcher=matcher, recent_store=store, settings=Settings())
        assert [s.id for s in dashboard.recent()] == ["2002"]


class TestView:
    """Test per-student derived views."""

    def test_bundle(self, dashboard):
        view = dashboard.view("1001")

        assert view.audience == Audience.CLINICIAN
        assert view.has_data
        assert view.test_codes == ["RLI", "ELI", "CLS", "SC"]
        assert view.report.student_id == "1001"
        assert view.report.total_retrieved == 5
        assert view.kpis.total_tests == 4
        assert [i.title for i in view.insights] == ["Receptive vs Expressive Comparison", "Progress Over Time"]

    def test_memoized_per_audience(self, dashboard):
        first = dashboard.view("1001", "clinician")
        assert dashboard.view("1001", Audience.CLINICIAN) is first

        family = dashboard.view("1001", "family")
        assert family is not first
        assert family.audience == Audience.FAMILY

    def test_default_audience_from_settings(self, records, matcher, monkeypatch):
        monkeypatch.setenv("CELF_DEFAULT_AUDIENCE", "family")
        dashboard = AssessmentDashboard(records=records, matcher=matcher, settings=Settings())
        assert dashboard.view("2002").audience == Audience.FAMILY

    def test_unknown_student(self, dashboard):
        with pytest.raises(StudentNotFoundError):
            dashboard.view("nope")


class TestLoad:
    """Test building a session from files."""

    def test_load(self, tmp_path):
        data = tmp_path / "export.csv"
        data.write_text(
            "LT_Id,Child_Initials,AssessmentDate,RLI_StandardScore,ELI_StandardScore\n"
            "1,J.K.,1/10/2024,80,95\n"
            "1,J.K.,6/10/2024,88,96\n"
            ",Nobody,6/10/2024,100,100\n",
            encoding="utf-8",
        )

        dashboard = AssessmentDashboard.load(data, Settings().data.rules_path)
        assert [s.id for s in dashboard.students] == ["1"]

        view = dashboard.view("1")
        assert view.report.assessment_date == date(2024, 6, 10)
        assert view.report.test_insights

    def test_missing_data_file(self, tmp_path):
        with pytest.raises(IngestionError):
            AssessmentDashboard.load(tmp_path / "missing.csv", Settings().data.rules_path)

    def test_missing_rule_table(self, tmp_path):
        data = tmp_path / "export.csv"
        data.write_text("LT_Id,RLI_StandardScore\n1,90\n", encoding="utf-8")
        with pytest.raises(RuleTableError):
            AssessmentDashboard.load(data, tmp_path / "missing.json")


class TestLatestResult:
    """Test per-test scores from the newest assessment containing the test."""

    @pytest.fixture
    def view(self, matcher):
        records = [
            make_record("4004", date(2023, 6, 1), {"PA": 85, "RLI": 80}, name="G.H.", age_months=40),
            make_record("4004", date(2024, 6, 1), {"RLI": 95}, name="G.H.", age_months=52),
        ]
        dashboard = AssessmentDashboard(records=records, matcher=matcher, settings=Settings())
        return dashboard.view("4004")

    def test_from_latest_assessment(self, view):
        result = view.latest_result("RLI")
        assert result.standard_score == 95
        assert result.date == date(2024, 6, 1)
        assert result.age_months == 52
        assert result.test_name == "Receptive Language Index"

    def test_test_only_in_older_assessment(self, view):
        result = view.latest_result("PA")
        assert result.code == "PA"
        assert result.standard_score == 85
        assert result.date == date(2023, 6, 1)
        assert result.age_months == 40

    def test_unknown_test(self, view):
        assert view.latest_result("SC") is None

    def test_latest_results_follow_test_codes(self, view):
        assert [r.code for r in view.latest_results] == view.test_codes == ["PA", "RLI"]
