"""
Plain-text student report export.

Layout:
    header (title, student, report date)
    most recent assessment with per-test scores
    heuristic insights as bullet lists
"""

import re
from datetime import date
from pathlib import Path
from typing import Optional, Sequence, Union
import logging

from ..errors import ExportError
from ..models.assessment import AssessmentRecord, Student
from ..models.report import HeuristicInsight
from ..models.utils import latest_assessment
from ..insights.heuristics import format_score

logger = logging.getLogger(__name__)

REPORT_TITLE = "CELF-P3 Assessment Report"


def format_date(value: date) -> str:
    """US-style M/D/YYYY date."""
    return f"{value.month}/{value.day}/{value.year}"


def render_text_report(
    student: Student,
    assessments: Sequence[AssessmentRecord],
    insights: Sequence[HeuristicInsight] = (),
    generated_on: Optional[date] = None,
) -> str:
    """Render the exported report as text."""
    generated_on = generated_on or date.today()

    lines = [
        REPORT_TITLE,
        "=" * len(REPORT_TITLE),
        "",
        f"Student: {student.name} (ID: {student.id})",
        f"Report Date: {format_date(generated_on)}",
        "",
    ]

    latest = latest_assessment(assessments)
    if latest is not None:
        lines.append("Most Recent Assessment")
        lines.append(f"Date: {format_date(latest.date)}")
        if latest.age_months:
            lines.append(f"Age at Testing: {format_score(latest.age_months)} months")
        lines.append("")

        lines.extend(["Test Scores:", "------------"])
        for code, test in latest.tests.items():
            if test.standard_score is None:
                continue
            lines.append(f"{test.test_name or code}:")
            lines.append(f"  Standard Score: {format_score(test.standard_score)}")
            if test.percentile is not None:
                lines.append(f"  Percentile: {format_score(test.percentile)}%")
            if test.scaled_score is not None:
                lines.append(f"  Scaled Score: {format_score(test.scaled_score)}")
            lines.append("")

    if insights:
        lines.extend(["Insights:", "---------"])
        for insight in insights:
            lines.append(f"{insight.title}:")
            for item in insight.items:
                lines.append(f"  • {item}")
            lines.append("")

    return "\n".join(lines)


def report_filename(student: Student) -> str:
    """Download file name for a student's report."""
    name = re.sub(r"\s+", "_", student.name)
    return f"{name}_CELF-P3_Report.txt"


def write_text_report(
    path: Union[str, Path],
    student: Student,
    assessments: Sequence[AssessmentRecord],
    insights: Sequence[HeuristicInsight] = (),
    generated_on: Optional[date] = None,
) -> Path:
    """
    Write the text report to a file.

    If path is a directory, the report is written there under report_filename().
    Missing parent directories are created.

    Raises:
        ExportError: the file cannot be written
    """
    path = Path(path)
    if path.is_dir():
        path = path / report_filename(student)

    text = render_text_report(student, assessments, insights, generated_on)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        logger.error(f"Error writing report to {path}: {e}")
        raise ExportError(f"Could not write report to {path}: {e}") from e

    logger.info(f"Saved report for {student.id} to {path}")
    return path
