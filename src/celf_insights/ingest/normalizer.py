"""
Record normalization for CELF-P3 exports.

Converts raw CSV rows (string cells keyed by column header) into typed
AssessmentRecord objects. Bad cells are treated as absent and bad rows are
skipped; a batch is never aborted by a single row.
"""

import math
import re
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional
import logging

from ..models.assessment import TEST_NAMES, AssessmentRecord, Student, TestResult, test_display_name

logger = logging.getLogger(__name__)

ID_COLUMN = "LT_Id"
NAME_COLUMN = "Child_Initials"
DATE_COLUMN = "AssessmentDate"
AGE_COLUMN = "Age"

SCORE_SUFFIXES = {
    "standard_score": "StandardScore",
    "scaled_score": "ScaledScore",
    "percentile": "PctRank",
    "raw_score": "RawScore",
}

ABSENT_SENTINELS = {"", "#N/A", "-1"}

_US_DATE = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4})")
_ISO_DATE = re.compile(r"(\d{4})-(\d{1,2})-(\d{1,2})")


def _cell(row: Mapping[str, Any], column: str) -> str:
    value = row.get(column)
    if value is None:
        return ""
    return str(value).strip()


def parse_number(value: Any) -> Optional[float]:
    """Parse a numeric cell; empty, '#N/A', '-1' and non-numeric text are absent."""
    if value is None:
        return None
    text = str(value).strip()
    if text in ABSENT_SENTINELS:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_date(value: Any) -> Optional[date]:
    """
    Parse an assessment date.

    Accepts M/D/YYYY and YYYY-M-D, tried in that order. Returns None for any
    other format or for an impossible calendar date.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None

    match = _US_DATE.search(text)
    if match:
        month, day, year = (int(part) for part in match.groups())
    else:
        match = _ISO_DATE.search(text)
        if not match:
            return None
        year, month, day = (int(part) for part in match.groups())

    try:
        return date(year, month, day)
    except ValueError:
        return None


def extract_test_result(row: Mapping[str, Any], code: str) -> Optional[TestResult]:
    """Extract the four score fields for one test code, or None if it has no score."""
    scores = {
        field: parse_number(row.get(f"{code}_{suffix}"))
        for field, suffix in SCORE_SUFFIXES.items()
    }
    result = TestResult(test_name=test_display_name(code), **scores)
    return result if result.has_score else None


def normalize_row(row: Mapping[str, Any], load_date: date) -> Optional[AssessmentRecord]:
    """Normalize one row; returns None when the row should be skipped."""
    student_id = _cell(row, ID_COLUMN)
    if not student_id or student_id == "#N/A":
        return None

    tests: Dict[str, TestResult] = {}
    for code in TEST_NAMES:
        result = extract_test_result(row, code)
        if result is not None:
            tests[code] = result

    if not tests:
        return None

    return AssessmentRecord(
        student_id=student_id,
        student_name=_cell(row, NAME_COLUMN) or f"Student {student_id}",
        date=parse_date(row.get(DATE_COLUMN)) or load_date,
        age_months=parse_number(row.get(AGE_COLUMN)),
        tests=tests,
    )


def normalize(raw_rows: Iterable[Mapping[str, Any]], load_date: Optional[date] = None) -> List[AssessmentRecord]:
    """
    Convert raw rows into assessment records.

    Args:
        raw_rows: Rows keyed by column header
        load_date: Date used for rows whose date cannot be parsed (default: today)

    Returns:
        Records in input order, one per row that carries at least one test score
    """
    load_date = load_date or date.today()
    records = []

    for row_num, row in enumerate(raw_rows, 1):
        try:
            record = normalize_row(row, load_date)
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Skipping malformed row {row_num}: {e}")
            continue
        if record is not None:
            records.append(record)

    logger.debug(f"Normalized {len(records)} assessment records")
    return records


def unique_students(records: Iterable[AssessmentRecord]) -> List[Student]:
    """One Student per distinct id, named from its first record, sorted by name."""
    students: Dict[str, Student] = {}
    for record in records:
        if record.student_id not in students:
            students[record.student_id] = Student(id=record.student_id, name=record.student_name)

    return sorted(students.values(), key=lambda s: (s.name.casefold(), s.id))
