"""
Ingestion of CELF-P3 assessment exports.

Main components:
- normalizer: raw rows -> typed AssessmentRecord objects
- loaders: CSV file reading
"""

from .normalizer import (
    ABSENT_SENTINELS,
    extract_test_result,
    normalize,
    normalize_row,
    parse_date,
    parse_number,
    unique_students,
)
from .loaders import load_assessments, read_csv_rows

__all__ = [
    'ABSENT_SENTINELS',
    'extract_test_result',
    'normalize',
    'normalize_row',
    'parse_date',
    'parse_number',
    'unique_students',
    'load_assessments',
    'read_csv_rows',
]
