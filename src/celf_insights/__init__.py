"""
CELF-P3 Assessment Insights

Loads CELF-P3 standardized-test results, derives normative statistics per
student, matches them against a table of interpretive rules and produces
structured reports and plain-language insights.
"""

__version__ = "0.1.0"
